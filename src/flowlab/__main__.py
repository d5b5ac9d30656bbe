# src/flowlab/__main__.py
from flowlab.cli import main

raise SystemExit(main())
