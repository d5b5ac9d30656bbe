# tests/conftest.py
from __future__ import annotations

import matplotlib

matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt
import pytest

from flowlab import lessons
from flowlab.plot import _theme


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Point flowlab at a config file that does not exist and clear env overrides."""
    monkeypatch.setenv("FLOWLAB_CONFIG", str(tmp_path / "no-such-config.toml"))
    monkeypatch.delenv("FLOWLAB_OUTPUT_DIR", raising=False)
    monkeypatch.delenv("FLOWLAB_THEME", raising=False)
    yield
    _theme.use("notebook")
    lessons.configure(jit=False, max_steps=10_000_000, grid=25)
    plt.close("all")
