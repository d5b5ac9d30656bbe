# src/flowlab/models/__init__.py
from . import scalar, firefly, linear, planar
from .firefly import Firefly, Locking, locking
from .linear import parse_matrix, eigensystem, jordan_block, format_eigenvalues

__all__ = [
    "scalar", "firefly", "linear", "planar",
    "Firefly", "Locking", "locking",
    "parse_matrix", "eigensystem", "jordan_block", "format_eigenvalues",
]
