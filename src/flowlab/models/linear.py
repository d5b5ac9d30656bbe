# src/flowlab/models/linear.py
"""Planar linear systems x' = A x."""
from __future__ import annotations

from typing import Callable, Mapping

import numpy as np

from flowlab.errors import MatrixParseError

__all__ = [
    "ENTRY_NAMES",
    "IDENTITY_PLACEHOLDERS",
    "parse_matrix",
    "eigensystem",
    "jordan_block",
    "linear_field",
    "format_eigenvalues",
]

ENTRY_NAMES = ("a11", "a12", "a21", "a22")
IDENTITY_PLACEHOLDERS = {"a11": "1", "a12": "0", "a21": "0", "a22": "1"}


def _parse_entry(name: str, text, placeholder) -> float:
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return float(text)
    raw = "" if text is None else str(text).strip()
    if not raw and placeholder is not None:
        raw = str(placeholder).strip()
    try:
        return float(raw)
    except ValueError:
        raise MatrixParseError(name, raw) from None


def parse_matrix(
    entries: Mapping[str, object],
    placeholders: Mapping[str, object] | None = None,
) -> np.ndarray:
    """
    Build a 2x2 float matrix from text entries keyed a11, a12, a21, a22.

    Empty entries fall back to `placeholders` when given.

    Raises:
        MatrixParseError: an entry is missing or not a number.
    """
    placeholders = placeholders or {}
    vals = [
        _parse_entry(name, entries.get(name), placeholders.get(name))
        for name in ENTRY_NAMES
    ]
    return np.array(vals, dtype=float).reshape(2, 2)


def eigensystem(A) -> tuple[np.ndarray, np.ndarray]:
    """
    Eigenvalues and eigenvectors (as columns) of A.

    Each eigenvector is flipped so that its first component is non-negative,
    which keeps the drawn arrows pointing right as parameters change.
    """
    A = np.asarray(A, dtype=float)
    if A.shape != (2, 2):
        raise ValueError(f"Expected a 2x2 matrix, got shape {A.shape}")
    vals, vecs = np.linalg.eig(A)
    vecs = np.array(vecs, copy=True)
    for k in range(vecs.shape[1]):
        lead = np.real(vecs[0, k])
        if lead < 0:
            vecs[:, k] *= -1
    return vals, vecs


def jordan_block(eps: float, coupling: float = 4.0) -> np.ndarray:
    """
    J(eps) = [[-1, coupling], [eps, -1]].

    At eps = 0 this is a defective matrix with one eigenvector; for eps > 0
    the eigenvalues -1 +- sqrt(coupling * eps) split and the two
    eigenvectors close in on each other as eps -> 0.
    """
    return np.array([[-1.0, float(coupling)], [float(eps), -1.0]])


def linear_field(A) -> Callable:
    """Return f(state, params, t) = A @ state."""
    A = np.asarray(A, dtype=float)

    def f(state, params=None, t=None):
        return A @ np.asarray(state, dtype=float)

    return f


def _fmt(v) -> str:
    v = complex(v)
    if abs(v.imag) < 1e-12:
        return f"{v.real:.3f}"
    sign = "+" if v.imag >= 0 else "-"
    return f"{v.real:.3f}{sign}{abs(v.imag):.3f}j"


def format_eigenvalues(vals) -> str:
    return "λ = " + ", ".join(_fmt(v) for v in vals)
