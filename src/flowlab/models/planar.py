# src/flowlab/models/planar.py
"""
Planar example systems in the phase-plane calling convention

    f(state, params, t) -> (x', y')

`params` is whatever the system needs (a tuple, a float or None).
"""
from __future__ import annotations

import numpy as np

__all__ = ["rotation", "strogatz_6_3_10", "polarization", "pendulum"]


def rotation(state, params=(1.0, 1.0), t=None):
    """x' = -r y, y' = s x."""
    x, y = state
    r, s = (1.0, 1.0) if params is None else params
    return (-r * y, s * x)


def strogatz_6_3_10(state, params=None, t=None):
    """x' = x y, y' = x^2 - y. Nullclines: x = 0, y = 0 (for x'), y = x^2 (for y')."""
    x, y = state
    return (x * y, x * x - y)


def polarization(state, alpha=1.0, t=None):
    """
    Strogatz 6.4.11 reduced to the (l, r) plane with c = 1 - l - r:
        x' = alpha x (1 - x - y),  y' = alpha y (1 - x - y).
    The whole line y = 1 - x is fixed.
    """
    x, y = state
    alpha = 1.0 if alpha is None else alpha
    c = 1.0 - x - y
    return (alpha * x * c, alpha * y * c)


def pendulum(state, gamma=0.5, t=None):
    """Strogatz 6.7.2: theta'' = gamma - sin(theta) as x' = y, y' = gamma - sin x."""
    x, y = state
    gamma = 0.5 if gamma is None else gamma
    return (y, gamma - np.sin(x))
