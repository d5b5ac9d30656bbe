# src/flowlab/analysis/error.py
"""
Error experiments for the Forward Euler lesson.

Two effects compete as dt shrinks:
  - truncation error, O(dt) globally, falls;
  - round-off error grows once dt nears machine precision, since each of the
    (t1 - t0) / dt steps adds a rounding error of size ~eps * |x|.
"""
from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

from flowlab.simulate import integrate

__all__ = [
    "euler_error_vs_dt",
    "default_dt_range",
    "roundoff_dt_range",
    "reciprocal_product",
    "forward_difference",
    "forward_difference_error",
    "derivative_dt_range",
]


def default_dt_range(n: int = 1000) -> np.ndarray:
    return np.linspace(1e-4, 1.0, n)


def roundoff_dt_range(n: int = 100) -> np.ndarray:
    return 10.0 ** np.linspace(-17.0, -14.0, n)


def derivative_dt_range(n: int = 400) -> np.ndarray:
    return np.logspace(-16.0, -8.0, n)


def euler_error_vs_dt(
    f: Callable,
    exact: Callable[[float], float],
    x0: float,
    tspan: tuple[float, float],
    dts: Sequence[float] | np.ndarray,
    *,
    stepper: str = "euler",
    jit: bool = False,
    max_steps: int | None = None,
) -> np.ndarray:
    """
    |exact(t1) - x_N| for each dt, where x_N is the last fixed-step sample.

    Note the last sample sits at t0 + N dt <= t1, not exactly at t1; the
    comparison is against exact(t1) regardless.
    """
    t1 = float(tspan[1])
    target = float(exact(t1))
    errs = np.empty(len(dts), dtype=float)
    for i, dt in enumerate(dts):
        sol = integrate(f, x0, tspan, float(dt), stepper=stepper, jit=jit, max_steps=max_steps)
        errs[i] = abs(target - float(sol.final))
    return errs


def reciprocal_product(n) -> float:
    """n * (1/n) in floating point; not always exactly 1 (try n = 49)."""
    n = float(n)
    return n * (1.0 / n)


def forward_difference(t, dt):
    """(sin(t + dt) - sin(t)) / dt, the one-sided estimate of cos(t)."""
    dt = np.asarray(dt, dtype=float)
    return (np.sin(t + dt) - np.sin(t)) / dt


def forward_difference_error(dt, t: float):
    """e(dt) = |cos(t) - (sin(t + dt) - sin(t)) / dt|."""
    return np.abs(np.cos(t) - forward_difference(t, dt))
