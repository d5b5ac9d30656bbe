# src/flowlab/simulate.py
"""
Numerical integration entry points.

- `integrate`: fixed-step integration with a registered stepper (Euler by
  default). This is the method under study in the error lessons, so it
  deliberately does *not* adapt the step.
- `solve_trajectory`: adaptive RK45 via scipy for drawing phase-plane
  trajectories, where accuracy matters more than the method.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Sequence

import numpy as np
from numba.core.errors import NumbaError
from scipy.integrate import solve_ivp

from flowlab.jit import jit_compile
from flowlab.steppers import get_stepper

__all__ = ["Solution", "Trajectory", "integrate", "solve_trajectory", "step_count"]


@dataclass(frozen=True)
class Solution:
    """Fixed-step solution: x[k] approximates x(t[k]) with t[k] = t0 + k*dt."""
    t: np.ndarray
    x: np.ndarray
    dt: float
    stepper: str

    @property
    def n(self) -> int:
        return int(self.t.shape[0])

    @property
    def final(self):
        return self.x[-1]


@dataclass(frozen=True)
class Trajectory:
    """Adaptive solution sampled on an even time grid; y has shape (n_state, n_samples)."""
    t: np.ndarray
    y: np.ndarray
    success: bool
    message: str


def step_count(tspan: tuple[float, float], dt: float) -> int:
    """N = floor((t1 - t0) / dt); the solution has N + 1 samples."""
    t0, t1 = float(tspan[0]), float(tspan[1])
    dt = float(dt)
    if not math.isfinite(dt) or dt <= 0.0:
        raise ValueError(f"dt must be finite and positive, got {dt!r}")
    if not (math.isfinite(t0) and math.isfinite(t1)):
        raise ValueError(f"tspan must be finite, got {tspan!r}")
    if t1 < t0:
        raise ValueError(f"tspan must satisfy t0 <= t1, got {tspan!r}")
    return int(math.floor((t1 - t0) / dt))


@lru_cache(maxsize=None)
def _kernel(name: str, jit: bool) -> Callable:
    spec = get_stepper(name)
    return jit_compile(spec.emit(), jit=jit).fn


@lru_cache(maxsize=128)
def _jitted_rhs(f: Callable) -> Callable:
    return jit_compile(f, jit=True).fn


def integrate(
    f: Callable,
    x0,
    tspan: tuple[float, float],
    dt: float,
    *,
    stepper: str = "euler",
    jit: bool = False,
    max_steps: int | None = None,
) -> Solution:
    """
    Integrate the autonomous ODE x' = f(x) on `tspan` with a fixed step.

    Args:
        f: Right-hand side. Scalar ODEs: f(float) -> float. Vector ODEs:
           f(ndarray) -> array-like of the same length.
        x0: Initial condition (scalar or 1D sequence).
        tspan: (t0, t1).
        dt: Step size.
        stepper: Registered stepper name or alias ("euler", "rk4", ...).
        jit: Compile `f` and the stepper kernel with numba. `f` must then
             be numba-compilable (plain arithmetic / math / numpy calls).
        max_steps: Refuse to run when N exceeds this cap.

    Raises:
        ValueError: bad dt, tspan or x0, or more than `max_steps` steps.
        RuntimeError: numba could not compile `f` (jit=True).

    Returns:
        Solution with N + 1 samples, N = floor((t1 - t0) / dt).
    """
    n_steps = step_count(tspan, dt)
    if max_steps is not None and n_steps > max_steps:
        raise ValueError(
            f"dt={dt!r} over tspan={tuple(tspan)!r} needs {n_steps} steps "
            f"(limit {max_steps}); increase dt or max_steps."
        )

    t0 = float(tspan[0])
    dt = float(dt)
    x0_arr = np.asarray(x0, dtype=np.float64)
    if x0_arr.ndim == 0:
        out = np.empty(n_steps + 1, dtype=np.float64)
        start: Any = float(x0_arr)
        rhs = f
    elif x0_arr.ndim == 1:
        out = np.empty((n_steps + 1, x0_arr.shape[0]), dtype=np.float64)
        start = np.array(x0_arr, copy=True)
        if jit:
            rhs = f
        else:
            def rhs(x, _f=f):
                return np.asarray(_f(x), dtype=np.float64)
    else:
        raise ValueError(f"x0 must be a scalar or 1D vector, got shape {x0_arr.shape}")

    spec = get_stepper(stepper)
    kernel = _kernel(spec.meta.name, bool(jit))
    if jit:
        rhs = _jitted_rhs(rhs)
        # numba compiles lazily: typing errors surface on the first call
        try:
            kernel(rhs, start, dt, n_steps, out)
        except NumbaError as e:
            raise RuntimeError(
                f"JIT compilation with numba failed: {type(e).__name__}: {e}"
            ) from e
    else:
        kernel(rhs, start, dt, n_steps, out)

    t = t0 + dt * np.arange(n_steps + 1, dtype=np.float64)
    return Solution(t=t, x=out, dt=dt, stepper=spec.meta.name)


def solve_trajectory(
    f: Callable,
    x0: Sequence[float],
    tfinal: float,
    *,
    params: Any = None,
    t0: float = 0.0,
    n_samples: int = 400,
    rtol: float = 1e-6,
    atol: float = 1e-9,
    max_step: float = np.inf,
) -> Trajectory:
    """
    Solve y' = f(y, params, t) from x0 over [t0, tfinal] with scipy's RK45.

    A solver failure (e.g. blow-up) is reported through `success`/`message`
    with whatever part of the path was computed; it is not raised.
    """
    if tfinal <= t0:
        raise ValueError(f"tfinal must exceed t0, got t0={t0}, tfinal={tfinal}")
    y0 = np.asarray(x0, dtype=np.float64)
    t_eval = np.linspace(float(t0), float(tfinal), int(n_samples))

    def fun(t, y):
        return np.asarray(f(y, params, t), dtype=np.float64)

    with np.errstate(over="ignore", invalid="ignore"):
        sol = solve_ivp(
            fun,
            (float(t0), float(tfinal)),
            y0,
            method="RK45",
            t_eval=t_eval,
            rtol=rtol,
            atol=atol,
            max_step=max_step,
        )
    return Trajectory(t=sol.t, y=sol.y, success=bool(sol.success), message=str(sol.message))
