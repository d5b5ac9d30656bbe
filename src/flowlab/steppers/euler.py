# src/flowlab/steppers/euler.py
"""
Forward Euler (explicit, fixed-step) stepper.

    x[(n+1) dt] = x[n dt] + f(x[n dt]) dt

Each step drops the O(dt^2) terms of the Taylor expansion, so the local
truncation error is O(dt^2) and the global error O(dt).
"""
from __future__ import annotations
from typing import Callable

from .base import StepperMeta

__all__ = ["EulerSpec"]


class EulerSpec:
    """
    Explicit Euler stepper: x_{n+1} = x_n + dt * f(x_n)

    Fixed-step, order 1, explicit scheme for autonomous ODEs.
    """
    def __init__(self, meta: StepperMeta | None = None):
        if meta is None:
            meta = StepperMeta(
                name="euler",
                order=1,
                scheme="explicit",
                family="euler",
                aliases=("fwd_euler", "forward_euler"),
            )
        self.meta = meta

    def emit(self) -> Callable:
        """
        Return the Euler kernel.

        Signature:
            euler_kernel(f, x0, dt, n_steps, out) -> None
        """
        def euler_kernel(f, x0, dt, n_steps, out):
            x = x0
            out[0] = x
            for j in range(1, n_steps + 1):
                x = x + f(x) * dt
                out[j] = x

        return euler_kernel


def _auto_register():
    from .registry import register
    register(EulerSpec())

_auto_register()
