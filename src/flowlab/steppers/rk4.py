# src/flowlab/steppers/rk4.py
"""
RK4 (explicit, fixed-step) stepper.

Classic 4th-order Runge-Kutta; the reference against which Euler's
first-order error is compared.
"""
from __future__ import annotations
from typing import Callable

from .base import StepperMeta

__all__ = ["RK4Spec"]


class RK4Spec:
    """
    Classic RK4:
        k1 = f(x_n)
        k2 = f(x_n + dt/2 * k1)
        k3 = f(x_n + dt/2 * k2)
        k4 = f(x_n + dt * k3)
        x_{n+1} = x_n + dt/6 * (k1 + 2k2 + 2k3 + k4)
    """
    def __init__(self, meta: StepperMeta | None = None):
        if meta is None:
            meta = StepperMeta(
                name="rk4",
                order=4,
                scheme="explicit",
                family="runge-kutta",
                aliases=("rk4_classic", "classical_rk4"),
            )
        self.meta = meta

    def emit(self) -> Callable:
        def rk4_kernel(f, x0, dt, n_steps, out):
            x = x0
            half = 0.5 * dt
            out[0] = x
            for j in range(1, n_steps + 1):
                k1 = f(x)
                k2 = f(x + half * k1)
                k3 = f(x + half * k2)
                k4 = f(x + dt * k3)
                x = x + (dt / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)
                out[j] = x

        return rk4_kernel


def _auto_register():
    from .registry import register
    register(RK4Spec())

_auto_register()
