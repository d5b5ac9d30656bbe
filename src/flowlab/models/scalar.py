# src/flowlab/models/scalar.py
"""
One-dimensional right-hand sides and their closed-form solutions.

Capacitor charging (nondimensional RC circuit):
    x' = 1 - x,        x(t) = 1 - (1 - x0) e^{-t}
Logistic growth:
    x' = x (1 - x),    x(t) = x0 / (x0 + (1 - x0) e^{-t})
Rescaled RC circuit, tau = t / T:
    (RC/T) dq/dtau = 1 - q,   q(tau) = 1 - (1 - q0) e^{-tau / (RC/T)}
Overdamped bead on a rotating hoop:
    eps phi'' + phi' = sin(phi) (gamma cos(phi) - 1)
"""
from __future__ import annotations

import math

import numpy as np

from flowlab.simulate import Trajectory, solve_trajectory

__all__ = [
    "capacitor",
    "capacitor_exact",
    "logistic",
    "logistic_exact",
    "rc_nondim",
    "zoomed_sinc",
    "bead_on_hoop",
    "bead_on_hoop_full",
    "bead_on_hoop_reduced",
]


def capacitor(x):
    return 1.0 - x


def capacitor_exact(t, x0: float):
    return 1.0 - (1.0 - x0) * np.exp(-np.asarray(t, dtype=float))


def logistic(x):
    return x * (1.0 - x)


def logistic_exact(t, x0: float):
    return x0 / (x0 + (1.0 - x0) * np.exp(-np.asarray(t, dtype=float)))


def rc_nondim(tau, q0: float, rc_by_t: float = 1.0):
    """Charge of the rescaled RC circuit at nondimensional time tau."""
    if rc_by_t <= 0:
        raise ValueError(f"rc_by_t must be positive, got {rc_by_t}")
    return 1.0 - (1.0 - q0) * np.exp(-np.asarray(tau, dtype=float) / rc_by_t)


def zoomed_sinc(tau, S: float):
    """
    f(tau) = sin(tau S) / (tau S), i.e. sin(t)/t seen at zoom level S (t = tau S).
    Continuous at tau = 0 where it equals 1.
    """
    tau = np.asarray(tau, dtype=float)
    # np.sinc is the normalized sinc: sinc(x) = sin(pi x) / (pi x)
    return np.sinc(tau * S / math.pi)


def bead_on_hoop(phi, gamma: float):
    """f(phi) = sin(phi) (gamma cos(phi) - 1), gamma = r omega^2 / g."""
    return np.sin(phi) * (gamma * np.cos(phi) - 1.0)


def bead_on_hoop_full(
    eps: float,
    gamma: float,
    phi0: float,
    dphi0: float,
    tfinal: float,
    *,
    n_samples: int = 400,
) -> Trajectory:
    """
    Solve eps phi'' + phi' = f(phi) as the first-order system
        phi' = w,   w' = (f(phi) - w) / eps.
    Row 0 of the result is phi, row 1 is phi'.
    """
    if eps <= 0:
        raise ValueError(f"eps must be positive, got {eps}")

    def rhs(state, params, t):
        phi, w = state
        return (w, (bead_on_hoop(phi, gamma) - w) / eps)

    # The fast transient lasts ~eps; keep the solver from stepping over it.
    return solve_trajectory(
        rhs, (phi0, dphi0), tfinal,
        n_samples=n_samples, max_step=max(eps, 1e-3),
    )


def bead_on_hoop_reduced(gamma: float, phi0: float, tfinal: float, *, n_samples: int = 400) -> Trajectory:
    """Solve the eps -> 0 reduction phi' = f(phi)."""

    def rhs(state, params, t):
        return (bead_on_hoop(state[0], gamma),)

    return solve_trajectory(rhs, (phi0,), tfinal, n_samples=n_samples)
