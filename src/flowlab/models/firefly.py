# src/flowlab/models/firefly.py
"""
Firefly entrainment (Strogatz, section 4.5).

    alpha' = Omega                      (flashlight, forced phase)
    theta' = omega + A sin(alpha - theta)   (firefly)
    phi    = alpha - theta

which, with tau = A t and mu = (Omega - omega) / A, becomes

    dphi/dtau = mu - sin(phi).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

__all__ = [
    "Firefly",
    "Locking",
    "mu",
    "phase_drift",
    "locking",
    "is_flashing",
    "uniform_oscillator",
    "is_circle_flow",
]

TWO_PI = 2.0 * math.pi


@dataclass
class Firefly:
    dt: float = 0.02
    alpha: float = math.pi / 3.0
    theta: float = 0.0
    A: float = 0.9
    Omega: float = 2.8
    omega: float = 1.0

    def step(self) -> None:
        # theta uses the already-advanced alpha; angles are left unwrapped
        self.alpha += self.Omega * self.dt
        self.theta += (self.omega + self.A * math.sin(self.alpha - self.theta)) * self.dt

    def angles(self) -> list[tuple[float, float]]:
        """Points on the unit circle: [firefly, flashlight]."""
        return [
            (math.cos(self.theta), math.sin(self.theta)),
            (math.cos(self.alpha), math.sin(self.alpha)),
        ]

    @property
    def phase(self) -> float:
        return self.alpha - self.theta

    @property
    def mu(self) -> float:
        return mu(self.Omega, self.omega, self.A)


@dataclass(frozen=True)
class Locking:
    mu: float
    entrained: bool
    fixed_points: tuple[float, ...]
    period: float | None

    def describe(self) -> str:
        if self.entrained:
            pts = ", ".join(f"{p:.3f}" for p in self.fixed_points)
            return f"mu = {self.mu:.3f}: phase-locked, phi* = {pts}"
        return f"mu = {self.mu:.3f}: phase drift, period T = {self.period:.3f} (tau units)"


def mu(Omega: float, omega: float, A: float) -> float:
    if A == 0:
        raise ValueError("Coupling strength A must be non-zero.")
    return (Omega - omega) / A


def phase_drift(phi, mu: float):
    """dphi/dtau = mu - sin(phi)."""
    return mu - np.sin(phi)


def locking(mu: float) -> Locking:
    """
    Classify the flow dphi/dtau = mu - sin(phi) on the circle.

    |mu| <= 1: fixed points at arcsin(mu) (stable) and pi - arcsin(mu)
    (unstable); they merge in a saddle-node at |mu| = 1.
    |mu| > 1: no fixed points; phi drifts with period 2 pi / sqrt(mu^2 - 1).
    """
    mu = float(mu)
    if abs(mu) <= 1.0:
        stable = math.asin(mu)
        unstable = math.pi - stable
        pts = (stable,) if abs(mu) == 1.0 else (stable, unstable)
        return Locking(mu=mu, entrained=True, fixed_points=pts, period=None)
    period = TWO_PI / math.sqrt(mu * mu - 1.0)
    return Locking(mu=mu, entrained=False, fixed_points=(), period=period)


def is_flashing(angle: float, tol: float = 0.05) -> bool:
    return abs((angle % TWO_PI) - math.pi / 2.0) < tol


def uniform_oscillator(theta, Omega: float):
    """theta' = Omega."""
    return np.full_like(np.asarray(theta, dtype=float), float(Omega))


def is_circle_flow(
    f: Callable,
    samples: Sequence[float] | np.ndarray | None = None,
    *,
    rtol: float = 1e-9,
    atol: float = 1e-12,
) -> bool:
    """
    A flow theta' = f(theta) is well defined on the circle only if
    f(theta + 2 pi) == f(theta). Check it on the given sample angles.
    """
    if samples is None:
        samples = np.linspace(0.0, TWO_PI, 64, endpoint=False)
    theta = np.asarray(samples, dtype=float)
    lhs = np.asarray(f(theta + TWO_PI), dtype=float)
    rhs = np.asarray(f(theta), dtype=float)
    return bool(np.allclose(lhs, rhs, rtol=rtol, atol=atol))
