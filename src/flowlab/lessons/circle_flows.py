# src/flowlab/lessons/circle_flows.py
"""Flows on the circle and firefly entrainment (Strogatz 4.1, 4.5)."""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from flowlab.models.firefly import TWO_PI, Firefly, is_circle_flow, locking, mu, phase_drift
from flowlab.plot import _theme, decor, draw_firefly, phase_animate, series
from flowlab.plot._primitives import _origin_frame
from flowlab.widgets import SliderSpec

from .base import Lesson, Section, sections
from .registry import register_lesson

# Coupling used throughout the notebook's phase-drift plots.
A = 0.9


@dataclass(frozen=True)
class FireflyCase:
    Omega: float
    omega: float = 1.0
    alpha: float = math.pi / 3.0
    theta: float = 0.0

    def firefly(self) -> Firefly:
        return Firefly(alpha=self.alpha, theta=self.theta, A=A, Omega=self.Omega, omega=self.omega)

    @property
    def detuning(self) -> float:
        return self.Omega - self.omega


CASES = (
    FireflyCase(Omega=1.0),
    FireflyCase(Omega=1.5),
    FireflyCase(Omega=1.9),
    FireflyCase(Omega=2.0, alpha=math.pi / 2.0),
)

_CASE = SliderSpec("case", 1, len(CASES), 1, default=1, fmt="%d")


def _case(values) -> FireflyCase:
    return CASES[int(values["case"]) - 1]


def render_uniform(ax, values) -> None:
    Omega = values["Omega"]
    t = np.linspace(0.0, 20.0, 2000)
    theta = np.mod(Omega * t, TWO_PI)
    # Break the line at each wrap so the sawtooth has no vertical strokes
    theta[1:][np.diff(theta) < 0] = np.nan
    series.plot(
        x=t, y=theta, ylim=(0.0, 7.0), xlabel="t", ylabel="θ(t) mod 2π",
        title=f"θ' = Ω = {Omega:g}, period 2π/Ω = {TWO_PI / Omega:.3f}", legend=False, ax=ax,
    )
    decor.hlines([TWO_PI], ax=ax, color="red")


def render_not_circle(ax, values) -> None:
    start = 1.5
    series.function(
        lambda th: th, (0.0, 4.0 * math.pi), label="f(θ)", lw=2.5,
        xlabel="θ", ylabel="f(θ)", ax=ax,
    )
    decor.vlines([start, start + TWO_PI], ax=ax, color="red", lw=2.5, alpha=1.0)
    decor.arrow((start, 10.0), (start + TWO_PI, 10.0), ax=ax, color="red")
    decor.annotate(start + math.pi, 10.0, "2π", color="red", ha="center", va="top", ax=ax)
    periodic = is_circle_flow(lambda th: th)
    ax.set_title(f"f(θ + 2π) = f(θ)? {periodic}")


def render_phase_drift(ax, values) -> None:
    case = _case(values)
    detuning = case.detuning
    _origin_frame(ax)
    series.function(
        lambda phi: detuning - A * np.sin(phi), (-2.0 * math.pi, 4.0 * math.pi),
        color=_theme.get("exact_color"), lw=2.5, xlabel="ϕ",
        ylabel=f"{detuning:0.2f} - sin(ϕ)", legend=False, ax=ax,
    )
    ax.set_xticks(np.arange(-6, 12, 2))
    lock = locking(mu(case.Omega, case.omega, A))
    for k, phi_star in enumerate(lock.fixed_points):
        marker_face = _theme.get("fixed_color") if k == 0 else "white"
        for shift in (-TWO_PI, 0.0, TWO_PI):
            x = phi_star + shift
            if -2.0 * math.pi <= x <= 4.0 * math.pi:
                ax.plot(x, 0.0, marker="o", ms=8, color=_theme.get("fixed_color"),
                        markerfacecolor=marker_face, linestyle="None", zorder=3)
    ax.set_title(f"Ω = {case.Omega:g}, ω = {case.omega:g}, A = {A:g}: {lock.describe()}")


def render_firefly(ax, values) -> None:
    fly = _case(values).firefly()
    for _ in range(int(values["frame"])):
        fly.step()
    draw_firefly(ax, fly)


def animate_firefly(values):
    return phase_animate(_case(values).firefly(), frames=450)


def render_tau_flow(ax, values) -> None:
    m = values["mu"]
    series.function(
        lambda phi: phase_drift(phi, m), (-math.pi, math.pi), color=_theme.get("exact_color"),
        xlabel="ϕ", ylabel="dϕ/dτ", legend=False, ax=ax,
    )
    _origin_frame(ax)
    ax.set_title(locking(m).describe())


LESSON = register_lesson(
    Lesson(
        name="circle-flows",
        title="Flows on a Circle",
        date="2021-04-23",
        summary="Periodic motion in one dimension, and when a firefly locks to a flashlight.",
        sections=sections(
            Section(
                "uniform", "Uniform oscillator: θ' = Ω", render_uniform,
                controls=(SliderSpec("Omega", 0.1, 3.0, 0.1, default=1.0, label="Ω", fmt="%.1f"),),
            ),
            Section(
                "not-circle", "Is the state space a circle?", render_not_circle,
                notes="θ' = f(θ) is a flow on the circle only if f(θ + 2π) = f(θ).",
            ),
            Section(
                "phase-drift", "Firefly phase drift: ϕ' = (Ω − ω) − A sin ϕ", render_phase_drift,
                controls=(_CASE,),
                notes="Cases: Ω = ω = 1; Ω = 1.5; Ω = 1.9; Ω = 2.0 (α₀ = π/2). ω = 1, A = 0.9.",
            ),
            Section(
                "firefly", "Firefly and flashlight", render_firefly,
                controls=(_CASE, SliderSpec("frame", 0, 449, 1, default=0, fmt="%d")),
                notes="Red: firefly θ (dashed), blue: flashlight α (solid). A disc fills when either flashes.",
                animate=animate_firefly,
            ),
            Section(
                "locking", "Nondimensional flow: dϕ/dτ = μ − sin ϕ", render_tau_flow,
                controls=(SliderSpec("mu", -2.0, 2.0, 0.05, default=0.5, label="μ", fmt="%.2f"),),
                notes="|μ| ≤ 1: phase-locked at arcsin μ. |μ| > 1: phase drift with period 2π/sqrt(μ² − 1).",
            ),
        ),
    )
)
