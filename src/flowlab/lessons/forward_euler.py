# src/flowlab/lessons/forward_euler.py
"""Forward Euler: accuracy against the exact solution, and where it breaks down."""
from __future__ import annotations

import math
import warnings
from typing import Callable

import numpy as np

from flowlab.analysis import (
    default_dt_range,
    derivative_dt_range,
    euler_error_vs_dt,
    forward_difference_error,
    reciprocal_product,
    roundoff_dt_range,
)
from flowlab.errors import FlowlabWarning
from flowlab.models.scalar import capacitor, capacitor_exact, logistic, logistic_exact
from flowlab.plot import _theme, decor, series
from flowlab.simulate import Solution, integrate, step_count
from flowlab.widgets import SliderSpec

from .base import Lesson, Section, options, sections
from .registry import register_lesson

CAPACITOR_TSPAN = (0.0, 5.0)
LOGISTIC_TSPAN = (0.0, 7.0)
ROUNDOFF_TSPAN = (0.0, 1e-12)

_X0 = SliderSpec("x0", 0.0, 2.0, 0.01, default=0.25, label="x₀", fmt="%.2f")
_POW_CAPACITOR = SliderSpec("pow", -10.0, 2.0, 0.2, default=0.6, transform="pow2", target="dt", fmt="%.1f")
_POW_LOGISTIC = SliderSpec("pow", -10.0, 3.0, 0.2, default=0.6, transform="pow2", target="dt", fmt="%.1f")


def _euler_curve(f: Callable, x0: float, tspan, dt: float) -> Solution | None:
    opts = options()
    try:
        return integrate(f, x0, tspan, dt, jit=opts.jit, max_steps=opts.max_steps)
    except (ValueError, RuntimeError) as exc:
        warnings.warn(f"Dropping Euler curve: {exc}", FlowlabWarning, stacklevel=2)
        return None


def _affordable(dts: np.ndarray, tspan) -> np.ndarray:
    cap = options().max_steps
    keep = np.array([step_count(tspan, dt) <= cap for dt in dts], dtype=bool)
    if not keep.all():
        warnings.warn(
            f"Dropping {int((~keep).sum())} dt values that need more than {cap} steps.",
            FlowlabWarning,
            stacklevel=2,
        )
    return dts[keep]


def _solution_plot(ax, f, exact, values, tspan, fixed_points) -> None:
    dt, x0 = values["dt"], values["x0"]
    t0, t1 = tspan
    sol = _euler_curve(f, x0, tspan, dt)
    if sol is not None:
        series.plot(
            x=sol.t, y=sol.x, label="Forward Euler", color=_theme.get("numeric_color"),
            ylim=(0.0, 2.0), xlabel="Time", ylabel="x", legend=False, ax=ax,
        )
        # Markers only while the individual steps are still distinguishable
        if (t1 - t0) < 50 * dt:
            series.scatter(x=sol.t, y=sol.x, color=_theme.get("numeric_color"), ax=ax)
    series.function(
        lambda t: exact(t, x0), (t0, t1), label="True solution",
        color=_theme.get("exact_color"), ylim=(0.0, 2.0), xlabel="Time", ylabel="x",
        title=f"Δt = {dt:g}", ax=ax,
    )
    decor.hlines(fixed_points, ax=ax)


def _error_plot(ax, f, exact, x0, tspan, dts, title: str) -> None:
    dts = _affordable(dts, tspan)
    opts = options()
    errs = euler_error_vs_dt(f, lambda t: exact(t, x0), x0, tspan, dts, jit=opts.jit)
    series.plot(
        x=dts, y=errs, label="Error", xscale="log", xlabel="Δt", ylabel="Error",
        title=title, ax=ax,
    )


def render_capacitor(ax, values) -> None:
    _solution_plot(ax, capacitor, capacitor_exact, values, CAPACITOR_TSPAN, [1.0])


def render_capacitor_error(ax, values) -> None:
    _error_plot(ax, capacitor, capacitor_exact, values["x0"], CAPACITOR_TSPAN, default_dt_range(),
                "Capacitor: error at t₁ vs Δt")


def render_logistic(ax, values) -> None:
    _solution_plot(ax, logistic, logistic_exact, values, LOGISTIC_TSPAN, [0.0, 1.0])


def render_logistic_error(ax, values) -> None:
    _error_plot(ax, logistic, logistic_exact, values["x0"], LOGISTIC_TSPAN, default_dt_range(),
                "Logistic: error at t₁ vs Δt")


def render_roundoff(ax, values) -> None:
    _error_plot(ax, logistic, logistic_exact, values["x0"], ROUNDOFF_TSPAN, roundoff_dt_range(),
                "Logistic on (0, 1e-12): error vs tiny Δt")


def render_reciprocal(ax, values) -> None:
    n = int(values["n"])
    ns = np.arange(1, 1001)
    dev = np.array([reciprocal_product(k) - 1.0 for k in ns])
    series.plot(
        x=ns, y=dev, style="scatter", ms=2.0, color=_theme.get("exact_color"),
        xlabel="n", ylabel="n × (1/n) − 1", legend=False, ax=ax,
    )
    value = reciprocal_product(n)
    series.scatter(x=[n], y=[value - 1.0], color=_theme.get("numeric_color"), ms=8.0, ax=ax)
    decor.annotate(0.02, 0.98, f"n × (1/n) = {value!r}", ax=ax, axes_coords=True)


def render_derivative(ax, values) -> None:
    t = values["t"]
    dts = derivative_dt_range()
    series.function(
        lambda dt: forward_difference_error(dt, t), (float(dts[0]), float(dts[-1])),
        n=dts.size, logx=True, xlabel="Δt", ylabel="e(Δt)", legend=False,
        title=f"|cos t − (sin(t + Δt) − sin t)/Δt| at t = {t:g}", ax=ax,
    )


LESSON = register_lesson(
    Lesson(
        name="forward-euler",
        title="The Forward Euler Method",
        date="2021-04-07",
        summary="x[n+1] = x[n] + f(x[n]) Δt: truncation error shrinks with Δt until round-off takes over.",
        sections=sections(
            Section(
                "capacitor", "Capacitor charging: x' = 1 − x", render_capacitor,
                controls=(_POW_CAPACITOR, _X0),
                notes="Δt = 2^pow. Red: Forward Euler, blue: exact solution, green: fixed point.",
            ),
            Section(
                "capacitor-error", "Capacitor: error vs Δt", render_capacitor_error,
                controls=(_X0,),
                notes="|x(t₁) − x[N]| for 1000 step sizes in [1e-4, 1].",
            ),
            Section(
                "logistic", "Logistic equation: x' = x (1 − x)", render_logistic,
                controls=(_POW_LOGISTIC, _X0),
            ),
            Section(
                "logistic-error", "Logistic: error vs Δt", render_logistic_error,
                controls=(_X0,),
            ),
            Section(
                "roundoff", "What happens if Δt is too small?", render_roundoff,
                controls=(_X0,),
                notes="As Δt approaches machine precision the (t₁ − t₀)/Δt steps accumulate round-off.",
            ),
            Section(
                "reciprocal", "Does n × (1/n) = 1?", render_reciprocal,
                controls=(SliderSpec("n", 1, 1000, 1, default=49, fmt="%d"),),
            ),
            Section(
                "derivative", "A numerical derivative", render_derivative,
                controls=(SliderSpec("t", 0.0, 2.0 * math.pi, 0.001, default=0.25, fmt="%.3f"),),
                notes="The same error enters every Forward Euler step of x' = sqrt(1 − x²).",
            ),
        ),
    )
)
