# src/flowlab/lessons/phase_plane.py
"""Vector-field and trajectory calculators, applied to Strogatz 6.3.10, 6.4.11 and 6.7.2."""
from __future__ import annotations

import math

import numpy as np

from flowlab.models.planar import pendulum, polarization, rotation, strogatz_6_3_10
from flowlab.plot import _theme, decor, series, start_grid, trajectories, vectorfield
from flowlab.widgets import CheckboxSpec, SliderSpec

from .base import Lesson, Section, options, sections
from .registry import register_lesson

_NORMALIZE = CheckboxSpec("normalize", label="Normalize arrows?")
_SCALE = SliderSpec("scale", 0.001, 0.5, 0.005, default=0.2, label="arrow scale", fmt="%.3f")
_R = SliderSpec("r", 0.1, 2.0, 0.1, default=1.0, fmt="%.1f")
_S = SliderSpec("s", 0.1, 2.0, 0.1, default=1.0, fmt="%.1f")
_TFINAL = SliderSpec("tfinal", 0.5, 10.0, 0.5, default=3.0, label="t_final", fmt="%.1f")
_GAMMA = SliderSpec("gamma", 0.0, 1.5, 0.05, default=0.5, label="γ", fmt="%.2f")


def _field(ax, f, values, *, params=None, xlim=(-2.0, 2.0), ylim=(-2.0, 2.0), **kw):
    return vectorfield(
        f, params=params, ax=ax, xlim=xlim, ylim=ylim, grid=options().grid,
        normalize=values.get("normalize", False), scale=values.get("scale", 0.2), **kw,
    )


def render_rotation_field(ax, values) -> None:
    _field(ax, rotation, values, params=(values["r"], values["s"]), xlim=(-1.0, 1.0), ylim=(-1.0, 1.0),
           title=f"f(x, y) = (−{values['r']:g} y, {values['s']:g} x)")


def render_rotation_trajectories(ax, values) -> None:
    starts = start_grid(-1.0, 1.0, step=0.4)
    trajectories(
        rotation, tfinal=values["tfinal"], params=(values["r"], values["s"]),
        xstart=starts, ystart=starts, xlim=(-1.0, 1.0), ylim=(-1.0, 1.0), ax=ax,
    )


def render_6_3_10_field(ax, values) -> None:
    nc = _theme.get("nullcline_colors")
    _field(ax, strogatz_6_3_10, values, title="x' = x y, y' = x² − y")
    series.function(lambda x: x * x, (-2.0, 2.0), color=nc[1], alpha=1.0, legend=False, ax=ax)
    decor.vlines([0.0], ax=ax, color=nc[0], ls="-", alpha=1.0, lw=2.0)
    decor.hlines([0.0], ax=ax, color=nc[0], ls="-", alpha=1.0, lw=2.0)
    ax.set_ylim(-2.0, 2.0)


def render_6_3_10_trajectories(ax, values) -> None:
    starts = np.linspace(-1.0, 1.0, 7)
    trajectories(
        strogatz_6_3_10, tfinal=3.0, xstart=starts, ystart=starts,
        xlim=(-1.0, 1.0), ylim=(-1.0, 1.0), ticks=True, ax=ax,
    )


def render_6_4_11_field(ax, values) -> None:
    nc = _theme.get("nullcline_colors")
    alpha = values["alpha"]
    _field(
        ax, polarization, values, params=alpha, plot_xlim=(0.0, 1.5), plot_ylim=(0.0, 1.5),
        title=f"α = {alpha:g}: every point of y = 1 − x is fixed",
    )
    series.function(lambda x: 1.0 - x, (0.0, 1.5), color=nc[2], alpha=1.0, legend=False, ax=ax)
    decor.hlines([0.0], ax=ax, color=nc[0], ls="-", alpha=1.0, lw=2.0)
    decor.vlines([0.0], ax=ax, color=nc[1], ls="-", alpha=1.0, lw=2.0)
    ax.set_ylim(0.0, 1.5)


def render_6_4_11_trajectories(ax, values) -> None:
    starts = np.linspace(0.0, 0.7, 5)
    trajectories(
        polarization, tfinal=3.0, params=values["alpha"], xstart=starts, ystart=starts,
        xlim=(0.0, 1.5), ylim=(0.0, 1.5), ax=ax,
    )


def _pendulum_nullcline_xs(gamma: float, lo: float, hi: float) -> list[float]:
    """Solutions of sin x = gamma in [lo, hi] (empty for |gamma| > 1)."""
    if abs(gamma) > 1.0:
        return []
    base = math.asin(gamma)
    out = []
    for k in range(int(math.floor(lo / (2 * math.pi))) - 1, int(math.ceil(hi / (2 * math.pi))) + 2):
        for x in (base + 2 * math.pi * k, math.pi - base + 2 * math.pi * k):
            if lo <= x <= hi:
                out.append(x)
    return sorted(set(out))


def render_pendulum_field(ax, values) -> None:
    gamma = values["gamma"]
    eig = _theme.get("eigvec_colors")
    _field(
        ax, pendulum, values, params=gamma, xlim=(-5.0, 5.0), ylim=(-5.0, 5.0),
        plot_xlim=(-3.0, 5.0), title=f"θ'' = γ − sin θ, γ = {gamma:g}",
    )
    decor.vlines(_pendulum_nullcline_xs(gamma, -3.0, 5.0), ax=ax, color=eig[0], ls="-", alpha=1.0, lw=2.0)
    decor.hlines([0.0], ax=ax, color=eig[1], ls="-", alpha=1.0, lw=2.0)


def render_pendulum_trajectories(ax, values) -> None:
    trajectories(
        pendulum, tfinal=6.0, params=values["gamma"],
        xstart=np.linspace(-1.0, 10.0, 12), ystart=np.linspace(-1.0, 5.0, 5),
        xlim=(-1.0, 20.0), ylim=(-4.0, 10.0), ax=ax,
    )


LESSON = register_lesson(
    Lesson(
        name="phase-plane",
        title="Vector Fields and Trajectories in the Plane",
        date="2021-05-05",
        summary="Calculators for f(x, y) with parameters, and three textbook systems.",
        sections=sections(
            Section(
                "rotation-field", "Vector field calculator: f = (−r y, s x)", render_rotation_field,
                controls=(_R, _S, _NORMALIZE, _SCALE),
            ),
            Section(
                "rotation-trajectories", "Trajectory calculator: f = (−r y, s x)", render_rotation_trajectories,
                controls=(_R, _S, _TFINAL),
                notes="Starts on the grid -1:0.4:1 in both x and y.",
            ),
            Section(
                "6.3.10-field", "Strogatz 6.3.10: vector field and nullclines", render_6_3_10_field,
                controls=(_NORMALIZE, _SCALE),
                notes="Nullclines: y = x² (blue), x = 0 and y = 0 (red).",
            ),
            Section(
                "6.3.10-trajectories", "Strogatz 6.3.10: trajectories", render_6_3_10_trajectories,
            ),
            Section(
                "6.4.11-field", "Strogatz 6.4.11: vector field and nullclines", render_6_4_11_field,
                controls=(SliderSpec("alpha", -2.0, 2.0, 0.1, default=-1.0, label="α", fmt="%.1f"), _NORMALIZE, _SCALE),
                notes="Nullclines: y = 1 − x (purple), y = 0 (red), x = 0 (blue).",
            ),
            Section(
                "6.4.11-trajectories", "Strogatz 6.4.11: trajectories", render_6_4_11_trajectories,
                controls=(SliderSpec("alpha", -2.0, 2.0, 0.1, default=1.0, label="α", fmt="%.1f"),),
            ),
            Section(
                "6.7.2-field", "Strogatz 6.7.2: vector field and nullclines", render_pendulum_field,
                controls=(_GAMMA, _NORMALIZE, _SCALE),
                notes="Nullclines: sin x = γ (teal), y = 0 (red).",
            ),
            Section(
                "6.7.2-trajectories", "Strogatz 6.7.2: trajectories", render_pendulum_trajectories,
                controls=(_GAMMA,),
            ),
        ),
    )
)
