# src/flowlab/plot/trajectories.py
from __future__ import annotations

import warnings
from typing import Any, Callable, Sequence

import numpy as np

from flowlab.errors import FlowlabWarning
from flowlab.simulate import Trajectory, solve_trajectory

from ._primitives import _get_ax, _apply_limits, _apply_labels, _origin_frame, phase
from . import _theme

__all__ = ["trajectories", "start_grid"]


def start_grid(lo: float, hi: float, *, step: float | None = None, n: int | None = None) -> np.ndarray:
    """Start coordinates on [lo, hi], either by step (lo:step:hi) or by count."""
    if (step is None) == (n is None):
        raise ValueError("Pass exactly one of step or n.")
    if n is not None:
        return np.linspace(float(lo), float(hi), int(n))
    count = int(np.floor((float(hi) - float(lo)) / float(step) + 1e-9)) + 1
    return float(lo) + float(step) * np.arange(count)


def trajectories(
    f: Callable,
    *,
    tfinal: float = 3.0,
    params: Any = None,
    xstart: Sequence[float] | np.ndarray = np.linspace(-2.0, 2.0, 5),
    ystart: Sequence[float] | np.ndarray = np.linspace(-2.0, 2.0, 5),
    xlim: tuple[float, float] = (-2.0, 2.0),
    ylim: tuple[float, float] = (-2.0, 2.0),
    color: str | None = None,
    lw: float = 1.5,
    n_samples: int = 400,
    ticks: bool = False,
    title: str | None = None,
    ax=None,
) -> list[Trajectory]:
    """
    Solve f(state, params, t) from every (x0, y0) in xstart x ystart and draw the paths.

    Each path gets an arrowhead at its end. A solve that fails is skipped
    with a FlowlabWarning; the rest are still drawn.

    Returns:
        The successful trajectories, in start-grid order (x outer, y inner).
    """
    plot_ax = _get_ax(ax)
    _origin_frame(plot_ax)
    plot_ax.set_aspect("equal", adjustable="box")
    line_color = _theme.get("traj_color") if color is None else color

    drawn: list[Trajectory] = []
    for x0 in xstart:
        for y0 in ystart:
            traj = solve_trajectory(f, (float(x0), float(y0)), tfinal, params=params, n_samples=n_samples)
            if not traj.success:
                warnings.warn(
                    f"Skipping trajectory from ({float(x0):.3f}, {float(y0):.3f}): {traj.message}",
                    FlowlabWarning,
                    stacklevel=2,
                )
                continue
            phase.xy(
                x=traj.y[0], y=traj.y[1], color=line_color, lw=lw, alpha=1.0,
                arrow=True, legend=False, ax=plot_ax,
            )
            drawn.append(traj)

    _apply_limits(plot_ax, xlim=xlim, ylim=ylim)
    _apply_labels(plot_ax, xlabel=None, ylabel=None, title=title)
    if not ticks:
        plot_ax.set_xticks([])
        plot_ax.set_yticks([])
    return drawn
