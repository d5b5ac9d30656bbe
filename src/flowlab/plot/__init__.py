# src/flowlab/plot/__init__.py
from __future__ import annotations

from typing import TYPE_CHECKING

from . import _theme as theme
from ._primitives import series, phase, decor
from . import _export as export
from .vectorfield import (
    vectorfield,
    eval_vectorfield,
    linear_vectorfield,
    VectorFieldHandle,
)
from .trajectories import trajectories, start_grid
from .animation import PhaseAnimation, phase_animate, draw_firefly, save_gif

if TYPE_CHECKING:
    # Type-only: expose the concrete classes of the singletons to editors.
    from ._primitives import _SeriesPlot as _SeriesPlot  # type: ignore
    from ._primitives import _PhasePlot as _PhasePlot  # type: ignore
    from ._primitives import _DecorPlot as _DecorPlot  # type: ignore

    series: _SeriesPlot
    phase: _PhasePlot
    decor: _DecorPlot

__all__ = [
    "theme",
    "series",
    "phase",
    "decor",
    "export",
    "vectorfield",
    "eval_vectorfield",
    "linear_vectorfield",
    "VectorFieldHandle",
    "trajectories",
    "start_grid",
    "PhaseAnimation",
    "phase_animate",
    "draw_firefly",
    "save_gif",
]
