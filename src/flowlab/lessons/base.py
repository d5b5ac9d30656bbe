# src/flowlab/lessons/base.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import matplotlib.pyplot as plt

from flowlab.errors import SectionNotFoundError
from flowlab.plot import _theme
from flowlab.widgets import ControlSpec, Panel, coerce_controls

__all__ = ["Section", "Lesson", "RenderOptions", "configure", "options", "sections"]

RenderFn = Callable[[Any, Mapping[str, Any]], Any]


@dataclass(frozen=True)
class RenderOptions:
    """Knobs shared by every lesson render (filled from Config by the CLI)."""
    jit: bool = False
    max_steps: int = 10_000_000
    grid: int = 25


_OPTIONS = RenderOptions()


def configure(**kwargs: Any) -> RenderOptions:
    """Update the shared render options; unknown names raise TypeError."""
    global _OPTIONS
    _OPTIONS = replace(_OPTIONS, **kwargs)
    return _OPTIONS


def options() -> RenderOptions:
    return _OPTIONS


@dataclass(frozen=True)
class Section:
    """
    One plot of a lesson.

    `render(ax, values)` draws on `ax` using the resolved control values.
    `animate(values)` optionally returns a PhaseAnimation for the same state.
    """
    name: str
    title: str
    render: RenderFn
    controls: Tuple[ControlSpec, ...] = ()
    notes: str = ""
    animate: Optional[Callable[[Mapping[str, Any]], Any]] = None

    def values(self, overrides: Mapping[str, Any] | None = None) -> Dict[str, Any]:
        return coerce_controls(self.controls, overrides)


@dataclass(frozen=True)
class Lesson:
    name: str
    title: str
    date: str
    sections: Tuple[Section, ...] = field(default_factory=tuple)
    summary: str = ""

    def section_names(self) -> list[str]:
        return [s.name for s in self.sections]

    def section(self, name: str | None = None) -> Section:
        """Look up a section by name (the first one when name is None)."""
        if name is None:
            return self.sections[0]
        for s in self.sections:
            if s.name == name:
                return s
        raise SectionNotFoundError(self.name, name, self.section_names())

    def render(
        self,
        section: str | None = None,
        overrides: Mapping[str, Any] | None = None,
        *,
        ax=None,
    ):
        """Draw one section with its default control values plus `overrides`; returns the Figure."""
        sec = self.section(section)
        values = sec.values(overrides)
        if ax is None:
            _fig, ax = plt.subplots(figsize=tuple(_theme.get("figsize")), layout="constrained")
        sec.render(ax, values)
        return ax.figure

    def render_all(self, overrides: Mapping[str, Mapping[str, Any]] | None = None) -> Dict[str, Any]:
        """Render every section; `overrides` maps section name -> control overrides."""
        overrides = overrides or {}
        return {s.name: self.render(s.name, overrides.get(s.name)) for s in self.sections}

    def panel(self, section: str | None = None) -> Panel:
        sec = self.section(section)
        return Panel(sec.controls, sec.render, title=f"{self.title}: {sec.title}")

    def animate(self, section: str | None = None, overrides: Mapping[str, Any] | None = None):
        sec = self.section(section)
        if sec.animate is None:
            raise ValueError(f"Section '{sec.name}' of lesson '{self.name}' has no animation.")
        return sec.animate(sec.values(overrides))


def sections(*items: Section) -> Tuple[Section, ...]:
    names = [s.name for s in items]
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        raise ValueError(f"Duplicate section names: {', '.join(dupes)}")
    return tuple(items)

