# src/flowlab/widgets.py
"""
Control specs and an interactive matplotlib panel.

A lesson section declares its controls as specs (slider, checkbox, text).
The same specs drive both the headless path (`coerce_controls`, used by
`flowlab render --set name=value`) and the interactive `Panel` built on
`matplotlib.widgets`.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence, Union

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.widgets import CheckButtons, Slider, TextBox

from flowlab.errors import ControlError

__all__ = [
    "TRANSFORMS",
    "SliderSpec",
    "CheckboxSpec",
    "TextSpec",
    "ControlSpec",
    "initial_values",
    "coerce_controls",
    "resolve_controls",
    "Panel",
]

TRANSFORMS: dict[str, Callable[[float], float]] = {
    "pow2": lambda v: 2.0 ** v,
    "pow10": lambda v: 10.0 ** v,
}

_TRUE = {"1", "true", "yes", "on", "y"}
_FALSE = {"0", "false", "no", "off", "n", ""}


@dataclass(frozen=True)
class SliderSpec:
    """
    A discrete slider over start:step:stop.

    `transform` maps the slider position to the value the lesson uses
    ("pow2" gives 2**v). The transformed value is exposed under `target`
    (defaults to `name`, replacing the raw position).
    """
    name: str
    start: float
    stop: float
    step: float = 1.0
    default: float | None = None
    label: str | None = None
    transform: str | Callable[[float], float] | None = None
    fmt: str = "%g"
    target: str | None = None

    def __post_init__(self) -> None:
        if not (math.isfinite(self.step) and self.step > 0):
            raise ValueError(f"Slider '{self.name}': step must be positive, got {self.step!r}")
        if self.stop < self.start:
            raise ValueError(f"Slider '{self.name}': stop < start ({self.stop!r} < {self.start!r})")
        if isinstance(self.transform, str) and self.transform not in TRANSFORMS:
            raise ValueError(
                f"Slider '{self.name}': unknown transform '{self.transform}'. "
                f"Available: {', '.join(sorted(TRANSFORMS))}"
            )

    def values(self) -> np.ndarray:
        count = int(math.floor((self.stop - self.start) / self.step + 1e-9)) + 1
        return np.round(self.start + self.step * np.arange(count), 12)

    def snap(self, v: float) -> float:
        grid = self.values()
        return float(grid[int(np.argmin(np.abs(grid - float(v))))])

    @property
    def initial(self) -> float:
        return self.snap(self.start if self.default is None else self.default)

    def resolve(self, v: float) -> float:
        if self.transform is None:
            return float(v)
        fn = TRANSFORMS[self.transform] if isinstance(self.transform, str) else self.transform
        return float(fn(float(v)))

    def coerce(self, raw: Any) -> float:
        try:
            v = float(raw)
        except (TypeError, ValueError):
            raise ControlError(f"Slider '{self.name}' expects a number, got {raw!r}.") from None
        half = 0.5 * self.step
        if not (self.start - half <= v <= self.stop + half):
            raise ControlError(
                f"Slider '{self.name}' value {v:g} is outside {self.start:g}:{self.step:g}:{self.stop:g}."
            )
        return self.snap(v)

    def describe(self) -> str:
        text = f"slider {self.start:g}:{self.step:g}:{self.stop:g}, default {self.initial:g}"
        if self.transform is not None:
            tname = self.transform if isinstance(self.transform, str) else getattr(self.transform, "__name__", "fn")
            text += f", {self.target or self.name} = {tname}({self.name})"
        return text


@dataclass(frozen=True)
class CheckboxSpec:
    name: str
    label: str | None = None
    default: bool = False

    @property
    def initial(self) -> bool:
        return bool(self.default)

    def coerce(self, raw: Any) -> bool:
        if isinstance(raw, bool):
            return raw
        text = str(raw).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ControlError(f"Checkbox '{self.name}' expects a boolean, got {raw!r}.")

    def describe(self) -> str:
        return f"checkbox, default {'on' if self.default else 'off'}"


@dataclass(frozen=True)
class TextSpec:
    """Free text; an empty value means "use the placeholder" to consumers."""
    name: str
    label: str | None = None
    placeholder: str = ""
    default: str = ""

    @property
    def initial(self) -> str:
        return self.default

    def coerce(self, raw: Any) -> str:
        return "" if raw is None else str(raw)

    def describe(self) -> str:
        return f"text, placeholder {self.placeholder!r}"


ControlSpec = Union[SliderSpec, CheckboxSpec, TextSpec]


def _by_name(controls: Sequence[ControlSpec]) -> dict[str, ControlSpec]:
    out: dict[str, ControlSpec] = {}
    for spec in controls:
        if spec.name in out:
            raise ValueError(f"Duplicate control name '{spec.name}'.")
        out[spec.name] = spec
    return out


def initial_values(controls: Sequence[ControlSpec]) -> dict[str, Any]:
    return {spec.name: spec.initial for spec in controls}


def resolve_controls(controls: Sequence[ControlSpec], raw: Mapping[str, Any]) -> dict[str, Any]:
    """Raw widget values -> values handed to a render function."""
    out: dict[str, Any] = {}
    for spec in controls:
        value = raw[spec.name]
        if isinstance(spec, SliderSpec):
            resolved = spec.resolve(value)
            if spec.target is not None and spec.target != spec.name:
                out[spec.name] = value
                out[spec.target] = resolved
            else:
                out[spec.name] = resolved
        else:
            out[spec.name] = value
    return out


def coerce_controls(
    controls: Sequence[ControlSpec],
    overrides: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Validate raw overrides against the control specs and return resolved values.

    Slider overrides are snapped onto their grid, checkbox overrides accept
    bools or "true"/"false"/"1"/"0"/..., text overrides are taken verbatim.

    Raises:
        ControlError: unknown control name or a value of the wrong kind.
    """
    specs = _by_name(controls)
    raw = initial_values(controls)
    for name, value in (overrides or {}).items():
        if name not in specs:
            available = ", ".join(specs) or "(none)"
            raise ControlError(f"Unknown control '{name}'. Available: {available}.")
        raw[name] = specs[name].coerce(value)
    return resolve_controls(controls, raw)


# ----------------------------------------------------------------------------
# Interactive panel
# ----------------------------------------------------------------------------

_ROW_H = 0.045
_PLOT_RECT_TOP = 0.92


class Panel:
    """
    A figure with a plot area above a strip of matplotlib widgets.

    Every widget change re-renders the plot with the current values:
    `render(ax, values)` receives a fresh axes and the resolved values.
    """

    def __init__(
        self,
        controls: Sequence[ControlSpec],
        render: Callable[[Any, Mapping[str, Any]], Any],
        *,
        title: str | None = None,
        figsize: tuple[float, float] = (7.5, 7.0),
    ) -> None:
        self.controls = list(controls)
        self._specs = _by_name(self.controls)
        self._render = render
        self._raw: dict[str, Any] = initial_values(self.controls)
        self._widgets: dict[str, Any] = {}

        self.figure = plt.figure(figsize=figsize)
        if title:
            self.figure.suptitle(title)
        n_rows = len(self.controls)
        self._strip_h = 0.03 + _ROW_H * n_rows
        self._plot_rect = (0.1, self._strip_h + 0.08, 0.85, _PLOT_RECT_TOP - self._strip_h - 0.1)
        self.ax = self.figure.add_axes(self._plot_rect)

        for row, spec in enumerate(self.controls):
            bottom = 0.02 + _ROW_H * (n_rows - 1 - row)
            self._widgets[spec.name] = self._build_widget(spec, (0.25, bottom, 0.6, _ROW_H * 0.7))
        self.redraw()

    def _build_widget(self, spec: ControlSpec, rect) -> Any:
        wax = self.figure.add_axes(rect)
        label = spec.label or spec.name
        if isinstance(spec, SliderSpec):
            widget = Slider(
                wax,
                label,
                spec.start,
                spec.stop,
                valinit=spec.initial,
                valstep=spec.values(),
                valfmt=spec.fmt,
            )
            widget.on_changed(lambda v, name=spec.name: self._changed(name, float(v)))
        elif isinstance(spec, CheckboxSpec):
            widget = CheckButtons(wax, [label], [spec.initial])
            widget.on_clicked(lambda _label, name=spec.name: self._changed(name, self._check_status(name)))
        elif isinstance(spec, TextSpec):
            shown = f"{label} [{spec.placeholder}]" if spec.placeholder else label
            widget = TextBox(wax, shown, initial=spec.initial)
            widget.on_submit(lambda text, name=spec.name: self._changed(name, text))
        else:
            raise TypeError(f"Unsupported control spec: {type(spec).__name__}")
        return widget

    def _check_status(self, name: str) -> bool:
        return bool(self._widgets[name].get_status()[0])

    def _changed(self, name: str, value: Any) -> None:
        self._raw[name] = value
        self.redraw()

    @property
    def values(self) -> dict[str, Any]:
        """Current raw widget values (slider positions, bools, text)."""
        return dict(self._raw)

    @property
    def resolved(self) -> dict[str, Any]:
        return resolve_controls(self.controls, self._raw)

    def set(self, name: str, value: Any) -> None:
        """Drive a widget programmatically; triggers a re-render like a user change."""
        if name not in self._specs:
            raise ControlError(f"Unknown control '{name}'. Available: {', '.join(self._specs)}.")
        spec = self._specs[name]
        coerced = spec.coerce(value)
        widget = self._widgets[name]
        if isinstance(spec, CheckboxSpec):
            if self._check_status(name) != coerced:
                widget.set_active(0)
        else:
            widget.set_val(coerced)

    def redraw(self) -> None:
        # fresh axes on every render
        self.ax.remove()
        self.ax = self.figure.add_axes(self._plot_rect)
        self._render(self.ax, self.resolved)
        self.figure.canvas.draw_idle()

    def show(self) -> None:
        plt.show()
