# src/flowlab/plot/_theme.py
from __future__ import annotations

from contextlib import ContextDecorator
from dataclasses import dataclass, field
from typing import Any, Dict

import matplotlib as mpl
from cycler import cycler

# Rendering tokens. Lesson code never hard-codes colours; it asks for the
# role ("numeric", "exact", "fixed", ...) so presets can restyle everything.
_BASE_TOKENS: Dict[str, Any] = {
    "scale": 1.0,
    "font": "DejaVu Sans",
    "line_w": 2.0,
    "marker_size": 4.0,
    "alpha": 0.75,
    "tick_n": 6,
    "label_pad": 6.0,
    "title_pad": 6.0,
    "axis_w": 1.0,
    "grid": True,
    "grid_alpha": 0.3,
    "palette": "pluto",
    "background": "light",
    "legend_frame": False,
    "figsize": (6.4, 4.4),
    # semantic colours
    "numeric_color": "red",
    "exact_color": "blue",
    "fixed_color": "green",
    "field_color": "#1d1f21",
    "field_alpha": 0.5,
    "eigvec_colors": ("teal", "red"),
    "traj_color": "black",
    "nullcline_colors": ("red", "blue", "purple"),
}

_PALETTES: Dict[str, list[str]] = {
    # Plots.jl default series colours
    "pluto": [
        "#009AFA",
        "#E36F47",
        "#3EA44E",
        "#C371D2",
        "#AC8D18",
        "#00A9AD",
        "#ED5E93",
        "#C68225",
    ],
    "cbf": [
        "#0072B2",
        "#D55E00",
        "#009E73",
        "#CC79A7",
        "#E69F00",
        "#56B4E9",
        "#F0E442",
        "#000000",
    ],
    "mono": [
        "#111111",
        "#444444",
        "#777777",
        "#aaaaaa",
    ],
}

_PRESETS: Dict[str, Dict[str, Any]] = {
    "notebook": {},
    "lecture": {
        "scale": 1.4,
        "line_w": 2.8,
        "marker_size": 6.0,
        "axis_w": 1.4,
        "figsize": (9.6, 6.4),
    },
    "handout": {
        "scale": 0.9,
        "grid": False,
        "palette": "mono",
        "alpha": 1.0,
        "line_w": 1.4,
        "numeric_color": "#111111",
        "exact_color": "#777777",
        "fixed_color": "#444444",
        "eigvec_colors": ("#111111", "#777777"),
    },
    "dark": {
        "background": "dark",
        "grid_alpha": 0.2,
        "palette": "cbf",
        "numeric_color": "#ff6f61",
        "exact_color": "#56B4E9",
        "fixed_color": "#3EA44E",
        "field_color": "#dddddd",
        "traj_color": "#f2f2f2",
    },
}

_FONT_SIZES = {
    "font.size": 11.0,
    "axes.labelsize": 11.0,
    "axes.titlesize": 13.0,
    "xtick.labelsize": 10.0,
    "ytick.labelsize": 10.0,
    "legend.fontsize": 10.0,
    "figure.titlesize": 14.0,
}


# rcParam <- (token, cast); font sizes and colours are handled separately
_RC_TOKENS: Dict[str, tuple[str, Any]] = {
    "lines.linewidth": ("line_w", float),
    "lines.markersize": ("marker_size", float),
    "axes.linewidth": ("axis_w", float),
    "axes.labelpad": ("label_pad", float),
    "axes.titlepad": ("title_pad", float),
    "axes.grid": ("grid", bool),
    "grid.alpha": ("grid_alpha", float),
    "legend.frameon": ("legend_frame", bool),
    "figure.figsize": ("figsize", tuple),
}

# background -> (axes face, figure face, ink, grid)
_BACKGROUNDS = {
    "light": ("#ffffff", "#ffffff", "#111111", "#444444"),
    "dark": ("#111111", "#0a0a0a", "#f2f2f2", "#dddddd"),
}
_INK_KEYS = ("text.color", "axes.labelcolor", "axes.edgecolor", "xtick.color", "ytick.color")


def _palette(name: str) -> list[str]:
    try:
        return _PALETTES[name]
    except KeyError:
        raise ValueError(f"Unknown palette '{name}'. Choose from: {', '.join(sorted(_PALETTES))}.") from None


def _rc_for(tokens: Dict[str, Any]) -> Dict[str, Any]:
    """Translate a full token set into the rcParams it controls."""
    rc: Dict[str, Any] = {key: cast(tokens[tok]) for key, (tok, cast) in _RC_TOKENS.items()}
    rc.update({key: size * float(tokens["scale"]) for key, size in _FONT_SIZES.items()})
    rc["font.family"] = [tokens["font"]]

    if tokens["background"] not in _BACKGROUNDS:
        raise ValueError(f"Unknown background '{tokens['background']}'. Choose from: light, dark.")
    axes_face, figure_face, ink, grid = _BACKGROUNDS[tokens["background"]]
    rc["axes.facecolor"] = axes_face
    rc["figure.facecolor"] = figure_face
    rc["grid.color"] = grid
    rc.update(dict.fromkeys(_INK_KEYS, ink))

    rc["axes.prop_cycle"] = cycler(color=_palette(tokens["palette"]))
    return rc


@dataclass
class _ThemeManager:
    preset: str = "notebook"
    tokens: Dict[str, Any] = field(default_factory=lambda: dict(_BASE_TOKENS))
    _saved: list[tuple[str, Dict[str, Any]]] = field(default_factory=list)

    def use(self, preset: str = "notebook") -> None:
        if preset not in _PRESETS:
            raise ValueError(f"Unknown theme preset '{preset}'. Choose from: {', '.join(sorted(_PRESETS))}.")
        self.preset = preset
        self._set({**_BASE_TOKENS, **_PRESETS[preset]})

    def update(self, **changes: Any) -> None:
        bad = sorted(k for k in changes if k not in _BASE_TOKENS)
        if bad:
            raise ValueError(f"Unknown theme tokens: {', '.join(bad)}.")
        self._set({**self.tokens, **changes})

    def save(self) -> None:
        self._saved.append((self.preset, dict(self.tokens)))

    def restore(self) -> None:
        if self._saved:
            self.preset, tokens = self._saved.pop()
            self._set(tokens)

    def _set(self, tokens: Dict[str, Any]) -> None:
        # raises on a bad palette before anything changes
        rc = _rc_for(tokens)
        self.tokens = tokens
        mpl.rcParams.update(rc)


class temp(ContextDecorator):
    """``with theme.temp(line_w=1.0): ...`` or ``@theme.temp(grid=False)``."""

    def __init__(self, **tokens: Any):
        self.tokens = tokens

    def __enter__(self):
        _MANAGER.save()
        try:
            _MANAGER.update(**self.tokens)
        except ValueError:
            _MANAGER.restore()
            raise
        return self

    def __exit__(self, *exc):
        _MANAGER.restore()
        return False


_MANAGER = _ThemeManager()
_MANAGER.use("notebook")


def use(preset: str = "notebook") -> None:
    """Switch to a named preset; resets any token overrides."""
    _MANAGER.use(preset)


def update(**tokens: Any) -> None:
    _MANAGER.update(**tokens)


def get(token: str) -> Any:
    return _MANAGER.tokens[token]


def current() -> str:
    return _MANAGER.preset


def presets() -> list[str]:
    return sorted(_PRESETS)
