# src/flowlab/plot/_primitives.py
from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.ticker import MaxNLocator

from . import _theme


# ============================================================================
# Style Presets
# ============================================================================

STYLE_PRESETS: dict[str, dict[str, Any]] = {
    # Only the visual pattern (line/marker presence); sizes come from theme
    "continuous": {"linestyle": "-", "marker": ""},
    "line": {"linestyle": "-", "marker": ""},
    "discrete": {"linestyle": "", "marker": "o"},
    "scatter": {"linestyle": "", "marker": "o"},
    "mixed": {"linestyle": "-", "marker": "o"},
    "dashed": {"linestyle": "--", "marker": ""},
}


# ----------------------------------------------------------------------------
# Figure/Axes helpers
# ----------------------------------------------------------------------------

def _get_ax(ax=None) -> plt.Axes:
    if ax is not None:
        return ax
    _fig, created_ax = plt.subplots(
        figsize=tuple(_theme.get("figsize")),
        layout="constrained",
    )
    return created_ax


def _ensure_array(data: Any) -> np.ndarray:
    if isinstance(data, np.ndarray):
        return data
    return np.asarray(data)


def _origin_frame(ax: plt.Axes) -> None:
    """Plots.jl `framestyle=:origin`: axes spines through (0, 0)."""
    ax.spines["left"].set_position("zero")
    ax.spines["bottom"].set_position("zero")
    ax.spines["right"].set_visible(False)
    ax.spines["top"].set_visible(False)


# ----------------------------------------------------------------------------
# Styling helpers
# ----------------------------------------------------------------------------

def _apply_ticks(ax: plt.Axes) -> None:
    tick_n = int(_theme.get("tick_n"))
    if tick_n > 0:
        if ax.get_xscale() == "linear":
            ax.xaxis.set_major_locator(MaxNLocator(nbins=tick_n))
        if ax.get_yscale() == "linear":
            ax.yaxis.set_major_locator(MaxNLocator(nbins=tick_n))


def _apply_limits(
    ax: plt.Axes,
    *,
    xlim: tuple[float | None, float | None] | None = None,
    ylim: tuple[float | None, float | None] | None = None,
) -> None:
    """Apply axis limits to the plot."""
    if xlim is not None:
        ax.set_xlim(xlim)
    if ylim is not None:
        ax.set_ylim(ylim)


def _apply_labels(
    ax: plt.Axes,
    *,
    xlabel: str | None,
    ylabel: str | None,
    title: str | None,
) -> None:
    pad = float(_theme.get("label_pad"))
    if xlabel is not None:
        ax.set_xlabel(xlabel, labelpad=pad)
    if ylabel is not None:
        ax.set_ylabel(ylabel, labelpad=pad)
    if title is not None:
        ax.set_title(title, pad=float(_theme.get("title_pad")))
    _apply_ticks(ax)


def _apply_scales(ax: plt.Axes, *, xscale: str | None, yscale: str | None) -> None:
    if xscale is not None:
        ax.set_xscale(xscale)
    if yscale is not None:
        ax.set_yscale(yscale)


def _resolve_style(
    style: str | dict[str, Any] | None = None,
    *,
    color: str | None = None,
    lw: float | None = None,
    ls: str | None = None,
    marker: str | None = None,
    ms: float | None = None,
    alpha: float | None = None,
) -> dict[str, Any]:
    """
    Resolve style from preset name or custom dict, with explicit overrides.

    Priority (highest first): explicit arguments, style dict / preset,
    theme defaults.
    """
    result: dict[str, Any] = {}

    if isinstance(style, str):
        if style not in STYLE_PRESETS:
            raise ValueError(
                f"Unknown style preset '{style}'. Available: {', '.join(sorted(STYLE_PRESETS))}"
            )
        result.update(STYLE_PRESETS[style])
    elif isinstance(style, dict):
        result.update(style)

    if color is not None:
        result["color"] = color
    if lw is not None:
        result["linewidth"] = float(lw)
    if ls is not None:
        result["linestyle"] = ls
    if marker is not None:
        result["marker"] = marker
    if ms is not None:
        result["markersize"] = float(ms)
    if alpha is not None:
        result["alpha"] = alpha

    result.setdefault("linewidth", float(_theme.get("line_w")))
    result.setdefault("markersize", float(_theme.get("marker_size")))
    result.setdefault("alpha", _theme.get("alpha"))
    return result


def _finish(
    ax: plt.Axes,
    *,
    label: str | None,
    legend: bool,
    xlim,
    ylim,
    xlabel,
    ylabel,
    title,
    xscale=None,
    yscale=None,
) -> plt.Axes:
    _apply_scales(ax, xscale=xscale, yscale=yscale)
    if label and legend:
        ax.legend()
    _apply_limits(ax, xlim=xlim, ylim=ylim)
    _apply_labels(ax, xlabel=xlabel, ylabel=ylabel, title=title)
    return ax


# ----------------------------------------------------------------------------
# Public plotting primitives
# ----------------------------------------------------------------------------

class _SeriesPlot:
    def plot(
        self,
        *,
        x,
        y,
        label: str | None = None,
        style: str | dict[str, Any] | None = "continuous",
        color: str | None = None,
        lw: float | None = None,
        ls: str | None = None,
        marker: str | None = None,
        ms: float | None = None,
        alpha: float | None = None,
        xlim: tuple[float | None, float | None] | None = None,
        ylim: tuple[float | None, float | None] | None = None,
        xlabel: str | None = None,
        ylabel: str | None = None,
        title: str | None = None,
        xscale: str | None = None,
        yscale: str | None = None,
        legend: bool = True,
        ax=None,
    ) -> plt.Axes:
        """
        Plot a single series as y versus x.

        Args:
            x: Time or independent variable array
            y: Values array
            label: Legend label for the series
            style: Style preset name or custom dict ('continuous', 'discrete', 'dashed', ...)
            color, lw, ls, marker, ms, alpha: Explicit style overrides
            xlim, ylim: Axis limits as (min, max)
            xlabel, ylabel, title: Text decorations
            xscale, yscale: Matplotlib axis scales, e.g. 'log'
            legend: Whether to show legend if label is provided
            ax: Existing axes to plot on

        Returns:
            Matplotlib axes object
        """
        x_vals = _ensure_array(x)
        y_vals = _ensure_array(y)
        plot_ax = _get_ax(ax)
        style_args = _resolve_style(style, color=color, lw=lw, ls=ls, marker=marker, ms=ms, alpha=alpha)
        plot_ax.plot(x_vals, y_vals, label=label, **style_args)
        return _finish(
            plot_ax, label=label, legend=legend, xlim=xlim, ylim=ylim,
            xlabel=xlabel, ylabel=ylabel, title=title, xscale=xscale, yscale=yscale,
        )

    def function(
        self,
        f: Callable,
        xlim: tuple[float, float],
        *,
        n: int = 500,
        logx: bool = False,
        label: str | None = None,
        ylim: tuple[float | None, float | None] | None = None,
        xlabel: str | None = None,
        ylabel: str | None = None,
        title: str | None = None,
        legend: bool = True,
        ax=None,
        **style: Any,
    ) -> plt.Axes:
        """
        Sample a callable on `xlim` and draw it (log-spaced samples when `logx`).

        `f` is called once with the whole sample array; scalar-only callables
        are vectorized with np.vectorize.
        """
        lo, hi = float(xlim[0]), float(xlim[1])
        if logx:
            if lo <= 0:
                raise ValueError("logx requires a positive lower x limit.")
            xs = np.logspace(np.log10(lo), np.log10(hi), int(n))
        else:
            xs = np.linspace(lo, hi, int(n))
        try:
            ys = np.asarray(f(xs), dtype=float)
            if ys.shape != xs.shape:
                ys = np.broadcast_to(ys, xs.shape)
        except TypeError:
            ys = np.vectorize(f, otypes=[float])(xs)
        return self.plot(
            x=xs, y=ys, label=label, xlim=(lo, hi), ylim=ylim,
            xlabel=xlabel, ylabel=ylabel, title=title,
            xscale="log" if logx else None, legend=legend, ax=ax, **style,
        )

    def scatter(
        self,
        *,
        x,
        y,
        label: str | None = None,
        color: str | None = None,
        ms: float | None = None,
        alpha: float | None = None,
        ax=None,
    ) -> plt.Axes:
        return self.plot(
            x=x, y=y, label=label, style="scatter", color=color, ms=ms, alpha=alpha,
            legend=label is not None, ax=ax,
        )


class _PhasePlot:
    def xy(
        self,
        *,
        x,
        y,
        label: str | None = None,
        style: str | dict[str, Any] | None = "continuous",
        color: str | None = None,
        lw: float | None = None,
        ls: str | None = None,
        alpha: float | None = None,
        xlim: tuple[float | None, float | None] | None = None,
        ylim: tuple[float | None, float | None] | None = None,
        xlabel: str | None = None,
        ylabel: str | None = None,
        title: str | None = None,
        equil: list[tuple[float, float]] | None = None,
        arrow: bool = False,
        legend: bool = True,
        ax=None,
    ) -> plt.Axes:
        """
        Plot a 2D trajectory through phase space (y versus x).

        Args:
            equil: Equilibrium points (x, y) to mark
            arrow: Put an arrowhead on the last segment (direction of travel)
        """
        x_vals = _ensure_array(x)
        y_vals = _ensure_array(y)
        plot_ax = _get_ax(ax)
        style_args = _resolve_style(style, color=color, lw=lw, ls=ls, alpha=alpha)
        (line,) = plot_ax.plot(x_vals, y_vals, label=label, **style_args)
        if arrow and x_vals.size >= 2 and (x_vals[-1], y_vals[-1]) != (x_vals[-2], y_vals[-2]):
            plot_ax.annotate(
                "",
                xy=(x_vals[-1], y_vals[-1]),
                xytext=(x_vals[-2], y_vals[-2]),
                arrowprops={"arrowstyle": "-|>", "color": line.get_color(), "lw": style_args["linewidth"]},
            )
        if equil:
            for ex, ey in equil:
                plot_ax.plot(ex, ey, marker="o", linestyle="None", color=line.get_color())
        return _finish(
            plot_ax, label=label, legend=legend, xlim=xlim, ylim=ylim,
            xlabel=xlabel, ylabel=ylabel, title=title,
        )

    def parametric(
        self,
        fx: Callable,
        fy: Callable,
        t0: float,
        t1: float,
        *,
        n: int = 400,
        **kwargs: Any,
    ) -> plt.Axes:
        """Plot the curve (fx(t), fy(t)) for t in [t0, t1]."""
        ts = np.linspace(float(t0), float(t1), int(n))
        xs = np.asarray(fx(ts), dtype=float) * np.ones_like(ts)
        ys = np.asarray(fy(ts), dtype=float) * np.ones_like(ts)
        return self.xy(x=xs, y=ys, **kwargs)


class _DecorPlot:
    def hlines(self, ys: Sequence[float], *, ax=None, color=None, ls: str = "--", alpha: float = 0.6, lw=None) -> plt.Axes:
        plot_ax = _get_ax(ax)
        color = _theme.get("fixed_color") if color is None else color
        lw = float(_theme.get("line_w")) * 0.75 if lw is None else float(lw)
        for y in ys:
            plot_ax.axhline(float(y), color=color, linestyle=ls, alpha=alpha, linewidth=lw)
        return plot_ax

    def vlines(self, xs: Sequence[float], *, ax=None, color=None, ls: str = "--", alpha: float = 0.6, lw=None) -> plt.Axes:
        plot_ax = _get_ax(ax)
        color = _theme.get("fixed_color") if color is None else color
        lw = float(_theme.get("line_w")) * 0.75 if lw is None else float(lw)
        for x in xs:
            plot_ax.axvline(float(x), color=color, linestyle=ls, alpha=alpha, linewidth=lw)
        return plot_ax

    def annotate(
        self,
        x: float,
        y: float,
        text: str,
        *,
        ax=None,
        color: str | None = None,
        fontsize: float | None = None,
        ha: str = "left",
        va: str = "top",
        axes_coords: bool = False,
    ) -> plt.Axes:
        """Place text at (x, y), in data coordinates or (with axes_coords) axes fractions."""
        plot_ax = _get_ax(ax)
        kw: dict[str, Any] = {"ha": ha, "va": va}
        if axes_coords:
            kw["transform"] = plot_ax.transAxes
        if color is not None:
            kw["color"] = color
        if fontsize is not None:
            kw["fontsize"] = float(fontsize)
        plot_ax.text(x, y, text, **kw)
        return plot_ax

    def arrow(self, start: tuple[float, float], end: tuple[float, float], *, ax=None, color: str = "red", lw: float = 1.5) -> plt.Axes:
        plot_ax = _get_ax(ax)
        plot_ax.annotate(
            "", xy=end, xytext=start,
            arrowprops={"arrowstyle": "-|>", "color": color, "lw": lw},
        )
        return plot_ax

    def message(self, text: str, *, ax=None, color: str = "#aa0000") -> plt.Axes:
        """Replace the plot with a centred message (e.g. unparseable input)."""
        plot_ax = _get_ax(ax)
        plot_ax.text(0.5, 0.5, text, ha="center", va="center", color=color, transform=plot_ax.transAxes, wrap=True)
        plot_ax.set_xticks([])
        plot_ax.set_yticks([])
        return plot_ax


series = _SeriesPlot()
phase = _PhasePlot()
decor = _DecorPlot()
