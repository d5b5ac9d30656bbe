# src/flowlab/plot/vectorfield.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

import numpy as np

from flowlab.models.linear import eigensystem, format_eigenvalues, linear_field

from ._primitives import _get_ax, _apply_limits, _apply_labels, _origin_frame
from . import _theme

__all__ = ["eval_vectorfield", "vectorfield", "linear_vectorfield", "VectorFieldHandle"]

# Sentinel for "keep the current params" in VectorFieldHandle.update();
# None is a legitimate params value for systems without parameters.
_UNSET: Any = object()


def _make_meshgrid(xlim, ylim, grid) -> tuple[np.ndarray, np.ndarray]:
    gx, gy = grid
    xs = np.linspace(xlim[0], xlim[1], int(gx))
    ys = np.linspace(ylim[0], ylim[1], int(gy))
    X, Y = np.meshgrid(xs, ys, indexing="xy")
    return X, Y


def _coerce_grid(grid: tuple[int, int] | int) -> tuple[int, int]:
    if isinstance(grid, int):
        return (int(grid), int(grid))
    gx, gy = grid
    return (int(gx), int(gy))


def _default_nullcline_grid(grid: tuple[int, int]) -> tuple[int, int]:
    """
    Use a denser grid for nullcline computation to reduce numerical wobble.
    Caps growth to avoid runaway cost while ensuring at least a moderate density.
    """
    gx, gy = _coerce_grid(grid)
    dense_x = max(gx, min(max(gx * 4, 80), 200))
    dense_y = max(gy, min(max(gy * 4, 80), 200))
    return dense_x, dense_y


def _evaluate_field(
    f: Callable,
    params: Any,
    X: np.ndarray,
    Y: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    ny, nx = X.shape
    U = np.zeros_like(X, dtype=float)
    V = np.zeros_like(Y, dtype=float)
    for j in range(ny):
        for i in range(nx):
            dx, dy = f((X[j, i], Y[j, i]), params, None)
            U[j, i] = dx
            V[j, i] = dy
    return U, V


def _normalize_scale(U: np.ndarray, V: np.ndarray, *, normalize: bool, scale: float) -> tuple[np.ndarray, np.ndarray]:
    U = np.array(U, dtype=float, copy=True)
    V = np.array(V, dtype=float, copy=True)
    if normalize:
        norm = np.hypot(U, V)
        mask = norm > 0
        U[mask] /= norm[mask]
        V[mask] /= norm[mask]
    if scale != 1.0:
        U *= scale
        V *= scale
    return U, V


def eval_vectorfield(
    f: Callable,
    params: Any = None,
    *,
    xlim: tuple[float, float] = (-2.0, 2.0),
    ylim: tuple[float, float] = (-2.0, 2.0),
    grid: tuple[int, int] | int = 25,
    normalize: bool = False,
    scale: float = 1.0,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Evaluate a planar field f(state, params, t) on a grid and return X, Y, U, V.

    Arrays have shape (ny, nx) (meshgrid indexing "xy"). With `normalize`,
    every non-zero vector is divided by its length; zero vectors stay zero.
    The result is multiplied by `scale` last.
    """
    X, Y = _make_meshgrid(xlim, ylim, _coerce_grid(grid))
    U, V = _evaluate_field(f, params, X, Y)
    U, V = _normalize_scale(U, V, normalize=normalize, scale=float(scale))
    return X, Y, U, V


def _draw_nullclines(ax, X, Y, U, V, style: Mapping[str, Any] | None):
    style = {} if style is None else dict(style)
    colors = _theme.get("nullcline_colors")
    artists = []
    if U.size and np.nanmin(U) <= 0 <= np.nanmax(U):
        cs_u = ax.contour(X, Y, U, levels=[0], colors=[style.pop("color_x", colors[0])], **_line_style(style))
        artists.append(cs_u)
    if V.size and np.nanmin(V) <= 0 <= np.nanmax(V):
        cs_v = ax.contour(X, Y, V, levels=[0], colors=[style.pop("color_y", colors[1])], **_line_style(style))
        artists.append(cs_v)
    return artists


def _line_style(style: Mapping[str, Any]) -> dict[str, Any]:
    out = {k: v for k, v in style.items() if k not in ("color_x", "color_y")}
    out.setdefault("linewidths", float(_theme.get("line_w")) * 0.75)
    return out


def _draw_eigvecs(ax, vecs) -> list[Any]:
    """Arrows from the origin along each (unit) eigenvector column; real part only."""
    vecs = np.real(np.asarray(vecs))
    colors = _theme.get("eigvec_colors")
    artists = []
    for k in range(vecs.shape[1]):
        artists.append(
            ax.annotate(
                "",
                xy=(vecs[0, k], vecs[1, k]),
                xytext=(0.0, 0.0),
                arrowprops={"arrowstyle": "-|>", "color": colors[k % len(colors)], "lw": 2.5},
            )
        )
    return artists


def _remove_artists(artists: list[Any]) -> None:
    for artist in artists:
        try:
            artist.remove()
        except (ValueError, NotImplementedError):
            artist.set_visible(False)
    artists.clear()


@dataclass
class VectorFieldHandle:
    ax: Any
    f: Callable
    params: Any
    X: np.ndarray
    Y: np.ndarray
    U: np.ndarray
    V: np.ndarray
    mode: str
    quiver: Any | None
    stream: Any | None
    quiver_kwargs: dict[str, Any]
    stream_kwargs: dict[str, Any]
    normalize: bool
    scale: float
    xlim: tuple[float, float]
    ylim: tuple[float, float]
    grid: tuple[int, int]
    nullclines_enabled: bool
    nullcline_grid: tuple[int, int]
    nullcline_style: dict[str, Any]
    nullcline_artists: list[Any]
    eigvec_artists: list[Any]

    def update(
        self,
        *,
        params: Any = _UNSET,
        normalize: bool | None = None,
        scale: float | None = None,
        redraw: bool = True,
    ) -> None:
        """Re-evaluate U,V on cached X,Y and update artists in-place."""
        params_changed = params is not _UNSET
        if params_changed:
            self.params = params
        if normalize is not None:
            self.normalize = bool(normalize)
        if scale is not None:
            self.scale = float(scale)

        U_raw, V_raw = _evaluate_field(self.f, self.params, self.X, self.Y)
        U_new, V_new = _normalize_scale(U_raw, V_raw, normalize=self.normalize, scale=self.scale)
        self.U[:, :] = U_new
        self.V[:, :] = V_new

        if redraw:
            self._redraw_field()
            if self.nullclines_enabled and params_changed:
                self._redraw_nullclines()
            self.ax.figure.canvas.draw_idle()

    def _redraw_field(self) -> None:
        if self.mode == "quiver":
            if self.quiver is None:
                self.quiver = self.ax.quiver(self.X, self.Y, self.U, self.V, **self.quiver_kwargs)
            else:
                self.quiver.set_UVC(self.U, self.V)
            return

        if self.mode == "stream":
            self._redraw_streamplot()
            return

        raise ValueError(f"Unknown vectorfield mode '{self.mode}'.")

    def _redraw_streamplot(self) -> None:
        if self.stream is not None:
            _remove_artists([a for a in (self.stream.lines, self.stream.arrows) if a is not None])
        self.stream = self.ax.streamplot(self.X, self.Y, self.U, self.V, **self.stream_kwargs)

    def _redraw_nullclines(self) -> None:
        _remove_artists(self.nullcline_artists)
        Xn, Yn = _make_meshgrid(self.xlim, self.ylim, self.nullcline_grid)
        Un, Vn = _evaluate_field(self.f, self.params, Xn, Yn)
        self.nullcline_artists.extend(_draw_nullclines(self.ax, Xn, Yn, Un, Vn, self.nullcline_style))

    def toggle_nullclines(self) -> None:
        if self.nullclines_enabled:
            _remove_artists(self.nullcline_artists)
            self.nullclines_enabled = False
        else:
            self._redraw_nullclines()
            self.nullclines_enabled = True
        self.ax.figure.canvas.draw_idle()


def _resolve_mode(mode: str | None) -> str:
    mode_norm = str(mode or "quiver").lower()
    if mode_norm in ("quiver", "arrow", "arrows"):
        return "quiver"
    if mode_norm in ("stream", "streamplot", "streamline", "streamlines"):
        return "stream"
    raise ValueError("mode must be 'quiver' or 'stream'.")


def vectorfield(
    f: Callable,
    *,
    params: Any = None,
    ax=None,
    xlim=(-2.0, 2.0),
    ylim=(-2.0, 2.0),
    grid: tuple[int, int] | int = 25,
    normalize: bool = False,
    scale: float = 0.2,
    plot_xlim: tuple[float, float] | None = None,
    plot_ylim: tuple[float, float] | None = None,
    color: str | None = None,
    alpha: float | None = None,
    mode: str = "quiver",
    stream_kwargs: Mapping[str, Any] | None = None,
    nullclines: bool = False,
    nullcline_grid: tuple[int, int] | int | None = None,
    nullcline_style: Mapping[str, Any] | None = None,
    eigvecs=None,
    origin: bool = True,
    equal_aspect: bool = True,
    xlabel: str | None = None,
    ylabel: str | None = None,
    title: str | None = None,
) -> VectorFieldHandle:
    """
    Draw a quiver or streamline plot of f(state, params, t) and return a handle with .update().

    Quiver arrows are drawn in data units: an arrow spans `scale * f(x, y)`
    (or `scale` times the unit direction when `normalize`).

    Args:
        xlim, ylim: Sampling rectangle for the grid.
        plot_xlim, plot_ylim: Visible axes limits (default: the sampling rectangle).
        mode: "quiver" (default) for arrows, "stream" for matplotlib.streamplot().
        stream_kwargs: Extra keyword arguments forwarded to matplotlib.streamplot() when mode="stream".
        nullclines: Overlay the zero contours of x' and y', computed on a denser,
                    un-normalized grid (override with nullcline_grid).
        eigvecs: Optional 2x2 array whose columns are drawn as arrows from the origin.
        origin: Draw the axes spines through (0, 0).
    """
    mode_norm = _resolve_mode(mode)
    grid = _coerce_grid(grid)
    resolved_nc_grid = _coerce_grid(nullcline_grid) if nullcline_grid is not None else _default_nullcline_grid(grid)

    X, Y, U, V = eval_vectorfield(
        f, params, xlim=xlim, ylim=ylim, grid=grid, normalize=normalize, scale=scale,
    )

    plot_ax = _get_ax(ax)
    if origin:
        _origin_frame(plot_ax)
    if equal_aspect:
        plot_ax.set_aspect("equal", adjustable="box")

    field_color = _theme.get("field_color") if color is None else color
    field_alpha = _theme.get("field_alpha") if alpha is None else alpha
    quiver_kwargs = {
        "color": field_color,
        "alpha": field_alpha,
        "pivot": "tail",
        "angles": "xy",
        "scale_units": "xy",
        "scale": 1.0,
        "width": 0.004,
    }
    stream_kwargs_resolved = dict(stream_kwargs or {})
    stream_kwargs_resolved.setdefault("color", field_color)

    quiver = None
    stream = None
    if mode_norm == "quiver":
        quiver = plot_ax.quiver(X, Y, U, V, **quiver_kwargs)
    else:
        stream = plot_ax.streamplot(X, Y, U, V, **stream_kwargs_resolved)

    handle = VectorFieldHandle(
        ax=plot_ax,
        f=f,
        params=params,
        X=X,
        Y=Y,
        U=U,
        V=V,
        mode=mode_norm,
        quiver=quiver,
        stream=stream,
        quiver_kwargs=quiver_kwargs,
        stream_kwargs=stream_kwargs_resolved,
        normalize=bool(normalize),
        scale=float(scale),
        xlim=(float(xlim[0]), float(xlim[1])),
        ylim=(float(ylim[0]), float(ylim[1])),
        grid=grid,
        nullclines_enabled=bool(nullclines),
        nullcline_grid=resolved_nc_grid,
        nullcline_style=dict(nullcline_style or {}),
        nullcline_artists=[],
        eigvec_artists=[],
    )
    if nullclines:
        handle._redraw_nullclines()
    if eigvecs is not None:
        handle.eigvec_artists.extend(_draw_eigvecs(plot_ax, eigvecs))

    _apply_limits(
        plot_ax,
        xlim=plot_xlim if plot_xlim is not None else xlim,
        ylim=plot_ylim if plot_ylim is not None else ylim,
    )
    _apply_labels(plot_ax, xlabel=xlabel, ylabel=ylabel, title=title)
    return handle


def linear_vectorfield(
    A,
    *,
    normalize: bool = False,
    scale: float = 0.2,
    ax=None,
    grid: int = 25,
) -> VectorFieldHandle:
    """
    Field of x' = A x with its eigenvectors, titled with the eigenvalues.

    Samples x in [-2, 2], y in [-1, 1] and shows (-1.5, 1.5) x (-0.75, 0.75).
    """
    A = np.asarray(A, dtype=float)
    vals, vecs = eigensystem(A)
    return vectorfield(
        linear_field(A),
        ax=ax,
        xlim=(-2.0, 2.0),
        ylim=(-1.0, 1.0),
        grid=grid,
        normalize=normalize,
        scale=scale,
        plot_xlim=(-1.5, 1.5),
        plot_ylim=(-0.75, 0.75),
        eigvecs=vecs,
        title=format_eigenvalues(vals),
    )
