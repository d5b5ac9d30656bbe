# src/flowlab/plot/_export.py
from __future__ import annotations
from pathlib import Path
from typing import Iterable
import matplotlib.pyplot as plt
from matplotlib.backend_bases import FigureCanvasBase

__all__ = ["savefig", "show", "supported_formats"]


def supported_formats() -> dict[str, str]:
    """Extension -> description for every format matplotlib can write."""
    return dict(FigureCanvasBase.get_supported_filetypes())


def _figure_of(obj) -> plt.Figure:
    # Axes carry .figure; a Figure is returned as is
    fig = getattr(obj, "figure", None)
    return obj if fig is None else fig


def _format_of(path: Path, supported) -> str | None:
    """The path's extension if matplotlib can write it ("x.6.3.10-field" has none)."""
    ext = path.suffix.lower().lstrip(".")
    return ext if ext in supported else None


def _resolve_targets(path: Path, fmts: Iterable[str] | None, supported) -> list[tuple[Path, str]]:
    ext = _format_of(path, supported)
    if ext is not None:
        if fmts is not None:
            raise ValueError(
                f"Path '{path}' already has the extension '.{ext}'; pass fmts only with an extensionless path."
            )
        return [(path, ext)]

    wanted: list[str] = []
    for raw in ("png",) if fmts is None else fmts:
        fmt = str(raw).strip().lower().lstrip(".")
        if fmt and fmt not in wanted:
            wanted.append(fmt)
    if not wanted:
        raise ValueError("fmts must contain at least one non-empty format.")
    unknown = [fmt for fmt in wanted if fmt not in supported]
    if unknown:
        raise ValueError(
            f"Unsupported format(s): {', '.join(unknown)}. Choose from: {', '.join(sorted(supported))}."
        )
    return [(path.with_name(f"{path.name}.{fmt}"), fmt) for fmt in wanted]


def savefig(
    fig_or_ax,
    path: str | Path,
    *,
    fmts: Iterable[str] | None = None,
    dpi: int = 300,
    transparent: bool = False,
    pad: float = 0.05,
    bbox_inches: str | None = "tight",
) -> list[Path]:
    """
    Write a figure (or the figure of an axes) to disk.

    A path ending in a format matplotlib knows ("fig.pdf") is written as is.
    Otherwise one file <path>.<fmt> is written per entry of `fmts` (default
    png); duplicates and leading dots are ignored. Passing `fmts` together
    with a known extension raises ValueError. Parent directories are created.

    Returns the written paths, in `fmts` order.
    """
    fig = _figure_of(fig_or_ax)
    targets = _resolve_targets(Path(path), fmts, fig.canvas.get_supported_filetypes())
    targets[0][0].parent.mkdir(parents=True, exist_ok=True)
    for outfile, fmt in targets:
        fig.savefig(
            outfile,
            format=fmt,
            dpi=dpi,
            transparent=transparent,
            bbox_inches=bbox_inches,
            pad_inches=pad,
        )
    return [outfile for outfile, _ in targets]


def show() -> None:
    plt.show()
