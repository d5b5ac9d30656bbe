# src/flowlab/plot/animation.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation, PillowWriter

from flowlab.models.firefly import Firefly, is_flashing

from . import _theme

__all__ = ["PhaseAnimation", "phase_animate", "draw_firefly", "save_gif"]

_CIRCLE = np.linspace(0.0, 2.0 * np.pi, 200)
_FIREFLY_COLOR = "red"
_FLASHLIGHT_COLOR = "blue"


@dataclass
class PhaseAnimation:
    figure: Any
    ax: Any
    animation: FuncAnimation
    firefly: Firefly
    frames: int


def draw_firefly(ax, firefly: Firefly) -> None:
    """Draw one frame of the firefly/flashlight picture for the current state."""
    ax.clear()
    ax.plot(np.cos(_CIRCLE), np.sin(_CIRCLE), color=_theme.get("traj_color"), lw=1.2)
    (fx, fy), (lx, ly) = firefly.angles()
    ax.scatter([fx, lx], [fy, ly], c=[_FIREFLY_COLOR, _FLASHLIGHT_COLOR], s=49, zorder=3)

    ax.plot([0.0, lx], [0.0, ly], color=_FLASHLIGHT_COLOR, linestyle="-")
    ax.plot([0.0, fx], [0.0, fy], color=_FIREFLY_COLOR, linestyle="--")

    ax.text(1.0, 1.0, "Firefly", color=_FIREFLY_COLOR, ha="right", va="top")
    ax.text(1.0, 1.0, "Flashlight", color=_FLASHLIGHT_COLOR, ha="right", va="bottom")
    mid = 0.5 * (firefly.alpha + firefly.theta)
    ax.text(0.2 * np.cos(mid), 0.2 * np.sin(mid), "ϕ", fontsize=15, ha="center", va="center")
    ax.text(-1.0, 1.0, f"ϕ = {firefly.phase:4f}", fontsize=12, ha="left", va="bottom")

    if is_flashing(firefly.alpha):
        ax.fill(np.cos(_CIRCLE), np.sin(_CIRCLE), color=_FLASHLIGHT_COLOR, alpha=0.35)
    if is_flashing(firefly.theta):
        ax.fill(np.cos(_CIRCLE), np.sin(_CIRCLE), color=_FIREFLY_COLOR, alpha=0.35)

    ax.set_xlim(-1.15, 1.15)
    ax.set_ylim(-1.15, 1.25)
    ax.set_aspect("equal", adjustable="box")
    ax.set_axis_off()


def phase_animate(
    firefly: Firefly | None = None,
    *,
    frames: int = 450,
    interval: int = 40,
    ax=None,
) -> PhaseAnimation:
    """
    Animate a Firefly: each frame draws the current state, then steps it.

    The firefly is mutated as frames are produced; pass a fresh one per
    animation.
    """
    if frames < 1:
        raise ValueError(f"frames must be >= 1, got {frames}")
    firefly = Firefly() if firefly is None else firefly
    if ax is None:
        fig, ax = plt.subplots(figsize=(5.0, 5.0), layout="constrained")
    else:
        fig = ax.figure

    def _init():
        draw_firefly(ax, firefly)
        return []

    def _frame(_i):
        draw_firefly(ax, firefly)
        firefly.step()
        return []

    anim = FuncAnimation(
        fig,
        _frame,
        frames=int(frames),
        init_func=_init,
        interval=int(interval),
        blit=False,
        repeat=False,
    )
    return PhaseAnimation(figure=fig, ax=ax, animation=anim, firefly=firefly, frames=int(frames))


def save_gif(anim: PhaseAnimation | FuncAnimation, path: str | Path, *, fps: int = 25, dpi: int = 100) -> Path:
    """Encode an animation as GIF through Pillow and return the written path."""
    target = Path(path)
    if target.suffix.lower() != ".gif":
        target = target.with_suffix(".gif")
    target.parent.mkdir(parents=True, exist_ok=True)
    func_anim = anim.animation if isinstance(anim, PhaseAnimation) else anim
    func_anim.save(str(target), writer=PillowWriter(fps=int(fps)), dpi=dpi)
    return target
