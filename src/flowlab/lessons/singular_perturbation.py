# src/flowlab/lessons/singular_perturbation.py
"""Singular perturbation: the RC circuit on different time scales, then the bead on a hoop."""
from __future__ import annotations

import numpy as np

from flowlab.models.scalar import (
    bead_on_hoop_full,
    bead_on_hoop_reduced,
    rc_nondim,
    zoomed_sinc,
)
from flowlab.plot import _theme, decor, series
from flowlab.widgets import SliderSpec

from .base import Lesson, Section, sections
from .registry import register_lesson

# q0 values of the family plot: 0, 0.21, ..., 1.68
FAMILY_Q0 = tuple(np.round(0.21 * np.arange(9), 2))

_Q0 = SliderSpec("q0", 0.0, 2.0, 0.05, default=0.25, label="q₀", fmt="%.2f")
_RC_POW = SliderSpec("pow", -6, 10, 1, default=2, transform="pow2", target="rc_by_t", fmt="%d")


def render_charging(ax, values) -> None:
    q0 = values["q0"]
    series.function(
        lambda t: rc_nondim(t, q0), (0.0, 10.0), label="q(t)", ylim=(0.0, 2.5),
        xlabel="t", ylabel="q", ax=ax,
    )
    decor.hlines([1.0], ax=ax, alpha=0.7)
    decor.annotate(0.0, q0, f"q₀ = {q0:g}", color=_theme.get("exact_color"), fontsize=13, ax=ax)
    ax.tick_params(labelbottom=False, labelleft=False)


def render_sinc_zoom(ax, values) -> None:
    S = values["S"]
    series.function(
        lambda tau: zoomed_sinc(tau, S), (0.0, 40.0), n=2000, ylim=(-1.3, 1.3),
        alpha=0.9, xlabel="τ", ylabel="f(τ)", title=f"S = {S:g}", ax=ax,
    )


def render_rescaled(ax, values) -> None:
    q0, rc_by_t = values["q0"], values["rc_by_t"]
    series.function(
        lambda tau: rc_nondim(tau, q0, rc_by_t), (0.0, 40.0), label="q(τ)",
        ylim=(0.0, 2.5), xlabel="τ", ylabel="q(τ)", title=f"RC/T = {rc_by_t:g}", ax=ax,
    )


def render_family(ax, values) -> None:
    rc_by_t = values["rc_by_t"]
    for q0 in FAMILY_Q0:
        series.function(
            lambda tau, q0=q0: rc_nondim(tau, q0, rc_by_t), (0.0, 40.0),
            alpha=0.7, legend=False, ax=ax,
        )
    ax.set_ylim(0.0, 2.0)
    ax.set_xlabel("τ")
    ax.set_ylabel("q(τ)")
    ax.set_title(f"RC/T = {rc_by_t:g}")


def render_bead(ax, values) -> None:
    eps, gamma = values["eps"], values["gamma"]
    phi0, dphi0, tfinal = values["phi0"], 0.0, 10.0
    full = bead_on_hoop_full(eps, gamma, phi0, dphi0, tfinal)
    reduced = bead_on_hoop_reduced(gamma, phi0, tfinal)
    series.plot(
        x=full.t, y=full.y[0], label=f"ε φ'' + φ' = f(φ), ε = {eps:g}",
        color=_theme.get("numeric_color"), legend=False, ax=ax,
    )
    series.plot(
        x=reduced.t, y=reduced.y[0], label="φ' = f(φ)", style="dashed",
        color=_theme.get("exact_color"), xlabel="t", ylabel="φ",
        title=f"Overdamped bead on a hoop, γ = {gamma:g}", ax=ax,
    )
    if gamma > 1.0:
        phi_star = float(np.arccos(1.0 / gamma))
        decor.hlines([phi_star, -phi_star], ax=ax)
    decor.hlines([0.0], ax=ax, alpha=0.3)


LESSON = register_lesson(
    Lesson(
        name="singular-perturbation",
        title="Singular Perturbation Theory",
        date="2021-04-14",
        summary="When can the highest derivative be dropped? Compare time scales.",
        sections=sections(
            Section(
                "charging", "Capacitor charging revisited: RC q' = 1 − q", render_charging,
                controls=(_Q0,),
            ),
            Section(
                "sinc-zoom", "Rescaling time: sin(t)/t with t = τ S", render_sinc_zoom,
                controls=(SliderSpec("spow", -6, 6, 1, default=-4, transform="pow2", target="S", fmt="%d"),),
                notes="Zooming in or out of t squeezes or stretches the graph in τ.",
            ),
            Section(
                "rescaled", "(RC/T) dq/dτ = 1 − q", render_rescaled,
                controls=(_Q0, _RC_POW),
            ),
            Section(
                "family", "All initial conditions at once", render_family,
                controls=(_RC_POW,),
                notes="For RC/T << 1 every solution slams into q = 1; for RC/T >> 1 they barely move.",
            ),
            Section(
                "bead", "Overdamped bead on a rotating hoop", render_bead,
                controls=(
                    SliderSpec("epow", -8, 2, 1, default=-4, transform="pow2", target="eps", label="log₂ ε", fmt="%d"),
                    SliderSpec("gamma", 0.0, 3.0, 0.1, default=2.0, label="γ", fmt="%.1f"),
                    SliderSpec("phi0", -3.0, 3.0, 0.1, default=0.3, label="φ₀", fmt="%.1f"),
                ),
                notes="The full solution starts at φ'(0) = 0 and catches the reduced one after a transient of length ~ε.",
            ),
        ),
    )
)
