# src/flowlab/lessons/linear_systems.py
"""Planar linear systems x' = A x: vector field, eigenvectors, and a Jordan block."""
from __future__ import annotations

from flowlab.errors import MatrixParseError
from flowlab.models.linear import (
    ENTRY_NAMES,
    IDENTITY_PLACEHOLDERS,
    eigensystem,
    format_eigenvalues,
    jordan_block,
    parse_matrix,
)
from flowlab.plot import decor, linear_vectorfield
from flowlab.widgets import CheckboxSpec, SliderSpec, TextSpec

from .base import Lesson, Section, options, sections
from .registry import register_lesson

_NORMALIZE = CheckboxSpec("normalize", label="Normalize arrows?")
_SCALE = SliderSpec("scale", 0.001, 0.5, 0.005, default=0.2, label="arrow scale", fmt="%.3f")
_ENTRIES = tuple(
    TextSpec(name, label=name, placeholder=IDENTITY_PLACEHOLDERS[name]) for name in ENTRY_NAMES
)


def render_matrix(ax, values) -> None:
    try:
        A = parse_matrix({k: values[k] for k in ENTRY_NAMES}, IDENTITY_PLACEHOLDERS)
    except MatrixParseError as exc:
        decor.message(str(exc), ax=ax)
        return
    linear_vectorfield(A, normalize=values["normalize"], scale=values["scale"], ax=ax, grid=options().grid)


def render_jordan(ax, values) -> None:
    eps = values["eps"]
    A = jordan_block(eps)
    linear_vectorfield(A, normalize=values["normalize"], scale=values["scale"], ax=ax, grid=options().grid)
    vals, _vecs = eigensystem(A)
    ax.set_title(f"ε = {eps:g}, {format_eigenvalues(vals)}")


LESSON = register_lesson(
    Lesson(
        name="linear-systems",
        title="Linear Systems",
        date="2021-04-28",
        summary="The vector field of x' = A x and its eigenvectors (teal: first, red: second).",
        sections=sections(
            Section(
                "matrix", "Vector field of x' = A x", render_matrix,
                controls=_ENTRIES + (_NORMALIZE, _SCALE),
                notes="Empty entries fall back to the identity matrix.",
            ),
            Section(
                "jordan", "J(ε) = [[-1, 4], [ε, -1]] as ε → 0", render_jordan,
                controls=(
                    SliderSpec("pow", -14, 4, 1, default=0, transform="pow2", target="eps", label="log₂ ε", fmt="%d"),
                    _NORMALIZE,
                    _SCALE,
                ),
                notes="At ε = 0, J is a Jordan block with a single eigenvector; the two eigenvectors merge as ε → 0.",
            ),
        ),
    )
)
