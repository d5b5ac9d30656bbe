from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Literal, Protocol

__all__ = ["StepperMeta", "StepperSpec"]

Scheme = Literal["explicit", "implicit"]


@dataclass(frozen=True)
class StepperMeta:
    """
    Public metadata for a fixed-step stepper.
    """
    name: str
    order: int = 1
    scheme: Scheme = "explicit"
    family: str = ""
    aliases: tuple[str, ...] = ()


class StepperSpec(Protocol):
    """
    Interface for fixed-step steppers used by `flowlab.simulate.integrate`.
    Implementations MUST:
      - accept `meta: StepperMeta | None` in __init__
      - provide `emit() -> Callable` returning a kernel with the signature
            kernel(f, x0, dt, n_steps, out) -> None
        which writes x0 to out[0] and the n-th step to out[n].
        `out` has shape (n_steps + 1,) for scalar ODEs or
        (n_steps + 1, n_state) for vector ODEs.

    Kernels must only use numpy array indexing and arithmetic so that
    numba.njit can compile them unchanged.
    """

    meta: StepperMeta

    def __init__(self, meta: StepperMeta | None = None) -> None: ...
    def emit(self) -> Callable: ...
