# src/flowlab/jit.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable

from numba import njit

# JIT toggle applied *only here*.
# jit=False hands back the original Python callable.

__all__ = ["JittedCallable", "jit_compile"]


@dataclass(frozen=True)
class JittedCallable:
    fn: Callable
    jitted: bool


def jit_compile(fn: Callable, *, jit: bool = True) -> JittedCallable:
    """
    Centralized JIT compilation with consistent error handling.

    Behavior:
        - If jit=False: returns original Python function
        - If jit=True: returns numba.njit(fn); an already-compiled
          dispatcher is passed through unchanged

    Compilation itself happens on the first call; callers translate the
    numba errors raised there (see `flowlab.simulate.integrate`).

    Raises:
        RuntimeError: If numba rejects the function up front
    """
    if not jit:
        return JittedCallable(fn=fn, jitted=False)

    if hasattr(fn, "py_func"):
        return JittedCallable(fn=fn, jitted=True)

    try:
        compiled = njit(cache=False)(fn)
    except Exception as e:
        raise RuntimeError(
            f"JIT compilation with numba failed: {type(e).__name__}: {e}"
        ) from e
    return JittedCallable(fn=compiled, jitted=True)
