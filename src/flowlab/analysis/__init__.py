# src/flowlab/analysis/__init__.py
"""Numerical experiments built on top of the steppers."""
from .error import (
    euler_error_vs_dt,
    default_dt_range,
    roundoff_dt_range,
    derivative_dt_range,
    reciprocal_product,
    forward_difference,
    forward_difference_error,
)

__all__ = [
    "euler_error_vs_dt",
    "default_dt_range",
    "roundoff_dt_range",
    "derivative_dt_range",
    "reciprocal_product",
    "forward_difference",
    "forward_difference_error",
]
