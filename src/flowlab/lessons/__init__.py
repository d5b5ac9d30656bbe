# src/flowlab/lessons/__init__.py
"""
Lessons, one per notebook. Importing a lesson module registers it.
"""
from .base import Lesson, Section, RenderOptions, configure, options
from .registry import register_lesson, get_lesson, lessons

from . import forward_euler, singular_perturbation, circle_flows, linear_systems, phase_plane

__all__ = [
    "Lesson",
    "Section",
    "RenderOptions",
    "configure",
    "options",
    "register_lesson",
    "get_lesson",
    "lessons",
]
