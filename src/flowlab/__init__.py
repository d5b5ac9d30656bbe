# src/flowlab/__init__.py
from __future__ import annotations

from .errors import (
    FlowlabError, ConfigError, MatrixParseError, LessonNotFoundError,
    SectionNotFoundError, ControlError, FlowlabWarning,
)
from .steppers.base import StepperMeta, StepperSpec
from .steppers.registry import register, get_stepper, registry

from .simulate import Solution, Trajectory, integrate, solve_trajectory
from .config import Config, load_config
from .lessons import Lesson, Section, get_lesson

__version__ = "0.3.0"

__all__ = [
    # Core entry points
    "integrate", "solve_trajectory", "Solution", "Trajectory",
    # Lessons
    "Lesson", "Section", "get_lesson", "lessons",
    # Configuration
    "Config", "load_config",
    # Stepper registry
    "StepperMeta", "StepperSpec", "register", "get_stepper", "registry",
    # Errors
    "FlowlabError", "ConfigError", "MatrixParseError", "LessonNotFoundError",
    "SectionNotFoundError", "ControlError", "FlowlabWarning",
]
