# src/flowlab/errors.py
from __future__ import annotations
from typing import Iterable, List

__all__ = [
    "FlowlabError",
    "ConfigError",
    "MatrixParseError",
    "LessonNotFoundError",
    "SectionNotFoundError",
    "ControlError",
    "FlowlabWarning",
]

class FlowlabError(Exception):
    """Base error for the flowlab package."""


class ConfigError(FlowlabError):
    """Raised when configuration file is malformed or invalid."""
    def __init__(self, message: str):
        super().__init__(message)


class MatrixParseError(FlowlabError):
    """Raised when a matrix entry typed by the user is not a number."""
    def __init__(self, entry: str, text: str):
        self.entry = entry
        self.text = text
        super().__init__(f"Matrix entry {entry} = {text!r} is not a number.")


class LessonNotFoundError(FlowlabError):
    """Raised when a lesson name is not registered."""
    def __init__(self, name: str, available: Iterable[str]):
        self.name = name
        self.available: List[str] = sorted(available)
        msg = f"Lesson not found: {name}\n"
        if self.available:
            msg += "Available lessons:\n"
            for a in self.available:
                msg += f"  - {a}\n"
        super().__init__(msg)


class SectionNotFoundError(FlowlabError):
    """Raised when a lesson has no section with the requested name."""
    def __init__(self, lesson: str, section: str, available: Iterable[str]):
        self.lesson = lesson
        self.section = section
        self.available = list(available)
        msg = f"Lesson '{lesson}' has no section '{section}'.\n"
        msg += "Sections: " + ", ".join(self.available)
        super().__init__(msg)


class ControlError(FlowlabError):
    """Raised when a control override names an unknown control or has a bad value."""
    def __init__(self, message: str):
        super().__init__(message)


class FlowlabWarning(UserWarning):
    """Category for non-fatal flowlab diagnostics."""
