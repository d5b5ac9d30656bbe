# src/flowlab/lessons/registry.py
from __future__ import annotations
from typing import Dict

from flowlab.errors import LessonNotFoundError

from .base import Lesson

__all__ = ["register_lesson", "get_lesson", "lessons"]

# name -> lesson
_registry: Dict[str, Lesson] = {}

def register_lesson(lesson: Lesson) -> Lesson:
    """
    Register a lesson under its name. Re-registering the same instance is a
    no-op; a different lesson under a taken name is rejected.
    """
    existing = _registry.get(lesson.name)
    if existing is not None and existing is not lesson:
        raise ValueError(f"Lesson '{lesson.name}' already registered.")
    _registry[lesson.name] = lesson
    return lesson

def get_lesson(name: str) -> Lesson:
    try:
        return _registry[name]
    except KeyError:
        raise LessonNotFoundError(name, _registry) from None

def lessons() -> Dict[str, Lesson]:
    """Registered lessons in course order (by date)."""
    return dict(sorted(_registry.items(), key=lambda kv: (kv[1].date, kv[0])))
