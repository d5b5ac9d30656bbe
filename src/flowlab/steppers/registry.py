# src/flowlab/steppers/registry.py
from __future__ import annotations
from typing import Dict

from .base import StepperSpec

__all__ = ["register", "get_stepper", "registry"]

_by_name: Dict[str, StepperSpec] = {}
# alias -> canonical name
_aliases: Dict[str, str] = {}


def _key(name: str) -> str:
    return name.strip().lower().replace("-", "_")


def register(spec: StepperSpec) -> None:
    """
    Add a stepper under `spec.meta.name`, reachable also through its aliases.

    Registering the same instance twice is harmless. A different spec under
    a taken name or alias raises ValueError.
    """
    name = _key(spec.meta.name)
    taken = _by_name.get(name)
    if taken is not None and taken is not spec:
        raise ValueError(f"Stepper name '{name}' is taken by {type(taken).__name__}.")

    aliases = [_key(a) for a in spec.meta.aliases]
    for alias in aliases:
        owner = _aliases.get(alias, alias if alias in _by_name else None)
        if owner is not None and owner != name:
            raise ValueError(f"Stepper alias '{alias}' already points at '{owner}'.")

    _by_name[name] = spec
    for alias in aliases:
        _aliases[alias] = name


def get_stepper(name: str) -> StepperSpec:
    """Look a stepper up by name or alias ("Forward-Euler" == "forward_euler")."""
    key = _key(name)
    spec = _by_name.get(_aliases.get(key, key))
    if spec is None:
        raise KeyError(f"Unknown stepper '{name}'. Available: {', '.join(sorted(_by_name))}")
    return spec


def registry() -> Dict[str, StepperSpec]:
    """Canonical name -> spec. Aliases are not repeated."""
    return dict(_by_name)
