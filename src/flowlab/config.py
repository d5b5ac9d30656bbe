# src/flowlab/config.py
"""
User configuration for flowlab.

Resolution order (later wins):
  1. Built-in defaults (`Config()`)
  2. TOML file: FLOWLAB_CONFIG, or the platform config dir
     (Linux: $XDG_CONFIG_HOME/flowlab/config.toml or ~/.config/flowlab/config.toml,
      macOS: ~/Library/Application Support/flowlab/config.toml,
      Windows: %APPDATA%/flowlab/config.toml)
  3. Environment overrides: FLOWLAB_OUTPUT_DIR, FLOWLAB_THEME

File layout::

    [flowlab]
    theme = "lecture"
    output_dir = "figures"
    fmts = ["png", "pdf"]
    dpi = 200
    grid = 25
    jit = false
    max_steps = 10000000
"""
from __future__ import annotations

import os
import sys
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Tuple

from flowlab.errors import ConfigError
from flowlab.plot._export import supported_formats

__all__ = ["Config", "load_config", "_get_config_path"]


@dataclass(frozen=True)
class Config:
    theme: str = "notebook"
    output_dir: str = "figures"
    fmts: Tuple[str, ...] = ("png",)
    dpi: int = 150
    grid: int = 25
    jit: bool = False
    max_steps: int = 10_000_000

    def as_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _get_config_path() -> Path:
    """Return the config file path for this platform (file may not exist)."""
    env = os.environ.get("FLOWLAB_CONFIG")
    if env:
        return Path(env).expanduser().resolve()

    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else Path.home() / ".config"
    return (base / "flowlab" / "config.toml").resolve()


def _check_type(key: str, value: Any, expected: type) -> Any:
    # bool is an int subclass; keep them apart
    if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
        raise ConfigError(f"[flowlab].{key} must be an integer, got {value!r}")
    if expected is bool and not isinstance(value, bool):
        raise ConfigError(f"[flowlab].{key} must be a boolean, got {value!r}")
    if expected is str and not isinstance(value, str):
        raise ConfigError(f"[flowlab].{key} must be a string, got {value!r}")
    return value


def _coerce_section(section: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(Config)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigError(f"Unknown [flowlab] keys: {', '.join(unknown)}")

    out: Dict[str, Any] = {}
    for key, value in section.items():
        if key == "fmts":
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError("[flowlab].fmts must be a string or list of strings")
            if not value:
                raise ConfigError("[flowlab].fmts must not be empty")
            fmts = tuple(v.strip().lower().lstrip(".") for v in value)
            supported = supported_formats()
            bad = [f for f in fmts if f not in supported]
            if bad:
                raise ConfigError(
                    f"[flowlab].fmts has unsupported format(s): {', '.join(bad)}. "
                    f"Choose from: {', '.join(sorted(supported))}"
                )
            out[key] = fmts
        elif key in ("dpi", "grid", "max_steps"):
            _check_type(key, value, int)
            if value <= 0:
                raise ConfigError(f"[flowlab].{key} must be positive, got {value}")
            out[key] = value
        elif key == "jit":
            out[key] = _check_type(key, value, bool)
        else:
            out[key] = _check_type(key, value, str)
    return out


def load_config() -> Config:
    """
    Load the flowlab config. A missing file yields the defaults.

    Raises:
        ConfigError: malformed TOML or invalid values.
    """
    path = _get_config_path()
    values: Dict[str, Any] = {}
    if path.exists():
        try:
            with open(path, "rb") as fh:
                data = tomllib.load(fh)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

        section = data.get("flowlab", {})
        if not isinstance(section, dict):
            raise ConfigError("[flowlab] must be a table")
        values = _coerce_section(section)

    config = replace(Config(), **values)

    env_out = os.environ.get("FLOWLAB_OUTPUT_DIR")
    if env_out:
        config = replace(config, output_dir=env_out)
    env_theme = os.environ.get("FLOWLAB_THEME")
    if env_theme:
        config = replace(config, theme=env_theme)
    return config
