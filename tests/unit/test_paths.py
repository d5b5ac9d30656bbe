# tests/unit/test_paths.py
"""
Unit tests for config file resolution and loading.

Tests cover:
- Config file location per platform
- FLOWLAB_CONFIG override
- TOML loading, validation and error messages
- Environment overrides applied after the file
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

from flowlab.config import Config, _get_config_path, load_config
from flowlab.errors import ConfigError


# ---- _get_config_path tests -------------------------------------------------

def test_get_config_path_env_override(monkeypatch):
    """FLOWLAB_CONFIG env var overrides default path."""
    custom_path = "/custom/config.toml"
    monkeypatch.setenv("FLOWLAB_CONFIG", custom_path)

    result = _get_config_path()
    assert str(result) == str(Path(custom_path).expanduser().resolve())


def test_get_config_path_linux(monkeypatch):
    """Linux uses XDG_CONFIG_HOME when set."""
    monkeypatch.delenv("FLOWLAB_CONFIG", raising=False)
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", "/home/user/.config")

    result = _get_config_path()
    assert result == Path("/home/user/.config/flowlab/config.toml").resolve()


def test_get_config_path_linux_no_xdg(monkeypatch):
    monkeypatch.delenv("FLOWLAB_CONFIG", raising=False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setattr(sys, "platform", "linux")

    result = _get_config_path()
    expected = Path.home() / ".config" / "flowlab" / "config.toml"
    assert result == expected.resolve()


def test_get_config_path_macos(monkeypatch):
    monkeypatch.delenv("FLOWLAB_CONFIG", raising=False)
    monkeypatch.setattr(sys, "platform", "darwin")

    result = _get_config_path()
    expected = Path.home() / "Library" / "Application Support" / "flowlab" / "config.toml"
    assert result == expected.resolve()


def test_get_config_path_windows(monkeypatch):
    """Windows uses %APPDATA%."""
    monkeypatch.delenv("FLOWLAB_CONFIG", raising=False)
    monkeypatch.setattr(sys, "platform", "win32")
    monkeypatch.setenv("APPDATA", "C:\\Users\\test\\AppData\\Roaming")

    result_str = str(_get_config_path())
    assert "flowlab" in result_str
    assert "config.toml" in result_str


# ---- load_config tests ------------------------------------------------------

def test_load_config_no_file(tmp_path, monkeypatch):
    """Missing config file yields the defaults."""
    monkeypatch.setenv("FLOWLAB_CONFIG", str(tmp_path / "missing.toml"))
    assert load_config() == Config()


def test_load_config_reads_flowlab_table(tmp_path, monkeypatch):
    cfg_file = tmp_path / "config.toml"
    cfg_file.write_text(
        '[flowlab]\n'
        'theme = "lecture"\n'
        'output_dir = "out"\n'
        'fmts = ["PNG", ".pdf"]\n'
        'dpi = 200\n'
        'grid = 15\n'
        'jit = true\n'
        'max_steps = 5000\n'
    )
    monkeypatch.setenv("FLOWLAB_CONFIG", str(cfg_file))

    cfg = load_config()
    assert cfg.theme == "lecture"
    assert cfg.output_dir == "out"
    assert cfg.fmts == ("png", "pdf")
    assert cfg.dpi == 200
    assert cfg.grid == 15
    assert cfg.jit is True
    assert cfg.max_steps == 5000


def test_load_config_single_fmt_string(tmp_path, monkeypatch):
    cfg_file = tmp_path / "config.toml"
    cfg_file.write_text('[flowlab]\nfmts = "svg"\n')
    monkeypatch.setenv("FLOWLAB_CONFIG", str(cfg_file))

    assert load_config().fmts == ("svg",)


def test_load_config_malformed_toml(tmp_path, monkeypatch):
    cfg_file = tmp_path / "config.toml"
    cfg_file.write_text("[flowlab\ntheme = \n")
    monkeypatch.setenv("FLOWLAB_CONFIG", str(cfg_file))

    with pytest.raises(ConfigError, match="Failed to load config"):
        load_config()


def test_load_config_section_must_be_table(tmp_path, monkeypatch):
    cfg_file = tmp_path / "config.toml"
    cfg_file.write_text('flowlab = "lecture"\n')
    monkeypatch.setenv("FLOWLAB_CONFIG", str(cfg_file))

    with pytest.raises(ConfigError, match="must be a table"):
        load_config()


def test_load_config_unknown_key(tmp_path, monkeypatch):
    cfg_file = tmp_path / "config.toml"
    cfg_file.write_text('[flowlab]\ncolour = "red"\n')
    monkeypatch.setenv("FLOWLAB_CONFIG", str(cfg_file))

    with pytest.raises(ConfigError, match="colour"):
        load_config()


@pytest.mark.parametrize(
    "line, message",
    [
        ('dpi = "high"', "dpi must be an integer"),
        ("dpi = true", "dpi must be an integer"),
        ("grid = 0", "grid must be positive"),
        ('jit = "yes"', "jit must be a boolean"),
        ("theme = 3", "theme must be a string"),
        ("fmts = []", "fmts must not be empty"),
        ("fmts = [1, 2]", "fmts must be a string or list"),
        ('fmts = ["png", "nope"]', "unsupported format\\(s\\): nope"),
    ],
)
def test_load_config_rejects_bad_values(tmp_path, monkeypatch, line, message):
    cfg_file = tmp_path / "config.toml"
    cfg_file.write_text(f"[flowlab]\n{line}\n")
    monkeypatch.setenv("FLOWLAB_CONFIG", str(cfg_file))

    with pytest.raises(ConfigError, match=message):
        load_config()


def test_env_overrides_win_over_file(tmp_path, monkeypatch):
    cfg_file = tmp_path / "config.toml"
    cfg_file.write_text('[flowlab]\ntheme = "lecture"\noutput_dir = "from-file"\n')
    monkeypatch.setenv("FLOWLAB_CONFIG", str(cfg_file))
    monkeypatch.setenv("FLOWLAB_OUTPUT_DIR", "from-env")
    monkeypatch.setenv("FLOWLAB_THEME", "dark")

    cfg = load_config()
    assert cfg.output_dir == "from-env"
    assert cfg.theme == "dark"


def test_config_as_dict_lists_every_field():
    d = Config().as_dict()
    assert list(d) == ["theme", "output_dir", "fmts", "dpi", "grid", "jit", "max_steps"]
    assert d["fmts"] == ("png",)
