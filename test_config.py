"""Tests for settings parsing and loading."""

from pathlib import Path

import pytest

from dock_mcp.config import DEFAULT_OUTPUT_DIR, DockSettings, load_settings, parse_settings
from dock_mcp.errors import ConfigError


SETTINGS_YAML = """
drop_margin: 24
drop_depth: 3
divider_min_px: 80
viewport:
  width: 1600
  height: 900
theme: light
verify_invariants: true
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("DOCK_CONFIG", raising=False)
    monkeypatch.delenv("DOCK_OUTPUT_DIR", raising=False)


def test_defaults():
    settings = DockSettings()
    assert settings.drop_margin == 20
    assert settings.drop_depth == 2
    assert settings.divider_min_px == 100
    assert (settings.viewport.width, settings.viewport.height) == (1000, 1000)
    assert settings.theme == "dark"
    assert settings.output_dir == DEFAULT_OUTPUT_DIR
    assert settings.verify_invariants is False
    assert settings.log_level == "INFO"


def test_parse_settings():
    settings = parse_settings(SETTINGS_YAML)
    assert settings.drop_margin == 24
    assert settings.drop_depth == 3
    assert settings.divider_min_px == 80
    assert (settings.viewport.width, settings.viewport.height) == (1600, 900)
    assert settings.theme == "light"
    assert settings.verify_invariants is True


def test_empty_document_gives_defaults():
    assert parse_settings("") == DockSettings()


@pytest.mark.parametrize(
    "text",
    [
        "drop_margin: [unclosed",
        "- just\n- a list\n",
        "drop_margin: -5\n",
        "theme: neon\n",
        "unknown_key: 1\n",
        "viewport:\n  width: -10\n",
    ],
)
def test_invalid_settings(text):
    with pytest.raises(ConfigError):
        parse_settings(text)


def test_load_settings_from_path(tmp_path):
    path = tmp_path / "dock.yaml"
    path.write_text(SETTINGS_YAML)
    assert load_settings(str(path)).drop_margin == 24


def test_load_settings_from_env(tmp_path, monkeypatch):
    path = tmp_path / "dock.yaml"
    path.write_text("theme: light\noutput_dir: /srv/previews\n")
    monkeypatch.setenv("DOCK_CONFIG", str(path))

    settings = load_settings()
    assert settings.theme == "light"
    assert settings.output_dir == Path("/srv/previews")


def test_output_dir_env_wins(tmp_path, monkeypatch):
    path = tmp_path / "dock.yaml"
    path.write_text("output_dir: /srv/previews\n")
    monkeypatch.setenv("DOCK_OUTPUT_DIR", str(tmp_path / "out"))

    assert load_settings(str(path)).output_dir == tmp_path / "out"
    assert load_settings().output_dir == tmp_path / "out"


def test_load_settings_without_file():
    assert load_settings() == DockSettings()


def test_missing_settings_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_settings(str(tmp_path / "missing.yaml"))
