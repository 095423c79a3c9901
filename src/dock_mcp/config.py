"""Settings for Dock-MCP.

Settings live in a small YAML file:

    drop_margin: 24
    drop_depth: 2
    divider_min_px: 80
    viewport:
      width: 1600
      height: 900
    theme: light
    verify_invariants: true

Every key is optional.  ``DOCK_CONFIG`` names the file to load when no path
is passed, and ``DOCK_OUTPUT_DIR`` overrides where rendered previews go.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .models import Viewport


DEFAULT_OUTPUT_DIR = Path.home() / ".dock-mcp" / "layouts"


class DockSettings(BaseModel):
    """Engine and server settings.

    Attributes:
        drop_margin:       Width in pixels of a drop-zone strip.
        drop_depth:        Deepest tree level (root = 0) offering drop zones.
        divider_min_px:    Smallest span a divider drag leaves on either side.
        viewport:          Layout size used when a caller gives none.
        theme:             Preview palette, "dark" or "light".
        scale:             Preview render scale.
        output_dir:        Where rendered previews are written.
        verify_invariants: Check every new tree with ``verify_tree``.
        log_level:         Level for the server's log output.
    """
    model_config = ConfigDict(extra="forbid")

    drop_margin: float = Field(default=20.0, gt=0)
    drop_depth: int = Field(default=2, ge=0)
    divider_min_px: float = Field(default=100.0, gt=0)
    viewport: Viewport = Field(default_factory=Viewport)
    theme: Literal["dark", "light"] = "dark"
    scale: float = Field(default=1.0, gt=0)
    output_dir: Path = DEFAULT_OUTPUT_DIR
    verify_invariants: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


def parse_settings(yaml_str: str) -> DockSettings:
    """Parse a YAML string into ``DockSettings``.

    An empty document yields the defaults.
    """
    try:
        data = yaml.safe_load(yaml_str)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid settings YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Settings YAML must be a mapping")

    try:
        return DockSettings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e


def load_settings(path: Optional[str] = None) -> DockSettings:
    """Load settings from ``path``, ``$DOCK_CONFIG`` or the defaults.

    ``$DOCK_OUTPUT_DIR`` always wins over the file's ``output_dir``.
    """
    path = path or os.environ.get("DOCK_CONFIG")
    if path:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(f"Settings file not found: {config_path}")
        settings = parse_settings(config_path.read_text())
    else:
        settings = DockSettings()

    output_dir = os.environ.get("DOCK_OUTPUT_DIR")
    if output_dir:
        settings = settings.model_copy(update={"output_dir": Path(output_dir)})
    return settings
