"""
Theme definitions for Dock-MCP previews.

Provides dark and light color palettes for rendering layouts.
Each theme defines colors for:
- Layout background
- Tiles (body, header bar, border, label)
- Dividers
- Drop zones and the hovered-zone highlight
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class ThemePalette:
    """Color palette for a theme."""

    # Layout
    background: str

    # Tiles
    tile_fill: str
    tile_border: str
    header_fill: str
    label_color: str
    muted_text_color: str

    # Dividers
    divider_color: str

    # Drag feedback
    drop_zone_outline: str
    drop_zone_fill: str
    drop_zone_alpha: int
    highlight_fill: str
    highlight_alpha: int


# Catppuccin Mocha (dark theme) - default
DARK_THEME = ThemePalette(
    background="#11111b",
    tile_fill="#1e1e2e",
    tile_border="#313244",
    header_fill="#181825",
    label_color="#cdd6f4",
    muted_text_color="#6c7086",
    divider_color="#45475a",
    drop_zone_outline="#f9e2af",
    drop_zone_fill="#f9e2af",
    drop_zone_alpha=60,
    highlight_fill="#89b4fa",
    highlight_alpha=70,
)


# Light theme - clean white background with darker accents
LIGHT_THEME = ThemePalette(
    background="#ffffff",
    tile_fill="#eff1f5",
    tile_border="#bcc0cc",
    header_fill="#e6e9ef",
    label_color="#1e1e2e",
    muted_text_color="#6c6f85",
    divider_color="#9ca0b0",
    drop_zone_outline="#df8e1d",
    drop_zone_fill="#df8e1d",
    drop_zone_alpha=60,
    highlight_fill="#1e66f5",
    highlight_alpha=60,
)


# Theme registry
THEMES: dict[str, ThemePalette] = {
    "dark": DARK_THEME,
    "light": LIGHT_THEME,
}


def get_theme(name: str) -> ThemePalette:
    """Get a theme palette by name.

    Args:
        name: Theme name ("dark" or "light")

    Returns:
        ThemePalette for the requested theme

    Raises:
        ValueError: If theme name is not recognized
    """
    if name not in THEMES:
        valid = ", ".join(THEMES.keys())
        raise ValueError(f"Unknown theme '{name}'. Valid themes: {valid}")
    return THEMES[name]
