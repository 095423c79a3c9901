"""Tests for PNG layout previews."""

from io import BytesIO

import pytest
from PIL import Image

from dock_mcp.drop_zones import drop_zones, hit_test
from dock_mcp.models import LayoutTree, Viewport
from dock_mcp.renderer import LayoutRenderer, _fit_text, _hex_to_rgb, _load_font
from dock_mcp.themes import DARK_THEME, LIGHT_THEME, get_theme


VIEWPORT = Viewport(width=400, height=300)


def _open(png: bytes) -> Image.Image:
    return Image.open(BytesIO(png))


def test_render_nested_layout(make_tree, tmp_path):
    tree = make_tree(("R", "row", ["A", ("C", "column", ["B", "D"])]))
    output = tmp_path / "layout.png"

    png = LayoutRenderer().render(tree, VIEWPORT, output_path=str(output))

    assert png[:8] == b"\x89PNG\r\n\x1a\n"
    assert output.read_bytes() == png
    assert _open(png).size == (400, 300)


def test_render_scales_image(make_tree):
    png = LayoutRenderer(scale=2.0, theme="light").render(make_tree("A"), VIEWPORT)
    assert _open(png).size == (800, 600)


def test_render_empty_layout_uses_background():
    png = LayoutRenderer().render(LayoutTree(), VIEWPORT)
    image = _open(png).convert("RGB")
    assert image.getpixel((200, 150)) == _hex_to_rgb(DARK_THEME.background)


def test_render_degenerate_viewport(make_tree):
    png = LayoutRenderer().render(make_tree(("R", "row", ["A", "B"])), Viewport(width=0, height=0))
    assert _open(png).size == (1, 1)


def test_render_drop_zones(make_tree):
    tree = make_tree(("R", "row", ["A", "B", "X"]))
    zones = drop_zones(tree, VIEWPORT, "X")
    hovered = hit_test(zones, 100, 25)
    assert hovered is not None

    renderer = LayoutRenderer(label_for=lambda node: f"Tile {node.payload}")
    plain = renderer.render(tree, VIEWPORT)
    overlaid = renderer.render(tree, VIEWPORT, zones=zones, hovered=hovered)
    assert plain != overlaid


def test_fit_text_truncates():
    font = _load_font(12)
    assert _fit_text("short", font, 1000) == "short"
    trimmed = _fit_text("a very long tile title indeed", font, 60)
    assert trimmed.endswith("...")
    assert _fit_text("anything", font, 0) == ""


def test_themes():
    assert get_theme("dark") is DARK_THEME
    assert get_theme("light") is LIGHT_THEME
    with pytest.raises(ValueError):
        get_theme("neon")
