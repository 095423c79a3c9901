"""Layout preview renderer using Pillow — draws a measured dock tree to PNG."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Callable, Optional

from PIL import Image, ImageDraw, ImageFont

from .measure import measure
from .models import ContentNode, DropRect, LayoutTree, Measurement, Rect, Viewport
from .themes import get_theme, ThemePalette


# --- Font handling ---

def _load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load a font, falling back to default if none available."""
    font_paths = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
        "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
        "/usr/share/fonts/TTF/DejaVuSans.ttf",
    ]
    for fp in font_paths:
        if Path(fp).exists():
            return ImageFont.truetype(fp, size)
    return ImageFont.load_default()


def _load_bold_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load a bold font, falling back to regular."""
    font_paths = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
        "/usr/share/fonts/truetype/freefont/FreeSansBold.ttf",
        "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
    ]
    for fp in font_paths:
        if Path(fp).exists():
            return ImageFont.truetype(fp, size)
    return _load_font(size)


# --- Color helpers ---

def _hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Convert hex color to RGB tuple. Supports both 3-char and 6-char hex."""
    hex_color = hex_color.lstrip("#")
    if len(hex_color) == 3:
        hex_color = hex_color[0]*2 + hex_color[1]*2 + hex_color[2]*2
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def _hex_to_rgba(hex_color: str, alpha: int = 255) -> tuple[int, int, int, int]:
    """Convert hex color to RGBA tuple."""
    r, g, b = _hex_to_rgb(hex_color)
    return (r, g, b, alpha)


def _default_label(node: ContentNode) -> str:
    return node.id


def _fit_text(text: str, font, max_width: float) -> str:
    """Trim ``text`` with an ellipsis until it fits ``max_width`` pixels."""
    if max_width <= 0:
        return ""
    bbox = font.getbbox(text)
    if bbox[2] - bbox[0] <= max_width:
        return text
    while text:
        text = text[:-1]
        bbox = font.getbbox(text + "...")
        if bbox[2] - bbox[0] <= max_width:
            return text + "..."
    return ""


# --- Main renderer ---

class LayoutRenderer:
    """Renders a ``LayoutTree`` to a PNG image.

    Tiles are placed from the measurement pass; the image has the
    viewport's pixel size times ``scale``.  Labels come from
    ``label_for(node)`` — the renderer never looks at payloads itself.
    """

    # Layout constants (unscaled pixels)
    TILE_GAP = 4
    HEADER_HEIGHT = 28
    LABEL_PADDING = 10
    CORNER_RADIUS = 6
    DIVIDER_WIDTH = 2

    def __init__(
        self,
        scale: float = 1.0,
        theme: str = "dark",
        label_for: Optional[Callable[[ContentNode], str]] = None,
    ):
        self.scale = scale
        self.theme: ThemePalette = get_theme(theme)
        self.label_for = label_for or _default_label
        self.font_label = _load_bold_font(int(14 * scale))
        self.font_small = _load_font(int(11 * scale))

    def render(
        self,
        tree: LayoutTree,
        viewport: Viewport,
        output_path: Optional[str] = None,
        measurement: Optional[Measurement] = None,
        zones: Optional[list[DropRect]] = None,
        hovered: Optional[DropRect] = None,
    ) -> bytes:
        """Render the layout to PNG bytes. Optionally save to file.

        Args:
            tree:        The layout to draw.
            viewport:    Layout size in pixels.
            output_path: Optional path to save the PNG.
            measurement: Precomputed ``measure(tree)``; computed when omitted.
            zones:       Drop zones to outline (drag preview).
            hovered:     Zone whose ``visible`` half is highlighted.
        """
        measurement = measurement or measure(tree)
        img_width = max(1, int(viewport.width * self.scale))
        img_height = max(1, int(viewport.height * self.scale))

        img = Image.new("RGBA", (img_width, img_height), _hex_to_rgba(self.theme.background))
        draw = ImageDraw.Draw(img)

        for node_id in tree.content_ids():
            inset = measurement.insets.get(node_id)
            if inset is None:
                continue
            self._draw_tile(draw, tree.nodes[node_id], self._to_pixels(inset, img_width, img_height))

        for divider in measurement.dividers:
            self._draw_divider(draw, self._to_pixels(divider, img_width, img_height))

        if zones or hovered:
            overlay = Image.new("RGBA", img.size, (0, 0, 0, 0))
            overlay_draw = ImageDraw.Draw(overlay)
            if hovered is not None:
                overlay_draw.rectangle(
                    self._scale_rect(hovered.visible),
                    fill=_hex_to_rgba(self.theme.highlight_fill, self.theme.highlight_alpha),
                )
            for zone in zones or []:
                overlay_draw.rectangle(
                    self._scale_rect(zone),
                    fill=_hex_to_rgba(self.theme.drop_zone_fill, self.theme.drop_zone_alpha),
                    outline=self.theme.drop_zone_outline,
                    width=1,
                )
            img = Image.alpha_composite(img, overlay)

        # Convert to bytes
        buf = BytesIO()
        img.save(buf, format="PNG", optimize=True)
        png_bytes = buf.getvalue()

        if output_path:
            Path(output_path).write_bytes(png_bytes)

        return png_bytes

    def _to_pixels(self, inset, img_width: int, img_height: int) -> tuple[float, float, float, float]:
        """Convert percentage insets to an (x1, y1, x2, y2) pixel box."""
        return (
            inset.left / 100 * img_width,
            inset.top / 100 * img_height,
            (100 - inset.right) / 100 * img_width,
            (100 - inset.bottom) / 100 * img_height,
        )

    def _scale_rect(self, rect: Rect) -> tuple[float, float, float, float]:
        x1, x2 = sorted((rect.left * self.scale, rect.right * self.scale))
        y1, y2 = sorted((rect.top * self.scale, rect.bottom * self.scale))
        return (x1, y1, x2, y2)

    def _draw_tile(self, draw: ImageDraw.ImageDraw, node: ContentNode, box: tuple[float, float, float, float]):
        """Draw one tile: body, header bar and label."""
        s = self.scale
        gap = self.TILE_GAP * s
        x1, y1, x2, y2 = box
        x1, y1, x2, y2 = x1 + gap, y1 + gap, x2 - gap, y2 - gap
        if x2 <= x1 or y2 <= y1:
            return

        radius = int(self.CORNER_RADIUS * s)
        draw.rounded_rectangle(
            [x1, y1, x2, y2],
            radius=radius,
            fill=self.theme.tile_fill,
            outline=self.theme.tile_border,
            width=max(1, int(s)),
        )

        header_bottom = min(y2, y1 + self.HEADER_HEIGHT * s)
        if x2 - x1 <= 2 or header_bottom <= y1 + 1:
            return
        draw.rounded_rectangle(
            [x1 + 1, y1 + 1, x2 - 1, header_bottom],
            radius=radius,
            fill=self.theme.header_fill,
        )

        padding = self.LABEL_PADDING * s
        label = _fit_text(self.label_for(node), self.font_label, x2 - x1 - 2 * padding)
        if label:
            draw.text((x1 + padding, y1 + 6 * s), label, fill=self.theme.label_color, font=self.font_label)

        # Grow weight in the body, bottom-left
        grow_text = _fit_text(f"grow {node.grow:g}", self.font_small, x2 - x1 - 2 * padding)
        if grow_text and y2 - header_bottom > 24 * s:
            draw.text(
                (x1 + padding, y2 - 20 * s),
                grow_text,
                fill=self.theme.muted_text_color,
                font=self.font_small,
            )

    def _draw_divider(self, draw: ImageDraw.ImageDraw, box: tuple[float, float, float, float]):
        """Draw a divider line; one axis of ``box`` is collapsed."""
        x1, y1, x2, y2 = box
        draw.line([(x1, y1), (x2, y2)], fill=self.theme.divider_color, width=max(1, int(self.DIVIDER_WIDTH * self.scale)))
