"""Dock-MCP server — MCP tools for editing docking layouts."""

from __future__ import annotations

import json
import logging
import sys
import uuid

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from pydantic import ValidationError

from .config import load_settings
from .errors import DockLayoutError
from .layout import DockLayout
from .measure import measure
from .models import ContentNode, LayoutTree, Viewport
from .operations import delete_tile
from .renderer import LayoutRenderer

logger = logging.getLogger(__name__)

SETTINGS = load_settings()

server = Server("dock-mcp")

# Layout sessions by id.  The server owns every tree; clients only see ids.
LAYOUTS: dict[str, DockLayout] = {}

SIDE_SCHEMA = {
    "type": "string",
    "enum": ["left", "right", "top", "bottom"],
}


def _ensure_output_dir():
    SETTINGS.output_dir.mkdir(parents=True, exist_ok=True)


def _get_layout(layout_id: str) -> DockLayout:
    layout = LAYOUTS.get(layout_id)
    if layout is None:
        raise DockLayoutError(f"Layout not found: {layout_id}")
    return layout


def _title(node: ContentNode) -> str:
    return str(node.payload) if node.payload is not None else node.id


def _summary(layout_id: str, tree: LayoutTree) -> dict:
    """Tiles of a layout with their titles and insets."""
    measurement = measure(tree)
    return {
        "layout_id": layout_id,
        "root": tree.root,
        "tiles": [
            {
                "id": node_id,
                "title": _title(tree.nodes[node_id]),
                "grow": tree.nodes[node_id].grow,
                "inset": measurement.insets[node_id].model_dump(),
            }
            for node_id in tree.content_ids()
        ],
    }


def _text(data: dict) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(data))]


# --- Tool definitions ---

@server.list_tools()
async def list_tools() -> list[Tool]:
    layout_id = {"type": "string", "description": "Layout id returned by create_layout."}
    return [
        Tool(
            name="create_layout",
            description=(
                "Create an empty docking layout. Returns its layout_id, which "
                "every other tool takes."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "titles": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Optional tile titles to add right away, best-fit.",
                    },
                },
            },
        ),
        Tool(
            name="list_layouts",
            description="List the open layouts and their tile counts.",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="add_tile",
            description=(
                "Add a tile where it fits best: the largest tile is split along "
                "its longer side. Returns the new tile id and the layout summary."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "layout_id": layout_id,
                    "title": {"type": "string", "description": "Tile title (the tile's payload)."},
                    "width": {"type": "number", "description": "Viewport width in pixels."},
                    "height": {"type": "number", "description": "Viewport height in pixels."},
                },
                "required": ["layout_id", "title"],
            },
        ),
        Tool(
            name="move_tile",
            description=(
                "Move a tile (or container) to a side of a target node, as a "
                "drag-and-drop would."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "layout_id": layout_id,
                    "tile_id": {"type": "string", "description": "Node to move."},
                    "target_id": {"type": "string", "description": "Node to place it next to."},
                    "side": SIDE_SCHEMA,
                },
                "required": ["layout_id", "tile_id", "target_id", "side"],
            },
        ),
        Tool(
            name="delete_tile",
            description="Remove a tile. Unknown ids are ignored.",
            inputSchema={
                "type": "object",
                "properties": {
                    "layout_id": layout_id,
                    "tile_id": {"type": "string"},
                },
                "required": ["layout_id", "tile_id"],
            },
        ),
        Tool(
            name="set_growth",
            description="Set grow weights (relative sizes) of nodes by id.",
            inputSchema={
                "type": "object",
                "properties": {
                    "layout_id": layout_id,
                    "values": {
                        "type": "object",
                        "additionalProperties": {"type": "number"},
                        "description": "Mapping of node id to a positive grow weight.",
                    },
                },
                "required": ["layout_id", "values"],
            },
        ),
        Tool(
            name="resize_divider",
            description=(
                "Drag the divider between two neighbouring nodes to a pixel "
                "position along its axis."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "layout_id": layout_id,
                    "divider_id": {"type": "string", "description": "Divider id from measure_layout."},
                    "position": {"type": "number", "description": "Pointer position in pixels."},
                },
                "required": ["layout_id", "divider_id", "position"],
            },
        ),
        Tool(
            name="measure_layout",
            description="Return percentage insets of every node and the divider list.",
            inputSchema={
                "type": "object",
                "properties": {"layout_id": layout_id},
                "required": ["layout_id"],
            },
        ),
        Tool(
            name="drop_zones",
            description=(
                "Return the drop rectangles (pixels) available while dragging "
                "a tile, each with the insert it would trigger."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "layout_id": layout_id,
                    "tile_id": {"type": "string", "description": "Tile being dragged."},
                },
                "required": ["layout_id", "tile_id"],
            },
        ),
        Tool(
            name="render_layout",
            description="Render a PNG preview of the layout. Returns the file path.",
            inputSchema={
                "type": "object",
                "properties": {
                    "layout_id": layout_id,
                    "filename": {
                        "type": "string",
                        "description": "Output filename (without extension). Default: the layout id.",
                    },
                    "dragging": {
                        "type": "string",
                        "description": "Optional tile id; its drop zones are drawn on the preview.",
                    },
                },
                "required": ["layout_id"],
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        return [TextContent(type="text", text=f"Unknown tool: {name}")]

    try:
        return await handler(arguments)
    except (DockLayoutError, ValidationError) as e:
        logger.warning(f"{name} failed: {e}")
        return [TextContent(type="text", text=f"{name} failed: {e}")]


async def _create_layout(args: dict) -> list[TextContent]:
    layout_id = str(uuid.uuid4())[:8]
    layout = DockLayout(settings=SETTINGS)
    for title in args.get("titles", []):
        layout.add_best_fitting(title)
    LAYOUTS[layout_id] = layout
    logger.info(f"Created layout {layout_id}")
    return _text({"status": "success", **_summary(layout_id, layout.state)})


async def _list_layouts(args: dict) -> list[TextContent]:
    return _text({
        "layouts": [
            {"layout_id": layout_id, "tiles": len(layout.state.content_ids())}
            for layout_id, layout in LAYOUTS.items()
        ]
    })


async def _add_tile(args: dict) -> list[TextContent]:
    layout = _get_layout(args["layout_id"])
    viewport = Viewport(**{
        **SETTINGS.viewport.model_dump(),
        **{key: float(args[key]) for key in ("width", "height") if key in args},
    })

    before = set(layout.state.content_ids())
    tree = layout.add_best_fitting(args["title"], viewport)
    added = [node_id for node_id in tree.content_ids() if node_id not in before]

    return _text({"status": "success", "tile_id": added[0], **_summary(args["layout_id"], tree)})


async def _move_tile(args: dict) -> list[TextContent]:
    layout = _get_layout(args["layout_id"])
    tree = layout.apply_insert(args["tile_id"], args["target_id"], args["side"])
    return _text({"status": "success", **_summary(args["layout_id"], tree)})


async def _delete_tile(args: dict) -> list[TextContent]:
    layout = _get_layout(args["layout_id"])
    tree = layout.delete_tile(args["tile_id"])
    return _text({"status": "success", **_summary(args["layout_id"], tree)})


async def _set_growth(args: dict) -> list[TextContent]:
    layout = _get_layout(args["layout_id"])
    tree = layout.update_growth_values(args["values"])
    return _text({"status": "success", **_summary(args["layout_id"], tree)})


async def _resize_divider(args: dict) -> list[TextContent]:
    layout = _get_layout(args["layout_id"])
    dividers = {divider.id: divider for divider in layout.measure().dividers}
    divider = dividers.get(args["divider_id"])
    if divider is None:
        raise DockLayoutError(f"Divider not found: {args['divider_id']}")

    tree = layout.resize_divider(divider, float(args["position"]))
    return _text({"status": "success", **_summary(args["layout_id"], tree)})


async def _measure_layout(args: dict) -> list[TextContent]:
    layout = _get_layout(args["layout_id"])
    measurement = layout.measure()
    return _text({"layout_id": args["layout_id"], **measurement.model_dump()})


async def _drop_zones(args: dict) -> list[TextContent]:
    layout = _get_layout(args["layout_id"])
    zones = layout.drop_zones(args["tile_id"])
    return _text({
        "layout_id": args["layout_id"],
        "tile_id": args["tile_id"],
        "zones": [zone.model_dump() for zone in zones],
    })


async def _render_layout(args: dict) -> list[TextContent]:
    """Render a layout preview to PNG."""
    _ensure_output_dir()

    layout_id = args["layout_id"]
    layout = _get_layout(layout_id)
    filename = args.get("filename", layout_id)
    output_path = str(SETTINGS.output_dir / f"{filename}.png")

    dragging = args.get("dragging")
    tree = layout.state
    zones = None
    if dragging:
        zones = layout.drop_zones(dragging)
        tree = delete_tile(tree, dragging)

    renderer = LayoutRenderer(scale=SETTINGS.scale, theme=SETTINGS.theme, label_for=_title)
    renderer.render(tree, SETTINGS.viewport, output_path=output_path, zones=zones)

    return _text({
        "status": "success",
        "path": output_path,
        "tiles": len(tree.content_ids()),
        "zones": len(zones) if zones is not None else None,
    })


TOOL_HANDLERS = {
    "create_layout": _create_layout,
    "list_layouts": _list_layouts,
    "add_tile": _add_tile,
    "move_tile": _move_tile,
    "delete_tile": _delete_tile,
    "set_growth": _set_growth,
    "resize_divider": _resize_divider,
    "measure_layout": _measure_layout,
    "drop_zones": _drop_zones,
    "render_layout": _render_layout,
}


def main():
    """Entry point for the MCP server."""
    import asyncio

    # stdout carries the MCP protocol; logs go to stderr.
    logging.basicConfig(
        level=SETTINGS.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    asyncio.run(_run())


async def _run():
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    main()
