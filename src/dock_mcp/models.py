"""
Data models for Dock-MCP — the docking tree.

A dock layout is a strict nested-split tree.  Every node is either a
**container** that divides its space among ordered children along one axis,
or a **content** tile that holds an opaque caller payload:

    LayoutTree
    └── ContainerNode (row)        — children laid out left → right
        ├── ContentNode            — a tile
        └── ContainerNode (column) — children laid out top → bottom
            ├── ContentNode
            └── ContentNode

Nodes never point at each other directly.  Parent and child links are
string ids resolved through ``LayoutTree.nodes``, which keeps the tree
free of cyclic references and makes copies cheap.

Each node carries a ``grow`` weight — its share of the parent's span,
analogous to flex-grow.  The measurement pass turns those weights into
percentage insets (``Inset``) and divider descriptors (``Divider``); the
drop-zone pass turns insets into pixel hit rectangles (``DropRect``).
"""

from __future__ import annotations

from typing import Generic, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, Field


T = TypeVar("T")

Direction = Literal["row", "column"]
Side = Literal["left", "right", "top", "bottom"]
Orientation = Literal["horizontal", "vertical"]


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

class ContentNode(BaseModel, Generic[T]):
    """A tile — the leaf of the docking tree.

    Attributes:
        id:       Process-unique identifier (see ``store.new_node_id``).
        kind:     Always ``"content"``.
        grow:     Relative weight within the parent container.
        parent:   Id of the owning container, ``None`` for the root.
        min_size: Advisory lower bound in pixels.  Carried, never enforced.
        payload:  Caller data.  The engine never looks inside it.
    """
    id: str
    kind: Literal["content"] = "content"
    grow: float = Field(default=1.0, gt=0)
    parent: Optional[str] = None
    min_size: Optional[float] = None
    payload: T


class ContainerNode(BaseModel):
    """A split container.

    ``direction`` names the axis the children are laid along: ``"row"``
    places them left to right, ``"column"`` top to bottom.  A valid
    container always has at least two children and never holds a child
    container with its own direction.
    """
    id: str
    kind: Literal["container"] = "container"
    grow: float = Field(default=1.0, gt=0)
    parent: Optional[str] = None
    min_size: Optional[float] = None
    direction: Direction = "column"
    children: list[str] = Field(default_factory=list)


DockNode = Union[ContentNode, ContainerNode]


# ---------------------------------------------------------------------------
# Tree
# ---------------------------------------------------------------------------

class LayoutTree(BaseModel):
    """The complete docking tree.

    ``ids`` mirrors the key set of ``nodes`` sorted ascending; it exists so
    callers get a deterministic iteration order without sorting themselves.
    An empty tree has no root and no nodes.
    """
    ids: list[str] = Field(default_factory=list)
    nodes: dict[str, DockNode] = Field(default_factory=dict)
    root: Optional[str] = None

    def get_node(self, node_id: str) -> Optional[DockNode]:
        """Look up a node by id."""
        return self.nodes.get(node_id)

    def is_empty(self) -> bool:
        return self.root is None

    def content_ids(self) -> list[str]:
        """Ids of every tile, in ``ids`` order."""
        return [
            node_id for node_id in self.ids
            if isinstance(self.nodes.get(node_id), ContentNode)
        ]


# ---------------------------------------------------------------------------
# Measurement output
# ---------------------------------------------------------------------------

class Inset(BaseModel):
    """A node's position as distances (0-100 percent) from the layout edges."""
    left: float = 0.0
    right: float = 0.0
    top: float = 0.0
    bottom: float = 0.0

    @property
    def width(self) -> float:
        """Horizontal extent in percent of the layout width."""
        return 100 - self.left - self.right

    @property
    def height(self) -> float:
        """Vertical extent in percent of the layout height."""
        return 100 - self.top - self.bottom


class Divider(BaseModel):
    """The draggable boundary between two adjacent siblings.

    ``left``/``right``/``top``/``bottom`` position the divider line as
    insets, like ``Inset``.  A vertical divider (between row children) is
    a zero-width line, ``left + right == 100``; a horizontal one (between
    column children) has ``top + bottom == 100``.  ``lower`` and ``upper``
    bound the combined span of the two neighbours along the split axis,
    the range the divider may travel.
    """
    id: str
    before: str
    after: str
    orientation: Orientation
    left: float
    right: float
    top: float
    bottom: float
    lower: float
    upper: float


class Measurement(BaseModel):
    """Output of ``measure``: insets keyed by node id plus ordered dividers."""
    insets: dict[str, Inset] = Field(default_factory=dict)
    dividers: list[Divider] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

class Viewport(BaseModel):
    """Pixel size of the layout's bounding box."""
    width: float = Field(default=1000.0, ge=0)
    height: float = Field(default=1000.0, ge=0)


class Rect(BaseModel):
    """An axis-aligned pixel rectangle given by its edges."""
    left: float
    top: float
    right: float
    bottom: float

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


class InsertAction(BaseModel):
    """The directional insert a drop zone triggers when released on."""
    type: Literal["insert"] = "insert"
    side: Side
    node_id: str


class DropRect(Rect):
    """A drag hit-target.

    The rectangle itself is the hit area; ``visible`` is the larger half of
    the target node highlighted while the zone is hovered.
    """
    visible: Rect
    action: InsertAction

