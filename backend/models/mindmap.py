"""Mind map Pydantic models: identified trees, layouts, draw calls and API payloads."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from core.config import settings


class IdentifiedNode(BaseModel):
    """A generated node with an id unique within one generation pass."""

    id: str
    name: str
    # None means leaf; an empty list is never produced
    children: list[IdentifiedNode] | None = None

    def count(self) -> int:
        return 1 + sum(child.count() for child in self.children or [])


class Margin(BaseModel):
    top: float = Field(default_factory=lambda: settings.MARGIN_TOP, ge=0)
    right: float = Field(default_factory=lambda: settings.MARGIN_RIGHT, ge=0)
    bottom: float = Field(default_factory=lambda: settings.MARGIN_BOTTOM, ge=0)
    left: float = Field(default_factory=lambda: settings.MARGIN_LEFT, ge=0)


class Canvas(BaseModel):
    """Target drawing surface. The effective area excludes the margins."""

    width: float = Field(default_factory=lambda: settings.CANVAS_WIDTH, gt=0)
    height: float = Field(default_factory=lambda: settings.CANVAS_HEIGHT, gt=0)
    margin: Margin = Field(default_factory=Margin)
    node_radius: float = Field(default_factory=lambda: settings.NODE_RADIUS, gt=0)

    @property
    def effective_width(self) -> float:
        return self.width - self.margin.left - self.margin.right

    @property
    def effective_height(self) -> float:
        return self.height - self.margin.top - self.margin.bottom


class LaidOutNode(BaseModel):
    """
    A node with computed coordinates.

    x is the breadth axis and y the depth axis; on screen the tree is
    rotated so that depth runs left to right.
    """

    id: str
    name: str
    x: float
    y: float
    depth: int
    parent_id: str | None = None
    children: list[str] = Field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children


class Edge(BaseModel):
    """A parent -> child link in screen orientation (x = depth axis)."""

    source: str
    target: str
    source_x: float
    source_y: float
    target_x: float
    target_y: float
    path: str


class MindMapLayout(BaseModel):
    """Arena of laid-out nodes addressed by id, in pre-order."""

    root_id: str
    nodes: dict[str, LaidOutNode]
    edges: list[Edge]
    canvas: Canvas

    def node(self, node_id: str) -> LaidOutNode:
        return self.nodes[node_id]

    def parent_of(self, node_id: str) -> LaidOutNode | None:
        parent_id = self.nodes[node_id].parent_id
        return self.nodes[parent_id] if parent_id is not None else None

    def children_of(self, node_id: str) -> list[LaidOutNode]:
        return [self.nodes[child_id] for child_id in self.nodes[node_id].children]

    @property
    def max_depth(self) -> int:
        return max(node.depth for node in self.nodes.values())


# Draw calls


class CircleCall(BaseModel):
    kind: Literal["circle"] = "circle"
    node_id: str
    cx: float
    cy: float
    r: float
    css_class: str


class PathCall(BaseModel):
    kind: Literal["path"] = "path"
    source: str
    target: str
    d: str
    css_class: str = "link"


class LabelCall(BaseModel):
    kind: Literal["text"] = "text"
    node_id: str
    x: float
    y: float
    dx: float
    dy: str = ".31em"
    anchor: Literal["start", "end"]
    text: str


class Diagram(BaseModel):
    """Everything needed to draw one mind map, in paint order."""

    width: float
    height: float
    offset_x: float
    offset_y: float
    links: list[PathCall]
    circles: list[CircleCall]
    labels: list[LabelCall]


# API payloads


class MindMapRequest(BaseModel):
    topic: str = Field(..., max_length=500, description="Central topic of the mind map")
    width: float | None = Field(None, gt=0, description="Canvas width in pixels")
    height: float | None = Field(None, gt=0, description="Canvas height in pixels")


class MindMapResult(BaseModel):
    """Outcome of one successful generation pass."""

    topic: str
    tree: IdentifiedNode
    layout: MindMapLayout
    diagram: Diagram
    svg: str
    generated_root_name: str | None = None


class MindMapResponse(BaseModel):
    topic: str
    node_count: int
    tree: IdentifiedNode
    layout: MindMapLayout
    svg: str
    generated_root_name: str | None = None


class MindMapState(BaseModel):
    topic: str | None = None
    is_loading: bool = False
    error: str | None = None
    result: MindMapResponse | None = None
