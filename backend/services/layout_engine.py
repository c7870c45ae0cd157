"""
Tidy tree layout for mind maps.

Implements the Reingold-Tilford algorithm in Buchheim's linear-time form:
- Siblings are separated by 1 unit, cousins by 2
- Parents are centered over their first and last child
- The result is scaled to the effective canvas: breadth spans the height,
  depth spans the width, so the tree grows left to right

The layout is fully deterministic for a given topology and canvas.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import structlog

from core.exceptions import LayoutError
from models.mindmap import Canvas, Edge, IdentifiedNode, LaidOutNode, MindMapLayout

logger = structlog.getLogger(__name__)

# Gap between a node's circle and its label
LABEL_PADDING = 5


class _TidyNode:
    """Working state for one node while the layout runs."""

    __slots__ = (
        "source", "parent", "children", "depth", "index",
        "ancestor", "default_ancestor", "prelim", "mod", "change", "shift",
        "thread", "x",
    )

    def __init__(self, source: Optional[IdentifiedNode], index: int, depth: int):
        self.source = source
        self.parent: Optional[_TidyNode] = None
        self.children: Optional[List[_TidyNode]] = None
        self.depth = depth
        self.index = index
        self.ancestor: _TidyNode = self
        self.default_ancestor: Optional[_TidyNode] = None
        self.prelim = 0.0
        self.mod = 0.0
        self.change = 0.0
        self.shift = 0.0
        self.thread: Optional[_TidyNode] = None
        self.x = 0.0


def _build(source: IdentifiedNode, index: int = 0, depth: int = 0) -> _TidyNode:
    node = _TidyNode(source, index, depth)
    if source.children:
        node.children = []
        for i, child in enumerate(source.children):
            tidy_child = _build(child, i, depth + 1)
            tidy_child.parent = node
            node.children.append(tidy_child)
    return node


def _pre_order(node: _TidyNode) -> List[_TidyNode]:
    ordered = []
    stack = [node]
    while stack:
        current = stack.pop()
        ordered.append(current)
        if current.children:
            stack.extend(reversed(current.children))
    return ordered


def _post_order(node: _TidyNode) -> List[_TidyNode]:
    # Children left to right, each before its parent
    visited = []
    stack = [node]
    while stack:
        current = stack.pop()
        visited.append(current)
        if current.children:
            stack.extend(current.children)
    visited.reverse()
    return visited


def _separation(a: _TidyNode, b: _TidyNode) -> float:
    return 1.0 if a.parent is b.parent else 2.0


def _next_left(v: _TidyNode) -> Optional[_TidyNode]:
    return v.children[0] if v.children else v.thread


def _next_right(v: _TidyNode) -> Optional[_TidyNode]:
    return v.children[-1] if v.children else v.thread


def _move_subtree(wm: _TidyNode, wp: _TidyNode, shift: float) -> None:
    change = shift / (wp.index - wm.index)
    wp.change -= change
    wp.shift += shift
    wm.change += change
    wp.prelim += shift
    wp.mod += shift


def _execute_shifts(v: _TidyNode) -> None:
    shift = 0.0
    change = 0.0
    for w in reversed(v.children):
        w.prelim += shift
        w.mod += shift
        change += w.change
        shift += w.shift + change


def _next_ancestor(vim: _TidyNode, v: _TidyNode, ancestor: _TidyNode) -> _TidyNode:
    return vim.ancestor if vim.ancestor.parent is v.parent else ancestor


def _apportion(v: _TidyNode, w: Optional[_TidyNode], ancestor: _TidyNode) -> _TidyNode:
    if w is None:
        return ancestor

    vip = vop = v
    vim = w
    vom = v.parent.children[0]
    sip = vip.mod
    sop = vop.mod
    sim = vim.mod
    som = vom.mod

    vim = _next_right(vim)
    vip = _next_left(vip)
    while vim is not None and vip is not None:
        vom = _next_left(vom)
        vop = _next_right(vop)
        vop.ancestor = v
        shift = vim.prelim + sim - vip.prelim - sip + _separation(vim, vip)
        if shift > 0:
            _move_subtree(_next_ancestor(vim, v, ancestor), v, shift)
            sip += shift
            sop += shift
        sim += vim.mod
        sip += vip.mod
        som += vom.mod
        sop += vop.mod
        vim = _next_right(vim)
        vip = _next_left(vip)

    if vim is not None and _next_right(vop) is None:
        vop.thread = vim
        vop.mod += sim - sop
    if vip is not None and _next_left(vom) is None:
        vom.thread = vip
        vom.mod += sip - som
        ancestor = v
    return ancestor


def _first_walk(v: _TidyNode) -> None:
    siblings = v.parent.children
    w = siblings[v.index - 1] if v.index else None
    if v.children:
        _execute_shifts(v)
        midpoint = (v.children[0].prelim + v.children[-1].prelim) / 2
        if w is not None:
            v.prelim = w.prelim + _separation(v, w)
            v.mod = v.prelim - midpoint
        else:
            v.prelim = midpoint
    elif w is not None:
        v.prelim = w.prelim + _separation(v, w)
    v.parent.default_ancestor = _apportion(
        v, w, v.parent.default_ancestor or siblings[0]
    )


def _second_walk(v: _TidyNode) -> None:
    v.x = v.prelim + v.parent.mod
    v.mod += v.parent.mod


def _position(root: IdentifiedNode) -> List[_TidyNode]:
    """Run both walks and return the nodes in pre-order with unscaled x."""
    tree = _build(root)
    # Virtual parent so the root can be treated like any other child
    virtual = _TidyNode(None, 0, -1)
    virtual.children = [tree]
    tree.parent = virtual

    for node in _post_order(tree):
        _first_walk(node)
    virtual.mod = -tree.prelim
    ordered = _pre_order(tree)
    for node in ordered:
        _second_walk(node)
    return ordered


def horizontal_link_path(x0: float, y0: float, x1: float, y1: float) -> str:
    """Cubic Bezier between two points with horizontal tangents at both ends."""
    mx = (x0 + x1) / 2
    start, *controls = [
        f"{format_number(x)},{format_number(y)}"
        for x, y in ((x0, y0), (mx, y0), (mx, y1), (x1, y1))
    ]
    return f"M{start}C{','.join(controls)}"


def format_number(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def label_placement(node: LaidOutNode, radius: float) -> tuple[float, str]:
    """
    Label offset and text anchor for a node.

    Nodes with children put the label left of the circle (end anchored),
    leaves put it right of the circle (start anchored).
    """
    offset = radius + LABEL_PADDING
    if node.children:
        return -offset, "end"
    return offset, "start"


def check_drawing_area(canvas: Canvas) -> None:
    """Raise LayoutError when the margins leave no room to draw in."""
    if canvas.effective_height <= 0 or canvas.effective_width <= 0:
        raise LayoutError(
            f"Canvas {canvas.width}x{canvas.height} leaves no drawing area inside its margins"
        )


def layout_tree(root: IdentifiedNode, canvas: Optional[Canvas] = None) -> MindMapLayout:
    """
    Lay out an identified tree on the given canvas.

    Args:
        root: Root of the identified tree
        canvas: Target canvas, defaults from settings

    Returns:
        MindMapLayout with one LaidOutNode per tree node and one edge per
        parent/child pair, both in pre-order

    Raises:
        LayoutError: If the margins leave no drawing area
    """
    canvas = canvas or Canvas()
    check_drawing_area(canvas)
    dx = canvas.effective_height
    dy = canvas.effective_width

    ordered = _position(root)

    left = right = bottom = ordered[0]
    for node in ordered:
        if node.x < left.x:
            left = node
        if node.x > right.x:
            right = node
        if node.depth > bottom.depth:
            bottom = node

    # A lone root has left == right, which would otherwise collapse the scale
    s = 1.0 if left is right else _separation(left, right) / 2
    tx = s - left.x
    kx = dx / (right.x + s + tx)
    ky = dy / (bottom.depth or 1)

    nodes: Dict[str, LaidOutNode] = {}
    for node in ordered:
        nodes[node.source.id] = LaidOutNode(
            id=node.source.id,
            name=node.source.name,
            x=(node.x + tx) * kx,
            y=node.depth * ky,
            depth=node.depth,
            parent_id=node.parent.source.id if node.parent.source else None,
            children=[child.source.id for child in node.children or []],
        )

    edges = []
    for node in nodes.values():
        for child_id in node.children:
            child = nodes[child_id]
            edges.append(
                Edge(
                    source=node.id,
                    target=child.id,
                    source_x=node.y,
                    source_y=node.x,
                    target_x=child.y,
                    target_y=child.x,
                    path=horizontal_link_path(node.y, node.x, child.y, child.x),
                )
            )

    logger.debug(
        f"Laid out {len(nodes)} nodes and {len(edges)} edges "
        f"over depth {bottom.depth} on {dy}x{dx}"
    )
    return MindMapLayout(
        root_id=root.id, nodes=nodes, edges=edges, canvas=canvas
    )
