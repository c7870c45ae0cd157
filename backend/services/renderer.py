"""SVG renderer for laid out mind maps."""

import html
import re
from typing import List

import structlog

from models.mindmap import CircleCall, Diagram, LabelCall, LaidOutNode, MindMapLayout, PathCall
from services.layout_engine import format_number, label_placement

logger = structlog.getLogger(__name__)

SVG_STYLE = """
.link { fill: none; stroke: #94a3b8; stroke-width: 1.5px; }
.node circle { stroke-width: 2px; }
.is-root circle { fill: #7c3aed; stroke: #5b21b6; }
.is-child circle { fill: #6366f1; stroke: #4338ca; }
.is-leaf circle { fill: #ffffff; stroke: #6366f1; }
.node text { font: 12px sans-serif; fill: #1e293b; }
.node text.halo { fill: none; stroke: #ffffff; stroke-width: 3px; stroke-linejoin: round; }
"""

# Characters outside the XML 1.0 Char production
XML_INVALID_CHARS = re.compile(
    "[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


def xml_text(value: str) -> str:
    """Escape text for SVG content, dropping characters XML cannot carry."""
    return html.escape(XML_INVALID_CHARS.sub("", value))


def node_css_class(node: LaidOutNode) -> str:
    """CSS classes telling the root, internal nodes and leaves apart."""
    shape = "node--leaf" if node.is_leaf else "node--internal"
    if node.depth == 0:
        role = "is-root"
    elif node.children:
        role = "is-child"
    else:
        role = "is-leaf"
    return f"node {shape} {role}"


def build_draw_calls(layout: MindMapLayout) -> Diagram:
    """
    Turn a layout into draw calls.

    Positions are swapped for the horizontal orientation: the screen x of a
    node is its depth-axis coordinate and the screen y its breadth-axis one.
    """
    radius = layout.canvas.node_radius
    links: List[PathCall] = [
        PathCall(source=edge.source, target=edge.target, d=edge.path)
        for edge in layout.edges
    ]

    circles: List[CircleCall] = []
    labels: List[LabelCall] = []
    for node in layout.nodes.values():
        circles.append(
            CircleCall(
                node_id=node.id,
                cx=node.y,
                cy=node.x,
                r=radius,
                css_class=node_css_class(node),
            )
        )
        dx, anchor = label_placement(node, radius)
        labels.append(
            LabelCall(node_id=node.id, x=node.y, y=node.x, dx=dx, anchor=anchor, text=node.name)
        )

    return Diagram(
        width=layout.canvas.width,
        height=layout.canvas.height,
        offset_x=layout.canvas.margin.left,
        offset_y=layout.canvas.margin.top,
        links=links,
        circles=circles,
        labels=labels,
    )


def render_svg(diagram: Diagram) -> str:
    """Serialize draw calls into a standalone SVG document."""
    width = format_number(diagram.width)
    height = format_number(diagram.height)
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">',
        f"<style>{SVG_STYLE}</style>",
        f'<g transform="translate({format_number(diagram.offset_x)},{format_number(diagram.offset_y)})">',
    ]

    for link in diagram.links:
        parts.append(
            f'<path class="{link.css_class}" data-source="{link.source}" '
            f'data-target="{link.target}" d="{link.d}"/>'
        )

    labels_by_node = {label.node_id: label for label in diagram.labels}
    for circle in diagram.circles:
        parts.append(
            f'<g class="{circle.css_class}" data-id="{circle.node_id}" '
            f'transform="translate({format_number(circle.cx)},{format_number(circle.cy)})">'
        )
        parts.append(f'<circle r="{format_number(circle.r)}"/>')
        label = labels_by_node.get(circle.node_id)
        if label is not None:
            text = xml_text(label.text)
            attrs = f'x="{format_number(label.dx)}" dy="{label.dy}" text-anchor="{label.anchor}"'
            # Halo copy goes underneath so labels stay readable over links
            parts.append(f'<text class="halo" {attrs}>{text}</text>')
            parts.append(f"<text {attrs}>{text}</text>")
        parts.append("</g>")

    parts.append("</g>")
    parts.append("</svg>")
    logger.debug(
        f"Rendered {len(diagram.circles)} nodes and {len(diagram.links)} links to SVG"
    )
    return "\n".join(parts)
