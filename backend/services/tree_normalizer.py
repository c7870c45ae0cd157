"""
Tree normalization for AI generated mind maps.

Validates the untrusted raw tree returned by the model and turns it into an
IdentifiedNode tree with pre-order ids ("node-1" is always the root).
"""

from dataclasses import dataclass
from typing import Any, Optional

import structlog

from core.config import settings
from core.exceptions import TreeValidationError
from models.mindmap import IdentifiedNode

logger = structlog.getLogger(__name__)


class IdSequence:
    """Monotonic id generator scoped to a single normalization pass."""

    def __init__(self, prefix: str = "node", start: int = 0):
        self.prefix = prefix
        self.value = start

    def next_id(self) -> str:
        self.value += 1
        return f"{self.prefix}-{self.value}"


@dataclass(frozen=True)
class TreeLimits:
    # Depth counts edges below the root, so a root-only tree has depth 0.
    max_depth: int = settings.MAX_TREE_DEPTH
    max_children: int = settings.MAX_CHILDREN_PER_NODE
    max_nodes: int = settings.MAX_TREE_NODES
    max_name_length: int = settings.MAX_NODE_NAME_LENGTH


def _children_of(node: dict, path: str) -> list:
    children = node.get("children")
    if children is None:
        return []
    if not isinstance(children, list):
        raise TreeValidationError(
            f"'children' must be a list, got {type(children).__name__}", path
        )
    return children


def validate_raw_tree(raw: Any, limits: Optional[TreeLimits] = None) -> int:
    """
    Check a raw tree against the structural limits before it is laid out.

    The root name is not checked here since it gets reconciled with the
    topic; every other node needs a non-blank string name.

    Args:
        raw: Parsed JSON as returned by the model
        limits: Structural limits, defaults from settings

    Returns:
        Total number of nodes in the tree

    Raises:
        TreeValidationError: If the tree shape or a node is invalid
    """
    limits = limits or TreeLimits()
    if not isinstance(raw, dict):
        raise TreeValidationError(
            f"Mind map root must be an object, got {type(raw).__name__}"
        )

    count = 0
    stack = [(raw, 0, "$")]
    while stack:
        node, depth, path = stack.pop()
        if not isinstance(node, dict):
            raise TreeValidationError(
                f"Mind map node must be an object, got {type(node).__name__}", path
            )

        count += 1
        if count > limits.max_nodes:
            raise TreeValidationError(
                f"Mind map has more than {limits.max_nodes} nodes", path
            )
        if depth > limits.max_depth:
            raise TreeValidationError(
                f"Mind map is deeper than {limits.max_depth} levels", path
            )

        if depth > 0:
            name = node.get("name")
            if not isinstance(name, str) or not name.strip():
                raise TreeValidationError("Node 'name' must be a non-empty string", path)
            if len(name) > limits.max_name_length:
                raise TreeValidationError(
                    f"Node name is longer than {limits.max_name_length} characters",
                    path,
                )

        children = _children_of(node, path)
        if len(children) > limits.max_children:
            raise TreeValidationError(
                f"Node has {len(children)} children, limit is {limits.max_children}",
                path,
            )
        for index in reversed(range(len(children))):
            stack.append((children[index], depth + 1, f"{path}.children[{index}]"))

    return count


def reconcile_root_name(raw_name: Any, topic: str) -> str:
    """The requested topic always labels the root; only real mismatches are logged."""
    if not isinstance(raw_name, str) or not raw_name or raw_name.lower() != topic.lower():
        logger.warning(
            f'Generated root name "{raw_name}" differs from topic "{topic}". '
            "Using topic as root name."
        )
    return topic


def _assign_ids(node: dict, sequence: IdSequence, name: str) -> IdentifiedNode:
    # Pre-order: the id is taken before recursing into the children
    node_id = sequence.next_id()
    children = node.get("children") or []
    return IdentifiedNode(
        id=node_id,
        name=name,
        children=[_assign_ids(child, sequence, child["name"]) for child in children]
        or None,
    )


def normalize_tree(
    raw: dict,
    topic: str,
    sequence: Optional[IdSequence] = None,
    limits: Optional[TreeLimits] = None,
) -> IdentifiedNode:
    """
    Validate a raw tree and build its identified counterpart.

    The input is never mutated. Nodes with a missing or empty 'children'
    list become leaves without a children field.

    Args:
        raw: Raw tree ({"name": ..., "children": [...]})
        topic: The topic the user asked for
        sequence: Id sequence to draw from, a fresh one per call by default
        limits: Structural limits, defaults from settings

    Returns:
        The root IdentifiedNode
    """
    validate_raw_tree(raw, limits)
    sequence = sequence or IdSequence()
    root_name = reconcile_root_name(raw.get("name"), topic)
    return _assign_ids(raw, sequence, root_name)
