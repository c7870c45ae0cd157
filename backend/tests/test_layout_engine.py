"""
Unit Tests for Layout Engine
============================
"""

from collections import defaultdict

import pytest

from core.exceptions import LayoutError
from models.mindmap import Canvas, Margin
from services.layout_engine import (
    horizontal_link_path,
    label_placement,
    layout_tree,
)
from services.tree_normalizer import normalize_tree


def by_depth(layout):
    """Breadth positions per depth, in left-to-right (pre-order) order."""
    levels = defaultdict(list)
    for node in layout.nodes.values():
        levels[node.depth].append(node.x)
    return levels


class TestTidyLayout:
    """Test suite for the tidy tree layout on the default 800x600 canvas."""

    def test_three_level_tree_counts_and_depths(self, raw_tree):
        layout = layout_tree(normalize_tree(raw_tree, "Space Exploration"))

        assert len(layout.nodes) == 10
        assert len(layout.edges) == 9
        assert layout.nodes[layout.root_id].depth == 0
        assert sorted(node.depth for node in layout.nodes.values()) == [0, 1, 1, 1] + [2] * 6

    def test_breadth_positions_are_distinct_per_depth(self, raw_tree):
        layout = layout_tree(normalize_tree(raw_tree, "Space Exploration"))

        for positions in by_depth(layout).values():
            assert len(set(positions)) == len(positions)

    def test_known_coordinates(self, raw_tree):
        layout = layout_tree(normalize_tree(raw_tree, "Space Exploration"))
        unit = 560 / 9

        root = layout.node("node-1")
        assert root.x == pytest.approx(280)
        assert root.y == 0

        branches = [layout.node(node_id) for node_id in root.children]
        assert [b.x for b in branches] == pytest.approx([1.5 * unit, 4.5 * unit, 7.5 * unit])
        assert all(b.y == pytest.approx(280) for b in branches)

        leaves = [n for n in layout.nodes.values() if n.depth == 2]
        # Siblings are one unit apart, cousins two
        assert [leaf.x for leaf in leaves] == pytest.approx(
            [unit * k for k in (1, 2, 4, 5, 7, 8)]
        )
        assert all(leaf.y == pytest.approx(560) for leaf in leaves)

    def test_parents_are_centered_over_children(self):
        raw = {
            "name": "Root",
            "children": [
                {"name": "A", "children": [{"name": "a1"}, {"name": "a2"}, {"name": "a3"}]},
                {"name": "B"},
                {"name": "C", "children": [{"name": "c1", "children": [{"name": "c11"}]}]},
                {"name": "D", "children": [{"name": "d1"}, {"name": "d2"}]},
            ],
        }
        layout = layout_tree(normalize_tree(raw, "Root"))

        for node in layout.nodes.values():
            if node.children:
                first = layout.node(node.children[0])
                last = layout.node(node.children[-1])
                assert node.x == pytest.approx((first.x + last.x) / 2)

    @pytest.mark.parametrize(
        "raw",
        [
            {
                "name": "Wide",
                "children": [
                    {"name": f"b{i}", "children": [{"name": f"l{i}.{j}"} for j in range(i)]}
                    for i in range(5)
                ],
            },
            {
                "name": "Deep",
                "children": [
                    {"name": "x", "children": [{"name": "y", "children": [{"name": "z1"}, {"name": "z2"}]}]},
                    {"name": "p"},
                    {"name": "q", "children": [{"name": "r", "children": [{"name": "s1"}, {"name": "s2"}, {"name": "s3"}]}]},
                ],
            },
        ],
    )
    def test_no_overlap_within_a_level(self, raw):
        layout = layout_tree(normalize_tree(raw, raw["name"]))

        for positions in by_depth(layout).values():
            assert positions == sorted(positions)
            assert all(b - a > 1e-6 for a, b in zip(positions, positions[1:]))

    def test_positions_fit_effective_area(self, raw_tree):
        canvas = Canvas(width=1000, height=400)
        layout = layout_tree(normalize_tree(raw_tree, "T"), canvas)

        for node in layout.nodes.values():
            assert 0 <= node.x <= canvas.effective_height
            assert 0 <= node.y <= canvas.effective_width
        assert max(node.y for node in layout.nodes.values()) == pytest.approx(canvas.effective_width)

    def test_layout_is_deterministic(self, raw_tree):
        first = layout_tree(normalize_tree(raw_tree, "T"))
        second = layout_tree(normalize_tree(raw_tree, "T"))

        assert first == second


class TestEdgeCases:
    """Test suite for degenerate trees and canvases."""

    def test_single_node_is_centered(self):
        layout = layout_tree(normalize_tree({"name": "Alone"}, "Alone"))

        root = layout.node("node-1")
        assert len(layout.nodes) == 1
        assert layout.edges == []
        assert root.x == pytest.approx(280)
        assert root.y == 0
        assert root.depth == 0

    def test_chain_stays_on_center_line(self):
        raw = {"name": "A", "children": [{"name": "B", "children": [{"name": "C"}]}]}
        layout = layout_tree(normalize_tree(raw, "A"))

        assert [n.x for n in layout.nodes.values()] == pytest.approx([280, 280, 280])
        assert [n.y for n in layout.nodes.values()] == pytest.approx([0, 280, 560])

    def test_canvas_without_drawing_area_raises(self, raw_tree):
        canvas = Canvas(width=200, height=600)
        with pytest.raises(LayoutError):
            layout_tree(normalize_tree(raw_tree, "T"), canvas)

    def test_zero_margins_use_full_canvas(self):
        canvas = Canvas(width=300, height=100, margin=Margin(top=0, right=0, bottom=0, left=0))
        layout = layout_tree(normalize_tree({"name": "A"}, "A"), canvas)

        assert layout.node("node-1").x == pytest.approx(50)


class TestArena:
    """Test suite for the id-addressed node arena."""

    def test_parent_and_children_lookups(self, raw_tree):
        layout = layout_tree(normalize_tree(raw_tree, "T"))

        assert layout.parent_of("node-1") is None
        assert layout.parent_of("node-3").id == "node-2"
        assert [n.id for n in layout.children_of("node-1")] == ["node-2", "node-5", "node-8"]
        assert layout.node("node-3").is_leaf
        assert layout.max_depth == 2

    def test_edges_follow_pre_order(self, raw_tree):
        layout = layout_tree(normalize_tree(raw_tree, "T"))

        assert [(e.source, e.target) for e in layout.edges][:3] == [
            ("node-1", "node-2"),
            ("node-1", "node-5"),
            ("node-1", "node-8"),
        ]

    def test_edge_endpoints_are_in_screen_orientation(self, raw_tree):
        layout = layout_tree(normalize_tree(raw_tree, "T"))

        for edge in layout.edges:
            source = layout.node(edge.source)
            target = layout.node(edge.target)
            assert (edge.source_x, edge.source_y) == (source.y, source.x)
            assert (edge.target_x, edge.target_y) == (target.y, target.x)
            assert edge.path.startswith("M")
            assert "C" in edge.path


class TestGeometryHelpers:
    """Test suite for link paths and label placement."""

    def test_horizontal_link_path(self):
        assert horizontal_link_path(0, 280, 280, 93.3333) == "M0,280C140,280,140,93.33,280,93.33"

    def test_label_placement(self, raw_tree):
        layout = layout_tree(normalize_tree(raw_tree, "T"))

        assert label_placement(layout.node("node-1"), 7) == (-12, "end")
        assert label_placement(layout.node("node-2"), 7) == (-12, "end")
        assert label_placement(layout.node("node-3"), 7) == (12, "start")
