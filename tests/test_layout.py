import pytest

from pyramid.layout import (
    CURVE_CAP,
    LayoutConfig,
    compute_connector,
    compute_connectors,
    layout,
    layout_rows,
    paint_svg,
    place_nodes,
)
from pyramid.models import Node
from pyramid.mutations import add_child, swap


def ids(nodes):
    return [n.id for n in nodes]


def test_rows_flatten_grandchildren_in_order(root):
    add_child(root, "arg-1")
    rows = layout_rows(root)

    assert ids(rows[0]) == ["root"]
    assert ids(rows[1]) == ["arg-1", "arg-2"]
    expected = [e.id for arg in root.children for e in arg.children]
    assert ids(rows[2]) == expected
    assert rows[2][-1].id == "evidence-2-1"


def test_rows_follow_sibling_order_after_swap(root):
    swap(root, "arg-1", "arg-2")
    rows = layout_rows(root)
    assert ids(rows[1]) == ["arg-2", "arg-1"]
    assert ids(rows[2]) == ["evidence-2-1", "evidence-1-1"]


def test_rows_for_empty_tree():
    assert layout_rows(None) == [[], [], []]


def test_place_nodes_centers_rows(root):
    config = LayoutConfig()
    result = place_nodes(root, config)

    root_box = result.boxes["root"]
    assert root_box.x + root_box.width / 2 == pytest.approx(result.width / 2)

    left, right = result.boxes["arg-1"], result.boxes["arg-2"]
    assert left.y == right.y
    assert right.x - (left.x + left.width) == pytest.approx(config.h_gap)
    assert (left.x + right.x + right.width) / 2 == pytest.approx(result.width / 2)

    evidence = result.boxes["evidence-1-1"]
    assert evidence.y > left.y + left.height
    assert root_box.y + root_box.height < left.y


def test_place_nodes_is_deterministic(root):
    first = place_nodes(root)
    second = place_nodes(root)
    assert first.boxes == second.boxes
    assert first.width == second.width


def test_compute_connector_caps_offset():
    far = compute_connector((100, 0), (300, 400))
    assert far.control1 == (100, CURVE_CAP)
    assert far.control2 == (300, 400 - CURVE_CAP)

    near = compute_connector((0, 0), (50, 50))
    assert near.control1 == (0, 20)
    assert near.control2 == (50, 30)
    assert near.to_svg_path() == "M 0 0 C 0 20, 50 30, 50 50"


def test_connector_is_vertically_monotonic():
    curve = compute_connector((10, 100), (400, 260))
    ys = [curve.point_at(t / 20)[1] for t in range(21)]
    assert ys == sorted(ys)
    assert curve.point_at(0) == pytest.approx((10, 100))
    assert curve.point_at(1) == pytest.approx((400, 260))


def test_connectors_join_bottom_to_top(root):
    result = layout(root)
    edges = [(c.parent_id, c.child_id) for c in result.connectors]
    assert edges == [
        ("root", "arg-1"),
        ("arg-1", "evidence-1-1"),
        ("root", "arg-2"),
        ("arg-2", "evidence-2-1"),
    ]

    first = result.connectors[0]
    assert first.curve.start == result.boxes["root"].bottom_center
    assert first.curve.end == result.boxes["arg-1"].top_center
    assert first.css_class == "connection-line connection-level-0"
    assert result.connectors[1].css_class.endswith("connection-level-1")


def test_connectors_skip_unplaced_nodes(root):
    boxes = place_nodes(root).boxes
    del boxes["arg-2"]
    edges = [(c.parent_id, c.child_id) for c in compute_connectors(root, boxes)]
    assert ("root", "arg-2") not in edges
    assert ("arg-2", "evidence-2-1") not in edges


def test_paint_svg_escapes_and_marks_state(root):
    root.content = "Grow <fast> & profitably"
    result = layout(root)
    svg = paint_svg(result, dragging="arg-1", drag_over=["arg-2"], selected="root")

    assert svg.startswith("<svg")
    assert "Grow &lt;fast&gt; &amp; profitably" in svg
    assert 'class="node level-1 dragging" data-id="arg-1"' in svg
    assert 'class="node level-1 drag-over" data-id="arg-2"' in svg
    assert 'class="node level-0 selected" data-id="root"' in svg
    assert svg.count("<path") == 4


def test_layout_of_lone_root():
    result = layout(Node(id="root", level=0, label="Main Message", content="Only"))
    assert list(result.boxes) == ["root"]
    assert result.connectors == []
