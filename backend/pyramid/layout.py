"""
Pyramid layout and connector geometry.

Layout happens in two passes: ``place_nodes`` assigns every node a box from
the tree shape alone, then ``compute_connectors`` reads the finalized boxes
and draws one curve per parent/child edge. ``paint_svg`` turns the result
into markup. Everything is recomputed from scratch after each mutation.
"""

from dataclasses import dataclass, field
from html import escape
from typing import Dict, Iterable, List, Optional, Tuple

from .models import Node

Point = Tuple[float, float]

# Connector control-point offset cap (px)
CURVE_CAP = 40.0
CURVE_FACTOR = 0.4


@dataclass
class LayoutConfig:
    node_sizes: Dict[int, Tuple[float, float]] = field(default_factory=lambda: {
        0: (320.0, 88.0),
        1: (240.0, 72.0),
        2: (200.0, 64.0),
    })
    h_gap: float = 24.0
    v_gap: float = 80.0
    padding: float = 40.0
    max_chars: int = 60


@dataclass
class NodeBox:
    node_id: str
    level: int
    x: float
    y: float
    width: float
    height: float

    @property
    def top_center(self) -> Point:
        return (self.x + self.width / 2, self.y)

    @property
    def bottom_center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height)


@dataclass
class CubicCurve:
    start: Point
    control1: Point
    control2: Point
    end: Point

    def to_svg_path(self) -> str:
        (x1, y1), (c1x, c1y), (c2x, c2y), (x2, y2) = self.start, self.control1, self.control2, self.end
        return f"M {_fmt(x1)} {_fmt(y1)} C {_fmt(c1x)} {_fmt(c1y)}, {_fmt(c2x)} {_fmt(c2y)}, {_fmt(x2)} {_fmt(y2)}"

    def point_at(self, t: float) -> Point:
        """Evaluate the curve at t in [0, 1]."""
        u = 1 - t
        pts = (self.start, self.control1, self.control2, self.end)
        weights = (u * u * u, 3 * u * u * t, 3 * u * t * t, t * t * t)
        return (
            sum(w * p[0] for w, p in zip(weights, pts)),
            sum(w * p[1] for w, p in zip(weights, pts)),
        )


@dataclass
class Connector:
    parent_id: str
    child_id: str
    level: int  # level of the parent
    curve: CubicCurve

    @property
    def css_class(self) -> str:
        return f"connection-line connection-level-{self.level}"


@dataclass
class PyramidLayout:
    rows: List[List[Node]]
    boxes: Dict[str, NodeBox]
    width: float
    height: float
    connectors: List[Connector] = field(default_factory=list)


def _fmt(value: float) -> str:
    return f"{value:g}"


def layout_rows(root: Optional[Node]) -> List[List[Node]]:
    """
    Project the tree onto three rows: the root, its children, and every
    grandchild flattened in parent order then child order.
    """
    rows: List[List[Node]] = [[], [], []]
    if root is None:
        return rows
    rows[0].append(root)
    rows[1] = list(root.children)
    for argument in root.children:
        rows[2].extend(argument.children)
    return rows


def place_nodes(root: Optional[Node], config: Optional[LayoutConfig] = None) -> PyramidLayout:
    """First pass: give every node a box, each row centered on the canvas."""
    config = config or LayoutConfig()
    rows = layout_rows(root)

    row_widths = []
    for level, nodes in enumerate(rows):
        width, _ = config.node_sizes[level]
        row_widths.append(len(nodes) * width + max(len(nodes) - 1, 0) * config.h_gap)
    canvas_width = max(row_widths) + 2 * config.padding

    boxes: Dict[str, NodeBox] = {}
    y = config.padding
    for level, nodes in enumerate(rows):
        if not nodes:
            continue
        width, height = config.node_sizes[level]
        x = (canvas_width - row_widths[level]) / 2
        for node in nodes:
            boxes[node.id] = NodeBox(node.id, level, x, y, width, height)
            x += width + config.h_gap
        y += height + config.v_gap

    canvas_height = y - config.v_gap + config.padding if boxes else 2 * config.padding
    return PyramidLayout(rows=rows, boxes=boxes, width=canvas_width, height=canvas_height)


def compute_connector(parent_anchor: Point, child_anchor: Point) -> CubicCurve:
    """Smooth vertical S-curve from a parent's bottom-center to a child's top-center."""
    x1, y1 = parent_anchor
    x2, y2 = child_anchor
    strength = min(abs(y2 - y1) * CURVE_FACTOR, CURVE_CAP)
    return CubicCurve(
        start=(x1, y1),
        control1=(x1, y1 + strength),
        control2=(x2, y2 - strength),
        end=(x2, y2),
    )


def compute_connectors(root: Optional[Node], boxes: Dict[str, NodeBox]) -> List[Connector]:
    """Second pass: connect each placed child to its placed parent."""
    connectors: List[Connector] = []
    if root is None or root.id not in boxes:
        return connectors

    root_box = boxes[root.id]
    for argument in root.children:
        arg_box = boxes.get(argument.id)
        if arg_box is None:
            continue
        connectors.append(Connector(
            root.id, argument.id, 0,
            compute_connector(root_box.bottom_center, arg_box.top_center),
        ))
        for evidence in argument.children:
            evidence_box = boxes.get(evidence.id)
            if evidence_box is None:
                continue
            connectors.append(Connector(
                argument.id, evidence.id, 1,
                compute_connector(arg_box.bottom_center, evidence_box.top_center),
            ))
    return connectors


def layout(root: Optional[Node], config: Optional[LayoutConfig] = None) -> PyramidLayout:
    """Full relayout: placement, then connectors over the finalized boxes."""
    result = place_nodes(root, config)
    result.connectors = compute_connectors(root, result.boxes)
    return result


def _truncate(text: str, limit: int) -> str:
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[:limit - 3].rstrip() + "..."


def paint_svg(
    result: PyramidLayout,
    config: Optional[LayoutConfig] = None,
    dragging: Optional[str] = None,
    drag_over: Iterable[str] = (),
    selected: Optional[str] = None,
    editing: Optional[str] = None,
) -> str:
    """Render a computed layout as standalone SVG markup."""
    config = config or LayoutConfig()
    drag_over = set(drag_over)

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" class="mindmap" '
        f'width="{_fmt(result.width)}" height="{_fmt(result.height)}" '
        f'viewBox="0 0 {_fmt(result.width)} {_fmt(result.height)}">',
        '<g class="connections-svg">',
    ]
    for connector in result.connectors:
        parts.append(
            f'<path class="{connector.css_class}" d="{connector.curve.to_svg_path()}" '
            f'data-parent="{escape(connector.parent_id)}" data-child="{escape(connector.child_id)}" fill="none"/>'
        )
    parts.append('</g>')

    for level, nodes in enumerate(result.rows):
        if not nodes:
            continue
        parts.append(f'<g class="pyramid-level level-{level}">')
        for node in nodes:
            box = result.boxes[node.id]
            classes = ["node", f"level-{level}"]
            if node.id == dragging:
                classes.append("dragging")
            if node.id in drag_over:
                classes.append("drag-over")
            if node.id == selected:
                classes.append("selected")
            if node.id == editing:
                classes.append("editing")
            cx, cy = box.x + box.width / 2, box.y + box.height / 2
            parts.append(
                f'<g class="{" ".join(classes)}" data-id="{escape(node.id)}">'
                f'<rect x="{_fmt(box.x)}" y="{_fmt(box.y)}" width="{_fmt(box.width)}" '
                f'height="{_fmt(box.height)}" rx="12"/>'
                f'<text class="node-content" x="{_fmt(cx)}" y="{_fmt(cy)}" '
                f'text-anchor="middle" dominant-baseline="middle">'
                f'{escape(_truncate(node.content, config.max_chars))}</text>'
                f'</g>'
            )
        parts.append('</g>')

    parts.append('</svg>')
    return "\n".join(parts)
