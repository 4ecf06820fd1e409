"""Data models for the pyramid tree, the analysis payload and editor events."""

from typing import Any, Dict, List, Literal, Optional, Set

from pydantic import BaseModel, Field

MAX_LEVEL = 2

LEVEL_LABELS = {
    0: "Main Message",
    1: "Key Argument",
    2: "Evidence",
}


class Node(BaseModel):
    """A single element of the pyramid.

    Level 0 is the main message (the root), level 1 a key argument and
    level 2 a piece of supporting evidence. Sibling order in ``children``
    is meaningful: it drives rendering position and slide order.
    """
    id: str
    level: int = Field(ge=0, le=MAX_LEVEL)
    label: str = ""
    content: str = ""
    children: List['Node'] = Field(default_factory=list)


# Allow forward references for recursive type
Node.model_rebuild()


class PyramidDocument(BaseModel):
    """What the AI analysis returns: a document title plus its pyramid."""
    title: str
    pyramid: Node


EventType = Literal[
    "begin_edit",
    "edit_input",
    "key_down",
    "blur",
    "drag_start",
    "drag_over",
    "drag_leave",
    "drop",
    "drag_end",
    "context_menu",
    "menu_action",
    "click",
    "add_argument",
    "show_view",
    "generate_slides",
    "select_slide",
]

MenuAction = Literal["edit", "add-child", "add-sibling", "delete"]

View = Literal["upload", "mindmap", "slides"]


class EditorEvent(BaseModel):
    """One user gesture sent by the client."""
    type: EventType
    node_id: Optional[str] = None
    target_id: Optional[str] = None
    text: Optional[str] = None
    key: Optional[str] = None
    shift: bool = False
    action: Optional[MenuAction] = None
    view: Optional[View] = None
    x: float = 0
    y: float = 0
    inside_menu: bool = False
    index: Optional[int] = None


def default_label(level: int, position: int = 0) -> str:
    """Label used when a node arrives without one."""
    if level == 1:
        return f"{LEVEL_LABELS[1]} {position + 1}"
    return LEVEL_LABELS.get(level, LEVEL_LABELS[MAX_LEVEL])


def sanitize_pyramid(raw: Dict[str, Any], new_id) -> Dict[str, Any]:
    """
    Coerce a loosely-shaped pyramid dict (as returned by the model) into one
    that satisfies the tree invariants.

    - levels are recomputed from depth
    - anything below level 2 is dropped
    - the root id is forced to ``root``; missing or duplicate ids are replaced
    - empty labels get the level default, content is coerced to a string

    ``new_id`` is a callable taking an id prefix and returning a fresh id.
    """
    if not isinstance(raw, dict):
        raise ValueError("pyramid must be a JSON object")

    seen: Set[str] = set()

    def walk(node: Dict[str, Any], level: int, position: int) -> Dict[str, Any]:
        if level == 0:
            node_id = "root"
        else:
            node_id = str(node.get("id") or "").strip()
            if not node_id or node_id in seen:
                node_id = new_id("node")
        seen.add(node_id)

        label = str(node.get("label") or "").strip() or default_label(level, position)
        content = node.get("content")
        content = "" if content is None else str(content)

        children = node.get("children") or []
        if not isinstance(children, list):
            children = []
        children = [c for c in children if isinstance(c, dict)]

        if level >= MAX_LEVEL and children:
            print(f"⚠️  Dropping {len(children)} node(s) nested below '{node_id}' (max depth {MAX_LEVEL})")
            children = []

        return {
            "id": node_id,
            "level": level,
            "label": label,
            "content": content,
            "children": [walk(c, level + 1, i) for i, c in enumerate(children)],
        }

    return walk(raw, 0, 0)


def parse_pyramid_document(data: Dict[str, Any], fallback_title: str, new_id) -> PyramidDocument:
    """Validate an analysis payload into a typed ``PyramidDocument``."""
    if not isinstance(data, dict):
        raise ValueError("analysis result must be a JSON object")
    title = str(data.get("title") or "").strip() or fallback_title
    pyramid = sanitize_pyramid(data.get("pyramid"), new_id)
    return PyramidDocument(title=title, pyramid=Node.model_validate(pyramid))
