"""
Tree surgery on the pyramid.

Every operation looks nodes up by id with a depth-first search from the root.
Missing ids, cross-level swaps and the depth cap are silent no-ops; deleting
the root is the one rejection that surfaces to the user (RootDeletionError).
"""

import time
from typing import Optional, Tuple

from .models import LEVEL_LABELS, MAX_LEVEL, Node

PLACEHOLDER_CONTENT = "New item - click to edit"
NEW_ARGUMENT_CONTENT = "New argument - click to edit"

_last_id_ms = 0


class RootDeletionError(Exception):
    """Raised when asked to delete the main message node."""

    def __init__(self, message: str = "Cannot delete the main message node"):
        super().__init__(message)
        self.message = message


def new_node_id(prefix: str = "node") -> str:
    """Timestamp-based id, strictly increasing for the life of the process."""
    global _last_id_ms
    now_ms = time.time_ns() // 1_000_000
    _last_id_ms = max(now_ms, _last_id_ms + 1)
    return f"{prefix}-{_last_id_ms}"


def find_node(root: Node, node_id: str) -> Optional[Node]:
    """Return the first node with the given id (depth-first), or None."""
    if root.id == node_id:
        return root
    for child in root.children:
        found = find_node(child, node_id)
        if found is not None:
            return found
    return None


def find_parent(root: Node, node_id: str) -> Optional[Node]:
    """Return the direct parent of the node with the given id, or None."""
    for child in root.children:
        if child.id == node_id:
            return root
        found = find_parent(child, node_id)
        if found is not None:
            return found
    return None


def _locate(root: Node, node_id: str) -> Optional[Tuple[Optional[Node], Node, int]]:
    # (parent, node, index in parent) -- parent is None and index -1 for the root
    if root.id == node_id:
        return None, root, -1
    parent = find_parent(root, node_id)
    if parent is None:
        return None
    for index, child in enumerate(parent.children):
        if child.id == node_id:
            return parent, child, index
    return None


def update_content(root: Node, node_id: str, text: str) -> bool:
    node = find_node(root, node_id)
    if node is None:
        return False
    node.content = text
    return True


def _new_node(level: int, label: str, content: str = PLACEHOLDER_CONTENT, prefix: str = "node") -> Node:
    return Node(id=new_node_id(prefix), level=level, label=label, content=content, children=[])


def add_child(root: Node, parent_id: str) -> Optional[str]:
    """
    Append a new child under ``parent_id``.

    Returns the new node's id, or None when the parent is missing or already
    at the evidence level.
    """
    parent = find_node(root, parent_id)
    if parent is None or parent.level >= MAX_LEVEL:
        return None

    label = LEVEL_LABELS[1] if parent.level == 0 else LEVEL_LABELS[2]
    child = _new_node(parent.level + 1, label)
    parent.children.append(child)
    return child.id


def add_sibling(root: Node, node_id: str) -> Optional[str]:
    """Insert a new node right after ``node_id`` with the same level and label."""
    located = _locate(root, node_id)
    if located is None:
        return None
    parent, node, index = located
    if parent is None:
        return None

    sibling = _new_node(node.level, node.label)
    parent.children.insert(index + 1, sibling)
    return sibling.id


def add_argument(root: Node) -> str:
    """Append a fresh key argument under the root (toolbar action)."""
    argument = _new_node(1, LEVEL_LABELS[1], NEW_ARGUMENT_CONTENT, prefix="arg")
    root.children.append(argument)
    return argument.id


def delete_node(root: Node, node_id: str) -> bool:
    """
    Remove a node and its whole subtree from its parent.

    Raises RootDeletionError for the main message node.
    """
    node = find_node(root, node_id)
    if node is None:
        return False
    if node.level == 0:
        raise RootDeletionError()

    parent = find_parent(root, node_id)
    if parent is None:
        return False
    parent.children = [c for c in parent.children if c.id != node_id]
    return True


def swap(root: Node, id_a: str, id_b: str) -> bool:
    """
    Exchange two same-level siblings in their parent's child order.

    Nodes under different parents are left alone even if their levels match.
    """
    if id_a == id_b:
        return False

    loc_a = _locate(root, id_a)
    loc_b = _locate(root, id_b)
    if loc_a is None or loc_b is None:
        return False

    parent_a, node_a, index_a = loc_a
    parent_b, node_b, index_b = loc_b
    if node_a.level != node_b.level:
        return False
    if parent_a is None or parent_a is not parent_b:
        return False

    children = parent_a.children
    children[index_a], children[index_b] = children[index_b], children[index_a]
    return True
