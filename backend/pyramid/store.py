"""In-memory holder for the current pyramid and the selected node."""

from typing import Optional

from .models import Node


class TreeStore:
    """
    Single source of truth for the mind map and the slides.

    No validation happens here; callers keep the tree invariants.
    """

    def __init__(self, root: Optional[Node] = None):
        self._root = root
        self._selected: Optional[Node] = None

    def get_root(self) -> Optional[Node]:
        return self._root

    def load(self, root: Node) -> None:
        """Replace the whole tree (new document analyzed)."""
        self._root = root
        self._selected = None

    def clear(self) -> None:
        self._root = None
        self._selected = None

    def get_selected(self) -> Optional[Node]:
        return self._selected

    def set_selected(self, node: Optional[Node]) -> None:
        self._selected = node

    @property
    def is_loaded(self) -> bool:
        return self._root is not None
