"""
Interaction controller for the pyramid editor.

Maps user gestures (inline edit, drag and drop, context menu, keyboard) onto
tree mutations and relayouts after every successful change. One controller
instance owns one editing session; nothing here is process-global.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from slides.generator import Slide, generate_slides, slide_thumbnail

from . import mutations
from .layout import LayoutConfig, PyramidLayout, layout, paint_svg
from .models import EditorEvent, Node, PyramidDocument
from .store import TreeStore


class EditorMode(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    DRAGGING = "dragging"
    CONTEXT_MENU = "context_menu"


class InteractionController:
    def __init__(self, config: Optional[LayoutConfig] = None):
        self.store = TreeStore()
        self.config = config or LayoutConfig()
        self.document_title = ""
        self.view = "upload"
        self.current_slide = 0

        self.mode = EditorMode.IDLE
        self.editing_id: Optional[str] = None
        self.draft: Optional[str] = None
        self.dragged_id: Optional[str] = None
        self.drag_over_ids: Set[str] = set()
        self.menu_position: Optional[Tuple[float, float]] = None

        self.layout: PyramidLayout = layout(None, self.config)
        self._notices: List[str] = []

    # ------------------------------------------------------------------
    # Loading / wizard
    # ------------------------------------------------------------------

    @property
    def root(self) -> Optional[Node]:
        return self.store.get_root()

    def load(self, document: PyramidDocument) -> None:
        """Populate the store from an analysis result and open the map view."""
        self.store.load(document.pyramid)
        self.document_title = document.title
        self._reset_interaction()
        self.current_slide = 0
        self.relayout()
        self.view = "mindmap"

    def show_view(self, view: str) -> bool:
        if view not in ("upload", "mindmap", "slides"):
            raise ValueError(f"Unknown view: {view}")
        if view != "upload" and not self.store.is_loaded:
            return False
        self.view = view
        return True

    def slides(self) -> List[Slide]:
        if not self.store.is_loaded:
            return []
        return generate_slides(self.document_title, self.root)

    def generate_slides(self) -> List[Slide]:
        """The 'Generate slides' button: build the deck and preview slide 0."""
        slides = self.slides()
        if slides:
            self.current_slide = 0
            self.view = "slides"
        return slides

    def select_slide(self, index: int) -> bool:
        if not 0 <= index < len(self.slides()):
            return False
        self.current_slide = index
        return True

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def relayout(self) -> PyramidLayout:
        self.layout = layout(self.root, self.config)
        return self.layout

    def render_svg(self) -> str:
        selected = self.store.get_selected()
        return paint_svg(
            self.layout,
            self.config,
            dragging=self.dragged_id,
            drag_over=self.drag_over_ids,
            selected=selected.id if selected else None,
            editing=self.editing_id,
        )

    def take_notices(self) -> List[str]:
        notices, self._notices = self._notices, []
        return notices

    # ------------------------------------------------------------------
    # Inline editing
    # ------------------------------------------------------------------

    def begin_edit(self, node_id: str) -> bool:
        if self.root is None:
            return False
        node = mutations.find_node(self.root, node_id)
        if node is None:
            return False
        self.mode = EditorMode.EDITING
        self.editing_id = node_id
        self.draft = node.content
        return True

    def edit_input(self, text: str) -> None:
        if self.mode == EditorMode.EDITING:
            self.draft = text

    def key_down(self, key: str, shift: bool = False) -> bool:
        """
        Handle a key press. Returns True when the default action is
        prevented (Enter never inserts a newline while editing).
        """
        if key == "Escape":
            self.close_context_menu()
            return False
        if key == "Enter" and not shift and self.mode == EditorMode.EDITING:
            self.commit_edit()
            return True
        return False

    def commit_edit(self, text: Optional[str] = None) -> bool:
        """Focus lost or Enter pressed: write the edited text back."""
        if self.mode != EditorMode.EDITING or self.editing_id is None:
            return False
        if text is None:
            text = self.draft or ""
        changed = mutations.update_content(self.root, self.editing_id, text)
        self.mode = EditorMode.IDLE
        self.editing_id = None
        self.draft = None
        if changed:
            self.relayout()
        return changed

    # ------------------------------------------------------------------
    # Drag and drop
    # ------------------------------------------------------------------

    def drag_start(self, node_id: str) -> bool:
        if self.mode == EditorMode.EDITING:
            self.commit_edit()
        if self.root is None or mutations.find_node(self.root, node_id) is None:
            return False
        self.mode = EditorMode.DRAGGING
        self.dragged_id = node_id
        return True

    def drag_over(self, target_id: str) -> None:
        if self.mode == EditorMode.DRAGGING:
            self.drag_over_ids.add(target_id)

    def drag_leave(self, target_id: str) -> None:
        self.drag_over_ids.discard(target_id)

    def drop(self, target_id: str) -> bool:
        """Swap the dragged node with the drop target when both share a level."""
        self.drag_over_ids.discard(target_id)
        if self.dragged_id is None or self.root is None:
            return False
        if self.dragged_id == target_id:
            return False

        dragged = mutations.find_node(self.root, self.dragged_id)
        target = mutations.find_node(self.root, target_id)
        if dragged is None or target is None or dragged.level != target.level:
            return False

        swapped = mutations.swap(self.root, self.dragged_id, target_id)
        if swapped:
            self.relayout()
        return swapped

    def drag_end(self) -> None:
        """Clear drag affordances whether or not the drop landed."""
        self.dragged_id = None
        self.drag_over_ids.clear()
        if self.mode == EditorMode.DRAGGING:
            self.mode = EditorMode.IDLE

    # ------------------------------------------------------------------
    # Context menu
    # ------------------------------------------------------------------

    def open_context_menu(self, node_id: str, x: float = 0, y: float = 0) -> bool:
        # Opening the menu takes focus from the editor
        if self.mode == EditorMode.EDITING:
            self.commit_edit()
        if self.root is None:
            return False
        node = mutations.find_node(self.root, node_id)
        if node is None:
            return False
        self.store.set_selected(node)
        self.menu_position = (x, y)
        self.mode = EditorMode.CONTEXT_MENU
        return True

    def close_context_menu(self) -> None:
        self.store.set_selected(None)
        self.menu_position = None
        if self.mode == EditorMode.CONTEXT_MENU:
            self.mode = EditorMode.IDLE

    def click(self, inside_menu: bool = False) -> None:
        if not inside_menu:
            self.close_context_menu()

    def menu_action(self, action: str) -> bool:
        """Run a context-menu action on the selected node, then close the menu."""
        selected = self.store.get_selected()
        if selected is None:
            return False

        changed = False
        if action == "edit":
            self.close_context_menu()
            return self.begin_edit(selected.id)
        elif action == "add-child":
            changed = mutations.add_child(self.root, selected.id) is not None
        elif action == "add-sibling":
            changed = mutations.add_sibling(self.root, selected.id) is not None
        elif action == "delete":
            try:
                changed = mutations.delete_node(self.root, selected.id)
            except mutations.RootDeletionError as e:
                self._notices.append(e.message)
        else:
            raise ValueError(f"Unknown menu action: {action}")

        self.close_context_menu()
        if changed:
            self.relayout()
        return changed

    def add_argument(self) -> bool:
        if self.root is None:
            return False
        mutations.add_argument(self.root)
        self.relayout()
        return True

    # ------------------------------------------------------------------
    # Event routing
    # ------------------------------------------------------------------

    def dispatch(self, event: EditorEvent) -> bool:
        """Route one client event to its handler. Returns whether anything changed."""
        t = event.type
        if t == "begin_edit":
            return self.begin_edit(event.node_id or "")
        if t == "edit_input":
            self.edit_input(event.text or "")
            return False
        if t == "key_down":
            return self.key_down(event.key or "", event.shift)
        if t == "blur":
            return self.commit_edit(event.text)
        if t == "drag_start":
            return self.drag_start(event.node_id or "")
        if t == "drag_over":
            self.drag_over(event.target_id or "")
            return False
        if t == "drag_leave":
            self.drag_leave(event.target_id or "")
            return False
        if t == "drop":
            return self.drop(event.target_id or "")
        if t == "drag_end":
            self.drag_end()
            return False
        if t == "context_menu":
            return self.open_context_menu(event.node_id or "", event.x, event.y)
        if t == "menu_action":
            return self.menu_action(event.action or "")
        if t == "click":
            self.click(event.inside_menu)
            return False
        if t == "add_argument":
            return self.add_argument()
        if t == "show_view":
            return self.show_view(event.view or "upload")
        if t == "generate_slides":
            return bool(self.generate_slides())
        if t == "select_slide":
            return self.select_slide(event.index if event.index is not None else -1)
        raise ValueError(f"Unknown event type: {t}")

    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        root = self.root
        selected = self.store.get_selected()
        return {
            "title": self.document_title,
            "view": self.view,
            "mode": self.mode.value,
            "pyramid": root.model_dump() if root else None,
            "selected_id": selected.id if selected else None,
            "editing_id": self.editing_id,
            "dragged_id": self.dragged_id,
            "drag_over_ids": sorted(self.drag_over_ids),
            "menu_position": list(self.menu_position) if self.menu_position else None,
            "current_slide": self.current_slide,
            "layout": {
                "width": self.layout.width,
                "height": self.layout.height,
                "rows": [[n.id for n in row] for row in self.layout.rows],
                "boxes": {
                    node_id: {"x": b.x, "y": b.y, "width": b.width, "height": b.height, "level": b.level}
                    for node_id, b in self.layout.boxes.items()
                },
                "connectors": [
                    {
                        "parent_id": c.parent_id,
                        "child_id": c.child_id,
                        "class": c.css_class,
                        "d": c.curve.to_svg_path(),
                    }
                    for c in self.layout.connectors
                ],
            },
        }

    def slides_payload(self) -> Dict[str, Any]:
        slides = self.slides()
        return {
            "title": self.document_title,
            "current_slide": self.current_slide,
            "slides": [s.model_dump() for s in slides],
            "thumbnails": [slide_thumbnail(s) for s in slides],
        }

    def _reset_interaction(self) -> None:
        self.mode = EditorMode.IDLE
        self.editing_id = None
        self.draft = None
        self.dragged_id = None
        self.drag_over_ids = set()
        self.menu_position = None
        self._notices = []
