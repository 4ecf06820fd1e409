"""Pyramid tree: model, store, mutations and layout.

The interaction controller lives in ``pyramid.controller``; it pulls in the
slide generator, which itself depends on ``pyramid.models``.
"""

from .models import (
    EditorEvent,
    Node,
    PyramidDocument,
    parse_pyramid_document,
    sanitize_pyramid,
)
from .store import TreeStore
from .mutations import (
    RootDeletionError,
    add_argument,
    add_child,
    add_sibling,
    delete_node,
    find_node,
    find_parent,
    new_node_id,
    swap,
    update_content,
)
from .layout import (
    LayoutConfig,
    PyramidLayout,
    compute_connector,
    compute_connectors,
    layout,
    layout_rows,
    paint_svg,
    place_nodes,
)

__all__ = [
    'EditorEvent',
    'Node',
    'PyramidDocument',
    'parse_pyramid_document',
    'sanitize_pyramid',
    'TreeStore',
    'RootDeletionError',
    'add_argument',
    'add_child',
    'add_sibling',
    'delete_node',
    'find_node',
    'find_parent',
    'new_node_id',
    'swap',
    'update_content',
    'LayoutConfig',
    'PyramidLayout',
    'compute_connector',
    'compute_connectors',
    'layout',
    'layout_rows',
    'paint_svg',
    'place_nodes',
]
