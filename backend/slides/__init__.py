"""Slide generation and export module."""

from .generator import (
    Slide,
    generate_slides,
    slide_thumbnail,
)
from .export import (
    export_filename,
    export_slides_html,
    export_slides_pptx,
)

__all__ = [
    'Slide',
    'generate_slides',
    'slide_thumbnail',
    'export_filename',
    'export_slides_html',
    'export_slides_pptx',
]
