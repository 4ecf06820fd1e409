"""Parser module for document text extraction."""

from .parser import (
    ALLOWED_EXTENSIONS,
    MAX_UPLOAD_BYTES,
    USE_LLAMAPARSE,
    UnsupportedDocumentError,
    extract_document_text,
    resolve_extension,
    title_from_filename,
)

__all__ = [
    'ALLOWED_EXTENSIONS',
    'MAX_UPLOAD_BYTES',
    'USE_LLAMAPARSE',
    'UnsupportedDocumentError',
    'extract_document_text',
    'resolve_extension',
    'title_from_filename',
]
