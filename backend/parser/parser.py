# Document text extraction for uploads
# Set environment variable USE_LLAMAPARSE=TRUE to use LlamaParse for PDF/DOCX, otherwise uses Docling

import io
import os
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Configuration from environment
USE_LLAMAPARSE = os.getenv("USE_LLAMAPARSE", "FALSE").upper() == "TRUE"
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "10"))
MAX_UPLOAD_BYTES = MAX_UPLOAD_MB * 1024 * 1024

DEFAULT_TITLE = "Untitled Document"

ALLOWED_TYPES = {
    "application/pdf": ".pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "text/plain": ".txt",
    "text/markdown": ".md",
}
ALLOWED_EXTENSIONS = [".pdf", ".docx", ".txt", ".md"]
CONVERTED_EXTENSIONS = [".pdf", ".docx"]


class UnsupportedDocumentError(ValueError):
    """Upload rejected before any analysis (bad type, too large)."""


def title_from_filename(filename: Optional[str]) -> str:
    """'Q4 plan.final.pdf' -> 'Q4 plan.final'"""
    if not filename:
        return DEFAULT_TITLE
    stem = Path(filename).stem
    return stem or DEFAULT_TITLE


def resolve_extension(filename: Optional[str], content_type: Optional[str]) -> str:
    """Pick the document kind from the extension, falling back to the content type."""
    extension = Path(filename).suffix.lower() if filename else ""
    if extension in ALLOWED_EXTENSIONS:
        return extension
    if content_type in ALLOWED_TYPES:
        return ALLOWED_TYPES[content_type]
    raise UnsupportedDocumentError(
        f"Invalid file type. Received: content_type={content_type}, extension={extension}. "
        f"Only PDF, DOCX, TXT, and MD files are allowed."
    )


def parse_with_llamaparse(filename: str, data: bytes) -> str:
    """Parse PDF/DOCX bytes using LlamaParse and return markdown text."""
    from llama_parse import LlamaParse

    parser = LlamaParse(result_type="markdown")
    docs = parser.load_data(io.BytesIO(data), extra_info={"file_name": filename})
    return "\n\n".join(d.text for d in docs)


def parse_with_docling(filename: str, data: bytes) -> str:
    """Parse PDF/DOCX bytes using Docling and return markdown text."""
    from docling.datamodel.base_models import DocumentStream
    from docling.document_converter import DocumentConverter

    converter = DocumentConverter()
    source = DocumentStream(name=filename, stream=io.BytesIO(data))
    doc = converter.convert(source).document
    return doc.export_to_markdown()


def extract_document_text(
    filename: Optional[str],
    content_type: Optional[str],
    data: bytes,
) -> Tuple[str, str]:
    """
    Turn an uploaded file into (title, plain text).

    PDF and DOCX go through Docling or LlamaParse; text and markdown are
    decoded as UTF-8. Raises UnsupportedDocumentError for anything else or
    for files over the upload limit.
    """
    if len(data) > MAX_UPLOAD_BYTES:
        raise UnsupportedDocumentError(f"File too large. Maximum size is {MAX_UPLOAD_MB}MB.")

    extension = resolve_extension(filename, content_type)
    title = title_from_filename(filename)
    name = filename or f"document{extension}"

    if extension in CONVERTED_EXTENSIONS:
        if USE_LLAMAPARSE:
            print(f"Parsing {name} with LlamaParse...")
            text = parse_with_llamaparse(name, data)
        else:
            print(f"Parsing {name} with Docling...")
            text = parse_with_docling(name, data)
    else:
        text = data.decode("utf-8", errors="replace")

    return title, text
