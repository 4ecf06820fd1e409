"""End-to-end pipeline: document -> Minto pyramid -> slide deck files."""

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from parser.parser import extract_document_text
from llm.analyze import analyze_document
from pyramid.models import PyramidDocument
from slides.export import export_filename, export_slides_html, export_slides_pptx
from slides.generator import generate_slides

# Load environment variables
load_dotenv()

# Configuration from environment
OUTPUT_PYRAMID = os.getenv("OUTPUT_PYRAMID", "pyramid.json")


def analyze_file(document_path: str) -> PyramidDocument:
    """Extract text from a document on disk and run the pyramid analysis."""
    path = Path(document_path)
    if not path.exists():
        raise FileNotFoundError(f"Document '{document_path}' does not exist")

    title, text = extract_document_text(path.name, None, path.read_bytes())
    return analyze_document(title, text)


def run_pipeline(
    document_path: str,
    output_pyramid: Optional[str] = None,
    output_slides: Optional[str] = None,
    pptx: bool = False,
) -> PyramidDocument:
    """
    Run the complete pipeline: read document -> analyze -> write pyramid JSON -> write slides.

    Args:
        document_path: PDF, DOCX, TXT or MD file to analyze
        output_pyramid: Output pyramid JSON path (default: from env)
        output_slides: Output slides path (default: derived from the document title)
        pptx: Write a PowerPoint deck instead of HTML

    Returns:
        PyramidDocument: The analyzed pyramid
    """
    output_pyramid = output_pyramid or OUTPUT_PYRAMID

    # Step 1: Analyze document
    document = analyze_file(document_path)

    # Step 2: Write pyramid JSON
    os.makedirs(os.path.dirname(output_pyramid) or ".", exist_ok=True)
    with open(output_pyramid, "w", encoding="utf-8") as f:
        json.dump(document.model_dump(), f, indent=2, ensure_ascii=False)
    print(f"Wrote pyramid to {output_pyramid}")

    # Step 3: Write slides
    slides = generate_slides(document.title, document.pyramid)
    output_slides = output_slides or export_filename(document.title, "pptx" if pptx else "html")
    if pptx:
        with open(output_slides, "wb") as f:
            f.write(export_slides_pptx(slides))
    else:
        with open(output_slides, "w", encoding="utf-8") as f:
            f.write(export_slides_html(document.title, slides))
    print(f"✅ Wrote {len(slides)} slides to {output_slides}")

    return document


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Analyze a document into a Minto pyramid and export slides")
    parser.add_argument(
        "file",
        type=str,
        help="Document to analyze (PDF, DOCX, TXT or MD)"
    )
    parser.add_argument(
        "--output-pyramid",
        type=str,
        default=None,
        help="Output pyramid JSON path (default: from env)"
    )
    parser.add_argument(
        "--output-slides",
        type=str,
        default=None,
        help="Output slides path (default: <Title>-slides.html)"
    )
    parser.add_argument(
        "--pptx",
        action="store_true",
        help="Export a PowerPoint deck instead of HTML"
    )
    args = parser.parse_args()

    run_pipeline(
        document_path=args.file,
        output_pyramid=args.output_pyramid,
        output_slides=args.output_slides,
        pptx=args.pptx,
    )
