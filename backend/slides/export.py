"""Export a slide deck as a standalone HTML file or a PowerPoint deck."""

import io
import re
from html import escape
from typing import List

from pptx import Presentation
from pptx.util import Pt

from .generator import Slide

HTML_STYLE = """
        body { font-family: Arial, sans-serif; margin: 0; padding: 0; }
        .slide {
            width: 100vw;
            height: 100vh;
            display: flex;
            flex-direction: column;
            justify-content: center;
            padding: 60px;
            box-sizing: border-box;
            page-break-after: always;
        }
        .title-slide {
            background: linear-gradient(135deg, #4F46E5, #7C3AED);
            color: white;
            text-align: center;
            align-items: center;
        }
        .title-slide h1 { font-size: 48px; margin-bottom: 20px; }
        .title-slide p { font-size: 24px; opacity: 0.9; }
        .content-slide h2 { font-size: 36px; color: #4F46E5; margin-bottom: 40px; }
        .content-slide ul { list-style: none; padding: 0; }
        .content-slide li {
            font-size: 24px;
            margin-bottom: 20px;
            padding-left: 30px;
            position: relative;
        }
        .content-slide li::before {
            content: '';
            width: 12px;
            height: 12px;
            background: #4F46E5;
            border-radius: 50%;
            position: absolute;
            left: 0;
            top: 10px;
        }
"""


def export_filename(document_title: str, extension: str = "html") -> str:
    """'Q4 Product Strategy' -> 'Q4-Product-Strategy-slides.html'"""
    stem = re.sub(r"\s+", "-", document_title.strip()) or "Untitled"
    return f"{stem}-slides.{extension}"


def _render_slide_html(slide: Slide) -> str:
    if slide.type == "title":
        return (
            '    <div class="slide title-slide">\n'
            f'        <h1>{escape(slide.title)}</h1>\n'
            f'        <p>{escape(slide.subtitle or "")}</p>\n'
            '    </div>\n'
        )
    items = "\n".join(f"            <li>{escape(point)}</li>" for point in slide.points)
    return (
        '    <div class="slide content-slide">\n'
        f'        <h2>{escape(slide.title)}</h2>\n'
        '        <ul>\n'
        f'{items}\n'
        '        </ul>\n'
        '    </div>\n'
    )


def export_slides_html(document_title: str, slides: List[Slide]) -> str:
    """One full-viewport section per slide, title slides styled apart."""
    body = "".join(_render_slide_html(slide) for slide in slides)
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '    <meta charset="utf-8">\n'
        f"    <title>{escape(document_title)} - Slides</title>\n"
        f"    <style>{HTML_STYLE}    </style>\n"
        "</head>\n"
        "<body>\n"
        f"{body}"
        "</body>\n"
        "</html>\n"
    )


def export_slides_pptx(slides: List[Slide]) -> bytes:
    """Build a .pptx with the default template's title and bullet layouts."""
    prs = Presentation()

    for slide in slides:
        if slide.type == "title":
            page = prs.slides.add_slide(prs.slide_layouts[0])
            page.shapes.title.text = slide.title
            page.placeholders[1].text = slide.subtitle or ""
            continue

        page = prs.slides.add_slide(prs.slide_layouts[1])
        page.shapes.title.text = slide.title
        tf = page.placeholders[1].text_frame
        tf.word_wrap = True

        for i, point in enumerate(slide.points):
            p = tf.paragraphs[0] if i == 0 else tf.add_paragraph()
            p.text = point
            p.level = 0
            p.font.size = Pt(20)
            p.space_after = Pt(8)

    buf = io.BytesIO()
    prs.save(buf)
    return buf.getvalue()
