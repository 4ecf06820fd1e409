"""Turn a pyramid into an ordered slide deck."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from pyramid.models import Node

TITLE_SUBTITLE = "Executive Summary"
RECOMMENDATION_TITLE = "Recommendation"
SUMMARY_TITLE = "Summary"
THUMBNAIL_PREVIEW_CHARS = 50


class Slide(BaseModel):
    type: Literal["title", "content"]
    title: str
    subtitle: Optional[str] = None
    points: List[str] = Field(default_factory=list)


def generate_slides(document_title: str, root: Node) -> List[Slide]:
    """
    Build the deck: title slide, the main message, one slide per key argument
    (its content followed by its evidence), and a summary of the arguments.

    Always yields 3 + len(root.children) slides.
    """
    slides = [
        Slide(type="title", title=document_title, subtitle=TITLE_SUBTITLE),
        Slide(type="content", title=RECOMMENDATION_TITLE, points=[root.content]),
    ]

    for index, argument in enumerate(root.children):
        points = [argument.content] + [evidence.content for evidence in argument.children]
        slides.append(Slide(
            type="content",
            title=argument.label or f"Key Point {index + 1}",
            points=points,
        ))

    slides.append(Slide(
        type="content",
        title=SUMMARY_TITLE,
        points=[argument.content for argument in root.children],
    ))
    return slides


def slide_thumbnail(slide: Slide) -> dict:
    """Short title + preview text for the slide strip."""
    if slide.type == "title":
        preview = slide.subtitle or ""
    else:
        preview = slide.points[0][:THUMBNAIL_PREVIEW_CHARS] if slide.points else ""
    return {"title": slide.title, "preview": f"{preview}..."}
