import io

from pptx import Presentation

from pyramid.mutations import add_argument, add_child, delete_node
from slides.export import export_filename, export_slides_html, export_slides_pptx
from slides.generator import generate_slides, slide_thumbnail


def test_mobile_first_deck(root):
    slides = generate_slides("Q4 Product Strategy", root)

    assert [s.title for s in slides] == [
        "Q4 Product Strategy",
        "Recommendation",
        "Key Argument 1",
        "Key Argument 2",
        "Summary",
    ]
    assert slides[0].type == "title"
    assert slides[0].subtitle == "Executive Summary"
    assert slides[1].points == ["Adopt mobile-first strategy"]
    assert slides[2].points == ["Users have moved to mobile", "68% of users are mobile-first"]
    assert slides[4].points == ["Users have moved to mobile", "Competitors are ahead on mobile"]


def test_slide_count_tracks_arguments(root):
    assert len(generate_slides("T", root)) == 2 + 2 + 1
    add_argument(root)
    add_child(root, "root")
    assert len(generate_slides("T", root)) == 2 + 4 + 1
    delete_node(root, "arg-1")
    assert len(generate_slides("T", root)) == 2 + 3 + 1


def test_unlabelled_argument_gets_numbered_title(root):
    root.children[1].label = ""
    assert generate_slides("T", root)[3].title == "Key Point 2"


def test_generation_is_deterministic(root):
    assert generate_slides("T", root) == generate_slides("T", root)


def test_thumbnails(root):
    slides = generate_slides("T", root)
    assert slide_thumbnail(slides[0]) == {"title": "T", "preview": "Executive Summary..."}
    root.content = "x" * 80
    long_preview = slide_thumbnail(generate_slides("T", root)[1])["preview"]
    assert long_preview == "x" * 50 + "..."


def test_export_filename():
    assert export_filename("Q4 Product  Strategy") == "Q4-Product-Strategy-slides.html"
    assert export_filename("Deck", "pptx") == "Deck-slides.pptx"


def test_html_export(root):
    root.content = "Ship <mobile> first"
    slides = generate_slides("Q4 & Beyond", root)
    html = export_slides_html("Q4 & Beyond", slides)

    assert html.startswith("<!DOCTYPE html>")
    assert "<title>Q4 &amp; Beyond - Slides</title>" in html
    assert html.count('class="slide title-slide"') == 1
    assert html.count('class="slide content-slide"') == 4
    assert "<li>Ship &lt;mobile&gt; first</li>" in html


def test_pptx_export(root):
    slides = generate_slides("Q4 Product Strategy", root)
    prs = Presentation(io.BytesIO(export_slides_pptx(slides)))

    assert len(prs.slides) == 5
    assert prs.slides[0].shapes.title.text == "Q4 Product Strategy"
    body = prs.slides[2].placeholders[1].text_frame
    assert [p.text for p in body.paragraphs] == ["Users have moved to mobile", "68% of users are mobile-first"]
