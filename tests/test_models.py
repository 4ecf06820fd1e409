import pytest
from pydantic import ValidationError

from pyramid.models import Node, parse_pyramid_document, sanitize_pyramid
from pyramid.mutations import new_node_id


def test_node_rejects_out_of_range_level():
    with pytest.raises(ValidationError):
        Node(id="x", level=3)


def test_parse_well_formed_document(pyramid_json):
    document = parse_pyramid_document(pyramid_json, "Fallback", new_node_id)
    assert document.title == "Q4 Product Strategy Recommendation"
    assert document.pyramid.children[0].children[0].id == "evidence-1-1"
    assert document.pyramid.children[1].children == []


def test_missing_title_falls_back(pyramid_json):
    del pyramid_json["title"]
    assert parse_pyramid_document(pyramid_json, "Upload", new_node_id).title == "Upload"


def test_sanitize_fixes_levels_ids_and_labels():
    raw = {
        "id": "top",
        "level": 5,
        "content": "Main",
        "children": [
            {"id": "a", "level": 0, "label": "", "content": 42, "children": [
                {"id": "a", "content": "dup id"},
                {"content": "no id", "children": [{"id": "too-deep", "content": "dropped"}]},
            ]},
            {"id": "b", "content": None, "children": "not a list"},
            "garbage",
        ],
    }
    clean = sanitize_pyramid(raw, new_node_id)

    assert clean["id"] == "root"
    assert clean["level"] == 0
    assert clean["label"] == "Main Message"
    assert [c["id"] for c in clean["children"]] == ["a", "b"]

    first = clean["children"][0]
    assert first["level"] == 1
    assert first["label"] == "Key Argument 1"
    assert first["content"] == "42"

    dup, no_id = first["children"]
    assert dup["id"] not in ("a", "")
    assert no_id["id"].startswith("node-")
    assert dup["level"] == no_id["level"] == 2
    assert dup["label"] == "Evidence"
    assert no_id["children"] == []

    second = clean["children"][1]
    assert second["content"] == ""
    assert second["children"] == []

    Node.model_validate(clean)


def test_non_object_pyramid_is_rejected():
    with pytest.raises(ValueError):
        parse_pyramid_document({"title": "x", "pyramid": ["nope"]}, "x", new_node_id)
    with pytest.raises(ValueError):
        parse_pyramid_document({"title": "x"}, "x", new_node_id)
