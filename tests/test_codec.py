"""Tests for converting styles to and from workspace documents."""

import json

import pytest

from archstyle_mcp.codec import (
    dumps,
    load_into,
    loads,
    style_to_dict,
    styles_from_dict,
    styles_to_dict,
)
from archstyle_mcp.registry import Styles
from archstyle_mcp.styles import Routing, Shape, default_relationship_style
from archstyle_mcp.validation import DuplicateStyleError, ValidationError


def test_styles_to_dict() -> None:
    styles = Styles()
    styles.add_element_style("Person").set(shape=Shape.PERSON, font_size=22)
    styles.add_element_style("Database").set(shape=Shape.CYLINDER, background="#438DD5")
    styles.add_relationship_style("Async").set(dashed=True, routing=Routing.CURVED)

    assert styles_to_dict(styles) == {
        "elements": [
            {"tag": "Person", "fontSize": 22, "shape": "Person"},
            {"tag": "Database", "background": "#438dd5", "shape": "Cylinder"},
        ],
        "relationships": [
            {"tag": "Async", "dashed": True, "routing": "Curved"},
        ],
    }


def test_effective_style_has_no_tag() -> None:
    data = style_to_dict(default_relationship_style())
    assert "tag" not in data
    assert data["routing"] == "Direct"
    assert data["fontSize"] == 24


def test_styles_from_dict() -> None:
    styles = styles_from_dict({
        "elements": [{"tag": "Web Browser", "shape": "WebBrowser", "metadata": False}],
        "relationships": [{"tag": "Relationship", "thickness": 4}],
    })
    element = styles.get_element_style("Web Browser")
    assert element.shape is Shape.WEB_BROWSER
    assert element.metadata is False
    assert styles.get_relationship_style("Relationship").thickness == 4


def test_missing_sections_are_empty() -> None:
    assert len(styles_from_dict({})) == 0


def test_invalid_field_reports_location() -> None:
    with pytest.raises(ValidationError, match=r"elements\[1\]: 'background' must be a valid hex color"):
        styles_from_dict({"elements": [{"tag": "A"}, {"tag": "B", "background": "blue"}]})


def test_unknown_field_is_rejected() -> None:
    with pytest.raises(ValidationError, match="Unknown relationship style field 'shape'"):
        styles_from_dict({"relationships": [{"tag": "R", "shape": "Box"}]})


def test_missing_tag_is_rejected() -> None:
    with pytest.raises(ValidationError, match="A tag must be specified."):
        styles_from_dict({"elements": [{"color": "#ffffff"}]})


def test_duplicate_in_document_leaves_target_unchanged() -> None:
    styles = Styles()
    with pytest.raises(DuplicateStyleError):
        load_into(styles, {"elements": [{"tag": "A"}, {"tag": "A"}]})
    assert len(styles) == 0


def test_duplicate_with_existing_style_leaves_target_unchanged() -> None:
    styles = Styles()
    styles.add_element_style("A")
    with pytest.raises(DuplicateStyleError, match='tag "A" already exists'):
        load_into(styles, {"elements": [{"tag": "B"}, {"tag": "A"}]})
    assert [s.tag for s in styles.elements] == ["A"]


def test_not_a_document() -> None:
    with pytest.raises(ValidationError, match="must be a dict"):
        styles_from_dict(["elements"])


def test_json_round_trip() -> None:
    styles = Styles()
    styles.add_element_style("Person").set(shape="Person", opacity=80)
    text = dumps(styles)
    assert json.loads(text)["elements"][0]["opacity"] == 80
    restored = loads(text)
    assert restored.elements == styles.elements


def test_loads_rejects_bad_json() -> None:
    with pytest.raises(ValidationError, match="Invalid styles JSON"):
        loads("{not json")
