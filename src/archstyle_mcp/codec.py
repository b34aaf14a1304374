"""
Conversion of style rules to and from workspace-document dictionaries.

The document shape is::

    {
      "elements": [{"tag": "Person", "shape": "Person", "fontSize": 22}],
      "relationships": [{"tag": "Relationship", "dashed": false}]
    }

Keys are camelCase, enums are written as their names (``"RoundedBox"``)
and unset fields are omitted.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Union

from archstyle_mcp.registry import Styles
from archstyle_mcp.styles import ElementStyle, RelationshipStyle
from archstyle_mcp.validation import (
    DuplicateStyleError,
    ValidationError,
    validate_dict,
    validate_list,
)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.capitalize() for p in rest)


def _snake(name: str) -> str:
    return "".join("_" + c.lower() if c.isupper() else c for c in name)


def style_to_dict(style: Union[ElementStyle, RelationshipStyle]) -> dict[str, Any]:
    """Serialize one rule (or an effective style) to a plain dict."""
    data: dict[str, Any] = {}
    if style.tag is not None:
        data["tag"] = style.tag
    for name, value in style.set_fields().items():
        data[_camel(name)] = value.value if isinstance(value, Enum) else value
    return data


def _style_from_dict(cls: type, entry: Any, index: int, section: str):
    validate_dict(entry, f"{section}[{index}]")
    fields = {_snake(k): v for k, v in entry.items() if k != "tag"}
    try:
        return cls(entry.get("tag"), **fields)
    except ValidationError as exc:
        raise ValidationError(f"{section}[{index}]: {exc.message}") from exc


def styles_to_dict(styles: Styles) -> dict[str, Any]:
    return {
        "elements": [style_to_dict(s) for s in styles.elements],
        "relationships": [style_to_dict(s) for s in styles.relationships],
    }


def load_into(styles: Styles, data: Any) -> Styles:
    """Register every rule described by *data* in *styles*.

    The document is validated completely before anything is registered,
    so a malformed document leaves *styles* unchanged.  Tags that are
    already registered raise :class:`DuplicateStyleError`.
    """
    validate_dict(data, "styles")
    parsed: list[Union[ElementStyle, RelationshipStyle]] = []
    for section, cls in (("elements", ElementStyle), ("relationships", RelationshipStyle)):
        entries = validate_list(data.get(section, []), section)
        parsed += [_style_from_dict(cls, e, i, section) for i, e in enumerate(entries)]

    staging = Styles()
    for style in parsed:
        staging.add(style)
    for style in parsed:
        lookup = (styles.get_element_style if isinstance(style, ElementStyle)
                  else styles.get_relationship_style)
        if lookup(style.tag) is not None:
            raise DuplicateStyleError(style.KIND, style.tag)
    for style in parsed:
        styles.add(style)
    return styles


def styles_from_dict(data: Any) -> Styles:
    return load_into(Styles(), data)


def dumps(styles: Styles, *, indent: int | None = 2) -> str:
    return json.dumps(styles_to_dict(styles), indent=indent)


def loads(text: str) -> Styles:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Invalid styles JSON: {exc.msg} (line {exc.lineno}).") from exc
    return styles_from_dict(data)
