"""
Tag-keyed style registry and style resolution.

:class:`Styles` holds the element and relationship style rules of one
workspace and resolves the effective style of a diagram element or
relationship by layering the rules matching its tags over the built-in
defaults.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union

from archstyle_mcp.styles import (
    ElementStyle,
    RelationshipStyle,
    default_element_style,
    default_relationship_style,
    default_size,
)
from archstyle_mcp.validation import (
    DuplicateStyleError,
    ValidationError,
    validate_tag,
)

logger = logging.getLogger(__name__)


def tags_of(entity: Any) -> list[str]:
    """Return the ordered tags of a model entity.

    Entities expose ``tags`` either as a sequence or as the comma-separated
    string used by workspace documents.  Entities without tags yield an
    empty list.
    """
    tags = getattr(entity, "tags", None)
    if not tags:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    result: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in result:
            result.append(tag)
    return result


class Styles:
    """The element and relationship styles of a workspace."""

    def __init__(self) -> None:
        self._elements: dict[str, ElementStyle] = {}
        self._relationships: dict[str, RelationshipStyle] = {}

    # -- registration --

    def add_element_style(self, tag: str) -> ElementStyle:
        """Create, register and return an element style for *tag*."""
        style = ElementStyle(validate_tag(tag))
        self._register(self._elements, style)
        return style

    def add_relationship_style(self, tag: str) -> RelationshipStyle:
        """Create, register and return a relationship style for *tag*."""
        style = RelationshipStyle(validate_tag(tag))
        self._register(self._relationships, style)
        return style

    def add(self, style: Union[ElementStyle, RelationshipStyle]) -> None:
        """Register an already constructed style."""
        if isinstance(style, ElementStyle):
            self._register(self._elements, style)
        elif isinstance(style, RelationshipStyle):
            self._register(self._relationships, style)
        else:
            raise ValidationError(
                f"Expected an ElementStyle or RelationshipStyle, got {type(style).__name__}."
            )

    @staticmethod
    def _register(rules: dict, style: Union[ElementStyle, RelationshipStyle]) -> None:
        tag = validate_tag(style.tag)
        if tag in rules:
            raise DuplicateStyleError(style.KIND, tag)
        rules[tag] = style
        logger.debug("Registered %s style for tag %r", style.KIND, tag)

    # -- enumeration --

    @property
    def elements(self) -> list[ElementStyle]:
        return list(self._elements.values())

    @property
    def relationships(self) -> list[RelationshipStyle]:
        return list(self._relationships.values())

    def get_elements(self) -> list[ElementStyle]:
        return self.elements

    def get_relationships(self) -> list[RelationshipStyle]:
        return self.relationships

    def get_element_style(self, tag: str) -> Optional[ElementStyle]:
        return self._elements.get(tag)

    def get_relationship_style(self, tag: str) -> Optional[RelationshipStyle]:
        return self._relationships.get(tag)

    def __len__(self) -> int:
        return len(self._elements) + len(self._relationships)

    # -- removal --

    def clear_element_styles(self) -> None:
        logger.debug("Clearing %d element style(s)", len(self._elements))
        self._elements.clear()

    def clear_relationship_styles(self) -> None:
        logger.debug("Clearing %d relationship style(s)", len(self._relationships))
        self._relationships.clear()

    # -- resolution --

    def find_element_style(self, element: Any) -> ElementStyle:
        """Resolve the effective style of *element*.

        Rules are applied in the order of the element's own tags, so a
        later tag overrides an earlier one field by field.  Width and
        height that no rule sets fall back to the default size of the
        resulting shape.  ``None`` yields the default element style.
        """
        style = default_element_style()
        if element is None:
            return style

        sized: set[str] = set()
        for rule in self._matching(self._elements, tags_of(element)):
            sized.update(n for n in style.overlay(rule) if n in ("width", "height"))

        width, height = default_size(style.shape)
        if "width" not in sized:
            style.width = width
        if "height" not in sized:
            style.height = height
        return style

    def find_relationship_style(self, relationship: Any) -> RelationshipStyle:
        """Resolve the effective style of *relationship*.

        A relationship instance (one with a ``linked_relationship``) is
        styled like the relationship it was derived from; its own tags are
        ignored.  ``None`` yields the default relationship style.
        """
        style = default_relationship_style()
        if relationship is None:
            return style

        linked = getattr(relationship, "linked_relationship", None)
        if linked is not None:
            relationship = linked

        for rule in self._matching(self._relationships, tags_of(relationship)):
            style.overlay(rule)
        return style

    @staticmethod
    def _matching(rules: dict, tags: Iterable[str]) -> Iterable[Any]:
        for tag in tags:
            rule = rules.get(tag)
            if rule is not None:
                yield rule
