"""
Style rules and built-in defaults for architecture diagrams.

An :class:`ElementStyle` or :class:`RelationshipStyle` is a partially
specified set of visual attributes keyed by a single tag.  Every field
is optional; ``None`` means "not set by this rule" so that rules can be
layered on top of each other and on top of the built-in defaults.

Rules support fluent chaining::

    style = ElementStyle("Database").set(shape=Shape.CYLINDER, background="#438dd5")
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Optional

from archstyle_mcp.validation import (
    ValidationError,
    validate_bool,
    validate_color,
    validate_dimension,
    validate_enum,
    validate_percentage,
    validate_string,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Shape(Enum):
    """Element shapes understood by renderers."""
    BOX = "Box"
    ROUNDED_BOX = "RoundedBox"
    CIRCLE = "Circle"
    ELLIPSE = "Ellipse"
    HEXAGON = "Hexagon"
    PERSON = "Person"
    CYLINDER = "Cylinder"
    PIPE = "Pipe"
    FOLDER = "Folder"
    WEB_BROWSER = "WebBrowser"
    MOBILE_DEVICE_PORTRAIT = "MobileDevicePortrait"
    MOBILE_DEVICE_LANDSCAPE = "MobileDeviceLandscape"
    ROBOT = "Robot"
    COMPONENT = "Component"


class Border(Enum):
    SOLID = "Solid"
    DASHED = "Dashed"
    DOTTED = "Dotted"


class Routing(Enum):
    DIRECT = "Direct"
    ORTHOGONAL = "Orthogonal"
    CURVED = "Curved"


# ---------------------------------------------------------------------------
# Rule base
# ---------------------------------------------------------------------------

def _color(name: str) -> Callable[[Any], str]:
    return lambda v: validate_color(v, name)


def _dimension(name: str) -> Callable[[Any], int]:
    return lambda v: validate_dimension(v, name)


def _percentage(name: str) -> Callable[[Any], int]:
    return lambda v: validate_percentage(v, name)


def _flag(name: str) -> Callable[[Any], bool]:
    return lambda v: validate_bool(v, name)


class _Style:
    """Common behaviour of element and relationship style rules.

    Subclasses declare ``FIELDS``, an ordered mapping of field name to
    the validator applied on assignment.
    """

    KIND = ""
    FIELDS: dict[str, Callable[[Any], Any]] = {}

    def __init__(self, tag: Optional[str] = None, **fields: Any) -> None:
        object.__setattr__(self, "_tag", tag)
        for name in self.FIELDS:
            object.__setattr__(self, name, None)
        self.set(**fields)

    @property
    def tag(self) -> Optional[str]:
        """The tag this rule is keyed by (``None`` for effective styles)."""
        return self._tag

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "tag":
            raise AttributeError("the tag of a style cannot be changed")
        validator = self.FIELDS.get(name)
        if validator is None:
            raise AttributeError(
                f"{type(self).__name__} has no field '{name}'"
            )
        object.__setattr__(self, name, None if value is None else validator(value))

    def set(self, **fields: Any):
        """Assign several fields at once and return ``self`` for chaining."""
        for name, value in fields.items():
            if name not in self.FIELDS:
                raise ValidationError(
                    f"Unknown {self.KIND} style field '{name}'."
                )
            setattr(self, name, value)
        return self

    def is_set(self, name: str) -> bool:
        return getattr(self, name) is not None

    def set_fields(self) -> dict[str, Any]:
        """Return the fields this rule sets, in declaration order."""
        return {
            name: getattr(self, name)
            for name in self.FIELDS
            if getattr(self, name) is not None
        }

    def overlay(self, other: _Style) -> list[str]:
        """Copy every field *other* sets onto this style.

        Fields *other* leaves unset are not touched.  Returns the names of
        the fields that were copied.
        """
        copied = other.set_fields()
        for name, value in copied.items():
            object.__setattr__(self, name, value)
        return list(copied)

    def copy(self):
        clone = type(self)(self._tag)
        clone.overlay(self)
        return clone

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._tag == other._tag and self.set_fields() == other.set_fields()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        parts = [f"tag={self._tag!r}"]
        parts += [f"{k}={v!r}" for k, v in self.set_fields().items()]
        return f"{type(self).__name__}({', '.join(parts)})"


# ---------------------------------------------------------------------------
# Element and relationship rules
# ---------------------------------------------------------------------------

class ElementStyle(_Style):
    """Visual attributes for elements carrying a given tag."""

    KIND = "element"
    FIELDS = {
        "width": _dimension("width"),
        "height": _dimension("height"),
        "background": _color("background"),
        "color": _color("color"),
        "font_size": _dimension("font_size"),
        "shape": lambda v: validate_enum(v, "shape", Shape),
        "icon": lambda v: validate_string(v, "icon", allow_empty=False),
        "border": lambda v: validate_enum(v, "border", Border),
        "stroke": _color("stroke"),
        "opacity": _percentage("opacity"),
        "metadata": _flag("metadata"),
        "description": _flag("description"),
    }

    width: Optional[int]
    height: Optional[int]
    background: Optional[str]
    color: Optional[str]
    font_size: Optional[int]
    shape: Optional[Shape]
    icon: Optional[str]
    border: Optional[Border]
    stroke: Optional[str]
    opacity: Optional[int]
    metadata: Optional[bool]
    description: Optional[bool]


class RelationshipStyle(_Style):
    """Visual attributes for relationships carrying a given tag."""

    KIND = "relationship"
    FIELDS = {
        "thickness": _dimension("thickness"),
        "color": _color("color"),
        "dashed": _flag("dashed"),
        "routing": lambda v: validate_enum(v, "routing", Routing),
        "font_size": _dimension("font_size"),
        "width": _dimension("width"),
        "position": _percentage("position"),
        "opacity": _percentage("opacity"),
    }

    thickness: Optional[int]
    color: Optional[str]
    dashed: Optional[bool]
    routing: Optional[Routing]
    font_size: Optional[int]
    width: Optional[int]
    position: Optional[int]
    opacity: Optional[int]


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

# Width x height used when no rule sets a size, by effective shape.
SHAPE_SIZES: dict[Shape, tuple[int, int]] = {
    Shape.PERSON: (400, 400),
}
DEFAULT_SIZE = (450, 300)


def default_size(shape: Optional[Shape]) -> tuple[int, int]:
    """Return the default (width, height) for *shape*."""
    return SHAPE_SIZES.get(shape, DEFAULT_SIZE) if shape else DEFAULT_SIZE


def default_element_style() -> ElementStyle:
    """Return a fresh copy of the built-in element style."""
    width, height = DEFAULT_SIZE
    return ElementStyle(
        width=width,
        height=height,
        background="#dddddd",
        color="#000000",
        font_size=24,
        shape=Shape.BOX,
        border=Border.SOLID,
        stroke="#9a9a9a",
        opacity=100,
        metadata=True,
        description=True,
    )


def default_relationship_style() -> RelationshipStyle:
    """Return a fresh copy of the built-in relationship style."""
    return RelationshipStyle(
        thickness=2,
        color="#707070",
        dashed=True,
        routing=Routing.DIRECT,
        font_size=24,
        width=200,
        position=50,
        opacity=100,
    )
