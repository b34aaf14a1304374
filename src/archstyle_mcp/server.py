"""
Architecture style MCP server - manage tag-keyed diagram styles via
Model Context Protocol.

Exposes 2 tools that let an LLM agent define element and relationship
styles for a workspace and ask which effective style an element or
relationship with a given set of tags would be drawn with.

Tools:
  1. styles   - registry: add element/relationship styles, list, clear,
                export, import
  2. resolve  - read-only: effective style of an element or relationship
"""

from __future__ import annotations

import json
import logging
import threading
from types import SimpleNamespace
from typing import Any

from mcp.server.fastmcp import FastMCP

from archstyle_mcp.codec import load_into, style_to_dict, styles_to_dict
from archstyle_mcp.registry import Styles
from archstyle_mcp.styles import (
    ElementStyle,
    RelationshipStyle,
    default_element_style,
    default_relationship_style,
)
from archstyle_mcp.validation import (
    ValidationError,
    validate_action,
    validate_non_empty_string,
    validate_tag,
    validate_tag_list,
    _RESOLVE_ACTIONS,
    _STYLES_ACTIONS,
)

# ---------------------------------------------------------------------------
# Logging - suppress routine FastMCP INFO messages that editors show
# as warnings (they go to stderr).
# ---------------------------------------------------------------------------
logging.getLogger("mcp.server").setLevel(logging.WARNING)
logger = logging.getLogger("archstyle-mcp")

# ---------------------------------------------------------------------------
# MCP Server
# ---------------------------------------------------------------------------
mcp = FastMCP(
    "archstyle-mcp",
    instructions=(
        "MCP server for tag-based styling of architecture diagrams.\n\n"
        "=== 2 TOOLS - use the 'action' parameter to pick the operation ===\n\n"
        "1. styles(action, ...) - add_element, add_relationship, list,\n"
        "   clear_elements, clear_relationships, export, import.\n"
        "2. resolve(action, ...) - element, relationship.\n\n"
        "=== RULES ===\n"
        "- Every style is keyed by exactly one tag; a tag can only be styled once\n"
        "  per workspace and kind.\n"
        "- Styles are applied in the order of the element's own tags: later tags\n"
        "  override earlier ones field by field.\n"
        "- Width/height not set by any style follow the shape (Person = 400x400,\n"
        "  everything else 450x300).\n"
        "- Colors are hex (#RRGGBB). Opacity and position are 0-100.\n"
    ),
)

# In-memory style registries: workspace name -> Styles
# Guarded by _workspaces_lock for thread-safety.
_workspaces: dict[str, Styles] = {}
_workspaces_lock = threading.Lock()


def _workspace(name: str, *, create: bool = False) -> Styles | None:
    with _workspaces_lock:
        reg = _workspaces.get(name)
        if reg is None and create:
            reg = _workspaces[name] = Styles()
        return reg


def _clean(fields: dict[str, Any]) -> dict[str, Any]:
    """Drop parameters the caller left at their "not given" value."""
    return {k: v for k, v in fields.items() if v is not None and v != ""}


# ===================================================================
# RESOURCES
# ===================================================================

@mcp.resource("archstyle://defaults")
def default_styles() -> str:
    """Return the built-in element and relationship styles."""
    return json.dumps({
        "element": style_to_dict(default_element_style()),
        "relationship": style_to_dict(default_relationship_style()),
    }, indent=2)


# ===================================================================
# TOOL 1: styles - registry
# ===================================================================

@mcp.tool()
def styles(
    action: str,
    workspace: str = "default",
    tag: str = "",
    # -- shared --
    color: str = "",
    font_size: int | None = None,
    width: int | None = None,
    opacity: int | None = None,
    # -- element --
    height: int | None = None,
    background: str = "",
    shape: str = "",
    icon: str = "",
    border: str = "",
    stroke: str = "",
    metadata: bool | None = None,
    description: bool | None = None,
    # -- relationship --
    thickness: int | None = None,
    dashed: bool | None = None,
    routing: str = "",
    position: int | None = None,
    # -- import --
    document: dict[str, Any] | None = None,
) -> str:
    """Style registry management.

    Actions:
      add_element         - Add an element style. Params: tag, width, height,
                            background, color, font_size, shape, icon, border,
                            stroke, opacity, metadata, description.
      add_relationship    - Add a relationship style. Params: tag, thickness,
                            color, dashed, routing, font_size, width, position,
                            opacity.
      list                - List all styles of the workspace.
      clear_elements      - Remove all element styles.
      clear_relationships - Remove all relationship styles.
      export              - Same as list, as a workspace styles document.
      import              - Add styles from a document
                            {"elements": [...], "relationships": [...]}.

    Args:
        action: One of the actions above.
        workspace: Name of the style workspace (created on first add).
        tag: Tag the new style is keyed by.
        color: Text color (elements) or line color (relationships).
        font_size: Font size in pixels.
        width: Element width, or relationship label width.
        opacity: Opacity 0-100.
        height: Element height.
        background: Element background color.
        shape: Box, RoundedBox, Circle, Ellipse, Hexagon, Person, Cylinder, ...
        icon: Icon URL or path.
        border: Solid, Dashed or Dotted.
        stroke: Element border color.
        metadata: Show element metadata.
        description: Show element description.
        thickness: Relationship line thickness.
        dashed: Dashed relationship line.
        routing: Direct, Orthogonal or Curved.
        position: Label position along the line, 0-100.
        document: Styles document for import.

    Returns:
        Result string or JSON depending on action.
    """
    try:
        action = validate_action(action, "styles", _STYLES_ACTIONS)
        workspace = validate_non_empty_string(workspace, "workspace")
    except ValidationError as exc:
        return f"Error: {exc.message}"

    if action == "add_element":
        fields = _clean(dict(
            width=width, height=height, background=background, color=color,
            font_size=font_size, shape=shape, icon=icon, border=border,
            stroke=stroke, opacity=opacity, metadata=metadata,
            description=description,
        ))
        reg = _workspace(workspace, create=True)
        try:
            style = ElementStyle(validate_tag(tag), **fields)
            with _workspaces_lock:
                reg.add(style)
        except ValidationError as exc:
            return f"Error: {exc.message}"
        return json.dumps(style_to_dict(style))

    elif action == "add_relationship":
        fields = _clean(dict(
            thickness=thickness, color=color, dashed=dashed, routing=routing,
            font_size=font_size, width=width, position=position,
            opacity=opacity,
        ))
        reg = _workspace(workspace, create=True)
        try:
            style = RelationshipStyle(validate_tag(tag), **fields)
            with _workspaces_lock:
                reg.add(style)
        except ValidationError as exc:
            return f"Error: {exc.message}"
        return json.dumps(style_to_dict(style))

    elif action in ("list", "export"):
        reg = _workspace(workspace)
        if reg is None:
            return f"Error: workspace '{workspace}' not found."
        with _workspaces_lock:
            data = styles_to_dict(reg)
        return json.dumps(data, indent=2)

    elif action == "clear_elements":
        reg = _workspace(workspace)
        if reg is None:
            return f"Removed 0 element style(s) from '{workspace}'."
        with _workspaces_lock:
            count = len(reg.elements)
            reg.clear_element_styles()
        return f"Removed {count} element style(s) from '{workspace}'."

    elif action == "clear_relationships":
        reg = _workspace(workspace)
        if reg is None:
            return f"Removed 0 relationship style(s) from '{workspace}'."
        with _workspaces_lock:
            count = len(reg.relationships)
            reg.clear_relationship_styles()
        return f"Removed {count} relationship style(s) from '{workspace}'."

    elif action == "import":
        reg = _workspace(workspace, create=True)
        try:
            with _workspaces_lock:
                before = len(reg)
                load_into(reg, document)
                added = len(reg) - before
        except ValidationError as exc:
            logger.warning("Rejected styles import for '%s': %s", workspace, exc.message)
            return f"Error: {exc.message}"
        return f"Imported {added} style(s) into '{workspace}'."

    else:
        return (
            f"Error: unknown styles action '{action}'. "
            "Use: add_element, add_relationship, list, clear_elements, "
            "clear_relationships, export, import."
        )


# ===================================================================
# TOOL 2: resolve - read-only
# ===================================================================

@mcp.tool()
def resolve(
    action: str,
    workspace: str = "default",
    tags: list[str] | str | None = None,
    linked_tags: list[str] | str | None = None,
) -> str:
    """Resolve the effective style for a set of tags.

    Actions:
      element      - Effective element style. Params: tags.
      relationship - Effective relationship style. Params: tags, or
                     linked_tags for a relationship instance (the tags of
                     the relationship it was derived from).

    Args:
        action: element or relationship.
        workspace: Name of the style workspace. An unknown workspace
                   resolves to the built-in defaults.
        tags: Ordered tags of the element or relationship, as a list or a
              comma-separated string. Later tags win.
        linked_tags: Tags of the originating relationship; when given,
                     ``tags`` is ignored.

    Returns:
        The effective style as JSON.
    """
    try:
        action = validate_action(action, "resolve", _RESOLVE_ACTIONS)
        workspace = validate_non_empty_string(workspace, "workspace")
        tag_list = validate_tag_list(tags if tags is not None else [], "tags")
        linked = (validate_tag_list(linked_tags, "linked_tags")
                  if linked_tags is not None else None)
    except ValidationError as exc:
        return f"Error: {exc.message}"

    reg = _workspace(workspace) or Styles()
    subject = SimpleNamespace(tags=tag_list, linked_relationship=None)

    with _workspaces_lock:
        if action == "element":
            style = reg.find_element_style(subject)
        else:
            if linked is not None:
                subject.linked_relationship = SimpleNamespace(tags=linked)
            style = reg.find_relationship_style(subject)
    return json.dumps(style_to_dict(style), indent=2)


# ===================================================================
# Entry point
# ===================================================================

def main() -> None:
    """Run the MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
