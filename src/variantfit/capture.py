"""
Content capture module for variantfit.

Builds the immutable ContentNode tree from plain data, as exported by the host
design tool (a nested dict of nodes in its own key spelling). This is the one
place where input is validated; everything past it is total.
"""

from typing import Any, Dict, List, Optional

from .models import (
    Alignment,
    Box,
    ContentNode,
    FlowDescriptor,
    FlowMode,
    NodeType,
    Padding,
    Positioning,
)


class CaptureError(Exception):
    """Raised when captured node data is malformed."""

    pass


IMAGE_PAINT_TYPES = frozenset({"IMAGE", "VIDEO"})


def build_tree(data: Dict[str, Any]) -> ContentNode:
    """
    Build a ContentNode tree from a captured node dict.

    Expected keys per node: ``id`` and ``type`` (required), ``name``,
    ``x``/``y``/``width``/``height`` (or a nested ``box``), ``visible``,
    ``characters``, ``fills``/``strokes`` (lists of paints with ``type`` and
    optional ``visible``), ``role``, ``layoutPositioning``, ``layoutMode``,
    ``itemSpacing``, ``padding*``, ``primaryAxisAlignItems``,
    ``counterAxisAlignItems``, ``layoutWrap`` and ``children``.

    Args:
        data: Root node dict.

    Returns:
        Root ContentNode.

    Raises:
        CaptureError: If a node is not a dict, lacks an id, has an unknown
            type, a non-numeric geometry value, or a non-list children field.
    """
    return _build_node(data, "root")


def _build_node(data: Any, where: str) -> ContentNode:
    if not isinstance(data, dict):
        raise CaptureError(f"{where}: expected an object, got {type(data).__name__}")

    node_id = data.get("id")
    if not isinstance(node_id, str) or not node_id:
        raise CaptureError(f"{where}: missing node id")

    node_type = _parse_node_type(data.get("type"), where)

    raw_children = data.get("children", [])
    if raw_children is None:
        raw_children = []
    if not isinstance(raw_children, list):
        raise CaptureError(f"{where}: 'children' must be a list")

    children = tuple(
        _build_node(child, f"{where}/children[{i}]") for i, child in enumerate(raw_children)
    )

    fills = _parse_paints(data.get("fills"), where, "fills")
    strokes = _parse_paints(data.get("strokes"), where, "strokes")

    characters = data.get("characters") or ""
    if not isinstance(characters, str):
        raise CaptureError(f"{where}: 'characters' must be a string")

    role = data.get("role")
    if role is not None and not isinstance(role, str):
        raise CaptureError(f"{where}: 'role' must be a string")

    return ContentNode(
        id=node_id,
        name=str(data.get("name") or ""),
        node_type=node_type,
        box=_parse_box(data, where),
        visible=bool(data.get("visible", True)),
        characters=characters,
        has_fill=any(paint not in IMAGE_PAINT_TYPES for paint in fills),
        has_stroke=bool(strokes),
        has_image_fill=any(paint in IMAGE_PAINT_TYPES for paint in fills),
        role=role,
        positioning=(
            Positioning.ABSOLUTE
            if str(data.get("layoutPositioning", "")).upper() == "ABSOLUTE"
            else Positioning.AUTO
        ),
        flow=_parse_flow(data, where),
        children=children,
    )


def _parse_node_type(raw: Any, where: str) -> NodeType:
    if not isinstance(raw, str):
        raise CaptureError(f"{where}: missing node type")
    try:
        return NodeType(raw.lower())
    except ValueError:
        raise CaptureError(f"{where}: unknown node type '{raw}'") from None


def _number(value: Any, where: str, key: str, default: float = 0.0) -> float:
    if value is None:
        return default
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CaptureError(f"{where}: '{key}' must be a number")
    return float(value)


def _parse_box(data: Dict[str, Any], where: str) -> Box:
    source = data.get("box", data)
    if not isinstance(source, dict):
        raise CaptureError(f"{where}: 'box' must be an object")
    return Box(
        _number(source.get("x"), where, "x"),
        _number(source.get("y"), where, "y"),
        _number(source.get("width"), where, "width"),
        _number(source.get("height"), where, "height"),
    )


def _parse_paints(raw: Any, where: str, key: str) -> List[str]:
    """Return the types of visible paints."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise CaptureError(f"{where}: '{key}' must be a list")

    paint_types = []
    for paint in raw:
        if not isinstance(paint, dict):
            raise CaptureError(f"{where}: entries of '{key}' must be objects")
        if paint.get("visible", True) is False:
            continue
        paint_types.append(str(paint.get("type", "SOLID")).upper())
    return paint_types


def _parse_alignment(raw: Any) -> Optional[Alignment]:
    if not isinstance(raw, str):
        return None
    try:
        return Alignment(raw.upper())
    except ValueError:
        return None


def _parse_flow(data: Dict[str, Any], where: str) -> Optional[FlowDescriptor]:
    raw_mode = data.get("layoutMode")
    if raw_mode is None:
        return None
    # Grid layouts are planned as freeform.
    if str(raw_mode).upper() == "GRID":
        raw_mode = "none"
    try:
        mode = FlowMode(str(raw_mode).lower())
    except ValueError:
        raise CaptureError(f"{where}: unknown layout mode '{raw_mode}'") from None

    padding = Padding(
        top=_number(data.get("paddingTop"), where, "paddingTop"),
        right=_number(data.get("paddingRight"), where, "paddingRight"),
        bottom=_number(data.get("paddingBottom"), where, "paddingBottom"),
        left=_number(data.get("paddingLeft"), where, "paddingLeft"),
    )

    return FlowDescriptor(
        mode=mode,
        item_spacing=_number(data.get("itemSpacing"), where, "itemSpacing"),
        padding=padding,
        primary_align=_parse_alignment(data.get("primaryAxisAlignItems")),
        counter_align=_parse_alignment(data.get("counterAxisAlignItems")),
        wrap=str(data.get("layoutWrap", "")).upper() == "WRAP",
    )
