"""Pytest configuration and shared fixtures for variantfit tests."""

import pytest

from variantfit import RetargetEngine, build_tree
from variantfit.models import (
    Box,
    ContentNode,
    FlowDescriptor,
    FlowMode,
    NodeType,
    Padding,
    Target,
)


def node(node_id, node_type=NodeType.FRAME, box=(0, 0, 100, 100), children=(), **kwargs):
    """Build a ContentNode from a compact box tuple."""
    return ContentNode(
        id=node_id,
        name=kwargs.pop("name", node_id),
        node_type=node_type,
        box=Box(*box),
        children=tuple(children),
        **kwargs,
    )


def flow(mode=FlowMode.HORIZONTAL, spacing=0.0, padding=0.0, **kwargs):
    """Build a FlowDescriptor with uniform padding."""
    return FlowDescriptor(
        mode=mode,
        item_spacing=spacing,
        padding=Padding(padding, padding, padding, padding),
        **kwargs,
    )


@pytest.fixture
def make_node():
    """Factory for ContentNodes."""
    return node


@pytest.fixture
def make_flow():
    """Factory for FlowDescriptors."""
    return flow


@pytest.fixture
def horizontal_card():
    """1600x900 horizontal flow card: an image beside a text column."""
    copy = node(
        "copy",
        box=(800, 200, 700, 500),
        name="Copy",
        flow=flow(FlowMode.VERTICAL, spacing=16),
        children=[
            node("title", NodeType.TEXT, (800, 200, 700, 100), characters="Launch day"),
            node("body", NodeType.TEXT, (800, 320, 700, 200), characters="Ship it."),
        ],
    )
    hero = node(
        "hero", NodeType.RECTANGLE, (40, 200, 700, 500), name="Hero", has_image_fill=True
    )
    return node(
        "card",
        box=(0, 0, 1600, 900),
        name="Card",
        flow=flow(FlowMode.HORIZONTAL, spacing=40, padding=40),
        children=[hero, copy],
    )


@pytest.fixture
def freeform_poster():
    """1000x1000 frame without flow layout and three loose children."""
    return node(
        "poster",
        box=(0, 0, 1000, 1000),
        name="Poster",
        children=[
            node("badge", NodeType.RECTANGLE, (100, 100, 200, 100), has_fill=True),
            node("headline", NodeType.TEXT, (100, 300, 800, 200), characters="Big Sale"),
            node("photo", NodeType.RECTANGLE, (500, 600, 400, 300), has_image_fill=True),
        ],
    )


@pytest.fixture
def mockup_frame():
    """Vertical flow frame holding a device mockup and a text block."""
    device = node(
        "mockup",
        box=(100, 100, 400, 800),
        name="Phone Mockup",
        children=[
            node("screen", NodeType.RECTANGLE, (120, 120, 360, 760), has_image_fill=True),
            node(
                "notch",
                NodeType.GROUP,
                (250, 120, 100, 20),
                children=[node("notch-shape", NodeType.VECTOR, (250, 120, 100, 20))],
            ),
        ],
    )
    text = node(
        "text-block",
        box=(100, 950, 800, 200),
        name="Text Block",
        children=[
            node("headline", NodeType.TEXT, (100, 950, 800, 80), characters="Meet it"),
            node("cta", NodeType.INSTANCE, (100, 1050, 200, 60), name="Button"),
        ],
    )
    return node(
        "screen-frame",
        box=(0, 0, 1000, 1200),
        name="Screen",
        flow=flow(FlowMode.VERTICAL, spacing=24),
        children=[device, text],
    )


@pytest.fixture
def captured_card():
    """Captured node data in the design tool's key spelling."""
    return {
        "id": "1:1",
        "type": "FRAME",
        "name": "Card",
        "x": 0,
        "y": 0,
        "width": 1200,
        "height": 600,
        "layoutMode": "HORIZONTAL",
        "itemSpacing": 24,
        "paddingTop": 32,
        "paddingRight": 32,
        "paddingBottom": 32,
        "paddingLeft": 32,
        "primaryAxisAlignItems": "SPACE_BETWEEN",
        "counterAxisAlignItems": "CENTER",
        "fills": [{"type": "SOLID"}],
        "children": [
            {
                "id": "1:2",
                "type": "RECTANGLE",
                "name": "Photo",
                "x": 32,
                "y": 32,
                "width": 536,
                "height": 536,
                "fills": [{"type": "IMAGE"}],
            },
            {
                "id": "1:3",
                "type": "FRAME",
                "name": "Details",
                "box": {"x": 592, "y": 32, "width": 576, "height": 536},
                "layoutMode": "VERTICAL",
                "itemSpacing": 12,
                "children": [
                    {
                        "id": "1:4",
                        "type": "TEXT",
                        "name": "Title",
                        "x": 592,
                        "y": 32,
                        "width": 576,
                        "height": 60,
                        "characters": "Hello",
                    },
                    {
                        "id": "1:5",
                        "type": "TEXT",
                        "name": "Caption",
                        "x": 592,
                        "y": 104,
                        "width": 576,
                        "height": 40,
                        "characters": "World",
                    },
                ],
            },
        ],
    }


@pytest.fixture
def captured_tree(captured_card):
    """ContentNode tree built from the captured card."""
    return build_tree(captured_card)


@pytest.fixture
def vertical_target():
    return Target("tall", 1080, 1920)


@pytest.fixture
def horizontal_target():
    return Target("wide", 1920, 1080)


@pytest.fixture
def square_target():
    return Target("square", 1080, 1080)


@pytest.fixture
def engine():
    """Default RetargetEngine instance."""
    return RetargetEngine()
