"""
Content analysis for variant retargeting.

Measures what a source frame actually contains (tight paint bounds, text and
image presence, child density) and picks a scaling strategy from those
signals. The strategy is chosen here and nowhere else.
"""

from typing import List, Optional, Tuple

from .constants import (
    DENSE_CHILD_LIMIT,
    MAX_ANALYSIS_DEPTH,
    SPARSE_CHILD_LIMIT,
    STRETCH_HORIZONTAL_RATIO,
    STRETCH_VERTICAL_RATIO,
)
from .models import (
    Box,
    ContentAnalysis,
    ContentDensity,
    ContentNode,
    FlowMode,
    NodeType,
    ScalingStrategy,
)
from .tracer import NullObserver, PlanObserver

PRIMITIVE_PAINT_TYPES = frozenset({NodeType.RECTANGLE, NodeType.ELLIPSE})


def has_visible_paint(node: ContentNode) -> bool:
    """A node paints something when it has a fill, a stroke, text or is a primitive."""
    return (
        node.has_text
        or node.node_type in PRIMITIVE_PAINT_TYPES
        or node.has_fill
        or node.has_image_fill
        or node.has_stroke
    )


def find_content_bounds(
    root: ContentNode, max_depth: int = MAX_ANALYSIS_DEPTH
) -> Optional[Box]:
    """
    Find the tight bounds of painted content, relative to the root.

    Invisible and overlay subtrees are skipped, and nothing deeper than
    ``max_depth`` below the root is visited.

    Args:
        root: Source frame.
        max_depth: Depth bound for the walk.

    Returns:
        Content box relative to the root and clamped to the root's size, or
        None when nothing is painted.
    """
    painted: List[Box] = []
    stack: List[Tuple[ContentNode, int]] = [(root, 0)]

    while stack:
        node, depth = stack.pop()
        if not node.visible or depth > max_depth or node.is_overlay:
            continue
        if has_visible_paint(node):
            painted.append(node.box)
        for child in node.children:
            stack.append((child, depth + 1))

    union = Box.union(painted)
    if union is None:
        return None

    return Box(
        max(0.0, union.x - root.box.x),
        max(0.0, union.y - root.box.y),
        min(union.width, root.box.width),
        min(union.height, root.box.height),
    )


def count_visible_children(root: ContentNode) -> int:
    return sum(1 for child in root.children if child.visible and not child.is_overlay)


def contains_text(root: ContentNode) -> bool:
    return any(node.has_text for node in root.iter_nodes())


def contains_images(root: ContentNode) -> bool:
    return any(node.has_image_fill for node in root.iter_nodes())


def classify_density(child_count: int) -> ContentDensity:
    if child_count == 0 or child_count <= SPARSE_CHILD_LIMIT:
        return ContentDensity.SPARSE
    if child_count > DENSE_CHILD_LIMIT:
        return ContentDensity.DENSE
    return ContentDensity.NORMAL


def choose_strategy(
    density: ContentDensity,
    has_auto_layout: bool,
    has_text: bool,
    has_images: bool,
    aspect_ratio: float,
) -> ScalingStrategy:
    """
    Pick the scaling strategy from composition signals.

    Args:
        density: Density band of the frame.
        has_auto_layout: Whether the frame is a flow container.
        has_text: Whether any non-empty text exists in the tree.
        has_images: Whether any image or video fill exists in the tree.
        aspect_ratio: Width / height of the effective content box.

    Returns:
        The recommended ScalingStrategy.
    """
    if density == ContentDensity.SPARSE:
        return ScalingStrategy.FILL

    if density == ContentDensity.DENSE and has_auto_layout:
        return ScalingStrategy.ADAPTIVE

    if has_text and not has_images:
        if aspect_ratio > STRETCH_HORIZONTAL_RATIO or aspect_ratio < STRETCH_VERTICAL_RATIO:
            return ScalingStrategy.REFLOW
        return ScalingStrategy.ADAPTIVE

    if has_images and not has_text:
        return ScalingStrategy.STRETCH

    return ScalingStrategy.ADAPTIVE


def analyze_content(
    root: ContentNode,
    max_depth: int = MAX_ANALYSIS_DEPTH,
    observer: Optional[PlanObserver] = None,
) -> ContentAnalysis:
    """
    Analyze a source frame.

    Args:
        root: Source frame to analyze.
        max_depth: Depth bound for the paint walk.
        observer: Receives an ``analysis`` stage.

    Returns:
        ContentAnalysis for the frame.
    """
    observer = observer or NullObserver()

    content_box = find_content_bounds(root, max_depth)
    effective_width = content_box.width if content_box else root.box.width
    effective_height = content_box.height if content_box else root.box.height

    layout_direction = root.flow_mode
    has_auto_layout = layout_direction != FlowMode.NONE
    child_count = count_visible_children(root)
    density = classify_density(child_count)
    has_text = contains_text(root)
    has_images = contains_images(root)

    strategy = choose_strategy(
        density,
        has_auto_layout,
        has_text,
        has_images,
        effective_width / max(effective_height, 1.0),
    )

    analysis = ContentAnalysis(
        actual_content_box=content_box,
        has_auto_layout=has_auto_layout,
        layout_direction=layout_direction,
        child_count=child_count,
        has_text=has_text,
        has_images=has_images,
        content_density=density,
        recommended_strategy=strategy,
        effective_width=effective_width,
        effective_height=effective_height,
    )

    observer.record(
        "analysis",
        {
            "root": root.id,
            "content_box": content_box,
            "child_count": child_count,
            "density": density.value,
            "has_text": has_text,
            "has_images": has_images,
            "strategy": strategy.value,
        },
    )
    return analysis
