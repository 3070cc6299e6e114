"""
Content margin measurement and normalization.

Margins are the whitespace between a frame's edges and its visible content.
They seed the gap ratios used by padding distribution. When a variant changes
aspect dramatically, lopsided source margins are pulled toward balance so the
content is not pushed against one edge of the new canvas.
"""

from collections import deque
from dataclasses import dataclass
from typing import Optional

from .constants import IGNORED_AREA_COVERAGE
from .models import Box, ContentNode, LayoutProfile

# Asymmetry above this (an 80/20 split) is normalized
ASYMMETRY_THRESHOLD = 0.6

# Share of the original margin kept when normalizing
ORIGINAL_MARGIN_WEIGHT = 0.25

# Aspect ratio change that counts as significant on its own
SIGNIFICANT_ASPECT_CHANGE = 1.0


@dataclass
class ContentMargins:
    left: float = 0.0
    right: float = 0.0
    top: float = 0.0
    bottom: float = 0.0


def is_background_or_ignored(node: ContentNode, root: ContentNode) -> bool:
    """Overlays and near full-bleed layers do not count as content."""
    if node.is_overlay:
        return True
    root_area = root.box.area
    return root_area > 0 and node.box.area >= root_area * IGNORED_AREA_COVERAGE


def combine_child_bounds(root: ContentNode) -> Optional[Box]:
    """
    Union of the boxes of every descendant that counts as content.

    Walks breadth-first; ignored layers are skipped along with their subtree.
    """
    boxes = []
    queue = deque(root.children)
    while queue:
        node = queue.popleft()
        if is_background_or_ignored(node, root):
            continue
        queue.extend(node.children)
        boxes.append(node.box)
    return Box.union(boxes)


def measure_content_margins(root: ContentNode) -> Optional[ContentMargins]:
    """Whitespace around visible content, or None for an empty frame."""
    content = combine_child_bounds(root)
    if content is None:
        return None
    frame = root.box
    return ContentMargins(
        left=max(content.x - frame.x, 0.0),
        right=max(frame.right - content.right, 0.0),
        top=max(content.y - frame.y, 0.0),
        bottom=max(frame.bottom - content.bottom, 0.0),
    )


def _asymmetry(start: float, end: float) -> float:
    total = start + end
    return abs(start - end) / total if total > 0 else 0.0


def _blend(original: float, normalized: float) -> float:
    return original * ORIGINAL_MARGIN_WEIGHT + normalized * (1 - ORIGINAL_MARGIN_WEIGHT)


def _should_normalize(axis_profile: LayoutProfile, target: LayoutProfile, asymmetry: float) -> bool:
    if target == axis_profile:
        return asymmetry > ASYMMETRY_THRESHOLD
    if target == LayoutProfile.SQUARE:
        return asymmetry > ASYMMETRY_THRESHOLD * 0.8
    return False


def normalize_content_margins(
    margins: Optional[ContentMargins],
    source_profile: LayoutProfile,
    target_profile: LayoutProfile,
    source_aspect: float,
    target_aspect: float,
) -> Optional[ContentMargins]:
    """
    Rebalance asymmetric margins for a large aspect change.

    Nothing changes unless the aspect ratio moves by more than 1.0 or the
    profile changes. Horizontal margins are rebalanced for horizontal and
    square targets, vertical margins for vertical and square targets. Tall
    targets get a third of the vertical total on top and two thirds below.

    Args:
        margins: Measured source margins.
        source_profile: Profile of the source frame.
        target_profile: Profile of the target.
        source_aspect: Source width / height.
        target_aspect: Target width / height.

    Returns:
        Normalized margins (never negative), or None when ``margins`` is None.
    """
    if margins is None:
        return None

    significant = (
        abs(source_aspect - target_aspect) > SIGNIFICANT_ASPECT_CHANGE
        or source_profile != target_profile
    )
    if not significant:
        return margins

    result = ContentMargins(margins.left, margins.right, margins.top, margins.bottom)

    horizontal_total = margins.left + margins.right
    if _should_normalize(
        LayoutProfile.HORIZONTAL, target_profile, _asymmetry(margins.left, margins.right)
    ):
        average = horizontal_total / 2
        result.left = _blend(margins.left, average)
        result.right = _blend(margins.right, average)

    vertical_total = margins.top + margins.bottom
    if _should_normalize(
        LayoutProfile.VERTICAL, target_profile, _asymmetry(margins.top, margins.bottom)
    ):
        if target_profile == LayoutProfile.VERTICAL:
            result.top = _blend(margins.top, vertical_total / 3)
            result.bottom = _blend(margins.bottom, vertical_total * 2 / 3)
        else:
            average = vertical_total / 2
            result.top = _blend(margins.top, average)
            result.bottom = _blend(margins.bottom, average)

    result.left = max(result.left, 0.0)
    result.right = max(result.right, 0.0)
    result.top = max(result.top, 0.0)
    result.bottom = max(result.bottom, 0.0)
    return result
