"""
Absolute-position projection for freeform content.

Children of a frame without flow layout keep explicit coordinates. When the
frame is retargeted, each child is either left where it is, re-stacked into a
column for tall targets, or has its center mapped proportionally from the
source content range onto the target safe range.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .constants import CONTAINMENT_TOLERANCE, HORIZONTAL_PREDOMINANCE
from .models import AbsolutePlacement, Box, LayoutProfile, finite_or, round2
from .tracer import NullObserver, PlanObserver


@dataclass(frozen=True)
class AxisRange:
    start: float
    size: float


@dataclass(frozen=True)
class ChildSnapshot:
    """Id and box of a freeform child, in the frame's coordinate space."""

    id: str
    box: Box


def _clamp(value: float, low: float, high: float) -> float:
    # An oversized child pins to the far edge, so the near edge may overflow
    return min(max(value, low), high)


def scale_center_to_range(value: float, source: AxisRange, target: AxisRange) -> float:
    """
    Map a coordinate from one axis range onto another.

    Args:
        value: Coordinate in the source range.
        source: Range the value was measured in.
        target: Range to map onto.

    Returns:
        ``target.start`` for an empty target, the target center for an empty
        source, otherwise the linear projection about both centers.
    """
    target_size = max(0.0, finite_or(target.size))
    source_size = max(0.0, finite_or(source.size))
    target_start = finite_or(target.start)

    if target_size == 0:
        return target_start
    if source_size == 0:
        return target_start + target_size / 2

    source_center = finite_or(source.start) + source_size / 2
    target_center = target_start + target_size / 2
    return target_center + (finite_or(value) - source_center) * (target_size / source_size)


def _stack_vertically(children: Sequence[ChildSnapshot], safe: Box) -> List[AbsolutePlacement]:
    ordered = sorted(children, key=lambda child: (child.box.x, child.box.y))

    total_height = sum(child.box.height for child in ordered)
    gap_count = max(len(ordered) - 1, 0)
    gap = max(safe.height - total_height, 0.0) / gap_count if gap_count else 0.0

    placed: Dict[str, AbsolutePlacement] = {}
    cursor = safe.y
    for child in ordered:
        y = _clamp(cursor, safe.y, safe.bottom - child.box.height)
        x = _clamp(
            safe.x + (safe.width - child.box.width) / 2,
            safe.x,
            safe.right - child.box.width,
        )
        placed[child.id] = AbsolutePlacement(child.id, round2(x), round2(y))
        cursor = y + child.box.height + gap

    return [placed[child.id] for child in children]


def _project(children: Sequence[ChildSnapshot], content: Box, safe: Box) -> List[AbsolutePlacement]:
    source_x, source_y = AxisRange(content.x, content.width), AxisRange(content.y, content.height)
    target_x, target_y = AxisRange(safe.x, safe.width), AxisRange(safe.y, safe.height)

    placements = []
    for child in children:
        box = child.box
        center_x = scale_center_to_range(box.center_x, source_x, target_x)
        center_y = scale_center_to_range(box.center_y, source_y, target_y)
        x = _clamp(center_x - box.width / 2, safe.x, safe.right - box.width)
        y = _clamp(center_y - box.height / 2, safe.y, safe.bottom - box.height)
        placements.append(AbsolutePlacement(child.id, round2(x), round2(y)))
    return placements


def plan_absolute_positions(
    profile: LayoutProfile,
    safe_bounds: Box,
    children: Sequence[ChildSnapshot],
    observer: Optional[PlanObserver] = None,
) -> List[AbsolutePlacement]:
    """
    Plan top-left positions for freeform children inside a target.

    Content that fits the safe area in size and overlaps it passes through
    unchanged (rounded to two decimals), so applying a plan twice changes
    nothing. Content lying entirely outside the safe area is projected.
    Wide multi-child content in a tall target is re-stacked into a centered
    column. Anything else is projected proportionally and clamped.

    Args:
        profile: Layout profile of the target.
        safe_bounds: Safe area, in the same space as the children.
        children: Freeform children to place.
        observer: Receives an ``absolute_positions`` stage.

    Returns:
        One placement per child, in input order.
    """
    observer = observer or NullObserver()
    if not children:
        return []

    content = Box.union(child.box for child in children)

    if safe_bounds.fits(content, CONTAINMENT_TOLERANCE) and safe_bounds.overlaps(content):
        mode = "pass-through"
        placements = [
            AbsolutePlacement(child.id, round2(child.box.x), round2(child.box.y))
            for child in children
        ]
    elif (
        profile == LayoutProfile.VERTICAL
        and len(children) >= 2
        and content.width > content.height * HORIZONTAL_PREDOMINANCE
    ):
        mode = "vertical-stack"
        placements = _stack_vertically(children, safe_bounds)
    else:
        mode = "projected"
        placements = _project(children, content, safe_bounds)

    observer.record(
        "absolute_positions",
        {"mode": mode, "children": len(children), "content": content, "safe": safe_bounds},
    )
    return placements
