"""
Layout profile classification.

Maps a target's dimensions to a coarse aspect category and provides the
small profile-driven decisions used when a flow container is rotated into a
vertical stack.
"""

from typing import Optional

from .constants import (
    HORIZONTAL_TALLNESS,
    VERTICAL_GAP_EXTENDED_CAP,
    VERTICAL_GAP_SOFT_CAP,
    VERTICAL_TALLNESS,
)
from .models import Alignment, FlowMode, LayoutProfile, finite_or, round2


def resolve_layout_profile(width: float, height: float) -> LayoutProfile:
    """
    Classify a target by its height / width ratio.

    Both dimensions are clamped to at least 1, so the function is total.

    Args:
        width: Target width.
        height: Target height.

    Returns:
        VERTICAL at ratio >= 1.2, HORIZONTAL at ratio <= 0.8, else SQUARE.
    """
    safe_width = max(finite_or(width, 1.0), 1.0)
    safe_height = max(finite_or(height, 1.0), 1.0)
    tallness = safe_height / safe_width

    if tallness >= VERTICAL_TALLNESS:
        return LayoutProfile.VERTICAL
    if tallness <= HORIZONTAL_TALLNESS:
        return LayoutProfile.HORIZONTAL
    return LayoutProfile.SQUARE


def should_adopt_vertical_flow(
    profile: LayoutProfile, flow_mode: Optional[FlowMode], flow_child_count: int
) -> bool:
    """
    Decide whether a flow container should become a vertical stack.

    Vertical sources stay vertical in tall targets; horizontal sources rotate
    even with a single flow child to avoid a horizontal bias.
    """
    if profile != LayoutProfile.VERTICAL or flow_mode is None:
        return False
    if flow_mode == FlowMode.VERTICAL:
        return True
    if flow_mode != FlowMode.HORIZONTAL:
        return False
    return flow_child_count >= 1


def should_expand_absolute_children(
    root_mode: Optional[FlowMode], adopt_vertical: bool, profile: LayoutProfile
) -> bool:
    """Whether freeform children should be re-projected into the safe area."""
    if adopt_vertical:
        return True
    if profile == LayoutProfile.VERTICAL and root_mode != FlowMode.VERTICAL:
        return True
    return root_mode is None or root_mode == FlowMode.NONE


def compute_vertical_spacing(
    base_spacing: float, interior: float, flow_child_count: int
) -> float:
    """
    Compute item spacing for a vertical stack from an interior budget.

    The budget is shared across the gaps between flow children, capped at
    3x base spacing, or 12x when the slack is very large.

    Args:
        base_spacing: Scaled source spacing.
        interior: Interior expansion budget for the axis.
        flow_child_count: Number of children participating in flow.

    Returns:
        Item spacing rounded to two decimals.
    """
    base_spacing = max(finite_or(base_spacing), 0.0)
    if flow_child_count < 2:
        return round2(base_spacing)

    gaps = max(flow_child_count - 1, 1)
    per_gap = max(finite_or(interior), 0.0) / gaps

    soft_cap = base_spacing * VERTICAL_GAP_SOFT_CAP
    extended_cap = base_spacing * VERTICAL_GAP_EXTENDED_CAP
    if per_gap > soft_cap * 1.5:
        addition = min(per_gap * 0.75, extended_cap)
    else:
        addition = min(per_gap, soft_cap)

    # Few children with lots of slack look awkward at full spread
    if flow_child_count <= 3 and per_gap > base_spacing * 2:
        return round2(base_spacing + addition * 0.8)

    return round2(base_spacing + addition)


def resolve_vertical_align(current: Optional[Alignment], interior: float) -> Alignment:
    """
    Primary alignment for a container rotated into a vertical stack.

    Stacks anchor to the top safe edge when there is interior slack;
    centered stacks would otherwise leave large gutters in tall canvases.
    """
    if current == Alignment.MIN:
        return current
    if max(0.0, finite_or(interior)) > 0:
        return Alignment.MIN
    if current == Alignment.SPACE_BETWEEN:
        return Alignment.SPACE_BETWEEN
    return Alignment.MIN


def resolve_vertical_wrap() -> bool:
    """Tall variants keep a single column, so wrapping is always disabled."""
    return False
