"""
Axis expansion planning.

After scaling, each axis of a flow container usually has space left over.
This module splits it between the two edge insets and growth of the gaps
between flow children. Safe-area insets are hard floors: no plan ever puts an
edge below its requested inset.
"""

from typing import Optional, Tuple, Union

from .constants import (
    ASYMMETRY_PENALTY,
    INTERIOR_BASE_WEIGHT,
    INTERIOR_WEIGHT_CAP,
    INTERIOR_WEIGHT_CLAMP,
    INTERIOR_WEIGHT_PER_GAP,
    TIGHT_SPACING_PENALTY,
    TIGHT_SPACING_THRESHOLD,
)
from .models import AxisExpansionPlan, AxisGaps, finite_or, round2

InsetSpec = Union[float, Tuple[float, float]]


def normalize_inset(value: InsetSpec) -> Tuple[float, float]:
    """Return ``(start, end)`` from a symmetric inset or a pair, clamped >= 0."""
    if isinstance(value, (tuple, list)):
        start, end = value
    else:
        start = end = value
    return max(0.0, finite_or(start)), max(0.0, finite_or(end))


def normalize_gaps(gaps: Optional[AxisGaps]) -> Optional[AxisGaps]:
    """Clamp gaps to >= 0; all-zero gaps carry no signal and become None."""
    if gaps is None:
        return None
    start = max(0.0, finite_or(gaps.start))
    end = max(0.0, finite_or(gaps.end))
    if start == 0 and end == 0:
        return None
    return AxisGaps(start, end)


def gap_asymmetry(gaps: Optional[AxisGaps]) -> float:
    """0 for balanced gaps, 1 when all breathing room sits on one side."""
    if gaps is None:
        return 0.0
    total = gaps.start + gaps.end
    if total == 0:
        return 0.0
    return min(1.0, abs(gaps.start - gaps.end) / total)


def distribute_padding(
    total_extra: float,
    safe_inset: InsetSpec,
    gaps: Optional[AxisGaps] = None,
    focal_ratio: Optional[float] = None,
) -> Tuple[float, float]:
    """
    Split an edge budget between the start and end of an axis.

    The inset floors are paid first, reduced proportionally only when the
    budget cannot cover them. The remainder follows the source's gap ratio
    (an even split without gaps), blended halfway toward ``focal_ratio``
    when one is given.

    Args:
        total_extra: Edge budget for the axis.
        safe_inset: Requested inset, symmetric or ``(start, end)``.
        gaps: Breathing room the source already had at each edge.
        focal_ratio: Share of the remainder for the start edge, in [0, 1].

    Returns:
        ``(start, end)`` amounts.
    """
    total = max(0.0, finite_or(total_extra))
    floor_start, floor_end = normalize_inset(safe_inset)
    floor_total = floor_start + floor_end

    if total == 0:
        return 0.0, 0.0

    if floor_total > total:
        factor = total / floor_total
        return floor_start * factor, floor_end * factor

    remaining = total - floor_total

    start_share = 0.5
    normalized = normalize_gaps(gaps)
    if normalized is not None:
        start_share = normalized.start / (normalized.start + normalized.end)

    if focal_ratio is not None:
        focus = min(max(finite_or(focal_ratio, 0.5), 0.0), 1.0)
        start_share = (start_share + focus) / 2

    return (
        floor_start + remaining * start_share,
        floor_end + remaining * (1 - start_share),
    )


def interior_weight(
    flow_child_count: int, base_item_spacing: float, gaps: Optional[AxisGaps]
) -> float:
    """Share of the leftover that goes to gap growth between flow children."""
    gap_count = max(flow_child_count - 1, 1)
    base = min(INTERIOR_BASE_WEIGHT + gap_count * INTERIOR_WEIGHT_PER_GAP, INTERIOR_WEIGHT_CAP)
    if base_item_spacing < TIGHT_SPACING_THRESHOLD:
        base *= TIGHT_SPACING_PENALTY

    weight = base * (1 - gap_asymmetry(gaps) * ASYMMETRY_PENALTY)
    return min(max(weight, 0.0), INTERIOR_WEIGHT_CLAMP)


def plan_axis_expansion(
    total_extra: float,
    safe_inset: InsetSpec,
    gaps: Optional[AxisGaps] = None,
    flow_child_count: int = 0,
    base_item_spacing: float = 0.0,
    allow_interior_expansion: bool = True,
    focal_ratio: Optional[float] = None,
) -> AxisExpansionPlan:
    """
    Plan how one axis absorbs leftover space.

    Args:
        total_extra: Axis length minus scaled content, clamped to >= 0.
        safe_inset: Requested inset floors, symmetric or ``(start, end)``.
        gaps: Existing breathing room at the start/end in the source.
        flow_child_count: Children participating in flow along this axis.
        base_item_spacing: Current gap between flow children.
        allow_interior_expansion: Whether gaps may grow at all.
        focal_ratio: Optional bias of the edge remainder toward the start.

    Returns:
        AxisExpansionPlan with ``start >= inset start``, ``end >= inset end``
        and two-decimal values.
    """
    total = max(0.0, finite_or(total_extra))
    floor_start, floor_end = normalize_inset(safe_inset)

    if total <= 0:
        return AxisExpansionPlan(floor_start, floor_end, 0.0)

    flow_child_count = max(0, int(flow_child_count))

    # Heuristic exception: a lone flow child grows into the slack instead of
    # being stranded between two large paddings.
    if flow_child_count == 1:
        return AxisExpansionPlan(floor_start, floor_end, 0.0)

    normalized = normalize_gaps(gaps)
    spacing = max(0.0, finite_or(base_item_spacing))

    leftover = max(total - floor_start - floor_end, 0.0)
    can_reflow = allow_interior_expansion and flow_child_count >= 2 and leftover > 0

    interior = 0.0
    if can_reflow:
        interior = round2(leftover * interior_weight(flow_child_count, spacing, normalized))

    edge_budget = round2(total - interior)
    start, end = distribute_padding(
        edge_budget, (floor_start, floor_end), normalized, focal_ratio
    )

    return AxisExpansionPlan(
        start=max(round2(start), floor_start),
        end=max(round2(end), floor_end),
        interior=round2(interior),
    )
