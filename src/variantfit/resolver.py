"""
Layout mode resolution.

Decides the flow orientation of an adapted frame in three tiers, first match
wins:

1. Advisory orientation (or the orientation implied by an advisory pattern).
2. Advisory data without an orientation: the source mode is preserved.
3. Deterministic fallback on the target width / height ratio.

Every rule returns ``(FlowMode, reason)``; the reason string is what the
observer records, so tests can assert on which rule fired.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .advice import LayoutAdviceEntry
from .constants import (
    EXTREME_HORIZONTAL_RATIO,
    EXTREME_VERTICAL_RATIO,
    FREEFORM_ASPECT_DELTA,
    MODERATE_HORIZONTAL_RATIO,
    MODERATE_VERTICAL_RATIO,
)
from .models import FlowMode, LayoutProfile, finite_or
from .tracer import NullObserver, PlanObserver

Resolution = Tuple[FlowMode, str]


@dataclass(frozen=True)
class ResolverContext:
    """
    Source and target facts the deterministic tier looks at.

    Attributes:
        source_mode: Flow mode of the source frame.
        source_width: Source frame width.
        source_height: Source frame height.
        child_count: Visible children of the source frame.
        has_text: Whether the source contains text.
        has_images: Whether the source contains image fills.
        target_width: Target canvas width.
        target_height: Target canvas height.
        profile: Layout profile of the target.
        adopt_vertical: Whether the frame should adopt a vertical stack.
    """

    source_mode: FlowMode
    source_width: float
    source_height: float
    child_count: int
    has_text: bool
    has_images: bool
    target_width: float
    target_height: float
    profile: LayoutProfile
    adopt_vertical: bool = False

    @property
    def target_ratio(self) -> float:
        return max(finite_or(self.target_width), 1.0) / max(finite_or(self.target_height), 1.0)

    @property
    def source_ratio(self) -> float:
        return max(finite_or(self.source_width), 0.0) / max(finite_or(self.source_height), 1.0)


def resolve_advisory(
    context: ResolverContext, advice: Optional[LayoutAdviceEntry]
) -> Optional[Resolution]:
    """Apply the advisory tiers; None when no advice applies."""
    if advice is None:
        return None

    if advice.orientation is not None:
        return advice.orientation, "advice-orientation"

    pattern = advice.pattern
    if pattern is not None:
        # A freeform pattern would collapse an existing flow
        if pattern.mode == FlowMode.NONE and context.source_mode != FlowMode.NONE:
            return context.source_mode, "advice-pattern-preserves-flow"
        return pattern.mode, f"advice-pattern:{pattern.id}"

    return context.source_mode, "advice-preserve-source"


def should_force_mode_change(context: ResolverContext) -> bool:
    """Extreme targets always rotate a flow running against them."""
    ratio = context.target_ratio
    if ratio < EXTREME_VERTICAL_RATIO and context.source_mode == FlowMode.HORIZONTAL:
        return True
    if ratio > EXTREME_HORIZONTAL_RATIO and context.source_mode == FlowMode.VERTICAL:
        return True
    return False


def _profile_mode(profile: LayoutProfile) -> FlowMode:
    return FlowMode.VERTICAL if profile == LayoutProfile.VERTICAL else FlowMode.HORIZONTAL


def resolve_deterministic(context: ResolverContext) -> Resolution:
    """Heuristic orientation from the target ratio and source composition."""
    ratio = context.target_ratio
    source = context.source_mode

    if should_force_mode_change(context):
        return _profile_mode(context.profile), "forced"

    if context.adopt_vertical and context.profile == LayoutProfile.VERTICAL:
        return FlowMode.VERTICAL, "adopt-vertical"

    if source == FlowMode.NONE:
        if abs(context.source_ratio - ratio) > FREEFORM_ASPECT_DELTA:
            return _profile_mode(context.profile), "freeform-to-directional"
        return FlowMode.NONE, "freeform-similar-aspect"

    text_heavy = context.has_text and context.child_count >= 3
    image_dominant = context.has_images and not context.has_text

    if ratio < EXTREME_VERTICAL_RATIO:
        if source == FlowMode.HORIZONTAL and text_heavy:
            return FlowMode.VERTICAL, "extreme-vertical-text"
        if image_dominant and context.child_count < 3:
            return source, "extreme-vertical-image-preserve"
        return FlowMode.VERTICAL, "extreme-vertical"

    if ratio < MODERATE_VERTICAL_RATIO:
        if source == FlowMode.HORIZONTAL and context.child_count >= 3:
            return FlowMode.VERTICAL, "moderate-vertical-multi-child"
        return source, "moderate-vertical-preserve"

    if ratio > EXTREME_HORIZONTAL_RATIO:
        return FlowMode.HORIZONTAL, "extreme-horizontal"

    if ratio > MODERATE_HORIZONTAL_RATIO:
        if source == FlowMode.VERTICAL and context.child_count == 2:
            return FlowMode.HORIZONTAL, "moderate-horizontal-two-child"
        return source, "moderate-horizontal-preserve"

    return source, "preserve"


def resolve_orientation(
    context: ResolverContext,
    advice: Optional[LayoutAdviceEntry] = None,
    advisory_enabled: bool = True,
    observer: Optional[PlanObserver] = None,
) -> Resolution:
    """
    Resolve the target orientation.

    Args:
        context: Source and target facts.
        advice: Advisory entry for this target, if any.
        advisory_enabled: When False, advice is ignored entirely.
        observer: Receives an ``orientation`` stage.

    Returns:
        ``(orientation, reason)``.
    """
    observer = observer or NullObserver()

    resolution = resolve_advisory(context, advice) if advisory_enabled else None
    if resolution is None:
        resolution = resolve_deterministic(context)

    mode, reason = resolution
    observer.record(
        "orientation",
        {
            "source_mode": context.source_mode.value,
            "target_ratio": round(context.target_ratio, 3),
            "mode": mode.value,
            "reason": reason,
        },
    )
    return resolution
