"""
Scale selection.

Turns a content analysis, a target and its safe-area insets into one uniform
scale factor. The per-strategy multipliers live in ``constants`` and are
empirically tuned.
"""

import math
from typing import Optional, Tuple

from .constants import (
    ADAPTIVE_HEIGHT_BLEND,
    ADAPTIVE_HEIGHT_FIRST_FACTOR,
    ADAPTIVE_OVERSHOOT,
    ADAPTIVE_PRIMARY_FACTOR,
    ADAPTIVE_WIDTH_BLEND,
    FILL_FACTOR,
    FIT_FACTOR,
    MAX_IMAGE_SCALE,
    MAX_VECTOR_SCALE,
    MIN_SCALE,
    REFLOW_PRIMARY_FACTOR,
    REFLOW_SQUARE_FACTOR,
    SCALE_OVERSHOOT_ALLOWANCE,
    SQUARE_AVG_WEIGHT,
    SQUARE_MIN_WEIGHT,
    STRETCH_FACTOR,
)
from .models import (
    ContentAnalysis,
    LayoutProfile,
    SafeAreaInsets,
    ScalingStrategy,
    finite_or,
)
from .tracer import NullObserver, PlanObserver


def axis_scales(
    analysis: ContentAnalysis,
    target_width: float,
    target_height: float,
    insets: SafeAreaInsets,
) -> Tuple[float, float]:
    """Return ``(width_scale, height_scale)`` of the safe area over the content."""
    available_width = finite_or(target_width) - finite_or(insets.left) - finite_or(insets.right)
    available_height = finite_or(target_height) - finite_or(insets.top) - finite_or(insets.bottom)

    source_width = max(finite_or(analysis.effective_width, 1.0), 1.0)
    source_height = max(finite_or(analysis.effective_height, 1.0), 1.0)

    return available_width / source_width, available_height / source_height


def _strategy_scale(
    strategy: ScalingStrategy,
    profile: LayoutProfile,
    width_scale: float,
    height_scale: float,
) -> float:
    if strategy == ScalingStrategy.FILL:
        return max(width_scale, height_scale) * FILL_FACTOR

    if strategy == ScalingStrategy.FIT:
        return min(width_scale, height_scale) * FIT_FACTOR

    if strategy == ScalingStrategy.STRETCH:
        if profile == LayoutProfile.VERTICAL:
            return height_scale * STRETCH_FACTOR
        if profile == LayoutProfile.HORIZONTAL:
            return width_scale * STRETCH_FACTOR
        return (width_scale + height_scale) / 2 * STRETCH_FACTOR

    if strategy == ScalingStrategy.REFLOW:
        if profile == LayoutProfile.VERTICAL:
            return min(height_scale * REFLOW_PRIMARY_FACTOR, width_scale)
        if profile == LayoutProfile.HORIZONTAL:
            return min(width_scale * REFLOW_PRIMARY_FACTOR, height_scale)
        low, high = sorted((width_scale, height_scale))
        return (low + high) / 2 * REFLOW_SQUARE_FACTOR

    # Adaptive
    if profile == LayoutProfile.VERTICAL:
        if height_scale <= width_scale:
            return height_scale * ADAPTIVE_PRIMARY_FACTOR
        return min(
            height_scale * ADAPTIVE_HEIGHT_FIRST_FACTOR,
            width_scale * ADAPTIVE_OVERSHOOT,
        )

    if profile == LayoutProfile.HORIZONTAL:
        if width_scale <= height_scale:
            return width_scale * ADAPTIVE_PRIMARY_FACTOR
        blend = width_scale * ADAPTIVE_WIDTH_BLEND + height_scale * ADAPTIVE_HEIGHT_BLEND
        return min(height_scale * ADAPTIVE_OVERSHOOT, blend)

    average = (width_scale + height_scale) / 2
    return min(width_scale, height_scale) * SQUARE_MIN_WEIGHT + average * SQUARE_AVG_WEIGHT


def select_scale(
    analysis: ContentAnalysis,
    target_width: float,
    target_height: float,
    insets: SafeAreaInsets,
    profile: LayoutProfile,
    observer: Optional[PlanObserver] = None,
) -> float:
    """
    Select the uniform scale for a target.

    The strategy candidate is capped at 110% of the tight fit, then clamped
    to ``[0.3, 12]`` for image-bearing content or ``[0.3, 60]`` otherwise.
    The floor wins when it conflicts with the overshoot cap.

    Args:
        analysis: Analysis of the source frame.
        target_width: Target canvas width.
        target_height: Target canvas height.
        insets: Safe-area insets of the target.
        profile: Layout profile of the target.
        observer: Receives a ``scale`` stage.

    Returns:
        Scale factor, never below 0.3.
    """
    observer = observer or NullObserver()

    width_scale, height_scale = axis_scales(analysis, target_width, target_height, insets)
    candidate = _strategy_scale(
        analysis.recommended_strategy, profile, width_scale, height_scale
    )

    max_scale = MAX_IMAGE_SCALE if analysis.has_images else MAX_VECTOR_SCALE
    capped = min(candidate, min(width_scale, height_scale) * SCALE_OVERSHOOT_ALLOWANCE)

    if not math.isfinite(capped):
        scale = MIN_SCALE
    else:
        scale = max(MIN_SCALE, min(max_scale, capped))

    observer.record(
        "scale",
        {
            "strategy": analysis.recommended_strategy.value,
            "profile": profile.value,
            "width_scale": width_scale,
            "height_scale": height_scale,
            "candidate": candidate,
            "scale": scale,
        },
    )
    return scale
