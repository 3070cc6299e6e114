"""
QA warnings derived from retargeted geometry.

Runs on the adapted target frame (after the node mutator has applied a plan)
and flags content that crosses the safe area or sits visibly off-center.
"""

from typing import List

from .constants import MISALIGNMENT_THRESHOLD, SAFE_AREA_TOLERANCE
from .margins import combine_child_bounds
from .models import Box, ContentNode, QaWarning, SafeAreaInsets, Target

OUTSIDE_SAFE_AREA = "OUTSIDE_SAFE_AREA"
MISALIGNED = "MISALIGNED"


def collect_warnings(
    frame: ContentNode, target: Target, insets: SafeAreaInsets
) -> List[QaWarning]:
    """
    Collect QA warnings for an adapted frame.

    Args:
        frame: Root of the adapted target tree (canvas-absolute boxes).
        target: Target the frame was adapted to.
        insets: Safe-area insets of the target.

    Returns:
        Warnings, possibly empty.
    """
    warnings: List[QaWarning] = []
    bounds = frame.box
    content = combine_child_bounds(frame)
    if content is None:
        return warnings

    safe_area = Box(
        bounds.x + insets.left,
        bounds.y + insets.top,
        target.width - insets.left - insets.right,
        target.height - insets.top - insets.bottom,
    )

    if not safe_area.contains(content, SAFE_AREA_TOLERANCE):
        warnings.append(
            QaWarning(
                OUTSIDE_SAFE_AREA,
                "warn",
                "Some layers extend outside the safe area.",
            )
        )

    if abs(content.center_x - bounds.center_x) > MISALIGNMENT_THRESHOLD:
        warnings.append(
            QaWarning(
                MISALIGNED,
                "info",
                "Primary content is offset; consider centering horizontally.",
            )
        )

    return warnings
