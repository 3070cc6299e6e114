"""
Safe-area configuration.

Most targets reserve a symmetric margin proportional to their size. A few
platform formats overlay their own chrome (captions, buttons, channel art
crops) and carry fixed per-edge insets instead.
"""

from typing import Dict, List

from .models import Box, SafeAreaInsets, Target, finite_or

# =============================================================================
# TARGET PRESETS
# =============================================================================

VARIANT_TARGETS: List[Target] = [
    Target("figma-cover", 1920, 960, "Figma Community Cover"),
    Target("figma-gallery", 1600, 960, "Figma Community Gallery"),
    Target("figma-thumbnail", 480, 320, "Figma Community Thumbnail"),
    Target("web-hero", 1440, 600, "Web Hero Banner"),
    Target("social-carousel", 1080, 1080, "Social Carousel Panel"),
    Target("youtube-cover", 2560, 1440, "YouTube Channel Cover"),
    Target("tiktok-vertical", 1080, 1920, "TikTok Vertical Promo"),
    Target("gumroad-cover", 1280, 720, "Gumroad Cover"),
    Target("gumroad-thumbnail", 600, 600, "Gumroad Thumbnail"),
]

# Fixed insets for vertical video formats (UI chrome at top, captions at bottom)
PLATFORM_INSETS: Dict[str, SafeAreaInsets] = {
    "tiktok-vertical": SafeAreaInsets(left=90, right=120, top=150, bottom=400),
    "youtube-shorts": SafeAreaInsets(left=60, right=120, top=200, bottom=280),
    "instagram-reels": SafeAreaInsets(left=60, right=120, top=108, bottom=340),
}

# Region of a channel cover that stays visible on every device
YOUTUBE_COVER_SAFE_WIDTH = 1546
YOUTUBE_COVER_SAFE_HEIGHT = 423


def get_target(target_id: str) -> Target:
    """
    Look up a preset target by id.

    Raises:
        KeyError: If no preset has that id.
    """
    for target in VARIANT_TARGETS:
        if target.id == target_id:
            return target
    raise KeyError(target_id)


def resolve_safe_area_insets(target: Target, ratio: float) -> SafeAreaInsets:
    """
    Resolve per-edge safe-area insets for a target.

    Args:
        target: Target canvas.
        ratio: Symmetric inset as a fraction of each dimension, used when the
            target has no platform-specific insets.

    Returns:
        Non-negative insets.
    """
    preset = PLATFORM_INSETS.get(target.id)
    if preset is not None:
        return SafeAreaInsets(preset.left, preset.right, preset.top, preset.bottom)

    width = max(0.0, finite_or(target.width))
    height = max(0.0, finite_or(target.height))

    if target.id == "youtube-cover":
        horizontal = max(0.0, (width - YOUTUBE_COVER_SAFE_WIDTH) / 2)
        vertical = max(0.0, (height - YOUTUBE_COVER_SAFE_HEIGHT) / 2)
        return SafeAreaInsets(horizontal, horizontal, vertical, vertical)

    ratio = max(0.0, finite_or(ratio))
    inset_x = width * ratio
    inset_y = height * ratio
    return SafeAreaInsets(inset_x, inset_x, inset_y, inset_y)


def safe_bounds(target: Target, insets: SafeAreaInsets) -> Box:
    """Safe region of a target in target-local coordinates."""
    return Box(
        insets.left,
        insets.top,
        finite_or(target.width) - insets.left - insets.right,
        finite_or(target.height) - insets.top - insets.bottom,
    )
