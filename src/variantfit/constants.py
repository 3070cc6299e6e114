"""
Tunable constants for variant retargeting.

Aspect ratio thresholds, scale multipliers and spacing ratios used across the
planning modules. Keeping them here lets every module compare against the same
numbers.

Two aspect conventions are in use and named accordingly:
- ``*_TALLNESS`` values compare against height / width (layout profile).
- Everything else compares against width / height (target ratio).
"""

# =============================================================================
# LAYOUT PROFILE - height / width bands
# =============================================================================

# height / width at or above this is a vertical profile
VERTICAL_TALLNESS = 1.2

# height / width at or below this is a horizontal profile
HORIZONTAL_TALLNESS = 0.8

# =============================================================================
# TARGET RATIO TIERS - width / height
# =============================================================================

# ~9:16 (TikTok, Reels, Shorts)
EXTREME_VERTICAL_RATIO = 0.57

# ~3:4 standard portrait
MODERATE_VERTICAL_RATIO = 0.75

# ~16:10 standard widescreen
MODERATE_HORIZONTAL_RATIO = 1.6

# ~5:2 wide banners
EXTREME_HORIZONTAL_RATIO = 2.5

# Edge children stop growing outside this band
EDGE_SIZING_VERTICAL_RATIO = 0.5
EDGE_SIZING_HORIZONTAL_RATIO = 2.0

# Text-only content outside this band reflows instead of scaling in place
STRETCH_VERTICAL_RATIO = 0.5
STRETCH_HORIZONTAL_RATIO = 2.0

# Freeform sources switch to a directional flow past this aspect delta
FREEFORM_ASPECT_DELTA = 0.2

# =============================================================================
# CONTENT ANALYSIS
# =============================================================================

MAX_ANALYSIS_DEPTH = 10

# Visible child counts for density bands
SPARSE_CHILD_LIMIT = 2
DENSE_CHILD_LIMIT = 10

# =============================================================================
# SCALE SELECTION
# Empirically tuned multipliers. Kept as-is pending design review.
# =============================================================================

FILL_FACTOR = 0.95
FIT_FACTOR = 0.98
STRETCH_FACTOR = 0.9
REFLOW_PRIMARY_FACTOR = 0.85
REFLOW_SQUARE_FACTOR = 0.9

ADAPTIVE_PRIMARY_FACTOR = 0.95
ADAPTIVE_HEIGHT_FIRST_FACTOR = 0.9
ADAPTIVE_OVERSHOOT = 1.05
ADAPTIVE_WIDTH_BLEND = 0.8
ADAPTIVE_HEIGHT_BLEND = 0.2
SQUARE_MIN_WEIGHT = 0.6
SQUARE_AVG_WEIGHT = 0.4

MIN_SCALE = 0.3
MAX_IMAGE_SCALE = 12.0
MAX_VECTOR_SCALE = 60.0

# Overshoot past the tight fit, absorbed later by safe-area padding
SCALE_OVERSHOOT_ALLOWANCE = 1.10

# =============================================================================
# AXIS EXPANSION
# =============================================================================

INTERIOR_BASE_WEIGHT = 0.65
INTERIOR_WEIGHT_PER_GAP = 0.10
INTERIOR_WEIGHT_CAP = 0.88
INTERIOR_WEIGHT_CLAMP = 0.9
TIGHT_SPACING_THRESHOLD = 16
TIGHT_SPACING_PENALTY = 0.95
ASYMMETRY_PENALTY = 0.6

# =============================================================================
# SPACING
# =============================================================================

DEFAULT_ITEM_SPACING = 16

# Share of leftover axis space that goes into gaps, by child count
DISTRIBUTION_SPARSE = 0.55
DISTRIBUTION_MODERATE = 0.45
DISTRIBUTION_DENSE = 0.35
DISTRIBUTION_EXTREME_BOOST = 1.3
DISTRIBUTION_EXTREME_CAP = 0.5

MAX_SPACING_MULTIPLIER = 8

VERTICAL_GAP_SOFT_CAP = 3
VERTICAL_GAP_EXTENDED_CAP = 12

# =============================================================================
# ADAPTATION
# =============================================================================

WRAP_MIN_CHILDREN = 4
WRAP_MIN_TARGET_WIDTH = 1200
SPACE_BETWEEN_MAX_CHILDREN = 3

TEXT_MAX_WIDTH_RATIO = 0.9
HORIZONTAL_MAX_HEIGHT_RATIO = 0.8

# Nested containers at least this share of the target width get re-planned
STRUCTURAL_WIDTH_RATIO = 0.5

# Component-like frames below this size keep their internal layout
COMPONENT_MAX_SIZE = 200

# =============================================================================
# DETECTION
# =============================================================================

BACKGROUND_AREA_COVERAGE = 0.90
IGNORED_AREA_COVERAGE = 0.95
ATOMIC_VECTOR_SHARE = 0.7

# =============================================================================
# ABSOLUTE PROJECTION
# =============================================================================

HORIZONTAL_PREDOMINANCE = 1.1
CONTAINMENT_TOLERANCE = 0.01

# =============================================================================
# QA
# =============================================================================

SAFE_AREA_TOLERANCE = 2
MISALIGNMENT_THRESHOLD = 32

# =============================================================================
# SAFE AREA
# =============================================================================

DEFAULT_SAFE_AREA_RATIO = 0.08
MAX_SAFE_AREA_RATIO = 0.5
