"""
Auto-layout adaptation.

This module assembles the outputs of the earlier planning stages into the
concrete flow settings for an adapted frame:
- Sizing modes per axis
- Primary and counter alignment
- Wrap behavior
- Item spacing and padding
- Per-child overrides (grow, align, positioning, size caps)
- Nested structural containers that need their own orientation change
- Nodes hidden by an advisory drop list

The AutoLayoutAdapter class is the one place that writes an AdaptationPlan;
the node mutator consumes it as-is.
"""

import re
from typing import Dict, List, Optional, Tuple

from .advice import LayoutAdviceEntry, LayoutPattern
from .constants import (
    BACKGROUND_AREA_COVERAGE,
    COMPONENT_MAX_SIZE,
    DEFAULT_ITEM_SPACING,
    DISTRIBUTION_DENSE,
    DISTRIBUTION_EXTREME_BOOST,
    DISTRIBUTION_EXTREME_CAP,
    DISTRIBUTION_MODERATE,
    DISTRIBUTION_SPARSE,
    EDGE_SIZING_HORIZONTAL_RATIO,
    EDGE_SIZING_VERTICAL_RATIO,
    EXTREME_HORIZONTAL_RATIO,
    HORIZONTAL_MAX_HEIGHT_RATIO,
    MAX_SPACING_MULTIPLIER,
    SPACE_BETWEEN_MAX_CHILDREN,
    STRUCTURAL_WIDTH_RATIO,
    TEXT_MAX_WIDTH_RATIO,
    WRAP_MIN_CHILDREN,
    WRAP_MIN_TARGET_WIDTH,
)
from .models import (
    AdaptationPlan,
    Alignment,
    AtomicGroupSet,
    AxisExpansionPlan,
    ChildAlign,
    ChildOverride,
    ContentNode,
    FlowMode,
    LayoutProfile,
    NodeType,
    Padding,
    Positioning,
    SafeAreaInsets,
    SizingMode,
    Target,
    finite_or,
)
from .profile import compute_vertical_spacing, resolve_vertical_align, resolve_vertical_wrap
from .resolver import ResolverContext, resolve_orientation
from .tracer import NullObserver, PlanObserver

BACKGROUND_NAME_HINTS = ("background", "bg", "backdrop", "hero-bg", "cover")

COMPONENT_NAME_PATTERN = re.compile(
    r"logo|icon|button|badge|chip|avatar|cta|tag|pill|indicator", re.IGNORECASE
)

SIMPLE_CHILD_TYPES = frozenset(
    {NodeType.TEXT, NodeType.VECTOR, NodeType.RECTANGLE, NodeType.ELLIPSE}
)


# =============================================================================
# DETECTION HELPERS
# =============================================================================


def is_background_like(
    node: ContentNode, root_width: float, root_height: float, is_bottom_layer: bool = False
) -> bool:
    """
    Multi-signal background detection.

    A node is background-like when it covers at least 90% of the root area
    and shows one more signal: it is the bottom layer, it has an image fill,
    it holds no text, or its name hints at a background.
    """
    root_area = root_width * root_height
    if root_area <= 0 or node.box.area < root_area * BACKGROUND_AREA_COVERAGE:
        return False

    name = node.name.lower()
    signals = [
        is_bottom_layer,
        node.has_image_fill,
        not any(descendant.is_text for descendant in node.iter_nodes()),
        any(hint in name for hint in BACKGROUND_NAME_HINTS),
    ]
    return any(signals)


def flow_children(frame: ContentNode) -> List[ContentNode]:
    """Children that take part in flow: visible, in-flow and not a background."""
    return [
        child
        for child in frame.children
        if child.visible
        and child.positioning != Positioning.ABSOLUTE
        and not is_background_like(child, frame.box.width, frame.box.height)
    ]


def count_flow_children(frame: ContentNode) -> int:
    return len(flow_children(frame))


def is_component_like(node: ContentNode) -> bool:
    """Small self-contained UI pieces (logos, buttons, icons) keep their layout."""
    if node.box.width < COMPONENT_MAX_SIZE and node.box.height < COMPONENT_MAX_SIZE:
        return True
    if COMPONENT_NAME_PATTERN.search(node.name):
        return True
    if node.flow is not None and node.flow.is_active and len(node.children) <= 3:
        return all(child.node_type in SIMPLE_CHILD_TYPES for child in node.children)
    return False


def is_extreme_ratio(ratio: float) -> bool:
    return ratio < EDGE_SIZING_VERTICAL_RATIO or ratio > EDGE_SIZING_HORIZONTAL_RATIO


# =============================================================================
# ADAPTER
# =============================================================================


class AutoLayoutAdapter:
    """
    Builds AdaptationPlans for retargeted frames.

    Attributes:
        advisory_enabled: Whether advisory hints are honored.
        observer: Receives an ``adaptation`` stage per plan.
    """

    def __init__(self, advisory_enabled: bool = True, observer: Optional[PlanObserver] = None):
        """
        Initialize the adapter.

        Args:
            advisory_enabled: Whether advisory hints are honored.
            observer: Receives planning decisions; discarded by default.
        """
        self.advisory_enabled = advisory_enabled
        self.observer = observer or NullObserver()

    def create_plan(
        self,
        frame: ContentNode,
        target: Target,
        profile: LayoutProfile,
        scale: float,
        orientation: FlowMode,
        atomic: AtomicGroupSet,
        insets: Optional[SafeAreaInsets] = None,
        horizontal_plan: Optional[AxisExpansionPlan] = None,
        vertical_plan: Optional[AxisExpansionPlan] = None,
        advice: Optional[LayoutAdviceEntry] = None,
    ) -> AdaptationPlan:
        """
        Create the flow settings for one adapted frame.

        Args:
            frame: Source frame being adapted.
            target: Target canvas.
            profile: Layout profile of the target.
            scale: Uniform scale chosen for the target.
            orientation: Resolved orientation.
            atomic: Atomic groups of the source tree.
            insets: Safe-area insets of the target.
            horizontal_plan: Expansion plan for the horizontal axis.
            vertical_plan: Expansion plan for the vertical axis.
            advice: Advisory entry for this target.

        Returns:
            AdaptationPlan for the frame.
        """
        insets = insets or SafeAreaInsets()
        advice = advice if self.advisory_enabled else None
        scale = finite_or(scale, 1.0)

        child_count = sum(1 for child in frame.children if child.visible and not child.is_overlay)
        flow_child_count = count_flow_children(frame)
        pattern = advice.pattern if advice else None

        primary_sizing, counter_sizing = self.resolve_sizing(orientation, profile, target.ratio)
        primary_align, counter_align = self.resolve_alignment(
            frame, orientation, profile, child_count, pattern, vertical_plan
        )
        wrap = self.resolve_wrap(orientation, profile, child_count, target.width)
        item_spacing, counter_spacing = self.resolve_spacing(
            frame, orientation, profile, target, insets, scale, child_count, wrap
        )

        if (
            orientation == FlowMode.VERTICAL
            and profile == LayoutProfile.VERTICAL
            and vertical_plan is not None
            and vertical_plan.interior > 0
        ):
            scaled = self._scaled_spacing(frame, scale)
            stacked = compute_vertical_spacing(scaled, vertical_plan.interior, flow_child_count)
            if stacked > item_spacing:
                item_spacing = float(round(min(stacked, scaled * MAX_SPACING_MULTIPLIER)))

        plan = AdaptationPlan(
            orientation=orientation,
            primary_sizing=primary_sizing,
            counter_sizing=counter_sizing,
            primary_align=primary_align,
            counter_align=counter_align,
            wrap=wrap,
            item_spacing=item_spacing,
            counter_spacing=counter_spacing,
            padding=self.resolve_padding(frame, scale, horizontal_plan, vertical_plan),
            child_overrides=self.create_child_overrides(
                frame, orientation, profile, target, insets, atomic, advice
            ),
            hidden_ids=self.apply_drop_list(frame, advice),
        )

        self.observer.record(
            "adaptation",
            {
                "frame": frame.id,
                "orientation": orientation.value,
                "sizing": (primary_sizing.value, counter_sizing.value),
                "align": (primary_align.value, counter_align.value),
                "wrap": wrap,
                "item_spacing": item_spacing,
                "overrides": len(plan.child_overrides),
                "hidden": len(plan.hidden_ids),
            },
        )
        return plan

    # -------------------------------------------------------------------------
    # Axis settings
    # -------------------------------------------------------------------------

    @staticmethod
    def resolve_sizing(
        orientation: FlowMode, profile: LayoutProfile, ratio: float
    ) -> Tuple[SizingMode, SizingMode]:
        """Primary follows the target profile; extreme targets and freeform stay fixed."""
        if orientation == FlowMode.NONE or is_extreme_ratio(ratio):
            return SizingMode.FIXED, SizingMode.FIXED

        along_profile = (
            profile == LayoutProfile.SQUARE
            or (orientation == FlowMode.VERTICAL and profile == LayoutProfile.VERTICAL)
            or (orientation == FlowMode.HORIZONTAL and profile == LayoutProfile.HORIZONTAL)
        )
        primary = SizingMode.FIXED if along_profile else SizingMode.AUTO
        return primary, SizingMode.FIXED

    @staticmethod
    def resolve_alignment(
        frame: ContentNode,
        orientation: FlowMode,
        profile: LayoutProfile,
        child_count: int,
        pattern: Optional[LayoutPattern] = None,
        vertical_plan: Optional[AxisExpansionPlan] = None,
    ) -> Tuple[Alignment, Alignment]:
        """
        Resolve primary and counter alignment.

        Priority:
        1. Freeform frames align to MIN on both axes
        2. Source alignments are kept when the orientation is unchanged
        3. An advisory pattern's alignment when its mode matches
        4. SPACE_BETWEEN for three or fewer children, MIN otherwise
        """
        if orientation == FlowMode.NONE:
            return Alignment.MIN, Alignment.MIN

        flow = frame.flow
        if (
            flow is not None
            and flow.mode == orientation
            and flow.primary_align is not None
            and flow.counter_align is not None
        ):
            return flow.primary_align, flow.counter_align

        if pattern is not None and pattern.mode == orientation:
            return pattern.primary_align, pattern.counter_align

        counter = flow.counter_align if flow and flow.counter_align else Alignment.CENTER
        primary = (
            Alignment.SPACE_BETWEEN if child_count <= SPACE_BETWEEN_MAX_CHILDREN else Alignment.MIN
        )

        if orientation == FlowMode.VERTICAL and profile == LayoutProfile.VERTICAL:
            interior = vertical_plan.interior if vertical_plan else 0.0
            primary = resolve_vertical_align(primary, interior)

        return primary, counter

    @staticmethod
    def resolve_wrap(
        orientation: FlowMode, profile: LayoutProfile, child_count: int, target_width: float
    ) -> bool:
        if orientation == FlowMode.VERTICAL and profile == LayoutProfile.VERTICAL:
            return resolve_vertical_wrap()
        return (
            orientation == FlowMode.HORIZONTAL
            and child_count > WRAP_MIN_CHILDREN
            and target_width > WRAP_MIN_TARGET_WIDTH
        )

    @staticmethod
    def _scaled_spacing(frame: ContentNode, scale: float) -> float:
        if frame.flow is not None and frame.flow.is_active:
            base = max(0.0, finite_or(frame.flow.item_spacing))
        else:
            base = DEFAULT_ITEM_SPACING
        return 0.0 if base == 0 else max(base * scale, 1.0)

    def resolve_spacing(
        self,
        frame: ContentNode,
        orientation: FlowMode,
        profile: LayoutProfile,
        target: Target,
        insets: SafeAreaInsets,
        scale: float,
        child_count: int,
        wrap: bool,
    ) -> Tuple[float, Optional[float]]:
        """
        Scale the source item spacing and grow it into leftover axis space.

        Growth only applies when the orientation runs along the target
        profile; a share of the leftover (55%, 45% or 35% by child count,
        boosted for extreme ratios) is spread across the gaps, capped at 8x
        the scaled spacing.

        Returns:
            ``(item_spacing, counter_spacing)``; counter spacing is set only
            for wrapping layouts.
        """
        if orientation == FlowMode.NONE:
            return 0.0, None

        scaled = self._scaled_spacing(frame, scale)

        if child_count <= 2:
            ratio = DISTRIBUTION_SPARSE
        elif child_count <= 5:
            ratio = DISTRIBUTION_MODERATE
        else:
            ratio = DISTRIBUTION_DENSE

        target_ratio = target.ratio
        if target_ratio < EDGE_SIZING_VERTICAL_RATIO or target_ratio > EXTREME_HORIZONTAL_RATIO:
            ratio = min(ratio * DISTRIBUTION_EXTREME_BOOST, DISTRIBUTION_EXTREME_CAP)

        extra = None
        if profile == LayoutProfile.VERTICAL and orientation == FlowMode.VERTICAL:
            safe_height = target.height - insets.top - insets.bottom
            extra = safe_height - frame.box.height * scale
        elif profile == LayoutProfile.HORIZONTAL and orientation == FlowMode.HORIZONTAL:
            safe_width = target.width - insets.left - insets.right
            extra = safe_width - frame.box.width * scale

        counter = float(round(scaled)) if wrap else None
        if extra is None:
            return float(round(scaled)), counter

        gaps = max(child_count - 1, 1)
        additional = max(0.0, extra / gaps * ratio)
        final = min(scaled + additional, scaled * MAX_SPACING_MULTIPLIER)
        return float(round(final)), counter

    @staticmethod
    def resolve_padding(
        frame: ContentNode,
        scale: float,
        horizontal_plan: Optional[AxisExpansionPlan] = None,
        vertical_plan: Optional[AxisExpansionPlan] = None,
    ) -> Padding:
        """Scaled source padding, raised to the expansion plan edges."""
        source = frame.flow.padding if frame.flow is not None else Padding()

        def scaled(value: float) -> float:
            return float(round(max(0.0, finite_or(value) * scale)))

        padding = Padding(
            top=scaled(source.top),
            right=scaled(source.right),
            bottom=scaled(source.bottom),
            left=scaled(source.left),
        )
        if horizontal_plan is not None:
            padding.left = max(padding.left, horizontal_plan.start)
            padding.right = max(padding.right, horizontal_plan.end)
        if vertical_plan is not None:
            padding.top = max(padding.top, vertical_plan.start)
            padding.bottom = max(padding.bottom, vertical_plan.end)
        return padding

    # -------------------------------------------------------------------------
    # Children
    # -------------------------------------------------------------------------

    def create_child_overrides(
        self,
        frame: ContentNode,
        orientation: FlowMode,
        profile: LayoutProfile,
        target: Target,
        insets: SafeAreaInsets,
        atomic: AtomicGroupSet,
        advice: Optional[LayoutAdviceEntry] = None,
    ) -> Dict[str, ChildOverride]:
        """
        Per-child overrides for the adapted frame.

        Priority:
        1. Backgrounds are taken out of flow (ABSOLUTE)
        2. Edge children in extreme targets neither grow nor stretch
        3. Orientation conversion rules
        4. A lone flow child grows into the space the edge padding leaves

        Atomic group members never receive overrides.
        """
        overrides: Dict[str, ChildOverride] = {}
        background_id = advice.background_node_id if advice else None

        converting = frame.flow_mode != orientation and orientation != FlowMode.NONE
        extreme = is_extreme_ratio(target.ratio)
        safe_width = max(0.0, target.width - insets.left - insets.right)
        last = len(frame.children) - 1
        in_flow = flow_children(frame) if orientation != FlowMode.NONE else []
        lone_id = in_flow[0].id if len(in_flow) == 1 else None

        for index, child in enumerate(frame.children):
            if not child.visible or atomic.is_member(child.id):
                continue

            if background_id is not None:
                if child.id == background_id:
                    overrides[child.id] = ChildOverride(positioning=Positioning.ABSOLUTE)
                    continue
            elif is_background_like(
                child, frame.box.width, frame.box.height, is_bottom_layer=index == last
            ):
                overrides[child.id] = ChildOverride(positioning=Positioning.ABSOLUTE)
                continue

            override = ChildOverride()
            edge_constrained = extreme and index in (0, last)

            if converting and orientation == FlowMode.VERTICAL:
                override.grow = 0
                override.align = ChildAlign.INHERIT if edge_constrained else ChildAlign.STRETCH
                if child.is_text:
                    override.max_width = round(safe_width * TEXT_MAX_WIDTH_RATIO, 2)
                    if profile in (LayoutProfile.VERTICAL, LayoutProfile.SQUARE):
                        override.text_align = "CENTER"

            elif converting and orientation == FlowMode.HORIZONTAL:
                override.align = ChildAlign.INHERIT
                override.grow = 0 if edge_constrained else 1
                override.max_height = round(target.height * HORIZONTAL_MAX_HEIGHT_RATIO, 2)

            if child.id == lone_id:
                override.grow = 1

            if not override.is_empty():
                overrides[child.id] = override

        return overrides

    @staticmethod
    def apply_drop_list(
        frame: ContentNode, advice: Optional[LayoutAdviceEntry] = None
    ) -> List[str]:
        """Ids of nodes an advisory drop list hides, matched by id or name."""
        if advice is None or not advice.drop:
            return []

        ids = set(advice.drop)
        names = {item.lower() for item in advice.drop}
        hidden = []
        for node in frame.iter_nodes():
            if node is frame:
                continue
            if node.id in ids or node.name.lower() in names:
                hidden.append(node.id)
        return hidden

    # -------------------------------------------------------------------------
    # Nested containers
    # -------------------------------------------------------------------------

    def adapt_nested(
        self,
        root: ContentNode,
        target: Target,
        profile: LayoutProfile,
        scale: float,
        atomic: AtomicGroupSet,
        insets: Optional[SafeAreaInsets] = None,
    ) -> Dict[str, AdaptationPlan]:
        """
        Plan structural containers below the root.

        Visible flow frames at least half the target width (after scaling)
        are re-resolved on their own. Component-like frames and atomic groups
        keep their internal layout, and nothing below them is visited.

        Returns:
            Plans keyed by node id, only where the orientation changes.
        """
        plans: Dict[str, AdaptationPlan] = {}
        min_width = target.width * STRUCTURAL_WIDTH_RATIO

        pending: List[ContentNode] = list(reversed(root.children))
        while pending:
            node = pending.pop()
            if not node.visible or node.id in atomic:
                continue
            if node.kind != "container":
                continue
            if is_component_like(node):
                continue

            pending.extend(reversed(node.children))

            if node.flow is None or not node.flow.is_active:
                continue
            if node.box.width * scale < min_width:
                continue

            context = ResolverContext(
                source_mode=node.flow_mode,
                source_width=node.box.width,
                source_height=node.box.height,
                child_count=sum(1 for child in node.children if child.visible),
                has_text=any(d.has_text for d in node.iter_nodes()),
                has_images=any(d.has_image_fill for d in node.iter_nodes()),
                target_width=target.width,
                target_height=target.height,
                profile=profile,
            )
            mode, _ = resolve_orientation(context, observer=self.observer)
            if mode == node.flow_mode:
                continue

            plans[node.id] = self.create_plan(
                node, target, profile, scale, mode, atomic, insets
            )

        return plans
