"""
Main retargeting engine module.

Combines content analysis, scale selection, orientation resolution, axis
expansion and adaptation to produce one VariantPlan per target canvas.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .adapter import AutoLayoutAdapter, count_flow_children, is_background_like
from .advice import LayoutAdvice, LayoutAdviceEntry, NodePositioning
from .analyzer import analyze_content
from .atomic import classify_atomic_groups
from .constants import DEFAULT_SAFE_AREA_RATIO, MAX_ANALYSIS_DEPTH, MAX_SAFE_AREA_RATIO
from .expansion import plan_axis_expansion
from .margins import ContentMargins, measure_content_margins, normalize_content_margins
from .models import (
    AbsolutePlacement,
    AdaptationPlan,
    AtomicGroupSet,
    AxisExpansionPlan,
    AxisGaps,
    Box,
    ContentAnalysis,
    ContentNode,
    FlowMode,
    LayoutProfile,
    QaWarning,
    SafeAreaInsets,
    Target,
    finite_or,
    round2,
)
from .profile import (
    resolve_layout_profile,
    should_adopt_vertical_flow,
    should_expand_absolute_children,
)
from .projector import ChildSnapshot, plan_absolute_positions
from .qa import collect_warnings
from .resolver import ResolverContext, resolve_orientation
from .safe_area import VARIANT_TARGETS, resolve_safe_area_insets, safe_bounds
from .scaling import select_scale
from .tracer import NullObserver, PlanObserver


@dataclass
class VariantPlan:
    """
    Everything the node mutator needs to build one variant.

    Attributes:
        target: Target canvas.
        profile: Layout profile of the target.
        analysis: Analysis of the source frame.
        scale: Uniform scale factor.
        insets: Safe-area insets of the target.
        horizontal: Expansion plan for the horizontal axis.
        vertical: Expansion plan for the vertical axis.
        orientation: Resolved orientation of the root frame.
        orientation_reason: Rule that decided the orientation.
        adaptation: Flow settings for the root, or None for a freeform result.
        absolute_positions: Placements of freeform children (target-local).
        nested: Plans for nested containers whose orientation changes.
        atomic: Atomic groups of the source tree.
        node_positioning: Advisory positioning directives keyed by node id,
            handed to the node mutator unchanged.
    """

    target: Target
    profile: LayoutProfile
    analysis: ContentAnalysis
    scale: float
    insets: SafeAreaInsets
    horizontal: AxisExpansionPlan
    vertical: AxisExpansionPlan
    orientation: FlowMode
    orientation_reason: str
    adaptation: Optional[AdaptationPlan] = None
    absolute_positions: List[AbsolutePlacement] = field(default_factory=list)
    nested: Dict[str, AdaptationPlan] = field(default_factory=dict)
    atomic: AtomicGroupSet = field(default_factory=AtomicGroupSet)
    node_positioning: Dict[str, NodePositioning] = field(default_factory=dict)


class RetargetEngine:
    """
    Plan variants of one source frame for many target canvases.

    Example:
        >>> engine = RetargetEngine()
        >>> plans = engine.plan_all(build_tree(captured))
        >>> plans["tiktok-vertical"].orientation
        <FlowMode.VERTICAL: 'vertical'>
    """

    def __init__(
        self,
        safe_area_ratio: float = DEFAULT_SAFE_AREA_RATIO,
        advisory_enabled: bool = True,
        max_analysis_depth: int = MAX_ANALYSIS_DEPTH,
        observer: Optional[PlanObserver] = None,
    ):
        """
        Initialize the retargeting engine.

        Args:
            safe_area_ratio: Symmetric safe-area inset as a fraction of each
                target dimension, in [0, 0.5)
            advisory_enabled: Whether advisory hints take precedence over the
                deterministic heuristics
            max_analysis_depth: Depth bound for content analysis
            observer: Receives planning decisions (e.g. a PlanTrace)
        """
        ratio = finite_or(safe_area_ratio, -1.0)
        if not 0 <= ratio < MAX_SAFE_AREA_RATIO:
            raise ValueError("safe_area_ratio must be in the range [0, 0.5)")
        if max_analysis_depth < 0:
            raise ValueError("max_analysis_depth must not be negative")

        self.safe_area_ratio = ratio
        self.advisory_enabled = advisory_enabled
        self.max_analysis_depth = max_analysis_depth
        self.observer = observer or NullObserver()
        self.adapter = AutoLayoutAdapter(advisory_enabled=advisory_enabled, observer=self.observer)

    def plan(
        self,
        source: ContentNode,
        target: Target,
        advice: Optional[LayoutAdvice] = None,
    ) -> VariantPlan:
        """
        Plan a single variant.

        Args:
            source: Root of the captured source frame
            target: Target canvas
            advice: Optional advisory hints (matched by target id)

        Returns:
            VariantPlan for the target
        """
        return self._plan_target(source, target, classify_atomic_groups(source), advice)

    def plan_all(
        self,
        source: ContentNode,
        targets: Optional[Iterable[Target]] = None,
        advice: Optional[LayoutAdvice] = None,
    ) -> Dict[str, VariantPlan]:
        """
        Plan variants for several targets.

        Atomic groups are classified once and shared by every target.

        Args:
            source: Root of the captured source frame
            targets: Targets to plan; the preset targets when omitted
            advice: Optional advisory hints

        Returns:
            Plans keyed by target id
        """
        atomic = classify_atomic_groups(source)
        targets = VARIANT_TARGETS if targets is None else targets
        return {
            target.id: self._plan_target(source, target, atomic, advice)
            for target in targets
        }

    def check(self, target_tree: ContentNode, target: Target) -> List[QaWarning]:
        """
        Collect QA warnings for an adapted target frame.

        Args:
            target_tree: Root of the frame after the plan was applied
            target: Target the frame was built for

        Returns:
            List of warnings
        """
        insets = resolve_safe_area_insets(target, self.safe_area_ratio)
        return collect_warnings(target_tree, target, insets)

    def _advice_entry(
        self, advice: Optional[LayoutAdvice], target: Target
    ) -> Optional[LayoutAdviceEntry]:
        if advice is None or not self.advisory_enabled:
            return None
        return advice.entry_for(target.id)

    def _plan_target(
        self,
        source: ContentNode,
        target: Target,
        atomic: AtomicGroupSet,
        advice: Optional[LayoutAdvice],
    ) -> VariantPlan:
        width = max(finite_or(target.width), 1.0)
        height = max(finite_or(target.height), 1.0)

        profile = resolve_layout_profile(width, height)
        insets = resolve_safe_area_insets(target, self.safe_area_ratio)
        self.observer.record(
            "profile", {"target": target.id, "profile": profile.value, "insets": insets}
        )

        analysis = analyze_content(source, self.max_analysis_depth, self.observer)
        scale = select_scale(analysis, width, height, insets, profile, self.observer)
        entry = self._advice_entry(advice, target)

        source_mode = source.flow_mode
        flow_child_count = count_flow_children(source)
        adopt_vertical = should_adopt_vertical_flow(
            profile, source.flow.mode if source.flow else None, flow_child_count
        )

        context = ResolverContext(
            source_mode=source_mode,
            source_width=source.box.width,
            source_height=source.box.height,
            child_count=analysis.child_count,
            has_text=analysis.has_text,
            has_images=analysis.has_images,
            target_width=width,
            target_height=height,
            profile=profile,
            adopt_vertical=adopt_vertical,
        )
        orientation, reason = resolve_orientation(
            context, entry, self.advisory_enabled, self.observer
        )

        gaps = self._source_gaps(source, profile, target, scale)
        scaled_width = source.box.width * scale
        scaled_height = source.box.height * scale
        spacing = source.flow.item_spacing * scale if source.flow else 0.0

        horizontal = plan_axis_expansion(
            total_extra=width - scaled_width,
            safe_inset=(insets.left, insets.right),
            gaps=AxisGaps(gaps.left, gaps.right) if gaps else None,
            flow_child_count=flow_child_count,
            base_item_spacing=spacing,
            allow_interior_expansion=orientation == FlowMode.HORIZONTAL,
        )
        vertical = plan_axis_expansion(
            total_extra=height - scaled_height,
            safe_inset=(insets.top, insets.bottom),
            gaps=AxisGaps(gaps.top, gaps.bottom) if gaps else None,
            flow_child_count=flow_child_count,
            base_item_spacing=spacing,
            allow_interior_expansion=orientation == FlowMode.VERTICAL,
        )
        self.observer.record("expansion_horizontal", {"plan": horizontal})
        self.observer.record("expansion_vertical", {"plan": vertical})

        plan = VariantPlan(
            target=target,
            profile=profile,
            analysis=analysis,
            scale=scale,
            insets=insets,
            horizontal=horizontal,
            vertical=vertical,
            orientation=orientation,
            orientation_reason=reason,
            atomic=atomic,
            node_positioning=dict(entry.positioning) if entry else {},
        )

        if orientation == FlowMode.NONE:
            plan.absolute_positions = self._place_freeform(
                source, target, insets, profile, scale, adopt_vertical
            )
            return plan

        plan.adaptation = self.adapter.create_plan(
            source,
            target,
            profile,
            scale,
            orientation,
            atomic,
            insets=insets,
            horizontal_plan=horizontal,
            vertical_plan=vertical,
            advice=entry,
        )
        plan.nested = self.adapter.adapt_nested(source, target, profile, scale, atomic, insets)
        return plan

    def _source_gaps(
        self, source: ContentNode, profile: LayoutProfile, target: Target, scale: float
    ) -> Optional[ContentMargins]:
        margins = measure_content_margins(source)
        if margins is None:
            return None
        source_profile = resolve_layout_profile(source.box.width, source.box.height)
        normalized = normalize_content_margins(
            margins,
            source_profile,
            profile,
            source.box.width / max(source.box.height, 1.0),
            target.ratio,
        )
        normalized.left *= scale
        normalized.right *= scale
        normalized.top *= scale
        normalized.bottom *= scale
        return normalized

    def _place_freeform(
        self,
        source: ContentNode,
        target: Target,
        insets: SafeAreaInsets,
        profile: LayoutProfile,
        scale: float,
        adopt_vertical: bool,
    ) -> List[AbsolutePlacement]:
        children = [
            ChildSnapshot(
                child.id,
                Box(
                    (child.box.x - source.box.x) * scale,
                    (child.box.y - source.box.y) * scale,
                    child.box.width * scale,
                    child.box.height * scale,
                ),
            )
            for child in source.children
            if child.visible
            and not child.is_overlay
            and not is_background_like(child, source.box.width, source.box.height)
        ]
        if not children:
            return []

        # Center the scaled composition on the safe area before planning.
        bounds = safe_bounds(target, insets)
        content = Box.union(child.box for child in children)
        dx = bounds.center_x - content.center_x
        dy = bounds.center_y - content.center_y
        children = [
            ChildSnapshot(
                child.id,
                Box(child.box.x + dx, child.box.y + dy, child.box.width, child.box.height),
            )
            for child in children
        ]

        if not should_expand_absolute_children(source.flow_mode, adopt_vertical, profile):
            return [
                AbsolutePlacement(child.id, round2(child.box.x), round2(child.box.y))
                for child in children
            ]

        return plan_absolute_positions(profile, bounds, children, self.observer)
