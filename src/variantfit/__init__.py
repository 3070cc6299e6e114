"""
VariantFit - Layout retargeting for design variants

A Python library that plans how one source composition is rescaled and
re-laid-out for many target canvases (social formats, covers, banners).

Example:
    >>> from variantfit import RetargetEngine, build_tree
    >>> engine = RetargetEngine()
    >>> plans = engine.plan_all(build_tree(captured_frame))
    >>> plans["tiktok-vertical"].scale

Tracing Example:
    >>> from variantfit import PlanTrace
    >>> trace = PlanTrace()
    >>> engine = RetargetEngine(observer=trace)
    >>> engine.plan(source, target)
    >>> print(trace.summary())
"""

from .adapter import AutoLayoutAdapter
from .advice import LayoutAdvice, LayoutAdviceEntry, parse_advice
from .analyzer import analyze_content, choose_strategy
from .atomic import classify_atomic_groups, is_atomic
from .capture import CaptureError, build_tree
from .engine import RetargetEngine, VariantPlan
from .expansion import distribute_padding, plan_axis_expansion
from .models import (
    AdaptationPlan,
    AtomicGroupSet,
    AxisExpansionPlan,
    Box,
    ContentAnalysis,
    ContentNode,
    FlowMode,
    LayoutProfile,
    QaWarning,
    ScalingStrategy,
    Target,
)
from .profile import resolve_layout_profile
from .projector import plan_absolute_positions, scale_center_to_range
from .qa import collect_warnings
from .resolver import ResolverContext, resolve_orientation
from .safe_area import VARIANT_TARGETS, resolve_safe_area_insets
from .scaling import select_scale
from .tracer import LoggingObserver, NullObserver, PlanObserver, PlanStage, PlanTrace
from .tree import NodeArena, build_node_map

__version__ = "0.1.0"

__all__ = [
    # Main API
    "RetargetEngine",
    "VariantPlan",
    # Capture and advice
    "build_tree",
    "CaptureError",
    "parse_advice",
    "LayoutAdvice",
    "LayoutAdviceEntry",
    # Models
    "AdaptationPlan",
    "AtomicGroupSet",
    "AxisExpansionPlan",
    "Box",
    "ContentAnalysis",
    "ContentNode",
    "FlowMode",
    "LayoutProfile",
    "QaWarning",
    "ScalingStrategy",
    "Target",
    # Planning stages
    "resolve_layout_profile",
    "analyze_content",
    "choose_strategy",
    "select_scale",
    "is_atomic",
    "classify_atomic_groups",
    "ResolverContext",
    "resolve_orientation",
    "plan_axis_expansion",
    "distribute_padding",
    "plan_absolute_positions",
    "scale_center_to_range",
    "AutoLayoutAdapter",
    # Targets and QA
    "VARIANT_TARGETS",
    "resolve_safe_area_insets",
    "collect_warnings",
    # Tree
    "NodeArena",
    "build_node_map",
    # Tracing
    "PlanObserver",
    "PlanTrace",
    "PlanStage",
    "NullObserver",
    "LoggingObserver",
]
