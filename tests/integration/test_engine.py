"""
Integration tests for variant planning.

These tests run the full planning pipeline from a source tree (built either
directly or from captured node data) to per-target VariantPlans.
"""

import math

import pytest

from variantfit import RetargetEngine, parse_advice
from variantfit.models import Box, ChildAlign, FlowMode, NodeType, Target
from variantfit.qa import MISALIGNED, OUTSIDE_SAFE_AREA
from variantfit.safe_area import VARIANT_TARGETS, get_target, safe_bounds
from variantfit.tracer import PlanTrace


class TestEngineConfiguration:
    """Tests for RetargetEngine construction."""

    def test_defaults(self, engine):
        assert engine.safe_area_ratio == 0.08
        assert engine.advisory_enabled
        assert engine.max_analysis_depth == 10

    @pytest.mark.parametrize("ratio", [0.5, 0.75, -0.1, math.nan, math.inf])
    def test_invalid_safe_area_ratio(self, ratio):
        with pytest.raises(ValueError, match="safe_area_ratio"):
            RetargetEngine(safe_area_ratio=ratio)

    def test_zero_ratio_is_allowed(self):
        assert RetargetEngine(safe_area_ratio=0).safe_area_ratio == 0

    def test_negative_depth(self):
        with pytest.raises(ValueError, match="max_analysis_depth"):
            RetargetEngine(max_analysis_depth=-1)


class TestHorizontalCardToVertical:
    """Planning a horizontal flow card into a tall target."""

    @pytest.fixture
    def plan(self, engine, horizontal_card):
        return engine.plan(horizontal_card, get_target("tiktok-vertical"))

    def test_orientation_is_forced_vertical(self, plan):
        assert plan.orientation == FlowMode.VERTICAL
        assert plan.orientation_reason == "forced"

    def test_scale_is_capped_by_tight_fit(self, plan):
        # Safe width 870 over 1460 content width, 10% overshoot
        assert plan.scale == pytest.approx(870 / 1460 * 1.1)

    def test_platform_insets_are_floors(self, plan):
        assert plan.horizontal.start >= 90
        assert plan.horizontal.end >= 120
        assert plan.vertical.start >= 150
        assert plan.vertical.end >= 400
        assert plan.horizontal.interior == 0
        assert plan.vertical.interior > 0

    def test_adaptation(self, plan):
        adaptation = plan.adaptation
        assert adaptation.orientation == FlowMode.VERTICAL
        assert not adaptation.wrap
        assert adaptation.padding.top >= 150
        assert adaptation.padding.bottom >= 400
        assert adaptation.child_overrides["hero"].align == ChildAlign.STRETCH
        assert adaptation.child_overrides["copy"].grow == 0
        assert plan.absolute_positions == []


class TestLoneFlowChild:
    """A frame with a single flow child planned into a tall target."""

    @pytest.fixture
    def single_card(self, make_node, make_flow):
        return make_node(
            "frame",
            box=(0, 0, 1600, 900),
            flow=make_flow(FlowMode.HORIZONTAL, spacing=20, padding=40),
            children=[
                make_node("card", NodeType.RECTANGLE, (400, 150, 800, 600), has_fill=True),
            ],
        )

    def test_child_absorbs_remaining_space(self, engine, single_card):
        """Test that the edges stay at their floors and the child grows into the rest."""
        plan = engine.plan(single_card, Target("tall", 1080, 1920))

        assert plan.orientation == FlowMode.VERTICAL
        assert plan.vertical.interior == 0
        assert plan.vertical.start == pytest.approx(plan.insets.top)
        assert plan.vertical.end == pytest.approx(plan.insets.bottom)
        assert plan.adaptation.child_overrides["card"].grow == 1
        assert plan.adaptation.child_overrides["card"].align == ChildAlign.STRETCH

    def test_background_is_not_grown(self, engine, make_node, make_flow):
        frame = make_node(
            "frame",
            box=(0, 0, 1600, 900),
            flow=make_flow(FlowMode.HORIZONTAL),
            children=[
                make_node("card", NodeType.RECTANGLE, (400, 150, 800, 600), has_fill=True),
                make_node("bg", NodeType.RECTANGLE, (0, 0, 1600, 900), has_image_fill=True),
            ],
        )
        overrides = engine.plan(frame, Target("tall", 1080, 1920)).adaptation.child_overrides

        assert overrides["card"].grow == 1
        assert overrides["bg"].grow is None


class TestFreeformPoster:
    """Planning a frame without flow layout."""

    def test_similar_aspect_places_children(self, engine, freeform_poster):
        """Test that a square target keeps absolute placement inside the safe area."""
        target = get_target("gumroad-thumbnail")
        plan = engine.plan(freeform_poster, target)

        assert plan.orientation == FlowMode.NONE
        assert plan.adaptation is None
        assert [p.id for p in plan.absolute_positions] == ["badge", "headline", "photo"]

        bounds = safe_bounds(target, plan.insets)
        sizes = {child.id: child.box for child in freeform_poster.children}
        for placement in plan.absolute_positions:
            source = sizes[placement.id]
            placed = Box(
                placement.x,
                placement.y,
                source.width * plan.scale,
                source.height * plan.scale,
            )
            assert bounds.contains(placed, 0.02)

        badge = plan.absolute_positions[0]
        assert badge.x == pytest.approx(48, abs=0.01)
        assert badge.y == pytest.approx(48, abs=0.01)

    def test_large_aspect_change_becomes_directional(self, engine, freeform_poster):
        plan = engine.plan(freeform_poster, get_target("figma-cover"))

        assert plan.orientation == FlowMode.HORIZONTAL
        assert plan.orientation_reason == "freeform-to-directional"
        assert plan.adaptation is not None
        assert plan.absolute_positions == []


class TestAdvice:
    """Advisory hints through the engine."""

    def test_advice_orientation_wins(self, engine, horizontal_card):
        advice = parse_advice({"targetId": "web-hero", "suggestedLayoutMode": "VERTICAL"})
        plan = engine.plan(horizontal_card, get_target("web-hero"), advice)

        assert plan.orientation == FlowMode.VERTICAL
        assert plan.orientation_reason == "advice-orientation"

    def test_advice_for_other_target_is_ignored(self, engine, horizontal_card):
        advice = parse_advice({"targetId": "tiktok-vertical", "suggestedLayoutMode": "VERTICAL"})
        plan = engine.plan(horizontal_card, get_target("web-hero"), advice)

        assert plan.orientation_reason == "moderate-horizontal-preserve"

    def test_disabled_advice(self, horizontal_card):
        engine = RetargetEngine(advisory_enabled=False)
        advice = parse_advice(
            {
                "targetId": "web-hero",
                "suggestedLayoutMode": "VERTICAL",
                "restructure": {"drop": ["Hero"]},
            }
        )
        plan = engine.plan(horizontal_card, get_target("web-hero"), advice)

        assert plan.orientation == FlowMode.HORIZONTAL
        assert plan.adaptation.hidden_ids == []

    def test_drop_list(self, engine, horizontal_card):
        advice = parse_advice({"targetId": "web-hero", "restructure": {"drop": ["Hero"]}})
        plan = engine.plan(horizontal_card, get_target("web-hero"), advice)

        assert plan.orientation_reason == "advice-preserve-source"
        assert plan.adaptation.hidden_ids == ["hero"]

    def test_node_positioning_is_carried_on_plan(self, engine, horizontal_card):
        """Test that per-node directives reach the plan for the mutator."""
        advice = parse_advice(
            {
                "targetId": "web-hero",
                "positioning": {"copy": {"region": "left", "size": "fill"}},
            }
        )
        plan = engine.plan(horizontal_card, get_target("web-hero"), advice)

        assert set(plan.node_positioning) == {"copy"}
        assert plan.node_positioning["copy"].region == "left"
        assert engine.plan(horizontal_card, get_target("web-hero")).node_positioning == {}


class TestPlanAll:
    """Planning every preset target."""

    def test_default_targets(self, engine, horizontal_card):
        plans = engine.plan_all(horizontal_card)
        assert list(plans) == [target.id for target in VARIANT_TARGETS]

    def test_custom_targets(self, engine, horizontal_card):
        plans = engine.plan_all(horizontal_card, [Target("strip", 3000, 400)])
        assert list(plans) == ["strip"]

    def test_invariants_hold_for_every_target(self, engine, horizontal_card, mockup_frame):
        """Test scale bounds and inset floors across all presets."""
        for source in (horizontal_card, mockup_frame):
            for plan in engine.plan_all(source).values():
                assert 0.3 <= plan.scale <= 12
                assert plan.horizontal.start >= plan.insets.left
                assert plan.horizontal.end >= plan.insets.right
                assert plan.vertical.start >= plan.insets.top
                assert plan.vertical.end >= plan.insets.bottom
                assert (plan.adaptation is None) == (plan.orientation == FlowMode.NONE)

    def test_atomic_groups_are_never_relaid(self, engine, mockup_frame):
        """Test that no plan touches the inside of an atomic group."""
        plans = engine.plan_all(mockup_frame)
        for plan in plans.values():
            atomic = plan.atomic
            assert atomic.roots == frozenset({"mockup", "cta"})
            assert not set(plan.nested) & (atomic.roots | atomic.members)

            adaptations = list(plan.nested.values())
            if plan.adaptation is not None:
                adaptations.append(plan.adaptation)
            for adaptation in adaptations:
                assert not set(adaptation.child_overrides) & atomic.members

    def test_captured_source(self, engine, captured_tree):
        plans = engine.plan_all(captured_tree)

        assert plans["tiktok-vertical"].orientation == FlowMode.VERTICAL
        assert plans["gumroad-cover"].orientation == FlowMode.HORIZONTAL


class TestTracing:
    """Observer integration."""

    def test_flow_plan_stages(self, horizontal_card):
        trace = PlanTrace()
        RetargetEngine(observer=trace).plan(horizontal_card, get_target("tiktok-vertical"))

        names = [stage.name for stage in trace.stages]
        for expected in (
            "profile",
            "analysis",
            "scale",
            "orientation",
            "expansion_horizontal",
            "expansion_vertical",
            "adaptation",
        ):
            assert expected in names
        assert names.index("scale") < names.index("orientation") < names.index("adaptation")
        assert trace.get_stage("profile").data["profile"] == "vertical"

    def test_freeform_plan_stages(self, freeform_poster):
        trace = PlanTrace()
        RetargetEngine(observer=trace).plan(freeform_poster, get_target("gumroad-thumbnail"))

        assert trace.get_stage("absolute_positions").data["mode"] == "pass-through"
        assert trace.get_stage("adaptation") is None


class TestCheck:
    """QA checks on adapted frames."""

    def test_check_flags_content_outside_safe_area(self, engine, make_node):
        frame = make_node(
            "variant",
            box=(0, 0, 600, 600),
            children=[make_node("logo", NodeType.RECTANGLE, (0, 0, 100, 100))],
        )
        warnings = engine.check(frame, get_target("gumroad-thumbnail"))
        assert [w.code for w in warnings] == [OUTSIDE_SAFE_AREA, MISALIGNED]

    def test_check_clean_frame(self, engine, make_node):
        frame = make_node(
            "variant",
            box=(0, 0, 600, 600),
            children=[make_node("card", NodeType.RECTANGLE, (100, 100, 400, 400))],
        )
        assert engine.check(frame, get_target("gumroad-thumbnail")) == []
