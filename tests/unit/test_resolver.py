"""Unit tests for layout mode resolution."""

import itertools

from variantfit.advice import LayoutAdviceEntry
from variantfit.models import FlowMode, LayoutProfile
from variantfit.profile import resolve_layout_profile
from variantfit.resolver import (
    ResolverContext,
    resolve_deterministic,
    resolve_orientation,
    should_force_mode_change,
)
from variantfit.tracer import PlanTrace


def make_context(target_width, target_height, source_mode=FlowMode.HORIZONTAL, **kwargs):
    defaults = dict(
        source_width=1600,
        source_height=900,
        child_count=2,
        has_text=True,
        has_images=True,
    )
    defaults.update(kwargs)
    return ResolverContext(
        source_mode=source_mode,
        target_width=target_width,
        target_height=target_height,
        profile=resolve_layout_profile(target_width, target_height),
        **defaults,
    )


class TestAdvisoryTiers:
    """Tests for advisory precedence."""

    def test_explicit_orientation_always_wins(self):
        """Test that an explicit hint beats every deterministic rule."""
        advice = LayoutAdviceEntry("t", orientation=FlowMode.VERTICAL)
        sizes = [(1080, 1920), (3000, 1000), (1080, 1080), (1920, 1080), (600, 1000)]
        for (width, height), mode, count, has_text, has_images, adopt in itertools.product(
            sizes, FlowMode, (0, 1, 2, 3, 8), (False, True), (False, True), (False, True)
        ):
            context = make_context(
                width,
                height,
                mode,
                child_count=count,
                has_text=has_text,
                has_images=has_images,
                adopt_vertical=adopt,
            )
            assert resolve_orientation(context, advice) == (
                FlowMode.VERTICAL,
                "advice-orientation",
            )

    def test_pattern_implies_orientation(self):
        advice = LayoutAdviceEntry("t", pattern_id="banner-spread")
        context = make_context(1080, 1920, FlowMode.VERTICAL)
        assert resolve_orientation(context, advice) == (
            FlowMode.HORIZONTAL,
            "advice-pattern:banner-spread",
        )

    def test_freeform_pattern_keeps_existing_flow(self):
        """Test that a freeform pattern does not collapse a flow source."""
        advice = LayoutAdviceEntry("t", pattern_id="layered-hero")

        flowing = make_context(1080, 1080, FlowMode.HORIZONTAL)
        assert resolve_orientation(flowing, advice) == (
            FlowMode.HORIZONTAL,
            "advice-pattern-preserves-flow",
        )

        freeform = make_context(1080, 1080, FlowMode.NONE)
        assert resolve_orientation(freeform, advice) == (
            FlowMode.NONE,
            "advice-pattern:layered-hero",
        )

    def test_advice_without_orientation_preserves_source(self):
        """Test that advice present but silent keeps the source mode."""
        advice = LayoutAdviceEntry("t", background_node_id="bg")
        context = make_context(1080, 1920, FlowMode.HORIZONTAL)
        assert resolve_orientation(context, advice) == (
            FlowMode.HORIZONTAL,
            "advice-preserve-source",
        )

    def test_unknown_pattern_preserves_source(self):
        advice = LayoutAdviceEntry("t", pattern_id="does-not-exist")
        context = make_context(1920, 1080, FlowMode.VERTICAL)
        assert resolve_orientation(context, advice)[1] == "advice-preserve-source"

    def test_disabled_advice_is_ignored(self):
        advice = LayoutAdviceEntry("t", orientation=FlowMode.HORIZONTAL)
        context = make_context(1080, 1920, FlowMode.HORIZONTAL)
        assert resolve_orientation(context, advice, advisory_enabled=False) == (
            FlowMode.VERTICAL,
            "forced",
        )


class TestDeterministicTier:
    """Tests for the ratio-based fallback."""

    def test_forced_rotation(self):
        """Test that extreme ratios rotate a flow running against them."""
        assert should_force_mode_change(make_context(1080, 1920, FlowMode.HORIZONTAL))
        assert should_force_mode_change(make_context(3000, 1000, FlowMode.VERTICAL))
        assert not should_force_mode_change(make_context(1080, 1920, FlowMode.VERTICAL))
        assert not should_force_mode_change(make_context(1920, 1080, FlowMode.VERTICAL))

        assert resolve_deterministic(make_context(3000, 1000, FlowMode.VERTICAL)) == (
            FlowMode.HORIZONTAL,
            "forced",
        )

    def test_adopt_vertical(self):
        context = make_context(1200, 2000, FlowMode.HORIZONTAL, adopt_vertical=True)
        assert resolve_deterministic(context) == (FlowMode.VERTICAL, "adopt-vertical")

    def test_freeform_source(self):
        """Test that freeform frames turn directional only on a large aspect change."""
        wide = make_context(1920, 1080, FlowMode.NONE, source_width=1000, source_height=1000)
        assert resolve_deterministic(wide) == (FlowMode.HORIZONTAL, "freeform-to-directional")

        tall = make_context(1080, 1920, FlowMode.NONE, source_width=1000, source_height=1000)
        assert resolve_deterministic(tall) == (FlowMode.VERTICAL, "freeform-to-directional")

        similar = make_context(1080, 1000, FlowMode.NONE, source_width=1000, source_height=1000)
        assert resolve_deterministic(similar) == (FlowMode.NONE, "freeform-similar-aspect")

    def test_extreme_vertical_image_source(self):
        context = make_context(
            1000, 2000, FlowMode.VERTICAL, has_text=False, has_images=True, child_count=2
        )
        assert resolve_deterministic(context) == (
            FlowMode.VERTICAL,
            "extreme-vertical-image-preserve",
        )

    def test_moderate_vertical(self):
        """Test that portrait targets rotate only rows of three or more."""
        many = make_context(1050, 1500, FlowMode.HORIZONTAL, child_count=3)
        assert resolve_deterministic(many) == (
            FlowMode.VERTICAL,
            "moderate-vertical-multi-child",
        )

        few = make_context(1050, 1500, FlowMode.HORIZONTAL, child_count=2)
        assert resolve_deterministic(few) == (FlowMode.HORIZONTAL, "moderate-vertical-preserve")

    def test_extreme_horizontal(self):
        context = make_context(3000, 1000, FlowMode.HORIZONTAL)
        assert resolve_deterministic(context) == (FlowMode.HORIZONTAL, "extreme-horizontal")

    def test_moderate_horizontal(self):
        two = make_context(2000, 1000, FlowMode.VERTICAL, child_count=2)
        assert resolve_deterministic(two) == (
            FlowMode.HORIZONTAL,
            "moderate-horizontal-two-child",
        )

        three = make_context(2000, 1000, FlowMode.VERTICAL, child_count=3)
        assert resolve_deterministic(three) == (
            FlowMode.VERTICAL,
            "moderate-horizontal-preserve",
        )

    def test_square_preserves(self):
        context = make_context(1080, 1080, FlowMode.VERTICAL)
        assert resolve_deterministic(context) == (FlowMode.VERTICAL, "preserve")


class TestResolveOrientation:
    """Tests for the orientation entry point."""

    def test_records_reason(self):
        trace = PlanTrace()
        resolve_orientation(make_context(1080, 1920, FlowMode.HORIZONTAL), observer=trace)

        stage = trace.get_stage("orientation")
        assert stage.data["reason"] == "forced"
        assert stage.data["mode"] == "vertical"
        assert stage.data["source_mode"] == "horizontal"
