"""Unit tests for the scaling module."""

import itertools

import pytest

from variantfit.models import (
    ContentAnalysis,
    ContentDensity,
    FlowMode,
    LayoutProfile,
    SafeAreaInsets,
    ScalingStrategy,
)
from variantfit.scaling import axis_scales, select_scale
from variantfit.tracer import PlanTrace


def make_analysis(width, height, strategy=ScalingStrategy.ADAPTIVE, has_images=False):
    return ContentAnalysis(
        actual_content_box=None,
        has_auto_layout=True,
        layout_direction=FlowMode.HORIZONTAL,
        child_count=3,
        has_text=True,
        has_images=has_images,
        content_density=ContentDensity.NORMAL,
        recommended_strategy=strategy,
        effective_width=width,
        effective_height=height,
    )


NO_INSETS = SafeAreaInsets()


class TestAxisScales:
    """Tests for axis_scales."""

    def test_safe_area_is_subtracted(self):
        insets = SafeAreaInsets(left=50, right=50, top=100, bottom=100)
        width_scale, height_scale = axis_scales(make_analysis(500, 400), 1100, 1000, insets)

        assert width_scale == pytest.approx(2.0)
        assert height_scale == pytest.approx(2.0)

    def test_zero_content_is_clamped(self):
        assert axis_scales(make_analysis(0, 0), 100, 50, NO_INSETS) == (100.0, 50.0)


class TestSelectScale:
    """Tests for select_scale."""

    def test_vertical_adaptive_prefers_height_scale(self):
        """Test that a tall target uses 95% of the height scale when it is tighter."""
        # width scale 2.7, height scale 2.1333
        scale = select_scale(
            make_analysis(400, 900), 1080, 1920, NO_INSETS, LayoutProfile.VERTICAL
        )
        assert scale == pytest.approx(1920 / 900 * 0.95)

    def test_vertical_adaptive_blends_when_width_is_tighter(self):
        # width scale 0.675, height scale 2.1333
        scale = select_scale(
            make_analysis(1600, 900), 1080, 1920, NO_INSETS, LayoutProfile.VERTICAL
        )
        assert scale == pytest.approx(0.675 * 1.05)

    def test_fill_is_capped_by_overshoot(self):
        """Test that FILL cannot exceed 110% of the tight fit."""
        scale = select_scale(
            make_analysis(500, 250, ScalingStrategy.FILL),
            1000,
            1000,
            NO_INSETS,
            LayoutProfile.SQUARE,
        )
        assert scale == pytest.approx(2.2)

    def test_fit(self):
        scale = select_scale(
            make_analysis(500, 250, ScalingStrategy.FIT),
            1000,
            1000,
            NO_INSETS,
            LayoutProfile.SQUARE,
        )
        assert scale == pytest.approx(1.96)

    def test_stretch_square_averages_axes(self):
        # width scale 2, height scale 2.2: average 2.1 * 0.9 = 1.89
        scale = select_scale(
            make_analysis(500, 500, ScalingStrategy.STRETCH),
            1000,
            1100,
            NO_INSETS,
            LayoutProfile.SQUARE,
        )
        assert scale == pytest.approx(1.89)

    def test_reflow_horizontal(self):
        # width scale 4, height scale 2: min(4 * 0.85, 2)
        scale = select_scale(
            make_analysis(500, 500, ScalingStrategy.REFLOW),
            2000,
            1000,
            NO_INSETS,
            LayoutProfile.HORIZONTAL,
        )
        assert scale == pytest.approx(2.0)

    def test_floor_wins_over_overshoot_cap(self):
        """Test that tiny targets still get the minimum scale."""
        scale = select_scale(
            make_analysis(10000, 10000), 100, 100, NO_INSETS, LayoutProfile.SQUARE
        )
        assert scale == 0.3

    def test_image_content_ceiling(self):
        scale = select_scale(
            make_analysis(10, 10, ScalingStrategy.FIT, has_images=True),
            1000,
            1000,
            NO_INSETS,
            LayoutProfile.SQUARE,
        )
        assert scale == 12.0

    def test_vector_content_ceiling(self):
        scale = select_scale(
            make_analysis(10, 10, ScalingStrategy.FIT),
            1000,
            1000,
            NO_INSETS,
            LayoutProfile.SQUARE,
        )
        assert scale == 60.0

    def test_non_finite_target(self):
        """Test that a non-finite target degrades to the minimum scale."""
        scale = select_scale(
            make_analysis(500, 500), float("inf"), 1000, NO_INSETS, LayoutProfile.SQUARE
        )
        assert scale == 0.3

    def test_bounds_hold_across_inputs(self):
        """Test the scale bounds over a grid of strategies, sizes and profiles."""
        sizes = [(50, 50), (400, 900), (1600, 900), (3000, 200)]
        targets = [(480, 320), (1080, 1920), (1920, 960), (600, 600)]
        for strategy, (sw, sh), (tw, th), has_images in itertools.product(
            ScalingStrategy, sizes, targets, (False, True)
        ):
            analysis = make_analysis(sw, sh, strategy, has_images)
            for profile in LayoutProfile:
                scale = select_scale(analysis, tw, th, NO_INSETS, profile)
                ceiling = 12.0 if has_images else 60.0
                assert 0.3 <= scale <= ceiling
                tight = min(tw / sw, th / sh)
                assert scale <= max(tight * 1.1, 0.3) + 1e-9

    def test_records_scale_stage(self):
        trace = PlanTrace()
        select_scale(make_analysis(500, 500), 1000, 1000, NO_INSETS, LayoutProfile.SQUARE, trace)

        stage = trace.get_stage("scale")
        assert stage.data["strategy"] == "adaptive"
        assert stage.data["scale"] == pytest.approx(2.0)
