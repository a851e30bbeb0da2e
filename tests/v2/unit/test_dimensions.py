"""Tests for dimension snapping, bounds fitting and pixel budgets."""

from __future__ import annotations

import math

import pytest

from graphix.config.models import ModelFamily, ResolutionTier
from graphix.generation.dimensions import (
    SizeRecommendation,
    calculate_dimensions_for_pixel_count,
    fit_to_bounds,
    get_target_pixel_count,
    round_to_64,
    validate_dimensions,
)

# ---------------------------------------------------------------------------
# T1: Snapping
# ---------------------------------------------------------------------------


class TestRoundTo64:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(1000, 1024), (1024, 1024), (100, 128), (10, 64), (0, 64)],
    )
    def test_nearest_multiple(self, value: float, expected: int) -> None:
        assert round_to_64(value) == expected

    def test_halfway_values_round_to_even(self) -> None:
        """96 = 1.5 * 64 and 160 = 2.5 * 64 both land on 2 * 64."""
        assert round_to_64(96) == 128
        assert round_to_64(160) == 128


# ---------------------------------------------------------------------------
# T2: Bounds fitting
# ---------------------------------------------------------------------------


class TestFitToBounds:
    def test_valid_pair_unchanged(self) -> None:
        dims, changed = fit_to_bounds(832, 1216)
        assert (dims.width, dims.height) == (832, 1216)
        assert not changed

    def test_snaps_to_64(self) -> None:
        dims, changed = fit_to_bounds(800, 1200)
        assert (dims.width, dims.height) == (768, 1216)
        assert changed

    def test_scales_down_oversized(self) -> None:
        dims, changed = fit_to_bounds(4096, 4096)
        assert (dims.width, dims.height) == (1408, 1408)
        assert dims.megapixels <= 2.0
        assert changed

    def test_scales_up_undersized(self) -> None:
        dims, _ = fit_to_bounds(100, 100)
        assert (dims.width, dims.height) == (448, 448)
        assert dims.megapixels >= 0.2

    def test_scale_up_keeps_ratio(self) -> None:
        dims, _ = fit_to_bounds(256, 512)
        assert (dims.width, dims.height) == (320, 640)


# ---------------------------------------------------------------------------
# T3: Synthesis from a pixel budget
# ---------------------------------------------------------------------------


class TestCalculateDimensionsForPixelCount:
    def test_square(self) -> None:
        dims = calculate_dimensions_for_pixel_count(1.0, 1_048_576)
        assert (dims.width, dims.height) == (1024, 1024)

    def test_portrait(self) -> None:
        dims = calculate_dimensions_for_pixel_count(0.75, 1_048_576)
        assert (dims.width, dims.height) == (896, 1152)

    def test_aspect_drift_is_accepted(self) -> None:
        """2.4 requested, 2.5 delivered after snapping to 64."""
        dims = calculate_dimensions_for_pixel_count(2.4, 393_216)
        assert (dims.width, dims.height) == (960, 384)
        assert dims.aspect_ratio == pytest.approx(2.5)

    def test_extreme_ratio_stays_in_bounds(self) -> None:
        dims = calculate_dimensions_for_pixel_count(100.0, 1_048_576)
        assert (dims.width, dims.height) == (2048, 256)

    @pytest.mark.parametrize("ratio", [0.0, -0.5, math.inf, math.nan])
    def test_invalid_ratio_raises(self, ratio: float) -> None:
        with pytest.raises(ValueError, match="aspect_ratio"):
            calculate_dimensions_for_pixel_count(ratio, 1_048_576)

    def test_invalid_budget_raises(self) -> None:
        with pytest.raises(ValueError, match="target_pixels"):
            calculate_dimensions_for_pixel_count(1.0, 0)


class TestGetTargetPixelCount:
    @pytest.mark.parametrize(
        ("family", "tier", "expected"),
        [
            (ModelFamily.PONY, ResolutionTier.MEDIUM, 1_048_576),
            (ModelFamily.ILLUSTRIOUS, ResolutionTier.LOW, 524_288),
            (ModelFamily.FLUX, ResolutionTier.HIGH, 1_572_864),
            (ModelFamily.SD15, ResolutionTier.LOW, 131_072),
            (ModelFamily.SD15, ResolutionTier.HIGH, 393_216),
        ],
    )
    def test_budget_table(
        self, family: ModelFamily, tier: ResolutionTier, expected: int
    ) -> None:
        assert get_target_pixel_count(family, tier) == expected

    def test_default_tier_is_medium(self) -> None:
        assert get_target_pixel_count("sd15") == 262_144

    def test_unknown_tier_uses_medium(self) -> None:
        assert get_target_pixel_count("flux", "extreme") == 1_048_576

    def test_low_sd15_budget_lifted_into_bounds(self) -> None:
        dims = calculate_dimensions_for_pixel_count(
            1.0, get_target_pixel_count("sd15", "low")
        )
        assert (dims.width, dims.height) == (512, 448)


# ---------------------------------------------------------------------------
# T4: Family limits
# ---------------------------------------------------------------------------


class TestValidateDimensions:
    def test_sdxl_bucket_valid(self) -> None:
        check = validate_dimensions(1024, 1024, "sdxl")
        assert check.valid
        assert check.reason is None

    def test_too_small_for_sdxl(self) -> None:
        check = validate_dimensions(384, 384, "pony")
        assert not check.valid
        assert "too small" in (check.reason or "")

    def test_too_large_for_sd15(self) -> None:
        check = validate_dimensions(1280, 768, "sd15")
        assert not check.valid
        assert "too large" in (check.reason or "")

    def test_pixel_limit_for_sd15(self) -> None:
        check = validate_dimensions(1024, 1024, "sd15")
        assert not check.valid
        assert "Total pixels" in (check.reason or "")

    def test_small_sd15_valid(self) -> None:
        assert validate_dimensions(256, 256, "sd15").valid


class TestSizeRecommendation:
    def test_to_dict(self) -> None:
        rec = SizeRecommendation(832, 1216, "portrait_2x3")
        assert rec.to_dict() == {
            "width": 832,
            "height": 1216,
            "aspect_ratio": 0.6842,
            "preset_id": "portrait_2x3",
        }

    def test_to_dict_omits_missing_preset(self) -> None:
        assert "preset_id" not in SizeRecommendation(960, 384).to_dict()
