"""Tests for quality presets (steps/cfg/sampler tiers)."""

from __future__ import annotations

import pytest

from graphix.config.models import QualityPresetId, ResolutionRequest
from graphix.exceptions import UnknownPresetError
from graphix.generation.engine import get_resolution_engine
from graphix.generation.presets.quality import (
    estimate_relative_time,
    get_quality_preset,
    get_quality_preset_safe,
    get_quality_presets_by_speed,
    list_quality_presets,
    recommend_quality_preset,
)


class TestQualityPresetTable:
    def test_strictly_ordered_by_steps(self) -> None:
        steps = [p.steps for p in list_quality_presets()]
        assert steps == sorted(steps)
        assert len(set(steps)) == len(steps)

    def test_by_speed_matches_registration_order(self) -> None:
        assert get_quality_presets_by_speed() == list_quality_presets()

    def test_draft_and_ultra_resolve_differently(self) -> None:
        engine = get_resolution_engine()
        draft = engine.resolve(ResolutionRequest(quality_preset="draft"))
        ultra = engine.resolve(ResolutionRequest(quality_preset="ultra"))
        assert draft != ultra
        assert ultra.steps > draft.steps
        assert ultra.hi_res_fix and ultra.upscale
        assert not draft.hi_res_fix
        assert (draft.quality_preset_used, ultra.quality_preset_used) == (
            QualityPresetId.DRAFT,
            QualityPresetId.ULTRA,
        )

    def test_standard_values(self) -> None:
        standard = get_quality_preset("standard")
        assert (standard.steps, standard.cfg) == (28, 7.0)
        assert (standard.sampler, standard.scheduler) == ("euler_ancestral", "normal")


class TestQualityLookup:
    def test_strict_lookup_raises(self) -> None:
        with pytest.raises(UnknownPresetError, match="Available: draft"):
            get_quality_preset("cinematic")

    @pytest.mark.parametrize("preset_id", [None, "", "nonexistent"])
    def test_safe_lookup_falls_back_to_standard(self, preset_id: str | None) -> None:
        assert get_quality_preset_safe(preset_id).id == QualityPresetId.STANDARD

    def test_safe_lookup_custom_fallback(self) -> None:
        assert get_quality_preset_safe("bogus", fallback="draft").id == "draft"

    def test_safe_lookup_known(self) -> None:
        assert get_quality_preset_safe("high").id == QualityPresetId.HIGH


class TestQualityHelpers:
    def test_standard_is_baseline(self) -> None:
        assert estimate_relative_time(get_quality_preset("standard")) == 1.0

    def test_draft_is_faster(self) -> None:
        assert estimate_relative_time(get_quality_preset("draft")) == 0.54

    def test_ultra_includes_all_multipliers(self) -> None:
        # 40/28 * 1.8 (hi-res) * 1.5 (upscale) * 1.1 (dpmpp)
        assert estimate_relative_time(get_quality_preset("ultra")) == 4.24

    @pytest.mark.parametrize(
        ("use_case", "expected"),
        [
            ("preview", QualityPresetId.DRAFT),
            ("iteration", QualityPresetId.STANDARD),
            ("web", QualityPresetId.STANDARD),
            ("social", QualityPresetId.STANDARD),
            ("final", QualityPresetId.HIGH),
            ("Print", QualityPresetId.ULTRA),
            ("something-else", QualityPresetId.STANDARD),
        ],
    )
    def test_recommendation(self, use_case: str, expected: QualityPresetId) -> None:
        assert recommend_quality_preset(use_case) == expected
