"""Presets: immutable size, quality and model-family tables."""

from __future__ import annotations

from graphix.generation.presets.models import (
    MODEL_PRESETS,
    ModelPreset,
    detect_model_family,
    get_model_preset,
    get_recommended_cfg_range,
    list_model_families,
    model_family_to_dimension_key,
    supports_negative_prompt,
)
from graphix.generation.presets.quality import (
    QUALITY_PRESETS,
    QualityPreset,
    estimate_relative_time,
    get_quality_preset,
    get_quality_preset_safe,
    get_quality_presets_by_speed,
    list_quality_presets,
    recommend_quality_preset,
)
from graphix.generation.presets.sizes import (
    SIZE_PRESETS,
    Dimensions,
    SizePreset,
    find_closest_preset,
    find_presets_for_use_case,
    get_presets_by_category,
    get_size_preset,
    list_size_presets,
)

__all__ = [
    "Dimensions",
    "MODEL_PRESETS",
    "ModelPreset",
    "QUALITY_PRESETS",
    "QualityPreset",
    "SIZE_PRESETS",
    "SizePreset",
    "detect_model_family",
    "estimate_relative_time",
    "find_closest_preset",
    "find_presets_for_use_case",
    "get_model_preset",
    "get_presets_by_category",
    "get_quality_preset",
    "get_quality_preset_safe",
    "get_quality_presets_by_speed",
    "get_recommended_cfg_range",
    "get_size_preset",
    "list_model_families",
    "list_quality_presets",
    "list_size_presets",
    "model_family_to_dimension_key",
    "recommend_quality_preset",
    "supports_negative_prompt",
]
