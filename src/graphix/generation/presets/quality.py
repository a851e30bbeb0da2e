from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from graphix.config.defaults import DEFAULT_QUALITY_PRESET
from graphix.config.models import QualityPresetId
from graphix.exceptions import UnknownPresetError

if TYPE_CHECKING:
    from collections.abc import Mapping

# Steps of the "standard" preset; estimate_relative_time() is relative to it
_BASELINE_STEPS: int = 28


@dataclass(frozen=True)
class QualityPreset:
    """Named quality tier trading speed for detail.

    Parameters
    ----------
    id:
        Preset identifier.
    name:
        Human-readable name.
    steps:
        Sampling steps.
    cfg:
        Classifier-free guidance scale.
    sampler:
        Sampler name as understood by the backend.
    scheduler:
        Noise scheduler name.
    hi_res_fix:
        Whether a hi-res fix pass is requested.
    upscale:
        Whether a final upscale pass is requested.
    """

    id: QualityPresetId
    name: str
    steps: int
    cfg: float
    sampler: str
    scheduler: str
    hi_res_fix: bool = False
    upscale: bool = False


_QUALITY_PRESETS: dict[QualityPresetId, QualityPreset] = {
    # Quick iteration, layout testing
    QualityPresetId.DRAFT: QualityPreset(
        id=QualityPresetId.DRAFT,
        name="Draft (Fast Preview)",
        steps=15,
        cfg=6.0,
        sampler="euler",
        scheduler="normal",
    ),
    # Regular panel work
    QualityPresetId.STANDARD: QualityPreset(
        id=QualityPresetId.STANDARD,
        name="Standard",
        steps=28,
        cfg=7.0,
        sampler="euler_ancestral",
        scheduler="normal",
    ),
    # Final panels, important scenes
    QualityPresetId.HIGH: QualityPreset(
        id=QualityPresetId.HIGH,
        name="High Quality",
        steps=35,
        cfg=7.5,
        sampler="dpmpp_2m_sde",
        scheduler="karras",
        hi_res_fix=True,
    ),
    # Print-ready hero images
    QualityPresetId.ULTRA: QualityPreset(
        id=QualityPresetId.ULTRA,
        name="Ultra (Publication Ready)",
        steps=40,
        cfg=7.5,
        sampler="dpmpp_2m_sde",
        scheduler="karras",
        hi_res_fix=True,
        upscale=True,
    ),
}

QUALITY_PRESETS: Mapping[QualityPresetId, QualityPreset] = MappingProxyType(
    _QUALITY_PRESETS
)

_USE_CASE_PRESETS: dict[str, QualityPresetId] = {
    "preview": QualityPresetId.DRAFT,
    "iteration": QualityPresetId.STANDARD,
    "web": QualityPresetId.STANDARD,
    "social": QualityPresetId.STANDARD,
    "final": QualityPresetId.HIGH,
    "print": QualityPresetId.ULTRA,
}


def get_quality_preset(preset_id: str) -> QualityPreset:
    """Look up a quality preset by id.

    Raises
    ------
    UnknownPresetError
        If the preset id is not recognized.
    """
    try:
        return QUALITY_PRESETS[QualityPresetId(preset_id)]
    except ValueError:
        available = ", ".join(p.value for p in QUALITY_PRESETS)
        msg = f"Unknown quality preset: {preset_id!r}. Available: {available}"
        raise UnknownPresetError(msg) from None


def get_quality_preset_safe(
    preset_id: str | None,
    fallback: str = DEFAULT_QUALITY_PRESET,
) -> QualityPreset:
    """Look up a quality preset, falling back to ``fallback`` (never raises)."""
    if preset_id:
        try:
            return get_quality_preset(preset_id)
        except UnknownPresetError:
            pass
    return QUALITY_PRESETS[QualityPresetId(fallback)]


def list_quality_presets() -> list[QualityPreset]:
    """Return all quality presets, fastest first."""
    return list(QUALITY_PRESETS.values())


def get_quality_presets_by_speed() -> list[QualityPreset]:
    """Return quality presets ordered by step count (fastest first)."""
    return sorted(QUALITY_PRESETS.values(), key=lambda p: p.steps)


def estimate_relative_time(preset: QualityPreset) -> float:
    """Estimate generation time relative to the standard preset (1.0).

    Hi-res fix multiplies by 1.8, upscaling by 1.5 and DPM++ samplers by 1.1.
    """
    multiplier = preset.steps / _BASELINE_STEPS
    if preset.hi_res_fix:
        multiplier *= 1.8
    if preset.upscale:
        multiplier *= 1.5
    if "dpmpp" in preset.sampler:
        multiplier *= 1.1
    return round(multiplier, 2)


def recommend_quality_preset(use_case: str) -> QualityPresetId:
    """Recommend a quality preset for a use case (unknown → standard)."""
    return _USE_CASE_PRESETS.get(use_case.lower(), QualityPresetId.STANDARD)
