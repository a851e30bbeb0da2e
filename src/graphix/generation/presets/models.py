"""Per-family checkpoint defaults and filename-based family inference."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from graphix.config.models import DimensionKey, ModelFamily

if TYPE_CHECKING:
    from collections.abc import Mapping

    from graphix.utils.protocols import ModelCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelPreset:
    """Known-good sampling defaults for a checkpoint family.

    Parameters
    ----------
    family:
        Checkpoint family.
    default_steps:
        Steps used when neither an override nor a quality preset applies.
    min_steps:
        Lowest step count that still produces usable images.
    cfg:
        Default guidance scale.
    sampler:
        Recommended sampler.
    scheduler:
        Recommended scheduler.
    supports_negative:
        Whether negative prompts are effective for this family.
    default_model:
        Representative checkpoint filename, if one is known.
    """

    family: ModelFamily
    default_steps: int
    min_steps: int
    cfg: float
    sampler: str
    scheduler: str
    supports_negative: bool = True
    default_model: str | None = None


_MODEL_PRESETS: dict[ModelFamily, ModelPreset] = {
    # SDXL-based, anime/illustration, danbooru tags
    ModelFamily.ILLUSTRIOUS: ModelPreset(
        family=ModelFamily.ILLUSTRIOUS,
        default_steps=28,
        min_steps=20,
        cfg=7.0,
        sampler="euler_ancestral",
        scheduler="normal",
        default_model="illustriousXL_v01.safetensors",
    ),
    # SDXL-based, score tags
    ModelFamily.PONY: ModelPreset(
        family=ModelFamily.PONY,
        default_steps=28,
        min_steps=20,
        cfg=7.0,
        sampler="euler_ancestral",
        scheduler="normal",
        default_model="ponyDiffusionV6XL.safetensors",
    ),
    ModelFamily.SDXL: ModelPreset(
        family=ModelFamily.SDXL,
        default_steps=30,
        min_steps=25,
        cfg=7.0,
        sampler="dpmpp_2m_sde",
        scheduler="karras",
        default_model="sdxl_base_1.0.safetensors",
    ),
    # Transformer-based; low CFG, negative prompts mostly ignored
    ModelFamily.FLUX: ModelPreset(
        family=ModelFamily.FLUX,
        default_steps=28,
        min_steps=20,
        cfg=3.5,
        sampler="euler",
        scheduler="simple",
        supports_negative=False,
    ),
    ModelFamily.SD15: ModelPreset(
        family=ModelFamily.SD15,
        default_steps=30,
        min_steps=20,
        cfg=7.5,
        sampler="euler_ancestral",
        scheduler="normal",
    ),
    # SDXL-based photorealism
    ModelFamily.REALISTIC: ModelPreset(
        family=ModelFamily.REALISTIC,
        default_steps=35,
        min_steps=25,
        cfg=7.5,
        sampler="dpmpp_2m_sde",
        scheduler="karras",
    ),
}

MODEL_PRESETS: Mapping[ModelFamily, ModelPreset] = MappingProxyType(_MODEL_PRESETS)

# Checked in order; the first family with a matching substring wins
_FAMILY_MARKERS: tuple[tuple[ModelFamily, tuple[str, ...]], ...] = (
    (ModelFamily.ILLUSTRIOUS, ("illustrious", "noob", "wai-")),
    (ModelFamily.PONY, ("pony", "yiff", "furry", "nova")),
    (ModelFamily.FLUX, ("flux",)),
    (ModelFamily.REALISTIC, ("realistic", "photon", "real", "photo")),
    (ModelFamily.SDXL, ("sdxl", "xl")),
)

_DIMENSION_KEYS: dict[ModelFamily, DimensionKey] = {
    ModelFamily.ILLUSTRIOUS: DimensionKey.SDXL,
    ModelFamily.PONY: DimensionKey.SDXL,
    ModelFamily.SDXL: DimensionKey.SDXL,
    ModelFamily.REALISTIC: DimensionKey.SDXL,
    ModelFamily.FLUX: DimensionKey.FLUX,
    ModelFamily.SD15: DimensionKey.SD15,
}

# family -> (min, max) recommended CFG; default is the family preset's cfg
_CFG_RANGES: dict[ModelFamily, tuple[float, float]] = {
    ModelFamily.FLUX: (1.0, 5.0),
    ModelFamily.REALISTIC: (5.0, 10.0),
}
_DEFAULT_CFG_RANGE: tuple[float, float] = (4.0, 12.0)


def _coerce_family(family: ModelFamily | str) -> ModelFamily:
    try:
        return ModelFamily(family)
    except ValueError:
        logger.debug("Unknown model family %r, using sd15", family)
        return ModelFamily.SD15


def get_model_preset(family: ModelFamily | str) -> ModelPreset:
    """Return the preset for a family; unknown families get the sd15 preset."""
    return MODEL_PRESETS[_coerce_family(family)]


def list_model_families() -> list[ModelFamily]:
    """Return all families with a registered preset."""
    return list(MODEL_PRESETS)


def detect_model_family(
    model_name: str | None,
    catalog: ModelCatalog | None = None,
) -> ModelFamily:
    """Infer the checkpoint family from its filename.

    A catalog entry, when one is supplied and knows the filename, wins over
    the substring heuristics. Heuristics are case-insensitive and ordered:
    illustrious, pony, flux, realistic, sdxl. Anything else is sd15.
    """
    if not model_name:
        return ModelFamily.SD15

    if catalog is not None:
        known = catalog.family_for(model_name)
        if known is not None:
            return _coerce_family(known)

    lower = model_name.lower()
    for family, markers in _FAMILY_MARKERS:
        if any(marker in lower for marker in markers):
            return family
    return ModelFamily.SD15


def model_family_to_dimension_key(family: ModelFamily | str) -> DimensionKey:
    """Map a family to the dimension class used by size presets."""
    return _DIMENSION_KEYS[_coerce_family(family)]


def supports_negative_prompt(family: ModelFamily | str) -> bool:
    return get_model_preset(family).supports_negative


def get_recommended_cfg_range(family: ModelFamily | str) -> dict[str, float]:
    """Return ``{"min", "max", "default"}`` CFG guidance for a family."""
    resolved = _coerce_family(family)
    low, high = _CFG_RANGES.get(resolved, _DEFAULT_CFG_RANGE)
    return {"min": low, "max": high, "default": MODEL_PRESETS[resolved].cfg}
