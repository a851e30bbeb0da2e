"""Dimension math: 64-multiple snapping, bounds fitting and pixel budgets.

Synthesized dimensions keep the requested aspect ratio only approximately:
both axes are snapped to multiples of 64 and clamped, and the returned
``aspect_ratio`` is recomputed from the snapped values. A small drift from the
requested ratio is expected and accepted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from graphix.config.defaults import (
    DIMENSION_MULTIPLE,
    MAX_DIMENSION,
    MAX_MEGAPIXELS,
    MIN_DIMENSION,
    MIN_MEGAPIXELS,
)
from graphix.config.models import DimensionKey, ModelFamily, ResolutionTier
from graphix.generation.presets.models import model_family_to_dimension_key
from graphix.generation.presets.sizes import Dimensions

_MIN_PIXELS: int = int(MIN_MEGAPIXELS * 1_000_000)
_MAX_PIXELS: int = int(MAX_MEGAPIXELS * 1_000_000)

# Pixel budgets per dimension class and tier: base x 0.5 / 1.0 / 1.5.
# Low budgets below MIN_MEGAPIXELS are lifted by fit_to_bounds.
_PIXEL_BUDGETS: dict[DimensionKey, dict[ResolutionTier, int]] = {
    DimensionKey.SDXL: {
        ResolutionTier.LOW: 524_288,
        ResolutionTier.MEDIUM: 1_048_576,
        ResolutionTier.HIGH: 1_572_864,
    },
    DimensionKey.FLUX: {
        ResolutionTier.LOW: 524_288,
        ResolutionTier.MEDIUM: 1_048_576,
        ResolutionTier.HIGH: 1_572_864,
    },
    DimensionKey.SD15: {
        ResolutionTier.LOW: 131_072,
        ResolutionTier.MEDIUM: 262_144,
        ResolutionTier.HIGH: 393_216,
    },
}

# dimension class -> (min axis, max axis, max pixels) suited to the family
_FAMILY_LIMITS: dict[DimensionKey, tuple[int, int, int]] = {
    DimensionKey.SDXL: (512, 2048, 4_194_304),
    DimensionKey.FLUX: (512, 2048, 4_194_304),
    DimensionKey.SD15: (256, 1024, 786_432),
}


@dataclass(frozen=True)
class SizeRecommendation:
    """Recommended generation size, optionally backed by a named preset."""

    width: int
    height: int
    preset_id: str | None = None

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "width": self.width,
            "height": self.height,
            "aspect_ratio": round(self.aspect_ratio, 4),
        }
        if self.preset_id is not None:
            d["preset_id"] = self.preset_id
        return d


@dataclass(frozen=True)
class DimensionCheck:
    """Result of checking dimensions against a family's limits."""

    valid: bool
    reason: str | None = None


def round_to_64(value: float) -> int:
    """Round to the nearest multiple of 64 (minimum 64).

    Exact halfway values follow Python's ``round()`` (ties to even).
    """
    return max(DIMENSION_MULTIPLE, round(value / DIMENSION_MULTIPLE) * DIMENSION_MULTIPLE)


def _ceil_to_64(value: float) -> int:
    return max(DIMENSION_MULTIPLE, math.ceil(value / DIMENSION_MULTIPLE) * DIMENSION_MULTIPLE)


def _floor_to_64(value: float) -> int:
    return max(DIMENSION_MULTIPLE, math.floor(value / DIMENSION_MULTIPLE) * DIMENSION_MULTIPLE)


def _clamp(value: int) -> int:
    return min(max(value, MIN_DIMENSION), MAX_DIMENSION)


def fit_to_bounds(width: float, height: float) -> tuple[Dimensions, bool]:
    """Snap and clamp a width/height pair into the hard generation bounds.

    1. Snap both axes to the nearest multiple of 64.
    2. Clamp each axis to ``[MIN_DIMENSION, MAX_DIMENSION]``.
    3. If the area is below ``MIN_MEGAPIXELS``, scale both axes up (rounding
       up to 64); if above ``MAX_MEGAPIXELS``, scale down (rounding down).

    Parameters
    ----------
    width, height:
        Positive pixel dimensions.

    Returns
    -------
    tuple[Dimensions, bool]
        The fitted dimensions and whether they differ from the input.
    """
    w = _clamp(round_to_64(width))
    h = _clamp(round_to_64(height))

    pixels = w * h
    if pixels < _MIN_PIXELS:
        scale = math.sqrt(_MIN_PIXELS / pixels)
        w = _clamp(_ceil_to_64(w * scale))
        h = _clamp(_ceil_to_64(h * scale))
    elif pixels > _MAX_PIXELS:
        scale = math.sqrt(_MAX_PIXELS / pixels)
        w = _clamp(_floor_to_64(w * scale))
        h = _clamp(_floor_to_64(h * scale))

    return Dimensions(w, h), (w, h) != (width, height)


def calculate_dimensions_for_pixel_count(
    aspect_ratio: float,
    target_pixels: int,
) -> Dimensions:
    """Synthesize dimensions for an aspect ratio and a total pixel budget.

    ``width = round_to_64(sqrt(target_pixels * aspect_ratio))`` and
    ``height = round_to_64(target_pixels / width)``, then fitted into bounds.

    Raises
    ------
    ValueError
        If ``aspect_ratio`` or ``target_pixels`` is not a positive finite number.
    """
    if not math.isfinite(aspect_ratio) or aspect_ratio <= 0:
        msg = f"aspect_ratio must be a positive finite number, got {aspect_ratio!r}"
        raise ValueError(msg)
    if target_pixels <= 0:
        msg = f"target_pixels must be positive, got {target_pixels!r}"
        raise ValueError(msg)

    width = round_to_64(math.sqrt(target_pixels * aspect_ratio))
    height = round_to_64(target_pixels / width)
    dims, _ = fit_to_bounds(width, height)
    return dims


def get_target_pixel_count(
    model_family: ModelFamily | str,
    resolution_tier: ResolutionTier | str = ResolutionTier.MEDIUM,
) -> int:
    """Return the pixel budget for a family and tier (unknown tier → medium)."""
    try:
        tier = ResolutionTier(resolution_tier)
    except ValueError:
        tier = ResolutionTier.MEDIUM
    return _PIXEL_BUDGETS[model_family_to_dimension_key(model_family)][tier]


def validate_dimensions(
    width: int,
    height: int,
    model_family: ModelFamily | str,
) -> DimensionCheck:
    """Check dimensions against the limits that suit a model family."""
    min_axis, max_axis, max_pixels = _FAMILY_LIMITS[
        model_family_to_dimension_key(model_family)
    ]
    if width < min_axis or height < min_axis:
        return DimensionCheck(
            False, f"Dimensions too small for {model_family} (min: {min_axis}px)"
        )
    if width > max_axis or height > max_axis:
        return DimensionCheck(
            False, f"Dimensions too large for {model_family} (max: {max_axis}px)"
        )
    if width * height > max_pixels:
        return DimensionCheck(False, f"Total pixels exceed maximum for {model_family}")
    return DimensionCheck(True)
