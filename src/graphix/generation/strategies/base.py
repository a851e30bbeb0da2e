"""Shared resolution steps used by every strategy.

Both strategies resolve sampling parameters, the model and override
sanitation identically; they differ only in how width and height are chosen.
The common steps live here as plain functions so each strategy composes them
rather than inheriting them.

Precedence for the non-geometric fields:

    explicit override > quality preset > model-family preset

Every replaced request value is appended to the ``warnings`` list passed
through the helpers and logged at WARNING.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from graphix.config.defaults import (
    DEFAULT_HEIGHT,
    DEFAULT_QUALITY_PRESET,
    DEFAULT_WIDTH,
    MAX_CFG,
    MAX_STEPS,
    MIN_STEPS,
    OPTIMAL_SIZE_TOLERANCE,
)
from graphix.config.models import (
    ConfigSource,
    DegradationKind,
    ModelFamily,
    ResolutionSources,
    ResolutionTier,
    ResolutionWarning,
    ResolvedConfig,
)
from graphix.config.settings import resolve_default_model
from graphix.exceptions import InvalidOverrideError, UnknownPresetError
from graphix.generation.dimensions import (
    SizeRecommendation,
    calculate_dimensions_for_pixel_count,
    fit_to_bounds,
    get_target_pixel_count,
)
from graphix.generation.presets.models import (
    get_model_preset,
    model_family_to_dimension_key,
)
from graphix.generation.presets.quality import (
    get_quality_preset,
    get_quality_preset_safe,
)
from graphix.generation.presets.sizes import find_closest_preset, get_size_preset

if TYPE_CHECKING:
    from graphix.config.models import GenerationOverrides, ResolutionRequest
    from graphix.generation.presets.quality import QualityPreset

logger = logging.getLogger(__name__)


class StrategyName(StrEnum):
    """The closed set of resolution strategies."""

    DEFAULT = "default"
    SLOT_AWARE = "slot-aware"


@runtime_checkable
class ResolutionStrategy(Protocol):
    """Protocol every resolution strategy satisfies."""

    @property
    def name(self) -> StrategyName: ...

    def resolve(self, request: ResolutionRequest) -> ResolvedConfig:
        """Resolve a request into a complete configuration (never raises)."""
        ...

    def calculate_optimal_size(
        self,
        aspect_ratio: float,
        model_family: ModelFamily | str,
        resolution_tier: ResolutionTier | str = ResolutionTier.MEDIUM,
    ) -> SizeRecommendation:
        """Recommend dimensions for an aspect ratio and model family."""
        ...


@dataclass(frozen=True)
class SizeChoice:
    """Resolved width/height together with the tier that supplied them."""

    width: int
    height: int
    source: ConfigSource
    preset_id: str | None = None


def record_degradation(
    warnings: list[ResolutionWarning],
    field: str,
    kind: DegradationKind,
    message: str,
) -> None:
    """Append a warning for a replaced request value and log it."""
    logger.warning("Degraded %s (%s): %s", field, kind.value, message)
    warnings.append(ResolutionWarning(field=field, kind=kind, message=message))


def is_valid_aspect_ratio(aspect_ratio: float | None) -> bool:
    return (
        aspect_ratio is not None
        and math.isfinite(aspect_ratio)
        and aspect_ratio > 0
    )


# ---------------------------------------------------------------------------
# Override sanitation
# ---------------------------------------------------------------------------


def check_steps(steps: int) -> int:
    """Return ``steps`` clamped to ``MAX_STEPS``.

    Raises
    ------
    InvalidOverrideError
        If ``steps`` is below ``MIN_STEPS``.
    """
    if steps < MIN_STEPS:
        msg = f"steps must be >= {MIN_STEPS}, got {steps}"
        raise InvalidOverrideError(msg)
    return min(steps, MAX_STEPS)


def check_cfg(cfg: float) -> float:
    """Return ``cfg`` clamped to ``MAX_CFG``.

    Raises
    ------
    InvalidOverrideError
        If ``cfg`` is not a positive finite number.
    """
    if not math.isfinite(cfg) or cfg <= 0:
        msg = f"cfg must be a positive finite number, got {cfg}"
        raise InvalidOverrideError(msg)
    return min(cfg, MAX_CFG)


def check_dimensions(width: int | None, height: int | None) -> tuple[int, int]:
    """Validate that an explicit size is a complete, positive pair.

    Raises
    ------
    InvalidOverrideError
        If only one axis is given or either axis is not positive.
    """
    if width is None or height is None:
        msg = f"width and height must be given together (got {width}x{height})"
        raise InvalidOverrideError(msg)
    if width <= 0 or height <= 0:
        msg = f"width and height must be positive (got {width}x{height})"
        raise InvalidOverrideError(msg)
    return width, height


# ---------------------------------------------------------------------------
# Dimension tiers
# ---------------------------------------------------------------------------


def default_size() -> SizeChoice:
    return SizeChoice(DEFAULT_WIDTH, DEFAULT_HEIGHT, ConfigSource.GLOBAL)


def explicit_size(
    overrides: GenerationOverrides,
    warnings: list[ResolutionWarning],
) -> SizeChoice | None:
    """Explicit width/height pair, snapped and clamped into bounds."""
    if overrides.width is None and overrides.height is None:
        return None
    try:
        width, height = check_dimensions(overrides.width, overrides.height)
    except InvalidOverrideError as exc:
        record_degradation(warnings, "dimensions", DegradationKind.INVALID_OVERRIDE, str(exc))
        return None

    dims, changed = fit_to_bounds(width, height)
    if changed:
        record_degradation(
            warnings,
            "dimensions",
            DegradationKind.DIMENSION_OVERFLOW,
            f"{width}x{height} adjusted to {dims.width}x{dims.height}",
        )
    return SizeChoice(dims.width, dims.height, ConfigSource.EXPLICIT)


def preset_size(
    size_preset: str | None,
    model_family: ModelFamily,
    warnings: list[ResolutionWarning],
) -> SizeChoice | None:
    """Dimensions of a named size preset for the family's dimension class."""
    if not size_preset:
        return None
    preset = get_size_preset(size_preset)
    if preset is None:
        record_degradation(
            warnings,
            "size_preset",
            DegradationKind.UNKNOWN_PRESET,
            f"Unknown size preset: {size_preset!r}",
        )
        return None
    dims = preset.dimensions_for(model_family_to_dimension_key(model_family))
    return SizeChoice(dims.width, dims.height, ConfigSource.PRESET, preset.id)


def nearest_preset_size(
    aspect_ratio: float,
    model_family: ModelFamily | str,
    tolerance: float = OPTIMAL_SIZE_TOLERANCE,
) -> SizeRecommendation | None:
    preset = find_closest_preset(aspect_ratio, tolerance)
    if preset is None:
        return None
    dims = preset.dimensions_for(model_family_to_dimension_key(model_family))
    return SizeRecommendation(dims.width, dims.height, preset.id)


def synthesized_size(
    aspect_ratio: float,
    model_family: ModelFamily | str,
    resolution_tier: ResolutionTier | str = ResolutionTier.MEDIUM,
) -> SizeRecommendation:
    target = get_target_pixel_count(model_family, resolution_tier)
    dims = calculate_dimensions_for_pixel_count(aspect_ratio, target)
    return SizeRecommendation(dims.width, dims.height)


def optimal_size(
    aspect_ratio: float,
    model_family: ModelFamily | str,
    resolution_tier: ResolutionTier | str = ResolutionTier.MEDIUM,
) -> SizeRecommendation:
    """Nearest preset within tolerance, otherwise a synthesized size.

    A non-positive or non-finite aspect ratio yields the default size.
    """
    if not is_valid_aspect_ratio(aspect_ratio):
        logger.warning("Invalid aspect ratio %r, using default size", aspect_ratio)
        return SizeRecommendation(DEFAULT_WIDTH, DEFAULT_HEIGHT)
    nearest = nearest_preset_size(aspect_ratio, model_family)
    if nearest is not None:
        return nearest
    return synthesized_size(aspect_ratio, model_family, resolution_tier)


# ---------------------------------------------------------------------------
# Model and sampling parameters
# ---------------------------------------------------------------------------


def resolve_model(
    overrides: GenerationOverrides,
    default_model: str | None = None,
) -> tuple[str, ConfigSource]:
    """Explicit model override, otherwise the configured default model."""
    if overrides.model:
        return overrides.model, ConfigSource.EXPLICIT
    return resolve_default_model(default_model=default_model), ConfigSource.GLOBAL


def lookup_quality_preset(
    preset_id: str | None,
    warnings: list[ResolutionWarning],
) -> QualityPreset | None:
    """Requested quality preset; unknown ids degrade to the default preset."""
    if not preset_id:
        return None
    try:
        return get_quality_preset(preset_id)
    except UnknownPresetError as exc:
        record_degradation(
            warnings,
            "quality_preset",
            DegradationKind.UNKNOWN_PRESET,
            f"{exc}; using {DEFAULT_QUALITY_PRESET}",
        )
        return get_quality_preset_safe(preset_id)


def build_resolved_config(
    request: ResolutionRequest,
    *,
    model: str,
    model_source: ConfigSource,
    model_family: ModelFamily,
    size: SizeChoice,
    warnings: list[ResolutionWarning],
) -> ResolvedConfig:
    """Resolve the sampling chain and assemble the final configuration."""
    overrides = request.overrides
    quality = lookup_quality_preset(request.quality_preset, warnings)
    family_preset = get_model_preset(model_family)
    sources = ResolutionSources(
        width=size.source, height=size.source, model=model_source
    )

    steps: int | None = None
    if overrides.steps is not None:
        try:
            steps = check_steps(overrides.steps)
        except InvalidOverrideError as exc:
            record_degradation(warnings, "steps", DegradationKind.INVALID_OVERRIDE, str(exc))
        else:
            sources.steps = ConfigSource.EXPLICIT
            if steps != overrides.steps:
                record_degradation(
                    warnings,
                    "steps",
                    DegradationKind.INVALID_OVERRIDE,
                    f"steps {overrides.steps} clamped to {steps}",
                )
    if steps is None:
        if quality is not None:
            steps, sources.steps = quality.steps, ConfigSource.PRESET
        else:
            steps = family_preset.default_steps

    cfg: float | None = None
    if overrides.cfg is not None:
        try:
            cfg = check_cfg(overrides.cfg)
        except InvalidOverrideError as exc:
            record_degradation(warnings, "cfg", DegradationKind.INVALID_OVERRIDE, str(exc))
        else:
            sources.cfg = ConfigSource.EXPLICIT
            if cfg != overrides.cfg:
                record_degradation(
                    warnings,
                    "cfg",
                    DegradationKind.INVALID_OVERRIDE,
                    f"cfg {overrides.cfg} clamped to {cfg}",
                )
    if cfg is None:
        if quality is not None:
            cfg, sources.cfg = quality.cfg, ConfigSource.PRESET
        else:
            cfg = family_preset.cfg

    if overrides.sampler:
        sampler, sources.sampler = overrides.sampler, ConfigSource.EXPLICIT
    elif quality is not None:
        sampler, sources.sampler = quality.sampler, ConfigSource.PRESET
    else:
        sampler = family_preset.sampler

    if overrides.scheduler:
        scheduler, sources.scheduler = overrides.scheduler, ConfigSource.EXPLICIT
    elif quality is not None:
        scheduler, sources.scheduler = quality.scheduler, ConfigSource.PRESET
    else:
        scheduler = family_preset.scheduler

    return ResolvedConfig(
        width=size.width,
        height=size.height,
        aspect_ratio=size.width / size.height,
        size_preset_used=size.preset_id,
        steps=steps,
        cfg=cfg,
        sampler=sampler,
        scheduler=scheduler,
        model=model,
        model_family=model_family,
        negative_prompt=overrides.negative_prompt or "",
        loras=[lora.model_copy() for lora in overrides.loras or []],
        quality_preset_used=quality.id if quality is not None else None,
        hi_res_fix=quality.hi_res_fix if quality is not None else False,
        upscale=quality.upscale if quality is not None else False,
        sources=sources,
        warnings=warnings,
    )
