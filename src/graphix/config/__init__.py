"""Request/result schemas, configuration defaults and settings resolution."""

from __future__ import annotations

from graphix.config.models import (
    ConfigSource,
    DegradationKind,
    DimensionKey,
    GenerationOverrides,
    LoraConfig,
    ModelFamily,
    QualityPresetId,
    ResolutionRequest,
    ResolutionSources,
    ResolutionTier,
    ResolutionWarning,
    ResolvedConfig,
    SlotContext,
)
from graphix.config.settings import resolve_default_model

__all__ = [
    "ConfigSource",
    "DegradationKind",
    "DimensionKey",
    "GenerationOverrides",
    "LoraConfig",
    "ModelFamily",
    "QualityPresetId",
    "ResolutionRequest",
    "ResolutionSources",
    "ResolutionTier",
    "ResolutionWarning",
    "ResolvedConfig",
    "SlotContext",
    "resolve_default_model",
]
