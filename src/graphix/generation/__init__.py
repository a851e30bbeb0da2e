"""Generation parameter resolution: presets, dimension math, strategies, engine."""

from __future__ import annotations

from graphix.generation.catalog import StaticModelCatalog
from graphix.generation.dimensions import (
    DimensionCheck,
    SizeRecommendation,
    calculate_dimensions_for_pixel_count,
    fit_to_bounds,
    get_target_pixel_count,
    round_to_64,
    validate_dimensions,
)
from graphix.generation.engine import (
    ResolutionEngine,
    create_resolution_engine,
    get_resolution_engine,
    reset_resolution_engine,
)
from graphix.generation.strategies import (
    DefaultStrategy,
    ResolutionStrategy,
    SlotAwareStrategy,
    StrategyName,
    TemplateSizePlan,
)

__all__ = [
    "DefaultStrategy",
    "DimensionCheck",
    "ResolutionEngine",
    "ResolutionStrategy",
    "SizeRecommendation",
    "SlotAwareStrategy",
    "StaticModelCatalog",
    "StrategyName",
    "TemplateSizePlan",
    "calculate_dimensions_for_pixel_count",
    "create_resolution_engine",
    "fit_to_bounds",
    "get_resolution_engine",
    "get_target_pixel_count",
    "reset_resolution_engine",
    "round_to_64",
    "validate_dimensions",
]
