"""Default resolution strategy: fixed precedence, no slot awareness.

Dimensions come from an explicit override pair, then a named size preset,
then the built-in 768x1024. A slot in the request is ignored.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from graphix.config.models import ModelFamily, ResolutionRequest, ResolutionTier
from graphix.generation.presets.models import detect_model_family
from graphix.generation.strategies.base import (
    StrategyName,
    build_resolved_config,
    default_size,
    explicit_size,
    optimal_size,
    preset_size,
    resolve_model,
)

if TYPE_CHECKING:
    from graphix.config.models import ResolutionWarning, ResolvedConfig
    from graphix.generation.dimensions import SizeRecommendation
    from graphix.generation.strategies.base import SizeChoice
    from graphix.utils.protocols import ModelCatalog

logger = logging.getLogger(__name__)


class DefaultStrategy:
    """Predictable defaults without layout-aware sizing.

    Parameters
    ----------
    catalog:
        Optional checkpoint catalog consulted before filename heuristics.
    default_model:
        Explicit default checkpoint; otherwise ``GRAPHIX_DEFAULT_MODEL`` or
        the built-in default is read on every ``resolve`` call.
    """

    def __init__(
        self,
        catalog: ModelCatalog | None = None,
        default_model: str | None = None,
    ) -> None:
        self._catalog = catalog
        self._default_model = default_model

    @property
    def name(self) -> StrategyName:
        return StrategyName.DEFAULT

    def resolve(self, request: ResolutionRequest | None = None) -> ResolvedConfig:
        request = request or ResolutionRequest()
        warnings: list[ResolutionWarning] = []

        model, model_source = resolve_model(request.overrides, self._default_model)
        family = detect_model_family(model, self._catalog)
        size = self._resolve_size(request, family, warnings)

        config = build_resolved_config(
            request,
            model=model,
            model_source=model_source,
            model_family=family,
            size=size,
            warnings=warnings,
        )
        logger.debug(
            "Resolved %dx%d, %d steps for %s (%s strategy)",
            config.width,
            config.height,
            config.steps,
            model,
            self.name,
        )
        return config

    def _resolve_size(
        self,
        request: ResolutionRequest,
        family: ModelFamily,
        warnings: list[ResolutionWarning],
    ) -> SizeChoice:
        return (
            explicit_size(request.overrides, warnings)
            or preset_size(request.size_preset, family, warnings)
            or default_size()
        )

    def calculate_optimal_size(
        self,
        aspect_ratio: float,
        model_family: ModelFamily | str,
        resolution_tier: ResolutionTier | str = ResolutionTier.MEDIUM,
    ) -> SizeRecommendation:
        return optimal_size(aspect_ratio, model_family, resolution_tier)


_default_strategy: DefaultStrategy | None = None


def get_default_strategy() -> DefaultStrategy:
    """Return the process-wide default strategy, creating it on first use."""
    global _default_strategy  # noqa: PLW0603
    if _default_strategy is None:
        _default_strategy = DefaultStrategy()
    return _default_strategy


def reset_default_strategy() -> None:
    global _default_strategy  # noqa: PLW0603
    _default_strategy = None
