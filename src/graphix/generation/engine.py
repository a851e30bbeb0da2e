"""Resolution engine: the entry point for generation parameter resolution.

The engine owns the active strategy and exposes slot sizing helpers that
always use slot-aware math, whichever strategy is active.

Usage::

    from graphix.generation.engine import get_resolution_engine
    from graphix.config.models import ResolutionRequest, SlotContext

    engine = get_resolution_engine()
    config = engine.resolve(
        ResolutionRequest(
            quality_preset="high",
            slot=SlotContext(template_id="six-grid", slot_id="row1-left"),
        )
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from graphix.config.defaults import (
    DEFAULT_HEIGHT,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SLOT_MODEL_FAMILY,
    DEFAULT_WIDTH,
)
from graphix.config.models import (
    GenerationOverrides,
    ModelFamily,
    ResolutionRequest,
    ResolutionTier,
    SlotContext,
)
from graphix.exceptions import UnknownSlotError
from graphix.generation.dimensions import SizeRecommendation
from graphix.generation.presets.models import detect_model_family
from graphix.generation.strategies import (
    DefaultStrategy,
    SlotAwareStrategy,
    StrategyName,
    TemplateSizePlan,
    get_default_strategy,
    get_slot_aware_strategy,
    reset_strategies,
)

if TYPE_CHECKING:
    from graphix.config.models import ResolvedConfig
    from graphix.generation.strategies import ResolutionStrategy
    from graphix.utils.protocols import LayoutProvider, ModelCatalog

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """Resolves requests through a swappable strategy.

    Parameters
    ----------
    strategy:
        Initial strategy: an instance, or a ``StrategyName``. Defaults to
        slot-aware.
    layouts:
        Layout provider for slot geometry (built-in templates if omitted).
    catalog:
        Checkpoint catalog consulted before filename heuristics.
    default_model:
        Default checkpoint when a request names none.

    Without ``layouts``, ``catalog`` or ``default_model`` the engine shares the
    process-wide strategy singletons; with any of them it builds its own.
    """

    def __init__(
        self,
        strategy: ResolutionStrategy | StrategyName | str | None = None,
        *,
        layouts: LayoutProvider | None = None,
        catalog: ModelCatalog | None = None,
        default_model: str | None = None,
    ) -> None:
        self._catalog = catalog
        if layouts is None and catalog is None and default_model is None:
            self._default: DefaultStrategy = get_default_strategy()
            self._slot_aware: SlotAwareStrategy = get_slot_aware_strategy()
        else:
            self._default = DefaultStrategy(catalog=catalog, default_model=default_model)
            self._slot_aware = SlotAwareStrategy(
                layouts=layouts, catalog=catalog, default_model=default_model
            )

        self._strategy: ResolutionStrategy = self._slot_aware
        if strategy is not None:
            self.set_strategy(strategy)

    # -- strategy management -------------------------------------------------

    @property
    def strategy(self) -> ResolutionStrategy:
        return self._strategy

    @property
    def strategy_name(self) -> StrategyName:
        return self._strategy.name

    def set_strategy(self, strategy: ResolutionStrategy | StrategyName | str) -> None:
        """Swap the active strategy by instance or by name.

        Raises
        ------
        ValueError
            If ``strategy`` is a string that names no known strategy.
        """
        if isinstance(strategy, str):
            name = StrategyName(strategy)
            self._strategy = (
                self._default if name is StrategyName.DEFAULT else self._slot_aware
            )
        else:
            self._strategy = strategy
        logger.debug("Active resolution strategy: %s", self._strategy.name)

    def use_default_strategy(self) -> None:
        self.set_strategy(StrategyName.DEFAULT)

    def use_slot_aware_strategy(self) -> None:
        self.set_strategy(StrategyName.SLOT_AWARE)

    # -- resolution ----------------------------------------------------------

    def resolve(self, request: ResolutionRequest | None = None) -> ResolvedConfig:
        """Resolve a request with the active strategy.

        Never raises for unknown presets, unknown slots or out-of-range
        overrides; such values are replaced and listed in ``warnings``.
        """
        return self._strategy.resolve(request or ResolutionRequest())

    async def aresolve(self, request: ResolutionRequest | None = None) -> ResolvedConfig:
        """Async-compatible ``resolve``; completes without suspending."""
        return self.resolve(request)

    def resolve_for_slot(
        self,
        slot: SlotContext,
        *,
        quality_preset: str | None = None,
        overrides: GenerationOverrides | None = None,
    ) -> ResolvedConfig:
        return self.resolve(
            ResolutionRequest(
                slot=slot,
                quality_preset=quality_preset,
                overrides=overrides or GenerationOverrides(),
            )
        )

    def resolve_with_presets(
        self,
        size_preset: str,
        quality_preset: str = "standard",
        overrides: GenerationOverrides | None = None,
    ) -> ResolvedConfig:
        return self.resolve(
            ResolutionRequest(
                size_preset=size_preset,
                quality_preset=quality_preset,
                overrides=overrides or GenerationOverrides(),
            )
        )

    # -- sizing --------------------------------------------------------------

    def calculate_optimal_size(
        self,
        aspect_ratio: float,
        model_family: ModelFamily | str = DEFAULT_SLOT_MODEL_FAMILY,
        resolution_tier: ResolutionTier | str = ResolutionTier.MEDIUM,
    ) -> SizeRecommendation:
        """Recommend dimensions using the active strategy's sizing rules."""
        return self._strategy.calculate_optimal_size(
            aspect_ratio, model_family, resolution_tier
        )

    def get_dimensions_for_slot(
        self,
        template_id: str,
        slot_id: str,
        *,
        page_size: str = DEFAULT_PAGE_SIZE,
        model_family: ModelFamily | str = DEFAULT_SLOT_MODEL_FAMILY,
    ) -> SizeRecommendation:
        """Optimal dimensions for one slot, independent of the active strategy.

        Unknown templates or slots give the default 768x1024.
        """
        slot = SlotContext(template_id=template_id, slot_id=slot_id, page_size=page_size)
        try:
            return self._slot_aware.calculate_slot_size(slot, model_family)
        except UnknownSlotError as exc:
            logger.warning("%s; using default dimensions", exc)
            return SizeRecommendation(DEFAULT_WIDTH, DEFAULT_HEIGHT)

    def get_template_size_map(
        self,
        template_id: str,
        *,
        page_size: str = DEFAULT_PAGE_SIZE,
        model_family: ModelFamily | str = DEFAULT_SLOT_MODEL_FAMILY,
    ) -> dict[str, SizeRecommendation]:
        """Slot id → recommended size for a template (``{}`` if unknown)."""
        return self._slot_aware.calculate_all_slot_sizes(
            template_id, page_size, model_family
        )

    def recommend_sizes_for_template(
        self,
        template_id: str,
        *,
        page_size: str = DEFAULT_PAGE_SIZE,
        model_family: ModelFamily | str = DEFAULT_SLOT_MODEL_FAMILY,
    ) -> TemplateSizePlan:
        return self._slot_aware.recommend_sizes_for_template(
            template_id, page_size, model_family
        )

    def detect_model_family(self, model_name: str | None) -> ModelFamily:
        return detect_model_family(model_name, self._catalog)


_engine: ResolutionEngine | None = None


def get_resolution_engine() -> ResolutionEngine:
    """Return the process-wide engine (slot-aware by default)."""
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = ResolutionEngine()
    return _engine


def reset_resolution_engine() -> None:
    """Drop the process-wide engine and strategy singletons (test isolation)."""
    global _engine  # noqa: PLW0603
    _engine = None
    reset_strategies()


def create_resolution_engine(
    strategy: ResolutionStrategy | StrategyName | str | None = None,
    *,
    layouts: LayoutProvider | None = None,
    catalog: ModelCatalog | None = None,
    default_model: str | None = None,
) -> ResolutionEngine:
    """Create a fresh engine, independent of ``get_resolution_engine()``."""
    return ResolutionEngine(
        strategy, layouts=layouts, catalog=catalog, default_model=default_model
    )
