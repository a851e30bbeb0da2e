"""Resolution strategies: default and slot-aware parameter resolution."""

from __future__ import annotations

from graphix.generation.strategies.base import (
    ResolutionStrategy,
    SizeChoice,
    StrategyName,
)
from graphix.generation.strategies.default import (
    DefaultStrategy,
    get_default_strategy,
    reset_default_strategy,
)
from graphix.generation.strategies.slot_aware import (
    SlotAwareStrategy,
    TemplateSizePlan,
    get_slot_aware_strategy,
    reset_slot_aware_strategy,
)


def reset_strategies() -> None:
    """Drop the strategy singletons (test isolation)."""
    reset_default_strategy()
    reset_slot_aware_strategy()


__all__ = [
    "DefaultStrategy",
    "ResolutionStrategy",
    "SizeChoice",
    "SlotAwareStrategy",
    "StrategyName",
    "TemplateSizePlan",
    "get_default_strategy",
    "get_slot_aware_strategy",
    "reset_strategies",
]
