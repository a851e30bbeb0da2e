"""Custom exception hierarchy for the Graphix generation core.

All domain-specific exceptions inherit from ``GraphixError``, enabling
callers to catch broad categories or specific error types. Resolution itself
never lets these escape: the strategies catch them and record a
``ResolutionWarning`` instead.

Example::

    from graphix.exceptions import UnknownPresetError

    try:
        preset = get_quality_preset(name)
    except UnknownPresetError as exc:
        logger.warning("Falling back to standard quality: %s", exc)
"""

from __future__ import annotations


class GraphixError(Exception):
    """Base exception for all Graphix domain errors."""


class ConfigError(GraphixError):
    """Raised for invalid configuration values."""


class UnknownPresetError(ConfigError):
    """Raised when a size or quality preset id is not registered."""


class UnknownSlotError(ConfigError):
    """Raised when a layout template or slot cannot be resolved."""


class InvalidOverrideError(ConfigError):
    """Raised when an explicit override lies outside its sane range."""


__all__ = [
    "ConfigError",
    "GraphixError",
    "InvalidOverrideError",
    "UnknownPresetError",
    "UnknownSlotError",
]
