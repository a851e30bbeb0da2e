"""Centralized configuration defaults for generation parameter resolution.

All magic constants used by the presets, dimension math and strategies are
collected here.
"""

from __future__ import annotations

# Default checkpoint when neither the request nor GRAPHIX_DEFAULT_MODEL names one
DEFAULT_MODEL: str = "ponyDiffusionV6XL.safetensors"

# Environment variable consulted for the default checkpoint (config/settings.py)
DEFAULT_MODEL_ENV_VAR: str = "GRAPHIX_DEFAULT_MODEL"

# Built-in dimensions when no override, preset or slot applies
DEFAULT_WIDTH: int = 768
DEFAULT_HEIGHT: int = 1024

# Fallback quality preset for get_quality_preset_safe()
DEFAULT_QUALITY_PRESET: str = "standard"

# Model family used by slot sizing when the caller does not name one
DEFAULT_SLOT_MODEL_FAMILY: str = "pony"

# Page size used for slot geometry when the slot does not name one
DEFAULT_PAGE_SIZE: str = "comic_standard"

# Dimension snapping and hard bounds
DIMENSION_MULTIPLE: int = 64
MIN_DIMENSION: int = 256
MAX_DIMENSION: int = 2048
MIN_MEGAPIXELS: float = 0.2
MAX_MEGAPIXELS: float = 2.0

# Preset matching tolerances (relative aspect-ratio error)
CLOSEST_PRESET_TOLERANCE: float = 0.15
OPTIMAL_SIZE_TOLERANCE: float = 0.1
FALLBACK_PRESET_TOLERANCE: float = 0.5

# Sane ranges for explicit overrides
MIN_STEPS: int = 1
MAX_STEPS: int = 150
MAX_CFG: float = 30.0
