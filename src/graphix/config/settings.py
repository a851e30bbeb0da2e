from __future__ import annotations

import logging
import os

from graphix.config.defaults import DEFAULT_MODEL as _DEFAULT_MODEL
from graphix.config.defaults import DEFAULT_MODEL_ENV_VAR

logger = logging.getLogger(__name__)


def resolve_default_model(*, default_model: str | None = None) -> str:
    """Resolve the default checkpoint filename from multiple sources.

    Priority order:
    1. Explicit ``default_model`` parameter (highest)
    2. ``GRAPHIX_DEFAULT_MODEL`` environment variable
    3. Default: ``DEFAULT_MODEL`` from ``graphix.config.defaults``

    Parameters
    ----------
    default_model:
        Explicit model filename to use. If provided and non-blank, returned
        as-is.

    Returns
    -------
    Resolved model filename.
    """
    if default_model is not None and default_model.strip():
        return default_model
    env_model = os.environ.get(DEFAULT_MODEL_ENV_VAR)
    if env_model and env_model.strip():
        logger.debug("Default model taken from %s: %s", DEFAULT_MODEL_ENV_VAR, env_model)
        return env_model.strip()
    return _DEFAULT_MODEL
