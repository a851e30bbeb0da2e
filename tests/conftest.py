from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from graphix.config.defaults import DEFAULT_MODEL_ENV_VAR
from graphix.generation.engine import reset_resolution_engine

if TYPE_CHECKING:
    from collections.abc import Iterator


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "layouts: exercises the built-in page-layout templates"
    )


@pytest.fixture(autouse=True)
def _isolated_resolution(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Fresh engine/strategy singletons and no default-model env override."""
    monkeypatch.delenv(DEFAULT_MODEL_ENV_VAR, raising=False)
    reset_resolution_engine()
    yield
    reset_resolution_engine()
