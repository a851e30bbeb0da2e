"""Tests for centralized configuration defaults and default-model resolution."""

from __future__ import annotations

import pytest


class TestCentralizedDefaults:
    """The ``defaults`` module exports the expected constant values."""

    def test_default_model(self) -> None:
        from graphix.config.defaults import DEFAULT_MODEL

        assert DEFAULT_MODEL == "ponyDiffusionV6XL.safetensors"

    def test_default_dimensions(self) -> None:
        from graphix.config.defaults import DEFAULT_HEIGHT, DEFAULT_WIDTH

        assert (DEFAULT_WIDTH, DEFAULT_HEIGHT) == (768, 1024)

    def test_bounds(self) -> None:
        from graphix.config import defaults

        assert defaults.MIN_DIMENSION == 256
        assert defaults.MAX_DIMENSION == 2048
        assert defaults.MIN_MEGAPIXELS == 0.2
        assert defaults.MAX_MEGAPIXELS == 2.0

    def test_tolerances_ordered(self) -> None:
        from graphix.config import defaults

        assert (
            defaults.OPTIMAL_SIZE_TOLERANCE
            < defaults.CLOSEST_PRESET_TOLERANCE
            < defaults.FALLBACK_PRESET_TOLERANCE
        )


class TestResolveDefaultModel:
    """Priority: explicit > GRAPHIX_DEFAULT_MODEL > built-in default."""

    def test_builtin_default(self) -> None:
        from graphix.config.settings import resolve_default_model

        assert resolve_default_model() == "ponyDiffusionV6XL.safetensors"

    def test_env_var_overrides_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from graphix.config.settings import resolve_default_model

        monkeypatch.setenv("GRAPHIX_DEFAULT_MODEL", "  flux1-dev.safetensors ")
        assert resolve_default_model() == "flux1-dev.safetensors"

    def test_explicit_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from graphix.config.settings import resolve_default_model

        monkeypatch.setenv("GRAPHIX_DEFAULT_MODEL", "flux1-dev.safetensors")
        assert (
            resolve_default_model(default_model="sdxl_base_1.0.safetensors")
            == "sdxl_base_1.0.safetensors"
        )

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_values_ignored(
        self, blank: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from graphix.config.settings import resolve_default_model

        monkeypatch.setenv("GRAPHIX_DEFAULT_MODEL", blank)
        assert resolve_default_model(default_model=blank) == (
            "ponyDiffusionV6XL.safetensors"
        )
