"""Shared utilities: collaborator protocols."""

from __future__ import annotations

from graphix.utils.protocols import LayoutProvider, ModelCatalog

__all__ = [
    "LayoutProvider",
    "ModelCatalog",
]
