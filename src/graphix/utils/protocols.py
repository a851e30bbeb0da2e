"""Structural Protocol types for the resolution core's collaborators.

These Protocols let the strategies depend on a shape rather than a concrete
class, so callers can inject their own checkpoint catalog or layout provider.

Usage::

    from graphix.utils.protocols import LayoutProvider


    def slot_ratio(layouts: LayoutProvider) -> float:
        return layouts.aspect_ratio_for("six-grid", "row1-left")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from graphix.config.models import ModelFamily


@runtime_checkable
class ModelCatalog(Protocol):
    """Protocol for checkpoint catalogs mapping filenames to families."""

    def family_for(self, filename: str) -> ModelFamily | None:
        """Return the family of a known checkpoint, or ``None``."""
        ...


@runtime_checkable
class LayoutProvider(Protocol):
    """Protocol for page-layout geometry (template slots → aspect ratios)."""

    def aspect_ratio_for(
        self,
        template_id: str,
        slot_id: str,
        page_size: str | None = None,
    ) -> float:
        """Return the slot's width / height in page pixels.

        Raises ``UnknownSlotError`` for unknown templates or slots.
        """
        ...

    def slot_ids(self, template_id: str) -> list[str]:
        """Return the slot ids of a template in layout order.

        Raises ``UnknownSlotError`` for unknown templates.
        """
        ...
