"""Slot-aware resolution strategy: size images to their page-layout slot.

When a request names a template slot, its aspect ratio is taken from the
layout provider and turned into generation dimensions for the model family,
so generated panels need minimal cropping when composited.

Dimension precedence:

    explicit pair > size preset > slot > built-in default
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from graphix.composition.layouts import TemplateLayoutProvider
from graphix.config.defaults import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SLOT_MODEL_FAMILY,
    FALLBACK_PRESET_TOLERANCE,
)
from graphix.config.models import (
    ConfigSource,
    DegradationKind,
    ModelFamily,
    ResolutionRequest,
    ResolutionTier,
    SlotContext,
)
from graphix.exceptions import UnknownSlotError
from graphix.generation.dimensions import validate_dimensions
from graphix.generation.presets.models import detect_model_family
from graphix.generation.strategies.base import (
    SizeChoice,
    StrategyName,
    build_resolved_config,
    default_size,
    explicit_size,
    is_valid_aspect_ratio,
    nearest_preset_size,
    optimal_size,
    preset_size,
    record_degradation,
    resolve_model,
)

if TYPE_CHECKING:
    from graphix.config.models import ResolutionWarning, ResolvedConfig
    from graphix.generation.dimensions import SizeRecommendation
    from graphix.utils.protocols import LayoutProvider, ModelCatalog

logger = logging.getLogger(__name__)


@dataclass
class TemplateSizePlan:
    """Per-slot sizes of a template, grouped to minimize distinct configurations.

    Parameters
    ----------
    by_preset:
        Preset id (or ``custom_{w}x{h}`` for synthesized sizes) → slot ids.
    by_slot:
        Slot id → recommended size.
    unique_presets:
        Keys of ``by_preset`` in first-seen order.
    """

    by_preset: dict[str, list[str]] = field(default_factory=dict)
    by_slot: dict[str, SizeRecommendation] = field(default_factory=dict)
    unique_presets: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "by_preset": {k: list(v) for k, v in self.by_preset.items()},
            "by_slot": {k: v.to_dict() for k, v in self.by_slot.items()},
            "unique_presets": list(self.unique_presets),
        }


class SlotAwareStrategy:
    """Derives dimensions from the target slot's geometry.

    Parameters
    ----------
    layouts:
        Layout provider; defaults to the built-in templates and page sizes.
    catalog:
        Optional checkpoint catalog consulted before filename heuristics.
    default_model:
        Explicit default checkpoint; otherwise ``GRAPHIX_DEFAULT_MODEL`` or
        the built-in default is read on every ``resolve`` call.
    """

    def __init__(
        self,
        layouts: LayoutProvider | None = None,
        catalog: ModelCatalog | None = None,
        default_model: str | None = None,
    ) -> None:
        self._layouts: LayoutProvider = (
            layouts if layouts is not None else TemplateLayoutProvider()
        )
        self._catalog = catalog
        self._default_model = default_model

    @property
    def name(self) -> StrategyName:
        return StrategyName.SLOT_AWARE

    @property
    def layouts(self) -> LayoutProvider:
        return self._layouts

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
            "Resolved %dx%d (%s), %d steps for %s (%s strategy)",
            config.width,
            config.height,
            config.sources.width,
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
        choice = explicit_size(request.overrides, warnings) or preset_size(
            request.size_preset, family, warnings
        )
        if choice is not None:
            return choice
        if request.slot is not None:
            try:
                rec = self.calculate_slot_size(request.slot, family)
            except UnknownSlotError as exc:
                record_degradation(warnings, "slot", DegradationKind.UNKNOWN_SLOT, str(exc))
            else:
                return SizeChoice(rec.width, rec.height, ConfigSource.SLOT, rec.preset_id)
        return default_size()

    def calculate_optimal_size(
        self,
        aspect_ratio: float,
        model_family: ModelFamily | str,
        resolution_tier: ResolutionTier | str = ResolutionTier.MEDIUM,
    ) -> SizeRecommendation:
        """Nearest preset within 10 %, else a synthesized size.

        A synthesized size outside the family's comfortable range (e.g. an
        extreme panorama for SD1.5) is replaced by the closest preset within
        50 % when one exists.
        """
        rec = optimal_size(aspect_ratio, model_family, resolution_tier)
        if rec.preset_id is not None or not is_valid_aspect_ratio(aspect_ratio):
            return rec

        check = validate_dimensions(rec.width, rec.height, model_family)
        if not check.valid:
            fallback = nearest_preset_size(
                aspect_ratio, model_family, FALLBACK_PRESET_TOLERANCE
            )
            if fallback is not None:
                logger.debug(
                    "%dx%d unsuitable (%s), using preset %s",
                    rec.width,
                    rec.height,
                    check.reason,
                    fallback.preset_id,
                )
                return fallback
        return rec

    def calculate_slot_size(
        self,
        slot: SlotContext,
        model_family: ModelFamily | str,
        resolution_tier: ResolutionTier | str = ResolutionTier.MEDIUM,
    ) -> SizeRecommendation:
        """Optimal size for a template slot.

        A valid cached ``slot.aspect_ratio`` skips the layout lookup.

        Raises
        ------
        UnknownSlotError
            If the template, slot or page size is unknown to the provider.
        """
        if is_valid_aspect_ratio(slot.aspect_ratio):
            ratio = slot.aspect_ratio
        else:
            ratio = self._layouts.aspect_ratio_for(
                slot.template_id, slot.slot_id, slot.page_size
            )
        return self.calculate_optimal_size(ratio, model_family, resolution_tier)

    def calculate_all_slot_sizes(
        self,
        template_id: str,
        page_size: str = DEFAULT_PAGE_SIZE,
        model_family: ModelFamily | str = DEFAULT_SLOT_MODEL_FAMILY,
    ) -> dict[str, SizeRecommendation]:
        """Size every slot of a template.

        Unknown templates or page sizes give ``{}``.
        """
        sizes: dict[str, SizeRecommendation] = {}
        try:
            for slot_id in self._layouts.slot_ids(template_id):
                slot = SlotContext(
                    template_id=template_id, slot_id=slot_id, page_size=page_size
                )
                sizes[slot_id] = self.calculate_slot_size(slot, model_family)
        except UnknownSlotError as exc:
            logger.warning("No slot sizes for template %r: %s", template_id, exc)
            return {}
        return sizes

    def recommend_sizes_for_template(
        self,
        template_id: str,
        page_size: str = DEFAULT_PAGE_SIZE,
        model_family: ModelFamily | str = DEFAULT_SLOT_MODEL_FAMILY,
    ) -> TemplateSizePlan:
        """Group a template's slot sizes by preset (or custom size)."""
        plan = TemplateSizePlan(
            by_slot=self.calculate_all_slot_sizes(template_id, page_size, model_family)
        )
        for slot_id, size in plan.by_slot.items():
            key = size.preset_id or f"custom_{size.width}x{size.height}"
            plan.by_preset.setdefault(key, []).append(slot_id)
        plan.unique_presets = list(plan.by_preset)
        return plan


_slot_aware_strategy: SlotAwareStrategy | None = None


def get_slot_aware_strategy() -> SlotAwareStrategy:
    """Return the process-wide slot-aware strategy, creating it on first use."""
    global _slot_aware_strategy  # noqa: PLW0603
    if _slot_aware_strategy is None:
        _slot_aware_strategy = SlotAwareStrategy()
    return _slot_aware_strategy


def reset_slot_aware_strategy() -> None:
    global _slot_aware_strategy  # noqa: PLW0603
    _slot_aware_strategy = None
