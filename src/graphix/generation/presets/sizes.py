"""Aspect-ratio based size presets with per-dimension-class bucket sizes.

SDXL-derived checkpoints (SDXL, Illustrious, Pony, realistic) work best at
~1 MP bucket resolutions, SD1.5 at 512-based ones and Flux is flexible but
shares the SDXL buckets closely. Every registered pair is a multiple of 64,
lies within [256, 2048] per axis, totals 0.2-2.0 MP and stays within 10 % of
the preset's nominal aspect ratio.

Registration order is significant: ``find_closest_preset`` resolves ties in
favour of the preset registered first.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from graphix.config.defaults import CLOSEST_PRESET_TOLERANCE
from graphix.config.models import DimensionKey

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class Dimensions:
    """A width/height pair in pixels."""

    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def megapixels(self) -> float:
        return self.width * self.height / 1e6


@dataclass(frozen=True)
class SizePreset:
    """Named aspect ratio with optimal dimensions per dimension class.

    Parameters
    ----------
    id:
        Unique identifier (e.g. ``"portrait_3x4"``).
    name:
        Human-readable name.
    aspect_ratio:
        Nominal width / height.
    dimensions:
        Bucket dimensions keyed by ``DimensionKey``.
    suggested_for:
        Use cases this preset suits (e.g. ``"character"``).
    """

    id: str
    name: str
    aspect_ratio: float
    dimensions: Mapping[DimensionKey, Dimensions]
    suggested_for: tuple[str, ...] = field(default=())

    def dimensions_for(self, key: DimensionKey) -> Dimensions:
        return self.dimensions[key]


def _preset(
    preset_id: str,
    name: str,
    aspect_ratio: float,
    sdxl: tuple[int, int],
    sd15: tuple[int, int],
    flux: tuple[int, int],
    suggested_for: tuple[str, ...],
) -> SizePreset:
    dims = {
        DimensionKey.SDXL: Dimensions(*sdxl),
        DimensionKey.SD15: Dimensions(*sd15),
        DimensionKey.FLUX: Dimensions(*flux),
    }
    return SizePreset(
        id=preset_id,
        name=name,
        aspect_ratio=aspect_ratio,
        dimensions=MappingProxyType(dims),
        suggested_for=suggested_for,
    )


_SIZE_PRESETS: dict[str, SizePreset] = {
    p.id: p
    for p in (
        # Square
        _preset(
            "square_1x1", "Square (1:1)", 1.0,
            sdxl=(1024, 1024), sd15=(512, 512), flux=(1024, 1024),
            suggested_for=("avatar", "icon", "thumbnail", "profile"),
        ),
        # Portrait
        _preset(
            "portrait_3x4", "Portrait (3:4)", 0.75,
            sdxl=(768, 1024), sd15=(448, 576), flux=(768, 1024),
            suggested_for=("character", "full-body", "standard-panel"),
        ),
        _preset(
            "portrait_2x3", "Portrait (2:3)", 0.667,
            sdxl=(832, 1216), sd15=(448, 640), flux=(832, 1216),
            suggested_for=("comic-panel", "page", "poster"),
        ),
        _preset(
            "portrait_9x16", "Portrait (9:16)", 0.5625,
            sdxl=(768, 1344), sd15=(384, 704), flux=(704, 1280),
            suggested_for=("mobile", "story", "vertical-video"),
        ),
        _preset(
            "portrait_1x2", "Portrait (1:2)", 0.5,
            sdxl=(704, 1408), sd15=(384, 768), flux=(640, 1280),
            suggested_for=("tall-panel", "vertical-strip"),
        ),
        # Landscape
        _preset(
            "landscape_4x3", "Landscape (4:3)", 1.333,
            sdxl=(1024, 768), sd15=(576, 448), flux=(1024, 768),
            suggested_for=("scene", "establishing-shot", "dialog"),
        ),
        _preset(
            "landscape_3x2", "Landscape (3:2)", 1.5,
            sdxl=(1216, 832), sd15=(640, 448), flux=(1216, 832),
            suggested_for=("cinematic", "wide-panel", "photography"),
        ),
        _preset(
            "landscape_16x9", "Landscape (16:9)", 1.778,
            sdxl=(1344, 768), sd15=(704, 384), flux=(1280, 704),
            suggested_for=("cinematic-wide", "banner", "video-frame"),
        ),
        _preset(
            "landscape_21x9", "Ultra-wide (21:9)", 2.333,
            sdxl=(1536, 640), sd15=(768, 320), flux=(1344, 576),
            suggested_for=("panoramic", "establishing", "ultra-wide"),
        ),
        _preset(
            "landscape_2x1", "Double-wide (2:1)", 2.0,
            sdxl=(1408, 704), sd15=(768, 384), flux=(1280, 640),
            suggested_for=("horizontal-strip", "spread"),
        ),
        # Comic page layouts
        _preset(
            "comic_full_page", "Comic Full Page", 0.65,
            sdxl=(832, 1280), sd15=(448, 704), flux=(832, 1280),
            suggested_for=("full-page", "splash", "cover"),
        ),
        _preset(
            "comic_half_horizontal", "Comic Half Page (Horizontal)", 1.3,
            sdxl=(1024, 768), sd15=(576, 448), flux=(1024, 768),
            suggested_for=("half-page", "wide-panel", "action-strip"),
        ),
        _preset(
            "comic_third_vertical", "Comic Vertical Third", 0.48,
            sdxl=(640, 1344), sd15=(384, 768), flux=(640, 1344),
            suggested_for=("vertical-strip", "side-panel", "action-sequence"),
        ),
        _preset(
            "comic_sixth_grid", "Comic Grid Panel (1/6)", 0.97,
            sdxl=(960, 1024), sd15=(512, 512), flux=(960, 1024),
            suggested_for=("grid-panel", "six-grid", "four-grid"),
        ),
        # Manga
        _preset(
            "manga_full_page", "Manga Full Page", 0.71,
            sdxl=(832, 1152), sd15=(448, 640), flux=(832, 1152),
            suggested_for=("manga-page", "manga-splash"),
        ),
        # Web / social
        _preset(
            "instagram_square", "Instagram Square", 1.0,
            sdxl=(1024, 1024), sd15=(512, 512), flux=(1088, 1088),
            suggested_for=("instagram", "social-square"),
        ),
        _preset(
            "instagram_portrait", "Instagram Portrait (4:5)", 0.8,
            sdxl=(896, 1088), sd15=(448, 576), flux=(896, 1088),
            suggested_for=("instagram-portrait", "social-portrait"),
        ),
    )
}

SIZE_PRESETS: Mapping[str, SizePreset] = MappingProxyType(_SIZE_PRESETS)

# id prefix -> category name
_CATEGORY_PREFIXES: tuple[tuple[str, str], ...] = (
    ("square", "square"),
    ("portrait", "portrait"),
    ("landscape", "landscape"),
    ("comic", "comic"),
    ("manga", "manga"),
    ("instagram", "social"),
)


def list_size_presets() -> list[SizePreset]:
    """Return all size presets in registration order."""
    return list(SIZE_PRESETS.values())


def get_size_preset(preset_id: str | None) -> SizePreset | None:
    """Look up a size preset by id, returning ``None`` when unknown."""
    if not preset_id:
        return None
    return SIZE_PRESETS.get(preset_id)


def find_closest_preset(
    aspect_ratio: float,
    tolerance: float = CLOSEST_PRESET_TOLERANCE,
) -> SizePreset | None:
    """Find the registered preset whose aspect ratio is nearest the target.

    The error is relative to the target:
    ``|preset.aspect_ratio - target| / target``. Among equal minima the
    first-registered preset wins.

    Parameters
    ----------
    aspect_ratio:
        Target width / height.
    tolerance:
        Maximum accepted relative error (``0.15`` = 15 %).

    Returns
    -------
    SizePreset | None
        The closest preset, or ``None`` when none is within tolerance or the
        target is not a positive finite number.
    """
    if not math.isfinite(aspect_ratio) or aspect_ratio <= 0:
        return None

    closest: SizePreset | None = None
    closest_error = math.inf
    for preset in SIZE_PRESETS.values():
        error = abs(preset.aspect_ratio - aspect_ratio) / aspect_ratio
        if error < closest_error:
            closest = preset
            closest_error = error

    if closest is None or closest_error > tolerance:
        return None
    return closest


def find_presets_for_use_case(use_case: str) -> list[SizePreset]:
    """Return presets whose suggested uses contain ``use_case`` (case-insensitive)."""
    needle = use_case.lower()
    return [
        preset
        for preset in SIZE_PRESETS.values()
        if any(needle in suggested.lower() for suggested in preset.suggested_for)
    ]


def get_presets_by_category() -> dict[str, list[SizePreset]]:
    """Group presets by id prefix (square, portrait, landscape, comic, manga, social)."""
    categories: dict[str, list[SizePreset]] = {
        category: [] for _, category in _CATEGORY_PREFIXES
    }
    for preset in SIZE_PRESETS.values():
        for prefix, category in _CATEGORY_PREFIXES:
            if preset.id.startswith(prefix):
                categories[category].append(preset)
                break
    return categories
