"""Page-layout templates and the slot geometry provider used for sizing.

Panel slots are positioned in percent of the page (0-100) so one template
fits every page size. A slot's aspect ratio in pixels is therefore
``(width% * page_width) / (height% * page_height)``.

Custom templates can be loaded from YAML files with the same layout as the
built-in ones::

    id: webtoon-strip
    name: Webtoon Strip
    description: Three tall panels stacked vertically
    gutter: 2
    margin: 2
    panels:
      - {id: top, x: 2, y: 2, width: 96, height: 30}
      - {id: middle, x: 2, y: 34, width: 96, height: 30}
      - {id: bottom, x: 2, y: 66, width: 96, height: 32}
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import yaml

from graphix.config.defaults import DEFAULT_PAGE_SIZE
from graphix.exceptions import ConfigError, UnknownSlotError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

# Default search directory for custom layout templates
_DEFAULT_LAYOUT_DIR = (
    Path(__file__).resolve().parent.parent.parent.parent / "configs" / "layouts"
)

# Nominal page aspect ratio of the built-in templates (US comic trim)
_DEFAULT_TEMPLATE_ASPECT: float = 0.65


@dataclass(frozen=True)
class PageSize:
    """Physical page size in pixels at a given DPI."""

    name: str
    width: int
    height: int
    dpi: int = 300

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class PanelSlot:
    """A panel position on the page, in percent of the page dimensions."""

    id: str
    x: float
    y: float
    width: float
    height: float
    z_index: int = 0


@dataclass(frozen=True)
class PageTemplate:
    """A named arrangement of panel slots.

    Parameters
    ----------
    id:
        Template identifier (e.g. ``"six-grid"``).
    name:
        Human-readable name.
    description:
        One-line description.
    slots:
        Panel slots in reading order.
    gutter:
        Space between panels, in percent of the page.
    margin:
        Outer page margin, in percent of the page.
    aspect_ratio:
        Page aspect ratio the template was designed for.
    """

    id: str
    name: str
    description: str
    slots: tuple[PanelSlot, ...]
    gutter: float = 2.0
    margin: float = 2.0
    aspect_ratio: float = _DEFAULT_TEMPLATE_ASPECT

    @property
    def panel_count(self) -> int:
        return len(self.slots)

    @property
    def slot_ids(self) -> list[str]:
        return [slot.id for slot in self.slots]

    def get_slot(self, slot_id: str) -> PanelSlot | None:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        return None


_PAGE_SIZES: dict[str, PageSize] = {
    # US comic sizes (300 DPI)
    "comic_standard": PageSize("US Comic (6.625 x 10.25 in)", 1988, 3075),
    "comic_digest": PageSize("Digest (5.5 x 8.5 in)", 1650, 2550),
    # Manga
    "manga_b6": PageSize("Manga B6 (5 x 7 in)", 1500, 2100),
    "manga_tankoubon": PageSize("Tankoubon (5.04 x 7.17 in)", 1512, 2151),
    # Web
    "web_hd": PageSize("Web HD (1080 x 1920)", 1080, 1920, dpi=72),
    "web_4k": PageSize("Web 4K (2160 x 3840)", 2160, 3840, dpi=72),
    # Two pages side by side
    "spread_comic": PageSize("Comic Spread (13.25 x 10.25 in)", 3975, 3075),
}

PAGE_SIZES: Mapping[str, PageSize] = MappingProxyType(_PAGE_SIZES)


def _slots(*rows: tuple[Any, ...]) -> tuple[PanelSlot, ...]:
    return tuple(PanelSlot(*row) for row in rows)


_TEMPLATES: dict[str, PageTemplate] = {
    t.id: t
    for t in (
        PageTemplate(
            "full-page", "Full Page", "Single panel filling the entire page",
            _slots(("main", 2, 2, 96, 96)),
            gutter=0,
        ),
        PageTemplate(
            "two-vertical", "Two Vertical",
            "Two panels stacked vertically (50/50 split)",
            _slots(("top", 2, 2, 96, 47), ("bottom", 2, 51, 96, 47)),
        ),
        PageTemplate(
            "two-horizontal", "Two Horizontal", "Two panels side by side",
            _slots(("left", 2, 2, 47, 96), ("right", 51, 2, 47, 96)),
        ),
        PageTemplate(
            "three-top-heavy", "Three (Top Heavy)",
            "Large panel on top, two smaller panels below",
            _slots(
                ("top", 2, 2, 96, 60),
                ("bottom-left", 2, 64, 47, 34),
                ("bottom-right", 51, 64, 47, 34),
            ),
        ),
        PageTemplate(
            "three-bottom-heavy", "Three (Bottom Heavy)",
            "Two smaller panels on top, large panel below",
            _slots(
                ("top-left", 2, 2, 47, 34),
                ("top-right", 51, 2, 47, 34),
                ("bottom", 2, 38, 96, 60),
            ),
        ),
        PageTemplate(
            "four-grid", "Four Grid", "Four equal panels in a 2x2 grid",
            _slots(
                ("top-left", 2, 2, 47, 47),
                ("top-right", 51, 2, 47, 47),
                ("bottom-left", 2, 51, 47, 47),
                ("bottom-right", 51, 51, 47, 47),
            ),
        ),
        PageTemplate(
            "six-grid", "Six Grid", "Six panels in a classic 2x3 comic grid",
            _slots(
                ("row1-left", 2, 2, 47, 30),
                ("row1-right", 51, 2, 47, 30),
                ("row2-left", 2, 34, 47, 30),
                ("row2-right", 51, 34, 47, 30),
                ("row3-left", 2, 66, 47, 32),
                ("row3-right", 51, 66, 47, 32),
            ),
        ),
        PageTemplate(
            "nine-grid", "Nine Grid", "Nine panels in a 3x3 grid",
            _slots(
                ("r1c1", 2, 2, 30.67, 30.67),
                ("r1c2", 34.17, 2, 30.67, 30.67),
                ("r1c3", 66.33, 2, 31.67, 30.67),
                ("r2c1", 2, 34.17, 30.67, 30.67),
                ("r2c2", 34.17, 34.17, 30.67, 30.67),
                ("r2c3", 66.33, 34.17, 31.67, 30.67),
                ("r3c1", 2, 66.33, 30.67, 31.67),
                ("r3c2", 34.17, 66.33, 30.67, 31.67),
                ("r3c3", 66.33, 66.33, 31.67, 31.67),
            ),
            gutter=1.5,
        ),
        PageTemplate(
            "cinematic", "Cinematic",
            "Three widescreen panels for cinematic storytelling",
            _slots(
                ("top", 2, 2, 96, 30),
                ("middle", 2, 34, 96, 30),
                ("bottom", 2, 66, 96, 32),
            ),
        ),
        PageTemplate(
            "action", "Action", "Dynamic asymmetric layout for action sequences",
            _slots(
                ("hero", 2, 2, 60, 55),
                ("top-right", 63.5, 2, 34.5, 26.5),
                ("mid-right", 63.5, 30, 34.5, 27),
                ("bottom-left", 2, 58.5, 47, 39.5),
                ("bottom-right", 50.5, 58.5, 47.5, 39.5),
            ),
            gutter=1.5,
        ),
        PageTemplate(
            "splash-insets", "Splash with Insets",
            "Large splash panel with small inset panels",
            _slots(
                ("splash", 0, 0, 100, 100, 0),
                ("inset-1", 3, 3, 25, 20, 1),
                ("inset-2", 72, 3, 25, 20, 1),
                ("inset-3", 3, 77, 35, 20, 1),
            ),
            gutter=0,
            margin=0,
        ),
    )
}

TEMPLATES: Mapping[str, PageTemplate] = MappingProxyType(_TEMPLATES)


def get_template(template_id: str) -> PageTemplate | None:
    return TEMPLATES.get(template_id)


def list_templates() -> list[PageTemplate]:
    return list(TEMPLATES.values())


def get_page_size(name: str | None) -> PageSize | None:
    """Look up a page size preset; ``None`` selects ``comic_standard``."""
    return PAGE_SIZES.get(name or DEFAULT_PAGE_SIZE)


def slot_aspect_ratio(slot: PanelSlot, page: PageSize) -> float:
    """Return the slot's width / height in page pixels."""
    return (slot.width / 100 * page.width) / (slot.height / 100 * page.height)


def create_custom_template(
    template_id: str,
    name: str,
    slots: Iterable[PanelSlot],
    *,
    description: str = "Custom template",
    gutter: float = 2.0,
    margin: float = 2.0,
    aspect_ratio: float = _DEFAULT_TEMPLATE_ASPECT,
) -> PageTemplate:
    """Build a template from slots, rejecting empty or degenerate geometry.

    Raises
    ------
    ConfigError
        If there are no slots, slot ids repeat, or a slot has a
        non-positive width or height.
    """
    slot_tuple = tuple(slots)
    if not slot_tuple:
        msg = f"Template {template_id!r} has no panel slots"
        raise ConfigError(msg)
    seen: set[str] = set()
    for slot in slot_tuple:
        if slot.id in seen:
            msg = f"Template {template_id!r} repeats slot id {slot.id!r}"
            raise ConfigError(msg)
        seen.add(slot.id)
        if not (slot.width > 0 and slot.height > 0):
            msg = f"Slot {slot.id!r} of template {template_id!r} has no area"
            raise ConfigError(msg)
    return PageTemplate(
        id=template_id,
        name=name,
        description=description,
        slots=slot_tuple,
        gutter=gutter,
        margin=margin,
        aspect_ratio=aspect_ratio,
    )


def load_layout_template(
    name: str, search_dirs: list[Path] | None = None
) -> PageTemplate:
    """Load a page template from a YAML file.

    Searches each directory in ``search_dirs`` (or the built-in
    ``configs/layouts/`` directory) for a file named ``{name}.yaml``.

    Parameters
    ----------
    name:
        Template file stem (e.g., ``"webtoon-strip"``).
    search_dirs:
        Optional list of directories to search instead of the default location.

    Returns
    -------
    PageTemplate
        Template built from the YAML document. Its id defaults to ``name``.

    Raises
    ------
    FileNotFoundError
        If no matching YAML file is found in any search directory.
    ConfigError
        If the document is not a valid template.
    """
    dirs = search_dirs if search_dirs is not None else [_DEFAULT_LAYOUT_DIR]
    for d in dirs:
        yaml_path = Path(d) / f"{name}.yaml"
        if yaml_path.exists():
            logger.debug("Loading layout template %r from %s", name, yaml_path)
            with open(yaml_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
            return _template_from_dict(name, data, yaml_path)
    raise FileNotFoundError(f"No layout template '{name}' in {dirs}")


def list_layout_templates(search_dirs: list[Path] | None = None) -> list[str]:
    """Return the sorted stems of YAML layout templates in ``search_dirs``."""
    dirs = search_dirs if search_dirs is not None else [_DEFAULT_LAYOUT_DIR]
    names: set[str] = set()
    for d in dirs:
        resolved = Path(d)
        if resolved.exists():
            for p in resolved.glob("*.yaml"):
                names.add(p.stem)
    return sorted(names)


def _template_from_dict(name: str, data: Any, source: Path) -> PageTemplate:
    if not isinstance(data, dict) or not isinstance(data.get("panels"), list):
        msg = f"{source}: expected a mapping with a 'panels' list"
        raise ConfigError(msg)
    try:
        slots = [
            PanelSlot(
                id=str(p["id"]),
                x=float(p["x"]),
                y=float(p["y"]),
                width=float(p["width"]),
                height=float(p["height"]),
                z_index=int(p.get("z_index", 0)),
            )
            for p in data["panels"]
        ]
    except (KeyError, TypeError, ValueError) as exc:
        msg = f"{source}: invalid panel definition ({exc})"
        raise ConfigError(msg) from exc
    return create_custom_template(
        str(data.get("id", name)),
        str(data.get("name", name)),
        slots,
        description=str(data.get("description", "Custom template")),
        gutter=float(data.get("gutter", 2.0)),
        margin=float(data.get("margin", 2.0)),
        aspect_ratio=float(data.get("aspect_ratio", _DEFAULT_TEMPLATE_ASPECT)),
    )


class TemplateLayoutProvider:
    """``LayoutProvider`` backed by page templates and page-size presets.

    Parameters
    ----------
    templates:
        Extra templates, added to (and overriding) the built-in ones.
    page_sizes:
        Extra page sizes, added to (and overriding) the built-in ones.
    """

    def __init__(
        self,
        templates: Iterable[PageTemplate] | None = None,
        page_sizes: Mapping[str, PageSize] | None = None,
    ) -> None:
        self._templates: dict[str, PageTemplate] = dict(TEMPLATES)
        for template in templates or ():
            self._templates[template.id] = template
        self._page_sizes: dict[str, PageSize] = dict(PAGE_SIZES)
        self._page_sizes.update(page_sizes or {})

    @classmethod
    def from_directories(
        cls,
        search_dirs: list[Path] | None = None,
        page_sizes: Mapping[str, PageSize] | None = None,
    ) -> TemplateLayoutProvider:
        """Build a provider with every YAML template found in ``search_dirs``."""
        templates = [
            load_layout_template(name, search_dirs)
            for name in list_layout_templates(search_dirs)
        ]
        logger.info("Loaded %d custom layout template(s)", len(templates))
        return cls(templates=templates, page_sizes=page_sizes)

    def has_template(self, template_id: str) -> bool:
        return template_id in self._templates

    def template_ids(self) -> list[str]:
        return list(self._templates)

    def _template(self, template_id: str) -> PageTemplate:
        template = self._templates.get(template_id)
        if template is None:
            msg = f"Unknown layout template: {template_id!r}"
            raise UnknownSlotError(msg)
        return template

    def slot_ids(self, template_id: str) -> list[str]:
        return self._template(template_id).slot_ids

    def aspect_ratio_for(
        self,
        template_id: str,
        slot_id: str,
        page_size: str | None = None,
    ) -> float:
        slot = self._template(template_id).get_slot(slot_id)
        if slot is None:
            msg = f"Unknown slot {slot_id!r} in template {template_id!r}"
            raise UnknownSlotError(msg)
        page = self._page_sizes.get(page_size or DEFAULT_PAGE_SIZE)
        if page is None:
            msg = f"Unknown page size: {page_size!r}"
            raise UnknownSlotError(msg)
        ratio = slot_aspect_ratio(slot, page)
        if not math.isfinite(ratio) or ratio <= 0:
            msg = f"Slot {slot_id!r} of template {template_id!r} has no area"
            raise UnknownSlotError(msg)
        return ratio
