"""Page composition: layout templates and slot geometry."""

from __future__ import annotations

from graphix.composition.layouts import (
    PAGE_SIZES,
    TEMPLATES,
    PageSize,
    PageTemplate,
    PanelSlot,
    TemplateLayoutProvider,
    create_custom_template,
    get_page_size,
    get_template,
    list_layout_templates,
    list_templates,
    load_layout_template,
    slot_aspect_ratio,
)

__all__ = [
    "PAGE_SIZES",
    "PageSize",
    "PageTemplate",
    "PanelSlot",
    "TEMPLATES",
    "TemplateLayoutProvider",
    "create_custom_template",
    "get_page_size",
    "get_template",
    "list_layout_templates",
    "list_templates",
    "load_layout_template",
    "slot_aspect_ratio",
]
