#!/usr/bin/env python
"""Print the generation size plan for every slot of a page template.

Usage::

    # Size plan for a built-in template on a US comic page
    uv run python scripts/plan_page_sizes.py --template six-grid

    # SD1.5 sizes for a web page, including custom YAML templates
    uv run python scripts/plan_page_sizes.py --template webtoon-strip \\
        --page-size web_hd --model-family sd15 --layouts-dir configs/layouts

    # List the available templates
    uv run python scripts/plan_page_sizes.py --list
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from graphix.composition.layouts import PAGE_SIZES, TemplateLayoutProvider  # noqa: E402
from graphix.config.defaults import (  # noqa: E402
    DEFAULT_PAGE_SIZE,
    DEFAULT_SLOT_MODEL_FAMILY,
)
from graphix.config.models import ModelFamily  # noqa: E402
from graphix.generation.engine import create_resolution_engine  # noqa: E402

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Plan generation sizes for the slots of a page template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--template", help="Template id (e.g. six-grid)")
    parser.add_argument(
        "--page-size",
        default=DEFAULT_PAGE_SIZE,
        choices=sorted(PAGE_SIZES),
        help="Page size preset (default: %(default)s)",
    )
    parser.add_argument(
        "--model-family",
        default=DEFAULT_SLOT_MODEL_FAMILY,
        choices=[f.value for f in ModelFamily],
        help="Model family whose dimension buckets to use (default: %(default)s)",
    )
    parser.add_argument(
        "--layouts-dir",
        type=Path,
        action="append",
        default=None,
        help="Directory of custom YAML templates (repeatable)",
    )
    parser.add_argument(
        "--list", action="store_true", help="List available template ids and exit"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = _build_arg_parser().parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    if args.layouts_dir:
        layouts = TemplateLayoutProvider.from_directories(args.layouts_dir)
    else:
        layouts = TemplateLayoutProvider()

    if args.list:
        for template_id in layouts.template_ids():
            print(template_id)
        return 0

    if not args.template:
        logger.error("--template is required (use --list to see templates)")
        return 2
    if not layouts.has_template(args.template):
        logger.error("Unknown template: %s", args.template)
        return 1

    engine = create_resolution_engine(layouts=layouts)
    plan = engine.recommend_sizes_for_template(
        args.template, page_size=args.page_size, model_family=args.model_family
    )
    logger.info(
        "%s: %d slot(s), %d distinct size(s)",
        args.template,
        len(plan.by_slot),
        len(plan.unique_presets),
    )
    print(json.dumps(plan.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
