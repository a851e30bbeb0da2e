"""Static checkpoint catalog: known filenames mapped to model families.

The full checkpoint inventory lives outside this package; this catalog is the
in-process view the strategies consult before falling back to filename
heuristics. It satisfies the ``ModelCatalog`` protocol.
"""

from __future__ import annotations

import logging
import posixpath
from typing import TYPE_CHECKING

from graphix.config.models import ModelFamily

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


def _normalize(filename: str) -> str:
    return posixpath.basename(filename.replace("\\", "/")).lower()


class StaticModelCatalog:
    """Case-insensitive filename → family lookup.

    Entries are matched on the file's base name, so ``"checkpoints/foo.safetensors"``
    and ``"FOO.safetensors"`` both hit an entry registered as ``"foo.safetensors"``.

    Parameters
    ----------
    entries:
        Mapping of checkpoint filename to family (enum or its string value).

    Raises
    ------
    ValueError
        If an entry names an unknown family.
    """

    def __init__(self, entries: Mapping[str, ModelFamily | str] | None = None) -> None:
        self._entries: dict[str, ModelFamily] = {}
        for filename, family in (entries or {}).items():
            try:
                self._entries[_normalize(filename)] = ModelFamily(family)
            except ValueError:
                msg = f"Unknown model family {family!r} for checkpoint {filename!r}"
                raise ValueError(msg) from None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, filename: object) -> bool:
        return isinstance(filename, str) and _normalize(filename) in self._entries

    def family_for(self, filename: str) -> ModelFamily | None:
        family = self._entries.get(_normalize(filename))
        if family is not None:
            logger.debug("Catalog hit for %s: %s", filename, family)
        return family
