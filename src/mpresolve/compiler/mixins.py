# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Filter extraction for mixins and generation of filter modules.

A unit's template filters come from its own script and from every mixin it
references.  Each distinct mixin file is extracted once per build session and
gets its own filter module; a unit's merged filter module re-exports the
mixins' filters from those modules and adds its own definitions last, so a
unit's definition overrides a mixin's and a later mixin overrides an earlier one.

Cached extractions are never invalidated: a mixin edited during a watch
session keeps serving the filters it had when first extracted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from mpresolve.model.metadata import FilterSet

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class MixinFilters:
    """Filters a unit inherits from one mixin.

    Attributes:
        path: Resolved mixin source file.
        import_path: The mixin's filter module as seen from the unit's filter module.
        filters: The mixin's extracted filters.
    """

    path: Path
    import_path: str
    filters: FilterSet


class MixinFilterCache:
    """Resolved mixin path to its extracted filters (``None`` when it has none)."""

    def __init__(self) -> None:
        self._entries: dict[Path, FilterSet | None] = {}
        self.extractions = 0

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def get(self, path: Path) -> FilterSet | None:
        return self._entries.get(path)

    def extract_once(self, path: Path, extract: Callable[[Path], FilterSet | None]) -> tuple[FilterSet | None, bool]:
        """Return the filters of *path*, calling *extract* only on first request.

        Returns:
            The cached filters and whether this call performed the extraction.
        """
        if path in self._entries:
            return self._entries[path], False
        filters = extract(path) or None
        self._entries[path] = filters
        self.extractions += 1
        logger.debug("Extracted %d filter(s) from mixin '%s'", len(filters.definitions) if filters else 0, path)
        return filters, True


def render_filter_module(definitions: dict[str, str], *, esm: bool) -> str:
    """Render a standalone filter module exporting *definitions*."""
    return _render_module([], definitions, esm=esm)


def combine_filters(local: FilterSet | None, mixins: list[MixinFilters], *, esm: bool) -> str | None:
    """Render the merged filter module of a unit.

    Mixin filters are merged in the given order, then the unit's own filters;
    on a name collision the last merged definition wins.

    Returns:
        The module source, or ``None`` when neither the unit nor its mixins
        define any filter.
    """
    imports: list[tuple[str, str]] = []
    exports: dict[str, str] = {}
    for index, mixin in enumerate(mixins):
        if not mixin.filters:
            continue
        alias = f"__mixin{index}"
        imports.append((alias, mixin.import_path))
        for name in mixin.filters.definitions:
            exports[name] = f"{alias}.{name}"
    if local:
        exports.update(local.definitions)
    if not exports:
        return None
    return _render_module(imports, exports, esm=esm)


# ################
# Implementation
# ################


def _render_module(imports: list[tuple[str, str]], exports: dict[str, str], *, esm: bool) -> str:
    lines: list[str] = []
    for alias, path in imports:
        if esm:
            lines.append(f"import {alias} from '{path}';")
        else:
            lines.append(f"var {alias} = require('{path}');")
    if imports:
        lines.append("")
    lines.append("export default {" if esm else "module.exports = {")
    for name, value in exports.items():
        lines.append(f"  {name}: {value},")
    lines.append("};")
    return "\n".join(lines) + "\n"
