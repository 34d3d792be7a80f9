# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""The global component registry.

Components registered by the application entry, or by any module it imports,
are available to every unit without a local declaration.  The registry holds
one snapshot of them.  Only the application entry's compile pass rebuilds it:

* :meth:`GlobalComponentRegistry.begin_rebuild` empties the registry so that
  units waiting for it keep waiting, and keeps the last ready snapshot.
* :meth:`GlobalComponentRegistry.resolve_global_sources` discovers and
  resolves all declared global components.
* :meth:`GlobalComponentRegistry.commit` publishes the new snapshot and
  reports whether it differs from the kept one.

Every change bumps :attr:`GlobalComponentRegistry.version`, which unit records
store to tell which registry they were merged against.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable
from pathlib import Path

from mpresolve.compiler.components import ComponentLocator, resolve_components
from mpresolve.compiler.interfaces import AnalysisError, ModuleResolver, ResolutionError, ScriptAnalyzer
from mpresolve.compiler.paths import normalize_component_name
from mpresolve.model.metadata import EntryMetadata
from mpresolve.model.records import ComponentMap

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class RegistryState(enum.Enum):
    EMPTY = "empty"
    BUILDING = "building"
    READY = "ready"


class GlobalComponentRegistry:
    """Versioned snapshot of the globally available components.

    Args:
        on_change: Called whenever the registry changes state, typically
            :meth:`~mpresolve.compiler.readiness.ReadinessGate.notify`.
    """

    def __init__(self, on_change: Callable[[], None] | None = None) -> None:
        self._state = RegistryState.EMPTY
        self._snapshot: ComponentMap | None = None
        self._previous: ComponentMap | None = None
        self._version = 0
        self._on_change = on_change

    @property
    def state(self) -> RegistryState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is RegistryState.READY

    @property
    def snapshot(self) -> ComponentMap | None:
        """The current snapshot, or ``None`` unless the registry is ready."""
        return self._snapshot if self.is_ready else None

    @property
    def previous(self) -> ComponentMap | None:
        """The last ready snapshot before the rebuild in progress or just committed."""
        return self._previous

    @property
    def version(self) -> int:
        return self._version

    def begin_rebuild(self) -> None:
        """Empty the registry until the next :meth:`commit`."""
        if self._state is RegistryState.READY:
            self._previous = self._snapshot
        self._state = RegistryState.BUILDING
        self._snapshot = None
        self._changed()

    async def resolve_global_sources(
        self,
        declared: dict[str, str],
        imports_map: dict[str, str],
        *,
        context: Path,
        project_root: Path,
        resolver: ModuleResolver,
        analyzer: ScriptAnalyzer,
        locate: ComponentLocator,
    ) -> ComponentMap:
        """Collect every declared global component and resolve it to a concrete target.

        *declared* holds the entry's own declarations.  Every module in
        *imports_map* is analyzed for further declarations, and so are the
        modules it imports in turn, as long as they live inside *project_root*
        and outside ``node_modules``.  Declarations are merged level by level
        in import order; the first declaration of a name wins, so the entry's
        own declarations are never overridden.  Names are compared in their
        kebab-case form, so ``MyHeader`` and ``my-header`` are the same name.

        Sources that cannot be resolved, read or analyzed are logged and
        skipped.
        """
        requests: dict[str, tuple[Path, str]] = {}
        for name, request in declared.items():
            requests[normalize_component_name(name)] = (context, request)
        visited: set[Path] = set()
        frontier = [(context, request) for request in imports_map.values()]

        while frontier:
            found = await asyncio.gather(
                *(self._discover(ctx, request, resolver, analyzer, visited) for ctx, request in frontier)
            )
            frontier = []
            for result in found:
                if result is None:
                    continue
                path, metadata = result
                for name, request in metadata.global_components.items():
                    requests.setdefault(normalize_component_name(name), (path.parent, request))
                if _descends_into(path, project_root):
                    frontier.extend((path.parent, request) for request in metadata.imports_map.values())

        entries = await resolve_components(requests, resolver, locate)
        return ComponentMap(entries=entries, completed=True)

    def commit(self, snapshot: ComponentMap) -> bool:
        """Publish *snapshot* and make the registry ready.

        Returns:
            Whether *snapshot* differs structurally from the last ready
            snapshot.  The very first commit always counts as a change.
        """
        reference = self._previous if self._state is RegistryState.BUILDING else self._snapshot
        changed = reference is None or reference != snapshot
        if changed:
            self._version += 1
        self._state = RegistryState.READY
        self._snapshot = snapshot
        logger.info(
            "Global component registry %s (%d component(s), version %d)",
            "changed" if changed else "unchanged",
            len(snapshot.entries),
            self._version,
        )
        self._changed()
        return changed

    # ################
    # Implementation
    # ################

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    async def _discover(
        self,
        context: Path,
        request: str,
        resolver: ModuleResolver,
        analyzer: ScriptAnalyzer,
        visited: set[Path],
    ) -> tuple[Path, EntryMetadata] | None:
        """Resolve and analyze one imported module, once per build."""
        try:
            path = await resolver.resolve(context, request)
        except (ResolutionError, OSError) as exc:
            logger.warning("Skipping global component source '%s' from '%s': %s", request, context, exc)
            return None
        if path in visited:
            return None
        visited.add(path)
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable global component source '%s': %s", path, exc)
            return None
        try:
            return path, analyzer.analyze_entry(source, collect_globals=True)
        except AnalysisError as exc:
            logger.debug("No global components read from '%s': %s", path, exc)
            return None


def _descends_into(path: Path, project_root: Path) -> bool:
    """Return True if the imports of *path* should be searched for global components."""
    return path.is_relative_to(project_root) and "node_modules" not in path.parts
