# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Incremental resolution of component and filter dependencies across units.

A :class:`BuildSession` is created once per host process (or per watch
session) and receives one call per unit per compile pass, in any order and
concurrently:

* :meth:`BuildSession.compile_entry` for application and page entry scripts.
  The application entry rebuilds the global component registry; a page entry
  generates the page file wrapping its root component.
* :meth:`BuildSession.compile_script` for a component's script.  Two
  independent forks resolve the unit's components and its filters and write
  both into the unit's record.
* :meth:`BuildSession.compile_markup` for a component's compiled template.
  It waits until the unit's record is complete, then renders and emits markup.

No call waits for another call directly.  Consumers wait on the session's
:class:`~mpresolve.compiler.readiness.ReadinessGate` for a condition over the
record store and the registry, so the outcome does not depend on the order in
which the host issues calls.

When a rebuild of the registry changes it, every unit whose components were
merged against an older registry version has its last component merge and
markup generation replayed; the unit itself is not recompiled.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from mpresolve.compiler.components import in_context, resolve_components
from mpresolve.compiler.interfaces import (
    AnalysisError,
    BuildError,
    DiagnosticsSink,
    ModuleResolver,
    OutputSink,
    ResolutionError,
    ScriptAnalyzer,
    TemplateRenderer,
)
from mpresolve.compiler.mixins import MixinFilterCache, MixinFilters, combine_filters, render_filter_module
from mpresolve.compiler.paths import component_output, filter_output, relative_module_path, resolve_target
from mpresolve.compiler.readiness import ReadinessGate
from mpresolve.compiler.registry import GlobalComponentRegistry
from mpresolve.compiler.replay import ComponentCall, MarkupCall, ReplayLog
from mpresolve.compiler.resolver import FileSystemResolver
from mpresolve.compiler.sinks import DirectoryOutputSink, LoggingDiagnostics
from mpresolve.compiler.store import FileRecordStore
from mpresolve.compiler.templates import SlotCollector, page_markup, slots_target
from mpresolve.model.metadata import CompiledTemplate, EntryMetadata, FilterSet, RenderOptions, ScriptMetadata
from mpresolve.model.records import ComponentMap, ComponentTarget, FileRecord, FilterDescriptor, UnitTarget
from mpresolve.workspace.config import BuildConfig, TargetPlatform

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class BuildSession:
    """Owns all build state shared between units and drives their resolution.

    Args:
        project_root: Root that output paths are computed against.
        platform: Target platform conventions.
        entries: Entry output name to entry source file.
        analyzer: Extracts dependency declarations from scripts.
        renderer: Renders compiled templates to markup.
        resolver: Maps module requests to files.
        output: Receives generated files.
        diagnostics: Receives template errors and warnings.
        poll_interval: Optional fixed re-check interval for waiting units, in seconds.
    """

    def __init__(
        self,
        *,
        project_root: Path,
        platform: TargetPlatform,
        entries: dict[str, Path],
        analyzer: ScriptAnalyzer,
        renderer: TemplateRenderer,
        resolver: ModuleResolver,
        output: OutputSink,
        diagnostics: DiagnosticsSink,
        poll_interval: float | None = None,
    ) -> None:
        self.project_root = project_root
        self.platform = platform
        self.entries = dict(entries)
        self.analyzer = analyzer
        self.renderer = renderer
        self.resolver = resolver
        self.output = output
        self.diagnostics = diagnostics

        self.gate = ReadinessGate(poll_interval)
        self.store = FileRecordStore(on_change=self.gate.notify)
        self.registry = GlobalComponentRegistry(on_change=self.gate.notify)
        self.mixins = MixinFilterCache()
        self.replay = ReplayLog()
        self.slots = SlotCollector()
        self._markup_passes: dict[str, int] = {}

    @classmethod
    def from_config(
        cls,
        config: BuildConfig,
        *,
        analyzer: ScriptAnalyzer,
        renderer: TemplateRenderer,
        resolver: ModuleResolver | None = None,
        output: OutputSink | None = None,
        diagnostics: DiagnosticsSink | None = None,
    ) -> BuildSession:
        """Create a session from a loaded build configuration.

        Collaborators not given default to a :class:`FileSystemResolver` using
        the configured aliases, a :class:`DirectoryOutputSink` writing to the
        output directory, and :class:`LoggingDiagnostics`.
        """
        return cls(
            project_root=config.project_root,
            platform=config.platform,
            entries=config.entries,
            analyzer=analyzer,
            renderer=renderer,
            resolver=resolver or FileSystemResolver(config.aliases),
            output=output or DirectoryOutputSink(config.output_directory),
            diagnostics=diagnostics or LoggingDiagnostics(),
            poll_interval=config.poll_interval,
        )

    def record(self, resource_path: Path) -> FileRecord | None:
        """Return the current record of the unit compiled from *resource_path*."""
        return self.store.get(_unit_id(resource_path))

    async def compile_entry(self, resource_path: Path, source: str) -> None:
        """Process an application or page entry script.

        For the application entry the global component registry is rebuilt,
        and units merged against the previous registry are brought up to date
        if it changed.  For a page entry with a root component the page
        markup is generated.

        Raises:
            AnalysisError: If the entry script cannot be analyzed.  The
                registry is left as it was.
        """
        target = resolve_target(resource_path, self.entries)
        self.store.upsert(_unit_id(resource_path), page_type=target.page_type, src=target.src)
        metadata = self.analyzer.analyze_entry(source, collect_globals=target.is_app)

        pending = []
        if target.is_app:
            self.registry.begin_rebuild()
            pending.append(self._rebuild_registry(resource_path, metadata))
        if target.is_page and metadata.root_component:
            pending.append(self._create_page_markup(resource_path, target, metadata.root_component))
        await asyncio.gather(*pending)

    async def compile_script(self, resource_path: Path, source: str, module_id: str | None = None) -> None:
        """Resolve the components and filters a unit's script depends on.

        Returns once both are written to the unit's record.  References that
        cannot be resolved are logged and left out.

        Raises:
            BuildError: If the script cannot be analyzed or the unit lies
                outside the project root.  The unit's record is marked failed,
                so :meth:`compile_markup` for it fails instead of waiting.
        """
        unit_id = _unit_id(resource_path)
        target = resolve_target(resource_path, self.entries)
        previous = self.store.get(unit_id)
        script_pass = (previous.script_pass if previous is not None else 0) + 1
        try:
            metadata = self.analyzer.analyze_script(source)
            self.store.upsert(
                unit_id,
                page_type=target.page_type,
                src=target.src,
                module_id=module_id,
                components=None,
                filters=None,
                script_pass=script_pass,
                error=None,
            )
            await asyncio.gather(
                self._component_fork(resource_path, target, metadata, module_id),
                self._filter_fork(resource_path, source, metadata),
            )
        except BuildError as exc:
            self.store.mark_failed(unit_id, str(exc), script_pass=script_pass)
            raise

    async def compile_markup(self, resource_path: Path, compiled: CompiledTemplate) -> None:
        """Render and emit a unit's markup once its dependencies are resolved.

        The n-th markup call of a unit is paired with its n-th script
        compilation: a failure left by an earlier script compilation does not
        fail it, it waits for the paired compilation instead.  :meth:`seal`
        realigns the counts at the end of every compile pass.

        Raises:
            BuildError: If resolving the unit's dependencies failed.
        """
        unit_id = _unit_id(resource_path)
        markup_pass = self._markup_passes.get(unit_id, 0) + 1
        self._markup_passes[unit_id] = markup_pass
        call = MarkupCall(resource_path=resource_path, compiled=compiled)
        self.replay.record_markup(unit_id, call)
        await self._generate_markup(call, script_pass=markup_pass)

    def seal(self) -> None:
        """Finish a compile pass: write the slot templates collected from all units.

        Markup calls still waiting on a failed unit whose script was not
        compiled again in this pass are released with that failure.
        """
        content = self.slots.render()
        if content:
            self.output.emit(self.slots.output_path(self.platform), content)
        for unit_id in self.store:
            record = self.store.get(unit_id)
            passes = max(record.script_pass, self._markup_passes.get(unit_id, 0))
            self._markup_passes[unit_id] = passes
            if record.script_pass < passes:
                self.store.upsert(unit_id, script_pass=passes)

    async def invalidate(self) -> list[str]:
        """Bring every unit merged against an older registry version up to date.

        Replays the last component merge of each stale unit, then its last
        markup generation.  Failed units and units whose script is being
        compiled again are left out; a markup generation that fails is logged
        and the remaining units are still replayed.

        Returns:
            The ids of the replayed units, in the order they were first seen.
        """
        stale = []
        for unit_id in self.replay.components:
            record = self.store.get(unit_id)
            if record is None or record.registry_version == self.registry.version:
                continue
            if record.is_failed or record.components is None:
                logger.debug("Not replaying '%s': %s", unit_id, record.error or "script compilation in progress")
                continue
            stale.append(unit_id)
        logger.info("Replaying %d unit(s) after global component change", len(stale))
        for unit_id in stale:
            self._merge_components(self.replay.components[unit_id])
        for unit_id in stale:
            call = self.replay.markup.get(unit_id)
            if call is not None:
                await self._replay_markup(call)
        return stale

    # ################
    # Implementation
    # ################

    async def _rebuild_registry(self, resource_path: Path, metadata: EntryMetadata) -> None:
        snapshot = await self.registry.resolve_global_sources(
            metadata.global_components,
            metadata.imports_map,
            context=resource_path.parent,
            project_root=self.project_root,
            resolver=self.resolver,
            analyzer=self.analyzer,
            locate=self._locate_component,
        )
        is_rebuild = self.registry.previous is not None
        changed = self.registry.commit(snapshot)
        if changed and is_rebuild:
            await self.invalidate()

    async def _component_fork(
        self,
        resource_path: Path,
        target: UnitTarget,
        metadata: ScriptMetadata,
        module_id: str | None,
    ) -> None:
        local = await resolve_components(
            in_context(resource_path.parent, metadata.components), self.resolver, self._locate_component
        )
        await self.gate.wait(lambda: self.registry.is_ready)
        self._merge_components(
            ComponentCall(
                resource_path=resource_path,
                target=target,
                import_map=metadata.imports_map,
                local_components=local,
                module_id=module_id,
            )
        )

    def _merge_components(self, call: ComponentCall) -> None:
        """Overlay a unit's local components on the current global snapshot and store the result."""
        unit_id = _unit_id(call.resource_path)
        self.replay.record_components(unit_id, call)
        self.store.upsert(
            unit_id,
            page_type=call.target.page_type,
            src=call.target.src,
            module_id=call.module_id,
            import_map=call.import_map,
            components=ComponentMap.merged(self.registry.snapshot, call.local_components),
            registry_version=self.registry.version,
        )

    async def _filter_fork(self, resource_path: Path, source: str, metadata: ScriptMetadata) -> None:
        inherited = await self._resolve_mixin_filters(resource_path, metadata.mixins)
        local = self.analyzer.extract_filters(source)
        own = filter_output(self.project_root, resource_path, self.platform)
        mixins = [
            MixinFilters(
                path=path,
                import_path=relative_module_path(
                    own.file_path, filter_output(self.project_root, path, self.platform).file_path
                ),
                filters=filters,
            )
            for path, filters in inherited
        ]
        code = combine_filters(local, mixins, esm=self.platform.esm_filters)
        unit_id = _unit_id(resource_path)
        if code is None:
            self.store.upsert(unit_id, filters=FilterDescriptor(completed=True))
            return
        self.output.emit(own.file_path, code)
        markup = component_output(self.project_root, resource_path, self.platform)
        self.store.upsert(
            unit_id,
            filters=FilterDescriptor(
                output_path=relative_module_path(markup.file_path, own.file_path),
                export_name=own.name,
                completed=True,
            ),
        )

    async def _resolve_mixin_filters(self, resource_path: Path, mixins: dict[str, str]) -> list[tuple[Path, FilterSet]]:
        """Return the filters of every resolvable mixin, in declaration order, each path once."""
        paths = await asyncio.gather(
            *(self._resolve_mixin(resource_path.parent, name, request) for name, request in mixins.items())
        )
        inherited: list[tuple[Path, FilterSet]] = []
        seen: set[Path] = set()
        for path in paths:
            if path is None or path in seen:
                continue
            seen.add(path)
            try:
                location = filter_output(self.project_root, path, self.platform)
                filters, extracted = self.mixins.extract_once(path, self._read_filters)
            except (ResolutionError, AnalysisError, OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping filters of mixin '%s': %s", path, exc)
                continue
            if filters is None:
                continue
            if extracted:
                self.output.emit(
                    location.file_path, render_filter_module(filters.definitions, esm=self.platform.esm_filters)
                )
            inherited.append((path, filters))
        return inherited

    async def _resolve_mixin(self, context: Path, name: str, request: str) -> Path | None:
        try:
            return await self.resolver.resolve(context, request)
        except (ResolutionError, OSError) as exc:
            logger.warning("Skipping mixin '%s' ('%s' from '%s'): %s", name, request, context, exc)
            return None

    def _read_filters(self, path: Path) -> FilterSet | None:
        return self.analyzer.extract_filters(path.read_text(encoding="utf-8"))

    async def _generate_markup(self, call: MarkupCall, script_pass: int = 0) -> None:
        unit_id = _unit_id(call.resource_path)
        await self.gate.wait(lambda: _is_settled(self.store.get(unit_id), script_pass))
        record = self.store.get(unit_id)
        if record is None or record.is_failed or record.components is None or record.filters is None:
            reason = (record.error if record is not None else None) or "dependencies unresolved"
            raise BuildError(f"Cannot generate markup for '{call.resource_path}': {reason}")

        location = component_output(self.project_root, call.resource_path, self.platform)
        components = dict(record.components.entries)
        components["slots"] = slots_target(self.platform)
        options = RenderOptions(
            components=components,
            page_type=record.page_type,
            name=location.name,
            module_id=record.module_id,
            filters=record.filters if record.filters.has_filters else None,
        )
        result = self.renderer.render(call.compiled, options)
        self.slots.add(result.slots, result.import_code)

        if result.errors:
            self.diagnostics.error(
                "\n  Error compiling template:\n" + "\n".join(f" - {e}" for e in result.errors) + "\n"
            )
        if result.tips:
            self.diagnostics.warn("\n".join(f" - {t}" for t in result.tips) + "\n")

        if self.platform.merges_page_markup and record.page_file_path is not None:
            self.output.emit(record.page_file_path, f"{result.code}\n{record.markup_snapshot}")
        else:
            self.output.emit(location.file_path, result.code)

    async def _replay_markup(self, call: MarkupCall) -> None:
        try:
            await self._generate_markup(call)
        except BuildError as exc:
            logger.warning("Skipping markup replay of '%s': %s", call.resource_path, exc)

    async def _create_page_markup(self, resource_path: Path, target: UnitTarget, root_request: str) -> None:
        try:
            root = await self.resolver.resolve(resource_path.parent, root_request)
            location = component_output(self.project_root, root, self.platform)
        except (ResolutionError, OSError) as exc:
            logger.warning("Skipping page markup of '%s': root component '%s': %s", resource_path, root_request, exc)
            return
        page_file = f"{target.src}.{self.platform.template_extension}"
        content = page_markup(location.name, location.absolute)
        if not self.platform.merges_page_markup:
            self.output.emit(page_file, content)
            return

        # The page's markup goes into the page file together with the root
        # component's markup; regenerate it if the root was already rendered.
        root_id = _unit_id(root)
        self.store.upsert(root_id, page_file_path=page_file, markup_snapshot=content)
        call = self.replay.markup.get(root_id)
        if call is not None:
            await self._replay_markup(call)

    def _locate_component(self, path: Path) -> ComponentTarget:
        location = component_output(self.project_root, path, self.platform)
        return ComponentTarget(src=location.absolute, name=location.name)


def _unit_id(resource_path: Path) -> str:
    return str(resource_path)


def _is_settled(record: FileRecord | None, script_pass: int) -> bool:
    """Return True once *record* is ready for markup generation or has failed.

    A failure only counts once the unit's script has been compiled at least
    *script_pass* times.
    """
    if record is None:
        return False
    if record.is_failed:
        return record.script_pass >= script_pass
    return record.is_ready
