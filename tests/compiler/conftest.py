# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""In-memory stand-ins for the collaborators of the build core."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path

import pytest

from mpresolve.compiler.interfaces import AnalysisError, ResolutionError
from mpresolve.compiler.session import BuildSession
from mpresolve.model.metadata import (
    CompiledTemplate,
    EntryMetadata,
    FilterSet,
    RenderOptions,
    RenderResult,
    ScriptMetadata,
)
from mpresolve.workspace.config import PLATFORMS

# ###############
# Fakes
# ###############


class FakeResolver:
    """Resolves requests from a fixed table, yielding to the event loop on every call."""

    def __init__(self, table: dict[str, Path] | None = None) -> None:
        self.table = dict(table or {})
        self.calls: list[tuple[Path, str]] = []

    async def resolve(self, context: Path, request: str) -> Path:
        self.calls.append((context, request))
        await asyncio.sleep(0)
        if request not in self.table:
            raise ResolutionError(f"Cannot resolve '{request}' from '{context}'")
        return self.table[request]


class FakeAnalyzer:
    """Looks up analysis results by the exact source text."""

    def __init__(self) -> None:
        self.scripts: dict[str, ScriptMetadata] = {}
        self.entries: dict[str, EntryMetadata] = {}
        self.filters: dict[str, FilterSet] = {}
        self.broken: set[str] = set()
        self.filter_extractions: list[str] = []

    def analyze_script(self, source: str) -> ScriptMetadata:
        if source in self.broken:
            raise AnalysisError(f"Unexpected token in '{source}'")
        return self.scripts.get(source, ScriptMetadata())

    def analyze_entry(self, source: str, *, collect_globals: bool) -> EntryMetadata:
        if source in self.broken:
            raise AnalysisError(f"Unexpected token in '{source}'")
        metadata = self.entries.get(source, EntryMetadata())
        if not collect_globals:
            return metadata.model_copy(update={"global_components": {}})
        return metadata

    def extract_filters(self, source: str) -> FilterSet | None:
        self.filter_extractions.append(source)
        return self.filters.get(source)


class FakeRenderer:
    """Renders a template as its name followed by the sorted component targets."""

    def __init__(self) -> None:
        self.calls: list[RenderOptions] = []
        self.results: dict[str, RenderResult] = {}

    def render(self, compiled: CompiledTemplate, options: RenderOptions) -> RenderResult:
        self.calls.append(options)
        if compiled in self.results:
            return self.results[compiled]
        targets = " ".join(f"{name}={target.src}" for name, target in sorted(options.components.items()))
        return RenderResult(code=f"<{compiled} {targets}>")


class RecordingSink:
    def __init__(self) -> None:
        self.files: dict[str, str] = {}
        self.emitted: list[str] = []

    def emit(self, path: str, content: str) -> None:
        self.files[path] = content
        self.emitted.append(path)


class RecordingDiagnostics:
    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.errors: list[str] = []

    def warn(self, text: str) -> None:
        self.warnings.append(text)

    def error(self, text: str) -> None:
        self.errors.append(text)


# ###############
# Fixtures
# ###############


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    root.mkdir()
    return root


@pytest.fixture
def analyzer() -> FakeAnalyzer:
    return FakeAnalyzer()


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def diagnostics() -> RecordingDiagnostics:
    return RecordingDiagnostics()


@pytest.fixture
def make_session(
    project: Path,
    analyzer: FakeAnalyzer,
    resolver: FakeResolver,
    renderer: FakeRenderer,
    sink: RecordingSink,
    diagnostics: RecordingDiagnostics,
) -> Callable[..., BuildSession]:
    """Return a factory for sessions over *project*, with ``main.js`` as the application entry."""

    def _make(platform: str = "wx", entries: dict[str, Path] | None = None, poll_interval: float | None = None):
        return BuildSession(
            project_root=project,
            platform=PLATFORMS[platform],
            entries=entries if entries is not None else {"app": project / "main.js"},
            analyzer=analyzer,
            renderer=renderer,
            resolver=resolver,
            output=sink,
            diagnostics=diagnostics,
            poll_interval=poll_interval,
        )

    return _make
