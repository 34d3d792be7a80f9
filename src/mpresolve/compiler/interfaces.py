# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Contracts of the collaborators the build core relies on, and its error types.

The core never parses scripts, resolves module requests, compiles templates
or touches the output directory itself.  The host supplies objects that
satisfy the protocols below; :mod:`mpresolve.compiler.resolver` and
:mod:`mpresolve.compiler.sinks` provide simple default implementations for
the last three.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from mpresolve.model.metadata import (
    CompiledTemplate,
    EntryMetadata,
    FilterSet,
    RenderOptions,
    RenderResult,
    ScriptMetadata,
)

# ###############
# Public Interface
# ###############


class BuildError(Exception):
    """Base class for errors raised by the build core."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ResolutionError(BuildError):
    """Raised when a component, mixin or global source request cannot be mapped to a file.

    The core skips the single offending reference and carries on.
    """


class AnalysisError(BuildError):
    """Raised by a script analyzer when a script cannot be analyzed."""


class ScriptAnalyzer(Protocol):
    """Extracts dependency declarations from script source text."""

    def analyze_script(self, source: str) -> ScriptMetadata: ...

    def analyze_entry(self, source: str, *, collect_globals: bool) -> EntryMetadata: ...

    def extract_filters(self, source: str) -> FilterSet | None: ...


class ModuleResolver(Protocol):
    """Maps a module request, relative to a context directory, to an absolute file."""

    async def resolve(self, context: Path, request: str) -> Path: ...


class TemplateRenderer(Protocol):
    """Turns a compiled template plus resolved dependencies into target markup."""

    def render(self, compiled: CompiledTemplate, options: RenderOptions) -> RenderResult: ...


class OutputSink(Protocol):
    """Receives generated files.  Writing the same path twice overwrites it."""

    def emit(self, path: str, content: str) -> None: ...


class DiagnosticsSink(Protocol):
    """Non-fatal reporting channel for the host."""

    def warn(self, text: str) -> None: ...

    def error(self, text: str) -> None: ...
