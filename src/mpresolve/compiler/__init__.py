# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Incremental component and filter resolution for compiled units."""

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
from mpresolve.compiler.mixins import MixinFilterCache, combine_filters
from mpresolve.compiler.paths import normalize_component_name, resolve_target
from mpresolve.compiler.readiness import ReadinessGate
from mpresolve.compiler.registry import GlobalComponentRegistry, RegistryState
from mpresolve.compiler.replay import ComponentCall, MarkupCall, ReplayLog
from mpresolve.compiler.resolver import FileSystemResolver
from mpresolve.compiler.session import BuildSession
from mpresolve.compiler.sinks import DirectoryOutputSink, LoggingDiagnostics
from mpresolve.compiler.store import FileRecordStore

__all__ = [
    "BuildSession",
    "FileRecordStore",
    "ReadinessGate",
    "GlobalComponentRegistry",
    "RegistryState",
    "MixinFilterCache",
    "combine_filters",
    "ReplayLog",
    "ComponentCall",
    "MarkupCall",
    "normalize_component_name",
    "resolve_target",
    # Collaborators
    "ScriptAnalyzer",
    "ModuleResolver",
    "TemplateRenderer",
    "OutputSink",
    "DiagnosticsSink",
    "FileSystemResolver",
    "DirectoryOutputSink",
    "LoggingDiagnostics",
    # Errors
    "BuildError",
    "ResolutionError",
    "AnalysisError",
]
