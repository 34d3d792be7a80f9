# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model for unit records, resolved dependencies and collaborator payloads."""

from mpresolve.model.metadata import (
    CompiledTemplate,
    EntryMetadata,
    FilterSet,
    RenderOptions,
    RenderResult,
    ScriptMetadata,
)
from mpresolve.model.records import (
    ComponentMap,
    ComponentTarget,
    FileRecord,
    FilterDescriptor,
    PageType,
    UnitTarget,
)

__all__ = [
    # Records
    "PageType",
    "UnitTarget",
    "ComponentTarget",
    "ComponentMap",
    "FilterDescriptor",
    "FileRecord",
    # Collaborator payloads
    "ScriptMetadata",
    "EntryMetadata",
    "FilterSet",
    "RenderOptions",
    "RenderResult",
    "CompiledTemplate",
]
