# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""The last component-resolution and markup-generation call of every unit.

When the global component registry changes, units that were merged against
an older registry version are brought up to date by re-running these calls
with their original arguments; the units themselves are not recompiled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mpresolve.model.metadata import CompiledTemplate
from mpresolve.model.records import ComponentTarget, UnitTarget

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ComponentCall:
    """Arguments of the final merge step of a unit's component resolution."""

    resource_path: Path
    target: UnitTarget
    import_map: dict[str, str]
    local_components: dict[str, ComponentTarget]
    module_id: str | None


@dataclass(frozen=True)
class MarkupCall:
    """Arguments of a unit's markup generation."""

    resource_path: Path
    compiled: CompiledTemplate


@dataclass
class ReplayLog:
    """Most recent :class:`ComponentCall` and :class:`MarkupCall` per unit, in first-seen order."""

    components: dict[str, ComponentCall] = field(default_factory=dict)
    markup: dict[str, MarkupCall] = field(default_factory=dict)

    def record_components(self, unit_id: str, call: ComponentCall) -> None:
        self.components[unit_id] = call

    def record_markup(self, unit_id: str, call: MarkupCall) -> None:
        self.markup[unit_id] = call
