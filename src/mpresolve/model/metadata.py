# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Values exchanged with the script analyzer and the template renderer."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import Field as _Field

from mpresolve.model.records import ComponentTarget, FilterDescriptor, PageType

# ###############
# Public Interface
# ###############


class ScriptMetadata(BaseModel):
    """Dependencies declared by a single-file component's script block.

    Attributes:
        imports_map: Imported binding name to the raw module request.
        components: Locally registered component name to module request.
        mixins: Mixin binding name to module request, in declaration order.
    """

    imports_map: dict[str, str] = _Field(default_factory=dict)
    components: dict[str, str] = _Field(default_factory=dict)
    mixins: dict[str, str] = _Field(default_factory=dict)


class EntryMetadata(BaseModel):
    """What an application or page entry script declares."""

    root_component: str | None = None
    global_components: dict[str, str] = _Field(default_factory=dict)
    imports_map: dict[str, str] = _Field(default_factory=dict)


class FilterSet(BaseModel):
    """Filter functions extracted from a script, name to function source, in order."""

    definitions: dict[str, str] = _Field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.definitions)


class RenderOptions(BaseModel):
    """Resolved dependencies handed to the template renderer for one unit."""

    components: dict[str, ComponentTarget] = _Field(default_factory=dict)
    page_type: PageType | None = None
    name: str
    module_id: str | None = None
    filters: FilterDescriptor | None = None


class RenderResult(BaseModel):
    """Output of rendering one template.

    Attributes:
        code: Generated markup.
        errors: Template errors, reported but not fatal.
        tips: Template warnings.
        slots: Slot templates hoisted out of the markup, keyed by slot name.
        import_code: Import statements the hoisted slots need.
    """

    code: str
    errors: list[str] = _Field(default_factory=list)
    tips: list[str] = _Field(default_factory=list)
    slots: dict[str, str] = _Field(default_factory=dict)
    import_code: str = ""


# Compiled templates are opaque to the core and passed through untouched.
CompiledTemplate = Any
