# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-unit build records and the values stored in them."""

from __future__ import annotations

import enum

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class PageType(enum.Enum):
    """Role of a compiled unit within the application."""

    APP = "app"
    PAGE = "page"
    COMPONENT = "component"


class UnitTarget(BaseModel):
    """Classification of a unit against the host's entry table.

    Attributes:
        page_type: Role of the unit.
        src: Output name of the entry (e.g. ``"pages/index/main"``) for
            application and page entries, ``None`` for plain components.
    """

    page_type: PageType
    src: str | None = None

    @property
    def is_app(self) -> bool:
        return self.page_type is PageType.APP

    @property
    def is_page(self) -> bool:
        return self.page_type is PageType.PAGE


class ComponentTarget(BaseModel):
    """Where a resolved component's markup lives and the template name it exports."""

    src: str
    name: str


class ComponentMap(BaseModel):
    """Components usable from a unit's template, keyed by normalized local name."""

    entries: dict[str, ComponentTarget] = _Field(default_factory=dict)
    completed: bool = False

    @classmethod
    def merged(cls, base: ComponentMap | None, overlay: dict[str, ComponentTarget]) -> ComponentMap:
        """Overlay *overlay* on top of *base* and mark the result completed.

        Keys present in both take the overlay's value.
        """
        entries = dict(base.entries) if base is not None else {}
        entries.update(overlay)
        return cls(entries=entries, completed=True)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __getitem__(self, name: str) -> ComponentTarget:
        return self.entries[name]


class FilterDescriptor(BaseModel):
    """Location and module name of the merged filter module emitted for a unit.

    A completed descriptor without an ``output_path`` records that the unit
    has no filters at all.
    """

    output_path: str | None = None
    export_name: str | None = None
    completed: bool = False

    @property
    def has_filters(self) -> bool:
        return self.output_path is not None


class FileRecord(BaseModel):
    """Everything the build knows about one compiled unit.

    ``components`` and ``filters`` are ``None`` while their resolution is
    pending.  A record is ready for markup generation once the unit has been
    classified and both values are completed.  ``script_pass`` counts the
    script compilations started for the unit.
    """

    page_type: PageType | None = None
    src: str | None = None
    module_id: str | None = None
    import_map: dict[str, str] = _Field(default_factory=dict)
    components: ComponentMap | None = None
    filters: FilterDescriptor | None = None
    page_file_path: str | None = None
    markup_snapshot: str | None = None
    registry_version: int | None = None
    script_pass: int = 0
    error: str | None = None

    @property
    def is_ready(self) -> bool:
        return (
            self.page_type is not None
            and self.components is not None
            and self.components.completed
            and self.filters is not None
            and self.filters.completed
        )

    @property
    def is_failed(self) -> bool:
        return self.error is not None
