# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Keyed table holding one :class:`~mpresolve.model.records.FileRecord` per compiled unit."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from mpresolve.model.records import FileRecord

# ###############
# Public Interface
# ###############


class FileRecordStore:
    """Build-wide record table with merge-on-write semantics.

    Records are immutable snapshots: every write replaces the stored record
    with a copy carrying the updated fields, so a reader never observes a
    partially updated record.

    Args:
        on_change: Called after every write, typically
            :meth:`~mpresolve.compiler.readiness.ReadinessGate.notify`.
    """

    def __init__(self, on_change: Callable[[], None] | None = None) -> None:
        self._records: dict[str, FileRecord] = {}
        self._on_change = on_change

    def upsert(self, unit_id: str, **fields: Any) -> FileRecord:
        """Merge *fields* into the record of *unit_id*, creating it if absent.

        Fields not named are preserved.  Returns the new record.
        """
        current = self._records.get(unit_id)
        if current is None:
            record = FileRecord(**fields)
        else:
            record = current.model_copy(update=fields)
        self._records[unit_id] = record
        if self._on_change is not None:
            self._on_change()
        return record

    def get(self, unit_id: str) -> FileRecord | None:
        """Return the current record of *unit_id*, or ``None`` if there is none."""
        return self._records.get(unit_id)

    def mark_failed(self, unit_id: str, message: str, **fields: Any) -> FileRecord:
        """Record that analysis of *unit_id* failed so waiters stop waiting."""
        return self.upsert(unit_id, error=message, **fields)

    def units(self) -> list[str]:
        """Return the ids of all recorded units, in insertion order."""
        return list(self._records)

    def __contains__(self, unit_id: object) -> bool:
        return unit_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._records))
