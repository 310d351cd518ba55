# ------------------------------------------------------------
# Module: xmlrows/reader/batch.py
# Purpose: Output batches and reader diagnostics.
# ------------------------------------------------------------

"""Typed containers handed to the consumer.

Responsibilities
----------------
- `RecordBatch`: one schema snapshot plus rows padded to that schema.
- `ReaderDiagnostics`: counters for everything the reader absorbs instead of
  failing (conflicts, ignored duplicates, skipped elements...).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from xmlrows.reader.errors import SchemaConflictError
from xmlrows.reader.paths import parse_path
from xmlrows.reader.schema import SchemaSnapshot


@dataclass(frozen=True)
class RecordBatch:
    schema: SchemaSnapshot
    rows: list[dict[str, Any]]
    index: int = 0

    def __len__(self) -> int:
        return len(self.rows)

    def column(self, path: str | tuple[str, ...]) -> list[Any]:
        """Values at a dotted path, one per row (None where any level is null)."""
        segments = parse_path(path) if isinstance(path, str) else tuple(path)
        out = []
        for row in self.rows:
            value: Any = row
            for seg in segments:
                value = value.get(seg) if isinstance(value, Mapping) else None
            out.append(value)
        return out


@dataclass
class ReaderDiagnostics:
    rows_emitted: int = 0
    batches_emitted: int = 0
    events_consumed: int = 0
    schema_conflicts: int = 0
    conflicts: list[SchemaConflictError] = field(default_factory=list)
    duplicate_fields: int = 0
    duplicate_attributes: int = 0
    flatten_collisions: int = 0
    reserved_collisions: int = 0
    skipped_elements: int = 0
    # rows opened but never sealed because the input broke off
    rows_discarded: int = 0
    limit_reached: bool = False

    def record_conflict(self, err: SchemaConflictError, keep: int) -> None:
        self.schema_conflicts += 1
        if len(self.conflicts) < keep:
            self.conflicts.append(err)

    def as_dict(self) -> dict[str, Any]:
        return {
            "rows_emitted": self.rows_emitted,
            "batches_emitted": self.batches_emitted,
            "events_consumed": self.events_consumed,
            "schema_conflicts": self.schema_conflicts,
            "duplicate_fields": self.duplicate_fields,
            "duplicate_attributes": self.duplicate_attributes,
            "flatten_collisions": self.flatten_collisions,
            "reserved_collisions": self.reserved_collisions,
            "skipped_elements": self.skipped_elements,
            "rows_discarded": self.rows_discarded,
            "limit_reached": self.limit_reached,
        }
