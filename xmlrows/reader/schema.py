# ------------------------------------------------------------
# Module: xmlrows/reader/schema.py
# Purpose: Unify heterogeneous row shapes into one ordered, nullable schema.
# ------------------------------------------------------------

"""Schema unification across a window of rows.

`RowSchema` is append-only: each sealed row is folded in, every path it
defines is registered in first-sighting order, and per-path presence is
counted so nullability can be decided when the window closes. The frozen
`SchemaSnapshot` taken at that point pads each row to the shared shape.

Rules
-----
- Scalars are always nullable.
- A map is required only if it was present in every row of the window.
- `attributes` is always a required map; its keys are nullable scalars.
- A path's kind (scalar/map) is fixed by its first sighting. A row that
  disagrees gets None at that path and a `SchemaConflictError` record.
- Column order per map is first-sighting order.
- A requested path no row has carried is a nullable placeholder in the
  snapshot only; its first real sighting decides its kind.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from xmlrows.reader.errors import SchemaConflictError
from xmlrows.reader.fields import ROOT, FieldKind, Row
from xmlrows.reader.paths import ATTRIBUTES, ProjectionSet, format_path, parse_path

log = logging.getLogger("xmlrows.schema")

ATTRIBUTES_PATH = (ATTRIBUTES,)


@dataclass(frozen=True)
class Column:
    path: tuple[str, ...]
    kind: FieldKind
    nullable: bool = True

    @property
    def name(self) -> str:
        return self.path[-1]


def merge_column(
    existing: Column | None, path: tuple[str, ...], kind: FieldKind
) -> tuple[Column, bool]:
    """Merge one sighting into a column; returns (column, conflicted)."""
    if existing is None:
        return Column(path, kind), False
    return existing, existing.kind is not kind


class RowSchema:
    """Running, append-only schema for one window (batch or pinned stream)."""

    def __init__(self, projection: ProjectionSet | None = None):
        self._projection = projection or ProjectionSet()
        self._columns: dict[tuple[str, ...], Column] = {}
        self._children: dict[tuple[str, ...], list[str]] = {(): []}
        self._presence: Counter[tuple[str, ...]] = Counter()
        self.rows = 0
        if self._projection.wants_attributes:
            self._register(ATTRIBUTES_PATH, FieldKind.MAP)

    def __len__(self) -> int:
        return len(self._columns)

    def __contains__(self, path: tuple[str, ...]) -> bool:
        return tuple(path) in self._columns

    def _register(self, path: tuple[str, ...], kind: FieldKind) -> tuple[Column, bool]:
        existing = self._columns.get(path)
        column, conflict = merge_column(existing, path, kind)
        if existing is None:
            self._columns[path] = column
            self._children.setdefault(path[:-1], []).append(path[-1])
            if kind is FieldKind.MAP:
                self._children.setdefault(path, [])
        return column, conflict

    def fold(self, row: Row) -> tuple[dict[str, Any], list[SchemaConflictError]]:
        """Register the row's paths; return its (unpadded) record and any conflicts."""
        self.rows += 1
        record: dict[str, Any] = {}
        conflicts: list[SchemaConflictError] = []

        if self._projection.wants_attributes:
            attrs: dict[str, str | None] = {}
            for key, value in row.attributes.items():
                self._register(ATTRIBUTES_PATH + (key,), FieldKind.SCALAR)
                self._presence[ATTRIBUTES_PATH + (key,)] += 1
                attrs[key] = value
            self._presence[ATTRIBUTES_PATH] += 1
            record[ATTRIBUTES] = attrs

        stack: list[tuple[int, tuple[str, ...], dict[str, Any]]] = [(ROOT, (), record)]
        while stack:
            handle, path, target = stack.pop()
            for name, h in row.node(handle).children.items():
                node = row.node(h)
                cpath = path + (name,)
                column, conflict = self._register(cpath, node.kind)
                if conflict:
                    err = SchemaConflictError(
                        cpath, column.kind.value, node.kind.value, row.ordinal
                    )
                    log.warning("%s; value set to null", err)
                    conflicts.append(err)
                    target[name] = None
                    continue
                self._presence[cpath] += 1
                if node.kind is FieldKind.MAP:
                    target[name] = {}
                    stack.append((h, cpath, target[name]))
                else:
                    target[name] = node.value
        return record, conflicts

    def snapshot(self) -> "SchemaSnapshot":
        """Freeze the window. Requested paths no row carried yet appear as
        nullable placeholders that are not committed to the running schema."""
        kinds = {path: column.kind for path, column in self._columns.items()}
        children = {path: list(names) for path, names in self._children.items()}
        for path in self._projection.paths:
            _add_placeholder(path, kinds, children)
        columns = []
        for path in _preorder(children):
            kind = kinds[path]
            required = path == ATTRIBUTES_PATH or (
                kind is FieldKind.MAP
                and self.rows > 0
                and self._presence[path] == self.rows
            )
            columns.append(Column(path, kind, nullable=not required))
        return SchemaSnapshot(columns)


def _add_placeholder(
    path: tuple[str, ...],
    kinds: dict[tuple[str, ...], FieldKind],
    children: dict[tuple[str, ...], list[str]],
) -> None:
    for i in range(1, len(path) + 1):
        prefix = path[:i]
        existing = kinds.get(prefix)
        if existing is None:
            kind = FieldKind.SCALAR if i == len(path) else FieldKind.MAP
            kinds[prefix] = kind
            children.setdefault(prefix[:-1], []).append(prefix[-1])
            if kind is FieldKind.MAP:
                children.setdefault(prefix, [])
        elif existing is FieldKind.SCALAR:
            # a scalar cannot hold the rest of the path
            return


def _preorder(children: dict[tuple[str, ...], list[str]]) -> Iterator[tuple[str, ...]]:
    stack = [(name,) for name in reversed(children[()])]
    while stack:
        path = stack.pop()
        yield path
        stack.extend(path + (name,) for name in reversed(children.get(path, ())))


class SchemaSnapshot:
    """Frozen view of a `RowSchema`, used to pad rows to one physical shape."""

    def __init__(self, columns: list[Column] | tuple[Column, ...]):
        self.columns: tuple[Column, ...] = tuple(columns)
        self._by_path = {c.path: c for c in self.columns}
        children: dict[tuple[str, ...], list[Column]] = {(): []}
        for c in self.columns:
            children.setdefault(c.path[:-1], []).append(c)
        self._children = {k: tuple(v) for k, v in children.items()}

    def __len__(self) -> int:
        return len(self.columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self.columns)

    def __contains__(self, path: str | tuple[str, ...]) -> bool:
        return self._key(path) in self._by_path

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SchemaSnapshot) and self.columns == other.columns

    def __repr__(self) -> str:
        return f"SchemaSnapshot({', '.join(self.paths())})"

    @staticmethod
    def _key(path: str | tuple[str, ...]) -> tuple[str, ...]:
        if isinstance(path, str):
            return parse_path(path)
        return tuple(path)

    def column(self, path: str | tuple[str, ...]) -> Column:
        return self._by_path[self._key(path)]

    def children(self, path: str | tuple[str, ...] = ()) -> tuple[Column, ...]:
        return self._children.get(self._key(path) if path else (), ())

    @property
    def names(self) -> list[str]:
        """Top-level column names in output order."""
        return [c.name for c in self.children()]

    def paths(self) -> list[str]:
        return [format_path(c.path) for c in self.columns]

    def pad(self, record: Mapping[str, Any] | None) -> dict[str, Any]:
        """Shape a record to this schema: missing → None, kind mismatch → None,
        unknown keys dropped. Idempotent."""
        out: dict[str, Any] = {}
        stack: list[tuple[tuple[str, ...], Mapping[str, Any], dict[str, Any]]] = [
            ((), record if isinstance(record, Mapping) else {}, out)
        ]
        while stack:
            path, src, dst = stack.pop()
            for column in self._children.get(path, ()):
                value = src.get(column.name)
                if column.kind is FieldKind.MAP:
                    if isinstance(value, Mapping) or column.path == ATTRIBUTES_PATH:
                        dst[column.name] = {}
                        nested = value if isinstance(value, Mapping) else {}
                        stack.append((column.path, nested, dst[column.name]))
                    else:
                        dst[column.name] = None
                else:
                    dst[column.name] = None if isinstance(value, Mapping) else value
        return out

    def to_dict(self) -> list[dict[str, Any]]:
        """Nested JSON-friendly description of the columns."""

        def describe(column: Column) -> dict[str, Any]:
            entry: dict[str, Any] = {
                "name": column.name,
                "type": column.kind.value,
                "nullable": column.nullable,
            }
            if column.kind is FieldKind.MAP:
                entry["fields"] = [describe(c) for c in self.children(column.path)]
            return entry

        return [describe(c) for c in self.children()]
