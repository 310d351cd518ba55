# ------------------------------------------------------------
# Module: xmlrows/reader/fields.py
# Purpose: Field tree for one row, stored as an arena of nodes with integer handles.
# ------------------------------------------------------------

"""Row field trees.

A row's fields form a tree of unbounded, data-dependent depth. Nodes live in a
flat list and refer to children by index, so walking or building a deep tree
never recurses.

Responsibilities
----------------
- `RowTree`: mutable arena used while a row element is open.
- `Row`: sealed, read-only arena handed to the schema unifier.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

ROOT = 0


class FieldKind(str, Enum):
    SCALAR = "scalar"
    MAP = "map"


@dataclass
class FieldNode:
    name: str
    kind: FieldKind = FieldKind.SCALAR
    value: str | None = None
    children: dict[str, int] = field(default_factory=dict)


class RowTree:
    """Arena for the row currently being assembled; handle 0 is the row element."""

    def __init__(self, tag: str):
        self.tag = tag
        self._nodes: list[FieldNode] = [FieldNode(tag, FieldKind.MAP)]
        self.attributes: dict[str, str | None] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, handle: int) -> FieldNode:
        return self._nodes[handle]

    def child(self, parent: int, name: str) -> int | None:
        return self._nodes[parent].children.get(name)

    def promote(self, handle: int) -> None:
        """Turn a pending scalar into a map; any text it had is dropped."""
        node = self._nodes[handle]
        node.kind = FieldKind.MAP
        node.value = None

    def insert(self, parent: int, name: str) -> int | None:
        """Add a pending scalar under `parent`; None if the name is already taken."""
        p = self._nodes[parent]
        if name in p.children:
            return None
        if p.kind is FieldKind.SCALAR:
            self.promote(parent)
        handle = len(self._nodes)
        self._nodes.append(FieldNode(name))
        p.children[name] = handle
        return handle

    def set_value(self, handle: int, value: str | None) -> None:
        node = self._nodes[handle]
        if node.kind is FieldKind.SCALAR:
            node.value = value

    def seal(self, ordinal: int) -> "Row":
        return Row(
            tag=self.tag,
            ordinal=ordinal,
            nodes=tuple(self._nodes),
            attributes=MappingProxyType(dict(self.attributes)),
        )


@dataclass(frozen=True)
class Row:
    """A sealed row: field arena plus the reserved attributes map."""

    tag: str
    ordinal: int
    nodes: tuple[FieldNode, ...]
    attributes: Mapping[str, str | None]

    def node(self, handle: int) -> FieldNode:
        return self.nodes[handle]

    def walk(self) -> Iterator[tuple[tuple[str, ...], int, FieldNode]]:
        """Pre-order (path, handle, node) for every field below the row, in document order."""
        stack: list[tuple[tuple[str, ...], int]] = [
            ((name,), h) for name, h in reversed(self.nodes[ROOT].children.items())
        ]
        while stack:
            path, handle = stack.pop()
            node = self.nodes[handle]
            yield path, handle, node
            if node.kind is FieldKind.MAP:
                stack.extend(
                    (path + (name,), h) for name, h in reversed(node.children.items())
                )

    def to_dict(self) -> dict[str, Any]:
        """Unpadded nested dict of the row as parsed (attributes first)."""
        out: dict[str, Any] = {"attributes": dict(self.attributes)}
        stack: list[tuple[int, dict[str, Any]]] = [(ROOT, out)]
        while stack:
            handle, target = stack.pop()
            for name, h in self.nodes[handle].children.items():
                child = self.nodes[h]
                if child.kind is FieldKind.MAP:
                    target[name] = {}
                    stack.append((h, target[name]))
                else:
                    target[name] = child.value
        return out
