# ------------------------------------------------------------
# Module: xmlrows/reader/builder.py
# Purpose: Assemble one row's field tree from the events between a row start and its end.
# ------------------------------------------------------------

"""Row tree builder.

Keeps a stack of frames mirroring the elements open inside the current row.
Each frame points at an arena handle in the row's `RowTree`, or is a skip
frame whose subtree is drained without being materialized.

Rules
-----
- A child element under a pending scalar promotes it to a map (children win
  over text).
- A repeated name under the same parent keeps the first occurrence; the
  repeat's subtree is skipped and counted.
- Scalar text is stripped; empty or whitespace-only text becomes None.
- Flattened leaves land directly under the row, named by their own tag, with
  collisions resolved by `flatten_collision`.
- Subtrees outside the projection are not materialized; flattened leaves
  inside them still surface if their own column is requested, and so do
  their attributes under `attribute_scope="all"`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from xmlrows.reader.attributes import AttributeCollector
from xmlrows.reader.batch import ReaderDiagnostics
from xmlrows.reader.classifier import NodeClass
from xmlrows.reader.fields import ROOT, FieldKind, Row, RowTree
from xmlrows.reader.options import ReaderOptions
from xmlrows.reader.paths import ATTRIBUTES

log = logging.getLogger("xmlrows.builder")

# frame handles below zero: drained and ignored / outside the projection
# (flattened leaves below still surface) / a flattened element
SKIP = -1
PRUNED = -2
FLAT = -3


@dataclass
class _Frame:
    handle: int
    path: tuple[str, ...]
    flattened: bool = False
    has_children: bool = False
    text: list[str] = field(default_factory=list)


def _clean(parts: list[str]) -> str | None:
    value = "".join(parts).strip()
    return value or None


class RowBuilder:
    def __init__(self, options: ReaderOptions, diagnostics: ReaderDiagnostics):
        self._projection = options.projection
        self._collision = options.flatten_collision
        self._diagnostics = diagnostics
        self._attributes = AttributeCollector(
            options.attribute_scope, options.projection, diagnostics
        )
        self._tree: RowTree | None = None
        self._stack: list[_Frame] = []
        self._sealed = 0

    @property
    def active(self) -> bool:
        return self._tree is not None

    def start_row(self, name: str, attributes: Mapping[str, str] | None = None) -> None:
        self._tree = RowTree(name)
        self._stack = [_Frame(ROOT, ())]
        self._attributes.collect_row(self._tree, attributes)

    def start_child(
        self,
        name: str,
        attributes: Mapping[str, str] | None,
        node_class: NodeClass,
    ) -> None:
        tree = self._tree
        parent = self._stack[-1]
        parent.has_children = True
        if parent.handle == SKIP:
            self._stack.append(_Frame(SKIP, parent.path + (name,)))
            return

        if node_class is NodeClass.FLATTENED:
            if parent.handle >= 0:
                tree.promote(parent.handle)
            self._attributes.collect_nested(tree, name, attributes)
            self._stack.append(_Frame(FLAT, (name,), flattened=True))
            return

        path = parent.path + (name,)
        if parent.handle == PRUNED:
            self._attributes.collect_nested(tree, "_".join(path), attributes)
            self._stack.append(_Frame(PRUNED, path))
            return
        if path == (ATTRIBUTES,):
            self._diagnostics.reserved_collisions += 1
            log.debug("element <%s> collides with reserved field; ignored", name)
            self._stack.append(_Frame(SKIP, path))
            return
        if not self._projection.admits(path):
            tree.promote(parent.handle)
            self._attributes.collect_nested(tree, "_".join(path), attributes)
            self._stack.append(_Frame(PRUNED, path))
            return

        handle = tree.insert(parent.handle, name)
        if handle is None:
            self._diagnostics.duplicate_fields += 1
            log.debug("repeated field '%s' in row %s; keeping first", ".".join(path), self._sealed)
            self._stack.append(_Frame(SKIP, path))
            return
        self._attributes.collect_nested(tree, "_".join(path), attributes)
        self._stack.append(_Frame(handle, path))

    def text(self, value: str) -> None:
        frame = self._stack[-1]
        if frame.handle >= 0 or frame.flattened:
            frame.text.append(value)

    def end(self) -> Row | None:
        """Close the innermost open element; returns the sealed row on the row's own end."""
        frame = self._stack.pop()
        tree = self._tree
        if not self._stack:
            row = tree.seal(self._sealed)
            self._sealed += 1
            self._tree = None
            return row
        if frame.flattened:
            if not frame.has_children:
                self._put_flattened(frame.path[0], _clean(frame.text))
        elif frame.handle >= 0 and tree.node(frame.handle).kind is FieldKind.SCALAR:
            tree.set_value(frame.handle, _clean(frame.text))
        return None

    def abandon(self) -> bool:
        """Drop a half-built row (input broke off); True if one was open."""
        was_open = self._tree is not None
        self._tree = None
        self._stack = []
        return was_open

    def _put_flattened(self, name: str, value: str | None) -> None:
        tree = self._tree
        if name == ATTRIBUTES:
            self._diagnostics.reserved_collisions += 1
            return
        if not self._projection.admits((name,)):
            return
        existing = tree.child(ROOT, name)
        if existing is None:
            tree.set_value(tree.insert(ROOT, name), value)
            return

        self._diagnostics.flatten_collisions += 1
        if tree.node(existing).kind is FieldKind.MAP:
            log.debug("flattened leaf '%s' collides with a nested field; ignored", name)
        elif self._collision == "last":
            tree.set_value(existing, value)
        elif self._collision == "number":
            n = 2
            while tree.child(ROOT, f"{name}_{n}") is not None:
                n += 1
            numbered = f"{name}_{n}"
            if self._projection.admits((numbered,)):
                tree.set_value(tree.insert(ROOT, numbered), value)
