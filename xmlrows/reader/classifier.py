# ------------------------------------------------------------
# Module: xmlrows/reader/classifier.py
# Purpose: Classify element-start events by nesting depth.
# ------------------------------------------------------------

"""Depth classifier.

Depth counts elements from the document node: the root element is depth 1.

- depth <  data_level                   → OUTSIDE (wrapper, ignored)
- depth == data_level                   → ROW_START (or SKIPPED on row_tag mismatch)
- data_level < depth <= flatten_level   → STRUCTURAL
- depth >  flatten_level                → FLATTENED

With no `flatten_level`, everything below the row is STRUCTURAL.
"""

from __future__ import annotations

from enum import Enum

from xmlrows.reader.errors import ConfigurationError


class NodeClass(str, Enum):
    OUTSIDE = "outside"
    ROW_START = "row_start"
    SKIPPED = "skipped"
    STRUCTURAL = "structural"
    FLATTENED = "flattened"


class DepthClassifier:
    def __init__(
        self,
        data_level: int,
        flatten_level: int | None = None,
        row_tag: str | None = None,
    ):
        if data_level < 1:
            raise ConfigurationError(f"data_level must be >= 1, got {data_level}")
        if flatten_level is not None and flatten_level < data_level:
            raise ConfigurationError(
                f"flatten_level ({flatten_level}) must be >= data_level ({data_level})"
            )
        self.data_level = data_level
        self.flatten_level = flatten_level
        self.row_tag = row_tag

    def classify(self, depth: int, name: str) -> NodeClass:
        if depth < self.data_level:
            return NodeClass.OUTSIDE
        if depth == self.data_level:
            if self.row_tag is not None and name != self.row_tag:
                return NodeClass.SKIPPED
            return NodeClass.ROW_START
        if self.flatten_level is not None and depth > self.flatten_level:
            return NodeClass.FLATTENED
        return NodeClass.STRUCTURAL

    def __repr__(self) -> str:
        return (
            f"DepthClassifier(data_level={self.data_level}, "
            f"flatten_level={self.flatten_level}, row_tag={self.row_tag!r})"
        )
