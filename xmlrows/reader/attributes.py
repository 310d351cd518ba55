# ------------------------------------------------------------
# Module: xmlrows/reader/attributes.py
# Purpose: Collect XML attributes into a row's reserved `attributes` map.
# ------------------------------------------------------------

"""Attribute collector.

Row-element attributes keep their raw names. With `attribute_scope="all"`,
attributes of elements inside the row are captured too, prefixed by the
element's row-relative path joined with `_` (`<title binding="x">` →
`title_binding`). The first value captured for a key wins.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from xmlrows.reader.batch import ReaderDiagnostics
from xmlrows.reader.fields import RowTree
from xmlrows.reader.paths import ProjectionSet

log = logging.getLogger("xmlrows.attributes")


class AttributeCollector:
    def __init__(
        self, scope: str, projection: ProjectionSet, diagnostics: ReaderDiagnostics
    ):
        self.scope = scope
        self._projection = projection
        self._enabled = projection.wants_attributes
        self._diagnostics = diagnostics

    def collect_row(self, tree: RowTree, attributes: Mapping[str, str] | None) -> None:
        if attributes:
            self._put_all(tree, "", attributes)

    def collect_nested(
        self, tree: RowTree, prefix: str, attributes: Mapping[str, str] | None
    ) -> None:
        if attributes and self.scope == "all":
            self._put_all(tree, f"{prefix}_", attributes)

    def _put_all(self, tree: RowTree, prefix: str, attributes: Mapping[str, str]) -> None:
        if not self._enabled:
            return
        for name, value in attributes.items():
            key = prefix + name
            if not self._projection.admits_attribute(key):
                continue
            if key in tree.attributes:
                self._diagnostics.duplicate_attributes += 1
                log.debug("duplicate attribute key=%s row=%s; keeping first", key, tree.tag)
                continue
            tree.attributes[key] = value
