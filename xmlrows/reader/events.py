# ------------------------------------------------------------
# Module: xmlrows/reader/events.py
# Purpose: Adapt lxml iterparse into a pull iterator of start/text/end events.
# ------------------------------------------------------------

"""Streaming XML event source.

The reader core consumes any iterator of `XmlEvent`; this module provides the
lxml-backed one used in practice.

Responsibilities
----------------
- Parse XML with `lxml.etree.iterparse` without loading the whole document.
- Reduce namespace-qualified tags and attribute names to local names.
- Emit an element's text just before its end event.
- Free parsed elements on their end event to keep memory bounded.
- Turn `XMLSyntaxError` into `MalformedInputError`.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from enum import Enum
from pathlib import Path
from typing import BinaryIO, NamedTuple

from lxml import etree

from xmlrows.reader.errors import MalformedInputError

log = logging.getLogger("xmlrows.events")

XmlSource = str | Path | bytes | BinaryIO


class EventKind(str, Enum):
    START = "start"
    TEXT = "text"
    END = "end"


class XmlEvent(NamedTuple):
    kind: EventKind
    name: str = ""
    attributes: dict[str, str] | None = None
    text: str | None = None


def local_name(tag: str) -> str:
    """Return the namespace-agnostic local name of an XML tag."""
    return tag.rsplit("}", 1)[-1]


def start(name: str, attributes: dict[str, str] | None = None) -> XmlEvent:
    return XmlEvent(EventKind.START, name, attributes or {})


def text(value: str) -> XmlEvent:
    return XmlEvent(EventKind.TEXT, text=value)


def end(name: str) -> XmlEvent:
    return XmlEvent(EventKind.END, name)


def _as_parser_input(source: XmlSource):
    if isinstance(source, bytes):
        return io.BytesIO(source)
    if isinstance(source, Path):
        return str(source)
    return source


def iter_events(source: XmlSource) -> Iterator[XmlEvent]:
    """Yield start/text/end events from an XML path, bytes, or binary stream."""
    context = etree.iterparse(
        _as_parser_input(source),
        events=("start", "end"),
        remove_comments=True,
        remove_pis=True,
        resolve_entities=False,
        huge_tree=True,
    )
    try:
        for event, elem in context:
            if not isinstance(elem.tag, str):
                # entities and other non-element nodes
                continue
            name = local_name(elem.tag)
            if event == "start":
                yield XmlEvent(
                    EventKind.START,
                    name,
                    {local_name(k): v for k, v in elem.attrib.items()},
                )
                continue

            if elem.text is not None:
                yield XmlEvent(EventKind.TEXT, text=elem.text)
            yield XmlEvent(EventKind.END, name)

            # Memory cleanup on 'end' to keep streaming footprint low.
            parent = elem.getparent()
            elem.clear(keep_tail=True)
            if parent is not None:
                while elem.getprevious() is not None:
                    del parent[0]
    except etree.XMLSyntaxError as e:
        line, column = (e.position if getattr(e, "position", None) else (None, None))
        log.error("xml syntax error line=%s column=%s: %s", line, column, e.msg)
        raise MalformedInputError(f"malformed XML: {e.msg}", line=line, column=column) from e
