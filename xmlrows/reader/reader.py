# ------------------------------------------------------------
# Module: xmlrows/reader/reader.py
# Purpose: Pull XML events, assemble rows, unify schemas, and emit fixed-shape batches.
# ------------------------------------------------------------

"""Depth-aware XML row reader.

The reader is pull-driven: each `next_batch()` call drains events from the
source with explicit `next()` calls until the batch is full, the row limit is
reached, or the source runs dry. Nothing happens between calls, so a caller
cancels by simply not pulling again (or calling `close()`).

Responsibilities
----------------
- Track nesting depth and classify every element start.
- Feed the `RowBuilder`; fold each sealed row into the window's `RowSchema`.
- Pad the batch's rows to the schema snapshot taken when the batch closes.
- Stop cleanly at `limit` rows without pulling further events.
- On malformed input, flush already-sealed rows first, then raise.

Example
-------
>>> with XmlRowReader("books.xml", data_level=2, limit=100) as reader:
...     for batch in reader:
...         print(batch.schema.names, len(batch))
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from xmlrows.infra.core.config import settings
from xmlrows.infra.utils.timing import log_timer
from xmlrows.reader.batch import ReaderDiagnostics, RecordBatch
from xmlrows.reader.builder import RowBuilder
from xmlrows.reader.classifier import DepthClassifier, NodeClass
from xmlrows.reader.errors import MalformedInputError
from xmlrows.reader.events import EventKind, XmlEvent, XmlSource, iter_events
from xmlrows.reader.fields import Row
from xmlrows.reader.options import ReaderOptions, load_options
from xmlrows.reader.schema import RowSchema

log = logging.getLogger("xmlrows.reader")


def _open_events(source: XmlSource | Iterable[XmlEvent]) -> Iterator[XmlEvent]:
    if isinstance(source, (str, Path, bytes)) or hasattr(source, "read"):
        return iter_events(source)
    return iter(source)


class XmlRowReader:
    """Reads one XML document (or event stream) into `RecordBatch`es."""

    def __init__(
        self,
        source: XmlSource | Iterable[XmlEvent],
        options: ReaderOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ):
        self.options = load_options(options, **overrides)
        self._classifier = DepthClassifier(
            self.options.data_level, self.options.flatten_level, self.options.row_tag
        )
        self.diagnostics = ReaderDiagnostics()
        self._builder = RowBuilder(self.options, self.diagnostics)
        self._source = source
        self._events: Iterator[XmlEvent] | None = None
        self._open_tags: list[str] = []
        self._skip_depth: int | None = None
        self._schema: RowSchema | None = None
        self._error: MalformedInputError | None = None
        self._done = self.options.limit == 0
        if self._done:
            self.diagnostics.limit_reached = True

    # ---- iteration ----
    def __iter__(self) -> Iterator[RecordBatch]:
        while True:
            batch = self.next_batch()
            if batch is None:
                return
            yield batch

    def __enter__(self) -> "XmlRowReader":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @property
    def exhausted(self) -> bool:
        return self._done

    def close(self) -> None:
        """Stop reading; later pulls return nothing."""
        if not self._done:
            self._finish()

    def next_batch(self) -> RecordBatch | None:
        """Return the next batch, or None once the source is exhausted or the limit hit."""
        if self._error is not None:
            raise self._error
        if self._done:
            return None

        schema = self._window()
        limit = self.options.limit
        records: list[dict[str, Any]] = []
        try:
            while len(records) < self.options.batch_size:
                row = self._next_row()
                if row is None:
                    self._finish()
                    break
                record, conflicts = schema.fold(row)
                for err in conflicts:
                    self.diagnostics.record_conflict(err, settings.MAX_CONFLICT_RECORDS)
                records.append(record)
                self.diagnostics.rows_emitted += 1
                if limit is not None and self.diagnostics.rows_emitted >= limit:
                    self.diagnostics.limit_reached = True
                    log.info("row limit reached limit=%d; stopping early", limit)
                    self._finish()
                    break
        except MalformedInputError as e:
            self._error = e
            if self._builder.abandon():
                self.diagnostics.rows_discarded += 1
            self._finish()
            if not records:
                raise
            log.warning(
                "flushing %d sealed rows before malformed input error", len(records)
            )

        if not records:
            return None
        snapshot = schema.snapshot()
        batch = RecordBatch(
            snapshot, [snapshot.pad(r) for r in records], self.diagnostics.batches_emitted
        )
        self.diagnostics.batches_emitted += 1
        log.debug(
            "batch %d rows=%d columns=%d", batch.index, len(batch), len(snapshot)
        )
        return batch

    # ---- internals ----
    def _window(self) -> RowSchema:
        if self.options.pin_schema:
            if self._schema is None:
                self._schema = RowSchema(self.options.projection)
            return self._schema
        return RowSchema(self.options.projection)

    def _pull(self) -> XmlEvent | None:
        if self._events is None:
            self._events = _open_events(self._source)
        event = next(self._events, None)
        if event is not None:
            self.diagnostics.events_consumed += 1
        return event

    def _next_row(self) -> Row | None:
        builder = self._builder
        while True:
            event = self._pull()
            if event is None:
                if self._open_tags:
                    raise MalformedInputError(
                        f"event stream ended inside <{self._open_tags[-1]}>"
                    )
                return None

            if event.kind is EventKind.START:
                self._open_tags.append(event.name)
                depth = len(self._open_tags)
                if self._skip_depth is not None:
                    continue
                node_class = self._classifier.classify(depth, event.name)
                if node_class is NodeClass.OUTSIDE:
                    continue
                if node_class is NodeClass.SKIPPED:
                    self._skip_depth = depth
                    self.diagnostics.skipped_elements += 1
                    continue
                if node_class is NodeClass.ROW_START:
                    builder.start_row(event.name, event.attributes)
                else:
                    builder.start_child(event.name, event.attributes, node_class)

            elif event.kind is EventKind.TEXT:
                if builder.active and self._skip_depth is None and event.text:
                    builder.text(event.text)

            else:
                if not self._open_tags:
                    raise MalformedInputError(f"unexpected end event </{event.name}>")
                depth = len(self._open_tags)
                opened = self._open_tags.pop()
                if event.name and event.name != opened:
                    raise MalformedInputError(
                        f"mismatched end event </{event.name}> for <{opened}>"
                    )
                if self._skip_depth is not None:
                    if depth == self._skip_depth:
                        self._skip_depth = None
                    continue
                if builder.active:
                    row = builder.end()
                    if row is not None:
                        return row

    def _finish(self) -> None:
        self._done = True
        close = getattr(self._events, "close", None)
        if close is not None:
            close()
        log.info("stream summary %s", self.diagnostics.as_dict())


@dataclass
class ReadResult:
    batches: list[RecordBatch]
    diagnostics: ReaderDiagnostics

    @property
    def rows(self) -> list[dict[str, Any]]:
        return [row for batch in self.batches for row in batch.rows]


def iter_batches(
    source: XmlSource | Iterable[XmlEvent],
    options: ReaderOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> Iterator[RecordBatch]:
    """Stream batches from `source`, logging overall timing."""
    reader = XmlRowReader(source, options, **overrides)
    label = str(source) if isinstance(source, (str, Path)) else type(source).__name__
    with log_timer(
        "read-batches",
        logger=log,
        source=label,
        data_level=reader.options.data_level,
        limit=reader.options.limit,
    ) as stats:
        try:
            yield from reader
        finally:
            stats["rows"] = reader.diagnostics.rows_emitted
            reader.close()


def read_xml(
    source: XmlSource | Iterable[XmlEvent],
    options: ReaderOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> ReadResult:
    """Read every batch into memory (tests, previews, small files)."""
    reader = XmlRowReader(source, options, **overrides)
    with reader:
        batches = list(reader)
    return ReadResult(batches, reader.diagnostics)
