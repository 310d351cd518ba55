# ------------------------------------------------------------
# Module: xmlrows/ingest/jsonl_writer.py
# Purpose: Stream record batches into a JSONL staging file.
# ------------------------------------------------------------

"""Write padded rows as JSONL, one line per row.

Responsibilities
----------------
- Create the output directory if missing.
- Write every row of every batch in order.
- Return the row count and the last (widest, when pinned) schema snapshot.
- Raise `FileWriteError` on open or write failures.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from xmlrows.ingest.errors import FileWriteError
from xmlrows.reader.batch import RecordBatch
from xmlrows.reader.schema import SchemaSnapshot

log = logging.getLogger("ingest.jsonl")


def write_jsonl_batches(
    batches: Iterable[RecordBatch], out_path: Path
) -> tuple[int, SchemaSnapshot | None]:
    """Write all rows to `out_path`; returns (rows_written, last_schema)."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    schema: SchemaSnapshot | None = None
    try:
        f = out_path.open("w", encoding="utf-8")
    except OSError as e:
        raise FileWriteError(f"open failed path='{out_path}'") from e
    with f:
        for batch in batches:
            schema = batch.schema
            for row in batch.rows:
                try:
                    f.write(json.dumps(row, ensure_ascii=False) + "\n")
                except (OSError, TypeError, ValueError) as e:
                    raise FileWriteError(f"write failed path='{out_path}' row={written}") from e
                written += 1
    log.info("jsonl written rows=%d path='%s'", written, out_path)
    return written, schema
