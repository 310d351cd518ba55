# ------------------------------------------------------------
# Module: xmlrows/ingest/loader_duckdb.py
# Purpose: Load an XML document into a typed DuckDB table via JSONL staging.
# ------------------------------------------------------------

"""Read XML into unified row batches, stage them as JSONL, and load DuckDB.

Responsibilities
----------------
- Compute a stable dataset id from the file content.
- Read the document with a pinned schema so the last snapshot covers every row.
- Stage rows as JSONL, then create a typed table with `read_json`.
- Return row count, columns, and reader diagnostics.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import duckdb

from xmlrows.infra.core.config import settings
from xmlrows.infra.utils.hashing import sha256_file
from xmlrows.infra.utils.timing import log_timer as _timer
from xmlrows.ingest.duckdb_connection import open_duckdb
from xmlrows.ingest.duckdb_utils import count_rows, create_table_from_jsonl
from xmlrows.ingest.errors import DuckDBError
from xmlrows.ingest.jsonl_writer import write_jsonl_batches
from xmlrows.ingest.sources import open_xml_source
from xmlrows.ingest.types import IngestResult
from xmlrows.reader.options import ReaderOptions, load_options
from xmlrows.reader.reader import XmlRowReader

log = logging.getLogger("ingest.loader")

DEFAULT_TABLE = "xml_rows"


def compute_dataset_id(xml_path: Path) -> str:
    """First 8 hex chars of the file's SHA-256."""
    return sha256_file(xml_path)[:8]


def load_xml_to_duckdb(
    xml_path: str | Path,
    db_path: str | Path = ":memory:",
    table: str = DEFAULT_TABLE,
    options: ReaderOptions | Mapping[str, Any] | None = None,
    staging_dir: Path | None = None,
    con: duckdb.DuckDBPyConnection | None = None,
) -> IngestResult:
    """
    Pipeline:
        - XmlRowReader (pinned schema) -> JSONL staging file
        - CREATE OR REPLACE TABLE ... AS SELECT * FROM read_json(..., columns=...)
        - return counts

    Pass `con` to load into an already-open connection (left open).
    """
    xml_path = Path(xml_path).resolve()
    opts = load_options(options, pin_schema=True)
    dataset_id = compute_dataset_id(xml_path)
    staging = staging_dir or settings.STAGING_DIR
    if staging is None:
        staging = (
            Path(db_path).resolve().parent if str(db_path) != ":memory:" else xml_path.parent
        )
    jsonl_path = Path(staging) / f"{table}.{dataset_id}.jsonl"
    log.info("ingest start xml='%s' table=%s dataset_id=%s", xml_path, table, dataset_id)

    with open_xml_source(xml_path) as stream:
        reader = XmlRowReader(stream, opts)
        with _timer("write-jsonl", logger=log, table=table, path=str(jsonl_path)) as stats:
            written, schema = write_jsonl_batches(reader, jsonl_path)
            stats["rows"] = written

    result: IngestResult = {
        "dataset_id": dataset_id,
        "duckdb_path": str(db_path),
        "table": table,
        "jsonl_path": str(jsonl_path),
        "rows": 0,
        "columns": schema.paths() if schema is not None else [],
        "diagnostics": reader.diagnostics.as_dict(),
    }
    if written == 0 or schema is None:
        log.info("no rows for table=%s; skipping load", table)
        return result

    owns_con = con is None
    if owns_con:
        con = open_duckdb(db_path, threads=settings.DUCKDB_THREADS, mem=settings.DUCKDB_MEM)
    try:
        json_sql = jsonl_path.as_posix().replace("'", "''")
        with _timer("load-jsonl", logger=log, table=table, rows=written):
            try:
                create_table_from_jsonl(con, table, json_sql, schema)
            except duckdb.Error as e:
                log.error(
                    "duckdb load failed table='%s' json='%s'", table, jsonl_path, exc_info=True
                )
                raise DuckDBError(f"load failed table='{table}'") from e
        result["rows"] = count_rows(con, table)
        log.info("loaded table=%s rows=%s", table, result["rows"])
    finally:
        if owns_con:
            con.close()
    return result
