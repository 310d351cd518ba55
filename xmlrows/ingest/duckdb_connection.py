# ------------------------------------------------------------
# Module: xmlrows/ingest/duckdb_connection.py
# Purpose: Open and configure a DuckDB connection with sensible defaults.
# ------------------------------------------------------------

"""Establish a DuckDB connection with basic configuration and safety handling.

Responsibilities
----------------
- Open a DuckDB connection from a file path (or `:memory:`).
- Apply thread and memory PRAGMAs for controlled resource usage.
- Raise `DuckDBError` when the database cannot be opened.
"""

from __future__ import annotations

import logging
from pathlib import Path

import duckdb

from xmlrows.ingest.errors import DuckDBError

log = logging.getLogger("ingest.duckdb")


def open_duckdb(db_path: str | Path, threads: int, mem: str) -> duckdb.DuckDBPyConnection:
    """Open a DuckDB connection with basic PRAGMAs applied."""
    try:
        con = duckdb.connect(str(db_path))
    except duckdb.Error as e:
        raise DuckDBError(f"duckdb connect failed db='{db_path}'") from e
    try:
        con.execute(f"PRAGMA threads={int(threads)}")
        con.execute(f"PRAGMA memory_limit='{mem}'")
    except duckdb.Error:
        log.warning("duckdb pragmas failed; continuing with defaults", exc_info=True)
    return con
