# ------------------------------------------------------------
# Module: xmlrows/ingest/types.py
# Purpose: Define typed structures for ingestion result metadata.
# ------------------------------------------------------------

"""Typed result of loading one XML document into DuckDB."""

from typing import Any, TypedDict


class IngestResult(TypedDict):
    """Structured representation of ingestion output metadata."""

    dataset_id: str
    duckdb_path: str
    table: str
    jsonl_path: str
    rows: int
    columns: list[str]
    diagnostics: dict[str, Any]
