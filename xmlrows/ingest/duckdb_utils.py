# ------------------------------------------------------------
# Module: xmlrows/ingest/duckdb_utils.py
# Purpose: Map unified schemas to DuckDB types and load JSONL into typed tables.
# ------------------------------------------------------------

"""DuckDB helpers for the reader → query engine hand-off.

Responsibilities
----------------
- Safely quote identifiers and string literals for DuckDB SQL.
- Translate a `SchemaSnapshot` into explicit `read_json` column types:
  scalars → VARCHAR, maps → STRUCT(...), maps without columns → JSON.
- Create or replace a table from a JSONL file with those types.
- Count the rows of a table or view.
"""

from __future__ import annotations

import duckdb

from xmlrows.reader.fields import FieldKind
from xmlrows.reader.schema import Column, SchemaSnapshot


def _qi(name: str) -> str:
    """Quote an identifier for DuckDB, escaping internal quotes."""
    return '"' + name.replace('"', '""') + '"'


def _ql(value: str) -> str:
    """Quote a string literal for DuckDB."""
    return "'" + value.replace("'", "''") + "'"


def duckdb_type(schema: SchemaSnapshot, column: Column) -> str:
    if column.kind is FieldKind.SCALAR:
        return "VARCHAR"
    children = schema.children(column.path)
    if not children:
        return "JSON"
    fields = ", ".join(f"{_qi(c.name)} {duckdb_type(schema, c)}" for c in children)
    return f"STRUCT({fields})"


def read_json_columns(schema: SchemaSnapshot) -> str:
    """SQL struct literal for the `columns` argument of `read_json`."""
    entries = ", ".join(
        f"{_ql(c.name)}: {_ql(duckdb_type(schema, c))}" for c in schema.children()
    )
    return "{" + entries + "}"


def create_table_from_jsonl(
    con: duckdb.DuckDBPyConnection,
    table: str,
    json_path_sql_literal: str,
    schema: SchemaSnapshot,
) -> None:
    """Create or replace `table` from a JSONL file using the schema's column types.

    The path must already be SQL-literal-safe (single quotes escaped);
    callers should pass `.as_posix().replace("'", "''")`.
    """
    con.execute(
        f"""
        CREATE OR REPLACE TABLE {_qi(table)} AS
        SELECT * FROM read_json(
            '{json_path_sql_literal}',
            format = 'newline_delimited',
            columns = {read_json_columns(schema)}
        );
        """
    )


def count_rows(con: duckdb.DuckDBPyConnection, table: str) -> int:
    """Return the total number of rows in a DuckDB table or view."""
    return int(con.execute(f"SELECT COUNT(*) FROM {_qi(table)};").fetchone()[0])
