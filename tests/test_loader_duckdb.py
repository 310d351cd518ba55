"""Test: XML → JSONL → DuckDB load.

Purpose:
    Ensures `load_xml_to_duckdb` stages padded rows and creates a typed table
    whose nested maps are queryable as STRUCT columns.

Why:
    This is the query-engine hand-off. If it fails, either the schema → DuckDB
    type mapping or the JSONL staging is broken.

How it works:
    - Load fixture documents into an in-memory connection (and once into a file)
    - Query row counts, nulls, and nested struct fields
"""

import json

import duckdb

from xmlrows.ingest.duckdb_utils import duckdb_type, read_json_columns
from xmlrows.ingest.loader_duckdb import compute_dataset_id, load_xml_to_duckdb
from xmlrows.reader.reader import read_xml


def test_load_flat_rows_in_memory(tmp_path, xml_file):
    path = xml_file("simple")
    con = duckdb.connect()
    try:
        result = load_xml_to_duckdb(path, con=con, staging_dir=tmp_path / "stage")
        assert result["rows"] == 3
        assert result["table"] == "xml_rows"
        assert result["columns"] == [
            "attributes",
            "groupID",
            "artifactID",
            "version",
            "classifier",
            "scope",
        ]
        assert result["diagnostics"]["rows_emitted"] == 3

        total, with_classifier = con.execute(
            "SELECT COUNT(*), COUNT(classifier) FROM xml_rows"
        ).fetchone()
        assert (total, with_classifier) == (3, 2)
    finally:
        con.close()

    # staged file holds one padded JSON object per row
    lines = (tmp_path / "stage" / f"xml_rows.{result['dataset_id']}.jsonl").read_text().splitlines()
    assert len(lines) == 3
    assert json.loads(lines[0])["classifier"] is None


def test_nested_maps_become_structs(tmp_path, xml_file):
    path = xml_file("nested")
    con = duckdb.connect()
    try:
        load_xml_to_duckdb(path, table="books", con=con, staging_dir=tmp_path)
        values = [
            r[0]
            for r in con.execute(
                "SELECT struct_extract(struct_extract(field2, 'nestedField1'), 'nk1') "
                "FROM books ORDER BY 1"
            ).fetchall()
        ]
        assert values == ["nk_value1", "nk_value4", "nk_value7"]
    finally:
        con.close()


def test_load_into_database_file(tmp_path, xml_file):
    path = xml_file("row_attributes")
    db = tmp_path / "out.duckdb"
    result = load_xml_to_duckdb(path, db, table="items", options={"projection": "name"})
    assert result["rows"] == 3
    assert result["columns"] == ["name"]
    con = duckdb.connect(str(db))
    try:
        names = [r[0] for r in con.execute("SELECT name FROM items ORDER BY name").fetchall()]
    finally:
        con.close()
    assert names == ["chisel", "hammer", "saw"]


def test_document_without_rows_skips_the_load(tmp_path):
    path = tmp_path / "empty.xml"
    path.write_bytes(b"<r/>")
    con = duckdb.connect()
    try:
        result = load_xml_to_duckdb(path, con=con, staging_dir=tmp_path)
        assert result["rows"] == 0
        assert result["columns"] == []
        tables = con.execute("SELECT table_name FROM information_schema.tables").fetchall()
        assert tables == []
    finally:
        con.close()


def test_dataset_id_is_stable(xml_file):
    path = xml_file("simple")
    assert compute_dataset_id(path) == compute_dataset_id(path)
    assert len(compute_dataset_id(path)) == 8


def test_schema_to_duckdb_types(nested_xml):
    schema = read_xml(nested_xml).batches[0].schema
    assert duckdb_type(schema, schema.column("field1")) == 'STRUCT("key1" VARCHAR, "key2" VARCHAR)'
    assert duckdb_type(schema, schema.column("attributes")) == "JSON"
    assert read_json_columns(schema).startswith("{'attributes': 'JSON', 'field1': 'STRUCT(")
