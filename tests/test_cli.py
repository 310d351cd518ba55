import json

from xmlrows.cli import main


def test_rows_command_prints_jsonl(xml_file, capsys):
    path = xml_file("simple")
    assert main(["rows", str(path), "--columns", "groupID,scope", "--limit", "2"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [json.loads(line) for line in lines] == [
        {"groupID": "org.example.exec", "scope": None},
        {"groupID": "org.example.exec", "scope": "test"},
    ]


def test_schema_command_prints_unified_columns(xml_file, capsys):
    path = xml_file("deep_flatten")
    assert main(["schema", str(path), "--flatten-level", "2"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [c["name"] for c in payload["columns"]] == [
        "attributes",
        "field1",
        "field2",
        "field3",
        "field1-level6",
    ]
    assert payload["diagnostics"]["rows_emitted"] == 2


def test_load_command(tmp_path, xml_file, capsys):
    path = xml_file("nested")
    db = tmp_path / "cli.duckdb"
    assert main(["load", str(path), "--db", str(db), "--table", "books"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result["rows"] == 3
    assert result["table"] == "books"


def test_errors_exit_with_code_2(tmp_path, capsys):
    assert main(["rows", str(tmp_path / "missing.xml")]) == 2
    assert "error:" in capsys.readouterr().err

    bad = tmp_path / "bad.xml"
    bad.write_bytes(b"<r><row><a>1</a></row></r>")
    assert main(["rows", str(bad), "--data-level", "0"]) == 2
