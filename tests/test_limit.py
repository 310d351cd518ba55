"""Test: row cap and early, clean termination.

Purpose:
    With `limit=K`, exactly K rows come out, and no event after the K-th
    row's end is pulled from the source.

How it works:
    - Feed hand-built events through an iterator that counts pulls
    - Compare the pull count against the position of the K-th row's end event
"""

import pytest

from xmlrows.reader.errors import MalformedInputError
from xmlrows.reader.events import end, start, text
from xmlrows.reader.reader import XmlRowReader, read_xml


def _document(make_rows, n):
    events = [start("root")]
    for i in range(n):
        events += make_rows("row", {"i": str(i), "v": f"value{i}"})
    events.append(end("root"))
    return events


@pytest.mark.parametrize("limit", [1, 2, 5])
def test_limit_stops_pulling_after_kth_row(counting_events, make_rows, limit):
    events = _document(make_rows, 5)
    source = counting_events(events)
    result = read_xml(source, limit=limit)

    assert len(result.rows) == limit
    assert result.diagnostics.limit_reached is True
    # root start + `limit` rows of 8 events each
    assert source.pulled == 1 + 8 * limit
    assert result.diagnostics.events_consumed == source.pulled


def test_limit_above_row_count_reads_everything(counting_events, make_rows):
    source = counting_events(_document(make_rows, 3))
    result = read_xml(source, limit=10)
    assert len(result.rows) == 3
    assert result.diagnostics.limit_reached is False
    assert source.pulled == len(source)


def test_limit_zero_reads_nothing(counting_events, make_rows):
    source = counting_events(_document(make_rows, 3))
    reader = XmlRowReader(source, limit=0)
    assert reader.next_batch() is None
    assert source.pulled == 0
    assert reader.diagnostics.limit_reached is True


def test_pulls_after_limit_are_empty_continuations(counting_events, make_rows):
    source = counting_events(_document(make_rows, 5))
    reader = XmlRowReader(source, limit=2, batch_size=1)
    assert len(reader.next_batch()) == 1
    assert len(reader.next_batch()) == 1
    pulled = source.pulled
    assert reader.next_batch() is None
    assert reader.next_batch() is None
    assert source.pulled == pulled
    assert list(reader) == []


def test_limit_spanning_batches(simple_xml):
    result = read_xml(simple_xml, limit=2, batch_size=1)
    assert [len(b) for b in result.batches] == [1, 1]
    # per-batch schemas: the first row never saw a classifier
    assert "classifier" not in result.rows[0]
    assert result.rows[1]["classifier"] == "tests"


def test_malformed_input_flushes_sealed_rows_then_raises(make_rows):
    events = [start("root")]
    events += make_rows("row", {"a": "1"})
    events += make_rows("row", {"a": "2"})
    # third row is cut off by a mismatched end tag
    events += [start("row"), start("a"), text("3"), end("b")]
    reader = XmlRowReader(events)

    batch = reader.next_batch()
    assert batch.column("a") == ["1", "2"]
    with pytest.raises(MalformedInputError):
        reader.next_batch()
    # the error is sticky
    with pytest.raises(MalformedInputError):
        reader.next_batch()
    assert reader.diagnostics.rows_discarded == 1
    assert reader.diagnostics.rows_emitted == 2


def test_stream_ending_inside_an_element_is_malformed(make_rows):
    events = [start("root")] + make_rows("row", {"a": "1"})
    reader = XmlRowReader(events)
    assert len(reader.next_batch()) == 1
    with pytest.raises(MalformedInputError):
        reader.next_batch()


def test_unparsable_xml_raises_after_earlier_batches():
    doc = b"<r>" + b"<row><a>1</a></row>" * 3 + b"<row><a>oops</b></row></r>"
    reader = XmlRowReader(doc, batch_size=1)
    rows = []
    with pytest.raises(MalformedInputError):
        for batch in reader:
            rows.extend(batch.rows)
    assert len(rows) <= 3
    assert all(r["a"] == "1" for r in rows)
