"""Shared fixtures: small XML documents with irregular row shapes.

Each fixture returns the document as bytes; `xml_file` writes any of them to
a temp path for tests that need a real file (sources, loader, CLI).
"""

from pathlib import Path

import pytest

from xmlrows.reader.events import end, start, text

SIMPLE_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<dependencies>
  <dependency>
    <groupID>org.example.exec</groupID>
    <artifactID>example-exec</artifactID>
    <version>${project.version}</version>
  </dependency>
  <dependency>
    <groupID>org.example.exec</groupID>
    <artifactID>example-exec</artifactID>
    <version>${project.version}</version>
    <classifier>tests</classifier>
    <scope>test</scope>
  </dependency>
  <dependency>
    <groupID>org.example</groupID>
    <artifactID>example-common</artifactID>
    <version>${project.version}</version>
    <classifier>tests</classifier>
    <scope>test</scope>
  </dependency>
</dependencies>
"""

FLAT_XML = b"""<people>
  <person><first>Ann</first><last>Lee</last><age>31</age><city>Oslo</city><zip>0150</zip></person>
  <person><first>Bo</first><last>Kim</last><age>45</age><city>Rome</city><zip>00184</zip></person>
  <person><first>Cy</first><last>Ng</last><age>28</age><city>Lima</city><zip>15001</zip></person>
</people>
"""

NESTED_XML = b"""<books>
  <book>
    <field1><key1>value1</key1><key2>value2</key2></field1>
    <field2>
      <key3>k1</key3>
      <nestedField1><nk1>nk_value1</nk1><nk2>nk_value2</nk2><nk3>nk_value3</nk3></nestedField1>
    </field2>
  </book>
  <book>
    <field1><key1>value3</key1><key2>value4</key2></field1>
    <field2>
      <key3>k2</key3>
      <nestedField1><nk1>nk_value4</nk1><nk2>nk_value5</nk2><nk3>nk_value6</nk3></nestedField1>
    </field2>
  </book>
  <book>
    <field1><key1>value5</key1><key2>value6</key2></field1>
    <field2>
      <key3>k3</key3>
      <nestedField1><nk1>nk_value7</nk1><nk2>nk_value8</nk2><nk3>nk_value9</nk3></nestedField1>
    </field2>
  </book>
</books>
"""

# Row 2 lacks the deep leaf and everything above it.
DEEP_LEAF_XML = b"""<root>
  <row><name>one</name><a><b><c><d><e>leaf</e></d></c></b></a></row>
  <row><name>two</name></row>
</root>
"""

DEEP_NESTED_XML = b"""<root>
  <row>
    <level2>
      <field1-level2>l2</field1-level2>
      <level3>
        <field1-level3>l3</field1-level3>
        <level4>
          <field1-level4>l4</field1-level4>
          <level5>
            <field1-level5>l5</field1-level5>
            <level6>
              <field1-level6>l6</field1-level6>
              <level7>
                <field1>f1</field1>
                <field2>f2</field2>
                <field3>f3</field3>
              </level7>
            </level6>
          </level5>
        </level4>
      </level3>
    </level2>
  </row>
  <row>
    <level2>
      <level3>
        <level4>
          <level5>
            <level6>
              <level7>
                <field1>f4</field1>
                <field2>f5</field2>
                <field3>f6</field3>
              </level7>
            </level6>
          </level5>
        </level4>
      </level3>
    </level2>
  </row>
</root>
"""

# Same shape as DEEP_NESTED_XML, but only the second row carries field1-level6.
DEEP_FLATTEN_XML = b"""<root>
  <row>
    <level2><level3><level4><level5><level6>
      <level7><field1>f4</field1><field2>f5</field2><field3>f6</field3></level7>
    </level6></level5></level4></level3></level2>
  </row>
  <row>
    <level2><level3><level4><level5><level6>
      <field1-level6>l6</field1-level6>
      <level7><field1>f1</field1><field2>f2</field2><field3>f3</field3></level7>
    </level6></level5></level4></level3></level2>
  </row>
</root>
"""

ATTRIBUTES_XML = b"""<books>
  <book>
    <author>Mark Twain</author>
    <title>The Adventures of Tom Sawyer</title>
  </book>
  <book>
    <author>Niccolo Machiavelli</author>
    <title binding="paperback">The Prince</title>
  </book>
  <book>
    <author>Pierre Bayard</author>
    <title binding="hardcover" subcategory="non-fiction">How to Talk About Books You Haven't Read</title>
  </book>
</books>
"""

ROW_ATTRIBUTES_XML = b"""<catalog>
  <item id="1" kind="tool"><name>hammer</name></item>
  <item id="2"><name>saw</name></item>
  <item><name>chisel</name></item>
</catalog>
"""

DOCUMENTS = {
    "simple": SIMPLE_XML,
    "flat": FLAT_XML,
    "nested": NESTED_XML,
    "deep_leaf": DEEP_LEAF_XML,
    "deep_nested": DEEP_NESTED_XML,
    "deep_flatten": DEEP_FLATTEN_XML,
    "attributes": ATTRIBUTES_XML,
    "row_attributes": ROW_ATTRIBUTES_XML,
}


@pytest.fixture
def simple_xml() -> bytes:
    return SIMPLE_XML


@pytest.fixture
def nested_xml() -> bytes:
    return NESTED_XML


@pytest.fixture
def xml_file(tmp_path):
    """Write a named fixture document to disk and return its path."""

    def _write(name: str, filename: str | None = None) -> Path:
        path = tmp_path / (filename or f"{name}.xml")
        path.write_bytes(DOCUMENTS[name])
        return path

    return _write


class CountingEvents:
    """Iterator over hand-built events that records how many were pulled."""

    def __init__(self, events):
        self._events = list(events)
        self.pulled = 0

    def __iter__(self):
        return self

    def __next__(self):
        if self.pulled >= len(self._events):
            raise StopIteration
        event = self._events[self.pulled]
        self.pulled += 1
        return event

    def __len__(self):
        return len(self._events)


def row_events(tag: str, fields: dict[str, str], attributes=None) -> list:
    """Events for one flat row element with scalar children."""
    events = [start(tag, attributes)]
    for name, value in fields.items():
        events += [start(name), text(value), end(name)]
    events.append(end(tag))
    return events


@pytest.fixture
def counting_events():
    return CountingEvents


@pytest.fixture
def make_rows():
    return row_events


@pytest.fixture
def docs() -> dict[str, bytes]:
    """All fixture documents by name."""
    return DOCUMENTS
