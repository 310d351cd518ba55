# ------------------------------------------------------------
# Module: xmlrows/ingest/sources.py
# Purpose: Open plain or compressed XML files as binary streams for the reader.
# ------------------------------------------------------------

"""Byte-stream sources for XML files.

The reader never sees compressed bytes; this module sits upstream of the
parser and picks a decoder from the file suffix.

Responsibilities
----------------
- `.gz` → gzip, `.bz2` → bz2, `.zip` → first `.xml` member (else first member).
- Anything else is opened as-is.
- Close every opened handle when the context exits.
"""

from __future__ import annotations

import bz2
import gzip
import logging
import zipfile
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import BinaryIO

log = logging.getLogger("ingest.sources")


def _zip_member(zf: zipfile.ZipFile) -> str:
    names = [n for n in zf.namelist() if not n.endswith("/")]
    if not names:
        raise FileNotFoundError(f"zip archive has no members: {zf.filename}")
    for name in names:
        if name.lower().endswith(".xml"):
            return name
    return names[0]


@contextmanager
def open_xml_source(path: str | Path) -> Iterator[BinaryIO]:
    """Yield a binary stream of decompressed XML bytes for `path`."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"XML not found: {p}")
    suffix = p.suffix.lower()
    with ExitStack() as stack:
        if suffix == ".gz":
            stream = stack.enter_context(gzip.open(p, "rb"))
        elif suffix == ".bz2":
            stream = stack.enter_context(bz2.open(p, "rb"))
        elif suffix == ".zip":
            zf = stack.enter_context(zipfile.ZipFile(p))
            member = _zip_member(zf)
            log.debug("reading zip member '%s' from '%s'", member, p)
            stream = stack.enter_context(zf.open(member))
        else:
            stream = stack.enter_context(open(p, "rb"))
        yield stream
