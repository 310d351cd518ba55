# ------------------------------------------------------------
# Module: xmlrows/infra/utils/hashing.py
# Purpose: Content hashes used to name staged datasets.
# ------------------------------------------------------------

"""SHA-256 of a file's raw bytes, read in bounded chunks.

The digest is taken over the file as stored (compressed bytes for `.gz`
inputs), so the id changes whenever the file does.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

CHUNK_SIZE = 1 << 20


def sha256_file(path: str | Path, chunk_size: int = CHUNK_SIZE) -> str:
    """Lowercase hex SHA-256 of the file at `path`."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()
