# ------------------------------------------------------------
# Module: xmlrows/ingest/errors.py
# Purpose: Define typed ingest exceptions for clear, fail-fast error handling.
# ------------------------------------------------------------

"""Exception types for the ingest layer.

Responsibilities
----------------
- Provide a base `IngestError` for catch-all handling.
- Surface JSONL staging failures as `FileWriteError`.
- Surface DuckDB connection/statement failures as `DuckDBError`.
"""

from xmlrows.reader.errors import XmlRowsError


class IngestError(XmlRowsError):
    """Base class for ingest failures."""


class FileWriteError(IngestError):
    """Raised on JSONL open/write failures."""


class DuckDBError(IngestError):
    """Raised on DuckDB connection/statement failures."""
