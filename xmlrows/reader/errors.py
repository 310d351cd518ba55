# ------------------------------------------------------------
# Module: xmlrows/reader/errors.py
# Purpose: Typed reader exceptions for clear, fail-fast error handling.
# ------------------------------------------------------------

"""Exception types for the XML row reader.

Responsibilities
----------------
- Provide a base `XmlRowsError` for catch-all handling.
- Surface bad options / projection syntax as `ConfigurationError`.
- Surface unparsable XML as `MalformedInputError`.
- Describe per-path variant disagreements as `SchemaConflictError` records.

Notes
-----
- `SchemaConflictError` is never raised by the reader; instances are kept on
  `ReaderDiagnostics.conflicts` so callers can inspect or re-raise them.
"""

from __future__ import annotations


class XmlRowsError(Exception):
    """Base class for xmlrows failures."""


class ConfigurationError(XmlRowsError):
    """Raised for invalid reader options, before any event is read."""


class MalformedInputError(XmlRowsError):
    """Raised when the event source reports unparsable XML."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.line = line
        self.column = column


class SchemaConflictError(XmlRowsError):
    """A path was seen as a Map in one row and as a Scalar in another."""

    def __init__(self, path: tuple[str, ...], expected: str, found: str, row: int):
        super().__init__(
            f"schema conflict at '{'.'.join(path)}': expected {expected}, found {found} (row {row})"
        )
        self.path = path
        self.expected = expected
        self.found = found
        self.row = row
