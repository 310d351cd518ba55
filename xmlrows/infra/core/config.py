# ------------------------------------------------------------
# Module: xmlrows/infra/core/config.py
# Purpose: Central, typed settings for the reader and ingest layers (code-only; no .env).
# ------------------------------------------------------------

"""Typed configuration hub for xmlrows (code-only defaults; no .env).

Responsibilities
----------------
- Provide strongly-typed logging toggles and DuckDB resource knobs.
- Provide the defaults that `ReaderOptions` falls back to.

Notes
-----
- This build does not read OS environment variables or `.env`.
- Per-read settings (data level, projection, limit...) live on
  `xmlrows.reader.options.ReaderOptions`, not here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class Settings(BaseModel):
    """
    Process-wide configuration with code-only defaults.

    Notes
    -----
    - Extras are forbidden to surface typos/unknown keys early.
    """

    model_config = dict(extra="forbid")

    # Logging toggles
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    MUTE_ALL_LOGS: bool = False

    # ---- Reader defaults ----
    DEFAULT_DATA_LEVEL: int = Field(2, ge=1, description="Depth of row elements")
    BATCH_SIZE: int = Field(4096, ge=1, description="Rows per emitted batch")
    # Cap on SchemaConflictError records kept on the diagnostics object.
    MAX_CONFLICT_RECORDS: int = Field(100, ge=0)

    # ---- DuckDB resource knobs (used by xmlrows.ingest.loader_duckdb) ----
    DUCKDB_THREADS: int = Field(4, ge=1, description="DuckDB PRAGMA threads")
    DUCKDB_MEM: str = Field("1GB", description="DuckDB PRAGMA memory_limit")

    # Scratch directory for JSONL staging files; None means next to the DB file.
    STAGING_DIR: Path | None = None

    # Convert incoming values to Path objects (supports strings like "~/.x").
    @field_validator("STAGING_DIR", mode="before")
    @classmethod
    def _coerce_path(cls, v: str | Path | None):
        if v is None:
            return None
        return v if isinstance(v, Path) else Path(v).expanduser()


# Eagerly instantiate once at import; code-only defaults.
# Import `settings` anywhere; do not re-create Settings().
settings = Settings()
