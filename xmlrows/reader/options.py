# ------------------------------------------------------------
# Module: xmlrows/reader/options.py
# Purpose: Validated per-read options (data level, projection, limit, policies).
# ------------------------------------------------------------

"""Reader options model.

Responsibilities
----------------
- Validate depth cutoffs, row cap and batch size before any event is read.
- Parse the projection into a `ProjectionSet`.
- Convert pydantic validation failures into `ConfigurationError`.

Notes
-----
- Extras are forbidden to surface typos/unknown keys early.
- `dataLevel` / `flattenLevel` are accepted as aliases.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from xmlrows.infra.core.config import settings
from xmlrows.reader.errors import ConfigurationError
from xmlrows.reader.paths import ProjectionSet


class ReaderOptions(BaseModel):
    """Options for one `XmlRowReader`.

    A deep `dataLevel`-style cutoff that keeps the root's children as rows and
    collapses everything deeper than N into row columns is
    `data_level=2, flatten_level=N`. `data_level=N` alone makes the depth-N
    elements themselves the rows.
    """

    model_config = dict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    # Depth of row elements; the root element is depth 1.
    data_level: int = Field(
        default_factory=lambda: settings.DEFAULT_DATA_LEVEL, ge=1, alias="dataLevel"
    )
    # Elements deeper than this are flattened into scalar columns of the row.
    flatten_level: int | None = Field(None, ge=1, alias="flattenLevel")
    # Only elements with this local name at `data_level` start rows.
    row_tag: str | None = None
    projection: ProjectionSet = Field(default_factory=ProjectionSet)
    limit: int | None = Field(None, ge=0)
    batch_size: int = Field(default_factory=lambda: settings.BATCH_SIZE, ge=1)
    # Keep one schema for the whole stream instead of one per batch.
    pin_schema: bool = False
    attribute_scope: Literal["row", "all"] = "row"
    flatten_collision: Literal["first", "last", "number"] = "first"

    @field_validator("projection", mode="before")
    @classmethod
    def _coerce_projection(cls, v: Any):
        if isinstance(v, ProjectionSet):
            return v
        return ProjectionSet.parse(v)

    @field_validator("row_tag", mode="before")
    @classmethod
    def _blank_row_tag(cls, v: str | None):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _check_levels(self):
        if self.flatten_level is not None and self.flatten_level < self.data_level:
            raise ValueError(
                f"flatten_level ({self.flatten_level}) must be >= data_level ({self.data_level})"
            )
        return self


def load_options(
    options: ReaderOptions | Mapping[str, Any] | None = None, **overrides: Any
) -> ReaderOptions:
    """Return validated `ReaderOptions`, raising `ConfigurationError` on bad input."""
    if isinstance(options, ReaderOptions):
        if not overrides:
            return options
        data = {**options.model_dump(), **overrides}
    else:
        data = {**dict(options or {}), **overrides}
    try:
        return ReaderOptions.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"invalid reader options: {e}") from e
