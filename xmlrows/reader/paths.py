# ------------------------------------------------------------
# Module: xmlrows/reader/paths.py
# Purpose: Parse dotted column paths and answer projection admission checks.
# ------------------------------------------------------------

"""Column paths and projection sets.

A path is a tuple of element names from the row element down to a field,
written in dotted form (`level2.level3.field1`). Segments containing dots
can be back-quoted: `` `a.b`.c `` → `("a.b", "c")`.

Responsibilities
----------------
- Parse/format dotted paths; reject malformed ones with `ConfigurationError`.
- Decide whether a row-relative path must be materialized for a projection.
"""

from __future__ import annotations

from collections.abc import Iterable

from xmlrows.reader.errors import ConfigurationError

Path = tuple[str, ...]

STAR = "*"
ATTRIBUTES = "attributes"


def parse_path(text: str) -> Path:
    """Split a dotted path into segments, honoring back-quoted segments."""
    if not isinstance(text, str) or not text.strip():
        raise ConfigurationError(f"empty projection path: {text!r}")
    segments: list[str] = []
    buf: list[str] = []
    quoted = False
    was_quoted = False
    for ch in text:
        if ch == "`":
            quoted = not quoted
            was_quoted = True
        elif ch == "." and not quoted:
            segments.append(_close_segment(text, buf, was_quoted))
            buf, was_quoted = [], False
        else:
            buf.append(ch)
    if quoted:
        raise ConfigurationError(f"unbalanced back-quote in projection path: {text!r}")
    segments.append(_close_segment(text, buf, was_quoted))
    return tuple(segments)


def _close_segment(text: str, buf: list[str], was_quoted: bool) -> str:
    seg = "".join(buf) if was_quoted else "".join(buf).strip()
    if not seg:
        raise ConfigurationError(f"empty segment in projection path: {text!r}")
    return seg


def format_path(path: Path) -> str:
    """Inverse of `parse_path`; quotes segments that contain dots."""
    return ".".join(f"`{s}`" if "." in s else s for s in path)


class ProjectionSet:
    """Requested columns, or every column when built from `*`."""

    def __init__(self, paths: Iterable[Path] | None = None):
        if paths is None:
            self._paths: tuple[Path, ...] = ()
            self.is_star = True
        else:
            # dedupe, keep request order
            self._paths = tuple(dict.fromkeys(tuple(p) for p in paths))
            self.is_star = False
        self._requested = frozenset(self._paths)
        self._ancestors = frozenset(p[:i] for p in self._paths for i in range(1, len(p) + 1))

    @classmethod
    def parse(cls, value: str | Iterable[str] | None) -> "ProjectionSet":
        """Build from `*`, `None`, a comma-separated string, or an iterable of paths."""
        if value is None:
            return cls()
        if isinstance(value, str):
            items = value.split(",") if value.strip() != STAR else [STAR]
        else:
            items = list(value)
        if not items:
            raise ConfigurationError("projection must name at least one path (or '*')")
        if any(isinstance(i, str) and i.strip() == STAR for i in items):
            return cls()
        return cls(parse_path(i) if isinstance(i, str) else _as_path(i) for i in items)

    @property
    def paths(self) -> tuple[Path, ...]:
        return self._paths

    def admits(self, path: Path) -> bool:
        """True if `path` is a requested path, an ancestor of one, or below one."""
        if self.is_star or path in self._ancestors:
            return True
        return any(path[:i] in self._requested for i in range(1, len(path)))

    @property
    def wants_attributes(self) -> bool:
        return self.admits((ATTRIBUTES,))

    def admits_attribute(self, key: str) -> bool:
        return self.admits((ATTRIBUTES, key))

    def __repr__(self) -> str:
        if self.is_star:
            return "ProjectionSet(*)"
        return f"ProjectionSet({', '.join(format_path(p) for p in self._paths)})"


def _as_path(item) -> Path:
    path = tuple(item)
    if not path or not all(isinstance(s, str) and s for s in path):
        raise ConfigurationError(f"invalid projection path: {item!r}")
    return path
