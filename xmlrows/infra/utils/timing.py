# ------------------------------------------------------------
# Module: xmlrows/infra/utils/timing.py
# Purpose: Time a pipeline stage and log its start, outcome, and duration.
# ------------------------------------------------------------

"""Stage timing for reader and ingest logs.

Responsibilities
----------------
- Log `<stage> start`, `<stage> ok in N ms`, or `<stage> failed after N ms`.
- Render context as `key=value` pairs so lines stay grep-able.
- Let the timed block add counters (rows, batches...) that appear on the
  closing line.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any


def _fmt(ctx: dict[str, Any]) -> str:
    return " ".join(f"{k}={v}" for k, v in ctx.items())


@contextmanager
def log_timer(
    stage: str, logger: logging.Logger | None = None, **ctx: Any
) -> Iterator[dict[str, Any]]:
    """
    Usage:
        with log_timer("write-jsonl", logger=log, table=t) as stats:
            stats["rows"] = write(...)
    """
    log = logger or logging.getLogger("xmlrows.timing")
    t0 = time.perf_counter_ns()
    log.info("%s start %s", stage, _fmt(ctx))
    stats: dict[str, Any] = {}
    try:
        yield stats
    except Exception:
        ms = (time.perf_counter_ns() - t0) / 1e6
        log.error("%s failed after %.1f ms %s", stage, ms, _fmt({**ctx, **stats}), exc_info=True)
        raise
    ms = (time.perf_counter_ns() - t0) / 1e6
    log.info("%s ok in %.1f ms %s", stage, ms, _fmt({**ctx, **stats}))
