# ------------------------------------------------------------
# Module: xmlrows/infra/core/logging.py
# Purpose: Centralized logging configuration for the xmlrows CLI and tools.
# ------------------------------------------------------------

"""Configure unified, stderr-based logging for xmlrows.

Responsibilities
----------------
- Initialize a single consistent logging setup at CLI startup.
- Respect toggles from `settings` (log level, mute).

Notes
-----
- Library code never calls this; it only uses `logging.getLogger(...)`.
- `basicConfig` is idempotent unless `force=True`.
"""

import logging
import sys

from xmlrows.infra.core.config import settings


def configure_logging(level: str | None = None) -> None:
    """Initialize global logging once at startup.

    Notes
    -----
    - Hard-mutes all logs if `MUTE_ALL_LOGS` is set.
    - Logs go to stderr so `xmlrows rows` output on stdout stays clean JSONL.
    """
    if settings.MUTE_ALL_LOGS:
        logging.disable(logging.CRITICAL)
        return

    logging.basicConfig(
        level=level or settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )
