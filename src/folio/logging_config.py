"""Logging setup for the folio CLI.

Log records always go to stderr: ``folio ... -o json`` and ``--stdout``
write documents to stdout, and those must stay machine-readable. A log
file can be added with ``--log-file``; it receives the same records.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every request at INFO when the Turso backend is used
QUIET_LOGGERS = ("libsql_client", "aiohttp")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> None:
    """Route folio's log records to stderr and, optionally, a file.

    Called once by ``folio.cli.main`` from the ``--log-level`` and
    ``--log-file`` flags. Calling it again replaces the previous handlers.

    Args:
        level: Level name; unknown names fall back to INFO
        log_file: Extra UTF-8 log file; parent directories are created
        format_string: Record format (defaults to DEFAULT_LOG_FORMAT)
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=numeric_level,
        format=format_string or DEFAULT_LOG_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Logger for a folio module; pass ``__name__``."""
    return logging.getLogger(name)
