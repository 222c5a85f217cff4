"""Logging for the blame-trail CLI.

The package logger writes everything to a rotating log file. Stderr shows
warnings (a line whose history could not be read, a bad config value) or,
with ``--debug``, every record including the git commands issued from the
per-line worker threads. The result table always goes to stdout.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

_PACKAGE = "blame_trail"
_LOG_BYTES = 1 * 1024 * 1024  # 1 MiB per file
_LOG_BACKUPS = 3

FILE_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s"
STDERR_FORMAT = "blame-trail: %(message)s"
STDERR_DEBUG_FORMAT = "blame-trail: %(levelname)s [%(threadName)s] %(name)s: %(message)s"


def _file_handler(log_file: Path) -> logging.Handler | None:
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=_LOG_BYTES,
            backupCount=_LOG_BACKUPS,
            encoding="utf-8",
        )
    except OSError as exc:
        print(f"blame-trail: WARNING: could not open log file {log_file}: {exc}", file=sys.stderr)
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _stderr_handler(debug: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if debug:
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(STDERR_DEBUG_FORMAT))
    else:
        handler.setLevel(logging.WARNING)
        handler.setFormatter(logging.Formatter(STDERR_FORMAT))
    return handler


def configure(log_file: Path, *, debug: bool = False, reconfigure: bool = False) -> None:
    """Attach handlers to the blame_trail package logger.

    Idempotent unless *reconfigure* is True.
    """
    pkg_logger = logging.getLogger(_PACKAGE)
    if pkg_logger.handlers and not reconfigure:
        return
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()

    pkg_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    fh = _file_handler(log_file)
    if fh is not None:
        pkg_logger.addHandler(fh)
    pkg_logger.addHandler(_stderr_handler(debug))
    pkg_logger.propagate = False
