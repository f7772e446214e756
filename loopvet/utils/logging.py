"""Loguru setup shared by every loopvet module.

Usage:
    from loopvet.utils.logging import logger, unit_logger
    logger.info("Message")
    unit_logger("pkg/a.go").debug("resolved")  # tagged with the file

Stdout belongs to the report (table or --json), so every handler writes to
stderr or to a file.

Environment Variables:
    LOOPVET_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    LOOPVET_LOG_JSON: 0|1 (default: 0, human-readable)
    LOOPVET_LOG_FILE: path to an NDJSON log file (optional)
    LOOPVET_REQUEST_ID: correlation ID for tracing a single run
"""

import os
import sys
import uuid

from loguru import logger

_log_level = os.environ.get("LOOPVET_LOG_LEVEL", "INFO").upper()
_json_mode = os.environ.get("LOOPVET_LOG_JSON", "0") == "1"
_log_file = os.environ.get("LOOPVET_LOG_FILE")
_request_id = os.environ.get("LOOPVET_REQUEST_ID") or str(uuid.uuid4())

# "unit" is the compilation unit being analyzed; "-" outside of one.
_human_format = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[unit]}</cyan> - "
    "<level>{message}</level>"
)

logger.remove()
logger.configure(extra={"request_id": _request_id, "unit": "-"})

logger.level("DEBUG", color="<blue>")
logger.level("INFO", color="<white>")
logger.level("WARNING", color="<yellow>")
logger.level("ERROR", color="<red>")

if _json_mode:
    logger.add(sys.stderr, level=_log_level, serialize=True)
else:
    logger.add(
        sys.stderr,
        level=_log_level,
        format=_human_format,
        colorize=None,  # Auto-detect: colors if TTY, plain if piped
    )

if _log_file:
    logger.add(
        _log_file,
        level="DEBUG",
        serialize=True,
        rotation="10 MB",
        retention=3,
        encoding="utf-8",
    )


def get_request_id() -> str:
    """Get the current request ID for correlation."""
    return _request_id


def unit_logger(rel_path: str):
    """Logger whose records carry the file being analyzed."""
    return logger.bind(unit=rel_path)


__all__ = [
    "logger",
    "get_request_id",
    "unit_logger",
]
