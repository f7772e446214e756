"""Centralized error handler for loopvet commands."""

import traceback
from collections.abc import Callable
from datetime import datetime
from functools import wraps
from typing import Any

import click

from loopvet.utils.logging import get_request_id, logger

from .constants import ERROR_LOG_FILE, LOOPVET_DIR

_RULE = "=" * 80


def _append_error_log(command: str, exc: BaseException) -> None:
    """Append one command failure, with traceback, to .loopvet/error.log."""
    LOOPVET_DIR.mkdir(parents=True, exist_ok=True)
    with open(ERROR_LOG_FILE, "a", encoding="utf-8") as f:
        f.write(
            f"\n{_RULE}\n"
            f"[{datetime.now().isoformat()}] Error in command: {command}\n"
            f"Request ID: {get_request_id()}\n"
            f"{_RULE}\n"
            f"{type(exc).__name__}: {exc}\n\n"
            f"{traceback.format_exc()}"
            f"{_RULE}\n\n"
        )


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Turn unexpected errors in a command into a short ClickException.

    Click's own exceptions and exits pass through untouched. Anything else
    is logged with its traceback and recorded in the error log, and the user
    sees the error type, message and log location.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (click.ClickException, click.exceptions.Exit):
            raise
        except Exception as e:
            logger.opt(exception=True).error(
                "Command '{cmd}' failed: {err}",
                cmd=func.__name__,
                err=str(e),
            )
            _append_error_log(func.__name__, e)

            raise click.ClickException(
                f"{type(e).__name__}: {e}\n\nFull traceback logged to: {ERROR_LOG_FILE}"
            ) from e

    return wrapper
