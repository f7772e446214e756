"""loopvet utilities package."""

from .constants import CONFIG_FILE, ERROR_LOG_FILE, GO_EXTENSION, GO_MOD_FILE, LOOPVET_DIR
from .error_handler import handle_exceptions
from .exit_codes import ExitCodes

__all__ = [
    "CONFIG_FILE",
    "ERROR_LOG_FILE",
    "GO_EXTENSION",
    "GO_MOD_FILE",
    "LOOPVET_DIR",
    "ExitCodes",
    "handle_exceptions",
]
