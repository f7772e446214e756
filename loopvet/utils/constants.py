"""Centralized constants for loopvet utils package.

This module provides a single source of truth for paths and directories
used across utility modules.
"""

from pathlib import Path

# ============================================================================
# OUTPUT DIRECTORIES
# ============================================================================

# Primary output directory for all loopvet artifacts
LOOPVET_DIR = Path("./.loopvet")

# Log files
ERROR_LOG_FILE = LOOPVET_DIR / "error.log"

# User configuration
CONFIG_FILE = LOOPVET_DIR / "config.json"

# ============================================================================
# SOURCE DISCOVERY
# ============================================================================

GO_EXTENSION = ".go"
GO_TEST_SUFFIX = "_test.go"
GO_MOD_FILE = "go.mod"
