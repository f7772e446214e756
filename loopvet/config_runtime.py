"""Runtime configuration for loopvet - centralized configuration management."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from loopvet.utils.constants import CONFIG_FILE
from loopvet.utils.logging import logger

DEFAULTS = {
    "analysis": {
        "exclude_patterns": ["vendor/", "testdata/", ".git/", "node_modules/"],
        "max_file_size": 2 * 1024 * 1024,
        "include_tests": True,
    },
    "rules": {
        "parallel_subtests": False,
    },
    "report": {
        "max_rows": 50,
        "snippet_lines": 2,
    },
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _coerce_env_value(raw: str, default_value: Any) -> Any:
    """Convert an environment string to the type of the default value."""
    if isinstance(default_value, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"expected one of {sorted(_TRUE_VALUES | _FALSE_VALUES)}")
    if isinstance(default_value, int):
        return int(raw)
    if isinstance(default_value, float):
        return float(raw)
    if isinstance(default_value, list):
        return [v.strip() for v in raw.split(",") if v.strip()]
    return raw


def load_runtime_config(root: str | Path = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .loopvet/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (LOOPVET_<SECTION>_<KEY>)
    2. .loopvet/config.json file
    3. Built-in defaults

    Args:
        root: Root directory to look for config file

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / CONFIG_FILE
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key not in cfg[section]:
                                logger.warning(f"Unknown config key {section}.{key} in {path}")
                                continue
                            if isinstance(value, type(cfg[section][key])):
                                cfg[section][key] = value
                            else:
                                logger.warning(
                                    f"Ignoring {section}.{key} in {path}: expected "
                                    f"{type(cfg[section][key]).__name__}, got {type(value).__name__}"
                                )
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config file from {path}: {e}")
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"LOOPVET_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    cfg[section][key] = _coerce_env_value(value, cfg[section][key])
                except (ValueError, AttributeError) as e:
                    logger.warning(
                        f"Invalid value for environment variable {env_var}: '{value}' - {e}"
                    )
                    logger.info(f"Using default value: {cfg[section][key]}")

    return cfg
