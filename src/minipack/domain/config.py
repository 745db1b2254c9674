from __future__ import annotations

"""
Host Configuration Domain.

Provides the default build options and loads the optional JSON host
configuration file. Values are kept as a plain dictionary; validation and
type coercion happen in the pipeline validator.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from minipack.domain.constants import DEFAULT_HOST_CONFIG_FILE, DEFAULT_RESOLVE_EXTENSIONS
from minipack.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

SUPPORTED_TARGETS = ("wx", "ali")


# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default build configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Project layout
        "context": os.getcwd(),
        "entry": ["src/app.json"],
        "output_path": "dist",
        "resources": [],

        # Extension manifest: True loads <main>/ext.json, a string names a file
        "extfile": True,

        # Platform dialect
        "target": "wx",

        # Module resolution
        "alias": {},
        "extensions": list(DEFAULT_RESOLVE_EXTENSIONS),

        # Move modules used by a single subpackage into that subpackage
        "common_subpackages": True,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a host configuration file and merge it over the defaults.

    When no path is given, 'minipack.config.json' in the working directory is
    used if present. Relative paths inside the file are kept as-is; they are
    resolved against 'context' by the validator.

    Args:
        path: Optional explicit configuration file path.

    Returns:
        Dict[str, Any]: Defaults updated with the file contents.

    Raises:
        ConfigurationError: If an explicit file is missing or any file is
            not a JSON object.
    """
    config = get_default_config()
    explicit = path is not None
    path = path or os.path.join(os.getcwd(), DEFAULT_HOST_CONFIG_FILE)

    if not os.path.exists(path):
        if explicit:
            raise ConfigurationError(f"Host configuration not found: {path}", path=path)
        logger.debug("No host configuration file found. Using defaults.")
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to read host configuration {path}: {e}", path=path) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Host configuration {path} must be a JSON object", path=path)

    # Relative context is anchored at the config file itself
    if isinstance(data.get("context"), str) and not os.path.isabs(data["context"]):
        data["context"] = os.path.join(os.path.dirname(os.path.abspath(path)), data["context"])
    elif "context" not in data:
        data["context"] = os.path.dirname(os.path.abspath(path))

    config.update(data)
    logger.debug(f"Host configuration loaded from {path}")
    return config
