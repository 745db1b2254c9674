from __future__ import annotations

"""
Domain Constants.

Centralizes file extensions, naming templates and thresholds shared by the
resolution services.
"""

from typing import List

# -----------------------------------------------------------------------------
# FILE CLASSIFICATION
# -----------------------------------------------------------------------------

SCRIPT_EXT = ".js"
CONFIG_EXT = ".json"

# Default module resolution order; aliases and host options may extend it
DEFAULT_RESOLVE_EXTENSIONS: List[str] = [SCRIPT_EXT, CONFIG_EXT]

# Preprocessor stylesheets accepted beside the platform stylesheet
PREPROCESSOR_STYLE_EXTS: List[str] = [".scss", ".pcss", ".less"]

# A page or component needs at least this many companion files
MIN_BUNDLE_FILES = 2

# -----------------------------------------------------------------------------
# NAMING
# -----------------------------------------------------------------------------

ASSET_CHUNK_TEMPLATE = "__assets_chunk_name__"
MAIN_CHUNK_NAME = "main"
APP_ENTRY_NAME = "app"
EXT_MANIFEST_NAME = "ext"

DEPENDENCY_MARKER = "node_modules"
PARENT_DIR_TOKEN = "_/"
PLUGIN_SCHEME = "plugin://"

DEFAULT_HOST_CONFIG_FILE = "minipack.config.json"
