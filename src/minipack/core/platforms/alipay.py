from __future__ import annotations

"""
Alipay Format Adapter.

Maps the 'ali' target to its '.axml' / '.acss' / '.sjs' dialect and ships a
bundled base stylesheet that is prepended to the aggregated app stylesheet.
"""

import os
from typing import Optional

from minipack.core.platforms.base import FormatAdapter

POLYFILL_FILENAME = "base.acss"


class AliFormatAdapter(FormatAdapter):
    """Dialect of the 'ali' target."""

    target = "ali"
    template_ext = ".axml"
    style_ext = ".acss"
    script_module_ext = ".sjs"
    project_config_name = "mini.project"

    def __init__(self, polyfill_path: Optional[str] = None) -> None:
        self._polyfill_path = polyfill_path or _bundled_polyfill_path()
        self._polyfill: Optional[str] = None

    def polyfill(self) -> str:
        """Read the bundled base stylesheet once and cache it."""
        if self._polyfill is None:
            with open(self._polyfill_path, "r", encoding="utf-8") as f:
                self._polyfill = f.read()
        return self._polyfill


def _bundled_polyfill_path() -> str:
    """Resolve the base stylesheet shipped in minipack/assets."""
    package_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    return os.path.join(package_dir, "assets", POLYFILL_FILENAME)
