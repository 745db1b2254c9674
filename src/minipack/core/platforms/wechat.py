from __future__ import annotations

"""
WeChat Format Adapter.

Default dialect: '.wxml' markup, '.wxss' stylesheets and '.wxs' script
modules. No polyfill is required.
"""

from minipack.core.platforms.base import FormatAdapter


class WxFormatAdapter(FormatAdapter):
    """Dialect of the 'wx' target."""

    target = "wx"
    template_ext = ".wxml"
    style_ext = ".wxss"
    script_module_ext = ".wxs"
    project_config_name = "project.config"

    def polyfill(self) -> str:
        return ""
