from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A file-writing helper and a sample multi-page mini-program project used
   by the service and pipeline tests.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def write_file(tmp_path: Path) -> Callable[..., str]:
    """
    Return a helper creating a file under tmp_path.

    Dict and list contents are serialized as JSON. Returns the absolute path.
    """
    def _write(relative: str, content: Any = "") -> str:
        target = tmp_path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, (dict, list)):
            content = json.dumps(content)
        target.write_text(content, encoding="utf-8")
        return str(target)

    return _write


@pytest.fixture
def sample_project(tmp_path: Path, write_file: Callable[..., str]) -> Dict[str, Any]:
    """
    Build a small 'wx' project under tmp_path/src.

    Layout:
        - Main pages 'index' and 'logs', subpackage 'packageA/' with 'cat'.
        - 'index' and 'cat' use the 'card' component; 'card' and 'avatar'
          reference each other.
        - app.json registers 'button' globally and a plugin.
        - Tab bar with two existing icons and one missing icon.

    Returns:
        Dict[str, Any]: 'context', 'src' and a ready-to-use 'config'.
    """
    write_file("src/app.json", {
        "pages": ["pages/index/index", "pages/logs/logs"],
        "subPackages": [{"root": "packageA/", "pages": ["pages/cat/cat"]}],
        "usingComponents": {"global-button": "/components/button/button"},
        "plugins": {"myPlugin": {"version": "1.0.0", "provider": "wx123"}},
        "tabBar": {"list": [
            {"pagePath": "pages/index/index", "iconPath": "images/home.png",
             "selectedIconPath": "images/home-active.png"},
            {"pagePath": "pages/logs/logs", "iconPath": "images/missing.png"},
        ]},
        "window": {"navigationBarTitleText": "Demo"},
    })
    write_file("src/app.js", "App({})")
    write_file("src/app.wxss", "page { color: red; }")
    write_file("src/project.config.json", {"appid": "wx123"})
    write_file("src/ext.json", {"extEnable": True})
    write_file("src/images/home.png", "png")
    write_file("src/images/home-active.png", "png")

    write_file("src/pages/index/index.js", "Page({})")
    write_file("src/pages/index/index.json", {"usingComponents": {"card": "../../components/card/card"}})
    write_file("src/pages/index/index.wxml", "<card/>")
    write_file("src/pages/index/index.wxss", "")

    write_file("src/pages/logs/logs.js", "Page({})")
    write_file("src/pages/logs/logs.json", {})
    write_file("src/pages/logs/logs.wxml", "<view/>")

    write_file("src/packageA/pages/cat/cat.js", "Page({})")
    write_file("src/packageA/pages/cat/cat.json", {"usingComponents": {
        "card": "/components/card/card",
        "plug": "plugin://myPlugin/comp",
    }})
    write_file("src/packageA/pages/cat/cat.wxml", "<card/>")

    write_file("src/components/card/card.js", "Component({})")
    write_file("src/components/card/card.json", {"component": True, "usingComponents": {"avatar": "../avatar/avatar"}})
    write_file("src/components/card/card.wxml", "<avatar/>")
    write_file("src/components/card/card.wxss", "")

    write_file("src/components/avatar/avatar.js", "Component({})")
    write_file("src/components/avatar/avatar.json", {"component": True, "usingComponents": {"card": "../card/card"}})
    write_file("src/components/avatar/avatar.wxml", "<card/>")

    write_file("src/components/button/button.js", "Component({})")
    write_file("src/components/button/button.json", {"component": True})
    write_file("src/components/button/button.wxml", "<button/>")

    context = str(tmp_path)
    return {
        "context": context,
        "src": os.path.join(context, "src"),
        "config": {
            "context": context,
            "entry": ["src/app.json"],
            "output_path": "dist",
            "target": "wx",
        },
    }
