from __future__ import annotations

"""
Unit tests for the Host Configuration Domain.

Verifies default values and loading of the optional JSON host config file.
"""

import json
import os
from pathlib import Path

import pytest

from minipack.domain.config import get_default_config, load_config
from minipack.domain.errors import ConfigurationError


def test_default_config_values() -> None:
    cfg = get_default_config()

    assert cfg["entry"] == ["src/app.json"]
    assert cfg["output_path"] == "dist"
    assert cfg["extfile"] is True
    assert cfg["target"] == "wx"
    assert cfg["extensions"] == [".js", ".json"]
    assert cfg["context"] == os.getcwd()


def test_default_config_returns_fresh_copies() -> None:
    a = get_default_config()
    a["resources"].append("x")
    assert get_default_config()["resources"] == []


def test_load_config_without_file_returns_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert load_config() == get_default_config()


def test_load_config_explicit_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_config(str(tmp_path / "nope.json"))


def test_load_config_anchors_context_at_file(tmp_path: Path) -> None:
    path = tmp_path / "cfg" / "minipack.config.json"
    path.parent.mkdir()
    path.write_text(json.dumps({"context": "..", "target": "ali"}), encoding="utf-8")

    cfg = load_config(str(path))

    assert os.path.normpath(cfg["context"]) == str(tmp_path)
    assert cfg["target"] == "ali"
    assert cfg["output_path"] == "dist"


def test_load_config_defaults_context_to_file_directory(tmp_path: Path) -> None:
    path = tmp_path / "minipack.config.json"
    path.write_text("{}", encoding="utf-8")
    assert load_config(str(path))["context"] == str(tmp_path)


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_load_config_rejects_invalid_documents(tmp_path: Path, content: str) -> None:
    path = tmp_path / "minipack.config.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(str(path))
