from __future__ import annotations

"""
Integration tests for the Filesystem Probe.

Verifies companion-file lookup, bundle completeness and JSON loading
against a real temporary directory.
"""

import os
from pathlib import Path
from typing import Callable

import pytest

from minipack.domain.errors import ConfigurationError, IncompleteAssetError
from minipack.infra.fs import FilesystemProbe, normalize_path, read_package_main, strip_extension


def test_get_files_respects_extension_order(tmp_path: Path, write_file: Callable) -> None:
    write_file("page.wxml")
    write_file("page.js")
    probe = FilesystemProbe([".js", ".json", ".wxml"])

    assert probe.get_files(str(tmp_path), "page") == [str(tmp_path / "page.js"), str(tmp_path / "page.wxml")]
    assert probe.get_files(str(tmp_path / "page"), exts=[".wxml"]) == [str(tmp_path / "page.wxml")]


def test_collect_bundle_requires_two_files(tmp_path: Path, write_file: Callable) -> None:
    write_file("solo.js")
    probe = FilesystemProbe([".js", ".json"])

    with pytest.raises(IncompleteAssetError) as exc:
        probe.collect_bundle(str(tmp_path / "solo"))

    assert exc.value.path == str(tmp_path / "solo")
    assert exc.value.found == [str(tmp_path / "solo.js")]


def test_read_json_errors_are_configuration_errors(tmp_path: Path, write_file: Callable) -> None:
    bad = write_file("bad.json", "{oops")
    probe = FilesystemProbe()

    with pytest.raises(ConfigurationError):
        probe.read_json(bad)
    with pytest.raises(ConfigurationError):
        probe.read_json(str(tmp_path / "missing.json"))


def test_read_package_main(tmp_path: Path, write_file: Callable) -> None:
    write_file("pkg/package.json", {"main": "lib/index.js"})
    write_file("broken/package.json", "{")
    probe = FilesystemProbe()

    assert read_package_main(probe, str(tmp_path / "pkg")) == "lib/index.js"
    assert read_package_main(probe, str(tmp_path / "broken")) is None
    assert read_package_main(probe, str(tmp_path / "none")) is None


def test_path_helpers(tmp_path: Path) -> None:
    assert normalize_path("", str(tmp_path)) == str(tmp_path)
    assert os.path.isabs(normalize_path("relative/dir", str(tmp_path)))
    assert strip_extension("/p/a/index.js") == "/p/a/index"
