from __future__ import annotations

"""
Unit tests for the Discovered File Registry.

Verifies:
1. Script/asset split and bundler declarations.
2. Sequential synthetic chunk names.
3. Idempotence across registration routes.
4. Pending queue for incremental growth.
"""

import pytest

from minipack.core.platforms import WxFormatAdapter
from minipack.core.services.file_registry import FileRegistry
from minipack.core.services.template_graph import TemplateDependencyGraph
from minipack.infra.bundler import RecordingRegistrar


@pytest.fixture
def registrar() -> RecordingRegistrar:
    return RecordingRegistrar()


@pytest.fixture
def templates() -> TemplateDependencyGraph:
    return TemplateDependencyGraph()


@pytest.fixture
def registry(registrar: RecordingRegistrar, templates: TemplateDependencyGraph) -> FileRegistry:
    return FileRegistry(registrar, WxFormatAdapter(), templates)


def test_register_declares_scripts_and_one_asset_chunk(registry: FileRegistry, registrar: RecordingRegistrar) -> None:
    added = registry.register("/p", ["/p/pages/a/a.js", "/p/pages/a/a.json", "/p/pages/a/a.wxml"])

    assert sorted(added) == ["/p/pages/a/a.js", "/p/pages/a/a.json", "/p/pages/a/a.wxml"]
    assert [(s.path, s.name) for s in registrar.scripts] == [("/p/pages/a/a.js", "pages/a/a")]
    assert len(registrar.assets) == 1
    assert registrar.assets[0].files == ("/p/pages/a/a.json", "/p/pages/a/a.wxml")
    assert registrar.assets[0].chunk_name == "__assets_chunk_name__0"


def test_chunk_names_are_sequential(registry: FileRegistry, registrar: RecordingRegistrar) -> None:
    registry.register("/p", ["/p/a.json"])
    registry.register("/p", ["/p/b.json"])

    assert [a.chunk_name for a in registrar.assets] == ["__assets_chunk_name__0", "__assets_chunk_name__1"]
    assert registry.chunk_names == ["main", "__assets_chunk_name__0", "__assets_chunk_name__1"]


def test_register_is_idempotent(registry: FileRegistry, registrar: RecordingRegistrar) -> None:
    registry.register("/p", ["/p/a.js", "/p/a.json"])
    added = registry.register("/p", ["/p/a.js", "/p/a.json"])

    assert added == []
    assert len(registrar.scripts) == 1
    assert len(registrar.assets) == 1
    assert len(registry) == 2


def test_listened_files_are_not_scheduled(registry: FileRegistry, registrar: RecordingRegistrar) -> None:
    registry.listen(["/p/a.js"])

    assert registry.register("/p", ["/p/a.js"]) == []
    assert "/p/a.js" in registry
    assert registrar.scripts == []


def test_templates_become_graph_roots(registry: FileRegistry, templates: TemplateDependencyGraph) -> None:
    registry.register("/p", ["/p/a.wxml", "/p/a.wxss"])

    assert templates.get("/p/a.wxml").is_root
    assert "/p/a.wxss" not in templates


def test_pending_queue_skips_known_files(registry: FileRegistry) -> None:
    registry.register("/p", ["/p/a.json"])

    queued = registry.append_pending(["/p/a.json", "/p/b.json", "/p/b.json"])

    assert queued == ["/p/b.json"]
    assert registry.pending == ["/p/b.json"]
    assert registry.drain_pending() == ["/p/b.json"]
    assert registry.pending == []


def test_files_are_sorted(registry: FileRegistry) -> None:
    registry.register("/p", ["/p/z.json", "/p/a.json"])
    assert registry.files == ["/p/a.json", "/p/z.json"]
