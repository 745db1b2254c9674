from __future__ import annotations

"""
Unit tests for the Template Inclusion Graph.

Verifies node creation, root promotion, additive edges and the transitive
queries used for rebuild decisions.
"""

import pytest

from minipack.core.services.template_graph import TemplateDependencyGraph
from minipack.domain.errors import InvariantViolationError


def test_add_root_creates_root_node() -> None:
    graph = TemplateDependencyGraph()
    node = graph.add_root("/p/index.wxml")

    assert "/p/index.wxml" in graph
    assert node.is_root and not node.is_loaded


def test_add_edges_requires_recorded_root() -> None:
    graph = TemplateDependencyGraph()
    with pytest.raises(InvariantViolationError):
        graph.add_edges("/p/unknown.wxml", ["/p/a.wxml"])


def test_add_edges_creates_dependency_nodes_and_marks_loaded() -> None:
    graph = TemplateDependencyGraph()
    graph.add_root("/p/index.wxml")

    node = graph.add_edges("/p/index.wxml", ["/p/a.wxml", "/p/b.wxml", "/p/a.wxml"])

    assert node.is_loaded
    assert list(node.deps) == ["/p/a.wxml", "/p/b.wxml"]
    assert graph.get("/p/a.wxml").is_root is False
    assert len(graph) == 3


def test_dependency_nodes_are_shared() -> None:
    graph = TemplateDependencyGraph()
    graph.add_root("/p/one.wxml")
    graph.add_root("/p/two.wxml")
    graph.add_edges("/p/one.wxml", ["/p/shared.wxml"])
    graph.add_edges("/p/two.wxml", ["/p/shared.wxml"])

    assert graph.get("/p/one.wxml").deps["/p/shared.wxml"] is graph.get("/p/two.wxml").deps["/p/shared.wxml"]


def test_edges_are_never_removed() -> None:
    graph = TemplateDependencyGraph()
    graph.add_root("/p/index.wxml")
    graph.add_edges("/p/index.wxml", ["/p/a.wxml"])
    graph.add_edges("/p/index.wxml", ["/p/b.wxml"])

    assert set(graph.get("/p/index.wxml").deps) == {"/p/a.wxml", "/p/b.wxml"}


def test_include_promoted_to_root() -> None:
    graph = TemplateDependencyGraph()
    graph.add_root("/p/index.wxml")
    graph.add_edges("/p/index.wxml", ["/p/a.wxml"])

    graph.add_root("/p/a.wxml")

    assert graph.get("/p/a.wxml").is_root
    assert graph.get("/p/index.wxml").deps["/p/a.wxml"] is graph.get("/p/a.wxml")


def test_transitive_queries() -> None:
    graph = TemplateDependencyGraph()
    graph.add_root("/p/index.wxml")
    graph.add_root("/p/other.wxml")
    graph.add_edges("/p/index.wxml", ["/p/a.wxml"])
    graph.add_edges("/p/a.wxml", ["/p/b.wxml", "/p/index.wxml"])

    assert graph.dependencies_of("/p/index.wxml") == ["/p/a.wxml", "/p/b.wxml"]
    assert graph.roots_depending_on("/p/b.wxml") == ["/p/index.wxml"]
    assert graph.dependencies_of("/p/missing.wxml") == []
