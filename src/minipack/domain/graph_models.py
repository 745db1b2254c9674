from __future__ import annotations

"""
Dependency Graph Data Models.

Provides the node types used by the template inclusion graph and the
entry/page/file tree that drives incremental re-resolution.
"""

from dataclasses import dataclass, field
from typing import Dict, List

# -----------------------------------------------------------------------------
# TEMPLATE GRAPH
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class TemplateDependencyNode:
    """
    A markup template and the templates it includes.

    Attributes:
        path: Absolute template path.
        is_root: True when the template was scheduled directly (page or
                 component template) rather than discovered as an include.
        deps: Included templates keyed by path, in discovery order.
        is_loaded: Set once the template's own includes were recorded.
    """
    path: str
    is_root: bool = False
    deps: Dict[str, "TemplateDependencyNode"] = field(default_factory=dict)
    is_loaded: bool = False


# -----------------------------------------------------------------------------
# FILE TREE
# -----------------------------------------------------------------------------

@dataclass
class PageNode:
    """A page path with the companion files registered for it."""
    path: str
    files: List[str] = field(default_factory=list)


@dataclass
class EntryNode:
    """
    An entry document with its pages and entry-level files.

    Attributes:
        path: Absolute entry document path.
        pages: Page nodes keyed by absolute page path.
        files: Files owned by the entry itself (stylesheet, project config...).
    """
    path: str
    pages: Dict[str, PageNode] = field(default_factory=dict)
    files: List[str] = field(default_factory=list)
