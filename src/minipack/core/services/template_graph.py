from __future__ import annotations

"""
Template Inclusion Graph.

Records which markup templates include which others. The graph only grows:
repeated discovery passes add edges, nothing is ever pruned, and a node
moves from unloaded to loaded exactly once.
"""

from typing import Dict, Iterable, List, Optional

from minipack.domain.errors import InvariantViolationError
from minipack.domain.graph_models import TemplateDependencyNode


class TemplateDependencyGraph:
    """
    Additive graph of template inclusion edges keyed by absolute path.
    """

    def __init__(self) -> None:
        self._nodes: Dict[str, TemplateDependencyNode] = {}

    def __contains__(self, path: str) -> bool:
        return path in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, path: str) -> Optional[TemplateDependencyNode]:
        return self._nodes.get(path)

    def add_root(self, path: str) -> TemplateDependencyNode:
        """
        Record a directly scheduled template.

        An existing node (e.g. first seen as an include) is promoted to root.
        """
        node = self._nodes.get(path)
        if node is None:
            node = TemplateDependencyNode(path=path, is_root=True)
            self._nodes[path] = node
        else:
            node.is_root = True
        return node

    def add_edges(self, root_path: str, dependency_paths: Iterable[str]) -> TemplateDependencyNode:
        """
        Link a template to the templates it includes.

        Args:
            root_path: Including template; must already be recorded.
            dependency_paths: Included template paths, in source order.

        Returns:
            TemplateDependencyNode: The including node, now loaded.

        Raises:
            InvariantViolationError: If 'root_path' has no node yet.
        """
        target = self._nodes.get(root_path)
        if target is None:
            raise InvariantViolationError(
                f"Template {root_path} declares includes before being recorded",
                path=root_path,
            )

        for path in dependency_paths:
            known = self._nodes.get(path)
            if known is not None and target.is_loaded:
                target.deps[path] = known
                continue

            node = known or TemplateDependencyNode(path=path)
            target.deps[path] = node
            self._nodes[path] = node

        target.is_loaded = True
        return target

    def dependencies_of(self, path: str) -> List[str]:
        """
        Transitive includes of a template, depth-first in discovery order.
        """
        node = self._nodes.get(path)
        if node is None:
            return []

        seen: Dict[str, None] = {}
        stack = list(reversed(list(node.deps.values())))
        while stack:
            current = stack.pop()
            if current.path in seen or current.path == path:
                continue
            seen[current.path] = None
            stack.extend(reversed(list(current.deps.values())))
        return list(seen)

    def roots_depending_on(self, path: str) -> List[str]:
        """
        Root templates that include 'path' directly or transitively.

        Used to decide which pages must be rebuilt when an included template
        changes.
        """
        return [
            node.path
            for node in self._nodes.values()
            if node.is_root and node.path != path and path in self.dependencies_of(node.path)
        ]
