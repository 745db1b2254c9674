from __future__ import annotations

"""
Output Path Computation.

Maps any source path seen by the bundler (absolute, or relative to the
compiled-source directory with leading parent-directory markers) to its
location inside the output tree. The root set is frozen at construction, so
a resolver instance is a pure function that can be shared freely between
concurrent resolution units.
"""

import logging
import os
import posixpath
import re
from typing import Iterable, List, Optional, Tuple

from minipack.domain.constants import DEPENDENCY_MARKER, PARENT_DIR_TOKEN

logger = logging.getLogger(__name__)

_PARENT_DIR = "../"
_MARKER_SEGMENT = DEPENDENCY_MARKER + "/"


class SourceRootResolver:
    """
    Frozen set of source roots with output-path algebra over them.

    Roots are tried in construction order: compiled-source directory first,
    then declared resource roots, then each entry document's directory.
    """

    def __init__(
            self,
            compiler_context: str,
            entry_paths: Iterable[str] = (),
            resources: Iterable[str] = (),
            output_path: Optional[str] = None,
    ) -> None:
        """
        Args:
            compiler_context: Absolute compiled-source directory.
            entry_paths: Absolute entry document paths.
            resources: Additional absolute resource roots.
            output_path: Output directory, returned unchanged when queried.
        """
        self.compiler_context = _clean(compiler_context)
        self.output_path = output_path

        ordered: List[str] = []
        for root in [compiler_context, *resources, *(os.path.dirname(e) for e in entry_paths)]:
            root = _clean(root)
            if root and root not in ordered:
                ordered.append(root)
        self._roots: Tuple[str, ...] = tuple(ordered)

        # Leftmost match wins; at equal positions the earlier root wins
        self._pattern = re.compile(
            "|".join(f"{re.escape(root)}(?=/)" for root in self._roots)
        )

    @property
    def roots(self) -> Tuple[str, ...]:
        return self._roots

    def resolve(self, path: str) -> str:
        """
        Compute the output-tree path of a source file.

        Args:
            path: Absolute path, or a path relative to the compiled-source
                  directory where leading '../' or '_/' tokens climb out of it.

        Returns:
            str: Relative output path, or the input when no rule applies.
        """
        if self.output_path is not None and path == self.output_path:
            return path

        levels, tail = _count_parent_tokens(path)

        candidate: Optional[str] = None
        if os.path.isabs(tail):
            candidate = tail
        elif levels:
            base = self.compiler_context
            for _ in range(levels):
                base = os.path.dirname(base)
            candidate = os.path.join(base, tail)

        result = tail
        if candidate is not None:
            match = self._pattern.search(candidate)
            if match:
                result = candidate[match.end() + 1:]

        return _flatten_dependency(result)

    def relative_request(self, from_path: str, to_path: str) -> str:
        """
        Relative require path between two source files, in output space.

        Args:
            from_path: Requiring source file.
            to_path: Required source file.

        Returns:
            str: Posix-style relative path from the output location of
            'from_path' to that of 'to_path'.
        """
        from_out = self.resolve(from_path)
        to_out = self.resolve(to_path)
        return posixpath.relpath(to_out, posixpath.dirname(from_out) or ".")


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _clean(path: str) -> str:
    return os.path.normpath(path) if path else ""


def _count_parent_tokens(path: str) -> Tuple[int, str]:
    """Strip the leading run of '../' / '_/' tokens and count them."""
    levels = 0
    while True:
        if path.startswith(_PARENT_DIR):
            path = path[len(_PARENT_DIR):]
        elif path.startswith(PARENT_DIR_TOKEN):
            path = path[len(PARENT_DIR_TOKEN):]
        else:
            return levels, path
        levels += 1


def _flatten_dependency(path: str) -> str:
    """Drop everything up to and including the first dependency marker."""
    if path.startswith(_MARKER_SEGMENT):
        path = path[len(_MARKER_SEGMENT):]
    else:
        idx = path.find("/" + _MARKER_SEGMENT)
        if idx == -1:
            return path
        path = path[idx + len(_MARKER_SEGMENT) + 1:]

    if path.startswith(_MARKER_SEGMENT) or ("/" + _MARKER_SEGMENT) in path:
        logger.warning(f"Output path {path} still contains '{DEPENDENCY_MARKER}' after flattening")
    return path
