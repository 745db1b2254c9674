from __future__ import annotations

"""
Entry / Page / File Association Tree.

Remembers which entry document owns which pages and which files back each
page, so a rewritten manifest or a changed file can be traced back to the
units that need re-resolution.
"""

from typing import Dict, Iterable, List, Optional

from minipack.domain.errors import InvariantViolationError
from minipack.domain.graph_models import EntryNode, PageNode


class FileTree:
    """
    Hierarchical entry -> page -> file index.

    Pages and files are attached to the most recently added entry unless an
    entry path is passed explicitly.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, EntryNode] = {}
        self._current: Optional[str] = None
        self._owner_of_file: Dict[str, str] = {}
        self._page_of_file: Dict[str, str] = {}

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def add_entry(self, entry_path: str) -> EntryNode:
        node = self._entries.setdefault(entry_path, EntryNode(path=entry_path))
        self._current = entry_path
        return node

    def add_page(self, page: str, files: Iterable[str], entry_path: Optional[str] = None) -> PageNode:
        """
        Attach a page and its files to an entry.

        A page already known under any entry keeps its original owner.
        """
        entry = self._entry(entry_path)
        for node in self._entries.values():
            if page in node.pages:
                return node.pages[page]

        page_node = PageNode(path=page, files=list(files))
        entry.pages[page] = page_node
        for f in page_node.files:
            self._owner_of_file.setdefault(f, entry.path)
            self._page_of_file.setdefault(f, page)
        return page_node

    def set_file(self, files: Iterable[str], entry_path: Optional[str] = None) -> None:
        """Attach entry-level files (stylesheet, project config...)."""
        entry = self._entry(entry_path)
        for f in files:
            if f not in entry.files:
                entry.files.append(f)
            self._owner_of_file.setdefault(f, entry.path)

    def pages_of(self, entry_path: str) -> List[str]:
        node = self._entries.get(entry_path)
        return list(node.pages) if node else []

    def files_of_page(self, page: str) -> List[str]:
        for node in self._entries.values():
            if page in node.pages:
                return list(node.pages[page].files)
        return []

    def entry_of(self, file_path: str) -> Optional[str]:
        return self._owner_of_file.get(file_path)

    def page_of(self, file_path: str) -> Optional[str]:
        return self._page_of_file.get(file_path)

    def _entry(self, entry_path: Optional[str]) -> EntryNode:
        path = entry_path or self._current
        if path is None:
            raise InvariantViolationError("FileTree used before any entry was added")
        if path not in self._entries:
            return self.add_entry(path)
        return self._entries[path]
