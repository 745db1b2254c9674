from __future__ import annotations

"""
Discovered File Registry.

Write-once bookkeeping of every file scheduled for compilation. Scripts are
declared to the bundler one entry each; every other file registered in the
same call is batched into one synthetic asset chunk. Registering a path a
second time is a no-op, whatever route discovered it.
"""

import logging
import os
from typing import Iterable, List, Set

from minipack.core.platforms.base import FormatAdapter
from minipack.core.services.template_graph import TemplateDependencyGraph
from minipack.domain.constants import ASSET_CHUNK_TEMPLATE, MAIN_CHUNK_NAME, SCRIPT_EXT
from minipack.infra.bundler import BundlerEntryRegistrar

logger = logging.getLogger(__name__)


class FileRegistry:
    """
    Idempotent scheduler of discovered files.

    The membership test and insertion for a path happen in one synchronous
    step, so concurrent resolution units can share one registry without
    locking as long as they run on the same event loop.
    """

    def __init__(
            self,
            registrar: BundlerEntryRegistrar,
            adapter: FormatAdapter,
            templates: TemplateDependencyGraph,
    ) -> None:
        self._registrar = registrar
        self._adapter = adapter
        self._templates = templates
        self._files: Set[str] = set()
        self._pending: List[str] = []
        self._chunk_index = 0
        self.chunk_names: List[str] = [MAIN_CHUNK_NAME]

    def __contains__(self, path: str) -> bool:
        return path in self._files

    def __len__(self) -> int:
        return len(self._files)

    @property
    def files(self) -> List[str]:
        return sorted(self._files)

    def register(self, context_dir: str, files: Iterable[str]) -> List[str]:
        """
        Schedule unseen files for compilation.

        Args:
            context_dir: Directory entries are declared relative to.
            files: Absolute file paths, possibly already known.

        Returns:
            List[str]: The files that were newly scheduled.
        """
        scripts: List[str] = []
        assets: List[str] = []

        for path in files:
            if path in self._files:
                continue
            self._files.add(path)
            if self._adapter.is_template(path):
                self._templates.add_root(path)

            if path.endswith(SCRIPT_EXT):
                scripts.append(path)
            else:
                assets.append(path)

        if assets:
            self._declare_assets(context_dir, assets)
        for path in scripts:
            name = os.path.splitext(os.path.relpath(path, context_dir))[0]
            self._registrar.declare_script_entry(context_dir, path, name)

        return scripts + assets

    def listen(self, files: Iterable[str]) -> None:
        """Track files without scheduling them."""
        for path in files:
            self._files.add(path)

    def append_pending(self, files: Iterable[str]) -> List[str]:
        """
        Queue unregistered files for the next registration pass.

        Returns:
            List[str]: The files actually queued.
        """
        queued: List[str] = []
        for path in files:
            if path not in self._files and path not in self._pending:
                self._pending.append(path)
                queued.append(path)
        return queued

    def drain_pending(self) -> List[str]:
        pending, self._pending = self._pending, []
        return pending

    @property
    def pending(self) -> List[str]:
        return list(self._pending)

    def _declare_assets(self, context_dir: str, assets: List[str]) -> None:
        chunk_name = f"{ASSET_CHUNK_TEMPLATE}{self._chunk_index}"
        self._chunk_index += 1
        self.chunk_names.append(chunk_name)
        self._registrar.declare_asset_entry(context_dir, assets, chunk_name)
