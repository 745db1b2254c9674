from __future__ import annotations

"""
Bundler Registration Boundary.

Declares the interface through which discovered files are handed to the
external bundler, plus an in-memory implementation used by the CLI and by
hosts that only need the resolved file lists.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Sequence

from minipack.domain.registration_models import AssetEntry, ScriptEntry

logger = logging.getLogger(__name__)


class BundlerEntryRegistrar(ABC):
    """
    Receiver of compiled-entry declarations.
    """

    @abstractmethod
    def declare_script_entry(self, context_dir: str, path: str, entry_name: str) -> None:
        """
        Declare one script as an individually compiled entry.

        Args:
            context_dir: Directory the entry is declared relative to.
            path: Absolute script path.
            entry_name: Output entry name.
        """

    @abstractmethod
    def declare_asset_entry(self, context_dir: str, files: Sequence[str], chunk_name: str) -> None:
        """
        Declare a batch of non-script files under one synthetic chunk.

        Args:
            context_dir: Directory the batch is declared relative to.
            files: Absolute asset paths.
            chunk_name: Run-unique generated chunk name.
        """


class RecordingRegistrar(BundlerEntryRegistrar):
    """
    Registrar that records declarations instead of forwarding them.
    """

    def __init__(self) -> None:
        self.scripts: List[ScriptEntry] = []
        self.assets: List[AssetEntry] = []

    def declare_script_entry(self, context_dir: str, path: str, entry_name: str) -> None:
        self.scripts.append(ScriptEntry(context_dir=context_dir, path=path, name=entry_name))
        logger.debug(f"Script entry '{entry_name}' -> {path}")

    def declare_asset_entry(self, context_dir: str, files: Sequence[str], chunk_name: str) -> None:
        self.assets.append(AssetEntry(context_dir=context_dir, files=tuple(files), chunk_name=chunk_name))
        logger.debug(f"Asset chunk '{chunk_name}' with {len(files)} files")
