from __future__ import annotations

"""
Entry Normalization.

Turns the host's entry option (a path, a list of paths or a chunk-name to
path mapping) into ordered EntryDescriptors. Only JSON documents are
entries; the first one is the main entry.
"""

import logging
import os
from typing import Any, List

from minipack.domain.constants import CONFIG_EXT
from minipack.domain.errors import ConfigurationError
from minipack.domain.manifest_models import EntryDescriptor
from minipack.infra.fs import FilesystemProbe

logger = logging.getLogger(__name__)


def normalize_entries(
        context: str,
        entry: Any,
        chunk_names: List[str],
        probe: FilesystemProbe,
) -> List[EntryDescriptor]:
    """
    Resolve entry paths against the project context.

    Keys of a mapping whose value is a JSON document are appended to
    'chunk_names' so the bundler output they produce can be ignored.

    Args:
        context: Project context directory.
        entry: Host entry option.
        chunk_names: Ignored chunk names, extended in place.
        probe: Filesystem view used for existence checks.

    Returns:
        List[EntryDescriptor]: Entries in declaration order, main first.

    Raises:
        ConfigurationError: If an entry file does not exist or no JSON
            entry is declared.
    """
    paths: List[str] = []

    if isinstance(entry, dict):
        for name, path in entry.items():
            if isinstance(path, str) and path.endswith(CONFIG_EXT):
                chunk_names.append(name)
                paths.append(path)
    elif isinstance(entry, (list, tuple)):
        paths.extend(p for p in entry if isinstance(p, str) and p.endswith(CONFIG_EXT))
    elif isinstance(entry, str) and entry.endswith(CONFIG_EXT):
        paths.append(entry)

    if not paths:
        raise ConfigurationError("No valid JSON entry document was declared")

    descriptors: List[EntryDescriptor] = []
    seen = set()
    for raw in paths:
        path = os.path.normpath(raw if os.path.isabs(raw) else os.path.join(context, raw))
        if not probe.is_file(path):
            raise ConfigurationError(f"Entry document not found: {path}", path=path)
        if path in seen:
            continue
        seen.add(path)

        descriptors.append(EntryDescriptor(
            config_path=path,
            context_dir=os.path.dirname(path),
            name=os.path.splitext(os.path.basename(path))[0],
            is_main=not descriptors,
        ))

    logger.debug(f"Entries: {[d.config_path for d in descriptors]}")
    return descriptors
