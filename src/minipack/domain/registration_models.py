from __future__ import annotations

"""
Bundler Registration Data Models.

Defines the records exchanged with the external bundler and the aggregate
result returned to callers once a resolution pass completes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

# -----------------------------------------------------------------------------
# DECLARED ENTRIES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ScriptEntry:
    """
    A script compiled as its own bundler entry.

    Attributes:
        context_dir: Directory the entry is declared relative to.
        path: Absolute script path.
        name: Entry name (path relative to context, no extension).
    """
    context_dir: str
    path: str
    name: str


@dataclass(frozen=True)
class AssetEntry:
    """
    A batch of non-script files emitted under one synthetic chunk.

    Attributes:
        context_dir: Directory the batch is declared relative to.
        files: Absolute asset paths in registration order.
        chunk_name: Generated, run-unique chunk name.
    """
    context_dir: str
    files: Tuple[str, ...]
    chunk_name: str


# -----------------------------------------------------------------------------
# RESOLUTION RESULT
# -----------------------------------------------------------------------------

@dataclass
class ResolutionResult:
    """
    Snapshot of a completed resolution pass.

    Attributes:
        manifest: Merged manifest in wire form.
        entries: Entry document paths in visitation order.
        pages: Absolute paths of every accepted page.
        components: Principal paths of every discovered component.
        files: Every scheduled file, sorted.
        chunk_names: Chunk names the output stage should discard.
        output_paths: Source file -> output-tree path.
    """
    manifest: Dict[str, Any]
    entries: List[str] = field(default_factory=list)
    pages: List[str] = field(default_factory=list)
    components: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)
    chunk_names: List[str] = field(default_factory=list)
    output_paths: Dict[str, str] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# BUNDLER MODULE VIEW
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ModuleUsage:
    """
    The bundler's view of one compiled module, as seen by code splitting.

    Attributes:
        resource: Source path of the module.
        is_entry: True when the module is a declared entry.
        used_by: Output paths of the files requiring this module. Only
                 modules produced through minipack carry this set; None
                 means usage was never tracked.
    """
    resource: str
    is_entry: bool = False
    used_by: Optional[FrozenSet[str]] = None
