from __future__ import annotations

"""
Resolution Context.

One value owning every piece of shared mutable state of a resolution run.
It is created once per run and passed by reference to each service.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from minipack.core.platforms.base import FormatAdapter
from minipack.core.services.file_registry import FileRegistry
from minipack.core.services.file_tree import FileTree
from minipack.core.services.manifest_merger import ManifestMerger
from minipack.core.services.template_graph import TemplateDependencyGraph
from minipack.infra.bundler import BundlerEntryRegistrar
from minipack.infra.fs import FilesystemProbe


@dataclass
class ResolutionContext:
    """
    Shared registries of a resolution run.

    Attributes:
        adapter: Platform dialect in use.
        probe: Filesystem view.
        files: Scheduled-file registry.
        merger: Manifest accumulator.
        templates: Template inclusion graph.
        file_tree: Entry -> page -> file index.
        pages: Absolute paths of accepted pages.
        components: Principal paths of discovered components.
        subpackage_map: Subpackage root -> root-prefixed page paths.
    """
    adapter: FormatAdapter
    probe: FilesystemProbe
    files: FileRegistry
    merger: ManifestMerger = field(default_factory=ManifestMerger)
    templates: TemplateDependencyGraph = field(default_factory=TemplateDependencyGraph)
    file_tree: FileTree = field(default_factory=FileTree)
    pages: Set[str] = field(default_factory=set)
    components: Set[str] = field(default_factory=set)
    subpackage_map: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def create(
            cls,
            registrar: BundlerEntryRegistrar,
            adapter: FormatAdapter,
            probe: Optional[FilesystemProbe] = None,
    ) -> ResolutionContext:
        """
        Build a context whose file registry and template graph are wired
        together.
        """
        probe = probe or FilesystemProbe(adapter.bundle_extensions())
        templates = TemplateDependencyGraph()
        files = FileRegistry(registrar, adapter, templates)
        return cls(adapter=adapter, probe=probe, files=files, templates=templates)
