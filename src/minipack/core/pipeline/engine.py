from __future__ import annotations

"""
Core resolution pipeline.

This module coordinates a resolution run:
1. Validates the host options and normalizes entry documents.
2. Absorbs each entry manifest and discovers its new pages.
3. Registers page bundles and entry stylesheets with the bundler.
4. Launches one component closure per entry concurrently.
5. Registers main-entry extras (project config, ext manifest, main script,
   tab-bar icons).
6. Joins the closures, registers their files and folds the manifest.

Later manifest rewrites re-enter through 'app_json_change' and
'flush_pending'.
"""

import asyncio
import logging
import os
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional, Sequence

from minipack.core.analysis.classifier import SubpackageClassifier
from minipack.core.analysis.source_roots import SourceRootResolver
from minipack.core.pipeline.context import ResolutionContext
from minipack.core.pipeline.entries import normalize_entries
from minipack.core.pipeline.validator import validate_config
from minipack.core.platforms.base import FormatAdapter
from minipack.core.platforms.registry import select_adapter
from minipack.core.services.component_graph import ComponentGraphResolver
from minipack.core.services.module_resolver import ComponentFileListResolver, ModuleResolver
from minipack.domain.constants import (
    APP_ENTRY_NAME,
    CONFIG_EXT,
    EXT_MANIFEST_NAME,
    SCRIPT_EXT,
)
from minipack.domain.errors import IncompleteAssetError, MiniPackError
from minipack.domain.manifest_models import AppConfigDocument, EntryDescriptor
from minipack.domain.registration_models import ModuleUsage, ResolutionResult
from minipack.infra.bundler import BundlerEntryRegistrar, RecordingRegistrar
from minipack.infra.fs import FilesystemProbe

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """
    Orchestrator of one resolution run.

    All shared registries live in 'ctx'; the engine only sequences the
    services that operate on them.
    """

    def __init__(
            self,
            config: Optional[Dict[str, Any]],
            registrar: BundlerEntryRegistrar,
            *,
            adapter: Optional[FormatAdapter] = None,
            probe: Optional[FilesystemProbe] = None,
            module_resolver: Optional[ModuleResolver] = None,
    ) -> None:
        """
        Args:
            config: Host options (raw or partial); validated here.
            registrar: Receiver of bundler entry declarations.
            adapter: Platform dialect; selected from 'target' when omitted.
            probe: Filesystem view; a disk probe when omitted.
            module_resolver: Request resolver; built from 'alias' and
                             'extensions' when omitted.

        Raises:
            ConfigurationError: If the target is unknown or no valid entry
                document is declared.
        """
        cfg, warnings = validate_config(config, strict=False)
        for warning in warnings:
            logger.warning(f"Configuration Warning: {warning}")
        self.options = cfg

        self.adapter = adapter or select_adapter(cfg["target"])
        self.ctx = ResolutionContext.create(registrar, self.adapter, probe)
        self.classifier = SubpackageClassifier(self.ctx)

        context = cfg["context"]
        self.compiler_context = os.path.join(context, "src")
        self.output_path = os.path.normpath(os.path.join(context, cfg["output_path"]))
        self.entries: List[EntryDescriptor] = normalize_entries(
            context, cfg["entry"], self.ctx.files.chunk_names, self.ctx.probe
        )
        self.main_entry = self.entries[0]

        # Roots are frozen from here on
        self.roots = SourceRootResolver(
            self.compiler_context,
            [e.config_path for e in self.entries],
            cfg["resources"],
            self.output_path,
        )

        self.module_resolver = module_resolver or ModuleResolver(
            self.ctx.probe, cfg["extensions"], cfg["alias"]
        )
        self.components = ComponentGraphResolver(
            self.ctx,
            ComponentFileListResolver(
                self.module_resolver, self.ctx.probe, self.adapter, self.main_entry.context_dir
            ),
        )

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load_entries(self) -> ResolutionResult:
        """
        Resolve every entry and its transitive file set.

        Returns:
            ResolutionResult: Snapshot of the completed run.

        Raises:
            ConfigurationError: If an entry document cannot be read.
            ResolutionFailure: If any closure failed; raised after every
                closure has finished.
        """
        logger.info(f"Resolution started for {len(self.entries)} entries ({self.adapter.target}).")
        closures: List[asyncio.Task] = []

        for entry in self.entries:
            self.ctx.file_tree.add_entry(entry.config_path)
            config = self.ctx.merger.absorb(
                self.ctx.probe.read_json(entry.config_path), entry.config_path
            )

            bundles = self._collect_pages(config, entry.context_dir, entry.config_path)
            groups = [*bundles, [entry.config_path]]
            closures.append(asyncio.ensure_future(self._resolve_closure(entry, groups)))

            self.ctx.files.register(entry.context_dir, [f for b in groups for f in b])

            entry_files = self.adapter.entry_wiring(self.ctx.probe, entry.context_dir, entry.name)
            self.ctx.file_tree.set_file(entry_files, entry.config_path)
            self.ctx.files.register(entry.context_dir, entry_files)

        self._register_main_extras()

        results = await asyncio.gather(*closures, return_exceptions=True)
        failures = [r for r in results if isinstance(r, BaseException)]
        for failure in failures:
            logger.error(f"Component resolution failed: {failure}")
        if failures:
            raise failures[0]

        result = self.result()
        logger.info(
            f"Resolution finished: {len(result.pages)} pages, "
            f"{len(result.components)} components, {len(result.files)} files."
        )
        return result

    async def _resolve_closure(self, entry: EntryDescriptor, groups: Sequence[Sequence[str]]) -> List[str]:
        files = await self.components.expand_pages(groups)
        return self.ctx.files.register(entry.context_dir, files)

    def _collect_pages(
            self,
            config: AppConfigDocument,
            context_dir: str,
            entry_path: str,
    ) -> List[List[str]]:
        """Bundles of the document's new pages; incomplete pages are dropped."""
        bundles: List[List[str]] = []
        for page in self.classifier.classify_new_pages(config, context_dir):
            try:
                files = self.ctx.probe.collect_bundle(page, self.adapter.bundle_extensions(), kind="page")
            except IncompleteAssetError as e:
                logger.warning(f"{e}; page skipped")
                continue

            self.ctx.pages.add(page)
            self.ctx.file_tree.add_page(page, files, entry_path)
            bundles.append(files)
        return bundles

    def _register_main_extras(self) -> None:
        main = self.main_entry
        probe = self.ctx.probe

        files = probe.get_files(main.context_dir, self.adapter.project_config_name, [CONFIG_EXT])
        if self.options["extfile"] is True:
            files += probe.get_files(main.context_dir, EXT_MANIFEST_NAME, [CONFIG_EXT])
        files += probe.get_files(main.context_dir, main.name, [SCRIPT_EXT])
        files += self._tab_bar_icons(main.context_dir)

        self.ctx.file_tree.set_file(files, main.config_path)
        self.ctx.files.register(main.context_dir, files)

    def _tab_bar_icons(self, context_dir: str) -> List[str]:
        tab_bar = self.ctx.merger.finalize().tab_bar
        tabs = tab_bar.get("list") if isinstance(tab_bar, dict) else None
        if not isinstance(tabs, list):
            return []

        icons: List[str] = []
        for tab in tabs:
            if not isinstance(tab, dict):
                continue
            for key in ("iconPath", "selectedIconPath"):
                icon = tab.get(key)
                if not isinstance(icon, str) or not icon:
                    continue
                path = os.path.join(context_dir, icon)
                if self.ctx.probe.exists(path) and path not in icons:
                    icons.append(path)
        return icons

    # -------------------------------------------------------------------------
    # Incremental growth
    # -------------------------------------------------------------------------

    def app_json_change(self, config: Any, config_path: str) -> List[str]:
        """
        Re-absorb a rewritten entry document and queue its new page files.

        Args:
            config: Decoded document.
            config_path: Absolute path of the document.

        Returns:
            List[str]: The files queued for the next 'flush_pending'.
        """
        doc = self.ctx.merger.absorb(config, config_path)
        bundles = self._collect_pages(doc, os.path.dirname(config_path), config_path)
        queued = self.ctx.files.append_pending(f for b in bundles for f in b)
        if queued:
            logger.info(f"{config_path} changed: {len(queued)} files queued.")
        return queued

    async def flush_pending(self) -> List[str]:
        """
        Register queued files and resolve their component closures.

        A context group is registered only once its closure resolved. On
        failure, components claimed by the failing group are released and
        the unregistered files go back to the queue, so a later call retries
        them.

        Returns:
            List[str]: Every file newly scheduled by this call.

        Raises:
            MiniPackError: If a closure cannot be resolved.
        """
        pending = self.ctx.files.drain_pending()
        if not pending:
            return []
        self.module_resolver.clear_cache()

        by_context: Dict[str, List[str]] = OrderedDict()
        for path in pending:
            by_context.setdefault(self._context_of(path), []).append(path)

        groups = list(by_context.items())
        registered: List[str] = []
        for index, (context_dir, files) in enumerate(groups):
            known = set(self.ctx.components)
            try:
                claimed = await self.components.expand(files)
            except MiniPackError:
                self.ctx.components.intersection_update(known)
                self.ctx.files.append_pending(f for _, rest in groups[index:] for f in rest)
                raise
            registered += self.ctx.files.register(context_dir, files)
            registered += self.ctx.files.register(context_dir, claimed)
        return registered

    def _context_of(self, path: str) -> str:
        entry = self.ctx.file_tree.entry_of(path)
        return os.path.dirname(entry) if entry else self.main_entry.context_dir

    # -------------------------------------------------------------------------
    # Outputs
    # -------------------------------------------------------------------------

    def app_manifest(self) -> Dict[str, Any]:
        """The merged manifest in wire form."""
        return self.ctx.merger.finalize().to_dict()

    def ext_manifest(self) -> Dict[str, Any]:
        """
        Contents of the extension manifest.

        'extfile' True reads the main entry's ext.json; a string names the
        file, relative to the project context. A missing file yields an
        empty manifest and a warning.
        """
        extfile = self.options["extfile"]
        if extfile is False:
            return {}
        if extfile is True:
            path = os.path.join(self.main_entry.context_dir, EXT_MANIFEST_NAME + CONFIG_EXT)
        else:
            path = os.path.join(self.options["context"], extfile)

        if not self.ctx.probe.exists(path):
            logger.warning(f"Extension manifest {path} not found")
            return {}
        return self.ctx.probe.read_json(path)

    def app_stylesheet(self, compiled_assets: Mapping[str, str]) -> str:
        """
        Aggregate the compiled stylesheet of every entry.

        Args:
            compiled_assets: Output asset name -> compiled source.

        Returns:
            str: Polyfill followed by each entry stylesheet under a banner.
        """
        css = ""
        polyfill = self.adapter.polyfill()
        if polyfill:
            css += f"/* polyfill */\n{polyfill}\n"

        for name in self.entry_names:
            asset = name + self.adapter.style_ext
            code = compiled_assets.get(asset)
            if code:
                css += f"/************ {asset} *************/\n"
                css += code
        return css

    def ignored_outputs(self) -> List[str]:
        """Emitted files that must be discarded from the output tree."""
        ignored: List[str] = []
        for name in self.entry_names:
            if name != APP_ENTRY_NAME:
                ignored += self.adapter.output_names(name)
        ignored += [chunk + SCRIPT_EXT for chunk in self.ctx.files.chunk_names]
        return ignored

    @property
    def entry_names(self) -> List[str]:
        return list(dict.fromkeys(e.name for e in self.entries))

    def dist_path(self, path: str) -> str:
        return self.roots.resolve(path)

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def path_in_subpackage(self, path: str) -> bool:
        return self.classifier.path_in_subpackage(path)

    def paths_share_subpackage(self, paths: Sequence[str]) -> str:
        return self.classifier.paths_share_subpackage(paths)

    def paths_share_directory(self, paths: Sequence[str]) -> str:
        return self.classifier.paths_share_directory(paths)

    def module_only_used_by_subpackages(self, module: ModuleUsage) -> bool:
        return self.classifier.module_only_used_by_subpackages(module)

    def module_used_by_subpackage(self, module: ModuleUsage, root: str) -> bool:
        return self.classifier.module_used_by_subpackage(module, root)

    def module_only_used_by_subpackage(self, module: ModuleUsage, root: str) -> bool:
        return self.classifier.module_only_used_by_subpackage(module, root)

    def subpackage_chunk_root(self, module: ModuleUsage) -> str:
        """
        Subpackage a compiled module should be emitted into.

        Returns the root of the only subpackage using the module, or "" to
        keep it in the main package. Always "" when 'common_subpackages' is
        disabled.

        Raises:
            InvariantViolationError: For a non-entry script module without
                usage tracking.
        """
        if not self.options["common_subpackages"]:
            return ""
        if not self.classifier.module_only_used_by_subpackages(module) or not module.used_by:
            return ""
        for root in self.ctx.merger.subpackage_roots():
            if self.classifier.module_only_used_by_subpackage(module, root):
                return root
        return ""

    # -------------------------------------------------------------------------
    # Result
    # -------------------------------------------------------------------------

    def result(self) -> ResolutionResult:
        files = self.ctx.files.files
        return ResolutionResult(
            manifest=self.app_manifest(),
            entries=[e.config_path for e in self.entries],
            pages=sorted(self.ctx.pages),
            components=sorted(self.ctx.components),
            files=files,
            chunk_names=list(self.ctx.files.chunk_names),
            output_paths={f: self.dist_path(f) for f in files},
        )


def run_resolution(
        config: Optional[Dict[str, Any]],
        registrar: Optional[BundlerEntryRegistrar] = None,
) -> ResolutionResult:
    """
    Run a complete resolution synchronously.

    Args:
        config: Host options (raw or partial).
        registrar: Bundler boundary; a RecordingRegistrar when omitted.

    Returns:
        ResolutionResult: Snapshot of the completed run.
    """
    engine = ResolutionEngine(config, registrar or RecordingRegistrar())
    return asyncio.run(engine.load_entries())
