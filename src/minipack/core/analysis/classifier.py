from __future__ import annotations

"""
Subpackage Classification Service.

Answers membership questions over the declared subpackage roots: which pages
of a manifest are new, whether a path or a set of paths belongs to one
subpackage, and whether a compiled module is used exclusively from
subpackages (the decision that drives code splitting).
"""

import os
from typing import Iterable, List, Sequence

from minipack.core.pipeline.context import ResolutionContext
from minipack.domain.constants import SCRIPT_EXT
from minipack.domain.errors import InvariantViolationError
from minipack.domain.manifest_models import AppConfigDocument
from minipack.domain.registration_models import ModuleUsage


class SubpackageClassifier:
    """
    Membership and ownership queries over subpackage roots.

    Roots are read from the manifest accumulator on every call, so documents
    absorbed later (manifest rewrites) are taken into account.
    """

    def __init__(self, ctx: ResolutionContext) -> None:
        self._ctx = ctx

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def classify_new_pages(self, config: AppConfigDocument, base_context: str) -> List[str]:
        """
        Absolute paths of pages in a document that are not yet known.

        Also records, for every subpackage of the document, its root-prefixed
        page list.

        Args:
            config: Parsed entry document.
            base_context: Directory of the entry document.

        Returns:
            List[str]: New absolute page paths (subpackage pages first).
        """
        new_pages: List[str] = []

        def consider(page: str) -> None:
            if page not in self._ctx.pages and page not in new_pages:
                new_pages.append(page)

        for pack in config.sub_packages:
            self._ctx.subpackage_map[pack.root] = [os.path.join(pack.root, p) for p in pack.pages]
            for page in pack.pages:
                consider(os.path.join(base_context, pack.root, page))

        for page in config.pages:
            consider(os.path.join(base_context, page))

        return new_pages

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def subpackage_root_of(self, path: str) -> str:
        """The first root anchoring 'path', or an empty string."""
        for root in self._ctx.merger.subpackage_roots():
            if path.startswith(root):
                return root
        return ""

    def path_in_subpackage(self, path: str) -> bool:
        return bool(self.subpackage_root_of(path))

    def paths_share_subpackage(self, paths: Sequence[str]) -> str:
        """
        Common subpackage root of every path, or an empty string.
        """
        if not paths:
            return ""
        root = self.subpackage_root_of(paths[0])
        if not root:
            return ""
        return root if all(p.startswith(root) for p in paths) else ""

    def paths_share_directory(self, paths: Sequence[str]) -> str:
        """
        Leading path segment shared by every path, or an empty string.

        Only the first segment of the first path is compared.
        """
        if not paths:
            return ""
        folder = paths[0].split("/")[0]
        return folder if all(p.startswith(folder) for p in paths) else ""

    def files_outside_package(self, root: str, files: Iterable[str]) -> List[str]:
        return [f for f in files if root not in f]

    # ------------------------------------------------------------------
    # Module usage
    # ------------------------------------------------------------------

    def module_only_used_by_subpackages(self, module: ModuleUsage) -> bool:
        """
        True if every file requiring the module lives in some subpackage.

        Usage paths are matched as output paths relative to the output root
        (for example 'packageA/pages/cat/cat.js'); absolute paths never match.
        """
        used_by = self._usage(module)
        if used_by is None:
            return False
        roots = self._ctx.merger.subpackage_roots()
        if not roots:
            return False
        return all(any(f.startswith(root) for root in roots) for f in used_by)

    def module_used_by_subpackage(self, module: ModuleUsage, root: str) -> bool:
        """True if at least one file inside 'root' requires the module (relative usage paths)."""
        used_by = self._usage(module)
        if used_by is None:
            return False
        return any(f.startswith(root) for f in used_by)

    def module_only_used_by_subpackage(self, module: ModuleUsage, root: str) -> bool:
        """True if every file requiring the module lives inside 'root' (relative usage paths)."""
        used_by = self._usage(module)
        if used_by is None:
            return False
        return all(f.startswith(root) for f in used_by)

    def _usage(self, module: ModuleUsage):
        """
        Usage set of an applicable module, or None when not applicable.

        Raises:
            InvariantViolationError: For a non-entry script module that was
                not produced with usage tracking.
        """
        if not module.resource.endswith(SCRIPT_EXT) or module.is_entry:
            return None
        if module.used_by is None:
            raise InvariantViolationError(
                f"Module {module.resource} carries no usage tracking; only modules "
                f"produced by minipack can be classified",
                path=module.resource,
            )
        return module.used_by
