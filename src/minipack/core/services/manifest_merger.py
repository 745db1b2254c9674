from __future__ import annotations

"""
Application Manifest Merging Service.

Accumulates one parsed snapshot per entry document and folds them into a
single application manifest. Pages are deduplicated globally, subpackages
are grouped by root, plugins keep the first declared version and every
other singleton field keeps the first non-empty value.
"""

import logging
from typing import Any, Dict, List, Set, Tuple

from minipack.domain.manifest_models import (
    SINGLETON_FIELDS,
    AppConfigDocument,
    AppManifest,
    SubpackageDescriptor,
)

logger = logging.getLogger(__name__)


class ManifestMerger:
    """
    Accumulator of entry documents keyed by their source path.

    Snapshots are folded in visitation order: the order in which each source
    key was first absorbed. Re-absorbing a key replaces its snapshot in place.
    """

    def __init__(self) -> None:
        self._snapshots: Dict[str, AppConfigDocument] = {}
        self._warned_plugins: Set[Tuple[str, str]] = set()

    @property
    def sources(self) -> List[str]:
        return list(self._snapshots)

    def absorb(self, config: Any, source_key: str) -> AppConfigDocument:
        """
        Store one entry's document.

        Args:
            config: Decoded JSON object or an already parsed document.
            source_key: Absolute path of the entry document.

        Returns:
            AppConfigDocument: The stored snapshot.
        """
        doc = AppConfigDocument.from_dict(config, source_key)
        self._snapshots[source_key] = doc
        logger.debug(f"Absorbed manifest {source_key} ({len(doc.pages)} pages, "
                     f"{len(doc.sub_packages)} subpackages)")
        return doc

    def subpackage_roots(self) -> List[str]:
        """Ordered unique subpackage roots across every snapshot."""
        roots: List[str] = []
        for doc in self._snapshots.values():
            for pack in doc.sub_packages:
                if pack.root not in roots:
                    roots.append(pack.root)
        return roots

    def finalize(self) -> AppManifest:
        """
        Fold every snapshot into the application manifest.

        Returns:
            AppManifest: The merged manifest.
        """
        manifest = AppManifest()
        pages: List[str] = []
        grouped: Dict[str, SubpackageDescriptor] = {}

        for source, doc in self._snapshots.items():
            pages.extend(doc.pages)

            for pack in doc.sub_packages:
                if pack.root in grouped:
                    grouped[pack.root].pages.extend(pack.pages)
                else:
                    grouped[pack.root] = SubpackageDescriptor(
                        root=pack.root, pages=list(pack.pages), extras=dict(pack.extras)
                    )

            manifest.preload_rule.update(doc.preload_rule)
            manifest.using_components.update(doc.using_components)
            self._merge_plugins(manifest.plugins, doc.plugins, source)

            # First non-empty wins, without a conflict warning
            for attr in SINGLETON_FIELDS.values():
                if not getattr(manifest, attr):
                    setattr(manifest, attr, getattr(doc, attr))
            for key, value in doc.extras.items():
                if not manifest.extras.get(key):
                    manifest.extras[key] = value

        manifest.pages = _unique(pages)
        for pack in grouped.values():
            pack.pages = _unique(pack.pages)
        manifest.sub_packages = list(grouped.values())
        return manifest

    def _merge_plugins(
            self,
            merged: Dict[str, Dict[str, Any]],
            plugins: Dict[str, Dict[str, Any]],
            source: str,
    ) -> None:
        """Keep the first declaration of each plugin id; warn on version drift."""
        for plugin_id, declaration in plugins.items():
            if plugin_id not in merged:
                merged[plugin_id] = declaration
                continue

            kept = _plugin_version(merged[plugin_id])
            offered = _plugin_version(declaration)
            if kept != offered and (plugin_id, source) not in self._warned_plugins:
                self._warned_plugins.add((plugin_id, source))
                logger.warning(
                    f"Plugin '{plugin_id}' in {source} declares version {offered}, "
                    f"keeping {kept} from an earlier entry"
                )


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def _plugin_version(declaration: Any) -> Any:
    return declaration.get("version") if isinstance(declaration, dict) else declaration
