from __future__ import annotations

"""
Manifest Domain Data Models.

Defines the typed view of entry documents (app.json style), the merged
application manifest and the descriptors attached to entries, pages and
components. Parsing happens once at the boundary: known fields land in
named attributes and anything else is preserved in an 'extras' map.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from minipack.domain.errors import ConfigurationError

# Wire name -> attribute name for singleton fields (first non-empty wins)
SINGLETON_FIELDS: Dict[str, str] = {
    "tabBar": "tab_bar",
    "window": "window",
    "networkTimeout": "network_timeout",
    "debug": "debug",
    "functionalPages": "functional_pages",
}

_KNOWN_FIELDS = {
    "pages", "subPackages", "subpackages", "preloadRule",
    "usingComponents", "plugins",
} | set(SINGLETON_FIELDS)


# -----------------------------------------------------------------------------
# ENTRY DOCUMENTS
# -----------------------------------------------------------------------------

@dataclass
class SubpackageDescriptor:
    """
    A lazily loaded partition of pages.

    Attributes:
        root: Path prefix shared by every page of the partition.
        pages: Page paths relative to the root, in declaration order.
        extras: Unrecognized descriptor fields (name, independent...).
    """
    root: str
    pages: List[str] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, source: str = "") -> SubpackageDescriptor:
        if not isinstance(data, dict) or not isinstance(data.get("root"), str):
            raise ConfigurationError(f"Invalid subpackage declaration in {source}", path=source)
        pages = _as_str_list(data.get("pages", []), "subPackages.pages", source)
        extras = {k: v for k, v in data.items() if k not in ("root", "pages")}
        return cls(root=data["root"], pages=pages, extras=extras)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"root": self.root, "pages": list(self.pages)}
        out.update(self.extras)
        return out


@dataclass
class AppConfigDocument:
    """
    Parsed form of a single entry document.

    Attributes:
        pages: Main package page paths.
        sub_packages: Declared subpackages.
        preload_rule: Page -> preload configuration.
        using_components: Globally registered components.
        plugins: Plugin id -> plugin declaration ({'version', 'provider'}).
        tab_bar: Tab bar declaration.
        window: Default window style.
        network_timeout: Per-request-type timeout map.
        debug: Debug flag.
        functional_pages: Functional pages flag.
        extras: Every unrecognized top-level field.
    """
    pages: List[str] = field(default_factory=list)
    sub_packages: List[SubpackageDescriptor] = field(default_factory=list)
    preload_rule: Dict[str, Any] = field(default_factory=dict)
    using_components: Dict[str, str] = field(default_factory=dict)
    plugins: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    tab_bar: Optional[Dict[str, Any]] = None
    window: Optional[Dict[str, Any]] = None
    network_timeout: Optional[Dict[str, Any]] = None
    debug: Optional[bool] = None
    functional_pages: Optional[bool] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, source: str = "") -> AppConfigDocument:
        """
        Build a document from a decoded JSON object.

        Args:
            data: Decoded JSON value.
            source: Path the value was read from (for error reporting).

        Returns:
            AppConfigDocument: The typed document.

        Raises:
            ConfigurationError: If the value is not an object or a known
                field has the wrong shape.
        """
        if isinstance(data, AppConfigDocument):
            return data
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Entry document {source} must be a JSON object, got {type(data).__name__}",
                path=source,
            )

        raw_subs = data.get("subPackages", data.get("subpackages", []))
        if not isinstance(raw_subs, list):
            raise ConfigurationError(f"'subPackages' must be a list in {source}", path=source)

        doc = cls(
            pages=_as_str_list(data.get("pages", []), "pages", source),
            sub_packages=[SubpackageDescriptor.from_dict(s, source) for s in raw_subs],
            preload_rule=_as_dict(data.get("preloadRule"), "preloadRule", source),
            using_components=_as_dict(data.get("usingComponents"), "usingComponents", source),
            plugins=_as_dict(data.get("plugins"), "plugins", source),
            extras={k: v for k, v in data.items() if k not in _KNOWN_FIELDS},
        )
        for wire_name, attr in SINGLETON_FIELDS.items():
            setattr(doc, attr, data.get(wire_name))
        return doc


# -----------------------------------------------------------------------------
# MERGED MANIFEST
# -----------------------------------------------------------------------------

@dataclass
class AppManifest:
    """
    The merged application manifest produced by ManifestMerger.finalize().
    """
    pages: List[str] = field(default_factory=list)
    sub_packages: List[SubpackageDescriptor] = field(default_factory=list)
    preload_rule: Dict[str, Any] = field(default_factory=dict)
    using_components: Dict[str, str] = field(default_factory=dict)
    plugins: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    tab_bar: Optional[Dict[str, Any]] = None
    window: Optional[Dict[str, Any]] = None
    network_timeout: Optional[Dict[str, Any]] = None
    debug: Optional[bool] = None
    functional_pages: Optional[bool] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def subpackage_roots(self) -> List[str]:
        return [pack.root for pack in self.sub_packages]

    def to_dict(self) -> Dict[str, Any]:
        """
        Render the camelCase wire form, omitting empty optional fields.
        """
        out: Dict[str, Any] = {
            "pages": list(self.pages),
            "subPackages": [pack.to_dict() for pack in self.sub_packages],
        }
        if self.preload_rule:
            out["preloadRule"] = dict(self.preload_rule)
        if self.using_components:
            out["usingComponents"] = dict(self.using_components)
        if self.plugins:
            out["plugins"] = dict(self.plugins)
        for wire_name, attr in SINGLETON_FIELDS.items():
            value = getattr(self, attr)
            if value:
                out[wire_name] = value
        for key, value in self.extras.items():
            if value:
                out.setdefault(key, value)
        return out


# -----------------------------------------------------------------------------
# DISCOVERY RECORDS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class EntryDescriptor:
    """
    One root manifest and its directory context.

    Attributes:
        config_path: Absolute path to the entry document.
        context_dir: Directory containing the document.
        name: Document basename without extension.
        is_main: True for the first visited entry.
    """
    config_path: str
    context_dir: str
    name: str
    is_main: bool = False


@dataclass(frozen=True)
class ComponentBundle:
    """
    A resolved custom component.

    Attributes:
        principal: Absolute path of the component without extension
                   (the global dedup key).
        files: Companion files found for the component.
    """
    principal: str
    files: Tuple[str, ...] = ()

    @property
    def json_files(self) -> List[str]:
        return [f for f in self.files if f.endswith(".json")]


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _as_str_list(value: Any, name: str, source: str) -> List[str]:
    """Validate a list of strings, raising on any other shape."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"'{name}' must be a list of strings in {source}", path=source)
    return list(value)


def _as_dict(value: Any, name: str, source: str) -> Dict[str, Any]:
    """Validate an optional JSON object."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"'{name}' must be an object in {source}", path=source)
    return dict(value)
