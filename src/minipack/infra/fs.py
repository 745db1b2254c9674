from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization and the filesystem probe used by the resolution
services: existence checks, companion-file bundle lookup and JSON document
loading. All probing goes through FilesystemProbe so tests and hosts can
substitute their own view of the disk.
"""

import json
import os
from typing import Any, Dict, Iterable, List, Optional

from minipack.domain.constants import MIN_BUNDLE_FILES
from minipack.domain.errors import ConfigurationError, IncompleteAssetError

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def strip_extension(path: str) -> str:
    """Drop the final extension of a path, keeping its directory."""
    return os.path.splitext(path)[0]


# -----------------------------------------------------------------------------
# FILESYSTEM PROBE
# -----------------------------------------------------------------------------

class FilesystemProbe:
    """
    Read-only view of the filesystem used during resolution.

    Every method is synchronous; async callers wrap calls in
    'asyncio.to_thread' when they need a suspension point.
    """

    def __init__(self, default_extensions: Optional[Iterable[str]] = None) -> None:
        """
        Args:
            default_extensions: Companion extensions probed by 'get_files'
                when the caller does not pass an explicit list.
        """
        self.default_extensions: List[str] = list(default_extensions or [])

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def get_files(self, base: str, path: str = "", exts: Optional[Iterable[str]] = None) -> List[str]:
        """
        List existing companion files '<base>/<path><ext>' in extension order.

        Args:
            base: Base directory, or a full path without extension when
                  'path' is empty.
            path: Optional path relative to base, without extension.
            exts: Extensions to probe; defaults to the probe's own list.

        Returns:
            List[str]: Existing files, ordered like 'exts'.
        """
        stem = os.path.join(base, path) if path else base
        files: List[str] = []
        for ext in (exts if exts is not None else self.default_extensions):
            candidate = stem + ext
            if self.is_file(candidate):
                files.append(candidate)
        return files

    def collect_bundle(self, stem: str, exts: Optional[Iterable[str]] = None, kind: str = "page") -> List[str]:
        """
        Locate the required file bundle of a page or component.

        Args:
            stem: Absolute path of the unit without extension.
            exts: Extensions to probe.
            kind: Label used in the error message.

        Returns:
            List[str]: The bundle files.

        Raises:
            IncompleteAssetError: If fewer than the minimum number of
                companion files exist.
        """
        files = self.get_files(stem, "", exts)
        if len(files) < MIN_BUNDLE_FILES:
            raise IncompleteAssetError(
                f"{kind.capitalize()} {stem} is missing required files "
                f"(found {len(files)}, need at least {MIN_BUNDLE_FILES})",
                path=stem,
                found=files,
            )
        return files

    def read_json(self, path: str) -> Any:
        """
        Load a JSON document.

        Raises:
            ConfigurationError: If the file is missing or cannot be decoded.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"File not found: {path}", path=path) from e
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to parse {path}: {e}", path=path) from e


def read_package_main(probe: FilesystemProbe, package_dir: str) -> Optional[str]:
    """
    Return the 'main' field of a package.json inside a directory, if any.
    """
    manifest = os.path.join(package_dir, "package.json")
    if not probe.is_file(manifest):
        return None
    try:
        data: Dict[str, Any] = probe.read_json(manifest)
    except ConfigurationError:
        return None
    main = data.get("main") if isinstance(data, dict) else None
    return main if isinstance(main, str) and main else None
