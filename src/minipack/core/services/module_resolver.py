from __future__ import annotations

"""
Module and Component Resolution Services.

ModuleResolver maps a (context directory, request specifier) pair to an
absolute file path using a fixed extension order, host aliases and an
upward 'node_modules' search. ComponentFileListResolver builds on it to turn
the 'usingComponents' map of a JSON config into the file bundles of the
components it references. Filesystem probes run in worker threads and are
the only suspension points of a resolution.
"""

import asyncio
import logging
import os
from typing import Any, Dict, Iterable, List, Optional, Tuple

from minipack.core.platforms.base import FormatAdapter
from minipack.domain.constants import (
    DEFAULT_RESOLVE_EXTENSIONS,
    DEPENDENCY_MARKER,
    PLUGIN_SCHEME,
)
from minipack.domain.errors import IncompleteAssetError, ResolutionFailure
from minipack.domain.manifest_models import ComponentBundle
from minipack.infra.fs import FilesystemProbe, read_package_main, strip_extension

logger = logging.getLogger(__name__)


# ==============================================================================
# MODULE RESOLVER
# ==============================================================================

class ModuleResolver:
    """
    Asynchronous request resolver with a cached filesystem view.

    Cached probe results never change during a resolution pass, so
    concurrent callers may race to fill the same cache slot without harm.
    'clear_cache' starts a new pass.
    """

    def __init__(
            self,
            probe: FilesystemProbe,
            extensions: Optional[Iterable[str]] = None,
            alias: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Args:
            probe: Filesystem view.
            extensions: Extensions tried in order when a request has none
                        on disk; defaults to script then JSON.
            alias: Request prefix -> replacement. A key ending in '$' only
                   matches the exact request.
        """
        self._probe = probe
        self.extensions: List[str] = list(extensions or DEFAULT_RESOLVE_EXTENSIONS)
        self.alias: Dict[str, str] = dict(alias or {})
        self._cache: Dict[Tuple[str, str], bool] = {}

    async def resolve(self, context: str, request: str) -> str:
        """
        Resolve a request to an absolute file path.

        Args:
            context: Directory the request is issued from.
            request: Relative, absolute, aliased or bare package request.

        Returns:
            str: Absolute path of the resolved file.

        Raises:
            ResolutionFailure: If no candidate exists.
        """
        aliased = self._apply_alias(request)
        for candidate in self._candidates(context, aliased):
            found = await self._resolve_path(candidate)
            if found:
                return found
        raise ResolutionFailure(context, request)

    def clear_cache(self) -> None:
        self._cache.clear()

    def _apply_alias(self, request: str) -> str:
        for key, target in self.alias.items():
            if key.endswith("$"):
                if request == key[:-1]:
                    return target
            elif request == key or request.startswith(key + "/"):
                return target + request[len(key):]
        return request

    def _candidates(self, context: str, request: str) -> List[str]:
        if os.path.isabs(request):
            return [request]
        if request in (".", "..") or request.startswith(("./", "../")):
            return [os.path.normpath(os.path.join(context, request))]

        # Bare request: walk up looking for dependency directories
        candidates: List[str] = []
        directory = os.path.abspath(context)
        while True:
            if os.path.basename(directory) != DEPENDENCY_MARKER:
                candidates.append(os.path.join(directory, DEPENDENCY_MARKER, request))
            parent = os.path.dirname(directory)
            if parent == directory:
                return candidates
            directory = parent

    async def _resolve_path(self, path: str) -> Optional[str]:
        """Try the path as a file, then with each extension, then as a directory."""
        found = await self._resolve_file(path)
        if found:
            return found
        if await self._check("dir", path):
            main = await asyncio.to_thread(read_package_main, self._probe, path)
            if main:
                found = await self._resolve_file(os.path.normpath(os.path.join(path, main)))
                if found:
                    return found
            return await self._resolve_file(os.path.join(path, "index"))
        return None

    async def _resolve_file(self, path: str) -> Optional[str]:
        if await self._check("file", path):
            return path
        for ext in self.extensions:
            if await self._check("file", path + ext):
                return path + ext
        return None

    async def _check(self, kind: str, path: str) -> bool:
        key = (kind, path)
        if key in self._cache:
            return self._cache[key]
        probe = self._probe.is_file if kind == "file" else self._probe.is_dir
        result = await asyncio.to_thread(probe, path)
        self._cache[key] = result
        return result


# ==============================================================================
# COMPONENT FILE LIST RESOLVER
# ==============================================================================

class ComponentFileListResolver:
    """
    Resolves the components referenced by one JSON config to file bundles.
    """

    def __init__(
            self,
            module_resolver: ModuleResolver,
            probe: FilesystemProbe,
            adapter: FormatAdapter,
            app_context: str,
    ) -> None:
        """
        Args:
            module_resolver: Request resolver.
            probe: Filesystem view.
            adapter: Platform dialect (bundle extensions).
            app_context: Main entry directory; '/'-prefixed component
                         requests are resolved from it.
        """
        self._resolver = module_resolver
        self._probe = probe
        self._adapter = adapter
        self._app_context = app_context

    async def resolve(self, json_path: str, known: Iterable[str]) -> List[ComponentBundle]:
        """
        Bundles of components referenced by a config that are not yet known.

        Args:
            json_path: Page, component or entry JSON config.
            known: Principal paths already discovered.

        Returns:
            List[ComponentBundle]: New component bundles in declaration order.

        Raises:
            ConfigurationError: If the config cannot be read.
            ResolutionFailure: If a referenced component cannot be located.
        """
        data = await asyncio.to_thread(self._probe.read_json, json_path)
        known_set = set(known)
        bundles: List[ComponentBundle] = []

        for request in _component_requests(data):
            resolved = await self._resolve_request(json_path, request)
            principal = strip_extension(resolved)
            if principal in known_set or any(b.principal == principal for b in bundles):
                continue

            try:
                files = await asyncio.to_thread(
                    self._probe.collect_bundle,
                    principal,
                    self._adapter.bundle_extensions(),
                    kind="component",
                )
            except IncompleteAssetError as e:
                logger.warning(f"{e} (referenced from {json_path})")
                continue

            bundles.append(ComponentBundle(principal=principal, files=tuple(files)))

        return bundles

    async def _resolve_request(self, json_path: str, request: str) -> str:
        context = os.path.dirname(json_path)

        if request.startswith("/"):
            return await self._resolver.resolve(self._app_context, "." + request)
        if request.startswith("."):
            return await self._resolver.resolve(context, request)

        # Bare paths are relative to the config first, packages second
        try:
            return await self._resolver.resolve(context, "./" + request)
        except ResolutionFailure:
            return await self._resolver.resolve(context, request)


def _component_requests(data: Any) -> List[str]:
    """Component requests of a config, skipping plugin-provided ones."""
    if not isinstance(data, dict):
        return []

    requests: List[str] = []
    using = data.get("usingComponents")
    if isinstance(using, dict):
        requests.extend(v for v in using.values() if isinstance(v, str))

    generics = data.get("componentGenerics")
    if isinstance(generics, dict):
        for generic in generics.values():
            if isinstance(generic, dict) and isinstance(generic.get("default"), str):
                requests.append(generic["default"])

    return [r for r in requests if r and not r.startswith(PLUGIN_SCHEME)]
