from __future__ import annotations

"""
Component Closure Discovery.

Walks 'usingComponents' references recursively, starting from page and
entry configs, and claims every component bundle exactly once for the whole
run. Closures of different pages run concurrently on one event loop; the
only shared mutation (the global component set) is performed between
suspension points.
"""

import asyncio
import logging
from typing import Iterable, List, Sequence

from minipack.core.pipeline.context import ResolutionContext
from minipack.core.services.module_resolver import ComponentFileListResolver
from minipack.domain.constants import CONFIG_EXT
from minipack.domain.manifest_models import ComponentBundle

logger = logging.getLogger(__name__)


class ComponentGraphResolver:
    """
    Recursive component closure over the shared component registry.
    """

    def __init__(self, ctx: ResolutionContext, list_resolver: ComponentFileListResolver) -> None:
        self._ctx = ctx
        self._list_resolver = list_resolver

    async def expand(self, json_files: Iterable[str]) -> List[str]:
        """
        Discover the component closure of a set of configs.

        Non-JSON files in the input are ignored, so a whole page bundle can
        be passed as is.

        Args:
            json_files: Config files to start from.

        Returns:
            List[str]: Files of every component claimed by this call, in
            discovery order.

        Raises:
            ResolutionFailure: If a referenced component cannot be located.
        """
        claimed: List[str] = []
        await self._expand([f for f in json_files if f.endswith(CONFIG_EXT)], claimed)
        return claimed

    async def _expand(self, json_files: Sequence[str], claimed: List[str]) -> None:
        for json_path in json_files:
            bundles = await self._list_resolver.resolve(json_path, self._ctx.components)

            # Test-and-insert must not be split by an await
            fresh: List[ComponentBundle] = []
            for bundle in bundles:
                if bundle.principal in self._ctx.components:
                    continue
                self._ctx.components.add(bundle.principal)
                fresh.append(bundle)

            for bundle in fresh:
                logger.debug(f"Component {bundle.principal} claimed from {json_path}")
                claimed.extend(bundle.files)

            for bundle in fresh:
                await self._expand(bundle.json_files, claimed)

    async def expand_pages(self, groups: Iterable[Sequence[str]]) -> List[str]:
        """
        Run one closure per page concurrently and concatenate the results.

        Every closure is allowed to finish; the first failure is then
        re-raised.

        Args:
            groups: File bundles (or config lists), one per page.

        Returns:
            List[str]: Claimed files in page order.
        """
        results = await asyncio.gather(*(self.expand(group) for group in groups), return_exceptions=True)

        files: List[str] = []
        failures: List[BaseException] = []
        for result in results:
            if isinstance(result, BaseException):
                failures.append(result)
            else:
                files.extend(result)

        if failures:
            raise failures[0]
        return files
