from __future__ import annotations

"""
Unit tests for Component Closure Discovery.

Verifies:
1. Recursive closure with circular references.
2. Global single-claim semantics across concurrent closures.
3. Failure propagation after every closure has finished.
"""

import asyncio
import os
from typing import Dict, List

import pytest

from minipack.core.pipeline.context import ResolutionContext
from minipack.core.platforms import WxFormatAdapter
from minipack.core.services.component_graph import ComponentGraphResolver
from minipack.core.services.module_resolver import ComponentFileListResolver, ModuleResolver
from minipack.domain.errors import ResolutionFailure
from minipack.domain.manifest_models import ComponentBundle
from minipack.infra.bundler import RecordingRegistrar


class FakeListResolver:
    """In-memory component lists keyed by config path; yields to the loop on every call."""

    def __init__(self, graph: Dict[str, List[ComponentBundle]]) -> None:
        self.graph = graph
        self.calls: List[str] = []

    async def resolve(self, json_path: str, known) -> List[ComponentBundle]:
        self.calls.append(json_path)
        await asyncio.sleep(0)
        if json_path == "/broken.json":
            raise ResolutionFailure("/", "./ghost")
        return [b for b in self.graph.get(json_path, []) if b.principal not in known]


def bundle(name: str) -> ComponentBundle:
    return ComponentBundle(principal=f"/c/{name}", files=(f"/c/{name}.js", f"/c/{name}.json"))


@pytest.fixture
def ctx() -> ResolutionContext:
    return ResolutionContext.create(RecordingRegistrar(), WxFormatAdapter())


@pytest.mark.asyncio
async def test_expand_follows_references_and_terminates_on_cycles(ctx: ResolutionContext) -> None:
    lists = FakeListResolver({
        "/page.json": [bundle("card")],
        "/c/card.json": [bundle("avatar")],
        "/c/avatar.json": [bundle("card")],
    })
    graph = ComponentGraphResolver(ctx, lists)

    files = await graph.expand(["/page.js", "/page.json"])

    assert files == ["/c/card.js", "/c/card.json", "/c/avatar.js", "/c/avatar.json"]
    assert ctx.components == {"/c/card", "/c/avatar"}
    assert lists.calls == ["/page.json", "/c/card.json", "/c/avatar.json"]


@pytest.mark.asyncio
async def test_concurrent_pages_claim_each_component_once(ctx: ResolutionContext) -> None:
    shared = bundle("card")
    lists = FakeListResolver({"/a.json": [shared], "/b.json": [shared], "/c.json": [shared]})
    graph = ComponentGraphResolver(ctx, lists)

    files = await graph.expand_pages([["/a.json"], ["/b.json"], ["/c.json"]])

    assert files == ["/c/card.js", "/c/card.json"]
    assert ctx.components == {"/c/card"}


@pytest.mark.asyncio
async def test_already_known_components_are_not_reclaimed(ctx: ResolutionContext) -> None:
    ctx.components.add("/c/card")
    graph = ComponentGraphResolver(ctx, FakeListResolver({"/a.json": [bundle("card")]}))

    assert await graph.expand(["/a.json"]) == []


@pytest.mark.asyncio
async def test_failure_is_raised_after_other_closures_finish(ctx: ResolutionContext) -> None:
    lists = FakeListResolver({"/a.json": [bundle("card")], "/c/card.json": [bundle("avatar")]})
    graph = ComponentGraphResolver(ctx, lists)

    with pytest.raises(ResolutionFailure):
        await graph.expand_pages([["/broken.json"], ["/a.json"]])

    assert ctx.components == {"/c/card", "/c/avatar"}


@pytest.mark.asyncio
async def test_closure_over_real_project(sample_project, ctx: ResolutionContext) -> None:
    src = sample_project["src"]
    lists = ComponentFileListResolver(ModuleResolver(ctx.probe), ctx.probe, ctx.adapter, src)
    graph = ComponentGraphResolver(ctx, lists)

    await graph.expand_pages([
        [os.path.join(src, "pages/index/index.json")],
        [os.path.join(src, "packageA/pages/cat/cat.json")],
    ])

    assert ctx.components == {
        os.path.join(src, "components/card/card"),
        os.path.join(src, "components/avatar/avatar"),
    }
