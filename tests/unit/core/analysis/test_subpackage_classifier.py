from __future__ import annotations

"""
Unit tests for the Subpackage Classifier.

Verifies:
1. New-page discovery and the subpackage page map.
2. Anchored path membership queries.
3. Module usage classification and its contract errors.
"""

import pytest

from minipack.core.analysis.classifier import SubpackageClassifier
from minipack.core.pipeline.context import ResolutionContext
from minipack.core.platforms import WxFormatAdapter
from minipack.domain.errors import InvariantViolationError
from minipack.domain.manifest_models import AppConfigDocument
from minipack.domain.registration_models import ModuleUsage
from minipack.infra.bundler import RecordingRegistrar

APP = {
    "pages": ["pages/index/index", "pages/index/index"],
    "subPackages": [
        {"root": "packageA/", "pages": ["pages/cat/cat"]},
        {"root": "packageB/", "pages": ["pages/dog/dog"]},
    ],
}


@pytest.fixture
def ctx() -> ResolutionContext:
    return ResolutionContext.create(RecordingRegistrar(), WxFormatAdapter())


@pytest.fixture
def classifier(ctx: ResolutionContext) -> SubpackageClassifier:
    ctx.merger.absorb(APP, "/p/app.json")
    return SubpackageClassifier(ctx)


# -----------------------------------------------------------------------------
# Pages
# -----------------------------------------------------------------------------

def test_classify_new_pages_lists_subpackages_first(ctx: ResolutionContext) -> None:
    classifier = SubpackageClassifier(ctx)
    pages = classifier.classify_new_pages(AppConfigDocument.from_dict(APP), "/p")

    assert pages == [
        "/p/packageA/pages/cat/cat",
        "/p/packageB/pages/dog/dog",
        "/p/pages/index/index",
    ]
    assert ctx.subpackage_map == {
        "packageA/": ["packageA/pages/cat/cat"],
        "packageB/": ["packageB/pages/dog/dog"],
    }


def test_classify_new_pages_skips_known_pages(ctx: ResolutionContext) -> None:
    ctx.pages.add("/p/pages/index/index")
    classifier = SubpackageClassifier(ctx)

    pages = classifier.classify_new_pages(AppConfigDocument.from_dict(APP), "/p")

    assert "/p/pages/index/index" not in pages


# -----------------------------------------------------------------------------
# Paths
# -----------------------------------------------------------------------------

def test_path_in_subpackage_is_anchored(classifier: SubpackageClassifier) -> None:
    assert classifier.path_in_subpackage("packageA/pages/cat/cat.js")
    assert not classifier.path_in_subpackage("pages/packageA/x.js")
    assert not classifier.path_in_subpackage("utils/util.js")


def test_subpackage_root_of(classifier: SubpackageClassifier) -> None:
    assert classifier.subpackage_root_of("packageB/pages/dog/dog.js") == "packageB/"
    assert classifier.subpackage_root_of("pages/index/index.js") == ""


def test_paths_share_subpackage(classifier: SubpackageClassifier) -> None:
    assert classifier.paths_share_subpackage(["packageA/a.js", "packageA/b/c.js"]) == "packageA/"
    assert classifier.paths_share_subpackage(["packageA/a.js", "packageB/b.js"]) == ""
    assert classifier.paths_share_subpackage(["utils/a.js"]) == ""
    assert classifier.paths_share_subpackage([]) == ""


def test_paths_share_directory_compares_first_segment(classifier: SubpackageClassifier) -> None:
    assert classifier.paths_share_directory(["components/a.js", "components/b/c.js"]) == "components"
    assert classifier.paths_share_directory(["components/a.js", "utils/b.js"]) == ""
    # Only the first segment is compared, as a plain prefix
    assert classifier.paths_share_directory(["comp/a.js", "components/b.js"]) == "comp"


def test_files_outside_package(classifier: SubpackageClassifier) -> None:
    files = ["packageA/a.js", "utils/b.js", "packageB/c.js"]
    assert classifier.files_outside_package("packageA/", files) == ["utils/b.js", "packageB/c.js"]


def test_roots_follow_later_absorbed_documents(ctx: ResolutionContext, classifier: SubpackageClassifier) -> None:
    assert not classifier.path_in_subpackage("packageC/x.js")
    ctx.merger.absorb({"subPackages": [{"root": "packageC/", "pages": []}]}, "/q/app.json")
    assert classifier.path_in_subpackage("packageC/x.js")


# -----------------------------------------------------------------------------
# Module usage
# -----------------------------------------------------------------------------

def test_module_only_used_by_subpackages(classifier: SubpackageClassifier) -> None:
    shared = ModuleUsage("utils/a.js", used_by=frozenset({"packageA/x.js", "packageB/y.js"}))
    mixed = ModuleUsage("utils/b.js", used_by=frozenset({"packageA/x.js", "pages/index/index.js"}))

    assert classifier.module_only_used_by_subpackages(shared) is True
    assert classifier.module_only_used_by_subpackages(mixed) is False


def test_usage_paths_are_matched_relative_to_output_root(classifier: SubpackageClassifier) -> None:
    absolute = ModuleUsage("utils/a.js", used_by=frozenset({"/dist/packageA/x.js"}))
    relative = ModuleUsage("utils/a.js", used_by=frozenset({"packageA/x.js"}))

    assert classifier.module_only_used_by_subpackages(absolute) is False
    assert classifier.module_used_by_subpackage(absolute, "packageA/") is False
    assert classifier.module_only_used_by_subpackages(relative) is True


def test_module_used_by_subpackage(classifier: SubpackageClassifier) -> None:
    module = ModuleUsage("utils/a.js", used_by=frozenset({"packageA/x.js", "pages/index/index.js"}))

    assert classifier.module_used_by_subpackage(module, "packageA/") is True
    assert classifier.module_used_by_subpackage(module, "packageB/") is False


def test_module_only_used_by_subpackage(classifier: SubpackageClassifier) -> None:
    own = ModuleUsage("utils/a.js", used_by=frozenset({"packageA/x.js", "packageA/y/z.js"}))
    shared = ModuleUsage("utils/b.js", used_by=frozenset({"packageA/x.js", "packageB/y.js"}))

    assert classifier.module_only_used_by_subpackage(own, "packageA/") is True
    assert classifier.module_only_used_by_subpackage(shared, "packageA/") is False


def test_empty_usage_is_vacuously_exclusive(classifier: SubpackageClassifier) -> None:
    module = ModuleUsage("utils/a.js", used_by=frozenset())
    assert classifier.module_only_used_by_subpackage(module, "packageA/") is True


@pytest.mark.parametrize("module", [
    ModuleUsage("styles/a.wxss", used_by=frozenset({"packageA/x.js"})),
    ModuleUsage("packageA/entry.js", is_entry=True, used_by=frozenset({"packageA/x.js"})),
    ModuleUsage("styles/a.wxss"),
])
def test_non_script_or_entry_modules_are_not_classified(classifier: SubpackageClassifier, module) -> None:
    assert classifier.module_only_used_by_subpackages(module) is False
    assert classifier.module_used_by_subpackage(module, "packageA/") is False
    assert classifier.module_only_used_by_subpackage(module, "packageA/") is False


def test_untracked_script_module_raises(classifier: SubpackageClassifier) -> None:
    module = ModuleUsage("utils/a.js")
    with pytest.raises(InvariantViolationError):
        classifier.module_only_used_by_subpackages(module)
    with pytest.raises(InvariantViolationError):
        classifier.module_used_by_subpackage(module, "packageA/")


def test_no_subpackages_means_not_exclusive(ctx: ResolutionContext) -> None:
    classifier = SubpackageClassifier(ctx)
    module = ModuleUsage("utils/a.js", used_by=frozenset({"pages/a.js"}))
    assert classifier.module_only_used_by_subpackages(module) is False
