# Copyright 2026 mpresolve Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for unit classification and output naming."""

from __future__ import annotations

from pathlib import Path

import pytest

from mpresolve.compiler.interfaces import ResolutionError
from mpresolve.compiler.paths import (
    component_output,
    filter_output,
    normalize_component_name,
    relative_module_path,
    resolve_target,
)
from mpresolve.model.records import PageType
from mpresolve.workspace.config import PLATFORMS

ROOT = Path("/project/src")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("MyHeader", "my-header"),
        ("myHeader", "my-header"),
        ("header", "header"),
        ("my-header", "my-header"),
        ("ABtn", "a-btn"),
    ],
)
def test_normalize_component_name(name: str, expected: str) -> None:
    assert normalize_component_name(name) == expected


class TestResolveTarget:
    ENTRIES = {"app": ROOT / "main.js", "pages/index/main": ROOT / "pages" / "index" / "main.js"}

    def test_application_entry(self) -> None:
        target = resolve_target(ROOT / "main.js", self.ENTRIES)
        assert target.page_type is PageType.APP
        assert target.is_app
        assert target.src == "app"

    def test_page_entry(self) -> None:
        target = resolve_target(ROOT / "pages" / "index" / "main.js", self.ENTRIES)
        assert target.is_page
        assert target.src == "pages/index/main"

    def test_component(self) -> None:
        target = resolve_target(ROOT / "components" / "card.vue", self.ENTRIES)
        assert target.page_type is PageType.COMPONENT
        assert not target.is_app and not target.is_page
        assert target.src is None


class TestOutputLocations:
    def test_component_output(self) -> None:
        location = component_output(ROOT, ROOT / "components" / "card.vue", PLATFORMS["wx"])
        assert location.file_path == "components/card.wxml"
        assert location.absolute == "/components/card.wxml"
        assert location.name.startswith("card$")

    def test_names_differ_for_same_stem_in_different_directories(self) -> None:
        a = component_output(ROOT, ROOT / "a" / "card.vue", PLATFORMS["wx"])
        b = component_output(ROOT, ROOT / "b" / "card.vue", PLATFORMS["wx"])
        assert a.name != b.name

    def test_name_is_stable(self) -> None:
        first = component_output(ROOT, ROOT / "card.vue", PLATFORMS["wx"])
        second = filter_output(ROOT, ROOT / "card.vue", PLATFORMS["wx"])
        assert first.name == second.name

    def test_filter_output_uses_platform_extension(self) -> None:
        assert filter_output(ROOT, ROOT / "pages" / "b" / "b.vue", PLATFORMS["my"]).file_path == "pages/b/b.sjs"
        assert filter_output(ROOT, ROOT / "b.vue", PLATFORMS["swan"]).file_path == "b.filter.js"

    def test_file_outside_project_root(self) -> None:
        with pytest.raises(ResolutionError, match="outside the project root"):
            component_output(ROOT, Path("/elsewhere/card.vue"), PLATFORMS["wx"])


@pytest.mark.parametrize(
    ("from_file", "to_file", "expected"),
    [
        ("pages/b/b.wxs", "pages/b/m.wxs", "./m.wxs"),
        ("pages/b/b.wxs", "mixins/m1.wxs", "../../mixins/m1.wxs"),
        ("pages/b/b.wxs", "pages/b/sub/m.wxs", "./sub/m.wxs"),
        ("b.wxs", "m.wxs", "./m.wxs"),
        ("b.wxs", "mixins/m.wxs", "./mixins/m.wxs"),
    ],
)
def test_relative_module_path(from_file: str, to_file: str, expected: str) -> None:
    assert relative_module_path(from_file, to_file) == expected
