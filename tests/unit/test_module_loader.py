"""
Graph builder tests (async).
"""

import asyncio

import pytest

from sourcelink.analysis.module_system import (
    CircularImportError, LibraryModule, LibraryNotFoundError, LocalModule, ModuleLoader,
    ModuleNotFoundError, default_registry,
)
from sourcelink.frontend.parser import ParseError


def _loader(parser, files, registry=None):
    registry = registry if registry is not None else default_registry()
    return ModuleLoader(files, parser, registry.get_library_exports, get_library_bundle=registry.get_bundle)


class TestModuleLoader:
    @pytest.mark.asyncio
    async def test_single_module(self, parser):
        table = await _loader(parser, {"/main.js": "const a = 1;"}).build("/main.js")
        assert list(table) == ["/main.js"]
        record = table["/main.js"]
        assert isinstance(record, LocalModule)
        assert record.dependencies == []
        assert record.indegree == 0

    @pytest.mark.asyncio
    async def test_dependencies_in_first_reference_order(self, parser):
        files = {
            "/main.js": 'import { c } from "./c.js"; import { b } from "./b.js"; export { c } from "./c.js";',
            "/b.js": "export const b = 1;",
            "/c.js": "export const c = 2;",
        }
        table = await _loader(parser, files).build("/main.js")
        assert table["/main.js"].dependencies == ["/c.js", "/b.js"]
        assert table["/c.js"].indegree == 1
        assert table["/b.js"].indegree == 1

    @pytest.mark.asyncio
    async def test_specifiers_rewritten_to_canonical_keys(self, parser):
        files = {
            "/dir/main.js": 'import { x } from "../shared.js";',
            "/shared.js": "export const x = 1;",
        }
        table = await _loader(parser, files).build("/dir/main.js")
        declaration = table["/dir/main.js"].program.body[0]
        assert declaration.source.value == "/shared.js"

    @pytest.mark.asyncio
    async def test_same_file_through_different_specifiers_parsed_once(self, parser):
        files = {
            "/main.js": 'import { a } from "./dir/a.js"; import { b } from "./b.js";',
            "/dir/a.js": 'import { s } from "../shared.js"; export const a = s;',
            "/b.js": 'import { s } from "/shared.js"; export const b = s;',
            "/shared.js": "export const s = 1;",
        }
        loader = _loader(parser, files)
        table = await loader.build("/main.js")
        assert sorted(table) == ["/b.js", "/dir/a.js", "/main.js", "/shared.js"]
        assert loader.parse_count["/shared.js"] == 1
        assert table["/shared.js"].indegree == 2

    @pytest.mark.asyncio
    async def test_library_module(self, parser):
        registry = default_registry()
        files = {"/main.js": 'import { math_PI } from "math";'}
        table = await _loader(parser, files, registry).build("/main.js")
        record = table["math"]
        assert isinstance(record, LibraryModule)
        assert "math_PI" in record.exported_names
        assert record.bundle == "math"
        assert registry.fetch_count["math"] == 1

    @pytest.mark.asyncio
    async def test_library_fetched_once_for_many_importers(self, parser, make_registry):
        registry = make_registry({"rune": {"x": 1}}, fetch_delay=0.01)
        files = {
            "/main.js": 'import { a } from "./a.js"; import { b } from "./b.js"; import { x } from "rune";',
            "/a.js": 'import { x } from "rune"; export const a = x;',
            "/b.js": 'import { x } from "rune"; export const b = x;',
        }
        table = await _loader(parser, files, registry).build("/main.js")
        assert registry.fetch_count["rune"] == 1
        assert table["rune"].indegree == 0

    @pytest.mark.asyncio
    async def test_cycle_does_not_deadlock(self, parser):
        files = {
            "/a.js": 'import { b } from "./b.js"; export const a = 1;',
            "/b.js": 'import { a } from "./a.js"; export const b = 2;',
        }
        table = await asyncio.wait_for(_loader(parser, files).build("/a.js"), timeout=5)
        assert table["/a.js"].indegree == 1
        assert table["/b.js"].indegree == 1


class TestModuleLoaderErrors:
    @pytest.mark.asyncio
    async def test_missing_entry(self, parser):
        with pytest.raises(ModuleNotFoundError):
            await _loader(parser, {"/main.js": ""}).build("/other.js")

    @pytest.mark.asyncio
    async def test_missing_local_module(self, parser):
        files = {"/main.js": 'import { x } from "./x.js";'}
        with pytest.raises(ModuleNotFoundError) as exc_info:
            await _loader(parser, files).build("/main.js")
        assert exc_info.value.message == "Module './x.js' not found."
        assert exc_info.value.location.file == "/main.js"

    @pytest.mark.asyncio
    async def test_unknown_library(self, parser):
        files = {"/main.js": 'import { x } from "nope";'}
        with pytest.raises(LibraryNotFoundError) as exc_info:
            await _loader(parser, files).build("/main.js")
        assert exc_info.value.location is not None
        assert exc_info.value.location.file == "/main.js"

    @pytest.mark.asyncio
    async def test_self_import(self, parser):
        files = {"/a.js": 'import { a } from "./a.js"; export const a = 1;'}
        with pytest.raises(CircularImportError) as exc_info:
            await _loader(parser, files).build("/a.js")
        assert exc_info.value.cycle == ["/a.js"]

    @pytest.mark.asyncio
    async def test_syntax_error_in_dependency(self, parser):
        files = {
            "/main.js": 'import { x } from "./x.js";',
            "/x.js": "export const x = ;",
        }
        with pytest.raises(ParseError) as exc_info:
            await _loader(parser, files).build("/main.js")
        assert exc_info.value.location.file == "/x.js"
