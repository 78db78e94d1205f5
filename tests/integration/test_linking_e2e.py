"""
End-to-end tests: link a set of Source files, then run the linked program.
"""

import pytest

from sourcelink.analysis.module_system.dependency_graph import CircularImportError
from sourcelink.analysis.module_system.path_resolver import ModuleNotFoundError
from sourcelink.analysis.module_system.symbol_linker import ReexportSymbolError, UndefinedImportError
from sourcelink.compiler.driver import LinkOptions
from sourcelink.frontend.parser import ParseError
from tests.test_utils import assert_is_topological, invocations_of, unit_declarations

pytestmark = pytest.mark.integration


class TestLinkAndRun:
    def test_named_import(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { b } from "./b.js";\nb;',
            "/b.js": "export const b = 2;",
        })
        assert result.success, result.errors
        assert result.value == 2

    def test_default_and_named_exports(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import square, { offset } from "./lib/sq.js";\nsquare(3) + offset;',
            "/lib/sq.js": "export const offset = 1;\nexport default function square(x) { return x * x; }",
        })
        assert result.success, result.errors
        assert result.value == 10

    def test_renamed_export_visible_only_under_new_name(self, link_and_run):
        files = {"/a.js": "const x = 1;\nexport { x as y };"}
        ok = link_and_run({**files, "/main.js": 'import { y } from "./a.js";\ny;'})
        assert ok.value == 1

        bad = link_and_run({**files, "/main.js": 'import { x } from "./a.js";\nx;'})
        assert not bad.success
        assert isinstance(bad.link_errors[0], UndefinedImportError)

    def test_transitive_imports_and_closures(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { total } from "./sum.js";\ntotal;',
            "/sum.js": 'import { xs } from "./data.js";\n'
                       "function sum(ys) { return is_null(ys) ? 0 : head(ys) + sum(tail(ys)); }\n"
                       "export const total = sum(xs);",
            "/data.js": "export const xs = list(1, 2, 3, 4);",
        })
        assert result.value == 10

    def test_library_import_in_dependency(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { hyp } from "./geo.js";\nhyp(3, 4);',
            "/geo.js": 'import { math_sqrt } from "math";\n'
                       "export function hyp(a, b) { return math_sqrt(a * a + b * b); }",
        })
        assert result.success, result.errors
        assert result.value == 5

    def test_reexport_chain(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { two, PI } from "./index.js";\ntwo * PI;',
            "/index.js": 'export { one as two } from "./one.js";\nexport { math_PI as PI } from "math";',
            "/one.js": "export const one = 2;",
        })
        assert result.success, result.errors
        assert result.value == pytest.approx(6.283185307179586)

    def test_export_all(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { a, b } from "./all.js";\na + b;',
            "/all.js": 'export * from "./parts.js";',
            "/parts.js": "export const a = 1;\nexport const b = 2;",
        })
        assert result.value == 3

    def test_display_order_follows_evaluation_order(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { b } from "./b.js";\nimport { c } from "./c.js";\ndisplay("main");',
            "/b.js": 'import { c } from "./c.js";\ndisplay("b");\nexport const b = c;',
            "/c.js": 'display("c");\nexport const c = 1;',
        })
        assert result.displayed == ["c", "b", "main"]

    def test_runtime_error_in_dependency(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { f } from "./f.js";\nf();',
            "/f.js": 'export function f() { return error("bad"); }',
        })
        assert not result.success
        assert "bad" in result.error


class TestSharedModules:
    def test_diamond_evaluates_shared_module_once(self, link_and_run):
        result = link_and_run({
            "/a.js": 'import { b } from "./b.js";\nimport { c } from "./c.js";\nb + c;',
            "/b.js": 'import { d } from "./d.js";\nexport const b = d + 1;',
            "/c.js": 'import { d } from "./d.js";\nexport const c = d + 2;',
            "/d.js": 'display("d");\nexport const d = 10;',
        }, entry="/a.js")
        assert result.value == 23
        assert result.displayed == ["d"]
        assert len(invocations_of(result.program, "__$d$$dot$$js__")) == 1

    def test_same_file_through_two_specifiers(self, link_and_run):
        result = link_and_run({
            "/app/main.js": 'import { x } from "./util.js";\nimport { x as y } from "../app/./util.js";\nx + y;',
            "/app/util.js": "export const x = 4;",
        }, entry="/app/main.js")
        assert result.value == 8
        assert [u.id.name for u in unit_declarations(result.program)] == ["__$app$util$$dot$$js__"]

    def test_order_is_topological(self, driver):
        files = {
            "/main.js": 'import { a } from "./a.js";\nimport { b } from "./b.js";\na + b;',
            "/a.js": 'import { c } from "./c.js";\nimport { math_PI } from "math";\nexport const a = c;',
            "/b.js": 'import { c } from "./c.js";\nexport const b = c;',
            "/c.js": "export const c = 1;",
        }
        result = driver.link(files, "/main.js")
        assert result.success
        assert result.order[0] == "math"
        assert_is_topological(result.order, {
            "/main.js": ["/a.js", "/b.js"],
            "/a.js": ["/c.js"],
            "/b.js": ["/c.js"],
        })


class TestLinkErrors:
    def test_cycle_names_exactly_the_cycle(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { a } from "./a.js";\na;',
            "/a.js": 'import { b } from "./b.js";\nexport const a = 1;',
            "/b.js": 'import { a } from "./a.js";\nexport const b = 2;',
        })
        assert not result.success
        (error,) = result.link_errors
        assert isinstance(error, CircularImportError)
        assert set(error.cycle) == {"/a.js", "/b.js"}
        assert "Circular import detected" in result.errors[0]

    def test_self_import_is_a_cycle(self, link_and_run):
        result = link_and_run({"/main.js": 'import { a } from "./main.js";\nexport const a = 1;'})
        assert result.link_errors[0].cycle == ["/main.js"]

    def test_missing_module(self, link_and_run):
        result = link_and_run({"/main.js": 'import { a } from "./nope.js";\na;'})
        assert isinstance(result.link_errors[0], ModuleNotFoundError)
        assert "error[E0432]" in result.errors[0]

    def test_missing_entry(self, link_and_run):
        result = link_and_run({"/other.js": "1;"})
        assert isinstance(result.link_errors[0], ModuleNotFoundError)

    def test_syntax_error_in_dependency(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { a } from "./a.js";\na;',
            "/a.js": "export const a = ;",
        })
        assert isinstance(result.link_errors[0], ParseError)
        assert result.link_errors[0].location.file == "/a.js"

    def test_duplicate_exports(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { x } from "./a.js";\nx;',
            "/a.js": "export const x = 1;\nconst y = 2;\nexport { y as x };",
        })
        assert isinstance(result.link_errors[0], ReexportSymbolError)

    def test_unknown_library(self, link_and_run):
        result = link_and_run({"/main.js": 'import { f } from "nosuchlib";\nf;'})
        assert not result.success
        assert "nosuchlib" in result.errors[0]


class TestNonStrictMode:
    OPTIONS = LinkOptions(allow_undefined_imports=True)

    def test_undefined_import_links(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { missing } from "./a.js";\nmissing;',
            "/a.js": "export const a = 1;",
        }, options=self.OPTIONS)
        assert result.success, result.errors

    def test_duplicate_exports_still_reported(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { x } from "./a.js";\nx;',
            "/a.js": "export const x = 1;\nexport { x };",
        }, options=self.OPTIONS)
        assert isinstance(result.link_errors[0], ReexportSymbolError)


class TestLinkResult:
    def test_to_source_of_failed_link_is_empty(self, driver):
        result = driver.link({"/main.js": 'import { a } from "./a.js";'}, "/main.js")
        assert result.has_errors()
        assert result.to_source() == ""

    def test_successful_link_has_no_errors(self, driver):
        result = driver.link({"/main.js": "1;"}, "/main.js")
        assert not result.has_errors()
        assert result.get_errors() == []
        assert result.to_source() == "1;"

    def test_resolve_extensions(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { a } from "./a";\na;',
            "/a.js": "export const a = 7;",
        }, options=LinkOptions(resolve_extensions=(".js",)))
        assert result.value == 7


class TestLibraryImportScopes:
    def test_same_local_name_in_two_modules(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { p } from "./b.js";\nimport { q } from "./c.js";\np(4) + q(-4);',
            "/b.js": 'import { math_sqrt as f } from "math";\nexport const p = f;',
            "/c.js": 'import { math_abs as f } from "math";\nexport const q = f;',
        })
        assert result.success, result.errors
        assert result.value == 6

    def test_entry_declares_name_a_dependency_imported(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { area } from "./b.js";\nconst math_PI = 3;\narea(1) + math_PI;',
            "/b.js": 'import { math_PI } from "math";\nexport function area(r) { return math_PI * r * r; }',
        })
        assert result.success, result.errors
        assert result.value == pytest.approx(3.141592653589793 + 3)

    def test_namespace_imports_in_two_modules(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { p } from "./b.js";\nimport { q } from "./c.js";\nconst m = 1;\np + q + m;',
            "/b.js": 'import * as m from "math";\nexport const p = 1;',
            "/c.js": 'import * as m from "math";\nexport const q = 2;',
        })
        assert result.success, result.errors
        assert result.value == 4

    def test_entry_library_import_keeps_its_name(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { r } from "./r.js";\nimport { math_sqrt } from "math";\nmath_sqrt(r);',
            "/r.js": 'import { math_sqrt } from "math";\nexport const r = math_sqrt(256);',
        })
        assert result.value == 4


class TestEntryModule:
    def test_default_export_expression_runs(self, link_and_run):
        result = link_and_run({"/main.js": 'export default display("side");\n1;'})
        assert result.displayed == ["side"]
        assert result.value == 1


class TestCycleLocation:
    def test_cycle_points_at_import(self, link_and_run):
        result = link_and_run({
            "/main.js": 'import { a } from "./a.js";\na;',
            "/a.js": 'import { b } from "./b.js";\nexport const a = 1;',
            "/b.js": 'import { a } from "./a.js";\nexport const b = 2;',
        })
        (error,) = result.link_errors
        assert error.location.file == error.cycle[0]
        assert (error.location.line, error.location.column) == (1, 19)
        assert f"--> {error.cycle[0]}:1:19" in result.errors[0]
        assert "<unknown location>" not in result.errors[0]
