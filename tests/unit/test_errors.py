#!/usr/bin/env python3
"""
Tests for error reporting: diagnostic formatting and the error hierarchy.
"""

import re

from sourcelink.analysis.module_system.symbol_linker import ReexportSymbolError, UndefinedImportError
from sourcelink.shared.errors import (
    Error,
    ErrorReporter,
    Label,
    SourceLinkError,
    SourceLinkImplementationError,
    SourceLinkSourceError,
)
from sourcelink.shared.nodes import Identifier
from sourcelink.shared.source_location import SourceLocation

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def _strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE.sub("", text)


class TestErrorReporterFormatting:
    def test_location_none(self):
        err = Error(message="something failed", location=None, code="E0001")
        out = ErrorReporter({}).format_error(err, color=False)
        assert "error[E0001]: something failed" in out
        assert "<unknown location>" in out

    def test_file_not_in_source_files(self):
        loc = SourceLocation(file="/missing.js", line=1, column=1)
        out = ErrorReporter({}).format_error(Error(message="oops", location=loc, code="E0432"), color=False)
        assert "error[E0432]" in out
        assert "/missing.js:1:1" in out

    def test_snippet_and_carets(self):
        source = 'import { a, unknown } from "./a.js";'
        loc = SourceLocation(file="/b.js", line=1, column=13)
        err = Error(message="'/a.js' does not contain a definition for 'unknown'", location=loc,
                    code="E0412", help="check that the name is exported by the imported module")
        out = ErrorReporter({"/b.js": source}).format_error(err, color=False)
        lines = out.split("\n")
        assert lines[0] == "error[E0412]: '/a.js' does not contain a definition for 'unknown'"
        assert lines[1] == " --> /b.js:1:13"
        assert lines[3] == "1 | " + source
        assert lines[4] == "  | " + " " * 12 + "^" * len("unknown")
        assert lines[-1] == "  = help: check that the name is exported by the imported module"

    def test_end_column_sets_caret_width(self):
        loc = SourceLocation(file="/f.js", line=1, column=7, end_line=1, end_column=10)
        out = ErrorReporter({"/f.js": "const abc = 1;"}).format_error(Error("bad", loc), color=False)
        assert "  |       ^^^" in out

    def test_secondary_labels(self):
        source = "export const x = 1;\nexport { y as x };"
        err = Error(
            message="dup",
            location=SourceLocation("/m.js", 1, 1),
            label="first exported here",
            labels=[Label(SourceLocation("/m.js", 2, 10), "also exported here")],
        )
        out = ErrorReporter({"/m.js": source}).format_error(err, color=False)
        assert "first exported here" in out
        assert "also exported here" in out
        assert "/m.js:2:10" in out

    def test_format_all_errors_summary(self):
        reporter = ErrorReporter({})
        reporter.report_error("a", None)
        reporter.report_error("b", None)
        out = reporter.format_all_errors(color=False)
        assert out.endswith("error: aborting due to 2 previous errors")

    def test_color_output(self):
        err = Error(message="colored", location=None, code="E0001")
        out = ErrorReporter({}).format_error(err, color=True)
        assert "\x1b[" in out
        assert "colored" in _strip_ansi(out)

    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        reporter = ErrorReporter({})
        reporter.report_error("plain", None)
        assert "\x1b[" not in reporter.format_all_errors()


class TestErrorHierarchy:
    def test_source_error_to_diagnostic(self):
        loc = SourceLocation("/a.js", 2, 3)
        err = UndefinedImportError("x", "/b.js", loc)
        diagnostic = err.to_diagnostic()
        assert diagnostic.code == "E0412"
        assert diagnostic.location == loc
        assert diagnostic.help == err.help_text
        assert isinstance(err, SourceLinkSourceError)
        assert isinstance(err, SourceLinkError)

    def test_report_exception_keeps_exception(self):
        reporter = ErrorReporter({})
        err = SourceLinkSourceError("boom")
        reporter.report_exception(err)
        assert reporter.has_errors()
        assert reporter.exceptions == [err]

    def test_help_override(self):
        err = SourceLinkSourceError("m", help="try again")
        assert err.to_diagnostic().help == "try again"

    def test_str_includes_location(self):
        err = SourceLinkSourceError("m", SourceLocation("/a.js", 1, 2))
        assert str(err) == "m\n --> /a.js:1:2"

    def test_reexport_error_labels(self):
        first = Identifier("x", SourceLocation("/m.js", 1, 1))
        second = Identifier("x", SourceLocation("/m.js", 3, 5))
        err = ReexportSymbolError("/m.js", "x", [first, second])
        assert err.location == first.location
        assert [label.location for label in err.labels] == [second.location]

    def test_implementation_error(self):
        err = SourceLinkImplementationError("internal")
        assert str(err) == "[E9999] internal"
        assert not isinstance(err, SourceLinkSourceError)
