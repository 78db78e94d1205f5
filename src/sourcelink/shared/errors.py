"""
Error Reporting

Rust Pattern: rustc_errors::Diagnostic
"""

import os
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .source_location import SourceLocation


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("SOURCELINK_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return sys.stderr.isatty()

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color or not codes:
        return text
    return "".join(codes) + text + _RESET


# ---------------------------------------------------------------------------
# Diagnostic records
# ---------------------------------------------------------------------------

@dataclass
class Label:
    """Secondary span attached to a diagnostic (e.g. other conflicting exports)."""
    location: SourceLocation
    message: str = ""


@dataclass
class Error:
    """
    Link-time or runtime error.

    Rust Pattern: rustc_errors::Diagnostic
    """
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None
    labels: List[Label] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def _caret_width(code_line: str, col_start: int, end_column: int, column: int) -> int:
    if end_column > column:
        return end_column - column
    length = 0
    for ch in code_line[col_start:]:
        if ch in " \t;,(){}":
            break
        length += 1
    return max(1, length)


def _snippet(
    out: List[str],
    location: SourceLocation,
    source: str,
    label: str,
    gutter: int,
    color: bool,
) -> None:
    lines = source.split("\n")
    idx = location.line - 1
    code_line = lines[idx] if 0 <= idx < len(lines) else ""
    col_start = max(location.column, 1) - 1
    width = _caret_width(code_line, col_start, location.end_column, location.column)
    carets = " " * col_start + "^" * width + (f" {label}" if label else "")
    out.append(_style(str(location.line).rjust(gutter) + " | ", _BOLD, _BLUE, color=color) + code_line)
    out.append(_style(" " * gutter + " | ", _BOLD, _BLUE, color=color) + _style(carets, _BOLD, _RED, color=color))


def format_diagnostic(error: Error, source_files: Dict[str, str], color: bool = False) -> str:
    """
    Render a single diagnostic in rustc style.

    Example output (plain, no color)::

        error[E0412]: '/a.js' does not contain a definition for 'unknown'
         --> /b.js:1:13
          |
        1 | import { a, unknown } from "./a.js";
          |             ^^^^^^^
          |
          = help: check that the name is exported by the imported module
    """
    code_str = f"[{error.code}]" if error.code else ""
    out: List[str] = [
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    ]

    spans = []
    if error.location is not None:
        spans.append((error.location, error.label or ""))
    spans.extend((lbl.location, lbl.message) for lbl in error.labels)

    if not spans:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + "<unknown location>")
        gutter = 1
    else:
        gutter = max(len(str(loc.line)) for loc, _ in spans)
        for loc, label in spans:
            out.append(_style(" " * gutter + "--> ", _BOLD, _BLUE, color=color) + str(loc))
            source = source_files.get(loc.file)
            if source is None or loc.line <= 0:
                continue
            out.append(_style(" " * gutter + " |", _BOLD, _BLUE, color=color))
            _snippet(out, loc, source, label, gutter, color)

    if error.help or error.note:
        pad = " " * (gutter + 1)
        out.append(_style(pad + "|", _BOLD, _BLUE, color=color))
        if error.help:
            out.append(_style(f"{pad}= ", _BOLD, _CYAN, color=color) + _style("help: ", _BOLD, color=color) + error.help)
        if error.note:
            out.append(_style(f"{pad}= ", _BOLD, _CYAN, color=color) + _style("note: ", _BOLD, color=color) + error.note)
    return "\n".join(out)


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """
    Error sink with Rust-style formatting.

    Rust Pattern: rustc_errors::Emitter
    """

    def __init__(self, source_files: Dict[str, str]):
        self.source_files = source_files
        self.errors: List[Error] = []
        self.exceptions: List["SourceLinkSourceError"] = []

    def report_error(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help: Optional[str] = None,
        note: Optional[str] = None,
        label: Optional[str] = None,
        labels: Optional[List[Label]] = None,
    ) -> None:
        self.errors.append(Error(
            message=message,
            location=location,
            code=code,
            help=help,
            note=note,
            label=label,
            labels=list(labels or []),
        ))

    def report_exception(self, exc: "SourceLinkSourceError") -> None:
        """Record a raised source error, keeping the exception for callers that inspect it."""
        self.exceptions.append(exc)
        self.errors.append(exc.to_diagnostic())

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return format_diagnostic(error, self.source_files, color=use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        parts = [self.format_error(e, color=use_color) for e in self.errors]
        count = len(self.errors)
        summary = f"aborting due to {count} previous error{'s' if count != 1 else ''}"
        parts.append(_style("error", _BOLD, _RED, color=use_color) + _style(f": {summary}", _BOLD, color=use_color))
        return "\n\n".join(parts)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def print_errors(self) -> None:
        if self.errors:
            print(self.format_all_errors(), file=sys.stderr)


# ============================================================================
# Exception Classes
# ============================================================================

class SourceLinkError(Exception):
    """Base exception for all sourcelink errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location:
            return f"{self.message}\n --> {self.location}"
        return self.message


class SourceLinkSourceError(SourceLinkError):
    """
    Error caused by the user's source files (as opposed to a bug in sourcelink).

    Every error the linker reports to the caller's error sink derives from this
    class: syntax errors, unresolvable imports, cycles, export conflicts,
    undefined imports, and errors raised while evaluating a linked program.
    """
    error_code = "E0001"
    category = "link"
    help_text: Optional[str] = None

    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 help: Optional[str] = None,
                 note: Optional[str] = None,
                 label: Optional[str] = None,
                 labels: Optional[List[Label]] = None):
        super().__init__(message, location)
        if help is not None:
            self.help_text = help
        self.note_text = note
        self.label_text = label
        self.labels = list(labels or [])

    def to_diagnostic(self) -> Error:
        return Error(
            message=self.message,
            location=self.location,
            code=self.error_code,
            help=self.help_text,
            note=self.note_text,
            label=self.label_text,
            labels=self.labels,
        )

    def format(self, source_files: Optional[Dict[str, str]] = None, color: bool = False) -> str:
        return format_diagnostic(self.to_diagnostic(), source_files or {}, color=color)


class SourceLinkImplementationError(Exception):
    """
    Error in Python implementation code (not in the user's source files).

    Never use this for errors in user code - use SourceLinkSourceError instead.
    """
    def __init__(self, message: str, error_code: str = "E9999"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"
