"""
Parser

Rust Pattern: rustc_parse
"""

import logging
from pathlib import Path
from typing import Optional

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError

from ..shared.errors import SourceLinkSourceError
from ..shared.nodes import Program
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_PARSER_CACHE_FILE, DEFAULT_SOURCE_FILE
from .transformers.base import SourceTransformer

logger = logging.getLogger(__name__)


class ParseError(SourceLinkSourceError):
    """Syntax error in a source file"""
    error_code = "E0001"
    category = "syntax"


class Parser:
    """
    Parser (Rust naming: rustc_parse).

    - Takes source code, returns AST
    - Preserves source locations
    - Converts lark errors into ParseError
    - Uses Lark parser with caching
    """

    def __init__(self, cache_file: str = DEFAULT_PARSER_CACHE_FILE):
        grammar_path = Path(__file__).parent / "grammar.lark"
        # Use Lark native caching for performance
        self.parser = Lark.open(
            str(grammar_path),
            start='program',
            parser='lalr',              # Required for caching
            cache=cache_file,
            propagate_positions=True,   # Enable position tracking for error reporting
            maybe_placeholders=False,
        )
        self.transformer = SourceTransformer()

    def parse(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> Program:
        """
        Parse source code to AST.

        Raises ParseError for syntax errors; the error location points at the
        offending token in `source_file`.
        """
        self.transformer.current_file = source_file
        try:
            tree = self.parser.parse(source)
        except UnexpectedInput as e:
            raise ParseError(_describe(e), _location(e, source_file)) from e
        try:
            program = self.transformer.transform(tree)
        except VisitError as e:
            if isinstance(e.orig_exc, SourceLinkSourceError):
                raise e.orig_exc from e
            raise
        logger.debug(f"Parsed {source_file} ({len(program.body)} statements)")
        return program

    __call__ = parse


def _describe(e: UnexpectedInput) -> str:
    if isinstance(e, UnexpectedEOF):
        return "Unexpected end of input"
    if isinstance(e, UnexpectedToken):
        if e.token.type == "$END":
            return "Unexpected end of input"
        return f"Unexpected token '{e.token}'"
    if isinstance(e, UnexpectedCharacters):
        return f"Unexpected character '{e.char}'"
    return "Invalid syntax"


def _location(e: UnexpectedInput, source_file: str) -> Optional[SourceLocation]:
    line = getattr(e, "line", None)
    column = getattr(e, "column", None)
    if not isinstance(line, int) or not isinstance(column, int) or line < 1:
        return SourceLocation(file=source_file, line=0, column=0)
    return SourceLocation(file=source_file, line=line, column=column)
