"""
Literal Parser - Extracted from SourceTransformer
Handles parsing of number and string literals
"""

from lark.lexer import Token

from ...shared.nodes import Literal
from ...shared.source_location import SourceLocation

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


class LiteralParser:
    """Dedicated parser for literal tokens"""

    @staticmethod
    def parse_number(token: Token, location: SourceLocation) -> Literal:
        text = str(token)
        if "." in text or "e" in text.lower():
            return Literal(value=float(text), location=location)
        return Literal(value=int(text), location=location)

    @staticmethod
    def parse_string(token: Token, location: SourceLocation) -> Literal:
        return Literal(value=LiteralParser.unquote(str(token)), location=location)

    @staticmethod
    def unquote(quoted: str) -> str:
        """Strip the surrounding quotes and resolve backslash escapes"""
        body = quoted[1:-1]
        if "\\" not in body:
            return body
        out = []
        i = 0
        while i < len(body):
            ch = body[i]
            if ch == "\\" and i + 1 < len(body):
                nxt = body[i + 1]
                out.append(_ESCAPES.get(nxt, nxt))
                i += 2
                continue
            out.append(ch)
            i += 1
        return "".join(out)
