"""
Frontend: Source text to AST
"""

from .parser import Parser, ParseError

__all__ = ["Parser", "ParseError"]
