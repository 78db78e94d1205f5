"""
Source AST Transformers
=======================

Specialized transformers for different AST node types.
"""

from .base import SourceTransformer
from .literals import LiteralParser
from .expressions import ArrowFunctionParser, BinaryExpressionParser

__all__ = [
    'SourceTransformer',
    'LiteralParser',
    'ArrowFunctionParser',
    'BinaryExpressionParser',
]
