"""
Expression Parser - Extracted from SourceTransformer
Handles parsing of operators and arrow functions
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Union

from lark.lexer import Token
from typing_extensions import TypeAlias

from ...shared.nodes import (
    ArrowFunctionExpression, BinaryExpression, BlockStatement, Expression,
    Identifier, LogicalExpression, UnaryExpression,
)
from ...shared.source_location import SourceLocation

# Type aliases for better clarity
LarkMeta: TypeAlias = Any  # Lark's internal Meta object
LocationExtractor: TypeAlias = Callable[[LarkMeta], SourceLocation]


@dataclass
class ParenGroup:
    """Internal type for `( a, b, ... )`: either arrow parameters or a parenthesized expression"""
    items: List[Expression]
    location: SourceLocation


class BinaryExpressionParser:
    """Dedicated parser for binary, logical and unary expressions"""

    def __init__(self, location_extractor: LocationExtractor) -> None:
        self.extract_location = location_extractor

    def parse_binary(self, meta: LarkMeta, left: Expression, operator: Token, right: Expression) -> BinaryExpression:
        return BinaryExpression(
            operator=str(operator),
            left=left,
            right=right,
            location=self._operator_location(meta, operator),
        )

    def parse_logical(self, meta: LarkMeta, left: Expression, operator: Token, right: Expression) -> LogicalExpression:
        """Parse '&&' / '||' (short-circuit)"""
        return LogicalExpression(
            operator=str(operator),
            left=left,
            right=right,
            location=self._operator_location(meta, operator),
        )

    def parse_unary(self, meta: LarkMeta, operator: Token, argument: Expression) -> UnaryExpression:
        return UnaryExpression(operator=str(operator), argument=argument, location=self.extract_location(meta))

    def _operator_location(self, meta: LarkMeta, operator: Token) -> SourceLocation:
        location = self.extract_location(meta)
        # Trust: Lark Token has line/column attributes
        return SourceLocation(
            file=location.file,
            line=operator.line,
            column=operator.column,
            end_line=operator.end_line or 0,
            end_column=operator.end_column or 0,
        )


class ArrowFunctionParser:
    """Dedicated parser for arrow functions"""

    def __init__(self, location_extractor: LocationExtractor) -> None:
        self.extract_location = location_extractor

    def parse_single(self, meta: LarkMeta, param: Identifier,
                     body: Union[BlockStatement, Expression]) -> ArrowFunctionExpression:
        """x => body"""
        return ArrowFunctionExpression(params=[param], body=body, location=self.extract_location(meta))

    def parse_group(self, meta: LarkMeta, group: ParenGroup,
                    body: Union[BlockStatement, Expression]) -> ArrowFunctionExpression:
        """(a, b) => body; every grouped item must be a plain identifier"""
        from ..parser import ParseError

        params: List[Identifier] = []
        for item in group.items:
            if not isinstance(item, Identifier):
                raise ParseError("Arrow function parameters must be identifiers", item.location)
            params.append(item)
        return ArrowFunctionExpression(params=params, body=body, location=self.extract_location(meta))
