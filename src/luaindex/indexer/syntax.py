"""Syntax tree node kinds consumed by the AST walker.

The parser adapter lowers the concrete tree-sitter tree into this closed set
of node kinds. Constructs the index does not look into are lowered to
``Unsupported`` so that the walker skips them explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from luaindex.indexer.ranges import Range


@dataclass(frozen=True, slots=True)
class Identifier:
    name: str
    range: Range


@dataclass(frozen=True, slots=True)
class MemberExpression:
    """Field or method access such as ``a.b`` or ``a:b``.

    Attributes:
        base: The expression being indexed.
        identifier: The trailing field or method name.
        indexer: Either ``"."`` or ``":"``.
    """

    base: Expression
    identifier: Identifier
    indexer: str
    range: Range


@dataclass(frozen=True, slots=True)
class CallExpression:
    base: Expression
    arguments: tuple[Expression, ...]
    range: Range


@dataclass(frozen=True, slots=True)
class FunctionDeclaration:
    """A function statement or an anonymous function expression.

    Attributes:
        identifier: Declared name, or None for ``function() ... end`` expressions.
        body: Statements of the function body in source order.
        is_local: True for ``local function name() ... end``.
        range: The whole declaration, from ``function`` (or ``local``) to ``end``.
    """

    identifier: Identifier | MemberExpression | None
    body: tuple[Statement, ...]
    range: Range
    is_local: bool = False


@dataclass(frozen=True, slots=True)
class CallStatement:
    expression: CallExpression
    range: Range


@dataclass(frozen=True, slots=True)
class Block:
    """Any statement that owns a list of statements (do, while, repeat, for, if)."""

    kind: str
    body: tuple[Statement, ...]
    range: Range


@dataclass(frozen=True, slots=True)
class Unsupported:
    """A construct the index does not traverse, kept under its grammar name."""

    kind: str
    range: Range


@dataclass(frozen=True, slots=True)
class Chunk:
    body: tuple[Statement, ...] = field(default_factory=tuple)


Expression = Union[Identifier, MemberExpression, CallExpression, FunctionDeclaration, Unsupported]
Statement = Union[FunctionDeclaration, CallStatement, Block, Unsupported]
Node = Union[Chunk, Identifier, MemberExpression, CallExpression, FunctionDeclaration, CallStatement, Block, Unsupported]
