"""Syntax tree walker that extracts identifier occurrences and declared symbols."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import assert_never

from luaindex.indexer.ranges import Range
from luaindex.indexer.syntax import (
    Block,
    CallExpression,
    CallStatement,
    Chunk,
    Expression,
    FunctionDeclaration,
    Identifier,
    MemberExpression,
    Node,
    Unsupported,
)


class SymbolKind(str, Enum):
    FUNCTION = "function"


@dataclass(frozen=True, slots=True)
class Occurrence:
    """A single identifier reference found during the walk.

    Attributes:
        name: The identifier text.
        base: Dotted text of the qualifying table (``"a.b"`` for ``a.b.c``),
            empty for unqualified names.
        range: Source range of the identifier token.
    """

    name: str
    base: str
    range: Range


@dataclass(frozen=True, slots=True)
class DeclaredSymbol:
    """A named function declaration.

    Attributes:
        name: Declared name (trailing component for ``M.foo`` / ``M:foo``).
        kind: Always FUNCTION for now.
        range: The entire declaration, not just its name token.
        container_uri: Identity of the file holding the declaration.
    """

    name: str
    kind: SymbolKind
    range: Range
    container_uri: str


@dataclass
class WalkResult:
    occurrences: list[Occurrence] = field(default_factory=list)
    symbols: list[DeclaredSymbol] = field(default_factory=list)


class ASTWalker:
    """Depth-first pre-order traversal over one file's syntax tree.

    Occurrences are recorded in traversal order, not position order.
    """

    def __init__(self, identity: str) -> None:
        self._identity = identity
        self._result = WalkResult()

    @property
    def result(self) -> WalkResult:
        return self._result

    def walk(self, node: Node, ancestors: tuple[Node, ...] = ()) -> None:
        """Visit ``node`` and everything below it that the index cares about.

        Args:
            node: Subtree root.
            ancestors: Enclosing function declarations, outermost first.
        """
        if isinstance(node, Identifier):
            self._emit_occurrence(node, base="")

        elif isinstance(node, MemberExpression):
            self._emit_occurrence(node.identifier, base=_dotted(node.base))

        elif isinstance(node, FunctionDeclaration):
            name = _declared_name(node)
            if name is not None:
                self._result.symbols.append(
                    DeclaredSymbol(
                        name=name,
                        kind=SymbolKind.FUNCTION,
                        range=node.range,
                        container_uri=self._identity,
                    )
                )
            inner = (*ancestors, node)
            for statement in node.body:
                self.walk(statement, inner)

        elif isinstance(node, CallStatement):
            self.walk(node.expression, ancestors)

        elif isinstance(node, CallExpression):
            self.walk(node.base, ancestors)
            for argument in node.arguments:
                self.walk(argument, ancestors)

        elif isinstance(node, (Chunk, Block)):
            for statement in node.body:
                self.walk(statement, ancestors)

        elif isinstance(node, Unsupported):
            pass

        else:
            assert_never(node)

    def _emit_occurrence(self, identifier: Identifier, base: str) -> None:
        self._result.occurrences.append(
            Occurrence(name=identifier.name, base=base, range=identifier.range)
        )


def walk_chunk(chunk: Chunk, identity: str) -> WalkResult:
    """Walk a whole document and return its occurrences and declarations."""
    walker = ASTWalker(identity)
    walker.walk(chunk)
    return walker.result


def _declared_name(node: FunctionDeclaration) -> str | None:
    if isinstance(node.identifier, Identifier):
        return node.identifier.name
    if isinstance(node.identifier, MemberExpression):
        return node.identifier.identifier.name
    return None


def _dotted(expr: Expression) -> str:
    """Render a chain of plain names such as ``a.b``; anything else renders empty."""
    if isinstance(expr, Identifier):
        return expr.name
    if isinstance(expr, MemberExpression):
        prefix = _dotted(expr.base)
        if prefix:
            return f"{prefix}{expr.indexer}{expr.identifier.name}"
    return ""
