"""Tree-sitter based Lua parser that lowers source text into syntax nodes."""

from __future__ import annotations

from typing import Any

import tree_sitter as ts
import tree_sitter_lua

from luaindex.exceptions import ParseFailure
from luaindex.indexer.ranges import Position, Range
from luaindex.indexer.syntax import (
    Block,
    CallExpression,
    CallStatement,
    Chunk,
    Expression,
    FunctionDeclaration,
    Identifier,
    MemberExpression,
    Statement,
    Unsupported,
)

_BLOCK_STATEMENTS: frozenset[str] = frozenset(
    {"do_statement", "while_statement", "repeat_statement", "for_statement"}
)
_FUNCTION_DECLARATIONS: frozenset[str] = frozenset(
    {"function_declaration", "local_function_declaration"}
)
_GOTO_STATEMENTS: frozenset[str] = frozenset({"goto_statement", "label_statement"})


class LuaParser:
    """Parses Lua source with tree-sitter and builds a ``Chunk``.

    Usage::

        parser = LuaParser()
        chunk = parser.parse("function greet() print('hi') end")
    """

    def __init__(self, lua_version: str = "5.4") -> None:
        """Initialize the tree-sitter parser for the Lua grammar.

        Args:
            lua_version: Dialect to accept. ``5.1`` rejects goto and labels.
        """
        self._lua_version = lua_version
        self._ts_parser = ts.Parser()
        self._ts_parser.language = ts.Language(tree_sitter_lua.language())

    @property
    def lua_version(self) -> str:
        return self._lua_version

    def parse(self, text: str) -> Chunk:
        """Parse source text into a syntax tree.

        Args:
            text: Full document contents.

        Returns:
            The root Chunk of the document.

        Raises:
            ParseFailure: If the text contains a syntax error or cannot be encoded.
        """
        try:
            content = text.encode("utf-8")
        except UnicodeEncodeError as exc:
            line = text.count("\n", 0, exc.start)
            column = exc.start - (text.rfind("\n", 0, exc.start) + 1)
            raise ParseFailure("Invalid character in source", Position(line, column)) from exc
        tree = self._ts_parser.parse(content)
        root = tree.root_node

        if root.has_error:
            raise self._syntax_error(root, content)

        return Chunk(body=self._statements(root.named_children, content))

    # Lowering

    def _statements(self, nodes: list[Any], content: bytes) -> tuple[Statement, ...]:
        return tuple(
            self._statement(node, content)
            for node in nodes
            if node.type not in ("comment", "hash_bang_line")
        )

    def _statement(self, node: Any, content: bytes) -> Statement:
        kind = node.type

        if kind in _FUNCTION_DECLARATIONS:
            return self._function(node, content)

        if kind == "function_call":
            return CallStatement(expression=self._call(node, content), range=_range(node, content))

        if kind in _BLOCK_STATEMENTS:
            body = self._body(node, "body", content)
            return Block(kind=kind, body=body, range=_range(node, content))

        if kind == "if_statement":
            body = list(self._body(node, "consequence", content))
            for clause in node.children_by_field_name("alternative"):
                field_name = "consequence" if clause.type == "elseif_statement" else "body"
                body.extend(self._body(clause, field_name, content))
            return Block(kind=kind, body=tuple(body), range=_range(node, content))

        if kind in _GOTO_STATEMENTS and self._lua_version == "5.1":
            raise ParseFailure(
                f"'{_node_text(node, content).split()[0]}' requires Lua 5.2 or later",
                _position(node.start_byte, node.start_point, content),
            )

        return Unsupported(kind=kind, range=_range(node, content))

    def _expression(self, node: Any, content: bytes) -> Expression:
        kind = node.type

        if kind == "identifier":
            return Identifier(name=_node_text(node, content), range=_range(node, content))

        if kind == "function_call":
            return self._call(node, content)

        if kind == "dot_index_expression":
            return self._member(node, "field", ".", content)

        if kind == "method_index_expression":
            return self._member(node, "method", ":", content)

        if kind == "function_definition":
            return FunctionDeclaration(
                identifier=None, body=self._body(node, "body", content), range=_range(node, content)
            )

        if kind == "parenthesized_expression":
            inner = [child for child in node.named_children if child.type != "comment"]
            if len(inner) == 1:
                return self._expression(inner[0], content)

        return Unsupported(kind=kind, range=_range(node, content))

    def _function(self, node: Any, content: bytes) -> FunctionDeclaration:
        name_node = node.child_by_field_name("name")
        identifier: Identifier | MemberExpression | None = None
        if name_node is not None:
            name = self._expression(name_node, content)
            if isinstance(name, (Identifier, MemberExpression)):
                identifier = name

        return FunctionDeclaration(
            identifier=identifier,
            body=self._body(node, "body", content),
            range=_range(node, content),
            is_local=node.type.startswith("local")
            or any(child.type == "local" for child in node.children),
        )

    def _call(self, node: Any, content: bytes) -> CallExpression:
        callee = node.child_by_field_name("name")
        args_node = node.child_by_field_name("arguments")
        if args_node is None:
            args_node = _child_by_type(node, "arguments")
        if callee is None and node.named_child_count > 1:
            callee = node.named_children[0]

        arguments: tuple[Expression, ...] = ()
        if args_node is not None:
            arguments = tuple(
                self._expression(child, content)
                for child in args_node.named_children
                if child.type != "comment"
            )

        base: Expression
        if callee is None:
            base = Unsupported(kind="missing_callee", range=_range(node, content))
        else:
            base = self._expression(callee, content)
        return CallExpression(base=base, arguments=arguments, range=_range(node, content))

    def _member(self, node: Any, field_name: str, indexer: str, content: bytes) -> Expression:
        table = node.child_by_field_name("table")
        member = node.child_by_field_name(field_name)
        if table is None or member is None:
            return Unsupported(kind=node.type, range=_range(node, content))
        return MemberExpression(
            base=self._expression(table, content),
            identifier=Identifier(name=_node_text(member, content), range=_range(member, content)),
            indexer=indexer,
            range=_range(node, content),
        )

    def _body(self, node: Any, field_name: str, content: bytes) -> tuple[Statement, ...]:
        """Return the statements of the block stored under ``field_name``."""
        block = node.child_by_field_name(field_name)
        if block is None:
            block = _child_by_type(node, "block")
        if block is None:
            return ()
        return self._statements(block.named_children, content)

    # Errors

    def _syntax_error(self, root: Any, content: bytes) -> ParseFailure:
        """Describe the first ERROR or MISSING node in document order."""
        bad = _first_error(root)
        if bad is None:
            return ParseFailure("Syntax error")
        position = _position(bad.start_byte, bad.start_point, content)
        if bad.is_missing:
            return ParseFailure(f"Missing '{bad.type}'", position)
        return ParseFailure("Unexpected syntax", position)


def _first_error(node: Any) -> Any | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _range(node: Any, content: bytes) -> Range:
    return Range(
        _position(node.start_byte, node.start_point, content),
        _position(node.end_byte, node.end_point, content),
    )


def _position(offset: int, point: tuple[int, int], content: bytes) -> Position:
    """Convert a tree-sitter byte point into a character column on its line."""
    row, byte_column = point
    line_prefix = content[offset - byte_column : offset]
    return Position(row, len(line_prefix.decode("utf-8", errors="replace")))


def _child_by_type(node: Any, type_name: str) -> Any | None:
    """Return first child of node with the given type."""
    for child in node.children:
        if child.type == type_name:
            return child
    return None


def _node_text(node: Any, content: bytes) -> str:
    """Extract source text for a tree-sitter node."""
    return content[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
