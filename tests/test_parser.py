"""Tests for lowering Lua source into syntax nodes with tree-sitter."""

from __future__ import annotations

import pytest

from luaindex.exceptions import ParseFailure
from luaindex.indexer.parser import LuaParser
from luaindex.indexer.ranges import Position, Range
from luaindex.indexer.syntax import (
    Block,
    CallExpression,
    CallStatement,
    FunctionDeclaration,
    Identifier,
    MemberExpression,
    Unsupported,
)


class TestDeclarations:
    def test_global_function_range_spans_declaration(self, lua_parser: LuaParser) -> None:
        chunk = lua_parser.parse("\n\n\nfunction foo() end\n")

        assert len(chunk.body) == 1
        declaration = chunk.body[0]
        assert isinstance(declaration, FunctionDeclaration)
        assert isinstance(declaration.identifier, Identifier)
        assert declaration.identifier.name == "foo"
        assert declaration.range == Range.from_coords(3, 0, 3, 18)
        assert declaration.is_local is False

    def test_local_function(self, lua_parser: LuaParser) -> None:
        declaration = lua_parser.parse("local function helper() end").body[0]
        assert isinstance(declaration, FunctionDeclaration)
        assert declaration.is_local is True
        assert isinstance(declaration.identifier, Identifier)
        assert declaration.identifier.name == "helper"

    def test_dotted_function_name(self, lua_parser: LuaParser) -> None:
        declaration = lua_parser.parse("function M.util.run() end").body[0]
        assert isinstance(declaration, FunctionDeclaration)
        assert isinstance(declaration.identifier, MemberExpression)
        assert declaration.identifier.identifier.name == "run"

    def test_method_function_name(self, lua_parser: LuaParser) -> None:
        declaration = lua_parser.parse("function Account:deposit(v) end").body[0]
        assert isinstance(declaration, FunctionDeclaration)
        assert isinstance(declaration.identifier, MemberExpression)
        assert declaration.identifier.indexer == ":"
        assert declaration.identifier.identifier.name == "deposit"

    def test_function_body_statements(self, lua_parser: LuaParser) -> None:
        source = "function outer()\n  first()\n  second()\nend\n"
        declaration = lua_parser.parse(source).body[0]
        assert isinstance(declaration, FunctionDeclaration)
        assert [type(s) for s in declaration.body] == [CallStatement, CallStatement]
        assert declaration.range == Range.from_coords(0, 0, 3, 3)


class TestCalls:
    def test_call_statement(self, lua_parser: LuaParser) -> None:
        statement = lua_parser.parse("foo(bar)").body[0]

        assert isinstance(statement, CallStatement)
        expression = statement.expression
        assert isinstance(expression, CallExpression)
        assert expression.base == Identifier("foo", Range.from_coords(0, 0, 0, 3))
        assert expression.arguments == (Identifier("bar", Range.from_coords(0, 4, 0, 7)),)

    def test_method_call(self, lua_parser: LuaParser) -> None:
        statement = lua_parser.parse("obj:send(msg)").body[0]
        assert isinstance(statement, CallStatement)
        base = statement.expression.base
        assert isinstance(base, MemberExpression)
        assert base.indexer == ":"
        assert base.identifier.name == "send"
        assert isinstance(base.base, Identifier)

    def test_nested_call_argument(self, lua_parser: LuaParser) -> None:
        statement = lua_parser.parse("print(tostring(x))").body[0]
        assert isinstance(statement, CallStatement)
        (argument,) = statement.expression.arguments
        assert isinstance(argument, CallExpression)
        assert argument.arguments[0] == Identifier("x", Range.from_coords(0, 15, 0, 16))

    def test_parenthesized_argument_is_unwrapped(self, lua_parser: LuaParser) -> None:
        statement = lua_parser.parse("f((g))").body[0]
        assert isinstance(statement, CallStatement)
        assert statement.expression.arguments == (Identifier("g", Range.from_coords(0, 3, 0, 4)),)

    def test_anonymous_function_argument(self, lua_parser: LuaParser) -> None:
        statement = lua_parser.parse("defer(function() cleanup() end)").body[0]
        assert isinstance(statement, CallStatement)
        (callback,) = statement.expression.arguments
        assert isinstance(callback, FunctionDeclaration)
        assert callback.identifier is None
        assert len(callback.body) == 1

    def test_string_argument_is_unsupported(self, lua_parser: LuaParser) -> None:
        statement = lua_parser.parse('require "socket"').body[0]
        assert isinstance(statement, CallStatement)
        assert all(isinstance(a, Unsupported) for a in statement.expression.arguments)


class TestStatements:
    def test_if_clauses_are_flattened(self, lua_parser: LuaParser) -> None:
        source = "if x then\n  a()\nelseif y then\n  b()\nelse\n  c()\nend\n"
        statement = lua_parser.parse(source).body[0]

        assert isinstance(statement, Block)
        assert statement.kind == "if_statement"
        names = [
            s.expression.base.name
            for s in statement.body
            if isinstance(s, CallStatement) and isinstance(s.expression.base, Identifier)
        ]
        assert names == ["a", "b", "c"]

    def test_loops_become_blocks(self, lua_parser: LuaParser) -> None:
        source = "while true do step() end\nfor i = 1, 3 do step() end\ndo step() end\n"
        body = lua_parser.parse(source).body
        assert [s.kind for s in body if isinstance(s, Block)] == [
            "while_statement",
            "for_statement",
            "do_statement",
        ]
        assert all(len(s.body) == 1 for s in body if isinstance(s, Block))

    def test_assignment_is_unsupported(self, lua_parser: LuaParser) -> None:
        body = lua_parser.parse("local x = compute()\ny = 2\n").body
        assert len(body) == 2
        assert all(isinstance(s, Unsupported) for s in body)

    def test_comments_are_dropped(self, lua_parser: LuaParser) -> None:
        body = lua_parser.parse("-- header\nrun()\n--[[ block ]]\n").body
        assert len(body) == 1

    def test_empty_source(self, lua_parser: LuaParser) -> None:
        assert lua_parser.parse("").body == ()


class TestFailures:
    def test_syntax_error_raises_with_position(self, lua_parser: LuaParser) -> None:
        with pytest.raises(ParseFailure) as info:
            lua_parser.parse("function broken(\n")
        assert info.value.position is not None

    def test_unterminated_block(self, lua_parser: LuaParser) -> None:
        with pytest.raises(ParseFailure):
            lua_parser.parse("if x then\n  a()\n")

    def test_goto_rejected_for_lua51(self) -> None:
        parser = LuaParser(lua_version="5.1")
        with pytest.raises(ParseFailure) as info:
            parser.parse("goto done\n::done::\n")
        assert "5.2" in str(info.value)

    def test_goto_accepted_for_lua54(self, lua_parser: LuaParser) -> None:
        body = lua_parser.parse("goto done\n::done::\n").body
        assert len(body) == 2

    def test_unencodable_text_raises_with_position(self, lua_parser: LuaParser) -> None:
        with pytest.raises(ParseFailure) as info:
            lua_parser.parse('function foo() end\nlocal s = "\ud800"\n')
        assert info.value.position == Position(1, 11)


class TestColumns:
    def test_columns_count_characters_after_non_ascii_text(self, lua_parser: LuaParser) -> None:
        chunk = lua_parser.parse('function bar() end\nprint("é", bar)\n')

        statement = chunk.body[1]
        assert isinstance(statement, CallStatement)
        argument = statement.expression.arguments[1]
        assert isinstance(argument, Identifier)
        assert argument.range == Range.from_coords(1, 11, 1, 14)
        assert statement.range == Range.from_coords(1, 0, 1, 15)
