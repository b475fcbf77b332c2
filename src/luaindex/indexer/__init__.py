"""Lua workspace indexer: parsing, symbol extraction, and definition lookup."""

from __future__ import annotations

from luaindex.indexer.documents import DocumentStore
from luaindex.indexer.file_index import FileIndex
from luaindex.indexer.lookup import find_occurrence
from luaindex.indexer.parser import LuaParser
from luaindex.indexer.ranges import Position, Range
from luaindex.indexer.resolver import Location, resolve
from luaindex.indexer.scanner import FileInfo, LuaFileScanner
from luaindex.indexer.walker import DeclaredSymbol, Occurrence, SymbolKind
from luaindex.indexer.workspace import WorkspaceIndex, normalize_identity

__all__ = [
    "DeclaredSymbol",
    "DocumentStore",
    "FileIndex",
    "FileInfo",
    "Location",
    "LuaFileScanner",
    "LuaParser",
    "Occurrence",
    "Position",
    "Range",
    "SymbolKind",
    "WorkspaceIndex",
    "find_occurrence",
    "normalize_identity",
    "resolve",
]
