"""Per-file index state: staleness flag plus derived occurrences and symbols."""

from __future__ import annotations

import threading
from typing import Protocol

from luaindex.exceptions import ParseFailure
from luaindex.indexer.syntax import Chunk
from luaindex.indexer.walker import DeclaredSymbol, Occurrence, walk_chunk


class Parser(Protocol):
    def parse(self, text: str) -> Chunk: ...


class FileIndex:
    """Derived index data for one document.

    A new index starts dirty. It becomes clean only through a successful
    ``rebuild`` and turns dirty again on every content change. A failed
    rebuild leaves it dirty and keeps the artifacts of the last good parse.

    All reads and rebuilds should happen while holding ``lock``.
    """

    def __init__(self, identity: str) -> None:
        self.identity = identity
        self.lock = threading.RLock()
        self._dirty = True
        self._occurrences: list[Occurrence] = []
        self._symbols: list[DeclaredSymbol] = []
        self._symbols_by_name: dict[str, DeclaredSymbol] = {}
        self.walk_count = 0
        self.last_error: ParseFailure | None = None

    def __repr__(self) -> str:
        state = "dirty" if self._dirty else "clean"
        return f"FileIndex({self.identity!r}, {state}, symbols={len(self._symbols)})"

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def occurrences(self) -> list[Occurrence]:
        return self._occurrences

    @property
    def symbols(self) -> list[DeclaredSymbol]:
        """Declared symbols in traversal order, duplicates included."""
        return self._symbols

    @property
    def symbols_by_name(self) -> dict[str, DeclaredSymbol]:
        """One entry per name; a later declaration replaces an earlier one."""
        return self._symbols_by_name

    def mark_dirty(self) -> None:
        with self.lock:
            self._dirty = True

    def rebuild(self, content: str, parser: Parser) -> ParseFailure | None:
        """Re-parse ``content`` and replace all derived data.

        Args:
            content: Current document text.
            parser: Produces the syntax tree.

        Returns:
            None on success, or the ParseFailure that kept the index dirty.
        """
        with self.lock:
            try:
                chunk = parser.parse(content)
            except ParseFailure as exc:
                self.last_error = exc
                return exc

            result = walk_chunk(chunk, self.identity)
            self._occurrences = result.occurrences
            self._symbols = result.symbols
            self._symbols_by_name = {symbol.name: symbol for symbol in result.symbols}

            self.last_error = None
            self.walk_count += 1
            self._dirty = False
            return None
