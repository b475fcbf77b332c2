"""Cursor position to identifier occurrence lookup."""

from __future__ import annotations

from luaindex.indexer.file_index import FileIndex
from luaindex.indexer.ranges import Position, contains
from luaindex.indexer.walker import Occurrence


def find_occurrence(file_index: FileIndex, position: Position) -> Occurrence | None:
    """Return the first occurrence, in traversal order, whose range covers ``position``."""
    with file_index.lock:
        for occurrence in file_index.occurrences:
            if contains(occurrence.range, position):
                return occurrence
    return None
