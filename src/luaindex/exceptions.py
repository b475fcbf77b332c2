"""luaindex exception hierarchy.

All exceptions inherit from LuaIndexError so callers can catch the base
class when they want to handle any indexing failure uniformly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from luaindex.indexer.ranges import Position


class LuaIndexError(Exception):
    """Base exception for all luaindex errors."""


class ConfigError(LuaIndexError):
    """Configuration-related errors (unsupported Lua version, bad log level, etc.)."""


class IndexerError(LuaIndexError):
    """Errors during workspace scanning or indexing."""


class ParseFailure(IndexerError):
    """Source text could not be parsed into a syntax tree."""

    def __init__(self, message: str, position: Position | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} at {self.position.line}:{self.position.column}"


class UnknownDocumentError(IndexerError):
    """The content provider has no text for the requested document."""
