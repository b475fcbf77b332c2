"""Query surface used by an editor protocol layer.

Document lifecycle notifications only mark files stale; the actual re-parse
happens lazily when a query needs the file.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rich.console import Console

from luaindex.config import IndexConfig
from luaindex.indexer.documents import DocumentStore
from luaindex.indexer.file_index import FileIndex, Parser
from luaindex.indexer.lookup import find_occurrence
from luaindex.indexer.parser import LuaParser
from luaindex.indexer.ranges import Position, Range
from luaindex.indexer.resolver import Location, resolve
from luaindex.indexer.walker import DeclaredSymbol
from luaindex.indexer.workspace import WorkspaceIndex, normalize_identity

console = Console(stderr=True)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A problem to surface in the editor for one document.

    Attributes:
        message: Human-readable description.
        range: Where the problem starts (zero-width).
        severity: Always "error" for parse failures.
    """

    message: str
    range: Range
    severity: str = "error"


class LuaIndexService:
    """Owns the workspace index and answers symbol queries.

    Usage::

        service = LuaIndexService()
        service.notify_opened("file:///game/main.lua", text)
        service.find_definition("file:///game/main.lua", Position(4, 2))
    """

    def __init__(
        self,
        config: IndexConfig | None = None,
        parser: Parser | None = None,
        documents: DocumentStore | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            config: Settings; defaults are used when None.
            parser: Parser collaborator. Defaults to a tree-sitter LuaParser.
            documents: Content provider. Defaults to an empty DocumentStore.
        """
        self._config = config or IndexConfig()
        self._parser = parser or LuaParser(lua_version=self._config.lua_version)
        self.documents = documents or DocumentStore()
        self.workspace = WorkspaceIndex(self._parser)
        self._verbose = self._config.log_level == "DEBUG"

    # Notifications

    def notify_opened(self, uri: str, text: str | None = None) -> None:
        """Start tracking a document, or mark it stale if already tracked."""
        identity = self._remember(uri, text)
        self.workspace.get_or_create(identity).mark_dirty()

    def notify_saved(self, uri: str, text: str | None = None) -> None:
        self.notify_opened(uri, text)

    def notify_changed(self, uri: str, text: str | None = None) -> None:
        """Mark a tracked document stale. Untracked documents are ignored."""
        identity = normalize_identity(uri)
        if identity not in self.workspace:
            return
        self._remember(identity, text)
        self.workspace.mark_dirty(identity)

    def notify_closed(self, uri: str) -> None:
        """Forget the document only when ``evict_on_close`` is configured."""
        if self._config.evict_on_close:
            self.evict(uri)

    def evict(self, uri: str) -> bool:
        """Drop a document's index entry and stored text."""
        identity = normalize_identity(uri)
        self.documents.discard(identity)
        removed = self.workspace.evict(identity)
        if removed:
            self._debug(f"evicted {identity}")
        return removed

    def seed(self, documents: Iterable[tuple[str, str]]) -> int:
        """Index a startup batch of ``(uri, text)`` pairs immediately.

        Returns:
            Number of documents indexed without a parse failure.
        """
        indexed = 0
        for uri, text in documents:
            identity = self._remember(uri, text)
            file_index = self.workspace.get_or_create(identity)
            failure = file_index.rebuild(text, self._parser)
            if failure is None:
                indexed += 1
            else:
                console.print(f"[yellow]Warning[/yellow]: Cannot parse {identity}: {failure}")
        return indexed

    # Queries

    def list_symbols(self, uri: str) -> list[DeclaredSymbol]:
        """Declared functions of one document, in declaration order."""
        file_index = self.workspace.get(normalize_identity(uri))
        if file_index is None:
            return []
        with file_index.lock:
            self._refresh(file_index)
            return list(file_index.symbols)

    def find_definition(self, uri: str, position: Position) -> list[Location]:
        """Locations declaring the identifier under ``position``, across the workspace."""
        file_index = self.workspace.get(normalize_identity(uri))
        if file_index is None:
            return []
        with file_index.lock:
            self._refresh(file_index)
            occurrence = find_occurrence(file_index, position)
        if occurrence is None:
            return []

        for other in self.workspace.snapshot():
            if other is not file_index:
                self._refresh(other)

        locations = resolve(self.workspace, occurrence.name)
        self._debug(f"{occurrence.name!r} resolved to {len(locations)} location(s)")
        return locations

    def diagnostics(self, uri: str) -> list[Diagnostic]:
        """Parse problems of the latest known content of a document."""
        file_index = self.workspace.get(normalize_identity(uri))
        if file_index is None:
            return []
        with file_index.lock:
            self._refresh(file_index)
            failure = file_index.last_error
        if failure is None:
            return []
        start = failure.position or Position(0, 0)
        return [Diagnostic(message=failure.message, range=Range(start, start))]

    # Internals

    def _remember(self, uri: str, text: str | None) -> str:
        identity = normalize_identity(uri)
        if text is not None:
            self.documents.put(identity, text)
        return identity

    def _refresh(self, file_index: FileIndex) -> None:
        walks = file_index.walk_count
        self.workspace.ensure_fresh(file_index.identity, self.documents.get_text)
        if file_index.walk_count != walks:
            self._debug(f"rebuilt {file_index.identity} ({len(file_index.symbols)} symbols)")

    def _debug(self, message: str) -> None:
        if self._verbose:
            console.print(f"[dim]{message}[/dim]")
