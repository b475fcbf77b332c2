"""Workspace-wide collection of file indexes keyed by document identity."""

from __future__ import annotations

import re
import threading
from collections.abc import Callable

from rich.console import Console

from luaindex.exceptions import UnknownDocumentError
from luaindex.indexer.file_index import FileIndex, Parser

console = Console(stderr=True)

ContentProvider = Callable[[str], str]

_DRIVE_RE = re.compile(r"^(file:///)?([A-Za-z])(:|%3A|%3a)")


def normalize_identity(uri: str) -> str:
    """Map a document URI or path to its index key.

    Backslashes become forward slashes and a Windows drive letter is
    lower-cased, so ``file:///C:\\x.lua`` and ``file:///c:/x.lua`` collide.
    """
    normalized = uri.replace("\\", "/")
    return _DRIVE_RE.sub(_lower_drive, normalized, count=1)


def _lower_drive(match: re.Match[str]) -> str:
    return f"{match.group(1) or ''}{match.group(2).lower()}{match.group(3).upper()}"


class WorkspaceIndex:
    """All file indexes known to the process, in first-seen order.

    Entries live for the workspace lifetime unless ``evict`` is called.
    """

    def __init__(self, parser: Parser) -> None:
        self._parser = parser
        self._files: dict[str, FileIndex] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, identity: object) -> bool:
        return identity in self._files

    @property
    def parser(self) -> Parser:
        return self._parser

    def get(self, identity: str) -> FileIndex | None:
        return self._files.get(identity)

    def get_or_create(self, identity: str) -> FileIndex:
        """Return the entry for ``identity``, inserting a dirty one if absent."""
        with self._lock:
            file_index = self._files.get(identity)
            if file_index is None:
                file_index = FileIndex(identity)
                self._files[identity] = file_index
            return file_index

    def mark_dirty(self, identity: str) -> None:
        """Flag ``identity`` as stale. Unknown identities are ignored."""
        file_index = self._files.get(identity)
        if file_index is not None:
            file_index.mark_dirty()

    def evict(self, identity: str) -> bool:
        """Drop the entry for ``identity``; return True if one existed."""
        with self._lock:
            return self._files.pop(identity, None) is not None

    def snapshot(self) -> list[FileIndex]:
        """Copy of all entries in insertion order, safe to iterate during inserts."""
        with self._lock:
            return list(self._files.values())

    def ensure_fresh(self, identity: str, content_provider: ContentProvider) -> FileIndex | None:
        """Rebuild ``identity`` if it is dirty and return its index.

        Returns None for identities the workspace has never seen. A parse
        failure or missing content leaves the entry dirty with its previous
        artifacts intact.
        """
        file_index = self._files.get(identity)
        if file_index is None:
            return None

        with file_index.lock:
            if not file_index.dirty:
                return file_index
            try:
                content = content_provider(identity)
            except UnknownDocumentError as exc:
                console.print(f"[yellow]Warning[/yellow]: No content for {identity}: {exc}")
                return file_index
            failure = file_index.rebuild(content, self._parser)
            if failure is not None:
                console.print(f"[yellow]Warning[/yellow]: Cannot parse {identity}: {failure}")
            return file_index

