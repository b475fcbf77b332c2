"""In-memory text store that serves document contents to the index."""

from __future__ import annotations

import threading

from luaindex.exceptions import UnknownDocumentError


class DocumentStore:
    """Latest known text of each document, keyed by identity."""

    def __init__(self) -> None:
        self._texts: dict[str, str] = {}
        self._lock = threading.Lock()

    def __contains__(self, identity: object) -> bool:
        return identity in self._texts

    def __len__(self) -> int:
        return len(self._texts)

    def put(self, identity: str, text: str) -> None:
        with self._lock:
            self._texts[identity] = text

    def get_text(self, identity: str) -> str:
        """Return the stored text.

        Raises:
            UnknownDocumentError: If no text was ever stored for ``identity``.
        """
        try:
            return self._texts[identity]
        except KeyError:
            raise UnknownDocumentError(f"No text stored for {identity}") from None

    def discard(self, identity: str) -> None:
        with self._lock:
            self._texts.pop(identity, None)
