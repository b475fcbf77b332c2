"""Workspace-wide resolution of a name to its declaration sites."""

from __future__ import annotations

from dataclasses import dataclass

from luaindex.indexer.ranges import Range
from luaindex.indexer.workspace import WorkspaceIndex


@dataclass(frozen=True, slots=True)
class Location:
    """A range inside a specific document."""

    uri: str
    range: Range


def resolve(workspace: WorkspaceIndex, name: str) -> list[Location]:
    """Collect every file's declaration of ``name``, in file insertion order.

    No scoping or ranking is applied: each file contributes at most one
    location (its last declaration of ``name``).
    """
    locations: list[Location] = []
    for file_index in workspace.snapshot():
        with file_index.lock:
            symbol = file_index.symbols_by_name.get(name)
        if symbol is not None:
            locations.append(Location(uri=symbol.container_uri, range=symbol.range))
    return locations
