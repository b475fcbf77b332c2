"""Lua source discovery that walks a workspace tree respecting .gitignore."""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from luaindex.config import IndexConfig
from luaindex.exceptions import IndexerError

console = Console(stderr=True)

_ALWAYS_SKIP: frozenset[str] = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".luaindex",
        ".luarocks",
        "lua_modules",
        "node_modules",
        "__pycache__",
        "dist",
        "build",
    }
)


@dataclass(frozen=True, slots=True)
class FileInfo:
    """Metadata for a single discovered Lua file.

    Attributes:
        path: File path relative to the workspace root.
        size: File size in bytes.
    """

    path: Path
    size: int


class LuaFileScanner:
    """Discovers Lua files in a workspace, respecting .gitignore.

    Usage::

        scanner = LuaFileScanner(Path("/my/game"))
        for uri, text in scanner.read_documents():
            ...
    """

    def __init__(self, project_dir: Path, config: IndexConfig | None = None) -> None:
        """Initialize the scanner.

        Args:
            project_dir: Path to the workspace root.
            config: Supplies extensions and the size cap. Defaults apply when None.

        Raises:
            IndexerError: If project_dir does not exist.
        """
        self._project_dir = project_dir.resolve()
        if not self._project_dir.is_dir():
            raise IndexerError(f"Project directory does not exist: {self._project_dir}")
        config = config or IndexConfig(project_dir=self._project_dir)
        self._extensions = frozenset(ext.lower() for ext in config.extensions)
        self._max_file_size = config.max_file_size
        self._gitignore_patterns = self._load_gitignore()

    @property
    def project_dir(self) -> Path:
        return self._project_dir

    def scan(self) -> list[FileInfo]:
        """Walk the workspace tree and return discovered Lua files.

        Returns:
            A list of FileInfo instances sorted by path.
        """
        results: list[FileInfo] = []
        try:
            for dirpath_str, dirnames, filenames in os.walk(self._project_dir, topdown=True):
                dirpath = Path(dirpath_str)

                dirnames[:] = [
                    d
                    for d in dirnames
                    if not self._should_skip_dir(d) and not self._is_ignored(dirpath / d)
                ]

                for fname in filenames:
                    full = dirpath / fname
                    if full.suffix.lower() not in self._extensions:
                        continue

                    try:
                        size = full.stat().st_size
                    except OSError:
                        continue

                    if size > self._max_file_size:
                        continue

                    if self._is_ignored(full):
                        continue

                    results.append(FileInfo(path=full.relative_to(self._project_dir), size=size))
        except OSError as exc:
            raise IndexerError(f"Failed to scan project directory: {exc}") from exc

        results.sort(key=lambda fi: fi.path)
        console.print(f"[green]Scanner[/green] found [bold]{len(results)}[/bold] Lua files")
        return results

    def read_documents(self) -> Iterator[tuple[str, str]]:
        """Yield ``(file URI, text)`` for every discovered file, in scan order.

        Files that cannot be read are skipped with a warning.
        """
        for fi in self.scan():
            full = self._project_dir / fi.path
            try:
                text = full.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                console.print(f"[yellow]Warning[/yellow]: Skipping {fi.path}: {exc}")
                continue
            yield full.as_uri(), text

    def _load_gitignore(self) -> list[str]:
        """Load .gitignore patterns, returning empty list if missing."""
        gitignore_path = self._project_dir / ".gitignore"
        if not gitignore_path.is_file():
            return []

        lines: list[str] = []
        text = gitignore_path.read_text(encoding="utf-8", errors="replace")
        for raw_line in text.splitlines():
            line = raw_line.strip()
            if line and not line.startswith("#"):
                lines.append(line)
        return lines

    def _is_ignored(self, path: Path) -> bool:
        """Check whether path matches any .gitignore pattern."""
        if not self._gitignore_patterns:
            return False

        try:
            rel = str(path.relative_to(self._project_dir)).replace("\\", "/")
        except ValueError:
            return False

        basename = rel.rsplit("/", 1)[-1]
        ignored = False
        for pattern in self._gitignore_patterns:
            negated = pattern.startswith("!")
            pat = pattern.lstrip("!").rstrip("/")

            if "/" in pat:
                matched = fnmatch.fnmatch(rel, pat.lstrip("/"))
            else:
                matched = fnmatch.fnmatch(basename, pat)
            if matched:
                ignored = not negated
        return ignored

    @staticmethod
    def _should_skip_dir(dirname: str) -> bool:
        """Return True if dirname should always be skipped."""
        return dirname.startswith(".") or dirname in _ALWAYS_SKIP
