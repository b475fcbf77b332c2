"""Configuration management for luaindex.

Settings are loaded from three sources in order of priority:
1. Environment variables (highest priority)
2. Project-level config: .luaindex/config.toml
3. Global config: ~/.config/luaindex/config.toml (lowest priority)
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rich.console import Console

from luaindex.exceptions import ConfigError

console = Console(stderr=True)

_GLOBAL_CONFIG_DIR = Path.home() / ".config" / "luaindex"
_GLOBAL_CONFIG_PATH = _GLOBAL_CONFIG_DIR / "config.toml"

SUPPORTED_LUA_VERSIONS: frozenset[str] = frozenset({"5.1", "5.2", "5.3", "5.4"})
_LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR"})


@dataclass
class IndexConfig:
    """luaindex configuration.

    Attributes:
        project_dir: Workspace root scanned at startup.
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR).
        lua_version: Lua dialect accepted by the parser.
        extensions: File suffixes treated as Lua sources.
        max_file_size: Files larger than this (bytes) are skipped by the scanner.
        evict_on_close: If True, closing a document drops its index entry.
    """

    project_dir: Path = field(default_factory=Path.cwd)
    log_level: str = "INFO"
    lua_version: str = "5.4"
    extensions: tuple[str, ...] = (".lua",)
    max_file_size: int = 1_048_576
    evict_on_close: bool = False


def load_config(project_dir: Path) -> IndexConfig:
    """Load configuration from env vars, project config, and global config.

    Priority: env vars > .luaindex/config.toml > ~/.config/luaindex/config.toml

    Args:
        project_dir: Root directory of the workspace.

    Returns:
        A fully resolved IndexConfig instance.

    Raises:
        ConfigError: If a setting holds an unsupported value.
    """
    config = IndexConfig(project_dir=project_dir)

    # Layer 1: Global config (lowest priority)
    _apply_toml(config, _load_toml(_GLOBAL_CONFIG_PATH))

    # Layer 2: Project config
    _apply_toml(config, _load_toml(project_dir / ".luaindex" / "config.toml"))

    # Layer 3: Environment variables (highest priority)
    _apply_env(config)

    validate_config(config)
    return config


def validate_config(config: IndexConfig) -> None:
    """Reject settings the indexer cannot honor.

    Raises:
        ConfigError: If the Lua version or log level is unknown.
    """
    if config.lua_version not in SUPPORTED_LUA_VERSIONS:
        supported = ", ".join(sorted(SUPPORTED_LUA_VERSIONS))
        raise ConfigError(
            f"Unsupported Lua version '{config.lua_version}'. Expected one of: {supported}."
        )
    if config.log_level not in _LOG_LEVELS:
        raise ConfigError(f"Unknown log level '{config.log_level}'.")
    if config.max_file_size <= 0:
        raise ConfigError("max_file_size must be positive.")


def _load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file, returning an empty dict if missing or invalid."""
    if not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError) as exc:
        console.print(f"[yellow]Warning:[/yellow] Could not parse {path}: {exc}")
        return {}


def _apply_toml(config: IndexConfig, settings: dict[str, Any]) -> None:
    """Merge TOML settings into an IndexConfig (only keys that are present)."""
    if "log_level" in settings:
        config.log_level = str(settings["log_level"]).upper()
    if "lua_version" in settings:
        config.lua_version = str(settings["lua_version"])
    if "extensions" in settings:
        config.extensions = tuple(str(ext).lower() for ext in settings["extensions"])
    if "max_file_size" in settings:
        config.max_file_size = int(settings["max_file_size"])
    if "evict_on_close" in settings:
        config.evict_on_close = bool(settings["evict_on_close"])


def _apply_env(config: IndexConfig) -> None:
    """Override config with environment variables where set."""
    if log_level := os.environ.get("LUAINDEX_LOG_LEVEL"):
        config.log_level = log_level.upper()
    if lua_version := os.environ.get("LUAINDEX_LUA_VERSION"):
        config.lua_version = lua_version
    if evict := os.environ.get("LUAINDEX_EVICT_ON_CLOSE"):
        config.evict_on_close = evict.lower() in ("true", "1", "yes")
    if max_size := os.environ.get("LUAINDEX_MAX_FILE_SIZE"):
        try:
            config.max_file_size = int(max_size)
        except ValueError as exc:
            raise ConfigError(f"LUAINDEX_MAX_FILE_SIZE is not an integer: {max_size}") from exc
