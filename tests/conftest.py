"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from luaindex.config import IndexConfig
from luaindex.indexer.parser import LuaParser
from luaindex.service import LuaIndexService


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's global config and LUAINDEX_* variables out of tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setattr("luaindex.config._GLOBAL_CONFIG_PATH", home / "config.toml")
    for name in (
        "LUAINDEX_LOG_LEVEL",
        "LUAINDEX_LUA_VERSION",
        "LUAINDEX_EVICT_ON_CLOSE",
        "LUAINDEX_MAX_FILE_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def lua_parser() -> LuaParser:
    return LuaParser()


@pytest.fixture
def service(lua_parser: LuaParser) -> LuaIndexService:
    return LuaIndexService(IndexConfig(), parser=lua_parser)


@pytest.fixture
def lua_project(tmp_path: Path) -> Path:
    """A small workspace with a module, a consumer, and a broken file."""
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "util.lua").write_text(
        "local M = {}\n\nfunction M.clamp(x, lo, hi)\n  return x\nend\n\n"
        "function shared()\nend\n\nreturn M\n",
        encoding="utf-8",
    )
    (tmp_path / "main.lua").write_text(
        "function shared()\nend\n\nfunction start()\n  shared()\n  M.clamp(1, 0, 2)\nend\n",
        encoding="utf-8",
    )
    (tmp_path / "broken.lua").write_text("function oops(\n", encoding="utf-8")
    return tmp_path
