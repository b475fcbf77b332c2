"""Typer CLI entry point for luaindex.

Each command scans a workspace into a fresh index and answers one query,
which is the same path an editor integration takes through the service.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from luaindex import __version__
from luaindex.config import IndexConfig, load_config
from luaindex.exceptions import LuaIndexError
from luaindex.indexer.ranges import Position, Range
from luaindex.indexer.scanner import LuaFileScanner
from luaindex.indexer.workspace import normalize_identity
from luaindex.service import LuaIndexService

app = typer.Typer(
    name="luaindex",
    help="luaindex: symbols and go-to-definition for Lua workspaces.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()


def _error_exit(message: str, hint: str | None = None) -> None:
    """Print a styled error and exit."""
    console.print(f"[bold red]Error:[/bold red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
    raise typer.Exit(code=1)


def _load(root: Path, verbose: bool) -> IndexConfig:
    config = load_config(root)
    if verbose:
        config.log_level = "DEBUG"
    return config


def _format_range(rng: Range) -> str:
    return f"{rng.start.line}:{rng.start.column}-{rng.end.line}:{rng.end.column}"


def _read_source(file: Path) -> str:
    if not file.is_file():
        _error_exit(f"File not found: {file}")
    try:
        return file.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        _error_exit(f"Cannot read {file}: {exc}")
    return ""


@app.command()
def version() -> None:
    """Show the installed version."""
    console.print(f"luaindex {__version__}")


@app.command()
def scan(
    root: Annotated[Path, typer.Argument(help="Workspace directory")] = Path("."),
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose output")] = False,
) -> None:
    """Index every Lua file under ROOT and summarize the result."""
    try:
        root = root.resolve()
        config = _load(root, verbose)
        scanner = LuaFileScanner(root, config)
        service = LuaIndexService(config)
        documents = list(scanner.read_documents())
    except LuaIndexError as exc:
        _error_exit(str(exc))
        return

    if not documents:
        console.print("[yellow]No Lua files found.[/yellow]")
        raise typer.Exit(code=0)

    indexed = service.seed(documents)

    table = Table(title="Lua Index", border_style="cyan", header_style="bold cyan")
    table.add_column("File", style="bold")
    table.add_column("Functions", justify="right")
    table.add_column("Status")

    total_symbols = 0
    for uri, _ in documents:
        symbols = service.list_symbols(uri)
        total_symbols += len(symbols)
        problems = service.diagnostics(uri)
        status = "[green]ok[/green]"
        if problems:
            status = f"[red]{problems[0].message} ({problems[0].range.start.line})[/red]"
        rel = uri.removeprefix(root.as_uri() + "/")
        table.add_row(rel, str(len(symbols)), status)

    console.print()
    console.print(table)
    console.print(
        f"\n[green]Indexed[/green] [bold]{total_symbols}[/bold] functions across "
        f"[bold]{len(documents)}[/bold] files "
        f"([bold]{len(documents) - indexed}[/bold] with parse errors)"
    )


@app.command()
def symbols(
    file: Annotated[Path, typer.Argument(help="Lua source file")],
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose output")] = False,
) -> None:
    """List the functions declared in FILE."""
    file = file.resolve()
    try:
        config = _load(file.parent, verbose)
        service = LuaIndexService(config)
    except LuaIndexError as exc:
        _error_exit(str(exc))
        return

    uri = file.as_uri()
    service.seed([(uri, _read_source(file))])

    for problem in service.diagnostics(uri):
        console.print(
            f"[yellow]Warning[/yellow]: {problem.message} "
            f"at line {problem.range.start.line}, column {problem.range.start.column}"
        )

    declared = service.list_symbols(uri)
    if not declared:
        console.print("[dim]No functions declared.[/dim]")
        return

    table = Table(title=file.name, border_style="cyan", header_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("Kind")
    table.add_column("Range")
    for symbol in declared:
        table.add_row(symbol.name, symbol.kind.value, _format_range(symbol.range))
    console.print(table)


@app.command()
def definition(
    file: Annotated[Path, typer.Argument(help="Lua source file")],
    line: Annotated[int, typer.Argument(help="Zero-based line", min=0)],
    column: Annotated[int, typer.Argument(help="Zero-based column", min=0)],
    root: Annotated[
        Optional[Path], typer.Option("--root", "-r", help="Workspace directory (default: cwd)")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Verbose output")] = False,
) -> None:
    """Find where the name at LINE:COLUMN of FILE is defined."""
    file = file.resolve()
    workspace_root = (root or Path.cwd()).resolve()
    try:
        config = _load(workspace_root, verbose)
        service = LuaIndexService(config)
        service.seed(LuaFileScanner(workspace_root, config).read_documents())
    except LuaIndexError as exc:
        _error_exit(str(exc))
        return

    uri = file.as_uri()
    if normalize_identity(uri) not in service.workspace:
        service.seed([(uri, _read_source(file))])

    locations = service.find_definition(uri, Position(line, column))
    if not locations:
        console.print("[yellow]No definition found.[/yellow]")
        return

    for location in locations:
        console.print(f"{location.uri}:{_format_range(location.range)}", soft_wrap=True)
