"""Read commands - structure, chunk, line, search.

Terminal front-ends over the same router the MCP tools use. Each command
prints a Rich rendering by default, or the tool's JSON payload with --json.
"""

import json
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from largefile.config.models import LargeFileConfig
from largefile.core.formatting import pluralize
from largefile.files import SearchOptions
from largefile.mcp.errors import MCPError
from largefile.mcp.router import RequestRouter

console = Console()


def _router(ctx: click.Context) -> RequestRouter:
    config: LargeFileConfig = ctx.obj["config"]
    return RequestRouter.from_config(config)


def _echo_json(payload: dict[str, Any] | list[Any]) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@click.command()
@click.argument("path")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def structure_command(ctx: click.Context, path: str, as_json: bool) -> None:
    """Show line statistics, chunking and samples for PATH."""
    try:
        structure = _router(ctx).get_structure(path)
    except MCPError as e:
        raise click.ClickException(e.message) from e

    if as_json:
        _echo_json(structure.to_dict())
        return

    meta = structure.metadata
    stats = structure.line_stats
    table = Table(title=meta.path, show_header=False)
    table.add_column("field", style="cyan")
    table.add_column("value")
    table.add_row("type", meta.file_type.value)
    table.add_row("size", meta.size_formatted)
    table.add_row("lines", f"{stats.total} ({stats.empty} empty)")
    table.add_row("line length", f"max {stats.max_line_length}, avg {stats.avg_line_length}")
    table.add_row(
        "chunking",
        f"{structure.recommended_chunk_size} lines/chunk, "
        f"{pluralize(structure.estimated_chunks, 'chunk')}",
    )
    table.add_row("modified", meta.modified_at.isoformat())
    console.print(table)

    if structure.sample_start:
        console.print("[bold]start[/bold]")
        for line in structure.sample_start:
            console.print(line, markup=False, highlight=False)
    if structure.sample_end:
        console.print("[bold]end[/bold]")
        for line in structure.sample_end:
            console.print(line, markup=False, highlight=False)


@click.command()
@click.argument("path")
@click.argument("index", type=click.IntRange(min=0), default=0)
@click.option("--lines", "lines_per_chunk", type=click.IntRange(min=1), default=None,
              help="Lines per chunk (default: by file type)")
@click.option("-n", "--line-numbers", is_flag=True, help="Prefix lines with their number")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def chunk_command(
    ctx: click.Context,
    path: str,
    index: int,
    lines_per_chunk: int | None,
    line_numbers: bool,
    as_json: bool,
) -> None:
    """Print chunk INDEX (default 0) of PATH."""
    try:
        chunk = _router(ctx).read_chunk(
            path, index, lines_per_chunk=lines_per_chunk, include_line_numbers=line_numbers
        )
    except MCPError as e:
        raise click.ClickException(e.message) from e

    if as_json:
        _echo_json(chunk.to_dict())
        return

    click.echo(chunk.content)
    click.echo(
        f"-- chunk {chunk.chunk_index + 1}/{chunk.total_chunks}, "
        f"lines {chunk.start_line}-{chunk.end_line} of {chunk.total_lines}",
        err=True,
    )


@click.command()
@click.argument("path")
@click.argument("line_number", type=int)
@click.option("-C", "--context", "context_lines", type=click.IntRange(min=0), default=None,
              help="Lines before and after (default from config)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def line_command(
    ctx: click.Context, path: str, line_number: int, context_lines: int | None, as_json: bool
) -> None:
    """Show LINE_NUMBER of PATH with surrounding lines."""
    try:
        chunk = _router(ctx).navigate_to_line(path, line_number, context_lines)
    except MCPError as e:
        raise click.ClickException(e.message) from e

    if as_json:
        _echo_json(chunk.to_dict())
        return
    click.echo(chunk.content)


@click.command()
@click.argument("path")
@click.argument("pattern")
@click.option("-s", "--case-sensitive", is_flag=True, help="Match case exactly")
@click.option("-E", "--regex", is_flag=True, help="Treat PATTERN as a regular expression")
@click.option("-m", "--max-results", type=click.IntRange(min=1), default=None)
@click.option("-B", "--before", type=click.IntRange(min=0), default=2, help="Context lines before")
@click.option("-A", "--after", type=click.IntRange(min=0), default=2, help="Context lines after")
@click.option("--start-line", type=click.IntRange(min=1), default=None)
@click.option("--end-line", type=click.IntRange(min=1), default=None)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def search_command(
    ctx: click.Context,
    path: str,
    pattern: str,
    case_sensitive: bool,
    regex: bool,
    max_results: int | None,
    before: int,
    after: int,
    start_line: int | None,
    end_line: int | None,
    as_json: bool,
) -> None:
    """Search PATH for PATTERN."""
    config: LargeFileConfig = ctx.obj["config"]
    try:
        options = SearchOptions(
            case_sensitive=case_sensitive,
            regex=regex,
            max_results=max_results or config.limits.search_max_results,
            context_before=before,
            context_after=after,
            start_line=start_line,
            end_line=end_line,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    try:
        matches = _router(ctx).search(path, pattern, options)
    except MCPError as e:
        raise click.ClickException(e.message) from e

    if as_json:
        _echo_json([m.to_dict() for m in matches])
        return

    for match in matches:
        first = match.line_number - len(match.context_before)
        for i, text in enumerate(match.context_before):
            click.echo(f"{first + i}-{text}")
        click.echo(f"{match.line_number}:{match.line_content}")
        for i, text in enumerate(match.context_after):
            click.echo(f"{match.line_number + i + 1}-{text}")
        click.echo("--")
    click.echo(pluralize(len(matches), "match", "matches"), err=True)
