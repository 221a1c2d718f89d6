"""largefile serve command - run the MCP server."""

import click

from largefile.config.models import LargeFileConfig
from largefile.mcp.server import run_server


@click.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default=None,
    help="Override the configured transport",
)
@click.option("--port", type=int, default=None, help="Port for http transport")
@click.pass_context
def serve_command(ctx: click.Context, transport: str | None, port: int | None) -> None:
    """Run the MCP server (stdio by default)."""
    config: LargeFileConfig = ctx.obj["config"]
    updates: dict[str, object] = {}
    if transport is not None:
        updates["transport"] = transport
    if port is not None:
        updates["port"] = port
    if updates:
        config = config.model_copy(update={"server": config.server.model_copy(update=updates)})
    run_server(config)
