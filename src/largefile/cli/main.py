"""largefile CLI - serve the MCP server or inspect files from a terminal."""

from pathlib import Path

import click

from largefile.cli.read import chunk_command, line_command, search_command, structure_command
from largefile.cli.serve import serve_command
from largefile.config.loader import load_config
from largefile.core.errors import ConfigError
from largefile.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="largefile")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (default: ~/.config/largefile/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """largefile - Read, search and navigate files too large to load whole."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(e.message) from e
    if verbose:
        logging_config = config.logging.model_copy(update={"level": "DEBUG"})
        config = config.model_copy(update={"logging": logging_config})

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config
    configure_logging(config=config.logging)


cli.add_command(serve_command, name="serve")
cli.add_command(structure_command, name="structure")
cli.add_command(chunk_command, name="chunk")
cli.add_command(line_command, name="line")
cli.add_command(search_command, name="search")


if __name__ == "__main__":
    cli()
