"""Config file commands."""

from pathlib import Path

import typer

from cli.output import error_message, render, success_message
from fieldgen.config import get_config_path, init_config, load_config

app = typer.Typer(help="Manage the fieldgen config file")


@app.command("init")
def config_init(
    path: Path | None = typer.Option(None, "--path", help="Config file to create", dir_okay=False, resolve_path=True),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a config file populated with the default type maps."""
    try:
        written = init_config(path, force=force)
        success_message(f"Config written to {written}")
    except FileExistsError as e:
        error_message(str(e), hint="Use --force to overwrite it")
        raise typer.Exit(1) from e


@app.command("show")
def config_show(
    path: Path | None = typer.Option(None, "--path", help="Config file to read", dir_okay=False, resolve_path=True),
) -> None:
    """Print the effective configuration."""
    try:
        config = load_config(path)
    except ValueError as e:
        error_message(str(e))
        raise typer.Exit(1) from e

    typer.echo(f"# {path or get_config_path()}")
    typer.echo(render(config.model_dump(mode="json", exclude_none=True), "yaml"))
