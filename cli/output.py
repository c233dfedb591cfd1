"""Rendering and status messages for the fieldgen CLI."""

import json
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console
from rich.syntax import Syntax

console = Console()


def render(data: Any, output_format: str, pretty: bool = False) -> str:
    """Serialize template data as json or yaml.

    Raises:
        ValueError: If the format is not json or yaml
    """
    match output_format:
        case "json":
            return json.dumps(data, indent=2 if pretty else None, ensure_ascii=False)
        case "yaml":
            return yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
        case _:
            raise ValueError(f"Unknown output format: {output_format}. Must be 'json' or 'yaml'")


def output_data(data: Any, output_path: Path | None = None, output_format: str = "json", pretty: bool = False) -> None:
    """Write rendered data to a file, or highlight it on stdout."""
    rendered = render(data, output_format, pretty=pretty)

    if output_path is None:
        console.print(Syntax(rendered, output_format, theme="monokai", line_numbers=False))
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(rendered, encoding="utf-8")
    success_message(f"Fields written to {output_path}")


def error_message(message: str, hint: str | None = None) -> None:
    typer.secho(f"✗ Error: {message}", fg=typer.colors.RED, err=True)
    if hint:
        typer.secho(f"  Hint: {hint}", fg=typer.colors.YELLOW, err=True)


def success_message(message: str) -> None:
    typer.secho(f"✓ {message}", fg=typer.colors.GREEN)
