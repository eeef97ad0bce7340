"""
MEP CLI - Main Entry Point

Typer CLI for the MEP calculation engine.

Usage:
    mep version
    mep config
    mep eng list
    mep eng hvac|electrical|plumbing|fire [options]
    mep eng calc DISCIPLINE TYPE --param key=value
"""

from typing import Optional

import typer

import mep
from mep.core.output import OutputFormat

app = typer.Typer(
    name="mep",
    help="Mechanical, electrical, plumbing and fire protection calculations.",
    no_args_is_help=True,
)


@app.command()
def version():
    """Show MEP engine version."""
    typer.echo(f"mep {mep.__version__}")


@app.command()
def config(
    fmt: Optional[OutputFormat] = typer.Option(None, "--format", "-f", help="Output format: human, json, markdown"),
):
    """Show the resolved configuration."""
    from mep.core.config import CONFIG_PATH, get_config
    from mep.core import output

    try:
        settings = get_config()
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(output.format_result(settings, output.resolve_format(fmt), title=str(CONFIG_PATH)))


def _register_modules():
    """Register module CLI sub-apps."""
    from mep.engineering.cli import app as eng_app

    app.add_typer(eng_app, name="eng", help="Engineering calculations")


_register_modules()


def main():
    """Entry point for the mep CLI."""
    app()


if __name__ == "__main__":
    main()
