"""Main CLI entry point for image-check."""

import typer
from rich.console import Console
from rich.markup import escape

from imagecheck.cli import check

app = typer.Typer(
    name="image-check",
    help="Discover new versions of a container image tag.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console(stderr=True)

# Register subcommands
app.command(name="check")(check.check_cmd)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output"),
) -> None:
    """
    image-check: Discover new versions of a container image tag.

    - [bold]check[/bold]: Report the current digest of a tag, plus the previous one if still present
    """
    from imagecheck.utils.config import get_config
    from imagecheck.utils.logging import configure_logging

    try:
        logging_config = get_config().logging
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = logging_config.level

    configure_logging(level=level, structured=logging_config.structured)


@app.command()
def version() -> None:
    """Show the image-check version."""
    from imagecheck import __version__

    typer.echo(f"image-check version {__version__}")


if __name__ == "__main__":
    app()
