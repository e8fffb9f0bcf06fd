"""CLI command for checking a tag for new versions."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

console = Console(stderr=True)


def check_cmd(
    request: Optional[Path] = typer.Option(
        None,
        "--request",
        "-r",
        help="Read the check request from a file instead of stdin",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path",
    ),
) -> None:
    """
    Check a tag for new versions.

    Reads a JSON request with a [bold]source[/bold] and an optional
    previously known [bold]version[/bold], and prints the JSON list of
    versions to stdout.

    Example:
        echo '{"source": {"repository": "nginx"}}' | image-check check
    """
    from imagecheck.core.check import VersionChecker
    from imagecheck.core.payload import decode_request, encode_response
    from imagecheck.utils.config import load_config
    from imagecheck.utils.errors import ImageCheckError
    from imagecheck.utils.logging import set_level

    try:
        loaded = load_config(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if request is not None:
        payload = request.read_text()
    else:
        payload = typer.get_text_stream("stdin").read()

    try:
        check_request = decode_request(payload)
        if check_request.source.debug:
            set_level("DEBUG")

        checker = VersionChecker(config=loaded)
        output = encode_response(checker.check(check_request))
    except ImageCheckError as e:
        console.print(f"[red]Error:[/red] {escape(str(e.to_error_report()))}", highlight=False)
        raise typer.Exit(1)

    typer.echo(output)
