"""Main CLI entry point for har-extract.

Provides commands for:
- extract: Write HAR response bodies to a timestamped directory
"""

from __future__ import annotations

try:
    import typer
except ImportError as e:
    raise ImportError("CLI dependencies not installed. Install with: pip install har-extract[cli]") from e

from har_extract.cli.extract import extract

app = typer.Typer(
    name="har-extract",
    help="Extract response bodies from HAR files.",
    no_args_is_help=True,
)

app.command()(extract)


def version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: True if --version flag was provided
    """
    if value:
        from har_extract import __version__

        typer.echo(f"har-extract {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    r"""Extract response bodies from HAR files.

    \b
    Examples:
        har-extract extract capture.har
        har-extract extract capture.har --by-type
        har-extract extract capture.har.gz --output-dir ./out
        cat capture.har | har-extract extract -
    """


if __name__ == "__main__":
    app()
