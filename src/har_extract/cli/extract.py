"""Extract command for har-extract CLI."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

if TYPE_CHECKING:
    from har_extract.extraction import ExtractionResult
    from har_extract.har import HarDocument

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def extract(
    input_file: Annotated[
        Path,
        typer.Argument(help="HAR file to extract (.har or .har.gz, '-' for stdin)"),
    ],
    by_type: Annotated[
        bool,
        typer.Option("--by-type", "-t", help="Group files by content type instead of by domain"),
    ] = False,
    output_dir: Annotated[
        Path,
        typer.Option("--output-dir", "-o", help="Directory to create the hargo-extract-* folder in"),
    ] = Path("."),
    max_size: Annotated[
        int | None,
        typer.Option("--max-size", help="Max file size in MB (default: 100, 0=unlimited)"),
    ] = 100,
    log_level: Annotated[
        str,
        typer.Option("--log-level", "-l", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
    ] = "WARNING",
) -> None:
    """Extract response bodies from a HAR file.

    Creates a timestamped hargo-extract-YYYYMMDDHHMMSS directory and writes
    each response body into it, plus an extraction_manifest.csv listing
    every extracted file.

    Args:
        input_file: HAR file to extract ('-' reads from stdin)
        by_type: Group into images/, json/, html/, ... instead of per domain
        output_dir: Parent directory for the timestamped output folder
        max_size: Maximum file size in MB (default: 100, 0=unlimited)
        log_level: Logging level for diagnostics on stderr

    Example:
        har-extract extract capture.har
        har-extract extract capture.har --by-type
        har-extract extract capture.har.gz -o ./extracted --max-size 0
    """
    from har_extract.extraction import ExtractOptions, OutputDirectoryError, extract_har
    from har_extract.har import HarSizeError, HarValidationError

    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.WARNING), format=_LOG_FORMAT)

    # Validate max_size (must be >= 0)
    if max_size is not None and max_size < 0:
        typer.echo(f"Error: max-size must be >= 0, got {max_size}", err=True)
        raise typer.Exit(1)

    # Convert max_size from MB to bytes (0 = unlimited)
    max_size_bytes: int | None = None
    if max_size is not None and max_size > 0:
        max_size_bytes = max_size * 1024 * 1024

    try:
        document = _load_document(input_file, max_size_bytes)
        result = extract_har(document, ExtractOptions(by_type=by_type, base_dir=output_dir))
    except HarSizeError as e:
        size_mb = e.size / 1024 / 1024
        limit_mb = e.max_size / 1024 / 1024
        typer.echo(f"Error: File too large ({size_mb:.1f} MB > {limit_mb:.1f} MB limit)", err=True)
        typer.echo("  Use --max-size to increase limit or --max-size 0 to disable", err=True)
        raise typer.Exit(1) from None
    except HarValidationError as e:
        typer.echo(f"Error: Invalid HAR file: {e}", err=True)
        raise typer.Exit(1) from None
    except FileNotFoundError as e:
        typer.echo(f"Error: File not found: {e.filename}", err=True)
        raise typer.Exit(1) from None
    except json.JSONDecodeError as e:
        typer.echo(f"Error: Invalid JSON in HAR file: {e.msg} at line {e.lineno}", err=True)
        raise typer.Exit(1) from None
    except OutputDirectoryError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    except OSError as e:
        typer.echo(f"Error: I/O error: {e}", err=True)
        raise typer.Exit(1) from None

    _display_results(result)


def _load_document(input_file: Path, max_size: int | None) -> HarDocument:
    """Load the HAR document from a file or stdin."""
    from har_extract.har import load_har, read_har

    if str(input_file) == "-":
        return read_har(sys.stdin)
    return load_har(input_file, max_size=max_size)


def _printable(text: str) -> str:
    """Escape lone surrogates so the text can be written to any UTF-8 stream."""
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


def _display_results(result: ExtractionResult) -> None:
    """Display extraction results."""
    typer.echo(f"Extracting HAR content to: {result.output_dir}")
    if result.by_type:
        typer.echo("Organizing files by content type...")
    else:
        typer.echo("Organizing files by domain...")

    for outcome in result.outcomes:
        entry = outcome.manifest_entry
        if entry is not None:
            url = _printable(entry.original_url)
            path = _printable(entry.extracted_path)
            typer.echo(f"Extracted {url} -> {path} [{entry.size} bytes]")

    failed = [o for o in result.skipped if o.stage != "empty"]
    for outcome in failed:
        reason = _printable(outcome.reason or "")
        typer.echo(f"  Skipped {_printable(outcome.url)} ({outcome.stage}): {reason}", err=True)

    typer.echo()
    typer.echo(f"  Extracted: {result.extracted_count} files")
    typer.echo(f"  Skipped:   {len(result.skipped)} entries ({len(failed)} failed)")

    if result.manifest_path is not None:
        typer.echo(f"\nExtraction manifest written to: {result.manifest_path}")
    else:
        typer.echo(f"Warning: Failed to write manifest: {result.manifest_error}", err=True)
