"""Extract HTTP response bodies from HAR files.

This library provides tools for:
- Decoding HAR (HTTP Archive) captures into typed entries
- Writing every response body back to disk, grouped by domain or content type
- Recording an extraction manifest (CSV audit trail) for each run

Core extraction has ZERO dependencies (only stdlib).
Optional features require: typer (cli).

Example usage:
    from har_extract import ExtractOptions, extract_har_file

    # Group files into images/, json/, html/, ...
    result = extract_har_file("capture.har", ExtractOptions(by_type=True))
    print(result.output_dir, result.extracted_count)
"""

from __future__ import annotations

__version__ = "0.1.0"

# Re-export public API for convenience
from har_extract.extraction import (
    ExtractionResult,
    ExtractOptions,
    classify_category,
    classify_extension,
    extract_har,
    extract_har_file,
)
from har_extract.har import load_har

__all__ = [
    "__version__",
    "ExtractOptions",
    "ExtractionResult",
    "classify_category",
    "classify_extension",
    "extract_har",
    "extract_har_file",
    "load_har",
]
