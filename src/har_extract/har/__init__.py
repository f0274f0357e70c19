"""HAR decoding for the extraction engine.

Exports:
    - load_har: Load a .har or .har.gz file from disk
    - read_har: Decode a HAR document from an open text stream
    - parse_har: Convert parsed HAR JSON into typed records
    - validate_har_structure: Check the minimal HAR 1.2 structure
"""

from __future__ import annotations

from har_extract.har.loader import (
    DEFAULT_MAX_HAR_SIZE,
    HarDocument,
    HarEntry,
    HarSizeError,
    HarValidationError,
    load_har,
    parse_har,
    read_har,
    validate_har_structure,
)

__all__ = [
    "load_har",
    "read_har",
    "parse_har",
    "validate_har_structure",
    "HarDocument",
    "HarEntry",
    # Size limits and errors
    "DEFAULT_MAX_HAR_SIZE",
    "HarSizeError",
    "HarValidationError",
]
