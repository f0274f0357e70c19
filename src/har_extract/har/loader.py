"""HAR document loading utilities.

This module decodes HAR (HTTP Archive) files into typed, read-only records
that the extraction engine consumes. Only the fields needed to materialize
response bodies are kept.
"""

from __future__ import annotations

import gzip
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any

_LOGGER = logging.getLogger(__name__)

# Default maximum HAR file size (100 MB)
DEFAULT_MAX_HAR_SIZE = 100 * 1024 * 1024


class HarSizeError(ValueError):
    """Raised when HAR file exceeds size limit."""

    def __init__(self, size: int, max_size: int) -> None:
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"HAR file size ({size:,} bytes) exceeds limit ({max_size:,} bytes). "
            f"Use max_size parameter to increase or set to None to disable."
        )


class HarValidationError(ValueError):
    """Raised when HAR structure is invalid."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        full_message = f"Invalid HAR structure: {message}"
        if path:
            full_message += f" (at {path})"
        super().__init__(full_message)


@dataclass(frozen=True)
class HarEntry:
    """One logged request/response exchange.

    Attributes:
        index: Position of the entry in ``log.entries``
        method: Request method (GET, POST, ...)
        url: Request URL as recorded
        status: Response status code
        mime_type: Response content MIME type
        text: Response content payload (plain text or base64)
        encoding: Content encoding tag ("" or "base64")
    """

    index: int
    method: str = ""
    url: str = ""
    status: int = 0
    mime_type: str = ""
    text: str = ""
    encoding: str = ""


@dataclass(frozen=True)
class HarDocument:
    """A decoded HAR document: the ordered sequence of entries."""

    entries: tuple[HarEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)


def validate_har_structure(har_data: Any, *, strict: bool = False) -> list[str]:
    """Validate HAR structure against HAR 1.2 spec.

    Args:
        har_data: Parsed HAR data
        strict: If True, also check each entry for request/response fields

    Returns:
        List of validation warnings (empty if valid)

    Raises:
        HarValidationError: If structure is fundamentally invalid (missing log or entries)

    Example:
        >>> validate_har_structure({"log": {"version": "1.2", "creator": {}, "entries": []}})
        []
    """
    if not isinstance(har_data, dict):
        raise HarValidationError("HAR root must be an object", "root")

    warnings: list[str] = []

    if "log" not in har_data:
        raise HarValidationError("Missing required 'log' key", "root")

    log = har_data["log"]
    if not isinstance(log, dict):
        raise HarValidationError("'log' must be an object", "log")

    if "entries" not in log:
        raise HarValidationError("Missing required 'entries' key", "log")

    entries = log["entries"]
    if not isinstance(entries, list):
        raise HarValidationError("'entries' must be an array", "log.entries")

    # Recommended fields (warnings only)
    if "version" not in log:
        warnings.append("Missing log.version (recommended)")
    if "creator" not in log:
        warnings.append("Missing log.creator (recommended)")

    if strict:
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict):
                warnings.append(f"Entry {i} is not an object")
                continue

            if "request" not in entry:
                warnings.append(f"Entry {i} missing 'request'")
            elif isinstance(entry["request"], dict):
                req = entry["request"]
                if "method" not in req:
                    warnings.append(f"Entry {i} request missing 'method'")
                if "url" not in req:
                    warnings.append(f"Entry {i} request missing 'url'")

            if "response" not in entry:
                warnings.append(f"Entry {i} missing 'response'")
            elif isinstance(entry["response"], dict):
                resp = entry["response"]
                if "status" not in resp:
                    warnings.append(f"Entry {i} response missing 'status'")
                if "content" not in resp:
                    warnings.append(f"Entry {i} response missing 'content'")

    return warnings


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def _parse_entry(index: int, raw: Any) -> HarEntry:
    if not isinstance(raw, dict):
        raise HarValidationError("Entry must be an object", f"log.entries[{index}]")

    request = _as_dict(raw.get("request"))
    response = _as_dict(raw.get("response"))
    content = _as_dict(response.get("content"))

    return HarEntry(
        index=index,
        method=_as_str(request.get("method")),
        url=_as_str(request.get("url")),
        status=_as_int(response.get("status")),
        mime_type=_as_str(content.get("mimeType")),
        text=_as_str(content.get("text")),
        encoding=_as_str(content.get("encoding")),
    )


def parse_har(har_data: Any) -> HarDocument:
    """Convert parsed HAR JSON into a HarDocument.

    Args:
        har_data: Parsed HAR JSON data

    Returns:
        HarDocument with one HarEntry per ``log.entries`` item, in order

    Raises:
        HarValidationError: If the structure is invalid or an entry is not an object
    """
    for warning in validate_har_structure(har_data):
        _LOGGER.warning("HAR validation: %s", warning)

    entries = har_data["log"]["entries"]
    return HarDocument(entries=tuple(_parse_entry(i, raw) for i, raw in enumerate(entries)))


def read_har(stream: IO[str]) -> HarDocument:
    """Decode a HAR document from an open text stream.

    Raises:
        json.JSONDecodeError: If the stream is not valid JSON
        HarValidationError: If HAR structure is invalid
    """
    return parse_har(json.load(stream))


def load_har(
    path: str | Path,
    *,
    max_size: int | None = DEFAULT_MAX_HAR_SIZE,
) -> HarDocument:
    """Load a HAR file from disk.

    Args:
        path: Path to HAR file (.har or .har.gz)
        max_size: Maximum file size in bytes (default: 100MB). Set to None to disable.

    Returns:
        Decoded HarDocument

    Raises:
        HarSizeError: If file exceeds max_size limit
        HarValidationError: If HAR structure is invalid
        FileNotFoundError: If input file doesn't exist
        json.JSONDecodeError: If file is not valid JSON

    Example:
        >>> # document = load_har("capture.har")
        >>> # document = load_har("capture.har.gz", max_size=None)
    """
    path = Path(path)

    # Check file size before reading
    if max_size is not None:
        file_size = path.stat().st_size
        if file_size > max_size:
            raise HarSizeError(file_size, max_size)

    if path.suffix == ".gz":
        with gzip.open(path, "rt", encoding="utf-8") as f:
            document = read_har(f)
    else:
        with open(path, encoding="utf-8") as f:
            document = read_har(f)

    _LOGGER.debug("Loaded %d entries from %s", len(document), path)
    return document
