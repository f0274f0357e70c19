"""Filename resolution for extracted response bodies.

Two strategies are provided:

- Domain layout keeps the URL path, so the site's directory structure is
  recreated under the host directory. Repeated paths overwrite each other.
- Type layout flattens every file into its category directory and builds a
  descriptive name from the last URL segment (or from MIME/URL hints),
  appending ``_N`` suffixes tracked in a per-run collision table.
"""

from __future__ import annotations

import posixpath
from collections.abc import MutableMapping
from urllib.parse import SplitResult, unquote

from har_extract.extraction.classifier import classify_extension

# Candidate filename -> number of times it has been repeated in this run
CollisionTable = MutableMapping[str, int]


class UnsafePathError(ValueError):
    """Raised when a URL path would resolve outside its output directory."""

    def __init__(self, url_path: str) -> None:
        self.url_path = url_path
        super().__init__(f"URL path escapes output directory: {url_path!r}")


# fmt: off
_DEFAULT_NAMES: tuple[tuple[str, str], ...] = (
    ("text/html",               "index.html"),
    ("application/json",        "response.json"),
    ("text/css",                "style.css"),
    ("application/javascript",  "script.js"),
)

_IMAGE_NAMES: tuple[tuple[str, str], ...] = (
    ("png",                     "image.png"),
    ("jpeg",                    "image.jpg"),
    ("gif",                     "image.gif"),
    ("svg",                     "image.svg"),
)
# fmt: on


def default_filename(mime_type: str) -> str:
    """Conventional filename for a URL that has no usable last segment.

    Example:
        >>> default_filename("text/html; charset=utf-8")
        'index.html'
        >>> default_filename("image/webp")
        'image.bin'
        >>> default_filename("application/octet-stream")
        'response.bin'
    """
    lowered = (mime_type or "").lower()
    for needle, name in _DEFAULT_NAMES:
        if needle in lowered:
            return name
    if "image/" in lowered:
        for needle, name in _IMAGE_NAMES:
            if needle in lowered:
                return name
        return "image.bin"
    return "response.bin"


def resolve_domain_path(url: SplitResult, mime_type: str) -> str:
    """Relative file path for an entry in domain layout.

    The percent-decoded URL path, with leading slashes stripped, is used as
    is. An empty path, or one ending in an empty segment, gets the MIME
    default name appended to whatever directory part it has.

    Args:
        url: Parsed request URL
        mime_type: Response MIME type

    Returns:
        POSIX-style relative path (may contain nested segments)

    Raises:
        UnsafePathError: If the path normalizes outside the host directory

    Example:
        >>> from urllib.parse import urlsplit
        >>> resolve_domain_path(urlsplit("https://example.com/"), "text/html")
        'index.html'
        >>> resolve_domain_path(urlsplit("https://example.com/assets/app.js"), "text/javascript")
        'assets/app.js'
        >>> resolve_domain_path(urlsplit("https://example.com/docs/"), "text/html")
        'docs/index.html'
    """
    relative = unquote(url.path).lstrip("/")
    normalized = posixpath.normpath(relative) if relative else "."

    if normalized == ".." or normalized.startswith("../"):
        raise UnsafePathError(url.path)

    if normalized == ".":
        return default_filename(mime_type)

    if posixpath.basename(relative) in ("", "."):
        return posixpath.join(normalized, default_filename(mime_type))

    return normalized


def split_filename(segment: str) -> tuple[str, str]:
    """Split a path segment on its last dot into (base, extension).

    Example:
        >>> split_filename("bundle.min.js")
        ('bundle.min', '.js')
        >>> split_filename("api")
        ('api', '')
    """
    if "." not in segment:
        return segment, ""
    base, _, ext = segment.rpartition(".")
    return base, "." + ext


def synthesize_base_name(url: SplitResult, mime_type: str) -> str:
    """Descriptive base name for a URL without a usable last segment."""
    lowered = (mime_type or "").lower()
    path = unquote(url.path)

    if "application/json" in lowered:
        if "posts" in path or "posts" in url.query:
            return "posts"
        if "api" in path:
            return "api_response"
        return "data"
    if "text/html" in lowered:
        return "page"
    if "image/" in lowered:
        return "image"
    if "text/css" in lowered:
        return "style"
    if "javascript" in lowered:
        return "script"
    return "file"


def _last_segment(url: SplitResult) -> str:
    # A slash smuggled in through percent-encoding must not create a subdirectory
    segments = [unquote(s).replace("/", "_") for s in url.path.split("/")]
    segments = [s for s in segments if s not in ("", ".", "..")]
    return segments[-1] if segments else ""


def claim_filename(base: str, extension: str, collisions: CollisionTable) -> str:
    """Reserve ``base + extension`` in the collision table.

    The first occurrence is returned unchanged and recorded with count 0.
    Each repeat bumps the count to n and returns ``base_n + extension``.

    Args:
        base: Base name without extension
        extension: Extension including the leading dot (may be empty)
        collisions: Per-run collision table, mutated in place

    Returns:
        Filename to use for this occurrence
    """
    candidate = base + extension
    if candidate not in collisions:
        collisions[candidate] = 0
        return candidate

    count = collisions[candidate] + 1
    collisions[candidate] = count
    return f"{base}_{count}{extension}"


def resolve_type_filename(url: SplitResult, mime_type: str, collisions: CollisionTable) -> str:
    """Filename for an entry in type layout.

    Args:
        url: Parsed request URL
        mime_type: Response MIME type
        collisions: Per-run collision table, mutated in place

    Returns:
        Flat filename, unique among names returned for the same table

    Example:
        >>> from urllib.parse import urlsplit
        >>> table = {}
        >>> [resolve_type_filename(urlsplit("https://a.test/"), "application/json", table) for _ in range(3)]
        ['data.json', 'data_1.json', 'data_2.json']
    """
    base, extension = split_filename(_last_segment(url))

    if not base:
        base = synthesize_base_name(url, mime_type)
    if not extension:
        extension = classify_extension(mime_type)

    return claim_filename(base, extension, collisions)
