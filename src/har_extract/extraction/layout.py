"""Output layout strategies.

Decides where each extracted body lands under the run's output root:

- by type:   <root>/<category>/<filename>
- by domain: <root>/<hostname>/<url path>

Directories are created on demand; existing ones are reused.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import SplitResult

from har_extract.extraction.classifier import classify_category
from har_extract.extraction.naming import (
    CollisionTable,
    UnsafePathError,
    resolve_domain_path,
    resolve_type_filename,
)

UNKNOWN_HOST = "unknown"


def host_directory_name(url: SplitResult) -> str:
    """Directory name for the URL's host ("unknown" if the URL has none).

    Raises:
        UnsafePathError: If the host would name a relative directory
    """
    host = url.hostname or UNKNOWN_HOST
    if host in (".", ".."):
        raise UnsafePathError(url.netloc)
    return host


def type_layout_path(root: Path, url: SplitResult, mime_type: str, collisions: CollisionTable) -> Path:
    """Target path in type layout, creating the category directory.

    The collision table is only consulted once the directory exists, so an
    entry that fails here does not reserve a filename.

    Raises:
        OSError: If the category directory cannot be created
    """
    directory = root / classify_category(mime_type)
    directory.mkdir(parents=True, exist_ok=True)
    return directory / resolve_type_filename(url, mime_type, collisions)


def domain_layout_path(root: Path, url: SplitResult, mime_type: str) -> Path:
    """Target path in domain layout, creating the host and any nested directories.

    Raises:
        UnsafePathError: If the host or URL path escapes the output root
        OSError: If a directory cannot be created
    """
    directory = root / host_directory_name(url)
    directory.mkdir(parents=True, exist_ok=True)

    target = directory.joinpath(*resolve_domain_path(url, mime_type).split("/"))
    target.parent.mkdir(parents=True, exist_ok=True)
    return target


def layout_path(
    root: Path,
    url: SplitResult,
    mime_type: str,
    *,
    by_type: bool,
    collisions: CollisionTable,
) -> Path:
    """Target path for one entry under the selected layout.

    Args:
        root: Run output root
        url: Parsed request URL
        mime_type: Response MIME type
        by_type: True to group by content category, False to group by domain
        collisions: Per-run collision table (used in type layout only)

    Returns:
        Full path the decoded body should be written to
    """
    if by_type:
        return type_layout_path(root, url, mime_type, collisions)
    return domain_layout_path(root, url, mime_type)
