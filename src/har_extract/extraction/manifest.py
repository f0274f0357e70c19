"""Extraction manifest (audit trail) written as CSV."""

from __future__ import annotations

import csv
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

MANIFEST_FILENAME = "extraction_manifest.csv"

MANIFEST_HEADER: tuple[str, ...] = (
    "Original URL",
    "Extracted Path",
    "MIME Type",
    "Size (bytes)",
    "HTTP Method",
    "Status Code",
)


@dataclass(frozen=True)
class ManifestEntry:
    """Metadata for one extracted file.

    Attributes:
        original_url: Request URL the body came from
        extracted_path: Path the body was written to
        mime_type: Response MIME type
        size: Number of decoded bytes written
        method: HTTP request method
        status: HTTP response status code
    """

    original_url: str
    extracted_path: str
    mime_type: str
    size: int
    method: str
    status: int

    def as_row(self) -> list[str]:
        """Row values in manifest column order."""
        return [
            self.original_url,
            self.extracted_path,
            self.mime_type,
            str(self.size),
            self.method,
            str(self.status),
        ]


def write_manifest(entries: Iterable[ManifestEntry], manifest_path: str | Path) -> Path:
    """Write manifest rows to a UTF-8 CSV file with a fixed header.

    The header is written even when there are no entries.

    Args:
        entries: Manifest entries in extraction order
        manifest_path: Destination CSV path

    Returns:
        Path to the written manifest

    Raises:
        OSError: If the file cannot be written
    """
    manifest_path = Path(manifest_path)
    # Lone surrogates from the HAR are written as \udcXX escapes, not dropped
    with open(manifest_path, "w", encoding="utf-8", errors="backslashreplace", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(MANIFEST_HEADER)
        writer.writerows(entry.as_row() for entry in entries)
    return manifest_path


def read_manifest(manifest_path: str | Path) -> list[ManifestEntry]:
    """Read a manifest written by write_manifest.

    Raises:
        ValueError: If the header does not match the manifest columns
    """
    with open(manifest_path, encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header is None or tuple(header) != MANIFEST_HEADER:
            raise ValueError(f"Not an extraction manifest: {manifest_path}")
        return [
            ManifestEntry(
                original_url=row[0],
                extracted_path=row[1],
                mime_type=row[2],
                size=int(row[3]),
                method=row[4],
                status=int(row[5]),
            )
            for row in reader
        ]
