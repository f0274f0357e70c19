"""Extraction driver.

Walks HAR entries in document order, writes each response body to the
location chosen by the layout strategy and records a manifest row for every
file written. Problems with a single entry are recorded as a skipped
EntryOutcome and never stop the run; only decoding the HAR document and
creating the output root are fatal.
"""

from __future__ import annotations

import base64
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from urllib.parse import urlsplit

from har_extract.extraction.layout import layout_path
from har_extract.extraction.manifest import MANIFEST_FILENAME, ManifestEntry, write_manifest
from har_extract.extraction.naming import CollisionTable, UnsafePathError
from har_extract.har import DEFAULT_MAX_HAR_SIZE, HarDocument, HarEntry, load_har

_LOGGER = logging.getLogger(__name__)

OUTPUT_PREFIX = "hargo-extract-"
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"

# JSON decoding keeps unpaired \uD800-\uDFFF escapes as lone surrogates
_LONE_SURROGATE_RE = re.compile("[\ud800-\udfff]")

# Skip stages recorded on EntryOutcome.stage
STAGE_EMPTY = "empty"
STAGE_URL = "url"
STAGE_PATH = "path"
STAGE_DIRECTORY = "directory"
STAGE_DECODE = "decode"
STAGE_WRITE = "write"


class OutputDirectoryError(OSError):
    """Raised when the run's output root cannot be created."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot create output directory {path}: {cause}")


@dataclass
class ExtractOptions:
    """Options for an extraction run.

    Attributes:
        by_type: Group files by content category instead of by domain
        base_dir: Directory the timestamped output root is created in
        prefix: Output root name prefix (timestamp is appended)
        manifest_name: Manifest filename inside the output root
    """

    by_type: bool = False
    base_dir: Path = field(default_factory=lambda: Path("."))
    prefix: str = OUTPUT_PREFIX
    manifest_name: str = MANIFEST_FILENAME

    def output_root(self, now: datetime) -> Path:
        """Output root for a run started at ``now`` (second resolution)."""
        return Path(self.base_dir) / f"{self.prefix}{now.strftime(TIMESTAMP_FORMAT)}"


@dataclass
class EntryOutcome:
    """Result of processing one HAR entry.

    Exactly one of ``manifest_entry`` (file written) or ``stage``/``reason``
    (entry skipped) is set.

    Attributes:
        index: Entry position in the HAR document
        url: Request URL
        manifest_entry: Manifest row for the written file
        stage: Processing stage at which the entry was skipped
        reason: Human-readable skip cause
    """

    index: int
    url: str
    manifest_entry: ManifestEntry | None = None
    stage: str | None = None
    reason: str | None = None

    @property
    def extracted(self) -> bool:
        """True if a file was written for this entry."""
        return self.manifest_entry is not None


@dataclass
class ExtractionResult:
    """Result of an extraction run.

    Attributes:
        output_dir: Output root created for this run
        by_type: Layout mode used
        outcomes: One outcome per HAR entry, in document order
        manifest_path: Path to the manifest (None if it could not be written)
        manifest_error: Error message if the manifest could not be written
    """

    output_dir: Path
    by_type: bool = False
    outcomes: list[EntryOutcome] = field(default_factory=list)
    manifest_path: Path | None = None
    manifest_error: str | None = None

    @property
    def manifest(self) -> list[ManifestEntry]:
        """Manifest rows in extraction order."""
        return [o.manifest_entry for o in self.outcomes if o.manifest_entry is not None]

    @property
    def skipped(self) -> list[EntryOutcome]:
        """Outcomes for entries that produced no file."""
        return [o for o in self.outcomes if not o.extracted]

    @property
    def extracted_count(self) -> int:
        """Number of files written."""
        return len(self.manifest)

    @property
    def manifest_written(self) -> bool:
        """True if the manifest was written."""
        return self.manifest_path is not None


def create_output_root(options: ExtractOptions, now: datetime | None = None) -> Path:
    """Create the timestamped output root for a run.

    The directory must not already exist: two runs started within the same
    second fail instead of sharing a directory.

    Raises:
        OutputDirectoryError: If the directory exists or cannot be created
    """
    root = options.output_root(now or datetime.now())
    try:
        root.mkdir()
    except OSError as e:
        raise OutputDirectoryError(root, e) from e
    return root


def decode_content(entry: HarEntry) -> bytes:
    """Decode an entry's response payload to bytes.

    Base64 payloads may contain line breaks; anything else invalid raises.
    Other payloads are the UTF-8 encoding of the text, with unpaired
    surrogates replaced by U+FFFD.

    Raises:
        ValueError: If a base64 payload is malformed
    """
    if entry.encoding == "base64":
        text = entry.text.replace("\r", "").replace("\n", "")
        return base64.b64decode(text, validate=True)
    return _LONE_SURROGATE_RE.sub("\ufffd", entry.text).encode("utf-8")


def _skip(entry: HarEntry, stage: str, reason: str) -> EntryOutcome:
    return EntryOutcome(index=entry.index, url=entry.url, stage=stage, reason=reason)


def extract_entry(
    entry: HarEntry,
    root: Path,
    *,
    by_type: bool,
    collisions: CollisionTable,
) -> EntryOutcome:
    """Write one entry's response body and build its manifest row.

    Args:
        entry: HAR entry to extract
        root: Run output root
        by_type: Layout mode
        collisions: Per-run collision table (type layout)

    Returns:
        EntryOutcome describing the written file or the skip
    """
    if not entry.text:
        _LOGGER.debug("Skipping entry %d: no response content", entry.index)
        return _skip(entry, STAGE_EMPTY, "no response content")

    try:
        url = urlsplit(entry.url)
    except ValueError as e:
        _LOGGER.error("Failed to parse URL %s: %s", entry.url, e)
        return _skip(entry, STAGE_URL, str(e))

    try:
        target = layout_path(root, url, entry.mime_type, by_type=by_type, collisions=collisions)
    except UnsafePathError as e:
        _LOGGER.error("Refusing to extract %s: %s", entry.url, e)
        return _skip(entry, STAGE_PATH, str(e))
    except (OSError, ValueError) as e:
        _LOGGER.error("Failed to create directory for %s: %s", entry.url, e)
        return _skip(entry, STAGE_DIRECTORY, str(e))

    try:
        data = decode_content(entry)
    except ValueError as e:
        _LOGGER.error("Failed to decode %s content for %s: %s", entry.encoding or "text", entry.url, e)
        return _skip(entry, STAGE_DECODE, str(e))

    try:
        target.write_bytes(data)
    except (OSError, ValueError) as e:
        _LOGGER.error("Failed to write file %s: %s", target, e)
        return _skip(entry, STAGE_WRITE, str(e))

    _LOGGER.info("Extracted %s -> %s [%d bytes]", entry.url, target, len(data))
    return EntryOutcome(
        index=entry.index,
        url=entry.url,
        manifest_entry=ManifestEntry(
            original_url=entry.url,
            extracted_path=str(target),
            mime_type=entry.mime_type,
            size=len(data),
            method=entry.method,
            status=entry.status,
        ),
    )


def extract_har(
    document: HarDocument,
    options: ExtractOptions | None = None,
    *,
    now: datetime | None = None,
) -> ExtractionResult:
    """Extract every response body in a HAR document to the filesystem.

    Creates ``<base_dir>/hargo-extract-<YYYYMMDDHHMMSS>``, writes one file per
    entry with response content, then writes the CSV manifest. A manifest
    write failure is recorded on the result and does not fail the run.

    Args:
        document: Decoded HAR document
        options: Extraction options (defaults to domain layout in ".")
        now: Run start time used for the output root name

    Returns:
        ExtractionResult with per-entry outcomes and manifest location

    Raises:
        OutputDirectoryError: If the output root cannot be created

    Example:
        >>> # result = extract_har(load_har("capture.har"), ExtractOptions(by_type=True))
        >>> # print(result.output_dir, result.extracted_count)
    """
    if options is None:
        options = ExtractOptions()

    root = create_output_root(options, now)
    _LOGGER.info(
        "Extracting HAR content to %s (organized by %s)", root, "content type" if options.by_type else "domain"
    )

    collisions: CollisionTable = {}
    result = ExtractionResult(output_dir=root, by_type=options.by_type)
    for entry in document.entries:
        result.outcomes.append(extract_entry(entry, root, by_type=options.by_type, collisions=collisions))

    manifest_path = root / options.manifest_name
    try:
        result.manifest_path = write_manifest(result.manifest, manifest_path)
    except (OSError, ValueError) as e:
        _LOGGER.error("Failed to write manifest %s: %s", manifest_path, e)
        result.manifest_error = str(e)

    return result


def extract_har_file(
    har_path: str | Path,
    options: ExtractOptions | None = None,
    *,
    max_size: int | None = DEFAULT_MAX_HAR_SIZE,
    now: datetime | None = None,
) -> ExtractionResult:
    """Load a HAR file and extract its response bodies.

    Raises:
        HarSizeError: If file exceeds max_size limit
        HarValidationError: If HAR structure is invalid
        FileNotFoundError: If input file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
        OutputDirectoryError: If the output root cannot be created
    """
    document = load_har(har_path, max_size=max_size)
    return extract_har(document, options, now=now)
