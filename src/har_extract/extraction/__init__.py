"""Extraction engine: classify, name, lay out and write HAR response bodies.

Core extraction has ZERO dependencies (only stdlib).

Exports:
    - extract_har: Extract a decoded HAR document to a timestamped directory
    - extract_har_file: Load a HAR file and extract it
    - classify_category / classify_extension: MIME type classification
    - resolve_domain_path / resolve_type_filename: Filename resolution
    - write_manifest / read_manifest: CSV audit trail
"""

from __future__ import annotations

from har_extract.extraction.classifier import (
    CATEGORY_RULES,
    EXTENSION_RULES,
    classify_category,
    classify_extension,
)
from har_extract.extraction.extractor import (
    OUTPUT_PREFIX,
    EntryOutcome,
    ExtractionResult,
    ExtractOptions,
    OutputDirectoryError,
    create_output_root,
    decode_content,
    extract_entry,
    extract_har,
    extract_har_file,
)
from har_extract.extraction.layout import domain_layout_path, layout_path, type_layout_path
from har_extract.extraction.manifest import (
    MANIFEST_FILENAME,
    MANIFEST_HEADER,
    ManifestEntry,
    read_manifest,
    write_manifest,
)
from har_extract.extraction.naming import (
    UnsafePathError,
    claim_filename,
    default_filename,
    resolve_domain_path,
    resolve_type_filename,
)

__all__ = [
    # Driver
    "extract_har",
    "extract_har_file",
    "extract_entry",
    "create_output_root",
    "decode_content",
    "ExtractOptions",
    "ExtractionResult",
    "EntryOutcome",
    "OutputDirectoryError",
    "OUTPUT_PREFIX",
    # Classification
    "classify_category",
    "classify_extension",
    "CATEGORY_RULES",
    "EXTENSION_RULES",
    # Naming and layout
    "resolve_domain_path",
    "resolve_type_filename",
    "claim_filename",
    "default_filename",
    "UnsafePathError",
    "layout_path",
    "type_layout_path",
    "domain_layout_path",
    # Manifest
    "ManifestEntry",
    "write_manifest",
    "read_manifest",
    "MANIFEST_FILENAME",
    "MANIFEST_HEADER",
]
