"""Pytest configuration and fixtures for har-extract tests."""

from __future__ import annotations

import base64
import json
from datetime import datetime
from pathlib import Path

import pytest

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="
)
PNG_BASE64 = base64.b64encode(PNG_BYTES).decode("ascii")

FIXED_NOW = datetime(2024, 5, 17, 9, 30, 15)


@pytest.fixture
def sample_har_entry():
    """Create a sample HAR entry dict for testing."""

    def _create_entry(
        url: str = "http://example.com/",
        content: str = "<html></html>",
        mime_type: str = "text/html",
        encoding: str | None = None,
        method: str = "GET",
        status: int = 200,
    ) -> dict:
        content_obj = {"text": content, "mimeType": mime_type}
        if encoding is not None:
            content_obj["encoding"] = encoding
        return {
            "request": {"method": method, "url": url, "headers": []},
            "response": {"status": status, "statusText": "OK", "headers": [], "content": content_obj},
        }

    return _create_entry


@pytest.fixture
def har_data():
    """Wrap entry dicts in a minimal HAR 1.2 document."""

    def _create_har(entries: list[dict] | None = None) -> dict:
        return {
            "log": {
                "version": "1.2",
                "creator": {"name": "test", "version": "1.0"},
                "entries": entries or [],
            }
        }

    return _create_har


@pytest.fixture
def temp_har_file(tmp_path: Path, har_data):
    """Write a HAR document to a temporary file."""

    def _create_file(entries: list[dict] | None = None, name: str = "capture.har") -> Path:
        har_file = tmp_path / name
        har_file.write_text(json.dumps(har_data(entries)), encoding="utf-8")
        return har_file

    return _create_file


@pytest.fixture
def three_entry_har(sample_har_entry) -> list[dict]:
    """PNG (base64), JSON and HTML entries from one site."""
    return [
        sample_har_entry(
            url="https://example.com/image.png",
            content=PNG_BASE64,
            mime_type="image/png",
            encoding="base64",
        ),
        sample_har_entry(url="https://example.com/data.json", content='{"test": "data"}', mime_type="application/json"),
        sample_har_entry(
            url="https://example.com/", content="<html><body>Test</body></html>", mime_type="text/html"
        ),
    ]


@pytest.fixture
def png_bytes() -> bytes:
    """Decoded bytes of the sample PNG."""
    return PNG_BYTES


@pytest.fixture
def png_base64() -> str:
    """Base64 text of the sample PNG as stored in a HAR."""
    return PNG_BASE64


@pytest.fixture
def fixed_now() -> datetime:
    """Deterministic run start time."""
    return FIXED_NOW
