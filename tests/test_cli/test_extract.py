"""Tests for CLI extract command."""

from __future__ import annotations

import gzip
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from har_extract.cli.main import app

runner = CliRunner()


# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    """Parent directory for extraction output."""
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def valid_har(temp_har_file, three_entry_har: list[dict]) -> Path:
    """HAR file with PNG, JSON and HTML entries."""
    return temp_har_file(three_entry_har)


def _only_root(out_dir: Path) -> Path:
    roots = list(out_dir.glob("hargo-extract-*"))
    assert len(roots) == 1
    return roots[0]


# =============================================================================
# Test Classes
# =============================================================================


class TestExtractBasic:
    """Basic extract command tests."""

    def test_extract_by_domain(self, valid_har: Path, out_dir: Path) -> None:
        """Test default domain layout."""
        result = runner.invoke(app, ["extract", str(valid_har), "-o", str(out_dir)])
        assert result.exit_code == 0, result.output
        assert "Organizing files by domain..." in result.stdout
        assert "Extraction manifest written to:" in result.stdout

        root = _only_root(out_dir)
        assert (root / "example.com" / "index.html").is_file()
        assert (root / "extraction_manifest.csv").is_file()

    def test_extract_by_type(self, valid_har: Path, out_dir: Path) -> None:
        """Test --by-type groups files by category."""
        result = runner.invoke(app, ["extract", str(valid_har), "--by-type", "-o", str(out_dir)])
        assert result.exit_code == 0, result.output
        assert "Organizing files by content type..." in result.stdout

        root = _only_root(out_dir)
        assert (root / "images" / "image.png").is_file()
        assert (root / "json" / "data.json").is_file()
        assert (root / "html" / "page.html").is_file()

    def test_reports_each_file(self, valid_har: Path, out_dir: Path) -> None:
        """Test one line is printed per extracted file."""
        result = runner.invoke(app, ["extract", str(valid_har), "-o", str(out_dir)])
        assert result.stdout.count("Extracted https://example.com/") == 3
        assert "Extracted: 3 files" in result.stdout

    def test_extract_gzip(self, tmp_path: Path, har_data, three_entry_har: list[dict], out_dir: Path) -> None:
        """Test compressed input is accepted."""
        har_file = tmp_path / "capture.har.gz"
        with gzip.open(har_file, "wt", encoding="utf-8") as f:
            json.dump(har_data(three_entry_har), f)

        result = runner.invoke(app, ["extract", str(har_file), "-o", str(out_dir)])
        assert result.exit_code == 0, result.output

    def test_extract_from_stdin(self, har_data, three_entry_har: list[dict], out_dir: Path) -> None:
        """Test '-' reads the HAR from stdin."""
        result = runner.invoke(
            app, ["extract", "-", "-t", "-o", str(out_dir)], input=json.dumps(har_data(three_entry_har))
        )
        assert result.exit_code == 0, result.output
        assert (_only_root(out_dir) / "json" / "data.json").is_file()

    def test_skipped_entries_reported(self, temp_har_file, sample_har_entry, out_dir: Path) -> None:
        """Test per-entry failures are listed but do not fail the run."""
        har_file = temp_har_file(
            [
                sample_har_entry(url="https://example.com/x.png", content="%%%", mime_type="image/png", encoding="base64"),
                sample_har_entry(url="https://example.com/ok.txt", content="ok", mime_type="text/plain"),
            ]
        )
        result = runner.invoke(app, ["extract", str(har_file), "-o", str(out_dir)])
        assert result.exit_code == 0, result.output
        assert "Skipped https://example.com/x.png (decode)" in result.output
        assert "Extracted: 1 files" in result.stdout


class TestExtractErrors:
    """Tests for fatal errors."""

    def test_file_not_found(self, tmp_path: Path, out_dir: Path) -> None:
        """Test error when file doesn't exist."""
        result = runner.invoke(app, ["extract", str(tmp_path / "missing.har"), "-o", str(out_dir)])
        assert result.exit_code == 1
        assert "File not found" in result.output
        assert list(out_dir.iterdir()) == []

    def test_invalid_json(self, tmp_path: Path, out_dir: Path) -> None:
        """Test error on invalid JSON."""
        bad = tmp_path / "invalid.har"
        bad.write_text("{not valid json")
        result = runner.invoke(app, ["extract", str(bad), "-o", str(out_dir)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_invalid_structure(self, tmp_path: Path, out_dir: Path) -> None:
        """Test error on JSON that is not a HAR."""
        bad = tmp_path / "invalid_structure.har"
        bad.write_text('{"not": "a har file"}')
        result = runner.invoke(app, ["extract", str(bad), "-o", str(out_dir)])
        assert result.exit_code == 1
        assert "Invalid HAR file" in result.output

    def test_size_limit(self, temp_har_file, sample_har_entry, out_dir: Path) -> None:
        """Test --max-size rejects large files."""
        har_file = temp_har_file([sample_har_entry(content="x" * (1024 * 1024 + 10))])
        result = runner.invoke(app, ["extract", str(har_file), "--max-size", "1", "-o", str(out_dir)])
        assert result.exit_code == 1
        assert "File too large" in result.output

    def test_size_limit_disabled(self, temp_har_file, sample_har_entry, out_dir: Path) -> None:
        """Test --max-size 0 disables the limit."""
        har_file = temp_har_file([sample_har_entry(content="x" * (1024 * 1024 + 10))])
        result = runner.invoke(app, ["extract", str(har_file), "--max-size", "0", "-o", str(out_dir)])
        assert result.exit_code == 0, result.output

    def test_negative_max_size(self, valid_har: Path, out_dir: Path) -> None:
        """Test negative --max-size is rejected."""
        result = runner.invoke(app, ["extract", str(valid_har), "--max-size", "-1", "-o", str(out_dir)])
        assert result.exit_code == 1
        assert "max-size must be >= 0" in result.output

    def test_output_dir_missing(self, valid_har: Path, tmp_path: Path) -> None:
        """Test a missing parent directory is fatal."""
        result = runner.invoke(app, ["extract", str(valid_har), "-o", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "Cannot create output directory" in result.output
