"""Tests for CLI commands."""

from __future__ import annotations

import io
import json
import logging
import zipfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from codesaver.cli import _select, _setup_logging, app
from codesaver.models import FileRecord


runner = CliRunner()

DOCUMENT = """
<html><body>
  <h2>1. src/app.ts</h2>
  <pre><code>console.log('hi')</code></pre>
  <h2>2. tests/test_app.py</h2>
  <pre><code>def test_app():
    assert True</code></pre>
  <h2>Summary</h2>
  <p>That's all.</p>
</body></html>
"""


@pytest.fixture()
def document(tmp_path: Path) -> Path:
    path = tmp_path / "chat.html"
    path.write_text(DOCUMENT, encoding="utf-8")
    return path


class TestSetupLogging:
    """Tests for _setup_logging helper."""

    def test_setup_logging_verbose(self) -> None:
        """Verbose mode sets DEBUG level."""
        with patch("codesaver.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=True)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.DEBUG

    def test_setup_logging_normal(self) -> None:
        """Normal mode sets INFO level."""
        with patch("codesaver.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=False)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.INFO


class TestSelect:
    """Tests for _select helper."""

    def test_include_and_exclude(self) -> None:
        records = [
            FileRecord(path="src/a.ts", content="1"),
            FileRecord(path="src\\b.ts", content="2"),
            FileRecord(path="tests/c.py", content="3"),
        ]
        assert [r.path for r in _select(records, ["src/*"], [])] == ["src/a.ts", "src\\b.ts"]
        assert [r.path for r in _select(records, [], ["*.ts"])] == ["tests/c.py"]
        assert _select(records, [], []) == records


class TestScanCommand:
    """Tests for the scan command."""

    def test_scan_lists_files(self, document: Path) -> None:
        result = runner.invoke(app, ["scan", str(document)])
        assert result.exit_code == 0
        assert "src/app.ts" in result.stdout
        assert "tests/test_app.py" in result.stdout
        assert "Summary" not in result.stdout

    def test_scan_json(self, document: Path) -> None:
        result = runner.invoke(app, ["scan", str(document), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [item["path"] for item in data] == ["src/app.ts", "tests/test_app.py"]
        assert data[1]["lines"] == 2
        assert data[0]["mime_type"] == "text/typescript"

    def test_scan_directory(self, document: Path) -> None:
        (document.parent / "notes.txt").write_text("<h2>x.py</h2><pre>1</pre>")
        result = runner.invoke(app, ["scan", str(document.parent), "--json"])
        assert result.exit_code == 0
        assert len(json.loads(result.stdout)) == 2

    def test_scan_nothing_found(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.html"
        empty.write_text("<p>hello</p>")
        result = runner.invoke(app, ["scan", str(empty)])
        assert result.exit_code == 0
        assert "No files detected" in result.stdout


class TestPreviewCommand:
    """Tests for the preview command."""

    def test_preview_shows_content(self, document: Path) -> None:
        result = runner.invoke(app, ["preview", str(document), "--file", "src/app.ts"])
        assert result.exit_code == 0
        assert "console.log" in result.stdout
        assert "test_app" not in result.stdout

    def test_preview_unknown_file(self, document: Path) -> None:
        result = runner.invoke(app, ["preview", str(document), "--file", "missing.py"])
        assert result.exit_code == 0
        assert "No files detected" in result.stdout


class TestPackCommand:
    """Tests for the pack command."""

    def test_pack_writes_archive(self, document: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        result = runner.invoke(app, ["pack", str(document), "--out", str(out)])

        assert result.exit_code == 0
        assert "Saved 2 files" in result.stdout
        archives = list(out.glob("code-files-*.zip"))
        assert len(archives) == 1
        with zipfile.ZipFile(io.BytesIO(archives[0].read_bytes())) as archive:
            assert sorted(archive.namelist()) == ["README.md", "src/app.ts", "tests/test_app.py"]

    def test_pack_with_filters(self, document: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        result = runner.invoke(
            app, ["pack", str(document), "--out", str(out), "--exclude", "tests/*"]
        )

        assert result.exit_code == 0
        assert "Saved 1 files" in result.stdout

    def test_pack_nothing_selected(self, document: Path, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["pack", str(document), "--out", str(tmp_path), "--include", "*.rs"]
        )
        assert result.exit_code == 0
        assert "No files selected" in result.stdout

    def test_pack_refuses_escaping_paths(self, tmp_path: Path) -> None:
        page = tmp_path / "chat.html"
        page.write_text("<h2>../../evil.py</h2><pre>print('x')</pre>", encoding="utf-8")
        out = tmp_path / "out"

        result = runner.invoke(app, ["pack", str(page), "--out", str(out)])

        assert result.exit_code == 1
        assert "Invalid file path" in result.stdout
        assert not out.exists()

    @patch("codesaver.cli.ZipCompressor")
    def test_pack_compression_unavailable(
        self, mock_compressor_class: MagicMock, document: Path, tmp_path: Path
    ) -> None:
        mock_compressor = MagicMock()
        mock_compressor.available.return_value = False
        mock_compressor_class.return_value = mock_compressor

        out = tmp_path / "out"
        result = runner.invoke(app, ["pack", str(document), "--out", str(out)])

        assert result.exit_code == 1
        assert "Save failed" in result.stdout
        assert not out.exists()

    @patch("codesaver.cli.save_artifact")
    def test_pack_download_failure(
        self, mock_save: MagicMock, document: Path, tmp_path: Path
    ) -> None:
        mock_save.return_value = MagicMock(success=False, error="Disk is read-only")

        result = runner.invoke(app, ["pack", str(document), "--out", str(tmp_path)])

        assert result.exit_code == 1
        assert "Disk is read-only" in result.stdout


class TestWatchCommand:
    """Tests for the watch command."""

    def test_watch_reports_initial_scan(self, document: Path) -> None:
        result = runner.invoke(
            app,
            ["watch", str(document), "--delay", "0.01", "--interval", "0.01", "--timeout", "0.3"],
        )
        assert result.exit_code == 0
        assert "Save 2 files" in result.stdout
        assert "+ src/app.ts" in result.stdout


class TestWebCommand:
    """Tests for the web command."""

    def test_web_starts_server(self) -> None:
        """Starts uvicorn server with correct parameters."""
        with patch("uvicorn.run") as mock_uvicorn_run:
            result = runner.invoke(app, ["web", "--host", "0.0.0.0", "--port", "9000"])
            assert result.exit_code == 0
            mock_uvicorn_run.assert_called_once()
            call_kwargs = mock_uvicorn_run.call_args[1]
            assert call_kwargs["host"] == "0.0.0.0"
            assert call_kwargs["port"] == 9000
