"""Tests for saving artifacts to disk."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from codesaver.archive.download import save_artifact, write_artifact
from codesaver.errors import DownloadFailure
from codesaver.models import Artifact


@pytest.fixture()
def artifact() -> Artifact:
    return Artifact(filename="code-files-2024-05-01T09-30-15.zip", data=b"PK\x05\x06", entry_count=1)


class TestWriteArtifact:
    """Tests for write_artifact."""

    def test_writes_file(self, artifact: Artifact, tmp_path: Path) -> None:
        target = write_artifact(artifact, tmp_path)

        assert target == tmp_path / artifact.filename
        assert target.read_bytes() == artifact.data

    def test_creates_destination(self, artifact: Artifact, tmp_path: Path) -> None:
        dest = tmp_path / "nested" / "out"
        target = write_artifact(artifact, dest)
        assert target.exists()

    def test_failure_leaves_no_partial_file(self, artifact: Artifact, tmp_path: Path) -> None:
        with patch("codesaver.archive.download.os.replace", side_effect=OSError(28, "No space left")):
            with pytest.raises(DownloadFailure, match="No space left"):
                write_artifact(artifact, tmp_path)
        assert list(tmp_path.iterdir()) == []


class TestSaveArtifact:
    """Tests for save_artifact."""

    def test_success(self, artifact: Artifact, tmp_path: Path) -> None:
        result = save_artifact(artifact, tmp_path)

        assert result.success
        assert result.download_id == str(tmp_path / artifact.filename)
        assert result.error is None

    def test_failure_reports_message(self, artifact: Artifact, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way")

        result = save_artifact(artifact, blocker)

        assert not result.success
        assert result.download_id is None
        assert artifact.filename in result.error
