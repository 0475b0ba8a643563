"""Save collaborator: writes finished artifacts to a directory."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from codesaver.errors import DownloadFailure
from codesaver.models import Artifact, DownloadResult

LOGGER = logging.getLogger(__name__)


def write_artifact(artifact: Artifact, dest_dir: Path) -> Path:
    """Write ``artifact`` into ``dest_dir`` atomically and return its path.

    The bytes go to a temporary file first, so a failed save never leaves a
    truncated archive behind.
    """
    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
        target = dest_dir / artifact.filename
        fd, tmp_name = tempfile.mkstemp(prefix=".codesaver-", suffix=".part", dir=dest_dir)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(artifact.data)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise DownloadFailure(f"Could not save {artifact.filename}: {exc.strerror or exc}") from exc
    return target


def save_artifact(artifact: Artifact, dest_dir: Path) -> DownloadResult:
    """Hand an artifact to the filesystem and report the outcome."""
    try:
        target = write_artifact(artifact, dest_dir)
    except DownloadFailure as exc:
        LOGGER.error("%s", exc)
        return DownloadResult(success=False, error=str(exc))
    LOGGER.info("Saved %s (%d bytes)", target, artifact.size)
    return DownloadResult(success=True, download_id=str(target))
