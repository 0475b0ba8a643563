"""Archive assembly for selected file records."""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime
from pathlib import PurePosixPath
from typing import Callable, Collection, Dict, Sequence

from codesaver.archive.compressor import (
    MAX_COMPRESSION_LEVEL,
    Compressor,
    ProgressCallback,
    ZipCompressor,
)
from codesaver.errors import CompressionFailure, CompressionUnavailable, UnsafeArchivePath
from codesaver.models import Artifact, FileRecord
from codesaver.utils.text import format_file_size

LOGGER = logging.getLogger(__name__)

DEFAULT_MANIFEST_NAME = "README.md"
DEFAULT_ARCHIVE_PREFIX = "code-files"

_DRIVE_RE = re.compile(r"^[A-Za-z]:")


def normalize_archive_path(path: str) -> str:
    return path.replace("\\", "/")


def is_safe_archive_path(path: str) -> bool:
    """Whether ``path`` extracts to a location inside the archive folder.

    Absolute paths, drive-qualified paths and any ``..`` segment are rejected.
    """
    name = normalize_archive_path(path)
    if not name or name.startswith("/") or _DRIVE_RE.match(name):
        return False
    return ".." not in name.split("/")


def artifact_filename(prefix: str, moment: datetime, extension: str = ".zip") -> str:
    """Build a sortable archive name such as ``code-files-2024-05-01T09-30-00.zip``."""
    return f"{prefix}-{moment.strftime('%Y-%m-%dT%H-%M-%S')}{extension}"


def render_manifest(records: Sequence[FileRecord], moment: datetime) -> str:
    """Render the summary file stored at the root of every archive."""
    lines = [
        "# Saved code files",
        "",
        f"Saved at: {moment.strftime('%Y-%m-%d %H:%M:%S')}",
        f"Total files: {len(records)}",
        "",
        "## Files",
        "",
    ]
    for number, record in enumerate(records, start=1):
        lines.append(f"{number}. {record.path} ({format_file_size(record.size)})")
    lines.extend(["", "---", "Generated by codesaver", ""])
    return "\n".join(lines)


class ArchiveBuilder:
    """Packs selected records plus a manifest into one compressed artifact."""

    def __init__(
        self,
        compressor: Compressor | None = None,
        *,
        manifest_name: str = DEFAULT_MANIFEST_NAME,
        compression_level: int = MAX_COMPRESSION_LEVEL,
        archive_prefix: str = DEFAULT_ARCHIVE_PREFIX,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.compressor = compressor
        self.manifest_name = manifest_name
        self.compression_level = compression_level
        self.archive_prefix = archive_prefix
        self.clock = clock

    @classmethod
    def default(cls, **kwargs) -> "ArchiveBuilder":
        return cls(ZipCompressor(), **kwargs)

    def manifest_entry_name(self, taken: Collection[str]) -> str:
        """Return the manifest's archive path, moved aside if a file uses it."""
        if self.manifest_name not in taken:
            return self.manifest_name
        original = PurePosixPath(self.manifest_name)
        candidate = original.with_name(f"{original.stem}.codesaver{original.suffix}")
        counter = 1
        while str(candidate) in taken:
            counter += 1
            candidate = original.with_name(f"{original.stem}.codesaver-{counter}{original.suffix}")
        LOGGER.warning(
            "A selected file is named %s: writing the manifest as %s",
            self.manifest_name,
            candidate,
        )
        return str(candidate)

    def collect_entries(self, selected: Sequence[FileRecord], moment: datetime) -> Dict[str, bytes]:
        """Map archive paths to their bytes, manifest first.

        Records that normalize to an existing path replace its content in
        place (last write wins); each replacement is logged. The manifest
        never replaces a selected file.

        Raises :class:`UnsafeArchivePath` for paths that would extract outside
        the archive folder.
        """
        files: Dict[str, bytes] = {}
        for record in selected:
            name = normalize_archive_path(record.path)
            if not is_safe_archive_path(name):
                raise UnsafeArchivePath(f"Invalid file path: {record.path}")
            if name in files:
                LOGGER.warning("Duplicate archive path %s: keeping the later file", name)
            files[name] = record.content.encode("utf-8")

        manifest = render_manifest(selected, moment).encode("utf-8")
        entries: Dict[str, bytes] = {self.manifest_entry_name(files): manifest}
        entries.update(files)
        return entries

    async def build(
        self,
        selected: Sequence[FileRecord],
        progress: ProgressCallback | None = None,
    ) -> Artifact:
        """Compress ``selected`` into an artifact.

        Raises :class:`CompressionUnavailable` before any work when no usable
        compressor is configured, and :class:`CompressionFailure` if
        compression breaks part way.
        """
        compressor = self.compressor
        if compressor is None or not compressor.available():
            raise CompressionUnavailable("Compression library is not available")

        moment = self.clock()
        entries = self.collect_entries(selected, moment)
        LOGGER.info("Compressing %d files", len(selected))

        if progress is not None:
            progress(0.0)
        try:
            data = await asyncio.to_thread(
                compressor.compress,
                list(entries.items()),
                level=self.compression_level,
                progress=progress,
            )
        except Exception as exc:
            LOGGER.exception("Archive build failed: %s", exc)
            raise CompressionFailure(str(exc)) from exc

        extension = getattr(compressor, "extension", ".zip")
        return Artifact(
            filename=artifact_filename(self.archive_prefix, moment, extension),
            data=data,
            entry_count=len(entries),
        )
