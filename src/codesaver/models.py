"""Core codesaver data models."""

from __future__ import annotations

from dataclasses import dataclass

from codesaver.detection.mime import get_mime_type


@dataclass(frozen=True, slots=True)
class SourceAnchor:
    """Comparison-only handle to the heading that produced a record.

    Holds no reference to the document tree, so it stays valid (if stale)
    after the document changes.
    """

    heading_index: int
    heading_text: str


@dataclass(frozen=True, slots=True)
class FileRecord:
    """One file reconstructed from a heading/code-block pair."""

    path: str
    content: str
    source_anchor: SourceAnchor | None = None

    @property
    def mime_type(self) -> str:
        return get_mime_type(self.path)

    @property
    def size(self) -> int:
        """Byte length of the content encoded as UTF-8."""
        return len(self.content.encode("utf-8"))

    @property
    def line_count(self) -> int:
        return len(self.content.split("\n"))


@dataclass(slots=True)
class Artifact:
    """A finished archive ready to be handed to a save collaborator."""

    filename: str
    data: bytes
    entry_count: int

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(slots=True)
class DownloadResult:
    success: bool
    download_id: str | None = None
    error: str | None = None
