"""Compression collaborators for archive assembly."""

from __future__ import annotations

import io
import zipfile
from typing import Callable, Protocol, Sequence, Tuple, runtime_checkable

Entry = Tuple[str, bytes]
ProgressCallback = Callable[[float], None]

MAX_COMPRESSION_LEVEL = 9


@runtime_checkable
class Compressor(Protocol):
    """Packs named byte buffers into one archive.

    Uses structural subtyping - no inheritance required.
    """

    def available(self) -> bool:
        """Return whether the compressor can run in this environment."""
        ...

    def compress(
        self,
        entries: Sequence[Entry],
        *,
        level: int = MAX_COMPRESSION_LEVEL,
        progress: ProgressCallback | None = None,
    ) -> bytes:
        """Return the archive bytes, reporting percent done after each entry."""
        ...


class ZipCompressor:
    """Deflate-compressed zip archives built with :mod:`zipfile`."""

    extension = ".zip"

    def available(self) -> bool:
        try:
            import zlib  # noqa: F401
        except ImportError:
            return False
        return True

    def compress(
        self,
        entries: Sequence[Entry],
        *,
        level: int = MAX_COMPRESSION_LEVEL,
        progress: ProgressCallback | None = None,
    ) -> bytes:
        buffer = io.BytesIO()
        total = len(entries)
        with zipfile.ZipFile(
            buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=level
        ) as archive:
            for done, (name, data) in enumerate(entries, start=1):
                archive.writestr(name, data)
                if progress is not None:
                    progress(done * 100.0 / total)
        return buffer.getvalue()
