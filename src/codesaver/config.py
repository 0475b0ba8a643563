"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from codesaver.archive.builder import DEFAULT_ARCHIVE_PREFIX, DEFAULT_MANIFEST_NAME
from codesaver.archive.compressor import MAX_COMPRESSION_LEVEL
from codesaver.detection.locator import DEFAULT_SEARCH_BUDGET
from codesaver.rescan.scheduler import DEFAULT_DELAY_SECONDS
from codesaver.rescan.watcher import DEFAULT_POLL_INTERVAL


def _get_default_output_dir() -> Path:
    """Prefer the user's Downloads folder, fall back to the working directory."""
    downloads = Path.home() / "Downloads"
    if downloads.is_dir():
        return downloads
    return Path(".")


@dataclass(slots=True)
class AppConfig:
    output_dir: Path | None = None
    debounce_seconds: float = DEFAULT_DELAY_SECONDS
    poll_interval: float = DEFAULT_POLL_INTERVAL
    search_budget: int = DEFAULT_SEARCH_BUDGET
    compression_level: int = MAX_COMPRESSION_LEVEL
    archive_prefix: str = DEFAULT_ARCHIVE_PREFIX
    manifest_name: str = DEFAULT_MANIFEST_NAME

    def __post_init__(self) -> None:
        if self.output_dir is None:
            self.output_dir = _get_default_output_dir()

    def resolve_output_dir(self, base_dir: Path | None = None) -> Path:
        if self.output_dir is None:
            self.output_dir = _get_default_output_dir()
        if Path(self.output_dir).is_absolute() or base_dir is None:
            return Path(self.output_dir)
        return base_dir / self.output_dir
