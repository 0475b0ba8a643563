"""Poll-based change notifications for a document on disk."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from codesaver.rescan.scheduler import RescanScheduler

LOGGER = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.25


def document_signature(path: Path) -> tuple[str, int, int]:
    """Return a stat tuple that changes whenever ``path`` is rewritten."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return ("missing", 0, 0)
    except OSError:
        return ("error", 0, 0)
    return ("ok", st.st_mtime_ns, st.st_size)


class DocumentWatcher:
    """Feeds file changes into a :class:`RescanScheduler`."""

    def __init__(
        self,
        path: Path,
        scheduler: RescanScheduler,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.path = path
        self.scheduler = scheduler
        self.poll_interval = poll_interval
        self._signature = document_signature(path)

    def poll(self) -> bool:
        """Check the document once; notify the scheduler if it changed."""
        signature = document_signature(self.path)
        if signature == self._signature:
            return False
        LOGGER.debug("Change detected in %s", self.path)
        self._signature = signature
        self.scheduler.notify()
        return True

    async def run(self, stop: asyncio.Event) -> None:
        """Poll until ``stop`` is set, then drop any pending rescan."""
        try:
            while not stop.is_set():
                self.poll()
                try:
                    await asyncio.wait_for(stop.wait(), timeout=self.poll_interval)
                except asyncio.TimeoutError:
                    pass
        finally:
            self.scheduler.cancel()
