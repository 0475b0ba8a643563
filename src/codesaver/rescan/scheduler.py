"""Trailing-edge debounced re-detection.

Every observed change restarts a quiet-period timer on the event loop; the
detection callable runs once the document has stopped changing for the whole
window. The scheduler owns the trigger state that front ends render (the
"save N files" control), so no ambient UI lookup is needed to decide whether
to create or update it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Sequence

from codesaver.models import FileRecord, SourceAnchor

LOGGER = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 0.5


class SchedulerState(Enum):
    IDLE = "idle"
    PENDING = "pending"


@dataclass(slots=True)
class TriggerState:
    """What the save control currently shows."""

    count: int
    records: List[FileRecord] = field(default_factory=list)


UpdateCallback = Callable[[TriggerState, List[FileRecord]], None]


def reconcile(trigger: TriggerState | None, records: Sequence[FileRecord]) -> TriggerState | None:
    """Fold a detection result into the current trigger state.

    An empty result leaves the previous state as it was.
    """
    if not records:
        return trigger
    if trigger is None:
        return TriggerState(count=len(records), records=list(records))
    trigger.count = len(records)
    trigger.records = list(records)
    return trigger


def _anchors(records: Sequence[FileRecord]) -> set[SourceAnchor]:
    return {record.source_anchor for record in records if record.source_anchor is not None}


class RescanScheduler:
    """Runs ``detect`` at most once per quiet period."""

    def __init__(
        self,
        detect: Callable[[], List[FileRecord]],
        *,
        delay: float = DEFAULT_DELAY_SECONDS,
        on_update: UpdateCallback | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._detect = detect
        self.delay = delay
        self._on_update = on_update
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._state = SchedulerState.IDLE
        self._last_records: List[FileRecord] = []
        self.trigger: TriggerState | None = None
        self.runs = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    def notify(self) -> None:
        """Record one document change and restart the quiet-period timer."""
        if self._handle is not None:
            self._handle.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)
        self._state = SchedulerState.PENDING

    def flush(self) -> bool:
        """Run a pending rescan now. Returns ``False`` when nothing was pending."""
        if self._state is not SchedulerState.PENDING:
            return False
        self._fire()
        return True

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._state = SchedulerState.IDLE

    def _fire(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._state = SchedulerState.IDLE
        self.runs += 1

        try:
            records = self._detect()
        except Exception as exc:
            LOGGER.error("Rescan failed: %s", exc)
            return

        previous = _anchors(self._last_records)
        added = [record for record in records if record.source_anchor not in previous]
        self._last_records = list(records)

        self.trigger = reconcile(self.trigger, records)
        if records and self.trigger is not None and self._on_update is not None:
            self._on_update(self.trigger, added)
        LOGGER.debug("Rescan found %d files (%d new)", len(records), len(added))
