"""
Reminder Scheduler

Polls the event store on a fixed interval and pushes events whose reminder
window has opened into the notification queue.

The reminder window of an event is ``[start - reminder_minutes, start)``:
it opens ``reminder_minutes`` before the start and closes at the exact start
instant, so an event is never notified once it has begun. Because of the
polling, an event may be picked up up to one interval late.

The scan itself lives in ``compute_newly_due`` so it can be exercised with
any clock; ``ReminderScheduler`` only drives it from an asyncio task.
"""

import asyncio
import logging
from datetime import datetime
from typing import AbstractSet, Callable, Iterable, List, Optional

from ciap_agenda.config import settings
from ciap_agenda.dto import CalendarEvent
from ciap_agenda.reminders.queue import NotificationQueue
from ciap_agenda.utils.datetime_utils import now_in_agenda_tz, to_millis

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def trigger_millis(event: CalendarEvent) -> int:
    """Epoch milliseconds at which the reminder window of ``event`` opens."""
    return to_millis(event.start) - (event.reminder_minutes or 0) * 60_000


def compute_newly_due(
    events: Iterable[CalendarEvent],
    now: datetime,
    notified: AbstractSet[str],
) -> List[str]:
    """
    Ids of events whose reminder window contains ``now``.

    Only active events with a positive ``reminder_minutes`` that have not
    been notified yet are considered. Order follows ``events``.
    """
    now_ms = to_millis(now)
    due = []
    for event in events:
        if not event.reminder_eligible or event.id in notified:
            continue
        if trigger_millis(event) <= now_ms < to_millis(event.start):
            due.append(event.id)
    return due


class ReminderScheduler:
    """Owns the polling task. ``start`` on session open, ``stop`` on close."""

    def __init__(
        self,
        store,
        queue: NotificationQueue,
        clock: Optional[Clock] = None,
        interval: Optional[float] = None,
    ):
        self.store = store
        self.queue = queue
        self.clock = clock or now_in_agenda_tz
        self.interval = settings.REMINDER_POLL_SECONDS if interval is None else interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> List[str]:
        """Run one scan and enqueue what became due. Returns the ids added."""
        due = compute_newly_due(self.store.snapshot(), self.clock(), self.queue.notified)
        added = self.queue.enqueue(due)
        if added:
            logger.info("Reminder window opened for %d event(s): %s", len(added), ", ".join(added))
        return added

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Reminder scheduler started (every %.1fs)", self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Reminder scheduler stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.tick()
            except Exception as e:
                logger.error(f"Reminder tick failed: {str(e)}")
