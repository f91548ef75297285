"""
Notification Queue

Pending reminder ids in insertion order, plus the set of ids already
notified. Acknowledging an id (the share action) is the only way to drain
the queue, and it marks the id as notified for the rest of the process.
Nothing here is persisted: a restart forgets which events were notified.
"""

import logging
from typing import FrozenSet, Iterable, List, Optional

logger = logging.getLogger(__name__)


class NotificationQueue:
    def __init__(self):
        self._pending: List[str] = []
        self._notified: set = set()

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, event_id: str) -> bool:
        return event_id in self._pending

    @property
    def pending(self) -> List[str]:
        return list(self._pending)

    @property
    def notified(self) -> FrozenSet[str]:
        return frozenset(self._notified)

    def is_notified(self, event_id: str) -> bool:
        return event_id in self._notified

    def enqueue(self, event_ids: Iterable[str]) -> List[str]:
        """
        Merge ids into the pending list.

        Existing order is kept and ids already pending are skipped.

        Returns:
            The ids that were actually added
        """
        added = []
        for event_id in event_ids:
            if event_id in self._pending:
                continue
            self._pending.append(event_id)
            added.append(event_id)
        return added

    def front(self) -> Optional[str]:
        """The earliest pending id (the one surfaced to the operator)."""
        return self._pending[0] if self._pending else None

    def acknowledge(self, event_id: str) -> None:
        """Drop ``event_id`` from the pending list and never queue it again."""
        self._notified.add(event_id)
        if event_id in self._pending:
            self._pending.remove(event_id)
            logger.info("Reminder for event %s acknowledged", event_id)
