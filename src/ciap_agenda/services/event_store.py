"""
In-memory Event Store.

Ordered collection of CalendarEvent objects; the source of truth for the
scheduler, the Smart-Add pipeline and every projection. Events are never
hard-deleted: removal is expressed through the ``cancelled`` status.

Change listeners are called after every successful mutation with the full
current event list. The session uses this hook to persist.
"""

import logging
import uuid
from datetime import date
from typing import Callable, Iterable, List, Optional, Tuple

from ciap_agenda.dto import AgendaStats, CalendarEvent, EventStatus, EventType
from ciap_agenda.errors import DuplicateEventError, EventNotFoundError, InvalidEventError
from ciap_agenda.utils.calendar_utils import is_same_day

logger = logging.getLogger(__name__)

ChangeListener = Callable[[List[CalendarEvent]], None]


def new_event_id(existing: Iterable[str] = ()) -> str:
    """Random 9-character id, unique against ``existing``."""
    taken = set(existing)
    while True:
        candidate = uuid.uuid4().hex[:9]
        if candidate not in taken:
            return candidate


def check_time_range(event: CalendarEvent) -> None:
    if event.end < event.start:
        raise InvalidEventError(
            f"Event '{event.title}' ends before it starts ({event.end.isoformat()} < {event.start.isoformat()})"
        )


class EventStore:
    """Ordered, id-unique collection of events."""

    def __init__(self, events: Optional[Iterable[CalendarEvent]] = None):
        self._events: List[CalendarEvent] = []
        self._listeners: List[ChangeListener] = []
        if events:
            self.replace_all(events, notify=False)

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event_id: str) -> bool:
        return self._index_of(event_id) is not None

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def ids(self) -> List[str]:
        return [e.id for e in self._events]

    def snapshot(self) -> Tuple[CalendarEvent, ...]:
        """Deep copies of every event, in store order."""
        return tuple(e.model_copy(deep=True) for e in self._events)

    def get(self, event_id: str) -> CalendarEvent:
        index = self._index_of(event_id)
        if index is None:
            raise EventNotFoundError(event_id)
        return self._events[index].model_copy(deep=True)

    def add(self, event: CalendarEvent) -> CalendarEvent:
        if event.id in self:
            raise DuplicateEventError(f"Event id already exists: {event.id}")
        check_time_range(event)
        self._events.append(event.model_copy(deep=True))
        self._notify()
        return event

    def update(self, event: CalendarEvent) -> CalendarEvent:
        """Replace the stored event that has the same id."""
        index = self._index_of(event.id)
        if index is None:
            raise EventNotFoundError(event.id)
        check_time_range(event)
        self._events[index] = event.model_copy(deep=True)
        self._notify()
        return event

    def replace_all(self, events: Iterable[CalendarEvent], notify: bool = True) -> None:
        staged: List[CalendarEvent] = []
        seen = set()
        for event in events:
            if event.id in seen:
                raise DuplicateEventError(f"Event id already exists: {event.id}")
            seen.add(event.id)
            staged.append(event.model_copy(deep=True))
        self._events = staged
        if notify:
            self._notify()

    def toggle_task(self, event_id: str) -> CalendarEvent:
        """Flip a task between active and completed. Other types are
        returned unchanged."""
        event = self.get(event_id)
        if event.type != EventType.TASK:
            return event
        new_status = EventStatus.ACTIVE if event.status == EventStatus.COMPLETED else EventStatus.COMPLETED
        return self.update(event.model_copy(update={"status": new_status}))

    def toggle_cancelled(self, event_id: str) -> CalendarEvent:
        event = self.get(event_id)
        new_status = EventStatus.ACTIVE if event.status == EventStatus.CANCELLED else EventStatus.CANCELLED
        return self.update(event.model_copy(update={"status": new_status}))

    def events_on(self, day: date) -> List[CalendarEvent]:
        return [e.model_copy(deep=True) for e in self._events if is_same_day(e.start, day)]

    def stats(self) -> AgendaStats:
        def count(predicate) -> int:
            return sum(1 for e in self._events if predicate(e))

        return AgendaStats(
            total=len(self._events),
            lectures=count(lambda e: e.type == EventType.LECTURE),
            meetings=count(lambda e: e.type == EventType.MEETING),
            cancelled=count(lambda e: e.status == EventStatus.CANCELLED),
            completed=count(lambda e: e.status == EventStatus.COMPLETED),
            rescheduled=count(lambda e: e.status == EventStatus.RESCHEDULED),
        )

    def _index_of(self, event_id: str) -> Optional[int]:
        for i, event in enumerate(self._events):
            if event.id == event_id:
                return i
        return None

    def _notify(self) -> None:
        current = list(self.snapshot())
        for listener in self._listeners:
            listener(current)
