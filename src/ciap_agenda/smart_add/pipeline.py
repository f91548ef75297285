"""
Smart-Add Pipeline

free text -> extraction service -> new CalendarEvent in the store.

Either exactly one event is appended or the store is left untouched. Only
one request may be in flight per pipeline. Results that come back after the
owning session was closed are discarded.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ciap_agenda.constants import EVENT_TYPE_COLORS, FALLBACK_COLOR, SMART_ADD_SETTINGS
from ciap_agenda.dto import CalendarEvent, EventStatus, ExtractionFailure, ExtractionSuccess
from ciap_agenda.errors import AgendaError, SmartAddBusyError
from ciap_agenda.services.event_store import EventStore, new_event_id
from ciap_agenda.utils.datetime_utils import now_in_agenda_tz

logger = logging.getLogger(__name__)


@dataclass
class SmartAddOutcome:
    event: Optional[CalendarEvent] = None
    reason: Optional[str] = None

    @property
    def created(self) -> bool:
        return self.event is not None


def color_for_type(event_type) -> str:
    key = getattr(event_type, "value", event_type)
    return EVENT_TYPE_COLORS.get(key, FALLBACK_COLOR)


def build_event(result: ExtractionSuccess, created_by: str, existing_ids=()) -> CalendarEvent:
    return CalendarEvent(
        id=new_event_id(existing_ids),
        title=result.title,
        description=result.description,
        responsible=result.responsible,
        participants=list(result.participants),
        created_by=created_by,
        start=result.start,
        end=result.end,
        type=result.type,
        status=EventStatus.ACTIVE,
        reminder_minutes=SMART_ADD_SETTINGS.DEFAULT_REMINDER_MINUTES,
        emoji=result.emoji or SMART_ADD_SETTINGS.DEFAULT_EMOJI,
        color=color_for_type(result.type),
    )


class SmartAddPipeline:
    def __init__(self, store: EventStore, extractor, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.extractor = extractor
        self.clock = clock or now_in_agenda_tz
        self._in_flight = False
        self._generation = 0

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def invalidate(self) -> None:
        """Make any request currently in flight stale."""
        self._generation += 1

    async def submit(self, text: str, created_by: str, reference: Optional[datetime] = None) -> SmartAddOutcome:
        """
        Create an event from natural-language text.

        Args:
            text: Free-form description of the appointment
            created_by: Value for the new event's createdBy
            reference: Date used to resolve relative expressions (defaults to now)

        Raises:
            ValueError: ``text`` is blank
            SmartAddBusyError: another request is still in flight
        """
        if not text or not text.strip():
            raise ValueError("Smart-Add text must not be empty")
        if self._in_flight:
            raise SmartAddBusyError("A Smart-Add request is already being processed")

        generation = self._generation
        self._in_flight = True
        try:
            result = await self.extractor.extract(text.strip(), reference or self.clock())
        except Exception as e:
            logger.error(f"Smart-Add extractor raised: {str(e)}")
            result = ExtractionFailure(reason=f"Extraction service error: {str(e)}")
        finally:
            self._in_flight = False

        if not isinstance(result, (ExtractionSuccess, ExtractionFailure)):
            result = ExtractionFailure(reason="Extraction service returned no result")

        if generation != self._generation:
            logger.info("Discarding Smart-Add result: session closed while the request was in flight")
            return SmartAddOutcome(reason="Session closed before the request completed")

        if not result.ok:
            return SmartAddOutcome(reason=result.reason)

        try:
            event = self.store.add(build_event(result, created_by, self.store.ids()))
        except AgendaError as e:
            logger.error(f"Smart-Add event rejected by store: {str(e)}")
            return SmartAddOutcome(reason=str(e))

        logger.info("Smart-Add created event %s (%s)", event.id, event.title)
        return SmartAddOutcome(event=event)
