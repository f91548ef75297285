"""
Agenda Session

One process-scoped owner for everything the operator works with: the event
store, the notification queue, the reminder scheduler, the Smart-Add
pipeline, persistence, and the operator identity (name + role).

Lifecycle:
    session = AgendaSession(persistence)
    await session.open()    # load (or seed) state, start the reminder timer
    ...
    await session.close()   # stop the timer, make in-flight Smart-Add stale

Every store mutation is written through to persistence.
"""

import logging
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ciap_agenda.config import settings
from ciap_agenda.constants import AGENDA_TIMEZONE, ROLE_LABELS
from ciap_agenda.db.persistence import AgendaPersistence
from ciap_agenda.dto import CalendarEvent, EventStatus, EventType, ShareLink, UserRole
from ciap_agenda.errors import InvalidEventError
from ciap_agenda.reminders import NotificationQueue, ReminderScheduler
from ciap_agenda.services.event_store import EventStore, new_event_id
from ciap_agenda.services.sharing import share_event
from ciap_agenda.smart_add import LLMEventExtractor, SmartAddOutcome, SmartAddPipeline, color_for_type
from ciap_agenda.utils.datetime_utils import now_in_agenda_tz, to_agenda_tz

logger = logging.getLogger(__name__)

# Fields only the secretary may change
SECRETARY_ONLY_FIELDS = {"reminder_minutes"}


def default_events(now: datetime) -> List[CalendarEvent]:
    """Sample agenda for a first run, placed on ``now``'s day."""
    today = to_agenda_tz(now).date()

    def at(hour: int) -> datetime:
        return AGENDA_TIMEZONE.localize(datetime.combine(today, time(hour)))

    return [
        CalendarEvent(
            id="1",
            title="Despacho de Comando: CIAP 2024",
            responsible="Coronel Diretor",
            participants=["Estado Maior"],
            created_by="Secretaria CIAP",
            start=at(9),
            end=at(11),
            type=EventType.MEETING,
            reminder_minutes=60,
            emoji="📜",
            color="from-slate-900 to-black",
        ),
        CalendarEvent(
            id="2",
            title="Formatura e Premiação CIAP",
            responsible="Diretoria de Saúde",
            participants=["Todo o Efetivo"],
            created_by="Secretaria CIAP",
            start=at(14),
            end=at(17),
            type=EventType.CEREMONY,
            reminder_minutes=30,
            emoji="🎖️",
            color="from-amber-600 to-orange-800",
        ),
        CalendarEvent(
            id="3",
            title="Revisão de Protocolos Psicológicos",
            responsible="Gabinete",
            participants=[],
            created_by="Secretaria CIAP",
            start=at(10),
            end=at(11),
            type=EventType.TASK,
            reminder_minutes=15,
            emoji="✅",
            color="from-emerald-600 to-teal-900",
        ),
    ]


class AgendaSession:
    def __init__(
        self,
        persistence: AgendaPersistence,
        extractor=None,
        clock=None,
        scheduler_interval: Optional[float] = None,
        seed_defaults: Optional[bool] = None,
    ):
        self.persistence = persistence
        self.clock = clock or now_in_agenda_tz
        self.store = EventStore()
        self.queue = NotificationQueue()
        self.scheduler = ReminderScheduler(self.store, self.queue, clock=self.clock, interval=scheduler_interval)
        self.pipeline = SmartAddPipeline(self.store, extractor or LLMEventExtractor(), clock=self.clock)
        self.seed_defaults = settings.SEED_DEFAULT_EVENTS if seed_defaults is None else seed_defaults
        self.operator_name = ""
        self.role = UserRole.SECRETARIA
        self._loaded = False

    # ------------------------------------------------------------------ #
    # Lifecycle                                                          #
    # ------------------------------------------------------------------ #

    def load(self) -> None:
        if self._loaded:
            return
        saved = self.persistence.load_events()
        if saved is None:
            saved = default_events(self.clock()) if self.seed_defaults else []
            logger.info("No saved agenda found, starting with %d sample event(s)", len(saved))
        self.store.replace_all(saved, notify=False)
        self.store.add_listener(self._persist_events)
        self._persist_events(list(self.store.snapshot()))

        self.operator_name = self.persistence.load_operator()
        self.role = self.persistence.load_role()
        self._loaded = True

    async def open(self) -> None:
        self.load()
        self.scheduler.start()

    async def close(self) -> None:
        self.pipeline.invalidate()
        await self.scheduler.stop()

    def _persist_events(self, events: List[CalendarEvent]) -> None:
        self.persistence.save_events(events)

    # ------------------------------------------------------------------ #
    # Operator                                                           #
    # ------------------------------------------------------------------ #

    @property
    def created_by_label(self) -> str:
        return self.operator_name or ROLE_LABELS[self.role.value]

    def set_operator(self, name: str) -> None:
        self.operator_name = (name or "").strip()
        self.persistence.save_session(self.operator_name, self.role)

    def set_role(self, role: UserRole) -> None:
        self.role = UserRole(role)
        self.persistence.save_session(self.operator_name, self.role)

    def _require_secretary(self, action: str) -> None:
        if self.role != UserRole.SECRETARIA:
            raise PermissionError(f"Only the secretary can {action}")

    # ------------------------------------------------------------------ #
    # Events                                                             #
    # ------------------------------------------------------------------ #

    def list_events(self, day: Optional[date] = None) -> List[CalendarEvent]:
        if day is not None:
            return self.store.events_on(day)
        return list(self.store.snapshot())

    def get_event(self, event_id: str) -> CalendarEvent:
        return self.store.get(event_id)

    def create_event(self, fields: Dict[str, Any]) -> CalendarEvent:
        """Manual registration. ``fields`` uses attribute names."""
        data = dict(fields)
        data["id"] = new_event_id(self.store.ids())
        data.setdefault("status", EventStatus.ACTIVE)
        data["created_by"] = data.get("created_by") or self.created_by_label
        if not data.get("color"):
            data["color"] = color_for_type(data.get("type"))
        try:
            event = CalendarEvent.model_validate(data)
        except ValidationError as e:
            raise InvalidEventError(str(e)) from e
        return self.store.add(event)

    def update_event(self, event_id: str, changes: Dict[str, Any]) -> CalendarEvent:
        """Edit any field except the id."""
        changes = {k: v for k, v in changes.items() if k != "id"}
        if SECRETARY_ONLY_FIELDS & changes.keys():
            self._require_secretary("configure reminders")
        current = self.store.get(event_id)
        if "status" in changes:
            was_cancelled = current.status == EventStatus.CANCELLED
            if (changes["status"] == EventStatus.CANCELLED) != was_cancelled:
                self._require_secretary("cancel or reactivate events")
        try:
            updated = CalendarEvent.model_validate({**current.model_dump(), **changes})
        except ValidationError as e:
            raise InvalidEventError(str(e)) from e
        return self.store.update(updated)

    def toggle_task(self, event_id: str) -> CalendarEvent:
        return self.store.toggle_task(event_id)

    def toggle_cancelled(self, event_id: str) -> CalendarEvent:
        self._require_secretary("cancel or reactivate events")
        return self.store.toggle_cancelled(event_id)

    def share_event(self, event_id: str) -> ShareLink:
        """Build the share link and acknowledge any reminder for the event."""
        link = share_event(self.store.get(event_id))
        self.queue.acknowledge(event_id)
        return link

    # ------------------------------------------------------------------ #
    # Reminders                                                          #
    # ------------------------------------------------------------------ #

    def poll_reminders(self) -> List[str]:
        return self.scheduler.tick()

    def pending_notifications(self) -> List[CalendarEvent]:
        return [self.store.get(event_id) for event_id in self.queue.pending]

    def current_notification(self) -> Optional[CalendarEvent]:
        front = self.queue.front()
        return self.store.get(front) if front is not None else None

    # ------------------------------------------------------------------ #
    # Smart-Add                                                          #
    # ------------------------------------------------------------------ #

    async def smart_add(self, text: str) -> SmartAddOutcome:
        return await self.pipeline.submit(text, created_by=self.created_by_label)
