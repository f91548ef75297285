"""
Pytest configuration for agenda tests.
"""

from datetime import datetime, timedelta
from typing import Optional

import pytest

from ciap_agenda.constants import AGENDA_TIMEZONE
from ciap_agenda.db.persistence import AgendaPersistence, MemoryStorage
from ciap_agenda.dto import CalendarEvent, EventStatus, EventType, ExtractionFailure, ExtractionSuccess
from ciap_agenda.services.session import AgendaSession


def pytest_configure(config):
    """Configure pytest with asyncio marker."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test."
    )


def at(hour: int, minute: int = 0, day: int = 19) -> datetime:
    return AGENDA_TIMEZONE.localize(datetime(2026, 10, day, hour, minute))


class FixedClock:
    """Controllable clock; tests move it with ``set`` / ``advance``."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeExtractor:
    """Extraction service double returning a preset result."""

    def __init__(self, result=None):
        self.result = result
        self.calls = []

    async def extract(self, text, reference):
        self.calls.append((text, reference))
        return self.result


def make_event(
    event_id: str = "E",
    start: Optional[datetime] = None,
    duration_minutes: int = 60,
    reminder_minutes: Optional[int] = 60,
    status: EventStatus = EventStatus.ACTIVE,
    type: EventType = EventType.MEETING,
    **extra,
) -> CalendarEvent:
    start = start or at(15)
    return CalendarEvent(
        id=event_id,
        title=extra.pop("title", f"Evento {event_id}"),
        start=start,
        end=start + timedelta(minutes=duration_minutes),
        type=type,
        status=status,
        responsible=extra.pop("responsible", "Gabinete"),
        created_by=extra.pop("created_by", "Secretaria CIAP"),
        reminder_minutes=reminder_minutes,
        **extra,
    )


def make_success(**overrides) -> ExtractionSuccess:
    fields = dict(
        title="Reunião estratégica",
        start=at(15, day=20),
        end=at(16, day=20),
        type=EventType.MEETING,
        responsible="Cel. Souza",
        participants=["Maj. Silva"],
        emoji="🪖",
    )
    fields.update(overrides)
    return ExtractionSuccess(**fields)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(at(13, 30))


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor(make_success())


@pytest.fixture
def session(storage, extractor, clock) -> AgendaSession:
    s = AgendaSession(
        AgendaPersistence(storage),
        extractor=extractor,
        clock=clock,
        scheduler_interval=3600,
        seed_defaults=False,
    )
    s.load()
    return s


@pytest.fixture
def failing_extractor() -> FakeExtractor:
    return FakeExtractor(ExtractionFailure(reason="service unavailable"))
