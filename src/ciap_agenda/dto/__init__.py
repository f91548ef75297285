"""
Agenda Data Models

This module contains the models shared by every layer:
- CalendarEvent, the entity held by the event store
- SmartAddResult, the structured shape requested from the LLM
- ExtractionSuccess / ExtractionFailure, the tagged result of an extraction
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ciap_agenda.utils.datetime_utils import ensure_aware


class EventType(str, Enum):
    MEETING = "meeting"
    LECTURE = "lecture"
    EVENT = "event"
    TASK = "task"
    CEREMONY = "ceremony"


class EventStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"
    COMPLETED = "completed"
    PENDING = "pending"


class UserRole(str, Enum):
    CHEFE = "chefe"
    SECRETARIA = "secretaria"


class CalendarEvent(BaseModel):
    """A single agenda entry.

    Serialized with the stored field names (``createdBy``,
    ``reminderMinutes``) so saved agendas stay readable across versions.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)

    id: str
    title: str
    description: Optional[str] = None
    start: datetime
    end: datetime
    type: EventType
    status: EventStatus = EventStatus.ACTIVE
    responsible: str = ""
    participants: List[str] = Field(default_factory=list)
    created_by: str = Field(default="", alias="createdBy")
    reminder_minutes: Optional[int] = Field(default=None, alias="reminderMinutes")
    emoji: Optional[str] = None
    color: Optional[str] = None

    @field_validator("start", "end")
    @classmethod
    def _localize(cls, value: datetime) -> datetime:
        return ensure_aware(value)

    @field_validator("reminder_minutes")
    @classmethod
    def _clamp_reminder(cls, value: Optional[int]) -> Optional[int]:
        # negative lead times mean "no reminder"
        if value is not None and value < 0:
            return 0
        return value

    @property
    def reminder_eligible(self) -> bool:
        return self.status == EventStatus.ACTIVE and bool(self.reminder_minutes)

    def to_record(self) -> dict:
        """Storage/wire representation (ISO timestamps, stored field names)."""
        return self.model_dump(mode="json", by_alias=True)


class SmartAddResult(BaseModel):
    """Structured event fields extracted from free text."""
    title: str = Field(description="Título curto do compromisso")
    description: Optional[str] = Field(default=None, description="Descrição ou pauta")
    start: str = Field(description="Início em ISO 8601 (YYYY-MM-DDTHH:MM:SS com fuso)")
    end: str = Field(description="Fim em ISO 8601 (YYYY-MM-DDTHH:MM:SS com fuso)")
    type: str = Field(description="Um de: meeting, lecture, event, task, ceremony")
    responsible: str = Field(description="Quem solicitou ou o Chefe")
    participants: Optional[List[str]] = Field(default=None, description="Autoridades ou equipes presentes")
    emoji: Optional[str] = Field(default=None, description="Um emoji representando o compromisso")


@dataclass
class ExtractionSuccess:
    """Validated fields returned by the extraction service."""
    title: str
    start: datetime
    end: datetime
    type: EventType
    responsible: str
    description: Optional[str] = None
    participants: List[str] = field(default_factory=list)
    emoji: Optional[str] = None
    ok: bool = field(default=True, init=False)


@dataclass
class ExtractionFailure:
    """The service errored or returned something unusable."""
    reason: str
    ok: bool = field(default=False, init=False)


ExtractionResult = Union[ExtractionSuccess, ExtractionFailure]


@dataclass
class ShareLink:
    """Preformatted event summary and its messaging deep link."""
    text: str
    url: str


@dataclass
class AgendaStats:
    total: int
    lectures: int
    meetings: int
    cancelled: int
    completed: int
    rescheduled: int

    @property
    def open(self) -> int:
        return self.total - self.completed - self.cancelled

    @property
    def active_total(self) -> int:
        return self.total - self.cancelled
