"""
Routes Data Transfer Objects (DTOs)

This module contains all Pydantic models used by API routes:
- Request models for event creation/edit, session and Smart-Add
- Response models for sharing, reminders, calendar projections and health
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ciap_agenda.dto import CalendarEvent, EventStatus, EventType, UserRole


class EventCreate(BaseModel):
    """Request model for manual event registration."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    description: Optional[str] = None
    start: datetime
    end: datetime
    type: EventType
    responsible: str = Field(min_length=1)
    participants: List[str] = Field(default_factory=list)
    reminder_minutes: Optional[int] = Field(default=None, alias="reminderMinutes")
    emoji: Optional[str] = None
    color: Optional[str] = None


class EventUpdate(BaseModel):
    """Partial edit; only fields that are sent are changed."""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    type: Optional[EventType] = None
    status: Optional[EventStatus] = None
    responsible: Optional[str] = None
    participants: Optional[List[str]] = None
    reminder_minutes: Optional[int] = Field(default=None, alias="reminderMinutes")
    emoji: Optional[str] = None
    color: Optional[str] = None


class SessionInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    operator_name: str = Field(alias="operatorName")
    role: UserRole
    created_by_label: str = Field(alias="createdByLabel")


class SessionUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    operator_name: Optional[str] = Field(default=None, alias="operatorName")
    role: Optional[UserRole] = None


class SmartAddRequest(BaseModel):
    """Request model for natural-language event creation."""
    text: str


class SmartAddResponse(BaseModel):
    created: bool
    event: Optional[CalendarEvent] = None
    message: str


class ShareResponse(BaseModel):
    text: str
    url: str


class ReminderQueueResponse(BaseModel):
    pending: List[CalendarEvent]
    front: Optional[CalendarEvent] = None


class PollResponse(BaseModel):
    added: List[str]
    pending: List[str]


class CalendarDay(BaseModel):
    day: date
    current_month: bool = True
    events: List[CalendarEvent] = []


class DashboardResponse(BaseModel):
    total: int
    open: int
    completed: int
    cancelled: int
    rescheduled: int
    lectures: int
    meetings: int
    active_total: int


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: Optional[str] = None
    components: Optional[dict] = None
