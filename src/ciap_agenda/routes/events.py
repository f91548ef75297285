from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
import logging

from ciap_agenda.dto import CalendarEvent
from ciap_agenda.errors import DuplicateEventError, EventNotFoundError, InvalidEventError
from ciap_agenda.routes.deps import get_session
from ciap_agenda.routes.dto import EventCreate, EventUpdate, ShareResponse
from ciap_agenda.services.session import AgendaSession

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[CalendarEvent])
def list_events(day: Optional[date] = None, session: AgendaSession = Depends(get_session)):
    """All events in registration order, or only those starting on ``day``."""
    return session.list_events(day)


@router.post("/", response_model=CalendarEvent, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, session: AgendaSession = Depends(get_session)):
    try:
        return session.create_event(payload.model_dump())
    except (InvalidEventError, DuplicateEventError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{event_id}", response_model=CalendarEvent)
def get_event(event_id: str, session: AgendaSession = Depends(get_session)):
    try:
        return session.get_event(event_id)
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{event_id}", response_model=CalendarEvent)
def update_event(event_id: str, payload: EventUpdate, session: AgendaSession = Depends(get_session)):
    try:
        return session.update_event(event_id, payload.model_dump(exclude_unset=True))
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except InvalidEventError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{event_id}/toggle-task", response_model=CalendarEvent)
def toggle_task(event_id: str, session: AgendaSession = Depends(get_session)):
    """Complete or reactivate a task. Non-task events come back unchanged."""
    try:
        return session.toggle_task(event_id)
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{event_id}/toggle-cancel", response_model=CalendarEvent)
def toggle_cancel(event_id: str, session: AgendaSession = Depends(get_session)):
    try:
        return session.toggle_cancelled(event_id)
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.post("/{event_id}/share", response_model=ShareResponse)
def share(event_id: str, session: AgendaSession = Depends(get_session)):
    """
    Build the WhatsApp summary for an event.

    Sharing is also the acknowledgment of its reminder: the event leaves the
    pending queue and will not be queued again.
    """
    try:
        link = session.share_event(event_id)
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    logger.info("Event %s shared", event_id)
    return ShareResponse(text=link.text, url=link.url)
