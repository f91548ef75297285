from fastapi import APIRouter, Depends

from ciap_agenda.routes.deps import get_session
from ciap_agenda.routes.dto import PollResponse, ReminderQueueResponse
from ciap_agenda.services.session import AgendaSession

router = APIRouter()


@router.get("/", response_model=ReminderQueueResponse)
def pending(session: AgendaSession = Depends(get_session)):
    """Pending reminders; ``front`` is the one to show the operator."""
    return ReminderQueueResponse(
        pending=session.pending_notifications(),
        front=session.current_notification(),
    )


@router.post("/poll", response_model=PollResponse)
def poll(session: AgendaSession = Depends(get_session)):
    """Run one reminder scan now instead of waiting for the next tick."""
    added = session.poll_reminders()
    return PollResponse(added=added, pending=session.queue.pending)
