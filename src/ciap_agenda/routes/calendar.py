from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends

from ciap_agenda.routes.deps import get_session
from ciap_agenda.routes.dto import CalendarDay, DashboardResponse
from ciap_agenda.services.session import AgendaSession
from ciap_agenda.utils.calendar_utils import month_days, week_days
from ciap_agenda.utils.datetime_utils import to_agenda_tz

router = APIRouter()


def _reference_day(day: Optional[date], session: AgendaSession) -> date:
    return day or to_agenda_tz(session.clock()).date()


@router.get("/month", response_model=List[CalendarDay])
def month(day: Optional[date] = None, session: AgendaSession = Depends(get_session)):
    """42-cell month grid around ``day`` (default today), Sunday first."""
    cells = month_days(_reference_day(day, session))
    return [
        CalendarDay(day=cell["date"], current_month=cell["current_month"], events=session.list_events(cell["date"]))
        for cell in cells
    ]


@router.get("/week", response_model=List[CalendarDay])
def week(day: Optional[date] = None, session: AgendaSession = Depends(get_session)):
    return [
        CalendarDay(day=d, events=session.list_events(d))
        for d in week_days(_reference_day(day, session))
    ]


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(session: AgendaSession = Depends(get_session)):
    stats = session.store.stats()
    return DashboardResponse(
        total=stats.total,
        open=stats.open,
        completed=stats.completed,
        cancelled=stats.cancelled,
        rescheduled=stats.rescheduled,
        lectures=stats.lectures,
        meetings=stats.meetings,
        active_total=stats.active_total,
    )
