from fastapi import APIRouter, Depends

from ciap_agenda.routes.deps import get_session
from ciap_agenda.routes.dto import SessionInfo, SessionUpdate
from ciap_agenda.services.session import AgendaSession

router = APIRouter()


def _info(session: AgendaSession) -> SessionInfo:
    return SessionInfo(
        operator_name=session.operator_name,
        role=session.role,
        created_by_label=session.created_by_label,
    )


@router.get("/", response_model=SessionInfo)
def get_session_info(session: AgendaSession = Depends(get_session)):
    return _info(session)


@router.put("/", response_model=SessionInfo)
def update_session(payload: SessionUpdate, session: AgendaSession = Depends(get_session)):
    """Switch operator name and/or role (chefe / secretaria)."""
    if payload.operator_name is not None:
        session.set_operator(payload.operator_name)
    if payload.role is not None:
        session.set_role(payload.role)
    return _info(session)
