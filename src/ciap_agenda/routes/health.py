from fastapi import APIRouter, Depends

from ciap_agenda.config import settings
from ciap_agenda.routes.deps import get_session
from ciap_agenda.routes.dto import HealthResponse
from ciap_agenda.services.session import AgendaSession

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def health_check(session: AgendaSession = Depends(get_session)):
    """Health check with the state of the reminder timer and Smart-Add."""
    health_status = {"status": "ok", "service": "agenda", "components": {}}

    health_status["components"]["reminder_scheduler"] = "running" if session.scheduler.running else "stopped"
    health_status["components"]["smart_add"] = "busy" if session.pipeline.in_flight else "ready"
    health_status["components"]["llm_api_key"] = "configured" if settings.LLM_API_KEY else "missing"
    health_status["components"]["events"] = len(session.store)

    if not session.scheduler.running:
        health_status["status"] = "degraded"
    return health_status
