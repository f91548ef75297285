from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
import logging
import time

from ciap_agenda.errors import SmartAddBusyError
from ciap_agenda.routes.deps import get_session
from ciap_agenda.routes.dto import SmartAddRequest, SmartAddResponse
from ciap_agenda.services.session import AgendaSession

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=SmartAddResponse, status_code=201)
async def smart_add(request: SmartAddRequest, session: AgendaSession = Depends(get_session)):
    """
    Create an event from a natural-language description.

    Flow:
    1. Send text + today's date to the extraction service
    2. Validate the structured answer
    3. Append exactly one event, or nothing at all (422)
    """
    route_start_time = time.time()
    try:
        outcome = await session.smart_add(request.text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SmartAddBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))

    logger.info("Smart-Add processed in %.3f seconds (created=%s)", time.time() - route_start_time, outcome.created)

    if not outcome.created:
        body = SmartAddResponse(
            created=False,
            message=f"Nenhum evento foi criado: {outcome.reason}",
        )
        return JSONResponse(status_code=422, content=body.model_dump(mode="json"))

    return SmartAddResponse(
        created=True,
        event=outcome.event,
        message="Evento criado com sucesso",
    )
