"""
Smart-Add Extraction Service

Sends free text plus a reference date to an LLM and asks for the event
fields back as structured output. The response is never trusted as-is:
``validate_extraction`` checks the event type against the closed set,
parses both timestamps and rejects inverted ranges. Any problem becomes an
ExtractionFailure; this module never raises to its caller.
"""

import logging
from datetime import datetime
from typing import Any, Protocol

from langchain.chat_models import init_chat_model
from pydantic import ValidationError

from ciap_agenda.constants import SMART_ADD_SETTINGS
from ciap_agenda.dto import (
    EventType,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    SmartAddResult,
)
from ciap_agenda.smart_add.prompts import smart_add_prompt
from ciap_agenda.utils.datetime_utils import ensure_aware, parse_date_string

logger = logging.getLogger(__name__)


class EventExtractionService(Protocol):
    async def extract(self, text: str, reference: datetime) -> ExtractionResult:
        ...


def validate_extraction(raw: Any) -> ExtractionResult:
    """Turn whatever the service returned into a tagged result."""
    if raw is None:
        return ExtractionFailure(reason="Empty response from extraction service")

    try:
        result = raw if isinstance(raw, SmartAddResult) else SmartAddResult.model_validate(raw)
    except ValidationError as e:
        return ExtractionFailure(reason=f"Malformed extraction response: {e.error_count()} invalid field(s)")

    if not result.title.strip():
        return ExtractionFailure(reason="Extraction response has an empty title")

    try:
        event_type = EventType(result.type.strip())
    except ValueError:
        return ExtractionFailure(reason=f"Unsupported event type: {result.type!r}")

    start = parse_date_string(result.start)
    end = parse_date_string(result.end)
    if start is None or end is None:
        return ExtractionFailure(reason=f"Unparseable timestamps: start={result.start!r} end={result.end!r}")
    if end < start:
        return ExtractionFailure(reason="Extracted event ends before it starts")

    return ExtractionSuccess(
        title=result.title.strip(),
        description=result.description,
        start=start,
        end=end,
        type=event_type,
        responsible=result.responsible,
        participants=[p for p in (result.participants or []) if p and p.strip()],
        emoji=result.emoji,
    )


class LLMEventExtractor:
    """
    Extraction service backed by a LangChain chat model.

    The chat model is created on first use so the service can start
    without credentials; a missing key then shows up as a failed extraction.
    """

    def __init__(self, model=None):
        self._model = model

    def _get_model(self):
        if self._model is None:
            if not SMART_ADD_SETTINGS.API_KEY:
                raise RuntimeError("LLM_API_KEY is not configured")
            self._model = init_chat_model(
                model=SMART_ADD_SETTINGS.MODEL,
                model_provider=SMART_ADD_SETTINGS.PROVIDER,
                temperature=SMART_ADD_SETTINGS.TEMPERATURE,
                api_key=SMART_ADD_SETTINGS.API_KEY,
            )
        return self._model

    async def extract(self, text: str, reference: datetime) -> ExtractionResult:
        try:
            chain = smart_add_prompt | self._get_model().with_structured_output(SmartAddResult)
            raw = await chain.ainvoke({"text": text, "reference": ensure_aware(reference).isoformat()})
        except Exception as e:
            logger.error(f"Smart-Add extraction error: {str(e)}")
            return ExtractionFailure(reason=f"Extraction service error: {str(e)}")

        result = validate_extraction(raw)
        if not result.ok:
            logger.warning("Smart-Add response rejected: %s", result.reason)
        return result
