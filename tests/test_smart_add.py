"""
Smart-Add Tests
===============

Extraction validation, the LLM-backed extractor (with a fake chat model),
and pipeline atomicity: one new event on success, nothing on failure.
"""

import asyncio

import pytest
from langchain_core.runnables import RunnableLambda

from ciap_agenda.constants import EVENT_TYPE_COLORS, FALLBACK_COLOR
from ciap_agenda.dto import EventStatus, EventType, ExtractionFailure, SmartAddResult
from ciap_agenda.errors import SmartAddBusyError
from ciap_agenda.services.event_store import EventStore
from ciap_agenda.smart_add import LLMEventExtractor, SmartAddPipeline, color_for_type, validate_extraction

from conftest import FakeExtractor, FixedClock, at, make_event, make_success


def payload(**overrides) -> dict:
    data = {
        "title": "Palestra sobre saúde mental",
        "description": "Auditório do Comando Geral",
        "start": "2026-10-20T15:00:00-03:00",
        "end": "2026-10-20T17:00:00-03:00",
        "type": "lecture",
        "responsible": "Chefe do CIAP",
        "participants": ["Cel. Souza", "Maj. Silva"],
        "emoji": "🎤",
    }
    data.update(overrides)
    return data


class FakeChatModel:
    """Stands in for a LangChain chat model with structured output."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.prompts = []
        self.schema = None

    def with_structured_output(self, schema):
        self.schema = schema

        async def respond(prompt_value):
            self.prompts.append(prompt_value.to_string())
            if self.error:
                raise self.error
            return self.response

        return RunnableLambda(respond)


# =============================================================================
# SECTION 1: RESPONSE VALIDATION
# =============================================================================

class TestValidateExtraction:
    def test_valid_payload(self):
        result = validate_extraction(payload())
        assert result.ok
        assert result.type == EventType.LECTURE
        assert result.start == at(15, day=20)
        assert result.participants == ["Cel. Souza", "Maj. Silva"]

    def test_accepts_model_instance(self):
        assert validate_extraction(SmartAddResult(**payload())).ok

    def test_empty_response(self):
        assert not validate_extraction(None).ok

    def test_type_outside_closed_set_is_rejected(self):
        result = validate_extraction(payload(type="party"))
        assert isinstance(result, ExtractionFailure)
        assert "party" in result.reason

    def test_missing_required_field(self):
        data = payload()
        del data["responsible"]
        assert not validate_extraction(data).ok

    def test_unparseable_dates(self):
        assert not validate_extraction(payload(start="amanhã às 15h")).ok

    def test_inverted_range(self):
        assert not validate_extraction(payload(end="2026-10-20T14:00:00-03:00")).ok

    def test_blank_title(self):
        assert not validate_extraction(payload(title="   ")).ok

    def test_optional_fields_default(self):
        data = payload()
        del data["participants"]
        del data["emoji"]
        result = validate_extraction(data)
        assert result.participants == []
        assert result.emoji is None


# =============================================================================
# SECTION 2: LLM EXTRACTOR
# =============================================================================

class TestLLMEventExtractor:
    @pytest.mark.asyncio
    async def test_extract_sends_text_and_reference(self):
        model = FakeChatModel(response=SmartAddResult(**payload()))
        result = await LLMEventExtractor(model=model).extract("Palestra amanhã às 15h", at(13, 30))

        assert result.ok
        assert model.schema is SmartAddResult
        assert "Palestra amanhã às 15h" in model.prompts[0]
        assert "2026-10-19T13:30:00-03:00" in model.prompts[0]

    @pytest.mark.asyncio
    async def test_service_error_becomes_failure(self):
        model = FakeChatModel(error=ConnectionError("timeout"))
        result = await LLMEventExtractor(model=model).extract("qualquer coisa", at(13))
        assert not result.ok
        assert "timeout" in result.reason

    @pytest.mark.asyncio
    async def test_bad_type_becomes_failure(self):
        model = FakeChatModel(response=payload(type="party"))
        result = await LLMEventExtractor(model=model).extract("festa", at(13))
        assert not result.ok

    @pytest.mark.asyncio
    async def test_missing_api_key_becomes_failure(self, monkeypatch):
        from ciap_agenda.constants import SMART_ADD_SETTINGS
        monkeypatch.setattr(SMART_ADD_SETTINGS, "API_KEY", "")
        result = await LLMEventExtractor().extract("reunião", at(13))
        assert not result.ok
        assert "LLM_API_KEY" in result.reason


# =============================================================================
# SECTION 3: PIPELINE
# =============================================================================

class TestSmartAddPipeline:
    def setup_method(self):
        self.store = EventStore([make_event("1"), make_event("2")])
        self.clock = FixedClock(at(13, 30))

    @pytest.mark.asyncio
    async def test_success_appends_exactly_one_event(self):
        extractor = FakeExtractor(make_success())
        pipeline = SmartAddPipeline(self.store, extractor, clock=self.clock)

        outcome = await pipeline.submit("  Reunião amanhã às 15h  ", created_by="Sgt. Lima")

        assert outcome.created
        assert len(self.store) == 3
        event = outcome.event
        assert event.id not in {"1", "2"}
        assert self.store.ids()[-1] == event.id
        assert event.status == EventStatus.ACTIVE
        assert event.reminder_minutes == 60
        assert event.color == EVENT_TYPE_COLORS["meeting"]
        assert event.created_by == "Sgt. Lima"
        assert event.emoji == "🪖"
        assert extractor.calls == [("Reunião amanhã às 15h", at(13, 30))]

    @pytest.mark.asyncio
    async def test_default_emoji(self):
        pipeline = SmartAddPipeline(self.store, FakeExtractor(make_success(emoji=None)), clock=self.clock)
        outcome = await pipeline.submit("tarefa", created_by="x")
        assert outcome.event.emoji == "📅"

    @pytest.mark.asyncio
    async def test_failure_leaves_store_unchanged(self, failing_extractor):
        before = [e.model_dump() for e in self.store.snapshot()]
        pipeline = SmartAddPipeline(self.store, failing_extractor, clock=self.clock)

        outcome = await pipeline.submit("algo", created_by="x")

        assert not outcome.created
        assert outcome.reason == "service unavailable"
        assert [e.model_dump() for e in self.store.snapshot()] == before

    @pytest.mark.asyncio
    async def test_raising_extractor_is_a_failure(self):
        class Exploding:
            async def extract(self, text, reference):
                raise RuntimeError("boom")

        pipeline = SmartAddPipeline(self.store, Exploding(), clock=self.clock)
        outcome = await pipeline.submit("algo", created_by="x")
        assert not outcome.created
        assert len(self.store) == 2
        assert not pipeline.in_flight

    @pytest.mark.asyncio
    async def test_blank_text_rejected_without_calling_service(self):
        extractor = FakeExtractor(make_success())
        pipeline = SmartAddPipeline(self.store, extractor, clock=self.clock)
        with pytest.raises(ValueError):
            await pipeline.submit("   ", created_by="x")
        assert extractor.calls == []

    @pytest.mark.asyncio
    async def test_second_submission_while_in_flight_is_refused(self):
        release = asyncio.Event()

        class Slow:
            async def extract(self, text, reference):
                await release.wait()
                return make_success()

        pipeline = SmartAddPipeline(self.store, Slow(), clock=self.clock)
        first = asyncio.create_task(pipeline.submit("um", created_by="x"))
        await asyncio.sleep(0)
        assert pipeline.in_flight

        with pytest.raises(SmartAddBusyError):
            await pipeline.submit("dois", created_by="x")

        release.set()
        outcome = await first
        assert outcome.created
        assert len(self.store) == 3
        assert not pipeline.in_flight

    @pytest.mark.asyncio
    async def test_stale_result_is_discarded(self):
        release = asyncio.Event()

        class Slow:
            async def extract(self, text, reference):
                await release.wait()
                return make_success()

        pipeline = SmartAddPipeline(self.store, Slow(), clock=self.clock)
        pending = asyncio.create_task(pipeline.submit("um", created_by="x"))
        await asyncio.sleep(0)

        pipeline.invalidate()
        release.set()
        outcome = await pending

        assert not outcome.created
        assert len(self.store) == 2


class TestColorTable:
    def test_known_types(self):
        for event_type in EventType:
            assert color_for_type(event_type) == EVENT_TYPE_COLORS[event_type.value]

    def test_fallback(self):
        assert color_for_type("party") == FALLBACK_COLOR
        assert color_for_type(None) == FALLBACK_COLOR
