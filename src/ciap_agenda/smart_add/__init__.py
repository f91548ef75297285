from ciap_agenda.smart_add.extractor import EventExtractionService, LLMEventExtractor, validate_extraction
from ciap_agenda.smart_add.pipeline import SmartAddOutcome, SmartAddPipeline, build_event, color_for_type

__all__ = [
    "EventExtractionService",
    "LLMEventExtractor",
    "SmartAddOutcome",
    "SmartAddPipeline",
    "build_event",
    "color_for_type",
    "validate_extraction",
]
