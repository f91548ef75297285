"""
Agenda domain errors.

Routes translate these into HTTP status codes; nothing below the route
layer knows about HTTP.
"""


class AgendaError(Exception):
    """Base class for agenda errors."""


class EventNotFoundError(AgendaError, KeyError):
    def __init__(self, event_id: str):
        super().__init__(event_id)
        self.event_id = event_id

    def __str__(self) -> str:
        return f"Event not found: {self.event_id}"


class DuplicateEventError(AgendaError):
    """An event with the same id is already in the store."""


class InvalidEventError(AgendaError, ValueError):
    """Event data violates a store rule (e.g. end before start)."""


class SmartAddBusyError(AgendaError):
    """A Smart-Add request is already in flight."""
