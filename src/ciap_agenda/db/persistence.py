"""
Local Persistence Layer

A string key-value store kept in one JSON file on disk, plus the agenda
specific load/save helpers on top of it:

- events under a fixed key, as a list of records with ISO timestamps
- operator name and active role under their own keys

Corrupt data is never fatal: it is logged and the caller gets the default
(empty agenda, blank operator, secretary role). Individual saved events
with a repeated id or an inverted time range are dropped.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from ciap_agenda.constants import STORAGE_KEYS
from ciap_agenda.dto import CalendarEvent, UserRole

logger = logging.getLogger(__name__)

_EVENT_LIST = TypeAdapter(List[CalendarEvent])


class JsonFileStorage:
    """Key-value storage persisted as a single JSON object."""

    def __init__(self, path):
        self.path = Path(path)
        self._data: Dict[str, str] = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read storage file {self.path}: {str(e)}")
            return {}
        if not isinstance(data, dict):
            logger.error("Storage file %s does not hold an object, ignoring it", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)
        tmp.replace(self.path)


class MemoryStorage:
    """Same interface as JsonFileStorage, nothing written to disk."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class AgendaPersistence:
    """Agenda state on top of a key-value storage."""

    def __init__(self, storage):
        self.storage = storage

    def load_events(self) -> Optional[List[CalendarEvent]]:
        """
        Load the saved agenda.

        Returns:
            None when nothing was ever saved (first run), an empty list
            when the saved payload is corrupt, the events otherwise.
        """
        raw = self.storage.get(STORAGE_KEYS.EVENTS)
        if raw is None:
            return None
        try:
            events = _EVENT_LIST.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.error(f"Discarding corrupt saved agenda: {str(e)}")
            return []

        seen = set()
        unique = []
        for event in events:
            if event.id in seen:
                logger.warning("Dropping duplicate saved event id %s", event.id)
                continue
            if event.end < event.start:
                logger.warning("Dropping saved event %s: it ends before it starts", event.id)
                continue
            seen.add(event.id)
            unique.append(event)
        return unique

    def save_events(self, events: List[CalendarEvent]) -> None:
        payload = [event.to_record() for event in events]
        self.storage.set(STORAGE_KEYS.EVENTS, json.dumps(payload, ensure_ascii=False))

    def load_operator(self) -> str:
        return self.storage.get(STORAGE_KEYS.OPERATOR) or ""

    def load_role(self) -> UserRole:
        raw = self.storage.get(STORAGE_KEYS.ROLE)
        if not raw:
            return UserRole.SECRETARIA
        try:
            return UserRole(raw)
        except ValueError:
            logger.warning("Unknown saved role %r, falling back to secretaria", raw)
            return UserRole.SECRETARIA

    def save_session(self, operator_name: str, role: UserRole) -> None:
        self.storage.set(STORAGE_KEYS.OPERATOR, operator_name)
        self.storage.set(STORAGE_KEYS.ROLE, role.value)
