import json

from ciap_agenda.constants import STORAGE_KEYS
from ciap_agenda.db.persistence import AgendaPersistence, JsonFileStorage, MemoryStorage
from ciap_agenda.dto import EventStatus, EventType, UserRole

from conftest import at, make_event


class TestEventRoundTrip:
    def test_save_then_load_reproduces_events(self):
        persistence = AgendaPersistence(MemoryStorage())
        events = [
            make_event("a", start=at(9, 15).replace(microsecond=123000), participants=["Estado Maior"], emoji="📜"),
            make_event("b", type=EventType.TASK, status=EventStatus.COMPLETED, reminder_minutes=None, description="Pauta"),
        ]
        persistence.save_events(events)
        loaded = persistence.load_events()

        assert [e.id for e in loaded] == ["a", "b"]
        for original, restored in zip(events, loaded):
            assert restored.model_dump() == original.model_dump()
            assert restored.start == original.start
            assert restored.start.tzinfo is not None

    def test_records_use_stored_field_names(self):
        storage = MemoryStorage()
        AgendaPersistence(storage).save_events([make_event("a", reminder_minutes=15)])
        record = json.loads(storage.get(STORAGE_KEYS.EVENTS))[0]
        assert record["createdBy"] == "Secretaria CIAP"
        assert record["reminderMinutes"] == 15
        assert isinstance(record["start"], str)

    def test_loads_legacy_browser_records(self):
        raw = json.dumps([{
            "id": "1",
            "title": "Despacho",
            "responsible": "Coronel Diretor",
            "participants": ["Estado Maior"],
            "createdBy": "Secretaria CIAP",
            "start": "2026-10-19T12:00:00.000Z",
            "end": "2026-10-19T14:00:00.000Z",
            "type": "meeting",
            "status": "active",
            "reminderMinutes": 60,
        }])
        loaded = AgendaPersistence(MemoryStorage({STORAGE_KEYS.EVENTS: raw})).load_events()
        assert loaded[0].start == at(9)
        assert loaded[0].created_by == "Secretaria CIAP"


class TestCorruptData:
    def test_missing_key_means_first_run(self):
        assert AgendaPersistence(MemoryStorage()).load_events() is None

    def test_unparseable_payload_falls_back_to_empty(self):
        storage = MemoryStorage({STORAGE_KEYS.EVENTS: "{not json"})
        assert AgendaPersistence(storage).load_events() == []

    def test_invalid_record_falls_back_to_empty(self):
        storage = MemoryStorage({STORAGE_KEYS.EVENTS: json.dumps([{"id": "1", "type": "party"}])})
        assert AgendaPersistence(storage).load_events() == []

    def test_duplicate_saved_ids_keep_first(self):
        storage = MemoryStorage()
        persistence = AgendaPersistence(storage)
        records = [make_event("a", title="first").to_record(), make_event("a", title="second").to_record()]
        storage.set(STORAGE_KEYS.EVENTS, json.dumps(records))
        loaded = persistence.load_events()
        assert [e.title for e in loaded] == ["first"]

    def test_inverted_saved_range_is_dropped(self):
        storage = MemoryStorage()
        records = [
            make_event("bad", start=at(15), duration_minutes=-60).to_record(),
            make_event("ok", start=at(15)).to_record(),
        ]
        storage.set(STORAGE_KEYS.EVENTS, json.dumps(records))
        assert [e.id for e in AgendaPersistence(storage).load_events()] == ["ok"]

    def test_corrupt_storage_file_is_ignored(self, tmp_path):
        path = tmp_path / "agenda.json"
        path.write_text("garbage", encoding="utf-8")
        storage = JsonFileStorage(path)
        assert storage.get(STORAGE_KEYS.EVENTS) is None


class TestOperatorAndRole:
    def test_defaults(self):
        persistence = AgendaPersistence(MemoryStorage())
        assert persistence.load_operator() == ""
        assert persistence.load_role() == UserRole.SECRETARIA

    def test_unknown_role_falls_back(self):
        persistence = AgendaPersistence(MemoryStorage({STORAGE_KEYS.ROLE: "general"}))
        assert persistence.load_role() == UserRole.SECRETARIA

    def test_session_round_trip_through_file(self, tmp_path):
        path = tmp_path / "nested" / "agenda.json"
        AgendaPersistence(JsonFileStorage(path)).save_session("Sgt. Lima", UserRole.CHEFE)

        reloaded = AgendaPersistence(JsonFileStorage(path))
        assert reloaded.load_operator() == "Sgt. Lima"
        assert reloaded.load_role() == UserRole.CHEFE
