"""Unit tests for the local session store (in-memory SQLite)."""

import json

import pytest

from meetingai.core.models import SessionRecord
from meetingai.services.normalizer import normalize_response
from meetingai.services.storage.database import get_session, session_factory
from meetingai.services.storage.session_store import SESSIONS_KEY, LocalStorageRepository


@pytest.fixture
def factory(db_engine):
    return session_factory(db_engine)


@pytest.fixture
def make_record(success_payload, selection):
    result, metadata = normalize_response(success_payload, selection)

    def _make(timestamp: str = "2026-10-17T09:30:00+00:00", notes: str = "") -> SessionRecord:
        return SessionRecord(
            timestamp=timestamp,
            file_name=metadata.file_name,
            processed_data=result,
            metadata=metadata,
            pre_meeting_notes=notes,
        )

    return _make


async def _raw(factory) -> str | None:
    async with get_session(factory) as session:
        return await LocalStorageRepository(session).get_item(SESSIONS_KEY)


async def _write_raw(factory, value: str) -> None:
    async with get_session(factory) as session:
        await LocalStorageRepository(session).set_item(SESSIONS_KEY, value)


class TestLocalStorageRepository:
    """Verify the key/value layer."""

    async def test_missing_key(self, factory):
        async with get_session(factory) as session:
            assert await LocalStorageRepository(session).get_item("nope") is None

    async def test_overwrite_persists_across_sessions(self, factory):
        async with get_session(factory) as session:
            repo = LocalStorageRepository(session)
            await repo.set_item("theme", "dark")
            await repo.set_item("theme", "light")
        async with get_session(factory) as session:
            assert await LocalStorageRepository(session).get_item("theme") == "light"

    async def test_rollback_on_error(self, factory):
        with pytest.raises(RuntimeError):
            async with get_session(factory) as session:
                await LocalStorageRepository(session).set_item("k", "v")
                raise RuntimeError("abort")

        async with get_session(factory) as session:
            assert await LocalStorageRepository(session).get_item("k") is None


class TestSessionStore:
    """Verify append and list semantics of the saved-session array."""

    async def test_empty(self, session_store):
        assert await session_store.list_sessions() == []

    async def test_append_preserves_order(self, session_store, make_record):
        first = make_record("2026-10-17T09:00:00+00:00")
        second = make_record("2026-10-17T10:00:00+00:00", notes="Follow-up")

        assert await session_store.append(first) == 1
        assert await session_store.append(second) == 2

        assert await session_store.list_sessions() == [first, second]

    async def test_stored_with_camel_case_keys(self, session_store, make_record, factory):
        await session_store.append(make_record(notes="Agenda"))

        stored = json.loads(await _raw(factory))

        assert len(stored) == 1
        entry = stored[0]
        assert set(entry) == {
            "timestamp",
            "fileName",
            "processedData",
            "metadata",
            "preMeetingNotes",
        }
        assert entry["processedData"]["actionItems"][0]["dueDate"] == "2026-10-20"
        assert entry["metadata"]["processingTime"]["bhashini"] == 4.2

    @pytest.mark.parametrize("corrupt", ["{not json", '{"a": 1}', '"text"'])
    async def test_corrupt_value_is_treated_as_empty(
        self, session_store, make_record, factory, corrupt
    ):
        await _write_raw(factory, corrupt)
        assert await session_store.list_sessions() == []

        assert await session_store.append(make_record()) == 1
        assert len(json.loads(await _raw(factory))) == 1

    async def test_malformed_entries_are_skipped(self, session_store, make_record, factory):
        good = make_record()
        await _write_raw(
            factory,
            json.dumps(
                [{"fileName": "broken"}, good.model_dump(mode="json", by_alias=True), 7]
            ),
        )

        assert await session_store.list_sessions() == [good]
