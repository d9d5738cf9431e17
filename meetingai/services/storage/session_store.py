"""
Local session persistence.

``LocalStorageRepository`` is the key/value data-access layer; it calls
``flush()`` rather than ``commit()`` so transaction boundaries are
controlled by the caller. ``SessionStore`` keeps the saved-session list as
a JSON array under one fixed key, appending with a read-modify-write.
"""

import json
import logging

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from meetingai.core.exceptions import StorageError
from meetingai.core.models import SessionRecord
from meetingai.services.storage.database import get_engine, get_session, init_db, session_factory
from meetingai.services.storage.models_db import LocalStorageEntry

logger = logging.getLogger(__name__)

SESSIONS_KEY = "meetingSessions"


class LocalStorageRepository:
    """String key/value access to the ``local_storage`` table.

    Args:
        session: An active SQLAlchemy ``AsyncSession``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_item(self, key: str) -> str | None:
        """Return the stored value for *key*, or ``None`` when absent."""
        result = await self._session.execute(
            select(LocalStorageEntry).where(LocalStorageEntry.key == key)
        )
        entry = result.scalar_one_or_none()
        return entry.value if entry is not None else None

    async def set_item(self, key: str, value: str) -> None:
        """Insert or overwrite the value stored under *key*."""
        entry = await self._session.get(LocalStorageEntry, key)
        if entry is None:
            self._session.add(LocalStorageEntry(key=key, value=value))
        else:
            entry.value = value
        await self._session.flush()


def _decode_array(raw: str | None) -> list:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Stored %r value is not valid JSON; treating as empty", SESSIONS_KEY)
        return []
    if not isinstance(value, list):
        logger.warning("Stored %r value is not an array; treating as empty", SESSIONS_KEY)
        return []
    return value


class SessionStore:
    """Append-only list of saved meeting sessions.

    Args:
        engine: Optional engine override (used in tests with in-memory SQLite).
    """

    def __init__(self, engine: AsyncEngine | None = None) -> None:
        self._engine = engine or get_engine()
        self._factory = session_factory(self._engine)

    async def init(self) -> None:
        """Create the backing table if it does not exist yet."""
        await init_db(self._engine)

    async def list_sessions(self) -> list[SessionRecord]:
        """Return saved sessions in the order they were appended.

        Entries that no longer validate are skipped with a warning.
        """
        async with get_session(self._factory) as session:
            raw = await LocalStorageRepository(session).get_item(SESSIONS_KEY)

        records: list[SessionRecord] = []
        for index, entry in enumerate(_decode_array(raw)):
            try:
                records.append(SessionRecord.model_validate(entry))
            except ValidationError:
                logger.warning("Skipping malformed saved session at index %d", index)
        return records

    async def append(self, record: SessionRecord) -> int:
        """Append *record* to the stored list and return the new length.

        Raises:
            StorageError: The local database could not be written.
        """
        try:
            async with get_session(self._factory) as session:
                repo = LocalStorageRepository(session)
                entries = _decode_array(await repo.get_item(SESSIONS_KEY))
                entries.append(record.model_dump(mode="json", by_alias=True))
                await repo.set_item(SESSIONS_KEY, json.dumps(entries))
        except SQLAlchemyError as exc:
            logger.exception("Failed to persist session for %s", record.file_name)
            raise StorageError(f"Failed to save session: {exc}") from exc

        logger.info("Saved session for %s (%d stored)", record.file_name, len(entries))
        return len(entries)
