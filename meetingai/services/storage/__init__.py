"""
Storage module - Local database and saved-session persistence.
"""

from meetingai.services.storage.database import (
    Base,
    close_db,
    create_engine,
    get_engine,
    get_session,
    init_db,
    session_factory,
)
from meetingai.services.storage.models_db import LocalStorageEntry
from meetingai.services.storage.session_store import (
    SESSIONS_KEY,
    LocalStorageRepository,
    SessionStore,
)

__all__ = [
    "Base",
    "LocalStorageEntry",
    "LocalStorageRepository",
    "SESSIONS_KEY",
    "SessionStore",
    "close_db",
    "create_engine",
    "get_engine",
    "get_session",
    "init_db",
    "session_factory",
]
