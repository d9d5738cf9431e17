"""
SQLAlchemy ORM models for the local device store.

Tables: ``local_storage``, a string key/value table with the same shape
as browser ``localStorage``; values are JSON text.
"""

from datetime import UTC, datetime

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from meetingai.services.storage.database import Base


class LocalStorageEntry(Base):
    """One key/value pair of the local store."""

    __tablename__ = "local_storage"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, default="")
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"<LocalStorageEntry key={self.key!r}>"
