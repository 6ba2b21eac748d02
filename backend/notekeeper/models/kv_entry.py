"""Key-value entry model."""
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text

from notekeeper.database import Base


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class KeyValueEntry(Base):
    """One durable key/value pair. Values are opaque strings (JSON or plain)."""

    __tablename__ = "kv_entries"

    key = Column(String(512), primary_key=True)
    value = Column(Text, nullable=False)
    created_at = Column(String(32), default=_utcnow)
    updated_at = Column(String(32), default=_utcnow, onupdate=_utcnow)
