"""
SQLAlchemy ORM Models for the key-value store.

The vocabulary store persists its whole collection as one JSON document, so
a single key/value table is all the SQL backend needs.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class KeyValueRecord(Base):
    """
    One stored text blob.
    """
    __tablename__ = 'kv_store'

    key = Column(String(255), primary_key=True, nullable=False)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<KeyValueRecord({self.key}, {len(self.value or '')} chars)>"
