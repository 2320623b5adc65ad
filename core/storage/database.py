"""
Database - SQL key-value storage

Stores text blobs in the `kv_store` table through SQLAlchemy. Works with
any SQLAlchemy URL; the default is a local SQLite file.

This module handles ONLY database I/O.
Serialization is handled by the vocabulary store.
"""

from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from core import config
from core.storage.models import Base, KeyValueRecord

logger = logging.getLogger(__name__)


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Get SQLAlchemy engine for database connection.

    Server databases get a connection pool; SQLite keeps SQLAlchemy's
    default pooling.

    Args:
        database_url: SQLAlchemy URL (defaults to DATABASE_URL)

    Returns:
        SQLAlchemy Engine instance
    """
    db_url = database_url or config.get_database_url()
    if db_url.startswith("sqlite"):
        return create_engine(db_url, echo=False)
    return create_engine(
        db_url,
        pool_size=5,           # Keep 5 connections open
        max_overflow=10,       # Allow up to 10 extra connections
        pool_pre_ping=True,    # Verify connections before use
        echo=False
    )


class SqlStorage:
    """
    Key-value storage backed by a SQL table.

    Tables are created on construction; safe to construct repeatedly.
    """

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        self.engine = engine if engine is not None else get_engine(database_url)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        Base.metadata.create_all(self.engine)

    def _session(self) -> Session:
        return self._session_factory()

    def get(self, key: str) -> Optional[str]:
        session = self._session()
        try:
            record = session.get(KeyValueRecord, key)
            if record is None:
                return None
            return record.value
        finally:
            session.close()

    def set(self, key: str, value: str) -> None:
        session = self._session()
        try:
            record = session.get(KeyValueRecord, key)
            if record is None:
                session.add(KeyValueRecord(key=key, value=value))
            else:
                record.value = value
                record.updated_at = datetime.now(timezone.utc)
            session.commit()
            logger.debug("Stored %d chars under %r", len(value), key)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def reset(self) -> None:
        """
        DANGEROUS: Delete all stored data and recreate the table.
        """
        Base.metadata.drop_all(self.engine)
        Base.metadata.create_all(self.engine)
        logger.warning("kv_store table dropped and recreated")
