"""
MongoDB key-value storage.

Each key is one document: {"_id": key, "value": text, "updated_at": ts}.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection

from core import config

logger = logging.getLogger(__name__)

COLLECTION_NAME = "kv_store"

# Global connection pool (reused across stores)
_client: Optional[MongoClient] = None


# ---- Connection Management ----

def get_collection() -> Collection:
    """
    Get the key-value collection from MONGO_URI / MONGO_DB_NAME.

    The client is created once and reused so repeated stores share one
    connection pool.
    """
    global _client

    if _client is None:
        _client = MongoClient(
            config.get_mongo_uri(),
            maxPoolSize=10,  # Connection pool size
            minPoolSize=1,   # Keep at least 1 connection alive
            maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
        )
    return _client[config.get_mongo_db_name()][COLLECTION_NAME]


class MongoStorage:
    """Key-value storage backed by a MongoDB collection."""

    def __init__(self, collection: Optional[Collection] = None):
        self.collection = collection if collection is not None else get_collection()

    def get(self, key: str) -> Optional[str]:
        document = self.collection.find_one({"_id": key})
        if document is None:
            return None
        return document["value"]

    def set(self, key: str, value: str) -> None:
        self.collection.update_one(
            {"_id": key},
            {"$set": {"value": value, "updated_at": datetime.now(timezone.utc)}},
            upsert=True,
        )
        logger.debug("Stored %d chars under %r", len(value), key)
