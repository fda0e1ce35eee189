"""Record store connection helpers for the portal server."""

from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from portal.core.config import settings
from portal.store.base import RecordStore
from portal.store.memory_store import InMemoryRecordStore
from portal.store.mongo_store import MongoRecordStore

_client: AsyncIOMotorClient | None = None
_database: AsyncIOMotorDatabase | None = None
_store: RecordStore | None = None


async def connect_to_mongodb() -> AsyncIOMotorDatabase:
    global _client, _database

    if _database is not None:
        return _database

    _client = AsyncIOMotorClient(settings.MONGODB_URI)
    _database = _client[settings.MONGODB_DB_NAME]
    await _database.command("ping")
    return _database


async def connect_record_store() -> RecordStore:
    """Open the configured record store backend."""
    global _store

    if _store is not None:
        return _store

    backend = (settings.PORTAL_STORE_BACKEND or "mongo").strip().lower()
    if backend == "memory":
        _store = InMemoryRecordStore()
    else:
        _store = MongoRecordStore(await connect_to_mongodb())
    return _store


def get_record_store() -> RecordStore | None:
    return _store


def set_record_store(store: RecordStore | None) -> None:
    global _store
    _store = store


async def close_record_store() -> None:
    global _client, _database, _store

    if _client is not None:
        _client.close()
    _client = None
    _database = None
    _store = None
