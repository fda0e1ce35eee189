"""
MongoDB Record Store

Translates portal predicates into MongoDB filters. Only the whitelisted
comparison operators ever reach the database.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from portal.core.logging_config import log_structured
from portal.store.base import (
    OrderBy,
    Predicate,
    RecordNotFoundError,
    RecordStore,
    StoreReadError,
    StoreWriteError,
)

logger = logging.getLogger(__name__)

OPERATOR_MAP = {
    "eq": "$eq",
    "gte": "$gte",
    "lte": "$lte",
}


def build_mongo_filter(predicates: Sequence[Predicate]) -> Dict[str, Any]:
    """Combine predicates into one filter document (AND semantics)."""
    query: Dict[str, Any] = {}
    for predicate in predicates:
        operator = OPERATOR_MAP.get(predicate.op)
        if operator is None:
            raise ValueError(f"Unsupported predicate operator: {predicate.op}")
        query.setdefault(predicate.field, {})[operator] = predicate.value
    return query


def to_object_id(record_id: str) -> Optional[ObjectId]:
    if ObjectId.is_valid(record_id):
        return ObjectId(record_id)
    return None


class MongoRecordStore(RecordStore):
    """RecordStore backed by a motor database."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def ping(self) -> bool:
        try:
            await self.db.command("ping")
        except PyMongoError:
            return False
        return True

    async def get_all(self, collection: str) -> List[Dict[str, Any]]:
        return await self.get_filtered(collection)

    async def get_filtered(
        self,
        collection: str,
        predicates: Sequence[Predicate] = (),
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        query = build_mongo_filter(predicates)
        try:
            cursor = self.db[collection].find(query)
            if order_by is not None:
                cursor = cursor.sort(order_by.field, DESCENDING if order_by.descending else ASCENDING)
            if limit is not None:
                cursor = cursor.limit(limit)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            log_structured(
                logger,
                "error",
                "mongo_store_fetch_failed",
                collection=collection,
                order_by=order_by.field if order_by else None,
                error=str(e),
            )
            raise StoreReadError(
                f"Failed to fetch {collection}",
                {"collection": collection, "original_error": str(e)},
            ) from e
        return documents

    async def get_one(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        object_id = to_object_id(record_id)
        if object_id is None:
            return None
        try:
            return await self.db[collection].find_one({"_id": object_id})
        except PyMongoError as e:
            raise StoreReadError(
                f"Failed to fetch {collection}/{record_id}",
                {"collection": collection, "original_error": str(e)},
            ) from e

    async def insert(self, collection: str, record: Dict[str, Any]) -> str:
        document = {key: value for key, value in record.items() if key not in ("id", "_id")}
        try:
            result = await self.db[collection].insert_one(document)
        except PyMongoError as e:
            log_structured(logger, "error", "mongo_store_write_failed", collection=collection, action="insert", error=str(e))
            raise StoreWriteError(
                f"Failed to insert into {collection}",
                {"collection": collection, "original_error": str(e)},
            ) from e
        return str(result.inserted_id)

    async def update(self, collection: str, record_id: str, partial: Dict[str, Any]) -> None:
        object_id = to_object_id(record_id)
        if object_id is None:
            raise RecordNotFoundError(collection, record_id)
        changes = {key: value for key, value in partial.items() if key not in ("id", "_id")}
        try:
            result = await self.db[collection].update_one({"_id": object_id}, {"$set": changes})
        except PyMongoError as e:
            log_structured(logger, "error", "mongo_store_write_failed", collection=collection, action="update", error=str(e))
            raise StoreWriteError(
                f"Failed to update {collection}/{record_id}",
                {"collection": collection, "original_error": str(e)},
            ) from e
        if result.matched_count == 0:
            raise RecordNotFoundError(collection, record_id)

    async def delete(self, collection: str, record_id: str) -> None:
        object_id = to_object_id(record_id)
        if object_id is None:
            raise RecordNotFoundError(collection, record_id)
        try:
            result = await self.db[collection].delete_one({"_id": object_id})
        except PyMongoError as e:
            log_structured(logger, "error", "mongo_store_write_failed", collection=collection, action="delete", error=str(e))
            raise StoreWriteError(
                f"Failed to delete {collection}/{record_id}",
                {"collection": collection, "original_error": str(e)},
            ) from e
        if result.deleted_count == 0:
            raise RecordNotFoundError(collection, record_id)
