"""In-process record store used by tests and local runs."""

import copy
import logging
from typing import Any, Dict, List, Optional, Sequence

from bson import ObjectId

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


def _sort_key(value: Any) -> tuple:
    # Mirrors MongoDB's cross-type ordering: null < numbers < strings < others
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (3, int(value))
    if isinstance(value, (int, float)):
        return (1, value)
    if isinstance(value, str):
        return (2, value)
    return (4, str(value))


class InMemoryRecordStore(RecordStore):
    """Dict-backed store; collections keep insertion order."""

    def __init__(self, seed: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._failures: Dict[str, int] = {}
        for collection, records in (seed or {}).items():
            for record in records:
                self._insert_now(collection, record)

    def inject_failure(self, operation: str, times: int = 1) -> None:
        """Make the next `times` calls of `operation` fail (get_all, get_filtered, insert, ...)."""
        self._failures[operation] = self._failures.get(operation, 0) + times

    def _should_fail(self, operation: str) -> bool:
        remaining = self._failures.get(operation, 0)
        if remaining <= 0:
            return False
        self._failures[operation] = remaining - 1
        return True

    def _insert_now(self, collection: str, record: Dict[str, Any]) -> str:
        document = copy.deepcopy(record)
        record_id = str(document.pop("_id", None) or document.pop("id", None) or ObjectId())
        document["_id"] = record_id
        self._collections.setdefault(collection, {})[record_id] = document
        return record_id

    async def get_all(self, collection: str) -> List[Dict[str, Any]]:
        if self._should_fail("get_all"):
            raise StoreReadError("Simulated fetch failure", {"collection": collection})
        return [copy.deepcopy(doc) for doc in self._collections.get(collection, {}).values()]

    async def get_filtered(
        self,
        collection: str,
        predicates: Sequence[Predicate] = (),
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        if self._should_fail("get_filtered"):
            raise StoreReadError("Simulated fetch failure", {"collection": collection})

        documents = [
            doc
            for doc in self._collections.get(collection, {}).values()
            if all(predicate.matches(doc) for predicate in predicates)
        ]
        if order_by is not None:
            documents = sorted(
                documents,
                key=lambda doc: _sort_key(doc.get(order_by.field)),
                reverse=order_by.descending,
            )
        if limit is not None:
            documents = documents[: max(0, limit)]

        log_structured(
            logger,
            "debug",
            "memory_store_query",
            collection=collection,
            predicates=len(predicates),
            returned=len(documents),
        )
        return [copy.deepcopy(doc) for doc in documents]

    async def get_one(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        if self._should_fail("get_one"):
            raise StoreReadError("Simulated fetch failure", {"collection": collection})
        document = self._collections.get(collection, {}).get(record_id)
        return copy.deepcopy(document) if document is not None else None

    async def insert(self, collection: str, record: Dict[str, Any]) -> str:
        if self._should_fail("insert"):
            raise StoreWriteError("Simulated write failure", {"collection": collection})
        return self._insert_now(collection, record)

    async def update(self, collection: str, record_id: str, partial: Dict[str, Any]) -> None:
        if self._should_fail("update"):
            raise StoreWriteError("Simulated write failure", {"collection": collection})
        document = self._collections.get(collection, {}).get(record_id)
        if document is None:
            raise RecordNotFoundError(collection, record_id)
        document.update(copy.deepcopy(partial))

    async def delete(self, collection: str, record_id: str) -> None:
        if self._should_fail("delete"):
            raise StoreWriteError("Simulated write failure", {"collection": collection})
        records = self._collections.get(collection, {})
        if record_id not in records:
            raise RecordNotFoundError(collection, record_id)
        del records[record_id]
