"""Record Store Package"""

from portal.store.base import OrderBy, Predicate, RecordStore
from portal.store.memory_store import InMemoryRecordStore
from portal.store.mongo_store import MongoRecordStore

__all__ = [
    "OrderBy",
    "Predicate",
    "RecordStore",
    "InMemoryRecordStore",
    "MongoRecordStore",
]
