"""
Record Store Interface

Every read the portal makes is a one-shot snapshot fetch through this
interface; there are no subscriptions and no transactions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from portal.core.error_catalog import RecordNotFoundError, StoreReadError, StoreWriteError

ALLOWED_PREDICATE_OPS = {"eq", "gte", "lte"}
ALLOWED_DIRECTIONS = {"asc", "desc"}


@dataclass(frozen=True)
class Predicate:
    """A single field condition; an inclusive range is two predicates."""

    field: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in ALLOWED_PREDICATE_OPS:
            raise ValueError(f"Unsupported predicate operator: {self.op}")

    def matches(self, record: Dict[str, Any]) -> bool:
        actual = record.get(self.field)
        if self.op == "eq":
            return actual == self.value
        if actual is None:
            return False
        try:
            if self.op == "gte":
                return actual >= self.value
            return actual <= self.value
        except TypeError:
            return False


@dataclass(frozen=True)
class OrderBy:
    field: str
    direction: str = "asc"

    def __post_init__(self):
        if self.direction not in ALLOWED_DIRECTIONS:
            raise ValueError(f"Unsupported sort direction: {self.direction}")

    @property
    def descending(self) -> bool:
        return self.direction == "desc"


class RecordStore(ABC):
    """
    Async document store holding the portal collections.

    Raw records are returned as dicts carrying the store id under "_id".
    Fetch failures raise StoreReadError, write failures StoreWriteError and
    unknown ids on update/delete RecordNotFoundError.
    """

    @abstractmethod
    async def get_all(self, collection: str) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def get_filtered(
        self,
        collection: str,
        predicates: Sequence[Predicate] = (),
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def get_one(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def insert(self, collection: str, record: Dict[str, Any]) -> str:
        pass

    @abstractmethod
    async def update(self, collection: str, record_id: str, partial: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> None:
        pass

    async def ping(self) -> bool:
        return True


__all__ = [
    "ALLOWED_PREDICATE_OPS",
    "OrderBy",
    "Predicate",
    "RecordNotFoundError",
    "RecordStore",
    "StoreReadError",
    "StoreWriteError",
]
