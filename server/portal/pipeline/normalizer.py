"""Turn raw store documents into typed portal entities."""

import logging
from typing import Any, Dict, Iterable, List, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from portal.core.logging_config import log_structured
from portal.schemas.entities import PortalRecord
from portal.utils.formatters import stringify_object_ids

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=PortalRecord)


def merge_record_id(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of the document with the store id under "id" instead of "_id"."""
    document = stringify_object_ids(raw)
    store_id = document.pop("_id", None)
    if store_id is not None:
        document["id"] = str(store_id)
    return document


def normalize_record(raw: Dict[str, Any], model: Type[RecordT]) -> RecordT:
    document = merge_record_id(raw)
    try:
        return model.model_validate(document)
    except PydanticValidationError as e:
        # Stored data is never rejected on read; keep the raw values.
        log_structured(
            logger,
            "warning",
            "record_normalize_fallback",
            model=model.__name__,
            record_id=document.get("id"),
            errors=e.error_count(),
        )
        return model.model_construct(**document)


def normalize_records(raw_records: Iterable[Dict[str, Any]], model: Type[RecordT]) -> List[RecordT]:
    """Normalize a fetched snapshot, preserving fetch order."""
    return [normalize_record(raw, model) for raw in raw_records]
