"""
Response Formatters for Portal Operations

Helpers that turn raw store documents and computed values into the shapes
returned by operations and reports.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple, TypeVar

from bson import ObjectId

T = TypeVar("T")


def stringify_object_ids(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Convert all ObjectId and datetime fields in a document to strings"""
    result = {}
    for key, value in doc.items():
        if isinstance(value, ObjectId):
            result[key] = str(value)
        elif isinstance(value, dict):
            result[key] = stringify_object_ids(value)
        elif isinstance(value, list):
            result[key] = [
                stringify_object_ids(item) if isinstance(item, dict)
                else str(item) if isinstance(item, ObjectId)
                else item.isoformat() if isinstance(item, datetime)
                else item
                for item in value
            ]
        elif isinstance(value, datetime):
            result[key] = value.isoformat()
        else:
            result[key] = value
    return result


def format_percentage(value: float) -> str:
    """One decimal place, e.g. 33.3"""
    return f"{value:.1f}"


def days_left_label(days: Optional[int]) -> str:
    if days is None:
        return "Indeterminado"
    if days > 0:
        return f"{days} dias restantes"
    return "Apto ao trabalho"


def paginate(items: Sequence[T], page: int, page_size: int) -> Tuple[List[T], int]:
    """Slice an already-ordered list; returns (page_items, total)."""
    total = len(items)
    start = (page - 1) * page_size
    return list(items[start:start + page_size]), total


def display_value(value: Any) -> str:
    if value is None:
        return ""
    return str(value)
