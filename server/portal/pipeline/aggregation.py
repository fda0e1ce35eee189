"""
Aggregated statistics for reports and dashboards.

Every dimension accounts for every record: missing or empty values are
counted under "Não informado", so each dimension's counts sum to the total.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from portal.constants import NOT_INFORMED
from portal.pipeline.ordering import classify_leave
from portal.schemas.entities import MedicalLeave, Personnel, Vehicle
from portal.schemas.enums import LeaveStatus, leave_type_label
from portal.schemas.report_schemas import CategoryCount, ReportStats

Extractor = Callable[[Any], Any]
Dimension = Tuple[str, Extractor]

KEY_YES = "Sim"
KEY_NO = "Não"


def percentage(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(100 * count / total, 1)


def _category(value: Any) -> str:
    if value is None:
        return NOT_INFORMED
    text = str(value).strip()
    return text or NOT_INFORMED


def count_by(
    items: Sequence[Any],
    extractor: Extractor,
    fixed_categories: Optional[Sequence[str]] = None,
) -> List[CategoryCount]:
    """
    Count items per category.

    fixed_categories are always reported (zero counts included) and come
    first; other categories follow in first-appearance order.
    """
    counts: Dict[str, int] = {category: 0 for category in (fixed_categories or ())}
    for item in items:
        category = _category(extractor(item))
        counts[category] = counts.get(category, 0) + 1

    total = len(items)
    return [
        CategoryCount(category=category, count=count, percentage=percentage(count, total))
        for category, count in counts.items()
    ]


def aggregate(
    items: Iterable[Any],
    dimensions: Sequence[Dimension],
    fixed_categories: Optional[Dict[str, Sequence[str]]] = None,
) -> ReportStats:
    snapshot = list(items)
    fixed = fixed_categories or {}
    return ReportStats(
        total=len(snapshot),
        dimensions={
            name: count_by(snapshot, extractor, fixed.get(name))
            for name, extractor in dimensions
        },
    )


PERSONNEL_DIMENSIONS: List[Dimension] = [
    ("sector", lambda person: person.sector),
    ("rank", lambda person: person.rank),
    ("city", lambda person: person.city),
    ("platoon", lambda person: person.platoon),
]


def personnel_stats(people: Iterable[Personnel]) -> ReportStats:
    return aggregate(people, PERSONNEL_DIMENSIONS)


def _key_category(vehicle: Vehicle) -> str:
    return KEY_YES if vehicle.has_key else KEY_NO


VEHICLE_DIMENSIONS: List[Dimension] = [
    ("type", lambda vehicle: vehicle.vehicle_type),
    ("key", _key_category),
    ("state", lambda vehicle: vehicle.state),
    ("city", lambda vehicle: vehicle.city),
]


def vehicle_stats(vehicles: Iterable[Vehicle]) -> ReportStats:
    return aggregate(vehicles, VEHICLE_DIMENSIONS, {"key": [KEY_YES, KEY_NO]})


def medical_leave_stats(leaves: Iterable[MedicalLeave], current_time: datetime) -> ReportStats:
    dimensions: List[Dimension] = [
        ("type", lambda leave: leave_type_label(leave.leave_type) or None),
        ("status", lambda leave: classify_leave(leave, current_time).value),
    ]
    return aggregate(
        leaves,
        dimensions,
        {"status": [LeaveStatus.ACTIVE.value, LeaveStatus.RETURNED.value]},
    )
