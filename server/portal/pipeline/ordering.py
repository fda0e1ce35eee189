"""
Sorting and grouping of people and leaves.

The canonical order for any list of people is rank hierarchy position
first, then name. All sorts here are stable, so ties keep fetch order.
"""

import locale
import math
import unicodedata
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, TypeVar

from portal.constants import NOT_INFORMED
from portal.schemas.entities import MedicalLeave
from portal.schemas.enums import (
    LEAVE_TYPE_ORDER,
    SECTOR_ORDER,
    LeaveStatus,
    leave_type_label,
    rank_position,
)
from portal.utils.date_parser import as_operational, end_of_day, parse_iso_date

T = TypeVar("T")

_SECONDS_PER_DAY = 24 * 60 * 60


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def name_sort_key(name: Optional[str]) -> tuple:
    """
    Locale-aware name key: accent and case differences only break ties.

    Unaccented sorts before accented, then lowercase before uppercase
    ("ana" < "Ana" < "Ána"). The tie levels compare code points, so they do
    not depend on the process locale.
    """
    text = (name or "").strip()
    return (locale.strxfrm(_strip_accents(text).casefold()), text.casefold(), text.swapcase())


def sort_by_rank_then_name(items: Iterable[T]) -> List[T]:
    return sorted(
        items,
        key=lambda item: (rank_position(_field(item, "rank")), name_sort_key(_field(item, "name"))),
    )


def _end_date(leave: MedicalLeave) -> Optional[date]:
    return parse_iso_date(leave.end_date)


def classify_leave(leave: MedicalLeave, current_time: datetime) -> LeaveStatus:
    """
    Active when indeterminate, or when the end of the end-date calendar day
    has not passed yet. A leave without an end date that is not
    indeterminate counts as returned.
    """
    if leave.is_indeterminate:
        return LeaveStatus.ACTIVE
    end = _end_date(leave)
    if end is None:
        return LeaveStatus.RETURNED
    if end_of_day(end) >= as_operational(current_time):
        return LeaveStatus.ACTIVE
    return LeaveStatus.RETURNED


class LeavePartition(NamedTuple):
    active: List[MedicalLeave]
    returned: List[MedicalLeave]


def split_leaves(leaves: Iterable[MedicalLeave], current_time: datetime) -> LeavePartition:
    """
    Partition leaves into active and returned.

    Active: indeterminate first, then ascending end date.
    Returned: descending end date, undated last.
    """
    active: List[MedicalLeave] = []
    returned: List[MedicalLeave] = []
    for leave in leaves:
        if classify_leave(leave, current_time) is LeaveStatus.ACTIVE:
            active.append(leave)
        else:
            returned.append(leave)

    active.sort(key=lambda leave: (0, date.min) if leave.is_indeterminate else (1, _end_date(leave) or date.max))
    returned.sort(key=lambda leave: (1, 0) if _end_date(leave) is None else (0, -_end_date(leave).toordinal()))
    return LeavePartition(active=active, returned=returned)


class LeaveGroup(NamedTuple):
    leave_type: str
    label: str
    leaves: List[MedicalLeave]


def _leave_type_position(leave_type: str) -> int:
    try:
        return LEAVE_TYPE_ORDER.index(leave_type)
    except ValueError:
        return len(LEAVE_TYPE_ORDER)


def group_active_leaves(active: Sequence[MedicalLeave]) -> List[LeaveGroup]:
    """Group by leave type, largest group first; empty groups never appear."""
    buckets: Dict[str, List[MedicalLeave]] = {}
    for leave in active:
        buckets.setdefault(leave.leave_type or "", []).append(leave)

    ordered = sorted(
        buckets.items(),
        key=lambda entry: (-len(entry[1]), _leave_type_position(entry[0])),
    )
    return [
        LeaveGroup(leave_type=leave_type, label=leave_type_label(leave_type) or NOT_INFORMED, leaves=leaves)
        for leave_type, leaves in ordered
    ]


def group_by_sector(items: Iterable[T]) -> Dict[str, List[T]]:
    """One bucket per sector value, in first-appearance order."""
    groups: Dict[str, List[T]] = {}
    for item in items:
        sector = _field(item, "sector") or NOT_INFORMED
        groups.setdefault(sector, []).append(item)
    return groups


def sector_counts(items: Iterable[Any]) -> Dict[str, int]:
    """Count per enumerated sector (zeros included), then any unknown sectors."""
    counts: Dict[str, int] = {sector: 0 for sector in SECTOR_ORDER}
    for item in items:
        sector = _field(item, "sector") or NOT_INFORMED
        counts[sector] = counts.get(sector, 0) + 1
    return counts


def days_left(leave: MedicalLeave, current_time: datetime) -> Optional[int]:
    if leave.is_indeterminate:
        return None
    end = _end_date(leave)
    if end is None:
        return None
    remaining = (end_of_day(end) - as_operational(current_time)).total_seconds()
    return math.ceil(remaining / _SECONDS_PER_DAY)
