"""List reconciliation pipeline: normalize, order, filter, aggregate."""

from portal.pipeline.aggregation import aggregate, percentage
from portal.pipeline.filters import PersonnelFilter, VehicleFilter
from portal.pipeline.normalizer import normalize_records
from portal.pipeline.ordering import (
    classify_leave,
    days_left,
    group_active_leaves,
    group_by_sector,
    sector_counts,
    sort_by_rank_then_name,
    split_leaves,
)
from portal.pipeline.registration import next_registration_number

__all__ = [
    "aggregate",
    "percentage",
    "PersonnelFilter",
    "VehicleFilter",
    "normalize_records",
    "classify_leave",
    "days_left",
    "group_active_leaves",
    "group_by_sector",
    "sector_counts",
    "sort_by_rank_then_name",
    "split_leaves",
    "next_registration_number",
]
