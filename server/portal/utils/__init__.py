"""Portal Utility Modules"""

from portal.utils.date_parser import format_br_date, operational_now, parse_iso_date, utc_now_iso
from portal.utils.formatters import days_left_label, format_percentage, stringify_object_ids

__all__ = [
    "format_br_date",
    "operational_now",
    "parse_iso_date",
    "utc_now_iso",
    "days_left_label",
    "format_percentage",
    "stringify_object_ids",
]
