"""Portal Schemas Package"""

from portal.schemas.context_schema import SessionContext
from portal.schemas.entities import Asset, MedicalLeave, Personnel, TransferRecord, Vehicle
from portal.schemas.report_schemas import CategoryCount, ChartSpec, ReportSection, ReportStats

__all__ = [
    "SessionContext",
    "Asset",
    "MedicalLeave",
    "Personnel",
    "TransferRecord",
    "Vehicle",
    "CategoryCount",
    "ChartSpec",
    "ReportSection",
    "ReportStats",
]
