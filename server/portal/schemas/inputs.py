"""
Write payloads for portal records.

Every create/update/transfer goes through one of these models. Enumerations,
legacy sector aliases and the conditional medical leave fields are enforced
here and nowhere else.
"""

from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from portal.schemas.enums import (
    City,
    LeaveStatus,
    LeaveType,
    Platoon,
    Rank,
    Sector,
    STATE_CODES,
    VehicleType,
    canonical_sector,
)
from portal.utils.date_parser import parse_iso_date


class WritePayload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        use_enum_values=True,
        str_strip_whitespace=True,
    )

    def to_record(self) -> Dict[str, Any]:
        """Persistable document (camelCase keys, no id/timestamps)."""
        return self.model_dump(by_alias=True)


def _require_iso_date(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None or value == "":
        return None
    parsed = parse_iso_date(value)
    if parsed is None:
        raise ValueError(f"{field_name} must be an ISO date (YYYY-MM-DD)")
    return parsed.isoformat()


def _canonical_sector_before(value: Any) -> Any:
    if isinstance(value, str):
        return canonical_sector(value)
    return value


CanonicalSector = Annotated[Sector, BeforeValidator(_canonical_sector_before)]


class PersonnelInput(WritePayload):
    rank: Rank
    name: str = Field(..., min_length=1)
    rg: str = Field(..., min_length=1)
    phone: str = ""
    city: City
    platoon: Platoon
    sector: CanonicalSector


class PersonnelTransferInput(WritePayload):
    id: str = Field(..., min_length=1)
    new_sector: CanonicalSector


class MedicalLeaveInput(WritePayload):
    rank: Rank
    war_name: str = Field(..., min_length=1)
    leave_type: LeaveType
    cid: Optional[str] = None
    observation: Optional[str] = None
    start_date: str
    end_date: Optional[str] = None
    is_indeterminate: bool = False

    @field_validator("start_date")
    @classmethod
    def _check_start_date(cls, value: str) -> str:
        checked = _require_iso_date(value, "startDate")
        if checked is None:
            raise ValueError("startDate is required")
        return checked

    @field_validator("end_date")
    @classmethod
    def _check_end_date(cls, value: Optional[str]) -> Optional[str]:
        return _require_iso_date(value, "endDate")

    @model_validator(mode="after")
    def _check_conditional_fields(self) -> "MedicalLeaveInput":
        if self.leave_type == LeaveType.MEDICAL.value:
            if not self.cid:
                raise ValueError("cid is required for medical leaves")
        elif not self.observation:
            raise ValueError("observation is required for non-medical leaves")

        if self.is_indeterminate:
            self.end_date = None
        elif not self.end_date:
            raise ValueError("endDate is required unless the leave is indeterminate")
        return self

    def to_record(self) -> Dict[str, Any]:
        record = self.model_dump(by_alias=True, exclude_none=True)
        record["isIndeterminate"] = self.is_indeterminate
        # Status is persisted as active on every save; reads recompute it.
        record["status"] = LeaveStatus.ACTIVE.value
        return record


class VehicleInput(WritePayload):
    plate: str = Field(..., min_length=1)
    state: str
    inspection_date: str
    brand: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    vehicle_type: VehicleType
    has_key: bool = False
    chassis_observation: str = ""
    city: City

    @field_validator("plate")
    @classmethod
    def _upper_plate(cls, value: str) -> str:
        return value.upper()

    @field_validator("state")
    @classmethod
    def _check_state(cls, value: str) -> str:
        code = value.upper()
        if code not in STATE_CODES:
            raise ValueError(f"state must be one of: {', '.join(STATE_CODES)}")
        return code

    @field_validator("inspection_date")
    @classmethod
    def _check_inspection_date(cls, value: str) -> str:
        checked = _require_iso_date(value, "inspectionDate")
        if checked is None:
            raise ValueError("inspectionDate is required")
        return checked


class AssetInput(WritePayload):
    sector: CanonicalSector
    general_tag: str = Field(..., min_length=1)
    local_tag: str = ""
    description: str = Field(..., min_length=1)
    asset_class: str = ""
    conservation_state: str = ""
    acquisition_date: Optional[str] = None
    incorporation_type: str = ""
    acquisition_value: float = 0.0
    evaluation_value: float = 0.0
    net_value: float = 0.0

    @field_validator("acquisition_date")
    @classmethod
    def _check_acquisition_date(cls, value: Optional[str]) -> Optional[str]:
        return _require_iso_date(value, "acquisitionDate")


class AssetTransferInput(WritePayload):
    id: str = Field(..., min_length=1)
    to_sector: CanonicalSector
    reason: Optional[str] = None

