"""
Portal record entities.

These models describe records as they come back from the store. They are
lenient: every field is optional, extra fields are kept, and nothing here
checks enumerations. Strict checks live in the write payloads
(portal.schemas.inputs).
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PortalRecord(BaseModel):
    """Base for all stored records (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class Personnel(PortalRecord):
    rank: Optional[str] = None
    name: Optional[str] = None
    rg: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    platoon: Optional[str] = None
    sector: Optional[str] = None


class MedicalLeave(PortalRecord):
    rank: Optional[str] = None
    war_name: Optional[str] = None
    leave_type: Optional[str] = None
    cid: Optional[str] = None
    observation: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_indeterminate: bool = False
    status: Optional[str] = None

    @property
    def name(self) -> Optional[str]:
        """Leaves sort by war name wherever people sort by name."""
        return self.war_name


class TransferRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    from_sector: Optional[str] = None
    to_sector: Optional[str] = None
    date: Optional[str] = None
    reason: Optional[str] = None
    user_email: Optional[str] = None


class Asset(PortalRecord):
    sector: Optional[str] = None
    general_tag: Optional[str] = None
    local_tag: Optional[str] = None
    description: Optional[str] = None
    asset_class: Optional[str] = None
    conservation_state: Optional[str] = None
    acquisition_date: Optional[str] = None
    incorporation_type: Optional[str] = None
    acquisition_value: Optional[Union[float, str]] = None
    evaluation_value: Optional[Union[float, str]] = None
    net_value: Optional[Union[float, str]] = None
    transfer_history: List[TransferRecord] = Field(default_factory=list)


class Vehicle(PortalRecord):
    registration_number: Optional[Union[int, str]] = None
    plate: Optional[str] = None
    state: Optional[str] = None
    inspection_date: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    vehicle_type: Optional[str] = None
    has_key: Optional[bool] = None
    city: Optional[str] = None
    chassis_observation: Optional[str] = None
    release_date: Optional[str] = None
