"""
Vehicle Operations for the Portal

Seized/impounded vehicle registry: search, registration with sequential
registration numbers, and the vehicle report.
"""

import logging
from typing import Any, Dict, List

from pydantic import BaseModel

from portal.constants import Collections
from portal.core.error_catalog import ValidationError
from portal.core.logging_config import log_structured
from portal.export.reports import VEHICLE_PDF_FILENAME, VEHICLE_REPORT_TITLE, vehicle_report_sections
from portal.operations.base_operation import BaseOperation, RenderedFile
from portal.operations.crud_operations import (
    CreateRecordOperation,
    DeleteRecordOperation,
    GetRecordOperation,
    UpdateRecordOperation,
)
from portal.pipeline.aggregation import vehicle_stats
from portal.pipeline.filters import VehicleFilter
from portal.pipeline.normalizer import normalize_records
from portal.pipeline.registration import next_registration_number
from portal.schemas.context_schema import SessionContext
from portal.schemas.entities import Vehicle
from portal.schemas.enums import City, VehicleType, enum_values
from portal.schemas.inputs import VehicleInput
from portal.store.base import RecordStore
from portal.utils.date_parser import parse_iso_date
from portal.utils.formatters import paginate

logger = logging.getLogger(__name__)

DATE_FIELDS = ("inspection_from", "inspection_to")


def vehicle_filter_properties() -> Dict[str, Any]:
    return {
        "city": {"type": "string", "enum": enum_values(City)},
        "vehicle_type": {"type": "string", "enum": enum_values(VehicleType)},
        "inspection_from": {"type": "string", "description": "YYYY-MM-DD, inclusive"},
        "inspection_to": {"type": "string", "description": "YYYY-MM-DD, inclusive"},
    }


def vehicle_filter_from(arguments: Dict[str, Any]) -> VehicleFilter:
    """Build the AND-combined filter; inspection bounds must be ISO dates."""
    for field_name in DATE_FIELDS:
        value = arguments.get(field_name)
        if value and parse_iso_date(value) is None:
            raise ValidationError(
                f"Field '{field_name}' must be an ISO date (YYYY-MM-DD)",
                {"field": field_name},
            )
    return VehicleFilter(
        city=arguments.get("city"),
        vehicle_type=arguments.get("vehicle_type"),
        registration_number=arguments.get("registration_number"),
        plate=arguments.get("plate"),
        inspection_from=arguments.get("inspection_from"),
        inspection_to=arguments.get("inspection_to"),
    )


async def fetch_matching_vehicles(store: RecordStore, vehicle_filter: VehicleFilter) -> List[Vehicle]:
    raw = await store.get_filtered(Collections.VEHICLES, vehicle_filter.to_predicates())
    return vehicle_filter.apply(normalize_records(raw, Vehicle))


class SearchVehiclesOperation(BaseOperation):
    """AND-combined vehicle search; unset criteria match everything."""

    name = "search_vehicles"
    description = (
        "Search vehicles by registration number, plate, city, vehicle type "
        "and an inclusive inspection date range."
    )

    def get_input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "registration_number": {"type": "integer"},
                "plate": {"type": "string", "description": "Compared uppercased"},
                **vehicle_filter_properties(),
                "page": {"type": "integer", "default": 1},
                "page_size": {"type": "integer", "default": 50},
            },
            "required": [],
        }

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        vehicle_filter = vehicle_filter_from(arguments)
        page, page_size = self.get_pagination_params(arguments)
        vehicles = await fetch_matching_vehicles(self.store, vehicle_filter)

        page_items, total = paginate(vehicles, page, page_size)
        return self.format_success_response(
            self.name,
            [vehicle.to_wire() for vehicle in page_items],
            total=total,
            page=page,
            page_size=page_size,
        )


class VehicleStatsOperation(BaseOperation):
    name = "vehicle_stats"
    description = (
        "Counts of vehicles by type, key possession, state and city, "
        "optionally narrowed by city, vehicle type and inspection date range."
    )

    def get_input_schema(self) -> Dict[str, Any]:
        return {"type": "object", "properties": vehicle_filter_properties(), "required": []}

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        vehicles = await fetch_matching_vehicles(self.store, vehicle_filter_from(arguments))
        return self.format_success_response(self.name, vehicle_stats(vehicles).model_dump())


class VehicleReportOperation(BaseOperation):
    name = "vehicle_report"
    description = "Export the vehicle report as PDF, over the vehicles matching the optional filters."

    def get_input_schema(self) -> Dict[str, Any]:
        return {"type": "object", "properties": vehicle_filter_properties(), "required": []}

    async def render(self, arguments: Dict[str, Any], context: SessionContext) -> RenderedFile:
        vehicles = await fetch_matching_vehicles(self.store, vehicle_filter_from(arguments))
        return RenderedFile(
            VEHICLE_PDF_FILENAME,
            "application/pdf",
            self.exporter.render_document(VEHICLE_REPORT_TITLE, vehicle_report_sections(vehicle_stats(vehicles))),
        )

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        rendered = await self.render(arguments, context)
        return self.format_success_response(self.name, rendered.to_response_data())


class GetVehicleOperation(GetRecordOperation):
    name = "get_vehicle"
    description = "Fetch one vehicle by id."
    collection = Collections.VEHICLES
    entity_model = Vehicle


class CreateVehicleOperation(CreateRecordOperation):
    """Registration allocates the next registration number (best effort, no transaction)."""

    name = "create_vehicle"
    description = "Register a vehicle; a sequential registration number is assigned."
    collection = Collections.VEHICLES
    entity_model = Vehicle
    input_model = VehicleInput

    async def build_document(self, payload: BaseModel, context: SessionContext) -> Dict[str, Any]:
        document = payload.to_record()
        document["registrationNumber"] = await next_registration_number(self.store)
        document["releaseDate"] = None
        log_structured(
            logger,
            "info",
            "registration_number_allocated",
            registration_number=document["registrationNumber"],
        )
        return document


class UpdateVehicleOperation(UpdateRecordOperation):
    name = "update_vehicle"
    description = "Overwrite a vehicle's data; the registration number is kept."
    collection = Collections.VEHICLES
    entity_model = Vehicle
    input_model = VehicleInput


class DeleteVehicleOperation(DeleteRecordOperation):
    name = "delete_vehicle"
    description = "Permanently delete a vehicle (requires confirm=true)."
    collection = Collections.VEHICLES
    entity_model = Vehicle
