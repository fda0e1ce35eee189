"""
Personnel Operations for the Portal

Listing, registration, sector transfers and effective-strength reports.
"""

import logging
from typing import Any, Dict, List

from portal.constants import Collections
from portal.core.error_catalog import StoreReadError, ValidationError
from portal.core.logging_config import log_structured
from portal.export.reports import (
    PERSONNEL_CHARTS_FILENAME,
    PERSONNEL_PDF_FILENAME,
    PERSONNEL_REPORT_TITLE,
    personnel_chart_specs,
    personnel_report_sections,
    sector_report_filename,
    sector_text_sections,
)
from portal.operations.base_operation import BaseOperation, RenderedFile
from portal.operations.crud_operations import (
    CreateRecordOperation,
    DeleteRecordOperation,
    GetRecordOperation,
    UpdateRecordOperation,
)
from portal.pipeline.aggregation import personnel_stats
from portal.pipeline.filters import PersonnelFilter
from portal.pipeline.normalizer import normalize_records
from portal.pipeline.ordering import group_by_sector, sector_counts, sort_by_rank_then_name
from portal.schemas.context_schema import SessionContext
from portal.schemas.entities import Personnel
from portal.schemas.enums import City, Rank, SECTOR_ORDER, enum_values
from portal.schemas.inputs import PersonnelInput, PersonnelTransferInput
from portal.store.base import OrderBy, RecordStore
from portal.utils.date_parser import utc_now_iso
from portal.utils.formatters import paginate

logger = logging.getLogger(__name__)


async def fetch_personnel(store: RecordStore) -> List[Personnel]:
    """
    Fetch every person in canonical rank-then-name order.

    The store is asked for a name-ordered snapshot first; if that query
    fails the fetch is retried once without ordering. Either way the final
    order is computed here. A second failure propagates.
    """
    try:
        raw = await store.get_filtered(Collections.PERSONNEL, order_by=OrderBy("name"))
    except StoreReadError as e:
        log_structured(
            logger,
            "warning",
            "personnel_ordered_fetch_failed",
            message=e.message,
            retry="unordered",
        )
        raw = await store.get_all(Collections.PERSONNEL)
    return sort_by_rank_then_name(normalize_records(raw, Personnel))


def personnel_filter_properties() -> Dict[str, Any]:
    return {
        "sector": {"type": "string", "description": "Only this sector"},
        "rank": {"type": "string", "enum": enum_values(Rank)},
        "city": {"type": "string", "enum": enum_values(City)},
    }


def personnel_filter_from(arguments: Dict[str, Any]) -> PersonnelFilter:
    return PersonnelFilter(
        sector=arguments.get("sector"),
        rank=arguments.get("rank"),
        city=arguments.get("city"),
    )


class ListPersonnelOperation(BaseOperation):
    """List personnel in rank-then-name order with optional filters."""

    name = "list_personnel"
    description = (
        "List police personnel ordered by rank hierarchy, then name. "
        "Optionally filter by sector, rank or city."
    )

    def get_input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                **personnel_filter_properties(),
                "page": {"type": "integer", "default": 1},
                "page_size": {"type": "integer", "default": 50},
            },
            "required": [],
        }

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        page, page_size = self.get_pagination_params(arguments)
        people = await fetch_personnel(self.store)
        filtered = personnel_filter_from(arguments).apply(people)

        page_items, total = paginate(filtered, page, page_size)
        return self.format_success_response(
            self.name,
            [person.to_wire() for person in page_items],
            total=total,
            page=page,
            page_size=page_size,
        )


class PersonnelBySectorOperation(BaseOperation):
    """Sector buckets plus a count for every known sector."""

    name = "personnel_by_sector"
    description = "Group personnel by sector; every known sector is counted, including empty ones."

    def get_input_schema(self) -> Dict[str, Any]:
        return {"type": "object", "properties": {}, "required": []}

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        people = await fetch_personnel(self.store)
        groups = group_by_sector(people)
        return self.format_success_response(
            self.name,
            {
                "groups": [
                    {"sector": sector, "count": len(members), "personnel": [p.to_wire() for p in members]}
                    for sector, members in groups.items()
                ],
                "counts": sector_counts(people),
            },
            metadata={"total": len(people)},
        )


class PersonnelStatsOperation(BaseOperation):
    name = "personnel_stats"
    description = (
        "Counts and percentages of personnel by sector, rank, city and platoon, "
        "over the list narrowed by the optional sector, rank and city filters."
    )

    def get_input_schema(self) -> Dict[str, Any]:
        return {"type": "object", "properties": personnel_filter_properties(), "required": []}

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        people = personnel_filter_from(arguments).apply(await fetch_personnel(self.store))
        return self.format_success_response(self.name, personnel_stats(people).model_dump())


class PersonnelReportOperation(BaseOperation):
    """
    Effective-strength exports.

    format "pdf": full report, "txt": per-sector roster, "svg": charts.
    Every format is built from the filtered list.
    """

    name = "personnel_report"
    description = "Export the personnel report as PDF, the per-sector roster as text, or the charts as SVG."

    FORMATS = ["pdf", "txt", "svg"]

    def get_input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "format": {"type": "string", "enum": self.FORMATS, "default": "pdf"},
                **personnel_filter_properties(),
            },
            "required": [],
        }

    async def render(self, arguments: Dict[str, Any], context: SessionContext) -> RenderedFile:
        export_format = arguments.get("format") or "pdf"
        people = personnel_filter_from(arguments).apply(await fetch_personnel(self.store))
        now = self.now()

        if export_format == "txt":
            return RenderedFile(
                sector_report_filename(now.date()),
                "text/plain; charset=utf-8",
                self.exporter.render_text(sector_text_sections(people)),
            )

        stats = personnel_stats(people)
        if export_format == "svg":
            return RenderedFile(
                PERSONNEL_CHARTS_FILENAME,
                "image/svg+xml",
                self.exporter.render_image(personnel_chart_specs(stats)),
            )
        return RenderedFile(
            PERSONNEL_PDF_FILENAME,
            "application/pdf",
            self.exporter.render_document(PERSONNEL_REPORT_TITLE, personnel_report_sections(people, stats, now)),
        )

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        rendered = await self.render(arguments, context)
        return self.format_success_response(self.name, rendered.to_response_data())


class GetPersonnelOperation(GetRecordOperation):
    name = "get_personnel"
    description = "Fetch one person by id."
    collection = Collections.PERSONNEL
    entity_model = Personnel


class CreatePersonnelOperation(CreateRecordOperation):
    name = "create_personnel"
    description = "Register a person. Rank, city, platoon and sector must be known values."
    collection = Collections.PERSONNEL
    entity_model = Personnel
    input_model = PersonnelInput


class UpdatePersonnelOperation(UpdateRecordOperation):
    name = "update_personnel"
    description = "Overwrite a person's registration data."
    collection = Collections.PERSONNEL
    entity_model = Personnel
    input_model = PersonnelInput


class DeletePersonnelOperation(DeleteRecordOperation):
    name = "delete_personnel"
    description = "Permanently delete a person (requires confirm=true)."
    collection = Collections.PERSONNEL
    entity_model = Personnel


class TransferPersonnelOperation(BaseOperation):
    """Move a person to another sector. No transfer history is kept."""

    name = "transfer_personnel"
    description = "Transfer a person to a different sector."

    def get_input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Personnel id"},
                "newSector": {"type": "string", "description": f"Target sector: {', '.join(SECTOR_ORDER)}"},
            },
            "required": ["id", "newSector"],
        }

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        payload = self.parse_payload(PersonnelTransferInput, arguments)
        person = await self.require_record(Collections.PERSONNEL, payload.id, Personnel)
        if person.sector == payload.new_sector:
            raise ValidationError(
                "The new sector must be different from the current sector",
                {"field": "newSector", "sector": person.sector},
            )

        await self.store.update(
            Collections.PERSONNEL,
            payload.id,
            {"sector": payload.new_sector, "updatedAt": utc_now_iso()},
        )
        log_structured(
            logger,
            "info",
            "personnel_transferred",
            record_id=payload.id,
            from_sector=person.sector,
            to_sector=payload.new_sector,
            user_email=context.email,
        )
        return self.format_success_response(
            self.name,
            {"id": payload.id, "fromSector": person.sector, "toSector": payload.new_sector},
        )
