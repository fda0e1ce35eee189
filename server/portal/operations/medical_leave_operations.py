"""
Medical Leave Operations for the Portal

Leave status is never read from the stored "status" field; it is derived
from the injected clock on every call.
"""

from typing import Any, Dict

from pydantic import BaseModel

from portal.constants import Collections
from portal.export.reports import (
    MEDICAL_LEAVE_PDF_FILENAME,
    MEDICAL_LEAVE_REPORT_TITLE,
    medical_leave_report_sections,
)
from portal.operations.base_operation import BaseOperation, RenderedFile
from portal.operations.crud_operations import (
    CreateRecordOperation,
    DeleteRecordOperation,
    GetRecordOperation,
    UpdateRecordOperation,
)
from portal.pipeline.aggregation import medical_leave_stats
from portal.pipeline.ordering import classify_leave, days_left, group_active_leaves, split_leaves
from portal.schemas.context_schema import SessionContext
from portal.schemas.entities import MedicalLeave
from portal.schemas.enums import LeaveStatus
from portal.schemas.inputs import MedicalLeaveInput
from portal.utils.formatters import days_left_label


def _leave_card(leave: MedicalLeave, now) -> Dict[str, Any]:
    status = classify_leave(leave, now)
    remaining = days_left(leave, now)
    card = leave.to_wire()
    card["computedStatus"] = status.value
    card["daysLeft"] = remaining
    # Undated leaves that are not indeterminate count as returned, not open-ended
    card["daysLeftLabel"] = days_left_label(remaining if status is LeaveStatus.ACTIVE else 0)
    return card


class ListMedicalLeavesOperation(BaseOperation):
    """Active leaves grouped by type plus the returned list."""

    name = "list_medical_leaves"
    description = (
        "List medical leaves: active leaves grouped by leave type (largest group first) "
        "and returned leaves, most recent first."
    )

    def get_input_schema(self) -> Dict[str, Any]:
        return {"type": "object", "properties": {}, "required": []}

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        now = self.now()
        leaves = await self.fetch_all(Collections.MEDICAL_LEAVES, MedicalLeave)
        partition = split_leaves(leaves, now)

        return self.format_success_response(
            self.name,
            {
                "active_groups": [
                    {
                        "leaveType": group.leave_type,
                        "label": group.label,
                        "count": len(group.leaves),
                        "leaves": [_leave_card(leave, now) for leave in group.leaves],
                    }
                    for group in group_active_leaves(partition.active)
                ],
                "returned": [_leave_card(leave, now) for leave in partition.returned],
            },
            metadata={
                "total": len(leaves),
                "active": len(partition.active),
                "returned": len(partition.returned),
                "evaluated_at": now.isoformat(),
            },
        )


class MedicalLeaveStatsOperation(BaseOperation):
    name = "medical_leave_stats"
    description = "Counts and percentages of leaves by type and by active/returned status."

    def get_input_schema(self) -> Dict[str, Any]:
        return {"type": "object", "properties": {}, "required": []}

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        leaves = await self.fetch_all(Collections.MEDICAL_LEAVES, MedicalLeave)
        return self.format_success_response(self.name, medical_leave_stats(leaves, self.now()).model_dump())


class MedicalLeaveReportOperation(BaseOperation):
    name = "medical_leave_report"
    description = "Export the medical leave report (active and returned tables) as PDF."

    def get_input_schema(self) -> Dict[str, Any]:
        return {"type": "object", "properties": {}, "required": []}

    async def render(self, arguments: Dict[str, Any], context: SessionContext) -> RenderedFile:
        leaves = await self.fetch_all(Collections.MEDICAL_LEAVES, MedicalLeave)
        partition = split_leaves(leaves, self.now())
        return RenderedFile(
            MEDICAL_LEAVE_PDF_FILENAME,
            "application/pdf",
            self.exporter.render_document(MEDICAL_LEAVE_REPORT_TITLE, medical_leave_report_sections(partition)),
        )

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        rendered = await self.render(arguments, context)
        return self.format_success_response(self.name, rendered.to_response_data())


class GetMedicalLeaveOperation(GetRecordOperation):
    name = "get_medical_leave"
    description = "Fetch one medical leave by id."
    collection = Collections.MEDICAL_LEAVES
    entity_model = MedicalLeave


class CreateMedicalLeaveOperation(CreateRecordOperation):
    name = "create_medical_leave"
    description = (
        "Register a leave. cid is required for medical leaves, observation for the others; "
        "endDate is required unless isIndeterminate is true."
    )
    collection = Collections.MEDICAL_LEAVES
    entity_model = MedicalLeave
    input_model = MedicalLeaveInput


class UpdateMedicalLeaveOperation(UpdateRecordOperation):
    name = "update_medical_leave"
    description = "Overwrite a leave. The same conditional field rules as registration apply."
    collection = Collections.MEDICAL_LEAVES
    entity_model = MedicalLeave
    input_model = MedicalLeaveInput

    def build_changes(self, payload: BaseModel) -> Dict[str, Any]:
        changes = payload.to_record()
        # Overwrite semantics: clear fields the new payload leaves out
        for field_name in ("endDate", "cid", "observation"):
            changes.setdefault(field_name, None)
        return changes


class DeleteMedicalLeaveOperation(DeleteRecordOperation):
    name = "delete_medical_leave"
    description = "Permanently delete a leave (requires confirm=true)."
    collection = Collections.MEDICAL_LEAVES
    entity_model = MedicalLeave
