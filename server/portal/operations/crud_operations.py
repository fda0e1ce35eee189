"""
Record CRUD Operations

Shared get/create/update/delete behaviour. Concrete operations set the
collection, entity model and write payload model.
"""

import logging
from typing import Any, Dict, Type

from pydantic import BaseModel

from portal.core.logging_config import log_structured
from portal.operations.base_operation import BaseOperation
from portal.schemas.context_schema import SessionContext
from portal.schemas.entities import PortalRecord
from portal.utils.date_parser import utc_now_iso

logger = logging.getLogger(__name__)


class RecordOperation(BaseOperation):
    collection: str = ""
    entity_model: Type[PortalRecord] = PortalRecord
    input_model: Type[BaseModel] = BaseModel

    def record_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "description": f"Full {self.entity_model.__name__} payload (camelCase keys)",
        }


class GetRecordOperation(RecordOperation):
    def get_input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {"id": {"type": "string", "description": "Record id"}},
            "required": ["id"],
        }

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        record = await self.require_record(self.collection, arguments["id"], self.entity_model)
        return self.format_success_response(self.name, record.to_wire())


class CreateRecordOperation(RecordOperation):
    def get_input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {"record": self.record_schema()},
            "required": ["record"],
        }

    async def build_document(self, payload: BaseModel, context: SessionContext) -> Dict[str, Any]:
        """Persisted document for a new record; subclasses add allocated fields."""
        return payload.to_record()

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        payload = self.parse_payload(self.input_model, arguments["record"])
        document = await self.build_document(payload, context)
        timestamp = utc_now_iso()
        document["createdAt"] = timestamp
        document["updatedAt"] = timestamp

        record_id = await self.store.insert(self.collection, document)
        log_structured(
            logger,
            "info",
            "record_created",
            collection=self.collection,
            record_id=record_id,
            user_email=context.email,
        )
        created = self.entity_model.model_validate({**document, "id": record_id})
        return self.format_success_response(self.name, created.to_wire())


class UpdateRecordOperation(RecordOperation):
    def get_input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Record id"},
                "record": self.record_schema(),
            },
            "required": ["id", "record"],
        }

    def build_changes(self, payload: BaseModel) -> Dict[str, Any]:
        return payload.to_record()

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        payload = self.parse_payload(self.input_model, arguments["record"])
        changes = self.build_changes(payload)
        changes["updatedAt"] = utc_now_iso()

        await self.store.update(self.collection, arguments["id"], changes)
        log_structured(
            logger,
            "info",
            "record_updated",
            collection=self.collection,
            record_id=arguments["id"],
            user_email=context.email,
        )
        updated = await self.require_record(self.collection, arguments["id"], self.entity_model)
        return self.format_success_response(self.name, updated.to_wire())


class DeleteRecordOperation(RecordOperation):
    def get_input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Record id"},
                "confirm": {"type": "boolean", "description": "Must be true; deletion is permanent"},
            },
            "required": ["id", "confirm"],
        }

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        self.require_confirmation(arguments)
        await self.store.delete(self.collection, arguments["id"])
        log_structured(
            logger,
            "info",
            "record_deleted",
            collection=self.collection,
            record_id=arguments["id"],
            user_email=context.email,
        )
        return self.format_success_response(self.name, {"id": arguments["id"], "deleted": True})
