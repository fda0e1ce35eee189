"""
Asset Operations for the Portal

Patrimony records and inter-sector transfers with history.
"""

import logging
from typing import Any, Dict

from pydantic import BaseModel

from portal.constants import Collections
from portal.core.error_catalog import ValidationError
from portal.core.logging_config import log_structured
from portal.operations.base_operation import BaseOperation
from portal.operations.crud_operations import (
    CreateRecordOperation,
    DeleteRecordOperation,
    GetRecordOperation,
    UpdateRecordOperation,
)
from portal.pipeline.ordering import sector_counts
from portal.schemas.context_schema import SessionContext
from portal.schemas.entities import Asset, TransferRecord
from portal.schemas.enums import SECTOR_ORDER
from portal.schemas.inputs import AssetInput, AssetTransferInput
from portal.utils.date_parser import utc_now_iso

logger = logging.getLogger(__name__)


class ListAssetsOperation(BaseOperation):
    name = "list_assets"
    description = "List assets, optionally for one sector, with per-sector counts."

    def get_input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "sector": {"type": "string", "description": "Only this sector"},
            },
            "required": [],
        }

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        assets = await self.fetch_all(Collections.ASSETS, Asset)
        sector = arguments.get("sector")
        selected = [asset for asset in assets if not sector or asset.sector == sector]
        return self.format_success_response(
            self.name,
            [asset.to_wire() for asset in selected],
            metadata={"total": len(selected), "sector_counts": sector_counts(assets)},
        )


class GetAssetOperation(GetRecordOperation):
    name = "get_asset"
    description = "Fetch one asset by id, including its transfer history."
    collection = Collections.ASSETS
    entity_model = Asset


class CreateAssetOperation(CreateRecordOperation):
    name = "create_asset"
    description = "Register an asset in a sector."
    collection = Collections.ASSETS
    entity_model = Asset
    input_model = AssetInput

    async def build_document(self, payload: BaseModel, context: SessionContext) -> Dict[str, Any]:
        document = payload.to_record()
        document["transferHistory"] = []
        return document


class UpdateAssetOperation(UpdateRecordOperation):
    name = "update_asset"
    description = "Overwrite an asset's data; transfer history is kept."
    collection = Collections.ASSETS
    entity_model = Asset
    input_model = AssetInput


class DeleteAssetOperation(DeleteRecordOperation):
    name = "delete_asset"
    description = "Permanently delete an asset (requires confirm=true)."
    collection = Collections.ASSETS
    entity_model = Asset


class TransferAssetOperation(BaseOperation):
    """Move an asset to another sector and append the move to its history."""

    name = "transfer_asset"
    description = "Transfer an asset to a different sector, recording who moved it and why."

    def get_input_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "Asset id"},
                "toSector": {"type": "string", "description": f"Target sector: {', '.join(SECTOR_ORDER)}"},
                "reason": {"type": "string"},
            },
            "required": ["id", "toSector"],
        }

    async def execute(self, arguments: Dict[str, Any], context: SessionContext) -> Dict[str, Any]:
        payload = self.parse_payload(AssetTransferInput, arguments)
        asset = await self.require_record(Collections.ASSETS, payload.id, Asset)
        if asset.sector == payload.to_sector:
            raise ValidationError(
                "The new sector must be different from the current sector",
                {"field": "toSector", "sector": asset.sector},
            )

        timestamp = utc_now_iso()
        entry = TransferRecord(
            from_sector=asset.sector,
            to_sector=payload.to_sector,
            date=timestamp,
            reason=payload.reason,
            user_email=context.email,
        )
        history = [
            record.model_dump(by_alias=True, exclude_none=True) if isinstance(record, TransferRecord) else dict(record)
            for record in asset.transfer_history or []
        ]
        history.append(entry.model_dump(by_alias=True, exclude_none=True))

        await self.store.update(
            Collections.ASSETS,
            payload.id,
            {"sector": payload.to_sector, "transferHistory": history, "updatedAt": timestamp},
        )
        log_structured(
            logger,
            "info",
            "asset_transferred",
            record_id=payload.id,
            from_sector=asset.sector,
            to_sector=payload.to_sector,
            user_email=context.email,
        )
        return self.format_success_response(self.name, entry.model_dump(by_alias=True, exclude_none=True))
