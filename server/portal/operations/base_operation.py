"""
Base Operation Class for Portal Operations

Provides common functionality for all portal operations including
record store access, payload validation, and response formatting.
"""

import base64
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from portal.config import portal_settings
from portal.core.error_catalog import (
    PortalError,
    RecordNotFoundError,
    ValidationError,
)
from portal.export.renderers import Exporter, ReportlabExporter
from portal.pipeline.normalizer import normalize_record, normalize_records
from portal.schemas.context_schema import SessionContext
from portal.schemas.entities import PortalRecord
from portal.store.base import RecordStore
from portal.utils.date_parser import operational_now

RecordT = TypeVar("RecordT", bound=PortalRecord)
PayloadT = TypeVar("PayloadT", bound=BaseModel)

Clock = Callable[[], datetime]


class RenderedFile(NamedTuple):
    filename: str
    media_type: str
    content: bytes

    def to_response_data(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "media_type": self.media_type,
            "size": len(self.content),
            "content_base64": base64.b64encode(self.content).decode("ascii"),
        }


class BaseOperation(ABC):
    """
    Base class for all portal operations.

    Provides:
    - Record store access
    - The injectable clock every status/days-left computation uses
    - Standard response formatting
    - Input validation helpers
    """

    # Override in subclasses
    name: str = "base_operation"
    description: str = "Base operation description"

    def __init__(
        self,
        store: RecordStore,
        exporter: Optional[Exporter] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the operation.

        Args:
            store: Record store the operation reads and writes
            exporter: Document/image renderer (reportlab by default)
            clock: Returns the current operational time
        """
        self.store = store
        self.exporter = exporter or ReportlabExporter()
        self.clock = clock or operational_now
        self.max_results = portal_settings.PORTAL_MAX_RESULTS
        self.default_page_size = portal_settings.PORTAL_DEFAULT_PAGE_SIZE

    @abstractmethod
    async def execute(
        self,
        arguments: Dict[str, Any],
        context: SessionContext,
    ) -> Dict[str, Any]:
        """
        Execute the operation with given arguments and context.

        Args:
            arguments: Operation input arguments
            context: Session context of the caller

        Returns:
            Operation result
        """
        pass

    @abstractmethod
    def get_input_schema(self) -> Dict[str, Any]:
        """
        Return JSON Schema for operation inputs.

        Returns:
            JSON Schema dictionary defining expected inputs
        """
        pass

    def now(self) -> datetime:
        return self.clock()

    def get_pagination_params(
        self, arguments: Dict[str, Any]
    ) -> tuple[int, int]:
        """
        Extract and validate pagination parameters.

        Args:
            arguments: Operation input arguments

        Returns:
            Tuple of (page, page_size)
        """
        page = max(1, arguments.get("page") or 1)
        page_size = min(
            self.max_results,
            max(1, arguments.get("page_size") or self.default_page_size),
        )
        return page, page_size

    def format_success_response(
        self,
        query_type: str,
        data: Any,
        total: Optional[int] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Format a successful operation response.

        Args:
            query_type: Type of query executed
            data: Query results
            total: Total count for pagination
            page: Current page number
            page_size: Items per page
            metadata: Additional metadata

        Returns:
            Formatted response dictionary
        """
        response: Dict[str, Any] = {
            "success": True,
            "query_type": query_type,
            "data": data,
        }

        if total is not None:
            effective_page_size = page_size or self.default_page_size
            response["pagination"] = {
                "total": total,
                "page": page or 1,
                "page_size": effective_page_size,
                "total_pages": (total + effective_page_size - 1) // effective_page_size,
            }

        if metadata:
            response["metadata"] = metadata

        return response

    def parse_payload(self, model: Type[PayloadT], data: Any) -> PayloadT:
        """Validate a write payload, mapping pydantic errors to ValidationError."""
        if not isinstance(data, dict):
            raise ValidationError("Field 'record' must be an object")
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            errors = [
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]
            raise ValidationError(
                f"Invalid {model.__name__} payload",
                {"errors": errors},
            ) from e

    def require_confirmation(self, arguments: Dict[str, Any]) -> None:
        if arguments.get("confirm") is not True:
            raise ValidationError(
                "Deletion must be confirmed with confirm=true",
                {"field": "confirm"},
            )

    async def fetch_all(self, collection: str, model: Type[RecordT]) -> List[RecordT]:
        return normalize_records(await self.store.get_all(collection), model)

    async def require_record(self, collection: str, record_id: str, model: Type[RecordT]) -> RecordT:
        raw = await self.store.get_one(collection, record_id)
        if raw is None:
            raise RecordNotFoundError(collection, record_id)
        return normalize_record(raw, model)


__all__ = ["BaseOperation", "Clock", "PortalError", "RenderedFile"]
