"""
Operation Handler for the Portal Server

Manages operation registration, execution, and error handling.
"""

import logging
import json
from typing import Any, Dict, List, Optional, Type

from portal.core.database import get_record_store
from portal.core.error_catalog import (
    OperationNotFoundError,
    PortalError,
    RecordNotFoundError,
    StoreReadError,
    StoreWriteError,
    ValidationError,
    build_error_payload,
)
from portal.core.logging_config import configure_logging, log_structured
from portal.export.renderers import Exporter
from portal.operations.base_operation import BaseOperation, Clock, RenderedFile
from portal.operations.personnel_operations import (
    CreatePersonnelOperation,
    DeletePersonnelOperation,
    GetPersonnelOperation,
    ListPersonnelOperation,
    PersonnelBySectorOperation,
    PersonnelReportOperation,
    PersonnelStatsOperation,
    TransferPersonnelOperation,
    UpdatePersonnelOperation,
)
from portal.operations.medical_leave_operations import (
    CreateMedicalLeaveOperation,
    DeleteMedicalLeaveOperation,
    GetMedicalLeaveOperation,
    ListMedicalLeavesOperation,
    MedicalLeaveReportOperation,
    MedicalLeaveStatsOperation,
    UpdateMedicalLeaveOperation,
)
from portal.operations.vehicle_operations import (
    CreateVehicleOperation,
    DeleteVehicleOperation,
    GetVehicleOperation,
    SearchVehiclesOperation,
    UpdateVehicleOperation,
    VehicleReportOperation,
    VehicleStatsOperation,
)
from portal.operations.asset_operations import (
    CreateAssetOperation,
    DeleteAssetOperation,
    GetAssetOperation,
    ListAssetsOperation,
    TransferAssetOperation,
    UpdateAssetOperation,
)
from portal.schemas.context_schema import SessionContext
from portal.store.base import RecordStore

logger = logging.getLogger(__name__)
configure_logging()


# Registry of all available operation classes
OPERATION_CLASSES: List[Type[BaseOperation]] = [
    # Personnel
    ListPersonnelOperation,
    GetPersonnelOperation,
    CreatePersonnelOperation,
    UpdatePersonnelOperation,
    DeletePersonnelOperation,
    TransferPersonnelOperation,
    PersonnelBySectorOperation,
    PersonnelStatsOperation,
    PersonnelReportOperation,
    # Medical leaves
    ListMedicalLeavesOperation,
    GetMedicalLeaveOperation,
    CreateMedicalLeaveOperation,
    UpdateMedicalLeaveOperation,
    DeleteMedicalLeaveOperation,
    MedicalLeaveStatsOperation,
    MedicalLeaveReportOperation,
    # Vehicles
    SearchVehiclesOperation,
    GetVehicleOperation,
    CreateVehicleOperation,
    UpdateVehicleOperation,
    DeleteVehicleOperation,
    VehicleStatsOperation,
    VehicleReportOperation,
    # Assets
    ListAssetsOperation,
    GetAssetOperation,
    CreateAssetOperation,
    UpdateAssetOperation,
    DeleteAssetOperation,
    TransferAssetOperation,
]


class OperationHandler:
    """
    Handles portal operation registration and execution.

    Provides:
    - Operation registration from classes
    - Input validation
    - Error handling and formatting
    - Response serialization
    """

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        exporter: Optional[Exporter] = None,
        clock: Optional[Clock] = None,
    ):
        self._operations: Dict[str, BaseOperation] = {}
        self._initialized = False
        self._store = store
        self._exporter = exporter
        self._clock = clock

    def initialize(self) -> None:
        """Initialize operations with the record store"""
        if self._initialized:
            return

        store = self._store or get_record_store()
        if store is None:
            raise RuntimeError("Record store not connected")

        for operation_cls in OPERATION_CLASSES:
            operation = operation_cls(store, exporter=self._exporter, clock=self._clock)
            self._operations[operation.name] = operation

        self._initialized = True
        log_structured(
            logger,
            "info",
            "operation_handler_initialized",
            operations_loaded=len(self._operations),
        )

    def get_operations(self) -> List[Dict[str, Any]]:
        """
        Get list of all available operations with their schemas.

        Returns:
            List of operation definitions
        """
        if not self._initialized:
            self.initialize()

        operations = []
        for operation in self._operations.values():
            operations.append({
                "name": operation.name,
                "description": operation.description,
                "inputSchema": operation.get_input_schema(),
            })
        return operations

    def get_operation_names(self) -> List[str]:
        """Get list of available operation names"""
        if not self._initialized:
            self.initialize()
        return list(self._operations.keys())

    def get_operation(self, operation_name: str) -> BaseOperation:
        if not self._initialized:
            self.initialize()
        if operation_name not in self._operations:
            raise OperationNotFoundError(operation_name)
        return self._operations[operation_name]

    async def execute(
        self,
        operation_name: str,
        arguments: Dict[str, Any],
        context: Optional[SessionContext] = None,
    ) -> Dict[str, Any]:
        """
        Execute an operation with comprehensive error handling.

        Args:
            operation_name: Name of the operation to execute
            arguments: Operation input arguments
            context: Session context of the caller

        Returns:
            Operation result or error response
        """
        if not self._initialized:
            self.initialize()

        # Anonymous context if none provided
        if context is None:
            context = SessionContext()

        try:
            operation = self.get_operation(operation_name)

            # Validate input schema
            validation_error = self._validate_arguments(operation, arguments)
            if validation_error:
                raise ValidationError(validation_error)

            log_structured(logger, "info", "operation_execute_started", operation=operation_name)
            return await operation.execute(arguments, context)

        except ValidationError as e:
            log_structured(
                logger,
                "warning",
                "operation_execute_validation_error",
                operation=operation_name,
                error_code=e.error_code,
                message=e.message,
            )
            return self._format_error(e)

        except StoreReadError as e:
            log_structured(
                logger,
                "error",
                "operation_execute_fetch_error",
                operation=operation_name,
                error_code=e.error_code,
                message=e.message,
            )
            return self._format_error(e)

        except StoreWriteError as e:
            log_structured(
                logger,
                "error",
                "operation_execute_write_error",
                operation=operation_name,
                error_code=e.error_code,
                message=e.message,
            )
            return self._format_error(e)

        except RecordNotFoundError as e:
            log_structured(
                logger,
                "warning",
                "operation_execute_record_not_found",
                operation=operation_name,
                error_code=e.error_code,
                message=e.message,
            )
            return self._format_error(e)

        except OperationNotFoundError as e:
            log_structured(
                logger,
                "warning",
                "operation_execute_operation_not_found",
                operation=operation_name,
                error_code=e.error_code,
                message=e.message,
            )
            return self._format_error(e)

        except PortalError as e:
            log_structured(
                logger,
                "warning",
                "operation_execute_portal_error",
                operation=operation_name,
                error_code=e.error_code,
                message=e.message,
            )
            return self._format_error(e)

        except Exception as e:
            logger.exception(f"Unexpected error in {operation_name}: {str(e)}")
            error = PortalError(
                "An unexpected error occurred",
                "PORTAL-INTERNAL-001",
                {"original_error": str(e)},
            )
            return self._format_error(error)

    async def execute_json(
        self,
        operation_name: str,
        arguments: Dict[str, Any],
        context: Optional[SessionContext] = None,
    ) -> str:
        """Execute an operation and return JSON string result."""
        result = await self.execute(operation_name, arguments, context)
        return json.dumps(result, indent=2, default=str)

    async def render(
        self,
        operation_name: str,
        arguments: Dict[str, Any],
        context: Optional[SessionContext] = None,
    ) -> RenderedFile:
        """
        Render a report operation to a file.

        Raises PortalError subclasses; callers map them to their transport.
        """
        operation = self.get_operation(operation_name)
        render = getattr(operation, "render", None)
        if render is None:
            raise ValidationError(
                f"Operation '{operation_name}' does not produce a file",
                {"operation": operation_name},
            )
        validation_error = self._validate_arguments(operation, arguments)
        if validation_error:
            raise ValidationError(validation_error)

        log_structured(logger, "info", "operation_render_started", operation=operation_name)
        return await render(arguments, context or SessionContext())

    def _validate_arguments(
        self, operation: BaseOperation, arguments: Dict[str, Any]
    ) -> Optional[str]:
        """
        Validate arguments against operation schema.

        Args:
            operation: Operation instance
            arguments: Provided arguments

        Returns:
            Error message if validation fails, None otherwise
        """
        schema = operation.get_input_schema()
        required = schema.get("required", [])

        # Check required fields
        missing = [field for field in required if field not in arguments]
        if missing:
            return f"Missing required fields: {', '.join(missing)}"

        # Validate types if properties defined
        properties = schema.get("properties", {})
        for field, value in arguments.items():
            if field in properties and value is not None:
                prop_schema = properties[field]
                expected_type = prop_schema.get("type")

                if expected_type == "string" and not isinstance(value, str):
                    return f"Field '{field}' must be a string"
                elif expected_type == "integer" and (isinstance(value, bool) or not isinstance(value, int)):
                    return f"Field '{field}' must be an integer"
                elif expected_type == "boolean" and not isinstance(value, bool):
                    return f"Field '{field}' must be a boolean"
                elif expected_type == "object" and not isinstance(value, dict):
                    return f"Field '{field}' must be an object"

                # Validate enum values
                if "enum" in prop_schema and value not in prop_schema["enum"]:
                    return (
                        f"Field '{field}' must be one of: "
                        f"{', '.join(prop_schema['enum'])}"
                    )

        return None

    def _format_error(self, error: PortalError) -> Dict[str, Any]:
        """Format error as response dictionary"""
        return {
            "success": False,
            "error": build_error_payload(
                error.error_code,
                message=error.message,
                details=error.details,
                legacy_code=error.legacy_error_code,
            ),
        }


# Global handler instance
_handler: Optional[OperationHandler] = None


def get_operation_handler() -> OperationHandler:
    """Get the global operation handler instance"""
    global _handler
    if _handler is None:
        _handler = OperationHandler()
    return _handler


def reset_operation_handler() -> None:
    global _handler
    _handler = None
