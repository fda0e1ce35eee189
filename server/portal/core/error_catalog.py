"""Shared user-readable error codes, payload helpers and the portal error hierarchy."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ErrorDefinition:
    """Metadata for a user-facing error code."""

    code: str
    default_message: str
    user_action: str


ERROR_CATALOG: Dict[str, ErrorDefinition] = {
    "PORTAL-AUTH-001": ErrorDefinition(
        code="PORTAL-AUTH-001",
        default_message="Authentication header format is invalid.",
        user_action="Use the header format: Authorization: Bearer <token>.",
    ),
    "PORTAL-AUTH-002": ErrorDefinition(
        code="PORTAL-AUTH-002",
        default_message="Authentication token is invalid or expired.",
        user_action="Sign in again and retry with a fresh token.",
    ),
    "PORTAL-OP-001": ErrorDefinition(
        code="PORTAL-OP-001",
        default_message="Requested operation was not found.",
        user_action="Check the operation name from /api/v1/operations and retry.",
    ),
    "PORTAL-STORE-001": ErrorDefinition(
        code="PORTAL-STORE-001",
        default_message="Failed to load records from the database.",
        user_action="Refresh the page. If it keeps failing, check the database connection.",
    ),
    "PORTAL-STORE-002": ErrorDefinition(
        code="PORTAL-STORE-002",
        default_message="Failed to save changes to the database.",
        user_action="Reload the list to see the current data, then retry the change.",
    ),
    "PORTAL-VALIDATION-001": ErrorDefinition(
        code="PORTAL-VALIDATION-001",
        default_message="Input validation failed.",
        user_action="Check required fields and allowed values, then retry.",
    ),
    "PORTAL-INPUT-001": ErrorDefinition(
        code="PORTAL-INPUT-001",
        default_message="Required input parameter is missing.",
        user_action="Provide all required fields and retry.",
    ),
    "PORTAL-INPUT-002": ErrorDefinition(
        code="PORTAL-INPUT-002",
        default_message="Input parameter value is invalid.",
        user_action="Correct the invalid field value and retry.",
    ),
    "PORTAL-DATA-001": ErrorDefinition(
        code="PORTAL-DATA-001",
        default_message="Requested record was not found.",
        user_action="Reload the list; the record may have been deleted.",
    ),
    "PORTAL-READY-001": ErrorDefinition(
        code="PORTAL-READY-001",
        default_message="Service is not ready.",
        user_action="Try again in a few seconds.",
    ),
    "PORTAL-INTERNAL-001": ErrorDefinition(
        code="PORTAL-INTERNAL-001",
        default_message="Unexpected internal server error.",
        user_action="Retry the request. If the issue persists, report the request ID.",
    ),
}

DEFAULT_ERROR = ERROR_CATALOG["PORTAL-INTERNAL-001"]


LEGACY_CODE_MAP: Dict[str, str] = {
    "VALIDATION_ERROR": "PORTAL-VALIDATION-001",
    "FETCH_ERROR": "PORTAL-STORE-001",
    "WRITE_ERROR": "PORTAL-STORE-002",
    "OPERATION_NOT_FOUND": "PORTAL-OP-001",
    "INTERNAL_ERROR": "PORTAL-INTERNAL-001",
    "MISSING_PARAMETER": "PORTAL-INPUT-001",
    "INVALID_PARAMETER": "PORTAL-INPUT-002",
    "NOT_FOUND": "PORTAL-DATA-001",
}


def normalize_error_code(code: str) -> str:
    """Normalize short internal codes to user-facing portal codes."""
    if code in ERROR_CATALOG:
        return code
    if code in LEGACY_CODE_MAP:
        return LEGACY_CODE_MAP[code]
    return DEFAULT_ERROR.code


def build_error_payload(
    code: str,
    *,
    message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
    legacy_code: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a consistent user-readable error payload."""
    normalized_code = normalize_error_code(code)
    definition = ERROR_CATALOG.get(normalized_code, DEFAULT_ERROR)

    payload_details: Dict[str, Any] = dict(details or {})
    if request_id:
        payload_details["request_id"] = request_id
    if legacy_code and legacy_code != normalized_code:
        payload_details["legacy_code"] = legacy_code

    return {
        "code": normalized_code,
        "message": message or definition.default_message,
        "user_action": definition.user_action,
        "details": payload_details,
    }


class PortalError(Exception):
    """Base exception for portal errors"""

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = normalize_error_code(error_code)
        self.details = details or {}
        self.legacy_error_code = error_code if self.error_code != error_code else None


class ValidationError(PortalError):
    """Input validation error"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "PORTAL-VALIDATION-001", details)


class StoreReadError(PortalError):
    """Record store fetch failure"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "PORTAL-STORE-001", details)


class StoreWriteError(PortalError):
    """Record store insert/update/delete failure"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "PORTAL-STORE-002", details)


class RecordNotFoundError(PortalError):
    """Record id does not exist in the collection"""

    def __init__(self, collection: str, record_id: str):
        super().__init__(
            f"Record not found: {collection}/{record_id}",
            "PORTAL-DATA-001",
            {"collection": collection, "id": record_id},
        )


class OperationNotFoundError(PortalError):
    """Operation not found error"""

    def __init__(self, operation_name: str):
        super().__init__(
            f"Unknown operation: {operation_name}",
            "PORTAL-OP-001",
            {"operation": operation_name},
        )
