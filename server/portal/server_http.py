"""
Police Unit Portal HTTP Server

FastAPI service exposing:
- Portal operations (listing, registration, transfers, statistics)
- Report downloads (PDF, text roster, SVG charts)
- Optional JWT-based session context
- Health checks

Usage:
    python portal_server.py
    uvicorn portal.server_http:app --host 0.0.0.0 --port 8090
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field

from portal.config import portal_settings
from portal.core.config import settings
from portal.core.database import close_record_store, connect_record_store, get_record_store
from portal.core.error_catalog import PortalError, build_error_payload, normalize_error_code
from portal.core.logging_config import configure_logging, log_structured
from portal.core.security import decode_access_token
from portal.handlers.operation_handler import get_operation_handler
from portal.schemas.context_schema import SessionContext

configure_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# Pydantic Models
# =============================================================================

class OperationExecuteRequest(BaseModel):
    """Request to execute an operation"""
    arguments: Dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: str
    version: str
    store: str
    operations_loaded: int


def _build_error_detail(
    message: str,
    *,
    code: str,
    request_id: Optional[str],
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build standardized API error detail with user-readable code and guidance."""
    normalized_code = normalize_error_code(code)
    return build_error_payload(
        normalized_code,
        message=message,
        details=details,
        request_id=request_id,
        legacy_code=code if normalized_code != code else None,
    )


_STATUS_BY_CODE = {
    "PORTAL-VALIDATION-001": 400,
    "PORTAL-INPUT-001": 400,
    "PORTAL-INPUT-002": 400,
    "PORTAL-DATA-001": 404,
    "PORTAL-OP-001": 404,
    "PORTAL-STORE-001": 502,
    "PORTAL-STORE-002": 502,
}


def _http_error_from_portal_error(error: PortalError, request_id: Optional[str]) -> HTTPException:
    return HTTPException(
        status_code=_STATUS_BY_CODE.get(error.error_code, 500),
        detail=_build_error_detail(
            error.message,
            code=error.error_code,
            request_id=request_id,
            details=error.details,
        ),
    )


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    log_structured(
        logger,
        "info",
        "server_starting",
        server_name=portal_settings.PORTAL_SERVER_NAME,
        version=portal_settings.PORTAL_SERVER_VERSION,
        store_backend=settings.PORTAL_STORE_BACKEND,
    )

    await connect_record_store()
    log_structured(logger, "info", "record_store_connected", backend=settings.PORTAL_STORE_BACKEND)

    handler = get_operation_handler()
    handler.initialize()
    log_structured(
        logger,
        "info",
        "operations_initialized",
        count=len(handler.get_operation_names()),
    )

    yield

    log_structured(logger, "info", "server_shutdown")
    await close_record_store()


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Police Unit Portal",
    description="Personnel, medical leave, vehicle and asset records with report exports",
    version=portal_settings.PORTAL_SERVER_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS != "*" else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """
    Attach request ID and emit request-level logs for correlation.
    """
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    request.state.request_id = request_id
    started_at = time.time()

    try:
        response = await call_next(request)
    except Exception:
        duration_ms = int((time.time() - started_at) * 1000)
        logger.exception("Unhandled request exception")
        log_structured(
            logger,
            "error",
            "request_failed",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status_code=500,
            duration_ms=duration_ms,
        )
        raise

    duration_ms = int((time.time() - started_at) * 1000)
    response.headers["X-Request-ID"] = request_id
    log_structured(
        logger,
        "info",
        "request_completed",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )
    return response


# =============================================================================
# Dependencies
# =============================================================================

async def get_session_context(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> SessionContext:
    """
    Extract the session context from a bearer JWT.
    Without an Authorization header the context is anonymous.
    """
    if not authorization:
        return SessionContext()

    request_id = getattr(request.state, "request_id", None)
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=401,
            detail=_build_error_detail(
                "Invalid auth scheme",
                code="PORTAL-AUTH-001",
                request_id=request_id,
            ),
        )

    payload = decode_access_token(parts[1])
    if not payload:
        log_structured(logger, "warning", "auth_failed", request_id=request_id)
        raise HTTPException(
            status_code=401,
            detail=_build_error_detail(
                "Invalid token",
                code="PORTAL-AUTH-002",
                request_id=request_id,
            ),
        )

    return SessionContext.from_claims(payload)


# =============================================================================
# Health Endpoints
# =============================================================================

@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    handler = get_operation_handler()
    store = get_record_store()

    store_status = "healthy" if store is not None and await store.ping() else "unhealthy"

    return HealthResponse(
        status="healthy" if store_status == "healthy" else "degraded",
        version=portal_settings.PORTAL_SERVER_VERSION,
        store=store_status,
        operations_loaded=len(handler.get_operation_names()) if store is not None else 0,
    )


@app.get("/ready", tags=["Health"])
async def readiness_check():
    """Readiness check"""
    store = get_record_store()
    if store is not None and await store.ping():
        return {"status": "ready"}
    raise HTTPException(
        status_code=503,
        detail=_build_error_detail(
            "Not ready",
            code="PORTAL-READY-001",
            request_id=None,
        ),
    )


# =============================================================================
# Operation Endpoints
# =============================================================================

@app.get("/api/v1/operations", tags=["Operations"])
async def list_operations():
    """List all available portal operations"""
    handler = get_operation_handler()
    return {
        "success": True,
        "operations": handler.get_operations(),
        "count": len(handler.get_operation_names()),
    }


@app.get("/api/v1/operations/{operation_name}", tags=["Operations"])
async def get_operation_schema(
    operation_name: str,
    http_request: Request,
):
    """Get schema for a specific operation"""
    handler = get_operation_handler()
    operations = {op["name"]: op for op in handler.get_operations()}

    if operation_name not in operations:
        raise HTTPException(
            status_code=404,
            detail=_build_error_detail(
                f"Operation not found: {operation_name}",
                code="PORTAL-OP-001",
                request_id=getattr(http_request.state, "request_id", None),
                details={"operation": operation_name},
            ),
        )

    return {"success": True, "operation": operations[operation_name]}


@app.post("/api/v1/operations/{operation_name}/execute", tags=["Operations"])
async def execute_operation(
    operation_name: str,
    request: OperationExecuteRequest,
    http_request: Request,
    context: SessionContext = Depends(get_session_context),
):
    """Execute a portal operation"""
    handler = get_operation_handler()
    start_time = time.time()

    result = await handler.execute(operation_name, request.arguments, context)

    duration_ms = int((time.time() - start_time) * 1000)
    result.setdefault("metadata", {})
    result["metadata"]["execution_time_ms"] = duration_ms

    log_structured(
        logger,
        "info",
        "operation_execute_completed",
        operation=operation_name,
        request_id=getattr(http_request.state, "request_id", None),
        user_id=context.user_id,
        success=result.get("success", False),
        duration_ms=duration_ms,
    )
    return result


# =============================================================================
# Report Downloads
# =============================================================================

async def _download(
    operation_name: str,
    arguments: Dict[str, Any],
    http_request: Request,
    context: SessionContext,
) -> Response:
    handler = get_operation_handler()
    request_id = getattr(http_request.state, "request_id", None)
    try:
        rendered = await handler.render(operation_name, arguments, context)
    except PortalError as e:
        log_structured(
            logger,
            "warning" if e.error_code.startswith("PORTAL-VALIDATION") else "error",
            "report_render_failed",
            operation=operation_name,
            request_id=request_id,
            error_code=e.error_code,
            message=e.message,
        )
        raise _http_error_from_portal_error(e, request_id)

    log_structured(
        logger,
        "info",
        "report_rendered",
        operation=operation_name,
        request_id=request_id,
        filename=rendered.filename,
        size=len(rendered.content),
    )
    return Response(
        content=rendered.content,
        media_type=rendered.media_type,
        headers={"Content-Disposition": f'attachment; filename="{rendered.filename}"'},
    )


def _report_arguments(**values: Any) -> Dict[str, Any]:
    """Drop unset query parameters so they do not reach enum validation."""
    return {key: value for key, value in values.items() if value not in (None, "")}


@app.get("/api/v1/reports/personnel.pdf", tags=["Reports"])
async def download_personnel_report(
    http_request: Request,
    sector: Optional[str] = None,
    rank: Optional[str] = None,
    city: Optional[str] = None,
    context: SessionContext = Depends(get_session_context),
):
    arguments = _report_arguments(format="pdf", sector=sector, rank=rank, city=city)
    return await _download("personnel_report", arguments, http_request, context)


@app.get("/api/v1/reports/personnel-sectors.txt", tags=["Reports"])
async def download_personnel_sector_roster(
    http_request: Request,
    sector: Optional[str] = None,
    rank: Optional[str] = None,
    city: Optional[str] = None,
    context: SessionContext = Depends(get_session_context),
):
    arguments = _report_arguments(format="txt", sector=sector, rank=rank, city=city)
    return await _download("personnel_report", arguments, http_request, context)


@app.get("/api/v1/reports/personnel-charts.svg", tags=["Reports"])
async def download_personnel_charts(
    http_request: Request,
    sector: Optional[str] = None,
    rank: Optional[str] = None,
    city: Optional[str] = None,
    context: SessionContext = Depends(get_session_context),
):
    arguments = _report_arguments(format="svg", sector=sector, rank=rank, city=city)
    return await _download("personnel_report", arguments, http_request, context)


@app.get("/api/v1/reports/vehicles.pdf", tags=["Reports"])
async def download_vehicle_report(
    http_request: Request,
    city: Optional[str] = None,
    vehicle_type: Optional[str] = None,
    inspection_from: Optional[str] = None,
    inspection_to: Optional[str] = None,
    context: SessionContext = Depends(get_session_context),
):
    arguments = _report_arguments(
        city=city,
        vehicle_type=vehicle_type,
        inspection_from=inspection_from,
        inspection_to=inspection_to,
    )
    return await _download("vehicle_report", arguments, http_request, context)


@app.get("/api/v1/reports/medical-leaves.pdf", tags=["Reports"])
async def download_medical_leave_report(
    http_request: Request,
    context: SessionContext = Depends(get_session_context),
):
    return await _download("medical_leave_report", {}, http_request, context)


# =============================================================================
# Main Entry Point
# =============================================================================

def main():
    """Run the HTTP server"""
    import uvicorn

    uvicorn.run(
        "portal.server_http:app",
        host=settings.PORTAL_HOST,
        port=int(settings.PORTAL_PORT),
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    main()
