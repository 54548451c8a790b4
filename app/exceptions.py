"""
Error responses for the directory API.

Every failure leaves the API as a JSON object with an ``error`` message,
optional field-level ``details`` and a machine-readable ``code``:

    400  {"error": "Validation error", "details": [{field, message, type}], ...}
    404  {"error": "Company with ID 7 was not found", ...}
    409  {"error": "...", ...}
    500  {"error": "An unexpected error occurred", ...}

Each body also carries ``traceId`` (the request ID from the correlation
middleware) and ``timestamp`` so clients can quote them in bug reports.
"""

from typing import Optional, Dict, Any, List
from enum import Enum
from pydantic import BaseModel, Field
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError
import logging
import traceback
import uuid
from datetime import datetime

logger = logging.getLogger(__name__)


def _get_trace_id() -> str:
    """Get trace ID from correlation context or generate a new one."""
    from app.middleware.correlation import get_request_id

    request_id = get_request_id()
    if request_id and request_id != "unknown":
        return request_id
    return str(uuid.uuid4())[:12]


def _utc_timestamp() -> str:
    return datetime.utcnow().isoformat() + "Z"


class ErrorCode(str, Enum):
    """Standardized error codes for the directory API."""

    # Validation
    VALIDATION_ERROR = "VAL_001"
    INVALID_FORMAT = "VAL_002"
    MISSING_FIELD = "VAL_003"

    # Resource
    NOT_FOUND = "RES_001"
    CONFLICT = "RES_003"

    # Storage
    DATABASE_ERROR = "EXT_004"

    # Server
    INTERNAL_ERROR = "SRV_001"


class ErrorResponse(BaseModel):
    """
    Error response body.

    Attributes:
        error: Human-readable summary
        details: Field-level validation errors (400 only)
        code: Machine-readable error code for client handling
        status: HTTP status code
        path: Request path that failed
        timestamp: ISO 8601 timestamp of when the error occurred
        trace_id: Request identifier for finding the failure in logs
    """

    error: str
    details: Optional[List[Dict[str, Any]]] = None
    code: str
    status: int
    path: Optional[str] = None
    timestamp: str
    trace_id: str = Field(serialization_alias="traceId")

    model_config = {
        "json_schema_extra": {
            "example": {
                "error": "Company with ID 123 was not found",
                "code": "RES_001",
                "status": 404,
                "path": "/api/companies/123",
                "timestamp": "2025-01-29T10:30:00Z",
                "traceId": "abc123def456",
            }
        }
    }


class DirectoryException(HTTPException):
    """
    Base exception for the directory API.

    Usage:
        raise DirectoryException(
            status_code=404,
            code=ErrorCode.NOT_FOUND,
            detail="Company not found",
        )
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.code = code
        self.errors = errors
        self.trace_id = _get_trace_id()
        self.timestamp = _utc_timestamp()

        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def to_response_body(self, path: Optional[str] = None) -> ErrorResponse:
        return ErrorResponse(
            error=self.detail,
            details=self.errors,
            code=self.code.value,
            status=self.status_code,
            path=path,
            timestamp=self.timestamp,
            trace_id=self.trace_id,
        )


# Convenience exception classes

class NotFoundError(DirectoryException):
    """Resource not found (404)."""

    def __init__(self, resource: str, resource_id: Any):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            status_code=404,
            code=ErrorCode.NOT_FOUND,
            detail=f"{resource} with ID {resource_id} was not found",
        )


class ValidationError(DirectoryException):
    """Validation error (400)."""

    def __init__(
        self,
        detail: str,
        errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(
            status_code=400,
            code=ErrorCode.VALIDATION_ERROR,
            detail=detail,
            errors=errors,
        )

    @classmethod
    def for_field(cls, field: str, message: str, error_type: str = "value_error") -> "ValidationError":
        """Validation error pointing at a single request field."""
        return cls(
            detail="Validation error",
            errors=[{"field": field, "message": message, "type": error_type}],
        )


class ConflictError(DirectoryException):
    """Resource conflict (409)."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=409,
            code=ErrorCode.CONFLICT,
            detail=detail,
        )


class StorageError(DirectoryException):
    """Underlying store unreachable or a query failed (500). Never retried here."""

    def __init__(self, detail: str = "Storage operation failed"):
        super().__init__(
            status_code=500,
            code=ErrorCode.DATABASE_ERROR,
            detail=detail,
        )


# Exception handlers for FastAPI

def create_error_response(
    status_code: int,
    code: ErrorCode,
    detail: str,
    request: Request,
    errors: Optional[List[Dict[str, Any]]] = None,
    trace_id: Optional[str] = None,
    allowed_origins: Optional[List[str]] = None,
) -> JSONResponse:
    """Create a JSON error response with CORS headers."""
    body = ErrorResponse(
        error=detail,
        details=errors,
        code=code.value,
        status=status_code,
        path=str(request.url.path),
        timestamp=_utc_timestamp(),
        trace_id=trace_id or _get_trace_id(),
    )
    response = JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True, by_alias=True),
    )
    _add_cors_headers(response, request, allowed_origins)
    return response


def _add_cors_headers(
    response: JSONResponse,
    request: Request,
    allowed_origins: Optional[List[str]],
) -> None:
    # Exception responses bypass CORSMiddleware, so mirror its headers here
    if allowed_origins:
        origin = request.headers.get("origin", "")
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"


def _field_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    """Flatten Pydantic errors into ``{field, message, type}`` entries."""
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error["loc"]]
        # "body" / "query" / "path" prefixes are kept so clients know where to look
        errors.append({
            "field": ".".join(loc),
            "message": error["msg"],
            "type": error["type"],
        })
    return errors


def create_exception_handlers(allowed_origins: List[str]):
    """
    Create exception handlers with configured allowed origins for CORS.

    Usage in main.py:
        handlers = create_exception_handlers(allowed_origins)
        app.add_exception_handler(DirectoryException, handlers["directory"])
        app.add_exception_handler(RequestValidationError, handlers["validation"])
        app.add_exception_handler(Exception, handlers["generic"])
    """

    async def handle_directory_exception(request: Request, exc: DirectoryException) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            f"{type(exc).__name__}: {exc.code.value} - {exc.detail}",
            extra={
                "trace_id": exc.trace_id,
                "status_code": exc.status_code,
                "path": request.url.path,
            }
        )

        response = JSONResponse(
            status_code=exc.status_code,
            content=exc.to_response_body(path=str(request.url.path)).model_dump(
                exclude_none=True, by_alias=True
            ),
            headers=exc.headers,
        )
        _add_cors_headers(response, request, allowed_origins)
        return response

    async def handle_http_exception(
        request: Request,
        exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle plain HTTPException (e.g. unknown routes) with the same body shape."""
        code_map = {
            400: ErrorCode.VALIDATION_ERROR,
            404: ErrorCode.NOT_FOUND,
            409: ErrorCode.CONFLICT,
            422: ErrorCode.VALIDATION_ERROR,
            500: ErrorCode.INTERNAL_ERROR,
        }

        code = code_map.get(exc.status_code, ErrorCode.INTERNAL_ERROR)

        return create_error_response(
            status_code=exc.status_code,
            code=code,
            detail=str(exc.detail),
            request=request,
            allowed_origins=allowed_origins,
        )

    async def handle_validation_exception(
        request: Request,
        exc: RequestValidationError
    ) -> JSONResponse:
        """Schema failures in body, query or path are client errors (400)."""
        errors = _field_errors(exc)
        logger.info(
            "Request validation failed",
            extra={"path": request.url.path, "fields": [e["field"] for e in errors]},
        )

        return create_error_response(
            status_code=400,
            code=ErrorCode.VALIDATION_ERROR,
            detail="Validation error",
            request=request,
            errors=errors,
            allowed_origins=allowed_origins,
        )

    async def handle_storage_exception(
        request: Request,
        exc: SQLAlchemyError
    ) -> JSONResponse:
        """Database failures are opaque to the client and never retried here."""
        trace_id = _get_trace_id()
        logger.error(
            f"Storage error: {type(exc).__name__}",
            extra={"trace_id": trace_id, "path": request.url.path},
        )
        logger.error(traceback.format_exc())

        return create_error_response(
            status_code=500,
            code=ErrorCode.DATABASE_ERROR,
            detail="Storage operation failed",
            request=request,
            trace_id=trace_id,
            allowed_origins=allowed_origins,
        )

    async def handle_generic_exception(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        trace_id = _get_trace_id()

        logger.error(
            f"Unhandled exception: {exc}",
            extra={"trace_id": trace_id, "path": request.url.path},
        )
        logger.error(traceback.format_exc())

        # Don't expose internal details in production
        from app.config import settings
        detail = str(exc) if settings.DEBUG else "An unexpected error occurred"

        return create_error_response(
            status_code=500,
            code=ErrorCode.INTERNAL_ERROR,
            detail=detail,
            request=request,
            trace_id=trace_id,
            allowed_origins=allowed_origins,
        )

    return {
        "directory": handle_directory_exception,
        "http": handle_http_exception,
        "validation": handle_validation_exception,
        "storage": handle_storage_exception,
        "generic": handle_generic_exception,
    }
