"""
Exception Handlers.

Turn anything raised inside an endpoint into the ErrorResponse envelope the
CLI and ApiNoteStore parse. The status code decides how ApiNoteStore maps the
failure back: 404 becomes NotFoundError, 400/422 ValidationError, everything
else ExternalServiceError.

Request id and frontend are already bound to the structlog context by
RequestContextMiddleware, so log calls here only add the error fields.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from modules.backend.core.exceptions import (
    ApplicationError,
    ConflictError,
    DatabaseError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from modules.backend.core.logging import get_logger
from modules.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    ConflictError: 409,
    ExternalServiceError: 502,
    DatabaseError: 503,
}


def _status_for(exc: ApplicationError) -> int:
    for cls in type(exc).__mro__:
        if cls in EXCEPTION_STATUS_MAP:
            return EXCEPTION_STATUS_MAP[cls]
    return 500


def _get_request_id(request: Request) -> str | None:
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id")


def _envelope(request: Request, status_code: int, error: ErrorDetail) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        metadata=ResponseMetadata(request_id=_get_request_id(request)),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    """5xx are logged as errors, caller mistakes as warnings."""
    status_code = _status_for(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Request failed",
        extra={"code": exc.code, "error": exc.message, "status": status_code},
    )

    error = ErrorDetail(code=exc.code, message=exc.message)
    if isinstance(exc, ValidationError) and exc.details:
        error.details = exc.details
    return _envelope(request, status_code, error)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report each invalid field as `location.name`, e.g. body.title or query.limit."""
    field_errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", "Validation error"),
            "type": err.get("type", "unknown"),
        }
        for err in exc.errors()
    ]
    logger.warning(
        "Request validation failed",
        extra={"fields": [e["field"] for e in field_errors]},
    )

    return _envelope(
        request,
        422,
        ErrorDetail(
            code="VAL_REQUEST_INVALID",
            message="Request validation failed",
            details={"validation_errors": field_errors},
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback; the response never echoes the exception text."""
    logger.exception("Unhandled exception", extra={"exception_type": type(exc).__name__})
    return _envelope(
        request,
        500,
        ErrorDetail(code="SYS_INTERNAL_ERROR", message="An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
