"""Application-wide exception handlers."""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from content_files_api.schemas import ErrorNumber, ErrorResponse

logger = logging.getLogger(__name__)


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates during request processing."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception(f"Unhandled error while serving {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error_number=ErrorNumber.UNKNOWN).to_json(),
        )


async def handle_request_validation_errors(request: Request, exc: RequestValidationError):
    """Report the first request validation problem as a 400 error response."""
    errors = exc.errors()
    first_error = errors[0] if errors else {}
    location = first_error.get("loc") or ()
    error_number = ErrorNumber.NOTNULL if first_error.get("type") == "missing" else ErrorNumber.REQUIRED
    logger.warning(f"Rejected {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error_number=error_number,
            parameter_name=str(location[-1]) if location else None,
        ).to_json(),
    )
