import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from app.errors import ErrorType, ERROR_STATUS_MAP, INTERNAL_ERROR_MESSAGE

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Custom exception that repositories and routers can raise."""

    def __init__(self, error_type: ErrorType, message: str):
        self.error_type = error_type
        self.message = message
        super().__init__(message)


class RequestValidationFailed(Exception):
    """Raised by the validation layer when one or more field rules fail."""

    def __init__(self, errors: list[dict]):
        self.errors = errors
        super().__init__(f"{len(errors)} validation error(s)")


async def app_exception_handler(_request: Request, exc: AppException) -> JSONResponse:
    """Global handler for AppException - converts to proper HTTP response."""
    status_code = ERROR_STATUS_MAP.get(exc.error_type, 500)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message}
    )


async def validation_exception_handler(_request: Request, exc: RequestValidationFailed) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"errors": exc.errors}
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global handler for unhandled exceptions - returns 500."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": INTERNAL_ERROR_MESSAGE}
    )
