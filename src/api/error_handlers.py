"""Exception handlers shared by every backend service."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from services.exceptions import ServiceError

logger = logging.getLogger(__name__)


def _format_validation_error(error: dict) -> str:
    # Drop the "body"/"query"/"path" source segment from the location
    loc = [str(part) for part in error.get("loc", ())]
    field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
    return f"{field}: {error.get('msg', 'invalid value')}"


async def service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    """Map a typed service error to its status and message."""
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def validation_error_handler(
    _request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Report every invalid field at once, with status 400."""
    return JSONResponse(
        status_code=400,
        content={
            "message": "Validation failed",
            "errors": [_format_validation_error(e) for e in exc.errors()],
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log and hide the details from the caller."""
    logger.exception(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"message": "Internal Server Error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
