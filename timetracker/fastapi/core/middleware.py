import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from timetracker.fastapi.core.exceptions import (
    ConflictError, ForbiddenError, NotFoundError, StoreUnavailable,
    TimeTrackerError, UnauthenticatedError, ValidationError
)
from timetracker.fastapi.core.init_settings import global_settings

logger = logging.getLogger(__name__)

# Most specific first; the first matching class decides the status code
ERROR_STATUS_CODES = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (StoreUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
)

STORE_RETRY_AFTER_SECONDS = 5


def status_code_for(exc: TimeTrackerError) -> int:
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def time_tracker_error_handler(request: Request, exc: TimeTrackerError) -> JSONResponse:
    status_code = status_code_for(exc)
    headers = {}
    if isinstance(exc, UnauthenticatedError):
        headers["WWW-Authenticate"] = "Bearer"
    elif isinstance(exc, StoreUnavailable):
        headers["Retry-After"] = str(STORE_RETRY_AFTER_SECONDS)

    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%d): %s", request.method, request.url.path, status_code, exc.message)

    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message, "code": exc.code},
        headers=headers,
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed requests are reported like domain validation errors
    errors = exc.errors()
    first = errors[0] if errors else {}
    message = first.get("msg", "Invalid request")
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    if location:
        message = f"{location}: {message}"
    return await time_tracker_error_handler(request, ValidationError(message))


def setup_exception_handlers(app: FastAPI):
    app.add_exception_handler(TimeTrackerError, time_tracker_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)


def setup_cors(app: FastAPI):
    origins = global_settings.CORS_ORIGINS
    logger.info("🌐 CORS allowed origins: %s", origins)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
    )
