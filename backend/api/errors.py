"""
Exception handlers.

Map the LogitrackError groups to HTTP status codes so routes can let
domain exceptions propagate.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConnectivityError,
    DataStoreError,
    LogitrackError,
    NotFoundError,
    ValidationError,
)

from .models.errors import ErrorResponse

logger = logging.getLogger(__name__)

# Checked in order; the first matching base wins
STATUS_CODES: list[tuple[type[LogitrackError], int]] = [
    (ConnectivityError, 503),
    (NotFoundError, 404),
    (ValidationError, 422),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (DataStoreError, 502),
]

DEFAULT_STATUS_CODE = 500


def status_code_for(error: LogitrackError) -> int:
    for error_type, status_code in STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return DEFAULT_STATUS_CODE


async def handle_logitrack_error(request: Request, exc: LogitrackError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    body = ErrorResponse(**exc.to_dict())
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LogitrackError, handle_logitrack_error)
