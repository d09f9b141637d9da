"""
Exception Handlers

Maps the domain error taxonomy onto HTTP responses. Every error body has
the shape {"error": "<message>"}.

Store failures and unexpected exceptions are logged with their cause and
reported to the client as an opaque "Internal server error".
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from garage_tracker.core.exceptions import (
    DuplicateEmailError,
    GarageTrackerException,
    InvalidCredentialsError,
    InvalidTokenError,
    RecordNotFoundError,
    StoreFailureError,
    UnauthenticatedError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

ERROR_STATUS_CODES = {
    ValidationFailedError: status.HTTP_400_BAD_REQUEST,
    DuplicateEmailError: status.HTTP_400_BAD_REQUEST,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    InvalidTokenError: status.HTTP_401_UNAUTHORIZED,
    RecordNotFoundError: status.HTTP_404_NOT_FOUND,
    StoreFailureError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: GarageTrackerException) -> int:
    for exc_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def garage_tracker_exception_handler(request: Request, exc: GarageTrackerException) -> JSONResponse:
    status_code = status_code_for(exc)

    if status_code >= 500:
        cause = getattr(exc, "original_error", None)
        logger.error(
            f"{request.method} {request.url.path} failed: {exc} (cause: {cause!r})"
        )
        return JSONResponse(status_code=status_code, content={"error": INTERNAL_ERROR_MESSAGE})

    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED and not isinstance(exc, InvalidCredentialsError):
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(status_code=status_code, content={"error": str(exc)}, headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": jsonable_encoder(exc.errors())},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": INTERNAL_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GarageTrackerException, garage_tracker_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
