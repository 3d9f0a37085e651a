# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Application error taxonomy and the FastAPI handlers that render it.

Every error leaves the API in the same envelope the frontend expects::

    {"status": "error", "message": "<human readable text>"}

Services raise the subclasses below; routers never build error responses
by hand.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.logger import logger


class AppError(Exception):
    """Base class for all application exceptions."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# -- Registration ------------------------------------------------------------


class ReservedIdentity(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "This email cannot be used for registration"


class DuplicateIdentity(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "An account with this email already exists"


class RegistrationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Failed to create account"


# -- Login / tokens ----------------------------------------------------------


class InvalidCredentials(AppError):
    """Unknown email *or* wrong password – deliberately indistinguishable."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class InvalidPassphrase(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid passphrase"


class InvalidToken(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired token"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Admin access required"


# -- Lookup / generic --------------------------------------------------------


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UserNotFound(NotFound):
    default_message = "User not found"


class ServerError(AppError):
    """Unexpected store/runtime failure – the client may retry."""


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _error_body(message: str) -> dict:
    return {"status": "error", "message": message}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Collapse pydantic's error list into the first readable message."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(message))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(ServerError.default_message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
