"""API error taxonomy and the exception handlers that render it."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from minilinkedin.store.base import StoreError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Error with an HTTP status and a stable machine-readable code."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "BAD_REQUEST"
    message: str = "Bad request"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status_code: int | None = None,
    ):
        self.message = message or self.message
        self.code = code or self.code
        self.status_code = status_code or self.status_code
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        if self.status_code == status.HTTP_401_UNAUTHORIZED:
            return {"WWW-Authenticate": "Bearer"}
        return None


class ValidationFailed(ApiError):
    code = "VALIDATION_FAILED"
    message = "Validation failed"


# Credential failures


class MissingCredential(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "MISSING_TOKEN"
    message = "Access token required"


class InvalidCredential(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_TOKEN"
    message = "Invalid token"


class ExpiredCredential(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "TOKEN_EXPIRED"
    message = "Token expired"


class UnknownSubject(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "USER_NOT_FOUND"
    message = "User not found"


class AuthInfrastructureError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "AUTH_ERROR"
    message = "Authentication failed"


class InvalidCredentials(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


class EmailExists(ApiError):
    code = "EMAIL_EXISTS"
    message = "User already exists with this email"


# Resource failures


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    message = "Not found"


class PostNotFound(NotFound):
    code = "POST_NOT_FOUND"
    message = "Post not found"


class UserNotFound(NotFound):
    code = "USER_NOT_FOUND"
    message = "User not found"


class InvalidPostId(ApiError):
    code = "INVALID_POST_ID"
    message = "Invalid post ID"


class InvalidUserId(ApiError):
    code = "INVALID_USER_ID"
    message = "Invalid user ID"


class UnauthorizedAccess(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "UNAUTHORIZED_ACCESS"
    message = "You can only modify your own posts"


class UnauthorizedUpdate(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "UNAUTHORIZED_UPDATE"
    message = "You can only update your own profile"


class NoUpdateFields(ApiError):
    code = "NO_UPDATE_FIELDS"
    message = "No valid fields provided for update"


class SearchQueryRequired(ApiError):
    code = "SEARCH_QUERY_REQUIRED"
    message = "Search query is required"


def _error_body(message: str, code: str, **extra) -> dict:
    return {"message": message, "error": code, **extra}


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.__cause__!r}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.code),
        headers=exc.headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": _field_name(tuple(error.get("loc", ()))), "message": error.get("msg", "")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(ValidationFailed.message, ValidationFailed.code, errors=errors),
    )


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.exception(f"Data store failure on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error", "INTERNAL_ERROR"),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        content = _error_body("Route not found", "ROUTE_NOT_FOUND")
    else:
        content = _error_body(str(exc.detail), f"HTTP_{exc.status_code}")
    return JSONResponse(
        status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None)
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as `{"message": ..., "error": CODE}`."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
