"""Application errors and the handlers that turn them into response envelopes."""
import logging

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP status and a short message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"
    # Auth gate rejections are sent without a body.
    empty_body = False

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class ConflictError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Username or email already exists"


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authenticated"
    empty_body = True


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid or expired token"
    empty_body = True


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class InternalError(AppError):
    pass


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def app_error_handler(request: Request, exc: AppError) -> Response:
    if exc.empty_body:
        return Response(status_code=exc.status_code)
    return error_response(exc.status_code, exc.message)


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> Response:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return error_response(InternalError.status_code, InternalError.message)


async def unexpected_error_handler(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(InternalError.status_code, InternalError.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> Response:
    return error_response(ValidationError.status_code, ValidationError.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return error_response(exc.status_code, "Route not found")
    return error_response(exc.status_code, str(exc.detail))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
