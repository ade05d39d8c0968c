# app/core/errors.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


class GalleryError(Exception):
    """
    Base class for errors surfaced to API clients.

    Every subclass maps to one HTTP status; the message is returned
    verbatim in the `error` field of the JSON body.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GalleryError):
    """A required field is missing or blank."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(GalleryError):
    """The referenced image does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class PersistenceError(GalleryError):
    """
    Database or blob storage failure.

    The message is a generic per-operation text; internal details are
    only logged.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def gallery_error_handler(request: Request, exc: GalleryError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Malformed requests (bad path id, invalid JSON) are client errors:
    report the first problem as a readable message.
    """
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    else:
        message = "Invalid request."
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
    )


def register_error_handlers(app: FastAPI) -> None:
    """Convert every error raised while handling a request into `{"error": ...}`."""
    app.add_exception_handler(GalleryError, gallery_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
