"""
Podcast error kinds and their mapping to HTTP responses.
Services raise PodcastError; the handlers registered here turn it into JSON.
"""

import logging
from enum import Enum
from typing import Dict

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .config import get_settings

logger = logging.getLogger(__name__)


class PodcastErrorKind(Enum):
    """Failure categories surfaced by podcast operations."""
    INPUT_INVALID = "input_invalid"
    CATEGORY_NOT_FOUND = "category_not_found"
    USER_NOT_FOUND = "user_not_found"
    UPSTREAM_UPLOAD_FAILED = "upstream_upload_failed"
    PERSISTENCE_FAILED = "persistence_failed"


STATUS_BY_KIND: Dict[PodcastErrorKind, int] = {
    PodcastErrorKind.INPUT_INVALID: status.HTTP_400_BAD_REQUEST,
    PodcastErrorKind.CATEGORY_NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    PodcastErrorKind.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    PodcastErrorKind.UPSTREAM_UPLOAD_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    PodcastErrorKind.PERSISTENCE_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class PodcastError(Exception):
    """Error raised by the podcast store, media relay and service layer."""

    def __init__(self, kind: PodcastErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def with_message(self, message: str) -> "PodcastError":
        """Same kind, different client-facing message. Raise it ``from`` this error."""
        return PodcastError(self.kind, message)


async def podcast_error_handler(request: Request, exc: PodcastError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed ({exc.kind.value}): {exc.__cause__ or exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "error": exc.kind.value}
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    content = {"message": "Internal server error"}
    if get_settings().environment == "development":
        content["detail"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the podcast error mapping to an application."""
    app.add_exception_handler(PodcastError, podcast_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
