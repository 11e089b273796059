"""
Domain errors and their HTTP translation.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class MatrimatchError(Exception):
    """Base class for errors raised by the compatibility service."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidMatchError(MatrimatchError):
    """The two records cannot form a match (same user, empty id)."""

    status_code = status.HTTP_400_BAD_REQUEST


class MatchNotFoundError(MatrimatchError):
    status_code = status.HTTP_404_NOT_FOUND


class MatchActionError(MatrimatchError):
    """An action the match's current state does not allow."""

    def __init__(self, detail: str, status_code: int = status.HTTP_409_CONFLICT):
        super().__init__(detail)
        self.status_code = status_code


async def matrimatch_error_handler(request: Request, exc: MatrimatchError) -> JSONResponse:
    logger.info(
        "%s on %s %s: %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MatrimatchError, matrimatch_error_handler)
