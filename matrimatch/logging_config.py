from logging.config import dictConfig
import contextvars
import logging
from typing import Optional

from matrimatch.config import settings


# Request ID of the request being handled, shared across awaits
request_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)


class RequestIDFormatter(logging.Formatter):
    """
    Formatter that stamps every record with the current request ID.
    Records logged outside a request get 'no-request-id'.
    """

    def format(self, record):
        if not getattr(record, "request_id", None):
            record.request_id = request_id_context.get() or "no-request-id"
        return super().format(record)


LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "()": RequestIDFormatter,
            "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "root": {
        "level": "DEBUG" if settings.DEBUG else settings.LOG_LEVEL,
        "handlers": ["console"],
    },
    "loggers": {
        "matrimatch": {
            "level": "DEBUG" if settings.DEBUG else settings.LOG_LEVEL,
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn.access": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
        "sqlalchemy.engine": {
            "level": "INFO" if settings.DEBUG else "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
    },
}


def configure_logging():
    """Configure logging for the application."""
    dictConfig(LOGGING_CONFIG)


def set_request_id(request_id: Optional[str]) -> contextvars.Token:
    return request_id_context.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    request_id_context.reset(token)
