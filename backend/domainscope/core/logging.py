"""
Structured logging configuration for DomainScope.

Every line carries ``action``, ``target`` and ``source`` fields: what
happened, which domain or IP it concerned, and which signal source (adapter
name) produced it.  Lines not tied to an adapter show ``source=-``.

Usage::

    from domainscope.core.logging import configure_logging, get_logger, source_logger

    configure_logging()                         # once, at startup
    logger = get_logger(__name__)
    log = source_logger(logger, "dns")
    log.warning("absent: timeout", extra={"action": "adapter_absent", "target": "example.com"})
"""

from __future__ import annotations

import logging
import sys
from typing import Any, MutableMapping, Optional

from domainscope.config import get_settings

_LOG_FORMAT: str = (
    "%(asctime)s | %(levelname)-8s | %(name)s | source=%(source)s | "
    "action=%(action)s | target=%(target)s | %(message)s"
)
_DATE_FORMAT: str = "%Y-%m-%dT%H:%M:%S%z"
_ROOT_LOGGER_NAME: str = "domainscope"

# Third-party loggers that log every request at INFO.
_QUIET_LOGGERS: tuple[str, ...] = ("uvicorn.access", "httpx", "httpcore", "whois")


class StructuredFormatter(logging.Formatter):
    """Formatter that fills in ``-`` for any structured field not supplied."""

    FIELDS: tuple[str, ...] = ("source", "action", "target")

    def format(self, record: logging.LogRecord) -> str:
        for key in self.FIELDS:
            if not hasattr(record, key):
                setattr(record, key, "-")
        return super().format(record)


class SourceLogAdapter(logging.LoggerAdapter):
    """Logger adapter that stamps every record with one adapter's name.

    Per-call ``extra`` values are merged on top instead of being discarded.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs


def configure_logging(level: Optional[str] = None) -> None:
    """Attach the structured handler to the ``domainscope`` logger.

    Called from the FastAPI ``startup`` hook; repeated calls do not add
    further handlers.

    Args:
        level: Log level name.  Defaults to ``DEBUG`` when ``settings.DEBUG``
            is set, ``INFO`` otherwise.
    """
    settings = get_settings()
    if level is None:
        level = "DEBUG" if settings.DEBUG else "INFO"

    root_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(StructuredFormatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
        root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info(
        "Logging configured at %s level",
        level,
        extra={"action": "logging_init", "target": settings.APP_NAME},
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``domainscope`` namespace.

    Names already inside the namespace (module ``__name__`` values) are used
    as-is.
    """
    if name == _ROOT_LOGGER_NAME or name.startswith(f"{_ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")


def source_logger(logger: logging.Logger, source: str) -> SourceLogAdapter:
    """Wrap *logger* so each record names the signal *source* it concerns."""
    return SourceLogAdapter(logger, {"source": source})
