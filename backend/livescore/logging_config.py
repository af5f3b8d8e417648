"""JSON structured logging for the refresh worker and scripts."""
from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from livescore.config import settings

# Broker chatter is only interesting when debugging the worker itself.
_QUIET_LOGGERS = ("kombu", "amqp")


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger with one JSON handler on stdout.

    `level` overrides `APP_LOG_LEVEL`. SQL statements are logged at INFO
    only when `LOG_SQL` is enabled.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "logger",
            },
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel((level or settings.APP_LOG_LEVEL).upper())

    logging.getLogger("celery").setLevel(logging.INFO)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.LOG_SQL else logging.WARNING
    )
