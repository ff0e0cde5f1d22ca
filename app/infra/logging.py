# app/infra/logging.py
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | svc={service} | %(message)s"

# driver/client chatter: connection pool events, per-request lines
_QUIET_LOGGERS = ("httpx", "httpcore", "motor", "pymongo", "uvicorn.access")


def _level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(service_name: str = "perfume-service", log_level: str = "INFO") -> None:
    """
    Logging for the perfume catalog.

    The `app.*` loggers (routers, services, the Mongo connection manager and
    the Apify notes client) log at `log_level`. Enrichment fallbacks come out
    as WARNING from `app.clients.notes`, and request failures as ERROR with a
    traceback from `app.routers.perfumes`. Mongo and HTTP driver loggers are
    held at WARNING. Unknown level names fall back to INFO.
    """
    level = _level(log_level)
    logging.basicConfig(level=level, format=LOG_FORMAT.format(service=service_name))
    logging.getLogger("app").setLevel(level)
    logging.getLogger("uvicorn.error").setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
