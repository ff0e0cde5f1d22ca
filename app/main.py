# app/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.infra.logging import setup_logging
from app.clients.http_utils import close_http_clients
from app.dal.perfume_dal import PerfumeDAL
from app.db.mongodb import acquire, close_client as close_mongo_client
from app.routers import health_router, perfume_router
from app.routers.perfume_router import method_not_allowed

logger = logging.getLogger("app.main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    App lifespan:
      - configure logging
      - ensure the unique name index (only when MONGODB_URI is set)
      - graceful shutdown: HTTP clients, Mongo client
    """
    setup_logging(settings.service_name, settings.log_level)
    logger.info("%s starting up", settings.service_name)

    if settings.mongodb_uri:
        try:
            db = await acquire(settings.mongodb_uri, default_db=settings.mongo_db)
            await PerfumeDAL(db, settings.perfumes_collection).ensure_indexes()
            logger.info("Mongo indexes ensured (db=%s)", db.name)
        except Exception:
            logger.warning("Could not ensure Mongo indexes at startup", exc_info=True)
    else:
        logger.warning("MONGODB_URI not set; requests will fail until it is configured")

    try:
        yield
    finally:
        try:
            await close_http_clients()
        except Exception:
            logger.warning("Error closing HTTP clients", exc_info=True)

        try:
            await close_mongo_client()
            logger.info("Mongo client closed")
        except Exception:
            logger.warning("Error closing Mongo client", exc_info=True)

        logger.info("%s shutdown complete", settings.service_name)


app = FastAPI(
    title="Perfume Catalog Service",
    description="CRUD over perfume records with top-notes enrichment",
    version="0.1.0",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(perfume_router)


@app.exception_handler(StarletteHTTPException)
async def catalog_method_not_allowed(request: Request, exc: StarletteHTTPException):
    """
    Verbs outside the routed list (e.g. PURGE) never reach the perfumes
    handler; give them the same 405 and Allow header it would.
    """
    if exc.status_code == 405 and request.url.path.rstrip("/") == perfume_router.prefix:
        return method_not_allowed(request.method.upper())
    return await http_exception_handler(request, exc)
