# app/routers/perfume_router.py
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import ORJSONResponse, PlainTextResponse

from app.clients.notes_client import NotesClient, get_notes_client
from app.config import Settings, get_settings
from app.dal.perfume_dal import PerfumeDAL
from app.db.mongodb import acquire
from app.errors import (
    CatalogError,
    ConfigurationError,
    PayloadValidationError,
    UnsupportedMethodError,
)
from app.models import PerfumeCreate, PerfumePatch
from app.services.perfume_service import PerfumeService

logger = logging.getLogger("app.routers.perfumes")

ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE")
# all RFC 9110 methods; the ones outside ALLOWED_METHODS answer 405
ROUTED_METHODS = [*ALLOWED_METHODS, "PATCH", "HEAD", "OPTIONS", "TRACE", "CONNECT"]

router = APIRouter(prefix="/api/perfumes", tags=["perfumes"])


def _error(status_code: int, detail: str) -> ORJSONResponse:
    return ORJSONResponse({"error": detail}, status_code=status_code)


def method_not_allowed(method: str) -> PlainTextResponse:
    e = UnsupportedMethodError(method, ALLOWED_METHODS)
    return PlainTextResponse(
        e.detail,
        status_code=e.status_code,
        headers={"Allow": ", ".join(e.allowed)},
    )


async def _json_object(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise PayloadValidationError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise PayloadValidationError("Request body must be a JSON object")
    return body


# ─────────────────────────────────────────────────────────────
# Method handlers
# ─────────────────────────────────────────────────────────────
async def _list(svc: PerfumeService, request: Request) -> Response:
    records = await svc.list()
    return ORJSONResponse([r.to_api() for r in records])


async def _create(svc: PerfumeService, request: Request) -> Response:
    payload = PerfumeCreate.from_payload(await _json_object(request))
    record = await svc.create(payload)
    return ORJSONResponse(record.to_api(), status_code=status.HTTP_201_CREATED)


async def _update(svc: PerfumeService, request: Request) -> Response:
    patch = PerfumePatch.from_payload(await _json_object(request))
    record = await svc.update(patch)
    return ORJSONResponse(record.to_api())


async def _delete(svc: PerfumeService, request: Request) -> Response:
    perfume_id = request.query_params.get("id")
    if not perfume_id:
        raise PayloadValidationError("id query param is required")
    await svc.delete(perfume_id)
    return ORJSONResponse({"message": "Deleted"})


_HANDLERS: Dict[str, Callable[[PerfumeService, Request], Awaitable[Response]]] = {
    "GET": _list,
    "POST": _create,
    "PUT": _update,
    "DELETE": _delete,
}


# ─────────────────────────────────────────────────────────────
# Resource
# ─────────────────────────────────────────────────────────────
@router.api_route("", methods=ROUTED_METHODS)
async def perfumes(
    request: Request,
    config: Settings = Depends(get_settings),
    notes: NotesClient = Depends(get_notes_client),
) -> Response:
    """
    GET lists, POST creates (with top-notes enrichment), PUT partially
    updates by body `id`, DELETE removes by `?id=`. Errors are `{"error": msg}`.
    """
    method = request.method.upper()
    try:
        config.ensure_required()
        handler = _HANDLERS.get(method)
        if handler is None:
            raise UnsupportedMethodError(method, ALLOWED_METHODS)

        db = await acquire(config.mongodb_uri, default_db=config.mongo_db)
        svc = PerfumeService(
            PerfumeDAL(db, config.perfumes_collection),
            notes,
            notes_token=config.apify_token,
        )
        return await handler(svc, request)
    except UnsupportedMethodError:
        return method_not_allowed(method)
    except ConfigurationError as e:
        logger.error("Refusing %s request: %s", method, e.detail)
        return _error(e.status_code, e.detail)
    except CatalogError as e:
        return _error(e.status_code, e.detail)
    except Exception:
        logger.exception("Perfume %s request failed", method)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")
