# app/routers/health_router.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from app.config import settings

router = APIRouter(tags=["meta"])


@router.get("/health", summary="Liveness probe")
def health() -> Dict[str, Any]:
    """
    Liveness probe: process is up and app is constructed.
    Does not touch Mongo or Apify.
    """
    return {
        "status": "ok",
        "service": settings.service_name,
        "at": datetime.now(timezone.utc).isoformat(),
    }
