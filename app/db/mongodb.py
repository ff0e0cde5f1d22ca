# app/db/mongodb.py
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

logger = logging.getLogger("app.db.mongodb")

_client: Optional[AsyncIOMotorClient] = None
_db: Optional[AsyncIOMotorDatabase] = None
_lock = asyncio.Lock()


async def acquire(uri: str, *, default_db: str = "perfume_catalog") -> AsyncIOMotorDatabase:
    """
    Process-wide Motor database handle.

    The first call connects (ping) and selects the database named in the URI,
    or `default_db` when the URI has none. Later calls return the cached handle
    without reconnecting. Nothing is cached if the first connect fails.
    """
    global _client, _db
    if _db is not None:
        return _db
    async with _lock:
        if _db is None:
            client = AsyncIOMotorClient(uri)
            try:
                await client.admin.command("ping")
            except Exception:
                client.close()
                raise
            db = client.get_default_database(default=default_db)
            _client, _db = client, db
            logger.info("Mongo connected (db=%s)", db.name)
    return _db


async def close_client() -> None:
    """
    Graceful shutdown hook (call from app lifespan).
    """
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None
