# app/services/perfume_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

from pymongo.errors import DuplicateKeyError

from app.clients.notes_client import NotesClient
from app.dal.perfume_dal import PerfumeDAL
from app.errors import DuplicatePerfumeError, PerfumeNotFoundError
from app.models import (
    WANT_TO_BUY,
    PerfumeCreate,
    PerfumePatch,
    PerfumeRecord,
    price_for_status,
)

logger = logging.getLogger("app.services.perfumes")

# PerfumePatch field -> stored document key
_DOC_KEYS = {"top_notes": "topNotes", "price_bdt": "priceBDT", "status": "status"}


class PerfumeService:
    """
    Business rules for the perfume catalog: duplicate check and top-notes
    enrichment on create, status-conditional priceBDT on create and update.
    Holds no record state between calls.
    """

    def __init__(self, dal: PerfumeDAL, notes: NotesClient, *, notes_token: str) -> None:
        self.dal = dal
        self.notes = notes
        self.notes_token = notes_token

    async def list(self) -> List[PerfumeRecord]:
        return await self.dal.list_sorted()

    async def create(self, payload: PerfumeCreate) -> PerfumeRecord:
        if await self.dal.find_by_name(payload.name):
            logger.info("Rejected duplicate perfume %r", payload.name)
            raise DuplicatePerfumeError(payload.name)

        lookup = await self.notes.fetch_top_notes(payload.name, self.notes_token)
        try:
            return await self.dal.insert(payload.to_document(lookup.notes))
        except DuplicateKeyError:
            # lost a race with a concurrent create of the same name
            logger.info("Rejected duplicate perfume %r (unique index)", payload.name)
            raise DuplicatePerfumeError(payload.name)

    async def update(self, patch: PerfumePatch) -> PerfumeRecord:
        changes = patch.set_fields()

        if patch.is_set("status"):
            effective_status = patch.status
        elif patch.is_set("price_bdt"):
            current = await self.dal.get(patch.id)
            if current is None:
                raise PerfumeNotFoundError(patch.id)
            effective_status = current.status
        else:
            effective_status = None

        if patch.is_set("price_bdt"):
            changes["price_bdt"] = price_for_status(effective_status, patch.price_bdt)
        elif patch.is_set("status") and patch.status != WANT_TO_BUY:
            changes["price_bdt"] = None

        if not changes:
            current = await self.dal.get(patch.id)
            if current is None:
                raise PerfumeNotFoundError(patch.id)
            return current

        set_fields: Dict[str, Any] = {_DOC_KEYS[k]: v for k, v in changes.items()}
        updated = await self.dal.update(patch.id, set_fields)
        if updated is None:
            raise PerfumeNotFoundError(patch.id)
        return updated

    async def delete(self, perfume_id: str) -> None:
        if not await self.dal.delete(perfume_id):
            raise PerfumeNotFoundError(perfume_id)
