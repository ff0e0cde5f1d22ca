# app/dal/perfume_dal.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument

from app.models import PerfumeRecord

logger = logging.getLogger("app.dal.perfumes")

COLLECTION_NAME = "perfumes"


class PerfumeDAL:
    """
    CRUD for perfume documents.
    Ids are ObjectIds; a malformed id raises bson.errors.InvalidId.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection: str = COLLECTION_NAME) -> None:
        self.col: AsyncIOMotorCollection = db[collection]

    # ---------- bootstrap ---------- #

    async def ensure_indexes(self) -> None:
        await self.col.create_index([("name", ASCENDING)], name="uk_name", unique=True)

    # ---------- reads ---------- #

    async def list_sorted(self) -> List[PerfumeRecord]:
        cursor = self.col.find({}).sort("name", ASCENDING)
        return [PerfumeRecord.model_validate(d) async for d in cursor]

    async def get(self, perfume_id: str) -> Optional[PerfumeRecord]:
        doc = await self.col.find_one({"_id": ObjectId(perfume_id)})
        return PerfumeRecord.model_validate(doc) if doc else None

    async def find_by_name(self, name: str) -> Optional[PerfumeRecord]:
        doc = await self.col.find_one({"name": name})
        return PerfumeRecord.model_validate(doc) if doc else None

    # ---------- writes ---------- #

    async def insert(self, doc: Dict[str, Any]) -> PerfumeRecord:
        res = await self.col.insert_one(doc)
        return PerfumeRecord.model_validate({**doc, "_id": res.inserted_id})

    async def update(self, perfume_id: str, set_fields: Dict[str, Any]) -> Optional[PerfumeRecord]:
        doc = await self.col.find_one_and_update(
            {"_id": ObjectId(perfume_id)},
            {"$set": set_fields},
            return_document=ReturnDocument.AFTER,
        )
        return PerfumeRecord.model_validate(doc) if doc else None

    async def delete(self, perfume_id: str) -> bool:
        res = await self.col.delete_one({"_id": ObjectId(perfume_id)})
        return res.deleted_count == 1
