# app/models/perfume_models.py
from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Union

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.errors import PayloadValidationError

WANT_TO_BUY = "wantToBuy"

Number = Union[int, float]


def is_number(value: Any) -> bool:
    """Finite int or float; bools and NaN/Infinity are not prices."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def price_for_status(status: Optional[str], price: Optional[Number]) -> Optional[Number]:
    """priceBDT is only kept for wishlist entries."""
    return price if status == WANT_TO_BUY else None


# ─────────────────────────────────────────────────────────────
# Stored record
# ─────────────────────────────────────────────────────────────
class PerfumeRecord(BaseModel):
    """
    A perfume document as stored in the `perfumes` collection.
    Dump with `by_alias=True` to get the wire shape (id, name, status, priceBDT, topNotes).
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., validation_alias="_id")
    name: str
    status: str
    price_bdt: Optional[Number] = Field(default=None, alias="priceBDT")
    top_notes: str = Field(default="", alias="topNotes")

    @field_validator("id", mode="before")
    @classmethod
    def _object_id_to_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, ObjectId) else v

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


# ─────────────────────────────────────────────────────────────
# Create payload
# ─────────────────────────────────────────────────────────────
class PerfumeCreate(BaseModel):
    name: str = Field(..., min_length=1)
    status: str = Field(..., min_length=1)
    price_bdt: Optional[Number] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PerfumeCreate":
        """
        Validate a raw POST body. `name` is trimmed; a blank name counts as missing.
        """
        name = payload.get("name")
        status = payload.get("status")
        if name is not None and not isinstance(name, str):
            raise PayloadValidationError("name must be a string")
        if status is not None and not isinstance(status, str):
            raise PayloadValidationError("status must be a string")

        name = (name or "").strip()
        missing = [f for f, v in (("name", name), ("status", status)) if not v]
        if missing:
            raise PayloadValidationError(f"{' and '.join(missing)} {'is' if len(missing) == 1 else 'are'} required")

        price = payload.get("priceBDT")
        if price is not None and not is_number(price):
            raise PayloadValidationError("priceBDT must be a number")
        return cls(name=name, status=status, price_bdt=price)

    def to_document(self, top_notes: str) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "priceBDT": price_for_status(self.status, self.price_bdt or 0),
            "topNotes": top_notes or "",
        }


# ─────────────────────────────────────────────────────────────
# Partial update
# ─────────────────────────────────────────────────────────────
class _Unset:
    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class PerfumePatch:
    """
    PUT body. Each field is UNSET unless the request supplied it with the
    right type; values of the wrong type are dropped, not rejected.
    """
    id: str
    top_notes: Union[str, _Unset] = UNSET
    price_bdt: Union[Number, _Unset] = UNSET
    status: Union[str, _Unset] = UNSET

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PerfumePatch":
        perfume_id = payload.get("id")
        if not perfume_id:
            raise PayloadValidationError("id is required")
        top_notes = payload.get("topNotes")
        price = payload.get("priceBDT")
        status = payload.get("status")
        return cls(
            id=perfume_id,
            top_notes=top_notes if isinstance(top_notes, str) else UNSET,
            price_bdt=price if is_number(price) else UNSET,
            status=status if isinstance(status, str) else UNSET,
        )

    def is_set(self, field: str) -> bool:
        return getattr(self, field) is not UNSET

    def set_fields(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "id" and self.is_set(f.name)}
