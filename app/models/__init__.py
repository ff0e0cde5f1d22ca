from .perfume_models import (
    UNSET,
    WANT_TO_BUY,
    PerfumeCreate,
    PerfumePatch,
    PerfumeRecord,
    is_number,
    price_for_status,
)

__all__ = [
    "UNSET",
    "WANT_TO_BUY",
    "PerfumeCreate",
    "PerfumePatch",
    "PerfumeRecord",
    "is_number",
    "price_for_status",
]
