# app/routers/__init__.py
from .perfume_router import router as perfume_router
from .health_router import router as health_router

__all__ = ["perfume_router", "health_router"]
