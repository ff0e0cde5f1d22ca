# app/errors.py
from __future__ import annotations


class CatalogError(Exception):
    """
    Base for failures the catalog reports to the caller as-is.
    `detail` is safe to return; `status_code` is the HTTP status.
    """

    status_code: int = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class PayloadValidationError(CatalogError):
    status_code = 400


class DuplicatePerfumeError(CatalogError):
    status_code = 400

    def __init__(self, name: str) -> None:
        super().__init__("Perfume already exists")
        self.name = name


class PerfumeNotFoundError(CatalogError):
    status_code = 404

    def __init__(self, perfume_id: str) -> None:
        super().__init__("Perfume not found")
        self.perfume_id = perfume_id


class UnsupportedMethodError(CatalogError):
    status_code = 405

    def __init__(self, method: str, allowed: tuple[str, ...]) -> None:
        super().__init__(f"Method {method} Not Allowed")
        self.method = method
        self.allowed = allowed


class ConfigurationError(CatalogError):
    status_code = 500
