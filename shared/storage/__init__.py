# shared/storage/__init__.py
from fastapi import Request

from shared.config import Settings
from shared.storage.base import Storage
from shared.storage.memory import MemoryStorage
from shared.storage.database import DatabaseStorage


def build_storage(settings: Settings) -> Storage:
    if settings.storage_backend == "memory":
        return MemoryStorage()
    if settings.storage_backend == "database":
        return DatabaseStorage(settings.database_url, echo=settings.database_echo)
    raise ValueError(f"Unknown STORAGE_BACKEND {settings.storage_backend!r} (expected 'memory' or 'database')")


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


__all__ = ["Storage", "MemoryStorage", "DatabaseStorage", "build_storage", "get_storage"]
