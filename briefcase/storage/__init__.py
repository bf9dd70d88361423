"""Storage backends and the factory that picks one."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import StorageBackend
from .files import FileBackend
from .sqlite import SQLiteBackend

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from ..config import Settings
    from ..locations import Policy, StoreLocation

__all__ = [
    "BACKEND_POLICIES",
    "FileBackend",
    "SQLiteBackend",
    "StorageBackend",
    "default_policy",
    "open_backend",
]

# Location policy each backend uses unless configured otherwise.
BACKEND_POLICIES: dict[str, Policy] = {
    "sqlite": "home",
    "files": "temp",
}


def default_policy(settings: Settings) -> Policy:
    return settings.location_policy or BACKEND_POLICIES[settings.backend]


def open_backend(settings: Settings, location: StoreLocation) -> StorageBackend:
    """Return the backend selected by ``settings`` for ``location``.

    Nothing is created on disk; backends create their store on first write.
    """

    if settings.backend == "sqlite":
        return SQLiteBackend(location, busy_timeout=settings.busy_timeout)
    if settings.backend == "files":
        return FileBackend(location)
    raise ValueError(f"Unknown backend: {settings.backend}")
