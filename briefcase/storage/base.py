from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from ..locations import StoreLocation


class StorageBackend(Protocol):
    """Persistence contract shared by every backend.

    Names passed to ``set``/``get``/``remove`` are validated before any disk
    access. Reads against a store that does not exist yet behave as an empty
    store; only ``purge`` treats a missing store as an error.
    """

    location: StoreLocation

    def ensure_open(self) -> None:
        """Create the store if it is missing. Idempotent."""

    def set(self, name: str, value: str) -> None:
        """Insert or overwrite ``name`` atomically."""

    def get(self, name: str) -> str:
        """Return the value of ``name`` or raise ``EntryNotFound``."""

    def remove(self, name: str) -> None:
        """Delete ``name`` or raise ``EntryNotFound``."""

    def list(self) -> Iterator[tuple[str, str]]:
        """Yield ``(name, value)`` pairs in no particular order."""

    def count(self) -> int:
        """Return the number of entries."""

    def purge(self) -> None:
        """Destroy the whole store or raise ``StoreNotFound``."""
