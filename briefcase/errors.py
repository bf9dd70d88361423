from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """Classification for surfaced errors."""

    INVALID_NAME = "invalid_name"
    NOT_FOUND = "not_found"
    STORE_NOT_FOUND = "store_not_found"
    IO = "io"
    LOCATION = "location"


class BriefcaseError(Exception):
    """Base class for every error the command layer reports."""

    category: ErrorCategory = ErrorCategory.IO


class InvalidName(BriefcaseError):
    category = ErrorCategory.INVALID_NAME

    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid entry name: {name!r}")
        self.name = name


class EntryNotFound(BriefcaseError):
    category = ErrorCategory.NOT_FOUND

    def __init__(self, name: str) -> None:
        super().__init__(f"Entry not found: {name}")
        self.name = name


class StoreNotFound(BriefcaseError):
    category = ErrorCategory.STORE_NOT_FOUND

    def __init__(self, location: object) -> None:
        super().__init__(f"No briefcase data at {location}")
        self.location = location


class IoFailure(BriefcaseError):
    """Filesystem or database failure (permissions, disk full, corruption)."""

    category = ErrorCategory.IO


class HomeNotFound(BriefcaseError):
    category = ErrorCategory.LOCATION

    def __init__(self) -> None:
        super().__init__("Unable to determine home directory")
