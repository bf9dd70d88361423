"""Entry name validation."""

from __future__ import annotations

import re

from .errors import InvalidName

NAME_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*")


def is_valid_name(name: str) -> bool:
    """Return ``True`` if ``name`` is a letter followed by letters, digits or ``_``."""
    return NAME_RE.fullmatch(name) is not None


def check_name(name: str) -> str:
    if not is_valid_name(name):
        raise InvalidName(name)
    return name
