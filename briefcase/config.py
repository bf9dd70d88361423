from __future__ import annotations

from typing import Literal

from pydantic import PositiveFloat
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for briefcase.

    Values are loaded from ``BRIEFCASE_*`` environment variables and may be
    overridden via CLI options by the command layer. Store location variables
    (``BRIEFCASE_DIR``, ``BRIEFCASE_DIRNAME``) belong to the location resolver
    and are ignored here.
    """

    # Storage
    backend: Literal["sqlite", "files"] = "sqlite"
    # None means the backend's own policy (sqlite -> home, files -> temp).
    location_policy: Literal["home", "temp"] | None = None
    # Seconds a writer waits for a locked database.
    busy_timeout: PositiveFloat = 5.0

    model_config = SettingsConfigDict(
        env_prefix="BRIEFCASE_", case_sensitive=False, extra="ignore"
    )

