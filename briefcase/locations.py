"""Resolve where the briefcase store lives on disk.

Two policies are supported:

``home``
    ``<home>/.briefcase/briefcase.db`` for a database file, or
    ``<home>/.briefcase/briefcase`` for a directory store. The home
    directory comes from ``HOME`` (or ``USERPROFILE`` on Windows).
``temp``
    ``<temp root>/<dir name>``, a directory of entry files. The temp root is
    the first non-empty value among ``BRIEFCASE_DIR``, ``TEMP`` and
    ``TMPDIR``, falling back to ``/tmp``; the directory name defaults to
    ``briefcase`` and may be overridden with ``BRIEFCASE_DIRNAME``.

Resolution is a pure function of an environment mapping so the ``info``
command can report exactly which variable decided the location.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from .errors import HomeNotFound

Policy = Literal["home", "temp"]

NO_SOURCE = "none"


@dataclass(frozen=True)
class LocationDefaults:
    home_env_vars: tuple[str, ...] = ("HOME", "USERPROFILE")
    home_dir_name: str = ".briefcase"
    store_file_name: str = "briefcase.db"
    store_dir_name: str = "briefcase"
    temp_env_vars: tuple[str, ...] = ("BRIEFCASE_DIR", "TEMP", "TMPDIR")
    fallback_temp_root: str = "/tmp"
    dir_name_env_var: str = "BRIEFCASE_DIRNAME"
    default_dir_name: str = "briefcase"


DEFAULTS = LocationDefaults()


@dataclass(frozen=True)
class StoreLocation:
    """Resolved store path plus the provenance reported by ``info``."""

    path: Path
    policy: Policy
    source: str
    dir_name: str | None = None


def _first_set(env: Mapping[str, str], names: tuple[str, ...]) -> tuple[str, str] | None:
    for name in names:
        value = env.get(name)
        if value:
            return name, value
    return None


def resolve_home_location(
    env: Mapping[str, str],
    defaults: LocationDefaults = DEFAULTS,
    *,
    directory: bool = False,
) -> StoreLocation:
    found = _first_set(env, defaults.home_env_vars)
    if found is None:
        raise HomeNotFound()
    source, home = found
    store_name = defaults.store_dir_name if directory else defaults.store_file_name
    path = Path(home) / defaults.home_dir_name / store_name
    return StoreLocation(path=path, policy="home", source=source)


def resolve_temp_location(
    env: Mapping[str, str], defaults: LocationDefaults = DEFAULTS
) -> StoreLocation:
    found = _first_set(env, defaults.temp_env_vars)
    if found is None:
        source, root = NO_SOURCE, defaults.fallback_temp_root
    else:
        source, root = found
    dir_name = env.get(defaults.dir_name_env_var) or defaults.default_dir_name
    return StoreLocation(path=Path(root) / dir_name, policy="temp", source=source, dir_name=dir_name)


def resolve_store_location(
    policy: Policy,
    env: Mapping[str, str] | None = None,
    defaults: LocationDefaults = DEFAULTS,
    *,
    directory: bool = False,
) -> StoreLocation:
    """Resolve the store location for ``policy``.

    ``env`` defaults to a snapshot of ``os.environ`` taken at call time.
    ``directory`` selects a directory store name under the home policy.
    """

    if env is None:
        env = dict(os.environ)
    if policy == "home":
        return resolve_home_location(env, defaults, directory=directory)
    if policy == "temp":
        return resolve_temp_location(env, defaults)
    raise ValueError(f"Unknown location policy: {policy}")
