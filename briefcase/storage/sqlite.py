"""Transactional backend on a single SQLite database file."""

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator

from ..errors import EntryNotFound, IoFailure, StoreNotFound
from ..locations import StoreLocation
from ..validation import check_name

log = logging.getLogger(__name__)

SCHEMA = "CREATE TABLE IF NOT EXISTS entries (name TEXT PRIMARY KEY, value TEXT NOT NULL)"

# Sidecar files SQLite may leave next to the database.
SIDECAR_SUFFIXES = ("-journal", "-wal", "-shm")


class SQLiteBackend:
    """Each mutation runs in its own transaction; readers never see a partial write."""

    kind = "sqlite"

    def __init__(self, location: StoreLocation, *, busy_timeout: float = 5.0) -> None:
        self.location = location
        self.path = location.path
        self.busy_timeout = busy_timeout

    @contextlib.contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.path, timeout=self.busy_timeout)
        except sqlite3.Error as exc:
            raise IoFailure(f"Failed to open database {self.path}: {exc}") from exc
        try:
            yield conn
        except sqlite3.Error as exc:
            raise IoFailure(f"Database error on {self.path}: {exc}") from exc
        finally:
            conn.close()

    def _log(self, event_type: str, name: str | None = None) -> None:
        log.debug(
            event_type,
            extra={
                "event_type": event_type,
                "backend": self.kind,
                "entry": name,
                "location": str(self.path),
            },
        )

    def ensure_open(self) -> None:
        try:
            self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError as exc:
            raise IoFailure(f"Failed to create database directory: {exc}") from exc
        with self._connect() as conn, conn:
            conn.execute(SCHEMA)

    def set(self, name: str, value: str) -> None:
        check_name(name)
        self.ensure_open()
        with self._connect() as conn, conn:
            conn.execute(
                "INSERT INTO entries (name, value) VALUES (?, ?) "
                "ON CONFLICT(name) DO UPDATE SET value = excluded.value",
                (name, value),
            )
        self._log("entry_set", name)

    def get(self, name: str) -> str:
        check_name(name)
        rows = self._read("SELECT value FROM entries WHERE name = ?", (name,))
        if not rows:
            raise EntryNotFound(name)
        self._log("entry_get", name)
        return rows[0][0]

    def remove(self, name: str) -> None:
        check_name(name)
        if not self.path.exists():
            raise EntryNotFound(name)
        self.ensure_open()
        with self._connect() as conn, conn:
            cur = conn.execute("DELETE FROM entries WHERE name = ?", (name,))
            if cur.rowcount == 0:
                raise EntryNotFound(name)
        self._log("entry_removed", name)

    def list(self) -> Iterator[tuple[str, str]]:
        return iter(self._read("SELECT name, value FROM entries"))

    def count(self) -> int:
        rows = self._read("SELECT COUNT(*) FROM entries")
        return rows[0][0] if rows else 0

    def purge(self) -> None:
        if not self.path.exists():
            raise StoreNotFound(self.path)
        try:
            self.path.unlink()
            for suffix in SIDECAR_SUFFIXES:
                self.path.with_name(self.path.name + suffix).unlink(missing_ok=True)
        except OSError as exc:
            raise IoFailure(f"Failed to remove database file: {exc}") from exc
        self._log("store_purged")

    def _read(self, sql: str, params: tuple = ()) -> list[tuple]:
        """Run a read query; a missing database or table reads as empty."""
        if not self.path.exists():
            return []
        with self._connect() as conn:
            try:
                return conn.execute(sql, params).fetchall()
            except sqlite3.OperationalError as exc:
                if "no such table" not in str(exc):
                    raise
                return []
