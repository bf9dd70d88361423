"""Directory backend: one plain file per entry.

The file is named exactly as the entry and holds the raw UTF-8 value with no
trailing newline. Writes go to a hidden temp file in the same directory which
is then renamed over the target, so a reader sees either the old or the new
value. There is no cross-process locking: concurrent writers to the same name
race and the last rename wins.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import tempfile
from collections.abc import Iterator

from ..errors import EntryNotFound, IoFailure, StoreNotFound
from ..locations import StoreLocation
from ..validation import check_name, is_valid_name

log = logging.getLogger(__name__)

DIR_MODE = 0o700
FILE_MODE = 0o644


class FileBackend:
    kind = "files"

    def __init__(self, location: StoreLocation) -> None:
        self.location = location
        self.root = location.path

    def _log(self, event_type: str, name: str | None = None) -> None:
        log.debug(
            event_type,
            extra={
                "event_type": event_type,
                "backend": self.kind,
                "entry": name,
                "location": str(self.root),
            },
        )

    def ensure_open(self) -> None:
        try:
            self.root.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            raise IoFailure(f"Failed to create briefcase directory: {exc}") from exc

    def set(self, name: str, value: str) -> None:
        check_name(name)
        # Not atomic with the write below; an empty directory reads as an empty store.
        self.ensure_open()
        target = self.root / name
        try:
            fd, tmp = tempfile.mkstemp(dir=self.root, prefix=f".{name}.", suffix=".tmp")
        except OSError as exc:
            raise IoFailure(f"Failed to write {target}: {exc}") from exc
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(value.encode("utf-8"))
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp, FILE_MODE)
            os.replace(tmp, target)
        except OSError as exc:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp)
            raise IoFailure(f"Failed to write {target}: {exc}") from exc
        self._log("entry_set", name)

    def get(self, name: str) -> str:
        check_name(name)
        path = self.root / name
        try:
            data = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            raise EntryNotFound(name) from None
        except OSError as exc:
            raise IoFailure(f"Failed to read {path}: {exc}") from exc
        try:
            value = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise IoFailure(f"{path} is not valid UTF-8") from exc
        self._log("entry_get", name)
        return value

    def remove(self, name: str) -> None:
        check_name(name)
        path = self.root / name
        try:
            path.unlink()
        except FileNotFoundError:
            raise EntryNotFound(name) from None
        except OSError as exc:
            raise IoFailure(f"Failed to remove {path}: {exc}") from exc
        self._log("entry_removed", name)

    def _names(self) -> list[str]:
        try:
            entries = list(os.scandir(self.root))
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise IoFailure(f"Failed to read briefcase directory: {exc}") from exc
        return [e.name for e in entries if e.is_file() and is_valid_name(e.name)]

    def list(self) -> Iterator[tuple[str, str]]:
        for name in self._names():
            try:
                yield name, self.get(name)
            except EntryNotFound:
                # Removed by another process since the directory was scanned.
                continue

    def count(self) -> int:
        return len(self._names())

    def purge(self) -> None:
        if not self.root.exists():
            raise StoreNotFound(self.root)
        try:
            shutil.rmtree(self.root)
        except OSError as exc:
            raise IoFailure(f"Failed to remove briefcase directory: {exc}") from exc
        self._log("store_purged")
