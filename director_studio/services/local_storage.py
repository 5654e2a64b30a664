"""Key/value string storage with browser ``localStorage`` semantics."""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Protocol, runtime_checkable

log = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = os.environ.get("DSVB_STORAGE_PATH", "data/local_storage.json")


@runtime_checkable
class LocalStorage(Protocol):
    """Interface for the persistence backends used by the stores.

    Values are always strings; callers serialize JSON themselves.
    """

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...

    def clear(self) -> None: ...


class MemoryLocalStorage:
    """Process-local storage, used by tests and ephemeral servers."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def clear(self) -> None:
        self._data.clear()


class FileLocalStorage:
    """Storage backed by a single JSON object on disk.

    Every write rewrites the whole file through a temporary file and an
    atomic rename, so a crash never leaves a half-written store.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or DEFAULT_STORAGE_PATH)
        self._lock = threading.Lock()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            log.warning("Storage file %s is not valid JSON, starting empty: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("Storage file %s does not hold an object, starting empty", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = str(value)
            self._write(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._read())

    def clear(self) -> None:
        with self._lock:
            self._write({})
