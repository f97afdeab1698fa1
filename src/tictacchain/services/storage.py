from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping, Protocol

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    pass


class Backend(Protocol):
    def get(self, key: str) -> object | None: ...

    def keys(self, prefix: str) -> list[str]: ...

    def write_batch(self, items: Mapping[str, object]) -> None: ...


def _copy(value: object) -> object:
    # Records are JSON-shaped; a round trip detaches callers from stored state.
    return json.loads(json.dumps(value))


class MemoryStorage:
    def __init__(self, initial: Mapping[str, object] | None = None) -> None:
        self._data: dict[str, object] = {k: _copy(v) for k, v in (initial or {}).items()}

    def get(self, key: str) -> object | None:
        v = self._data.get(key)
        return None if v is None else _copy(v)

    def set(self, key: str, value: object) -> None:
        self._data[key] = _copy(value)

    def keys(self, prefix: str) -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    def write_batch(self, items: Mapping[str, object]) -> None:
        for k, v in items.items():
            self._data[k] = _copy(v)

    def dump(self) -> dict[str, object]:
        return {k: _copy(v) for k, v in sorted(self._data.items())}


class JsonFileStorage(MemoryStorage):
    """Whole keyspace kept in one JSON document, rewritten on every batch."""

    def __init__(self, path: Path) -> None:
        self._path = path
        super().__init__(self._read())

    def _read(self) -> dict[str, object]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StorageError(f"Invalid JSON in {self._path}: {e}") from e
        if not isinstance(raw, dict):
            raise StorageError(f"{self._path} must contain an object")
        return raw

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(self.dump(), indent=2), encoding="utf-8")
        tmp.replace(self._path)

    def set(self, key: str, value: object) -> None:
        super().set(key, value)
        self._flush()

    def write_batch(self, items: Mapping[str, object]) -> None:
        super().write_batch(items)
        self._flush()
        logger.debug("Flushed %d record(s) to %s", len(items), self._path)


class Transaction:
    """Buffered writes over a backend.

    Reads see this transaction's pending writes first. Nothing reaches the
    backend until commit(); dropping the object discards the writes.
    """

    def __init__(self, backend: Backend) -> None:
        self._backend = backend
        self._pending: dict[str, object] = {}
        self._done = False

    def get(self, key: str) -> object | None:
        if key in self._pending:
            return _copy(self._pending[key])
        return self._backend.get(key)

    def set(self, key: str, value: object) -> None:
        if self._done:
            raise StorageError("Transaction already finished")
        self._pending[key] = _copy(value)

    def keys(self, prefix: str) -> list[str]:
        found = set(self._backend.keys(prefix))
        found.update(k for k in self._pending if k.startswith(prefix))
        return sorted(found)

    def commit(self) -> None:
        if self._done:
            raise StorageError("Transaction already finished")
        self._done = True
        if self._pending:
            self._backend.write_batch(self._pending)
        logger.debug("Committed %d write(s)", len(self._pending))

    def discard(self) -> None:
        self._done = True
        self._pending.clear()
