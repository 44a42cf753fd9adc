"""Local key-value storage for the persisted document and responses.

Single-device storage only: a key -> string map kept in one JSON file,
or in memory for tests.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path

from clinassess.core.config import settings
from clinassess.core.logging import get_logger

logger = get_logger(__name__)


class StorageError(Exception):
    """Base exception for storage errors."""

    pass


class StorageBackend(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Read the value stored under key.

        Args:
            key: Storage key

        Returns:
            Stored string, or None if the key is absent
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value.

        Args:
            key: Storage key
            value: Serialized value
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> bool:
        """Remove key.

        Args:
            key: Storage key

        Returns:
            True if removed, False if not found
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every key."""
        pass


class InMemoryStorageBackend(StorageBackend):
    """Dict-backed storage backend.

    For testing and for sessions that should not touch the disk.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> bool:
        return self.items.pop(key, None) is not None

    def clear(self) -> None:
        self.items.clear()


class LocalFileStorageBackend(StorageBackend):
    """JSON file storage backend.

    The whole key -> string map is read and rewritten on every call.
    """

    def __init__(self, path: str | Path = "./storage/assessment.json") -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read storage file {self.path}: {e}")
        if not isinstance(data, dict):
            raise StorageError(f"Storage file is not a key-value map: {self.path}")
        return data

    def _write(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to write storage file {self.path}: {e}")

    def get_item(self, key: str) -> str | None:
        """Read key from the storage file."""
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """Write key to the storage file."""
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> bool:
        """Remove key from the storage file."""
        data = self._read()
        if key not in data:
            return False
        del data[key]
        self._write(data)
        return True

    def clear(self) -> None:
        """Delete the storage file."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to clear storage file {self.path}: {e}")
        logger.info(f"Cleared storage file {self.path}")


def get_storage_backend() -> StorageBackend:
    """Get configured storage backend.

    Returns an in-memory backend in test mode, the JSON file backend
    at settings.storage_path otherwise.
    """
    if settings.is_test:
        return InMemoryStorageBackend()
    return LocalFileStorageBackend(path=settings.storage_path)
