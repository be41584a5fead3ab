"""
Key-value storage mediums - the persistence layer under the card store.

Every medium maps string keys to string values, like browser local storage.
The card store keeps its whole collection under a single key, so any
medium here can back it without changing business logic.
"""

import json
import os
import sqlite3
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Dict, Generator, Optional, Union

from ..config import Config
from ..utils.logger import get_logger

logger = get_logger(__name__)


class StorageError(Exception):
    """The medium could not be written."""


class StorageBackend(Enum):
    """Available storage mediums."""
    JSON = "json"
    SQLITE = "sqlite"
    MEMORY = "memory"


class BaseStorage(ABC):
    """
    Abstract base class for key-value storage mediums.

    Reads may fail by raising ``OSError`` or ``sqlite3.Error``; callers
    decide how to degrade. Writes raise ``StorageError``.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Get the value stored under key, or None if absent."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove key if present."""
        pass


class MemoryStorage(BaseStorage):
    """Process-local medium. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JSONFileStorage(BaseStorage):
    """
    JSON file medium.

    The file holds one JSON object mapping keys to string values. Writes
    go to a temp file first and are renamed over the target.
    """

    def __init__(self, file_path: Optional[Union[str, Path]] = None):
        """
        Initialize JSON file storage.

        Args:
            file_path: Path to the JSON file (defaults to Config.STORAGE_FILE)
        """
        self.file_path = Path(file_path or Config.STORAGE_FILE)

    def _read_all(self) -> Dict[str, str]:
        if not self.file_path.exists():
            return {}
        with open(self.file_path, "r", encoding="utf-8") as f:
            content = f.read()
        if not content.strip():
            return {}
        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError(f"{self.file_path} does not contain a JSON object")
        return data

    def _write_all(self, items: Dict[str, str]) -> None:
        temp_path = self.file_path.with_name(f"{self.file_path.name}.{uuid.uuid4().hex[:8]}.tmp")
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(items, f, ensure_ascii=False, indent=2)
            os.replace(temp_path, self.file_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            logger.error("Could not write %s: %s", self.file_path, e)
            raise StorageError(f"Could not write {self.file_path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if value is None or isinstance(value, str) else json.dumps(value)

    def _read_for_update(self) -> Dict[str, str]:
        """Current items; an unreadable file is replaced on the next write."""
        try:
            return self._read_all()
        except (OSError, ValueError) as e:
            logger.warning("Replacing unreadable storage file %s: %s", self.file_path, e)
            return {}

    def set_item(self, key: str, value: str) -> None:
        items = self._read_for_update()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_for_update()
        if key in items:
            del items[key]
            self._write_all(items)


class SQLiteStorage(BaseStorage):
    """SQLite medium: a single ``kv_store`` table."""

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        """
        Initialize SQLite storage.

        Args:
            db_path: Path to SQLite database file (defaults to Config.DB_FILE)
        """
        self.db_path = Path(db_path or Config.DB_FILE)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get database connection with context manager."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            conn.commit()

    def get_item(self, key: str) -> Optional[str]:
        with self._get_connection() as conn:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            return row["value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        try:
            with self._get_connection() as conn:
                conn.execute(
                    "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, value),
                )
                conn.commit()
        except sqlite3.Error as e:
            logger.error("Could not write key %r to %s: %s", key, self.db_path, e)
            raise StorageError(f"Could not write {self.db_path}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            with self._get_connection() as conn:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Could not write {self.db_path}: {e}") from e


def create_storage(
    backend: Union[StorageBackend, str, None] = None,
    path: Optional[Union[str, Path]] = None,
) -> BaseStorage:
    """
    Build a storage medium.

    Args:
        backend: Medium kind (defaults to Config.STORAGE_BACKEND)
        path: File or database path for file-based mediums

    Raises:
        ValueError: unknown backend name
    """
    backend = StorageBackend(backend or Config.STORAGE_BACKEND)

    if backend == StorageBackend.SQLITE:
        return SQLiteStorage(path)
    if backend == StorageBackend.MEMORY:
        return MemoryStorage()
    return JSONFileStorage(path)
