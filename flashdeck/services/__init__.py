"""Services layer for business logic separation."""

from .storage import (
    BaseStorage,
    JSONFileStorage,
    MemoryStorage,
    SQLiteStorage,
    StorageBackend,
    StorageError,
    create_storage,
)
from .card_store import CardStore
from .controller import CardLifecycleController, ControllerState
from .card_export import CardImageExporter, ExportError
from .exchange import ExchangeError, export_csv, import_csv

__all__ = [
    "BaseStorage",
    "JSONFileStorage",
    "MemoryStorage",
    "SQLiteStorage",
    "StorageBackend",
    "StorageError",
    "create_storage",
    "CardStore",
    "CardLifecycleController",
    "ControllerState",
    "CardImageExporter",
    "ExportError",
    "ExchangeError",
    "export_csv",
    "import_csv",
]
