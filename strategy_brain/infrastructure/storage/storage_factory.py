from typing import Optional

from strategy_brain.config.settings import MemorySettings, settings as default_settings
from strategy_brain.infrastructure.storage.json_storage import JSONStorage
from strategy_brain.infrastructure.storage.memory_storage import InMemoryStorage
from strategy_brain.infrastructure.storage.storage_base import BaseStorage


def create_storage(settings: Optional[MemorySettings] = None) -> BaseStorage:
    """
    returns the storage backend selected by STORAGE_BACKEND
    - json  : JSONStorage(STORAGE_PATH)
    - memory: InMemoryStorage()
    """
    s = settings or default_settings
    mode = s.STORAGE_BACKEND.strip().lower()

    if mode == "json":
        return JSONStorage(s.STORAGE_PATH)

    if mode == "memory":
        return InMemoryStorage()

    raise RuntimeError(f"Unknown STORAGE_BACKEND={mode}")
