import json
from typing import Any, Dict, Optional

from strategy_brain.infrastructure.storage.storage_base import BaseStorage, StorageError


class InMemoryStorage(BaseStorage):
    """
    Process-local storage (tests / dry runs).
    Payloads are kept JSON-encoded so that values which would not survive the
    file backend fail here too.
    """

    def __init__(self):
        self._data: Dict[str, str] = {}

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageError(f"cannot decode {key}: {e}") from e

    def save(self, key: str, data: Dict[str, Any]) -> None:
        try:
            self._data[key] = json.dumps(data)
        except (TypeError, ValueError) as e:
            raise StorageError(f"cannot encode {key}: {e}") from e

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
