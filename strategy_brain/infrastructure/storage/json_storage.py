import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from strategy_brain.infrastructure.storage.storage_base import BaseStorage, StorageError


class JSONStorage(BaseStorage):
    """
    JSON file storage: one `<key>.json` file per key under `base_path`.
    Writes are atomic: temp file, then os.replace.
    """

    def __init__(self, base_path: str):
        self.base_path = Path(base_path)

    def _get_path(self, key: str) -> Path:
        return self.base_path / f"{key}.json"

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        path = self._get_path(key)
        if not path.exists():
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"cannot read {path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"unexpected payload in {path}: {type(data).__name__}")
        return data

    def save(self, key: str, data: Dict[str, Any]) -> None:
        path = self._get_path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"cannot write {path}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._get_path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"cannot delete {key}: {e}") from e
