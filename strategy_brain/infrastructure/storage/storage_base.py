from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class StorageError(Exception):
    """Raised by a storage backend when a record cannot be read, decoded or written."""


class BaseStorage(ABC):
    """
    Key-value persistence interface.
    This layer MUST NOT interpret the payload it stores.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Return the payload stored under `key`, or None when nothing is stored.
        Raises StorageError when the stored data cannot be decoded.
        """
        pass

    @abstractmethod
    def save(self, key: str, data: Dict[str, Any]) -> None:
        """Replace the payload stored under `key`. Raises StorageError."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove `key`; a missing key is not an error."""
        pass
