# src/taskflow/storage/memory_storage.py

from __future__ import annotations

import json
import logging
from typing import Any

from ..core.errors import StorageError

logger = logging.getLogger(__name__)


class MemoryStorage:
    """
    Process-local Storage Port.

    Values are kept as JSON text, so callers get the same isolation and
    serialization errors they would get from a durable backend.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Gagal menyimpan '{key}': {e}") from e
        logger.debug("MemoryStorage saved key=%s", key)

    def keys(self) -> list[str]:
        return list(self._data)

    def clear(self) -> None:
        self._data.clear()
