# src/taskflow/storage/json_storage.py

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from ..core.errors import StorageError

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStorage:
    """
    File-backed Storage Port: <data_dir>/<key>.json per key.

    Saves go to a temp file first and are moved into place with os.replace,
    so a crash mid-write never leaves a truncated file behind.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self._dir = Path(data_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        logger.info("JsonFileStorage ready dir=%s", self._dir)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key or ""):
            raise StorageError(f"Key storage tidak valid: '{key}'")
        return self._dir / f"{key}.json"

    def load(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(f"Gagal membaca '{key}' dari {path}: {e}") from e

    def save(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        try:
            json_str = json.dumps(value, ensure_ascii=False, indent=2)
            tmp_path.write_text(json_str, "utf-8")
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Gagal menyimpan '{key}' ke {path}: {e}") from e
        logger.debug("JsonFileStorage saved key=%s path=%s", key, path)
