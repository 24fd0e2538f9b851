"""
Storage Port adapters.

Components:
- memory_storage.py: process-local dict (JSON round-trip on every call)
- json_storage.py: one <key>.json file per key, atomic replace on save
- sqlite_storage.py: single key/value table, short-lived connections
"""

from .json_storage import JsonFileStorage
from .memory_storage import MemoryStorage
from .sqlite_storage import SqliteStorage

__all__ = ["JsonFileStorage", "MemoryStorage", "SqliteStorage"]
