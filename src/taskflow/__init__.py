"""
taskflow: single-process task/user management backend.

Layers:
- storage/: key-value Storage Port adapters (memory, JSON files, SQLite)
- tasks/, users/: entities and repositories (in-memory index, write-through)
- controllers/: session-scoped authorization + response envelopes
- bootstrap.py: composition root
"""

__version__ = "0.1.0"
