"""
Storage backends for topic records
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from ..config import StoreConfig
from .base import Record, TopicStore, matches_criteria
from .memory_store import InMemoryTopicStore
from .sqlite_store import SQLiteTopicStore


class StoreBackend(Enum):
    """Available store backends"""
    MEMORY = "memory"
    SQLITE = "sqlite"


def create_store(config: Optional[StoreConfig] = None) -> TopicStore:
    """Create a store for the configured backend."""
    config = config or StoreConfig()
    try:
        backend = StoreBackend(config.backend.lower())
    except ValueError:
        raise ValueError(f"Unknown store backend: {config.backend}")

    if backend == StoreBackend.SQLITE:
        return SQLiteTopicStore(Path(config.db_path))
    return InMemoryTopicStore()


__all__ = [
    "Record",
    "TopicStore",
    "InMemoryTopicStore",
    "SQLiteTopicStore",
    "StoreBackend",
    "create_store",
    "matches_criteria",
]
