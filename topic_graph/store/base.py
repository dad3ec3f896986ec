"""
Base storage interface consumed by the topic graph engine
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


Record = Dict[str, Any]


def matches_criteria(record: Record, criteria: Optional[Dict[str, Any]]) -> bool:
    """Exact-match conjunction over fields.

    A criterion value of ``None`` matches records where the field is missing
    or ``None``.
    """
    if not criteria:
        return True
    for key, value in criteria.items():
        if value is None:
            if record.get(key) is not None:
                return False
        elif key not in record or record[key] != value:
            return False
    return True


class TopicStore(ABC):
    """Abstract key-value store keyed by collection name.

    Every method is a potential suspension point; implementations must be
    safe for concurrent callers.
    """

    @abstractmethod
    async def create(self, collection: str, record: Record) -> Record:
        """Insert a record, generating an ``id`` when one is not supplied."""
        pass

    @abstractmethod
    async def find_by_id(self, collection: str, record_id: str) -> Optional[Record]:
        """Return the record with ``record_id`` or None."""
        pass

    @abstractmethod
    async def find(self, collection: str,
                   criteria: Optional[Dict[str, Any]] = None) -> List[Record]:
        """Return records matching ``criteria`` in insertion order."""
        pass

    @abstractmethod
    async def update_by_id(self, collection: str, record_id: str,
                           changes: Record) -> Optional[Record]:
        """Merge ``changes`` into a record; None when it does not exist."""
        pass

    @abstractmethod
    async def delete_by_id(self, collection: str, record_id: str) -> bool:
        """Delete a record, returning whether it existed."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
