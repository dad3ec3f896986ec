"""Custom exceptions for the topic graph engine.

Exception Hierarchy:
    TopicGraphError (base)
    ├── TopicNotFoundError
    ├── CircularReferenceError
    ├── StoreError (wraps backend failures, carries the operation)
    └── TopicValidationError
"""

from typing import List, Optional


class TopicGraphError(Exception):
    """Base exception for all topic graph errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class TopicNotFoundError(TopicGraphError):
    """Raised when a requested topic does not exist."""

    def __init__(self, topic_id: str, version: Optional[int] = None):
        self.topic_id = topic_id
        self.version = version
        message = f"Topic '{topic_id}' not found"
        details = {'topic_id': topic_id}
        if version is not None:
            message = f"Version {version} of topic '{topic_id}' not found"
            details['version'] = version
        super().__init__(message, details=details)


class CircularReferenceError(TopicGraphError):
    """Raised when walking up the parent chain revisits a topic."""

    def __init__(self, topic_id: str, chain: Optional[List[str]] = None):
        self.topic_id = topic_id
        self.chain = chain or []
        super().__init__(
            f"Circular reference detected at topic '{topic_id}'",
            details={'topic_id': topic_id, 'chain': self.chain}
        )


class StoreError(TopicGraphError):
    """Raised when the underlying store fails a lookup or write.

    Attributes:
        operation: Name of the operation that was running when the store failed
    """

    def __init__(self, operation: str, reason: Optional[str] = None,
                 topic_id: Optional[str] = None):
        self.operation = operation
        self.reason = reason
        self.topic_id = topic_id
        message = f"Store failure during '{operation}'"
        if reason:
            message += f": {reason}"
        details = {'operation': operation}
        if topic_id:
            details['topic_id'] = topic_id
        super().__init__(message, details=details)


class TopicValidationError(TopicGraphError):
    """Raised when input identifiers or topic data are invalid."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Optional[str] = None):
        self.field = field
        self.value = value
        details = {}
        if field:
            details['field'] = field
        if value is not None:
            details['value'] = str(value)[:100]
        super().__init__(message, details=details)
