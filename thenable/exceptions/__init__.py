"""thenable exception module

Provides all exception classes
"""

from .errors import (
    ThenableError,
    CyclicResolutionError,
    NotIterableError,
    Rejection,
    QueueOverflowError,
    ConfigurationError,
)

__all__ = [
    "ThenableError",
    "CyclicResolutionError",
    "NotIterableError",
    "Rejection",
    "QueueOverflowError",
    "ConfigurationError",
]
