"""
thenable Exception Definitions

Error types raised by the future machinery. Errors raised inside handlers or
foreign ``then`` methods are not wrapped: the raised exception itself becomes
the rejection reason of the nearest enclosing future.
"""

from typing import Any, Dict, Optional


class ThenableError(Exception):
    """thenable base exception"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class CyclicResolutionError(ThenableError, TypeError):
    """
    Cyclic resolution error

    Occurs when a future is resolved with itself, either directly through its
    resolve capability or by a handler returning the future it feeds.
    """

    def __init__(self, future: Any = None):
        super().__init__(
            "A future cannot be resolved with itself",
            {"future": repr(future)},
        )


class NotIterableError(ThenableError, TypeError):
    """
    Not iterable error

    Raised synchronously by combinators (all, race, all_settled) when the
    input cannot be iterated. Never delivered through a rejected future.
    """

    def __init__(self, value: Any):
        super().__init__(
            f"{type(value).__name__!r} object is not iterable",
            {"type": type(value).__name__},
        )


class Rejection(ThenableError):
    """
    Rejection carrier

    Raised from a handler to reject the dependent future with an arbitrary
    reason, including values that are not exceptions. The dependent future's
    reason is ``reason``, never the carrier itself.
    """

    def __init__(self, reason: Any):
        super().__init__(f"Future rejected with {reason!r}", {"reason": repr(reason)})
        self.reason = reason


class QueueOverflowError(ThenableError):
    """
    Queue overflow error

    A single drain of a DeferredQueue ran more callbacks than its budget
    allows, usually a chain that keeps rescheduling itself.
    """

    pass


class ConfigurationError(ThenableError, ValueError):
    """
    Configuration error

    Invalid configuration values, unknown queue backends or unsupported
    config file formats.
    """

    pass
