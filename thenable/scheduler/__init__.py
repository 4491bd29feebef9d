"""Deferred callback queues for thenable futures"""

from .queue import (
    Callback,
    CallbackQueue,
    DeferredQueue,
    AsyncioQueue,
    create_queue,
    get_default_queue,
    set_default_queue,
)

__all__ = [
    "Callback",
    "CallbackQueue",
    "DeferredQueue",
    "AsyncioQueue",
    "create_queue",
    "get_default_queue",
    "set_default_queue",
]
