"""
Deferred Callback Queue

Runs zero-argument callbacks after the current synchronous execution has
finished, in submission order. The future core only depends on the
CallbackQueue protocol; two implementations are provided:

- DeferredQueue: in-process FIFO drained explicitly by the host
- AsyncioQueue: hands callbacks to an asyncio event loop via call_soon
"""

import asyncio
from collections import deque
from typing import Any, Callable, Deque, Optional, Protocol, runtime_checkable

from ..config import QueueBackend, get_config
from ..exceptions import ConfigurationError, QueueOverflowError
from ..utils.logging import get_logger, log_queue_event

logger = get_logger(__name__)

Callback = Callable[[], Any]


@runtime_checkable
class CallbackQueue(Protocol):
    """Queue protocol consumed by the future core"""

    def schedule(self, callback: Callback) -> None:
        """Run callback later, after every callback scheduled before it"""
        ...


class DeferredQueue:
    """
    In-process FIFO callback queue

    Callbacks only run when the host drains the queue with run_once() or
    run_until_idle(). Callbacks scheduled during a drain are appended and run
    within the same drain, after everything already queued.
    """

    name = "deferred"

    def __init__(self, max_callbacks: Optional[int] = None):
        """
        Create a queue

        Args:
            max_callbacks: Default budget for a single run_until_idle() call,
                None means unbounded
        """
        self._callbacks: Deque[Callback] = deque()
        self._draining = False
        self._max_callbacks = max_callbacks
        self._executed = 0

    def schedule(self, callback: Callback) -> None:
        self._callbacks.append(callback)

    def __len__(self) -> int:
        return len(self._callbacks)

    @property
    def executed(self) -> int:
        """Total number of callbacks run by this queue"""
        return self._executed

    def is_idle(self) -> bool:
        return not self._callbacks

    def run_once(self) -> bool:
        """
        Run the oldest queued callback

        Returns:
            True if a callback ran, False if the queue was empty
        """
        if not self._callbacks:
            return False
        self._enter()
        try:
            self._run(self._callbacks.popleft())
        finally:
            self._draining = False
        return True

    def run_until_idle(self, max_callbacks: Optional[int] = None) -> int:
        """
        Drain the queue, including callbacks scheduled while draining

        Args:
            max_callbacks: Budget for this drain, falls back to the queue's
                default budget

        Returns:
            Number of callbacks that ran

        Raises:
            QueueOverflowError: More callbacks were pending after the budget
                was spent
        """
        budget = max_callbacks if max_callbacks is not None else self._max_callbacks
        self._enter()
        ran = 0
        log_queue_event(logger, self.name, "drain_started", {"pending": len(self)})
        try:
            while self._callbacks:
                if budget is not None and ran >= budget:
                    raise QueueOverflowError(
                        f"Queue drain exceeded {budget} callbacks",
                        {"budget": budget, "pending": len(self._callbacks)},
                    )
                self._run(self._callbacks.popleft())
                ran += 1
        finally:
            self._draining = False
        log_queue_event(logger, self.name, "drain_finished", {"ran": ran})
        return ran

    def clear(self) -> int:
        """Drop every queued callback, returns the count dropped"""
        dropped = len(self._callbacks)
        self._callbacks.clear()
        return dropped

    def _enter(self) -> None:
        if self._draining:
            raise RuntimeError("DeferredQueue is already draining")
        self._draining = True

    def _run(self, callback: Callback) -> None:
        self._executed += 1
        try:
            callback()
        except Exception:
            logger.error("queued_callback_failed", queue=self.name, exc_info=True)
            raise


class AsyncioQueue:
    """
    Callback queue backed by an asyncio event loop

    call_soon is FIFO per loop, which gives the ordering the future core
    needs. Without an explicit loop, the loop running at schedule time is
    used.
    """

    name = "asyncio"

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def schedule(self, callback: Callback) -> None:
        self.loop.call_soon(callback)


_default_queue: Optional[CallbackQueue] = None


def create_queue(backend: QueueBackend, **kwargs: Any) -> CallbackQueue:
    """
    Create a callback queue of the given backend type

    Args:
        backend: Queue backend, "deferred" or "asyncio"
        **kwargs: Passed to the queue constructor

    Returns:
        Callback queue instance

    Raises:
        ConfigurationError: If the backend name is unknown
    """
    try:
        backend = QueueBackend(backend)
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown queue backend: {backend}. Choose from: deferred, asyncio"
        ) from e

    if backend is QueueBackend.ASYNCIO:
        return AsyncioQueue(**kwargs)
    return DeferredQueue(**kwargs)


def get_default_queue() -> CallbackQueue:
    """Get the process-wide queue, creating it from the configuration on first use"""
    global _default_queue
    if _default_queue is None:
        config = get_config()
        if config.queue_backend is QueueBackend.ASYNCIO:
            _default_queue = create_queue(config.queue_backend)
        else:
            _default_queue = create_queue(
                config.queue_backend, max_callbacks=config.max_drain_callbacks
            )
    return _default_queue


def set_default_queue(queue: Optional[CallbackQueue]) -> None:
    """Install the process-wide queue, None resets it to the configured default"""
    global _default_queue
    if queue is not None and not isinstance(queue, CallbackQueue):
        raise TypeError(f"{type(queue).__name__} does not implement schedule()")
    _default_queue = queue
