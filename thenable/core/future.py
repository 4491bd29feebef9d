"""
Future

Implements the future state machine and continuation scheduling:

- a future starts pending and settles at most once, fulfilled or rejected
- callbacks registered while pending are drained in registration order
  at the transition
- then() handlers always run on the callback queue, never in the turn
  that registered them or settled the future
"""

import itertools
from functools import partial
from typing import Any, Callable, List, Optional

from ..config import get_config
from ..exceptions import CyclicResolutionError, Rejection
from ..scheduler import CallbackQueue, get_default_queue
from ..utils.logging import get_logger, log_settlement
from .base import AbstractFuture
from .combinators import CombinatorsMixin
from .resolution import resolve_candidate, unwrap_reason
from .status import FutureStatus

logger = get_logger(__name__)

Handler = Callable[[Any], Any]
Initializer = Callable[[Callable[..., None], Callable[..., None]], Any]

_future_ids = itertools.count(1)


def _identity(value: Any) -> Any:
    return value


def _rethrow(reason: Any) -> Any:
    raise Rejection(reason)


class Future(CombinatorsMixin, AbstractFuture):
    """
    Deferred value settled exactly once

    The initializer runs synchronously and receives the resolve and reject
    capabilities. An exception raised by the initializer rejects the future
    unless it already settled.

    Example:
        >>> future = Future(lambda resolve, reject: resolve(42))
        >>> future.then(print)
    """

    def __init__(
        self,
        initializer: Optional[Initializer] = None,
        *,
        queue: Optional[CallbackQueue] = None,
    ):
        self._id = f"future-{next(_future_ids)}"
        self._queue = queue if queue is not None else get_default_queue()
        self._status = FutureStatus.PENDING
        self._value: Any = None
        self._reason: Any = None
        self._fulfillment_callbacks: List[Callable[[Any], None]] = []
        self._rejection_callbacks: List[Callable[[Any], None]] = []

        if initializer is not None:
            try:
                initializer(self._resolve, self._reject)
            except Exception as exc:
                self._reject(unwrap_reason(exc))

    # State

    @property
    def id(self) -> str:
        return self._id

    @property
    def queue(self) -> CallbackQueue:
        return self._queue

    @property
    def status(self) -> FutureStatus:
        return self._status

    @property
    def value(self) -> Any:
        """Fulfilment value, None unless fulfilled"""
        return self._value

    @property
    def reason(self) -> Any:
        """Rejection reason, None unless rejected"""
        return self._reason

    def is_pending(self) -> bool:
        return self._status.is_pending()

    def is_fulfilled(self) -> bool:
        return self._status is FutureStatus.FULFILLED

    def is_rejected(self) -> bool:
        return self._status is FutureStatus.REJECTED

    def is_settled(self) -> bool:
        return self._status.is_settled()

    def __repr__(self) -> str:
        if self._status is FutureStatus.FULFILLED:
            detail = f" value={self._value!r}"
        elif self._status is FutureStatus.REJECTED:
            detail = f" reason={self._reason!r}"
        else:
            detail = ""
        return f"<{type(self).__name__} {self._id} {self._status.value}{detail}>"

    # Settlement capabilities

    def _resolve(self, value: Any = None, *_: Any) -> None:
        """
        Fulfil with value

        A native future passed as value is unwrapped: this future follows
        its outcome instead of being fulfilled with it.
        """
        if value is self:
            self._reject(CyclicResolutionError(self))
            return

        if isinstance(value, AbstractFuture):
            value.then(self._resolve, self._reject)
            return

        if self._status is not FutureStatus.PENDING:
            return

        self._status = FutureStatus.FULFILLED
        self._value = value
        callbacks = self._fulfillment_callbacks
        self._fulfillment_callbacks = []
        self._rejection_callbacks = []
        self._trace(value, len(callbacks))

        for callback in callbacks:
            callback(value)

    def _reject(self, reason: Any = None, *_: Any) -> None:
        """Reject with reason; reasons are never unwrapped"""
        if self._status is not FutureStatus.PENDING:
            return

        self._status = FutureStatus.REJECTED
        self._reason = reason
        callbacks = self._rejection_callbacks
        self._fulfillment_callbacks = []
        self._rejection_callbacks = []
        self._trace(reason, len(callbacks))

        for callback in callbacks:
            callback(reason)

    def _trace(self, outcome: Any, callbacks: int) -> None:
        if get_config().trace_settlements:
            log_settlement(logger, self._id, self._status.value, outcome, callbacks)

    # Continuations

    def then(
        self,
        on_fulfilled: Optional[Handler] = None,
        on_rejected: Optional[Handler] = None,
    ) -> "Future":
        """
        Register continuations and return the dependent future

        Non-callable handlers are ignored: the value or reason passes
        through to the dependent future unchanged. A handler's return value
        resolves the dependent future; an exception it raises rejects it
        (raise Rejection(reason) to reject with a non-exception reason).

        Args:
            on_fulfilled: Called with the value once fulfilled
            on_rejected: Called with the reason once rejected

        Returns:
            Dependent future
        """
        if not callable(on_fulfilled):
            on_fulfilled = _identity
        if not callable(on_rejected):
            on_rejected = _rethrow

        dependent = type(self)(queue=self._queue)

        if self._status is FutureStatus.FULFILLED:
            self._schedule(dependent, on_fulfilled, self._value)
        elif self._status is FutureStatus.REJECTED:
            self._schedule(dependent, on_rejected, self._reason)
        else:
            self._fulfillment_callbacks.append(
                partial(self._schedule, dependent, on_fulfilled)
            )
            self._rejection_callbacks.append(
                partial(self._schedule, dependent, on_rejected)
            )

        return dependent

    def catch(self, on_rejected: Optional[Handler] = None) -> "Future":
        """Register a rejection handler only"""
        return self.then(None, on_rejected)

    def finally_(self, on_finally: Optional[Callable[[], Any]] = None) -> "Future":
        """
        Run on_finally on either path, then pass the original outcome on

        on_finally takes no arguments. If it returns a future or thenable,
        that settles first. If it raises or its future rejects, that
        failure replaces the original outcome.
        """
        if not callable(on_finally):
            return self.then()

        cls = type(self)
        queue = self._queue

        def after_value(value: Any) -> Any:
            return cls.resolve(on_finally(), queue=queue).then(lambda _: value)

        def after_reason(reason: Any) -> Any:
            return cls.resolve(on_finally(), queue=queue).then(
                lambda _: _rethrow(reason)
            )

        return self.then(after_value, after_reason)

    def __await__(self):
        """
        Await the outcome from a coroutine

        Handlers only run when the future's queue is drained. With an
        AsyncioQueue the event loop does that; a future on a DeferredQueue
        never completes the await unless the host drains the queue.
        """
        from ..interop.asyncio_bridge import to_asyncio

        return to_asyncio(self).__await__()

    def _schedule(self, dependent: "Future", handler: Handler, argument: Any) -> None:
        self._queue.schedule(partial(_run_handler, dependent, handler, argument))


def _run_handler(dependent: Future, handler: Handler, argument: Any) -> None:
    """Queue job: call handler and resolve dependent with its result"""
    try:
        result = handler(argument)
    except Exception as exc:
        reason = unwrap_reason(exc)
        if not isinstance(exc, Rejection):
            logger.debug(
                "handler_raised", future_id=dependent.id, error=repr(exc)
            )
        dependent._reject(reason)
        return

    resolve_candidate(dependent, result, dependent._resolve, dependent._reject)
