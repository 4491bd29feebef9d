"""
asyncio interoperability

Converts between thenable futures and asyncio futures. The thenable side
only makes progress while its callback queue is being run: use an
AsyncioQueue bound to the same loop, or drain the DeferredQueue yourself.
"""

import asyncio
from typing import Any, Awaitable, Optional, Type

from ..exceptions import Rejection
from ..core.future import Future
from ..scheduler import CallbackQueue


def to_asyncio(
    future: Future, loop: Optional[asyncio.AbstractEventLoop] = None
) -> asyncio.Future:
    """
    Mirror a thenable future into an asyncio future

    Reasons that are not exceptions are raised as Rejection(reason).

    Args:
        future: Source future
        loop: Loop owning the asyncio future, defaults to the running loop

    Returns:
        asyncio future settled with the same outcome
    """
    loop = loop or asyncio.get_running_loop()
    mirror = loop.create_future()

    def on_value(value: Any) -> None:
        if not mirror.done():
            mirror.set_result(value)

    def on_reason(reason: Any) -> None:
        if mirror.done():
            return
        if isinstance(reason, Exception):
            mirror.set_exception(reason)
        else:
            mirror.set_exception(Rejection(reason))

    future.then(on_value, on_reason)
    return mirror


def from_asyncio(
    awaitable: Awaitable[Any],
    *,
    queue: Optional[CallbackQueue] = None,
    future_cls: Type[Future] = Future,
) -> Future:
    """
    Adopt the outcome of an asyncio future, task or coroutine

    Cancellation rejects with asyncio.CancelledError.

    Args:
        awaitable: asyncio future, task or coroutine (scheduled as a task)
        queue: Callback queue of the returned future
        future_cls: Future class to instantiate

    Returns:
        Pending future settled when the awaitable completes
    """
    source = asyncio.ensure_future(awaitable)
    future, resolve, reject = future_cls.deferred(queue=queue)

    def copy_outcome(done: asyncio.Future) -> None:
        if done.cancelled():
            reject(asyncio.CancelledError())
            return
        exc = done.exception()
        if exc is None:
            resolve(done.result())
        elif isinstance(exc, Rejection):
            reject(exc.reason)
        else:
            reject(exc)

    source.add_done_callback(copy_outcome)
    return future
