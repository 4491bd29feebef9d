"""
Resolution Procedure

Decides how a candidate value settles a target future (Promises/A+ 2.3):

- the target itself: rejected with CyclicResolutionError
- a native future: its eventual outcome is adopted
- a foreign thenable: its then method is driven to completion, honouring
  only the first callback it invokes
- anything else: the target is fulfilled with the candidate
"""

from collections import deque
from enum import Enum
from functools import partial
from typing import Any, Callable, Deque, Optional, Tuple

from ..exceptions import CyclicResolutionError, Rejection
from ..utils.logging import get_logger
from .base import AbstractFuture

logger = get_logger(__name__)

Settle = Callable[[Any], None]

# Values that can never carry a then method
_PLAIN_TYPES = (type(None), bool, int, float, complex, str, bytes, bytearray)


class CandidateKind(Enum):
    """Closed classification of a resolution candidate"""

    FUTURE = "future"
    THENABLE = "thenable"
    PLAIN = "plain"


def classify(candidate: Any) -> Tuple[CandidateKind, Optional[Callable[..., Any]]]:
    """
    Classify a candidate, retrieving its then member at most once

    Classes are always plain: a then attribute found on a class is an
    unbound function, not a continuation method.

    Args:
        candidate: Value to classify

    Returns:
        (kind, then) where then is the bound continuation method for
        THENABLE and None otherwise

    Raises:
        Exception: Whatever retrieving the then member raised, other than
            AttributeError
    """
    if isinstance(candidate, AbstractFuture):
        return CandidateKind.FUTURE, None
    if isinstance(candidate, _PLAIN_TYPES) or isinstance(candidate, type):
        return CandidateKind.PLAIN, None

    try:
        then = candidate.then
    except AttributeError:
        return CandidateKind.PLAIN, None

    if callable(then):
        return CandidateKind.THENABLE, then
    return CandidateKind.PLAIN, None


def unwrap_reason(exc: BaseException) -> Any:
    """Rejection reason carried by a raised exception"""
    if isinstance(exc, Rejection):
        return exc.reason
    return exc


class OnceGuard:
    """
    First-call-wins guard shared by a pair of callbacks

    After any wrapped callback (or claim()) has fired, every further call
    through the guard is ignored.
    """

    __slots__ = ("called",)

    def __init__(self):
        self.called = False

    def claim(self) -> bool:
        if self.called:
            return False
        self.called = True
        return True

    def wrap(self, callback: Settle) -> Callable[..., None]:
        def guarded(value: Any = None, *_: Any) -> None:
            if self.claim():
                callback(value)

        return guarded


class _Resolver:
    """
    Work list driving one resolution to completion

    Candidates handed back synchronously by a foreign then method are
    queued and processed by the loop already on the stack, so a chain of
    nested thenables runs in constant stack depth.
    """

    __slots__ = ("target", "on_value", "on_reason", "_work", "_running")

    def __init__(self, target: AbstractFuture, on_value: Settle, on_reason: Settle):
        self.target = target
        self.on_value = on_value
        self.on_reason = on_reason
        self._work: Deque[Callable[[], None]] = deque()
        self._running = False

    def feed(self, candidate: Any = None, *_: Any) -> None:
        self.submit(partial(self._resolve, candidate))

    def submit(self, step: Callable[[], None]) -> None:
        self._work.append(step)
        if self._running:
            return

        self._running = True
        try:
            while self._work:
                step = self._work.popleft()
                try:
                    step()
                except Exception as exc:
                    logger.debug(
                        "resolution_step_failed",
                        future=repr(self.target),
                        error=repr(exc),
                    )
                    self.on_reason(unwrap_reason(exc))
        finally:
            self._running = False

    def _resolve(self, candidate: Any) -> None:
        if candidate is self.target:
            logger.debug("cyclic_resolution", future=repr(self.target))
            self.on_reason(CyclicResolutionError(self.target))
            return

        try:
            kind, then = classify(candidate)
        except Exception as exc:
            logger.debug("foreign_then_raised", stage="retrieve", error=repr(exc))
            self.on_reason(unwrap_reason(exc))
            return

        if kind is CandidateKind.FUTURE:
            candidate.then(self.feed, self.on_reason)
        elif kind is CandidateKind.THENABLE:
            self.drive(candidate, then)
        else:
            self.on_value(candidate)

    def drive(self, candidate: Any, then: Callable[..., Any]) -> None:
        guard = OnceGuard()
        try:
            then(guard.wrap(self.feed), guard.wrap(self.on_reason))
        except Exception as exc:
            if guard.claim():
                logger.debug(
                    "foreign_then_raised",
                    stage="call",
                    thenable=type(candidate).__name__,
                    error=repr(exc),
                )
                self.on_reason(unwrap_reason(exc))


def resolve_candidate(
    target: AbstractFuture,
    candidate: Any,
    on_value: Settle,
    on_reason: Settle,
) -> None:
    """
    Run the resolution procedure for candidate against target

    Args:
        target: Future being settled
        candidate: Value to resolve target with
        on_value: Fulfils target
        on_reason: Rejects target
    """
    _Resolver(target, on_value, on_reason).feed(candidate)


def drive_thenable(
    target: AbstractFuture,
    candidate: Any,
    then: Callable[..., Any],
    on_value: Settle,
    on_reason: Settle,
) -> None:
    """
    Call a foreign then method and settle target from its callbacks

    The foreign implementation may call its callbacks zero, one or many
    times, synchronously or later, in either order. Only the first call
    counts; an exception raised by then after that call is ignored. Values
    it hands back are resolved in turn, however deeply they nest.

    Args:
        target: Future being settled
        candidate: The foreign thenable, already bound into then
        then: Continuation method retrieved from candidate
        on_value: Fulfils target
        on_reason: Rejects target
    """
    resolver = _Resolver(target, on_value, on_reason)
    resolver.submit(partial(resolver.drive, candidate, then))
