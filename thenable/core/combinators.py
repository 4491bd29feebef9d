"""
Combinators

Factory and aggregate operations built on then and the resolution
procedure. Provided as classmethods so subclasses of Future get instances
of themselves.
"""

from collections.abc import Iterable
from functools import partial
from typing import Any, List, Optional

from ..exceptions import NotIterableError
from ..scheduler import CallbackQueue
from .outcome import Deferred, FulfilledOutcome, RejectedOutcome
from .resolution import CandidateKind, classify, drive_thenable, unwrap_reason


def _as_sequence(inputs: Any) -> List[Any]:
    """Materialise combinator input, raising NotIterableError up front"""
    if not isinstance(inputs, Iterable):
        raise NotIterableError(inputs)
    return list(inputs)


class CombinatorsMixin:
    """Class-level operations of Future"""

    @classmethod
    def resolve(cls, value: Any = None, *, queue: Optional[CallbackQueue] = None):
        """
        Return a future for value

        A native future is returned unchanged, a foreign thenable is adopted
        through the resolution procedure, anything else gives an already
        fulfilled future.
        """
        try:
            kind, then = classify(value)
        except Exception as exc:
            return cls.reject(unwrap_reason(exc), queue=queue)

        if kind is CandidateKind.FUTURE:
            return value

        if kind is CandidateKind.THENABLE:
            return cls._adopt(value, then, queue)

        future = cls(queue=queue)
        future._resolve(value)
        return future

    @classmethod
    def _adopt(cls, thenable: Any, then: Any, queue: Optional[CallbackQueue]):
        """Future following a foreign thenable whose then was already read"""
        future = cls(queue=queue)
        drive_thenable(future, thenable, then, future._resolve, future._reject)
        return future

    @classmethod
    def reject(cls, reason: Any = None, *, queue: Optional[CallbackQueue] = None):
        """Return an already rejected future"""
        future = cls(queue=queue)
        future._reject(reason)
        return future

    @classmethod
    def deferred(cls, *, queue: Optional[CallbackQueue] = None) -> Deferred:
        """Create a pending future and hand out its settlement capabilities"""
        future = cls(queue=queue)
        return Deferred(future, future._resolve, future._reject)

    @classmethod
    def all(cls, inputs: Any, *, queue: Optional[CallbackQueue] = None):
        """
        Fulfil with every input's value, in input order

        Rejects with the first rejection. Inputs that are neither futures nor
        thenables count as fulfilled in place.

        Raises:
            NotIterableError: inputs cannot be iterated
        """
        items = _as_sequence(inputs)
        combined = cls(queue=queue)
        results: List[Any] = [None] * len(items)
        remaining = len(items)

        if not items:
            combined._resolve(results)
            return combined

        def report(index: int, value: Any) -> None:
            nonlocal remaining
            results[index] = value
            remaining -= 1
            if remaining == 0:
                combined._resolve(results)

        for index, item in enumerate(items):
            try:
                kind, then = classify(item)
            except Exception as exc:
                combined._reject(unwrap_reason(exc))
                break

            if kind is CandidateKind.FUTURE:
                item.then(partial(report, index), combined._reject)
            elif kind is CandidateKind.THENABLE:
                cls._adopt(item, then, queue).then(
                    partial(report, index), combined._reject
                )
            else:
                report(index, item)

        return combined

    @classmethod
    def race(cls, inputs: Any, *, queue: Optional[CallbackQueue] = None):
        """
        Settle with the outcome of the first input to settle

        Every input is subscribed to. Plain values count as already settled;
        among inputs that are already settled, the earliest in input order
        wins. An empty input never settles.

        Raises:
            NotIterableError: inputs cannot be iterated
        """
        items = _as_sequence(inputs)
        combined = cls(queue=queue)

        for item in items:
            cls.resolve(item, queue=queue).then(combined._resolve, combined._reject)

        return combined

    @classmethod
    def all_settled(cls, inputs: Any, *, queue: Optional[CallbackQueue] = None):
        """
        Fulfil with a FulfilledOutcome or RejectedOutcome per input

        Never rejects.

        Raises:
            NotIterableError: inputs cannot be iterated
        """
        items = _as_sequence(inputs)
        records = [
            cls.resolve(item, queue=queue).then(
                lambda value: FulfilledOutcome(value=value),
                lambda reason: RejectedOutcome(reason=reason),
            )
            for item in items
        ]
        return cls.all(records, queue=queue)
