"""Future status"""

from enum import Enum


class FutureStatus(str, Enum):
    """State of a future; PENDING moves to exactly one terminal state, once"""

    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"

    def is_pending(self) -> bool:
        return self is FutureStatus.PENDING

    def is_settled(self) -> bool:
        return self is not FutureStatus.PENDING
