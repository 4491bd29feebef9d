"""thenable core: future state machine, resolution procedure and combinators"""

from .status import FutureStatus
from .base import AbstractFuture
from .outcome import Deferred, FulfilledOutcome, RejectedOutcome, SettledOutcome
from .resolution import (
    CandidateKind,
    OnceGuard,
    classify,
    drive_thenable,
    resolve_candidate,
    unwrap_reason,
)
from .future import Future

__all__ = [
    "FutureStatus",
    "AbstractFuture",
    "Deferred",
    "FulfilledOutcome",
    "RejectedOutcome",
    "SettledOutcome",
    "CandidateKind",
    "OnceGuard",
    "classify",
    "drive_thenable",
    "resolve_candidate",
    "unwrap_reason",
    "Future",
]
