"""
Settled outcomes and deferred handles

FulfilledOutcome / RejectedOutcome are the records produced by all_settled,
one per input, never mutated after creation. Deferred exposes the settlement
capabilities of a fresh future to external code.
"""

from typing import Any, Callable, Dict, Literal, NamedTuple, Union

from pydantic import BaseModel, ConfigDict

from .base import AbstractFuture


class FulfilledOutcome(BaseModel):
    """Outcome of an input that fulfilled"""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: Literal["fulfilled"] = "fulfilled"
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "value": self.value}


class RejectedOutcome(BaseModel):
    """Outcome of an input that rejected"""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: Literal["rejected"] = "rejected"
    reason: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "reason": self.reason}


SettledOutcome = Union[FulfilledOutcome, RejectedOutcome]


class Deferred(NamedTuple):
    """A future together with its resolve and reject capabilities"""

    future: AbstractFuture
    resolve: Callable[..., None]
    reject: Callable[..., None]
