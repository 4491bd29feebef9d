"""
Future base class

Lets the resolution procedure recognise native futures without depending on
the concrete Future implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from .status import FutureStatus


class AbstractFuture(ABC):
    """
    Native future interface

    Any subclass is adopted directly by the resolution procedure instead of
    being driven through the foreign thenable path.
    """

    @property
    @abstractmethod
    def status(self) -> FutureStatus:
        """Current status"""
        pass

    @abstractmethod
    def then(
        self,
        on_fulfilled: Optional[Callable[[Any], Any]] = None,
        on_rejected: Optional[Callable[[Any], Any]] = None,
    ) -> "AbstractFuture":
        """Register continuations, returning the dependent future"""
        pass
