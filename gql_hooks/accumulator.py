"""
Subscription accumulator protocol.

A subscription either passes each parsed payload through unchanged or folds
payloads into a caller-owned accumulator. The mode is fixed when the
subscription adapter is created.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar, Union

Acc = TypeVar("Acc")
T = TypeVar("T")


@dataclass(frozen=True)
class PassThrough:
    """Each emission's parsed payload becomes the response payload."""

    def reducer(self, parse: Callable[[Any], Any]) -> None:
        return None


@dataclass(frozen=True)
class Accumulate(Generic[Acc, T]):
    """
    Fold emissions into an accumulator.

    ``combine`` receives None on the first emission and the previous
    accumulator afterwards, together with the freshly parsed payload.
    """

    combine: Callable[[Optional[Acc], T], Acc]

    def reducer(self, parse: Callable[[Any], T]) -> Callable[[Optional[Acc], Any], Acc]:
        """Build the raw-payload reducer handed to the subscription source."""
        combine = self.combine

        def reduce(previous: Optional[Acc], raw: Any) -> Acc:
            return combine(previous, parse(raw))

        return reduce


SubscriptionHandler = Union[PassThrough, Accumulate[Any, Any]]
