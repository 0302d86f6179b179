"""
Discriminated response state.

The three raw signals an execution client reports (fetching, data, error) are
collapsed into exactly one of five variants so callers can match on them
exhaustively::

    match adapter.response:
        case Fetching():
            ...
        case Data(data=user):
            ...
        case PartialData(data=user, errors=errors):
            ...
        case Error(error=error):
            ...
        case Empty():
            ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, TypeVar, Union

from .exceptions import CombinedError, GraphQLError, ParseError
from .models import RawOperationState

T = TypeVar("T")


@dataclass(frozen=True)
class Fetching:
    """Request in flight, nothing received yet."""


@dataclass(frozen=True)
class Data(Generic[T]):
    """Settled payload without errors."""

    data: T


@dataclass(frozen=True)
class PartialData(Generic[T]):
    """Payload received alongside GraphQL errors."""

    data: T
    errors: List[GraphQLError] = field(default_factory=list)


@dataclass(frozen=True)
class Error:
    """No usable payload."""

    error: CombinedError


@dataclass(frozen=True)
class Empty:
    """Not fetching, no payload, no error."""


Response = Union[Fetching, Data[T], PartialData[T], Error, Empty]


def project(fetching: bool, data: Optional[T], error: Optional[CombinedError]) -> Response[T]:
    """
    Map raw operation signals to a Response.

    Data and error presence are checked before the fetching flag, so a
    background refetch that is still marked in flight keeps reporting the
    data or error already received.
    """
    if fetching and data is None and error is None:
        return Fetching()
    if data is not None and error is None:
        return Data(data)
    if data is not None and error is not None:
        return PartialData(data, list(error.graphql_errors))
    if error is not None:
        return Error(error)
    return Empty()


def project_state(
    state: RawOperationState, parse: Optional[Callable[[Any], T]] = None
) -> Response[T]:
    """
    Project a live state, running ``parse`` over the payload when there is one.

    A failing ``parse`` yields ``Error(ParseError)`` instead of raising.
    """
    data = state.data
    if data is not None and parse is not None:
        try:
            data = parse(data)
        except Exception as e:
            return Error(ParseError(e))
    return project(state.fetching, data, state.error)
