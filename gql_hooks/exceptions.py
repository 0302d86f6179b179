"""
Exception hierarchy for gql_hooks.

Transport and GraphQL errors are not raised at callers: they are folded into a
CombinedError carried by the Error and PartialData response variants. The
exceptions below that are actually raised signal caller contract violations
(no client available, bad configuration).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence


class GqlHooksError(Exception):
    """
    Base exception for all gql_hooks errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = kwargs


@dataclass
class GraphQLError:
    """A single GraphQL-level error as returned in a response's ``errors`` list."""

    message: str
    locations: Optional[List[Dict[str, int]]] = None
    path: Optional[List[Any]] = None
    extensions: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, error: Any) -> "GraphQLError":
        """Build from a wire error; strings and malformed entries are tolerated."""
        if isinstance(error, GraphQLError):
            return error
        if not isinstance(error, Mapping):
            return cls(message=str(error))
        return cls(
            message=str(error.get("message", "Unknown error")),
            locations=error.get("locations"),
            path=error.get("path"),
            extensions=dict(error.get("extensions") or {}),
        )

    def __str__(self) -> str:
        return self.message


def _render_message(
    network_error: Optional[BaseException], graphql_errors: Sequence[GraphQLError]
) -> str:
    lines = []
    if network_error is not None:
        lines.append(f"[Network] {network_error}")
    lines.extend(f"[GraphQL] {error.message}" for error in graphql_errors)
    return "\n".join(lines) or "[Network] Unknown error"


class CombinedError(GqlHooksError):
    """
    Normalized operation error.

    Holds a transport failure, an ordered sequence of GraphQL errors, or both
    when a response carried partial data alongside errors.

    Attributes:
        network_error: Transport level failure, if any
        graphql_errors: GraphQL errors in the order the server returned them
        response: Raw response object or body, when one was received
    """

    def __init__(
        self,
        network_error: Optional[BaseException] = None,
        graphql_errors: Optional[Sequence[Any]] = None,
        response: Any = None,
    ) -> None:
        errors = [GraphQLError.from_dict(e) for e in graphql_errors or ()]
        super().__init__(_render_message(network_error, errors))
        self.network_error = network_error
        self.graphql_errors: List[GraphQLError] = errors
        self.response = response

    @property
    def is_network_error(self) -> bool:
        return self.network_error is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class AccumulatorError(CombinedError):
    """
    Wraps an exception raised by a subscription's combine function.

    The subscription that produced it has been torn down; no further
    accumulated values are emitted until it is explicitly re-executed.
    """

    def __init__(self, original_error: BaseException) -> None:
        super().__init__(network_error=None)
        self.original_error = original_error
        self.message = f"[Accumulator] {original_error!r}"
        self.args = (self.message,)


class ParseError(CombinedError):
    """
    Wraps an exception raised by a request's parse function.

    The raw payload stays in the live state; only the projected response
    reports the failure.
    """

    def __init__(self, original_error: BaseException) -> None:
        super().__init__(network_error=None)
        self.original_error = original_error
        self.message = f"[Parse] {original_error!r}"
        self.args = (self.message,)


class HTTPError(GqlHooksError):
    """Non-GraphQL HTTP response; reported as the network error of a CombinedError."""

    def __init__(
        self,
        message: str,
        status_code: int,
        url: Optional[str] = None,
        response_text: Optional[str] = None,
    ) -> None:
        super().__init__(message, url=url)
        self.status_code = status_code
        self.url = url
        self.response_text = response_text


class ClientError(GqlHooksError):
    """Raised when no execution client is available or the client is unusable."""

    pass


class ConfigurationError(GqlHooksError):
    """Raised when configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, source: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.source = source
