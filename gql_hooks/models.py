"""
Data models for GraphQL operations.

This module defines the request description handed to the adapters, the
per-call execution options (OperationContext), and the results and live state
produced by the underlying execution client.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Generic, List, Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import CombinedError

T = TypeVar("T")

FetchFunction = Callable[..., Awaitable[Any]]


class OperationType(str, Enum):
    """GraphQL operation kinds, plus the teardown signal."""

    QUERY = "query"
    MUTATION = "mutation"
    SUBSCRIPTION = "subscription"
    TEARDOWN = "teardown"


class RequestPolicy(str, Enum):
    """How an operation should use a cache, if the client has one."""

    CACHE_FIRST = "cache-first"
    CACHE_ONLY = "cache-only"
    NETWORK_ONLY = "network-only"
    CACHE_AND_NETWORK = "cache-and-network"


class CacheOutcome(str, Enum):
    """Cache outcome reported in debug metadata."""

    MISS = "miss"
    PARTIAL = "partial"
    HIT = "hit"


class OperationDebugMeta(BaseModel):
    """Debug metadata attached to an operation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    source: Optional[str] = Field(default=None, description="Component that issued the operation")
    cache_outcome: Optional[CacheOutcome] = Field(default=None, description="Cache outcome")


class OperationContext(BaseModel):
    """
    Execution options for a single operation.

    Every field is optional. A context built at a call site only carries the
    fields the caller wants to override; see ``merge_context``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    additional_typenames: Optional[List[str]] = Field(
        default=None, description="Extra type names used for cache invalidation"
    )
    fetch_options: Optional[Dict[str, Any]] = Field(
        default=None, description="Keyword arguments forwarded to the HTTP request"
    )
    fetch: Optional[FetchFunction] = Field(
        default=None, description="Custom fetch coroutine replacing the HTTP call"
    )
    request_policy: Optional[RequestPolicy] = Field(default=None, description="Request policy")
    url: Optional[str] = Field(default=None, description="Endpoint URL override")
    poll_interval: Optional[int] = Field(
        default=None, ge=0, description="Polling interval in milliseconds"
    )
    meta: Optional[OperationDebugMeta] = Field(default=None, description="Debug metadata")
    suspense: Optional[bool] = Field(default=None, description="Integrate with suspense")
    prefer_get_method: Optional[bool] = Field(
        default=None, description="Send queries with HTTP GET when possible"
    )


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class OperationRequest(Generic[T]):
    """
    Description of a GraphQL operation.

    ``parse`` turns the raw JSON payload into the caller's typed value; every
    payload goes through it before it is projected or accumulated.
    """

    query: str
    variables: Optional[Dict[str, Any]] = None
    parse: Callable[[Any], T] = _identity
    operation_name: Optional[str] = None

    @property
    def key(self) -> str:
        """Stable identity of the operation, derived from query text and variables."""
        payload = json.dumps(
            {
                "query": self.query,
                "variables": self.variables or {},
                "operationName": self.operation_name,
            },
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(payload.encode()).hexdigest()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a GraphQL request body."""
        result: Dict[str, Any] = {"query": self.query, "variables": self.variables or {}}
        if self.operation_name:
            result["operationName"] = self.operation_name
        return result


@dataclass(frozen=True)
class Operation:
    """A request bound to a kind and the context it executes with."""

    kind: OperationType
    request: OperationRequest[Any]
    context: OperationContext = field(default_factory=OperationContext)

    @property
    def key(self) -> str:
        return self.request.key


@dataclass(frozen=True)
class OperationResult:
    """One result delivered by the execution client for an operation."""

    operation: Operation
    data: Any = None
    error: Optional[CombinedError] = None
    extensions: Optional[Dict[str, Any]] = None
    stale: bool = False

    @classmethod
    def from_payload(cls, operation: Operation, payload: Mapping[str, Any], response: Any = None) -> "OperationResult":
        """Build a result from a decoded GraphQL response body."""
        errors = payload.get("errors") or []
        error = CombinedError(graphql_errors=errors, response=response) if errors else None
        return cls(
            operation=operation,
            data=payload.get("data"),
            error=error,
            extensions=payload.get("extensions"),
        )

    @classmethod
    def from_network_error(cls, operation: Operation, exc: BaseException, response: Any = None) -> "OperationResult":
        return cls(operation=operation, error=CombinedError(network_error=exc, response=response))


@dataclass(frozen=True)
class RawOperationState:
    """
    Live state of an operation as maintained by its source.

    A new value is produced for every change; existing values are never
    mutated.
    """

    fetching: bool = False
    data: Any = None
    error: Optional[CombinedError] = None
    extensions: Optional[Dict[str, Any]] = None
    stale: bool = False
    operation: Optional[Operation] = None

    def evolve(self, **changes: Any) -> "RawOperationState":
        return replace(self, **changes)
