"""
Access to the shared execution client.

A client is provided for a scope with ``provide_client`` and looked up with
``use_client``. The binding lives in a context variable, so asyncio tasks
created inside the scope see it while unrelated tasks do not.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from ..exceptions import ClientError
from .base import Client

_current_client: ContextVar[Optional[Client]] = ContextVar("gql_hooks_client", default=None)


@contextmanager
def provide_client(client: Client) -> Iterator[Client]:
    """Make ``client`` the current client for the enclosed scope."""
    token = _current_client.set(client)
    try:
        yield client
    finally:
        _current_client.reset(token)


def use_client(client: Optional[Client] = None) -> Client:
    """
    Resolve the client to use.

    Args:
        client: Explicit client; wins over the provided one

    Raises:
        ClientError: If no client is given and none is provided
    """
    resolved = client if client is not None else _current_client.get()
    if resolved is None:
        raise ClientError(
            "No GraphQL client available: pass client= or wrap the call in provide_client()"
        )
    if resolved.is_closed:
        raise ClientError("GraphQL client is closed")
    return resolved
