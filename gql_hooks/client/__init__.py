"""
Execution clients.

The adapters depend only on the ``Client`` interface; ``FetchClient`` is the
bundled HTTP implementation.
"""

from .base import Client, close_stream
from .fetch import FetchClient, ForwardSubscription
from .provider import provide_client, use_client

__all__ = [
    "Client",
    "FetchClient",
    "ForwardSubscription",
    "close_stream",
    "provide_client",
    "use_client",
]
