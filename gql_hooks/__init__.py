"""
Typed adapters over an asynchronous GraphQL client.

This package wraps a GraphQL execution client with query, mutation and
subscription adapters that report a single discriminated response instead of
separate fetching, data and error flags.

Features:
- Five-variant Response (Fetching, Data, PartialData, Error, Empty)
- Subscriptions that pass payloads through or fold them into an accumulator
- Hook-level context merged with per-call overrides
- Execute functions that keep their identity until their inputs change
- An aiohttp based HTTP client with GET, polling and custom fetch support
- Pydantic configuration loaded from files and the environment
"""

from .accumulator import Accumulate, PassThrough, SubscriptionHandler
from .client import (
    Client,
    FetchClient,
    ForwardSubscription,
    close_stream,
    provide_client,
    use_client,
)
from .config import ClientConfig, ConfigLoader, LoggingConfig, LogLevel, load_config
from .context import make_context, merge_context
from .exceptions import (
    AccumulatorError,
    ClientError,
    CombinedError,
    ConfigurationError,
    GqlHooksError,
    GraphQLError,
    HTTPError,
    ParseError,
)
from .hooks import (
    HookResult,
    MutationAdapter,
    QueryAdapter,
    SubscriptionAdapter,
    use_mutation,
    use_query,
    use_subscription,
)
from .logging import setup_logging
from .models import (
    CacheOutcome,
    Operation,
    OperationContext,
    OperationDebugMeta,
    OperationRequest,
    OperationResult,
    OperationType,
    RawOperationState,
    RequestPolicy,
)
from .response import Data, Empty, Error, Fetching, PartialData, Response, project

__version__ = "1.0.0"

__all__ = [
    # Requests and context
    "OperationRequest",
    "OperationContext",
    "OperationDebugMeta",
    "OperationType",
    "RequestPolicy",
    "CacheOutcome",
    "Operation",
    "OperationResult",
    "RawOperationState",
    "merge_context",
    "make_context",
    # Responses
    "Response",
    "Fetching",
    "Data",
    "PartialData",
    "Error",
    "Empty",
    "project",
    # Subscriptions
    "PassThrough",
    "Accumulate",
    "SubscriptionHandler",
    # Adapters
    "HookResult",
    "QueryAdapter",
    "MutationAdapter",
    "SubscriptionAdapter",
    "use_query",
    "use_mutation",
    "use_subscription",
    # Clients
    "Client",
    "FetchClient",
    "ForwardSubscription",
    "close_stream",
    "provide_client",
    "use_client",
    # Errors
    "GqlHooksError",
    "GraphQLError",
    "CombinedError",
    "AccumulatorError",
    "ParseError",
    "HTTPError",
    "ClientError",
    "ConfigurationError",
    # Configuration
    "ClientConfig",
    "LoggingConfig",
    "LogLevel",
    "ConfigLoader",
    "load_config",
    "setup_logging",
]
