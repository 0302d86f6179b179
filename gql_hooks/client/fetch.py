"""
HTTP execution client.

A deliberately small client: it sends queries and mutations over HTTP with
aiohttp, re-polls queries that ask for it, and forwards subscriptions to a
caller-supplied transport. It does not cache or deduplicate.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Callable, Dict, Mapping, Optional, Tuple
from urllib.parse import urlencode

import aiohttp

from ..config.models import ClientConfig
from ..exceptions import ClientError, GqlHooksError, HTTPError
from ..models import (
    FetchFunction,
    Operation,
    OperationContext,
    OperationResult,
    OperationType,
    RequestPolicy,
)
from .base import Client

logger = logging.getLogger(__name__)

USER_AGENT = "gql-hooks/1.0"
MAX_GET_URL_LENGTH = 2048

ForwardSubscription = Callable[[Operation], AsyncIterator[Mapping[str, Any]]]


class FetchClient(Client):
    """
    GraphQL client over HTTP.

    Examples:
        ```python
        async with FetchClient("https://api.example.com/graphql") as client:
            result = await client.query(OperationRequest("{ viewer { login } }"))
            if result.error is None:
                print(result.data["viewer"]["login"])
        ```

        Subscriptions need a transport that yields GraphQL payloads:
        ```python
        async def forward(operation):
            async for message in my_websocket_stream(operation.request.to_dict()):
                yield message["payload"]

        client = FetchClient(url, forward_subscription=forward)
        ```
    """

    def __init__(
        self,
        url: str,
        *,
        fetch_options: Optional[Dict[str, Any]] = None,
        fetch: Optional[FetchFunction] = None,
        request_policy: RequestPolicy = RequestPolicy.CACHE_FIRST,
        prefer_get_method: bool = False,
        suspense: bool = False,
        forward_subscription: Optional[ForwardSubscription] = None,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize the client.

        Args:
            url: GraphQL endpoint URL
            fetch_options: Keyword arguments for every HTTP request (headers, ...)
            fetch: Custom fetch coroutine used instead of aiohttp
            request_policy: Default request policy
            prefer_get_method: Send queries with GET when the URL stays short
            suspense: Default suspense flag, forwarded untouched
            forward_subscription: Transport for subscription operations
            session: Externally owned aiohttp session
            timeout: Total request timeout in seconds
        """
        super().__init__(
            OperationContext(
                url=url,
                fetch_options=fetch_options,
                fetch=fetch,
                request_policy=request_policy,
                prefer_get_method=prefer_get_method,
                suspense=suspense,
            )
        )
        self.timeout = timeout
        self._forward_subscription = forward_subscription
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> "FetchClient":
        """Build a client from configuration; ``kwargs`` are passed to the constructor."""
        context = config.to_context()
        return cls(
            str(config.url),
            fetch_options=context.fetch_options,
            request_policy=config.request_policy,
            prefer_get_method=config.prefer_get_method,
            suspense=config.suspense,
            timeout=config.timeout,
            **kwargs,
        )

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": USER_AGENT},
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
        await super().close()

    async def execute_operation(self, operation: Operation) -> AsyncIterator[OperationResult]:
        if self._closed:
            yield OperationResult.from_network_error(operation, ClientError("GraphQL client is closed"))
            return

        if operation.kind is OperationType.SUBSCRIPTION:
            async for result in self._subscribe(operation):
                yield result
            return

        while True:
            yield await self._fetch(operation)

            interval = operation.context.poll_interval
            if operation.kind is not OperationType.QUERY or not interval:
                return
            await asyncio.sleep(interval / 1000)

    async def _subscribe(self, operation: Operation) -> AsyncIterator[OperationResult]:
        if self._forward_subscription is None:
            yield OperationResult.from_network_error(
                operation, ClientError("No subscription transport configured")
            )
            return

        logger.debug(f"Forwarding subscription {operation.key[:12]}")
        try:
            async for payload in self._forward_subscription(operation):
                yield OperationResult.from_payload(operation, payload)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Subscription transport failed: {e}")
            yield OperationResult.from_network_error(operation, e)

    def _build_request(self, operation: Operation, url: str) -> Tuple[str, str, Dict[str, Any]]:
        """Return method, URL and request keyword arguments for ``operation``."""
        context = operation.context
        kwargs = dict(context.fetch_options or {})
        headers = {
            "Accept": "application/graphql-response+json, application/json",
            **(kwargs.pop("headers", None) or {}),
        }
        body = operation.request.to_dict()

        if operation.kind is OperationType.QUERY and context.prefer_get_method:
            params = {"query": body["query"]}
            if operation.request.variables:
                params["variables"] = json.dumps(operation.request.variables)
            if operation.request.operation_name:
                params["operationName"] = operation.request.operation_name
            separator = "&" if "?" in url else "?"
            get_url = f"{url}{separator}{urlencode(params)}"
            if len(get_url) <= MAX_GET_URL_LENGTH:
                return "GET", get_url, {**kwargs, "headers": headers}

        headers.setdefault("Content-Type", "application/json")
        return "POST", url, {**kwargs, "headers": headers, "json": body}

    async def _fetch(self, operation: Operation) -> OperationResult:
        context = operation.context
        url = context.url
        if not url:
            return OperationResult.from_network_error(
                operation, ClientError("No URL configured for operation")
            )

        method, request_url, kwargs = self._build_request(operation, url)
        logger.debug(
            f"Executing {operation.kind.value} {operation.request.operation_name or operation.key[:12]} "
            f"via {method} {url}"
        )

        try:
            if context.fetch is not None:
                body = await context.fetch(method, request_url, **kwargs)
                return self._body_to_result(operation, body, request_url)

            session = await self._get_session()
            async with session.request(method, request_url, **kwargs) as response:
                return await self._read_response(operation, response)

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"GraphQL network error for {url}: {e}")
            return OperationResult.from_network_error(operation, e)

    async def _read_response(
        self, operation: Operation, response: aiohttp.ClientResponse
    ) -> OperationResult:
        text = await response.text()
        try:
            body = json.loads(text) if text else None
        except ValueError:
            body = None

        if _is_graphql_body(body):
            return OperationResult.from_payload(operation, body, response=response)

        if response.status >= 400:
            error: GqlHooksError = HTTPError(
                f"HTTP {response.status}: {response.reason}",
                status_code=response.status,
                url=str(response.url),
                response_text=text,
            )
        else:
            error = GqlHooksError("Response is not a GraphQL result", url=str(response.url))
        logger.warning(f"GraphQL request failed: {error.message}")
        return OperationResult.from_network_error(operation, error, response=response)

    def _body_to_result(self, operation: Operation, body: Any, url: str) -> OperationResult:
        if _is_graphql_body(body):
            return OperationResult.from_payload(operation, body)
        return OperationResult.from_network_error(
            operation, GqlHooksError("Custom fetch returned no GraphQL result", url=url)
        )


def _is_graphql_body(body: Any) -> bool:
    return isinstance(body, Mapping) and ("data" in body or "errors" in body)
