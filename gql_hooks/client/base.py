"""
Execution client boundary.

Adapters only talk to an execution client through this interface: given an
operation, the client returns an async iterator of results. Caching,
deduplication and transport are the client's business.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Optional

from ..context import merge_context
from ..models import (
    Operation,
    OperationContext,
    OperationRequest,
    OperationResult,
    OperationType,
)

logger = logging.getLogger(__name__)


async def close_stream(stream: Any) -> None:
    """Close an async iterator if it supports it."""
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()


class Client(ABC):
    """
    Abstract GraphQL execution client.

    Subclasses implement ``execute_operation``. The client-level ``context``
    supplies defaults for every operation it creates.
    """

    def __init__(self, context: Optional[OperationContext] = None) -> None:
        self.context = context or OperationContext()
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    def create_operation(
        self,
        kind: OperationType,
        request: OperationRequest[Any],
        context: Optional[OperationContext] = None,
    ) -> Operation:
        """Bind a request to a kind and the client defaults merged with ``context``."""
        return Operation(kind=kind, request=request, context=merge_context(self.context, context))

    @abstractmethod
    def execute_operation(self, operation: Operation) -> AsyncIterator[OperationResult]:
        """Return the stream of results for ``operation``."""

    def execute_query(
        self, request: OperationRequest[Any], context: Optional[OperationContext] = None
    ) -> AsyncIterator[OperationResult]:
        return self.execute_operation(self.create_operation(OperationType.QUERY, request, context))

    def execute_mutation(
        self, request: OperationRequest[Any], context: Optional[OperationContext] = None
    ) -> AsyncIterator[OperationResult]:
        return self.execute_operation(self.create_operation(OperationType.MUTATION, request, context))

    def execute_subscription(
        self, request: OperationRequest[Any], context: Optional[OperationContext] = None
    ) -> AsyncIterator[OperationResult]:
        return self.execute_operation(
            self.create_operation(OperationType.SUBSCRIPTION, request, context)
        )

    async def first_result(self, operation: Operation) -> OperationResult:
        """
        Run ``operation`` until its first result and tear the stream down.

        A stream that ends without producing anything yields an empty result.
        """
        stream = self.execute_operation(operation)
        try:
            async for result in stream:
                return result
        finally:
            await close_stream(stream)
        logger.debug(f"Operation {operation.key[:12]} completed without a result")
        return OperationResult(operation=operation)

    async def query(
        self, request: OperationRequest[Any], context: Optional[OperationContext] = None
    ) -> OperationResult:
        """Execute a query and return its first result."""
        return await self.first_result(self.create_operation(OperationType.QUERY, request, context))

    async def mutation(
        self, request: OperationRequest[Any], context: Optional[OperationContext] = None
    ) -> OperationResult:
        """Execute a mutation and return its result."""
        return await self.first_result(
            self.create_operation(OperationType.MUTATION, request, context)
        )

    async def close(self) -> None:
        self._closed = True

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
