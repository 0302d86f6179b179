"""
Shared test fixtures and configuration for the gql_hooks test suite.
"""

import asyncio
from typing import Any, AsyncIterator, List, Mapping, Optional

import pytest

from gql_hooks import (
    Client,
    Operation,
    OperationContext,
    OperationRequest,
    OperationResult,
)
from gql_hooks.logging import cleanup_logging

END = object()
"""Pushed onto a scripted stream to end it."""

GRAPHQL_URL = "https://api.example.com/graphql"


class ScriptedClient(Client):
    """
    In-memory execution client.

    Every operation gets its own queue; tests push payloads (or exceptions,
    or ``END``) onto it and the operation's stream yields them in order.
    """

    def __init__(self, context: Optional[OperationContext] = None) -> None:
        super().__init__(context)
        self.operations: List[Operation] = []
        self.queues: List["asyncio.Queue[Any]"] = []
        self.closed_streams = 0

    def execute_operation(self, operation: Operation) -> AsyncIterator[OperationResult]:
        queue: "asyncio.Queue[Any]" = asyncio.Queue()
        self.operations.append(operation)
        self.queues.append(queue)
        return self._stream(operation, queue)

    async def _stream(
        self, operation: Operation, queue: "asyncio.Queue[Any]"
    ) -> AsyncIterator[OperationResult]:
        try:
            while True:
                item = await queue.get()
                if item is END:
                    return
                if isinstance(item, BaseException):
                    raise item
                if isinstance(item, Mapping):
                    yield OperationResult.from_payload(operation, item)
                else:
                    yield item
        finally:
            self.closed_streams += 1

    def push(self, item: Any, index: int = -1) -> None:
        """Feed ``item`` to the stream of the ``index``-th operation."""
        self.queues[index].put_nowait(item)

    def end(self, index: int = -1) -> None:
        self.queues[index].put_nowait(END)

    @property
    def last_operation(self) -> Operation:
        return self.operations[-1]


async def settle(rounds: int = 20) -> None:
    """Let pending tasks run until the event loop is idle."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def client() -> ScriptedClient:
    """Scripted in-memory client."""
    return ScriptedClient()


@pytest.fixture
def todos_request() -> OperationRequest[Any]:
    """Query request without a parser."""
    return OperationRequest("query Todos { todos { id title } }", operation_name="Todos")


@pytest.fixture
def counter_request() -> OperationRequest[int]:
    """Subscription request whose parser extracts the counter value."""
    return OperationRequest(
        "subscription Counter { counter { value } }",
        parse=lambda data: data["counter"]["value"],
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Remove handlers installed by a test."""
    yield
    cleanup_logging()


def counter_payload(value: int) -> Mapping[str, Any]:
    return {"data": {"counter": {"value": value}}}
