"""Mutation adapter."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional, Set, TypeVar

from ..client.base import Client
from ..context import make_context, merge_context
from ..models import (
    Operation,
    OperationContext,
    OperationRequest,
    OperationResult,
    OperationType,
    RawOperationState,
)
from ..response import Response, project_state
from .base import BaseAdapter, HookResult

T = TypeVar("T")

ExecuteMutation = Callable[..., "asyncio.Task[OperationResult]"]
MutationPrimitive = Callable[[Optional[OperationContext]], "asyncio.Task[OperationResult]"]


class MutationAdapter(BaseAdapter[T, T, ExecuteMutation]):
    """
    Run a mutation on demand.

    Nothing happens until ``execute`` is called. Each call returns a task that
    resolves with the raw OperationResult, so callers can chain follow-up work
    without waiting for the response to update. Transport and GraphQL errors
    are reported in the result, not raised.

    Examples:
        ```python
        async with use_mutation(ADD_TODO, client=client) as add_todo:
            result = await add_todo.execute()
            if result.error is None:
                print(add_todo.response)
        ```
    """

    def __init__(
        self,
        request: OperationRequest[T],
        *,
        context: Optional[OperationContext] = None,
        client: Optional[Client] = None,
    ) -> None:
        super().__init__(request, context=context, client=client)
        self._state = RawOperationState()
        self._generation = 0
        self._pending: Set["asyncio.Task[OperationResult]"] = set()
        self._execute_mutation = self._make_execute_mutation()

    @property
    def state(self) -> RawOperationState:
        return self._state

    @property
    def pending(self) -> int:
        """Number of mutations still in flight."""
        return len(self._pending)

    def _set_state(self, state: RawOperationState) -> None:
        self._state = state
        self._on_state(state)

    def _make_execute_mutation(self) -> MutationPrimitive:
        client, context = self._client, self._context

        def execute_mutation(override: Optional[OperationContext] = None) -> "asyncio.Task[OperationResult]":
            operation = client.create_operation(
                OperationType.MUTATION, self._request, merge_context(context, override)
            )
            self._generation += 1
            if not self._closed:
                self._set_state(RawOperationState(fetching=True, operation=operation))

            task = asyncio.create_task(self._run(client, operation, self._generation))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            return task

        return execute_mutation

    async def _run(self, client: Client, operation: Operation, generation: int) -> OperationResult:
        try:
            result = await client.first_result(operation)
        except Exception as e:
            self._logger.warning(f"Mutation stream failed: {e!r}")
            result = OperationResult.from_network_error(operation, e)

        if generation == self._generation and not self._closed:
            self._set_state(
                RawOperationState(
                    fetching=False,
                    data=result.data,
                    error=result.error,
                    extensions=result.extensions,
                    stale=result.stale,
                    operation=result.operation,
                )
            )
        return result

    def _primitive(self) -> Callable[..., Any]:
        return self._execute_mutation

    def _make_execute(self) -> ExecuteMutation:
        execute_mutation = self._execute_mutation

        def execute(
            context: Optional[OperationContext] = None, **overrides: Any
        ) -> "asyncio.Task[OperationResult]":
            return execute_mutation(make_context(context, **overrides))

        return execute

    def _project(self, state: RawOperationState) -> Response[T]:
        return project_state(state, self._request.parse)

    def update(
        self,
        request: Optional[OperationRequest[T]] = None,
        *,
        context: Optional[OperationContext] = None,
    ) -> HookResult:
        """Re-render with new inputs; the execute function changes only if they did."""
        changed = False
        if request is not None:
            changed = request.key != self._request.key
            self._request = request
        if context is not None and context != self._context:
            self._context = context
            changed = True
        if changed:
            self._execute_mutation = self._make_execute_mutation()
        return self.result

    async def wait(self) -> Response[T]:
        """Wait for every in-flight mutation and return the response."""
        if self._pending:
            await asyncio.wait(set(self._pending))
        return self.response

    async def close(self) -> None:
        """
        Stop tracking results.

        In-flight mutations are not cancelled; their tasks still resolve but
        no longer update this adapter.
        """
        self._generation += 1
        await super().close()


def use_mutation(
    request: OperationRequest[T],
    *,
    context: Optional[OperationContext] = None,
    client: Optional[Client] = None,
) -> MutationAdapter[T]:
    """Create a mutation adapter."""
    return MutationAdapter(request, context=context, client=client)
