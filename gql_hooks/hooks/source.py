"""
Live operation sources.

An OperationSource keeps the current RawOperationState of one query or
subscription and the primitive that (re-)executes it. It owns at most one
running stream at a time: starting a new execution tears the previous one
down in the same call, and results from a torn-down stream are discarded.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Callable, List, Optional

from ..client.base import Client, close_stream
from ..context import merge_context
from ..exceptions import AccumulatorError, CombinedError
from ..models import (
    Operation,
    OperationContext,
    OperationRequest,
    OperationResult,
    OperationType,
    RawOperationState,
)

logger = logging.getLogger(__name__)

Reducer = Callable[[Any, Any], Any]
ReducerFactory = Callable[[OperationRequest[Any]], Optional[Reducer]]
StateListener = Callable[[RawOperationState], None]
Reexecute = Callable[[Optional[OperationContext]], None]


class OperationSource:
    """
    State holder and execution driver for a query or subscription.

    For subscriptions an optional reducer folds each payload into the previous
    state's data; the accumulated value is dropped whenever the subscription
    is re-established.
    """

    def __init__(
        self,
        client: Client,
        kind: OperationType,
        request: OperationRequest[Any],
        context: Optional[OperationContext] = None,
        reducer_factory: Optional[ReducerFactory] = None,
    ) -> None:
        self._client = client
        self._kind = kind
        self._request = request
        self._context = context or OperationContext()
        self._reducer_factory = reducer_factory

        self._state = RawOperationState()
        self._listeners: List[StateListener] = []
        self._task: Optional[asyncio.Task[None]] = None
        self._generation = 0
        self._closed = False

        self._reexecute = self._make_reexecute()

    @property
    def state(self) -> RawOperationState:
        return self._state

    @property
    def kind(self) -> OperationType:
        return self._kind

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def reexecute(self) -> Reexecute:
        """
        Execution primitive bound to the current client, request and context.

        Its identity only changes when one of those changes.
        """
        return self._reexecute

    def _make_reexecute(self) -> Reexecute:
        client, context = self._client, self._context

        def reexecute(override: Optional[OperationContext] = None) -> None:
            # Requests with an equal key may still differ in parse.
            request = self._request
            operation = client.create_operation(self._kind, request, merge_context(context, override))
            reducer = self._reducer_factory(request) if self._reducer_factory else None
            self._run(operation, reducer)

        return reexecute

    def update(
        self,
        request: Optional[OperationRequest[Any]] = None,
        context: Optional[OperationContext] = None,
        client: Optional[Client] = None,
    ) -> bool:
        """
        Rebind the source to new inputs.

        Returns True when the operation's identity changed, in which case the
        execution primitive is rebuilt. The running stream is left alone;
        restarting it is the caller's decision.
        """
        changed = False
        if client is not None and client is not self._client:
            self._client = client
            changed = True
        if request is not None:
            changed = changed or request.key != self._request.key
            self._request = request
        if context is not None and context != self._context:
            self._context = context
            changed = True
        if changed:
            self._reexecute = self._make_reexecute()
        return changed

    def listen(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unlisten() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unlisten

    def _set_state(self, state: RawOperationState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.warning(f"Error in state listener: {e}")

    def _teardown(self) -> None:
        self._generation += 1
        if self._task is not None and not self._task.done():
            logger.debug(f"Tearing down {self._kind.value} {self._request.key[:12]}")
            self._task.cancel()
        self._task = None

    def _run(self, operation: Operation, reducer: Optional[Reducer]) -> None:
        if self._closed:
            logger.debug("Ignoring execution request on a closed source")
            return

        self._teardown()
        generation = self._generation
        logger.debug(f"Starting {operation.kind.value} {operation.key[:12]}")

        if self._kind is OperationType.SUBSCRIPTION:
            state = RawOperationState(fetching=True, operation=operation)
        else:
            state = self._state.evolve(fetching=True, operation=operation)
        self._set_state(state)

        stream = self._client.execute_operation(operation)
        self._task = asyncio.create_task(self._consume(stream, generation, reducer))

    async def _consume(
        self,
        stream: AsyncIterator[OperationResult],
        generation: int,
        reducer: Optional[Reducer],
    ) -> None:
        try:
            async for result in stream:
                if generation != self._generation:
                    return
                if not self._apply(result, reducer):
                    return
        except Exception as e:
            if generation == self._generation:
                logger.warning(f"Operation stream failed: {e!r}")
                self._set_state(
                    self._state.evolve(fetching=False, error=CombinedError(network_error=e))
                )
            return
        finally:
            await close_stream(stream)

        if generation == self._generation and self._state.fetching:
            self._set_state(self._state.evolve(fetching=False))

    def _apply(self, result: OperationResult, reducer: Optional[Reducer]) -> bool:
        """Fold one result into the state; returns False when the stream must stop."""
        data = result.data
        # Only an accumulating subscription carries history across emissions.
        if self._kind is OperationType.SUBSCRIPTION and reducer is not None:
            if data is None:
                data = self._state.data
            else:
                try:
                    data = reducer(self._state.data, data)
                except Exception as e:
                    logger.error(f"Subscription accumulator failed, tearing down: {e!r}")
                    self._set_state(
                        self._state.evolve(
                            fetching=False,
                            data=None,
                            error=AccumulatorError(e),
                            operation=result.operation,
                        )
                    )
                    return False

        self._set_state(
            RawOperationState(
                fetching=self._kind is OperationType.SUBSCRIPTION,
                data=data,
                error=result.error,
                extensions=result.extensions,
                stale=result.stale,
                operation=result.operation,
            )
        )
        return True

    def stop(self) -> None:
        """Tear down the running stream, keeping the last received data."""
        was_active = self.is_active
        self._teardown()
        if was_active or self._state.fetching:
            self._set_state(self._state.evolve(fetching=False))

    async def wait(self) -> RawOperationState:
        """Wait until the running stream, including any that replaces it, ends."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self._state

    def close(self) -> None:
        """Tear down for good; later execution requests are ignored."""
        self._teardown()
        self._closed = True
        self._listeners.clear()
