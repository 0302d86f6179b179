"""
Subscription adapter.

Two calling conventions are offered and told apart by type: without a
handler (or with ``PassThrough``) the response carries the latest parsed
payload; with ``Accumulate(combine)`` it carries the caller's accumulator.
"""

from __future__ import annotations

from typing import Any, Optional, TypeVar, Union, overload

from ..accumulator import Accumulate, PassThrough, SubscriptionHandler
from ..client.base import Client
from ..exceptions import ClientError
from ..models import OperationContext, OperationRequest, OperationType, RawOperationState
from ..response import Response, project_state
from .base import SourceAdapter
from .source import ReducerFactory

T = TypeVar("T")
Acc = TypeVar("Acc")


class SubscriptionAdapter(SourceAdapter[T, Acc]):
    """
    Subscribe to an operation and keep its response current.

    The handler is fixed for the adapter's lifetime. Re-executing tears the
    subscription down and starts over with an empty accumulator. If the
    combine function raises, the adapter reports ``Error(AccumulatorError)``
    and stays torn down until ``execute`` is called again.

    Examples:
        ```python
        def append(messages, message):
            return [message] if messages is None else [*messages, message]

        async with use_subscription(request, Accumulate(append)) as chat:
            async for response in chat.responses():
                if isinstance(response, Data):
                    render(response.data)
        ```
    """

    kind = OperationType.SUBSCRIPTION

    def __init__(
        self,
        request: OperationRequest[T],
        handler: Optional[SubscriptionHandler] = None,
        *,
        pause: bool = False,
        context: Optional[OperationContext] = None,
        client: Optional[Client] = None,
    ) -> None:
        if handler is None:
            handler = PassThrough()
        if not isinstance(handler, (PassThrough, Accumulate)):
            raise ClientError(f"Unsupported subscription handler: {handler!r}")
        self._handler: SubscriptionHandler = handler
        super().__init__(request, pause=pause, context=context, client=client)

    @property
    def handler(self) -> SubscriptionHandler:
        return self._handler

    @property
    def accumulates(self) -> bool:
        return isinstance(self._handler, Accumulate)

    def _reducer_factory(self) -> Optional[ReducerFactory]:
        handler = self._handler
        if not isinstance(handler, Accumulate):
            return None

        def factory(request: OperationRequest[Any]) -> Any:
            return handler.reducer(request.parse)

        return factory

    def _project(self, state: RawOperationState) -> Response[Acc]:
        if self.accumulates:
            return project_state(state)
        return project_state(state, self._request.parse)


@overload
def use_subscription(
    request: OperationRequest[T],
    handler: None = None,
    *,
    pause: bool = ...,
    context: Optional[OperationContext] = ...,
    client: Optional[Client] = ...,
) -> SubscriptionAdapter[T, T]: ...


@overload
def use_subscription(
    request: OperationRequest[T],
    handler: PassThrough,
    *,
    pause: bool = ...,
    context: Optional[OperationContext] = ...,
    client: Optional[Client] = ...,
) -> SubscriptionAdapter[T, T]: ...


@overload
def use_subscription(
    request: OperationRequest[T],
    handler: Accumulate[Acc, T],
    *,
    pause: bool = ...,
    context: Optional[OperationContext] = ...,
    client: Optional[Client] = ...,
) -> SubscriptionAdapter[T, Acc]: ...


def use_subscription(
    request: OperationRequest[Any],
    handler: Union[None, PassThrough, Accumulate[Any, Any]] = None,
    *,
    pause: bool = False,
    context: Optional[OperationContext] = None,
    client: Optional[Client] = None,
) -> SubscriptionAdapter[Any, Any]:
    """Create a subscription adapter; it subscribes once started or entered."""
    return SubscriptionAdapter(request, handler, pause=pause, context=context, client=client)
