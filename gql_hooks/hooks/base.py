"""
Shared adapter machinery.

An adapter is the Python counterpart of a hook instance: it is created with a
request and options, lives until it is closed, and at any time exposes the
current Response together with a memoized execute function.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import (
    Any,
    AsyncIterator,
    Callable,
    Generic,
    List,
    NamedTuple,
    Optional,
    TypeVar,
)

from ..client.base import Client
from ..client.provider import use_client
from ..context import make_context
from ..exceptions import ClientError
from ..models import OperationContext, OperationRequest, OperationType, RawOperationState
from ..response import Response
from .memo import Memo
from .source import OperationSource, ReducerFactory

T = TypeVar("T")
P = TypeVar("P")
E = TypeVar("E", bound=Callable[..., Any])

ResponseListener = Callable[[Response[Any]], None]


class HookResult(NamedTuple):
    """The ``(response, execute)`` pair returned to callers."""

    response: Response[Any]
    execute: Callable[..., Any]


class BaseAdapter(ABC, Generic[T, P, E]):
    """
    Base class for query, mutation and subscription adapters.

    ``T`` is the parsed payload type of the request, ``P`` the payload type
    carried by the response and ``E`` the type of the execute function.
    """

    def __init__(
        self,
        request: OperationRequest[T],
        *,
        context: Optional[OperationContext] = None,
        client: Optional[Client] = None,
    ) -> None:
        self._client = use_client(client)
        self._request = request
        self._context = context or OperationContext()

        self._execute_memo: Memo[E] = Memo()
        self._projected: Optional[RawOperationState] = None
        self._response: Optional[Response[P]] = None
        self._listeners: List[ResponseListener] = []
        self._started = False
        self._closed = False

        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def request(self) -> OperationRequest[T]:
        return self._request

    @property
    def context(self) -> OperationContext:
        """Hook-level default context."""
        return self._context

    @property
    def client(self) -> Client:
        return self._client

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    @abstractmethod
    def state(self) -> RawOperationState:
        """Current raw state."""

    @abstractmethod
    def _project(self, state: RawOperationState) -> Response[P]:
        """Derive the response for ``state``."""

    @abstractmethod
    def _primitive(self) -> Callable[..., Any]:
        """Underlying execution primitive the execute function is memoized on."""

    @abstractmethod
    def _make_execute(self) -> E:
        """Build the execute function around the current primitive."""

    @property
    def response(self) -> Response[P]:
        """Response for the current state, derived once per state change."""
        state = self.state
        if self._response is None or self._projected is not state:
            self._response = self._project(state)
            self._projected = state
        return self._response

    @property
    def execute(self) -> E:
        """
        Imperative execute function.

        The same object is returned until the underlying execution primitive
        changes.
        """
        return self._execute_memo.get(self._make_execute, (self._primitive(),))

    @property
    def result(self) -> HookResult:
        return HookResult(self.response, self.execute)

    def subscribe(self, listener: ResponseListener) -> Callable[[], None]:
        """Call ``listener`` with the new response on every state change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _on_state(self, state: RawOperationState) -> None:
        if not self._listeners:
            return
        response = self.response
        for listener in list(self._listeners):
            try:
                listener(response)
            except Exception as e:
                self._logger.warning(f"Error in response listener: {e}")

    async def responses(self) -> AsyncIterator[Response[P]]:
        """Yield the current response, then every following one."""
        queue: asyncio.Queue[Response[P]] = asyncio.Queue()
        unsubscribe = self.subscribe(queue.put_nowait)
        try:
            yield self.response
            while True:
                yield await queue.get()
        finally:
            unsubscribe()

    def start(self) -> HookResult:
        """Mount the adapter; automatic execution, if any, begins here."""
        self._started = True
        return self.result

    async def close(self) -> None:
        """Tear the adapter down; nothing is delivered to listeners afterwards."""
        self._closed = True
        self._listeners.clear()

    async def __aenter__(self) -> "BaseAdapter[T, P, E]":
        self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


Execute = Callable[..., None]


class SourceAdapter(BaseAdapter[T, P, Execute]):
    """
    Adapter backed by an OperationSource: executes automatically unless paused.

    ``execute(context=None, **overrides)`` re-runs the operation with the
    overrides merged onto the hook-level context, even while paused.
    """

    kind: OperationType

    def __init__(
        self,
        request: OperationRequest[T],
        *,
        pause: bool = False,
        context: Optional[OperationContext] = None,
        client: Optional[Client] = None,
    ) -> None:
        super().__init__(request, context=context, client=client)
        self._pause = pause
        self._source = OperationSource(
            self._client,
            self.kind,
            request,
            self._context,
            reducer_factory=self._reducer_factory(),
        )
        self._source.listen(self._on_state)

    def _reducer_factory(self) -> Optional[ReducerFactory]:
        return None

    @property
    def pause(self) -> bool:
        return self._pause

    @property
    def state(self) -> RawOperationState:
        return self._source.state

    def _primitive(self) -> Callable[..., Any]:
        return self._source.reexecute

    def _make_execute(self) -> Execute:
        reexecute = self._source.reexecute

        def execute(context: Optional[OperationContext] = None, **overrides: Any) -> None:
            reexecute(make_context(context, **overrides))

        return execute

    def start(self) -> HookResult:
        if self._closed:
            raise ClientError(f"{self.__class__.__name__} is closed")
        if not self._started:
            self._started = True
            if not self._pause:
                self._source.reexecute()
        return self.result

    def update(
        self,
        request: Optional[OperationRequest[T]] = None,
        *,
        context: Optional[OperationContext] = None,
        pause: Optional[bool] = None,
    ) -> HookResult:
        """
        Re-render with new inputs.

        Arguments left as None keep their current value. A changed request key,
        context or pause flag tears the running operation down and, unless
        paused, starts it again.
        """
        changed = self._source.update(request=request, context=context)
        if request is not None:
            self._request = request
        if context is not None:
            self._context = context

        if pause is not None and pause != self._pause:
            self._pause = pause
            if pause:
                self._source.stop()
            else:
                changed = True

        if changed and self._started and not self._pause:
            self._source.reexecute()
        return self.result

    async def wait(self) -> Response[P]:
        """Wait for the running stream to end and return the final response."""
        await self._source.wait()
        return self.response

    async def close(self) -> None:
        self._source.close()
        await super().close()
