"""Query adapter."""

from __future__ import annotations

from typing import Optional, TypeVar

from ..client.base import Client
from ..models import OperationContext, OperationRequest, OperationType, RawOperationState
from ..response import Response, project_state
from .base import SourceAdapter

T = TypeVar("T")


class QueryAdapter(SourceAdapter[T, T]):
    """
    Run a query and keep its response current.

    The query executes when the adapter starts unless ``pause`` is set. While
    a refetch is in flight, previously received data stays visible.

    Examples:
        ```python
        request = OperationRequest(USER_QUERY, {"id": "1"}, parse=User.model_validate)

        async with use_query(request, client=client) as query:
            response = await query.wait()
            match response:
                case Data(data=user):
                    print(user.name)
                case Error(error=error):
                    print(error.message)

            query.execute(request_policy=RequestPolicy.NETWORK_ONLY)
        ```
    """

    kind = OperationType.QUERY

    def _project(self, state: RawOperationState) -> Response[T]:
        return project_state(state, self._request.parse)


def use_query(
    request: OperationRequest[T],
    *,
    pause: bool = False,
    context: Optional[OperationContext] = None,
    client: Optional[Client] = None,
) -> QueryAdapter[T]:
    """Create a query adapter; it starts executing once started or entered."""
    return QueryAdapter(request, pause=pause, context=context, client=client)
