"""
Operation adapters.

``use_query``, ``use_mutation`` and ``use_subscription`` build adapters that
expose the current ``Response`` of an operation and a memoized execute
function. Adapters start on ``start()`` or ``async with`` and stop on
``close()``.
"""

from .base import BaseAdapter, HookResult, SourceAdapter
from .memo import Memo
from .mutation import MutationAdapter, use_mutation
from .query import QueryAdapter, use_query
from .source import OperationSource
from .subscription import SubscriptionAdapter, use_subscription

__all__ = [
    "BaseAdapter",
    "SourceAdapter",
    "HookResult",
    "Memo",
    "OperationSource",
    "QueryAdapter",
    "MutationAdapter",
    "SubscriptionAdapter",
    "use_query",
    "use_mutation",
    "use_subscription",
]
