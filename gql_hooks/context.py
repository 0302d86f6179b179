"""
Merging of operation contexts.

Hook-level defaults are combined with per-call overrides by building a new
context; neither input is ever modified.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from .models import OperationContext

CONTEXT_FIELDS: Tuple[str, ...] = tuple(OperationContext.model_fields)


def present_fields(context: OperationContext) -> Dict[str, Any]:
    """Return the fields a context actually carries (set and not None)."""
    return {
        name: getattr(context, name)
        for name in CONTEXT_FIELDS
        if name in context.model_fields_set and getattr(context, name) is not None
    }


def merge_context(
    base: Optional[OperationContext], override: Optional[OperationContext] = None
) -> OperationContext:
    """
    Merge ``override`` onto ``base``.

    A field present in ``override`` replaces the one in ``base``; absent fields
    fall through. When there is nothing to override, ``base`` itself is
    returned.

    Args:
        base: Hook-level default context
        override: Call-site context

    Returns:
        The merged context
    """
    if base is None:
        base = OperationContext()
    if override is None:
        return base

    updates = present_fields(override)
    if not updates:
        return base

    merged = {**present_fields(base), **updates}
    return OperationContext.model_construct(_fields_set=set(merged), **merged)


def make_context(context: Optional[OperationContext] = None, **overrides: Any) -> Optional[OperationContext]:
    """
    Build a call-site context from an optional context and keyword overrides.

    Keyword overrides win over ``context``. Returns None when neither carries
    anything.
    """
    if overrides:
        return merge_context(context, OperationContext(**overrides))
    return context
