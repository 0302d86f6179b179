"""
Tests for operation context merging.
"""

import pytest
from pydantic import ValidationError

from gql_hooks import (
    CacheOutcome,
    OperationContext,
    OperationDebugMeta,
    RequestPolicy,
    make_context,
    merge_context,
)
from gql_hooks.context import CONTEXT_FIELDS, present_fields


async def custom_fetch(method, url, **kwargs):
    return {"data": None}


@pytest.fixture
def full_context() -> OperationContext:
    return OperationContext(
        additional_typenames=["Todo"],
        fetch_options={"headers": {"X-Trace": "1"}},
        fetch=custom_fetch,
        request_policy=RequestPolicy.CACHE_FIRST,
        url="https://a.example.com/graphql",
        poll_interval=5,
        meta=OperationDebugMeta(source="TodoList", cache_outcome=CacheOutcome.MISS),
        suspense=False,
        prefer_get_method=True,
    )


class TestOperationContext:
    """Test the context model."""

    def test_nine_fields(self):
        """Test the recognized options."""
        assert set(CONTEXT_FIELDS) == {
            "additional_typenames",
            "fetch_options",
            "fetch",
            "request_policy",
            "url",
            "poll_interval",
            "meta",
            "suspense",
            "prefer_get_method",
        }

    def test_frozen(self):
        """Test contexts cannot be modified in place."""
        context = OperationContext(url="a")
        with pytest.raises(ValidationError):
            context.url = "b"

    def test_rejects_unknown_fields(self):
        """Test unknown options are rejected."""
        with pytest.raises(ValidationError):
            OperationContext(pollInterval=5)

    def test_rejects_negative_poll_interval(self):
        """Test poll interval validation."""
        with pytest.raises(ValidationError):
            OperationContext(poll_interval=-1)

    def test_present_fields(self):
        """Test only set, non-None fields count as present."""
        context = OperationContext(url="a", poll_interval=None, suspense=False)

        assert present_fields(context) == {"url": "a", "suspense": False}


class TestMergeContext:
    """Test right-biased context merge."""

    def test_override_wins_absent_falls_through(self):
        """Test the url/poll interval example."""
        merged = merge_context(
            OperationContext(url="a", poll_interval=5), OperationContext(url="b")
        )

        assert merged.url == "b"
        assert merged.poll_interval == 5

    def test_empty_override_is_identity(self, full_context):
        """Test merging nothing returns the base unchanged."""
        assert merge_context(full_context, None) is full_context
        assert merge_context(full_context, OperationContext()) is full_context
        assert merge_context(full_context, OperationContext(url=None)) is full_context

    def test_every_field_overridable(self, full_context):
        """Test each of the nine options can be overridden."""

        async def other_fetch(method, url, **kwargs):
            return {"data": {}}

        override = OperationContext(
            additional_typenames=["User"],
            fetch_options={"timeout": 3},
            fetch=other_fetch,
            request_policy=RequestPolicy.NETWORK_ONLY,
            url="https://b.example.com/graphql",
            poll_interval=1000,
            meta=OperationDebugMeta(source="Profile"),
            suspense=True,
            prefer_get_method=False,
        )

        merged = merge_context(full_context, override)

        for name in CONTEXT_FIELDS:
            assert getattr(merged, name) == getattr(override, name)

    def test_falsy_override_is_present(self, full_context):
        """Test False and 0 override the base value."""
        merged = merge_context(
            full_context, OperationContext(prefer_get_method=False, poll_interval=0)
        )

        assert merged.prefer_get_method is False
        assert merged.poll_interval == 0

    def test_inputs_not_mutated(self, full_context):
        """Test neither argument changes."""
        base_dump = full_context.model_dump()
        override = OperationContext(url="b", fetch_options={"headers": {}})
        override_dump = override.model_dump()

        merge_context(full_context, override)

        assert full_context.model_dump() == base_dump
        assert override.model_dump() == override_dump

    def test_merged_fields_set(self):
        """Test the merged context reports exactly the present fields."""
        merged = merge_context(OperationContext(url="a"), OperationContext(suspense=True))

        assert merged.model_fields_set == {"url", "suspense"}
        assert present_fields(merged) == {"url": "a", "suspense": True}

    def test_none_base(self):
        """Test a missing base behaves like an empty context."""
        merged = merge_context(None, OperationContext(url="b"))

        assert merged.url == "b"
        assert merged.poll_interval is None

    def test_associative_layering(self):
        """Test client, hook and call-site layers compose."""
        client_defaults = OperationContext(url="a", request_policy=RequestPolicy.CACHE_FIRST)
        hook = OperationContext(poll_interval=5)
        call = OperationContext(request_policy=RequestPolicy.NETWORK_ONLY)

        merged = merge_context(client_defaults, merge_context(hook, call))

        assert merged.url == "a"
        assert merged.poll_interval == 5
        assert merged.request_policy is RequestPolicy.NETWORK_ONLY


class TestMakeContext:
    """Test call-site context construction."""

    def test_nothing(self):
        """Test no arguments give no context."""
        assert make_context() is None

    def test_context_only(self):
        """Test a context passes through unchanged."""
        context = OperationContext(url="a")

        assert make_context(context) is context

    def test_keyword_overrides_win(self):
        """Test keyword overrides beat the context argument."""
        context = make_context(OperationContext(url="a", poll_interval=5), url="b")

        assert context.url == "b"
        assert context.poll_interval == 5

    def test_invalid_keyword(self):
        """Test unknown keyword overrides are rejected."""
        with pytest.raises(ValidationError):
            make_context(poll="fast")
