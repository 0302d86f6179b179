"""
Tests for operation models and errors.
"""

import pytest

from gql_hooks import (
    AccumulatorError,
    CombinedError,
    GraphQLError,
    Operation,
    OperationContext,
    OperationRequest,
    OperationResult,
    OperationType,
    RawOperationState,
)


class TestOperationRequest:
    """Test request descriptions."""

    def test_defaults(self):
        """Test the default parser is the identity."""
        request = OperationRequest("{ ok }")

        assert request.variables is None
        assert request.parse({"ok": True}) == {"ok": True}

    def test_key_stable(self):
        """Test equal requests share a key regardless of variable order."""
        first = OperationRequest("query ($a: Int, $b: Int) { f }", {"a": 1, "b": 2})
        second = OperationRequest("query ($a: Int, $b: Int) { f }", {"b": 2, "a": 1})

        assert first.key == second.key

    def test_key_changes(self):
        """Test query text, variables and operation name are part of the key."""
        base = OperationRequest("{ f }", {"a": 1})

        assert base.key != OperationRequest("{ g }", {"a": 1}).key
        assert base.key != OperationRequest("{ f }", {"a": 2}).key
        assert base.key != OperationRequest("{ f }", {"a": 1}, operation_name="F").key

    def test_parse_not_in_key(self):
        """Test the parser does not affect identity."""
        assert OperationRequest("{ f }", parse=str).key == OperationRequest("{ f }").key

    def test_no_variables_same_as_empty(self):
        """Test missing and empty variables are the same operation."""
        assert OperationRequest("{ f }").key == OperationRequest("{ f }", {}).key

    def test_to_dict(self):
        """Test the wire body."""
        assert OperationRequest("{ f }").to_dict() == {"query": "{ f }", "variables": {}}
        assert OperationRequest("query F { f }", operation_name="F").to_dict()["operationName"] == "F"

    def test_immutable(self):
        """Test requests cannot be modified."""
        request = OperationRequest("{ f }")

        with pytest.raises(AttributeError):
            request.query = "{ g }"


class TestOperationResult:
    """Test results built from payloads and failures."""

    @pytest.fixture
    def operation(self):
        return Operation(OperationType.QUERY, OperationRequest("{ f }"))

    def test_from_payload(self, operation):
        """Test a successful payload."""
        result = OperationResult.from_payload(
            operation, {"data": {"f": 1}, "extensions": {"cost": 3}}
        )

        assert result.data == {"f": 1}
        assert result.error is None
        assert result.extensions == {"cost": 3}

    def test_from_payload_with_errors(self, operation):
        """Test GraphQL errors are collected in order."""
        result = OperationResult.from_payload(
            operation, {"data": None, "errors": [{"message": "a"}, {"message": "b"}]}
        )

        assert [e.message for e in result.error.graphql_errors] == ["a", "b"]
        assert result.error.network_error is None

    def test_from_network_error(self, operation):
        """Test a transport failure."""
        exc = ConnectionError("reset")
        result = OperationResult.from_network_error(operation, exc)

        assert result.data is None
        assert result.error.network_error is exc

    def test_operation_key(self, operation):
        """Test operations are keyed by their request."""
        assert operation.key == operation.request.key
        assert operation.context == OperationContext()


class TestCombinedError:
    """Test the normalized error."""

    def test_message(self):
        """Test network and GraphQL parts are both rendered."""
        error = CombinedError(
            network_error=ConnectionError("reset"), graphql_errors=[{"message": "denied"}]
        )

        assert error.message == "[Network] reset\n[GraphQL] denied"
        assert str(error) == error.message
        assert error.is_network_error

    def test_malformed_graphql_errors(self):
        """Test strings and entries without a message are tolerated."""
        error = CombinedError(graphql_errors=["plain", {"path": ["x"]}])

        assert error.graphql_errors[0] == GraphQLError("plain")
        assert error.graphql_errors[1].message == "Unknown error"
        assert error.graphql_errors[1].path == ["x"]

    def test_graphql_error_instances_kept(self):
        """Test GraphQLError instances pass through."""
        original = GraphQLError("denied", extensions={"code": "FORBIDDEN"})

        assert CombinedError(graphql_errors=[original]).graphql_errors[0] is original

    def test_accumulator_error(self):
        """Test accumulator errors wrap the combine failure."""
        cause = KeyError("missing")
        error = AccumulatorError(cause)

        assert isinstance(error, CombinedError)
        assert error.original_error is cause
        assert error.message.startswith("[Accumulator]")
        assert error.graphql_errors == []
        assert not error.is_network_error


class TestRawOperationState:
    """Test live state values."""

    def test_evolve(self):
        """Test evolve returns a new value."""
        state = RawOperationState(fetching=True)
        settled = state.evolve(fetching=False, data={"f": 1})

        assert state.fetching is True
        assert settled.data == {"f": 1}
        assert settled is not state
