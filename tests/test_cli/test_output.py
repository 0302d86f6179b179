"""
Tests for response rendering.
"""

import json

import pytest

from gql_hooks import CombinedError, Data, Empty, Error, Fetching, PartialData
from gql_hooks.cli.output import format_response, response_to_dict
from gql_hooks.exceptions import GraphQLError


class TestResponseToDict:
    """Test conversion of each response variant."""

    def test_fetching(self):
        assert response_to_dict(Fetching()) == {"status": "fetching"}

    def test_empty(self):
        assert response_to_dict(Empty()) == {"status": "empty"}

    def test_data(self):
        assert response_to_dict(Data({"a": 1})) == {"status": "data", "data": {"a": 1}}

    def test_partial(self):
        output = response_to_dict(PartialData({"a": 1}, [GraphQLError("b failed", path=["b"])]))

        assert output["status"] == "partial"
        assert output["errors"][0]["path"] == ["b"]

    def test_network_error(self):
        output = response_to_dict(Error(CombinedError(network_error=TimeoutError("slow"))))

        assert output == {"status": "error", "message": "[Network] slow", "network_error": "slow"}

    def test_not_a_response(self):
        with pytest.raises(TypeError):
            response_to_dict({"status": "data"})


def test_format_response_is_json():
    """Test non-JSON payloads are rendered as strings."""
    class Login:
        def __str__(self):
            return "ada"

    assert json.loads(format_response(Data({"login": Login()}))) == {
        "status": "data",
        "data": {"login": "ada"},
    }
