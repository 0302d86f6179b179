"""Rendering of responses for the command line."""

import json
from dataclasses import asdict
from typing import Any, Dict

from ..response import Data, Empty, Error, Fetching, PartialData, Response


def response_to_dict(response: Response[Any]) -> Dict[str, Any]:
    """Convert a response variant to a JSON-friendly dictionary."""
    if isinstance(response, Fetching):
        return {"status": "fetching"}
    if isinstance(response, Data):
        return {"status": "data", "data": response.data}
    if isinstance(response, PartialData):
        return {
            "status": "partial",
            "data": response.data,
            "errors": [asdict(error) for error in response.errors],
        }
    if isinstance(response, Error):
        error = response.error
        output: Dict[str, Any] = {"status": "error", "message": error.message}
        if error.graphql_errors:
            output["errors"] = [asdict(e) for e in error.graphql_errors]
        if error.network_error is not None:
            output["network_error"] = str(error.network_error)
        return output
    if isinstance(response, Empty):
        return {"status": "empty"}
    raise TypeError(f"Not a response: {response!r}")


def format_response(response: Response[Any], indent: int = 2) -> str:
    return json.dumps(response_to_dict(response), indent=indent, default=str, ensure_ascii=False)
