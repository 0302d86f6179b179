"""Command-line interface for gql_hooks."""

from .main import cli, main

__all__ = ["cli", "main"]
