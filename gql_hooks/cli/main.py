"""
Command-line interface for gql_hooks.

Runs a single query or mutation through the adapters and prints each
response as JSON.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click

from .. import __version__
from ..client import FetchClient
from ..config import ClientConfig, ConfigLoader, LogLevel
from ..exceptions import ConfigurationError
from ..hooks import use_mutation, use_query
from ..logging import setup_logging
from ..models import OperationContext, OperationRequest
from ..response import Error, Fetching
from .output import format_response


def parse_pairs(pairs: Tuple[str, ...], option: str, as_json: bool = False) -> Dict[str, Any]:
    """Parse ``key=value`` pairs; with ``as_json`` values are decoded as JSON when possible."""
    result: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint=option)
        if as_json:
            try:
                result[key] = json.loads(value)
            except ValueError:
                result[key] = value
        else:
            result[key] = value
    return result


def read_document(document: str) -> str:
    """Return the GraphQL document, reading it from a file when given as ``@path``."""
    if document.startswith("@"):
        return Path(document[1:]).read_text(encoding="utf-8")
    return document


def build_config(ctx: click.Context, url: Optional[str], headers: Tuple[str, ...]) -> ClientConfig:
    overrides: Dict[str, Any] = {"url": url}
    if headers:
        overrides["headers"] = parse_pairs(headers, "--header")
    try:
        config = ConfigLoader().load_config(ctx.obj.get("config_file"), **overrides)
    except ConfigurationError as e:
        raise click.UsageError(e.message) from e

    logging_config = config.logging
    if ctx.obj.get("verbose"):
        logging_config = logging_config.model_copy(update={"level": LogLevel.DEBUG})
    setup_logging(logging_config)
    return config


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Configuration file path")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """Run GraphQL operations and print their responses."""
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config
    ctx.obj["verbose"] = verbose


@cli.command("query")
@click.argument("document")
@click.option("--url", "-u", help="GraphQL endpoint URL")
@click.option("--var", "variables", multiple=True, help="Variable as key=value (JSON values allowed)")
@click.option("--header", "-H", "headers", multiple=True, help="Request header as key=value")
@click.option("--get", "prefer_get", is_flag=True, help="Send the query with HTTP GET")
@click.option("--poll-interval", type=click.IntRange(min=1), help="Re-fetch every N milliseconds")
@click.option("--count", "-n", type=click.IntRange(min=1), default=1, help="Distinct responses to print when polling")
@click.pass_context
def query_command(
    ctx: click.Context,
    document: str,
    url: Optional[str],
    variables: Tuple[str, ...],
    headers: Tuple[str, ...],
    prefer_get: bool,
    poll_interval: Optional[int],
    count: int,
) -> None:
    """Execute a query. DOCUMENT is the query text or @path to a file."""
    config = build_config(ctx, url, headers)
    request = OperationRequest(read_document(document), parse_pairs(variables, "--var", as_json=True))
    context = OperationContext(
        prefer_get_method=prefer_get or None,
        poll_interval=poll_interval,
    )

    async def run() -> bool:
        failed = False
        async with FetchClient.from_config(config) as client:
            async with use_query(request, context=context, client=client) as query:
                if not poll_interval:
                    response = await query.wait()
                    click.echo(format_response(response))
                    return isinstance(response, Error)

                printed = 0
                last = None
                async for response in query.responses():
                    if isinstance(response, Fetching) or response == last:
                        continue
                    last = response
                    click.echo(format_response(response))
                    failed = failed or isinstance(response, Error)
                    printed += 1
                    if printed >= count:
                        break
        return failed

    if asyncio.run(run()):
        sys.exit(1)


@cli.command("mutate")
@click.argument("document")
@click.option("--url", "-u", help="GraphQL endpoint URL")
@click.option("--var", "variables", multiple=True, help="Variable as key=value (JSON values allowed)")
@click.option("--header", "-H", "headers", multiple=True, help="Request header as key=value")
@click.pass_context
def mutate_command(
    ctx: click.Context,
    document: str,
    url: Optional[str],
    variables: Tuple[str, ...],
    headers: Tuple[str, ...],
) -> None:
    """Execute a mutation. DOCUMENT is the mutation text or @path to a file."""
    config = build_config(ctx, url, headers)
    request = OperationRequest(read_document(document), parse_pairs(variables, "--var", as_json=True))

    async def run() -> bool:
        async with FetchClient.from_config(config) as client:
            async with use_mutation(request, client=client) as mutation:
                await mutation.execute()
                response = mutation.response
                click.echo(format_response(response))
                return isinstance(response, Error)

    if asyncio.run(run()):
        sys.exit(1)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
