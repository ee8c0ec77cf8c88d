"""Command-line interface for gqlclient."""

import json
import logging
from contextlib import ExitStack
from pathlib import Path

import click

from .core.auth import BearerAuth
from .core.client import (
    Client,
    immediately_close_req_body,
    log_to,
    use_multipart_form,
    with_auth,
    with_log,
)
from .core.context import Context
from .core.errors import GQLClientError, GraphQLError
from .core.request import Request
from .core.response import Result


def parse_var(value: str) -> tuple[str, object]:
    """Parse ``name=JSON``; values that are not JSON are kept as strings."""
    name, sep, raw = value.partition("=")
    if not sep or not name:
        raise click.BadParameter(f"expected name=value, got {value!r}")
    try:
        return name, json.loads(raw)
    except json.JSONDecodeError:
        return name, raw


def parse_header(value: str) -> tuple[str, str]:
    """Parse ``Name: value``."""
    name, sep, raw = value.partition(":")
    if not sep or not name.strip():
        raise click.BadParameter(f"expected 'Name: value', got {value!r}")
    return name.strip(), raw.strip()


def parse_file(value: str) -> tuple[str, Path]:
    """Parse ``field=path``."""
    field, sep, raw = value.partition("=")
    if not sep or not field:
        raise click.BadParameter(f"expected field=path, got {value!r}")
    path = Path(raw)
    if not path.is_file():
        raise click.BadParameter(f"file not found: {raw}")
    return field, path


@click.group()
@click.version_option(package_name="gqlclient")
def main():
    """Low level GraphQL client.

    Send queries and mutations to a GraphQL endpoint.
    """
    pass


@main.command()
@click.option(
    "--endpoint",
    "-e",
    required=True,
    envvar="GQLCLIENT_ENDPOINT",
    help="GraphQL endpoint URL (env: GQLCLIENT_ENDPOINT).",
)
@click.option("--query", "-q", help="Query or mutation text.")
@click.option(
    "--query-file",
    type=click.Path(exists=True, dir_okay=False),
    help="File containing the query or mutation.",
)
@click.option("--variables", help="Variables as a JSON object.")
@click.option("--var", "var_items", multiple=True, help="Single variable as name=JSON (repeatable).")
@click.option("--header", "-H", "headers", multiple=True, help="Extra header as 'Name: value' (repeatable).")
@click.option("--file", "-F", "files", multiple=True, help="File upload as field=path (repeatable, implies --multipart).")
@click.option("--multipart", is_flag=True, help="Send multipart/form-data instead of JSON.")
@click.option("--close", "close_req", is_flag=True, help="Send 'Connection: close' with the request.")
@click.option("--timeout", type=float, help="Give up after this many seconds.")
@click.option("--token", envvar="GQLCLIENT_TOKEN", help="Bearer token (env: GQLCLIENT_TOKEN).")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Print request and response diagnostics to stderr.",
)
def run(
    endpoint: str,
    query: str | None,
    query_file: str | None,
    variables: str | None,
    var_items: tuple[str, ...],
    headers: tuple[str, ...],
    files: tuple[str, ...],
    multipart: bool,
    close_req: bool,
    timeout: float | None,
    token: str | None,
    verbose: bool,
):
    """Execute a GraphQL operation and print the decoded data.

    Examples:

        gqlclient run -e http://localhost:4000/graphql -q '{ items { id } }'

        gqlclient run -e $URL --query-file op.graphql --var id=42

        gqlclient run -e $URL -q "$UPLOAD" --var file=null -F 0=./avatar.png
    """
    if (query is None) == (query_file is None):
        raise click.UsageError("Pass exactly one of --query or --query-file.")
    if query_file is not None:
        query = Path(query_file).read_text()

    merged: dict | None = None
    if variables is not None:
        try:
            merged = json.loads(variables)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"not valid JSON: {e}", param_hint="--variables")
        if not isinstance(merged, dict):
            raise click.BadParameter("must be a JSON object", param_hint="--variables")
    for item in var_items:
        name, value = parse_var(item)
        merged = merged if merged is not None else {}
        merged[name] = value

    options = []
    if multipart or files:
        options.append(use_multipart_form())
    if close_req:
        options.append(immediately_close_req_body())
    if token:
        options.append(with_auth(BearerAuth(token)))
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
        options.append(with_log(log_to(logging.getLogger("gqlclient"))))

    client = Client(endpoint, *options)
    req = Request(query).with_vars(merged)
    for item in headers:
        req.header.add(*parse_header(item))

    context = Context.background()
    if timeout is not None:
        context = context.with_timeout(timeout)

    result = Result(dict)
    with ExitStack() as stack:
        for item in files:
            field, path = parse_file(item)
            req.add_file(field, path.name, stack.enter_context(path.open("rb")))
        try:
            client.execute(req, result, context=context)
        except GraphQLError as e:
            if result.data is not None:
                click.echo(json.dumps(result.data, indent=2))
            raise click.ClickException(str(e))
        except GQLClientError as e:
            raise click.ClickException(str(e))

    click.echo(json.dumps(result.data, indent=2))


if __name__ == "__main__":
    main()
