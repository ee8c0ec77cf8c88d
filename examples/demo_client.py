#!/usr/bin/env python3
"""Demonstration of the low level GraphQL client.

This script shows how to:
1. Create a client and a request with variables
2. Decode the response into a pydantic model
3. Upload a file with a multipart client

Set GRAPHQL_URL to point it at a real server; without it the demo talks to
an in-process fake endpoint.
"""

import io
import json
import logging
import os

import httpx
from pydantic import BaseModel

from gqlclient.core import (
    Client,
    Context,
    GraphQLError,
    Request,
    Result,
    log_to,
    use_multipart_form,
    with_http_client,
    with_log,
)


class Item(BaseModel):
    id: str
    name: str


class ItemsQuery(BaseModel):
    items: list[Item]


def fake_server(request: httpx.Request) -> httpx.Response:
    if request.headers["Content-Type"].startswith("multipart/form-data"):
        return httpx.Response(200, json={"errors": [{"message": "uploads are disabled"}]})
    variables = json.loads(request.content)["variables"]
    return httpx.Response(200, json={"data": {"items": [{"id": variables["key"], "name": "first"}]}})


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    url = os.environ.get("GRAPHQL_URL", "http://localhost:4000/graphql")
    options = [with_log(log_to(logging.getLogger("demo")))]
    if "GRAPHQL_URL" not in os.environ:
        options.append(with_http_client(httpx.Client(transport=httpx.MockTransport(fake_server))))

    print("=== gqlclient demo ===\n")

    client = Client(url, *options)
    req = Request("""
        query ($key: String!) {
            items (id: $key) { id name }
        }
    """).with_vars({"key": "value"})
    req.header.add("X-Request-Id", "demo-1")

    result = Result(ItemsQuery)
    response = client.execute(req, result, context=Context.background().with_timeout(10))
    print(f"1. Status {response.status_code}: {result.data}")

    uploader = Client(url, use_multipart_form(), *options)
    upload = Request("mutation ($file: Upload!) { upload(file: $file) }").with_vars({"file": None})
    upload.add_file("0", "hello.txt", io.BytesIO(b"hello world"))
    try:
        uploader.execute(upload)
    except GraphQLError as e:
        print(f"2. Upload rejected: {e.message}")


if __name__ == "__main__":
    main()
