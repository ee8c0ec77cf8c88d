"""Shared fixtures: a recording fake endpoint behind httpx.MockTransport."""

import json

import httpx
import pytest

from gqlclient.core.client import Client, with_http_client


class Recorder:
    """Fake GraphQL endpoint that records every request it receives."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: bytes = b'{"data": {}}'
        self.headers: dict[str, str] = {"Content-Type": "application/json"}
        self.stream: httpx.SyncByteStream | None = None
        self.error: Exception | None = None

    def respond(self, status_code: int = 200, body=None, content: bytes | None = None, headers=None):
        self.status_code = status_code
        if content is not None:
            self.body = content
        elif body is not None:
            self.body = json.dumps(body).encode()
        if headers:
            self.headers.update(headers)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.stream is not None:
            return httpx.Response(self.status_code, headers=self.headers, stream=self.stream)
        return httpx.Response(self.status_code, headers=self.headers, content=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def http_client(recorder):
    client = httpx.Client(transport=httpx.MockTransport(recorder))
    yield client
    client.close()


@pytest.fixture
def make_client(http_client):
    """Build a Client wired to the recorder."""
    def factory(*options, **kwargs):
        return Client("http://graphql.test/query", with_http_client(http_client), *options, **kwargs)
    return factory
