"""Error types raised by the GraphQL client.

Every error carries the HTTP response when one was obtained, so callers can
still inspect status, headers and cookies after a failure:

    try:
        client.execute(req, result)
    except GraphQLError as e:
        session = e.response.cookies.get("session")
"""

from typing import Any

import httpx


class GQLClientError(Exception):
    """Base class for all client errors."""

    def __init__(self, message: str, response: httpx.Response | None = None):
        self.response = response
        super().__init__(message)


class CancellationError(GQLClientError):
    """The context was done before or during the call."""


class ContextCancelled(CancellationError):
    """The context was cancelled explicitly."""

    def __init__(self, message: str = "context canceled", response: httpx.Response | None = None):
        super().__init__(message, response)


class DeadlineExceeded(CancellationError):
    """The context deadline passed."""

    def __init__(self, message: str = "context deadline exceeded", response: httpx.Response | None = None):
        super().__init__(message, response)


class ConfigurationError(GQLClientError):
    """The request cannot be sent with this client's configuration."""


class EncodingError(GQLClientError):
    """The outgoing body could not be encoded."""


class FileConsumedError(EncodingError):
    """A file attachment's stream was already read by an earlier call."""


class TransportError(GQLClientError):
    """The HTTP executor failed (connection, DNS, TLS, timeout)."""


class ResponseReadError(GQLClientError):
    """The response body could not be read."""


class DecodingError(GQLClientError):
    """A 200 response body was not a valid GraphQL envelope."""


class StatusCodeError(GQLClientError):
    """A non-200 response body was not a valid GraphQL envelope."""

    def __init__(self, status_code: int, response: httpx.Response | None = None):
        self.status_code = status_code
        super().__init__(
            f"graphql: server returned a non-200 status code: {status_code}",
            response,
        )


class GraphQLError(GQLClientError):
    """The server answered with a non-empty ``errors`` list.

    Only the first error is kept. ``message`` is the server's message as-is,
    ``error`` holds the whole record (``locations``, ``path``, ``extensions``).
    """

    def __init__(self, message: str, error: Any = None, response: httpx.Response | None = None):
        self.message = message
        self.error = error
        super().__init__(f"graphql: {message}", response)
