"""Authentication handlers for the GraphQL client.

An auth handler writes its headers into the outgoing header set of every
call made by a client created with ``with_auth``:

    client = Client(url, with_auth(BearerAuth(token)))

Handlers add values rather than replace them, the same way request headers
are applied.
"""

import base64
from typing import Protocol, runtime_checkable

from .request import Header


@runtime_checkable
class Auth(Protocol):
    """Protocol for authentication handlers.

    Example:
        class TenantAuth:
            def __init__(self, token: str, tenant: str):
                self.token = token
                self.tenant = tenant

            def apply(self, header: Header) -> None:
                header.add("Authorization", f"Bearer {self.token}")
                header.add("X-Tenant-Id", self.tenant)
    """

    def apply(self, header: Header) -> None:
        """Add authentication headers to an outgoing header set."""
        ...


class ApiKeyAuth:
    """API key sent in a custom header (default ``x-api-key``)."""

    def __init__(self, api_key: str, header_name: str = "x-api-key"):
        self.api_key = api_key
        self.header_name = header_name

    def apply(self, header: Header) -> None:
        header.add(self.header_name, self.api_key)


class BearerAuth:
    """``Authorization: Bearer <token>``."""

    def __init__(self, token: str):
        self.token = token

    def apply(self, header: Header) -> None:
        header.add("Authorization", f"Bearer {self.token}")


class BasicAuth:
    """HTTP Basic authentication."""

    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password

    def apply(self, header: Header) -> None:
        credentials = f"{self.username}:{self.password}"
        encoded = base64.b64encode(credentials.encode()).decode()
        header.add("Authorization", f"Basic {encoded}")


class HeaderAuth:
    """Fixed set of headers, e.g. a key plus a tenant id."""

    def __init__(self, headers: dict[str, str]):
        self._headers = dict(headers)

    def apply(self, header: Header) -> None:
        for key, value in self._headers.items():
            header.add(key, value)


class NoAuth:
    """No authentication (public APIs, tests)."""

    def apply(self, header: Header) -> None:
        return None
