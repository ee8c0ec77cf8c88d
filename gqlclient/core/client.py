"""Low level GraphQL client.

Sends a GraphQL document over HTTP, as a JSON body or as
multipart/form-data when files are attached, and decodes the response
envelope.

Examples:
    # create a client (safe to share across threads)
    client = Client("http://localhost:4000/graphql")

    # with your own httpx.Client
    client = Client(url, with_http_client(httpx.Client(timeout=10)))

    # file uploads
    client = Client(url, use_multipart_form())

    req = Request("query ($key: String!) { items(id: $key) { field1 } }")
    req.with_vars({"key": "value"})

    result = Result(dict)
    response = client.execute(req, result)
    print(result.data, response.cookies)
"""

import http.cookiejar
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from .auth import Auth
from .context import Context
from .errors import (
    ConfigurationError,
    DecodingError,
    EncodingError,
    GraphQLError,
    ResponseReadError,
    StatusCodeError,
    TransportError,
)
from .multipart import MultipartWriter
from .request import Header, Request
from .response import Result, decode_envelope

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def new_http_client(**kwargs: Any) -> httpx.Client:
    """Build an httpx.Client that stores no cookies and has no timeout.

    Cookies stay on each returned response; deadlines come from the call's
    Context. Keyword arguments are passed to httpx.Client.
    """
    jar = http.cookiejar.CookieJar(policy=http.cookiejar.DefaultCookiePolicy(allowed_domains=[]))
    kwargs.setdefault("timeout", None)
    return httpx.Client(cookies=jar, **kwargs)


@lru_cache(maxsize=None)
def default_http_client() -> httpx.Client:
    """Return the process-wide HTTP client used when none is supplied."""
    return new_http_client()


def _discard_log(_message: str) -> None:
    pass


def log_to(target: logging.Logger | None = None, level: int = logging.DEBUG) -> Callable[[str], None]:
    """Build a diagnostic sink that forwards messages to a logger.

    Example:
        client = Client(url, with_log(log_to(logging.getLogger("graphql"))))
    """
    target = target or logger

    def sink(message: str) -> None:
        target.log(level, message)

    return sink


@dataclass
class ClientConfig:
    """Settings collected from client options.

    Attributes:
        http_client: Executor for the HTTP exchange (default: shared client)
        use_multipart_form: Send multipart/form-data instead of JSON
        close_req: Ask for the connection to be closed after each call
        log: Diagnostic sink called with one formatted message per step
        auth: Authentication handler applied to every call
    """

    http_client: httpx.Client | None = None
    use_multipart_form: bool = False
    close_req: bool = False
    log: Callable[[str], None] = field(default=_discard_log)
    auth: Auth | None = None


ClientOption = Callable[[ClientConfig], None]


def with_http_client(http_client: httpx.Client) -> ClientOption:
    """Use a specific httpx.Client for requests.

        Client(endpoint, with_http_client(httpx.Client(verify=False)))
    """
    def option(config: ClientConfig):
        config.http_client = http_client
    return option


def use_multipart_form() -> ClientOption:
    """Send multipart/form-data, which enables file uploads."""
    def option(config: ClientConfig):
        config.use_multipart_form = True
    return option


def immediately_close_req_body() -> ClientOption:
    """Send ``Connection: close`` so no connection is kept for reuse."""
    def option(config: ClientConfig):
        config.close_req = True
    return option


def with_log(log: Callable[[str], None]) -> ClientOption:
    """Install a diagnostic sink, e.g. ``print`` or ``log_to(logger)``."""
    def option(config: ClientConfig):
        config.log = log
    return option


def with_auth(auth: Auth) -> ClientOption:
    """Apply an auth handler's headers to every call."""
    def option(config: ClientConfig):
        config.auth = auth
    return option


def _jsonable(value: Any) -> Any:
    """Convert pydantic models anywhere in a value into plain dicts."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, dict):
        return {key: _jsonable(v) for key, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


_json_adapter = TypeAdapter(Any)


def _encode_json(value: Any) -> bytes:
    return _json_adapter.dump_json(value, by_alias=True)


class Client:
    """Client for a GraphQL endpoint.

    A Client keeps no per-call state and can be shared between threads.

    Attributes:
        endpoint: GraphQL endpoint URL
        log: Diagnostic sink, called with debug information at each step
    """

    def __init__(self, endpoint: str, *options: ClientOption, log: Callable[[str], None] | None = None):
        config = ClientConfig()
        for option in options:
            option(config)
        if log is not None:
            config.log = log

        self.endpoint = endpoint
        self.log = config.log
        self._use_multipart_form = config.use_multipart_form
        self._close_req = config.close_req
        self._auth = config.auth
        self._http_client = config.http_client or default_http_client()

    @property
    def http_client(self) -> httpx.Client:
        """The underlying httpx.Client."""
        return self._http_client

    @property
    def use_multipart_form(self) -> bool:
        return self._use_multipart_form

    def _logf(self, fmt: str, *args: Any):
        self.log(fmt % args)

    def execute(
        self,
        request: Request,
        result: Result | None = None,
        *,
        context: Context | None = None,
    ) -> httpx.Response:
        """Execute a request and decode the ``data`` field into ``result``.

        Args:
            request: The GraphQL request
            result: Destination for ``data``; None skips decoding it
            context: Cancellation context (default: never cancelled)

        Returns:
            The HTTP response (status, headers, cookies)

        Raises:
            GQLClientError: One of its subclasses. When the server returns
                several GraphQL errors, only the first is raised.
        """
        context = context or Context.background()
        err = context.err()
        if err is not None:
            raise err
        if request.files and not self._use_multipart_form:
            raise ConfigurationError("cannot send files without multipart mode")

        if self._use_multipart_form:
            body, content_type = self._encode_multipart(request)
        else:
            body, content_type = self._encode_json_body(request)

        headers = self._build_headers(request, content_type)
        self._logf(">> headers: %s", dict(headers))

        return self._send(context, body, headers, result)

    def _encode_json_body(self, request: Request) -> tuple[bytes, str]:
        variables = request.variables
        try:
            if variables is not None:
                variables = _jsonable(variables)
            body = _encode_json({"query": request.query, "variables": variables})
        except (TypeError, ValueError) as exc:
            raise EncodingError(f"encode body: {exc}") from exc

        self._logf(">> variables: %s", request.variables)
        self._logf(">> query: %s", request.query)
        return body, JSON_CONTENT_TYPE

    def _encode_multipart(self, request: Request) -> tuple[bytes, str]:
        writer = MultipartWriter()
        writer.write_field("query", request.query)

        variables_buf = b""
        if request.variables:
            try:
                variables_buf = _encode_json(_jsonable(request.variables))
            except (TypeError, ValueError) as exc:
                raise EncodingError(f"encode variables: {exc}") from exc
            writer.write_field("variables", variables_buf)

        for file in request.files:
            try:
                data = file.read()
            except (OSError, TypeError, ValueError) as exc:
                raise EncodingError(f"preparing file: {exc}") from exc
            writer.write_file(file.field, file.name, data)

        try:
            writer.close()
        except (TypeError, ValueError) as exc:
            raise EncodingError(f"close writer: {exc}") from exc

        self._logf(">> variables: %s", variables_buf.decode("utf-8"))
        self._logf(">> files: %d", len(request.files))
        self._logf(">> query: %s", request.query)
        return writer.body, writer.content_type

    def _build_headers(self, request: Request, content_type: str) -> Header:
        headers = Header()
        headers.set("Content-Type", content_type)
        headers.set("Accept", JSON_CONTENT_TYPE)
        for key, value in request.header.items_multi():
            headers.add(key, value)
        if self._auth is not None:
            self._auth.apply(headers)
        if self._close_req:
            headers.set("Connection", "close")
        return headers

    def _send(
        self,
        context: Context,
        body: bytes,
        headers: Header,
        result: Result | None,
    ) -> httpx.Response:
        remaining = context.remaining()
        try:
            http_request = self._http_client.build_request(
                "POST",
                self.endpoint,
                content=body,
                headers=list(headers.items_multi()),
                timeout=remaining if remaining is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.InvalidURL as exc:
            raise ConfigurationError(f"invalid endpoint {self.endpoint!r}: {exc}") from exc

        try:
            response = self._http_client.send(http_request, stream=True)
        except httpx.TransportError as exc:
            err = context.err()
            if err is not None:
                raise err from exc
            logger.debug("POST %s failed: %r", self.endpoint, exc)
            raise TransportError(str(exc) or type(exc).__name__) from exc

        try:
            raw = response.read()
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise ResponseReadError(f"reading body: {exc}", response) from exc
        finally:
            response.close()

        self._logf("<< %s", raw.decode("utf-8", errors="replace"))

        try:
            errors = decode_envelope(raw, result)
        except ValidationError as exc:
            logger.debug("undecodable response from %s (status %d)", self.endpoint, response.status_code)
            if response.status_code != httpx.codes.OK:
                raise StatusCodeError(response.status_code, response) from exc
            raise DecodingError(f"decoding response: {exc}", response) from exc

        if errors:
            first = errors[0]
            raise GraphQLError(first.message, first, response)
        return response
