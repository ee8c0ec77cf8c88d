"""Core modules of the GraphQL client."""

from .auth import (
    ApiKeyAuth,
    Auth,
    BasicAuth,
    BearerAuth,
    HeaderAuth,
    NoAuth,
)
from .client import (
    Client,
    ClientConfig,
    ClientOption,
    default_http_client,
    immediately_close_req_body,
    log_to,
    new_http_client,
    use_multipart_form,
    with_auth,
    with_http_client,
    with_log,
)
from .context import Context
from .errors import (
    CancellationError,
    ConfigurationError,
    ContextCancelled,
    DeadlineExceeded,
    DecodingError,
    EncodingError,
    FileConsumedError,
    GQLClientError,
    GraphQLError,
    ResponseReadError,
    StatusCodeError,
    TransportError,
)
from .multipart import MultipartWriter
from .request import File, Header, Request
from .response import DISCARD, GraphErr, GraphResponse, Result

__all__ = [
    # Auth
    "Auth",
    "ApiKeyAuth",
    "BearerAuth",
    "BasicAuth",
    "HeaderAuth",
    "NoAuth",
    # Client
    "Client",
    "ClientConfig",
    "ClientOption",
    "default_http_client",
    "immediately_close_req_body",
    "log_to",
    "new_http_client",
    "use_multipart_form",
    "with_auth",
    "with_http_client",
    "with_log",
    # Context
    "Context",
    # Errors
    "GQLClientError",
    "CancellationError",
    "ContextCancelled",
    "DeadlineExceeded",
    "ConfigurationError",
    "EncodingError",
    "FileConsumedError",
    "TransportError",
    "ResponseReadError",
    "StatusCodeError",
    "DecodingError",
    "GraphQLError",
    # Request / response
    "Request",
    "File",
    "Header",
    "MultipartWriter",
    "Result",
    "GraphErr",
    "GraphResponse",
    "DISCARD",
]
