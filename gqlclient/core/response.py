"""Response envelope models and result containers.

A GraphQL server answers with ``{"data": ..., "errors": [...]}``. The
envelope is decoded with pydantic, with ``data`` validated against the
shape the caller asked for:

    result = Result(dict)           # plain JSON object
    result = Result(UserQuery)      # a pydantic model
    client.execute(req, result)
    print(result.data)
"""

from functools import lru_cache
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

T = TypeVar("T")


class GraphErr(BaseModel):
    """A single entry of the ``errors`` list."""

    model_config = ConfigDict(extra="allow")

    message: str = ""

    @field_validator("message", mode="before")
    @classmethod
    def _null_message(cls, value):
        return "" if value is None else value


class ErrorsOnly(BaseModel):
    """Envelope used when the caller discards ``data``."""

    model_config = ConfigDict(extra="ignore")

    errors: list[GraphErr] | None = None


class GraphResponse(BaseModel, Generic[T]):
    """Full response envelope with ``data`` validated as ``T``."""

    model_config = ConfigDict(extra="ignore")

    data: T | None = None
    errors: list[GraphErr] | None = None


class Result(Generic[T]):
    """Caller-owned destination for the decoded ``data`` field.

    Args:
        shape: Any type pydantic can validate (``dict``, a model, ``Any``)

    ``data`` stays None until a call decodes a response. It is filled in
    even when the server also returned errors.
    """

    def __init__(self, shape: Any = Any):
        self.shape = shape
        self.data: T | None = None

    def __repr__(self) -> str:
        return f"Result(shape={self.shape!r}, data={self.data!r})"


DISCARD = None


@lru_cache(maxsize=128)
def envelope_for(shape: Any) -> type[BaseModel]:
    """Return the envelope model for a result shape."""
    return GraphResponse[shape]


def decode_envelope(body: bytes, result: Result | None) -> list[GraphErr]:
    """Decode a response body, storing ``data`` into ``result``.

    Returns the decoded errors (possibly empty). Raises
    ``pydantic.ValidationError`` when the body is not a valid envelope.
    """
    if result is DISCARD:
        envelope = ErrorsOnly.model_validate_json(body)
        return envelope.errors or []

    envelope = envelope_for(result.shape).model_validate_json(body)
    result.data = envelope.data
    return envelope.errors or []
