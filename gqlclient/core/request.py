"""GraphQL request value objects.

Example:
    req = Request('''
        query ($key: String!) {
            items (id: $key) { field1 field2 }
        }
    ''').with_vars({"key": "value"})

    req.header.add("X-Request-Id", "abc123")

    # files need a client created with use_multipart_form()
    with open("avatar.png", "rb") as fh:
        req.add_file("avatar", "avatar.png", fh)
"""

from typing import IO, Any, Iterator

from .errors import FileConsumedError


def canonical_header_key(key: str) -> str:
    """Canonicalize a header name: ``x-request-id`` -> ``X-Request-Id``."""
    return "-".join(part.capitalize() for part in key.strip().split("-"))


class Header(dict):
    """Multi-valued HTTP header mapping.

    Keys are canonicalized on every write, values are lists of strings.
    """

    def add(self, key: str, value: str):
        """Append a value to the key, keeping existing values."""
        self.setdefault(canonical_header_key(key), []).append(value)

    def set(self, key: str, value: str):
        """Replace all values of the key with a single value."""
        self[canonical_header_key(key)] = [value]

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the first value of the key."""
        values = super().get(canonical_header_key(key))
        return values[0] if values else default

    def values_for(self, key: str) -> list[str]:
        return list(super().get(canonical_header_key(key), []))

    def delete(self, key: str):
        self.pop(canonical_header_key(key), None)

    def items_multi(self) -> Iterator[tuple[str, str]]:
        """Yield one (key, value) pair per value."""
        for key, values in self.items():
            for value in values:
                yield key, value

    def copy(self) -> "Header":
        clone = Header()
        for key, values in self.items():
            clone[key] = list(values)
        return clone


class File:
    """A file to upload.

    ``content`` is read exactly once, by the first execution that sends it.
    Sending the same File again raises FileConsumedError rather than
    uploading an empty part.
    """

    def __init__(self, field: str, name: str, content: IO[bytes] | bytes | str):
        self.field = field
        self.name = name
        self.content = content
        self.consumed = False

    def read(self) -> bytes:
        """Drain the content stream and mark the file as consumed."""
        if self.consumed:
            raise FileConsumedError(f"file {self.name!r} for field {self.field!r} was already sent")
        self.consumed = True
        content = self.content
        if hasattr(content, "read"):
            content = content.read()
        if isinstance(content, str):
            content = content.encode("utf-8")
        return content

    def __repr__(self) -> str:
        return f"File(field={self.field!r}, name={self.name!r}, consumed={self.consumed})"


class Request:
    """A GraphQL request.

    Attributes:
        header: Headers sent with the request, on top of the client's own.
    """

    def __init__(self, query: str):
        self._query = query
        self._variables: dict[str, Any] | None = None
        self._files: list[File] = []
        self.header = Header()

    @property
    def query(self) -> str:
        return self._query

    @property
    def variables(self) -> dict[str, Any] | None:
        return self._variables

    @property
    def files(self) -> list[File]:
        return self._files

    def with_vars(self, variables: dict[str, Any] | None) -> "Request":
        """Replace the request variables.

        The mapping replaces any earlier one, nothing is merged.

        Example:
            req = Request(query).with_vars({"username": "lelebus"})
        """
        self._variables = variables
        return self

    def add_file(self, field: str, name: str, content: IO[bytes] | bytes | str):
        """Attach a file under the given form field.

        Files are only supported by clients created with use_multipart_form().
        """
        self._files.append(File(field, name, content))
