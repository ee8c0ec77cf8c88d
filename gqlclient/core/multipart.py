"""multipart/form-data writer for GraphQL requests with file uploads.

Parts are collected in order and encoded by urllib3 when the writer is
closed:

    writer = MultipartWriter()
    writer.write_field("query", query)
    writer.write_file("avatar", "avatar.png", data)
    writer.close()
    headers = {"Content-Type": writer.content_type}
    body = writer.body
"""

from urllib3 import encode_multipart_formdata
from urllib3.fields import RequestField

FILE_CONTENT_TYPE = "application/octet-stream"


class MultipartWriter:
    """Accumulates form fields and file parts into one encoded body."""

    def __init__(self, boundary: str | None = None):
        self._boundary = boundary
        self._fields: list[RequestField] = []
        self._body: bytes | None = None
        self._content_type: str | None = None

    def _check_open(self):
        if self._body is not None:
            raise ValueError("multipart writer is closed")

    def write_field(self, name: str, value: str | bytes):
        """Add a plain form field."""
        self._check_open()
        field = RequestField(name=name, data=value)
        field.make_multipart()
        self._fields.append(field)

    def write_file(self, field: str, filename: str, data: bytes):
        """Add a file part with the given form field name and file name."""
        self._check_open()
        part = RequestField(name=field, data=data, filename=filename)
        part.make_multipart(content_type=FILE_CONTENT_TYPE)
        self._fields.append(part)

    def close(self):
        """Encode all parts and write the closing boundary."""
        self._check_open()
        self._body, self._content_type = encode_multipart_formdata(
            self._fields, boundary=self._boundary
        )

    @property
    def content_type(self) -> str:
        """``multipart/form-data; boundary=...`` for the encoded body."""
        if self._content_type is None:
            raise ValueError("multipart writer is not closed")
        return self._content_type

    @property
    def body(self) -> bytes:
        if self._body is None:
            raise ValueError("multipart writer is not closed")
        return self._body

    def __len__(self) -> int:
        return len(self._fields)
