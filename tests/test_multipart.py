"""Tests for multipart-mode execution and the multipart writer."""

import io
import json

import httpx
import pytest

from gqlclient.core.client import JSON_CONTENT_TYPE, use_multipart_form, with_log
from gqlclient.core.errors import EncodingError, FileConsumedError, GraphQLError
from gqlclient.core.multipart import MultipartWriter
from gqlclient.core.request import Request
from gqlclient.core.response import Result


def parse_parts(request: httpx.Request) -> list[tuple[str, bytes]]:
    """Split a multipart body into (headers, payload) pairs."""
    boundary = request.headers["Content-Type"].split("boundary=", 1)[1].encode()
    chunks = request.content.split(b"--" + boundary)
    assert chunks[-1] == b"--\r\n"
    parts = []
    for chunk in chunks[1:-1]:
        head, _, payload = chunk[2:].partition(b"\r\n\r\n")
        parts.append((head.decode(), payload[:-2]))
    return parts


class FailingReader:
    def read(self, *args):
        raise OSError("disk on fire")


@pytest.fixture
def multipart_client(make_client):
    return make_client(use_multipart_form())


class TestMultipartRequest:
    """Tests for the multipart request body."""

    def test_content_type(self, multipart_client, recorder):
        multipart_client.execute(Request("{ a }"))

        content_type = recorder.last.headers["Content-Type"]
        assert content_type.startswith("multipart/form-data; boundary=")
        assert recorder.last.headers["Accept"] == JSON_CONTENT_TYPE

    def test_query_only(self, multipart_client, recorder):
        """Test no variables part is written without variables."""
        multipart_client.execute(Request("{ items { id } }"))

        parts = parse_parts(recorder.last)
        assert parts == [('Content-Disposition: form-data; name="query"', b"{ items { id } }")]

    def test_empty_variables_are_skipped(self, multipart_client, recorder):
        multipart_client.execute(Request("{ a }").with_vars({}))

        assert len(parse_parts(recorder.last)) == 1

    def test_query_and_variables(self, multipart_client, recorder):
        req = Request("query ($id: ID!) { item(id: $id) { name } }").with_vars({"id": "42", "n": [1, 2]})

        multipart_client.execute(req)

        (query_head, query), (vars_head, variables) = parse_parts(recorder.last)
        assert 'name="query"' in query_head
        assert query == b"query ($id: ID!) { item(id: $id) { name } }"
        assert 'name="variables"' in vars_head
        assert json.loads(variables) == {"id": "42", "n": [1, 2]}

    def test_single_file(self, multipart_client, recorder):
        content = bytes(range(256)) * 4
        req = Request("mutation ($file: Upload!) { upload(file: $file) }")
        req.add_file("upload", "data.bin", io.BytesIO(content))

        multipart_client.execute(req)

        file_parts = [(head, body) for head, body in parse_parts(recorder.last) if "filename=" in head]
        assert len(file_parts) == 1
        head, body = file_parts[0]
        assert 'name="upload"; filename="data.bin"' in head
        assert "Content-Type: application/octet-stream" in head
        assert body == content

    def test_files_keep_request_order(self, multipart_client, recorder):
        req = Request("mutation { upload }").with_vars({"files": [None, None]})
        req.add_file("0", "first.txt", io.BytesIO(b"first"))
        req.add_file("1", "second.txt", b"second")

        multipart_client.execute(req)

        names = [head for head, _ in parse_parts(recorder.last)]
        assert 'name="query"' in names[0]
        assert 'name="variables"' in names[1]
        assert 'filename="first.txt"' in names[2]
        assert 'filename="second.txt"' in names[3]

    def test_request_headers_are_added(self, multipart_client, recorder):
        req = Request("{ a }")
        req.header.add("Authorization", "Bearer t")

        multipart_client.execute(req)

        assert recorder.last.headers["Authorization"] == "Bearer t"
        assert recorder.last.headers["Content-Type"].startswith("multipart/form-data")

    def test_file_is_consumed_once(self, multipart_client, recorder):
        req = Request("mutation { upload }")
        req.add_file("file", "a.txt", io.BytesIO(b"abc"))

        multipart_client.execute(req)
        assert req.files[0].consumed

        with pytest.raises(FileConsumedError):
            multipart_client.execute(req)
        assert len(recorder.requests) == 1

    def test_file_read_failure(self, multipart_client, recorder):
        req = Request("mutation { upload }")
        req.add_file("file", "a.txt", FailingReader())

        with pytest.raises(EncodingError, match="preparing file"):
            multipart_client.execute(req)
        assert recorder.requests == []

    def test_unserializable_variables(self, multipart_client, recorder):
        req = Request("{ a }").with_vars({"x": object()})

        with pytest.raises(EncodingError, match="encode variables"):
            multipart_client.execute(req)
        assert recorder.requests == []

    def test_diagnostics(self, make_client, recorder):
        messages = []
        client = make_client(use_multipart_form(), with_log(messages.append))
        req = Request("{ a }").with_vars({"k": "v"})
        req.add_file("f", "f.txt", b"x")

        client.execute(req)

        assert messages[:3] == ['>> variables: {"k":"v"}', ">> files: 1", ">> query: { a }"]


class TestMultipartResponse:
    """Tests for response handling in multipart mode."""

    def test_data_is_decoded(self, multipart_client, recorder):
        recorder.respond(200, {"data": {"upload": True}})
        result = Result(dict)

        multipart_client.execute(Request("mutation { upload }"), result)

        assert result.data == {"upload": True}

    def test_first_error_wins(self, multipart_client, recorder):
        recorder.respond(200, {"errors": [{"message": "too large"}, {"message": "other"}]})

        with pytest.raises(GraphQLError) as excinfo:
            multipart_client.execute(Request("mutation { upload }"))
        assert excinfo.value.message == "too large"


class TestMultipartWriter:
    """Tests for MultipartWriter."""

    def test_fixed_boundary(self):
        writer = MultipartWriter(boundary="xyz")
        writer.write_field("query", "{ a }")
        writer.write_file("f", "f.txt", b"data")
        writer.close()

        assert writer.content_type == "multipart/form-data; boundary=xyz"
        assert writer.body == (
            b"--xyz\r\n"
            b'Content-Disposition: form-data; name="query"\r\n\r\n'
            b"{ a }\r\n"
            b"--xyz\r\n"
            b'Content-Disposition: form-data; name="f"; filename="f.txt"\r\n'
            b"Content-Type: application/octet-stream\r\n\r\n"
            b"data\r\n"
            b"--xyz--\r\n"
        )
        assert len(writer) == 2

    def test_not_closed(self):
        writer = MultipartWriter()
        with pytest.raises(ValueError):
            writer.content_type
        with pytest.raises(ValueError):
            writer.body

    def test_closed(self):
        writer = MultipartWriter()
        writer.close()
        with pytest.raises(ValueError):
            writer.write_field("query", "{ a }")
        with pytest.raises(ValueError):
            writer.close()
