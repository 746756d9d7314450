"""Tests for the lazily parsed form source."""
from __future__ import annotations

from collections.abc import Callable
from io import BytesIO
from unittest.mock import patch

import pytest
from werkzeug.datastructures import FileStorage
from werkzeug.wrappers import Request

from valueextract.config import FormParseConfig
from valueextract.converters import Ref, as_string
from valueextract.core.enums import FormEncoding, SourceErrorCode
from valueextract.core.exceptions import FormParseError, KeyNotFoundError, RequestMissingError
from valueextract.extractor import Extractor
from valueextract.sources.form import FormSource

BOUNDARY = "valueextract-boundary"


def _multipart_body(fields: dict[str, str]) -> bytes:
    parts = [
        f'--{BOUNDARY}\r\nContent-Disposition: form-data; name="{name}"\r\n\r\n{value}\r\n'
        for name, value in fields.items()
    ]
    return ("".join(parts) + f"--{BOUNDARY}--\r\n").encode()


class TestUrlEncoded:
    """Tests for application/x-www-form-urlencoded bodies."""

    def test_reads_fields(self, make_form_request: Callable[..., Request]) -> None:
        source = FormSource(make_form_request({"name": "John", "age": "30"}))
        assert source.get("name") == "John"
        assert source.get("age") == "30"
        assert source.encoding is FormEncoding.URLENCODED
        assert source.parsed

    def test_absent_and_empty_are_not_found(self, make_form_request: Callable[..., Request]) -> None:
        source = FormSource(make_form_request({"blank": ""}))
        with pytest.raises(KeyNotFoundError):
            source.get("blank")
        with pytest.raises(KeyNotFoundError):
            source.get("missing")

    def test_body_shadows_query(self, make_form_request: Callable[..., Request]) -> None:
        request = make_form_request({"name": "Body"}, query_string="name=Query&page=4")
        source = FormSource(request)
        assert source.get("name") == "Body"
        assert source.get("page") == "4"

    def test_non_form_body_only_sees_query(self, make_raw_request: Callable[..., Request]) -> None:
        request = make_raw_request(b'{"name": "John"}', "application/json", query_string="id=9")
        source = FormSource(request)
        assert source.get("id") == "9"
        with pytest.raises(KeyNotFoundError):
            source.get("name")


class TestMultipart:
    """Tests for multipart/form-data bodies."""

    def test_reads_text_fields(self, make_form_request: Callable[..., Request]) -> None:
        source = FormSource(make_form_request({"name": "John"}, multipart=True))
        assert source.get("name") == "John"
        assert source.encoding is FormEncoding.MULTIPART

    def test_file_parts_are_not_values(self, make_form_request: Callable[..., Request]) -> None:
        request = make_form_request(
            {"name": "John", "upload": (BytesIO(b"hello"), "hello.txt")},
        )
        source = FormSource(request)
        assert source.get("name") == "John"
        with pytest.raises(KeyNotFoundError):
            source.get("upload")

    def test_file_parts_are_closed(self, make_form_request: Callable[..., Request]) -> None:
        request = make_form_request(
            {"name": "John", "upload": (BytesIO(b"hello"), "hello.txt")},
        )
        with patch.object(FileStorage, "close", autospec=True) as close:
            assert FormSource(request).get("name") == "John"
        assert close.call_count == 1

    def test_handwritten_body(self, make_raw_request: Callable[..., Request]) -> None:
        request = make_raw_request(
            _multipart_body({"id": "123"}),
            f"multipart/form-data; boundary={BOUNDARY}",
        )
        assert FormSource(request).get("id") == "123"

    def test_missing_boundary(self, make_raw_request: Callable[..., Request]) -> None:
        request = make_raw_request(_multipart_body({"id": "1"}), "multipart/form-data")
        with pytest.raises(FormParseError, match="Missing boundary"):
            FormSource(request).get("id")

    def test_malformed_body(self, make_raw_request: Callable[..., Request]) -> None:
        request = make_raw_request(b"garbage", f"multipart/form-data; boundary={BOUNDARY}")
        with pytest.raises(FormParseError) as exc_info:
            FormSource(request).get("id")
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_field_over_memory_limit(self, make_raw_request: Callable[..., Request]) -> None:
        request = make_raw_request(
            _multipart_body({"big": "x" * 2048}),
            f"multipart/form-data; boundary={BOUNDARY}",
        )
        source = FormSource(request, config=FormParseConfig(max_form_memory_size=512))
        with pytest.raises(FormParseError):
            source.get("big")


class TestParsePolicy:
    """Tests for parse-once, retry-on-failure and missing request handling."""

    def test_body_parsed_once(self, make_form_request: Callable[..., Request]) -> None:
        source = FormSource(make_form_request({"a": "1", "b": "2"}))
        with patch.object(FormSource, "_parse_body", autospec=True, side_effect=FormSource._parse_body) as spy:
            assert source.get("a") == "1"
            assert source.get("b") == "2"
            with pytest.raises(KeyNotFoundError):
                source.get("c")
        assert spy.call_count == 1

    def test_failed_parse_is_retried(self, make_raw_request: Callable[..., Request]) -> None:
        request = make_raw_request(b"garbage", "multipart/form-data")
        source = FormSource(request)
        with patch.object(FormSource, "_parse_body", autospec=True, side_effect=FormSource._parse_body) as spy:
            for _ in range(2):
                with pytest.raises(FormParseError):
                    source.get("a")
        assert spy.call_count == 2
        assert not source.parsed

    def test_content_length_over_limit(self, make_form_request: Callable[..., Request]) -> None:
        request = make_form_request({"big": "x" * 4096})
        source = FormSource(request, config=FormParseConfig(max_content_length=1024))
        with pytest.raises(FormParseError):
            source.get("big")

    def test_missing_request(self) -> None:
        source = FormSource(None)
        with pytest.raises(RequestMissingError):
            source.get("a")
        assert not isinstance(RequestMissingError(), KeyNotFoundError)


class TestConsumedBody:
    """Requests whose body was read before the source saw them."""

    def test_reuses_form_already_parsed(self, make_form_request: Callable[..., Request]) -> None:
        request = make_form_request({"name": "John"}, query_string="page=2")
        assert request.form["name"] == "John"
        source = FormSource(request)
        assert source.get("name") == "John"
        assert source.get("page") == "2"

    def test_reuses_multipart_form_already_parsed(self, make_form_request: Callable[..., Request]) -> None:
        request = make_form_request({"name": "John"}, multipart=True)
        assert "name" in request.form
        assert FormSource(request).get("name") == "John"

    def test_drained_stream_is_parse_error(self, make_form_request: Callable[..., Request]) -> None:
        request = make_form_request({"name": "John"})
        request.get_data()
        with pytest.raises(FormParseError) as exc_info:
            FormSource(request).get("name")
        assert exc_info.value.__cause__ is not None

    def test_drained_stream_does_not_abort_extraction(self, make_form_request: Callable[..., Request]) -> None:
        request = make_form_request({"name": "John", "city": "Oslo"})
        request.get_data()
        ex = Extractor(FormSource(request))
        ex.extract("name", as_string(Ref("")))
        ex.extract("city", as_string(Ref("")))
        assert [(e.key, e.code) for e in ex.errors()] == [
            ("name", SourceErrorCode.FORM_PARSE),
            ("city", SourceErrorCode.FORM_PARSE),
        ]
