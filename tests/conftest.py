"""Shared pytest fixtures for valueextract tests."""
from __future__ import annotations

import os

# Prevent Rich/Typer from emitting ANSI escape codes in CLI output.
os.environ["NO_COLOR"] = "1"

from collections.abc import Callable, Iterator
from io import BytesIO
from typing import Any

import pytest
import structlog
from werkzeug.test import EnvironBuilder
from werkzeug.wrappers import Request

from valueextract.sources.mapping import MapSource
from valueextract.sources.query import QuerySource


@pytest.fixture
def person_source() -> MapSource:
    """Map source with a well-formed id and name."""
    return MapSource({"id": "123", "name": "John"})


@pytest.fixture
def query_source() -> QuerySource:
    """Query source parsed from a request URL."""
    return QuerySource.from_url("http://localhost:8080/?name=John&age=30")


@pytest.fixture
def make_form_request() -> Callable[..., Request]:
    """Factory for POST requests carrying a form body."""

    def _make(
        data: dict[str, Any] | None = None,
        *,
        multipart: bool = False,
        query_string: str | None = None,
    ) -> Request:
        builder = EnvironBuilder(
            method="POST",
            data=data or {},
            query_string=query_string,
            content_type="multipart/form-data" if multipart else None,
        )
        return builder.get_request()

    return _make


@pytest.fixture
def make_raw_request() -> Callable[..., Request]:
    """Factory for POST requests with a raw body and explicit content type."""

    def _make(body: bytes, content_type: str, query_string: str | None = None) -> Request:
        return EnvironBuilder(
            method="POST",
            input_stream=BytesIO(body),
            content_type=content_type,
            query_string=query_string,
        ).get_request()

    return _make


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()
