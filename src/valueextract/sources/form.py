"""Source backed by a submitted HTML form.

Wraps a werkzeug ``Request`` (a Flask request works too). The body is
parsed lazily on the first lookup and at most once after that: the
encoding is picked from the declared content type, the body is run
through werkzeug's form parser with explicit size limits, and the
resulting fields are memoized. Body fields shadow URL query parameters
of the same name.

When werkzeug has already parsed the body (something read
``request.form`` first) those fields are reused as they are. Any other
failure to read the body, including a stream drained by ``get_data()``,
surfaces as ``FormParseError``.
"""
from __future__ import annotations

from collections.abc import Callable

import structlog
from werkzeug.datastructures import CombinedMultiDict, MultiDict
from werkzeug.exceptions import HTTPException
from werkzeug.formparser import FormDataParser
from werkzeug.wrappers import Request
from werkzeug.wsgi import get_input_stream

from valueextract.config import FormParseConfig
from valueextract.core.enums import FormEncoding
from valueextract.core.exceptions import FormParseError, KeyNotFoundError, RequestMissingError
from valueextract.sources.base import ValueSource

logger = structlog.get_logger(__name__)


class FormSource(ValueSource):
    """Looks keys up in a request's form body, then its query string.

    Args:
        request: The request to read; ``None`` makes every lookup fail with
            ``RequestMissingError``.
        config: Parser size limits. Defaults to ``FormParseConfig()``.
        empty_as_missing: Report empty values as not found.
    """

    def __init__(
        self,
        request: Request | None,
        *,
        config: FormParseConfig | None = None,
        empty_as_missing: bool = True,
    ) -> None:
        self.request = request
        self.config = config or FormParseConfig()
        self.empty_as_missing = empty_as_missing
        self._parsed = False
        self._encoding: FormEncoding | None = None
        self._getter: Callable[[str], str | None] | None = None

    @property
    def parsed(self) -> bool:
        return self._parsed

    @property
    def encoding(self) -> FormEncoding | None:
        """Parse strategy, or None until the first lookup."""
        return self._encoding

    def get(self, key: str) -> str:
        if self.request is None:
            raise RequestMissingError()

        getter = self._ensure_parsed(self.request)
        value = getter(key)
        if value is None or (self.empty_as_missing and value == ""):
            raise KeyNotFoundError(key)
        return value

    def _ensure_parsed(self, request: Request) -> Callable[[str], str | None]:
        """Parse the body once; a failed parse leaves the source unparsed so the next lookup retries."""
        if self._parsed and self._getter is not None:
            return self._getter

        if self._encoding is None:
            self._encoding = self._detect_encoding(request)

        try:
            form = self._parse_body(request, self._encoding)
        except (ValueError, HTTPException) as exc:
            reason = getattr(exc, "description", None) or str(exc)
            logger.warning("form_parse_failed", encoding=self._encoding.value, error=reason)
            raise FormParseError(reason) from exc

        values: CombinedMultiDict[str, str] = CombinedMultiDict([form, request.args])
        self._getter = values.get
        self._parsed = True
        logger.debug("form_parsed", encoding=self._encoding.value, n_fields=len(form))
        return self._getter

    @staticmethod
    def _detect_encoding(request: Request) -> FormEncoding:
        if request.mimetype == FormEncoding.MULTIPART:
            return FormEncoding.MULTIPART
        return FormEncoding.URLENCODED

    def _parse_body(self, request: Request, encoding: FormEncoding) -> MultiDict[str, str]:
        """Run the request body through werkzeug's form parser.

        Args:
            request: The request whose body is parsed.
            encoding: Strategy picked from the content type.

        Returns:
            The non-file form fields, or the request's own ``form`` when
            werkzeug has already parsed it.

        Raises:
            ValueError: If the body is malformed.
            HTTPException: If a configured size limit is exceeded
                (``RequestEntityTooLarge``) or the body cannot be read
                (``ClientDisconnected``).
        """
        if "form" in request.__dict__:
            return request.form

        cfg = self.config
        parser = FormDataParser(
            max_form_memory_size=cfg.max_form_memory_size,
            max_content_length=cfg.max_content_length,
            silent=False,
            max_form_parts=cfg.max_form_parts,
        )
        # Bodies that are not url-encoded contribute no fields; the query string still does.
        mimetype = encoding.value if encoding is FormEncoding.MULTIPART else request.mimetype
        stream = get_input_stream(request.environ, max_content_length=cfg.max_content_length)
        _, form, files = parser.parse(stream, mimetype, request.content_length, request.mimetype_params)
        # uploads are never values; release their spooled files
        for _, upload in files.items(multi=True):
            upload.close()
        return form

    def __repr__(self) -> str:
        state = self._encoding.value if self._parsed and self._encoding else "unparsed"
        return f"FormSource({state})"
