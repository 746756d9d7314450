"""Extraction session: look keys up, convert them, collect every failure.

One ``Extractor`` is created per extraction task (typically one per
incoming request). It never stops early: every ``extract`` call is
attempted, failures are appended in call order, and the caller decides
afterwards whether the report is fatal. Instances are not thread-safe.
"""
from __future__ import annotations

from collections.abc import Iterable

import structlog

from valueextract.converters import Converter
from valueextract.core.exceptions import (
    ExtractionError,
    ExtractionErrorGroup,
    KeyNotFoundError,
    SourceError,
)
from valueextract.sources.base import ValueSource

logger = structlog.get_logger(__name__)


class Extractor:
    """Binds one source to any number of key/converter extractions.

    Args:
        source: Where raw values come from. Borrowed, never closed.
        optional_keys: Keys whose absence is not an error.

    Example::

        name, age = Ref(""), Ref(0)
        ex = Extractor(MapSource({"name": "John"}), optional_keys=["age"])
        ex.extract("name", as_string(name))
        ex.extract("age", as_uint64(age))
        assert ex.errors() == ()
    """

    def __init__(self, source: ValueSource, *, optional_keys: Iterable[str] = ()) -> None:
        self.source = source
        self.optional_keys: frozenset[str] = frozenset(optional_keys)
        self._errors: list[ExtractionError] = []

    def is_optional(self, key: str) -> bool:
        return key in self.optional_keys

    def extract(self, key: str, converter: Converter) -> None:
        """Look ``key`` up and run ``converter`` on its value.

        A missing key is recorded unless it was declared optional. Any other
        source failure and any conversion failure is always recorded.

        Args:
            key: Key to look up in the source.
            converter: Converter writing the parsed value to its destination.
        """
        self._extract(key, converter, optional=self.is_optional(key))

    def extract_optional(self, key: str, converter: Converter) -> None:
        """Same as ``extract`` with ``key`` treated as optional for this call only."""
        self._extract(key, converter, optional=True)

    def _extract(self, key: str, converter: Converter, *, optional: bool) -> None:
        try:
            raw = self.source.get(key)
        except KeyNotFoundError as exc:
            if optional:
                return
            self.add_extract_error(key, exc)
            return
        except SourceError as exc:
            self.add_extract_error(key, exc)
            return

        try:
            converter(self, raw)
        except ValueError as exc:
            self.add_convert_error(key, exc)

    def add_extract_error(self, key: str, err: BaseException) -> None:
        """Record a source failure for ``key``."""
        self._record(ExtractionError.extract(key, err))

    def add_convert_error(self, key: str, err: BaseException) -> None:
        """Record a conversion failure for ``key``."""
        self._record(ExtractionError.convert(key, err))

    def _record(self, error: ExtractionError) -> None:
        self._errors.append(error)
        logger.debug("extraction_error_recorded", key=error.key, kind=error.kind.value, error=str(error))

    def errors(self) -> tuple[ExtractionError, ...]:
        """Recorded errors in call order; empty when everything succeeded."""
        return tuple(self._errors)

    def joined_errors(self) -> ExtractionErrorGroup | None:
        """All recorded errors as one exception group, or None when there are none."""
        if not self._errors:
            return None
        return ExtractionErrorGroup(self._errors)

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def raise_for_errors(self) -> None:
        """Raise the joined error group if anything failed.

        Raises:
            ExtractionErrorGroup: If at least one error was recorded.
        """
        group = self.joined_errors()
        if group is not None:
            raise group

    def __repr__(self) -> str:
        return f"Extractor(source={self.source!r}, errors={len(self._errors)})"
