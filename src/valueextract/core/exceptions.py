"""Custom exception hierarchy for valueextract.

Never use bare except clauses. Always catch specific exceptions.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from valueextract.core.enums import ErrorKind, SourceErrorCode


class ValueExtractError(Exception):
    """Base exception for all valueextract errors."""


# Source exceptions
class SourceError(ValueExtractError):
    """A source could not produce a value for a key."""

    code: SourceErrorCode | None = None


class KeyNotFoundError(SourceError, LookupError):
    """Key is absent from the source (or present but empty, per source policy)."""

    code = SourceErrorCode.NOT_FOUND

    def __init__(self, key: str) -> None:
        super().__init__(f"key not found: {key!r}")
        self.key = key

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.key,)


class RequestMissingError(SourceError):
    """Form source was built without a request."""

    code = SourceErrorCode.REQUEST_MISSING

    def __init__(self, message: str = "request is None") -> None:
        super().__init__(message)


class FormParseError(SourceError):
    """Request body could not be parsed as form data."""

    code = SourceErrorCode.FORM_PARSE

    def __init__(self, reason: str) -> None:
        super().__init__(f"error parsing form: {reason}")
        self.reason = reason

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.reason,)


# Conversion exceptions
class ConversionFailure(ValueExtractError, ValueError):
    """A raw string could not be parsed into the target type."""

    def __init__(self, expected_type: str, value: str, reason: str | None = None) -> None:
        message = f"invalid {expected_type} value {value!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.expected_type = expected_type
        self.value = value
        self.reason = reason

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self.expected_type, self.value, self.reason)


# Aggregated errors
class ExtractionError(ValueExtractError):
    """One recorded failure for one key.

    Attributes:
        kind: Whether extraction or conversion failed.
        key: The key that was being extracted.
        cause: The underlying source or conversion error.
    """

    def __init__(self, kind: ErrorKind, key: str, cause: BaseException) -> None:
        super().__init__(str(cause))
        self._kind = kind
        self._key = key
        self._cause = cause
        self.__cause__ = cause

    @classmethod
    def extract(cls, key: str, cause: BaseException) -> ExtractionError:
        return cls(ErrorKind.EXTRACT, key, cause)

    @classmethod
    def convert(cls, key: str, cause: BaseException) -> ExtractionError:
        return cls(ErrorKind.CONVERT, key, cause)

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def key(self) -> str:
        return self._key

    @property
    def cause(self) -> BaseException:
        return self._cause

    @property
    def is_extract_error(self) -> bool:
        return self._kind is ErrorKind.EXTRACT

    @property
    def is_convert_error(self) -> bool:
        return self._kind is ErrorKind.CONVERT

    @property
    def code(self) -> SourceErrorCode | None:
        """Source failure code of the cause, or None for conversion failures."""
        return getattr(self._cause, "code", None) if self.is_extract_error else None

    @property
    def is_not_found(self) -> bool:
        return self.code == SourceErrorCode.NOT_FOUND

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (self._kind, self._key, self._cause)

    def __repr__(self) -> str:
        return f"ExtractionError(kind={self._kind.value!r}, key={self._key!r}, cause={self._cause!r})"


class ExtractionErrorGroup(ExceptionGroup):
    """All errors recorded by one extractor, in the order they were recorded."""

    def __new__(cls, errors: Sequence[ExtractionError]) -> ExtractionErrorGroup:
        message = "; ".join(f"{e.key}: {e}" for e in errors)
        return super().__new__(cls, message, list(errors))

    def __init__(self, errors: Sequence[ExtractionError]) -> None:
        message = "; ".join(f"{e.key}: {e}" for e in errors)
        super().__init__(message, list(errors))

    def derive(self, excs: Sequence[ExtractionError]) -> ExtractionErrorGroup:  # type: ignore[override]
        return ExtractionErrorGroup(excs)

    def __reduce__(self) -> tuple[Any, ...]:
        return self.__class__, (list(self.exceptions),)

    @property
    def keys(self) -> list[str]:
        return [e.key for e in self.exceptions]
