"""Result helpers: extract a key and hand back the value directly.

These spare the caller from declaring a destination up front::

    age = result(ex, "age", as_uint64)

Error recording and optional-key handling are exactly those of
``Extractor.extract``; on failure the zero value comes back.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from valueextract.converters import Converter, ConverterFactory, Ref
from valueextract.extractor import Extractor

T = TypeVar("T")

# Wraps a destination into a converter; ConverterFactory is the usual implementation.
ResultConverter = Callable[[Ref[T]], Converter]

_UNSET: Any = object()


def _zero(factory: ResultConverter[T], default: Any) -> Any:
    if default is not _UNSET:
        return default
    if isinstance(factory, ConverterFactory):
        return factory.zero
    return None


def result_ref(
    extractor: Extractor,
    key: str,
    factory: ResultConverter[T],
    *,
    default: Any = _UNSET,
) -> Ref[T]:
    """Extract ``key`` into a fresh ``Ref`` and return it.

    Args:
        extractor: Extractor recording any failure.
        key: Key to extract.
        factory: Converter factory, e.g. ``as_uint64``.
        default: Starting value; defaults to the factory's zero value.

    Returns:
        The destination box; ``ref.is_set`` tells whether conversion happened.
    """
    ref: Ref[T] = Ref(_zero(factory, default))
    extractor.extract(key, factory(ref))
    return ref


def result(
    extractor: Extractor,
    key: str,
    factory: ResultConverter[T],
    *,
    default: Any = _UNSET,
) -> T:
    """Extract ``key`` and return the converted value (or the zero value on failure)."""
    return result_ref(extractor, key, factory, default=default).value


def optional_result(extractor: Extractor, key: str, factory: ResultConverter[T]) -> T | None:
    """Extract ``key`` as optional for this call; return None when nothing was converted."""
    ref: Ref[T | None] = Ref(None)
    extractor.extract_optional(key, factory(ref))  # type: ignore[arg-type]
    return ref.value if ref.is_set else None
