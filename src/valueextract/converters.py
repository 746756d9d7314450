"""Typed converters: raw string -> destination.

A converter factory is called with a destination and returns a
``Converter`` closure. The extractor only ever sees the closure, so the
target type lives at the call site and never in the extractor's state::

    age = Ref(0)
    extractor.extract("age", as_uint64(age))

Destinations are a ``Ref`` box, an ``AttrRef`` bound to an object
attribute, or any one-argument setter callable.
"""
from __future__ import annotations

import math
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar, runtime_checkable

from valueextract.core.exceptions import ConversionFailure

if TYPE_CHECKING:
    from valueextract.extractor import Extractor

T = TypeVar("T")

# Receives the owning extractor so compound converters can run nested extractions.
Converter = Callable[["Extractor", str], None]

UINT64_MAX = 2**64 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_UINT_RE = re.compile(r"[0-9]+")
_INT_RE = re.compile(r"[+-]?[0-9]+")
_BOOL_LITERALS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}


@runtime_checkable
class Destination(Protocol[T]):
    """Anything a converter can write a parsed value into."""

    def set(self, value: T) -> None: ...


@dataclass
class Ref(Generic[T]):
    """Mutable box used as a converter destination.

    Attributes:
        value: Current value; starts at whatever zero value the caller supplies.
        is_set: True once a converter has written to the box.
    """

    value: T
    is_set: bool = field(default=False, compare=False)

    def set(self, value: T) -> None:
        self.value = value
        self.is_set = True


class AttrRef(Generic[T]):
    """Destination that writes to an attribute of an existing object."""

    def __init__(self, target: object, name: str) -> None:
        self.target = target
        self.name = name

    def set(self, value: T) -> None:
        setattr(self.target, self.name, value)

    def __repr__(self) -> str:
        return f"AttrRef({type(self.target).__name__}.{self.name})"


def _setter(dest: Destination[T] | Callable[[T], Any]) -> Callable[[T], Any]:
    if isinstance(dest, Destination):
        return dest.set
    if callable(dest):
        return dest
    msg = f"Unsupported converter destination: {type(dest).__name__}"
    raise TypeError(msg)


class ConverterFactory(Generic[T]):
    """Builds converters for one target type.

    Attributes:
        type_name: Name of the target type, used in conversion error messages.
        zero: Default value result helpers start from.
    """

    def __init__(self, type_name: str, parse: Callable[[str], T], zero: T | None = None) -> None:
        self.type_name = type_name
        self.zero = zero
        self._parse = parse

    def parse(self, raw: str) -> T:
        """Parse a raw string, raising ``ConversionFailure`` on any parse error.

        Args:
            raw: The raw string value.

        Returns:
            The parsed value.

        Raises:
            ConversionFailure: If ``raw`` is not a valid value of the target type.
        """
        try:
            return self._parse(raw)
        except ConversionFailure:
            raise
        except (ValueError, TypeError, ArithmeticError) as exc:
            raise ConversionFailure(self.type_name, raw, str(exc)) from exc

    def __call__(self, dest: Destination[T] | Callable[[T], Any]) -> Converter:
        write = _setter(dest)

        def convert(extractor: Extractor, raw: str) -> None:  # noqa: ARG001
            write(self.parse(raw))

        return convert

    def __repr__(self) -> str:
        return f"ConverterFactory({self.type_name!r})"


def converter(type_name: str, zero: Any = None) -> Callable[[Callable[[str], T]], ConverterFactory[T]]:
    """Decorator turning a ``parse(raw) -> value`` function into a converter factory.

    Example::

        @converter("date")
        def as_date(raw: str) -> date:
            return date.fromisoformat(raw)

    Args:
        type_name: Target type name used in error messages.
        zero: Default value used by result helpers.

    Returns:
        Decorator producing a ``ConverterFactory``.
    """

    def wrap(parse: Callable[[str], T]) -> ConverterFactory[T]:
        return ConverterFactory(type_name, parse, zero)

    return wrap


@converter("string", zero="")
def as_string(raw: str) -> str:
    return raw


@converter("uint64", zero=0)
def as_uint64(raw: str) -> int:
    if not _UINT_RE.fullmatch(raw):
        raise ValueError("invalid syntax")
    value = int(raw)
    if value > UINT64_MAX:
        raise ValueError("value out of range")
    return value


@converter("int64", zero=0)
def as_int64(raw: str) -> int:
    if not _INT_RE.fullmatch(raw):
        raise ValueError("invalid syntax")
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        raise ValueError("value out of range")
    return value


@converter("float64", zero=0.0)
def as_float64(raw: str) -> float:
    # float() is laxer than plain ASCII base-10 syntax
    if not raw.isascii() or raw != raw.strip() or "_" in raw:
        raise ValueError("invalid syntax")
    value = float(raw)
    if math.isinf(value) and "inf" not in raw.lower():
        raise ValueError("value out of range")
    return value


@converter("bool", zero=False)
def as_bool(raw: str) -> bool:
    try:
        return _BOOL_LITERALS[raw]
    except KeyError:
        raise ValueError("invalid syntax") from None


BUILTIN_CONVERTERS: dict[str, ConverterFactory[Any]] = {
    factory.type_name: factory
    for factory in (as_string, as_uint64, as_int64, as_float64, as_bool)
}
