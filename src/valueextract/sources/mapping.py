"""Source backed by an in-memory mapping."""
from __future__ import annotations

from collections.abc import Mapping

from valueextract.core.exceptions import KeyNotFoundError
from valueextract.sources.base import ValueSource


class MapSource(ValueSource):
    """Looks keys up in a caller-owned ``Mapping[str, str]``.

    Presence decides whether a key is found, so an empty string is
    returned as a value unless ``empty_as_missing`` is set.
    """

    def __init__(self, values: Mapping[str, str], *, empty_as_missing: bool = False) -> None:
        self.values = values
        self.empty_as_missing = empty_as_missing

    def get(self, key: str) -> str:
        try:
            value = self.values[key]
        except KeyError:
            raise KeyNotFoundError(key) from None
        if self.empty_as_missing and value == "":
            raise KeyNotFoundError(key)
        return value

    def __repr__(self) -> str:
        return f"MapSource(keys={sorted(self.values)!r})"
