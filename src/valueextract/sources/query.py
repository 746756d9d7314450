"""Source backed by URL query parameters."""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from urllib.parse import parse_qsl, urlsplit

from werkzeug.datastructures import MultiDict
from werkzeug.wrappers import Request

from valueextract.core.exceptions import KeyNotFoundError
from valueextract.sources.base import ValueSource


class QuerySource(ValueSource):
    """Looks keys up in parsed query parameters.

    A key may carry several values; the first one wins. An absent key and
    an empty first value are both reported as not found unless
    ``empty_as_missing`` is turned off.
    """

    def __init__(
        self,
        query: MultiDict[str, str] | Mapping[str, str | Sequence[str]],
        *,
        empty_as_missing: bool = True,
    ) -> None:
        self.query: MultiDict[str, str] = query if isinstance(query, MultiDict) else MultiDict(query)
        self.empty_as_missing = empty_as_missing

    @classmethod
    def from_query_string(cls, query_string: str, **kwargs: bool) -> QuerySource:
        """Build a source from a raw ``a=1&b=2`` query string.

        Args:
            query_string: Query string without the leading ``?``.

        Returns:
            QuerySource over the decoded parameters.
        """
        return cls(MultiDict(parse_qsl(query_string, keep_blank_values=True)), **kwargs)

    @classmethod
    def from_url(cls, url: str, **kwargs: bool) -> QuerySource:
        return cls.from_query_string(urlsplit(url).query, **kwargs)

    @classmethod
    def from_request(cls, request: Request, **kwargs: bool) -> QuerySource:
        return cls(request.args, **kwargs)

    def get(self, key: str) -> str:
        values = self.query.getlist(key)
        if not values:
            raise KeyNotFoundError(key)
        value = values[0]
        if self.empty_as_missing and value == "":
            raise KeyNotFoundError(key)
        return value

    def __repr__(self) -> str:
        return f"QuerySource(keys={sorted(self.query.keys())!r})"
