"""Key/value sources the extractor reads from."""
from valueextract.sources.base import ValueSource
from valueextract.sources.form import FormSource
from valueextract.sources.mapping import MapSource
from valueextract.sources.query import QuerySource

__all__ = ["FormSource", "MapSource", "QuerySource", "ValueSource"]
