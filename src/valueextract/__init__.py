"""valueextract: typed value extraction with aggregated errors.

Pulls string values by key out of a mapping, a URL query string, or a
submitted form, converts each one to a typed destination, and collects
every failure instead of stopping at the first.
"""

from importlib.metadata import PackageNotFoundError, version

from valueextract.converters import (
    BUILTIN_CONVERTERS,
    AttrRef,
    Converter,
    ConverterFactory,
    Ref,
    as_bool,
    as_float64,
    as_int64,
    as_string,
    as_uint64,
    converter,
)
from valueextract.core.enums import ErrorKind, FormEncoding, SourceErrorCode
from valueextract.core.exceptions import (
    ConversionFailure,
    ExtractionError,
    ExtractionErrorGroup,
    FormParseError,
    KeyNotFoundError,
    RequestMissingError,
    SourceError,
    ValueExtractError,
)
from valueextract.extractor import Extractor
from valueextract.results import optional_result, result, result_ref
from valueextract.sources import FormSource, MapSource, QuerySource, ValueSource

try:
    __version__ = version("valueextract")
except PackageNotFoundError:
    # Fallback for source-only usage before installation.
    __version__ = "0.1.0"

__all__ = [
    "BUILTIN_CONVERTERS",
    "AttrRef",
    "ConversionFailure",
    "Converter",
    "ConverterFactory",
    "ErrorKind",
    "ExtractionError",
    "ExtractionErrorGroup",
    "Extractor",
    "FormEncoding",
    "FormParseError",
    "FormSource",
    "KeyNotFoundError",
    "MapSource",
    "QuerySource",
    "Ref",
    "RequestMissingError",
    "SourceError",
    "SourceErrorCode",
    "ValueExtractError",
    "ValueSource",
    "as_bool",
    "as_float64",
    "as_int64",
    "as_string",
    "as_uint64",
    "converter",
    "optional_result",
    "result",
    "result_ref",
]
