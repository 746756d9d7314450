"""Core enumerations for valueextract."""
from enum import StrEnum


class ErrorKind(StrEnum):
    """Which stage of a key lookup produced a recorded error."""

    EXTRACT = "extract"  # source could not produce a value
    CONVERT = "convert"  # value present but not parseable


class SourceErrorCode(StrEnum):
    """Well-known source failure codes, compared by equality."""

    NOT_FOUND = "not_found"
    REQUEST_MISSING = "request_missing"
    FORM_PARSE = "form_parse"


class FormEncoding(StrEnum):
    """Body parse strategy picked once per form source."""

    MULTIPART = "multipart/form-data"
    URLENCODED = "application/x-www-form-urlencoded"
