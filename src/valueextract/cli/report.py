"""Shared helpers for CLI commands: --field parsing and the JSON report."""
from __future__ import annotations

import json
from typing import Any

import typer

from valueextract.converters import BUILTIN_CONVERTERS, ConverterFactory, Ref
from valueextract.extractor import Extractor
from valueextract.sources.base import ValueSource


def parse_fields(raw: list[str]) -> list[tuple[str, ConverterFactory[Any]]]:
    """Parse ``name:type`` --field values.

    Args:
        raw: Raw ``--field`` values; a bare ``name`` means ``name:string``.

    Returns:
        List of (key, converter factory) pairs in the given order.

    Raises:
        typer.BadParameter: If a value is malformed or names an unknown type.
    """
    fields: list[tuple[str, ConverterFactory[Any]]] = []
    for item in raw:
        key, _, type_name = item.partition(":")
        type_name = type_name or "string"
        if not key:
            raise typer.BadParameter(f"Invalid field '{item}': missing key")
        if type_name not in BUILTIN_CONVERTERS:
            raise typer.BadParameter(
                f"Unknown type '{type_name}' in '{item}'. "
                f"Valid types: {', '.join(sorted(BUILTIN_CONVERTERS))}"
            )
        fields.append((key, BUILTIN_CONVERTERS[type_name]))
    return fields


def run_report(
    source: ValueSource,
    fields: list[tuple[str, ConverterFactory[Any]]],
    optional_keys: list[str],
) -> dict[str, Any]:
    """Extract every field from ``source`` and build the JSON-ready report.

    Only keys that were actually converted appear under ``values``.
    """
    extractor = Extractor(source, optional_keys=optional_keys)
    refs: dict[str, Ref[Any]] = {}
    for key, factory in fields:
        ref: Ref[Any] = Ref(factory.zero)
        extractor.extract(key, factory(ref))
        refs[key] = ref

    return {
        "values": {key: ref.value for key, ref in refs.items() if ref.is_set},
        "errors": [
            {"key": e.key, "kind": e.kind.value, "message": str(e)}
            for e in extractor.errors()
        ],
    }


def emit_report(report: dict[str, Any]) -> None:
    """Print the report as JSON; exit 1 if it holds any error."""
    typer.echo(json.dumps(report, indent=2))
    if report["errors"]:
        raise typer.Exit(code=1)
