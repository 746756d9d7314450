"""valueextract query — Extract typed values from a URL query string."""
from __future__ import annotations

import typer

from valueextract.cli.report import emit_report, parse_fields, run_report
from valueextract.sources.query import QuerySource


def query(
    query_string: str = typer.Argument(  # noqa: B008
        ..., help="Query string (a=1&b=2) or a full URL."
    ),
    fields: list[str] = typer.Option(  # noqa: B008
        ..., "--field", "-f", help="Field as name:type (string, uint64, int64, float64, bool)."
    ),
    optional: list[str] | None = typer.Option(  # noqa: B008
        None, "--optional", help="Key whose absence is not an error."
    ),
) -> None:
    """Extract the requested fields and print a JSON report."""
    wanted = parse_fields(fields)
    if "://" in query_string:
        source = QuerySource.from_url(query_string)
    else:
        source = QuerySource.from_query_string(query_string.lstrip("?"))
    emit_report(run_report(source, wanted, optional or []))
