"""valueextract CLI — Typer application."""
from __future__ import annotations

import logging
import sys

import structlog
import typer

from valueextract.cli.form_cmd import form
from valueextract.cli.query_cmd import query

app = typer.Typer(
    name="valueextract",
    help="valueextract: try typed value extraction against sample inputs.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(  # noqa: B008
        False, "--verbose", "-v", help="Log parse and extraction events to stderr."
    ),
) -> None:
    """valueextract: try typed value extraction against sample inputs.

    Reports go to stdout as JSON; log events go to stderr.
    """
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.ERROR
        ),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


app.command(name="query")(query)
app.command(name="form")(form)
