"""valueextract form — Extract typed values from a form request body."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path

import structlog
import typer
from werkzeug.test import EnvironBuilder

from valueextract.cli.report import emit_report, parse_fields, run_report
from valueextract.config import ValueExtractConfig, load_config
from valueextract.sources.form import FormSource

logger = structlog.get_logger(__name__)


def form(
    body: Path = typer.Argument(  # noqa: B008
        ..., help="File holding the raw request body."
    ),
    content_type: str = typer.Option(  # noqa: B008
        "application/x-www-form-urlencoded", "--content-type", "-t",
        help="Content-Type header, including the boundary for multipart bodies.",
    ),
    query_string: str = typer.Option(  # noqa: B008
        "", "--query", "-q", help="URL query string sent along with the body."
    ),
    fields: list[str] = typer.Option(  # noqa: B008
        ..., "--field", "-f", help="Field as name:type (string, uint64, int64, float64, bool)."
    ),
    optional: list[str] | None = typer.Option(  # noqa: B008
        None, "--optional", help="Key whose absence is not an error."
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None, "--config", "-c", help="YAML file with form parser limits."
    ),
) -> None:
    """Parse the body as a submitted form and print a JSON report."""
    if not body.exists():
        raise typer.BadParameter(f"Body file not found: {body}")
    if config is not None and not config.exists():
        raise typer.BadParameter(f"Config file not found: {config}")

    wanted = parse_fields(fields)
    settings = load_config(config) if config is not None else ValueExtractConfig()

    data = body.read_bytes()
    request = EnvironBuilder(
        method="POST",
        query_string=query_string.lstrip("?") or None,
        input_stream=BytesIO(data),
        content_type=content_type,
        content_length=len(data),
    ).get_request()
    logger.debug("form_request_built", content_type=content_type, n_bytes=len(data))

    source = FormSource(request, config=settings.form)
    emit_report(run_report(source, wanted, optional or []))
