"""CLI commands for fetching resources with alias fallback."""

import asyncio
import json
import logging
import sys

import click
import httpx
import structlog

from alias_fetch.alias.controller import AliasFallbackController
from alias_fetch.alias.errors import AliasCreationError
from alias_fetch.alias.metrics import AliasMetrics
from alias_fetch.observability.logging import configure_logging
from alias_fetch.settings import get_settings
from alias_fetch.transport.client import TransportAdapter
from alias_fetch.transport.metrics import TransportMetrics
from alias_fetch.transport.models import RequestOptions


logger = structlog.get_logger()

EXIT_ALIAS_FAILED = 1
EXIT_CONFIG_ERROR = 2


def parse_header(value: str) -> tuple[str, str]:
    """Split a ``Name: value`` header argument.

    Args:
        value: Raw header argument.

    Returns:
        Tuple of header name and value.

    Raises:
        click.BadParameter: If the argument has no colon or no name.
    """
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        msg = f"Invalid header '{value}', expected 'Name: value'"
        raise click.BadParameter(msg)
    return name.strip(), header_value.strip()


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Fetch API resources with transparent alias fallback."""


@cli.command()
@click.argument("path")
@click.option(
    "--method",
    "-X",
    default="GET",
    show_default=True,
    help="HTTP method for direct fetches.",
)
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    help="Extra request header as 'Name: value' (repeatable).",
)
@click.option(
    "--data",
    "-d",
    default=None,
    help="Request body for direct fetches.",
)
@click.option(
    "--max-uri-length",
    type=click.IntRange(min=1),
    default=None,
    help="Override the URI length threshold from settings.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
@click.option(
    "--show-metrics",
    is_flag=True,
    help="Print transport and alias metrics to stderr after the fetch.",
)
def get(  # noqa: PLR0913
    path: str,
    method: str,
    headers: tuple[str, ...],
    data: str | None,
    max_uri_length: int | None,
    json_logs: bool,
    verbose: bool,
    show_metrics: bool,
) -> None:
    """Fetch PATH relative to the configured base URL.

    Credentials come from DHIS2_BASE_URL, DHIS2_USERNAME and DHIS2_PASSWORD.
    Progress messages go to stderr; the result is printed to stdout as JSON.
    """
    configure_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        json_format=json_logs,
    )

    try:
        parsed_headers = dict(parse_header(header) for header in headers)
    except click.BadParameter as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        settings = get_settings()
        config = settings.to_instance_config(
            report_status=lambda message: click.echo(message, err=True)
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    controller = AliasFallbackController(
        transport=TransportAdapter(timeout_seconds=settings.timeout_seconds),
        max_uri_length=max_uri_length or settings.max_uri_length,
    )
    options = RequestOptions(method=method, headers=parsed_headers, content=data)

    try:
        result = asyncio.run(controller.resolve(config, path, options))
    except AliasCreationError as e:
        logger.error("alias_creation_failed", status_code=e.status_code)
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ALIAS_FAILED)
    except httpx.TransportError as e:
        click.echo(f"Error: request failed: {e}", err=True)
        sys.exit(EXIT_ALIAS_FAILED)
    except json.JSONDecodeError as e:
        click.echo(f"Error: response body is not valid JSON: {e}", err=True)
        sys.exit(EXIT_ALIAS_FAILED)
    finally:
        if show_metrics:
            metrics = {
                "transport": TransportMetrics.get_instance().to_dict(),
                "alias": AliasMetrics.get_instance().to_dict(),
            }
            click.echo(json.dumps(metrics, indent=2, default=str), err=True)

    click.echo(json.dumps({"status": result.status, "data": result.data}, indent=2))


if __name__ == "__main__":
    cli()
