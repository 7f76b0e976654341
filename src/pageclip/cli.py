"""Command-line interface for pageclip."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Union

import click
import uvicorn
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pageclip import __version__
from pageclip.config.config import Config, find_config_file
from pageclip.crawler.http_client import HttpClient
from pageclip.exceptions import PageClipError
from pageclip.extractor.models import ExtractionResult
from pageclip.extractor.page_extractor import PageExtractor
from pageclip.observability.logging import configure_logging

console = Console()

MANUAL_ENTRY_HINT = "could not extract; enter details manually"


def load_config(config_path: Optional[Path]) -> Config:
    """Load the explicit file, else the first config file in the working directory, else defaults."""
    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        return Config()
    return Config.from_yaml(config_path)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides the configuration file)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """pageclip - pre-fill bookmark entries from web pages."""
    ctx.ensure_object(dict)
    try:
        app_config = load_config(Path(config) if config else None)
    except Exception as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    if log_level:
        app_config.monitoring.log_level = log_level
    configure_logging(app_config.monitoring)
    ctx.obj["config"] = app_config


async def _extract_all(
    config: Config, urls: Sequence[str], timeout: Optional[float]
) -> List[Union[ExtractionResult, PageClipError]]:
    async with HttpClient(config) as client:
        extractor = PageExtractor(config, fetcher=client)
        return await extractor.extract_many(urls, timeout=timeout)


def _render_result(result: ExtractionResult) -> Table:
    table = Table(title=escape(result.source_url), show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Title", escape(result.title) or "-")
    table.add_row("Image", escape(result.image_url) or "-")
    table.add_row("Tags", escape(", ".join(result.tags)) or "-")
    table.add_row("Content", escape(result.content) or "-")
    return table


@cli.command()
@click.argument("urls", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.option("--timeout", type=float, default=None, help="Retrieval timeout in seconds")
@click.pass_context
def extract(ctx: click.Context, urls: Sequence[str], as_json: bool, timeout: Optional[float]) -> None:
    """Extract title, content, image and tags from one or more URLs."""
    config: Config = ctx.obj["config"]
    outcomes = asyncio.run(_extract_all(config, urls, timeout))

    failed = False
    records = []
    for url, outcome in zip(urls, outcomes):
        if isinstance(outcome, PageClipError):
            failed = True
            records.append({"url": url, "error": str(outcome)})
            if not as_json:
                console.print(f"[red]{escape(url)}: {MANUAL_ENTRY_HINT} ({escape(str(outcome))})[/red]", soft_wrap=True)
            continue
        records.append(outcome.to_dict())
        if not as_json:
            console.print(_render_result(outcome))

    if as_json:
        payload = records[0] if len(records) == 1 else records
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2))

    if failed:
        sys.exit(1)


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Start the extraction API."""
    from pageclip.web.main import create_app

    config: Config = ctx.obj["config"]
    host = host or config.monitoring.web.host
    port = port or config.monitoring.web.port
    console.print(f"[green]Starting pageclip API at http://{host}:{port}[/green]")

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_level=config.monitoring.log_level.lower(),
    )


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
