"""CLI entry point for webscrs."""

from __future__ import annotations

import asyncio
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import NoReturn

import click
from playwright.async_api import Error as PlaywrightError, async_playwright
from pydantic import ValidationError as ConfigError
from rich.logging import RichHandler
from rich.markup import escape

from webscrs.errors import ValidationError
from webscrs.models.config import WebscrsConfig
from webscrs.orchestrator import BatchOrchestrator
from webscrs.progress import ProgressReporter, console

logger = logging.getLogger(__name__)

EXAMPLES = """
\b
Examples:
  Take screenshots of URLs
  $ webscrs "https://example.com/" "https://example.net/"

\b
  Compare screenshots of URLs
  $ webscrs -c "https://example.com/" "https://example.net/"

\b
  Execute from file of URL list
  $ webscrs "url.txt"

\b
  Emulate device
  $ webscrs -d "iPhone 6" "https://example.com/"
"""


def _package_version() -> str:
    try:
        return version("webscrs")
    except PackageNotFoundError:
        return "0.0.0"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


async def _device_names() -> list[str]:
    async with async_playwright() as p:
        return sorted(p.devices)


def _list_devices(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    for name in asyncio.run(_device_names()):
        console.print(name, markup=False, highlight=False)
    ctx.exit()


@click.command(epilog=EXAMPLES)
@click.argument("urls", nargs=-1, required=True)
@click.option("--output-dir", "-o", default=None, help="Output directory of screenshots [default: ./screenshots]")
@click.option("--compare", "-c", is_flag=True, help="Compare odd and even URL pairs")
@click.option("--device", "-d", default=None, help="Emulate mobile device")
@click.option("--width", "-w", type=int, default=None, help="Width of viewport")
@click.option("--height", "-h", type=int, default=None, help="Height of viewport")
@click.option("--short", "-s", is_flag=True, help="Screenshot at viewport size")
@click.option("--config", "config_path", default=None, help="JSON config file with default options")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.option("--list-devices", is_flag=True, is_eager=True, expose_value=False,
              callback=_list_devices, help="List known device names and exit")
@click.version_option(_package_version(), "--version", "-v")
def cli(
    urls: tuple[str, ...],
    output_dir: str | None,
    compare: bool,
    device: str | None,
    width: int | None,
    height: int | None,
    short: bool,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Take a screenshot from a url and generate a diff from two urls."""
    setup_logging(verbose)

    try:
        cfg = WebscrsConfig.load(config_path) if config_path else WebscrsConfig()
        data = cfg.model_dump()
        # Flags only switch modes on; a config file can too.
        data["compare"] = compare or cfg.compare
        data["short"] = short or cfg.short
        if output_dir is not None:
            data["output_dir"] = output_dir
        if device is not None:
            data["device"] = device
        if width is not None:
            data["viewport"]["width"] = width
        if height is not None:
            data["viewport"]["height"] = height
        cfg = WebscrsConfig(**data)
    except (FileNotFoundError, ConfigError) as e:
        _exit_with_error(e)

    orchestrator = BatchOrchestrator(cfg, progress=ProgressReporter(console))
    try:
        orchestrator.run(list(urls))
    except (ValidationError, OSError, PlaywrightError) as e:
        # An unusable output directory, or a browser that will not start.
        logger.debug("Run aborted", exc_info=True)
        _exit_with_error(e)


def _exit_with_error(error: Exception) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False, soft_wrap=True)
    sys.exit(1)


if __name__ == "__main__":
    cli()
