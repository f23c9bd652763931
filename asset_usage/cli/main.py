"""
CLI interface for asset usage statistics.

Shows the cached usage report and lets an operator clear the cache.
"""

import logging
import re
import sys

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from asset_usage.collectors import CollectionError, FileCollector
from asset_usage.config.loader import StatsConfig, load_stats_config
from asset_usage.core.report import UsageReport, build_usage_report
from asset_usage.core.stats_cache import StatsCache
from asset_usage.core.variants import VariantUsageTable
from asset_usage.storage.cache_store import (
    CacheUnavailableError,
    SqliteCacheStore,
    initialize_schema
)
from asset_usage.storage.db import DEFAULT_DB_PATH

app = typer.Typer()
console = Console()
logger = logging.getLogger(__name__)

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

_EMPHASIS = re.compile(r"\*\*(.+?)\*\*")

CONFIG_OPTION = typer.Option(
    "asset_usage.yaml",
    "--config",
    "-c",
    help="Path to the statistics configuration file"
)

VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable debug logging")


def _configure_logging(verbose: bool) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = VERBOSE_OPTION
):
    """Asset usage statistics CLI."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        console.print("Asset Usage - Use --help to see available commands")


@app.command()
def status():
    """Check that the CLI is installed."""
    console.print("[green]✓[/] Asset Usage is ready")


@app.command()
def init(
    db: str = typer.Option(DEFAULT_DB_PATH, "--db", help="Path to the cache database")
):
    """Initialize the statistics cache database."""
    try:
        initialize_schema(db)
        console.print("[green]✓[/] Cache database initialized successfully")
        sys.exit(EXIT_CODE_PASS)
    except Exception as e:
        console.print(f"[red]Error initializing cache database:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)


@app.command()
def show(config: str = CONFIG_OPTION, verbose: bool = VERBOSE_OPTION):
    """Show usage statistics, collecting them if the cache is empty."""
    if verbose:
        _configure_logging(verbose)
    stats_config = _load_config(config)
    stats_cache = _build_stats_cache(stats_config)
    try:
        snapshot = stats_cache.get(stats_config.scope)
    except CollectionError as e:
        console.print(f"[red]Error collecting usage statistics:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)

    _display_report(build_usage_report(snapshot))
    sys.exit(EXIT_CODE_PASS)


@app.command()
def clear(config: str = CONFIG_OPTION, verbose: bool = VERBOSE_OPTION):
    """Clear the cached statistics and regenerate them."""
    if verbose:
        _configure_logging(verbose)
    stats_config = _load_config(config)
    stats_cache = _build_stats_cache(stats_config)
    try:
        snapshot = stats_cache.regenerate(stats_config.scope)
    except CacheUnavailableError as e:
        console.print(f"[red]Error clearing cached statistics:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)
    except CollectionError as e:
        console.print(f"[red]Error collecting usage statistics:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)

    console.print("[green]✓[/] Cache cleared and usage statistics regenerated")
    _display_report(build_usage_report(snapshot))
    sys.exit(EXIT_CODE_PASS)


def _load_config(path: str) -> StatsConfig:
    """Load configuration, exiting with a failure code when it is invalid."""
    try:
        return load_stats_config(path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)


def _build_stats_cache(config: StatsConfig) -> StatsCache:
    store = SqliteCacheStore(config.cache.path)
    try:
        store.initialize()
    except CacheUnavailableError as e:
        logger.warning(f"Statistics cache unavailable: {e}")
    return StatsCache(store, FileCollector(config.source.path), ttl=config.cache.ttl)


def _render_markup(text: str) -> str:
    """Convert ``**emphasis**`` to rich bold markup."""
    return _EMPHASIS.sub(r"[bold]\1[/bold]", escape(text))


def _display_report(report: UsageReport) -> None:
    """Display the usage report grouped by category."""
    console.print("\n[bold]Stream[/bold]")
    console.print(_render_markup(report.stream_description), soft_wrap=True)
    console.print(_render_markup(report.stream_notes), soft_wrap=True)

    console.print("\n[bold]Images[/bold]")
    console.print(_render_markup(report.images_description), soft_wrap=True)
    console.print(_render_markup(report.images_notes), soft_wrap=True)

    if report.variant_table is not None:
        console.print()
        console.print(_variant_table(report.variant_table))


def _variant_table(variant_table: VariantUsageTable) -> Table:
    table = Table(
        title=f"Variant Usage ({variant_table.tier.value}, {variant_table.used_ratio:.0%} of allowance)"
    )
    for index, header in enumerate(variant_table.headers):
        table.add_column(escape(header), justify="left" if index == 0 else "right")

    last = len(variant_table.rows) - 1
    for index, row in enumerate(variant_table.rows):
        cells = [escape(str(row[0]))] + [f"{value:,}" for value in row[1:]]
        table.add_row(*cells, style="bold" if index == last else None)
    return table


if __name__ == "__main__":
    app()
