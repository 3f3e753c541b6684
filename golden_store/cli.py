"""CLI entry point for golden file maintenance."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from golden_store.errors import GoldenStoreError
from golden_store.models.config import GoldenConfig
from golden_store.models.test_case import UploadableTestCase
from golden_store.sources.arg_source import DiffBaseArgs
from golden_store.sources.git_repo import GitRepo
from golden_store.store.golden_store import GoldenStore

console = Console()
logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "golden-config.json"


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=verbose, rich_tracebacks=True)],
    )
    # Keep asyncio subprocess debug output out of --verbose
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def _load_config(config: str) -> GoldenConfig:
    """Load the config file, falling back to defaults when it is absent."""
    try:
        return GoldenConfig.load(config)
    except FileNotFoundError:
        logger.debug("No config at %s, using defaults", config)
        return GoldenConfig()


def _print_summary(store: GoldenStore, title: str) -> None:
    table = Table(title=title)
    table.add_column("Page", style="bold")
    table.add_column("Variants")
    table.add_column("Public URL")
    for page_key in sorted(store.record_set.pages):
        record = store.record_set.pages[page_key]
        table.add_row(page_key, ", ".join(sorted(record.screenshots)) or "-", record.public_url)
    console.print(table)
    diff_report_url = store.record_set.diff_report_url
    if diff_report_url:
        console.print(f"  Diff report: [blue]{diff_report_url}[/blue]")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Maintain the golden file of expected screenshot URLs."""
    setup_logging(verbose)


@cli.command()
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
@click.option("--golden-file", "-g", default=None, help="Golden file path inside the repository")
def init(config: str, golden_file: Optional[str]) -> None:
    """Create a default configuration file."""
    config_path = Path(config)
    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    cfg = GoldenConfig()
    if golden_file:
        cfg.golden_file_path = golden_file
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")


@cli.command()
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
@click.option("--diff-base", "-b", default=None, help="Revision, branch, or tag to read the golden file from")
@click.option("--output", "-o", default=None, help="Write the baseline golden file here")
@click.option("--diff-report-url", default="", help="Diff report URL to record when writing")
def baseline(config: str, diff_base: Optional[str], output: Optional[str], diff_report_url: str) -> None:
    """Load the golden file from the diff base revision."""
    cfg = _load_config(config)
    try:
        args = DiffBaseArgs.resolve(diff_base, cfg)
    except ValidationError as e:
        console.print(f"[red]Invalid diff base {diff_base!r}: {e}[/red]")
        sys.exit(1)
    repo = GitRepo.from_config(cfg)

    async def _run() -> GoldenStore:
        store = await GoldenStore.from_baseline(cfg.golden_file_path, repo, args)
        if output:
            await store.write_to_disk(output, diff_report_url)
        return store

    try:
        store = asyncio.run(_run())
    except GoldenStoreError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    _print_summary(store, f"Baseline golden file at {args.diff_base}")


@cli.command()
@click.option("--test-cases", "-t", required=True, help="Path to uploaded test cases JSON")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
@click.option("--output", "-o", default=None, help="Golden file to write (defaults to the configured path)")
@click.option("--diff-report-url", default="", help="URL of the generated diff report")
def update(test_cases: str, config: str, output: Optional[str], diff_report_url: str) -> None:
    """Rewrite the golden file from freshly captured test cases."""
    cfg = _load_config(config)
    try:
        with open(test_cases) as f:
            data = json.load(f)
        cases = [UploadableTestCase.model_validate(item) for item in data]
    except (OSError, json.JSONDecodeError, ValidationError, TypeError) as e:
        console.print(f"[red]Could not read test cases from {test_cases}: {e}[/red]")
        sys.exit(1)

    store = GoldenStore.from_test_cases(cases)
    destination = output or str(Path(cfg.repo_dir) / cfg.golden_file_path)
    try:
        asyncio.run(store.write_to_disk(destination, diff_report_url))
    except GoldenStoreError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    console.print(
        f"[green]Updated {destination}:[/green] {len(store.record_set.pages)} pages"
    )


if __name__ == "__main__":
    cli()
