"""
Command-line interface for RegulatorRadar.

Provides commands for analyzing single items, running the feed pipeline, and
querying stored regulations.
"""

import asyncio
import json
import logging
import sys
from dataclasses import replace
from datetime import datetime
from typing import Optional

import click
from dotenv import load_dotenv

# Load environment variables from .env file (if it exists)
load_dotenv()

from . import __version__
from .analysis.engine import ImpactAnalyzer
from .config import AnalysisConfig, Config, ProcessingConfig
from .database import RegulationStore
from .feeds.registry import get_all_adapters
from .models import AnalysisResult, FeedItem, StoredRegulation
from .pipeline import RegulationProcessor

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger(__name__)

SEVERITY_COLORS = {"High (8-10)": "red", "Medium (5-7)": "yellow", "Low (1-4)": "green"}


def setup_file_logging(config: Config) -> None:
    """Set up file logging if enabled."""
    if config.get("logging.file_enabled", True):
        log_file = config.logs_dir / "regradar.log"
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(config.get("logging.format")))
        logging.getLogger().addHandler(file_handler)


def build_processor(config: Config, dry_run: bool = False) -> RegulationProcessor:
    processing = ProcessingConfig.from_config(config)
    if dry_run:
        processing = replace(processing, enable_storage=False)
    return RegulationProcessor(
        analyzer=ImpactAnalyzer(AnalysisConfig.from_config(config)),
        store=RegulationStore(config.database_path),
        config=processing,
        adapters=get_all_adapters(config),
    )


def print_analysis_result(result: AnalysisResult) -> None:
    """Print a human-readable analysis report."""
    if not result.success or not result.analysis:
        click.echo(click.style("Analysis failed:", fg="red"))
        for error in result.errors:
            click.echo(f"  - {error}")
        return

    analysis = result.analysis
    click.echo(click.style(f"\n{analysis.title}", fg="bright_white", bold=True))
    click.echo("=" * 40)
    click.echo(f"Type:        {analysis.regulation_type.label}")
    click.echo(
        click.style(
            f"Severity:    {analysis.severity_score}/10 ({analysis.severity_band})",
            fg=SEVERITY_COLORS[analysis.severity_band],
        )
    )
    click.echo(f"Impact:      {', '.join(a.value for a in analysis.business_impact_areas)}")
    click.echo(f"Penalty:     ${analysis.estimated_penalty:,.0f}")
    click.echo(f"Timeline:    {analysis.implementation_timeline_days} days")
    click.echo(f"Confidence:  {analysis.translation_confidence:.2f}")

    click.echo(f"\n{analysis.plain_english_summary}")

    if analysis.action_items:
        click.echo("\nAction Items:")
        for i, action in enumerate(analysis.action_items, 1):
            deadline = f", due {action.deadline:%Y-%m-%d}" if action.deadline else ""
            click.echo(
                f"  {i}. [{action.priority.value}] {action.description} "
                f"({action.estimated_hours}h, {action.category.value}{deadline})"
            )

    if analysis.compliance_deadlines:
        click.echo("\nDeadlines:")
        for deadline in analysis.compliance_deadlines:
            due = f" ({deadline.due:%Y-%m-%d})" if deadline.due else ""
            click.echo(f"  - [{deadline.priority.value}] {deadline.description}{due}")

    if result.warnings:
        click.echo(click.style("\nWarnings:", fg="yellow"))
        for warning in result.warnings:
            click.echo(f"  - {warning}")

    click.echo(f"\nProcessed in {result.processing_time_ms:.1f}ms")


def print_regulation_line(regulation: StoredRegulation) -> None:
    analysis = regulation.analysis
    click.echo(
        click.style(
            f"[{analysis.severity_score:>2}] {regulation.title}",
            fg=SEVERITY_COLORS[analysis.severity_band],
        )
    )
    click.echo(
        f"     {analysis.regulation_type.label} | "
        f"{', '.join(a.value for a in analysis.business_impact_areas)} | "
        f"stored {regulation.created_at:%Y-%m-%d %H:%M}"
    )
    click.echo(f"     {analysis.original_url}")


@click.group()
@click.version_option(version=__version__, prog_name="regradar")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """RegulatorRadar - Plain-English impact analysis of SEC regulatory updates."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    try:
        config = Config()
    except ValueError as e:
        click.echo(click.style(f"Configuration error: {e}", fg="red"))
        sys.exit(1)
    setup_file_logging(config)
    ctx.obj = config


@cli.command()
@click.option("-t", "--title", required=True, help="Item title")
@click.option("-d", "--description", required=True, help="Item description")
@click.option("-l", "--link", default="https://www.sec.gov/", show_default=True, help="Item URL")
@click.option("--date", "published", type=click.DateTime(formats=["%Y-%m-%d"]), help="Publication date")
@click.option("--guid", default="", help="Feed GUID")
@click.option("--json", "as_json", is_flag=True, help="Output the analysis as JSON")
@click.pass_obj
def analyze(
    config: Config,
    title: str,
    description: str,
    link: str,
    published: Optional[datetime],
    guid: str,
    as_json: bool,
) -> None:
    """Analyze a single regulatory item."""
    item = FeedItem(
        title=title,
        link=link,
        published_at=published or datetime.now(),
        description=description,
        guid=guid,
    )
    analyzer = ImpactAnalyzer(AnalysisConfig.from_config(config))
    result = asyncio.run(analyzer.analyze(item))

    if as_json:
        click.echo(
            json.dumps(
                {
                    "success": result.success,
                    "analysis": result.analysis.to_dict() if result.analysis else None,
                    "errors": result.errors,
                    "warnings": result.warnings,
                    "processing_time_ms": result.processing_time_ms,
                },
                indent=2,
            )
        )
    else:
        print_analysis_result(result)

    if not result.success:
        sys.exit(1)


@cli.command()
@click.option("--dry-run", is_flag=True, help="Analyze without storing results")
@click.option("--no-progress", is_flag=True, help="Hide the progress bar")
@click.pass_obj
def fetch(config: Config, dry_run: bool, no_progress: bool) -> None:
    """Fetch SEC feeds, analyze new items and store them."""
    processor = build_processor(config, dry_run=dry_run)
    click.echo(f"Fetching from {len(processor.adapters)} feeds...")

    result = asyncio.run(processor.process(progress=not no_progress))

    click.echo(click.style(str(result), fg="green" if not result.errors else "yellow"))

    if result.alerts:
        click.echo(click.style("\nImmediate attention:", fg="red", bold=True))
        for regulation in result.alerts:
            print_regulation_line(regulation)

    if result.warnings:
        click.echo(click.style("\nWarnings:", fg="yellow"))
        for warning in result.warnings[:10]:
            click.echo(f"  - {warning}")
        if len(result.warnings) > 10:
            click.echo(f"  ... and {len(result.warnings) - 10} more warnings")

    if result.errors:
        click.echo(click.style("\nErrors:", fg="red"))
        for error in result.errors[:10]:
            click.echo(f"  - {error}")
        if len(result.errors) > 10:
            click.echo(f"  ... and {len(result.errors) - 10} more errors")

    if not result.success:
        sys.exit(1)


@cli.command(name="list")
@click.option("-s", "--min-severity", type=click.IntRange(1, 10), default=1, show_default=True)
@click.option("-n", "--limit", type=int, default=20, show_default=True, help="Maximum results")
@click.pass_obj
def list_regulations(config: Config, min_severity: int, limit: int) -> None:
    """List stored regulations, most severe first."""
    store = RegulationStore(config.database_path)
    regulations = store.get_all(min_severity=min_severity)

    if not regulations:
        click.echo(click.style("No regulations found.", fg="yellow"))
        return

    click.echo(f"\nFound {len(regulations)} regulations:\n")
    for regulation in regulations[:limit]:
        print_regulation_line(regulation)


@cli.command()
@click.pass_obj
def stats(config: Config) -> None:
    """Show statistics for stored regulations."""
    processor = RegulationProcessor(
        analyzer=ImpactAnalyzer(AnalysisConfig.from_config(config)),
        store=RegulationStore(config.database_path),
        config=ProcessingConfig.from_config(config),
    )
    stats_data = processor.statistics()

    click.echo(click.style("\nRegulatorRadar Statistics", fg="bright_white", bold=True))
    click.echo("=" * 40)
    click.echo(f"Total regulations:  {stats_data['total_regulations']}")
    click.echo(f"Average severity:   {stats_data['average_severity']:.1f}")

    if stats_data.get("by_type"):
        click.echo("\nBy Regulation Type:")
        for reg_type, count in sorted(stats_data["by_type"].items()):
            click.echo(f"  {reg_type}: {count}")

    if stats_data.get("by_severity"):
        click.echo("\nBy Severity:")
        for band, count in sorted(stats_data["by_severity"].items()):
            click.echo(f"  {band}: {count}")


@cli.command()
@click.option("--days", type=click.IntRange(min=1), default=None, help="Days of history to keep")
@click.pass_obj
def cleanup(config: Config, days: Optional[int]) -> None:
    """Remove stored regulations older than the retention period."""
    days = days or config.get("processing.retention_days", 30)
    store = RegulationStore(config.database_path)
    removed = store.delete_older_than(days)
    click.echo(click.style(f"Removed {removed} regulations older than {days} days", fg="green"))


if __name__ == "__main__":
    cli()
