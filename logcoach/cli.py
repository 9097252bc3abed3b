#!/usr/bin/env python3
"""
Command-line interface for the combat log metrics engine.
"""

import sys
import json
import click
import logging
from pathlib import Path
from rich.console import Console
from rich.table import Table
from rich.logging import RichHandler

from .analysis.engine import analyze_combat_log
from .config.loader import load_and_apply_config
from .errors import ConfigError, InvalidFormat
from .models.summary import PerformanceSummary, Severity
from .parser.excerpt import extract_combat_lines, prefilter_raw_log
from .parser.validator import check_combat_log


# Set up rich console for pretty output
console = Console()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    handlers=[RichHandler(console=console, rich_tracebacks=True)],
)
logger = logging.getLogger(__name__)


def _read_log(log_file: str) -> str:
    with open(log_file, "r", encoding="utf-8-sig", errors="replace") as f:
        return f.read()


def _write_output(text: str, output):
    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Wrote {output}[/green]")
    else:
        click.echo(text)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--config", "config_path", type=click.Path(), help="YAML configuration file")
@click.pass_context
def cli(ctx, verbose, config_path):
    """WoW Combat Log Coach - per-player performance metrics"""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        ctx.obj = load_and_apply_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    if verbose:
        ctx.obj.log_configuration()


@cli.command()
@click.argument("log_file", type=click.Path(exists=True))
@click.pass_obj
def validate(settings, log_file):
    """Check whether a file looks like a WoW combat log."""
    result = check_combat_log(
        _read_log(log_file),
        min_bytes=settings.min_log_bytes,
        min_lines=settings.min_log_lines,
        sample_lines=settings.validation_sample_lines,
        required_matches=settings.validation_required_matches,
    )
    if result.valid:
        console.print(f"[bold green]✓ {Path(log_file).name} looks like a combat log[/bold green]")
    else:
        console.print(f"[red]✗ {result.reason}[/red]")
        sys.exit(1)


@cli.command()
@click.argument("log_file", type=click.Path(exists=True))
@click.option("--player", "-p", help="Name of the player to summarize")
@click.option("--anonymize", is_flag=True, help="Replace player names with pseudonyms")
@click.option(
    "--format", type=click.Choice(["summary", "json", "digest"]), default="summary"
)
@click.option("--output", "-o", help="Output file for results")
@click.pass_obj
def analyze(settings, log_file, player, anonymize, format, output):
    """Compute performance metrics for the main player of a combat log."""
    try:
        result = analyze_combat_log(
            _read_log(log_file),
            anonymize=anonymize,
            target_name=player,
            settings=settings,
        )
    except InvalidFormat as e:
        raise click.ClickException(e.reason)

    if format == "json":
        _write_output(json.dumps(result.to_dict(), indent=2), output)
    elif format == "digest":
        _write_output(result.digest, output)
    else:
        _print_summary(result.summary)
        stats = result.diagnostics
        console.print(
            f"[dim]{stats.events_kept:,} events kept, "
            f"{stats.lines_dropped:,} of {stats.lines_total:,} lines dropped[/dim]"
        )


@cli.command()
@click.argument("log_file", type=click.Path(exists=True))
@click.option("--max-lines", type=int, default=None, help="Maximum number of lines to keep")
@click.option(
    "--prefilter",
    is_flag=True,
    help="Keep only casts, spell damage, deaths and aura applications",
)
@click.option("--output", "-o", help="Output file for the excerpt")
@click.pass_obj
def excerpt(settings, log_file, max_lines, prefilter, output):
    """Cut a combat log down to a prompt-sized excerpt."""
    text = _read_log(log_file)

    if prefilter:
        digest = prefilter_raw_log(
            text,
            max_lines=max_lines or settings.prefilter_max_lines,
            player_prefix=settings.player_prefix,
        )
        logger.info(
            f"{digest.source_name}: {digest.casts} casts, "
            f"{digest.damage_taken:,} spell damage taken, {digest.deaths} deaths"
        )
        _write_output(digest.cleaned_text, output)
    else:
        _write_output(
            extract_combat_lines(text, max_lines=max_lines or settings.excerpt_max_lines), output
        )


def _print_summary(summary: PerformanceSummary):
    if summary.is_empty:
        console.print("[yellow]No player activity found in this log[/yellow]")
        return

    encounter = summary.encounter
    context = summary.context

    perf_table = Table(title=f"[bold]{summary.player_name}[/bold]", show_header=False)
    perf_table.add_column("Metric", style="cyan")
    perf_table.add_column("Value", style="white")

    perf_table.add_row("Class", f"{context.player_class} / {context.player_spec} ({context.role})")
    encounter_name = encounter.boss_or_title
    if encounter.keystone_level:
        encounter_name += f" +{encounter.keystone_level}"
    perf_table.add_row("Encounter", f"{encounter_name} ({encounter.difficulty_tag})")
    perf_table.add_row("Zone", encounter.zone_name)
    perf_table.add_row("Result", encounter.kill_or_wipe.value)
    perf_table.add_row("Total Damage", f"{summary.total_damage:,}")
    perf_table.add_row("DPS", f"{summary.dps:,.0f}")
    perf_table.add_row("Total Healing", f"{summary.total_healing:,}")
    perf_table.add_row("HPS", f"{summary.hps:,.0f}")
    perf_table.add_row("Duration", f"{summary.fight_duration:.1f}s")
    perf_table.add_row("Events", f"{summary.event_count:,}")
    console.print(perf_table)

    if summary.avoidable_damage:
        avoid_table = Table(title="\n[bold]Avoidable Damage Taken[/bold]")
        avoid_table.add_column("Ability", style="green")
        avoid_table.add_column("Hits", style="cyan")
        avoid_table.add_column("Total", style="red")
        avoid_table.add_column("Severity", width=10)

        for record in summary.avoidable_damage:
            color = "red" if record.severity is Severity.CRITICAL else "yellow"
            avoid_table.add_row(
                record.ability_name,
                str(record.hit_count),
                f"{record.total_damage:,}",
                f"[{color}]{record.severity.value}[/{color}]",
            )
        console.print(avoid_table)

    if summary.timeline:
        width = summary.timeline[0].width_seconds
        time_table = Table(title=f"\n[bold]Timeline ({width}s buckets)[/bold]")
        time_table.add_column("Start", style="dim")
        time_table.add_column("DPS", style="red")
        time_table.add_column("HPS", style="blue")

        for bucket in summary.timeline:
            time_table.add_row(f"{bucket.bucket_start}s", f"{bucket.dps:,.0f}", f"{bucket.hps:,.0f}")
        console.print(time_table)


def main():
    """Entry point for the logcoach command."""
    cli()


if __name__ == "__main__":
    main()
