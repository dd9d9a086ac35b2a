"""
CLI Interface
=============
Command-line interface for the exam mixer.

Usage:
    python -m exmix.cli mix <source.tex> --codes 101,102 [options]
    python -m exmix.cli batch <directory> --codes 101,102 [options]
    python -m exmix.cli inspect <source.tex>
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from . import __version__
from .engine import MixerConfig, MixerEngine, parse_codes
from .errors import ExmixError
from .extractor import QuestionExtractor
from .models import QuestionType
from .options import parse_choices

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="exmix")
def cli():
    """Exam Mixer: randomized ex_test exam variants with a shared answer key."""
    pass


@cli.command()
@click.argument("source_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--codes", "-c",
    required=True,
    help="Exam codes, comma or space separated (e.g. '101,102,103')",
)
@click.option(
    "--output", "-o",
    default="output",
    help="Output directory for the mixed document",
)
@click.option(
    "--no-tf-shuffle",
    is_flag=True,
    default=False,
    help="Keep true/false statements in source order",
)
@click.option(
    "--seed",
    default=None,
    type=int,
    help="Random seed for reproducible output",
)
@click.option(
    "--no-answer-key",
    is_flag=True,
    default=False,
    help="Skip saving the answer key JSON",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.option(
    "--log-file",
    default=None,
    help="Path to log file",
)
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output only the JSON result to stdout (for programmatic use)",
)
def mix(
    source_path: str,
    codes: str,
    output: str,
    no_tf_shuffle: bool,
    seed: int,
    no_answer_key: bool,
    log_level: str,
    log_file: str,
    json_output: bool,
):
    """Mix a single ex_test source into one variant per exam code."""

    if json_output:
        # Suppress console output for JSON mode
        log_level = "ERROR"

    config = MixerConfig(
        disable_tf_shuffle=no_tf_shuffle,
        seed=seed,
        output_dir=output,
        save_answer_key=not no_answer_key,
        log_level=log_level,
        log_file=log_file,
    )

    if not json_output:
        console.print()
        console.print(
            Panel.fit(
                f"[bold cyan]Exam Mixer v{__version__}[/]\n"
                f"[dim]Mixing: {os.path.basename(source_path)}[/]",
                border_style="cyan",
            )
        )
        console.print()

    try:
        engine = MixerEngine(config)
        result = engine.mix_file(source_path, parse_codes(codes))
    except (ExmixError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/] {e}")
        if log_level == "DEBUG":
            console.print_exception()
        sys.exit(1)

    if json_output:
        print(json.dumps(
            result.model_dump(mode="json", exclude={"text"}),
            indent=2,
            ensure_ascii=False,
        ))
        return

    _display_result(result)
    console.print(
        f"[dim]Saved to: {Path(output) / (Path(source_path).stem + '_mixed.tex')}[/]"
    )
    console.print()


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--codes", "-c", required=True, help="Exam codes")
@click.option("--output", "-o", default="output", help="Output directory")
@click.option("--no-tf-shuffle", is_flag=True, default=False,
              help="Keep true/false statements in source order")
@click.option("--seed", default=None, type=int, help="Random seed")
@click.option("--log-level", default="WARNING", help="Logging level")
def batch(
    directory: str,
    codes: str,
    output: str,
    no_tf_shuffle: bool,
    seed: int,
    log_level: str,
):
    """Mix every .tex source in a directory."""

    sources = sorted(Path(directory).glob("*.tex"))

    if not sources:
        console.print(f"[yellow]No .tex files found in: {directory}[/]")
        return

    code_list = parse_codes(codes)

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Batch Exam Mixer[/]\n"
            f"[dim]Found {len(sources)} sources in: {directory}[/]",
            border_style="cyan",
        )
    )
    console.print()

    results = []
    errors = []

    config = MixerConfig(
        disable_tf_shuffle=no_tf_shuffle,
        seed=seed,
        output_dir=output,
        log_level=log_level,
    )
    engine = MixerEngine(config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Mixing sources...", total=len(sources))

        for source in sources:
            progress.update(task, description=f"Mixing: {source.name}")

            try:
                result = engine.mix_file(str(source), code_list)
                results.append((source.name, result))
            except Exception as e:
                errors.append((source.name, str(e)))

            progress.advance(task)

    _display_batch_summary(results, errors)


@cli.command()
@click.argument("source_path", type=click.Path(exists=True, dir_okay=False))
def inspect(source_path: str):
    """List the questions found in a source without mixing it."""

    try:
        source = Path(source_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    extractor = QuestionExtractor()
    questions = extractor.extract(source)

    console.print()
    table = Table(
        title=f"Questions in {os.path.basename(source_path)}",
        border_style="cyan",
    )
    table.add_column("#", justify="right", style="bold")
    table.add_column("Type")
    table.add_column("Command")
    table.add_column("Options", justify="right")
    table.add_column("Correct", justify="center")

    for q in questions:
        if q.type == QuestionType.SHORT_ANSWER:
            table.add_row(str(q.sequence_id), q.type.value, "-", "-", "-")
            continue

        site = parse_choices(q.full_text, q.type)
        if not site.has_command:
            table.add_row(
                str(q.sequence_id), q.type.value,
                "[red]not found[/]", "0", "[red]✗[/]",
            )
            continue

        correct = "".join(
            "[green]✓[/]" if o.is_correct else "·" for o in site.options
        )
        options = str(len(site.options))
        if site.truncated:
            options += " [yellow]+[/]"
        table.add_row(
            str(q.sequence_id), q.type.value, site.command, options, correct,
        )

    console.print(table)

    for warning in extractor.warnings:
        console.print(f"[yellow]⚠ {warning.message}[/]")
    console.print()


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _display_result(result):
    """Display per-code part counts and the report."""
    console.print()

    table = Table(title="Generated Exam Codes", border_style="cyan")
    table.add_column("Code", style="bold")
    table.add_column("Part I", justify="right")
    table.add_column("Part II", justify="right")
    table.add_column("Part III", justify="right")
    table.add_column("Total", justify="right")

    for summary in result.codes:
        counts = [str(p.count) for p in summary.parts]
        table.add_row(summary.code, *counts, str(summary.total_questions))

    console.print(table)
    console.print()

    _display_report(result.report)


def _display_report(report):
    """Display warnings as a rich table."""
    if report.is_clean:
        console.print("[green]✓ No warnings[/]")
        console.print()
        return

    table = Table(title="Warnings", border_style="yellow")
    table.add_column("Type", style="bold")
    table.add_column("Question", justify="right")
    table.add_column("Message")

    for warning in report.warnings:
        table.add_row(
            warning.type.value,
            str(warning.sequence_id) if warning.sequence_id else "-",
            warning.message,
        )

    console.print(table)
    console.print()


def _display_batch_summary(results, errors):
    """Display batch processing summary."""
    console.print()

    table = Table(title="Batch Mixing Summary", border_style="cyan")
    table.add_column("Source", style="bold")
    table.add_column("Questions", justify="right")
    table.add_column("Codes", justify="right")
    table.add_column("Warnings", justify="right")
    table.add_column("Status", justify="center")

    total_questions = 0
    total_warnings = 0

    for name, result in results:
        report = result.report
        total_questions += report.total_questions
        total_warnings += len(report.warnings)

        status = "[green]✓[/]" if report.is_clean else "[yellow]⚠[/]"
        table.add_row(
            name,
            str(report.total_questions),
            str(len(report.codes)),
            str(len(report.warnings)),
            status,
        )

    for name, error in errors:
        table.add_row(name, "-", "-", "-", "[red]✗ FAILED[/]")

    console.print(table)
    for name, error in errors:
        console.print(f"[red]✗ {name}:[/] {escape(error)}")
    console.print()
    console.print(
        f"[bold]Total:[/] {total_questions} questions from "
        f"{len(results)} sources, {total_warnings} warnings, "
        f"{len(errors)} failures"
    )
    console.print()


# ─── Entry point (for python -m exmix.cli) ────────────────────────────────────


if __name__ == "__main__":
    cli()
