#!/usr/bin/env python3
"""
Code Emulator - heuristic runner and grader for coding exercises.
CLI interface for running snippets, grading exercises and listing languages.
"""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from config import Config
from emulator.dto import Exercise, RunReport, Verdict
from emulator.profiles import available_profiles, resolve_profile
from emulator.scheduler import MonotonicClock, Scheduler, VirtualClock
from emulator.workspace import EmulatorWorkspace

console = Console()


def load_exercise(path: Path) -> Exercise:
    """Load an exercise JSON document.

    Expected keys: "id", "language", "starter" and optionally "expected".
    """
    data = json.loads(path.read_text(encoding=Config.EXERCISE_FILE_ENCODING))
    starter = data.get("starter")
    expected = data.get("expected")
    return Exercise(
        exercise_id=str(data.get("id") or path.stem),
        language_tag=str(data.get("language") or Config.DEFAULT_LANGUAGE),
        starter_source="" if starter is None else str(starter),
        expected_output=None if expected is None else str(expected),
    )


def run_exercise(exercise: Exercise, fast: bool) -> RunReport:
    """Open an exercise in a fresh workspace and drive one run to completion."""
    reports = []
    completed = []

    scheduler = Scheduler(VirtualClock() if fast else MonotonicClock())
    workspace = EmulatorWorkspace(
        scheduler=scheduler,
        on_complete=completed.append,
        observers=[reports.append],
    )
    session = workspace.open(exercise)

    label = session.profile.display_name
    with console.status(f"[cyan]Building {label} snippet...[/cyan]"):
        session.run()
        while not session.is_idle:
            scheduler.run_next()

    report = reports[-1]
    render_report(report)

    # Delivers the completion notification, if the run passed
    scheduler.run_until_idle()
    if completed:
        console.print("[dim]Exercise marked complete.[/dim]")
    return report


def render_report(report: RunReport):
    """Print the session log and verdict."""
    console.print(
        Panel(
            Text("\n".join(report.log)),
            title=f"[bold]{report.language.upper()}[/bold]",
            border_style="green" if report.passed else "red",
        )
    )
    if report.verdict is Verdict.SUCCESS:
        console.print("[bold green]✓ Output accepted[/bold green]")
    else:
        console.print("[bold red]✗ Output does not match the expected result[/bold red]")


@click.group()
@click.version_option(version="0.1.0", prog_name="Code Emulator")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose):
    """Code Emulator - predict and grade the output of exercise snippets."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else Config.LOG_LEVEL,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--language", "-l", default=None, help="Language tag (default: from file extension)")
@click.option("--expected", "-e", default=None, help="Expected output to grade against")
@click.option("--fast", is_flag=True, help="Skip the simulated delays")
def run(file, language, expected, fast):
    """Run a source FILE through the emulator."""
    try:
        if language is None:
            language = _language_from_extension(file.suffix)

        exercise = Exercise(
            exercise_id=file.stem,
            language_tag=language,
            starter_source=file.read_text(encoding=Config.EXERCISE_FILE_ENCODING),
            expected_output=expected,
        )
        report = run_exercise(exercise, fast)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}\n")
        raise click.Abort()

    if not report.passed:
        sys.exit(1)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--fast", is_flag=True, help="Skip the simulated delays")
def exercise(file, fast):
    """Grade an exercise JSON FILE ({id, language, starter, expected})."""
    try:
        loaded = load_exercise(file)
        console.print(f"\n[bold cyan]Exercise {escape(loaded.exercise_id)}[/bold cyan]")
        if loaded.expected_output:
            console.print(f"[dim]Expected output: {escape(loaded.expected_output)}[/dim]")
        report = run_exercise(loaded, fast)

    except (json.JSONDecodeError, AttributeError) as e:
        console.print(f"\n[bold red]Error:[/bold red] Invalid exercise file: {escape(str(e))}\n")
        raise click.Abort()
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}\n")
        raise click.Abort()

    if not report.passed:
        sys.exit(1)


@cli.command()
def languages():
    """List supported languages."""
    table = Table(title="\n💻 Supported Languages")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("File", style="magenta")
    table.add_column("Build", style="green")
    table.add_column("Engine", style="yellow")

    for profile in available_profiles():
        table.add_row(
            profile.id,
            profile.display_name,
            profile.source_file,
            f"{profile.compile_delay:.1f}s",
            profile.engine.value,
        )

    console.print(table)
    console.print(f"\nTotal: {len(available_profiles())} languages\n")


@cli.command()
@click.argument("language")
def helpers(language):
    """Show the quick-insert syntax helpers for LANGUAGE."""
    profile = resolve_profile(language)
    console.print(f"\n[bold cyan]{profile.display_name}[/bold cyan] quick inserts:\n")
    console.print("  " + "  ".join(f"[magenta]{escape(token)}[/magenta]" for token in profile.syntax_helpers))
    console.print()


def _language_from_extension(suffix: str) -> str:
    for profile in available_profiles():
        if profile.file_extension == suffix.lower():
            return profile.id
    return Config.DEFAULT_LANGUAGE


if __name__ == "__main__":
    cli()
