"""
cadence.cli - Typer CLI entry point.

Provides subcommands for analyzing recordings and inspecting transcripts.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from cadence import __version__
from cadence.analyze.scoring import slope_label
from cadence.config import (
    CONFIG_FILENAME,
    AnalysisConfig,
    build_config,
    create_default_config,
    load_config,
    write_config,
)
from cadence.exceptions import CadenceError, DependencyError
from cadence.logging import configure_logging
from cadence.models import DeliveryReport
from cadence.utils import format_duration, format_timestamp

app = typer.Typer(
    name="cadence",
    help="Speech delivery metrics engine.\n\n"
    "Measures energy, emphasis, pitch variation, pauses, pace and filler "
    "words from a recorded speech sample.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"cadence {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Cadence - speech delivery metrics engine."""
    pass


def _resolve_config(config_path: Path | None, profile: str | None) -> AnalysisConfig:
    if config_path is not None:
        return load_config(config_path, profile=profile)
    default_file = Path.cwd() / CONFIG_FILENAME
    if default_file.exists():
        return load_config(default_file, profile=profile)
    return build_config(profile=profile)


def _fmt(value: float | int | None, suffix: str = "") -> str:
    return "-" if value is None else f"{value}{suffix}"


def print_report(report: DeliveryReport) -> None:
    """Render a report summary as Rich tables."""
    table = Table(title="Delivery Metrics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Duration", format_duration(report.duration_sec))
    table.add_row("Energy variability", _fmt(report.variability))
    table.add_row("Emphasis hotspots", str(len(report.hotspots)))
    table.add_row("Pitch range", _fmt(report.pitch.range_hz, " Hz"))
    table.add_row("Pitch variance", _fmt(report.pitch.variance_hz2, " Hz²"))
    table.add_row("Monotony index", _fmt(report.pitch.monotony_index))
    table.add_row("Voiced frames", str(report.pitch.valid_count))
    if report.eos_average_slope_hz_per_sec is not None:
        table.add_row("Avg. ending slope", _fmt(report.eos_average_slope_hz_per_sec, " Hz/s"))
    if report.pauses is not None:
        table.add_row("Avg. gap", _fmt(report.pauses.avg_gap_sec, "s"))
        table.add_row("Median gap", _fmt(report.pauses.median_gap_sec, "s"))
        table.add_row("Medium / long pauses", f"{report.pauses.medium_count} / {report.pauses.long_count}")
        table.add_row("Pause ratio", _fmt(report.pauses.ratio_percent, "%"))
        table.add_row("Tempo std. dev.", _fmt(report.tempo_std_dev_wps, " w/s"))
    table.add_row("Fillers", str(report.fillers.total))
    if report.scores is not None:
        table.add_row("Pace", f"{_fmt(report.scores.pace_wpm, ' wpm')} ({report.scores.pace_label or '-'})")
        table.add_row("Confidence score", _fmt(report.scores.confidence_score))

    console.print(table)

    if report.hotspots:
        spots = Table(title="Emphasis Hotspots")
        spots.add_column("Start", style="cyan")
        spots.add_column("End", style="cyan")
        spots.add_column("Word", style="yellow")
        for h in report.hotspots:
            spots.add_row(format_timestamp(h.start_sec), format_timestamp(h.end_sec), h.label or "-")
        console.print(spots)

    if report.eos_segments:
        endings = Table(title="Sentence Endings")
        endings.add_column("Start", style="cyan")
        endings.add_column("End", style="cyan")
        endings.add_column("Slope", style="green")
        endings.add_column("Ending", style="yellow")
        for seg in report.eos_segments:
            endings.add_row(
                format_timestamp(seg.start_sec),
                format_timestamp(seg.end_sec),
                f"{seg.slope_hz_per_sec} Hz/s",
                slope_label(seg.slope_hz_per_sec),
            )
        console.print(endings)


@app.command("analyze")
def analyze_cmd(
    audio: Path = typer.Argument(..., help="Audio file to analyze"),
    words_file: Path | None = typer.Option(None, "--words", "-w", help="Word timestamps JSON"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Config YAML file"),
    profile: str | None = typer.Option(None, "--profile", "-p", help="Analysis profile"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write report JSON here"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Analyze delivery metrics for one recording."""
    configure_logging(verbose)

    if not audio.exists():
        console.print(f"[red]Error: Audio file not found: {audio}[/red]")
        raise typer.Exit(1)

    from cadence.analyze.engine import DeliveryAnalyzer
    from cadence.decode.audio import decode_file
    from cadence.io import load_words, write_json

    try:
        config = _resolve_config(config_path, profile)
        words = load_words(words_file) if words_file else None

        with console.status("[cyan]Analyzing delivery...[/cyan]"):
            sample = decode_file(audio, sample_rate=config.sample_rate_hz)
            with DeliveryAnalyzer(config) as analyzer:
                report = analyzer.analyze(sample, words=words)
    except DependencyError as e:
        console.print(f"[red]Error: {e}[/red]")
        if e.install_hint:
            console.print(f"[dim]{e.install_hint}[/dim]")
        raise typer.Exit(1)
    except (CadenceError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    print_report(report)

    if output:
        write_json(output, report.to_dict())
        console.print(f"\n[green]✓[/green] Report written to {output}")


@app.command("fillers")
def fillers_cmd(
    words_file: Path = typer.Argument(..., help="Word tokens JSON"),
) -> None:
    """Count filler words in a transcript."""
    from cadence.analyze.fillers import detect_fillers
    from cadence.io import load_words

    if not words_file.exists():
        console.print(f"[red]Error: File not found: {words_file}[/red]")
        raise typer.Exit(1)

    try:
        words = load_words(words_file)
    except (CadenceError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    summary = detect_fillers(words)

    table = Table(title="Filler Words")
    table.add_column("Filler", style="cyan")
    table.add_column("Count", style="green")
    for kind, count in summary.by_type.items():
        table.add_row(kind, str(count))
    console.print(table)

    console.print(f"Total: {summary.total}")
    if summary.most_common:
        console.print(f"Most common: [yellow]{summary.most_common}[/yellow]")


@app.command("validate")
def validate_cmd(
    words_file: Path = typer.Argument(..., help="Word tokens JSON"),
) -> None:
    """Check a word token file for timing problems."""
    from cadence.io import load_words
    from cadence.validation import validate_words

    try:
        words = load_words(words_file)
    except (CadenceError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    result = validate_words(words)
    console.print(f"{result['timed_count']} timed, {result['untimed_count']} untimed word(s)")
    for warning in result["warnings"]:
        console.print(f"[yellow]⚠ {warning}[/yellow]")

    if not result["valid"]:
        raise typer.Exit(1)
    console.print("[green]✓ Words are usable for timing analysis[/green]")


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(Path(CONFIG_FILENAME), help="Where to write the config"),
    profile: str = typer.Option("default", "--profile", "-p", help="Profile: default, fast, high-voice"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a config file with every analysis parameter spelled out."""
    if path.exists() and not force:
        console.print(f"[red]Error: {path} already exists[/red]")
        raise typer.Exit(1)

    try:
        config = create_default_config(profile)
    except CadenceError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    write_config(config, path)
    console.print(f"[green]✓[/green] Wrote {path} with profile '{profile}'")


@app.command("doctor")
def run_doctor() -> None:
    """Check decoding dependencies."""
    from cadence.validation import check_ffmpeg, check_soundfile

    table = Table(title="Dependency Status")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Version/Details")

    all_passed = True

    try:
        versions = check_soundfile()
        table.add_row("libsndfile", "✓ Installed", versions["libsndfile_version"])
    except DependencyError as e:
        table.add_row("libsndfile", "✗ Missing", e.install_hint or "")
        all_passed = False

    try:
        versions = check_ffmpeg()
        table.add_row("FFmpeg", "✓ Installed", versions.get("ffmpeg_version", "unknown"))
    except DependencyError as e:
        table.add_row("FFmpeg", "✗ Missing", e.install_hint or "")
        all_passed = False

    console.print(table)

    if all_passed:
        console.print("\n[green]✓ All checks passed[/green]")
    else:
        console.print("\n[yellow]⚠ Some checks failed[/yellow]")
        console.print("[dim]WAV/FLAC/OGG still decode without FFmpeg; webm, mp3 and m4a need it[/dim]")
        raise typer.Exit(1)
