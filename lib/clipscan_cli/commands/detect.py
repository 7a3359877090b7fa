# ruff: noqa: PLR0913, FBT002
"""
The 'detect' command for the clipscan CLI.

Streams a BAM of long reads mapped onto their own assembly and writes the
clipping and zero-coverage reports.

Note: We intentionally do NOT use `from __future__ import annotations` here
because Typer needs to introspect the type annotations at runtime.
"""

from pathlib import Path
from typing import Annotated

import typer
from clipscan import ClipscanError, DetectionConfig, RunSummary, run_detection
from clipscan_cli.app import app
from clipscan_cli.utils import configure_logging, console, error, success, warning
from pydantic import ValidationError
from rich.progress import Progress, SpinnerColumn, TextColumn

PANEL_FILTERING = "Filtering"
PANEL_OUTPUT = "Output & Logging"


def _validation_messages(exc: ValidationError) -> list[str]:
    """Flatten a pydantic ValidationError into one readable line per problem."""
    messages = []
    for err in exc.errors():
        message = str(err["msg"]).removeprefix("Value error, ")
        location = ".".join(str(part) for part in err["loc"])
        messages.append(f"{location}: {message}" if location else message)
    return messages


def _print_summary(summary: RunSummary) -> None:
    console.print("\n[bold]Summary:[/bold]")
    console.print(f"  • Records read: {summary.total_records:,}")
    console.print(f"  • Mapped reads: {summary.mapped_reads:,}")
    console.print(f"  • Unmapped reads skipped: {summary.unmapped_reads:,}")
    console.print(
        f"  • Contigs with reads: {summary.contigs_with_reads:,} of {summary.contigs_in_header:,}",
    )
    console.print(f"  • Clip sites reported: {summary.clip_rows:,} of {summary.clip_sites:,}")
    console.print(
        f"  • Zero-coverage intervals: {summary.zero_coverage_intervals:,} "
        f"({summary.zero_coverage_bases:,} bp)",
    )


@app.command("detect")
def detect_errors(
    bam_file: Annotated[
        Path,
        typer.Argument(
            help="BAM file of long reads mapped onto an assembly made from these same reads.",
            dir_okay=False,
        ),
    ],
    output_prefix: Annotated[
        str,
        typer.Argument(
            help="Prefix for the output files (<prefix>-clipping.txt, <prefix>-zero_cov.txt).",
        ),
    ],
    min_dist_to_end: Annotated[
        int,
        typer.Option(
            "--min-dist-to-end",
            "-d",
            min=0,
            help="Ignore clip sites this close to either contig end.",
            rich_help_panel=PANEL_FILTERING,
        ),
    ] = 100,
    min_clipping_ratio: Annotated[
        float,
        typer.Option(
            "--clipping-ratio",
            "-r",
            min=0.0,
            help="Minimum ratio of clipped reads to covering reads to report a clip site.",
            rich_help_panel=PANEL_FILTERING,
        ),
    ] = 1.0,
    just_do_it: Annotated[
        bool,
        typer.Option(
            "--just-do-it",
            help="Confirm the BAM maps long reads onto an assembly built from those same reads.",
        ),
    ] = False,
    summary_json: Annotated[
        Path | None,
        typer.Option(
            "--summary-json",
            "-s",
            dir_okay=False,
            help="Also write a JSON summary of the run to this path.",
            rich_help_panel=PANEL_OUTPUT,
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v, -vv, -vvv)",
            rich_help_panel=PANEL_OUTPUT,
        ),
    ] = 0,
) -> None:
    """
    [bold cyan]Detect[/bold cyan] likely assembly errors from read clipping and coverage gaps.

    Reports positions where at least --clipping-ratio clipped reads are found
    per covering read, and every stretch of the assembly that no read covers.

    [bold cyan]Example:[/bold cyan]

    [green]$ clipscan detect reads_vs_assembly.bam results/sample --just-do-it[/green]
    """
    configure_logging(verbose)

    try:
        config = DetectionConfig(
            bam_path=bam_file,
            output_prefix=output_prefix,
            min_dist_to_end=min_dist_to_end,
            min_clipping_ratio=min_clipping_ratio,
            confirmed=just_do_it,
            summary_json=summary_json,
        )
    except ValidationError as e:
        for message in _validation_messages(e):
            error(message)
        raise typer.Exit(1) from e

    console.print(f"[cyan]BAM file:[/cyan] {config.bam_path}")
    console.print(f"[cyan]Length of contig ends to ignore:[/cyan] {config.min_dist_to_end}")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("[cyan]Processing reads...", total=None)
            summary = run_detection(
                config,
                on_progress=lambda count: progress.update(
                    task,
                    description=f"[cyan]Processed {count:,} reads",
                ),
            )
    except ClipscanError as e:
        error(str(e))
        raise typer.Exit(1) from e

    if summary.mapped_reads == 0:
        warning("No mapped reads were found; both reports contain only their header.")

    _print_summary(summary)
    success(f"Wrote clipping report to {config.clipping_path}")
    success(f"Wrote zero-coverage report to {config.zero_coverage_path}")
    if config.summary_json is not None:
        success(f"Wrote run summary to {config.summary_json}")
