"""
Typer application instance for the clipscan CLI.

This module defines the main Typer app and any shared configuration.
Commands are registered via the commands subpackage.
"""

import typer

app = typer.Typer(
    name="clipscan",
    help="clipscan: find clipping hotspots and coverage gaps in self-mapped long-read assemblies.",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main() -> None:
    """
    Find likely mis-assemblies from long reads mapped back onto their own assembly.

    Each subcommand works on a BAM file of reads mapped to contigs.
    """
