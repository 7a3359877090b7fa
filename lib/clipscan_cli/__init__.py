"""
Command-line interface for clipscan.

Usage:
    clipscan detect reads_vs_assembly.bam results/sample --just-do-it
    clipscan --help
"""

import sys

import typer

from clipscan_cli.app import app

# Registers the `detect` command on the app
from clipscan_cli.commands import detect  # noqa: F401
from clipscan_cli.utils import err_console

__all__ = ["app", "main"]


def main() -> None:
    """Run the clipscan application, exiting 130 on Ctrl-C."""
    try:
        app()
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except typer.Abort:
        sys.exit(1)
