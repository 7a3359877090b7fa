"""
Report builders for clipscan.

Both reporters run once over the completed accumulators and produce an
independent tab-delimited table:

    clipping: clip sites whose clipped-to-covering read ratio passes a threshold
    zero_coverage: maximal runs of bases no read aligns to
"""

from pathlib import Path

import polars as pl
from loguru import logger

from ..errors import ReportWriteError
from .clipping import ClipRow, clipping_table, report_clipping
from .zero_coverage import ZeroCoverageInterval, report_zero_coverage, zero_coverage_table

__all__ = [
    "ClipRow",
    "ZeroCoverageInterval",
    "clipping_table",
    "report_clipping",
    "report_zero_coverage",
    "write_table",
    "zero_coverage_table",
]


def write_table(table: pl.DataFrame, path: Path) -> None:
    """
    Write a report table as tab-delimited text with a header row.

    Raises:
        ReportWriteError: If the file cannot be created or written
    """
    try:
        table.write_csv(path, separator="\t")
    except OSError as e:
        raise ReportWriteError(path, e) from e
    logger.info(f"Wrote {table.height} row(s) to {path}")
