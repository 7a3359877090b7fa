"""
Zero-coverage reporter for clipscan.

Run-length encodes each contig's coverage array into the maximal half-open
intervals [start, end) where no read aligns. An interval still open at the
end of the array closes at the contig length.
"""

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
import polars as pl

from ..accumulator import ContigData

# Bases compared per step of the zero-coverage scan
ZERO_SCAN_CHUNK = 1 << 16

ZERO_COVERAGE_SCHEMA = {
    "contig": pl.Utf8,
    "length": pl.Int64,
    "range": pl.Utf8,
    "range_size": pl.Int64,
}


@dataclass(frozen=True, slots=True)
class ZeroCoverageInterval:
    """A maximal run of zero-coverage bases on one contig."""

    contig: str
    length: int
    start: int
    end: int

    def __post_init__(self) -> None:
        assert 0 <= self.start < self.end <= self.length, (
            f"Invalid interval [{self.start}, {self.end}) on contig of length {self.length}"
        )

    @property
    def size(self) -> int:
        return self.end - self.start

    @property
    def range_label(self) -> str:
        return f"{self.start}-{self.end}"


def zero_coverage_intervals(
    data: ContigData,
    chunk_size: int = ZERO_SCAN_CHUNK,
) -> list[ZeroCoverageInterval]:
    """
    Find every maximal zero-coverage interval on a contig.

    The coverage array is scanned in fixed-size chunks, so the scratch
    memory stays bounded by `chunk_size` however long the contig is. A run
    still open at the end of a chunk carries over into the next one.

    Args:
        data: Completed accumulator for the contig
        chunk_size: Number of bases compared per step

    Returns:
        Non-overlapping intervals in ascending order; empty if every base is covered
    """
    intervals: list[ZeroCoverageInterval] = []
    run_start: int | None = None

    for offset in range(0, data.length, chunk_size):
        is_zero = data.coverage[offset : offset + chunk_size] == 0

        # positions within the chunk where a zero run opens or closes
        flips = np.flatnonzero(is_zero[1:] != is_zero[:-1]) + 1
        if bool(is_zero[0]) != (run_start is not None):
            flips = np.concatenate(([0], flips))

        for flip in flips.tolist():
            if run_start is None:
                run_start = offset + flip
            else:
                intervals.append(_interval(data, run_start, offset + flip))
                run_start = None

    if run_start is not None:
        intervals.append(_interval(data, run_start, data.length))

    return intervals


def _interval(data: ContigData, start: int, end: int) -> ZeroCoverageInterval:
    return ZeroCoverageInterval(contig=data.name, length=data.length, start=start, end=end)


def report_zero_coverage(contigs: Iterable[ContigData]) -> list[ZeroCoverageInterval]:
    """Collect zero-coverage intervals across all contigs, contig by contig."""
    return [interval for data in contigs for interval in zero_coverage_intervals(data)]


def zero_coverage_table(intervals: list[ZeroCoverageInterval]) -> pl.DataFrame:
    """Lay intervals out as the zero-coverage report table."""
    return pl.DataFrame(
        {
            "contig": [interval.contig for interval in intervals],
            "length": [interval.length for interval in intervals],
            "range": [interval.range_label for interval in intervals],
            "range_size": [interval.size for interval in intervals],
        },
        schema=ZERO_COVERAGE_SCHEMA,
    )
