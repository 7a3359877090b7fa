"""
Clip reporter for clipscan.

Turns the clip sites gathered while streaming the BAM into error candidates.
A site is reported when enough of the reads at that position are clipped
rather than aligned through it, and when it sits far enough away from both
contig ends that the clipping cannot be explained by reads running off the
contig.

A site with clipped reads but no coverage at all gets an infinite ratio and
always passes the ratio threshold.
"""

import math
from collections.abc import Iterable, Iterator

import polars as pl
from pydantic import BaseModel, Field

from ..accumulator import ContigData

CLIPPING_SCHEMA = {
    "contig": pl.Utf8,
    "length": pl.Int64,
    "pos": pl.Int64,
    "relative_pos": pl.Float64,
    "cov": pl.Int64,
    "clipping": pl.Int64,
    "clipping_ratio": pl.Float64,
}


class ClipRow(BaseModel):
    """A clip site that passed the distance and ratio filters."""

    contig: str
    length: int = Field(ge=0, description="Contig length")
    pos: int = Field(ge=0, description="0-based clip site position")
    relative_pos: float = Field(ge=0, le=1, description="pos / length")
    cov: int = Field(ge=0, description="Coverage at the clip site")
    clipping: int = Field(gt=0, description="Reads clipped at the site")
    clipping_ratio: float = Field(ge=0, description="clipping / cov, inf when cov is 0")


def clipping_ratio(clipping: int, cov: int) -> float:
    """Ratio of clipped reads to covering reads, infinite when nothing covers the site."""
    if cov == 0:
        return math.inf
    return clipping / cov


def passes_filters(
    pos: int,
    length: int,
    ratio: float,
    min_dist_to_end: int,
    min_clipping_ratio: float,
) -> bool:
    """Check a clip site against the ratio threshold and both end distances."""
    return (
        ratio >= min_clipping_ratio
        and pos > min_dist_to_end
        and length - pos > min_dist_to_end
    )


def report_contig_clipping(
    data: ContigData,
    min_dist_to_end: int,
    min_clipping_ratio: float,
) -> Iterator[ClipRow]:
    """Yield the qualifying clip sites of one contig in ascending position order."""
    length = data.length
    for pos in sorted(data.clip_sites):
        clipping = data.clip_sites[pos]
        cov = int(data.coverage[pos])
        ratio = clipping_ratio(clipping, cov)
        if not passes_filters(pos, length, ratio, min_dist_to_end, min_clipping_ratio):
            continue
        yield ClipRow(
            contig=data.name,
            length=length,
            pos=pos,
            relative_pos=pos / length,
            cov=cov,
            clipping=clipping,
            clipping_ratio=ratio,
        )


def report_clipping(
    contigs: Iterable[ContigData],
    min_dist_to_end: int,
    min_clipping_ratio: float,
) -> list[ClipRow]:
    """
    Collect the clip sites worth reporting across all contigs.

    Args:
        contigs: Completed accumulators, in the order rows should be reported
        min_dist_to_end: Sites at or within this distance of a contig end are dropped
        min_clipping_ratio: Minimum clipped-to-covering read ratio

    Returns:
        One ClipRow per qualifying site
    """
    return [
        row
        for data in contigs
        for row in report_contig_clipping(data, min_dist_to_end, min_clipping_ratio)
    ]


def clipping_table(rows: list[ClipRow]) -> pl.DataFrame:
    """Lay clip rows out as the clipping report table."""
    return pl.DataFrame(
        {column: [getattr(row, column) for row in rows] for column in CLIPPING_SCHEMA},
        schema=CLIPPING_SCHEMA,
    )
