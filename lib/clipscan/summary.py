"""Run summary for clipscan, written as JSON alongside the reports on request."""

from pathlib import Path

from pydantic import BaseModel, Field


class RunSummary(BaseModel):
    """Counts describing one pass over a BAM file and the reports it produced."""

    bam_path: Path
    total_records: int = Field(ge=0, description="Records read from the BAM file")
    mapped_reads: int = Field(ge=0, description="Records folded into coverage")
    unmapped_reads: int = Field(ge=0, description="Unmapped records skipped")
    contigs_in_header: int = Field(ge=0, description="Contigs declared in the header")
    contigs_with_reads: int = Field(ge=0, description="Contigs with at least one mapped read")
    clip_sites: int = Field(ge=0, description="Distinct clip sites observed")
    clip_rows: int = Field(ge=0, description="Clip sites that passed the filters")
    zero_coverage_intervals: int = Field(ge=0, description="Zero-coverage intervals reported")
    zero_coverage_bases: int = Field(ge=0, description="Bases inside zero-coverage intervals")
