"""
End-to-end detection run for clipscan.

Streams the BAM once, then runs the clip and zero-coverage reporters over
the completed accumulators and writes both tables next to each other under
the configured output prefix.
"""

from collections.abc import Callable

from loguru import logger

from .config import DetectionConfig
from .errors import ReportWriteError
from .reporters import (
    clipping_table,
    report_clipping,
    report_zero_coverage,
    write_table,
    zero_coverage_table,
)
from .summary import RunSummary
from .walker import scan_bam


def run_detection(
    config: DetectionConfig,
    on_progress: Callable[[int], None] | None = None,
) -> RunSummary:
    """
    Find clipping hotspots and zero-coverage gaps in a self-mapped assembly.

    Args:
        config: Validated run configuration
        on_progress: Called with the running record count while the BAM is streamed

    Returns:
        RunSummary describing the pass and the reports written

    Raises:
        AlignmentDecodeError: If the BAM cannot be read or a record does not fit its contig
        ReportWriteError: If a report cannot be written
    """
    logger.info(f"Length of contig ends to ignore: {config.min_dist_to_end}")
    logger.info(f"Minimum clipping ratio: {config.min_clipping_ratio}")

    scan = scan_bam(
        config.bam_path,
        progress_interval=config.progress_interval,
        on_progress=on_progress,
    )
    contigs = list(scan.accumulators)

    clip_rows = report_clipping(
        contigs,
        min_dist_to_end=config.min_dist_to_end,
        min_clipping_ratio=config.min_clipping_ratio,
    )
    write_table(clipping_table(clip_rows), config.clipping_path)

    intervals = report_zero_coverage(contigs)
    write_table(zero_coverage_table(intervals), config.zero_coverage_path)

    summary = RunSummary(
        bam_path=config.bam_path,
        total_records=scan.total_records,
        mapped_reads=scan.mapped_reads,
        unmapped_reads=scan.unmapped_reads,
        contigs_in_header=len(scan.registry),
        contigs_with_reads=len(scan.accumulators),
        clip_sites=sum(len(data.clip_sites) for data in contigs),
        clip_rows=len(clip_rows),
        zero_coverage_intervals=len(intervals),
        zero_coverage_bases=sum(interval.size for interval in intervals),
    )

    if config.summary_json is not None:
        try:
            config.summary_json.write_text(summary.model_dump_json(indent=2))
        except OSError as e:
            raise ReportWriteError(config.summary_json, e) from e
        logger.info(f"Wrote run summary to {config.summary_json}")

    return summary
