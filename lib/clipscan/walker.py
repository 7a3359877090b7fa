"""
Alignment walker for clipscan.

Streams the records of a BAM file exactly once and folds each mapped read
into the accumulator of its contig:

- match-like operations (M, =, X) add one to the coverage of every base
  they span and advance the cursor;
- deletions (D) advance the cursor without adding coverage;
- soft and hard clips (S, H) count a clip site at the boundary between the
  aligned span and the clipped sequence;
- every other operation is ignored.

Left-end clips sitting on the first base of a contig and right-end clips
sitting on its last base say nothing about the assembly (the read simply
ran off the contig), so they are not counted.

Reads are consumed through `iter_alignments`, which adapts pysam segments
into plain `AlignedRead` records so the walk itself can be exercised
without a BAM file.
"""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import pysam
from loguru import logger

from .accumulator import ContigAccumulators, ContigData
from .errors import AlignmentDecodeError
from .registry import ContigRegistry

# SAM CIGAR operation codes, as returned by pysam's `cigartuples`
CIGAR_MATCH = 0
CIGAR_INS = 1
CIGAR_DEL = 2
CIGAR_REF_SKIP = 3
CIGAR_SOFT_CLIP = 4
CIGAR_HARD_CLIP = 5
CIGAR_PAD = 6
CIGAR_EQUAL = 7
CIGAR_DIFF = 8

DEFAULT_PROGRESS_INTERVAL = 500


class OpKind(str, Enum):
    """What an alignment operation does to coverage and clip counts."""

    MATCH_LIKE = "match_like"
    DELETION = "deletion"
    CLIP = "clip"
    OTHER = "other"


_OP_KINDS = {
    CIGAR_MATCH: OpKind.MATCH_LIKE,
    CIGAR_EQUAL: OpKind.MATCH_LIKE,
    CIGAR_DIFF: OpKind.MATCH_LIKE,
    CIGAR_DEL: OpKind.DELETION,
    CIGAR_SOFT_CLIP: OpKind.CLIP,
    CIGAR_HARD_CLIP: OpKind.CLIP,
}


def classify_operation(code: int) -> OpKind:
    """Map a SAM CIGAR operation code to the kind of effect it has."""
    return _OP_KINDS.get(code, OpKind.OTHER)


@dataclass(frozen=True, slots=True)
class AlignedRead:
    """The parts of a BAM record that the walker needs."""

    reference_id: int
    reference_start: int
    cigar: tuple[tuple[int, int], ...]
    is_unmapped: bool = False


@dataclass(slots=True)
class ScanResult:
    """Accumulators and read tallies left behind by one pass over a BAM."""

    registry: ContigRegistry
    accumulators: ContigAccumulators
    total_records: int = 0
    mapped_reads: int = 0
    unmapped_reads: int = 0


def walk_alignment(read: AlignedRead, data: ContigData) -> None:
    """
    Apply one mapped read to the accumulator of its contig.

    Only the first operation of the CIGAR counts as a left-end clip. A clip
    anywhere else counts as a right-end clip at the last base covered so far,
    so a hard clip stacked on a soft clip is counted once per operation.

    Args:
        read: A mapped read
        data: Accumulator for the contig the read is mapped to

    Raises:
        AlignmentDecodeError: If the alignment runs outside the contig
    """
    cursor = read.reference_start
    if cursor < 0:
        msg = f"Mapped read on contig '{data.name}' has negative start position {cursor}"
        raise AlignmentDecodeError(msg)

    for index, (code, length) in enumerate(read.cigar):
        kind = classify_operation(code)

        if kind is OpKind.MATCH_LIKE:
            data.add_coverage(cursor, cursor + length)
            cursor += length

        elif kind is OpKind.DELETION:
            cursor += length

        elif kind is OpKind.CLIP:
            if index == 0:
                if cursor != 0:
                    data.add_clipping(cursor)
            elif cursor != data.length:
                data.add_clipping(max(cursor - 1, 0))


def process_read(read: AlignedRead, accumulators: ContigAccumulators) -> bool:
    """
    Fold one record into the accumulators.

    Returns:
        False if the record was unmapped and skipped, True otherwise
    """
    if read.is_unmapped:
        return False

    contig = accumulators.registry.by_tid(read.reference_id)
    walk_alignment(read, accumulators.get_or_create(contig))
    return True


def iter_alignments(bam: pysam.AlignmentFile) -> Iterator[AlignedRead]:
    """
    Stream every record of an open BAM file as an AlignedRead.

    Reads sequentially with `until_eof=True`, so no index is required and
    unmapped reads without coordinates are included.

    Raises:
        AlignmentDecodeError: If htslib cannot decode the next record
    """
    try:
        for segment in bam.fetch(until_eof=True):
            yield AlignedRead(
                reference_id=segment.reference_id,
                reference_start=segment.reference_start,
                cigar=tuple(segment.cigartuples or ()),
                is_unmapped=segment.is_unmapped,
            )
    except (OSError, ValueError) as e:
        msg = f"Failed to read alignments: {e}"
        raise AlignmentDecodeError(msg) from e


def scan_reads(
    reads: Iterable[AlignedRead],
    registry: ContigRegistry,
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
    on_progress: Callable[[int], None] | None = None,
) -> ScanResult:
    """
    Fold a stream of reads into fresh accumulators.

    Args:
        reads: Records in stream order
        registry: Contigs declared in the BAM header
        progress_interval: How many records to process between progress callbacks
        on_progress: Called with the running record count every `progress_interval` records

    Returns:
        ScanResult holding the filled accumulators and read tallies
    """
    result = ScanResult(registry=registry, accumulators=ContigAccumulators(registry))

    for read in reads:
        result.total_records += 1
        if process_read(read, result.accumulators):
            result.mapped_reads += 1
        else:
            result.unmapped_reads += 1

        if on_progress is not None and result.total_records % progress_interval == 0:
            on_progress(result.total_records)

    return result


def scan_bam(
    bam_path: Path,
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
    on_progress: Callable[[int], None] | None = None,
) -> ScanResult:
    """
    Read a BAM file once and accumulate coverage and clip sites per contig.

    Args:
        bam_path: BAM of long reads mapped back onto their own assembly
        progress_interval: How many records to process between progress callbacks
        on_progress: Called with the running record count every `progress_interval` records

    Returns:
        ScanResult holding the filled accumulators and read tallies

    Raises:
        AlignmentDecodeError: If the file cannot be opened or a record cannot be decoded
    """
    logger.info(f"Opening BAM file: {bam_path}")
    try:
        bam = pysam.AlignmentFile(str(bam_path), "rb")
    except (OSError, ValueError) as e:
        msg = f"Failed to read alignments from {bam_path}: {e}"
        raise AlignmentDecodeError(msg) from e

    with bam:
        registry = ContigRegistry.from_header(bam.header)
        logger.info(f"BAM header declares {len(registry)} contig(s)")
        result = scan_reads(
            iter_alignments(bam),
            registry,
            progress_interval=progress_interval,
            on_progress=on_progress,
        )

    logger.success(
        f"Processed {result.total_records} record(s): {result.mapped_reads} mapped, "
        f"{result.unmapped_reads} unmapped, {len(result.accumulators)} contig(s) with reads",
    )
    return result
