"""
clipscan: find likely mis-assemblies in a long-read assembly.

Long reads are mapped back onto the assembly built from them. Positions
where many reads are clipped instead of aligned point to structural breaks,
and stretches that no read covers point to gaps or collapsed repeats.

Modules:
    registry: Contig names and lengths from the BAM header
    accumulator: Per-contig coverage arrays and clip-site counts
    walker: Single streaming pass over the BAM records
    reporters: Clip-site and zero-coverage report tables
    config: Validated run configuration
    detect: End-to-end run tying the pieces together
"""

from .accumulator import ContigAccumulators, ContigData
from .config import DetectionConfig
from .detect import run_detection
from .errors import AlignmentDecodeError, ClipscanError, MissingContigError, ReportWriteError
from .registry import ContigRecord, ContigRegistry
from .summary import RunSummary
from .walker import AlignedRead, OpKind, classify_operation, scan_bam, walk_alignment

__version__ = "0.1.0"

__all__ = [
    "AlignedRead",
    "AlignmentDecodeError",
    "ClipscanError",
    "ContigAccumulators",
    "ContigData",
    "ContigRecord",
    "ContigRegistry",
    "DetectionConfig",
    "MissingContigError",
    "OpKind",
    "ReportWriteError",
    "RunSummary",
    "classify_operation",
    "run_detection",
    "scan_bam",
    "walk_alignment",
]
