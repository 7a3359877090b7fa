"""
Exceptions raised by the clipscan library.

Everything raised here is fatal for a run: the accumulators are mutated in
place while the BAM is streamed, so a failure part-way through leaves them
in a state that cannot be reported on.
"""


class ClipscanError(Exception):
    """Base class for clipscan errors."""


class AlignmentDecodeError(ClipscanError):
    """A BAM record could not be decoded or does not fit its contig."""


class MissingContigError(AlignmentDecodeError):
    """A record refers to a contig that the BAM header does not declare."""


class ReportWriteError(ClipscanError):
    """A report table could not be written to disk."""

    def __init__(self, path: object, reason: object) -> None:
        self.path = path
        super().__init__(f"Failed to write report {path}: {reason}")
