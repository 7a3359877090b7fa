"""
Per-contig accumulators for clipscan.

Each contig that receives at least one mapped read gets a ContigData holding
a dense per-base coverage array and a sparse map of clip sites. Coverage is
dense because nearly every base needs a counter; clip sites are sparse
because clipping events are rare relative to contig length.
"""

from collections.abc import Iterator

import numpy as np

from .errors import AlignmentDecodeError
from .registry import ContigRecord, ContigRegistry

COVERAGE_DTYPE = np.uint32


class ContigData:
    """Coverage counters and clip counts for a single contig."""

    __slots__ = ("clip_sites", "coverage", "name")

    def __init__(self, name: str, length: int) -> None:
        self.name = name
        self.coverage = np.zeros(length, dtype=COVERAGE_DTYPE)
        self.clip_sites: dict[int, int] = {}

    @property
    def length(self) -> int:
        return int(self.coverage.shape[0])

    def add_coverage(self, start: int, end: int) -> None:
        """
        Add one read's worth of coverage to every base in [start, end).

        Raises:
            AlignmentDecodeError: If the span falls outside the contig
        """
        if start < 0 or end > self.length or start > end:
            msg = (
                f"Aligned span [{start}, {end}) falls outside contig "
                f"'{self.name}' of length {self.length}"
            )
            raise AlignmentDecodeError(msg)
        self.coverage[start:end] += 1

    def add_clipping(self, pos: int) -> None:
        """Count one clipped read end at `pos`."""
        if not 0 <= pos < self.length:
            msg = f"Clip site {pos} falls outside contig '{self.name}' of length {self.length}"
            raise AlignmentDecodeError(msg)
        self.clip_sites[pos] = self.clip_sites.get(pos, 0) + 1

    def covered_bases(self) -> int:
        """Number of positions with coverage above zero."""
        return int(np.count_nonzero(self.coverage))


class ContigAccumulators:
    """
    ContigData instances keyed by contig name, created on first use.

    Contigs that never receive a mapped read never get an accumulator, so
    memory grows with the contigs actually touched rather than with the size
    of the header.
    """

    def __init__(self, registry: ContigRegistry) -> None:
        self.registry = registry
        self._data: dict[str, ContigData] = {}

    def get_or_create(self, contig: ContigRecord) -> ContigData:
        data = self._data.get(contig.name)
        if data is None:
            data = ContigData(contig.name, contig.length)
            self._data[contig.name] = data
        return data

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __getitem__(self, name: str) -> ContigData:
        return self._data[name]

    def __iter__(self) -> Iterator[ContigData]:
        """Iterate accumulators in BAM header order."""
        return iter(sorted(self._data.values(), key=lambda data: self.registry.order(data.name)))
