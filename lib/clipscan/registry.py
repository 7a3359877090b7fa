"""
Contig registry for clipscan.

Maps every reference sequence declared in the BAM header to its length.
The registry is populated once, before any read is processed, and is
read-only afterwards.
"""

from collections.abc import Iterator

import pysam
from pydantic import BaseModel, ConfigDict, Field

from .errors import MissingContigError


class ContigRecord(BaseModel):
    """A contig name and its declared length, as found in the BAM header."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    length: int = Field(ge=0, description="Declared contig length (LN)")


class ContigRegistry:
    """Header contigs, addressable by reference id (tid) or by name."""

    def __init__(self, contigs: list[ContigRecord]) -> None:
        self._contigs = list(contigs)
        self._by_name = {contig.name: contig for contig in self._contigs}
        self._order = {contig.name: i for i, contig in enumerate(self._contigs)}

    @classmethod
    def from_header(cls, header: pysam.AlignmentHeader) -> "ContigRegistry":
        """
        Build a registry from a pysam alignment header.

        Args:
            header: Header of an open pysam AlignmentFile

        Returns:
            Registry with one ContigRecord per @SQ line, in header order
        """
        return cls(
            [
                ContigRecord(name=name, length=length)
                for name, length in zip(header.references, header.lengths)
            ],
        )

    def __len__(self) -> int:
        return len(self._contigs)

    def __iter__(self) -> Iterator[ContigRecord]:
        return iter(self._contigs)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def by_tid(self, tid: int) -> ContigRecord:
        """Look up a contig by its 0-based reference id."""
        if not 0 <= tid < len(self._contigs):
            msg = f"Reference id {tid} is not declared in the BAM header ({len(self._contigs)} contigs)"
            raise MissingContigError(msg)
        return self._contigs[tid]

    def by_name(self, name: str) -> ContigRecord:
        """Look up a contig by name."""
        try:
            return self._by_name[name]
        except KeyError:
            msg = f"Contig '{name}' is not declared in the BAM header"
            raise MissingContigError(msg) from None

    def order(self, name: str) -> int:
        """Position of a contig in the header, used to sort report rows."""
        self.by_name(name)
        return self._order[name]
