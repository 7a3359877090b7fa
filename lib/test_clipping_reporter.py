"""Tests for the clip reporter."""

import math
from pathlib import Path

import pytest

from clipscan.accumulator import ContigData
from clipscan.errors import ReportWriteError
from clipscan.reporters import write_table
from clipscan.reporters.clipping import (
    ClipRow,
    clipping_ratio,
    clipping_table,
    passes_filters,
    report_clipping,
)
from clipscan.walker import CIGAR_DEL, CIGAR_MATCH, CIGAR_SOFT_CLIP, AlignedRead, walk_alignment


@pytest.fixture
def hotspot_contig() -> ContigData:
    """
    A 1000 bp contig with ten reads clipped at position 500.

    Five reads align through 500 after the clip and five reads skip it with a
    one-base deletion, so position 500 has clipping 10 and coverage 5.
    """
    data = ContigData("contig_1", 1000)
    for _ in range(5):
        walk_alignment(
            AlignedRead(0, 500, ((CIGAR_SOFT_CLIP, 300), (CIGAR_MATCH, 200))),
            data,
        )
        walk_alignment(
            AlignedRead(0, 500, ((CIGAR_SOFT_CLIP, 300), (CIGAR_DEL, 1), (CIGAR_MATCH, 200))),
            data,
        )
    return data


class TestClippingRatio:
    """Test the clipped-to-covering ratio."""

    def test_ratio(self):
        assert clipping_ratio(10, 5) == 2.0
        assert clipping_ratio(1, 4) == 0.25

    def test_zero_coverage_is_infinite(self):
        assert clipping_ratio(3, 0) == math.inf


class TestPassesFilters:
    """Test the ratio and end-distance filters."""

    def test_passes(self):
        assert passes_filters(500, 1000, 2.0, 50, 1.0)

    def test_ratio_below_threshold(self):
        assert not passes_filters(500, 1000, 0.99, 50, 1.0)

    def test_ratio_equal_to_threshold(self):
        assert passes_filters(500, 1000, 1.0, 50, 1.0)

    def test_too_close_to_start(self):
        assert not passes_filters(50, 1000, 5.0, 50, 1.0)
        assert passes_filters(51, 1000, 5.0, 50, 1.0)

    def test_too_close_to_end(self):
        assert not passes_filters(950, 1000, 5.0, 50, 1.0)
        assert passes_filters(949, 1000, 5.0, 50, 1.0)

    def test_infinite_ratio_passes_threshold(self):
        assert passes_filters(500, 1000, math.inf, 50, 1000.0)

    def test_infinite_ratio_still_needs_distance(self):
        assert not passes_filters(10, 1000, math.inf, 50, 1.0)


class TestReportClipping:
    """Test selection of clip rows from accumulators."""

    def test_hotspot_scenario(self, hotspot_contig: ContigData):
        assert hotspot_contig.clip_sites == {500: 10}
        assert hotspot_contig.coverage[500] == 5

        rows = report_clipping([hotspot_contig], min_dist_to_end=50, min_clipping_ratio=1.0)

        assert rows == [
            ClipRow(
                contig="contig_1",
                length=1000,
                pos=500,
                relative_pos=0.5,
                cov=5,
                clipping=10,
                clipping_ratio=2.0,
            ),
        ]

    def test_unclipped_read_yields_no_rows(self):
        data = ContigData("ctg", 1000)
        walk_alignment(AlignedRead(0, 100, ((CIGAR_MATCH, 800),)), data)

        assert report_clipping([data], min_dist_to_end=100, min_clipping_ratio=1.0) == []

    def test_ratio_threshold_excludes(self, hotspot_contig: ContigData):
        assert report_clipping([hotspot_contig], min_dist_to_end=50, min_clipping_ratio=2.5) == []

    @pytest.mark.parametrize("pos", [5, 100, 900, 995])
    def test_sites_near_ends_excluded(self, pos: int):
        data = ContigData("ctg", 1000)
        data.coverage[pos] = 1
        data.clip_sites[pos] = 50

        assert report_clipping([data], min_dist_to_end=100, min_clipping_ratio=1.0) == []

    def test_zero_coverage_site_reported(self):
        data = ContigData("ctg", 1000)
        data.clip_sites[400] = 2

        rows = report_clipping([data], min_dist_to_end=100, min_clipping_ratio=1.0)

        assert len(rows) == 1
        assert rows[0].cov == 0
        assert rows[0].clipping_ratio == math.inf

    def test_rows_sorted_by_position_within_contig(self):
        data = ContigData("ctg", 1000)
        for pos in (700, 200, 450):
            data.coverage[pos] = 1
            data.clip_sites[pos] = 1

        rows = report_clipping([data], min_dist_to_end=100, min_clipping_ratio=1.0)
        assert [row.pos for row in rows] == [200, 450, 700]

    def test_rows_follow_contig_order(self):
        first = ContigData("b", 1000)
        second = ContigData("a", 1000)
        for data in (first, second):
            data.clip_sites[500] = 1

        rows = report_clipping([first, second], min_dist_to_end=100, min_clipping_ratio=1.0)
        assert [row.contig for row in rows] == ["b", "a"]


class TestClippingTable:
    """Test the clipping report table and file."""

    def test_table_columns(self, hotspot_contig: ContigData):
        table = clipping_table(report_clipping([hotspot_contig], 50, 1.0))

        assert table.columns == [
            "contig",
            "length",
            "pos",
            "relative_pos",
            "cov",
            "clipping",
            "clipping_ratio",
        ]
        assert table.rows() == [("contig_1", 1000, 500, 0.5, 5, 10, 2.0)]

    def test_written_report(self, hotspot_contig: ContigData, tmp_path: Path):
        out = tmp_path / "sample-clipping.txt"
        write_table(clipping_table(report_clipping([hotspot_contig], 50, 1.0)), out)

        lines = out.read_text().splitlines()
        assert lines[0] == "contig\tlength\tpos\trelative_pos\tcov\tclipping\tclipping_ratio"
        assert lines[1].split("\t")[:3] == ["contig_1", "1000", "500"]
        assert float(lines[1].split("\t")[3]) == 0.5
        assert lines[1].split("\t")[4:6] == ["5", "10"]
        assert float(lines[1].split("\t")[6]) == 2.0

    def test_empty_table_keeps_header(self, tmp_path: Path):
        out = tmp_path / "empty-clipping.txt"
        write_table(clipping_table([]), out)

        assert out.read_text().splitlines() == [
            "contig\tlength\tpos\trelative_pos\tcov\tclipping\tclipping_ratio",
        ]

    def test_unwritable_path(self, tmp_path: Path):
        out = tmp_path / "missing_dir" / "sample-clipping.txt"
        with pytest.raises(ReportWriteError, match="missing_dir"):
            write_table(clipping_table([]), out)
