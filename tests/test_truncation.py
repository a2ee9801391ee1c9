"""Tests for adaptrim.core.truncation."""

import pytest

from adaptrim.core.alignment import AlignmentResult
from adaptrim.core.truncation import (
    MAX_PHRED_SCORE,
    collapse_paired_ended,
    truncate_paired_ended,
    truncate_single_ended,
)
from adaptrim.utils.sequence import reverse_complement

from conftest import TEMPLATE, make_record


def _alignment(offset, length=15):
    return AlignmentResult(adapter_id=0, offset=offset, length=length, score=length)


class TestTruncateSingleEnded:
    """Test single-end adapter truncation."""

    def test_truncates_at_offset(self):
        """Test the adapter and everything after it is removed."""
        read = make_record("r1", "ACGTACGTAC", qualities=list(range(10)))
        assert truncate_single_ended(_alignment(4), read)
        assert read.sequence == "ACGT"
        assert read.qualities == [0, 1, 2, 3]

    def test_negative_offset_removes_everything(self):
        """Test adapter starting before the read."""
        read = make_record("r1", "ACGTACGTAC")
        assert truncate_single_ended(_alignment(-2), read)
        assert len(read) == 0
        assert read.qualities == []

    def test_offset_past_end_keeps_read(self):
        """Test nothing is removed when the adapter starts after the read."""
        read = make_record("r1", "ACGT")
        assert not truncate_single_ended(_alignment(4), read)
        assert read.sequence == "ACGT"

    def test_prefix_is_unchanged(self):
        """Test truncation never lengthens and keeps the original prefix."""
        original = make_record("r1", "ACGTNACGTA", qualities=[5, 10, 15, 20, 2, 30, 35, 40, 7, 9])
        for offset in range(-3, 13):
            read = original.copy()
            truncate_single_ended(_alignment(offset), read)
            assert len(read) <= len(original)
            assert read.sequence == original.sequence[:len(read)]
            assert read.qualities == original.qualities[:len(read)]


class TestTruncatePairedEnded:
    """Test paired-end truncation."""

    def test_full_overlap_not_truncated(self):
        """Test mates spanning exactly the template."""
        mate1 = make_record("p/1", TEMPLATE)
        mate2 = make_record("p/2", reverse_complement(TEMPLATE))
        assert truncate_paired_ended(_alignment(0), mate1, mate2) == 0
        assert mate1.sequence == TEMPLATE
        assert mate2.sequence == reverse_complement(TEMPLATE)

    def test_read_through_truncates_both(self):
        """Test adapter read-through removed from both mates."""
        mate1 = make_record("p/1", TEMPLATE + "AGATC")
        mate2 = make_record("p/2", reverse_complement(TEMPLATE) + "AGATC",
                            qualities=list(range(20)))
        assert truncate_paired_ended(_alignment(-5), mate1, mate2) == 2
        assert mate1.sequence == TEMPLATE
        assert mate2.sequence == reverse_complement(TEMPLATE)
        assert mate2.qualities == list(range(15))

    def test_shorter_mate2_truncates_mate1_only(self):
        """Test a template ending within mate 1."""
        mate1 = make_record("p/1", TEMPLATE + "AG")
        mate2 = make_record("p/2", reverse_complement(TEMPLATE))
        assert truncate_paired_ended(_alignment(0), mate1, mate2) == 1
        assert mate1.sequence == TEMPLATE

    def test_invalid_offset(self):
        """Test offsets past mate 1 are rejected."""
        with pytest.raises(ValueError):
            truncate_paired_ended(_alignment(5), make_record("a", "ACG"), make_record("b", "ACG"))


class TestCollapsePairedEnded:
    """Test collapsing of overlapping mates."""

    def test_identical_mates(self):
        """Test fully overlapping identical mates give the same read back."""
        quals = [30, 31, 32, 33, 34, 35, 36, 37, 38, 39, 40, 30, 20, 10, 2]
        mate1 = make_record("pair/1", TEMPLATE, qualities=quals)
        mate2 = make_record("pair/2", reverse_complement(TEMPLATE), qualities=quals[::-1])

        collapsed = collapse_paired_ended(_alignment(0), mate1, mate2)
        assert collapsed.sequence == TEMPLATE
        assert collapsed.qualities == quals
        assert collapsed.header == "pair/1"

    def test_agreeing_bases_take_higher_quality(self):
        """Test agreement keeps the higher quality."""
        mate1 = make_record("p", "ACGT", qualities=[10, 10, 10, 10])
        mate2 = make_record("p", reverse_complement("ACGT"), qualities=[35, 35, 35, 35])
        collapsed = collapse_paired_ended(_alignment(0, 4), mate1, mate2)
        assert collapsed.qualities == [35, 35, 35, 35]

    def test_agreeing_quality_capped(self):
        """Test merged qualities never exceed the cap."""
        mate1 = make_record("p", "ACGT", qualities=[10, 10, 10, 10])
        mate2 = make_record("p", reverse_complement("ACGT"), qualities=[35, 35, 35, 35])
        collapsed = collapse_paired_ended(_alignment(0, 4), mate1, mate2, max_quality=30)
        assert collapsed.qualities == [30, 30, 30, 30]
        assert MAX_PHRED_SCORE == 93

    def test_disagreeing_base_higher_quality_wins(self):
        """Test disagreement keeps the better base with the lower quality."""
        mate1 = make_record("p", "ACGT", qualities=[30, 30, 30, 30])
        # reverse complement view of mate 2 reads ACTT with qualities 30,30,20,30
        mate2 = make_record("p", "AAGT", qualities=[30, 20, 30, 30])
        collapsed = collapse_paired_ended(_alignment(0, 4), mate1, mate2)
        assert collapsed.sequence == "ACGT"
        assert collapsed.qualities == [30, 30, 20, 30]

    def test_disagreeing_base_mate2_wins(self):
        """Test mate 2 base kept when it has the higher quality."""
        mate1 = make_record("p", "ACGT", qualities=[30, 30, 10, 30])
        mate2 = make_record("p", "AAGT", qualities=[30, 20, 30, 30])
        collapsed = collapse_paired_ended(_alignment(0, 4), mate1, mate2)
        assert collapsed.sequence == "ACTT"
        assert collapsed.qualities == [30, 30, 10, 30]

    def test_disagreement_tie_favours_mate1(self):
        """Test equal qualities keep the mate 1 base."""
        mate1 = make_record("p", "ACGT", qualities=[30, 30, 30, 30])
        mate2 = make_record("p", "AAGT", qualities=[30, 30, 30, 30])
        collapsed = collapse_paired_ended(_alignment(0, 4), mate1, mate2)
        assert collapsed.sequence == "ACGT"
        assert collapsed.qualities == [30, 30, 30, 30]

    def test_flanking_bases_copied(self):
        """Test bases outside the overlap come from the covering mate."""
        mate1 = make_record("p", "GGACGT", qualities=[1, 2, 3, 4, 5, 6])
        # reverse complement view: ACGTCC
        mate2 = make_record("p", "GGACGT", qualities=[7, 8, 9, 9, 9, 9])
        collapsed = collapse_paired_ended(_alignment(2, 4), mate1, mate2)
        assert collapsed.sequence == "GGACGTCC"
        assert collapsed.qualities == [1, 2, 9, 9, 9, 9, 8, 7]

    def test_inputs_not_modified(self):
        """Test collapsing builds a new record."""
        mate1 = make_record("p", TEMPLATE)
        mate2 = make_record("p", reverse_complement(TEMPLATE))
        collapse_paired_ended(_alignment(0), mate1, mate2)
        assert mate1.sequence == TEMPLATE
        assert mate2.sequence == reverse_complement(TEMPLATE)
