"""Tests for adaptrim.io.fastq."""

import gzip
import io

import pytest

from adaptrim.errors import IOFailure, RecordFormatError, StreamOpenError
from adaptrim.io.fastq import (
    FastqRecord,
    QualityFormat,
    open_input,
    open_output,
    phred_to_solexa,
    read_fastq,
    solexa_to_phred,
    write_fastq,
)

from conftest import fastq_text, make_record


class TestQualityFormat:
    """Test quality score encodings."""

    def test_parse_aliases(self):
        """Test parsing of command-line values."""
        assert QualityFormat.parse('33') is QualityFormat.PHRED_33
        assert QualityFormat.parse(64) is QualityFormat.PHRED_64
        assert QualityFormat.parse('Solexa') is QualityFormat.SOLEXA
        with pytest.raises(ValueError):
            QualityFormat.parse('42')

    def test_decode_phred33(self):
        """Test Phred+33 decoding."""
        assert QualityFormat.PHRED_33.decode("!+5I") == [0, 10, 20, 40]

    def test_decode_phred64(self):
        """Test Phred+64 decoding."""
        assert QualityFormat.PHRED_64.decode("@JTh") == [0, 10, 20, 40]

    def test_decode_out_of_range(self):
        """Test characters below the offset are rejected."""
        with pytest.raises(ValueError):
            QualityFormat.PHRED_64.decode("5")
        with pytest.raises(ValueError):
            QualityFormat.PHRED_33.decode(" ")

    def test_encode_phred64_clamps(self):
        """Test scores beyond the Phred+64 range are clamped."""
        assert QualityFormat.PHRED_64.encode([0, 40, 80]) == "@h~"

    def test_solexa_conversion(self):
        """Test Solexa to Phred conversions."""
        assert solexa_to_phred(-5) == 1
        assert solexa_to_phred(10) == 10
        assert phred_to_solexa(0) == -5
        assert phred_to_solexa(1) == -5
        assert phred_to_solexa(10) == 10

    def test_solexa_decode(self):
        """Test Solexa quality strings decode to Phred scores."""
        assert QualityFormat.SOLEXA.decode(";J") == [1, 10]

    def test_descriptions(self):
        """Test names used in the settings report."""
        assert QualityFormat.PHRED_33.description == "Phred+33"
        assert QualityFormat.PHRED_64.description == "Phred+64"
        assert QualityFormat.SOLEXA.description == "Solexa"


class TestFastqRecord:
    """Test FastqRecord."""

    def test_length_mismatch_rejected(self):
        """Test bases and qualities must have equal length."""
        with pytest.raises(ValueError):
            FastqRecord("r", "ACGT", [40, 40])

    def test_truncate(self):
        """Test truncation keeps bases and qualities in step."""
        record = make_record("r", "ACGTAC", qualities=[1, 2, 3, 4, 5, 6])
        record.truncate(1, 3)
        assert record.sequence == "CGT"
        assert record.qualities == [2, 3, 4]

    def test_truncate_from_start(self):
        """Test dropping a prefix."""
        record = make_record("r", "ACGTAC")
        record.truncate(4)
        assert record.sequence == "AC"

    def test_add_prefix_to_header(self):
        """Test header prefixing."""
        record = make_record("read1 extra", "ACGT")
        record.add_prefix_to_header("M_")
        assert record.header == "M_read1 extra"
        assert record.name == "M_read1"

    def test_to_fastq(self):
        """Test four-line formatting."""
        record = make_record("r", "ACGT", qual=40)
        assert record.to_fastq() == "@r\nACGT\n+\nIIII\n"
        assert record.to_fastq(QualityFormat.PHRED_64) == "@r\nACGT\n+\nhhhh\n"


class TestReadFastq:
    """Test FASTQ parsing."""

    def test_reads_records(self):
        """Test parsing of valid records."""
        handle = io.StringIO(fastq_text([("r1", "ACGT"), ("r2", "GGCC")]))
        records = list(read_fastq(handle))
        assert [r.header for r in records] == ["r1", "r2"]
        assert records[1].sequence == "GGCC"
        assert records[0].qualities == [40, 40, 40, 40]

    def test_normalizes_bases(self):
        """Test lowercase bases and '.' are normalized."""
        handle = io.StringIO("@r\nac.t\n+\nIIII\n")
        record = next(read_fastq(handle))
        assert record.sequence == "ACNT"

    def test_tolerates_trailing_blank_lines(self):
        """Test blank lines at end of file are ignored."""
        handle = io.StringIO("@r\nACGT\n+\nIIII\n\n\n")
        assert len(list(read_fastq(handle))) == 1

    def test_skips_blank_lines_between_records(self):
        """Test blank lines before a record are ignored."""
        handle = io.StringIO("\n@r1\nACGT\n+\nIIII\n\n@r2\nGGCC\n+\nIIII\n")
        assert [r.header for r in read_fastq(handle)] == ["r1", "r2"]

    def test_empty_sequence(self):
        """Test a record with no bases."""
        handle = io.StringIO("@r\n\n+\n\n")
        record = next(read_fastq(handle))
        assert len(record) == 0

    def test_missing_header_marker(self):
        """Test a record not starting with '@'."""
        handle = io.StringIO(fastq_text([("r1", "ACGT")]) + "r2\nACGT\n+\nIIII\n")
        with pytest.raises(RecordFormatError) as excinfo:
            list(read_fastq(handle))
        assert excinfo.value.record_index == 1

    def test_missing_separator(self):
        """Test a record without '+' line."""
        handle = io.StringIO("@r\nACGT\nIIII\nIIII\n")
        with pytest.raises(RecordFormatError):
            list(read_fastq(handle))

    def test_length_mismatch(self):
        """Test sequence and quality lengths must match."""
        handle = io.StringIO("@r\nACGT\n+\nIII\n")
        with pytest.raises(RecordFormatError) as excinfo:
            list(read_fastq(handle))
        assert excinfo.value.record_index == 0

    def test_invalid_base(self):
        """Test non-ACGTN characters are rejected."""
        handle = io.StringIO("@r\nACXT\n+\nIIII\n")
        with pytest.raises(RecordFormatError):
            list(read_fastq(handle))

    def test_partial_record(self):
        """Test a truncated final record."""
        handle = io.StringIO(fastq_text([("r1", "ACGT")]) + "@r2\nACGT\n")
        with pytest.raises(RecordFormatError) as excinfo:
            list(read_fastq(handle))
        assert excinfo.value.record_index == 1

    def test_quality_out_of_range_for_format(self):
        """Test Phred+33 data read as Phred+64."""
        handle = io.StringIO("@r\nACGT\n+\n5555\n")
        with pytest.raises(RecordFormatError):
            list(read_fastq(handle, QualityFormat.PHRED_64))


class TestStreams:
    """Test opening and writing streams."""

    def test_gzip_round_trip(self, tmp_path):
        """Test gzipped input and output."""
        path = tmp_path / "reads.fastq.gz"
        with open_output(path) as out:
            write_fastq(make_record("r1", "ACGT"), out)
        with gzip.open(path, 'rt') as f:
            assert f.read() == "@r1\nACGT\n+\nIIII\n"
        with open_input(path) as f:
            assert [r.sequence for r in read_fastq(f)] == ["ACGT"]

    def test_missing_input(self, tmp_path):
        """Test opening a missing file."""
        with pytest.raises(StreamOpenError):
            open_input(tmp_path / "missing.fastq")

    def test_unwritable_output(self, tmp_path):
        """Test opening an output in a missing directory."""
        with pytest.raises(StreamOpenError):
            open_output(tmp_path / "missing" / "out.fastq")

    def test_write_failure(self):
        """Test write errors become IOFailure."""
        class FailingHandle:
            def write(self, text):
                raise OSError("No space left on device")

        with pytest.raises(IOFailure):
            write_fastq(make_record("r", "ACGT"), FailingHandle())
