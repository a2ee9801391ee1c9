"""
FASTQ records, quality score encodings and stream helpers.

Records are parsed strictly: a malformed record raises RecordFormatError
carrying the index of the offending record, and read/write failures of the
underlying stream are raised as IOFailure.
"""

import gzip
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, Iterator, List, Optional, Tuple
import logging

from ..errors import IOFailure, RecordFormatError, StreamOpenError
from ..utils.sequence import VALID_BASES, count_ambiguous, normalize_sequence

logger = logging.getLogger(__name__)


class QualityFormat(Enum):
    """Quality score encodings of the FASTQ quality line."""
    PHRED_33 = "phred33"
    PHRED_64 = "phred64"
    SOLEXA = "solexa"

    @property
    def offset(self) -> int:
        return 33 if self is QualityFormat.PHRED_33 else 64

    @property
    def min_score(self) -> int:
        """Lowest encodable score on this format's own scale."""
        return -5 if self is QualityFormat.SOLEXA else 0

    @property
    def max_score(self) -> int:
        """Highest encodable score on this format's own scale."""
        return ord('~') - self.offset

    @property
    def max_phred(self) -> int:
        """Highest Phred score representable in this format."""
        if self is QualityFormat.SOLEXA:
            return solexa_to_phred(self.max_score)
        return self.max_score

    @property
    def description(self) -> str:
        return {
            QualityFormat.PHRED_33: "Phred+33",
            QualityFormat.PHRED_64: "Phred+64",
            QualityFormat.SOLEXA: "Solexa",
        }[self]

    @classmethod
    def parse(cls, value) -> 'QualityFormat':
        """Parse '33', '64', 'solexa' or a member name/value."""
        if isinstance(value, QualityFormat):
            return value
        text = str(value).strip().lower()
        aliases = {
            '33': cls.PHRED_33, 'phred33': cls.PHRED_33, 'phred+33': cls.PHRED_33,
            '64': cls.PHRED_64, 'phred64': cls.PHRED_64, 'phred+64': cls.PHRED_64,
            'solexa': cls.SOLEXA,
        }
        if text not in aliases:
            raise ValueError(f"invalid quality score format: {value}")
        return aliases[text]

    def decode(self, quals: str) -> List[int]:
        """Decode a quality string into Phred scores.

        Raises ValueError for characters outside the encoding's range.
        """
        offset = self.offset
        lo, hi = self.min_score, self.max_score
        scores = []
        for char in quals:
            score = ord(char) - offset
            if score < lo or score > hi:
                raise ValueError(
                    f"quality character {char!r} out of range for {self.description}"
                )
            scores.append(score)
        if self is QualityFormat.SOLEXA:
            return [solexa_to_phred(score) for score in scores]
        return scores

    def encode(self, scores: List[int]) -> str:
        """Encode Phred scores, clamped to what this format can represent."""
        if self is QualityFormat.SOLEXA:
            scores = [phred_to_solexa(score) for score in scores]
        lo, hi = self.min_score, self.max_score
        offset = self.offset
        return ''.join(chr(min(hi, max(lo, score)) + offset) for score in scores)


def solexa_to_phred(score: int) -> int:
    """Convert a Solexa log-odds score to the Phred scale."""
    return int(round(10.0 * math.log10(10.0 ** (score / 10.0) + 1.0)))


def phred_to_solexa(score: int) -> int:
    """Convert a Phred score to the Solexa log-odds scale."""
    if score <= 0:
        return QualityFormat.SOLEXA.min_score
    return max(QualityFormat.SOLEXA.min_score,
               int(round(10.0 * math.log10(10.0 ** (score / 10.0) - 1.0))))


@dataclass
class FastqRecord:
    """
    A single FASTQ record.

    Attributes:
        header: Header line without the leading '@'
        sequence: Bases over ACGTN
        qualities: Phred score for every base
    """
    header: str
    sequence: str
    qualities: List[int] = field(default_factory=list)

    def __post_init__(self):
        if len(self.sequence) != len(self.qualities):
            raise ValueError(
                f"sequence and quality lengths differ: "
                f"{len(self.sequence)} vs {len(self.qualities)}"
            )

    def __len__(self) -> int:
        return len(self.sequence)

    @property
    def name(self) -> str:
        """Header up to the first whitespace."""
        return self.header.split(None, 1)[0] if self.header else ""

    def truncate(self, start: int = 0, length: Optional[int] = None):
        """Keep `length` bases starting at `start`, dropping the rest."""
        end = len(self.sequence) if length is None else start + length
        self.sequence = self.sequence[start:end]
        self.qualities = self.qualities[start:end]

    def add_prefix_to_header(self, prefix: str):
        self.header = prefix + self.header

    def count_ambiguous(self) -> int:
        return count_ambiguous(self.sequence)

    def copy(self) -> 'FastqRecord':
        return FastqRecord(self.header, self.sequence, list(self.qualities))

    def to_fastq(self, quality_format: QualityFormat = QualityFormat.PHRED_33) -> str:
        """Format as a four-line FASTQ record."""
        return (f"@{self.header}\n{self.sequence}\n+\n"
                f"{quality_format.encode(self.qualities)}\n")


def _is_gzip(path: Path) -> bool:
    return str(path).endswith('.gz')


def open_input(path: Path) -> IO[str]:
    """Open a (possibly gzipped) FASTQ file for reading."""
    open_func = gzip.open if _is_gzip(path) else open
    try:
        return open_func(path, 'rt')
    except OSError as e:
        raise StreamOpenError(f"cannot open '{path}' for reading: {e}") from e


def open_output(path: Path) -> IO[str]:
    """Open a (possibly gzipped) file for writing."""
    open_func = gzip.open if _is_gzip(path) else open
    try:
        return open_func(path, 'wt')
    except OSError as e:
        raise StreamOpenError(f"cannot open '{path}' for writing: {e}") from e


def _readline(handle: IO[str], record_index: int) -> str:
    try:
        return handle.readline()
    except UnicodeDecodeError as e:
        raise RecordFormatError(f"invalid characters in FASTQ record: {e}", record_index) from e
    except (OSError, EOFError) as e:
        raise IOFailure(str(e)) from e


def _parse_record(lines: Tuple[str, str, str, str],
                  quality_format: QualityFormat) -> FastqRecord:
    header, seq, sep, quals = (line.rstrip('\r\n') for line in lines)

    if not header.startswith('@'):
        raise ValueError("record does not start with '@'")
    if not sep.startswith('+'):
        raise ValueError("separator line does not start with '+'")

    sequence = normalize_sequence(seq)
    invalid = set(sequence) - VALID_BASES
    if invalid:
        raise ValueError(f"invalid base(s) in sequence: {''.join(sorted(invalid))}")
    if len(sequence) != len(quals):
        raise ValueError(
            f"sequence/quality lengths do not match: {len(sequence)} vs {len(quals)}"
        )

    return FastqRecord(header[1:], sequence, quality_format.decode(quals))


def read_record(
    handle: IO[str],
    quality_format: QualityFormat,
    record_index: int = 0,
) -> Optional[FastqRecord]:
    """
    Read the next record from a FASTQ stream.

    Args:
        handle: Open text stream
        quality_format: Encoding of the quality lines
        record_index: Index reported if the record is malformed

    Returns:
        The parsed record, or None at end of stream
    """
    header = _readline(handle, record_index)
    # Blank lines before a record, including at end of file, are skipped
    while header and not header.strip():
        header = _readline(handle, record_index)
    if not header:
        return None

    rest = [_readline(handle, record_index) for _ in range(3)]
    if not all(rest):
        raise RecordFormatError("partial FASTQ record at end of file", record_index)

    try:
        return _parse_record((header, rest[0], rest[1], rest[2]), quality_format)
    except ValueError as e:
        raise RecordFormatError(str(e), record_index) from e


def read_fastq(
    handle: IO[str],
    quality_format: QualityFormat = QualityFormat.PHRED_33,
) -> Iterator[FastqRecord]:
    """Iterate over all records of a FASTQ stream."""
    index = 0
    while True:
        record = read_record(handle, quality_format, index)
        if record is None:
            return
        yield record
        index += 1


def write_fastq(
    record: FastqRecord,
    handle: IO[str],
    quality_format: QualityFormat = QualityFormat.PHRED_33,
):
    """Write a record to an open stream."""
    try:
        handle.write(record.to_fastq(quality_format))
    except OSError as e:
        raise IOFailure(str(e)) from e
