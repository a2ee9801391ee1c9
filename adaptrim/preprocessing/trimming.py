"""
Quality trimming of read ends and read acceptability.
"""

from typing import Tuple

from ..io.fastq import FastqRecord


def trim_by_quality(
    read: FastqRecord,
    low_quality_score: int = 2,
    trim_ambiguous: bool = False,
    trim_qualities: bool = False,
) -> Tuple[int, int]:
    """
    Remove low-quality and/or ambiguous bases from both ends of a read.

    A base is trimmed if it is 'N' (when trim_ambiguous) or its quality is
    at most low_quality_score (when trim_qualities). Trimming stops at the
    first base from each end that passes.

    Args:
        read: Record to trim in place
        low_quality_score: Highest Phred score that is trimmed
        trim_ambiguous: Trim 'N' bases
        trim_qualities: Trim bases by quality

    Returns:
        Tuple of (bases trimmed from 5' end, bases trimmed from 3' end)
    """
    if not (trim_ambiguous or trim_qualities):
        return 0, 0

    def is_trimmable(i: int) -> bool:
        if trim_ambiguous and read.sequence[i] == 'N':
            return True
        return trim_qualities and read.qualities[i] <= low_quality_score

    length = len(read)
    left = 0
    while left < length and is_trimmable(left):
        left += 1

    right = length
    while right > left and is_trimmable(right - 1):
        right -= 1

    if left or right < length:
        read.truncate(left, right - left)

    return left, length - right


def is_acceptable_read(read: FastqRecord, min_length: int = 15, max_ambiguous: int = 1000) -> bool:
    """Check a trimmed read against the minimum length and maximum N count."""
    return len(read) >= min_length and read.count_ambiguous() <= max_ambiguous
