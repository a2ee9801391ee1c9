"""
Ungapped, shift-tolerant alignment of reads against adapters and mates.

A candidate sequence is slid along the subject for every offset in
[-max_shift, +max_shift], where the offset is the position of the
candidate's first base relative to the subject's first base. Overlapping
bases are compared without gaps; an ambiguous base on either side only
counts toward the overlap length.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from ..errors import ConfigurationError
from ..utils.sequence import reverse_complement

_AMBIGUOUS = ord('N')


@dataclass(frozen=True)
class AlignmentResult:
    """
    Best ungapped alignment found for a read or a read pair.

    Attributes:
        adapter_id: Index of the aligned adapter pair (None if unaligned)
        offset: Start of the candidate relative to the start of the subject
        length: Number of overlapping positions, ambiguous ones included
        num_mismatches: Mismatching positions among unambiguous pairs
        score: matches - mismatches
    """
    adapter_id: Optional[int] = None
    offset: int = 0
    length: int = 0
    num_mismatches: int = 0
    score: int = 0

    @property
    def is_aligned(self) -> bool:
        return self.length > 0

    @property
    def mismatch_rate(self) -> float:
        return self.num_mismatches / self.length if self.length else 0.0

    def _rank(self) -> Tuple[int, int, int, int]:
        adapter_id = self.adapter_id if self.adapter_id is not None else 0
        return (self.score, self.length, -adapter_id, -abs(self.offset))

    def ranks_above(self, other: 'AlignmentResult') -> bool:
        """Higher score, then longer overlap, then lower adapter id, then smaller |offset|."""
        if not other.is_aligned:
            return (self.score, self.length) > (other.score, other.length)
        return self._rank() > other._rank()


UNALIGNED = AlignmentResult()


def _as_array(seq: str) -> np.ndarray:
    return np.frombuffer(seq.upper().encode('ascii'), dtype=np.uint8)


def compare_at_offset(
    subject: np.ndarray,
    candidate: np.ndarray,
    offset: int,
) -> Tuple[int, int, int]:
    """
    Compare the overlapping part of two encoded sequences.

    Returns:
        Tuple of (overlap length, matches, mismatches)
    """
    start = max(0, offset)
    end = min(len(subject), offset + len(candidate))
    if end <= start:
        return 0, 0, 0

    a = subject[start:end]
    b = candidate[start - offset:end - offset]
    called = (a != _AMBIGUOUS) & (b != _AMBIGUOUS)
    matches = int(np.count_nonzero((a == b) & called))
    mismatches = int(np.count_nonzero(called)) - matches
    return end - start, matches, mismatches


def _check_window(max_shift: int, mismatch_threshold: Optional[float]):
    if max_shift < 0:
        raise ConfigurationError(f"shift must be non-negative: {max_shift}")
    if mismatch_threshold is not None and not 0.0 <= mismatch_threshold <= 1.0:
        raise ConfigurationError(
            f"mismatch threshold must be within [0, 1]: {mismatch_threshold}"
        )


def _best_alignment(
    subject: str,
    candidates: Sequence[Tuple[int, str]],
    max_shift: int,
    mismatch_threshold: Optional[float],
) -> AlignmentResult:
    best = UNALIGNED
    encoded = _as_array(subject)

    for adapter_id, candidate_seq in candidates:
        candidate = _as_array(candidate_seq)
        for offset in range(-max_shift, max_shift + 1):
            length, matches, mismatches = compare_at_offset(encoded, candidate, offset)
            if not length:
                continue
            if mismatch_threshold is not None and mismatches > mismatch_threshold * length:
                continue

            current = AlignmentResult(
                adapter_id=adapter_id,
                offset=offset,
                length=length,
                num_mismatches=mismatches,
                score=matches - mismatches,
            )
            if current.ranks_above(best):
                best = current

    return best


def align_single_ended(
    read: str,
    adapters: Sequence[str],
    max_shift: int,
    mismatch_threshold: Optional[float] = None,
) -> AlignmentResult:
    """
    Find the best placement of any adapter against a single read.

    Args:
        read: Read sequence
        adapters: Mate 1 adapter sequences, indexed by adapter id
        max_shift: Largest |offset| tried
        mismatch_threshold: If given, placements with a higher mismatch
            rate are not considered

    Returns:
        The best AlignmentResult; unaligned if no placement qualifies
    """
    _check_window(max_shift, mismatch_threshold)
    return _best_alignment(read, list(enumerate(adapters)), max_shift, mismatch_threshold)


def align_paired_ended(
    mate1: str,
    mate2: str,
    max_shift: int,
    adapter_id: int = 0,
    mismatch_threshold: Optional[float] = None,
) -> AlignmentResult:
    """
    Align mate 1 against the reverse complement of mate 2.

    The overlap found is both the shared template and the adapter boundary,
    so no adapter sequences are consulted. `mate2` is given in its
    sequenced orientation and is not modified.

    Args:
        mate1: Mate 1 sequence
        mate2: Mate 2 sequence, as sequenced
        max_shift: Largest |offset| tried
        adapter_id: Id reported for statistics bucketing
        mismatch_threshold: If given, placements with a higher mismatch
            rate are not considered

    Returns:
        The best AlignmentResult; unaligned if the mates do not overlap
    """
    _check_window(max_shift, mismatch_threshold)
    return _best_alignment(
        mate1,
        [(adapter_id, reverse_complement(mate2))],
        max_shift,
        mismatch_threshold,
    )
