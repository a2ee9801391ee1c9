"""
Classification of alignments into valid, poor and unaligned.
"""

from enum import Enum

from .alignment import AlignmentResult
from ..errors import ConfigurationError


class AlignmentClass(Enum):
    """Alignment categories; exactly one applies to every result."""
    VALID = 'valid'
    POOR = 'poor'
    UNALIGNED = 'unaligned'


def classify_alignment(
    result: AlignmentResult,
    min_overlap_length: int,
    max_mismatch_rate: float,
) -> AlignmentClass:
    """
    Classify an alignment by overlap length and mismatch rate.

    Args:
        result: Alignment to classify
        min_overlap_length: Shortest overlap accepted as valid
        max_mismatch_rate: Highest mismatches/length accepted as valid

    Returns:
        UNALIGNED if nothing overlaps, POOR if the overlap is too short or
        too divergent, VALID otherwise
    """
    if min_overlap_length < 0:
        raise ConfigurationError(f"minimum overlap length must be non-negative: {min_overlap_length}")
    if not 0.0 <= max_mismatch_rate <= 1.0:
        raise ConfigurationError(f"mismatch rate must be within [0, 1]: {max_mismatch_rate}")

    if result.length == 0:
        return AlignmentClass.UNALIGNED
    if result.length < min_overlap_length:
        return AlignmentClass.POOR
    if result.num_mismatches / result.length > max_mismatch_rate:
        return AlignmentClass.POOR
    return AlignmentClass.VALID
