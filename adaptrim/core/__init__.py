"""
Core alignment, classification and truncation modules for adaptrim.
"""

from .alignment import (
    AlignmentResult,
    UNALIGNED,
    align_paired_ended,
    align_single_ended,
    compare_at_offset,
)
from .classification import (
    AlignmentClass,
    classify_alignment,
)
from .statistics import (
    Statistics,
)
from .truncation import (
    MAX_PHRED_SCORE,
    collapse_paired_ended,
    truncate_paired_ended,
    truncate_single_ended,
)

__all__ = [
    # Alignment
    'AlignmentResult',
    'UNALIGNED',
    'align_single_ended',
    'align_paired_ended',
    'compare_at_offset',
    # Classification
    'AlignmentClass',
    'classify_alignment',
    # Statistics
    'Statistics',
    # Truncation / collapse
    'MAX_PHRED_SCORE',
    'truncate_single_ended',
    'truncate_paired_ended',
    'collapse_paired_ended',
]
