"""
Utility modules for adaptrim.
"""

from .sequence import (
    count_ambiguous,
    is_dna_sequence,
    normalize_sequence,
    reverse_complement,
)

__all__ = [
    'reverse_complement',
    'normalize_sequence',
    'is_dna_sequence',
    'count_ambiguous',
]
