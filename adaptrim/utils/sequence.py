"""
Sequence manipulation utilities.

Provides common functions for DNA sequence operations.
"""

import re

# Bases accepted in reads; '.' is read as an ambiguous base
VALID_BASES = frozenset("ACGTN")
DNA_PATTERN = re.compile(r'^[ACGTN]+$')

_COMPLEMENT = str.maketrans('ACGTNacgtn', 'TGCANtgcan')


def reverse_complement(seq: str) -> str:
    """Return reverse complement of DNA sequence."""
    return seq.translate(_COMPLEMENT)[::-1]


def normalize_sequence(seq: str) -> str:
    """Upper-case a sequence and read '.' as 'N'."""
    return seq.strip().upper().replace('.', 'N')


def is_dna_sequence(seq: str) -> bool:
    """Check if string is a non-empty ACGTN sequence."""
    return bool(seq) and bool(DNA_PATTERN.match(seq))


def count_ambiguous(seq: str) -> int:
    """Count ambiguous ('N') bases."""
    return seq.upper().count('N')
