"""
Adapter truncation and collapsing of overlapping mates.

Offsets are those reported by the alignment engine: for single reads the
start of the adapter within the read, for pairs the start of the reverse
complemented mate 2 relative to mate 1.
"""

from ..io.fastq import FastqRecord, QualityFormat
from ..utils.sequence import reverse_complement
from .alignment import AlignmentResult

# Highest Phred score representable in Phred+33
MAX_PHRED_SCORE = QualityFormat.PHRED_33.max_phred


def truncate_single_ended(alignment: AlignmentResult, read: FastqRecord) -> bool:
    """
    Drop the adapter and everything after it from a read.

    Returns:
        True if the read got shorter
    """
    keep = max(0, alignment.offset)
    if keep >= len(read):
        return False
    read.truncate(0, keep)
    return True


def truncate_paired_ended(
    alignment: AlignmentResult,
    mate1: FastqRecord,
    mate2: FastqRecord,
) -> int:
    """
    Cut both mates back to the template they share.

    `mate2` is in its sequenced orientation. Adapter read-through in mate 2
    sits at its 3' end, i.e. before mate 1 in the reverse complemented view,
    so it is removed from the end of the forward record.

    Returns:
        Number of mates that got shorter (0, 1 or 2)
    """
    if alignment.offset > len(mate1):
        raise ValueError(f"invalid offset for mate 1 of length {len(mate1)}: {alignment.offset}")

    n_truncated = 0
    template_length = max(0, len(mate2) + alignment.offset)
    if template_length < len(mate1):
        mate1.truncate(0, template_length)
        n_truncated += 1

    if alignment.offset < 0:
        mate2.truncate(0, max(0, len(mate2) + alignment.offset))
        n_truncated += 1

    return n_truncated


def collapse_paired_ended(
    alignment: AlignmentResult,
    mate1: FastqRecord,
    mate2: FastqRecord,
    max_quality: int = MAX_PHRED_SCORE,
) -> FastqRecord:
    """
    Merge two overlapping (already truncated) mates into one consensus read.

    Agreeing bases keep the higher quality, capped at `max_quality`. For
    disagreeing bases the better supported base wins (mate 1 on ties) with
    the lower of the two qualities. Bases outside the overlap are copied
    from the mate that covers them.

    Args:
        alignment: Alignment of mate 1 against reverse complemented mate 2
        mate1: Mate 1, truncated
        mate2: Mate 2 in its sequenced orientation, truncated
        max_quality: Cap for merged qualities

    Returns:
        New record carrying mate 1's header
    """
    if alignment.offset > len(mate1):
        raise ValueError(f"invalid offset for mate 1 of length {len(mate1)}: {alignment.offset}")

    seq2 = reverse_complement(mate2.sequence)
    quals2 = mate2.qualities[::-1]

    # After truncation mate 2 no longer starts before mate 1
    offset = max(0, alignment.offset)
    bases = list(mate1.sequence[:offset])
    quals = list(mate1.qualities[:offset])

    i, j = offset, 0
    while i < len(mate1) and j < len(seq2):
        base1, qual1 = mate1.sequence[i], mate1.qualities[i]
        base2, qual2 = seq2[j], quals2[j]
        if base1 == base2:
            bases.append(base1)
            quals.append(min(max(qual1, qual2), max_quality))
        else:
            bases.append(base1 if qual1 >= qual2 else base2)
            quals.append(min(qual1, qual2))
        i += 1
        j += 1

    if i < len(mate1):
        bases.extend(mate1.sequence[i:])
        quals.extend(mate1.qualities[i:])
    else:
        bases.extend(seq2[j:])
        quals.extend(quals2[j:])

    return FastqRecord(mate1.header, ''.join(bases), quals)
