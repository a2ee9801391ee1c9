"""
Removal of 5' barcodes from mate 1 reads.
"""

from typing import Optional, Sequence

from ..core.alignment import align_single_ended
from ..core.classification import AlignmentClass, classify_alignment
from ..io.fastq import FastqRecord


def trim_barcodes(
    read: FastqRecord,
    barcodes: Sequence[str],
    max_shift: int,
    min_overlap_length: int,
    max_mismatch_rate: float,
) -> Optional[int]:
    """
    Find a barcode at the start of a read and cut it off.

    Barcodes are aligned at offsets within the shift window of the read's
    first base; a valid alignment removes the read up to the barcode's
    last base.

    Args:
        read: Mate 1 record, trimmed in place
        barcodes: Barcode sequences, indexed by barcode id
        max_shift: Largest |offset| tried
        min_overlap_length: Shortest overlap accepted
        max_mismatch_rate: Highest mismatch rate accepted

    Returns:
        Id of the trimmed barcode, or None if no barcode was found
    """
    if not barcodes:
        return None

    alignment = align_single_ended(
        read.sequence, barcodes, max_shift, mismatch_threshold=max_mismatch_rate
    )
    min_overlap = min(min_overlap_length, min(len(b) for b in barcodes))
    if classify_alignment(alignment, min_overlap, max_mismatch_rate) is not AlignmentClass.VALID:
        return None

    barcode_end = alignment.offset + len(barcodes[alignment.adapter_id])
    cut = min(len(read), max(0, barcode_end))
    read.truncate(cut)

    return alignment.adapter_id
