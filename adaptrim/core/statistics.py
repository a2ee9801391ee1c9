"""
Run-wide counters, updated once per applicable event by the pipeline.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from .classification import AlignmentClass


@dataclass
class Statistics:
    """
    Counters for a single run.

    Attributes:
        records: Reads (single-end) or read pairs (paired-end) processed
        unaligned_reads / well_aligned_reads / poorly_aligned_reads:
            One per record, by alignment class
        keep1 / keep2: Mates (or collapsed reads, booked on mate 1) accepted
        discard1 / discard2: Mates (or collapsed reads) rejected
        singleton1 / singleton2: Mates kept while their partner was discarded
        adapter_hits: Reads truncated per adapter id
        barcode_hits: Reads trimmed per barcode id
        full_length_collapsed / truncated_collapsed: Collapsed pairs by
            whether quality trimming shortened the consensus
        retained_reads / retained_nucleotides: Accepted records and bases
        evaluated_units: Acceptability decisions taken
    """
    adapter_hits: List[int] = field(default_factory=list)
    barcode_hits: List[int] = field(default_factory=list)

    records: int = 0
    unaligned_reads: int = 0
    well_aligned_reads: int = 0
    poorly_aligned_reads: int = 0

    keep1: int = 0
    keep2: int = 0
    discard1: int = 0
    discard2: int = 0
    singleton1: int = 0
    singleton2: int = 0

    full_length_collapsed: int = 0
    truncated_collapsed: int = 0

    retained_reads: int = 0
    retained_nucleotides: int = 0
    evaluated_units: int = 0

    @classmethod
    def create(cls, n_adapters: int, n_barcodes: int = 0) -> 'Statistics':
        return cls(adapter_hits=[0] * n_adapters, barcode_hits=[0] * n_barcodes)

    @property
    def average_retained_length(self) -> float:
        if self.retained_reads == 0:
            return 0.0
        return self.retained_nucleotides / self.retained_reads

    @property
    def collapsed_pairs(self) -> int:
        return self.full_length_collapsed + self.truncated_collapsed

    def record_alignment(self, aln_class: AlignmentClass):
        if aln_class is AlignmentClass.VALID:
            self.well_aligned_reads += 1
        elif aln_class is AlignmentClass.POOR:
            self.poorly_aligned_reads += 1
        elif aln_class is AlignmentClass.UNALIGNED:
            self.unaligned_reads += 1
        else:
            raise ValueError(f"unknown alignment class: {aln_class}")

    def record_disposition(self, mate: int, acceptable: bool, length: int = 0):
        """Book one acceptability decision for mate 1 or mate 2."""
        if mate not in (1, 2):
            raise ValueError(f"mate must be 1 or 2: {mate}")
        self.evaluated_units += 1
        if acceptable:
            self.retained_reads += 1
            self.retained_nucleotides += length
            if mate == 1:
                self.keep1 += 1
            else:
                self.keep2 += 1
        elif mate == 1:
            self.discard1 += 1
        else:
            self.discard2 += 1

    def to_dict(self) -> Dict[str, object]:
        """Flat counter mapping, adapter/barcode hits expanded per id."""
        counters = {
            'records': self.records,
            'unaligned_reads': self.unaligned_reads,
            'well_aligned_reads': self.well_aligned_reads,
            'poorly_aligned_reads': self.poorly_aligned_reads,
            'keep1': self.keep1,
            'keep2': self.keep2,
            'discard1': self.discard1,
            'discard2': self.discard2,
            'singleton1': self.singleton1,
            'singleton2': self.singleton2,
            'full_length_collapsed': self.full_length_collapsed,
            'truncated_collapsed': self.truncated_collapsed,
            'retained_reads': self.retained_reads,
            'retained_nucleotides': self.retained_nucleotides,
            'average_retained_length': self.average_retained_length,
        }
        for adapter_id, count in enumerate(self.adapter_hits):
            counters[f'adapter_hits[{adapter_id}]'] = count
        for barcode_id, count in enumerate(self.barcode_hits):
            counters[f'barcode_hits[{barcode_id}]'] = count
        return counters
