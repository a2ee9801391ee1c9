"""
FASTQ input/output and report generation.
"""

from .fastq import (
    FastqRecord,
    QualityFormat,
    open_input,
    open_output,
    read_fastq,
    read_record,
    write_fastq,
)
from .report import (
    format_settings,
    format_statistics,
    write_report,
    write_statistics_tsv,
)

__all__ = [
    'FastqRecord',
    'QualityFormat',
    'open_input',
    'open_output',
    'read_fastq',
    'read_record',
    'write_fastq',
    'format_settings',
    'format_statistics',
    'write_report',
    'write_statistics_tsv',
]
