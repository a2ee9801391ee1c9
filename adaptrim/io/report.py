"""
Settings and statistics report generation.

The report is only produced for completed runs; settings and counters are
written together at the end.
"""

from pathlib import Path
from typing import IO, TYPE_CHECKING
import pandas as pd
import logging

from ..core.statistics import Statistics

if TYPE_CHECKING:
    from ..config import PipelineConfig

logger = logging.getLogger(__name__)


def format_settings(config: 'PipelineConfig', version: str) -> str:
    """Echo the configuration of a run."""
    lines = [f"Running adaptrim {version} using the following options:"]
    lines.append("Paired end mode" if config.paired_ended else "Single end mode")

    for adapter_id, pair in enumerate(config.adapters):
        lines.append(f"PCR1[{adapter_id}]: {pair.adapter1}")
        if config.paired_ended:
            lines.append(f"PCR2[{adapter_id}]: {pair.adapter2}")

    for barcode_id, pair in enumerate(config.barcodes):
        lines.append(f"Mate 1 5' barcode[{barcode_id}]: {pair.adapter1}")

    yes_no = {True: "Yes", False: "No"}
    lines.extend([
        f"Alignment shift value: {config.shift}",
        f"Global mismatch threshold: {config.mismatch_rate}",
        f"Quality format (input): {config.quality_input.description}",
        f"Quality format (output): {config.quality_output.description}",
        f"Trimming Ns: {yes_no[config.trim_ambiguous]}",
        f"Trimming Phred scores <= {config.low_quality_score}: {yes_no[config.trim_qualities]}",
        f"Minimum genomic length: {config.min_length}",
        f"Maximum number of Ns: {config.max_ambiguous}",
        f"Collapse overlapping reads: {yes_no[config.collapse]}",
        f"Minimum overlap (in case of collapse): {config.min_alignment_length}",
    ])
    return '\n'.join(lines) + '\n'


def format_statistics(config: 'PipelineConfig', stats: Statistics) -> str:
    """Final counters of a completed run."""
    reads_type = "read pairs: " if config.paired_ended else "reads: "

    lines = [
        "",
        f"Total number of {reads_type}{stats.records}",
        f"Number of unaligned {reads_type}{stats.unaligned_reads}",
        f"Number of well aligned {reads_type}{stats.well_aligned_reads}",
        f"Number of inadequate alignments: {stats.poorly_aligned_reads}",
        f"Number of retained mate 1 reads: {stats.keep1}",
        f"Number of discarded mate 1 reads: {stats.discard1}",
        f"Number of singleton mate 1 reads: {stats.singleton1}",
    ]
    if config.paired_ended:
        lines.extend([
            f"Number of retained mate 2 reads: {stats.keep2}",
            f"Number of discarded mate 2 reads: {stats.discard2}",
            f"Number of singleton mate 2 reads: {stats.singleton2}",
        ])

    lines.append("")
    for barcode_id, count in enumerate(stats.barcode_hits):
        lines.append(f"Number of reads with barcode[{barcode_id}]: {count}")
    for adapter_id, count in enumerate(stats.adapter_hits):
        lines.append(f"Number of reads with adapters[{adapter_id}]: {count}")

    if config.collapse:
        lines.append(f"Number of full-length collapsed pairs: {stats.full_length_collapsed}")
        lines.append(f"Number of truncated collapsed pairs: {stats.truncated_collapsed}")

    lines.extend([
        f"Number of retained reads: {stats.retained_reads}",
        f"Number of retained nucleotides: {stats.retained_nucleotides}",
        f"Average read length of trimmed reads: {stats.average_retained_length}",
    ])
    return '\n'.join(lines) + '\n'


def write_report(
    config: 'PipelineConfig',
    stats: Statistics,
    handle: IO[str],
    version: str,
):
    """Write settings followed by the final counters."""
    handle.write(format_settings(config, version))
    handle.write(format_statistics(config, stats))
    handle.flush()


def write_statistics_tsv(stats: Statistics, output_path: Path) -> Path:
    """
    Write all counters to a two-column TSV file.

    Args:
        stats: Counters of a completed run
        output_path: Path for output TSV

    Returns:
        Path to written file
    """
    rows = [{'statistic': name, 'value': value} for name, value in stats.to_dict().items()]
    df = pd.DataFrame(rows, columns=['statistic', 'value'])
    df.to_csv(output_path, sep='\t', index=False)

    logger.info(f"Wrote statistics to {output_path}")

    return output_path
