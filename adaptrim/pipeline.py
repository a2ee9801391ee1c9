"""
Main pipeline orchestration for adaptrim.

Each read (or read pair) goes through barcode trimming, alignment,
classification, truncation or collapsing, quality trimming and the
acceptability decision before it is written to exactly one output stream.
Any error aborts the whole run; `run_adapter_removal` is the single place
that turns errors into the run outcome.
"""

from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Dict, Optional
import logging

from . import __version__
from .config import PipelineConfig
from .core.alignment import AlignmentResult, align_paired_ended, align_single_ended
from .core.classification import AlignmentClass, classify_alignment
from .core.statistics import Statistics
from .core.truncation import (
    collapse_paired_ended,
    truncate_paired_ended,
    truncate_single_ended,
)
from .errors import AdapterTrimError, IOFailure, RecordFormatError
from .io.fastq import FastqRecord, open_input, open_output, read_record, write_fastq
from .io.report import write_report, write_statistics_tsv
from .preprocessing.barcodes import trim_barcodes
from .preprocessing.trimming import is_acceptable_read, trim_by_quality

logger = logging.getLogger(__name__)

# Emit a progress debug line after processing this many records
DEBUG_EVERY: int = 100_000


@dataclass
class RunResult:
    """Outcome of a complete run."""
    success: bool
    statistics: Statistics
    error_kind: Optional[str] = None
    error_message: str = ""
    record_index: Optional[int] = None
    report_path: Optional[Path] = None

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1


class OutputStreams:
    """Named output streams of a run, all written in one quality encoding."""

    def __init__(self, handles: Dict[str, IO[str]], quality_format):
        self.handles = handles
        self.quality_format = quality_format

    @classmethod
    def open(cls, paths: Dict[str, Path], quality_format, stack: ExitStack) -> 'OutputStreams':
        handles = {}
        for key, path in paths.items():
            handles[key] = stack.enter_context(open_output(path))
        return cls(handles, quality_format)

    def write(self, key: str, record: FastqRecord):
        write_fastq(record, self.handles[key], self.quality_format)


class AdapterRemovalPipeline:
    """Drive reads through the cleaning stages and keep the run's counters."""

    def __init__(self, config: PipelineConfig, stats: Optional[Statistics] = None):
        self.config = config
        self.stats = stats if stats is not None else Statistics.create(
            len(config.adapters), len(config.barcodes)
        )
        self.adapters = [pair.adapter1 for pair in config.adapters]
        self.barcodes = [pair.adapter1 for pair in config.barcodes]

    def run(self) -> Statistics:
        """
        Process all input records.

        Raises:
            StreamOpenError: If an input or output cannot be opened
            RecordFormatError: On a malformed record or unequal mate files
            IOFailure: If reading or writing fails
        """
        config = self.config
        with ExitStack() as stack:
            input1 = stack.enter_context(open_input(config.file1))
            input2 = stack.enter_context(open_input(config.file2)) if config.paired_ended else None
            streams = OutputStreams.open(config.output_paths(), config.quality_output, stack)

            if input2 is not None:
                logger.info(f"Processing paired-end reads: {config.file1}, {config.file2}")
                self.process_paired_ended(input1, input2, streams)
            else:
                logger.info(f"Processing single-end reads: {config.file1}")
                self.process_single_ended(input1, streams)

        logger.info(f"Processed {self.stats.records} records")
        return self.stats

    # -- shared stages ---------------------------------------------------

    def _classify(self, alignment: AlignmentResult) -> AlignmentClass:
        aln_class = classify_alignment(
            alignment, self.config.min_alignment_length, self.config.mismatch_rate
        )
        self.stats.record_alignment(aln_class)
        return aln_class

    def _trim_barcodes(self, read: FastqRecord):
        if not self.barcodes:
            return
        barcode_id = trim_barcodes(
            read,
            self.barcodes,
            self.config.shift,
            self.config.min_alignment_length,
            self.config.mismatch_rate,
        )
        if barcode_id is not None:
            self.stats.barcode_hits[barcode_id] += 1

    def _trim_by_quality(self, read: FastqRecord) -> bool:
        """Quality trim a read; returns True if anything was removed."""
        n_5p, n_3p = trim_by_quality(
            read,
            low_quality_score=self.config.low_quality_score,
            trim_ambiguous=self.config.trim_ambiguous,
            trim_qualities=self.config.trim_qualities,
        )
        return bool(n_5p or n_3p)

    def _is_acceptable(self, read: FastqRecord) -> bool:
        return is_acceptable_read(read, self.config.min_length, self.config.max_ambiguous)

    def _log_progress(self):
        if self.stats.records % DEBUG_EVERY == 0:
            logger.debug(f"Processed {self.stats.records} records")

    # -- single-end ------------------------------------------------------

    def process_single_ended(self, input1: IO[str], streams: OutputStreams):
        """Process every read of a single FASTQ stream."""
        fmt = self.config.quality_input
        while True:
            read = read_record(input1, fmt, self.stats.records)
            if read is None:
                break
            self.process_read(read, streams)
            self.stats.records += 1
            self._log_progress()

    def process_read(self, read: FastqRecord, streams: OutputStreams):
        """Run one single-end read through all stages."""
        self._trim_barcodes(read)

        alignment = align_single_ended(
            read.sequence,
            self.adapters,
            self.config.shift,
            mismatch_threshold=self.config.mismatch_rate,
        )
        if self._classify(alignment) is AlignmentClass.VALID:
            truncate_single_ended(alignment, read)
            self.stats.adapter_hits[alignment.adapter_id] += 1

        self._trim_by_quality(read)
        acceptable = self._is_acceptable(read)
        self.stats.record_disposition(1, acceptable, len(read))
        streams.write('output1' if acceptable else 'discarded', read)

    # -- paired-end ------------------------------------------------------

    def process_paired_ended(self, input1: IO[str], input2: IO[str], streams: OutputStreams):
        """Process mate pairs read in lock-step from two FASTQ streams."""
        fmt = self.config.quality_input
        while True:
            index = self.stats.records
            mate1 = read_record(input1, fmt, index)
            mate2 = read_record(input2, fmt, index)
            if (mate1 is None) != (mate2 is None):
                raise RecordFormatError("files contain unequal number of records", index)
            if mate1 is None:
                break
            self.process_pair(mate1, mate2, streams)
            self.stats.records += 1
            self._log_progress()

    def process_pair(self, mate1: FastqRecord, mate2: FastqRecord, streams: OutputStreams):
        """Run one mate pair through all stages.

        Mate 2 stays in its sequenced orientation throughout; alignment and
        collapsing work on its reverse complement internally.
        """
        self._trim_barcodes(mate1)

        alignment = align_paired_ended(
            mate1.sequence,
            mate2.sequence,
            self.config.shift,
            mismatch_threshold=self.config.mismatch_rate,
        )
        if self._classify(alignment) is AlignmentClass.VALID:
            n_truncated = truncate_paired_ended(alignment, mate1, mate2)
            self.stats.adapter_hits[alignment.adapter_id] += n_truncated

            if self.config.collapse:
                self._write_collapsed(alignment, mate1, mate2, streams)
                return

        self._trim_by_quality(mate1)
        self._trim_by_quality(mate2)
        acceptable1 = self._is_acceptable(mate1)
        acceptable2 = self._is_acceptable(mate2)
        self.stats.record_disposition(1, acceptable1, len(mate1))
        self.stats.record_disposition(2, acceptable2, len(mate2))

        if acceptable1 and acceptable2:
            streams.write('output1', mate1)
            streams.write('output2', mate2)
            return

        self.stats.singleton1 += acceptable1
        self.stats.singleton2 += acceptable2
        streams.write('singleton' if acceptable1 else 'discarded', mate1)
        streams.write('singleton' if acceptable2 else 'discarded', mate2)

    def _write_collapsed(
        self,
        alignment: AlignmentResult,
        mate1: FastqRecord,
        mate2: FastqRecord,
        streams: OutputStreams,
    ):
        collapsed = collapse_paired_ended(
            alignment, mate1, mate2, max_quality=self.config.quality_output.max_phred
        )

        # Once trimmed, the read ends no longer mark the template ends
        was_trimmed = self._trim_by_quality(collapsed)
        if was_trimmed:
            collapsed.add_prefix_to_header("MT_")
            self.stats.truncated_collapsed += 1
        else:
            collapsed.add_prefix_to_header("M_")
            self.stats.full_length_collapsed += 1

        acceptable = self._is_acceptable(collapsed)
        self.stats.record_disposition(1, acceptable, len(collapsed))
        if acceptable:
            streams.write('collapsed_truncated' if was_trimmed else 'collapsed', collapsed)
        else:
            streams.write('discarded', collapsed)


def run_adapter_removal(config: PipelineConfig) -> RunResult:
    """
    Validate the configuration, process all reads and write the report.

    The report (settings and counters) is only written once every record
    has been processed; on any error the run fails without one.

    Args:
        config: Run configuration

    Returns:
        RunResult describing success or the error that aborted the run
    """
    stats = Statistics.create(len(config.adapters), len(config.barcodes))
    report_path = config.settings_path()

    try:
        config.validate()
        with ExitStack() as stack:
            # Opened up front so an unwritable report fails before processing
            report = stack.enter_context(open_output(report_path))
            AdapterRemovalPipeline(config, stats).run()
            try:
                write_report(config, stats, report, __version__)
            except OSError as e:
                raise IOFailure(f"error writing report to {report_path}: {e}") from e

        if config.stats_tsv:
            try:
                write_statistics_tsv(stats, config.stats_tsv)
            except OSError as e:
                raise IOFailure(f"error writing {config.stats_tsv}: {e}") from e

    except AdapterTrimError as e:
        record_index = getattr(e, 'record_index', None)
        if record_index is not None:
            logger.error(f"Error reading FASTQ record ({record_index}); aborting: {e}")
        else:
            logger.error(f"{type(e).__name__}; aborting: {e}")
        return RunResult(
            success=False,
            statistics=stats,
            error_kind=e.kind,
            error_message=str(e),
            record_index=record_index,
        )
    except OSError as e:
        logger.error(f"IO error; aborting: {e}")
        return RunResult(
            success=False,
            statistics=stats,
            error_kind=IOFailure.kind,
            error_message=str(e),
        )

    return RunResult(success=True, statistics=stats, report_path=report_path)
