"""
Error kinds raised while cleaning reads.

Every error is fatal for the run: counters are only reported after a
complete, uninterrupted pass over the input.
"""

from typing import Optional


class AdapterTrimError(Exception):
    """Base class for all adaptrim errors."""

    kind = "error"


class ConfigurationError(AdapterTrimError, ValueError):
    """Invalid thresholds, sequences or mode combinations."""

    kind = "configuration"


class StreamOpenError(AdapterTrimError):
    """A required input or output could not be opened."""

    kind = "open"


class RecordFormatError(AdapterTrimError):
    """Malformed FASTQ record, or mate files with unequal record counts."""

    kind = "format"

    def __init__(self, message: str, record_index: Optional[int] = None):
        super().__init__(message)
        self.record_index = record_index


class IOFailure(AdapterTrimError):
    """Read or write failure while streaming records."""

    kind = "io"
