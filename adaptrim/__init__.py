"""
adaptrim - adapter removal, mate collapsing and quality trimming of
sequencing reads.
"""

__version__ = "0.4.0"

from .config import (
    AdapterPair,
    PipelineConfig,
)
from .core.alignment import AlignmentResult
from .core.classification import AlignmentClass
from .core.statistics import Statistics
from .errors import (
    AdapterTrimError,
    ConfigurationError,
    IOFailure,
    RecordFormatError,
    StreamOpenError,
)
from .io.fastq import FastqRecord, QualityFormat
from .pipeline import AdapterRemovalPipeline, RunResult, run_adapter_removal

__all__ = [
    "AdapterPair",
    "PipelineConfig",
    "AlignmentResult",
    "AlignmentClass",
    "Statistics",
    "FastqRecord",
    "QualityFormat",
    "AdapterRemovalPipeline",
    "RunResult",
    "run_adapter_removal",
    "AdapterTrimError",
    "ConfigurationError",
    "StreamOpenError",
    "RecordFormatError",
    "IOFailure",
    "__version__",
]
