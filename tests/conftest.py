"""
Pytest fixtures and helpers for adaptrim tests.

Provides builders for FASTQ records and files and a ready-made run
configuration writing into the test's temporary directory.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pytest

from adaptrim.config import AdapterPair, PipelineConfig
from adaptrim.io.fastq import FastqRecord

# Adapter pair used throughout the tests
ADAPTER1 = "AGATCGGAAGAGCACACGTC"
ADAPTER2 = "AGATCGGAAGAGCGTCGTGT"

# Non-repetitive 15 bp template used for mate overlap tests
TEMPLATE = "CATGGTCAAGCTTAC"


def make_record(header: str, sequence: str, qual: int = 40,
                qualities: Optional[List[int]] = None) -> FastqRecord:
    """Build a record with uniform (or explicit) qualities."""
    if qualities is None:
        qualities = [qual] * len(sequence)
    return FastqRecord(header, sequence, list(qualities))


def fastq_text(reads: Iterable[Tuple[str, str]], qual_char: str = 'I') -> str:
    """Format (header, sequence) pairs as Phred+33 FASTQ text."""
    return ''.join(
        f"@{header}\n{seq}\n+\n{qual_char * len(seq)}\n" for header, seq in reads
    )


def write_fastq_file(path: Path, reads: Iterable[Tuple[str, str]], qual_char: str = 'I') -> Path:
    path.write_text(fastq_text(reads, qual_char))
    return path


def parse_headers(path: Path) -> List[str]:
    """Headers (without '@') of a FASTQ file written by the pipeline."""
    lines = path.read_text().splitlines()
    return [lines[i][1:] for i in range(0, len(lines), 4)]


@pytest.fixture
def adapters() -> Tuple[AdapterPair, ...]:
    return (AdapterPair(ADAPTER1, ADAPTER2),)


@pytest.fixture
def make_config(tmp_path, adapters):
    """Factory for configurations writing below tmp_path."""
    def _make(file1: Path, file2: Optional[Path] = None, **kwargs) -> PipelineConfig:
        kwargs.setdefault('adapters', adapters)
        return PipelineConfig(
            file1=file1,
            file2=file2,
            basename=str(tmp_path / "out"),
            **kwargs,
        )
    return _make
