"""
Configuration classes for adaptrim.

Holds the adapter/barcode catalogs and the thresholds of a run, loads them
from YAML or adapter list files, and validates them before any input is
opened.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional, Tuple
import yaml

from .errors import ConfigurationError
from .io.fastq import QualityFormat
from .utils.sequence import is_dna_sequence, normalize_sequence


# Standard TruSeq adapters (mate 1 adapter, mate 2 adapter)
DEFAULT_ADAPTER1 = "AGATCGGAAGAGCACACGTCTGAACTCCAGTCACNNNNNNATCTCGTATGCCGTCTTCTGCTTG"
DEFAULT_ADAPTER2 = "AGATCGGAAGAGCGTCGTGTAGGGAAAGAGTGTAGATCTCGGTGGTCGCCGTATCATT"


@dataclass(frozen=True)
class AdapterPair:
    """Adapter (or barcode) sequences expected on mate 1 and mate 2."""
    adapter1: str
    adapter2: str = ""

    @classmethod
    def from_sequences(cls, adapter1: str, adapter2: str = "") -> 'AdapterPair':
        pair = cls(normalize_sequence(adapter1), normalize_sequence(adapter2))
        pair.validate()
        return pair

    def validate(self):
        if not is_dna_sequence(self.adapter1):
            raise ConfigurationError(f"invalid mate 1 sequence: {self.adapter1!r}")
        if self.adapter2 and not is_dna_sequence(self.adapter2):
            raise ConfigurationError(f"invalid mate 2 sequence: {self.adapter2!r}")


DEFAULT_ADAPTERS = (AdapterPair(DEFAULT_ADAPTER1, DEFAULT_ADAPTER2),)


def load_sequence_pairs(path: Path) -> Tuple[AdapterPair, ...]:
    """
    Load adapter or barcode pairs from a text file.

    Each non-empty line holds one or two whitespace-separated sequences;
    everything after '#' is ignored.

    Raises:
        ConfigurationError: If the file is missing or a line is malformed
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"File not found: {path}")

    pairs = []
    with open(path) as f:
        for line_no, line in enumerate(f, 1):
            fields = line.split('#', 1)[0].split()
            if not fields:
                continue
            if len(fields) > 2:
                raise ConfigurationError(
                    f"{path}:{line_no}: expected 1 or 2 sequences, found {len(fields)}"
                )
            pairs.append(AdapterPair.from_sequences(*fields))

    if not pairs:
        raise ConfigurationError(f"No sequences found in {path}")
    return tuple(pairs)


def parse_mismatch_rate(value: float) -> float:
    """Read values above 1 as 1/value, so '3' means one mismatch in three."""
    value = float(value)
    if value > 1.0:
        return 1.0 / value
    return value


# Default output file suffixes, appended to the basename
SINGLE_END_OUTPUTS = {
    'output1': '.truncated',
    'discarded': '.discarded',
}

PAIRED_END_OUTPUTS = {
    'output1': '.pair1.truncated',
    'output2': '.pair2.truncated',
    'singleton': '.singleton.truncated',
    'discarded': '.discarded',
}

COLLAPSE_OUTPUTS = {
    'collapsed': '.collapsed',
    'collapsed_truncated': '.collapsed.truncated',
}


@dataclass
class PipelineConfig:
    """Full configuration of an adapter removal run."""
    file1: Path
    file2: Optional[Path] = None
    basename: str = "your_output"

    # Explicit output paths, keyed like SINGLE_END_OUTPUTS / PAIRED_END_OUTPUTS
    outputs: Dict[str, Path] = field(default_factory=dict)
    settings: Optional[Path] = None
    stats_tsv: Optional[Path] = None

    # Modes
    collapse: bool = False

    # Catalogs
    adapters: Tuple[AdapterPair, ...] = DEFAULT_ADAPTERS
    barcodes: Tuple[AdapterPair, ...] = ()

    # Alignment options
    shift: int = 2
    mismatch_rate: float = 1.0 / 3.0
    min_alignment_length: int = 11

    # Trimming / filtering options
    min_length: int = 15
    max_ambiguous: int = 1000
    trim_ambiguous: bool = False
    trim_qualities: bool = False
    low_quality_score: int = 2

    # Quality encodings
    quality_input: QualityFormat = QualityFormat.PHRED_33
    quality_output: QualityFormat = QualityFormat.PHRED_33

    @property
    def paired_ended(self) -> bool:
        return self.file2 is not None

    @property
    def trim_barcodes(self) -> bool:
        return bool(self.barcodes)

    def validate(self) -> 'PipelineConfig':
        """Check thresholds and mode combinations.

        Raises:
            ConfigurationError: On the first invalid setting
        """
        if self.shift < 0:
            raise ConfigurationError(f"--shift must be non-negative: {self.shift}")
        if not 0.0 <= self.mismatch_rate <= 1.0:
            raise ConfigurationError(f"--mm must be within [0, 1]: {self.mismatch_rate}")
        if self.min_alignment_length < 0:
            raise ConfigurationError(
                f"--minalignmentlength must be non-negative: {self.min_alignment_length}"
            )
        if self.min_length < 0:
            raise ConfigurationError(f"--minlength must be non-negative: {self.min_length}")
        if self.max_ambiguous < 0:
            raise ConfigurationError(f"--maxns must be non-negative: {self.max_ambiguous}")
        if self.low_quality_score < 0:
            raise ConfigurationError(f"--minquality must be non-negative: {self.low_quality_score}")
        if not self.adapters:
            raise ConfigurationError("at least one adapter is required")
        for pair in self.adapters + self.barcodes:
            pair.validate()
        if self.collapse and not self.paired_ended:
            raise ConfigurationError("--collapse requires paired-end input (--file2)")
        if self.paired_ended and Path(self.file1) == Path(self.file2):
            raise ConfigurationError("--file1 and --file2 must be different files")
        return self

    def output_paths(self) -> Dict[str, Path]:
        """Resolve record output paths for the current mode."""
        if self.paired_ended:
            suffixes = dict(PAIRED_END_OUTPUTS)
            if self.collapse:
                suffixes.update(COLLAPSE_OUTPUTS)
        else:
            suffixes = dict(SINGLE_END_OUTPUTS)

        return {
            key: Path(self.outputs[key]) if self.outputs.get(key) else Path(self.basename + suffix)
            for key, suffix in suffixes.items()
        }

    def settings_path(self) -> Path:
        return Path(self.settings) if self.settings else Path(self.basename + '.settings')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PipelineConfig':
        """Create from a dictionary as found in a YAML configuration."""
        data = dict(data)
        if 'file1' not in data:
            raise ConfigurationError("configuration requires 'file1'")

        adapters = DEFAULT_ADAPTERS
        if data.get('adapter_list'):
            adapters = load_sequence_pairs(Path(data['adapter_list']))
        elif data.get('adapters'):
            adapters = tuple(
                AdapterPair.from_sequences(*entry) if isinstance(entry, (list, tuple))
                else AdapterPair.from_sequences(entry)
                for entry in data['adapters']
            )

        barcodes: Tuple[AdapterPair, ...] = ()
        if data.get('barcode_list'):
            barcodes = load_sequence_pairs(Path(data['barcode_list']))
        elif data.get('barcodes'):
            barcodes = tuple(AdapterPair.from_sequences(b) for b in data['barcodes'])

        try:
            return cls(
                file1=Path(data['file1']),
                file2=Path(data['file2']) if data.get('file2') else None,
                basename=data.get('basename', 'your_output'),
                outputs={k: Path(v) for k, v in (data.get('outputs') or {}).items()},
                settings=Path(data['settings']) if data.get('settings') else None,
                stats_tsv=Path(data['stats_tsv']) if data.get('stats_tsv') else None,
                collapse=bool(data.get('collapse', False)),
                adapters=adapters,
                barcodes=barcodes,
                shift=int(data.get('shift', 2)),
                mismatch_rate=parse_mismatch_rate(data.get('mm', 1.0 / 3.0)),
                min_alignment_length=int(data.get('min_alignment_length', 11)),
                min_length=int(data.get('min_length', 15)),
                max_ambiguous=int(data.get('max_ns', 1000)),
                trim_ambiguous=bool(data.get('trim_ns', False)),
                trim_qualities=bool(data.get('trim_qualities', False)),
                low_quality_score=int(data.get('min_quality', 2)),
                quality_input=QualityFormat.parse(data.get('quality_base', '33')),
                quality_output=QualityFormat.parse(
                    data.get('quality_base_output', data.get('quality_base', '33'))
                ),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid configuration value: {e}") from e

    @classmethod
    def from_yaml(cls, path: Path) -> 'PipelineConfig':
        """Load configuration from YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"cannot read configuration {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"configuration {path} must be a mapping")
        return cls.from_dict(data)
