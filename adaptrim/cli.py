"""
Command-line interface for adaptrim.
"""

import logging
import sys

import click

from . import __version__
from .config import DEFAULT_ADAPTER1, DEFAULT_ADAPTER2, PipelineConfig
from .errors import ConfigurationError


@click.group()
@click.version_option(version=__version__)
def cli():
    """adaptrim: adapter removal, mate collapsing and quality trimming."""
    pass


@cli.command()
@click.option('--config', 'config_file', type=click.Path(),
              help='YAML configuration file; command-line options override it')
@click.option('--file1', type=click.Path(),
              help='Input FASTQ file (mate 1 reads in paired-end mode)')
@click.option('--file2', type=click.Path(),
              help='Mate 2 FASTQ file; enables paired-end mode')
@click.option('--basename', type=str,
              help='Prefix for output files (default: your_output)')
@click.option('--output1', type=click.Path(), help='Output for (mate 1) reads')
@click.option('--output2', type=click.Path(), help='Output for mate 2 reads')
@click.option('--singleton', type=click.Path(), help='Output for singleton reads')
@click.option('--discarded', type=click.Path(), help='Output for discarded reads')
@click.option('--outputcollapsed', type=click.Path(), help='Output for collapsed reads')
@click.option('--outputcollapsedtruncated', type=click.Path(),
              help='Output for collapsed reads shortened by quality trimming')
@click.option('--settings', type=click.Path(), help='Settings and statistics report')
@click.option('--stats-tsv', type=click.Path(), help='Also write counters as TSV')
@click.option('--adapter1', type=str, help='Adapter expected in mate 1 reads')
@click.option('--adapter2', type=str, help='Adapter expected in mate 2 reads')
@click.option('--adapter-list', type=click.Path(),
              help='File with one adapter pair per line (overrides --adapter1/--adapter2)')
@click.option('--barcode', 'barcodes', type=str, multiple=True,
              help="Mate 1 5' barcode; may be given multiple times")
@click.option('--barcode-list', type=click.Path(), help='File with one barcode per line')
@click.option('--shift', type=int, help='Largest alignment offset tried (default: 2)')
@click.option('--mm', type=float,
              help='Maximum mismatch rate; values > 1 mean 1/value (default: 1/3)')
@click.option('--minalignmentlength', 'min_alignment_length', type=int,
              help='Minimum overlap of a valid alignment (default: 11)')
@click.option('--minlength', 'min_length', type=int,
              help='Reads shorter than this after trimming are discarded (default: 15)')
@click.option('--maxns', 'max_ns', type=int,
              help='Reads with more Ns than this are discarded (default: 1000)')
@click.option('--minquality', 'min_quality', type=int,
              help='Highest quality trimmed with --trimqualities (default: 2)')
@click.option('--trimns/--no-trimns', 'trim_ns', default=None,
              help='Trim Ns at the ends of reads')
@click.option('--trimqualities/--no-trimqualities', 'trim_qualities', default=None,
              help='Trim low-quality bases at the ends of reads')
@click.option('--collapse/--no-collapse', default=None,
              help='Collapse overlapping mates into a single read')
@click.option('--qualitybase', 'quality_base', type=click.Choice(['33', '64', 'solexa']),
              help='Quality encoding of the input (default: 33)')
@click.option('--qualitybase-output', 'quality_base_output',
              type=click.Choice(['33', '64', 'solexa']),
              help='Quality encoding of the output (default: same as input)')
@click.option('--verbose', '-v', is_flag=True, help='Log debug messages')
def run(config_file, file1, file2, basename, output1, output2, singleton, discarded,
        outputcollapsed, outputcollapsedtruncated, settings, stats_tsv, adapter1,
        adapter2, adapter_list, barcodes, barcode_list, shift, mm,
        min_alignment_length, min_length, max_ns, min_quality, trim_ns,
        trim_qualities, collapse, quality_base, quality_base_output, verbose):
    """
    Remove adapters, collapse overlapping mates and trim reads.

    \b
    Single-end example:
      adaptrim run --file1 reads.fastq.gz --basename sample --trimns --trimqualities

    \b
    Paired-end example with collapsing:
      adaptrim run --file1 r1.fq --file2 r2.fq --basename sample --collapse
    """
    from .pipeline import run_adapter_removal

    # Set up logging
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    data = {}
    if config_file:
        import yaml
        try:
            with open(config_file) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            click.echo(f"Error loading configuration: {e}", err=True)
            sys.exit(1)
        if not isinstance(data, dict):
            click.echo(f"Error loading configuration: {config_file} must be a mapping", err=True)
            sys.exit(1)

    overrides = {
        'file1': file1,
        'file2': file2,
        'basename': basename,
        'settings': settings,
        'stats_tsv': stats_tsv,
        'adapter_list': adapter_list,
        'barcode_list': barcode_list,
        'shift': shift,
        'mm': mm,
        'min_alignment_length': min_alignment_length,
        'min_length': min_length,
        'max_ns': max_ns,
        'min_quality': min_quality,
        'trim_ns': trim_ns,
        'trim_qualities': trim_qualities,
        'collapse': collapse,
        'quality_base': quality_base,
        'quality_base_output': quality_base_output,
    }
    data.update({k: v for k, v in overrides.items() if v is not None})

    if adapter1 or adapter2:
        data['adapters'] = [[adapter1 or DEFAULT_ADAPTER1, adapter2 or DEFAULT_ADAPTER2]]
    if barcodes:
        data['barcodes'] = list(barcodes)

    outputs = dict(data.get('outputs') or {})
    outputs.update({k: v for k, v in {
        'output1': output1,
        'output2': output2,
        'singleton': singleton,
        'discarded': discarded,
        'collapsed': outputcollapsed,
        'collapsed_truncated': outputcollapsedtruncated,
    }.items() if v})
    data['outputs'] = outputs

    if not data.get('file1'):
        click.echo("Error: --file1 (or 'file1' in --config) is required", err=True)
        sys.exit(1)

    try:
        config = PipelineConfig.from_dict(data)
    except ConfigurationError as e:
        click.echo(f"Error in configuration: {e}", err=True)
        sys.exit(1)

    result = run_adapter_removal(config)
    if not result.success:
        if result.record_index is not None:
            click.echo(f"Error reading FASTQ record ({result.record_index}); aborting:\n"
                       f"    {result.error_message}", err=True)
        else:
            click.echo(f"Error ({result.error_kind}); aborting:\n    {result.error_message}",
                       err=True)
        sys.exit(result.exit_code)

    stats = result.statistics
    click.echo(f"Processed {stats.records} {'read pairs' if config.paired_ended else 'reads'}")
    click.echo(f"Retained {stats.retained_reads} reads "
               f"(average length {stats.average_retained_length:.2f})")
    click.echo(f"Report written to: {result.report_path}")


@cli.command()
@click.option('--output', '-o', type=click.Path(), default='adaptrim_config.yaml',
              help='Output config file path')
def init(output):
    """Generate a template configuration file."""
    template = f'''# adaptrim configuration template
# Edit this file and run: adaptrim run --config <this file>

# Required: input reads
file1: reads_R1.fastq.gz
# file2: reads_R2.fastq.gz        # enables paired-end mode

# Output files are named <basename>.<suffix> unless overridden in 'outputs'
basename: your_output
# outputs:
#   output1: cleaned_R1.fastq.gz
#   discarded: discarded.fastq.gz
# stats_tsv: your_output.stats.tsv

# Adapters (mate 1, mate 2); or point adapter_list at a file of pairs
adapters:
  - [{DEFAULT_ADAPTER1}, {DEFAULT_ADAPTER2}]
# adapter_list: adapters.txt

# Optional mate 1 5' barcodes
# barcodes: [ACGTAC, TGCATG]

# Alignment
shift: 2
mm: 3                      # one mismatch in three
min_alignment_length: 11
collapse: false            # paired-end only

# Trimming and filtering
trim_ns: false
trim_qualities: false
min_quality: 2
min_length: 15
max_ns: 1000

# Quality encodings: 33, 64 or solexa
quality_base: 33
quality_base_output: 33
'''

    with open(output, 'w') as f:
        f.write(template)

    click.echo(f"Generated configuration template: {output}")
    click.echo("\nEdit this file and run:")
    click.echo(f"  adaptrim run --config {output}")


def main():
    cli()


if __name__ == '__main__':
    main()
