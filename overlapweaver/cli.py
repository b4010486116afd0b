#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for OverlapWeaver.

This module provides the main CLI entry point and all subcommands for
building read overlap graphs.
"""

import sys
import click
from pathlib import Path
import yaml

from .version import __version__
from .config.parser import ConfigParser, ConfigValidationError
from .config.schema import save_config_template, validate_config
from .io_utils import IngestionError
from .assembly_core import ParameterError
from .utils.pipeline import OverlapPipeline


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    OverlapWeaver: exact overlap graphs for sequencing reads

    Finds every ordered read pair whose length-L suffix/prefix match, using a
    k-mer index to prune the search, and reports where overlap strings also
    occur inside reads.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


# ============================================================================
# Overlap Graph Construction
# ============================================================================

@main.command('build')
@click.argument('reads', type=click.Path())
@click.argument('overlap_length', type=int)
@click.option('--kmer-size', '-k', type=int, default=None,
              help='K-mer size for the index (default: overlap length)')
@click.option('--output', '-o', type=click.Path(), default=None,
              help='Edge table path (default: overlap.txt)')
@click.option('--offsets', type=click.Path(), default=None,
              help='Write the overlap-string offset table to this TSV')
@click.option('--split-reads', type=click.Path(), default=None,
              help='Write reads cut at internal break points to this FASTA')
@click.option('--gfa', type=click.Path(), default=None,
              help='Write the overlap graph as GFA v1')
@click.option('--format', 'file_format', type=click.Choice(['auto', 'fastq', 'fasta']),
              default=None, help='Input format (default: auto-detect)')
@click.option('--threads', '-t', type=int, default=None,
              help='Worker threads for indexing and overlap confirmation')
@click.option('--strict-lengths', is_flag=True, default=False,
              help='Fail when the overlap length or k exceeds every read')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True), default=None,
              help='YAML configuration file')
@click.option('--log-file', type=click.Path(), default=None, help='Also log to this file')
@click.pass_context
def build(ctx, reads, overlap_length, kmer_size, output, offsets, split_reads, gfa,
          file_format, threads, strict_lengths, config_file, log_file):
    """Build the overlap graph for READS with overlap length OVERLAP_LENGTH."""
    try:
        parser = ConfigParser(config_file)
    except (FileNotFoundError, ConfigValidationError) as e:
        click.echo(f"✗ Error loading configuration: {e}", err=True)
        sys.exit(1)

    level = None
    if ctx.obj.get('VERBOSE'):
        level = 'DEBUG'
    elif ctx.obj.get('QUIET'):
        level = 'WARNING'

    parser.merge_cli_overrides({
        'input.reads': reads,
        'input.format': file_format,
        'overlap.length': overlap_length,
        'overlap.kmer_size': kmer_size,
        'overlap.strict_lengths': strict_lengths or None,
        'hardware.threads': threads,
        'output.edges': output,
        'output.offsets': offsets,
        'output.split_reads': split_reads,
        'output.gfa': gfa,
        'output.logging.level': level,
        'output.logging.log_file': log_file,
    })
    config = parser.to_dict()

    errors = validate_config(config, require_runtime=True)
    if errors:
        click.echo("✗ Invalid parameters:", err=True)
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    try:
        result = OverlapPipeline(config, configure_logging=True).run()
    except (IngestionError, ParameterError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    if not ctx.obj.get('QUIET'):
        click.echo(result.summary())
        for name, path in result.outputs.items():
            click.echo(f"✓ {name}: {path}")


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='overlapweaver_config.yaml',
              help='Output configuration file path')
def config_init(output):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating configuration template: {output}")

    try:
        save_config_template(Path(output))
    except OSError as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Configuration file created: {output}")
    click.echo("\nSet input.reads and overlap.length, or pass them to 'overlapweaver build'.")


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        config = ConfigParser(config_file).to_dict()
    except ConfigValidationError as e:
        click.echo(f"✗ Error validating configuration: {e}", err=True)
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        click.echo("\n✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")
    click.echo("\nKey Settings:")
    click.echo(f"  Overlap length: {config['overlap']['length']}")
    click.echo(f"  K-mer size: {config['overlap']['kmer_size'] or 'same as overlap length'}")
    click.echo(f"  Threads: {config['hardware']['threads']}")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, format):
    """Display configuration settings."""
    try:
        config = ConfigParser(config_file).to_dict()
    except ConfigValidationError as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)

    if format == 'yaml':
        click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))
        return

    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)
    click.echo(f"  Reads: {config['input']['reads']} ({config['input']['format']})")
    click.echo(f"  Overlap length: {config['overlap']['length']}")
    click.echo(f"  K-mer size: {config['overlap']['kmer_size'] or 'same as overlap length'}")
    click.echo(f"  Strict lengths: {config['overlap']['strict_lengths']}")
    click.echo(f"  Threads: {config['hardware']['threads']}")
    click.echo(f"  Edge table: {config['output']['edges']}")
    for key in ('offsets', 'split_reads', 'gfa'):
        if config['output'].get(key):
            click.echo(f"  {key}: {config['output'][key]}")


if __name__ == '__main__':
    main()
