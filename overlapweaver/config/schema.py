"""
OverlapWeaver v0.1.0

Configuration schema for OverlapWeaver.

Defines all available configuration parameters with defaults and validation.

Author: OverlapWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import copy
from typing import Dict, Any, List
from pathlib import Path
import yaml


LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Input
    # ========================================================================
    'input': {
        'reads': None,  # Path to FASTQ/FASTA reads (required)
        'format': 'auto',  # 'auto', 'fastq' or 'fasta'
    },

    # ========================================================================
    # Overlap Detection
    # ========================================================================
    'overlap': {
        'length': None,  # Overlap length L (required)
        'kmer_size': None,  # k for the k-mer index; defaults to L
        'strict_lengths': False,  # Fail when L or k exceeds every read
    },

    # ========================================================================
    # Hardware Settings
    # ========================================================================
    'hardware': {
        'threads': 1,  # Single-threaded by default
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'edges': 'overlap.txt',  # Tab-delimited edge table
        'offsets': None,  # Optional offset table TSV
        'gfa': None,  # Optional GFA export
        'split_reads': None,  # Optional FASTA of reads cut at break points
        'logging': {
            'level': 'INFO',
            'log_file': None,
        },
    },
}

REQUIRED_SECTIONS = ['input', 'overlap', 'hardware', 'output']


def get_default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def load_config(config_file: Path) -> Dict[str, Any]:
    """
    Load a configuration file merged over the defaults.

    Args:
        config_file: YAML configuration path

    Returns:
        Configuration dictionary
    """
    from .parser import ConfigParser
    return ConfigParser(config_file).to_dict()


def save_config_template(output_path: Path) -> None:
    """
    Write the default configuration as a commented YAML template.

    Args:
        output_path: Destination file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        f.write("# OverlapWeaver configuration\n")
        f.write("# Required: input.reads and overlap.length\n")
        f.write("# Environment variables may be referenced as ${VAR} or ${VAR:-default}\n\n")
        yaml.safe_dump(get_default_config(), f, default_flow_style=False, sort_keys=False)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def validate_config(config: Dict[str, Any], require_runtime: bool = False) -> List[str]:
    """
    Validate a configuration dictionary.

    Args:
        config: Configuration to check
        require_runtime: Also require input.reads and overlap.length to be set

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    for section in REQUIRED_SECTIONS:
        if not isinstance(config.get(section), dict):
            errors.append(f"Missing required configuration section: {section}")
    if errors:
        return errors

    overlap = config['overlap']
    length = overlap.get('length')
    if length is None:
        if require_runtime:
            errors.append("overlap.length is required")
    elif not _is_positive_int(length):
        errors.append(f"overlap.length must be a positive integer, got {length!r}")

    kmer_size = overlap.get('kmer_size')
    if kmer_size is not None and not _is_positive_int(kmer_size):
        errors.append(f"overlap.kmer_size must be a positive integer, got {kmer_size!r}")

    if not isinstance(overlap.get('strict_lengths', False), bool):
        errors.append("overlap.strict_lengths must be true or false")

    threads = config['hardware'].get('threads', 1)
    if not _is_positive_int(threads):
        errors.append(f"hardware.threads must be a positive integer, got {threads!r}")

    file_format = config['input'].get('format', 'auto')
    if file_format not in ('auto', 'fastq', 'fasta'):
        errors.append(f"input.format must be one of auto, fastq, fasta; got {file_format!r}")

    if require_runtime and not config['input'].get('reads'):
        errors.append("input.reads is required")

    output = config['output']
    if not output.get('edges'):
        errors.append("output.edges must be a file path")

    level = output.get('logging', {}).get('level', 'INFO')
    if str(level).upper() not in LOG_LEVELS:
        errors.append(f"output.logging.level must be one of {', '.join(LOG_LEVELS)}; got {level!r}")

    return errors
