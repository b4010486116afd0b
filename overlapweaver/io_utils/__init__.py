"""
OverlapWeaver v0.1.0

I/O Module for OverlapWeaver.

Module structure:
1. io_core.py - Read / ReadSet structures, FASTQ/FASTA parsing, alphabet checks
2. assembly_export.py - Edge table, offset table, split reads, GFA export
"""

# Core data structures and file I/O
from .io_core import (
    AlphabetViolation,
    IngestionError,
    Read,
    ReadSet,
    detect_format,
    load_read_set,
    open_file,
    read_records,
    write_fasta,
)

# Assembly export functions
from .assembly_export import (
    export_graph_to_gfa,
    format_edge_record,
    generate_read_name,
    write_offset_table,
    write_overlap_table,
    write_split_reads_fasta,
)

__all__ = [
    # Core data structures
    "Read",
    "ReadSet",

    # Errors
    "AlphabetViolation",
    "IngestionError",

    # Read I/O
    "detect_format",
    "load_read_set",
    "open_file",
    "read_records",
    "write_fasta",

    # Export
    "export_graph_to_gfa",
    "format_edge_record",
    "generate_read_name",
    "write_offset_table",
    "write_overlap_table",
    "write_split_reads_fasta",
]
