#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Core I/O module for OverlapWeaver.

Consolidated module containing:
- Core read data structures (Read, ReadSet)
- FASTQ / FASTA parsing via Biopython
- Alphabet validation at the ingestion boundary

Reads are parsed once into a ReadSet, which is then handed by reference to
every assembly stage. No later stage re-opens the input file.
"""

# =============================================================================
# SECTION 1: IMPORTS AND DEPENDENCIES
# =============================================================================

import gzip
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Tuple, Union

from Bio import SeqIO

from ..utils.sequence_utils import DNA_ALPHABET, is_valid_dna

logger = logging.getLogger(__name__)

FASTQ_SUFFIXES = ('.fq', '.fastq')
FASTA_SUFFIXES = ('.fa', '.fasta', '.fna', '.fas')


class IngestionError(Exception):
    """Raised when the input cannot be opened, parsed, or yields no valid reads."""
    pass


class AlphabetViolation(ValueError):
    """Raised when a read sequence is empty or contains characters outside {A,C,G,T}."""

    def __init__(self, header: str, sequence: str):
        self.header = header
        bad = sorted(set(sequence) - DNA_ALPHABET)
        self.invalid_characters = bad
        if not sequence:
            message = f"Read '{header}' has an empty sequence"
        else:
            message = f"Read '{header}' contains invalid characters: {''.join(bad)}"
        super().__init__(message)


# =============================================================================
# SECTION 2: CORE READ DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class Read:
    """
    Sequencing read.

    Attributes:
        id: 0-based position among the accepted reads of a ReadSet
        header: Read identifier from the input file
        sequence: DNA sequence over {A,C,G,T}
    """
    id: int
    header: str
    sequence: str

    def __post_init__(self):
        if not is_valid_dna(self.sequence):
            raise AlphabetViolation(self.header, self.sequence)

    @property
    def length(self) -> int:
        """Get read length."""
        return len(self.sequence)

    def prefix(self, n: int) -> str:
        """Leading n characters of the read."""
        return self.sequence[:n]

    def suffix(self, n: int) -> str:
        """Trailing n characters of the read."""
        return self.sequence[len(self.sequence) - n:]

    def __len__(self) -> int:
        return len(self.sequence)

    def __repr__(self) -> str:
        return f"Read(id={self.id}, header='{self.header}', length={self.length})"


class ReadSet:
    """
    Ordered, read-only collection of validated reads.

    Built once by the ingestion boundary and passed to every stage. Reads
    that fail the alphabet check are rejected during construction and only
    counted, so they can never become graph nodes.
    """

    def __init__(self, reads: Iterable[Read] = (), rejected: int = 0):
        self._reads: Tuple[Read, ...] = tuple(reads)
        for position, read in enumerate(self._reads):
            if read.id != position:
                raise ValueError(
                    f"Read ids must be consecutive from 0; got {read.id} at position {position}"
                )
        self.rejected = rejected

    @classmethod
    def from_records(cls, records: Iterable[Tuple[str, str]]) -> 'ReadSet':
        """
        Build a ReadSet from (header, sequence) pairs.

        Sequences are upper-cased; reads failing the alphabet invariant are
        skipped and counted in ``rejected``.

        Args:
            records: Iterable of (header, sequence) pairs in input order

        Returns:
            ReadSet with ids assigned in acceptance order
        """
        reads: List[Read] = []
        rejected = 0

        for header, sequence in records:
            try:
                read = Read(id=len(reads), header=header, sequence=sequence.strip().upper())
            except AlphabetViolation as e:
                rejected += 1
                logger.warning(f"Skipping read: {e}")
                continue
            reads.append(read)

        if rejected:
            logger.warning(f"Rejected {rejected} read(s) failing the {{A,C,G,T}} alphabet check")

        return cls(reads, rejected=rejected)

    @classmethod
    def from_sequences(cls, sequences: Iterable[str]) -> 'ReadSet':
        """Build a ReadSet from bare sequences, naming reads read_0, read_1, ..."""
        return cls.from_records((f"read_{i}", seq) for i, seq in enumerate(sequences))

    def sequences(self) -> List[str]:
        """All sequences in read order."""
        return [read.sequence for read in self._reads]

    def min_length(self) -> int:
        """Length of the shortest read (0 for an empty set)."""
        return min((read.length for read in self._reads), default=0)

    def max_length(self) -> int:
        """Length of the longest read (0 for an empty set)."""
        return max((read.length for read in self._reads), default=0)

    @property
    def total_bases(self) -> int:
        return sum(read.length for read in self._reads)

    def __getitem__(self, read_id: int) -> Read:
        return self._reads[read_id]

    def __iter__(self) -> Iterator[Read]:
        return iter(self._reads)

    def __len__(self) -> int:
        return len(self._reads)

    def __repr__(self) -> str:
        return f"ReadSet(reads={len(self._reads)}, rejected={self.rejected})"


# =============================================================================
# SECTION 3: FILE HANDLING
# =============================================================================

def is_gzipped(filepath: Union[str, Path]) -> bool:
    """
    Check if file is gzip compressed.

    Args:
        filepath: Path to file

    Returns:
        True if file is gzipped
    """
    filepath = Path(filepath)
    return filepath.suffix in ('.gz', '.gzip')


def open_file(filepath: Union[str, Path], mode: str = 'r') -> TextIO:
    """
    Open file with automatic gzip detection.

    Args:
        filepath: Path to file
        mode: File mode ('r' or 'w')

    Returns:
        File handle
    """
    filepath = Path(filepath)

    if is_gzipped(filepath):
        if 'r' in mode:
            return gzip.open(filepath, 'rt')
        else:
            return gzip.open(filepath, 'wt')
    else:
        return open(filepath, mode)


def detect_format(filepath: Union[str, Path]) -> str:
    """
    Decide whether a reads file is FASTQ or FASTA.

    The file suffix is checked first (ignoring a trailing .gz); otherwise
    the first non-blank character decides ('@' for FASTQ, '>' for FASTA).

    Raises:
        IngestionError: If the format cannot be determined
    """
    filepath = Path(filepath)
    suffixes = [s.lower() for s in filepath.suffixes]
    if suffixes and suffixes[-1] in ('.gz', '.gzip'):
        suffixes = suffixes[:-1]

    if suffixes:
        if suffixes[-1] in FASTQ_SUFFIXES:
            return 'fastq'
        if suffixes[-1] in FASTA_SUFFIXES:
            return 'fasta'

    try:
        with open_file(filepath, 'r') as handle:
            for line in handle:
                stripped = line.strip()
                if not stripped:
                    continue
                if stripped.startswith('@'):
                    return 'fastq'
                if stripped.startswith('>'):
                    return 'fasta'
                break
    except (OSError, UnicodeDecodeError) as e:
        raise IngestionError(f"Cannot read input file {filepath}: {e}") from e

    raise IngestionError(f"Cannot determine read format of {filepath} (expected FASTQ or FASTA)")


# =============================================================================
# SECTION 4: READ PARSING
# =============================================================================

def read_records(
    filepath: Union[str, Path],
    file_format: str = 'auto'
) -> Iterator[Tuple[str, str]]:
    """
    Parse a FASTQ or FASTA file into (header, sequence) pairs.

    Args:
        filepath: Path to reads file (can be gzipped)
        file_format: 'fastq', 'fasta' or 'auto'

    Yields:
        (header, sequence) tuples in file order

    Raises:
        IngestionError: If the file is missing, unreadable or malformed
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise IngestionError(f"Reads file not found: {filepath}")
    if not filepath.is_file():
        raise IngestionError(f"Reads path is not a file: {filepath}")

    if file_format == 'auto':
        file_format = detect_format(filepath)
    elif file_format not in ('fastq', 'fasta'):
        raise IngestionError(f"Unsupported file format: {file_format}")

    try:
        with open_file(filepath, 'r') as handle:
            for record in SeqIO.parse(handle, file_format):
                yield record.id, str(record.seq)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        # Biopython reports malformed records (e.g. header/sequence count
        # mismatch, quality length mismatch) as ValueError.
        raise IngestionError(f"Failed to parse {file_format.upper()} file {filepath}: {e}") from e


def load_read_set(
    filepath: Union[str, Path],
    file_format: str = 'auto'
) -> ReadSet:
    """
    Load and validate all reads from a file.

    Args:
        filepath: Path to reads file
        file_format: 'fastq', 'fasta' or 'auto'

    Returns:
        ReadSet of accepted reads

    Raises:
        IngestionError: If the file cannot be read or contains zero valid reads
    """
    reads = ReadSet.from_records(read_records(filepath, file_format))

    if len(reads) == 0:
        raise IngestionError(
            f"No valid reads in {filepath} ({reads.rejected} rejected for invalid alphabet)"
        )

    logger.info(
        f"Loaded {len(reads)} reads ({reads.total_bases:,} bp) from {filepath}"
        + (f", rejected {reads.rejected}" if reads.rejected else "")
    )
    return reads


def write_fasta(records: Iterable[Tuple[str, str]], filepath: Union[str, Path]) -> int:
    """
    Write (header, sequence) records to a FASTA file.

    Args:
        records: Records to write
        filepath: Output path (gzipped if it ends in .gz)

    Returns:
        Number of records written
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open_file(filepath, 'w') as handle:
        for header, sequence in records:
            handle.write(f">{header}\n{sequence}\n")
            count += 1

    return count
