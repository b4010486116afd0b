"""
OverlapWeaver v0.1.0

Sequence utility functions for OverlapWeaver.

Provides the string primitives shared by the k-mer index, the overlap
detector and the offset locator.
"""

from typing import FrozenSet, Iterator, List, Tuple

DNA_ALPHABET: FrozenSet[str] = frozenset("ACGT")


def is_valid_dna(sequence: str) -> bool:
    """
    Check that a sequence is non-empty and drawn from {A,C,G,T}.

    Args:
        sequence: DNA sequence string (case-sensitive)

    Returns:
        True if every character is one of A, C, G, T

    Example:
        >>> is_valid_dna("ACGT")
        True
        >>> is_valid_dna("ACGN")
        False
    """
    if not sequence:
        return False
    return set(sequence) <= DNA_ALPHABET


def iter_kmers(sequence: str, k: int) -> Iterator[Tuple[int, str]]:
    """
    Yield (offset, k-mer) for every sliding window of length k.

    Windows are taken by slicing at index offsets, so there are exactly
    len(sequence) - k + 1 of them (none when k > len(sequence)).
    """
    for i in range(len(sequence) - k + 1):
        yield i, sequence[i:i + k]


def extract_kmers(sequence: str, k: int) -> List[str]:
    """
    Extract all k-mers from a sequence.

    Args:
        sequence: DNA sequence string
        k: K-mer size

    Returns:
        List of k-mer strings

    Example:
        >>> extract_kmers("ATCGATCG", 3)
        ['ATC', 'TCG', 'CGA', 'GAT', 'ATC', 'TCG']
    """
    if k < 1 or k > len(sequence):
        return []

    return [kmer for _, kmer in iter_kmers(sequence.upper(), k)]


def find_all_occurrences(sequence: str, pattern: str) -> List[int]:
    """
    Find the start offset of every occurrence of pattern in sequence.

    Overlapping occurrences are all reported, e.g. "AAA" occurs at
    offsets 0, 1 and 2 of "AAAAA".

    Args:
        sequence: Sequence to scan
        pattern: Non-empty substring to look for

    Returns:
        Ascending list of start offsets

    Example:
        >>> find_all_occurrences("AAAAA", "AAA")
        [0, 1, 2]
    """
    if not pattern:
        return []

    starts = []
    pos = sequence.find(pattern)
    while pos != -1:
        starts.append(pos)
        pos = sequence.find(pattern, pos + 1)

    return starts


__all__ = [
    'DNA_ALPHABET',
    'is_valid_dna',
    'iter_kmers',
    'extract_kmers',
    'find_all_occurrences',
]
