#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
OverlapWeaver v0.1.0

Tests for sequence manipulation utilities.

Author: OverlapWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
from overlapweaver.utils.sequence_utils import (
    is_valid_dna,
    iter_kmers,
    extract_kmers,
    find_all_occurrences,
)


class TestKmerExtraction:
    """Test k-mer extraction functions."""
    
    def test_basic_kmer_extraction(self):
        """Test extraction of k-mers from sequence."""
        sequence = "ATCGATCG"
        k = 3
        
        kmers = extract_kmers(sequence, k)
        
        expected = ["ATC", "TCG", "CGA", "GAT", "ATC", "TCG"]
        assert kmers == expected
    
    def test_kmer_count_correct(self):
        """Test that number of k-mers is correct."""
        sequence = "ATCGATCG"  # Length 8
        k = 3
        
        kmers = extract_kmers(sequence, k)
        
        # Should have (length - k + 1) k-mers
        expected_count = len(sequence) - k + 1
        assert len(kmers) == expected_count
    
    def test_kmer_larger_than_sequence(self):
        """Test handling when k > sequence length."""
        assert extract_kmers("ATG", 5) == []
    
    def test_kmer_equal_to_sequence(self):
        """Test that k == length yields the whole sequence once."""
        assert extract_kmers("ATG", 3) == ["ATG"]
    
    def test_iter_kmers_offsets(self):
        """Test that iter_kmers reports window offsets."""
        windows = list(iter_kmers("ACGTA", 4))
        
        assert windows == [(0, "ACGT"), (1, "CGTA")]


class TestAlphabet:
    """Test DNA alphabet validation."""
    
    @pytest.mark.parametrize("sequence", ["A", "ACGT", "TTTTGGGGCCCCAAAA"])
    def test_valid_sequences(self, sequence):
        assert is_valid_dna(sequence)
    
    @pytest.mark.parametrize("sequence", ["", "ACGN", "acgt", "ACG-T", "ACGU"])
    def test_invalid_sequences(self, sequence):
        assert not is_valid_dna(sequence)


class TestOccurrences:
    """Test exhaustive substring search."""
    
    def test_overlapping_occurrences_reported(self):
        """Test that homopolymer runs report every overlapping hit."""
        assert find_all_occurrences("AAAAA", "AAA") == [0, 1, 2]
    
    def test_no_occurrence(self):
        assert find_all_occurrences("ACGTACGT", "TTT") == []
    
    def test_multiple_separated_occurrences(self):
        assert find_all_occurrences("ACGTACGTACGT", "ACGT") == [0, 4, 8]
    
    def test_empty_pattern(self):
        """Test that an empty pattern matches nothing."""
        assert find_all_occurrences("ACGT", "") == []

# OverlapWeaver v0.1.0
# Any usage is subject to this software's license.
