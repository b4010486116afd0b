"""
Unit tests for exact overlap detection.

Author: OverlapWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import itertools
import random

import pytest
from overlapweaver.io_utils import ReadSet
from overlapweaver.assembly_core import (
    KmerIndex,
    OverlapDetector,
    OverlapEdge,
    ParameterError,
    detect_overlaps,
)


def brute_force_pairs(reads, overlap_length):
    """Every ordered pair (u, v), u != v, with u[-L:] == v[:L]."""
    pairs = set()
    for u, v in itertools.permutations(reads, 2):
        if len(u) >= overlap_length and len(v) >= overlap_length:
            if u.sequence[-overlap_length:] == v.sequence[:overlap_length]:
                pairs.add((u.id, v.id, u.sequence[-overlap_length:]))
    return pairs


class TestOverlapDetection:
    """Test edge emission."""
    
    def test_single_overlap(self):
        reads = ReadSet.from_sequences(["AAATTT", "TTTGGG"])
        index = KmerIndex.build(reads, 3)
        
        edges = detect_overlaps(reads, index, 3)
        
        assert edges == [OverlapEdge(
            overlap="TTT",
            source=0,
            target=1,
            source_prefix_remainder="AAA",
            target_suffix_remainder="GGG",
        )]
    
    def test_non_adjacent_reads_found(self):
        """Overlap depends on content, not on input order."""
        reads = ReadSet.from_sequences(["TTTGGG", "CCCCCC", "AAATTT"])
        index = KmerIndex.build(reads, 3)
        
        edges = detect_overlaps(reads, index, 3)
        
        assert [(e.source, e.target) for e in edges] == [(2, 0)]
    
    def test_no_self_overlap(self):
        reads = ReadSet.from_sequences(["ACGACG", "TTTTTT"])
        index = KmerIndex.build(reads, 3)
        
        edges = detect_overlaps(reads, index, 3)
        
        assert all(e.source != e.target for e in edges)
        assert edges == []
    
    def test_identical_reads_overlap_both_ways(self):
        reads = ReadSet.from_sequences(["AAAAA", "AAAAA"])
        index = KmerIndex.build(reads, 3)
        
        edges = detect_overlaps(reads, index, 3)
        
        assert {(e.source, e.target) for e in edges} == {(0, 1), (1, 0)}
        assert all(e.overlap == "AAA" for e in edges)
    
    def test_chain_and_shared_overlap(self, chain_reads):
        index = KmerIndex.build(chain_reads, 3)
        
        edges = detect_overlaps(chain_reads, index, 3)
        
        assert {e.key for e in edges} == {(0, 1, "CCT"), (0, 3, "CCT"), (1, 2, "ATC")}
    
    def test_remainders_use_overlap_length(self):
        reads = ReadSet.from_sequences(["GGGGACGTA", "ACGTATT"])
        index = KmerIndex.build(reads, 5)
        
        edges = detect_overlaps(reads, index, 5)
        
        assert len(edges) == 1
        assert edges[0].overlap == "ACGTA"
        assert edges[0].source_prefix_remainder == "GGGG"
        assert edges[0].target_suffix_remainder == "TT"


class TestKmerSizeMismatch:
    """Detection must not depend on k when L != k."""
    
    @pytest.mark.parametrize("k", [1, 2, 4, 6])
    def test_same_edges_for_any_k(self, chain_reads, k):
        reference = detect_overlaps(chain_reads, KmerIndex.build(chain_reads, 3), 3)
        
        edges = detect_overlaps(chain_reads, KmerIndex.build(chain_reads, k), 3)
        
        assert sorted(edges) == sorted(reference)
    
    def test_matches_brute_force_on_random_reads(self):
        rng = random.Random(7)
        sequences = ["".join(rng.choice("AC") for _ in range(rng.randint(3, 9))) for _ in range(40)]
        reads = ReadSet.from_sequences(sequences)
        
        for overlap_length, k in [(3, 3), (3, 2), (4, 5)]:
            index = KmerIndex.build(reads, k)
            edges = detect_overlaps(reads, index, overlap_length)
            
            assert {e.key for e in edges} == brute_force_pairs(reads, overlap_length)


class TestShortReadsAndParameters:
    """Short reads are excluded; invalid L is fatal."""
    
    def test_overlap_longer_than_every_read(self):
        reads = ReadSet.from_sequences(["ACG", "CGT"])
        index = KmerIndex.build(reads, 3)
        detector = OverlapDetector()
        
        edges = detector.detect(reads, index, 10)
        
        assert edges == []
        assert [w.read for w in detector.warnings] == [0, 1]
        assert all(w.role == "detector" for w in detector.warnings)
    
    def test_short_read_never_an_endpoint(self):
        reads = ReadSet.from_sequences(["AAATTT", "TT", "TTTGGG"])
        index = KmerIndex.build(reads, 2)
        detector = OverlapDetector()
        
        edges = detector.detect(reads, index, 3)
        
        assert [(e.source, e.target) for e in edges] == [(0, 2)]
        assert [w.read for w in detector.warnings] == [1]
    
    @pytest.mark.parametrize("overlap_length", [0, -1])
    def test_invalid_overlap_length(self, overlap_length):
        reads = ReadSet.from_sequences(["ACGT"])
        index = KmerIndex.build(reads, 2)
        
        with pytest.raises(ParameterError):
            detect_overlaps(reads, index, overlap_length)
    
    def test_single_read(self):
        reads = ReadSet.from_sequences(["ACGTACGT"])
        index = KmerIndex.build(reads, 3)
        
        assert detect_overlaps(reads, index, 3) == []


class TestParallelDetection:
    """Threaded confirmation must match single-threaded output."""
    
    def test_parallel_matches_serial(self):
        rng = random.Random(11)
        sequences = ["".join(rng.choice("ACGT") for _ in range(12)) for _ in range(60)]
        sequences += [s[-4:] + "ACGTACGT" for s in sequences[:20]]
        reads = ReadSet.from_sequences(sequences)
        index = KmerIndex.build(reads, 4)
        
        serial = OverlapDetector(num_threads=1)
        parallel = OverlapDetector(num_threads=4)
        
        serial_edges = serial.detect(reads, index, 4)
        parallel_edges = parallel.detect(reads, index, 4)
        
        assert parallel_edges == serial_edges
        assert len(serial_edges) >= 20
        assert parallel.stats['candidates'] == serial.stats['candidates']


class TestDetectorStats:
    """Statistics describe the most recent detect() call."""
    
    def test_reused_detector_does_not_accumulate(self):
        reads = ReadSet.from_sequences(["AAATTT", "TTTGGG", "TTTCCC"])
        index = KmerIndex.build(reads, 3)
        detector = OverlapDetector()
        
        first = detector.detect(reads, index, 3)
        first_stats = dict(detector.stats)
        second = detector.detect(reads, index, 3)
        
        assert second == first
        assert detector.stats == first_stats
        assert detector.stats['candidates'] == 2
        assert detector.stats['confirmed'] == 2
        assert detector.stats['rejected'] == 0
    
    def test_early_return_clears_previous_counts(self):
        reads = ReadSet.from_sequences(["AAATTT", "TTTGGG"])
        detector = OverlapDetector()
        detector.detect(reads, KmerIndex.build(reads, 3), 3)
        
        detector.detect(reads, KmerIndex.build(reads, 3), 10)
        
        assert detector.stats['candidates'] == 0
        assert detector.stats['confirmed'] == 0
        assert detector.stats['reads_skipped'] == 2
