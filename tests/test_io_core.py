"""
Unit tests for read ingestion (Read, ReadSet, FASTQ/FASTA parsing).

Author: OverlapWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import gzip

import pytest
from overlapweaver.io_utils import (
    AlphabetViolation,
    IngestionError,
    Read,
    ReadSet,
    detect_format,
    load_read_set,
    read_records,
)


class TestRead:
    """Test the Read value object."""
    
    def test_prefix_and_suffix(self):
        read = Read(id=0, header="r", sequence="AAATTT")
        
        assert read.prefix(3) == "AAA"
        assert read.suffix(3) == "TTT"
        assert len(read) == 6
    
    def test_invalid_character_rejected(self):
        with pytest.raises(AlphabetViolation) as exc_info:
            Read(id=0, header="bad", sequence="ACGNT")
        
        assert exc_info.value.invalid_characters == ["N"]
        assert "bad" in str(exc_info.value)
    
    def test_empty_sequence_rejected(self):
        with pytest.raises(AlphabetViolation):
            Read(id=0, header="empty", sequence="")
    
    def test_read_is_immutable(self):
        read = Read(id=0, header="r", sequence="ACGT")
        
        with pytest.raises(Exception):
            read.sequence = "TTTT"


class TestReadSet:
    """Test ReadSet construction."""
    
    def test_ids_follow_acceptance_order(self):
        reads = ReadSet.from_records([("a", "ACGT"), ("b", "ACXT"), ("c", "GGCC")])
        
        assert len(reads) == 2
        assert reads.rejected == 1
        assert [r.id for r in reads] == [0, 1]
        assert [r.header for r in reads] == ["a", "c"]
    
    def test_sequences_upper_cased(self):
        reads = ReadSet.from_records([("a", "acgt")])
        
        assert reads[0].sequence == "ACGT"
    
    def test_length_summary(self):
        reads = ReadSet.from_sequences(["ACG", "ACGTACGT", "ACGTA"])
        
        assert reads.min_length() == 3
        assert reads.max_length() == 8
        assert reads.total_bases == 16
    
    def test_empty_set(self):
        reads = ReadSet()
        
        assert len(reads) == 0
        assert reads.max_length() == 0
    
    def test_non_consecutive_ids_rejected(self):
        with pytest.raises(ValueError):
            ReadSet([Read(id=1, header="r", sequence="ACGT")])


class TestFileParsing:
    """Test FASTQ / FASTA ingestion."""
    
    def test_read_fastq(self, temp_output_dir, simple_fastq):
        path = temp_output_dir / "reads.fastq"
        path.write_text(simple_fastq)
        
        records = list(read_records(path))
        
        assert records == [("read1", "AAATTT"), ("read2", "TTTGGG")]
    
    def test_read_fasta(self, temp_output_dir, simple_fasta):
        path = temp_output_dir / "reads.fa"
        path.write_text(simple_fasta)
        
        reads = load_read_set(path)
        
        assert reads.sequences() == ["AAATTT", "TTTGGG"]
    
    def test_read_gzipped_fastq(self, temp_output_dir, simple_fastq):
        path = temp_output_dir / "reads.fastq.gz"
        with gzip.open(path, "wt") as f:
            f.write(simple_fastq)
        
        reads = load_read_set(path)
        
        assert len(reads) == 2
    
    def test_format_sniffed_from_content(self, temp_output_dir, simple_fasta, simple_fastq):
        fasta = temp_output_dir / "reads.txt"
        fasta.write_text(simple_fasta)
        fastq = temp_output_dir / "reads.dat"
        fastq.write_text(simple_fastq)
        
        assert detect_format(fasta) == "fasta"
        assert detect_format(fastq) == "fastq"
    
    def test_unknown_format(self, temp_output_dir):
        path = temp_output_dir / "reads.txt"
        path.write_text("ACGT\n")
        
        with pytest.raises(IngestionError):
            detect_format(path)
    
    def test_missing_file(self, temp_output_dir):
        with pytest.raises(IngestionError):
            load_read_set(temp_output_dir / "missing.fastq")
    
    def test_invalid_reads_skipped(self, temp_output_dir):
        path = temp_output_dir / "reads.fa"
        path.write_text(">ok\nACGT\n>bad\nACNN\n>ok2\nTTGG\n")
        
        reads = load_read_set(path)
        
        assert reads.sequences() == ["ACGT", "TTGG"]
        assert reads.rejected == 1
    
    def test_zero_valid_reads_is_fatal(self, temp_output_dir):
        path = temp_output_dir / "reads.fa"
        path.write_text(">bad\nNNNN\n")
        
        with pytest.raises(IngestionError):
            load_read_set(path)
    
    def test_malformed_fastq_is_fatal(self, temp_output_dir):
        path = temp_output_dir / "reads.fastq"
        path.write_text("@read1\nACGT\n+\nII\n")
        
        with pytest.raises(IngestionError):
            load_read_set(path)
