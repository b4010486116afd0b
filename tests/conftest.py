#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
OverlapWeaver v0.1.0

Pytest configuration and shared fixtures.

Author: OverlapWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from overlapweaver.io_utils import ReadSet


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="overlapweaver_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def simple_fastq():
    """Generate simple FASTQ reads for testing (two reads overlapping by TTT)."""
    return """@read1
AAATTT
+
IIIIII
@read2
TTTGGG
+
IIIIII
"""


@pytest.fixture
def simple_fasta():
    """Generate simple FASTA reads for testing."""
    return ">read1\nAAATTT\n>read2\nTTTGGG\n"


@pytest.fixture
def chain_reads():
    """Four reads forming a chain plus a repeat: 0->1->2, 3 shares read 1's prefix."""
    return ReadSet.from_sequences([
        "ACGTACCT",   # 0: suffix 'CCT'
        "CCTGGATC",   # 1: prefix 'CCT', suffix 'ATC'
        "ATCGGTTA",   # 2: prefix 'ATC'
        "CCTAAAAA",   # 3: prefix 'CCT'
    ])


@pytest.fixture
def repeat_reads():
    """Reads where the overlap string 'GAT' also occurs inside a read."""
    return ReadSet.from_sequences([
        "ACGAGAT",    # 0: suffix GAT
        "GATCCCC",    # 1: prefix GAT
        "TTGATTT",    # 2: internal GAT at [2, 5)
    ])

# OverlapWeaver v0.1.0
# Any usage is subject to this software's license.
