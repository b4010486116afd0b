"""
OverlapWeaver Pipeline Orchestrator.

Coordinates one overlap-graph run:
- Ingestion: parse and validate reads once into a ReadSet
- Parameter checks: overlap length L and k-mer size k
- Indexing: k-mer index with prefix/suffix buckets
- Detection: exact overlaps pruned by the index
- Assembly: deduplicated overlap graph
- Offsets: terminal/internal occurrences of each overlap string
- Output: edge table, optional offset table, split reads and GFA

Every stage receives the same ReadSet; the input file is read exactly once.
"""

from pathlib import Path
from typing import Optional, Dict, Any, List
import logging
import time
from dataclasses import dataclass, field

from ..io_utils import (
    ReadSet,
    load_read_set,
    write_overlap_table,
    write_offset_table,
    write_split_reads_fasta,
    export_graph_to_gfa,
)
from ..assembly_core import (
    KmerIndex,
    OverlapDetector,
    OverlapGraph,
    OffsetLocator,
    OffsetTable,
    ShortReadWarning,
    validate_parameters,
)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


# ============================================================================
# Data Structures
# ============================================================================

@dataclass
class OverlapRunResult:
    """Everything produced by one pipeline run."""
    reads: ReadSet
    index: KmerIndex
    graph: OverlapGraph
    offsets: OffsetTable
    warnings: List[ShortReadWarning] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)
    outputs: Dict[str, str] = field(default_factory=dict)

    def summary(self) -> str:
        """Human-readable run summary."""
        s = self.stats
        lines = [
            f"Reads: {s.get('reads', 0)} accepted, {s.get('reads_rejected', 0)} rejected",
            f"K-mers: {s.get('distinct_kmers', 0)} distinct (k={s.get('kmer_size')})",
            f"Overlaps: {s.get('edges', 0)} edges across {s.get('nodes', 0)} reads "
            f"(L={s.get('overlap_length')})",
            f"Internal occurrences: {s.get('internal_occurrences', 0)} "
            f"in {s.get('reads_with_breaks', 0)} reads",
            f"Short-read warnings: {len(self.warnings)}",
        ]
        return "\n".join(lines)


def setup_logging(level: str = 'INFO', log_file: Optional[Path] = None):
    """
    Configure root logging for a run.

    Args:
        level: Logging level name
        log_file: Optional file to log to in addition to stderr
    """
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, str(level).upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


class OverlapPipeline:
    """
    Orchestrator for the overlap-graph pipeline.

    Steps run in a fixed order; each one stores its product on ``state`` so
    a failure report can say how far the run got.
    """

    STEPS = ['ingest', 'validate', 'index', 'detect', 'assemble', 'locate', 'write']

    def __init__(self, config: Dict[str, Any], configure_logging: bool = False):
        """
        Initialize pipeline orchestrator.

        Args:
            config: Pipeline configuration dictionary (see config.schema)
            configure_logging: Set up root logging from config['output']['logging']
        """
        self.config = config

        if configure_logging:
            log_cfg = config['output'].get('logging', {})
            setup_logging(log_cfg.get('level', 'INFO'), log_cfg.get('log_file'))
        self.logger = logging.getLogger(__name__)

        overlap_cfg = config['overlap']
        self.overlap_length: int = overlap_cfg['length']
        kmer_size = overlap_cfg.get('kmer_size')
        self.kmer_size: int = self.overlap_length if kmer_size is None else kmer_size
        self.strict_lengths: bool = overlap_cfg.get('strict_lengths', False)
        self.num_threads: int = config.get('hardware', {}).get('threads', 1) or 1

        # Runtime state
        self.state: Dict[str, Any] = {
            'current_step': None,
            'completed_steps': [],
            'reads': None,
            'index': None,
            'edges': None,
            'graph': None,
            'offsets': None,
            'warnings': [],
            'outputs': {},
        }
        self.timings: Dict[str, float] = {}

    def run(self, reads: Optional[ReadSet] = None) -> OverlapRunResult:
        """
        Run the complete pipeline.

        Args:
            reads: Pre-built ReadSet; when omitted, reads are loaded from
                config['input']['reads']

        Returns:
            OverlapRunResult

        Raises:
            IngestionError: If the input cannot be read or has no valid reads
            ParameterError: If L or k is invalid
        """
        self.logger.info("=" * 60)
        self.logger.info("Starting OverlapWeaver Pipeline")
        self.logger.info("=" * 60)

        if reads is not None:
            self.state['reads'] = reads

        for i, step in enumerate(self.STEPS):
            self.state['current_step'] = step
            self.logger.info(f"STEP {i + 1}/{len(self.STEPS)}: {step.upper()}")

            start = time.time()
            try:
                self._execute_step(step)
            except Exception as e:
                self.logger.error(f"Step {step} failed: {e}")
                raise
            self.timings[step] = time.time() - start
            self.state['completed_steps'].append(step)

        result = self._build_result()
        self.logger.info("Pipeline Complete!")
        for line in result.summary().splitlines():
            self.logger.info(f"  {line}")
        return result

    def _execute_step(self, step: str):
        """Execute a single pipeline step."""
        if step == 'ingest':
            self._step_ingest()
        elif step == 'validate':
            self._step_validate()
        elif step == 'index':
            self._step_index()
        elif step == 'detect':
            self._step_detect()
        elif step == 'assemble':
            self._step_assemble()
        elif step == 'locate':
            self._step_locate()
        elif step == 'write':
            self._step_write()
        else:
            raise ValueError(f"Unknown step: {step}")

    def _step_ingest(self):
        if self.state['reads'] is not None:
            self.logger.info(f"Using supplied ReadSet ({len(self.state['reads'])} reads)")
            return

        input_cfg = self.config['input']
        self.state['reads'] = load_read_set(input_cfg['reads'], input_cfg.get('format', 'auto'))

    def _step_validate(self):
        validate_parameters(
            self.state['reads'],
            self.overlap_length,
            self.kmer_size,
            strict_lengths=self.strict_lengths,
        )
        self.logger.info(
            f"Overlap length L={self.overlap_length}, k-mer size k={self.kmer_size}, "
            f"threads={self.num_threads}"
        )

    def _step_index(self):
        index = KmerIndex.build(self.state['reads'], self.kmer_size, num_threads=self.num_threads)
        self.state['index'] = index
        self.state['warnings'].extend(index.warnings)

    def _step_detect(self):
        detector = OverlapDetector(num_threads=self.num_threads)
        self.state['edges'] = detector.detect(
            self.state['reads'], self.state['index'], self.overlap_length
        )
        self.state['warnings'].extend(detector.warnings)
        self.state['detector_stats'] = dict(detector.stats)

    def _step_assemble(self):
        self.state['graph'] = OverlapGraph.assemble(self.state['edges'])

    def _step_locate(self):
        locator = OffsetLocator()
        self.state['offsets'] = locator.locate(
            self.state['reads'],
            self.state['graph'].overlap_strings(),
            index=self.state['index'],
        )
        self.state['locator_stats'] = dict(locator.stats)

    def _step_write(self):
        output_cfg = self.config['output']
        reads = self.state['reads']
        graph = self.state['graph']
        offsets = self.state['offsets']
        outputs = self.state['outputs']

        if output_cfg.get('edges'):
            write_overlap_table(graph, reads, output_cfg['edges'])
            outputs['edges'] = str(output_cfg['edges'])

        if output_cfg.get('offsets'):
            write_offset_table(offsets, output_cfg['offsets'])
            outputs['offsets'] = str(output_cfg['offsets'])

        if output_cfg.get('split_reads'):
            write_split_reads_fasta(offsets, reads, output_cfg['split_reads'])
            outputs['split_reads'] = str(output_cfg['split_reads'])

        if output_cfg.get('gfa'):
            export_graph_to_gfa(graph, reads, output_cfg['gfa'])
            outputs['gfa'] = str(output_cfg['gfa'])

    def _build_result(self) -> OverlapRunResult:
        reads = self.state['reads']
        index = self.state['index']
        graph = self.state['graph']
        offsets = self.state['offsets']
        locator_stats = self.state.get('locator_stats', {})

        stats = {
            'reads': len(reads),
            'reads_rejected': reads.rejected,
            'overlap_length': self.overlap_length,
            'kmer_size': self.kmer_size,
            'distinct_kmers': len(index),
            'candidates': self.state.get('detector_stats', {}).get('candidates', 0),
            'edges': graph.num_edges,
            'nodes': graph.num_nodes,
            'overlap_strings': len(graph.overlap_strings()),
            'internal_occurrences': locator_stats.get('internal', 0),
            'reads_with_breaks': locator_stats.get('reads_with_breaks', 0),
            'discardable_kmers': len(offsets.discardable_kmers),
            'timings': dict(self.timings),
        }

        return OverlapRunResult(
            reads=reads,
            index=index,
            graph=graph,
            offsets=offsets,
            warnings=list(self.state['warnings']),
            stats=stats,
            outputs=dict(self.state['outputs']),
        )


def build_overlap_graph(
    reads: ReadSet,
    overlap_length: int,
    kmer_size: Optional[int] = None,
    num_threads: int = 1,
    strict_lengths: bool = False
) -> OverlapRunResult:
    """
    Run the core stages on an in-memory ReadSet without writing files.

    Args:
        reads: Validated reads
        overlap_length: Overlap length L
        kmer_size: K-mer size (defaults to L)
        num_threads: Worker threads
        strict_lengths: Fail when L or k exceeds every read

    Returns:
        OverlapRunResult
    """
    config = {
        'input': {'reads': None, 'format': 'auto'},
        'overlap': {
            'length': overlap_length,
            'kmer_size': kmer_size,
            'strict_lengths': strict_lengths,
        },
        'hardware': {'threads': num_threads},
        'output': {'edges': None, 'offsets': None, 'gfa': None, 'split_reads': None},
    }
    return OverlapPipeline(config).run(reads=reads)
