"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

deduplicator.py
Pipeline-based duplicate detection:
    traversal → size buckets → partial digest → full digest → original selection

Progress bands of the overall fraction:
    0.00 – 0.40  collecting files (one step per root)
    0.50 – 0.70  partial hashing
    0.70 – 0.95  full hashing
    1.00         finished

A cancelled run returns no groups at all, never a partial set.
"""
import logging
import os
import time
from typing import Callable, Iterator, List, Optional, Tuple

from dupsweep.core.cancellation import CancellationToken
from dupsweep.core.grouper import FileGrouperImpl
from dupsweep.core.interfaces import Deduplicator, FileScanner
from dupsweep.core.models import (
    CandidateGroup, DeduplicationStats, DuplicateGroup, FileRecord, ScanPhase
)
from dupsweep.core.progress import ProgressReporter
from dupsweep.core.scanner import FileScannerImpl
from dupsweep.core.sorter import Sorter
from dupsweep.core.stages import SizeStageImpl, PartialHashStage, FullHashStage

logger = logging.getLogger(__name__)

COLLECT_END = 0.4
HASH_START = 0.5
PARTIAL_END = 0.7
FULL_END = 0.95


class DeduplicatorImpl(Deduplicator):
    """
    Implements multi-stage duplicate detection using a pipeline architecture
    and collects per-stage statistics.
    """

    def __init__(self, scanner: Optional[FileScanner] = None, grouper: Optional[FileGrouperImpl] = None):
        self.scanner = scanner or FileScannerImpl()
        self.grouper = grouper or FileGrouperImpl()

    def find_duplicates(
        self,
        roots: List[str],
        token: Optional[CancellationToken] = None,
        progress_callback: Optional[Callable[[str, float], None]] = None
    ) -> Tuple[List[DuplicateGroup], DeduplicationStats]:
        """
        Main pipeline.
        Args:
            roots: Directories to search; inaccessible ones are skipped
            token: Cancellation token; once set the result is empty
            progress_callback: Receives (label, fraction in 0.0–1.0)
        Returns:
            Tuple[List[DuplicateGroup], DeduplicationStats], groups sorted by reclaimable size
        """
        token = token or CancellationToken()
        stats = DeduplicationStats()
        reporter = ProgressReporter(progress_callback)
        total_start_time = time.time()

        if token.cancelled:
            logger.debug("Duplicate scan cancelled before start")
            return [], stats

        # Stage 1: traversal feeding the size buckets
        reporter.enter_phase(ScanPhase.COLLECTING)
        reporter.report("Collecting files...", 0.0)
        start_time = time.time()
        groups = SizeStageImpl(self.grouper).process(self._collect(roots, token, reporter, stats), token)
        self._update_stats(stats, "size", time.time() - start_time, groups)

        if token.cancelled:
            return [], stats

        confirmed: List[Tuple[str, CandidateGroup]] = []
        if groups:
            reporter.enter_phase(ScanPhase.HASHING)
            reporter.report("Comparing files...", HASH_START)

            # Stage 2: partial digest
            start_time = time.time()
            partial = PartialHashStage(self.grouper).process(
                groups, token, self._band(reporter, HASH_START, PARTIAL_END)
            )
            groups = [group for _, group in partial]
            self._update_stats(stats, "partial", time.time() - start_time, groups)

            if token.cancelled:
                return [], stats

            # Stage 3: full digest
            start_time = time.time()
            confirmed = FullHashStage(self.grouper).process(
                groups, token, self._band(reporter, PARTIAL_END, FULL_END)
            )
            self._update_stats(stats, "full", time.time() - start_time, [g for _, g in confirmed])

            if token.cancelled:
                return [], stats

        duplicate_groups = Sorter.sort_groups(
            [Sorter.assemble_group(digest, group.files) for digest, group in confirmed]
        )

        reporter.enter_phase(ScanPhase.FINISHED)
        reporter.report("Finished", 1.0)
        stats.total_time = time.time() - total_start_time
        logger.debug(f"Found {len(duplicate_groups)} duplicate groups in {stats.total_time:.2f}s")
        return duplicate_groups, stats

    def _collect(
        self,
        roots: List[str],
        token: CancellationToken,
        reporter: ProgressReporter,
        stats: DeduplicationStats
    ) -> Iterator[FileRecord]:
        for index, root in enumerate(roots):
            if token.cancelled:
                return
            fraction = index / len(roots) * COLLECT_END
            reporter.report(f"Scanning {os.path.basename(os.path.normpath(root))}...", fraction)
            for record in self.scanner.scan([root], token, reporter.label_callback(fraction)):
                stats.files_scanned += 1
                yield record

    @staticmethod
    def _band(reporter: ProgressReporter, start: float, end: float) -> Callable[[str, int, int], None]:
        """Maps a stage's (label, done, total) progress into a band of the overall fraction."""
        def _report(label: str, done: int, total: int) -> None:
            reporter.report(label, reporter.sub_range(start, end, done, total))
        return _report

    @staticmethod
    def _update_stats(
        stats: DeduplicationStats,
        stage: str,
        duration: float,
        groups: List[CandidateGroup]
    ):
        stats.update_stage(
            stage_name=stage,
            groups_found=len(groups),
            files_processed=sum(len(g.files) for g in groups),
            duration=duration
        )
