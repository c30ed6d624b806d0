"""
Core scanning engine — traversal, hashing, grouping and pipeline orchestration.

This package contains the performance-critical foundation of dupsweep:
- FileScannerImpl: lazy multi-root traversal with pruning and size/extension filters
- HasherImpl: bounded-prefix and streamed full-content digests (SHA-256, optional xxHash64 prefix)
- FileGrouperImpl: size → partial digest → full digest multimap, singletons dropped eagerly
- DeduplicatorImpl: the multi-stage duplicate pipeline
- LargeFileScannerImpl / DirectorySizeAggregator: companion scans sharing the traversal

All components are pure Python with no GUI dependencies — suitable for CLI and server usage.
"""

from .cancellation import CancellationToken
from .scanner import FileScannerImpl, default_roots
from .grouper import FileGrouperImpl
from .hasher import HasherImpl, Sha256AlgorithmImpl, XXHashAlgorithmImpl
from .deduplicator import DeduplicatorImpl
from .large_files import LargeFileScannerImpl
from .disk_usage import DirectorySizeAggregator, storage_overview
from .progress import ProgressReporter, ProgressChannel
from .sorter import Sorter
from .models import (
    FileRecord, CandidateGroup, DuplicateFile, DuplicateGroup, LargeFile, DiskItem,
    StorageOverview, TrashResult, DeduplicationStats, DuplicateScanParams, LargeFileScanParams,
    FileCategory, GroupSortOrder, LargeFileSortOrder, FileSizeFilter, ScanPhase)

__all__ = [
    "CancellationToken",
    "FileScannerImpl",
    "default_roots",
    "FileGrouperImpl",
    "HasherImpl",
    "Sha256AlgorithmImpl",
    "XXHashAlgorithmImpl",
    "DeduplicatorImpl",
    "LargeFileScannerImpl",
    "DirectorySizeAggregator",
    "storage_overview",
    "ProgressReporter",
    "ProgressChannel",
    "Sorter",
    "FileRecord",
    "CandidateGroup",
    "DuplicateFile",
    "DuplicateGroup",
    "LargeFile",
    "DiskItem",
    "StorageOverview",
    "TrashResult",
    "DeduplicationStats",
    "DuplicateScanParams",
    "LargeFileScanParams",
    "FileCategory",
    "GroupSortOrder",
    "LargeFileSortOrder",
    "FileSizeFilter",
    "ScanPhase",
]
