"""
Scan sessions — the single source of truth for business logic, used by both GUI and CLI.
No Qt/PySide6 dependencies — pure Python.

Each command owns one CancellationToken at a time:
  • cancel() sets it, from any thread, at any moment (even before a scan)
  • a scan that starts with the token already set returns immediately
  • every scan installs a fresh token when it ends, so one cancellation
    never leaks into the next scan

Usage:
    command = DuplicateScanCommand(params)
    groups = command.execute(progress_callback=lambda label, fraction: ...)
    # from another thread: command.cancel()
    result = command.move_to_trash(SelectionState.default_for(groups).selected_files(groups))
"""
import logging
from typing import Callable, Iterable, List, Optional, Union

from dupsweep.core.cancellation import CancellationToken
from dupsweep.core.deduplicator import DeduplicatorImpl
from dupsweep.core.disk_usage import DirectorySizeAggregator
from dupsweep.core.grouper import FileGrouperImpl
from dupsweep.core.hasher import HasherImpl, get_algorithm
from dupsweep.core.large_files import LargeFileScannerImpl
from dupsweep.core.models import (
    DeduplicationStats, DiskItem, DuplicateFile, DuplicateGroup, DuplicateScanParams,
    LargeFile, LargeFileScanParams, TrashResult, DEFAULT_EXCLUDED_NAMES
)
from dupsweep.core.scanner import FileScannerImpl
from dupsweep.services.file_service import FileService

logger = logging.getLogger(__name__)


class ScanCommand:
    """Shared cancellation and trash handling for every scan session."""

    def __init__(self):
        self._token = CancellationToken()
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def cancel(self) -> None:
        """Requests cancellation of the current (or next) scan. Idempotent."""
        self._token.cancel()

    def is_cancelled(self) -> bool:
        return self._token.cancelled

    def _begin(self) -> CancellationToken:
        self._running = True
        return self._token

    def _end(self) -> None:
        self._running = False
        self._token = CancellationToken()

    @staticmethod
    def move_to_trash(files: Iterable[Union[str, DuplicateFile, LargeFile]]) -> TrashResult:
        """Trashes each file independently; never raises for a single failure."""
        return FileService.move_multiple_to_trash(files)


class DuplicateScanCommand(ScanCommand):
    """
    Duplicate detection session:
    traversal → size buckets → partial hash → full hash → original selection.
    """

    def __init__(self, params: DuplicateScanParams):
        super().__init__()
        self.params = params
        self.stats = DeduplicationStats()
        self._deduplicator = self._build_deduplicator(params)

    @staticmethod
    def _build_deduplicator(params: DuplicateScanParams) -> DeduplicatorImpl:
        scanner = FileScannerImpl(
            excluded_names=params.excluded_names,
            excluded_dirs=params.excluded_dirs,
            min_size=params.min_size_bytes,
            max_size=params.max_size_bytes,
            extensions=params.extensions,
        )
        hasher = HasherImpl(
            full_algorithm=get_algorithm(params.full_algorithm),
            partial_algorithm=get_algorithm(params.partial_algorithm),
            partial_hash_size=params.partial_hash_size,
            chunk_size=params.chunk_size,
        )
        return DeduplicatorImpl(scanner=scanner, grouper=FileGrouperImpl(hasher))

    def scan(
            self,
            roots: Optional[List[str]] = None,
            progress_callback: Optional[Callable[[str, float], None]] = None
    ) -> List[DuplicateGroup]:
        """
        Runs the full pipeline over `roots` (defaults to params.roots).

        Returns:
            Groups sorted by reclaimable size, or [] if cancelled or nothing was readable.
        """
        token = self._begin()
        try:
            groups, self.stats = self._deduplicator.find_duplicates(
                list(roots) if roots is not None else list(self.params.roots),
                token=token,
                progress_callback=progress_callback,
            )
            return groups
        finally:
            self._end()

    def execute(
            self,
            progress_callback: Optional[Callable[[str, float], None]] = None
    ) -> List[DuplicateGroup]:
        return self.scan(progress_callback=progress_callback)


class LargeFileScanCommand(ScanCommand):
    """Large-file session; a cancelled scan returns the files found so far."""

    def __init__(self, params: LargeFileScanParams):
        super().__init__()
        self.params = params
        self._scanner = LargeFileScannerImpl.from_params(params)

    def scan(
            self,
            roots: Optional[List[str]] = None,
            threshold: Optional[int] = None,
            progress_callback: Optional[Callable[[str], None]] = None
    ) -> List[LargeFile]:
        token = self._begin()
        try:
            return self._scanner.scan(
                list(roots) if roots is not None else list(self.params.roots),
                self.params.threshold_bytes if threshold is None else threshold,
                token=token,
                progress_callback=progress_callback,
            )
        finally:
            self._end()

    def execute(self, progress_callback: Optional[Callable[[str], None]] = None) -> List[LargeFile]:
        return self.scan(progress_callback=progress_callback)


class DiskUsageCommand(ScanCommand):
    """Directory size session; a cancelled run returns a partial figure."""

    def __init__(self, path: str, excluded_names: Optional[Iterable[str]] = DEFAULT_EXCLUDED_NAMES):
        super().__init__()
        self.path = path
        self._aggregator = DirectorySizeAggregator(excluded_names=excluded_names)

    @staticmethod
    def is_path_available(path: str) -> bool:
        return DirectorySizeAggregator.is_available(path)

    def directory_size(
            self,
            path: Optional[str] = None,
            progress_callback: Optional[Callable[[str], None]] = None
    ) -> Optional[int]:
        """Total bytes under `path`, or None when it cannot be read."""
        token = self._begin()
        try:
            return self._aggregator.directory_size(path or self.path, token, progress_callback)
        finally:
            self._end()

    def breakdown(
            self,
            path: Optional[str] = None,
            progress_callback: Optional[Callable[[str], None]] = None
    ) -> List[DiskItem]:
        token = self._begin()
        try:
            return self._aggregator.breakdown(path or self.path, token, progress_callback)
        finally:
            self._end()

    def execute(self, progress_callback: Optional[Callable[[str], None]] = None) -> List[DiskItem]:
        return self.breakdown(progress_callback=progress_callback)
