"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/large_files.py
Single-pass large-file scan: same traversal rules as the duplicate scan,
a size threshold instead of buckets, no hashing.
"""
import logging
from typing import Callable, Iterable, List, Optional

from dupsweep.core.cancellation import CancellationToken
from dupsweep.core.models import LargeFile, LargeFileScanParams
from dupsweep.core.scanner import FileScannerImpl
from dupsweep.core.sorter import Sorter

logger = logging.getLogger(__name__)


class LargeFileScannerImpl:
    """
    Finds files with size >= threshold.
    A cancelled scan returns whatever was found so far, still sorted.
    """

    def __init__(
        self,
        excluded_names: Optional[Iterable[str]] = None,
        excluded_dirs: Optional[Iterable[str]] = None,
    ):
        self.excluded_names = excluded_names
        self.excluded_dirs = excluded_dirs

    @classmethod
    def from_params(cls, params: LargeFileScanParams) -> "LargeFileScannerImpl":
        return cls(excluded_names=params.excluded_names, excluded_dirs=params.excluded_dirs)

    def scan(
        self,
        roots: Iterable[str],
        threshold: int,
        token: Optional[CancellationToken] = None,
        progress_callback: Optional[Callable[[str], None]] = None
    ) -> List[LargeFile]:
        """Returns every qualifying file, largest first."""
        if threshold < 0:
            raise ValueError("Threshold cannot be negative")

        scanner = FileScannerImpl(
            excluded_names=self.excluded_names,
            excluded_dirs=self.excluded_dirs,
            min_size=threshold,
        )
        found = [
            LargeFile.from_record(record)
            for record in scanner.scan(roots, token, progress_callback)
        ]

        if token is not None and token.cancelled:
            logger.debug(f"Large-file scan cancelled, returning {len(found)} partial results")

        return Sorter.sort_large_files(found)
