"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Implements the size → partial digest → full digest multimap.
Every grouping drops singleton branches as soon as it is built.
"""

import logging
from collections import defaultdict
from typing import List, Dict, Iterable, Any, Callable, Optional

from dupsweep.core.cancellation import CancellationToken
from dupsweep.core.interfaces import FileGrouper, Hasher
from dupsweep.core.hasher import HasherImpl
from dupsweep.core.models import FileRecord

logger = logging.getLogger(__name__)


class FileGrouperImpl(FileGrouper):
    """
    Groups FileRecords by size or digest.
    Uses an injected Hasher instance for flexibility and testability.
    """

    def __init__(self, hasher: Hasher = None):
        self.hasher = hasher or HasherImpl()

    def group_by_size(self, files: Iterable[FileRecord]) -> Dict[int, List[FileRecord]]:
        """Groups files by their exact size."""
        return self._group_by(files, lambda f: f.size)

    def group_by_partial_hash(
        self,
        files: List[FileRecord],
        token: Optional[CancellationToken] = None,
        on_file: Optional[Callable[[FileRecord], None]] = None
    ) -> Dict[bytes, List[FileRecord]]:
        """Groups files by the digest of their first bytes."""
        return self._group_by(files, self.hasher.compute_partial_hash, token, on_file)

    def group_by_full_hash(
        self,
        files: List[FileRecord],
        token: Optional[CancellationToken] = None,
        on_file: Optional[Callable[[FileRecord], None]] = None
    ) -> Dict[str, List[FileRecord]]:
        """Groups files by full content digest."""
        return self._group_by(files, lambda f: self.hasher.compute_full_hash(f, token), token, on_file)

    @staticmethod
    def _group_by(
        files: Iterable[FileRecord],
        key_func: Callable[[FileRecord], Any],
        token: Optional[CancellationToken] = None,
        on_file: Optional[Callable[[FileRecord], None]] = None
    ) -> Dict[Any, List[FileRecord]]:
        """
        Helper method to group files by any computed key.
        Args:
            files: Records to group
            key_func: Computes a hashable key from a record; None drops the record
            token: Checked before every key computation; a cancelled run returns {}
            on_file: Called with each record just before its key is computed
        Returns:
            Dict[key, List[FileRecord]] holding only groups with 2+ members
        """
        groups = defaultdict(list)
        skipped_files = 0
        for file in files:
            if token is not None and token.cancelled:
                return {}
            if on_file is not None:
                on_file(file)
            key = key_func(file)
            if key is None:
                skipped_files += 1
                continue
            groups[key].append(file)

        if token is not None and token.cancelled:
            return {}

        if skipped_files > 0:
            logger.debug(f"Skipped {skipped_files} unreadable files")

        return {key: group for key, group in groups.items() if len(group) >= 2}
