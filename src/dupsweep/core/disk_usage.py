"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/disk_usage.py
Directory size aggregation and disk-usage breakdowns.

Sizes are sums of regular files only. Hidden entries, symlinks and excluded
names are left out exactly as in the duplicate scan, but bundle directories
are entered: their contents occupy space like any other files.

None means "unavailable" (missing or unreadable path) and is never conflated
with 0, which is the size of an empty readable directory.
"""
import logging
import os
import shutil
from typing import Callable, Iterable, List, Optional

from dupsweep.core.cancellation import CancellationToken
from dupsweep.core.models import DiskItem, StorageOverview
from dupsweep.core.progress import safe_label_callback
from dupsweep.core.scanner import FileScannerImpl, HIDDEN_PREFIX

logger = logging.getLogger(__name__)


class DirectorySizeAggregator:

    def __init__(self, excluded_names: Optional[Iterable[str]] = None):
        self.scanner = FileScannerImpl(excluded_names=excluded_names, descend_bundles=True)

    @staticmethod
    def is_available(path: str) -> bool:
        """True if `path` is a directory whose entries can be listed."""
        try:
            with os.scandir(path):
                return True
        except OSError as e:
            logger.debug(f"Directory unavailable: {path}: {e}")
            return False

    def directory_size(
        self,
        path: str,
        token: Optional[CancellationToken] = None,
        progress_callback: Optional[Callable[[str], None]] = None
    ) -> Optional[int]:
        """
        Total bytes of regular files under `path`, or None if it cannot be read.
        A regular file counts as its own size. A cancelled run returns the partial sum.
        """
        path = os.path.abspath(os.path.expanduser(path))
        if os.path.isfile(path) and not os.path.islink(path):
            try:
                return os.stat(path).st_size
            except OSError as e:
                logger.debug(f"File unavailable: {path}: {e}")
                return None
        if not self.is_available(path):
            return None

        total = 0
        for record in self.scanner.scan([path], token, progress_callback):
            total += record.size
        return total

    def breakdown(
        self,
        path: str,
        token: Optional[CancellationToken] = None,
        progress_callback: Optional[Callable[[str], None]] = None
    ) -> List[DiskItem]:
        """
        One DiskItem per non-hidden direct child of `path`, largest first,
        with its share of the listed total. Unavailable children count as 0.
        """
        path = os.path.abspath(os.path.expanduser(path))
        report = safe_label_callback(progress_callback)
        try:
            with os.scandir(path) as it:
                entries = [e for e in it if not e.name.startswith(HIDDEN_PREFIX)]
        except OSError as e:
            logger.debug(f"Cannot list {path}: {e}")
            return []

        items = []
        for entry in entries:
            if token is not None and token.cancelled:
                break

            if report:
                report(entry.name)

            try:
                if entry.is_symlink():
                    continue
                is_directory = entry.is_dir(follow_symlinks=False)
                if is_directory:
                    size = self.directory_size(entry.path, token) or 0
                elif entry.is_file(follow_symlinks=False):
                    size = entry.stat(follow_symlinks=False).st_size
                else:
                    continue
            except OSError as e:
                logger.debug(f"Skipping {entry.path}: {e}")
                continue

            items.append(DiskItem(name=entry.name, path=entry.path, size=size, is_directory=is_directory))

        items.sort(key=lambda item: (-item.size, item.name))

        total_size = sum(item.size for item in items)
        if total_size > 0:
            for item in items:
                item.percentage = item.size / total_size * 100

        return items


def storage_overview(path: str = "/") -> Optional[StorageOverview]:
    """Capacity of the volume holding `path`."""
    try:
        usage = shutil.disk_usage(path)
    except OSError as e:
        logger.debug(f"Cannot read storage overview for {path}: {e}")
        return None
    return StorageOverview(total=usage.total, used=usage.used, free=usage.free)
