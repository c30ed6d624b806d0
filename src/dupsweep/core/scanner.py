"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Directory traversal shared by the duplicate, large-file and disk-usage scans.
Features:
- Walks any number of roots lazily with os.walk (top-down, so pruning is cheap)
- Prunes excluded directory names, excluded absolute paths, hidden entries and bundles
- Yields only regular files; symlinks, sockets, fifos etc. are skipped
- Applies size and extension filters at record-creation time
- Never aborts on an unreadable entry: it is skipped and logged at debug level
"""

import os
import stat
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Callable

from dupsweep.core.cancellation import CancellationToken
from dupsweep.core.interfaces import FileScanner
from dupsweep.core.models import FileRecord
from dupsweep.core.progress import safe_label_callback

logger = logging.getLogger(__name__)

# Directories the host platform presents as a single opaque item.
DEFAULT_BUNDLE_EXTENSIONS = (
    ".app",
    ".bundle",
    ".framework",
    ".plugin",
    ".kext",
    ".photoslibrary",
    ".musiclibrary",
    ".tvlibrary",
    ".xcodeproj",
    ".xcworkspace",
    ".playground",
    ".rtfd",
    ".pkg",
    ".mpkg",
)

HIDDEN_PREFIX = "."


def default_roots(home: Optional[str] = None) -> List[str]:
    """The user folders scanned when no roots are given."""
    home_dir = Path(home) if home else Path.home()
    folders = ["Desktop", "Documents", "Downloads", "Movies", "Music", "Pictures"]
    return [str(home_dir / folder) for folder in folders]


def record_from_stat(path: str, st: os.stat_result) -> FileRecord:
    """Builds a FileRecord; creation time falls back to st_ctime where st_birthtime is missing."""
    created = getattr(st, "st_birthtime", None)
    if created is None:
        created = st.st_ctime
    return FileRecord(path=path, size=st.st_size, created=created, modified=st.st_mtime)


class FileScannerImpl(FileScanner):
    """
    Walks root directories and yields a FileRecord per regular file that
    passes the configured filters.

    Attributes:
        excluded_names: Directory names pruned wherever they appear as a path component
        excluded_dirs: Absolute directories pruned together with their subtree
        min_size: Minimum file size in bytes (optional)
        max_size: Maximum file size in bytes (optional)
        extensions: Allowed extensions (e.g. [".txt", ".jpg"]); empty allows all
        skip_hidden: Skip files and directories whose name starts with "."
        descend_bundles: Enter bundle directories instead of skipping them
    """

    def __init__(
        self,
        excluded_names: Optional[Iterable[str]] = None,
        excluded_dirs: Optional[Iterable[str]] = None,
        min_size: Optional[int] = None,
        max_size: Optional[int] = None,
        extensions: Optional[List[str]] = None,
        skip_hidden: bool = True,
        descend_bundles: bool = False,
        bundle_extensions: Iterable[str] = DEFAULT_BUNDLE_EXTENSIONS,
    ):
        self.excluded_names = frozenset(excluded_names or ())
        self.excluded_dirs = [os.path.normpath(str(Path(d).resolve())) for d in excluded_dirs] if excluded_dirs else []
        self.min_size = min_size
        self.max_size = max_size
        self.extensions = [ext.lower() for ext in extensions] if extensions else []
        self.skip_hidden = skip_hidden
        self.descend_bundles = descend_bundles
        self.bundle_extensions = tuple(ext.lower() for ext in bundle_extensions)

    def scan(
        self,
        roots: Iterable[str],
        token: Optional[CancellationToken] = None,
        progress_callback: Optional[Callable[[str], None]] = None
    ) -> Iterator[FileRecord]:
        """
        Lazily yields records for every accepted file under `roots`.
        Stops early, without raising, once `token` is cancelled.
        """
        report = safe_label_callback(progress_callback)

        for root in roots:
            if token is not None and token.cancelled:
                logger.debug("Scan cancelled before next root")
                return

            root_path = os.path.abspath(os.path.expanduser(str(root)))
            if not os.path.isdir(root_path):
                logger.debug(f"Skipping missing or non-directory root: {root_path}")
                continue
            if self._is_excluded_root(root_path):
                logger.debug(f"Skipping root under a hidden or excluded directory: {root_path}")
                continue

            logger.debug(f"Scanning root: {root_path}")
            yield from self._walk(root_path, token, report)

    def _walk(
        self,
        root_path: str,
        token: Optional[CancellationToken],
        report: Optional[Callable[[str], None]]
    ) -> Iterator[FileRecord]:
        for dirpath, dirnames, filenames in os.walk(root_path, onerror=self._on_walk_error):
            # Checked once per directory before any of its entries is touched
            if token is not None and token.cancelled:
                logger.debug("Scan interrupted by cancellation")
                return

            if report:
                report(os.path.basename(dirpath) or dirpath)

            # Pre-filter subdirectories BEFORE os.walk enters them
            dirnames[:] = [d for d in dirnames if self._prefilter_dir(dirpath, d)]

            for filename in filenames:
                record = self._process_file(dirpath, filename)
                if record is not None:
                    yield record
                if token is not None and token.cancelled:
                    logger.debug("Scan interrupted by cancellation")
                    return

    def _is_excluded_root(self, root_path: str) -> bool:
        """A root is pruned if any of its own path components would be pruned during a walk."""
        for part in Path(root_path).parts[1:]:
            if part in self.excluded_names:
                return True
            if self.skip_hidden and part.startswith(HIDDEN_PREFIX):
                return True
        return False

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        logger.debug(f"Skipping unreadable directory: {error}")

    def is_bundle(self, name: str) -> bool:
        return name.lower().endswith(self.bundle_extensions)

    def _is_excluded_directory(self, path: str) -> bool:
        """Check if path is one of the excluded directories or inside one."""
        for excluded_dir in self.excluded_dirs:
            if path == excluded_dir or path.startswith(excluded_dir.rstrip(os.sep) + os.sep):
                return True
        return False

    def _prefilter_dir(self, parent: str, name: str) -> bool:
        """Returns True if the walk should descend into `parent/name`."""
        if self.skip_hidden and name.startswith(HIDDEN_PREFIX):
            logger.debug(f"Skipping hidden directory: {name}")
            return False

        if name in self.excluded_names:
            logger.debug(f"Skipping excluded directory: {os.path.join(parent, name)}")
            return False

        if not self.descend_bundles and self.is_bundle(name):
            logger.debug(f"Skipping bundle: {os.path.join(parent, name)}")
            return False

        path = os.path.join(parent, name)
        if self.excluded_dirs and self._is_excluded_directory(os.path.normpath(path)):
            logger.debug(f"Skipping excluded directory: {path}")
            return False

        return True

    def _process_file(self, dirpath: str, filename: str) -> Optional[FileRecord]:
        """
        Returns a FileRecord if `dirpath/filename` is a regular file passing all filters.
        """
        if self.skip_hidden and filename.startswith(HIDDEN_PREFIX):
            return None

        path = os.path.join(dirpath, filename)
        try:
            st = os.lstat(path)
        except OSError as e:
            logger.debug(f"Could not stat {path}: {e}")
            return None

        if stat.S_ISLNK(st.st_mode):
            logger.debug(f"Skipping symbolic link: {path}")
            return None

        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None

        if not self._size_passes(st.st_size):
            return None

        if not self._extension_passes(filename):
            return None

        return record_from_stat(path, st)

    def _size_passes(self, size: int) -> bool:
        if self.min_size is not None and size < self.min_size:
            return False
        if self.max_size is not None and size > self.max_size:
            return False
        return True

    def _extension_passes(self, filename: str) -> bool:
        if not self.extensions:
            return True
        ext = os.path.splitext(filename)[1].lower()
        return ext in self.extensions
