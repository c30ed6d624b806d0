"""
dupsweep — duplicate file finder, large-file finder and disk-usage report.

Core features:
- Byte-identical duplicate detection: size buckets, then a 4 KB partial hash, then a full SHA-256 hash
- Oldest copy of each group is kept as the original
- Large-file listing and directory size breakdowns
- Cooperative cancellation of every scan
- Safe deletion to system trash (via send2trash)
- Optional Qt worker with PySide6 (install with [gui] extra)
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("dupsweep")
except Exception:
    import tomllib

    with open("pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API — only what users should import directly
from dupsweep.commands import DuplicateScanCommand, LargeFileScanCommand, DiskUsageCommand
from dupsweep.core import (
    DuplicateScanParams, LargeFileScanParams, DuplicateGroup, DuplicateFile, LargeFile,
    DiskItem, FileCategory, GroupSortOrder, LargeFileSortOrder, CancellationToken
)
from dupsweep.utils.convert_utils import ConvertUtils
from dupsweep.services import DuplicateService, SelectionState
from dupsweep.services.file_service import FileService

__all__ = [
    "DuplicateScanCommand",
    "LargeFileScanCommand",
    "DiskUsageCommand",
    "DuplicateScanParams",
    "LargeFileScanParams",
    "DuplicateGroup",
    "DuplicateFile",
    "LargeFile",
    "DiskItem",
    "FileCategory",
    "GroupSortOrder",
    "LargeFileSortOrder",
    "CancellationToken",
    "ConvertUtils",
    "DuplicateService",
    "SelectionState",
    "FileService",
    "__version__",
]
