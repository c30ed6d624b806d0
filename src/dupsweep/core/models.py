"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for traversal, duplicate detection, large-file and disk-usage scans.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Union, Callable

logger = logging.getLogger(__name__)


# =============================
# Enums
# =============================

class ScanPhase(Enum):
    """
    Coarse phase of a duplicate scan. Ordered: a scan never moves backwards.
    """
    IDLE = 0
    COLLECTING = 1
    HASHING = 2
    FINISHED = 3

    @property
    def display_name(self) -> str:
        mapping = {
            ScanPhase.IDLE: "Idle",
            ScanPhase.COLLECTING: "Collecting files",
            ScanPhase.HASHING: "Comparing files",
            ScanPhase.FINISHED: "Finished",
        }
        return mapping.get(self, self.name)

    def __lt__(self, other: "ScanPhase") -> bool:
        if not isinstance(other, ScanPhase):
            return NotImplemented
        return self.value < other.value


class Stage(str, Enum):
    SIZE = "Size grouping"
    PARTIAL = "Partial Hash"
    FULL = "Full Hash"


class FileCategory(Enum):
    """Coarse file type used to filter result lists."""
    IMAGES = "images"
    VIDEOS = "videos"
    AUDIO = "audio"
    DOCUMENTS = "documents"
    ARCHIVES = "archives"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_extension(cls, extension: Optional[str]) -> "FileCategory":
        ext = (extension or "").lower().lstrip(".")
        for category, extensions in _CATEGORY_EXTENSIONS.items():
            if ext in extensions:
                return category
        return cls.OTHER


_CATEGORY_EXTENSIONS = {
    FileCategory.IMAGES: frozenset({
        "jpg", "jpeg", "png", "gif", "bmp", "tiff", "heic", "webp", "svg",
        "ico", "raw", "cr2", "nef", "psd",
    }),
    FileCategory.VIDEOS: frozenset({
        "mp4", "mov", "avi", "mkv", "wmv", "flv", "webm", "m4v", "mpeg", "mpg", "3gp",
    }),
    FileCategory.AUDIO: frozenset({
        "mp3", "wav", "flac", "aac", "m4a", "wma", "ogg", "aiff", "alac",
    }),
    FileCategory.DOCUMENTS: frozenset({
        "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "txt", "rtf",
        "pages", "numbers", "key", "odt", "ods", "odp",
    }),
    FileCategory.ARCHIVES: frozenset({
        "zip", "rar", "7z", "tar", "gz", "bz2", "xz", "dmg", "iso", "pkg",
    }),
}


class GroupSortOrder(Enum):
    SIZE_DESC = "size-desc"
    SIZE_ASC = "size-asc"
    COUNT_DESC = "count-desc"
    COUNT_ASC = "count-asc"
    NAME = "name"

    @property
    def display_name(self) -> str:
        mapping = {
            GroupSortOrder.SIZE_DESC: "Size (Largest)",
            GroupSortOrder.SIZE_ASC: "Size (Smallest)",
            GroupSortOrder.COUNT_DESC: "Copies (Most)",
            GroupSortOrder.COUNT_ASC: "Copies (Least)",
            GroupSortOrder.NAME: "Name",
        }
        return mapping.get(self, self.value)


class LargeFileSortOrder(Enum):
    SIZE_DESC = "size-desc"
    SIZE_ASC = "size-asc"
    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    NAME = "name"


class FileSizeFilter(Enum):
    """Preset large-file thresholds, in binary megabytes."""
    MB_100 = 100
    MB_500 = 500
    GB_1 = 1024

    @property
    def display_name(self) -> str:
        return "1 GB" if self is FileSizeFilter.GB_1 else f"{self.value} MB"

    @property
    def bytes(self) -> int:
        return self.value * 1024 * 1024


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileRecord:
    """
    Metadata of one regular file, captured once during traversal.
    Timestamps are POSIX seconds.
    """
    path: str
    size: int
    created: float = 0.0
    modified: float = 0.0

    def __post_init__(self):
        if self.size < 0:
            raise ValueError(f"File size cannot be negative: {self.path}")

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def extension(self) -> str:
        """Lower-case extension without the dot ("" when there is none)."""
        return os.path.splitext(self.path)[1].lower().lstrip(".")

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


@dataclass
class CandidateGroup:
    """
    Records that may still be duplicates of each other.
    All members share the same size.
    """
    size: int
    files: List[FileRecord] = field(default_factory=list)

    def add_file(self, file: FileRecord) -> None:
        if file.size != self.size:
            raise ValueError("Cannot add file with different size to a group.")
        self.files.append(file)

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return len(self.files) >= 2

    def __repr__(self):
        return f"<CandidateGroup size={self.size}, count={len(self.files)}>"


@dataclass(frozen=True)
class DuplicateFile:
    """One member of a confirmed duplicate group."""
    path: str
    name: str
    size: int
    created: float
    modified: float
    extension: str
    is_original: bool = False

    @classmethod
    def from_record(cls, record: FileRecord, is_original: bool = False) -> "DuplicateFile":
        return cls(
            path=record.path,
            name=record.name,
            size=record.size,
            created=record.created,
            modified=record.modified,
            extension=record.extension,
            is_original=is_original,
        )

    @property
    def parent_folder(self) -> str:
        return os.path.basename(os.path.dirname(self.path))


@dataclass
class DuplicateGroup:
    """
    Files with identical content. `digest` is the hex full-content digest
    and identifies the group. The original is listed first.
    """
    digest: str
    files: List[DuplicateFile]

    @property
    def size(self) -> int:
        """Size of a single copy."""
        return self.files[0].size if self.files else 0

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def total_size(self) -> int:
        return sum(f.size for f in self.files)

    @property
    def reclaimable_size(self) -> int:
        """Bytes freed by removing every copy except the original."""
        return sum(f.size for f in self.files if not f.is_original)

    @property
    def original(self) -> Optional[DuplicateFile]:
        return next((f for f in self.files if f.is_original), None)

    @property
    def duplicates(self) -> List[DuplicateFile]:
        return [f for f in self.files if not f.is_original]

    @property
    def extension(self) -> str:
        return self.files[0].extension if self.files else ""

    @property
    def category(self) -> FileCategory:
        return FileCategory.from_extension(self.extension)

    def __repr__(self):
        return f"<DuplicateGroup digest={self.digest[:12]}, count={len(self.files)}>"


@dataclass(frozen=True)
class LargeFile:
    path: str
    name: str
    size: int
    modified: float
    extension: str

    @classmethod
    def from_record(cls, record: FileRecord) -> "LargeFile":
        return cls(
            path=record.path,
            name=record.name,
            size=record.size,
            modified=record.modified,
            extension=record.extension,
        )

    @property
    def category(self) -> FileCategory:
        return FileCategory.from_extension(self.extension)


@dataclass
class DiskItem:
    """A direct child of a directory in a disk-usage breakdown."""
    name: str
    path: str
    size: int
    is_directory: bool
    percentage: float = 0.0


@dataclass(frozen=True)
class StorageOverview:
    total: int
    used: int
    free: int


@dataclass(frozen=True)
class TrashResult:
    """Outcome of a batch move-to-trash."""
    success: int
    failed: int
    errors: tuple = ()


class DeduplicationStats:
    """
    Statistics collected during the deduplication process.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.files_scanned: int = 0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats are updated."""
        self._listeners.append(listener)

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

        for listener in self._listeners:
            try:
                listener(stage_name, self.stage_stats[stage_name])
            except Exception:
                logger.exception("Error in stats listener")

    def print_summary(self) -> str:
        labels = {
            "size": "Size Groups",
            "partial": "Partial Hash Groups",
            "full": "Full Content Hash Groups",
        }

        lines = [
            "Deduplication Statistics:",
            f"Files scanned: {self.files_scanned}",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage.lower(), stage.title())
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


# ======================
#  Parameter DTOs
# ======================

DEFAULT_EXCLUDED_NAMES = (
    ".Trash",
    ".git",
    "node_modules",
    ".npm",
    "Library",
    ".cache",
    ".Spotlight-V100",
    ".fseventsd",
)

DEFAULT_MIN_SIZE = 1024
DEFAULT_PARTIAL_HASH_SIZE = 4 * 1024
DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_LARGE_FILE_THRESHOLD = FileSizeFilter.MB_100.bytes

PARTIAL_ALGORITHMS = ("sha256", "xxh64")
FULL_ALGORITHMS = ("sha256",)


def _normalize_extensions(extensions: List[str]) -> List[str]:
    normalized = []
    for ext in extensions:
        ext = ext.strip().lower()
        if ext and not ext.startswith('.'):
            ext = f".{ext}"
        if ext:
            normalized.append(ext)
    return normalized


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()] if value else []


@dataclass
class DuplicateScanParams:
    """Parameters for a duplicate scan, validated on creation."""
    roots: List[str]
    min_size_bytes: int = DEFAULT_MIN_SIZE
    max_size_bytes: Optional[int] = None
    extensions: List[str] = field(default_factory=list)
    excluded_names: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_NAMES))
    excluded_dirs: List[str] = field(default_factory=list)
    partial_hash_size: int = DEFAULT_PARTIAL_HASH_SIZE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    partial_algorithm: str = "sha256"
    full_algorithm: str = "sha256"

    def __post_init__(self):
        if not self.roots:
            raise ValueError("At least one root directory is required")

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if self.max_size_bytes is not None and self.max_size_bytes < self.min_size_bytes:
            raise ValueError("Maximum size cannot be less than minimum size")

        if self.partial_hash_size <= 0:
            raise ValueError("Partial hash size must be positive")

        if self.chunk_size <= 0:
            raise ValueError("Chunk size must be positive")

        if self.partial_algorithm not in PARTIAL_ALGORITHMS:
            raise ValueError(f"Unsupported partial hash algorithm: '{self.partial_algorithm}'")

        if self.full_algorithm not in FULL_ALGORITHMS:
            raise ValueError(
                f"Full hash algorithm must be cryptographic, got '{self.full_algorithm}'"
            )

        self.extensions = _normalize_extensions(self.extensions)

    @staticmethod
    def from_human_readable(
            roots: List[str],
            min_size_str: str = "1K",
            max_size_str: str = "",
            extensions_str: str = "",
            excluded_dirs: Optional[List[str]] = None,
            partial_algorithm: str = "sha256",
    ) -> 'DuplicateScanParams':
        """Builds params from CLI-style strings such as "1K" and "jpg,png"."""
        from dupsweep.utils.convert_utils import ConvertUtils

        return DuplicateScanParams(
            roots=roots,
            min_size_bytes=ConvertUtils.human_to_bytes(min_size_str),
            max_size_bytes=ConvertUtils.human_to_bytes(max_size_str) if max_size_str else None,
            extensions=_split_csv(extensions_str),
            excluded_dirs=excluded_dirs or [],
            partial_algorithm=partial_algorithm,
        )


@dataclass
class LargeFileScanParams:
    roots: List[str]
    threshold_bytes: int = DEFAULT_LARGE_FILE_THRESHOLD
    excluded_names: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_NAMES))
    excluded_dirs: List[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.roots:
            raise ValueError("At least one root directory is required")
        if self.threshold_bytes < 0:
            raise ValueError("Threshold cannot be negative")

    @staticmethod
    def from_human_readable(
            roots: List[str],
            threshold_str: str = "100M",
            excluded_dirs: Optional[List[str]] = None,
    ) -> 'LargeFileScanParams':
        from dupsweep.utils.convert_utils import ConvertUtils

        return LargeFileScanParams(
            roots=roots,
            threshold_bytes=ConvertUtils.human_to_bytes(threshold_str),
            excluded_dirs=excluded_dirs or [],
        )
