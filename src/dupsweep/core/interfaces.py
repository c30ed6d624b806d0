"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the scanning system.
These protocols enforce structural typing using Python's `typing.Protocol` to ensure
consistency across modules while maintaining flexibility and modularity.

Key Components:
---------------
- HashAlgorithm: Incremental hash function factory (SHA-256, xxHash64, ...).
- Hasher: Computes partial (prefix) and full (streamed) digests of files.
- FileScanner: Walks root directories and yields file metadata.
- FileGrouper: Groups records by size or digest, discarding singletons.
- SizeStage / HashStage: Individual stages of the duplicate pipeline.
- Deduplicator: The engine coordinating all stages.
"""

from typing import Protocol, List, Dict, Iterable, Iterator, Optional, Callable, Tuple, Any

from dupsweep.core.cancellation import CancellationToken
from dupsweep.core.models import FileRecord, CandidateGroup, DuplicateGroup, DeduplicationStats


class IncrementalHash(Protocol):
    """The subset of the hashlib object API used by the hasher."""
    def update(self, data: bytes) -> Any: ...
    def digest(self) -> bytes: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like SHA-256 or xxHash
    without affecting the rest of the deduplication logic.
    """
    name: str
    cryptographic: bool

    def new(self) -> IncrementalHash:
        """Returns a fresh incremental hash object."""
        ...


class Hasher(Protocol):
    """Interface for hashing a file prefix or its entire content."""
    def compute_partial_hash(self, file: FileRecord) -> Optional[bytes]: ...

    def compute_full_hash(
        self,
        file: FileRecord,
        token: Optional[CancellationToken] = None
    ) -> Optional[str]: ...


class FileScanner(Protocol):
    """
    Interface for walking file systems and collecting file metadata.
    """
    def scan(
        self,
        roots: Iterable[str],
        token: Optional[CancellationToken] = None,
        progress_callback: Optional[Callable[[str], None]] = None
    ) -> Iterator[FileRecord]:
        """
        Lazily yield records for regular files under `roots`.

        Args:
            roots: Directories to walk. Missing ones are skipped.
            token: Checked before every directory and after every entry.
            progress_callback: Called with a label after each directory is entered.
        """
        ...


class FileGrouper(Protocol):
    """
    Interface for grouping records by size or content digest.
    Every returned mapping contains only groups with 2+ members.
    """
    def group_by_size(self, files: Iterable[FileRecord]) -> Dict[int, List[FileRecord]]:
        ...

    def group_by_partial_hash(
        self,
        files: List[FileRecord],
        token: Optional[CancellationToken] = None,
        on_file: Optional[Callable[[FileRecord], None]] = None
    ) -> Dict[bytes, List[FileRecord]]:
        ...

    def group_by_full_hash(
        self,
        files: List[FileRecord],
        token: Optional[CancellationToken] = None,
        on_file: Optional[Callable[[FileRecord], None]] = None
    ) -> Dict[str, List[FileRecord]]:
        ...


# =============================
# Stage Interfaces
# =============================

class SizeStage(Protocol):
    def process(
        self,
        files: Iterable[FileRecord],
        token: Optional[CancellationToken] = None,
    ) -> List[CandidateGroup]:
        """Bucket records by exact size; only buckets with 2+ files are returned."""
        ...


class HashStage(Protocol):
    def get_stage_name(self) -> str:
        """Return the name of this stage (used in logging and stats)."""
        ...

    def process(
        self,
        groups: List[CandidateGroup],
        token: Optional[CancellationToken] = None,
        progress_callback: Optional[Callable[[str, int, int], None]] = None
    ) -> List[Tuple[Any, CandidateGroup]]:
        """
        Split every group by this stage's digest.

        Returns:
            (digest, group) pairs for sub-groups that still have 2+ members,
            or an empty list if the token was cancelled.
        """
        ...


class Deduplicator(Protocol):
    """
    Interface for the duplicate detection engine.
    Coordinates traversal → size → partial hash → full hash → assembly.
    """
    def find_duplicates(
        self,
        roots: List[str],
        token: Optional[CancellationToken] = None,
        progress_callback: Optional[Callable[[str, float], None]] = None
    ) -> Tuple[List[DuplicateGroup], DeduplicationStats]:
        ...
