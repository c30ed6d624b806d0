"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Duplicate pipeline stages.

CLASS HIERARCHY
---------------
SizeStageImpl      : Buckets records by exact size (SizeStage interface)
HashStageBase      : Shared loop for digest stages: per-group split, progress, cancellation
PartialHashStage   : Splits size buckets by the digest of a bounded prefix
FullHashStage      : Splits prefix buckets by the streamed whole-content digest

STAGE CONTRACTS
---------------
Each hash stage implements a consistent `process()` interface that:
  • Accepts candidate groups from the previous stage
  • Returns (digest, group) pairs whose group still has 2+ members
  • Reports progress via callback (label, processed files, total files),
    naming each file just before it is hashed
  • Returns an empty list as soon as the cancellation token is set
"""

import itertools
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from dupsweep.core.cancellation import CancellationToken
from dupsweep.core.grouper import FileGrouperImpl
from dupsweep.core.interfaces import SizeStage, HashStage
from dupsweep.core.models import FileRecord, CandidateGroup, Stage


class SizeStageImpl(SizeStage):
    def __init__(self, grouper: FileGrouperImpl):
        self.grouper = grouper

    def process(
            self,
            files: Iterable[FileRecord],
            token: Optional[CancellationToken] = None,
    ) -> List[CandidateGroup]:
        """
        Group by file size.
        Returns a CandidateGroup per size shared by 2+ files.
        """
        if token is not None and token.cancelled:
            return []

        size_groups = self.grouper.group_by_size(files)
        return [
            CandidateGroup(size=size, files=files_list)
            for size, files_list in size_groups.items()
        ]


class HashStageBase(HashStage):
    """
    Abstract base class for digest stages.
    Subclasses only choose the grouping function and the stage name.
    """

    def __init__(self, grouper: FileGrouperImpl):
        self.grouper = grouper

    def get_stage_name(self) -> str:
        raise NotImplementedError

    def _group_files(
        self,
        files: List[FileRecord],
        token: Optional[CancellationToken],
        on_file: Optional[Callable[[FileRecord], None]] = None
    ) -> Dict[Any, List[FileRecord]]:
        raise NotImplementedError

    def process(
        self,
        groups: List[CandidateGroup],
        token: Optional[CancellationToken] = None,
        progress_callback: Optional[Callable[[str, int, int], None]] = None
    ) -> List[Tuple[Any, CandidateGroup]]:
        if token is not None and token.cancelled:
            return []

        refined = []
        total_files = sum(len(group.files) for group in groups)
        processed_files = 0

        for group in groups:
            if token is not None and token.cancelled:
                return []

            on_file = None
            if progress_callback:
                on_file = self._file_reporter(progress_callback, processed_files, total_files)

            hash_groups = self._group_files(group.files, token, on_file)

            # A cancelled grouping yields {}; never mistake that for "no duplicates"
            if token is not None and token.cancelled:
                return []

            for digest, files_in_group in hash_groups.items():
                refined.append((digest, CandidateGroup(size=group.size, files=files_in_group)))

            processed_files += len(group.files)

        if progress_callback and total_files:
            progress_callback(self.get_stage_name(), processed_files, total_files)

        return refined

    @staticmethod
    def _file_reporter(
        progress_callback: Callable[[str, int, int], None],
        start: int,
        total: int
    ) -> Callable[[FileRecord], None]:
        """Reports each file by name, counting from `start`, just before it is hashed."""
        counter = itertools.count(start)

        def report(file: FileRecord) -> None:
            progress_callback(f"Hashing {file.name}", next(counter), total)

        return report


class PartialHashStage(HashStageBase):
    def get_stage_name(self) -> str:
        return Stage.PARTIAL.value

    def _group_files(self, files, token, on_file=None):
        return self.grouper.group_by_partial_hash(files, token, on_file)


class FullHashStage(HashStageBase):
    def get_stage_name(self) -> str:
        return Stage.FULL.value

    def _group_files(self, files, token, on_file=None):
        return self.grouper.group_by_full_hash(files, token, on_file)
