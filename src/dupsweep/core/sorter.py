"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/sorter.py
Pure ordering logic for duplicate groups — zero dependencies outside core.

Original selection inside a group (applied lexicographically):
1. Earliest creation time first
2. Shorter path first
3. Input order (the sort is stable)
The first file after sorting is the original; every other file is a duplicate.

Group order: largest reclaimable size first, ties by digest.
"""
from typing import List, Optional

from dupsweep.core.models import (
    DuplicateFile, DuplicateGroup, FileRecord, GroupSortOrder, LargeFile, LargeFileSortOrder
)


class Sorter:

    @staticmethod
    def original_sort_key(file):
        return file.created, len(file.path)

    @staticmethod
    def assemble_group(digest: str, records: List[FileRecord]) -> DuplicateGroup:
        """Builds a DuplicateGroup with the original first and flagged."""
        ordered = sorted(records, key=Sorter.original_sort_key)
        files = [
            DuplicateFile.from_record(record, is_original=(index == 0))
            for index, record in enumerate(ordered)
        ]
        return DuplicateGroup(digest=digest, files=files)

    @staticmethod
    def mark_originals(group: DuplicateGroup) -> DuplicateGroup:
        """Re-runs original selection on an existing group (e.g. after members were removed)."""
        ordered = sorted(group.files, key=Sorter.original_sort_key)
        files = [
            DuplicateFile(
                path=f.path, name=f.name, size=f.size, created=f.created,
                modified=f.modified, extension=f.extension, is_original=(index == 0),
            )
            for index, f in enumerate(ordered)
        ]
        return DuplicateGroup(digest=group.digest, files=files)

    @staticmethod
    def sort_groups(groups: List[DuplicateGroup], sort_order: Optional[GroupSortOrder] = None) -> List[DuplicateGroup]:
        """Returns a new list; the default order is reclaimable size, largest first."""
        if not groups:
            return []

        if sort_order is None:
            sort_order = GroupSortOrder.SIZE_DESC

        if sort_order == GroupSortOrder.SIZE_DESC:
            key_func = lambda g: (-g.reclaimable_size, g.digest)
        elif sort_order == GroupSortOrder.SIZE_ASC:
            key_func = lambda g: (g.reclaimable_size, g.digest)
        elif sort_order == GroupSortOrder.COUNT_DESC:
            key_func = lambda g: (-g.file_count, -g.reclaimable_size, g.digest)
        elif sort_order == GroupSortOrder.COUNT_ASC:
            key_func = lambda g: (g.file_count, -g.reclaimable_size, g.digest)
        else:
            key_func = lambda g: ((g.original.name.lower() if g.original else ""), g.digest)
        return sorted(groups, key=key_func)

    @staticmethod
    def sort_large_files(files: List[LargeFile], sort_order: Optional[LargeFileSortOrder] = None) -> List[LargeFile]:
        if sort_order is None:
            sort_order = LargeFileSortOrder.SIZE_DESC

        if sort_order == LargeFileSortOrder.SIZE_DESC:
            key_func = lambda f: (-f.size, f.path)
        elif sort_order == LargeFileSortOrder.SIZE_ASC:
            key_func = lambda f: (f.size, f.path)
        elif sort_order == LargeFileSortOrder.DATE_DESC:
            key_func = lambda f: (-f.modified, f.path)
        elif sort_order == LargeFileSortOrder.DATE_ASC:
            key_func = lambda f: (f.modified, f.path)
        else:
            key_func = lambda f: (f.name.lower(), f.path)
        return sorted(files, key=key_func)
