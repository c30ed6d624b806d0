from typing import Iterable, List, Optional, Set

from dupsweep.core.models import DuplicateFile, DuplicateGroup, FileCategory
from dupsweep.core.sorter import Sorter


class SelectionState:
    """
    Which duplicate files the user intends to remove.

    Lives beside the scan result rather than inside it: the scanner never
    reads or writes selection.
    """

    def __init__(self, selected_paths: Optional[Iterable[str]] = None):
        self._selected: Set[str] = set(selected_paths or ())

    @classmethod
    def default_for(cls, groups: List[DuplicateGroup]) -> "SelectionState":
        """Every non-original selected, every original left alone."""
        state = cls()
        state.select_all_duplicates(groups)
        return state

    def is_selected(self, path: str) -> bool:
        return path in self._selected

    def toggle(self, path: str) -> bool:
        """Flips the selection of `path` and returns the new state."""
        if path in self._selected:
            self._selected.discard(path)
            return False
        self._selected.add(path)
        return True

    def select_all_duplicates(self, groups: List[DuplicateGroup]) -> None:
        for group in groups:
            for file in group.duplicates:
                self._selected.add(file.path)

    def deselect_all(self) -> None:
        self._selected.clear()

    def selected_files(self, groups: List[DuplicateGroup]) -> List[DuplicateFile]:
        return [f for group in groups for f in group.files if f.path in self._selected]

    def selected_size(self, groups: List[DuplicateGroup]) -> int:
        return sum(f.size for f in self.selected_files(groups))

    def selected_count(self, group: DuplicateGroup) -> int:
        return sum(1 for f in group.files if f.path in self._selected)

    def forget(self, paths: Iterable[str]) -> None:
        """Drops paths that no longer exist in the result (e.g. after trashing)."""
        self._selected.difference_update(paths)

    def __len__(self):
        return len(self._selected)


class DuplicateService:
    @staticmethod
    def remove_files_from_groups(groups: List[DuplicateGroup], file_paths: Iterable[str]) -> List[DuplicateGroup]:
        """
        Removes files with the specified paths from all duplicate groups.

        Groups left with fewer than 2 files are discarded; survivors get their
        original re-selected, since the old original may be among the removed.
        Group order is preserved.
        """
        removed = set(file_paths)
        updated_groups = []
        for group in groups:
            remaining = [f for f in group.files if f.path not in removed]
            if len(remaining) >= 2:
                updated_groups.append(Sorter.mark_originals(DuplicateGroup(digest=group.digest, files=remaining)))
        return updated_groups

    @staticmethod
    def filter_by_category(groups: List[DuplicateGroup], category: Optional[FileCategory]) -> List[DuplicateGroup]:
        """None means all categories."""
        if category is None:
            return list(groups)
        return [g for g in groups if g.category == category]

    @staticmethod
    def total_reclaimable(groups: List[DuplicateGroup]) -> int:
        return sum(g.reclaimable_size for g in groups)
