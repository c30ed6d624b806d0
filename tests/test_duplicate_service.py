"""
Tests for DuplicateService and SelectionState — caller-owned state over immutable scan results.
"""
from dupsweep.core.models import FileCategory, FileRecord
from dupsweep.core.sorter import Sorter
from dupsweep.services.duplicate_service import DuplicateService, SelectionState


def _group(digest, paths, size=100):
    return Sorter.assemble_group(
        digest, [FileRecord(path=p, size=size, created=i) for i, p in enumerate(paths)]
    )


class TestSelectionState:

    def test_default_selects_every_non_original(self):
        groups = [_group("a", ["/1.jpg", "/2.jpg", "/3.jpg"]), _group("b", ["/x.pdf", "/y.pdf"])]

        state = SelectionState.default_for(groups)

        assert [f.path for f in state.selected_files(groups)] == ["/2.jpg", "/3.jpg", "/y.pdf"]
        assert not state.is_selected("/1.jpg")
        assert state.selected_size(groups) == 300
        assert state.selected_count(groups[0]) == 2

    def test_toggle(self):
        state = SelectionState()

        assert state.toggle("/a") is True
        assert state.is_selected("/a")
        assert state.toggle("/a") is False
        assert len(state) == 0

    def test_deselect_and_forget(self):
        groups = [_group("a", ["/1", "/2", "/3"])]
        state = SelectionState.default_for(groups)

        state.forget(["/2"])
        assert [f.path for f in state.selected_files(groups)] == ["/3"]

        state.deselect_all()
        assert state.selected_files(groups) == []

    def test_selection_never_touches_records(self):
        groups = [_group("a", ["/1", "/2"])]
        before = [(f.path, f.is_original) for f in groups[0].files]

        state = SelectionState.default_for(groups)
        state.toggle("/1")

        assert [(f.path, f.is_original) for f in groups[0].files] == before


class TestDuplicateService:

    def test_remove_files_drops_small_groups(self):
        groups = [_group("a", ["/1", "/2", "/3"]), _group("b", ["/x", "/y"])]

        updated = DuplicateService.remove_files_from_groups(groups, ["/2", "/y"])

        assert len(updated) == 1
        assert [f.path for f in updated[0].files] == ["/1", "/3"]

    def test_remove_original_reselects(self):
        groups = [_group("a", ["/1", "/2", "/3"])]

        updated = DuplicateService.remove_files_from_groups(groups, ["/1"])

        assert updated[0].original.path == "/2"

    def test_filter_by_category(self):
        groups = [_group("a", ["/1.jpg", "/2.jpg"]), _group("b", ["/x.pdf", "/y.pdf"])]

        assert DuplicateService.filter_by_category(groups, FileCategory.DOCUMENTS) == [groups[1]]
        assert DuplicateService.filter_by_category(groups, None) == groups

    def test_total_reclaimable(self):
        groups = [_group("a", ["/1", "/2", "/3"]), _group("b", ["/x", "/y"], size=50)]

        assert DuplicateService.total_reclaimable(groups) == 250
