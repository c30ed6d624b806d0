"""
Tests for DirectorySizeAggregator — "unavailable" must never be confused with 0.
"""
import os
import sys

import pytest

from dupsweep.core.cancellation import CancellationToken
from dupsweep.core.disk_usage import DirectorySizeAggregator, storage_overview


class TestDirectorySize:

    def test_empty_readable_directory_is_zero(self, temp_dir):
        assert DirectorySizeAggregator().directory_size(str(temp_dir)) == 0

    def test_missing_directory_is_unavailable(self, temp_dir):
        assert DirectorySizeAggregator().directory_size(str(temp_dir / "missing")) is None

    def test_file_path_returns_own_size(self, temp_dir, make_file):
        path = make_file(temp_dir / "a.txt", b"abc")

        assert DirectorySizeAggregator().directory_size(str(path)) == 3

    @pytest.mark.skipif(sys.platform == "win32", reason="Symlinks need privileges on Windows")
    def test_symlink_to_file_is_unavailable(self, temp_dir, make_file):
        target = make_file(temp_dir / "a.txt", b"abc")
        link = temp_dir / "link.txt"
        link.symlink_to(target)

        assert DirectorySizeAggregator().directory_size(str(link)) is None

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="Permission bits are not enforced for root or on Windows"
    )
    def test_unreadable_directory_is_unavailable(self, temp_dir):
        locked = temp_dir / "locked"
        locked.mkdir()
        os.chmod(locked, 0)
        try:
            assert DirectorySizeAggregator().directory_size(str(locked)) is None
        finally:
            os.chmod(locked, 0o755)

    def test_sums_nested_regular_files(self, temp_dir, make_file):
        make_file(temp_dir / "a.bin", b"x" * 100)
        make_file(temp_dir / "nested" / "deeper" / "b.bin", b"x" * 250)

        assert DirectorySizeAggregator().directory_size(str(temp_dir)) == 350

    def test_hidden_and_excluded_names_not_counted(self, temp_dir, make_file):
        make_file(temp_dir / ".secret", b"x" * 100)
        make_file(temp_dir / "node_modules" / "dep.js", b"x" * 100)
        make_file(temp_dir / "kept.txt", b"x" * 10)

        aggregator = DirectorySizeAggregator(excluded_names=["node_modules"])

        assert aggregator.directory_size(str(temp_dir)) == 10

    def test_bundle_contents_are_counted(self, temp_dir, make_file):
        make_file(temp_dir / "Tool.app" / "Contents" / "binary", b"x" * 40)

        assert DirectorySizeAggregator().directory_size(str(temp_dir)) == 40

    def test_cancelled_returns_partial_sum(self, temp_dir, make_file):
        make_file(temp_dir / "a.bin", b"x" * 100)
        token = CancellationToken()
        token.cancel()

        assert DirectorySizeAggregator().directory_size(str(temp_dir), token) == 0


class TestBreakdown:

    def test_children_sorted_with_percentages(self, temp_dir, make_file):
        make_file(temp_dir / "big" / "a.bin", b"x" * 300)
        make_file(temp_dir / "small.bin", b"x" * 100)

        items = DirectorySizeAggregator().breakdown(str(temp_dir))

        assert [(i.name, i.size, i.is_directory) for i in items] == [("big", 300, True), ("small.bin", 100, False)]
        assert items[0].percentage == pytest.approx(75.0)
        assert items[1].percentage == pytest.approx(25.0)

    def test_hidden_children_skipped(self, temp_dir, make_file):
        make_file(temp_dir / ".hidden" / "a.bin", b"x" * 300)
        make_file(temp_dir / "shown.bin", b"x" * 10)

        items = DirectorySizeAggregator().breakdown(str(temp_dir))

        assert [i.name for i in items] == ["shown.bin"]

    def test_empty_children_have_zero_percentage(self, temp_dir):
        (temp_dir / "empty").mkdir()

        items = DirectorySizeAggregator().breakdown(str(temp_dir))

        assert items[0].size == 0
        assert items[0].percentage == 0.0

    def test_missing_path(self, temp_dir):
        assert DirectorySizeAggregator().breakdown(str(temp_dir / "missing")) == []


class TestStorageOverview:

    def test_reports_volume_capacity(self, temp_dir):
        overview = storage_overview(str(temp_dir))

        assert overview is not None
        assert overview.total > 0
        assert overview.used + overview.free <= overview.total

    def test_missing_path(self, temp_dir):
        assert storage_overview(str(temp_dir / "missing")) is None
