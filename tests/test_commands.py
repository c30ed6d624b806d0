"""
Integration tests for scan commands — the session layer between UI/CLI and core.
Verifies token ownership: cancel before/during a scan, and token renewal between scans.
"""
import threading
from unittest import mock

from dupsweep.commands import DiskUsageCommand, DuplicateScanCommand, LargeFileScanCommand, ScanCommand
from dupsweep.core.models import DuplicateScanParams, LargeFileScanParams, TrashResult
from dupsweep.services.file_service import FileService


def _duplicate_params(root, **kwargs) -> DuplicateScanParams:
    kwargs.setdefault("min_size_bytes", 1)
    return DuplicateScanParams(roots=[str(root)], **kwargs)


class TestDuplicateScanCommand:

    def test_scan_returns_groups_and_keeps_stats(self, test_files, temp_dir):
        command = DuplicateScanCommand(_duplicate_params(temp_dir, extensions=["txt"]))

        groups = command.scan()

        assert len(groups) == 2
        assert command.stats.files_scanned == 7
        assert not command.is_running

    def test_execute_reports_progress(self, test_files, temp_dir):
        command = DuplicateScanCommand(_duplicate_params(temp_dir))
        callback = mock.Mock()

        command.execute(progress_callback=callback)

        assert callback.call_count > 0
        callback.assert_called_with("Finished", 1.0)

    def test_scan_accepts_explicit_roots(self, test_files, temp_dir):
        command = DuplicateScanCommand(_duplicate_params(temp_dir / "missing"))

        assert command.scan() == []
        assert len(command.scan(roots=[str(temp_dir)])) == 2

    def test_partial_algorithm_is_configurable(self, test_files, temp_dir):
        command = DuplicateScanCommand(_duplicate_params(temp_dir, partial_algorithm="xxh64"))

        assert len(command.scan()) == 2

    def test_cancel_before_scan_returns_empty(self, test_files, temp_dir):
        command = DuplicateScanCommand(_duplicate_params(temp_dir))
        command.cancel()
        assert command.is_cancelled()

        assert command.scan() == []

    def test_token_is_renewed_after_scan(self, test_files, temp_dir):
        """A cancellation never leaks into the next scan."""
        command = DuplicateScanCommand(_duplicate_params(temp_dir))
        command.cancel()
        command.scan()

        assert not command.is_cancelled()
        assert len(command.scan()) == 2

    def test_cancel_during_scan(self, test_files, temp_dir):
        command = DuplicateScanCommand(_duplicate_params(temp_dir))

        def on_progress(label, fraction):
            if fraction >= 0.5:
                command.cancel()

        assert command.scan(progress_callback=on_progress) == []

    def test_cancel_from_another_thread(self, test_files, temp_dir):
        command = DuplicateScanCommand(_duplicate_params(temp_dir))
        started = threading.Event()
        result = {}

        def on_progress(label, fraction):
            started.set()
            if fraction >= 0.5:
                # Wait for the other thread's cancel before hashing continues
                command._token._event.wait(timeout=5)

        def run():
            result["groups"] = command.scan(progress_callback=on_progress)

        worker = threading.Thread(target=run)
        worker.start()
        started.wait(timeout=5)
        command.cancel()
        worker.join(timeout=10)

        assert result["groups"] == []


class TestLargeFileScanCommand:

    def test_scan_uses_params_threshold(self, test_files, temp_dir):
        command = LargeFileScanCommand(LargeFileScanParams(roots=[str(temp_dir)], threshold_bytes=2048))

        files = command.scan()

        assert [f.size for f in files] == [2500, 2048, 2048]

    def test_threshold_override(self, test_files, temp_dir):
        command = LargeFileScanCommand(LargeFileScanParams(roots=[str(temp_dir)], threshold_bytes=2048))

        assert [f.size for f in command.scan(threshold=2049)] == [2500]

    def test_cancel_before_scan(self, test_files, temp_dir):
        command = LargeFileScanCommand(LargeFileScanParams(roots=[str(temp_dir)], threshold_bytes=0))
        command.cancel()

        assert command.execute() == []
        assert not command.is_cancelled()


class TestDiskUsageCommand:

    def test_directory_size(self, test_files, temp_dir):
        command = DiskUsageCommand(str(temp_dir))

        expected = sum(p.stat().st_size for p in test_files.values())
        assert command.directory_size() == expected

    def test_unavailable_path(self, temp_dir):
        command = DiskUsageCommand(str(temp_dir / "missing"))

        assert command.directory_size() is None
        assert command.breakdown() == []
        assert not DiskUsageCommand.is_path_available(str(temp_dir / "missing"))

    def test_execute_returns_breakdown(self, test_files, temp_dir):
        items = DiskUsageCommand(str(temp_dir)).execute()

        assert items[0].name == "unique2.txt"
        assert any(item.name == "subdir" and item.is_directory for item in items)


class TestMoveToTrash:

    def test_counts_successes_and_failures(self, temp_dir):
        good = temp_dir / "good.txt"
        good.write_text("x")

        with mock.patch("dupsweep.services.file_service.send2trash") as mock_trash:
            result = ScanCommand.move_to_trash([str(good), str(temp_dir / "missing.txt")])

        assert isinstance(result, TrashResult)
        assert (result.success, result.failed) == (1, 1)
        mock_trash.assert_called_once_with(str(good))

    def test_failure_does_not_abort_batch(self, temp_dir):
        paths = []
        for name in ("a.txt", "b.txt", "c.txt"):
            (temp_dir / name).write_text("x")
            paths.append(str(temp_dir / name))

        def flaky(path):
            if path.endswith("b.txt"):
                raise OSError("permission denied")

        with mock.patch.object(FileService, "move_to_trash", side_effect=flaky) as mock_move:
            result = DuplicateScanCommand.move_to_trash(paths)

        assert mock_move.call_count == 3
        assert (result.success, result.failed) == (2, 1)
        assert result.errors[0][0].endswith("b.txt")
