"""
Tests for file service — critical for safe file deletion.
These tests verify files are moved to trash (not permanently deleted).
send2trash itself is patched out so the test run never touches the real trash.
"""
import sys
from unittest import mock

import pytest

from dupsweep.core.models import DuplicateFile, LargeFile
from dupsweep.services.file_service import FileService


class TestMoveToTrash:
    """Test safe file deletion via system trash."""

    def test_delegates_to_send2trash(self, tmp_path):
        test_file = tmp_path / "test.txt"
        test_file.write_text("content to delete")

        with mock.patch("dupsweep.services.file_service.send2trash") as mock_trash:
            FileService.move_to_trash(str(test_file))

        mock_trash.assert_called_once_with(str(test_file))

    def test_raises_for_nonexistent_file(self, tmp_path):
        with mock.patch("dupsweep.services.file_service.send2trash") as mock_trash:
            with pytest.raises(FileNotFoundError, match="File not found"):
                FileService.move_to_trash(str(tmp_path / "does_not_exist.txt"))

        mock_trash.assert_not_called()

    def test_wraps_trash_failures(self, tmp_path):
        test_file = tmp_path / "test.txt"
        test_file.write_text("x")

        with mock.patch("dupsweep.services.file_service.send2trash", side_effect=OSError("no trash")):
            with pytest.raises(RuntimeError, match="Failed to move to trash"):
                FileService.move_to_trash(str(test_file))


class TestMoveMultipleToTrash:

    def test_accepts_result_records(self, tmp_path):
        a = tmp_path / "a.jpg"
        b = tmp_path / "b.iso"
        a.write_text("x")
        b.write_text("x")
        items = [
            DuplicateFile(path=str(a), name="a.jpg", size=1, created=0, modified=0, extension="jpg"),
            LargeFile(path=str(b), name="b.iso", size=1, modified=0, extension="iso"),
        ]

        with mock.patch("dupsweep.services.file_service.send2trash") as mock_trash:
            result = FileService.move_multiple_to_trash(items)

        assert (result.success, result.failed) == (2, 0)
        assert mock_trash.call_count == 2

    def test_never_raises_for_individual_failures(self, tmp_path):
        a = tmp_path / "a.txt"
        a.write_text("x")

        with mock.patch("dupsweep.services.file_service.send2trash", side_effect=PermissionError("denied")):
            result = FileService.move_multiple_to_trash([str(a), str(tmp_path / "missing")])

        assert (result.success, result.failed) == (0, 2)
        assert len(result.errors) == 2

    def test_empty_batch(self):
        result = FileService.move_multiple_to_trash([])

        assert (result.success, result.failed, result.errors) == (0, 0, ())


class TestOpenAndReveal:

    def test_open_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FileService.open_file(str(tmp_path / "missing"))

    def test_reveal_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FileService.reveal_in_explorer(str(tmp_path / "missing"))

    @pytest.mark.skipif(not sys.platform.startswith("linux"), reason="Linux opener chain")
    def test_linux_falls_back_to_xdg_open(self, tmp_path):
        target = tmp_path / "a.txt"
        target.write_text("x")

        def fake_run(command, **kwargs):
            if command[0] == "gio":
                raise FileNotFoundError("gio")
            return mock.Mock(returncode=0)

        with mock.patch("dupsweep.services.file_service.subprocess.run", side_effect=fake_run) as mock_run:
            FileService.open_file(str(target))

        assert mock_run.call_args_list[-1].args[0] == ["xdg-open", str(target.resolve())]

    @pytest.mark.skipif(not sys.platform.startswith("linux"), reason="Linux opener chain")
    def test_linux_without_opener_raises(self, tmp_path):
        target = tmp_path / "a.txt"
        target.write_text("x")

        with mock.patch("dupsweep.services.file_service.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(RuntimeError, match="No file opener"):
                FileService.reveal_in_explorer(str(target))

    @pytest.mark.skipif(not sys.platform.startswith("linux"), reason="Linux opener chain")
    def test_linux_failed_gio_falls_back_to_xdg_open(self, tmp_path):
        target = tmp_path / "a.txt"
        target.write_text("x")

        def fake_run(command, **kwargs):
            return mock.Mock(returncode=1 if command[0] == "gio" else 0)

        with mock.patch("dupsweep.services.file_service.subprocess.run", side_effect=fake_run) as mock_run:
            FileService.open_file(str(target))

        assert [call.args[0][0] for call in mock_run.call_args_list] == ["gio", "xdg-open"]

    @pytest.mark.skipif(not sys.platform.startswith("linux"), reason="Linux opener chain")
    def test_linux_all_openers_failing_raises(self, tmp_path):
        target = tmp_path / "a.txt"
        target.write_text("x")

        with mock.patch("dupsweep.services.file_service.subprocess.run", return_value=mock.Mock(returncode=4)):
            with pytest.raises(RuntimeError, match="No file opener"):
                FileService.open_file(str(target))
