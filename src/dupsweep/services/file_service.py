"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Cross-platform file actions on scan results: move to trash, open, reveal.
Scans never call into this module; every action here is explicit.
"""
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Iterable, List, Union

from send2trash import send2trash

from dupsweep.core.models import DuplicateFile, LargeFile, TrashResult

logger = logging.getLogger(__name__)

PathLike = Union[str, DuplicateFile, LargeFile]


def _as_path(item: PathLike) -> str:
    return item if isinstance(item, str) else item.path


class FileService:
    """
    Thin wrappers over the platform's trash and file-manager integration.
    """

    @staticmethod
    def move_to_trash(file_path: str) -> None:
        """Moves a file to the system trash. Raises on failure."""
        path = Path(file_path)

        if not path.exists() and not path.is_symlink():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e

    @classmethod
    def move_multiple_to_trash(cls, files: Iterable[PathLike]) -> TrashResult:
        """
        Trashes each file independently. One failure never stops the batch
        and nothing is raised; failures are counted and logged.
        """
        success = 0
        errors = []
        for item in files:
            path = _as_path(item)
            try:
                cls.move_to_trash(path)
                success += 1
            except (OSError, RuntimeError) as e:
                logger.warning(f"Failed to trash {path}: {e}")
                errors.append((path, str(e)))

        return TrashResult(success=success, failed=len(errors), errors=tuple(errors))

    @staticmethod
    def open_file(file_path: str) -> None:
        """Opens a file with the system default application."""
        path = Path(file_path).resolve()
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        FileService._launch(str(path), reveal=False)

    @staticmethod
    def reveal_in_explorer(file_path: str) -> None:
        """Shows a file in the system file manager."""
        path = Path(file_path).resolve()
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        FileService._launch(str(path), reveal=True)

    @staticmethod
    def _launch(path: str, reveal: bool) -> None:
        try:
            if sys.platform == 'win32':
                if reveal:
                    subprocess.Popen(['explorer', '/select,', path])
                else:
                    os.startfile(path)
            elif sys.platform == 'darwin':
                subprocess.Popen(['open', '-R', path] if reveal else ['open', path])
            else:
                # No portable "select this file" on Linux desktops: open the folder instead
                target = os.path.dirname(path) if reveal else path
                FileService._open_linux(target)
        except (OSError, subprocess.SubprocessError) as e:
            raise RuntimeError(f"Failed to {'reveal' if reveal else 'open'} file: {e}") from e

    @staticmethod
    def _open_linux(target: str) -> None:
        """Tries gio, falls back to xdg-open."""
        commands: List[List[str]] = [['gio', 'open', target], ['xdg-open', target]]
        last_error = None
        for command in commands:
            try:
                result = subprocess.run(command, timeout=5, check=False)
            except (FileNotFoundError, subprocess.TimeoutExpired) as e:
                last_error = e
                continue
            if result.returncode == 0:
                return
            logger.debug(f"{command[0]} exited with status {result.returncode}")
            last_error = subprocess.CalledProcessError(result.returncode, command)
        raise RuntimeError("No file opener succeeded (tried gio and xdg-open)") from last_error
