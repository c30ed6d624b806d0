"""
Shared fixtures for dupsweep tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so the package is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for duplicate scenarios:
    - 2 identical files (1KB of 'A') plus a third copy in a subdirectory
    - 2 identical files (2KB of 'B')
    - 2 unique files (different content and size)
    - 1 empty file
    - 1 file with .tmp extension (1KB of 'E')
    """
    files = {}

    # Duplicate set #1 (1KB of 'A')
    content_a = b"A" * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    # Duplicate pair #2 (2KB of 'B')
    content_b = b"B" * 2048
    files["dup2_a"] = temp_dir / "dup2_a.txt"
    files["dup2_b"] = temp_dir / "dup2_b.txt"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    # Unique files
    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1500)
    files["unique2"] = temp_dir / "unique2.txt"
    files["unique2"].write_bytes(b"D" * 2500)

    # Empty file (filtered whenever a minimum size is set)
    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    # Different extension, same size as set #1 but different content
    files["filtered"] = temp_dir / "ignore.tmp"
    files["filtered"].write_bytes(b"E" * 1024)

    # Subdirectory with a third copy of set #1
    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)

    return files


@pytest.fixture
def make_file():
    """Returns a helper that creates parent directories and writes `content` to `path`."""
    def _make(path: Path, content: bytes = b"x") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path
    return _make
