"""
Unit tests for HasherImpl and the hash algorithm registry.
"""
import hashlib

import pytest
import xxhash

from dupsweep.core.cancellation import CancellationToken
from dupsweep.core.hasher import HasherImpl, Sha256AlgorithmImpl, XXHashAlgorithmImpl, get_algorithm
from dupsweep.core.models import FileRecord


def _record(path) -> FileRecord:
    return FileRecord(path=str(path), size=path.stat().st_size)


class TestPartialHash:

    def test_partial_hash_covers_only_prefix(self, temp_dir):
        path = temp_dir / "big.bin"
        content = b"P" * 4096 + b"tail"
        path.write_bytes(content)

        digest = HasherImpl().compute_partial_hash(_record(path))

        assert digest == hashlib.sha256(content[:4096]).digest()

    def test_small_file_is_hashed_whole(self, temp_dir):
        path = temp_dir / "small.bin"
        path.write_bytes(b"abc")

        assert HasherImpl().compute_partial_hash(_record(path)) == hashlib.sha256(b"abc").digest()

    def test_files_differing_after_prefix_share_partial_hash(self, temp_dir):
        a = temp_dir / "a.bin"
        b = temp_dir / "b.bin"
        a.write_bytes(b"S" * 5000 + b"1")
        b.write_bytes(b"S" * 5000 + b"2")
        hasher = HasherImpl()

        assert hasher.compute_partial_hash(_record(a)) == hasher.compute_partial_hash(_record(b))
        assert hasher.compute_full_hash(_record(a)) != hasher.compute_full_hash(_record(b))

    def test_xxh64_partial_algorithm(self, temp_dir):
        path = temp_dir / "a.bin"
        path.write_bytes(b"xyz" * 100)

        hasher = HasherImpl(partial_algorithm=XXHashAlgorithmImpl())

        assert hasher.compute_partial_hash(_record(path)) == xxhash.xxh64(b"xyz" * 100).digest()

    def test_missing_file_returns_none(self, temp_dir):
        record = FileRecord(path=str(temp_dir / "gone.bin"), size=10)

        assert HasherImpl().compute_partial_hash(record) is None


class TestFullHash:

    def test_full_hash_streams_whole_content(self, temp_dir):
        path = temp_dir / "big.bin"
        content = bytes(range(256)) * 1000
        path.write_bytes(content)

        hasher = HasherImpl(chunk_size=1000)

        assert hasher.compute_full_hash(_record(path)) == hashlib.sha256(content).hexdigest()

    def test_empty_file(self, temp_dir):
        path = temp_dir / "empty.bin"
        path.write_bytes(b"")

        assert HasherImpl().compute_full_hash(_record(path)) == hashlib.sha256(b"").hexdigest()

    def test_cancelled_token_returns_none(self, temp_dir):
        path = temp_dir / "a.bin"
        path.write_bytes(b"x" * 100)
        token = CancellationToken()
        token.cancel()

        assert HasherImpl().compute_full_hash(_record(path), token) is None

    def test_missing_file_returns_none(self, temp_dir):
        record = FileRecord(path=str(temp_dir / "gone.bin"), size=10)

        assert HasherImpl().compute_full_hash(record) is None


class TestAlgorithmSelection:

    def test_full_algorithm_must_be_cryptographic(self):
        with pytest.raises(ValueError, match="cryptographic"):
            HasherImpl(full_algorithm=XXHashAlgorithmImpl())

    def test_partial_defaults_to_full_algorithm(self):
        hasher = HasherImpl()

        assert hasher.partial_algorithm.name == "sha256"
        assert hasher.full_algorithm.cryptographic

    @pytest.mark.parametrize("kwargs", [{"partial_hash_size": 0}, {"chunk_size": -1}])
    def test_rejects_non_positive_sizes(self, kwargs):
        with pytest.raises(ValueError):
            HasherImpl(**kwargs)

    def test_get_algorithm_by_name(self):
        assert isinstance(get_algorithm("sha256"), Sha256AlgorithmImpl)
        assert isinstance(get_algorithm("xxh64"), XXHashAlgorithmImpl)

    def test_get_algorithm_unknown(self):
        with pytest.raises(ValueError, match="Unknown hash algorithm"):
            get_algorithm("md5")
