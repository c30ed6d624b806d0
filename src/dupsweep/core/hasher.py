"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file hashing using pluggable hash algorithms.

HasherImpl reads a bounded prefix for the partial digest and streams the whole
file in fixed-size chunks for the full digest, so memory use does not depend on
file size. Read errors are not raised: the caller gets None and drops the file.
"""

import hashlib
import logging
from typing import Optional

import xxhash

from dupsweep.core.cancellation import CancellationToken
from dupsweep.core.interfaces import Hasher, HashAlgorithm, IncrementalHash
from dupsweep.core.models import FileRecord, DEFAULT_CHUNK_SIZE, DEFAULT_PARTIAL_HASH_SIZE

logger = logging.getLogger(__name__)


# Use the same way to implement and use any other hashing algorithm
class Sha256AlgorithmImpl(HashAlgorithm):
    name = "sha256"
    cryptographic = True

    def new(self) -> IncrementalHash:
        return hashlib.sha256()


class XXHashAlgorithmImpl(HashAlgorithm):
    """xxHash64: much faster than SHA-256 but not collision resistant. Prefix tier only."""
    name = "xxh64"
    cryptographic = False

    def new(self) -> IncrementalHash:
        return xxhash.xxh64()


ALGORITHMS = {
    Sha256AlgorithmImpl.name: Sha256AlgorithmImpl,
    XXHashAlgorithmImpl.name: XXHashAlgorithmImpl,
}


def get_algorithm(name: str) -> HashAlgorithm:
    try:
        return ALGORITHMS[name]()
    except KeyError:
        raise ValueError(f"Unknown hash algorithm: '{name}'") from None


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    The full-content algorithm must be cryptographic.
    """

    def __init__(
        self,
        full_algorithm: Optional[HashAlgorithm] = None,
        partial_algorithm: Optional[HashAlgorithm] = None,
        partial_hash_size: int = DEFAULT_PARTIAL_HASH_SIZE,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.full_algorithm = full_algorithm or Sha256AlgorithmImpl()
        self.partial_algorithm = partial_algorithm or self.full_algorithm
        if not self.full_algorithm.cryptographic:
            raise ValueError(f"Full hash needs a cryptographic algorithm, got '{self.full_algorithm.name}'")
        if partial_hash_size <= 0 or chunk_size <= 0:
            raise ValueError("Partial hash size and chunk size must be positive")
        self.partial_hash_size = partial_hash_size
        self.chunk_size = chunk_size

    def compute_partial_hash(self, file: FileRecord) -> Optional[bytes]:
        """Digest of the first `partial_hash_size` bytes (the whole file if it is smaller)."""
        try:
            with open(file.path, 'rb') as f:
                data = f.read(self.partial_hash_size)
        except OSError as e:
            logger.debug(f"Error reading prefix of {file.path}: {e}")
            return None

        hasher = self.partial_algorithm.new()
        hasher.update(data)
        return hasher.digest()

    def compute_full_hash(
        self,
        file: FileRecord,
        token: Optional[CancellationToken] = None
    ) -> Optional[str]:
        """
        Hex digest of the entire content, streamed in `chunk_size` reads.
        Returns None if the file cannot be read or the token is cancelled mid-file.
        """
        hasher = self.full_algorithm.new()
        try:
            with open(file.path, 'rb') as f:
                while True:
                    if token is not None and token.cancelled:
                        return None
                    chunk = f.read(self.chunk_size)
                    if not chunk:
                        break
                    hasher.update(chunk)
        except OSError as e:
            logger.debug(f"Error reading full content of {file.path}: {e}")
            return None

        return hasher.hexdigest()
