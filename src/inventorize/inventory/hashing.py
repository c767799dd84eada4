"""Single-pass multi-algorithm file digests."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO

from inventorize.errors import InventoryIOError

SUPPORTED_HASH_ALGORITHMS = ("md5", "sha1")
DEFAULT_HASH_ALGORITHMS = ("md5",)
CHUNK_SIZE = 128 * 1024


def normalize_hash_algorithms(names: Iterable[str]) -> tuple[str, ...]:
    """Return a sorted, deduplicated tuple of supported algorithm names."""
    output: set[str] = set()
    for name in names:
        normalized = name.strip().lower()
        if normalized not in SUPPORTED_HASH_ALGORITHMS:
            raise ValueError(
                f"Unsupported hash algorithm: {name!r} "
                f"(expected one of {', '.join(SUPPORTED_HASH_ALGORITHMS)})."
            )
        output.add(normalized)
    if not output:
        raise ValueError("At least one hash algorithm is required.")
    return tuple(sorted(output))


def digest_hex_length(name: str) -> int:
    """Return the number of hex characters a digest of this algorithm has."""
    return hashlib.new(name, usedforsecurity=False).digest_size * 2


class MultiHasher:
    """A set of digest accumulators fed by one shared read loop."""

    def __init__(self, algorithms: Iterable[str]) -> None:
        self._algorithms = normalize_hash_algorithms(algorithms)
        self._digests = {
            name: hashlib.new(name, usedforsecurity=False) for name in self._algorithms
        }

    @property
    def algorithms(self) -> tuple[str, ...]:
        return self._algorithms

    def update(self, chunk: bytes) -> None:
        for digest in self._digests.values():
            digest.update(chunk)

    def hexdigests(self) -> dict[str, str]:
        return {name: digest.hexdigest() for name, digest in self._digests.items()}

    def compute(self, stream: BinaryIO) -> dict[str, str]:
        """Consume the whole stream and return every requested digest."""
        while True:
            chunk = stream.read(CHUNK_SIZE)
            if not chunk:
                break
            self.update(chunk)
        return self.hexdigests()


def hash_file(path: Path, algorithms: Iterable[str]) -> dict[str, str]:
    """Compute all requested digests of a file in one pass."""
    hasher = MultiHasher(algorithms)
    try:
        with path.open("rb") as handle:
            return hasher.compute(handle)
    except OSError as error:
        raise InventoryIOError(path, error.strerror or str(error)) from error
