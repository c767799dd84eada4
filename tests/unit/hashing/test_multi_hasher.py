from __future__ import annotations

import hashlib
import io
from pathlib import Path

import pytest

from inventorize.errors import InventoryIOError
from inventorize.inventory import MultiHasher, hash_file, normalize_hash_algorithms
from inventorize.inventory.hashing import CHUNK_SIZE

HELLO_MD5 = "5d41402abc4b2a76b9719d911017c592"
HELLO_SHA1 = "aaf4c61ddcc5e8a2dabede0f3b482cd9aea9434d"


def test_known_digests_for_small_content() -> None:
    digests = MultiHasher(["md5", "sha1"]).compute(io.BytesIO(b"hello"))

    assert digests == {"md5": HELLO_MD5, "sha1": HELLO_SHA1}


def test_single_pass_matches_hashlib_over_multiple_chunks() -> None:
    data = bytes(range(256)) * (CHUNK_SIZE // 256 * 3 + 7)

    digests = MultiHasher(["sha1", "md5"]).compute(io.BytesIO(data))

    assert digests == {
        "md5": hashlib.md5(data).hexdigest(),
        "sha1": hashlib.sha1(data).hexdigest(),
    }


def test_stream_is_read_once_for_all_algorithms() -> None:
    class CountingStream(io.BytesIO):
        reads = 0

        def read(self, size: int | None = -1) -> bytes:
            CountingStream.reads += 1
            return super().read(size)

    stream = CountingStream(b"x" * (CHUNK_SIZE + 1))
    MultiHasher(["md5", "sha1"]).compute(stream)

    # two data chunks plus the terminating empty read
    assert CountingStream.reads == 3


def test_empty_file_digest(tmp_path: Path) -> None:
    path = tmp_path / "empty.bin"
    path.write_bytes(b"")

    assert hash_file(path, ["md5"]) == {"md5": hashlib.md5(b"").hexdigest()}


def test_missing_file_raises_inventory_io_error(tmp_path: Path) -> None:
    missing = tmp_path / "missing.txt"

    with pytest.raises(InventoryIOError) as excinfo:
        hash_file(missing, ["md5"])

    assert excinfo.value.path == missing
    assert isinstance(excinfo.value.__cause__, OSError)


def test_normalize_hash_algorithms_sorts_and_deduplicates() -> None:
    assert normalize_hash_algorithms(["SHA1", "md5", "sha1"]) == ("md5", "sha1")


@pytest.mark.parametrize("names", [[], ["sha256"], ["md5", "crc32"]])
def test_normalize_hash_algorithms_rejects_invalid_sets(names: list[str]) -> None:
    with pytest.raises(ValueError):
        normalize_hash_algorithms(names)


def test_read_failure_mid_file_returns_no_digests(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "flaky.bin"
    path.write_bytes(b"x" * (CHUNK_SIZE * 2))

    class FailingStream(io.BytesIO):
        chunks_read = 0

        def read(self, size: int | None = -1) -> bytes:
            if FailingStream.chunks_read:
                raise OSError(5, "Input/output error")
            FailingStream.chunks_read += 1
            return super().read(size)

    stream = FailingStream(b"x" * (CHUNK_SIZE * 2))
    monkeypatch.setattr(Path, "open", lambda self, *args, **kwargs: stream)
    results: list[dict[str, str]] = []

    with pytest.raises(InventoryIOError, match="Input/output error") as excinfo:
        results.append(hash_file(path, ["md5", "sha1"]))

    assert results == []
    assert FailingStream.chunks_read == 1
    assert excinfo.value.path == path
    assert isinstance(excinfo.value.__cause__, OSError)
