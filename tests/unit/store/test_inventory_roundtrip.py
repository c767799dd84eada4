from __future__ import annotations

import json

from inventorize.inventory import (
    INVENTORY_FORMAT_VERSION,
    Inventory,
    InventoryOptions,
    InventoryRecord,
    decode_inventory,
    encode_inventory,
)

MD5_A = "5d41402abc4b2a76b9719d911017c592"
SHA1_A = "aaf4c61ddcc5e8a2dabede0f3b482cd9aea9434d"
MD5_B = "d41d8cd98f00b204e9800998ecf8427e"
SHA1_B = "da39a3ee5e6b4b0d3255bfef95601890afd80709"


def _inventory() -> Inventory:
    return Inventory.from_records(
        version="0.1.0",
        options=InventoryOptions(hash_algorithms=("md5", "sha1"), include_hidden=False),
        records=[
            InventoryRecord.create("dir/b.txt", 0, {"sha1": SHA1_B, "md5": MD5_B}),
            InventoryRecord.create("a.txt", 5, {"md5": MD5_A, "sha1": SHA1_A}),
        ],
    )


def test_decode_of_encode_returns_equal_inventory() -> None:
    inventory = _inventory()

    assert decode_inventory(encode_inventory(inventory)) == inventory


def test_empty_inventory_round_trips() -> None:
    inventory = Inventory(
        version="0.1.0",
        options=InventoryOptions(hash_algorithms=("md5",), include_hidden=True),
    )

    assert decode_inventory(encode_inventory(inventory)) == inventory


def test_non_ascii_paths_round_trip() -> None:
    inventory = Inventory.from_records(
        version="0.1.0",
        options=InventoryOptions(hash_algorithms=("md5",), include_hidden=True),
        records=[InventoryRecord.create("données/ñ.txt", 5, {"md5": MD5_A})],
    )

    assert decode_inventory(encode_inventory(inventory)) == inventory


def test_encoded_layout_is_deterministic_and_path_ordered() -> None:
    encoded = encode_inventory(_inventory())
    payload = json.loads(encoded)

    assert encoded == encode_inventory(_inventory())
    assert encoded.endswith(b"\n")
    assert set(payload.keys()) == {"format_version", "options", "records", "version"}
    assert payload["format_version"] == INVENTORY_FORMAT_VERSION
    assert payload["options"] == {"hash_algorithms": ["md5", "sha1"], "include_hidden": False}
    assert [record["path"] for record in payload["records"]] == ["a.txt", "dir/b.txt"]
    assert payload["records"][0] == {
        "digests": {"md5": MD5_A, "sha1": SHA1_A},
        "path": "a.txt",
        "size": 5,
    }
