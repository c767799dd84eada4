"""Inventory encoding and structural validation.

The store only converts between bytes and the typed model; reading and
writing the inventory file is handled by the caller.
"""

from __future__ import annotations

import json
import string

from inventorize.errors import FormatError
from inventorize.inventory.hashing import digest_hex_length, normalize_hash_algorithms
from inventorize.inventory.models import Inventory, InventoryOptions, InventoryRecord
from inventorize.paths import normalize_relative_path

INVENTORY_FORMAT_VERSION = 1

_HEX_DIGITS = frozenset(string.hexdigits)


def encode_inventory(inventory: Inventory) -> bytes:
    """Serialize an inventory to deterministic UTF-8 JSON."""
    payload = {
        "format_version": INVENTORY_FORMAT_VERSION,
        "version": inventory.version,
        "options": {
            "hash_algorithms": list(inventory.options.hash_algorithms),
            "include_hidden": inventory.options.include_hidden,
        },
        "records": [
            {
                "path": record.path,
                "size": record.size,
                "digests": record.digest_map(),
            }
            for record in inventory.records
        ],
    }
    return (json.dumps(payload, indent=2, sort_keys=True) + "\n").encode("utf-8")


def decode_inventory(data: bytes) -> Inventory:
    """Parse and validate inventory bytes, raising FormatError on any defect."""
    try:
        payload = json.loads(data.decode("utf-8"))
    except UnicodeDecodeError as error:
        raise FormatError("inventory is not valid UTF-8") from error
    except json.JSONDecodeError as error:
        raise FormatError(
            f"inventory is not valid JSON ({error.msg} at line {error.lineno})"
        ) from error
    if not isinstance(payload, dict):
        raise FormatError("top-level value must be an object")

    format_version = payload.get("format_version", INVENTORY_FORMAT_VERSION)
    if isinstance(format_version, bool) or not isinstance(format_version, int):
        raise FormatError("'format_version' must be an integer")
    if format_version != INVENTORY_FORMAT_VERSION:
        raise FormatError(
            f"unsupported format_version {format_version} "
            f"(expected {INVENTORY_FORMAT_VERSION})"
        )

    version = payload.get("version")
    if not isinstance(version, str):
        raise FormatError("'version' must be a string")
    options = _decode_options(payload.get("options"))

    raw_records = payload.get("records")
    if not isinstance(raw_records, list):
        raise FormatError("'records' must be a list")
    records = [_decode_record(raw, index, options) for index, raw in enumerate(raw_records)]
    try:
        return Inventory.from_records(version=version, options=options, records=records)
    except ValueError as error:
        raise FormatError(str(error)) from error


def _decode_options(raw: object) -> InventoryOptions:
    if not isinstance(raw, dict):
        raise FormatError("'options' must be an object")
    raw_algorithms = raw.get("hash_algorithms")
    if not isinstance(raw_algorithms, list) or not all(
        isinstance(item, str) for item in raw_algorithms
    ):
        raise FormatError("'options.hash_algorithms' must be a list of strings")
    try:
        hash_algorithms = normalize_hash_algorithms(raw_algorithms)
    except ValueError as error:
        raise FormatError(f"'options.hash_algorithms': {error}") from error
    include_hidden = raw.get("include_hidden")
    if not isinstance(include_hidden, bool):
        raise FormatError("'options.include_hidden' must be a boolean")
    return InventoryOptions(hash_algorithms=hash_algorithms, include_hidden=include_hidden)


def _decode_record(raw: object, index: int, options: InventoryOptions) -> InventoryRecord:
    where = f"records[{index}]"
    if not isinstance(raw, dict):
        raise FormatError(f"{where} must be an object")
    path = raw.get("path")
    if not isinstance(path, str):
        raise FormatError(f"{where}.path must be a string")
    try:
        path = normalize_relative_path(path)
    except ValueError as error:
        raise FormatError(f"{where}.path: {error}") from error
    size = raw.get("size")
    if isinstance(size, bool) or not isinstance(size, int) or size < 0:
        raise FormatError(f"{where}.size must be a non-negative integer")
    raw_digests = raw.get("digests")
    if not isinstance(raw_digests, dict) or not raw_digests:
        raise FormatError(f"{where}.digests must be a non-empty object")

    digests: dict[str, str] = {}
    for name, value in raw_digests.items():
        if name not in options.hash_algorithms:
            raise FormatError(f"{where}.digests has algorithm {name!r} not listed in options")
        if (
            not isinstance(value, str)
            or len(value) != digest_hex_length(name)
            or not set(value) <= _HEX_DIGITS
        ):
            raise FormatError(f"{where}.digests.{name} must be a {name} hex digest")
        digests[name] = value.lower()
    return InventoryRecord.create(path=path, size=size, digests=digests)
