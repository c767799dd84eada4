"""Inventory model, traversal, hashing and reconciliation package."""

from .hashing import (
    DEFAULT_HASH_ALGORITHMS,
    SUPPORTED_HASH_ALGORITHMS,
    MultiHasher,
    hash_file,
    normalize_hash_algorithms,
)
from .models import Inventory, InventoryOptions, InventoryRecord, RepositoryFile
from .reconcile import build_inventory, update_inventory, verify_inventory
from .report import BuildReport, DiffEntry, UpdateReport, VerifyReport, summary_lines
from .store import INVENTORY_FORMAT_VERSION, decode_inventory, encode_inventory
from .walker import is_hidden, walk_repository

__all__ = [
    "BuildReport",
    "DEFAULT_HASH_ALGORITHMS",
    "DiffEntry",
    "INVENTORY_FORMAT_VERSION",
    "Inventory",
    "InventoryOptions",
    "InventoryRecord",
    "MultiHasher",
    "RepositoryFile",
    "SUPPORTED_HASH_ALGORITHMS",
    "UpdateReport",
    "VerifyReport",
    "build_inventory",
    "decode_inventory",
    "encode_inventory",
    "hash_file",
    "is_hidden",
    "normalize_hash_algorithms",
    "summary_lines",
    "update_inventory",
    "verify_inventory",
    "walk_repository",
]
