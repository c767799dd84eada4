"""Path helpers for repository and inventory locations."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

from inventorize.errors import InventoryLocationError

WINDOWS_ABSOLUTE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:[\\/]")


def normalize_relative_path(candidate: str) -> str:
    """Normalize separators of a repository-relative path.

    Raises ValueError for empty, absolute or traversing inputs.
    """
    normalized = candidate.replace("\\", "/")
    if normalized.startswith("/") or WINDOWS_ABSOLUTE_PATTERN.match(normalized):
        raise ValueError(f"Path must be relative to the repository: {candidate!r}")
    parts = [part for part in normalized.split("/") if part not in ("", ".")]
    if not parts:
        raise ValueError("Path is empty.")
    if any(part == ".." for part in parts):
        raise ValueError(f"Path traversal is not allowed: {candidate!r}")
    return "/".join(parts)


def resolve_repository(repository: Path) -> Path:
    """Resolve the repository root, which must be an existing directory."""
    if not repository.exists():
        raise InventoryLocationError(
            reason=f"Repository does not exist: {str(repository)!r}",
            hint="Pass an existing directory via --repository.",
        )
    if not repository.is_dir():
        raise InventoryLocationError(
            reason=f"Repository is not a directory: {str(repository)!r}",
            hint="Pass an existing directory via --repository.",
        )
    return repository.resolve()


def canonicalize_inventory_path(inventory: Path) -> Path:
    """Resolve the inventory path without requiring the file itself to exist.

    The parent directory must exist; an empty parent means the current
    working directory.
    """
    if not inventory.name or inventory.name in (".", ".."):
        raise InventoryLocationError(
            reason="Inventory filename not specified.",
            hint="Pass a file path such as '../inventory.json' via --inventory.",
        )
    parent = inventory.parent
    if not parent.is_dir():
        raise InventoryLocationError(
            reason=f"Inventory directory does not exist: {str(parent)!r}",
            hint="Create the directory or choose another inventory location.",
        )
    return parent.resolve() / inventory.name


def ensure_outside_repository(repo_root: Path, inventory_path: Path) -> None:
    """Raise InventoryLocationError when the inventory lives under repo_root."""
    if inventory_path.is_relative_to(repo_root):
        raise InventoryLocationError(
            reason="Inventory must be located outside of the repository.",
            hint="Store the inventory file in a directory that is not under the repository.",
        )
