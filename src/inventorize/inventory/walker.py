"""Deterministic repository traversal."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path, PurePosixPath

from inventorize.errors import InventoryIOError
from inventorize.inventory.models import RepositoryFile

HIDDEN_PREFIX = "."

logger = logging.getLogger(__name__)


def is_hidden(relative_path: str) -> bool:
    """Return True when any component of a repository-relative path is hidden."""
    return any(part.startswith(HIDDEN_PREFIX) for part in PurePosixPath(relative_path).parts)


def walk_repository(root: Path, include_hidden: bool) -> Iterator[RepositoryFile]:
    """Yield regular files under root, depth-first in lexicographic name order.

    Directories are descended into but never yielded. A symbolic link to a
    regular file is yielded under its own path with the target's size; a link
    to a directory is not descended into. When hidden entries are skipped,
    hidden directories are pruned as a whole. Any unreadable directory, entry
    or dangling link raises InventoryIOError.
    """
    resolved_root = root.resolve()
    stack: list[Iterator[os.DirEntry[str]]] = [iter(_sorted_entries(resolved_root))]
    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue
        full_path = Path(entry.path)
        relative = full_path.relative_to(resolved_root).as_posix()
        if not include_hidden and is_hidden(relative):
            logger.debug("Skipping hidden entry %s", relative)
            continue
        try:
            if entry.is_dir(follow_symlinks=False):
                stack.append(iter(_sorted_entries(full_path)))
                continue
            if entry.is_symlink() and entry.is_dir():
                logger.warning("Not following symlinked directory %s", relative)
                continue
            stat = entry.stat()
            if not entry.is_file():
                logger.warning("Skipping non-regular file %s", relative)
                continue
        except OSError as error:
            raise InventoryIOError(full_path, error.strerror or str(error)) from error
        yield RepositoryFile(path=relative, full_path=full_path, size=stat.st_size)


def _sorted_entries(directory: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as entries:
            return sorted(entries, key=lambda item: item.name)
    except OSError as error:
        raise InventoryIOError(directory, error.strerror or str(error)) from error
