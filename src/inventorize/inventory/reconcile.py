"""Build, verify and update reconciliation between the live tree and an inventory."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path

from inventorize import __version__
from inventorize.inventory.hashing import hash_file
from inventorize.inventory.models import (
    Inventory,
    InventoryOptions,
    InventoryRecord,
    RepositoryFile,
)
from inventorize.inventory.report import (
    ADDED,
    MODIFIED,
    REMOVED,
    SIZE_MISMATCH,
    UNCHANGED,
    DiffEntry,
    UpdateReport,
    VerifyReport,
)
from inventorize.inventory.walker import walk_repository

logger = logging.getLogger(__name__)

AlgorithmSelector = Callable[[RepositoryFile], tuple[str, ...]]


def build_inventory(root: Path, options: InventoryOptions, workers: int = 1) -> Inventory:
    """Walk and hash every file under root into a new inventory."""
    files = list(walk_repository(root, include_hidden=options.include_hidden))
    logger.info("Hashing %d files with %s", len(files), ", ".join(options.hash_algorithms))
    digests = hash_files(files, lambda _: options.hash_algorithms, workers=workers)
    records = [_new_record(file, digests[file.path]) for file in files]
    return Inventory.from_records(version=__version__, options=options, records=records)


def verify_inventory(
    root: Path, inventory: Inventory, quick: bool = False, workers: int = 1
) -> VerifyReport:
    """Classify every live and recorded path; never modifies the inventory."""
    live = _live_files(root, inventory)
    recorded = inventory.record_map()
    entries: list[DiffEntry] = []

    entries.extend(DiffEntry(path=path, kind=ADDED) for path in sorted(live.keys() - recorded))
    entries.extend(DiffEntry(path=path, kind=REMOVED) for path in sorted(recorded.keys() - live))

    to_hash: list[RepositoryFile] = []
    for path in sorted(live.keys() & recorded.keys()):
        logger.debug("Verifying file %s", path)
        file = live[path]
        record = recorded[path]
        # Hashes are not worth computing once sizes differ.
        if file.size != record.size:
            entries.append(DiffEntry(path=path, kind=SIZE_MISMATCH if quick else MODIFIED))
        elif quick:
            entries.append(DiffEntry(path=path, kind=UNCHANGED))
        else:
            to_hash.append(file)

    actual = hash_files(to_hash, lambda file: recorded[file.path].algorithms, workers=workers)
    for file in to_hash:
        expected = recorded[file.path].digest_map()
        kind = UNCHANGED if actual[file.path] == expected else MODIFIED
        entries.append(DiffEntry(path=file.path, kind=kind))

    entries.sort(key=lambda entry: entry.path)
    return VerifyReport(entries=tuple(entries), quick=quick)


def update_inventory(
    root: Path, inventory: Inventory, remove_missing: bool = False, workers: int = 1
) -> tuple[Inventory, UpdateReport]:
    """Add records for new files and optionally drop records of missing ones.

    Retained records are carried over untouched; their digests are never
    recomputed, even when the file content has changed.
    """
    live = _live_files(root, inventory)
    recorded = inventory.record_map()

    new_files = [live[path] for path in sorted(live.keys() - recorded)]
    missing = tuple(sorted(recorded.keys() - live))
    algorithms = inventory.options.hash_algorithms
    digests = hash_files(new_files, lambda _: algorithms, workers=workers)

    kept = [record for record in inventory.records if record.path in live or not remove_missing]
    added = [_new_record(file, digests[file.path]) for file in new_files]
    updated = Inventory.from_records(
        version=inventory.version,
        options=inventory.options,
        records=[*kept, *added],
    )
    report = UpdateReport(
        added=tuple(file.path for file in new_files),
        removed=missing if remove_missing else (),
        retained_missing=() if remove_missing else missing,
        unchanged=len(recorded) - len(missing),
    )
    return updated, report


def hash_files(
    files: Iterable[RepositoryFile],
    select_algorithms: AlgorithmSelector,
    workers: int = 1,
) -> dict[str, dict[str, str]]:
    """Hash files on a bounded thread pool, keyed by relative path.

    Results are merged in the calling thread. The first failure cancels all
    pending work and propagates.
    """
    pending = list(files)
    if workers <= 1 or len(pending) <= 1:
        output: dict[str, dict[str, str]] = {}
        for file in pending:
            logger.debug("Hashing file %s", file.path)
            output[file.path] = hash_file(file.full_path, select_algorithms(file))
        return output

    results: dict[str, dict[str, str]] = {}
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures: dict[Future[dict[str, str]], RepositoryFile] = {
            executor.submit(hash_file, file.full_path, select_algorithms(file)): file
            for file in pending
        }
        try:
            for future in as_completed(futures):
                file = futures[future]
                results[file.path] = future.result()
                logger.debug("Hashed file %s", file.path)
        except BaseException:
            for future in futures:
                future.cancel()
            raise
    return results


def _live_files(root: Path, inventory: Inventory) -> dict[str, RepositoryFile]:
    include_hidden = inventory.options.include_hidden
    return {file.path: file for file in walk_repository(root, include_hidden=include_hidden)}


def _new_record(file: RepositoryFile, digests: dict[str, str]) -> InventoryRecord:
    logger.debug("Adding file %s", file.path)
    return InventoryRecord.create(path=file.path, size=file.size, digests=digests)
