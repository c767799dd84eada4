"""Operation entry points: inventory file I/O around build, verify and update."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from inventorize.config import BuildConfig, RunConfig, UpdateConfig, VerifyConfig
from inventorize.errors import ConflictError, IntegrityError, InventorizeError, InventoryIOError
from inventorize.inventory.hashing import normalize_hash_algorithms
from inventorize.inventory.models import Inventory, InventoryOptions
from inventorize.inventory.reconcile import build_inventory, update_inventory, verify_inventory
from inventorize.inventory.report import BuildReport, Report
from inventorize.inventory.store import decode_inventory, encode_inventory
from inventorize.logging import AuditEvent, JsonlAuditLogger, utc_timestamp

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class OperationResult:
    """Verdict plus structured report of one operation."""

    operation: str
    report: Report
    error: IntegrityError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.report.ok

    def raise_for_status(self) -> None:
        if self.error is not None:
            raise self.error

    def to_dict(self) -> dict[str, object]:
        payload = self.report.to_dict()
        payload["ok"] = self.ok
        payload["error_code"] = self.error.code if self.error is not None else None
        return payload


class InventoryFile:
    """Reads and atomically replaces one inventory file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> Inventory:
        try:
            data = self._path.read_bytes()
        except OSError as error:
            raise InventoryIOError(self._path, error.strerror or str(error)) from error
        return decode_inventory(data)

    def save(self, inventory: Inventory) -> None:
        """Write to a sibling temporary file, then replace the destination."""
        data = encode_inventory(inventory)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            with tmp.open("wb") as handle:
                handle.write(data)
            tmp.replace(self._path)
        except OSError as error:
            tmp.unlink(missing_ok=True)
            raise InventoryIOError(self._path, error.strerror or str(error)) from error
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise


def run_build(run: RunConfig, build: BuildConfig) -> OperationResult:
    """Build a new inventory for the repository and persist it."""
    return _run_audited(run, "build", lambda: _build(run, build))


def run_verify(run: RunConfig, verify: VerifyConfig) -> OperationResult:
    """Verify the repository against the stored inventory; never writes."""
    return _run_audited(run, "verify", lambda: _verify(run, verify))


def run_update(run: RunConfig, update: UpdateConfig) -> OperationResult:
    """Add new files to and optionally drop missing files from the inventory."""
    return _run_audited(run, "update", lambda: _update(run, update))


def _build(run: RunConfig, build: BuildConfig) -> OperationResult:
    inventory_file = InventoryFile(run.inventory_path)
    # Hashing can take a while, so refuse to clobber before doing any of it.
    if inventory_file.exists() and not build.overwrite:
        raise ConflictError(run.inventory_path)
    options = InventoryOptions(
        hash_algorithms=normalize_hash_algorithms(build.hash_algorithms),
        include_hidden=not build.skip_hidden,
    )
    inventory = build_inventory(run.repo_root, options, workers=run.workers)
    inventory_file.save(inventory)
    logger.info("Inventory built successfully.")
    return OperationResult(operation="build", report=BuildReport(paths=inventory.paths()))


def _verify(run: RunConfig, verify: VerifyConfig) -> OperationResult:
    inventory = InventoryFile(run.inventory_path).load()
    report = verify_inventory(run.repo_root, inventory, quick=verify.quick, workers=run.workers)
    if report.ok:
        logger.info("No issues found.")
        return OperationResult(operation="verify", report=report)
    for entry in report.failures():
        logger.error("Discrepancy %s: %s", entry.kind, entry.path)
    return OperationResult(operation="verify", report=report, error=IntegrityError(report))


def _update(run: RunConfig, update: UpdateConfig) -> OperationResult:
    inventory_file = InventoryFile(run.inventory_path)
    inventory = inventory_file.load()
    updated, report = update_inventory(
        run.repo_root, inventory, remove_missing=update.remove_missing, workers=run.workers
    )
    inventory_file.save(updated)
    logger.info("Inventory updated successfully.")
    return OperationResult(operation="update", report=report)


def _run_audited(
    run: RunConfig, operation: str, action: Callable[[], OperationResult]
) -> OperationResult:
    try:
        result = action()
    except InventorizeError as error:
        try:
            _audit(run, operation, ok=False, error_code=error.code, counts={})
        except InventoryIOError as audit_error:
            logger.error("Could not record failed %s in audit log: %s", operation, audit_error)
            error.add_note(f"audit log not written: {audit_error}")
        raise
    error_code = result.error.code if result.error is not None else None
    _audit(run, operation, ok=result.ok, error_code=error_code, counts=result.report.counts())
    return result


def _audit(
    run: RunConfig,
    operation: str,
    ok: bool,
    error_code: str | None,
    counts: dict[str, int],
) -> None:
    if run.audit_log is None:
        return
    JsonlAuditLogger(run.audit_log).append(
        AuditEvent(
            timestamp=utc_timestamp(),
            operation=operation,
            ok=ok,
            error_code=error_code,
            metadata={
                "repository": str(run.repo_root),
                "inventory": str(run.inventory_path),
                "counts": counts,
            },
        )
    )
