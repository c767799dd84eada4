"""Typed error taxonomy surfaced to the CLI layer."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from inventorize.inventory.report import VerifyReport


class InventorizeError(Exception):
    """Base class for every error raised by inventory operations."""

    code = "INVENTORIZE_ERROR"


class InventoryIOError(InventorizeError):
    """Raised when a file or directory cannot be read or written."""

    code = "IO_ERROR"

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"File I/O error: {str(path)!r}: {reason}")
        self.path = Path(path)
        self.reason = reason


class FormatError(InventorizeError):
    """Raised when inventory bytes fail decoding or structural validation."""

    code = "FORMAT_ERROR"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid inventory: {reason}")
        self.reason = reason


class ConflictError(InventorizeError):
    """Raised when build would replace an existing inventory without overwrite."""

    code = "INVENTORY_EXISTS"

    def __init__(self, path: Path) -> None:
        super().__init__(f"Inventory file exists: {str(path)!r}")
        self.path = path


class IntegrityError(InventorizeError):
    """Verification found one or more discrepancies."""

    code = "VERIFICATION_FAILED"

    def __init__(self, report: VerifyReport) -> None:
        failures = report.failures()
        super().__init__(f"Verification failed: {len(failures)} discrepancies")
        self.report = report


class InventoryLocationError(InventorizeError):
    """Raised when the inventory path is unusable for the given repository."""

    code = "INVALID_INVENTORY_PATH"

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint
