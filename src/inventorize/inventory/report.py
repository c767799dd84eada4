"""Per-operation reports, summaries and verdicts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

UNCHANGED = "unchanged"
ADDED = "added"
REMOVED = "removed"
MODIFIED = "modified"
SIZE_MISMATCH = "size_mismatch"

# Fixed order used for counts and listings.
DIFF_KINDS = (ADDED, REMOVED, MODIFIED, SIZE_MISMATCH, UNCHANGED)
FAILURE_KINDS = (ADDED, REMOVED, MODIFIED, SIZE_MISMATCH)

_KIND_LABELS = {
    ADDED: "added",
    REMOVED: "removed",
    MODIFIED: "modified",
    SIZE_MISMATCH: "size mismatch",
    UNCHANGED: "unchanged",
}


@dataclass(slots=True, frozen=True)
class DiffEntry:
    """Classification of one path during verification."""

    path: str
    kind: str


@dataclass(slots=True, frozen=True)
class VerifyReport:
    """Outcome of reconciling the live tree against an inventory."""

    operation: ClassVar[str] = "verify"

    entries: tuple[DiffEntry, ...]
    quick: bool

    @property
    def ok(self) -> bool:
        return all(entry.kind == UNCHANGED for entry in self.entries)

    def counts(self) -> dict[str, int]:
        output = {kind: 0 for kind in DIFF_KINDS}
        for entry in self.entries:
            output[entry.kind] += 1
        return output

    def paths(self, kind: str) -> tuple[str, ...]:
        return tuple(sorted(entry.path for entry in self.entries if entry.kind == kind))

    def failures(self) -> tuple[DiffEntry, ...]:
        return tuple(entry for entry in self.entries if entry.kind != UNCHANGED)

    def to_dict(self) -> dict[str, object]:
        return {
            "operation": self.operation,
            "ok": self.ok,
            "quick": self.quick,
            "counts": self.counts(),
            "failures": {kind: list(self.paths(kind)) for kind in FAILURE_KINDS},
        }


@dataclass(slots=True, frozen=True)
class BuildReport:
    """Outcome of building a new inventory."""

    operation: ClassVar[str] = "build"

    paths: tuple[str, ...]

    @property
    def ok(self) -> bool:
        return True

    def counts(self) -> dict[str, int]:
        return {"records": len(self.paths)}

    def to_dict(self) -> dict[str, object]:
        return {"operation": self.operation, "ok": self.ok, "counts": self.counts()}


@dataclass(slots=True, frozen=True)
class UpdateReport:
    """Record-set delta applied by an update."""

    operation: ClassVar[str] = "update"

    added: tuple[str, ...]
    removed: tuple[str, ...]
    retained_missing: tuple[str, ...]
    unchanged: int

    @property
    def ok(self) -> bool:
        return True

    def counts(self) -> dict[str, int]:
        return {
            "added": len(self.added),
            "removed": len(self.removed),
            "retained_missing": len(self.retained_missing),
            "unchanged": self.unchanged,
        }

    def to_dict(self) -> dict[str, object]:
        return {
            "operation": self.operation,
            "ok": self.ok,
            "counts": self.counts(),
            "added": list(self.added),
            "removed": list(self.removed),
            "retained_missing": list(self.retained_missing),
        }


Report = VerifyReport | BuildReport | UpdateReport


def summary_lines(report: Report, verbose: bool = False) -> list[str]:
    """Render a human-readable summary.

    Verification discrepancies are always listed; verbose mode also lists
    unchanged files and the paths touched by build and update.
    """
    if isinstance(report, VerifyReport):
        return _verify_lines(report, verbose)
    if isinstance(report, UpdateReport):
        return _update_lines(report, verbose)
    lines = [f"Inventory built: {len(report.paths)} records."]
    if verbose:
        lines.extend(f"recorded: {path}" for path in report.paths)
    return lines


def _verify_lines(report: VerifyReport, verbose: bool) -> list[str]:
    counts = report.counts()
    mode = "quick" if report.quick else "full"
    detail = ", ".join(f"{counts[kind]} {_KIND_LABELS[kind]}" for kind in DIFF_KINDS)
    lines = [f"Verified {len(report.entries)} files ({mode}): {detail}."]
    kinds = DIFF_KINDS if verbose else FAILURE_KINDS
    for kind in kinds:
        lines.extend(f"{_KIND_LABELS[kind]}: {path}" for path in report.paths(kind))
    lines.append("No issues found." if report.ok else "Verification failed.")
    return lines


def _update_lines(report: UpdateReport, verbose: bool) -> list[str]:
    counts = report.counts()
    lines = [
        "Inventory updated: "
        f"{counts['added']} added, {counts['removed']} removed, "
        f"{counts['retained_missing']} missing but retained, {counts['unchanged']} unchanged."
    ]
    if verbose:
        lines.extend(f"added: {path}" for path in report.added)
        lines.extend(f"removed: {path}" for path in report.removed)
        lines.extend(f"retained missing: {path}" for path in report.retained_missing)
    return lines
