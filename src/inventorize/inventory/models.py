"""Typed models for inventory state."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True, frozen=True)
class InventoryOptions:
    """Build-time settings that produced the stored digests."""

    hash_algorithms: tuple[str, ...]
    include_hidden: bool


@dataclass(slots=True, frozen=True)
class InventoryRecord:
    """Represents a file tracked by the inventory.

    Digests are stored as a sorted tuple of (algorithm, hex) pairs so that a
    record can never be edited in place once created.
    """

    path: str
    size: int
    digests: tuple[tuple[str, str], ...]

    @classmethod
    def create(cls, path: str, size: int, digests: Mapping[str, str]) -> InventoryRecord:
        return cls(path=path, size=size, digests=tuple(sorted(digests.items())))

    @property
    def algorithms(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.digests)

    def digest_map(self) -> dict[str, str]:
        return dict(self.digests)


@dataclass(slots=True, frozen=True)
class Inventory:
    """The full persisted inventory, replaced wholesale by each write."""

    version: str
    options: InventoryOptions
    records: tuple[InventoryRecord, ...] = field(default=())

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.records, key=lambda item: item.path))
        for previous, current in zip(ordered, ordered[1:]):
            if previous.path == current.path:
                raise ValueError(f"Duplicate inventory path: {current.path}")
        object.__setattr__(self, "records", ordered)

    @classmethod
    def from_records(
        cls, version: str, options: InventoryOptions, records: Iterable[InventoryRecord]
    ) -> Inventory:
        return cls(version=version, options=options, records=tuple(records))

    def record_map(self) -> dict[str, InventoryRecord]:
        """Map records by relative path."""
        return {record.path: record for record in self.records}

    def paths(self) -> tuple[str, ...]:
        return tuple(record.path for record in self.records)


@dataclass(slots=True, frozen=True)
class RepositoryFile:
    """A regular file discovered under the repository root."""

    path: str
    full_path: Path
    size: int
