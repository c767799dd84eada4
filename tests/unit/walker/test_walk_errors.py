from __future__ import annotations

import os
from pathlib import Path

import pytest

from inventorize.errors import InventoryIOError
from inventorize.inventory import walk_repository, walker


def test_missing_root_raises_inventory_io_error(tmp_path: Path) -> None:
    missing = tmp_path / "nope"

    with pytest.raises(InventoryIOError) as excinfo:
        list(walk_repository(missing, include_hidden=True))

    assert excinfo.value.path == missing.resolve()


def test_unreadable_subdirectory_aborts_walk(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "locked").mkdir()
    (tmp_path / "locked" / "inner.txt").write_text("x", encoding="utf-8")
    (tmp_path / "ok.txt").write_text("x", encoding="utf-8")
    real_scandir = os.scandir
    locked = (tmp_path / "locked").resolve()

    def fake_scandir(path):  # type: ignore[no-untyped-def]
        if Path(path) == locked:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(walker.os, "scandir", fake_scandir)

    with pytest.raises(InventoryIOError, match="Permission denied") as excinfo:
        list(walk_repository(tmp_path, include_hidden=True))

    assert excinfo.value.path == locked
