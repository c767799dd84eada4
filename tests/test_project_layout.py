from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/inventorize/__init__.py",
        "src/inventorize/cli.py",
        "src/inventorize/config.py",
        "src/inventorize/operations.py",
        "src/inventorize/inventory/__init__.py",
        "src/inventorize/logging/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
