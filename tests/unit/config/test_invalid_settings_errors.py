from __future__ import annotations

from pathlib import Path

import pytest

from inventorize.config import CliOverrides, load_effective_settings


@pytest.mark.parametrize(
    ("lines", "message"),
    [
        (['build = "not-a-table"'], "section 'build'"),
        (["[build]", 'hash_algorithms = "md5"'], "build.hash_algorithms"),
        (["[build]", 'hash_algorithms = ["sha256"]'], "build.hash_algorithms"),
        (["[build]", "hash_algorithms = []"], "build.hash_algorithms"),
        (["[build]", 'skip_hidden = "yes"'], "build.skip_hidden"),
        (["[run]", "workers = 0"], "run.workers"),
        (["[run]", "workers = 100000"], "run.workers"),
        (["[run]", "audit_log = 5"], "run.audit_log"),
    ],
)
def test_invalid_config_raises_value_error(tmp_path: Path, lines: list[str], message: str) -> None:
    config_path = tmp_path / "inventorize.toml"
    config_path.write_text("\n".join(lines), encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        load_effective_settings(config_path=config_path)


def test_missing_config_file_raises_value_error(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Config file not found"):
        load_effective_settings(config_path=tmp_path / "absent.toml")


def test_malformed_toml_raises_value_error(tmp_path: Path) -> None:
    config_path = tmp_path / "inventorize.toml"
    config_path.write_text("[build\n", encoding="utf-8")

    with pytest.raises(ValueError, match="not valid TOML"):
        load_effective_settings(config_path=config_path)


def test_non_positive_worker_override_raises_value_error() -> None:
    with pytest.raises(ValueError, match="overrides.workers"):
        load_effective_settings(overrides=CliOverrides(workers=-2))
