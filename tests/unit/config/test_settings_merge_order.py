from __future__ import annotations

from pathlib import Path

from inventorize.config import (
    CliOverrides,
    default_settings,
    default_workers,
    load_effective_settings,
    merge_settings,
)


def _write_config(path: Path) -> Path:
    path.write_text(
        "\n".join(
            [
                "[build]",
                'hash_algorithms = ["sha1", "md5"]',
                "skip_hidden = true",
                "",
                "[run]",
                "workers = 3",
                'audit_log = "logs/audit.jsonl"',
            ]
        ),
        encoding="utf-8",
    )
    return path


def test_defaults_without_config_file() -> None:
    settings = load_effective_settings()

    assert settings.hash_algorithms == ("md5",)
    assert settings.skip_hidden is False
    assert settings.workers == default_workers()
    assert settings.audit_log is None


def test_config_file_overrides_defaults(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "inventorize.toml")

    settings = load_effective_settings(config_path=config_path)

    assert settings.hash_algorithms == ("md5", "sha1")
    assert settings.skip_hidden is True
    assert settings.workers == 3
    assert settings.audit_log == (tmp_path / "logs" / "audit.jsonl").resolve()


def test_cli_overrides_take_precedence(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "inventorize.toml")
    overrides = CliOverrides(
        hash_algorithms=("md5",),
        workers=1,
        audit_log=tmp_path / "cli.jsonl",
    )

    settings = load_effective_settings(config_path=config_path, overrides=overrides)

    assert settings.hash_algorithms == ("md5",)
    assert settings.skip_hidden is True
    assert settings.workers == 1
    assert settings.audit_log == (tmp_path / "cli.jsonl").resolve()


def test_empty_payload_keeps_base_settings() -> None:
    base = default_settings()

    assert merge_settings(base, {}, CliOverrides()) == base
