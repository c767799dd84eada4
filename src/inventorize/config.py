"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from inventorize.inventory.hashing import DEFAULT_HASH_ALGORITHMS, normalize_hash_algorithms
from inventorize.paths import (
    canonicalize_inventory_path,
    ensure_outside_repository,
    resolve_repository,
)

MAX_WORKERS_CAP = 256


@dataclass(slots=True, frozen=True)
class Settings:
    """File-configurable defaults, fully merged."""

    hash_algorithms: tuple[str, ...]
    skip_hidden: bool
    workers: int
    audit_log: Path | None


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line overrides applied at highest precedence."""

    hash_algorithms: tuple[str, ...] | None = None
    skip_hidden: bool | None = None
    workers: int | None = None
    audit_log: Path | None = None


@dataclass(slots=True, frozen=True)
class RunConfig:
    """Resolved locations and runtime knobs shared by every operation."""

    repo_root: Path
    inventory_path: Path
    verbosity: int = 0
    workers: int = 1
    audit_log: Path | None = None


@dataclass(slots=True, frozen=True)
class BuildConfig:
    """Options of the build operation."""

    overwrite: bool = False
    skip_hidden: bool = False
    hash_algorithms: tuple[str, ...] = DEFAULT_HASH_ALGORITHMS


@dataclass(slots=True, frozen=True)
class VerifyConfig:
    """Options of the verify operation."""

    quick: bool = False


@dataclass(slots=True, frozen=True)
class UpdateConfig:
    """Options of the update operation."""

    remove_missing: bool = False


def default_workers() -> int:
    """Size the hashing pool to the available parallelism."""
    return min(os.cpu_count() or 1, MAX_WORKERS_CAP)


def default_settings() -> Settings:
    return Settings(
        hash_algorithms=DEFAULT_HASH_ALGORITHMS,
        skip_hidden=False,
        workers=default_workers(),
        audit_log=None,
    )


def load_config_file(config_path: Path) -> dict[str, object]:
    """Load a TOML config file; the file must exist."""
    if not config_path.is_file():
        raise ValueError(f"Config file not found: {str(config_path)!r}")
    with config_path.open("rb") as handle:
        try:
            payload = tomllib.load(handle)
        except tomllib.TOMLDecodeError as error:
            raise ValueError(f"Config file is not valid TOML: {error}") from error
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _hash_algorithms(value: object, name: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"Config field '{name}' must be a list of strings.")
    try:
        return normalize_hash_algorithms(value)
    except ValueError as error:
        raise ValueError(f"Config field '{name}': {error}") from error


def merge_settings(
    base: Settings,
    payload: dict[str, object],
    overrides: CliOverrides,
    config_dir: Path | None = None,
) -> Settings:
    """Merge defaults, config file, then CLI overrides."""
    build_payload = _get_table(payload, "build")
    run_payload = _get_table(payload, "run")

    hash_algorithms = base.hash_algorithms
    if "hash_algorithms" in build_payload:
        hash_algorithms = _hash_algorithms(
            build_payload["hash_algorithms"], "build.hash_algorithms"
        )

    skip_hidden = base.skip_hidden
    if "skip_hidden" in build_payload:
        raw_skip_hidden = build_payload["skip_hidden"]
        if not isinstance(raw_skip_hidden, bool):
            raise ValueError("Config field 'build.skip_hidden' must be a boolean.")
        skip_hidden = raw_skip_hidden

    workers = _optional_positive_int_with_cap(
        run_payload.get("workers"), "run.workers", base.workers, MAX_WORKERS_CAP
    )

    audit_log = base.audit_log
    if "audit_log" in run_payload:
        raw_audit_log = run_payload["audit_log"]
        if not isinstance(raw_audit_log, str) or not raw_audit_log:
            raise ValueError("Config field 'run.audit_log' must be a non-empty string.")
        audit_log = Path(raw_audit_log)
        if config_dir is not None and not audit_log.is_absolute():
            audit_log = config_dir / audit_log

    merged = Settings(
        hash_algorithms=hash_algorithms,
        skip_hidden=skip_hidden,
        workers=workers,
        audit_log=audit_log,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(settings: Settings, overrides: CliOverrides) -> Settings:
    """Apply command-line overrides at highest precedence."""
    hash_algorithms = settings.hash_algorithms
    if overrides.hash_algorithms is not None:
        hash_algorithms = normalize_hash_algorithms(overrides.hash_algorithms)
    workers = _optional_positive_int_with_cap(
        overrides.workers, "overrides.workers", settings.workers, MAX_WORKERS_CAP
    )
    audit_log = overrides.audit_log or settings.audit_log
    return Settings(
        hash_algorithms=hash_algorithms,
        skip_hidden=(
            overrides.skip_hidden if overrides.skip_hidden is not None else settings.skip_hidden
        ),
        workers=workers,
        audit_log=audit_log.resolve() if audit_log is not None else None,
    )


def load_effective_settings(
    config_path: Path | None = None, overrides: CliOverrides | None = None
) -> Settings:
    """Load settings using merge order defaults -> config file -> overrides."""
    payload: dict[str, object] = {}
    config_dir: Path | None = None
    if config_path is not None:
        payload = load_config_file(config_path)
        config_dir = config_path.resolve().parent
    return merge_settings(default_settings(), payload, overrides or CliOverrides(), config_dir)


def make_run_config(
    repository: Path,
    inventory: Path,
    settings: Settings,
    verbosity: int = 0,
) -> RunConfig:
    """Resolve locations and enforce that the inventory is outside the repository."""
    repo_root = resolve_repository(repository)
    inventory_path = canonicalize_inventory_path(inventory)
    ensure_outside_repository(repo_root, inventory_path)
    return RunConfig(
        repo_root=repo_root,
        inventory_path=inventory_path,
        verbosity=verbosity,
        workers=settings.workers,
        audit_log=settings.audit_log,
    )


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
