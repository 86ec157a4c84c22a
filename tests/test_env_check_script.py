"""Tests for the environment drift detection script."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from scripts import check_env

ISOLATED_ENV_KEYS = [
    "STORAGE_BACKEND",
    "STORAGE_SQLITE_PATH",
    "DYNAMODB_TABLE_NAME",
    "OAUTH_SIGNING_SECRET",
    "OAUTH_ACCESS_TOKEN_TTL_SECONDS",
]


def _write_env(env_path: Path, **values: str) -> None:
    contents = "\n".join(f"{key}={value}" for key, value in values.items())
    env_path.write_text(contents + "\n", encoding="utf-8")


@pytest.fixture()
def isolated_env(monkeypatch: pytest.MonkeyPatch):
    """Let the script's .env loader populate keys, then drop whatever it added."""
    for key in ISOLATED_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
    for key in ISOLATED_ENV_KEYS:
        os.environ.pop(key, None)


@pytest.mark.parametrize("command", ["record", "verify", "check"])
def test_main_requires_existing_env_file(tmp_path: Path, command: str) -> None:
    env_file = tmp_path / ".missing-env"
    hash_file = tmp_path / ".env.sha256"

    argv = [command, "--env-file", str(env_file)]
    if command != "check":
        argv.extend(["--hash-file", str(hash_file)])

    exit_code = check_env.main(argv)
    assert exit_code == check_env.EXIT_RUNTIME_ERROR


def test_record_and_verify_detects_mismatched_checksum(
    tmp_path: Path, isolated_env
) -> None:
    env_file = tmp_path / ".env"
    hash_file = tmp_path / ".env.sha256"

    _write_env(
        env_file,
        STORAGE_BACKEND="dynamodb",
        DYNAMODB_TABLE_NAME="glyph-accounts",
        OAUTH_SIGNING_SECRET="first-secret",
    )

    exit_code = check_env.main(
        [
            "record",
            "--env-file",
            str(env_file),
            "--hash-file",
            str(hash_file),
        ]
    )
    assert exit_code == check_env.EXIT_OK
    baseline = hash_file.read_text(encoding="utf-8").strip()
    assert baseline

    exit_code = check_env.main(
        [
            "verify",
            "--env-file",
            str(env_file),
            "--hash-file",
            str(hash_file),
        ]
    )
    assert exit_code == check_env.EXIT_OK

    _write_env(
        env_file,
        STORAGE_BACKEND="dynamodb",
        DYNAMODB_TABLE_NAME="glyph-accounts",
        OAUTH_SIGNING_SECRET="rotated-secret",
    )

    exit_code = check_env.main(
        [
            "verify",
            "--env-file",
            str(env_file),
            "--hash-file",
            str(hash_file),
        ]
    )
    assert exit_code == check_env.EXIT_CHECKSUM_ERROR


def test_verify_without_baseline_is_runtime_error(tmp_path: Path, isolated_env) -> None:
    env_file = tmp_path / ".env"
    _write_env(env_file, OAUTH_SIGNING_SECRET="secret")

    exit_code = check_env.main(
        ["verify", "--env-file", str(env_file), "--hash-file", str(tmp_path / "absent")]
    )
    assert exit_code == check_env.EXIT_RUNTIME_ERROR


def test_dynamodb_backend_requires_table_name(tmp_path: Path, isolated_env) -> None:
    env_file = tmp_path / ".env"
    hash_file = tmp_path / ".env.sha256"

    _write_env(env_file, STORAGE_BACKEND="dynamodb", OAUTH_SIGNING_SECRET="secret")

    exit_code = check_env.main(
        [
            "record",
            "--env-file",
            str(env_file),
            "--hash-file",
            str(hash_file),
        ]
    )
    assert exit_code == check_env.EXIT_VALIDATION_ERROR
    assert not hash_file.exists()


def test_non_numeric_lifetime_is_rejected(tmp_path: Path, isolated_env) -> None:
    env_file = tmp_path / ".env"
    _write_env(env_file, OAUTH_ACCESS_TOKEN_TTL_SECONDS="two-hours")

    assert check_env.main(["check", "--env-file", str(env_file)]) == (
        check_env.EXIT_VALIDATION_ERROR
    )


def test_check_warns_without_signing_secret(
    tmp_path: Path, isolated_env, capsys: pytest.CaptureFixture[str]
) -> None:
    env_file = tmp_path / ".env"
    _write_env(env_file, STORAGE_BACKEND="sqlite")

    assert check_env.main(["check", "--env-file", str(env_file)]) == check_env.EXIT_OK

    captured = capsys.readouterr()
    assert "Storage backend: sqlite" in captured.out
    assert "OAUTH_SIGNING_SECRET is not set" in captured.err
