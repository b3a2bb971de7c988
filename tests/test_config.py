"""Tests for TOML-based ingest config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.config import (
    DEFAULT_DB_URL,
    DEFAULT_REDIS_URL,
    IngestConfig,
    load_ingest_config,
    resolve_ingest_config,
)


def test_load_ingest_config_from_file(tmp_path: Path) -> None:
    config_path = tmp_path / "ingest.toml"
    config_path.write_text(
        """
[ingest]
max_file_size_mb = 5
snapshot_on_start = false
verbose = true

[storage]
db_url = "sqlite:///demos.db"

[cache]
redis_url = "redis://cache:6379/2"
""".strip()
    )

    config = load_ingest_config(config_path)

    assert config.max_file_size_bytes == 5 * 1_048_576
    assert config.snapshot_on_start is False
    assert config.verbose is True
    assert config.db_url == "sqlite:///demos.db"
    assert config.redis_url == "redis://cache:6379/2"


def test_missing_keys_use_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "empty.toml"
    config_path.write_text("")

    assert load_ingest_config(config_path) == IngestConfig()


def test_defaults() -> None:
    config = IngestConfig()
    assert config.max_file_size_bytes == 20 * 1_048_576
    assert config.db_url == DEFAULT_DB_URL
    assert config.redis_url == DEFAULT_REDIS_URL
    assert config.snapshot_on_start is True
    assert config.verbose is False


def test_non_positive_max_size_raises(tmp_path: Path) -> None:
    config_path = tmp_path / "bad.toml"
    config_path.write_text("[ingest]\nmax_file_size_mb = 0\n")

    with pytest.raises(ValueError, match=r"\[ingest\]\.max_file_size_mb"):
        load_ingest_config(config_path)


def test_non_boolean_flag_raises(tmp_path: Path) -> None:
    config_path = tmp_path / "bad.toml"
    config_path.write_text('[ingest]\nverbose = "yes"\n')

    with pytest.raises(ValueError, match=r"\[ingest\]\.verbose"):
        load_ingest_config(config_path)


def test_empty_db_url_raises(tmp_path: Path) -> None:
    config_path = tmp_path / "bad.toml"
    config_path.write_text('[storage]\ndb_url = "  "\n')

    with pytest.raises(ValueError, match=r"\[storage\]\.db_url"):
        load_ingest_config(config_path)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_ingest_config(tmp_path / "absent.toml")


def test_resolve_applies_overrides_on_defaults() -> None:
    config = resolve_ingest_config(None, db_url="sqlite://", redis_url=None)
    assert config.db_url == "sqlite://"
    assert config.redis_url == DEFAULT_REDIS_URL
