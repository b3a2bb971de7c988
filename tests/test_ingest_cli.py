"""Tests for the ingest command line entry point."""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path
from types import ModuleType

import pytest
import redis
from sqlalchemy import func, select
from typer.testing import CliRunner

from conftest import FailingCache, make_replay_document
from db import create_db_engine, create_session_factory
from models import Demo

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "ingest_demos.py"


def _load_script() -> ModuleType:
    spec = importlib.util.spec_from_file_location("ingest_demos", SCRIPT_PATH)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _write_document(path: Path, document: dict) -> Path:
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_ingest_continues_when_snapshot_cache_is_down(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    module = _load_script()
    monkeypatch.setattr(redis.Redis, "from_url", lambda url, **kwargs: FailingCache())

    good = _write_document(tmp_path / "good.json", make_replay_document("cli-good"))
    oversized_id = make_replay_document("cli-bad")
    oversized_id["info"]["players"][0]["userId"] = 2**70
    bad = _write_document(tmp_path / "bad.json", oversized_id)
    db_path = tmp_path / "cli.db"

    result = CliRunner().invoke(module.app, [str(good), str(bad), "--db-url", f"sqlite:///{db_path}"])

    assert result.exit_code == 1, result.output
    assert "snapshot refresh failed" in result.output
    assert "processed file=good.json" in result.output
    assert "players=1 spectators=1 ais=1" in result.output
    assert "errored file=bad.json" in result.output
    assert "completed files=2 processed=1 errored=1" in result.output

    engine = create_db_engine(f"sqlite:///{db_path}")
    try:
        with create_session_factory(engine)() as session:
            assert session.scalar(select(func.count()).select_from(Demo)) == 1
            assert session.get(Demo, "cli-good") is not None
    finally:
        engine.dispose()
