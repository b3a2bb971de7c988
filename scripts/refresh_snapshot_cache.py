#!/usr/bin/env python3
"""Refresh the users/maps snapshot cache from the demo database."""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Annotated

import redis
import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import create_db_engine, create_session_factory
from domain.config import resolve_ingest_config
from domain.snapshot import SnapshotCache
from logging_config import configure_logging

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Snapshot cache jobs.",
)


@app.command("refresh")
def refresh_snapshot_cache(
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="TOML config file (see config/default.toml)."),
    ] = None,
    db_url: Annotated[
        str | None,
        typer.Option("--db-url", help="Override [storage].db_url."),
    ] = None,
    redis_url: Annotated[
        str | None,
        typer.Option("--redis-url", help="Override [cache].redis_url."),
    ] = None,
    interval_seconds: Annotated[
        float,
        typer.Option(
            "--interval-seconds",
            help="Repeat the refresh on this interval. Use 0 to run once.",
        ),
    ] = 0.0,
) -> None:
    """Write the users and maps snapshots to the cache."""
    if interval_seconds < 0:
        raise typer.BadParameter("--interval-seconds must be >= 0")

    config = resolve_ingest_config(config_file, db_url=db_url, redis_url=redis_url)
    configure_logging(config.verbose)

    engine = create_db_engine(config.db_url)
    session_factory = create_session_factory(engine)
    snapshot_cache = SnapshotCache(
        session_factory=session_factory,
        cache=redis.Redis.from_url(config.redis_url),
    )

    if interval_seconds == 0:
        users = snapshot_cache.save_users()
        maps = snapshot_cache.save_maps()
        typer.echo(f"refreshed users={users} maps={maps}")
        return

    while True:
        if snapshot_cache.try_refresh():
            typer.echo("refreshed")
        else:
            typer.echo(f"refresh failed, retrying in {interval_seconds}s")
        time.sleep(interval_seconds)


if __name__ == "__main__":
    app()
