#!/usr/bin/env python3
"""Ingest decoded replay dumps into the demo graph, one file at a time."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import redis
import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import create_db_engine, create_session_factory, ensure_demo_schema
from domain.config import resolve_ingest_config
from domain.errors import DemoIngestError
from domain.ingestor import DemoIngestor
from domain.parser import JsonReplayParser
from domain.snapshot import SnapshotCache
from logging_config import configure_logging

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Replay ingest jobs.",
)


def _expand_paths(paths: list[Path], pattern: str) -> list[Path]:
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(candidate for candidate in path.glob(pattern) if candidate.is_file()))
        else:
            files.append(path)
    return files


@app.command("ingest")
def ingest_demos(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Replay dump files or directories containing them."),
    ],
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
    pattern: Annotated[
        str,
        typer.Option("--pattern", help="Glob used when a path is a directory."),
    ] = "*.json",
    skip_snapshot: Annotated[
        bool,
        typer.Option("--skip-snapshot", help="Do not refresh the snapshot cache before ingesting."),
    ] = False,
) -> None:
    """Ingest every given replay and report processed/errored per file."""
    config = resolve_ingest_config(config_file, db_url=db_url, redis_url=redis_url)
    configure_logging(config.verbose)

    files = _expand_paths(paths, pattern)
    if not files:
        raise typer.BadParameter("No replay files found", param_hint="paths")

    engine = create_db_engine(config.db_url)
    ensure_demo_schema(engine)
    session_factory = create_session_factory(engine)

    if config.snapshot_on_start and not skip_snapshot:
        cache = redis.Redis.from_url(config.redis_url)
        if not SnapshotCache(session_factory=session_factory, cache=cache).try_refresh():
            typer.echo("snapshot refresh failed, continuing with ingest")

    ingestor = DemoIngestor(
        parser=JsonReplayParser(),
        session_factory=session_factory,
        config=config,
    )

    errored = 0
    for index, file_path in enumerate(files, start=1):
        try:
            summary = ingestor.ingest(file_path)
        except DemoIngestError as exc:
            errored += 1
            typer.echo(f"[{index}/{len(files)}] errored file={file_path.name} error={exc}")
            continue
        typer.echo(
            f"[{index}/{len(files)}] processed file={file_path.name} "
            f"game_id={summary.game_id} preset={summary.preset} replaced={summary.replaced} "
            f"ally_teams={summary.ally_teams} players={summary.players} "
            f"spectators={summary.spectators} ais={summary.ais}"
        )

    typer.echo(f"completed files={len(files)} processed={len(files) - errored} errored={errored}")
    if errored:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
