"""Shared fixtures: a throwaway SQLite demo database, stub parser and cache."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db import create_db_engine, create_session_factory, ensure_demo_schema
from domain.replay import AIRecord, AllyTeamRecord, DemoRecord, MetaRecord, ParticipantRecord


class StubReplayParser:
    """Returns prebuilt records keyed by file name and remembers every call."""

    def __init__(self, records: dict[str, DemoRecord] | None = None) -> None:
        self.records = dict(records or {})
        self.calls: list[Path] = []

    def parse_file(self, file_path: Path) -> DemoRecord:
        self.calls.append(file_path)
        return self.records[file_path.name]


class InMemoryCache:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.writes: list[str] = []

    def set(self, name: str, value: str) -> bool:
        self.values[name] = value
        self.writes.append(name)
        return True


class FailingCache:
    """Cache whose every write fails as if the server were down."""

    def set(self, name: str, value: str) -> bool:
        raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")


def make_player(
    player_id: int,
    *,
    user_id: int | None,
    name: str,
    team_id: int,
    ally_team_id: int,
    skill: str | None = "[20.5]",
    country_code: str | None = "DE",
) -> ParticipantRecord:
    return ParticipantRecord(
        player_id=player_id,
        name=name,
        user_id=user_id,
        country_code=country_code,
        rank=3,
        skill=skill,
        skill_uncertainty=1.5,
        team_id=team_id,
        ally_team_id=ally_team_id,
        handicap=0.0,
        faction="Armada",
        rgb_color={"r": 255, "g": 0, "b": 0},
        start_pos={"x": 100.0, "y": 0.0, "z": 200.0},
    )


def make_spectator(
    player_id: int,
    *,
    user_id: int | None,
    name: str,
    skill: str | None = "[15.0]",
) -> ParticipantRecord:
    return ParticipantRecord(
        player_id=player_id,
        name=name,
        user_id=user_id,
        country_code="SE",
        rank=1,
        skill=skill,
        skill_uncertainty=6.0,
    )


def make_ai(ai_id: int, *, ally_team_id: int, host: int = 0) -> AIRecord:
    return AIRecord(
        ai_id=ai_id,
        ally_team_id=ally_team_id,
        name=f"Bot{ai_id}",
        short_name="BARb",
        host=host,
        start_pos={"x": 10.0, "y": 0.0, "z": 10.0},
        faction="Cortex",
        rgb_color={"r": 0, "g": 0, "b": 255},
        handicap=0.0,
    )


def make_record(
    game_id: str = "a1b2c3d4",
    *,
    map_name: str = "Red Comet Remake 1.8",
    ally_team_ids: Sequence[int] = (0, 1),
    winning_ally_team_ids: Sequence[int] = (0,),
    players: Sequence[ParticipantRecord] | None = None,
    spectators: Sequence[ParticipantRecord] = (),
    ais: Sequence[AIRecord] = (),
) -> DemoRecord:
    if players is None:
        players = (
            make_player(0, user_id=101, name="Alpha", team_id=0, ally_team_id=0),
            make_player(1, user_id=102, name="Bravo", team_id=1, ally_team_id=1),
        )
    return DemoRecord(
        meta=MetaRecord(
            game_id=game_id,
            engine="105.1.1-2511-g747f18b BAR105",
            start_time=datetime(2024, 5, 1, 12, 0, 0),
            duration_ms=1_200_000,
            full_duration_ms=1_260_000,
            winning_ally_team_ids=tuple(winning_ally_team_ids),
        ),
        host_settings={"mapname": map_name, "gametype": "Beyond All Reason test-25000"},
        game_settings={"startpostype": "2"},
        map_settings={"waterlevel": "0"},
        ally_teams=tuple(
            AllyTeamRecord(ally_team_id=ally_team_id, start_box={"top": 0, "bottom": 1})
            for ally_team_id in ally_team_ids
        ),
        players=tuple(players),
        spectators=tuple(spectators),
        ais=tuple(ais),
        chatlog=({"fromId": 0, "toId": 252, "message": "gl hf", "gameTimestamp": 5},),
    )


def make_replay_document(game_id: str = "f00dcafe") -> dict[str, Any]:
    """A decoded replay in the external parser's JSON shape."""
    return {
        "header": {"gameId": game_id},
        "info": {
            "meta": {
                "gameId": game_id,
                "engine": "105.1.1-2511-g747f18b BAR105",
                "startTime": "2024-05-01T12:00:00.000Z",
                "durationMs": 900000,
                "fullDurationMs": 905000,
                "winningAllyTeamIds": [1],
            },
            "hostSettings": {"mapname": "Red Comet Remake 1.8", "gametype": "Beyond All Reason test-25000"},
            "gameSettings": {"startpostype": "2"},
            "mapSettings": {},
            "allyTeams": [
                {"allyTeamId": 0, "startBox": {"top": 0, "bottom": 0.2}},
                {"allyTeamId": 1, "startBox": {"top": 0.8, "bottom": 1}},
            ],
            "players": [
                {
                    "playerId": 0,
                    "userId": 7001,
                    "name": "Alpha",
                    "teamId": 0,
                    "allyTeamId": 0,
                    "countryCode": "NL",
                    "rank": 4,
                    "skill": "[31.2]",
                    "skillUncertainty": 2.1,
                    "handicap": 0,
                    "faction": "Armada",
                    "rgbColor": {"r": 10, "g": 20, "b": 30},
                    "startPos": {"x": 1, "y": 2, "z": 3},
                }
            ],
            "spectators": [{"playerId": 2, "userId": 7002, "name": "Watcher", "rank": 0}],
            "ais": [
                {
                    "aiId": 1,
                    "allyTeamId": 1,
                    "name": "BARbarianAI",
                    "shortName": "BARb",
                    "host": 0,
                    "faction": "Cortex",
                    "handicap": 0,
                }
            ],
        },
        "chatlog": [{"fromId": 0, "toId": 252, "message": "gg", "gameTimestamp": 880}],
    }


@pytest.fixture
def engine(tmp_path: Path) -> Iterator[Engine]:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'demos.db'}")
    ensure_demo_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return create_session_factory(engine)


@pytest.fixture
def replay_file(tmp_path: Path) -> Callable[..., Path]:
    """Create a placeholder replay file of the requested size."""

    def _create(name: str = "demo.sdfz", size_bytes: int = 64) -> Path:
        path = tmp_path / name
        path.write_bytes(b"\0" * size_bytes)
        return path

    return _create
