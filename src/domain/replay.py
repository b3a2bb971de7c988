"""Decoded replay records handed over by the replay parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class MetaRecord:
    """Match-level metadata recorded by the engine."""

    game_id: str
    engine: str | None
    start_time: datetime | None
    duration_ms: int
    full_duration_ms: int
    winning_ally_team_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class AllyTeamRecord:
    ally_team_id: int
    start_box: dict[str, Any] | None = None


@dataclass(frozen=True)
class ParticipantRecord:
    """One player or spectator slot.

    Players carry ``team_id`` and ``ally_team_id``; spectators carry neither.
    """

    player_id: int
    name: str
    user_id: int | None = None
    country_code: str | None = None
    rank: int | None = None
    skill: str | None = None
    skill_uncertainty: float | None = None
    team_id: int | None = None
    ally_team_id: int | None = None
    handicap: float | None = None
    faction: str | None = None
    rgb_color: dict[str, Any] | None = None
    start_pos: dict[str, Any] | None = None

    @property
    def is_player(self) -> bool:
        return self.team_id is not None


@dataclass(frozen=True)
class AIRecord:
    ai_id: int
    ally_team_id: int
    name: str
    short_name: str | None = None
    host: int | None = None
    start_pos: dict[str, Any] | None = None
    faction: str | None = None
    rgb_color: dict[str, Any] | None = None
    handicap: float | None = None


@dataclass(frozen=True)
class DemoRecord:
    """A fully decoded replay."""

    meta: MetaRecord
    host_settings: dict[str, Any]
    game_settings: dict[str, Any] = field(default_factory=dict)
    map_settings: dict[str, Any] = field(default_factory=dict)
    ally_teams: tuple[AllyTeamRecord, ...] = ()
    players: tuple[ParticipantRecord, ...] = ()
    spectators: tuple[ParticipantRecord, ...] = ()
    ais: tuple[AIRecord, ...] = ()
    chatlog: tuple[dict[str, Any], ...] = ()

    @property
    def game_id(self) -> str:
        return self.meta.game_id

    @property
    def map_script_name(self) -> str:
        return str(self.host_settings["mapname"])

    @property
    def game_version(self) -> str | None:
        value = self.host_settings.get("gametype")
        return None if value is None else str(value)

    @property
    def participants(self) -> tuple[ParticipantRecord, ...]:
        """Players followed by spectators, in parse order."""
        return self.players + self.spectators

    @property
    def game_ended_normally(self) -> bool:
        return len(self.meta.winning_ally_team_ids) > 0

    @property
    def has_bots(self) -> bool:
        return len(self.ais) > 0

    def is_winning_ally_team(self, ally_team_id: int) -> bool:
        """Only the first listed winner is flagged."""
        winners = self.meta.winning_ally_team_ids
        return bool(winners) and ally_team_id == winners[0]


__all__ = [
    "AIRecord",
    "AllyTeamRecord",
    "DemoRecord",
    "MetaRecord",
    "ParticipantRecord",
]
