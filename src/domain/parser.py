"""Replay parser contract and the JSON dump adapter.

The binary replay format is decoded by an external parser. This module only
defines what the ingest pipeline needs from it (``ReplayParser``) and ships
an adapter for the JSON documents that parser emits.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from domain.errors import IngestStage, ParseFailure
from domain.replay import AIRecord, AllyTeamRecord, DemoRecord, MetaRecord, ParticipantRecord


@runtime_checkable
class ReplayParser(Protocol):
    """Anything that can turn a replay file into a DemoRecord."""

    def parse_file(self, file_path: Path) -> DemoRecord: ...


class JsonReplayParser:
    """Read a replay already decoded to JSON (``{"info": ..., "chatlog": ...}``)."""

    def parse_file(self, file_path: Path) -> DemoRecord:
        try:
            with file_path.open("r", encoding="utf-8") as file:
                raw = json.load(file)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ParseFailure(
                f"Could not decode replay: {exc}",
                file_path=file_path,
                stage=IngestStage.PARSING,
            ) from exc

        try:
            return demo_record_from_dict(raw)
        except (KeyError, TypeError, ValueError) as exc:
            raise ParseFailure(
                f"Malformed replay record: {exc!r}",
                file_path=file_path,
                stage=IngestStage.PARSING,
            ) from exc


def demo_record_from_dict(raw: Mapping[str, Any]) -> DemoRecord:
    """Map the parser's camelCase document onto a DemoRecord."""
    info = raw["info"]
    host_settings = dict(info["hostSettings"])
    if not host_settings.get("mapname"):
        raise ValueError("hostSettings.mapname is required")

    players = tuple(_participant_from_dict(item) for item in info.get("players") or ())
    spectators = tuple(_spectator_from_dict(item) for item in info.get("spectators") or ())
    player_ids = [participant.player_id for participant in players + spectators]
    if len(player_ids) != len(set(player_ids)):
        raise ValueError(f"duplicate playerId values: {sorted(player_ids)}")

    return DemoRecord(
        meta=_meta_from_dict(info["meta"]),
        host_settings=host_settings,
        game_settings=dict(info.get("gameSettings") or {}),
        map_settings=dict(info.get("mapSettings") or {}),
        ally_teams=tuple(_ally_team_from_dict(item) for item in info.get("allyTeams") or ()),
        players=players,
        spectators=spectators,
        ais=tuple(_ai_from_dict(item) for item in info.get("ais") or ()),
        chatlog=tuple(dict(item) for item in raw.get("chatlog") or ()),
    )


def _meta_from_dict(raw: Mapping[str, Any]) -> MetaRecord:
    game_id = str(raw["gameId"]).strip()
    if not game_id:
        raise ValueError("meta.gameId is required")
    return MetaRecord(
        game_id=game_id,
        engine=_optional_str(raw.get("engine")),
        start_time=_parse_start_time(raw.get("startTime")),
        duration_ms=int(raw["durationMs"]),
        full_duration_ms=int(raw["fullDurationMs"]),
        winning_ally_team_ids=tuple(int(value) for value in raw.get("winningAllyTeamIds") or ()),
    )


def _ally_team_from_dict(raw: Mapping[str, Any]) -> AllyTeamRecord:
    return AllyTeamRecord(
        ally_team_id=int(raw["allyTeamId"]),
        start_box=raw.get("startBox"),
    )


def _participant_from_dict(raw: Mapping[str, Any]) -> ParticipantRecord:
    team_id = _optional_int(raw.get("teamId"))
    ally_team_id = _optional_int(raw.get("allyTeamId"))
    if team_id is not None and ally_team_id is None:
        raise ValueError(f"player {raw.get('playerId')!r} has teamId but no allyTeamId")
    return ParticipantRecord(
        player_id=int(raw["playerId"]),
        name=str(raw["name"]),
        user_id=_optional_int(raw.get("userId")),
        country_code=_optional_str(raw.get("countryCode")),
        rank=_optional_int(raw.get("rank")),
        skill=_optional_str(raw.get("skill")),
        skill_uncertainty=_optional_float(raw.get("skillUncertainty")),
        team_id=team_id,
        ally_team_id=ally_team_id,
        handicap=_optional_float(raw.get("handicap")),
        faction=_optional_str(raw.get("faction")),
        rgb_color=raw.get("rgbColor"),
        start_pos=raw.get("startPos"),
    )


def _spectator_from_dict(raw: Mapping[str, Any]) -> ParticipantRecord:
    record = _participant_from_dict(raw)
    if record.is_player:
        raise ValueError(f"spectator {record.player_id} carries a teamId")
    return record


def _ai_from_dict(raw: Mapping[str, Any]) -> AIRecord:
    return AIRecord(
        ai_id=int(raw["aiId"]),
        ally_team_id=int(raw["allyTeamId"]),
        name=str(raw["name"]),
        short_name=_optional_str(raw.get("shortName")),
        host=_optional_int(raw.get("host")),
        start_pos=raw.get("startPos"),
        faction=_optional_str(raw.get("faction")),
        rgb_color=raw.get("rgbColor"),
        handicap=_optional_float(raw.get("handicap")),
    )


def _parse_start_time(value: object) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value)
    else:
        raise TypeError(f"meta.startTime has unsupported type {type(value).__name__}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    return parsed


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


__all__ = ["JsonReplayParser", "ReplayParser", "demo_record_from_dict"]
