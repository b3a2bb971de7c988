"""Persistence helpers for one demo and its per-match child rows."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from domain.replay import AIRecord, DemoRecord, ParticipantRecord
from models import AI, AllyTeam, Demo, Map, Player, Spectator, User


@dataclass(frozen=True)
class DemoRowCounts:
    """Child-row counts stored for one demo."""

    ally_teams: int
    players: int
    spectators: int
    ais: int


def delete_demo(session: Session, game_id: str) -> bool:
    """Delete a previously ingested demo and, via cascade, all of its child rows.

    The row is locked first so a concurrent reprocess of the same game waits
    for this transaction. Returns True when a prior demo existed.
    """
    existing_id = session.execute(
        select(Demo.id).where(Demo.id == game_id).with_for_update()
    ).scalar_one_or_none()
    if existing_id is None:
        return False
    session.execute(delete(Demo).where(Demo.id == game_id))
    return True


def create_demo(
    session: Session,
    *,
    map_row: Map,
    record: DemoRecord,
    file_name: str,
    preset: str,
) -> Demo:
    """Insert the demo row under its map, keyed by the game id."""
    demo = Demo(
        id=record.game_id,
        map_id=map_row.id,
        file_name=file_name,
        engine_version=record.meta.engine,
        game_version=record.game_version,
        start_time=record.meta.start_time,
        duration_ms=record.meta.duration_ms,
        full_duration_ms=record.meta.full_duration_ms,
        host_settings=record.host_settings,
        game_settings=record.game_settings,
        map_settings=record.map_settings,
        game_ended_normally=record.game_ended_normally,
        chatlog=list(record.chatlog),
        preset=preset,
        has_bots=record.has_bots,
    )
    session.add(demo)
    session.flush()
    return demo


def create_ally_teams(session: Session, *, demo: Demo, record: DemoRecord) -> dict[int, AllyTeam]:
    """Insert every ally team in parse order, keyed by its in-game ally team id."""
    ally_teams: dict[int, AllyTeam] = {}
    for ally_team_record in record.ally_teams:
        ally_team = AllyTeam(
            demo_id=demo.id,
            ally_team_id=ally_team_record.ally_team_id,
            start_box=ally_team_record.start_box,
            winning_team=record.is_winning_ally_team(ally_team_record.ally_team_id),
        )
        session.add(ally_team)
        ally_teams[ally_team_record.ally_team_id] = ally_team
    session.flush()
    return ally_teams


def create_player(
    session: Session,
    *,
    ally_team: AllyTeam,
    user: User | None,
    record: ParticipantRecord,
) -> Player:
    if record.team_id is None:
        raise ValueError(f"participant {record.player_id} has no team id")
    player = Player(
        demo_id=ally_team.demo_id,
        ally_team_row_id=ally_team.id,
        user_id=None if user is None else user.id,
        player_id=record.player_id,
        name=record.name,
        team_id=record.team_id,
        handicap=record.handicap,
        faction=record.faction,
        country_code=record.country_code,
        rgb_color=record.rgb_color,
        rank=record.rank,
        skill=record.skill,
        skill_uncertainty=record.skill_uncertainty,
        start_pos=record.start_pos,
    )
    session.add(player)
    session.flush()
    return player


def create_spectator(
    session: Session,
    *,
    demo: Demo,
    user: User | None,
    record: ParticipantRecord,
) -> Spectator:
    spectator = Spectator(
        demo_id=demo.id,
        user_id=None if user is None else user.id,
        player_id=record.player_id,
        name=record.name,
        country_code=record.country_code,
        rank=record.rank,
        skill=record.skill,
        skill_uncertainty=record.skill_uncertainty,
    )
    session.add(spectator)
    session.flush()
    return spectator


def create_ai(session: Session, *, ally_team: AllyTeam, record: AIRecord) -> AI:
    ai = AI(
        ally_team_row_id=ally_team.id,
        ai_id=record.ai_id,
        name=record.name,
        short_name=record.short_name,
        host=record.host,
        start_pos=record.start_pos,
        faction=record.faction,
        rgb_color=record.rgb_color,
        handicap=record.handicap,
    )
    session.add(ai)
    session.flush()
    return ai


def count_demo_rows(session: Session, game_id: str) -> DemoRowCounts:
    """Count the child rows currently stored for one demo."""
    ally_teams = session.scalar(
        select(func.count()).select_from(AllyTeam).where(AllyTeam.demo_id == game_id)
    )
    players = session.scalar(
        select(func.count())
        .select_from(Player)
        .join(AllyTeam, Player.ally_team_row_id == AllyTeam.id)
        .where(AllyTeam.demo_id == game_id)
    )
    spectators = session.scalar(
        select(func.count()).select_from(Spectator).where(Spectator.demo_id == game_id)
    )
    ais = session.scalar(
        select(func.count())
        .select_from(AI)
        .join(AllyTeam, AI.ally_team_row_id == AllyTeam.id)
        .where(AllyTeam.demo_id == game_id)
    )
    return DemoRowCounts(
        ally_teams=int(ally_teams or 0),
        players=int(players or 0),
        spectators=int(spectators or 0),
        ais=int(ais or 0),
    )


__all__ = [
    "DemoRowCounts",
    "count_demo_rows",
    "create_ai",
    "create_ally_teams",
    "create_demo",
    "create_player",
    "create_spectator",
    "delete_demo",
]
