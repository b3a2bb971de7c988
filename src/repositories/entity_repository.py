"""Find-or-create helpers for entities shared across demos (maps, users, aliases)."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from domain.replay import ParticipantRecord
from models import Alias, Map, User


def find_or_create_map(session: Session, script_name: str, *, file_name: str | None = None) -> Map:
    """Return the map with this script name, creating it when absent.

    Existing maps are returned untouched; ``file_name`` only applies on creation.
    """
    map_row = session.execute(select(Map).where(Map.script_name == script_name)).scalar_one_or_none()
    if map_row is None:
        map_row = Map(script_name=script_name, file_name=file_name)
        session.add(map_row)
        session.flush()
    return map_row


def upsert_user(session: Session, participant: ParticipantRecord) -> User:
    """Create the user or overwrite its profile fields with the incoming values."""
    if participant.user_id is None:
        raise ValueError(f"participant {participant.player_id} has no user id")

    user = session.get(User, participant.user_id)
    if user is None:
        user = User(id=participant.user_id)
        session.add(user)

    user.username = participant.name
    user.country_code = participant.country_code
    user.rank = participant.rank
    user.skill = participant.skill
    user.skill_uncertainty = participant.skill_uncertainty
    user.updated_at = datetime.now(UTC).replace(tzinfo=None)
    session.flush()
    return user


def ensure_alias(session: Session, user: User, alias: str) -> bool:
    """Record ``alias`` for ``user`` unless that exact string is already known.

    Returns True when a new alias row was created.
    """
    existing = session.execute(
        select(Alias.id).where(Alias.user_id == user.id, Alias.alias == alias)
    ).scalar_one_or_none()
    if existing is not None:
        return False
    session.add(Alias(user_id=user.id, alias=alias))
    session.flush()
    return True


__all__ = ["ensure_alias", "find_or_create_map", "upsert_user"]
