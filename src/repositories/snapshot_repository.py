"""Narrow read projections served through the snapshot cache."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from models import Map, User


def fetch_user_projection(session: Session) -> list[dict[str, Any]]:
    """Return every user as ``{"id", "username", "countryCode"}``."""
    statement = select(
        User.id.label("id"),
        User.username.label("username"),
        User.country_code.label("countryCode"),
    ).order_by(User.id)
    return [dict(row) for row in session.execute(statement).mappings().all()]


def fetch_map_projection(session: Session) -> list[dict[str, Any]]:
    """Return every map as ``{"id", "scriptName", "fileName"}``."""
    statement = select(
        Map.id.label("id"),
        Map.script_name.label("scriptName"),
        Map.file_name.label("fileName"),
    ).order_by(Map.id)
    return [dict(row) for row in session.execute(statement).mappings().all()]


__all__ = ["fetch_map_projection", "fetch_user_projection"]
