"""Database repository helpers."""

from repositories.demo_repository import (
    DemoRowCounts,
    count_demo_rows,
    create_ai,
    create_ally_teams,
    create_demo,
    create_player,
    create_spectator,
    delete_demo,
)
from repositories.entity_repository import ensure_alias, find_or_create_map, upsert_user
from repositories.snapshot_repository import fetch_map_projection, fetch_user_projection

__all__ = [
    "DemoRowCounts",
    "count_demo_rows",
    "create_ai",
    "create_ally_teams",
    "create_demo",
    "create_player",
    "create_spectator",
    "delete_demo",
    "ensure_alias",
    "fetch_map_projection",
    "fetch_user_projection",
    "find_or_create_map",
    "upsert_user",
]
