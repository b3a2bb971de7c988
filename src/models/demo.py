"""demos table model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, JSONDocument

if TYPE_CHECKING:
    from models.ally_team import AllyTeam
    from models.map import Map
    from models.spectator import Spectator


class Demo(Base):
    """One recorded match, keyed by the externally assigned game id."""

    __tablename__ = "demos"
    __table_args__ = (
        Index("idx_demos_map", "map_id"),
        Index("idx_demos_start_time", "start_time"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    map_id: Mapped[int] = mapped_column(ForeignKey("maps.id"), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    engine_version: Mapped[str | None] = mapped_column(String(64), nullable=True)
    game_version: Mapped[str | None] = mapped_column(String(128), nullable=True)
    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    duration_ms: Mapped[int] = mapped_column(Integer, nullable=False)
    full_duration_ms: Mapped[int] = mapped_column(Integer, nullable=False)
    host_settings: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    game_settings: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    map_settings: Mapped[dict[str, Any]] = mapped_column(JSONDocument, nullable=False)
    game_ended_normally: Mapped[bool] = mapped_column(Boolean, nullable=False)
    chatlog: Mapped[list[dict[str, Any]]] = mapped_column(JSONDocument, nullable=False)
    preset: Mapped[str] = mapped_column(
        Enum(
            "duel",
            "team",
            "ffa",
            name="demo_preset",
            native_enum=False,
        ),
        nullable=False,
    )
    has_bots: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    map: Mapped[Map] = relationship("Map", back_populates="demos")
    ally_teams: Mapped[list[AllyTeam]] = relationship(
        "AllyTeam",
        back_populates="demo",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="AllyTeam.ally_team_id",
    )
    spectators: Mapped[list[Spectator]] = relationship(
        "Spectator",
        back_populates="demo",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Spectator.player_id",
    )
