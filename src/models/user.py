"""users table model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Float, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base

if TYPE_CHECKING:
    from models.alias import Alias
    from models.player import Player
    from models.spectator import Spectator


class User(Base):
    """A lobby account; the id is assigned by the lobby server, not by us."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    country_code: Mapped[str | None] = mapped_column(String(8), nullable=True)
    rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    skill: Mapped[str | None] = mapped_column(String(64), nullable=True)
    skill_uncertainty: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    aliases: Mapped[list[Alias]] = relationship("Alias", back_populates="user", order_by="Alias.id")
    players: Mapped[list[Player]] = relationship("Player", back_populates="user")
    spectators: Mapped[list[Spectator]] = relationship("Spectator", back_populates="user")
