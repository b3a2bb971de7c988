"""ally_teams table model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, JSONDocument

if TYPE_CHECKING:
    from models.ai import AI
    from models.demo import Demo
    from models.player import Player


class AllyTeam(Base):
    """A coalition of players and AIs sharing one outcome within a demo."""

    __tablename__ = "ally_teams"
    __table_args__ = (
        UniqueConstraint("demo_id", "ally_team_id", name="uq_ally_teams_demo_ally_team"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    demo_id: Mapped[str] = mapped_column(
        ForeignKey("demos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ally_team_id: Mapped[int] = mapped_column(Integer, nullable=False)
    start_box: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)
    winning_team: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    demo: Mapped[Demo] = relationship("Demo", back_populates="ally_teams")
    players: Mapped[list[Player]] = relationship(
        "Player",
        back_populates="ally_team",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Player.player_id",
    )
    ais: Mapped[list[AI]] = relationship(
        "AI",
        back_populates="ally_team",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="AI.ai_id",
    )
