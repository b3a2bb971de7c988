"""players table model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, JSONDocument

if TYPE_CHECKING:
    from models.ally_team import AllyTeam
    from models.user import User


class Player(Base):
    """A participant with a team slot, as recorded in one demo."""

    __tablename__ = "players"
    __table_args__ = (
        UniqueConstraint("demo_id", "player_id", name="uq_players_demo_player"),
        Index("idx_players_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    demo_id: Mapped[str] = mapped_column(
        ForeignKey("demos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ally_team_row_id: Mapped[int] = mapped_column(
        ForeignKey("ally_teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    player_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    team_id: Mapped[int] = mapped_column(Integer, nullable=False)
    handicap: Mapped[float | None] = mapped_column(Float, nullable=True)
    faction: Mapped[str | None] = mapped_column(String(64), nullable=True)
    country_code: Mapped[str | None] = mapped_column(String(8), nullable=True)
    rgb_color: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)
    rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    skill: Mapped[str | None] = mapped_column(String(64), nullable=True)
    skill_uncertainty: Mapped[float | None] = mapped_column(Float, nullable=True)
    start_pos: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)

    ally_team: Mapped[AllyTeam] = relationship("AllyTeam", back_populates="players")
    user: Mapped[User | None] = relationship("User", back_populates="players")
