"""ais table model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, JSONDocument

if TYPE_CHECKING:
    from models.ally_team import AllyTeam


class AI(Base):
    """A bot slot in one demo (no user linkage)."""

    __tablename__ = "ais"
    __table_args__ = (UniqueConstraint("ally_team_row_id", "ai_id", name="uq_ais_ally_team_ai"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    ally_team_row_id: Mapped[int] = mapped_column(
        ForeignKey("ally_teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    ai_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    short_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    host: Mapped[int | None] = mapped_column(Integer, nullable=True)
    start_pos: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)
    faction: Mapped[str | None] = mapped_column(String(64), nullable=True)
    rgb_color: Mapped[dict[str, Any] | None] = mapped_column(JSONDocument, nullable=True)
    handicap: Mapped[float | None] = mapped_column(Float, nullable=True)

    ally_team: Mapped[AllyTeam] = relationship("AllyTeam", back_populates="ais")
