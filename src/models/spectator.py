"""spectators table model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base

if TYPE_CHECKING:
    from models.demo import Demo
    from models.user import User


class Spectator(Base):
    """A participant without a team slot, as recorded in one demo."""

    __tablename__ = "spectators"
    __table_args__ = (
        UniqueConstraint("demo_id", "player_id", name="uq_spectators_demo_player"),
        Index("idx_spectators_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    demo_id: Mapped[str] = mapped_column(
        ForeignKey("demos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    player_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    country_code: Mapped[str | None] = mapped_column(String(8), nullable=True)
    rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    skill: Mapped[str | None] = mapped_column(String(64), nullable=True)
    skill_uncertainty: Mapped[float | None] = mapped_column(Float, nullable=True)

    demo: Mapped[Demo] = relationship("Demo", back_populates="spectators")
    user: Mapped[User | None] = relationship("User", back_populates="spectators")
